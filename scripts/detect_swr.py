#!/usr/bin/env python3
"""
Detect sharp-wave ripples in a processed recording (MATLAB ``Data`` struct).

Usage:
    python scripts/detect_swr.py <datproc.mat> [--event-thresh K] [--bound-thresh K] [--merge-ms MS] [--dur-min S] [--dur-max S] [--min-cycles N] [--jobs N]

The ``SWR`` fields are written to ``<datproc>_SWR.mat`` next to the input. If
that file already exists its interpolation mask and review flags are reused.
"""

import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import numpy as np

from swr_core.analyze import detect_swr
from swr_core.errors import DataError, SWRError
from swr_core.load import load_datproc, load_swr, save_swr
from swr_core.params import FilterSpec, SWRParams
from swr_core.signal.inclusion import movement_inclusion


def main():
    parser = argparse.ArgumentParser(description='Detect sharp-wave ripples in a single LFP trace')
    parser.add_argument('datproc', type=Path, help='Path to the Datproc .mat file')
    parser.add_argument('--hp', type=float, default=0.3, help='Highpass cutoff (Hz), default 0.3')
    parser.add_argument('--lp', type=float, default=400.0, help='Lowpass cutoff (Hz), default 400')
    parser.add_argument('--mains', type=float, default=50.0, help='Mains frequency (Hz), default 50')
    parser.add_argument('--n-harmonics', type=int, default=7, help='Notched mains harmonics, default 7')
    parser.add_argument('--rp-band', nargs=2, type=float, default=[80, 250], help='Ripple band (Hz), default 80 250')
    parser.add_argument('--wav-cycles', type=float, default=5.0, help='Wavelet cycles, default 5')
    parser.add_argument('--event-thresh', type=float, default=15.0, help='Event threshold (MADs), default 15')
    parser.add_argument('--bound-thresh', type=float, default=10.0, help='Boundary threshold (MADs), default 10')
    parser.add_argument('--merge-ms', type=float, default=20.0, help='Merge events closer than this (ms), default 20')
    parser.add_argument('--dur-min', type=float, default=0.010, help='Minimum ripple duration (s), default 0.010')
    parser.add_argument('--dur-max', type=float, default=0.500, help='Maximum ripple duration (s), default 0.500')
    parser.add_argument('--min-cycles', type=float, default=1.8, help='Minimum ripple cycles, default 1.8')
    parser.add_argument('--mov-thresh', type=float, default=0.5, help='Movement threshold (cm/s), default 0.5')
    parser.add_argument('--mov-min-dur', type=float, default=3.0, help='Minimum still period (s), default 3')
    parser.add_argument('--jobs', type=int, default=1, help='Parallel workers for the wavelet transform')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress messages')

    args = parser.parse_args()
    verbose = not args.quiet

    if not args.datproc.is_file():
        print(f"ERROR: Datproc file not found: {args.datproc}")
        sys.exit(1)

    rec = load_datproc(args.datproc)
    fs = rec.fs
    out_path = args.datproc.with_name(f"{args.datproc.stem}_SWR.mat")

    params = SWRParams(
        filters=FilterSpec(
            hp_cutoff=args.hp,
            lp_cutoff=args.lp,
            notches=[(args.mains * k, 0.5) for k in range(1, args.n_harmonics + 1)],
        ),
        rp_freqs=np.arange(args.rp_band[0], args.rp_band[1] + 1, dtype=float),
        wav_cycles=args.wav_cycles,
        event_thresh=args.event_thresh,
        bound_thresh=args.bound_thresh,
        merge_thresh=int(np.floor(args.merge_ms / 1000 * fs + 0.5)),
        rp_dur_min=args.dur_min,
        rp_dur_max=args.dur_max,
        min_cycles=args.min_cycles,
        mov_thresh=args.mov_thresh,
        mov_min_dur=args.mov_min_dur,
        n_jobs=args.jobs,
    )

    # Reuse a previous interpolation mask / review state when available
    interp_mask, manvalid = rec.interp_mask, rec.manvalid
    if out_path.is_file():
        prev = load_swr(out_path)
        interp_mask, manvalid = prev["interp_mask"], prev["manvalid"]

    incl_mask = movement_inclusion(rec.velocity, fs, mov_thresh=params.mov_thresh,
                                   mov_min_dur=params.mov_min_dur)

    print("=" * 70)
    print("Sharp-Wave Ripple Detection")
    print("=" * 70)
    print(f"Recording: {rec.name}")
    print(f"  Sampling frequency: {fs:g} Hz")
    print(f"  Ripple band: {args.rp_band[0]:g}-{args.rp_band[1]:g} Hz")
    print(f"  Thresholds: event {params.event_thresh:g} / boundary {params.bound_thresh:g} MAD")
    print(f"  Movement-free samples: {incl_mask.mean() * 100:.1f}%")
    print()

    try:
        try:
            result = detect_swr(rec.lfp, fs, incl_mask=incl_mask, interp_mask=interp_mask,
                                params=params, manvalid=manvalid, verbose=verbose)
        except DataError as e:
            if manvalid is None or e.stage != "review":
                raise
            # event set changed since the last review: start a fresh review
            print(f"Discarding previous review state: {e}")
            result = detect_swr(rec.lfp, fs, incl_mask=incl_mask, interp_mask=interp_mask,
                                params=params, verbose=verbose)
    except SWRError as e:
        print(f"\nERROR: {e}")
        sys.exit(1)

    save_swr(out_path, result)

    print("\n" + "=" * 70)
    print("Detection Complete!")
    print("=" * 70)
    for key, val in result.counters.items():
        print(f"  {key:>10}: {val}")
    print("=" * 70)


if __name__ == "__main__":
    main()
