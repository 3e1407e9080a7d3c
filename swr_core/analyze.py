import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import DataError
from .params import SWRParams
from .events import RippleEvent, events_to_arrays
from .signal.preprocess import preprocess_lfp
from .signal.wavelet import wavconv
from .signal.inclusion import check_mask
from .detect import Thresholds, detect_candidates
from .merge import merge_candidates
from .validate import validate_candidates
from .score import score_events

__all__ = [
    "SWRResult",
    "detect_swr",
]

# -----------------------------------------------------------------------------
# Sharp-wave ripple detection
# -----------------------------------------------------------------------------
@dataclass
class SWRResult:
    """Container for all outputs produced by :func:`detect_swr`."""

    fdata_lfp: np.ndarray
    incl_mask: np.ndarray
    interp_mask: np.ndarray
    events: List[RippleEvent]
    scores: np.ndarray
    manvalid: np.ndarray
    thresholds: Thresholds
    counters: Dict[str, int]
    params: SWRParams
    fs: float
    cycles: np.ndarray = field(default_factory=lambda: np.empty(0))

    @property
    def rpwin(self) -> np.ndarray:
        """(n, 3) start / peak / end sample indices."""
        return events_to_arrays(self.events)[0]

    @property
    def rpdur(self) -> np.ndarray:
        return np.array([e.duration for e in self.events], dtype=float)

    @property
    def rppow(self) -> np.ndarray:
        return events_to_arrays(self.events)[1]

    @property
    def rpfrq(self) -> np.ndarray:
        return events_to_arrays(self.events)[2]

    def to_frame(self) -> pd.DataFrame:
        win = self.rpwin
        return pd.DataFrame({
            "start": win[:, 0],
            "peak": win[:, 1],
            "end": win[:, 2],
            "peak_s": win[:, 1] / self.fs,
            "duration_s": self.rpdur,
            "power": self.rppow,
            "frequency_hz": self.rpfrq,
            "score": self.scores,
            "valid": self.manvalid,
        })


def detect_swr(
    lfp: np.ndarray,
    fs: float,
    *,
    incl_mask: Optional[np.ndarray] = None,
    interp_mask: Optional[np.ndarray] = None,
    params: Optional[SWRParams] = None,
    manvalid: Optional[np.ndarray] = None,
    verbose: bool = False,
) -> SWRResult:
    """Detect sharp-wave ripples in a single LFP trace.

    ``incl_mask`` marks samples eligible for detection (movement-free);
    ``interp_mask`` marks samples kept by the preprocessor (False stretches
    are cut out and interpolated). Detection runs on ``incl_mask & interp_mask``.
    ``manvalid`` is an existing review-state vector; it is carried through
    untouched when its length matches the number of detected events.
    """
    params = params if params is not None else SWRParams()
    params.validate(fs)

    lfp = np.asarray(lfp, dtype=float).ravel()
    n = lfp.size
    if n == 0:
        raise DataError("input", "empty trace", index=0)
    incl = np.ones(n, dtype=bool) if incl_mask is None else check_mask(incl_mask, n, "input", "incl_mask")
    interp = np.ones(n, dtype=bool) if interp_mask is None else check_mask(interp_mask, n, "input", "interp_mask")
    # non-finite samples are bridged like any other interpolated stretch
    interp = interp & np.isfinite(lfp)

    if verbose:
        print(f"The trace is {(n - 1) / fs:.2f} seconds long.")

    # ------------------------------------------------------------------
    # 1) Preprocess (gap stitching + zero-phase filter chain)
    # ------------------------------------------------------------------
    fdata_lfp = preprocess_lfp(lfp, fs, interp, params.filters)

    # ------------------------------------------------------------------
    # 2) Wavelet transform
    # ------------------------------------------------------------------
    coeffmat = wavconv(fdata_lfp, params.rp_freqs, params.wav_cycles, fs, n_jobs=params.n_jobs)
    coeffamp = np.abs(coeffmat)

    # ------------------------------------------------------------------
    # 3) Region-based candidate detection
    # ------------------------------------------------------------------
    det = detect_candidates(
        coeffamp,
        incl & interp,
        params.rp_freqs,
        event_k=params.event_thresh,
        boundary_k=params.bound_thresh,
        verbose=verbose,
    )
    del coeffamp

    # ------------------------------------------------------------------
    # 4) Merge neighbouring candidates
    # ------------------------------------------------------------------
    mer = merge_candidates(det.candidates, params.merge_samples(fs), verbose=verbose)

    # ------------------------------------------------------------------
    # 5) Duration and cycle validation
    # ------------------------------------------------------------------
    val = validate_candidates(
        mer.candidates,
        coeffmat,
        fs,
        dur_min=params.rp_dur_min,
        dur_max=params.rp_dur_max,
        min_cycles=params.min_cycles,
        verbose=verbose,
    )
    events = val.events
    if verbose:
        print(f"Overall, {len(events)} potential ripple events were detected.")

    # ------------------------------------------------------------------
    # 6) Review-priority scores and review state
    # ------------------------------------------------------------------
    scores = score_events(
        events,
        target_dur=params.score_target_dur,
        target_freq=params.score_target_freq,
    )
    if manvalid is None:
        valid = np.zeros(len(events), dtype=bool)
    else:
        valid = np.asarray(manvalid, dtype=bool).ravel()
        if valid.size != len(events):
            raise DataError("review", f"manvalid has {valid.size} flags for {len(events)} events",
                            index=min(valid.size, len(events)))

    counters = {
        "candidates": det.n_regions,
        "exclusion": det.n_excluded,
        "merged_in": mer.n_merged_in,
        "merged_out": mer.n_merged_out,
        "duration": val.n_duration,
        "cycles": val.n_cycles,
        "detected": len(events),
    }

    return SWRResult(
        fdata_lfp=fdata_lfp,
        incl_mask=incl,
        interp_mask=interp,
        events=events,
        scores=scores,
        manvalid=valid,
        thresholds=det.thresholds,
        counters=counters,
        params=params,
        fs=float(fs),
        cycles=val.cycles,
    )
