# swr_core/signal/preprocess.py
"""
Artifact-aware conditioning of a single LFP trace.

Excluded stretches are cut out, the remaining segments are stitched back
together without DC steps, the gaps are bridged by linear interpolation and
the result is passed through a chain of zero-phase Butterworth filters
(mains notches, drift highpass, noise lowpass) on a reflect-padded copy.
"""

from __future__ import annotations
from typing import Optional, Tuple
import numpy as np
from scipy.signal import butter, sosfiltfilt

from ..errors import DataError
from ..params import FilterSpec


def _segments(keep: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Inclusive (start, end) indices of every maximal run of True."""
    edges = np.diff(np.concatenate(([0], keep.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1) - 1
    return starts, ends


def interpolate_gaps(lfp: np.ndarray, interp_mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Remove excluded samples and bridge the gaps.

    Parameters
    ----------
    lfp : np.ndarray
        Raw single-channel trace.
    interp_mask : np.ndarray, optional
        Boolean vector, True where the sample is kept. False samples (and any
        non-finite raw sample) are treated as missing. None keeps everything.

    Returns
    -------
    np.ndarray
        Trace of the same length where every kept segment after the first is
        shifted so that it starts at the value the previous segment ended on,
        and missing runs are filled linearly (edges hold the nearest value).
    """
    x = np.array(lfp, dtype=float).ravel()
    if interp_mask is None:
        keep = np.ones(x.size, dtype=bool)
    else:
        keep = np.asarray(interp_mask, dtype=bool).ravel()
        if keep.size != x.size:
            raise DataError("preprocess", f"interp_mask length {keep.size} != trace length {x.size}",
                            index=min(keep.size, x.size))
    keep = keep & np.isfinite(x)
    if not keep.any():
        raise DataError("preprocess", "no samples left after exclusion", index=0)

    # 1) set excluded samples to NaN
    x[~keep] = np.nan

    # 2) stitch segments together, cumulatively removing the offset at each gap
    starts, ends = _segments(keep)
    for i in range(1, len(starts)):
        offset = x[starts[i]] - x[ends[i - 1]]
        x[starts[i]:] -= offset

    # 3) linear fill; np.interp holds the boundary values past either end
    if not keep.all():
        idx = np.arange(x.size)
        x = np.interp(idx, idx[keep], x[keep])
    return x


def _reflect_pad(x: np.ndarray) -> Tuple[np.ndarray, int]:
    padlen = int(np.floor(0.1 * x.size + 0.5))
    padlen = min(padlen, x.size - 1)
    if padlen <= 0:
        return x.copy(), 0
    return np.pad(x, padlen, mode="reflect"), padlen


def _zero_phase(sos: np.ndarray, x: np.ndarray) -> np.ndarray:
    # scipy default edge padding, shortened for traces below its length
    ntaps = 2 * len(sos) + 1 - min(np.sum(sos[:, 2] == 0), np.sum(sos[:, 5] == 0))
    padlen = min(3 * int(ntaps), x.size - 1)
    return sosfiltfilt(sos, x, padlen=padlen)


def apply_filters(x: np.ndarray, fs: float, spec: FilterSpec) -> np.ndarray:
    """Zero-phase notch -> highpass -> lowpass chain on an already padded signal."""
    nyq = fs / 2

    for center, half_width in spec.notches:
        sos = butter(spec.notch_order, [(center - half_width) / nyq, (center + half_width) / nyq],
                     btype="bandstop", output="sos")
        x = _zero_phase(sos, x)

    sos = butter(spec.hp_order, spec.hp_cutoff / nyq, btype="highpass", output="sos")
    x = _zero_phase(sos, x)

    sos = butter(spec.lp_order, spec.lp_cutoff / nyq, btype="lowpass", output="sos")
    x = _zero_phase(sos, x)
    return x


def preprocess_lfp(
    lfp: np.ndarray,
    fs: float,
    interp_mask: Optional[np.ndarray] = None,
    spec: Optional[FilterSpec] = None,
) -> np.ndarray:
    """
    Full preprocessing: gap removal, reflect padding (10 %), zero-phase filtering.

    The output has exactly the length of ``lfp``. Invalid cutoffs raise
    :class:`~swr_core.errors.ConfigurationError` before any filtering runs.
    """
    spec = spec if spec is not None else FilterSpec()
    spec.validate(fs)

    x = interpolate_gaps(lfp, interp_mask)
    padsig, padlen = _reflect_pad(x)
    padsig = apply_filters(padsig, fs, spec)
    out = padsig[padlen:padsig.size - padlen]

    bad = np.flatnonzero(~np.isfinite(out))
    if bad.size:
        raise DataError("preprocess", "non-finite value after filtering", index=int(bad[0]))
    return out
