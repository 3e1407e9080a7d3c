# swr_core/signal/inclusion.py
from __future__ import annotations
import numpy as np

from ..errors import DataError


def mask_to_windows(mask: np.ndarray) -> np.ndarray:
    """Inclusive (start, end) windows of every run of True, shape (K, 2)."""
    m = np.asarray(mask, dtype=bool).ravel()
    edges = np.diff(np.concatenate(([0], m.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1) - 1
    return np.column_stack((starts, ends)).astype(int)


def windows_to_mask(windows: np.ndarray, n: int) -> np.ndarray:
    """Boolean mask of length ``n``, True inside every inclusive window."""
    mask = np.zeros(n, dtype=bool)
    for s, e in np.asarray(windows, dtype=int).reshape(-1, 2):
        if s > e:
            raise DataError("inclusion", f"window start {s} after end {e}", index=int(s))
        mask[max(s, 0):min(e, n - 1) + 1] = True
    return mask


def window_indices(windows: np.ndarray) -> np.ndarray:
    """All sample indices covered by inclusive windows, in window order."""
    win = np.asarray(windows, dtype=int).reshape(-1, 2)
    if win.shape[0] == 0:
        return np.empty(0, dtype=int)
    return np.concatenate([np.arange(s, e + 1) for s, e in win])


def movement_inclusion(
    velocity: np.ndarray,
    fs: float,
    *,
    mov_thresh: float = 0.5,
    mov_min_dur: float = 3.0,
) -> np.ndarray:
    """
    True where the animal is still long enough for ripple detection.

    Samples with |velocity| < mov_thresh are movement-free; runs of such
    samples no longer than ``mov_min_dur`` seconds are dropped.
    """
    v = np.asarray(velocity, dtype=float).ravel()
    incl = np.abs(v) < mov_thresh
    min_samps = mov_min_dur * fs
    for s, e in mask_to_windows(incl):
        if e - s + 1 <= min_samps:
            incl[s:e + 1] = False
    return incl


def artifact_windows_to_interp_mask(windows: np.ndarray, n: int) -> np.ndarray:
    """Turn manually selected artifact windows into the keep-mask used by the preprocessor."""
    return ~windows_to_mask(windows, n)


def check_mask(mask: np.ndarray, n: int, stage: str, name: str) -> np.ndarray:
    m = np.asarray(mask, dtype=bool).ravel()
    if m.size != n:
        raise DataError(stage, f"{name} length {m.size} != trace length {n}", index=min(m.size, n))
    return m


__all__ = [
    "mask_to_windows",
    "windows_to_mask",
    "window_indices",
    "movement_inclusion",
    "artifact_windows_to_interp_mask",
    "check_mask",
]
