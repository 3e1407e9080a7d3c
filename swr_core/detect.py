# swr_core/detect.py
"""
Candidate ripple detection on a wavelet amplitude matrix.

Thresholds are robust (median + k * MAD over included samples only). A
candidate is a maximal 8-connected region of the (frequency x time) grid
above the boundary threshold whose peak also clears the event threshold.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import numpy as np
from scipy.stats import median_abs_deviation

from .errors import DataError, StatisticalDegenerate
from .events import RippleCandidate

__all__ = [
    "Thresholds",
    "amplitude_thresholds",
    "RegionTable",
    "label_regions",
    "DetectionResult",
    "detect_candidates",
]


# -----------------------------------------------------------------------------
# 1. Robust thresholds
# -----------------------------------------------------------------------------
@dataclass
class Thresholds:
    median: float
    mad: float
    event: float
    boundary: float


def amplitude_thresholds(
    amp: np.ndarray,
    incl_mask: np.ndarray,
    event_k: float,
    boundary_k: float,
) -> Thresholds:
    """Median/MAD of ``amp`` over included columns and the two derived thresholds."""
    included = amp[:, incl_mask]
    n_included = int(included.size)
    if n_included == 0:
        raise StatisticalDegenerate("detect", float("nan"), float("nan"), 0)

    median = float(np.median(included))
    mad = float(median_abs_deviation(included, axis=None, scale=1.0))
    if not np.isfinite(mad) or mad <= 0:
        raise StatisticalDegenerate("detect", median, mad, n_included)

    return Thresholds(
        median=median,
        mad=mad,
        event=median + event_k * mad,
        boundary=median + boundary_k * mad,
    )


# -----------------------------------------------------------------------------
# 2. Connected regions (run-length union-find, 8-connectivity)
# -----------------------------------------------------------------------------
class _UnionFind:
    def __init__(self, n: int):
        self.parent = list(range(n))

    def find(self, i: int) -> int:
        parent = self.parent
        root = i
        while parent[root] != root:
            root = parent[root]
        while parent[i] != root:
            parent[i], i = root, parent[i]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[max(ra, rb)] = min(ra, rb)


def _row_runs(row_mask: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    edges = np.diff(np.concatenate(([0], row_mask.astype(np.int8), [0])))
    return np.flatnonzero(edges == 1), np.flatnonzero(edges == -1) - 1


@dataclass
class RegionTable:
    """Per-region statistics; every array has one entry per region."""
    t_start: np.ndarray      # first column (inclusive)
    t_end: np.ndarray        # last column (inclusive)
    max_amp: np.ndarray
    centroid_t: np.ndarray   # amplitude-weighted column
    centroid_f: np.ndarray   # amplitude-weighted row

    def __len__(self) -> int:
        return int(self.t_start.size)


def label_regions(amp: np.ndarray, threshold: float) -> RegionTable:
    """
    Maximal 8-connected regions of ``amp >= threshold``.

    Each row is split into runs of supra-threshold samples; runs in adjacent
    rows that touch (including diagonally) are joined with a union-find.
    """
    n_rows, n_cols = amp.shape
    cols = np.arange(n_cols, dtype=float)

    r_row: List[np.ndarray] = []
    r_start: List[np.ndarray] = []
    r_end: List[np.ndarray] = []
    r_max: List[np.ndarray] = []
    r_sum: List[np.ndarray] = []
    r_sum_t: List[np.ndarray] = []
    offsets = [0]

    for r in range(n_rows):
        row = amp[r]
        s, e = _row_runs(row >= threshold)
        if s.size:
            cs = np.concatenate(([0.0], np.cumsum(row)))
            cst = np.concatenate(([0.0], np.cumsum(row * cols)))
            idx = np.empty(2 * s.size, dtype=np.intp)
            idx[0::2] = s
            idx[1::2] = e + 1
            mx = np.maximum.reduceat(np.append(row, -np.inf), idx)[0::2]

            r_row.append(np.full(s.size, r))
            r_start.append(s)
            r_end.append(e)
            r_max.append(mx)
            r_sum.append(cs[e + 1] - cs[s])
            r_sum_t.append(cst[e + 1] - cst[s])
        offsets.append(offsets[-1] + s.size)

    n_runs = offsets[-1]
    if n_runs == 0:
        empty = np.empty(0)
        return RegionTable(empty.astype(int), empty.astype(int), empty, empty, empty)

    run_row = np.concatenate(r_row)
    run_start = np.concatenate(r_start)
    run_end = np.concatenate(r_end)
    run_max = np.concatenate(r_max)
    run_sum = np.concatenate(r_sum)
    run_sum_t = np.concatenate(r_sum_t)

    uf = _UnionFind(n_runs)
    for r in range(n_rows - 1):
        a0, a1 = offsets[r], offsets[r + 1]
        b0, b1 = offsets[r + 1], offsets[r + 2]
        i, j = a0, b0
        while i < a1 and j < b1:
            if run_start[j] <= run_end[i] + 1 and run_start[i] <= run_end[j] + 1:
                uf.union(i, j)
            if run_end[i] < run_end[j]:
                i += 1
            else:
                j += 1

    roots = np.fromiter((uf.find(i) for i in range(n_runs)), dtype=np.intp, count=n_runs)
    _, lab = np.unique(roots, return_inverse=True)
    n_reg = int(lab.max()) + 1

    t_start = np.full(n_reg, n_cols, dtype=int)
    np.minimum.at(t_start, lab, run_start)
    t_end = np.full(n_reg, -1, dtype=int)
    np.maximum.at(t_end, lab, run_end)
    max_amp = np.full(n_reg, -np.inf)
    np.maximum.at(max_amp, lab, run_max)

    sum_a = np.bincount(lab, weights=run_sum, minlength=n_reg)
    sum_at = np.bincount(lab, weights=run_sum_t, minlength=n_reg)
    sum_af = np.bincount(lab, weights=run_sum * run_row, minlength=n_reg)

    return RegionTable(
        t_start=t_start,
        t_end=t_end,
        max_amp=max_amp,
        centroid_t=sum_at / sum_a,
        centroid_f=sum_af / sum_a,
    )


# -----------------------------------------------------------------------------
# 3. Candidates
# -----------------------------------------------------------------------------
@dataclass
class DetectionResult:
    """Outputs of :func:`detect_candidates`."""
    candidates: List[RippleCandidate]
    thresholds: Thresholds
    n_regions: int       # regions whose peak cleared the event threshold
    n_excluded: int      # of those, dropped for touching an excluded sample


def detect_candidates(
    amp: np.ndarray,
    incl_mask: np.ndarray,
    freqs: Sequence[float],
    *,
    event_k: float = 15.0,
    boundary_k: float = 10.0,
    thresholds: Optional[Thresholds] = None,
    verbose: bool = False,
) -> DetectionResult:
    """
    Turn a wavelet amplitude matrix into candidate ripple windows.

    Parameters
    ----------
    amp : np.ndarray
        |coefficients|, shape (n_freqs, N).
    incl_mask : np.ndarray
        Boolean (N,), True where samples are eligible.
    freqs : sequence of float
        Frequency of each row of ``amp``.
    event_k, boundary_k : float
        MAD multipliers for the peak and extent thresholds.
    thresholds : Thresholds, optional
        Precomputed thresholds (e.g. global statistics reused across chunks).

    Returns
    -------
    DetectionResult
        Candidates sorted by start; every window lies fully inside ``incl_mask``.
    """
    amp = np.asarray(amp)
    freqs = np.asarray(freqs, dtype=float).ravel()
    if amp.ndim != 2:
        raise DataError("detect", f"amplitude matrix must be 2-D, got shape {amp.shape}")
    n_rows, n_cols = amp.shape
    if freqs.size != n_rows:
        raise DataError("detect", f"{freqs.size} frequencies for {n_rows} amplitude rows")
    incl = np.asarray(incl_mask, dtype=bool).ravel()
    if incl.size != n_cols:
        raise DataError("detect", f"inclusion mask length {incl.size} != {n_cols} samples",
                        index=min(incl.size, n_cols))

    if thresholds is None:
        thresholds = amplitude_thresholds(amp, incl, event_k, boundary_k)

    # 1) regions above the boundary threshold, kept if their peak clears the event threshold
    regions = label_regions(amp, thresholds.boundary)
    keep = regions.max_amp >= thresholds.event

    start = regions.t_start[keep]
    end = regions.t_end[keep]
    power = regions.max_amp[keep]
    peak = np.floor(regions.centroid_t[keep] + 0.5).astype(int)
    peak = np.clip(peak, start, end)
    frq = np.interp(regions.centroid_f[keep], np.arange(n_rows), freqs)

    # 2) drop any window containing a single excluded sample
    excl_cs = np.concatenate(([0], np.cumsum(~incl)))
    inside = (excl_cs[end + 1] - excl_cs[start]) == 0
    n_found = int(start.size)
    n_excluded = int(np.count_nonzero(~inside))
    if verbose:
        print(f"{n_excluded}/{n_found} were found in the exclusion zone.")

    order = np.lexsort((end[inside], start[inside]))
    cands = [
        RippleCandidate(int(s), int(p), int(e), float(pw), float(f))
        for s, p, e, pw, f in zip(
            start[inside][order], peak[inside][order], end[inside][order],
            power[inside][order], frq[inside][order],
        )
    ]
    return DetectionResult(cands, thresholds, n_found, n_excluded)
