# swr_core/merge.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence

from .events import RippleCandidate, sort_by_start


@dataclass
class MergeResult:
    candidates: List[RippleCandidate]
    n_merged_in: int    # candidates that took part in a merge
    n_merged_out: int   # events those were merged into


def _cluster(cands: Sequence[RippleCandidate], merge_thresh: int) -> List[List[RippleCandidate]]:
    """
    Transitive grouping of time-sorted candidates.

    A candidate joins the running cluster when its start is at most
    ``merge_thresh`` samples after the furthest end seen in that cluster, so
    chains of short gaps collapse into one cluster even when its first and
    last members are far apart.
    """
    clusters: List[List[RippleCandidate]] = []
    reach = None
    for c in cands:
        if clusters and c.start - reach <= merge_thresh:
            clusters[-1].append(c)
            reach = max(reach, c.end)
        else:
            clusters.append([c])
            reach = c.end
    return clusters


def merge_candidates(
    candidates: Sequence[RippleCandidate],
    merge_thresh: int,
    *,
    verbose: bool = False,
) -> MergeResult:
    """
    Merge temporally adjacent candidates.

    Each multi-member cluster becomes one candidate spanning min(start) to
    max(end); peak, power and frequency come from the member with the
    highest power (first one on ties). Singletons pass through unchanged.
    """
    cands = sort_by_start(candidates)
    merged: List[RippleCandidate] = []
    n_in = n_out = 0

    for group in _cluster(cands, merge_thresh):
        if len(group) == 1:
            merged.append(group[0])
            continue
        winner = group[0]
        for c in group[1:]:
            if c.power > winner.power:
                winner = c
        merged.append(RippleCandidate(
            start=min(c.start for c in group),
            peak=winner.peak,
            end=max(c.end for c in group),
            power=winner.power,
            frequency=winner.frequency,
        ))
        n_in += len(group)
        n_out += 1

    if verbose:
        print(f"{n_in} events were merged into {n_out} events.")
    return MergeResult(merged, n_in, n_out)
