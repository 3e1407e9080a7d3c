# swr_core/events.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence
import numpy as np


@dataclass(frozen=True)
class RippleCandidate:
    """
    Time-bounded high-energy region; indices are inclusive sample positions.

    ``end`` is the last supra-threshold sample, not one past it, so a region
    spanning k samples lasts (k - 1) / fs seconds.
    """
    start: int
    peak: int
    end: int
    power: float
    frequency: float

    def __post_init__(self):
        if not self.start <= self.peak <= self.end:
            raise ValueError(f"candidate violates start <= peak <= end: "
                             f"({self.start}, {self.peak}, {self.end})")

    def duration_at(self, fs: float) -> float:
        return (self.end - self.start) / fs


@dataclass(frozen=True)
class RippleEvent(RippleCandidate):
    """A candidate that passed the duration and cycle-count checks."""
    duration: float = 0.0

    @classmethod
    def from_candidate(cls, cand: RippleCandidate, fs: float) -> "RippleEvent":
        return cls(cand.start, cand.peak, cand.end, cand.power, cand.frequency,
                   duration=cand.duration_at(fs))


def events_to_arrays(events: Sequence[RippleCandidate]):
    """Return (win (n,3) int, power (n,), frequency (n,)) arrays."""
    n = len(events)
    win = np.empty((n, 3), dtype=int)
    power = np.empty(n, dtype=float)
    freq = np.empty(n, dtype=float)
    for k, ev in enumerate(events):
        win[k] = (ev.start, ev.peak, ev.end)
        power[k] = ev.power
        freq[k] = ev.frequency
    return win, power, freq


def sort_by_start(cands: Sequence[RippleCandidate]) -> List[RippleCandidate]:
    return sorted(cands, key=lambda c: (c.start, c.end))


__all__ = ["RippleCandidate", "RippleEvent", "events_to_arrays", "sort_by_start"]
