# swr_core/score.py
from __future__ import annotations
from typing import Sequence
import numpy as np

from .events import RippleEvent


def _rank_ascending(values: np.ndarray) -> np.ndarray:
    """1-based rank; ties share the lowest rank (smallest value -> 1)."""
    return np.searchsorted(np.sort(values), values, side="left") + 1


def _rank_descending(values: np.ndarray) -> np.ndarray:
    """1-based rank; ties share the lowest rank (largest value -> 1)."""
    n_greater = values.size - np.searchsorted(np.sort(values), values, side="right")
    return n_greater + 1


def rank_scores(
    power: np.ndarray,
    duration: np.ndarray,
    frequency: np.ndarray,
    *,
    target_dur: float = 0.05,
    target_freq: float = 160.0,
) -> np.ndarray:
    """
    Review-priority score in [0, 100].

    Sum of three ranks (stronger power, duration closer to ``target_dur``,
    frequency closer to ``target_freq`` all rank higher), min-max normalised.
    When every event has the same rank sum, all scores are 100.
    """
    power = np.asarray(power, dtype=float).ravel()
    duration = np.asarray(duration, dtype=float).ravel()
    frequency = np.asarray(frequency, dtype=float).ravel()
    if not power.size == duration.size == frequency.size:
        raise ValueError("power, duration and frequency must have the same length")
    if power.size == 0:
        return np.empty(0, dtype=float)

    total = (
        _rank_ascending(power)
        + _rank_descending(np.abs(duration - target_dur))
        + _rank_descending(np.abs(frequency - target_freq))
    ).astype(float)

    lo, hi = total.min(), total.max()
    if hi == lo:
        return np.full(total.size, 100.0)
    return 100.0 * (total - lo) / (hi - lo)


def score_events(events: Sequence[RippleEvent], **targets) -> np.ndarray:
    return rank_scores(
        np.array([e.power for e in events], dtype=float),
        np.array([e.duration for e in events], dtype=float),
        np.array([e.frequency for e in events], dtype=float),
        **targets,
    )
