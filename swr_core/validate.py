# swr_core/validate.py
"""
Duration and oscillation-cycle checks that promote candidates to events.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence
import numpy as np

from .events import RippleCandidate, RippleEvent

__all__ = [
    "unwrap_phase",
    "count_cycles",
    "ValidationResult",
    "validate_candidates",
]


def unwrap_phase(phase: np.ndarray) -> np.ndarray:
    """
    Remove artificial 2*pi jumps from a phase sequence.

    Every step whose magnitude exceeds pi is folded back into (-pi, pi] and
    the difference is accumulated as a running correction applied to all
    later samples.
    """
    p = np.asarray(phase, dtype=float).ravel()
    if p.size < 2:
        return p.copy()
    two_pi = 2 * np.pi
    dp = np.diff(p)
    folded = np.mod(dp + np.pi, two_pi) - np.pi
    # keep the sign of genuine +pi steps
    folded[(folded == -np.pi) & (dp > 0)] = np.pi
    correction = folded - dp
    correction[np.abs(dp) < np.pi] = 0.0
    out = p.copy()
    out[1:] += np.cumsum(correction)
    return out


def count_cycles(coeffmat: np.ndarray, start: int, end: int) -> float:
    """
    Oscillation cycles inside the inclusive window [start, end].

    Follows, per sample, the phase of the frequency bin with maximal
    amplitude and measures the unwrapped phase advance in turns.
    """
    win = coeffmat[:, start:end + 1]
    if win.shape[1] < 2:
        return 0.0
    best = np.argmax(np.abs(win), axis=0)
    phase = np.angle(win[best, np.arange(win.shape[1])])
    unwrapped = unwrap_phase(phase)
    return float((unwrapped[-1] - unwrapped[0]) / (2 * np.pi))


@dataclass
class ValidationResult:
    events: List[RippleEvent]
    cycles: np.ndarray        # cycle count of every kept event
    n_duration: int           # rejected for duration
    n_cycles: int             # rejected for too few cycles


def validate_candidates(
    candidates: Sequence[RippleCandidate],
    coeffmat: np.ndarray,
    fs: float,
    *,
    dur_min: float = 0.010,
    dur_max: float = 0.500,
    min_cycles: float = 1.8,
    verbose: bool = False,
) -> ValidationResult:
    """
    Keep candidates with dur_min <= duration <= dur_max (seconds, inclusive)
    and at least ``min_cycles`` cycles.

    ``coeffmat`` is the complex wavelet matrix the candidates were found on.
    """
    dur_ok = [c for c in candidates if dur_min <= c.duration_at(fs) <= dur_max]
    n_duration = len(candidates) - len(dur_ok)
    if verbose:
        print(f"{n_duration}/{len(candidates)} did not meet the duration threshold.")

    cycles = np.array([count_cycles(coeffmat, c.start, c.end) for c in dur_ok], dtype=float)
    ok = cycles >= min_cycles
    events = [RippleEvent.from_candidate(c, fs) for c, keep in zip(dur_ok, ok) if keep]
    n_cycles = len(dur_ok) - len(events)
    if verbose:
        print(f"{n_cycles}/{len(dur_ok)} did not meet the minimum cycle threshold.")

    return ValidationResult(events, cycles[ok], n_duration, n_cycles)
