# swr_core/params.py
"""
Configuration parameters for sharp-wave ripple detection.

Defaults target hippocampal LFP recorded with 50 Hz mains.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple
import numpy as np

from .errors import ConfigurationError


def _default_notches() -> List[Tuple[float, float]]:
    # mains and its first six harmonics, +/- 0.5 Hz
    return [(50.0 * k, 0.5) for k in range(1, 8)]


@dataclass
class FilterSpec:
    """Cutoffs of the zero-phase filter chain applied by the preprocessor."""

    hp_cutoff: float = 0.3          # highpass cutoff to remove DC trend (Hz)
    lp_cutoff: float = 400.0        # lowpass cutoff against high-frequency noise (Hz)
    notches: List[Tuple[float, float]] = field(default_factory=_default_notches)
    notch_order: int = 10
    hp_order: int = 4
    lp_order: int = 8

    def validate(self, fs: float) -> None:
        nyq = fs / 2
        if not fs > 0:
            raise ConfigurationError("fs", fs, "sampling rate must be positive")
        if not 0 < self.hp_cutoff < nyq:
            raise ConfigurationError("hp_cutoff", self.hp_cutoff, f"must lie in (0, {nyq}) Hz")
        if not 0 < self.lp_cutoff < nyq:
            raise ConfigurationError("lp_cutoff", self.lp_cutoff, f"must lie in (0, {nyq}) Hz")
        for center, half_width in self.notches:
            lo, hi = center - half_width, center + half_width
            if half_width <= 0:
                raise ConfigurationError("notches", (center, half_width), "half-width must be positive")
            if lo <= 0 or hi >= nyq:
                raise ConfigurationError("notches", (center, half_width),
                                         f"stop band [{lo}, {hi}] Hz must lie in (0, {nyq})")


@dataclass
class SWRParams:
    """All options recognised by :func:`swr_core.analyze.detect_swr`."""

    filters: FilterSpec = field(default_factory=FilterSpec)

    # wavelet decomposition
    rp_freqs: np.ndarray = field(default_factory=lambda: np.arange(80, 251, dtype=float))
    wav_cycles: float = 5.0

    # detection thresholds, in MADs above the median
    event_thresh: float = 15.0
    bound_thresh: float = 10.0

    # merge / validation
    merge_thresh: Optional[int] = None   # samples; None -> 20 ms at the trace's rate
    rp_dur_min: float = 0.010            # s
    rp_dur_max: float = 0.500            # s
    min_cycles: float = 1.8

    # review-priority score targets
    score_target_dur: float = 0.05       # s
    score_target_freq: float = 160.0     # Hz

    # movement-based inclusion
    mov_thresh: float = 0.5              # cm/s
    mov_min_dur: float = 3.0             # s

    n_jobs: int = 1

    def merge_samples(self, fs: float) -> int:
        if self.merge_thresh is None:
            return int(np.floor(0.020 * fs + 0.5))
        return int(self.merge_thresh)

    def validate(self, fs: float) -> None:
        """Raise :class:`ConfigurationError` on the first invalid option."""
        self.filters.validate(fs)

        freqs = np.asarray(self.rp_freqs, dtype=float).ravel()
        if freqs.size == 0:
            raise ConfigurationError("rp_freqs", list(freqs), "frequency list is empty")
        if np.any(~np.isfinite(freqs)) or np.any(freqs <= 0):
            raise ConfigurationError("rp_freqs", list(freqs), "frequencies must be finite and positive")
        if freqs.size > 1 and np.any(np.diff(freqs) <= 0):
            raise ConfigurationError("rp_freqs", list(freqs), "frequencies must be strictly ascending")
        if freqs[-1] >= fs / 2:
            raise ConfigurationError("rp_freqs", float(freqs[-1]), f"must stay below Nyquist ({fs / 2} Hz)")

        if not self.wav_cycles > 0:
            raise ConfigurationError("wav_cycles", self.wav_cycles, "must be positive")
        if self.bound_thresh < 0:
            raise ConfigurationError("bound_thresh", self.bound_thresh, "must be non-negative")
        if self.event_thresh < self.bound_thresh:
            raise ConfigurationError("event_thresh", self.event_thresh,
                                     f"must be >= bound_thresh ({self.bound_thresh})")
        if self.merge_samples(fs) < 0:
            raise ConfigurationError("merge_thresh", self.merge_thresh, "must be non-negative")
        if self.rp_dur_min < 0:
            raise ConfigurationError("rp_dur_min", self.rp_dur_min, "must be non-negative")
        if self.rp_dur_min > self.rp_dur_max:
            raise ConfigurationError("rp_dur_min", (self.rp_dur_min, self.rp_dur_max),
                                     "duration bounds must satisfy min <= max")
        if self.n_jobs == 0:
            raise ConfigurationError("n_jobs", self.n_jobs, "must be non-zero")

    def to_dict(self) -> Dict:
        out = asdict(self)
        out["rp_freqs"] = np.asarray(self.rp_freqs, dtype=float).tolist()
        out["filters"]["notches"] = [list(n) for n in self.filters.notches]
        return out

    @classmethod
    def from_dict(cls, d: Dict) -> "SWRParams":
        d = dict(d)
        filt = dict(d.pop("filters", {}) or {})
        if "notches" in filt:
            filt["notches"] = [tuple(float(v) for v in n) for n in filt["notches"]]
        if "rp_freqs" in d:
            d["rp_freqs"] = np.asarray(d["rp_freqs"], dtype=float)
        return cls(filters=FilterSpec(**filt), **d)
