# swr_core/errors.py
"""
Failure categories raised by the ripple detection pipeline.

Every error carries the context needed to diagnose it (stage, parameter,
offending index or value) both as attributes and in its message.
"""

from __future__ import annotations
from typing import Any, Optional


class SWRError(Exception):
    """Base class for every error raised by :mod:`swr_core`."""


class ConfigurationError(SWRError):
    """A parameter is invalid; raised before any array processing starts."""

    def __init__(self, parameter: str, value: Any, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {parameter}={value!r}: {reason}")


class DataError(SWRError):
    """Input or intermediate arrays are malformed."""

    def __init__(self, stage: str, message: str, index: Optional[int] = None):
        self.stage = stage
        self.index = index
        msg = f"[{stage}] {message}"
        if index is not None:
            msg += f" (first violation at index {index})"
        super().__init__(msg)


class StatisticalDegenerate(SWRError):
    """The robust spread of the included amplitudes is zero or undefined."""

    def __init__(self, stage: str, median: float, mad: float, n_included: int):
        self.stage = stage
        self.median = median
        self.mad = mad
        self.n_included = n_included
        super().__init__(
            f"[{stage}] degenerate amplitude statistics: median={median!r}, "
            f"MAD={mad!r} over {n_included} included values"
        )
