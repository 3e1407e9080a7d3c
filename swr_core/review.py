# swr_core/review.py
"""
Headless state of the manual-validation review.

Events are presented in pages ordered by descending score. The state is just
the current page, one validity flag per event and the raw/filtered display
switch; every transition is an explicit method call.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from .errors import DataError


class ReviewSession:
    """Page-wise validation of detected events."""

    def __init__(self, scores, manvalid=None, *, per_page: int = 12, sort_by_score: bool = True):
        scores = np.asarray(scores, dtype=float).ravel()
        n = scores.size
        if per_page < 1:
            raise ValueError("per_page must be >= 1")
        if manvalid is None:
            valid = np.zeros(n, dtype=bool)
        else:
            valid = np.asarray(manvalid, dtype=bool).ravel().copy()
            if valid.size != n:
                raise DataError("review", f"manvalid has {valid.size} flags for {n} events",
                                index=min(valid.size, n))

        # stable descending sort keeps detection order among equal scores
        self.order = np.argsort(-scores, kind="stable") if sort_by_score else np.arange(n)
        self.scores = scores
        self.per_page = per_page
        self.current_page = 0
        self.show_filtered = False
        self._valid = valid

    @property
    def n_events(self) -> int:
        return int(self.scores.size)

    @property
    def n_pages(self) -> int:
        return max(int(np.ceil(self.n_events / self.per_page)), 1)

    @property
    def manvalid(self) -> np.ndarray:
        """Validity flags in detection order."""
        return self._valid.copy()

    def page_events(self, page: Optional[int] = None) -> np.ndarray:
        """Detection-order indices of the events shown on ``page`` (default: current)."""
        page = self.current_page if page is None else page
        lo = page * self.per_page
        return self.order[lo:lo + self.per_page]

    def navigate(self, delta: int) -> int:
        self.current_page = int(np.clip(self.current_page + delta, 0, self.n_pages - 1))
        return self.current_page

    def toggle(self, index: int) -> bool:
        """Flip the flag of event ``index`` (detection order) and return its new value."""
        if not 0 <= index < self.n_events:
            raise IndexError(f"event index {index} out of range [0, {self.n_events})")
        self._valid[index] = not self._valid[index]
        return bool(self._valid[index])

    def toggle_page(self) -> None:
        """Validate the whole page unless it is already fully valid, then clear it."""
        idx = self.page_events()
        if idx.size == 0:
            return
        self._valid[idx] = not self._valid[idx].all()

    def switch_display(self) -> bool:
        self.show_filtered = not self.show_filtered
        return self.show_filtered
