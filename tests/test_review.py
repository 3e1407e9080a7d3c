from __future__ import annotations

import numpy as np
import pytest

from swr_core.errors import DataError
from swr_core.review import ReviewSession


def test_pages_follow_descending_score() -> None:
    scores = np.array([10.0, 90.0, 50.0, 90.0, 0.0])

    session = ReviewSession(scores, per_page=2)

    assert session.n_pages == 3
    assert session.page_events().tolist() == [1, 3]
    assert session.page_events(1).tolist() == [2, 0]
    assert session.page_events(2).tolist() == [4]


def test_detection_order_when_unsorted() -> None:
    session = ReviewSession([5.0, 1.0, 9.0], sort_by_score=False)
    assert session.page_events().tolist() == [0, 1, 2]


def test_navigation_is_clamped() -> None:
    session = ReviewSession(np.arange(30, dtype=float))

    assert session.n_pages == 3
    assert session.navigate(-1) == 0
    assert session.navigate(5) == 2
    assert session.navigate(-1) == 1


def test_toggle_flips_single_flags() -> None:
    session = ReviewSession([1.0, 2.0, 3.0])

    assert session.toggle(1) is True
    assert session.toggle(1) is False
    assert session.toggle(2) is True
    assert session.manvalid.tolist() == [False, False, True]

    with pytest.raises(IndexError):
        session.toggle(3)


def test_toggle_page_validates_then_clears() -> None:
    session = ReviewSession(np.arange(5, dtype=float), per_page=2)
    session.toggle(4)

    session.toggle_page()             # page 0 holds events 4 and 3
    assert session.manvalid.tolist() == [False, False, False, True, True]

    session.toggle_page()
    assert not session.manvalid.any()


def test_existing_review_state_is_copied() -> None:
    flags = np.array([True, False])
    session = ReviewSession([1.0, 2.0], flags)

    session.toggle(1)

    assert flags.tolist() == [True, False]
    assert session.manvalid.tolist() == [True, True]


def test_review_state_length_must_match() -> None:
    with pytest.raises(DataError) as exc:
        ReviewSession([1.0, 2.0, 3.0], [True])
    assert exc.value.stage == "review"


def test_empty_session_and_display_switch() -> None:
    session = ReviewSession([])

    assert session.n_pages == 1
    assert session.page_events().size == 0
    session.toggle_page()
    assert session.switch_display() is True
    assert session.switch_display() is False
