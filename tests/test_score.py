from __future__ import annotations

import numpy as np
import pytest

from swr_core.events import RippleEvent
from swr_core.score import rank_scores, score_events


def test_best_event_on_every_criterion_scores_100() -> None:
    power = np.array([1.0, 2.0, 3.0])
    duration = np.array([0.2, 0.1, 0.05])
    frequency = np.array([90.0, 130.0, 160.0])

    scores = rank_scores(power, duration, frequency)

    assert scores.tolist() == [0.0, 50.0, 100.0]


def test_ties_share_the_lowest_rank() -> None:
    power = np.array([5.0, 5.0, 1.0])
    duration = np.array([0.05, 0.05, 0.05])
    frequency = np.array([160.0, 160.0, 160.0])

    # power ranks 2, 2, 1; the others tie at rank 1
    scores = rank_scores(power, duration, frequency)

    assert scores.tolist() == [100.0, 100.0, 0.0]


def test_distance_to_targets_not_raw_values() -> None:
    power = np.ones(2)
    duration = np.array([0.03, 0.08])      # 20 ms and 30 ms away from 50 ms
    frequency = np.array([200.0, 150.0])   # 40 Hz and 10 Hz away from 160 Hz

    scores = rank_scores(power, duration, frequency)
    assert scores.tolist() == [100.0, 100.0]

    moved = rank_scores(power, duration, frequency, target_dur=0.08, target_freq=200.0)
    assert moved.tolist() == [100.0, 100.0]

    only_freq = rank_scores(power, np.array([0.05, 0.05]), frequency)
    assert only_freq.tolist() == [0.0, 100.0]


def test_scores_lie_in_range(rng: np.random.Generator) -> None:
    n = 50
    scores = rank_scores(rng.uniform(1, 10, n), rng.uniform(0.01, 0.3, n), rng.uniform(80, 250, n))

    assert scores.shape == (n,)
    assert scores.min() == 0.0
    assert scores.max() == 100.0


def test_single_event_and_empty_input() -> None:
    assert rank_scores([2.0], [0.02], [150.0]).tolist() == [100.0]
    assert rank_scores([], [], []).size == 0


def test_length_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        rank_scores([1.0, 2.0], [0.05], [160.0, 170.0])


def test_score_events_reads_event_fields() -> None:
    events = [
        RippleEvent(0, 5, 10, 1.0, 100.0, duration=0.010),
        RippleEvent(20, 40, 70, 9.0, 160.0, duration=0.050),
    ]

    scores = score_events(events, target_dur=0.05, target_freq=160.0)

    assert scores.tolist() == [0.0, 100.0]
