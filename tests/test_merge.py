from __future__ import annotations

from swr_core.events import RippleCandidate
from swr_core.merge import merge_candidates


def _cand(start: int, end: int, power: float = 1.0, frequency: float = 150.0) -> RippleCandidate:
    return RippleCandidate(start, (start + end) // 2, end, power, frequency)


def test_close_pair_merges_into_winner_by_power(capsys) -> None:
    a = RippleCandidate(100, 115, 130, 2.0, 140.0)
    b = RippleCandidate(135, 150, 160, 5.0, 180.0)

    res = merge_candidates([a, b], 10, verbose=True)

    (m,) = res.candidates
    assert (m.start, m.end) == (100, 160)
    assert (m.peak, m.power, m.frequency) == (150, 5.0, 180.0)
    assert (res.n_merged_in, res.n_merged_out) == (2, 1)
    assert "2 events were merged into 1 events." in capsys.readouterr().out


def test_gap_equal_to_threshold_merges_and_larger_gap_does_not() -> None:
    merged = merge_candidates([_cand(0, 10), _cand(20, 30)], 10).candidates
    assert [(c.start, c.end) for c in merged] == [(0, 30)]

    kept = merge_candidates([_cand(0, 10), _cand(21, 30)], 10).candidates
    assert [(c.start, c.end) for c in kept] == [(0, 10), (21, 30)]


def test_merging_is_transitive() -> None:
    # A-B and B-C are close, A-C are far apart
    cands = [_cand(0, 10), _cand(15, 40), _cand(45, 60), _cand(200, 210)]

    res = merge_candidates(cands, 5)

    assert [(c.start, c.end) for c in res.candidates] == [(0, 60), (200, 210)]
    assert (res.n_merged_in, res.n_merged_out) == (3, 1)


def test_first_member_wins_power_ties() -> None:
    a = RippleCandidate(0, 5, 10, 3.0, 120.0)
    b = RippleCandidate(12, 14, 20, 3.0, 200.0)

    (m,) = merge_candidates([a, b], 5).candidates

    assert (m.peak, m.frequency) == (5, 120.0)


def test_nested_candidate_extends_reach() -> None:
    long = _cand(0, 100, power=1.0)
    inner = _cand(10, 20, power=4.0)
    late = _cand(105, 120, power=2.0)

    (m,) = merge_candidates([inner, late, long], 10).candidates

    assert (m.start, m.end, m.power) == (0, 120, 4.0)


def test_input_order_does_not_matter() -> None:
    cands = [_cand(300, 320), _cand(0, 10), _cand(14, 30)]

    res = merge_candidates(cands, 5)

    assert [(c.start, c.end) for c in res.candidates] == [(0, 30), (300, 320)]


def test_output_gaps_exceed_threshold_and_merge_is_idempotent() -> None:
    cands = [_cand(s, s + 12) for s in (0, 18, 40, 44, 80, 130, 139, 300)]
    thresh = 8

    once = merge_candidates(cands, thresh).candidates
    twice = merge_candidates(once, thresh)

    gaps = [b.start - a.end for a, b in zip(once, once[1:])]
    assert all(g > thresh for g in gaps)
    assert twice.candidates == once
    assert (twice.n_merged_in, twice.n_merged_out) == (0, 0)


def test_singletons_pass_through_untouched() -> None:
    cands = [_cand(0, 10), _cand(100, 110)]

    res = merge_candidates(cands, 20)

    assert res.candidates == cands
    assert res.n_merged_in == 0


def test_empty_input() -> None:
    res = merge_candidates([], 10)
    assert res.candidates == []
    assert (res.n_merged_in, res.n_merged_out) == (0, 0)
