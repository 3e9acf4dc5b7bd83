import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from lineagehub.aggregation import aggregate  # noqa: E402
from lineagehub.models import Observation, RankMismatch, WeekKey  # noqa: E402
from lineagehub.ranking import (  # noqa: E402
    build_ranks,
    compare_ranks,
    dominant_lineages,
    lineage_frequencies,
    rank_entries,
    rank_series,
    select_top_lineages,
)

WEEKS = [WeekKey(2022, week) for week in range(1, 7)]


def _shares_for_frequency_case():
    # A appears in all six weeks, B in two.
    shares = {week: {"A": 1.0} for week in WEEKS}
    shares[WEEKS[0]] = {"A": 0.5, "B": 0.5}
    shares[WEEKS[1]] = {"A": 0.7, "B": 0.3}
    return shares


def test_top_lineages_by_frequency() -> None:
    shares = _shares_for_frequency_case()

    assert lineage_frequencies(shares) == {"A": 6, "B": 2}
    assert select_top_lineages(shares, 1) == ["A"]
    assert select_top_lineages(shares, 5) == ["A", "B"]


def test_top_lineages_ties_break_by_name() -> None:
    shares = {WEEKS[0]: {"B": 0.5, "A": 0.5}, WEEKS[1]: {"C": 1.0}}

    assert select_top_lineages(shares, 3) == ["A", "B", "C"]


def test_top_lineages_rejects_negative_k() -> None:
    with pytest.raises(ValueError):
        select_top_lineages({}, -1)


def test_select_zero_lineages() -> None:
    assert select_top_lineages(_shares_for_frequency_case(), 0) == []


def test_ranks_are_dense_from_one() -> None:
    observations = [
        Observation("Tokyo", lineage, week, 6, value)
        for week in WEEKS[:3]
        for lineage, value in {"A": 0.5, "B": 0.3, "C": 0.2}.items()
    ]
    ranks = build_ranks(aggregate(observations), top_k=10)

    for week_ranks in ranks.values():
        present = sorted(rank for rank in week_ranks.values() if rank is not None)
        assert present == list(range(1, len(present) + 1))
        assert week_ranks == {"A": 1, "B": 2, "C": 3}


def test_ranks_ties_break_by_name() -> None:
    ranks = build_ranks({WEEKS[0]: {"B": 0.5, "A": 0.5}}, top_k=None)

    assert ranks[WEEKS[0]] == {"A": 1, "B": 2}


def test_absent_lineages_map_to_none() -> None:
    shares = {WEEKS[0]: {"A": 0.6, "B": 0.4}, WEEKS[1]: {"A": 1.0}}

    ranks = build_ranks(shares, top_k=2)

    assert ranks[WEEKS[1]] == {"A": 1, "B": None}
    assert 0 not in ranks[WEEKS[1]].values()


def test_ranks_restricted_to_top_k() -> None:
    shares = _shares_for_frequency_case()

    ranks = build_ranks(shares, top_k=1)

    assert all(set(week_ranks) == {"A"} for week_ranks in ranks.values())
    assert ranks[WEEKS[0]]["A"] == 1


def test_explicit_lineage_set_is_ranked_within_itself() -> None:
    shares = {WEEKS[0]: {"A": 0.5, "B": 0.3, "C": 0.2}}

    ranks = build_ranks(shares, lineages=["C", "B"])

    assert ranks[WEEKS[0]] == {"C": 2, "B": 1}


def test_rank_entries_overflow_rank() -> None:
    ranks = {WEEKS[0]: {"A": 1, "B": None}}

    plain = rank_entries(ranks)
    padded = rank_entries(ranks, overflow_rank=21)

    assert [entry.rank for entry in plain] == [1, None]
    assert [entry.rank for entry in padded] == [1, 21]


def test_rank_series_follows_week_order() -> None:
    ranks = {WEEKS[0]: {"A": 2}, WEEKS[1]: {"A": None}}

    assert rank_series(ranks, [WEEKS[0], WEEKS[1], WEEKS[2]], "A") == [2, None, None]


def test_dominant_lineages_fill_missing_weeks() -> None:
    shares = {WEEKS[0]: {"A": 0.3, "B": 0.7}, WEEKS[2]: {"C": 0.5, "A": 0.5}}

    dominant = dominant_lineages(shares, WEEKS[:3])

    assert [item.lineage for item in dominant] == ["B", None, "A"]
    assert dominant[0].share == pytest.approx(0.7)
    assert dominant[1].share == 0.0


def test_compare_ranks_reports_disagreements_only() -> None:
    computed = {WEEKS[0]: {"A": 1, "B": 2, "C": None}, WEEKS[1]: {"A": 1}}
    reference = {WEEKS[0]: {"A": 1, "B": 3, "C": None, "D": 4}}

    assert compare_ranks(computed, reference) == [
        RankMismatch(week=WEEKS[0], lineage="B", computed=2, reference=3)
    ]
