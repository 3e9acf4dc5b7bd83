import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from lineagehub.errors import EmptyInputError, MalformedDateError, UnknownWaveError  # noqa: E402
from lineagehub.models import Observation, RawObservation, WeekKey  # noqa: E402
from lineagehub.service import LineageViewService  # noqa: E402
from lineagehub.storage import InMemoryRecordStore, RecordStore  # noqa: E402

W1 = WeekKey(2022, 1)
W2 = WeekKey(2022, 2)
W30 = WeekKey(2022, 30)


def _store() -> InMemoryRecordStore:
    return InMemoryRecordStore(
        [
            Observation("Tokyo", "A", W1, 6, 0.6),
            Observation("Tokyo", "B", W1, 6, 0.3),
            Observation("Tokyo", "A", W2, 6, 0.2),
            Observation("Tokyo", "C", W2, 6, 0.2),
            Observation("Tokyo", "BA.5", W30, 7, 0.9),
            Observation("Osaka", "B", W1, 6, 1.0),
        ]
    )


class _CountingStore(RecordStore):
    def __init__(self, rows: list[RawObservation]) -> None:
        self.rows = rows
        self.calls = 0

    def persist(self, records) -> None:
        raise NotImplementedError

    def fetch(self, waves, prefecture=None) -> list[RawObservation]:
        self.calls += 1
        return [row for row in self.rows if row.wave in waves and row.prefecture == prefecture]


def test_views_for_single_wave() -> None:
    views = LineageViewService(_store()).views(6, "Tokyo")

    assert views.selection.label == "6"
    assert views.weeks == [W1, W2]
    assert views.shares[W1] == pytest.approx({"A": 2 / 3, "B": 1 / 3})
    assert views.lineages == ["A", "B", "C"]
    assert len(views.matrix) == 3
    assert all(len(row) == 2 for row in views.matrix)
    assert views.ranks[W2] == {"A": 1, "B": None, "C": 2}
    assert [item.lineage for item in views.dominant] == ["A", "A"]


def test_combined_selection_is_union_of_waves() -> None:
    views = LineageViewService(_store()).views("6-8", "東京都")

    assert views.prefecture == "Tokyo"
    assert views.weeks == [W1, W2, W30]
    assert views.shares[W30] == pytest.approx({"BA.5": 1.0})


def test_empty_selection_raises_with_selection_in_message() -> None:
    service = LineageViewService(_store())

    with pytest.raises(EmptyInputError, match="Osaka"):
        service.views(7, "Osaka")


def test_unknown_wave_raises() -> None:
    with pytest.raises(UnknownWaveError):
        LineageViewService(_store()).views(5, "Tokyo")


def test_top_k_limits_rank_window() -> None:
    views = LineageViewService(_store(), top_k=1).views(6, "Tokyo")

    assert views.top_lineages == ["A"]
    assert all(set(week_ranks) == {"A"} for week_ranks in views.ranks.values())


def test_views_are_memoized_per_selection() -> None:
    store = _CountingStore([RawObservation("Tokyo", "A", "2022/1", 6, 1.0)])
    service = LineageViewService(store)

    first = service.views(6, "Tokyo")
    second = service.views("6", "tokyo")

    assert first is second
    assert store.calls == 1

    service.clear_cache()
    service.views(6, "Tokyo")
    assert store.calls == 2


def test_malformed_stored_week_strategy() -> None:
    rows = [
        RawObservation("Tokyo", "A", "2022/1", 6, 1.0),
        RawObservation("Tokyo", "B", "garbage", 6, 1.0),
    ]

    with pytest.raises(MalformedDateError):
        LineageViewService(_CountingStore(rows)).views(6, "Tokyo")

    views = LineageViewService(_CountingStore(rows), malformed_week="skip").views(6, "Tokyo")
    assert views.shares == {W1: {"A": 1.0}}


def test_summary_lists_dominant_lineage_per_prefecture() -> None:
    summary = LineageViewService(_store()).summary(6)

    assert summary.weeks == [W1, W2]
    assert list(summary.dominant) == ["Osaka", "Tokyo"]
    assert [item.lineage for item in summary.dominant["Osaka"]] == ["B", None]
    assert [item.lineage for item in summary.dominant["Tokyo"]] == ["A", "A"]


def test_summary_of_empty_wave_raises() -> None:
    with pytest.raises(EmptyInputError):
        LineageViewService(InMemoryRecordStore()).summary(8)


def test_wave_weeks_is_union_across_prefectures() -> None:
    service = LineageViewService(_store())

    assert service.wave_weeks(6) == [W1, W2]
    assert service.wave_weeks("6-8") == [W1, W2, W30]
    assert service.wave_weeks(7) == [W30]

    with pytest.raises(EmptyInputError):
        service.wave_weeks(8)
