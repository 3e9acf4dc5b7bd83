import sys
from pathlib import Path

import duckdb
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from lineagehub.models import Observation, WeekKey  # noqa: E402
from lineagehub.storage import DuckDBRecordStore, InMemoryRecordStore  # noqa: E402
from lineagehub.weeks import normalize  # noqa: E402


def _records() -> list[Observation]:
    return [
        Observation("Tokyo", "BA.1", WeekKey(2022, 2), 6, 0.6, "wide_ratio_csv"),
        Observation("Tokyo", "BA.2", WeekKey(2022, 1), 6, 0.4, "wide_ratio_csv"),
        Observation("Tokyo", "BA.5", WeekKey(2022, 30), 7, 1.0, "wide_ratio_csv"),
        Observation("Osaka", "XBB", WeekKey(2023, 2), 8, 1.0, "wide_ratio_csv"),
    ]


def test_duckdb_store_round_trip_and_filters(tmp_path: Path) -> None:
    db_path = tmp_path / "lineages.duckdb"

    with DuckDBRecordStore(db_path=db_path) as store:
        store.persist(_records())

        wave6 = store.fetch([6], "Tokyo")
        combined = store.fetch([6, 7, 8])
        osaka = store.fetch([6, 7, 8], "Osaka")

        assert [(row.lineage, row.raw_week) for row in wave6] == [("BA.2", "2022/1"), ("BA.1", "2022/2")]
        assert len(combined) == 4
        assert [row.lineage for row in osaka] == ["XBB"]
        assert normalize(wave6[0].raw_week) == WeekKey(2022, 1)
        assert wave6[0].value == pytest.approx(0.4)
        assert wave6[0].source == "wide_ratio_csv"
        assert store.prefectures([6, 7]) == ["Tokyo"]
        assert store.prefectures([6, 7, 8]) == ["Osaka", "Tokyo"]

    assert db_path.exists()


def test_duckdb_store_replace_and_append_modes(tmp_path: Path) -> None:
    db_path = tmp_path / "lineages.duckdb"
    records = _records()

    with DuckDBRecordStore(db_path=db_path) as store:
        store.persist(records)
        store.persist(records[:1])
        assert len(store.fetch([6, 7, 8])) == 1

    with DuckDBRecordStore(db_path=db_path, mode="append") as store:
        store.persist(records[1:])
        assert len(store.fetch([6, 7, 8])) == 4


def test_duckdb_store_missing_table_is_empty(tmp_path: Path) -> None:
    with DuckDBRecordStore(db_path=tmp_path / "empty.duckdb") as store:
        assert store.fetch([6]) == []
        assert store.fetch([]) == []
        assert store.prefectures([6]) == []


def test_duckdb_store_exports_parquet(tmp_path: Path) -> None:
    parquet_path = tmp_path / "export" / "observations.parquet"

    with DuckDBRecordStore(db_path=tmp_path / "db.duckdb", parquet_path=parquet_path) as store:
        store.persist(_records())

    count = duckdb.query(f"SELECT count(*) FROM read_parquet('{parquet_path.as_posix()}')").fetchone()[0]
    assert count == 4


def test_duckdb_store_rejects_unsafe_table_name(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        DuckDBRecordStore(db_path=tmp_path / "db.duckdb", table_name="obs; DROP TABLE x")


def test_duckdb_store_close_releases_connection(tmp_path: Path) -> None:
    store = DuckDBRecordStore(db_path=tmp_path / "db.duckdb")
    store.persist(_records())
    store.close()

    with DuckDBRecordStore(db_path=tmp_path / "db.duckdb", read_only=True) as reader:
        assert len(reader.fetch([6])) == 2


def test_duckdb_store_reopens_after_close(tmp_path: Path) -> None:
    store = DuckDBRecordStore(db_path=tmp_path / "nested" / "db.duckdb")

    first = store.connection
    assert store.connection is first
    store.persist(_records())
    store.close()

    assert store.connection is not first
    assert store.prefectures([8]) == ["Osaka"]
    store.close()
    assert (tmp_path / "nested" / "db.duckdb").exists()


def test_memory_store_filters() -> None:
    store = InMemoryRecordStore(_records())

    assert [row.lineage for row in store.fetch([7])] == ["BA.5"]
    assert store.fetch([6], "Osaka") == []
    assert store.prefectures([6, 8]) == ["Osaka", "Tokyo"]
