import csv
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from lineagehub import IngestionPipeline, ObservationValidator, ValidationPolicy  # noqa: E402
from lineagehub.adapters import WideRatioCsvAdapter  # noqa: E402
from lineagehub.config import MalformedWeekStrategy  # noqa: E402
from lineagehub.errors import MalformedDateError  # noqa: E402
from lineagehub.publishers import ChartPayloadPublisher  # noqa: E402
from lineagehub.service import LineageViewService  # noqa: E402
from lineagehub.storage import DuckDBRecordStore  # noqa: E402


def _write_ratio_csv(path: Path, rows: list[list[str]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as stream:
        writer = csv.writer(stream)
        writer.writerow(["date", "week", "BA.1", "BA.2", "BA.5"])
        writer.writerows(rows)


def _inputs(tmp_path: Path) -> Path:
    data_dir = tmp_path / "ratio"
    data_dir.mkdir()
    _write_ratio_csv(
        data_dir / "Tokyo.csv",
        [
            ["2022-01-07", "6", "60", "30", ""],
            ["2022-01-14", "6", "40", "40", ""],
            ["2022-07-15", "7", "", "10", "90"],
            ["not a date", "6", "50", "50", ""],
            ["2022-07-22", "5", "", "", "100"],
        ],
    )
    _write_ratio_csv(
        data_dir / "Osaka.csv",
        [["2022-01-07", "6", "", "100", ""]],
    )
    return data_dir


def test_pipeline_ingests_stores_and_publishes(tmp_path: Path) -> None:
    data_dir = _inputs(tmp_path)
    db_path = tmp_path / "lineages.duckdb"
    output_root = tmp_path / "charts"

    with DuckDBRecordStore(db_path=db_path) as store:
        report = IngestionPipeline(
            adapters=[WideRatioCsvAdapter(input_paths=data_dir)],
            storage=store,
            publishers=[ChartPayloadPublisher(output_root=output_root)],
        ).run()

        views = LineageViewService(store).views(6, "Tokyo")

    assert report.adapter_count == 1
    assert report.ingested_records == 10
    assert report.validated_records == 7
    assert report.dropped_records == 3
    assert {issue.field_name for issue in report.issues} == {"week", "wave"}

    assert [str(week) for week in views.weeks] == ["2022/1", "2022/2"]
    assert views.shares[views.weeks[0]] == pytest.approx({"BA.1": 2 / 3, "BA.2": 1 / 3})
    assert (output_root / "6-8" / "Tokyo.json").exists()
    assert (output_root / "6" / "Osaka.json").exists()


def test_pipeline_abort_policy_stops_before_storage(tmp_path: Path) -> None:
    data_dir = _inputs(tmp_path)
    db_path = tmp_path / "lineages.duckdb"
    validator = ObservationValidator(ValidationPolicy(malformed_week=MalformedWeekStrategy.ABORT))

    with DuckDBRecordStore(db_path=db_path) as store:
        pipeline = IngestionPipeline(
            adapters=[WideRatioCsvAdapter(input_paths=data_dir)],
            validator=validator,
            storage=store,
        )
        with pytest.raises(MalformedDateError):
            pipeline.run()

        assert store.fetch([6, 7, 8]) == []
