#!/usr/bin/env python3
"""Print the derived views of one (wave, prefecture) selection as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from lineagehub import LineageViewService, MalformedWeekStrategy  # noqa: E402
from lineagehub.errors import EmptyInputError, LineageHubError  # noqa: E402
from lineagehub.storage import DuckDBRecordStore  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect lineage views for one selection")
    parser.add_argument("--db", required=True, help="DuckDB database written by run_ingestion.py")
    parser.add_argument("--table", default="observations", help="Observation table name")
    parser.add_argument("--wave", default="6-8", help="Wave 6, 7, 8 or 6-8 for the union")
    parser.add_argument("--prefecture", required=True, help="Prefecture name (English or Japanese)")
    parser.add_argument("--top-k", type=int, default=10, help="Rank window size")
    parser.add_argument(
        "--malformed-week",
        default=MalformedWeekStrategy.ABORT.value,
        choices=[item.value for item in MalformedWeekStrategy],
        help="Handling of stored rows whose week cannot be normalized.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Runner log level.",
    )
    return parser.parse_args(argv)


def views_payload(service: LineageViewService, wave: str, prefecture: str) -> dict[str, Any]:
    views = service.views(wave, prefecture)
    weeks = [week.render() for week in views.weeks]
    return {
        "wave": views.selection.label,
        "prefecture": views.prefecture,
        "weeks": weeks,
        "shares": {
            week.render(): dict(views.shares[week])
            for week in views.weeks
        },
        "heatmap": {"x": weeks, "y": views.lineages, "z": views.matrix},
        "top_lineages": views.top_lineages,
        "ranks": {
            week.render(): dict(views.ranks[week])
            for week in views.weeks
        },
        "dominant": [
            {"week": item.week.render(), "lineage": item.lineage, "share": item.share}
            for item in views.dominant
        ],
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("lineagehub.inspect")

    with DuckDBRecordStore(db_path=args.db, table_name=args.table, read_only=True) as store:
        service = LineageViewService(
            store,
            top_k=args.top_k,
            malformed_week=args.malformed_week,
        )
        try:
            payload = views_payload(service, args.wave, args.prefecture)
        except EmptyInputError as exc:
            print(f"No data: {exc}", file=sys.stderr)
            return 1
        except LineageHubError as exc:
            logger.error("%s", exc)
            return 2

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
