#!/usr/bin/env python3
"""Run configurable LineageHub ingestion pipelines via adapter registry."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from lineagehub import (  # noqa: E402
    IngestionPipeline,
    ObservationValidator,
    ValidationPolicy,
    build_default_adapter_registry,
    load_ingestion_config,
)
from lineagehub.adapters import ObservationAdapter  # noqa: E402
from lineagehub.errors import LineageHubError  # noqa: E402
from lineagehub.publishers import (  # noqa: E402
    ChartPayloadPublisher,
    DominantLineageSummaryPublisher,
    Publisher,
)
from lineagehub.storage import DuckDBRecordStore, RecordStore  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run LineageHub ingestion from JSON config")
    parser.add_argument("--config", required=True, help="Path to ingestion JSON config")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Runner log level.",
    )
    parser.add_argument(
        "--show-issues",
        type=int,
        default=0,
        help="Include up to N validation issues in the printed report.",
    )
    return parser.parse_args(argv)


def build_publishers(config: dict[str, Any]) -> list[Publisher]:
    publishers: list[Publisher] = []
    for item in config.get("publishers", []):
        name = str(item["name"]).strip().lower()
        params = dict(item.get("params", {}))

        if name == "chart_payload":
            publishers.append(ChartPayloadPublisher(**params))
        elif name == "dominant_summary":
            publishers.append(DominantLineageSummaryPublisher(**params))
        else:
            raise ValueError(f"Unknown publisher: {name}")

    return publishers


def build_adapters(config: dict[str, Any]) -> list[ObservationAdapter]:
    registry = build_default_adapter_registry(config.get("plugins", []))
    return registry.create_all(config.get("adapters", []))


def build_storage(config: dict[str, Any]) -> RecordStore | None:
    storage_config = config.get("storage")
    if not storage_config:
        return None

    storage_type = str(storage_config.get("type", "")).strip().lower()
    params = dict(storage_config.get("params", {}))

    if storage_type == "duckdb":
        return DuckDBRecordStore(**params)

    raise ValueError(f"Unknown storage type: {storage_type}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("lineagehub.ingestion.runner")

    try:
        config = load_ingestion_config(args.config)
        adapters = build_adapters(config)
    except LineageHubError as exc:
        logger.error("%s", exc)
        return 2

    validator = ObservationValidator(ValidationPolicy.from_dict(config.get("validation")))
    storage = build_storage(config)

    try:
        report = IngestionPipeline(
            adapters=adapters,
            validator=validator,
            storage=storage,
            publishers=build_publishers(config),
        ).run()
    except LineageHubError as exc:
        logger.error("Ingestion aborted: %s", exc)
        return 1
    finally:
        if storage is not None:
            storage.close()

    logger.info(
        "Ingested %d row(s), kept %d, dropped %d",
        report.ingested_records,
        report.validated_records,
        report.dropped_records,
    )

    payload: dict[str, Any] = {
        "adapter_count": report.adapter_count,
        "ingested_records": report.ingested_records,
        "validated_records": report.validated_records,
        "dropped_records": report.dropped_records,
        "issues": len(report.issues),
    }
    if args.show_issues > 0:
        payload["issue_samples"] = [asdict(issue) for issue in report.issues[: args.show_issues]]
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
