"""Composable LineageHub ingestion orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lineagehub.adapters.base import ObservationAdapter
from lineagehub.models import RawObservation
from lineagehub.publishers.base import Publisher
from lineagehub.quality import ObservationValidator, ValidationIssue
from lineagehub.storage.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class IngestionReport:
    """Execution summary for an ingestion run."""

    adapter_count: int
    ingested_records: int
    validated_records: int
    dropped_records: int
    issues: list[ValidationIssue] = field(default_factory=list)


class IngestionPipeline:
    """Run adapters, validation, storage and publication in order."""

    def __init__(
        self,
        *,
        adapters: list[ObservationAdapter],
        validator: ObservationValidator | None = None,
        storage: RecordStore | None = None,
        publishers: list[Publisher] | None = None,
    ) -> None:
        self.adapters = adapters
        self.validator = validator or ObservationValidator()
        self.storage = storage
        self.publishers = publishers or []

    def run(self) -> IngestionReport:
        rows: list[RawObservation] = []

        for adapter in self.adapters:
            adapter_rows = list(adapter.read())
            logger.info("Adapter %s produced %d row(s)", adapter.name, len(adapter_rows))
            rows.extend(adapter_rows)

        validation = self.validator.validate(rows)
        valid_records = validation.records

        if self.storage is not None:
            self.storage.persist(valid_records)

        for publisher in self.publishers:
            publisher.publish(valid_records)

        return IngestionReport(
            adapter_count=len(self.adapters),
            ingested_records=len(rows),
            validated_records=len(valid_records),
            dropped_records=validation.dropped,
            issues=validation.issues,
        )
