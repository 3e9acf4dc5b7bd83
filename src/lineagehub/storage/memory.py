"""In-process record store."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from lineagehub.models import Observation, RawObservation
from lineagehub.storage.base import RecordStore


class InMemoryRecordStore(RecordStore):
    """Keep observations in a list; used by publishers and tests."""

    def __init__(self, records: Iterable[Observation] | None = None) -> None:
        self._records: list[Observation] = list(records or [])

    def persist(self, records: Sequence[Observation]) -> None:
        self._records.extend(records)

    def fetch(self, waves: Sequence[int], prefecture: str | None = None) -> list[RawObservation]:
        wanted = set(waves)
        return [
            RawObservation(
                prefecture=record.prefecture,
                lineage=record.lineage,
                raw_week=record.week.render(),
                wave=record.wave,
                value=record.value,
                source=record.source,
            )
            for record in self._records
            if record.wave in wanted and (prefecture is None or record.prefecture == prefecture)
        ]
