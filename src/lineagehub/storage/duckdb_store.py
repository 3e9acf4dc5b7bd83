"""DuckDB (+ optional Parquet export) record store."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

import duckdb
import pandas as pd

from lineagehub.models import Observation, RawObservation
from lineagehub.storage.base import RecordStore

logger = logging.getLogger(__name__)

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

COLUMNS: tuple[str, ...] = (
    "prefecture",
    "lineage",
    "week",
    "iso_year",
    "iso_week",
    "wave",
    "value",
    "source",
)


class DuckDBRecordStore(RecordStore):
    """Persist observations in a DuckDB table, optionally mirrored to Parquet.

    ``mode="replace"`` rebuilds the table on every ``persist``; ``"append"``
    adds to it. The connection is opened on first use and released by
    ``close()``.
    """

    def __init__(
        self,
        *,
        db_path: str | Path,
        parquet_path: str | Path | None = None,
        table_name: str = "observations",
        mode: str = "replace",
        read_only: bool = False,
    ) -> None:
        if not _TABLE_RE.match(table_name):
            raise ValueError(f"Unsafe table name: {table_name}")
        if mode not in {"replace", "append"}:
            raise ValueError(f"Unknown storage mode: {mode}")

        self.db_path = Path(db_path)
        self.parquet_path = Path(parquet_path) if parquet_path is not None else None
        self.table_name = table_name
        self.mode = mode
        self.read_only = read_only
        self._connection: duckdb.DuckDBPyConnection | None = None

    def open(self) -> DuckDBRecordStore:
        self._connect()
        return self

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> DuckDBRecordStore:
        return self.open()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        return self._connect()

    def _connect(self) -> duckdb.DuckDBPyConnection:
        if self._connection is None:
            if not self.read_only:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = duckdb.connect(str(self.db_path), read_only=self.read_only)
        return self._connection

    def persist(self, records: Sequence[Observation]) -> None:
        if not records:
            return

        frame = pd.DataFrame([record.to_row() for record in records], columns=list(COLUMNS))
        connection = self.connection
        connection.register("observation_frame", frame)
        try:
            if self.mode == "replace" or not self._table_exists():
                connection.execute(
                    f"CREATE OR REPLACE TABLE {self.table_name} AS SELECT * FROM observation_frame"
                )
            else:
                connection.execute(
                    f"INSERT INTO {self.table_name} ({', '.join(COLUMNS)}) "
                    f"SELECT {', '.join(COLUMNS)} FROM observation_frame"
                )
        finally:
            connection.unregister("observation_frame")

        logger.info("Persisted %d observation(s) to %s:%s", len(records), self.db_path, self.table_name)

        if self.parquet_path is not None:
            self._export_parquet(self.parquet_path)

    def fetch(self, waves: Sequence[int], prefecture: str | None = None) -> list[RawObservation]:
        if not waves or not self._table_exists():
            return []

        placeholders = ", ".join("?" for _ in waves)
        query = (
            f"SELECT prefecture, lineage, week, wave, value, source FROM {self.table_name} "
            f"WHERE wave IN ({placeholders})"
        )
        params: list[object] = [int(wave) for wave in waves]
        if prefecture is not None:
            query += " AND prefecture = ?"
            params.append(prefecture)
        query += " ORDER BY iso_year, iso_week, prefecture, lineage, wave, value"

        frame = self.connection.execute(query, params).fetchdf()
        return [
            RawObservation(
                prefecture=row.prefecture,
                lineage=row.lineage,
                raw_week=row.week,
                wave=int(row.wave),
                value=float(row.value),
                source=row.source or "",
            )
            for row in frame.itertuples(index=False)
        ]

    def prefectures(self, waves: Sequence[int]) -> list[str]:
        if not waves or not self._table_exists():
            return []

        placeholders = ", ".join("?" for _ in waves)
        rows = self.connection.execute(
            f"SELECT DISTINCT prefecture FROM {self.table_name} "
            f"WHERE wave IN ({placeholders}) ORDER BY prefecture",
            [int(wave) for wave in waves],
        ).fetchall()
        return [row[0] for row in rows]

    def _table_exists(self) -> bool:
        row = self.connection.execute(
            "SELECT count(*) FROM information_schema.tables WHERE table_name = ?",
            [self.table_name],
        ).fetchone()
        return bool(row and row[0])

    def _export_parquet(self, parquet_path: Path) -> None:
        parquet_path.parent.mkdir(parents=True, exist_ok=True)
        if parquet_path.exists():
            parquet_path.unlink()

        parquet_target = parquet_path.as_posix().replace("'", "''")
        self.connection.execute(
            f"COPY {self.table_name} TO '{parquet_target}' (FORMAT PARQUET)"
        )
