"""Adapter for per-prefecture wide ratio tables (one column per lineage)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from lineagehub.adapters.base import ObservationAdapter
from lineagehub.adapters.common import TabularAdapterMixin, expand_input_paths, read_raw_table
from lineagehub.config import ValueScale
from lineagehub.models import RawObservation

logger = logging.getLogger(__name__)


class WideRatioCsvAdapter(ObservationAdapter, TabularAdapterMixin):
    """Read ``<Prefecture>.csv`` ratio tables into raw observations.

    Expected layout::

        date,week,BA.1,BA.2,...
        2022-01-07,6,60.5,30.1,...

    The prefecture comes from the file stem unless ``prefecture`` is given.
    ``wave_column`` holds the wave number (the historical exports call it
    ``week``); a fixed ``wave`` overrides it. Lineage headers may repeat; each
    column is emitted separately and summed during aggregation.
    """

    name = "wide_ratio_csv"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        prefecture: str | None = None,
        wave: int | None = None,
        date_column: str = "date",
        wave_column: str = "week",
        value_scale: ValueScale | str = ValueScale.PERCENT,
        source: str = "wide_ratio_csv",
    ) -> None:
        self.input_paths = expand_input_paths(input_paths)
        self.prefecture = prefecture
        self.wave = wave
        self.date_column = date_column
        self.wave_column = wave_column
        self.value_scale = ValueScale(value_scale)
        self.source = source

    def read(self) -> Iterable[RawObservation]:
        for input_path in self.input_paths:
            yield from self._read_file(input_path)

    def _read_file(self, input_path: Path) -> Iterable[RawObservation]:
        header, body = read_raw_table(input_path)

        if self.date_column not in header:
            raise ValueError(f"{input_path}: missing date column '{self.date_column}'")
        date_index = header.index(self.date_column)
        wave_index = header.index(self.wave_column) if self.wave_column in header else None
        if wave_index is None and self.wave is None:
            raise ValueError(
                f"{input_path}: missing wave column '{self.wave_column}' and no fixed wave given"
            )

        lineage_columns = [
            (index, name)
            for index, name in enumerate(header)
            if index not in (date_index, wave_index) and name
        ]
        divisor = self._resolve_divisor(
            self.value_scale,
            (cell for index, _ in lineage_columns for cell in body[index].tolist()),
        )
        prefecture = self.prefecture or self._prefecture_from_path(input_path)
        logger.debug(
            "%s: %d row(s), %d lineage column(s), divisor=%s",
            input_path.name,
            len(body),
            len(lineage_columns),
            divisor,
        )

        for row_number, row in enumerate(body.itertuples(index=False), start=2):
            cells = list(row)
            raw_week = cells[date_index]
            wave = self.wave if self.wave is not None else cells[wave_index]

            for index, lineage in lineage_columns:
                cell = cells[index]
                if self._to_string(cell) is None:
                    continue

                yield RawObservation(
                    prefecture=prefecture,
                    lineage=lineage,
                    raw_week=raw_week,
                    wave=wave,
                    value=self._scaled(cell, divisor),
                    source=self.source,
                    origin=f"{input_path.name}:{row_number}",
                )

    @staticmethod
    def _prefecture_from_path(input_path: Path) -> str:
        name = input_path.name
        for suffix in (".csv.gz", ".csv"):
            if name.lower().endswith(suffix):
                return name[: -len(suffix)]
        return input_path.stem
