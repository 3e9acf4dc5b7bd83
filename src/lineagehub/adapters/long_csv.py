"""Adapter for long-form observation CSV files (one row per observation)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from lineagehub.adapters.base import ObservationAdapter
from lineagehub.adapters.common import TabularAdapterMixin, expand_input_paths
from lineagehub.config import ValueScale
from lineagehub.models import RawObservation

DEFAULT_COLUMNS: dict[str, str] = {
    "prefecture": "prefecture",
    "lineage": "lineage",
    "week": "week",
    "wave": "wave",
    "value": "value",
}


class LongObservationCsvAdapter(ObservationAdapter, TabularAdapterMixin):
    """Read ``prefecture, lineage, week, wave, value`` rows.

    ``columns`` maps the logical field names above onto the file's headers.
    ``prefecture`` and ``wave`` may be fixed when the file lacks those columns.
    """

    name = "long_observation_csv"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        columns: Mapping[str, str] | None = None,
        prefecture: str | None = None,
        wave: int | None = None,
        value_scale: ValueScale | str = ValueScale.FRACTION,
        source: str = "long_observation_csv",
        chunksize: int = 100_000,
    ) -> None:
        self.input_paths = expand_input_paths(input_paths)
        self.columns = {**DEFAULT_COLUMNS, **dict(columns or {})}
        self.prefecture = prefecture
        self.wave = wave
        self.value_scale = ValueScale(value_scale)
        self.source = source
        self.chunksize = chunksize

    def read(self) -> Iterable[RawObservation]:
        for input_path in self.input_paths:
            divisor = self._divisor_for(input_path)
            frame_iter = pd.read_csv(
                input_path,
                dtype=str,
                keep_default_na=False,
                chunksize=self.chunksize,
                compression="infer",
                encoding="utf-8-sig",
            )

            row_number = 1
            for frame in frame_iter:
                for row in frame.to_dict(orient="records"):
                    row_number += 1
                    yield RawObservation(
                        prefecture=self.prefecture or row.get(self.columns["prefecture"]),
                        lineage=row.get(self.columns["lineage"]),
                        raw_week=row.get(self.columns["week"]),
                        wave=self.wave if self.wave is not None else row.get(self.columns["wave"]),
                        value=self._scaled(row.get(self.columns["value"]), divisor),
                        source=self.source,
                        origin=f"{input_path.name}:{row_number}",
                    )

    def _divisor_for(self, input_path: Path) -> float:
        if self.value_scale is not ValueScale.AUTO:
            return self._resolve_divisor(self.value_scale, ())

        value_column = self.columns["value"]
        frame = pd.read_csv(
            input_path,
            dtype=str,
            keep_default_na=False,
            usecols=lambda column: column == value_column,
            compression="infer",
            encoding="utf-8-sig",
        )
        cells = frame[value_column].tolist() if value_column in frame.columns else []
        return self._resolve_divisor(self.value_scale, cells)
