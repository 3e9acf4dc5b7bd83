"""Shared utilities for tabular source adapters."""

from __future__ import annotations

import glob
import math
import os
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from lineagehub.config import ValueScale


def _is_csv_like(path: Path) -> bool:
    """Return True if the file looks like a CSV or compressed CSV."""

    name = path.name.lower()
    return name.endswith(".csv") or name.endswith(".csv.gz")


def expand_input_paths(input_paths: str | Path | Iterable[str | Path]) -> list[Path]:
    """Expand file, directory, or glob inputs into concrete CSV paths."""

    if isinstance(input_paths, (str, Path)):
        items: list[str | Path] = [input_paths]
    else:
        items = list(input_paths)

    resolved: list[Path] = []
    for item in items:
        expanded_item = os.path.expandvars(os.path.expanduser(str(item)))
        item_path = Path(expanded_item)

        if item_path.is_dir():
            resolved.extend(
                sorted(
                    path
                    for path in item_path.iterdir()
                    if path.is_file() and _is_csv_like(path)
                )
            )
            continue

        if item_path.exists():
            resolved.append(item_path)
            continue

        matches = [Path(path) for path in glob.glob(expanded_item)]
        resolved.extend(sorted(match for match in matches if _is_csv_like(match)))

    return resolved


def read_raw_table(path: Path) -> tuple[list[str], pd.DataFrame]:
    """Read a CSV as strings, keeping duplicate header names intact.

    ``pandas`` renames repeated headers (``BA.1`` becomes ``BA.1.1``, itself a
    real lineage name), so the header row is read as data and returned
    separately. Columns of the returned frame are positional.
    """

    frame = pd.read_csv(
        path,
        header=None,
        dtype=str,
        keep_default_na=False,
        compression="infer",
        encoding="utf-8-sig",
    )
    header = [str(value).strip() for value in frame.iloc[0].tolist()]
    body = frame.iloc[1:].reset_index(drop=True)
    return header, body


class TabularAdapterMixin:
    """Common conversions for CSV-based source adapters."""

    @staticmethod
    def _to_string(value: Any) -> str | None:
        if value is None or pd.isna(value):
            return None

        cleaned = str(value).strip()
        if not cleaned or cleaned.lower() in {"nan", "none", "null", "na"}:
            return None

        return cleaned

    @staticmethod
    def _to_float(value: Any) -> float | None:
        if value is None or pd.isna(value):
            return None

        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return number

    @classmethod
    def _resolve_divisor(cls, scale: ValueScale, cells: Iterable[Any]) -> float:
        """Divisor that turns raw cells into fractions.

        ``AUTO`` treats a table as percentages as soon as one cell exceeds 1.
        """

        if scale is ValueScale.PERCENT:
            return 100.0
        if scale is ValueScale.FRACTION:
            return 1.0

        for cell in cells:
            number = cls._to_float(cell)
            if number is not None and number > 1:
                return 100.0
        return 1.0

    @classmethod
    def _scaled(cls, cell: Any, divisor: float) -> Any:
        """Scaled float, or the raw text when it does not parse (left to validation)."""

        number = cls._to_float(cell)
        if number is None:
            return cell
        return number / divisor
