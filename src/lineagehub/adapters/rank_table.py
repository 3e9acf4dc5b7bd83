"""Reader for historical ``Rank_lineage_<Prefecture>_<wave>.csv`` tables."""

from __future__ import annotations

import re
from pathlib import Path

from lineagehub.adapters.common import TabularAdapterMixin, read_raw_table
from lineagehub.errors import MalformedDateError
from lineagehub.models import WeekKey
from lineagehub.prefectures import resolve_prefecture
from lineagehub.weeks import normalize

_RANK_FILE_RE = re.compile(r"Rank_lineage_([^_]+)_")


def prefecture_from_rank_filename(file_name: str) -> str | None:
    """Canonical prefecture encoded in a rank table file name, if any."""

    match = _RANK_FILE_RE.search(Path(file_name).name)
    if not match:
        return None
    return resolve_prefecture(match.group(1))


def read_rank_table(path: str | Path) -> dict[WeekKey, dict[str, int | None]]:
    """Read a lineage x week rank table.

    The first column holds lineage names and every header containing ``/`` is
    a week. Blank, non-numeric and non-finite cells become ``None``. Non-week
    headers are ignored.
    """

    header, body = read_raw_table(Path(path))
    week_columns: list[tuple[int, WeekKey]] = []
    for index, name in enumerate(header[1:], start=1):
        if "/" not in name:
            continue
        try:
            week_columns.append((index, normalize(name)))
        except MalformedDateError:
            continue

    table: dict[WeekKey, dict[str, int | None]] = {week: {} for _, week in week_columns}
    for row in body.itertuples(index=False):
        cells = list(row)
        lineage = TabularAdapterMixin._to_string(cells[0])
        if lineage is None:
            continue

        for index, week in week_columns:
            number = TabularAdapterMixin._to_float(cells[index])
            table[week][lineage] = int(number) if number is not None else None

    return {week: table[week] for week in sorted(table)}
