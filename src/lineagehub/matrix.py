"""Dense lineage x week matrices for heatmap rendering."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import pandas as pd

from lineagehub.models import HeatCell, WeekKey
from lineagehub.ranking import lineage_frequencies, select_top_lineages


def ordered_weeks(shares: Mapping[WeekKey, Mapping[str, float]]) -> list[WeekKey]:
    """All weeks present in the selection, numerically ordered."""

    return sorted(shares)


def ordered_lineages(
    shares: Mapping[WeekKey, Mapping[str, float]],
    k: int | None = None,
) -> list[str]:
    """Lineages ordered by observation frequency; all of them unless ``k`` is set."""

    if k is None:
        k = len(lineage_frequencies(shares))
    return select_top_lineages(shares, k)


def build_matrix(
    shares: Mapping[WeekKey, Mapping[str, float]],
    week_order: Sequence[WeekKey],
    lineage_order: Sequence[str],
    *,
    scale: float = 1.0,
) -> list[list[float]]:
    """Return ``matrix[lineage][week]``, zero-filled where a share is absent.

    The result always has ``len(lineage_order)`` rows of ``len(week_order)``
    cells. ``scale=100`` yields percentages.
    """

    matrix: list[list[float]] = []
    for lineage in lineage_order:
        row = []
        for week in week_order:
            share = shares.get(week, {}).get(lineage, 0.0)
            row.append(share * scale)
        matrix.append(row)
    return matrix


def build_heat_cells(
    shares: Mapping[WeekKey, Mapping[str, float]],
    week_order: Sequence[WeekKey],
    lineage_order: Sequence[str],
    *,
    scale: float = 1.0,
) -> list[HeatCell]:
    matrix = build_matrix(shares, week_order, lineage_order, scale=scale)
    return [
        HeatCell(lineage=lineage, week=week, value=value)
        for lineage, row in zip(lineage_order, matrix)
        for week, value in zip(week_order, row)
    ]


def matrix_frame(
    shares: Mapping[WeekKey, Mapping[str, float]],
    week_order: Sequence[WeekKey],
    lineage_order: Sequence[str],
    *,
    scale: float = 1.0,
) -> pd.DataFrame:
    """Matrix as a frame indexed by lineage with canonical week columns."""

    return pd.DataFrame(
        build_matrix(shares, week_order, lineage_order, scale=scale),
        index=pd.Index(list(lineage_order), name="lineage"),
        columns=[week.render() for week in week_order],
        dtype="float64",
    )
