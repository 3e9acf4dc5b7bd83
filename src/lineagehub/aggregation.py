"""Per-week lineage share aggregation."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

import pandas as pd

from lineagehub.errors import EmptyInputError
from lineagehub.models import LineageShare, Observation, WeekKey
from lineagehub.weeks import normalize

Shares = dict[WeekKey, dict[str, float]]


def aggregate(observations: Sequence[Observation]) -> Shares:
    """Group observations by week and renormalize lineage shares.

    Raw values for the same lineage and week are summed, then divided by the
    week total so that every emitted week sums to 1.0. Weeks whose total is
    zero are left out entirely rather than emitted with zero shares, and
    lineages with no contribution in a week get no entry for that week.
    Non-finite values (NaN, infinity) contribute nothing.

    Raises ``EmptyInputError`` when ``observations`` is empty.
    """

    if len(observations) == 0:
        raise EmptyInputError("Cannot aggregate an empty observation sequence")

    contributions: dict[WeekKey, dict[str, list[float]]] = defaultdict(lambda: defaultdict(list))
    for observation in observations:
        week = normalize(observation.week)
        value = float(observation.value)
        if not math.isfinite(value):
            continue
        contributions[week][observation.lineage].append(value)

    shares: Shares = {}
    for week in sorted(contributions):
        sums = {
            lineage: math.fsum(values)
            for lineage, values in sorted(contributions[week].items())
        }
        week_total = math.fsum(sums.values())
        if week_total <= 0:
            continue

        shares[week] = {
            lineage: value / week_total
            for lineage, value in sums.items()
            if value != 0
        }

    return shares


def aggregate_by_prefecture(observations: Iterable[Observation]) -> dict[str, Shares]:
    """Run ``aggregate`` independently for each prefecture, sorted by name."""

    grouped: dict[str, list[Observation]] = defaultdict(list)
    for observation in observations:
        grouped[observation.prefecture].append(observation)

    if not grouped:
        raise EmptyInputError("Cannot aggregate an empty observation sequence")

    return {prefecture: aggregate(grouped[prefecture]) for prefecture in sorted(grouped)}


def to_lineage_shares(shares: Mapping[WeekKey, Mapping[str, float]]) -> list[LineageShare]:
    return [
        LineageShare(week=week, lineage=lineage, share=share)
        for week in sorted(shares)
        for lineage, share in sorted(shares[week].items())
    ]


def week_totals(shares: Mapping[WeekKey, Mapping[str, float]]) -> dict[WeekKey, float]:
    """Sum of shares per week; 1.0 up to floating tolerance by construction."""

    return {week: math.fsum(shares[week].values()) for week in sorted(shares)}


def shares_frame(shares: Mapping[WeekKey, Mapping[str, float]]) -> pd.DataFrame:
    """Long-form frame with ``week``, ``year``, ``week_number``, ``lineage``, ``share``."""

    rows = [
        {
            "week": item.week.render(),
            "year": item.week.year,
            "week_number": item.week.week,
            "lineage": item.lineage,
            "share": item.share,
        }
        for item in to_lineage_shares(shares)
    ]
    return pd.DataFrame(rows, columns=["week", "year", "week_number", "lineage", "share"])
