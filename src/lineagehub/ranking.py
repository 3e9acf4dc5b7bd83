"""Per-week lineage ranking with explicit tie-break and gap handling.

Ties in share are broken by lineage name ascending. ``compare_ranks`` reports
where that ordering disagrees with a historical rank table.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from lineagehub.config import DEFAULT_TOP_K
from lineagehub.models import DominantLineage, RankEntry, RankMismatch, WeekKey

Ranks = dict[WeekKey, dict[str, int | None]]


def lineage_frequencies(shares: Mapping[WeekKey, Mapping[str, float]]) -> Counter[str]:
    """Number of weeks in which each lineage has a nonzero share."""

    frequencies: Counter[str] = Counter()
    for week_shares in shares.values():
        for lineage, share in week_shares.items():
            if share > 0:
                frequencies[lineage] += 1
    return frequencies


def select_top_lineages(shares: Mapping[WeekKey, Mapping[str, float]], k: int) -> list[str]:
    """Return the ``k`` most frequently observed lineages.

    Sorted by frequency descending, then lineage name ascending.
    """

    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")

    frequencies = lineage_frequencies(shares)
    ordered = sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))
    return [lineage for lineage, _ in ordered[:k]]


def build_ranks(
    shares: Mapping[WeekKey, Mapping[str, float]],
    top_k: int | None = DEFAULT_TOP_K,
    *,
    lineages: Sequence[str] | None = None,
) -> Ranks:
    """Rank the restricted lineage set within every week.

    The restricted set is ``lineages`` when given, otherwise the ``top_k``
    most frequent lineages, or every lineage when ``top_k`` is ``None``.
    Every restricted lineage appears in every week's mapping; those without
    a share that week map to ``None``. Ranks present in a week are exactly
    ``1..N``.
    """

    if lineages is not None:
        restricted = list(dict.fromkeys(lineages))
    elif top_k is None:
        restricted = sorted(lineage_frequencies(shares))
    else:
        restricted = select_top_lineages(shares, top_k)

    ranks: Ranks = {}
    for week in sorted(shares):
        week_shares = shares[week]
        present = [
            lineage
            for lineage in restricted
            if week_shares.get(lineage, 0.0) > 0
        ]
        present.sort(key=lambda lineage: (-week_shares[lineage], lineage))

        week_ranks: dict[str, int | None] = {lineage: None for lineage in restricted}
        for position, lineage in enumerate(present, start=1):
            week_ranks[lineage] = position
        ranks[week] = week_ranks

    return ranks


def rank_entries(
    ranks: Mapping[WeekKey, Mapping[str, int | None]],
    *,
    overflow_rank: int | None = None,
) -> list[RankEntry]:
    """Flatten ranks; ``overflow_rank`` replaces ``None`` when a chart needs a number."""

    entries: list[RankEntry] = []
    for week in sorted(ranks):
        for lineage, rank in ranks[week].items():
            entries.append(
                RankEntry(
                    week=week,
                    lineage=lineage,
                    rank=overflow_rank if rank is None else rank,
                )
            )
    return entries


def rank_series(
    ranks: Mapping[WeekKey, Mapping[str, int | None]],
    week_order: Sequence[WeekKey],
    lineage: str,
) -> list[int | None]:
    return [ranks.get(week, {}).get(lineage) for week in week_order]


def dominant_lineages(
    shares: Mapping[WeekKey, Mapping[str, float]],
    week_order: Iterable[WeekKey] | None = None,
) -> list[DominantLineage]:
    """Top lineage of every week; weeks without shares yield ``lineage=None``."""

    weeks = sorted(shares) if week_order is None else list(week_order)
    summary: list[DominantLineage] = []
    for week in weeks:
        week_shares = shares.get(week)
        if not week_shares:
            summary.append(DominantLineage(week=week, lineage=None, share=0.0))
            continue

        lineage, share = min(week_shares.items(), key=lambda item: (-item[1], item[0]))
        summary.append(DominantLineage(week=week, lineage=lineage, share=share))
    return summary


def compare_ranks(
    computed: Mapping[WeekKey, Mapping[str, int | None]],
    reference: Mapping[WeekKey, Mapping[str, int | None]],
) -> list[RankMismatch]:
    """List every (week, lineage) where two rank tables disagree.

    Only weeks and lineages present in both tables are compared.
    """

    mismatches: list[RankMismatch] = []
    for week in sorted(set(computed) & set(reference)):
        ours = computed[week]
        theirs = reference[week]
        for lineage in sorted(set(ours) & set(theirs)):
            if ours[lineage] != theirs[lineage]:
                mismatches.append(
                    RankMismatch(
                        week=week,
                        lineage=lineage,
                        computed=ours[lineage],
                        reference=theirs[lineage],
                    )
                )
    return mismatches
