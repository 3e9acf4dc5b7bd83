"""Query service producing the derived views for a (wave, prefecture) selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from lineagehub.aggregation import Shares, aggregate, aggregate_by_prefecture
from lineagehub.config import DEFAULT_TOP_K, MalformedWeekStrategy
from lineagehub.errors import EmptyInputError
from lineagehub.matrix import build_matrix, ordered_lineages, ordered_weeks
from lineagehub.models import DominantLineage, WeekKey
from lineagehub.prefectures import is_known_prefecture, resolve_prefecture
from lineagehub.ranking import Ranks, build_ranks, dominant_lineages, select_top_lineages
from lineagehub.selection import WaveSelection, parse_wave
from lineagehub.storage.base import RecordStore
from lineagehub.weeks import canonicalize

logger = logging.getLogger(__name__)


def _week_union(per_prefecture: dict[str, Shares]) -> list[WeekKey]:
    return sorted({week for shares in per_prefecture.values() for week in shares})


@dataclass(frozen=True)
class SelectionViews:
    """Every derived view for one selection, computed from the same shares."""

    selection: WaveSelection
    prefecture: str
    shares: Shares
    weeks: list[WeekKey]
    lineages: list[str]
    matrix: list[list[float]]
    top_lineages: list[str]
    ranks: Ranks
    dominant: list[DominantLineage]


@dataclass(frozen=True)
class PrefectureSummary:
    """Dominant lineage per week for every prefecture of a wave selection."""

    selection: WaveSelection
    weeks: list[WeekKey]
    dominant: dict[str, list[DominantLineage]] = field(default_factory=dict)


class LineageViewService:
    """Answer dashboard queries against a record store.

    The store is owned by the caller; the service never opens or closes it.
    Views are memoized per ``(waves, prefecture)`` when ``cache`` is set.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        top_k: int = DEFAULT_TOP_K,
        heatmap_top_k: int | None = None,
        malformed_week: MalformedWeekStrategy | str = MalformedWeekStrategy.ABORT,
        cache: bool = True,
    ) -> None:
        self.store = store
        self.top_k = top_k
        self.heatmap_top_k = heatmap_top_k
        self.malformed_week = MalformedWeekStrategy(malformed_week)
        self.cache = cache
        self._views: dict[tuple[tuple[int, ...], str], SelectionViews] = {}
        self._wave_weeks: dict[tuple[int, ...], list[WeekKey]] = {}

    def views(self, wave: Any, prefecture: str) -> SelectionViews:
        """Shares, heatmap matrix and ranks for one prefecture and wave selection.

        Raises ``EmptyInputError`` when the store holds no usable rows for the
        selection; callers render that as an empty state.
        """

        selection = parse_wave(wave)
        name = self._prefecture_name(prefecture)
        cache_key = (selection.waves, name)
        if self.cache and cache_key in self._views:
            return self._views[cache_key]

        shares = self._shares(selection, name)
        weeks = ordered_weeks(shares)
        lineages = ordered_lineages(shares, self.heatmap_top_k)
        top_lineages = select_top_lineages(shares, self.top_k)

        result = SelectionViews(
            selection=selection,
            prefecture=name,
            shares=shares,
            weeks=weeks,
            lineages=lineages,
            matrix=build_matrix(shares, weeks, lineages),
            top_lineages=top_lineages,
            ranks=build_ranks(shares, lineages=top_lineages),
            dominant=dominant_lineages(shares, weeks),
        )
        if self.cache:
            self._views[cache_key] = result
        return result

    def summary(self, wave: Any) -> PrefectureSummary:
        """Dominant lineage of each week for all prefectures of ``wave``."""

        selection = parse_wave(wave)
        per_prefecture = self._per_prefecture(selection)
        weeks = _week_union(per_prefecture)
        return PrefectureSummary(
            selection=selection,
            weeks=weeks,
            dominant={
                prefecture: dominant_lineages(shares, weeks)
                for prefecture, shares in per_prefecture.items()
            },
        )

    def wave_weeks(self, wave: Any) -> list[WeekKey]:
        """Sorted union of the weeks with data across every prefecture of ``wave``.

        Publishers use it as a shared x axis so that heatmaps of different
        prefectures line up column for column.
        """

        selection = parse_wave(wave)
        if self.cache and selection.waves in self._wave_weeks:
            return self._wave_weeks[selection.waves]

        weeks = _week_union(self._per_prefecture(selection))
        if self.cache:
            self._wave_weeks[selection.waves] = weeks
        return weeks

    def prefectures(self, wave: Any) -> list[str]:
        return self.store.prefectures(parse_wave(wave).waves)

    def clear_cache(self) -> None:
        self._views.clear()
        self._wave_weeks.clear()

    def _per_prefecture(self, selection: WaveSelection) -> dict[str, Shares]:
        observations = canonicalize(self.store.fetch(selection.waves), self.malformed_week)
        if not observations:
            raise EmptyInputError(f"No observations for wave {selection.label}")
        return aggregate_by_prefecture(observations)

    def _shares(self, selection: WaveSelection, prefecture: str) -> Shares:
        rows = self.store.fetch(selection.waves, prefecture)
        observations = canonicalize(rows, self.malformed_week)
        logger.debug(
            "Selection %s/%s: %d stored row(s), %d observation(s)",
            selection.label,
            prefecture,
            len(rows),
            len(observations),
        )
        try:
            return aggregate(observations)
        except EmptyInputError as exc:
            raise EmptyInputError(
                f"No observations for prefecture {prefecture!r} in wave {selection.label}"
            ) from exc

    @staticmethod
    def _prefecture_name(prefecture: str) -> str:
        if is_known_prefecture(prefecture):
            return resolve_prefecture(prefecture)
        return prefecture.strip()
