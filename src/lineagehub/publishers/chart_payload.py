"""JSON chart payload publishers for the dashboard front end."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from lineagehub.config import DEFAULT_TOP_K
from lineagehub.errors import EmptyInputError
from lineagehub.matrix import build_matrix
from lineagehub.models import DominantLineage, Observation, WeekKey
from lineagehub.prefectures import ENGLISH_TO_JAPANESE
from lineagehub.publishers.base import Publisher
from lineagehub.ranking import dominant_lineages, rank_series
from lineagehub.selection import WaveSelection, all_selections, parse_wave
from lineagehub.service import LineageViewService, SelectionViews
from lineagehub.storage.memory import InMemoryRecordStore

logger = logging.getLogger(__name__)


def _selections(waves: Iterable[Any] | None) -> list[WaveSelection]:
    if waves is None:
        return all_selections()
    return [parse_wave(wave) for wave in waves]


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        json.dump(payload, stream, ensure_ascii=False, indent=2)


def _safe_name(name: str) -> str:
    return name.replace("/", "-")


def _dominant_payload(items: Sequence[DominantLineage]) -> list[dict[str, Any]]:
    return [
        {"week": item.week.render(), "lineage": item.lineage, "share": item.share}
        for item in items
    ]


class ChartPayloadPublisher(Publisher):
    """Write one ``<root>/<wave>/<Prefecture>.json`` per selection.

    Each payload carries the ratio series, the heatmap ``{x, y, z}`` and the
    rank series of the top lineages. Ratios and heatmap cells are multiplied
    by ``scale`` (percent by default). Ranks outside the window are ``null``
    unless ``overflow_rank`` gives a number to plot instead.

    With ``shared_week_axis`` every prefecture of a wave is plotted over the
    same weeks, the union across the wave; weeks without data for a
    prefecture become zero cells and ``null`` ranks.
    """

    def __init__(
        self,
        *,
        output_root: str | Path,
        waves: Iterable[Any] | None = None,
        top_k: int = DEFAULT_TOP_K,
        heatmap_top_k: int | None = None,
        scale: float = 100.0,
        overflow_rank: int | None = None,
        shared_week_axis: bool = True,
    ) -> None:
        self.output_root = Path(output_root)
        self.selections = _selections(waves)
        self.top_k = top_k
        self.heatmap_top_k = heatmap_top_k
        self.scale = scale
        self.overflow_rank = overflow_rank
        self.shared_week_axis = shared_week_axis
        self.written: list[Path] = []

    def publish(self, records: Sequence[Observation]) -> None:
        with InMemoryRecordStore(records) as store:
            service = LineageViewService(
                store,
                top_k=self.top_k,
                heatmap_top_k=self.heatmap_top_k,
            )
            for selection in self.selections:
                weeks: list[WeekKey] | None = None
                if self.shared_week_axis:
                    try:
                        weeks = service.wave_weeks(selection)
                    except EmptyInputError as exc:
                        logger.info("Skipping empty wave: %s", exc)
                        continue

                for prefecture in service.prefectures(selection):
                    try:
                        views = service.views(selection, prefecture)
                    except EmptyInputError as exc:
                        logger.info("Skipping empty selection: %s", exc)
                        continue

                    path = self.output_root / selection.label / f"{_safe_name(prefecture)}.json"
                    _write_json(path, self.build_payload(views, weeks))
                    self.written.append(path)

        logger.info("Wrote %d chart payload(s) under %s", len(self.written), self.output_root)

    def build_payload(
        self,
        views: SelectionViews,
        weeks: Sequence[WeekKey] | None = None,
    ) -> dict[str, Any]:
        axis = list(weeks) if weeks is not None else views.weeks
        labels = [week.render() for week in axis]
        scaled = build_matrix(views.shares, axis, views.lineages, scale=self.scale)

        return {
            "wave": views.selection.label,
            "prefecture": views.prefecture,
            "prefecture_ja": ENGLISH_TO_JAPANESE.get(views.prefecture),
            "weeks": labels,
            "ratio": [
                {"lineage": lineage, "values": row}
                for lineage, row in zip(views.lineages, scaled)
            ],
            "heatmap": {"x": labels, "y": list(views.lineages), "z": scaled},
            "rank": [
                {"lineage": lineage, "values": self._rank_values(views, axis, lineage)}
                for lineage in views.top_lineages
            ],
            "dominant": _dominant_payload(dominant_lineages(views.shares, axis)),
        }

    def _rank_values(
        self,
        views: SelectionViews,
        axis: Sequence[WeekKey],
        lineage: str,
    ) -> list[int | None]:
        values = rank_series(views.ranks, axis, lineage)
        if self.overflow_rank is None:
            return values
        return [self.overflow_rank if value is None else value for value in values]


class DominantLineageSummaryPublisher(Publisher):
    """Write ``<root>/<wave>/summary.json`` with each prefecture's dominant lineage."""

    def __init__(
        self,
        *,
        output_root: str | Path,
        waves: Iterable[Any] | None = None,
        file_name: str = "summary.json",
    ) -> None:
        self.output_root = Path(output_root)
        self.selections = _selections(waves)
        self.file_name = file_name
        self.written: list[Path] = []

    def publish(self, records: Sequence[Observation]) -> None:
        with InMemoryRecordStore(records) as store:
            service = LineageViewService(store)
            for selection in self.selections:
                try:
                    summary = service.summary(selection)
                except EmptyInputError as exc:
                    logger.info("Skipping empty summary: %s", exc)
                    continue

                payload = {
                    "wave": selection.label,
                    "weeks": [week.render() for week in summary.weeks],
                    "prefectures": {
                        prefecture: _dominant_payload(items)
                        for prefecture, items in summary.dominant.items()
                    },
                }
                path = self.output_root / selection.label / self.file_name
                _write_json(path, payload)
                self.written.append(path)
