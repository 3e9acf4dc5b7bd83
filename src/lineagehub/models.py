"""Canonical in-memory data models used by LineageHub."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, order=True)
class WeekKey:
    """Canonical ``(year, week)`` identifier.

    Ordering is the dataclass field order, so comparison is numeric on
    ``(year, week)`` and never on the rendered string.
    """

    year: int
    week: int

    def render(self) -> str:
        """Canonical ``YYYY/W`` rendering (year four digits, week not padded)."""

        return f"{self.year:04d}/{self.week}"

    @property
    def label(self) -> str:
        """Display rendering with the week padded to two digits."""

        return f"{self.year:04d}/{self.week:02d}"

    def __str__(self) -> str:
        return self.render()


@dataclass
class RawObservation:
    """Observation as read by an adapter, before week and value validation."""

    prefecture: str | None
    lineage: str | None
    raw_week: Any
    wave: Any
    value: Any
    source: str = ""
    origin: str = ""

    def key(self) -> tuple[str, str, str]:
        """Best-effort identity used in validation issues."""

        return (str(self.prefecture), str(self.lineage), str(self.raw_week))


@dataclass
class Observation:
    """Single validated lineage share observation.

    ``value`` is a fraction of sequenced samples. Several observations may
    share the same ``(prefecture, lineage, week)``; they are additive.
    """

    prefecture: str
    lineage: str
    week: WeekKey
    wave: int
    value: float
    source: str = ""

    def key(self) -> tuple[str, str, WeekKey, int]:
        return (self.prefecture, self.lineage, self.week, self.wave)

    def to_row(self) -> dict[str, Any]:
        """Serialize into a plain dict for storage backends."""

        return {
            "prefecture": self.prefecture,
            "lineage": self.lineage,
            "week": self.week.render(),
            "iso_year": self.week.year,
            "iso_week": self.week.week,
            "wave": self.wave,
            "value": self.value,
            "source": self.source,
        }


@dataclass(frozen=True)
class LineageShare:
    week: WeekKey
    lineage: str
    share: float


@dataclass(frozen=True)
class RankEntry:
    """Rank of a lineage in a week; ``rank`` is ``None`` when absent."""

    week: WeekKey
    lineage: str
    rank: int | None


@dataclass(frozen=True)
class HeatCell:
    lineage: str
    week: WeekKey
    value: float


@dataclass(frozen=True)
class DominantLineage:
    """Most abundant lineage of a week, ``lineage`` is ``None`` for empty weeks."""

    week: WeekKey
    lineage: str | None
    share: float


@dataclass(frozen=True)
class RankMismatch:
    """Disagreement between a computed rank and a historical rank table."""

    week: WeekKey
    lineage: str
    computed: int | None
    reference: int | None
