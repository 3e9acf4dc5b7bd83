"""Week normalization: map heterogeneous date encodings onto ``WeekKey``.

Exactly one numbering rule is used everywhere: ISO-8601 weeks (Monday start,
year is the ISO year). A pre-formatted ``YYYY/W`` string is taken as already
being in that numbering.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
import numbers
import re
from collections.abc import Iterable
from typing import Any

import pandas as pd

from lineagehub.config import MalformedWeekStrategy
from lineagehub.errors import MalformedDateError
from lineagehub.models import Observation, RawObservation, WeekKey

logger = logging.getLogger(__name__)

# Chart labels from the original dashboard carry a trailing "週" (week).
_YEAR_WEEK_RE = re.compile(r"^(\d{4})/(\d{1,2})週?$")
_DIGITS_RE = re.compile(r"^\d+$")


def iso_weeks_in_year(year: int) -> int:
    """Return 52 or 53, the number of ISO weeks in ``year``."""

    return dt.date(year, 12, 28).isocalendar()[1]


def normalize(raw: Any) -> WeekKey:
    """Derive the canonical ``WeekKey`` for a raw week/date value.

    Accepted encodings:

    * ``WeekKey`` (returned unchanged)
    * ``"YYYY/W"`` strings, week optionally zero-padded
    * ``date``/``datetime``/``pandas.Timestamp`` and ISO date strings
    * Unix timestamps in milliseconds, as numbers or digit-only strings

    Anything else raises ``MalformedDateError`` carrying the input.
    """

    if isinstance(raw, WeekKey):
        return raw
    if raw is None or raw is pd.NaT:
        raise MalformedDateError(raw, "missing value")
    if isinstance(raw, bool):
        raise MalformedDateError(raw, "booleans are not dates")
    if isinstance(raw, dt.datetime):
        return _from_date(raw.date())
    if isinstance(raw, dt.date):
        return _from_date(raw)
    if isinstance(raw, numbers.Real):
        return _from_timestamp_ms(raw, raw)
    if isinstance(raw, str):
        return _from_string(raw)

    raise MalformedDateError(raw, f"unsupported type {type(raw).__name__}")


def render(key: WeekKey) -> str:
    return key.render()


def week_start(key: WeekKey) -> dt.date:
    """Monday of the ISO week, handy for date-typed chart axes."""

    return dt.date.fromisocalendar(key.year, key.week, 1)


def sort_weeks(values: Iterable[Any]) -> list[WeekKey]:
    """Normalize, de-duplicate and sort week values numerically."""

    return sorted({normalize(value) for value in values})


def canonicalize(
    rows: Iterable[RawObservation],
    strategy: MalformedWeekStrategy = MalformedWeekStrategy.ABORT,
) -> list[Observation]:
    """Turn stored rows into observations with canonical weeks.

    With ``ABORT`` the first ``MalformedDateError`` propagates; with ``SKIP``
    the offending row is dropped and logged.
    """

    observations: list[Observation] = []
    for row in rows:
        try:
            week = normalize(row.raw_week)
        except MalformedDateError as exc:
            if strategy is MalformedWeekStrategy.ABORT:
                raise
            logger.warning("Skipping %s/%s: %s", row.prefecture, row.lineage, exc)
            continue

        observations.append(
            Observation(
                prefecture=str(row.prefecture),
                lineage=str(row.lineage),
                week=week,
                wave=int(row.wave),
                value=float(row.value),
                source=row.source,
            )
        )
    return observations


def _from_date(value: dt.date) -> WeekKey:
    iso_year, iso_week, _ = value.isocalendar()
    return WeekKey(iso_year, iso_week)


def _from_timestamp_ms(value: Any, raw: Any) -> WeekKey:
    millis = float(value)
    if not math.isfinite(millis):
        raise MalformedDateError(raw, "timestamp is not finite")
    try:
        moment = dt.datetime.fromtimestamp(millis / 1000.0, tz=dt.timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedDateError(raw, "timestamp out of range") from exc
    return _from_date(moment.date())


def _from_string(raw: str) -> WeekKey:
    text = raw.strip()
    if not text:
        raise MalformedDateError(raw, "empty string")

    match = _YEAR_WEEK_RE.match(text)
    if match:
        year, week = int(match.group(1)), int(match.group(2))
        if year < 1 or not 1 <= week <= iso_weeks_in_year(year):
            raise MalformedDateError(raw, f"week {week} does not exist in {year}")
        return WeekKey(year, week)

    if _DIGITS_RE.match(text):
        return _from_timestamp_ms(int(text), raw)

    try:
        return _from_date(dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date())
    except ValueError:
        pass

    parsed = pd.to_datetime(text, errors="coerce")
    if parsed is pd.NaT or pd.isna(parsed):
        raise MalformedDateError(raw, "unrecognized date format")
    return _from_date(parsed.date())
