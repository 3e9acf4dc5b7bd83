"""Validation of raw adapter output into canonical observations."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from lineagehub.config import MalformedWeekStrategy, ValidationPolicy
from lineagehub.errors import MalformedDateError
from lineagehub.models import Observation, RawObservation
from lineagehub.prefectures import is_known_prefecture, resolve_prefecture
from lineagehub.weeks import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    """Describes why a record was modified or dropped during validation."""

    record_key: tuple[str, str, str]
    field_name: str
    message: str


@dataclass
class ValidationResult:
    """Validation output containing clean observations and diagnostics."""

    records: list[Observation] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    dropped: int = 0


class ObservationValidator:
    """Single entry point turning raw rows from any adapter into observations.

    Records with a missing prefecture or lineage, an unsupported wave, or a
    missing or negative value are dropped. Malformed weeks are dropped or
    abort the batch depending on ``ValidationPolicy.malformed_week``.
    """

    def __init__(self, policy: ValidationPolicy | None = None) -> None:
        self.policy = policy or ValidationPolicy()

    def validate(self, rows: Iterable[RawObservation]) -> ValidationResult:
        result = ValidationResult()

        for row in rows:
            observation = self._validate_row(row, result)
            if observation is None:
                result.dropped += 1
            else:
                result.records.append(observation)

        if result.dropped:
            logger.info(
                "Validation dropped %d record(s), kept %d", result.dropped, len(result.records)
            )
        return result

    def _validate_row(self, row: RawObservation, result: ValidationResult) -> Observation | None:
        key = row.key()

        prefecture = self._to_string(row.prefecture)
        if prefecture is None:
            return self._drop(result, key, "prefecture", "Prefecture missing; record excluded.")
        if is_known_prefecture(prefecture):
            prefecture = resolve_prefecture(prefecture)
        else:
            result.issues.append(
                ValidationIssue(key, "prefecture", "Unrecognized prefecture; kept as-is.")
            )

        lineage = self._to_string(row.lineage)
        if lineage is None:
            return self._drop(result, key, "lineage", "Lineage missing; record excluded.")

        try:
            week = normalize(row.raw_week)
        except MalformedDateError as exc:
            if self.policy.malformed_week is MalformedWeekStrategy.ABORT:
                raise
            return self._drop(result, key, "week", f"{exc}; record excluded.")

        wave = self._to_int(row.wave)
        if wave is None or wave not in self.policy.allowed_waves:
            return self._drop(result, key, "wave", f"Unsupported wave {row.wave!r}; record excluded.")

        value = self._to_float(row.value)
        if value is None:
            return self._drop(result, key, "value", "Value missing; record excluded.")
        if value < 0:
            return self._drop(result, key, "value", f"Negative value {value}; record excluded.")
        if value == 0 and self.policy.drop_zero_values:
            return self._drop(result, key, "value", "Zero value; record excluded by policy.")

        return Observation(
            prefecture=prefecture,
            lineage=lineage,
            week=week,
            wave=wave,
            value=value,
            source=row.source,
        )

    @staticmethod
    def _drop(
        result: ValidationResult,
        key: tuple[str, str, str],
        field_name: str,
        message: str,
    ) -> None:
        result.issues.append(ValidationIssue(record_key=key, field_name=field_name, message=message))
        logger.debug("Dropped %s: %s", key, message)
        return None

    @staticmethod
    def _to_string(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, float) and math.isnan(value):
            return None

        cleaned = str(value).strip()
        if not cleaned or cleaned.lower() in {"nan", "none", "null", "na"}:
            return None
        return cleaned

    @staticmethod
    def _to_int(value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number) or not number.is_integer():
            return None
        return int(number)

    @staticmethod
    def _to_float(value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return number
