"""Typed failures raised by LineageHub."""

from __future__ import annotations

from typing import Any


class LineageHubError(Exception):
    """Base class for all LineageHub errors."""


class MalformedDateError(LineageHubError, ValueError):
    """A raw week/date value could not be mapped onto a ``WeekKey``."""

    def __init__(self, raw: Any, reason: str | None = None) -> None:
        self.raw = raw
        message = f"Cannot derive a week from {raw!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyInputError(LineageHubError, ValueError):
    """Aggregation was asked to run over zero observations."""


class UnknownWaveError(LineageHubError, ValueError):
    """Wave selector is neither a supported wave nor the combined sentinel."""


class UnknownPrefectureError(LineageHubError, KeyError):
    """Prefecture name does not match any known prefecture."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class IngestionConfigError(LineageHubError, ValueError):
    """Ingestion run configuration failed schema validation."""


class UnknownAdapterError(LineageHubError, KeyError):
    """Ingestion config names an adapter that is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
