"""Configuration contracts for LineageHub pipelines."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from jsonschema import FormatChecker
from jsonschema.validators import validator_for

from lineagehub.errors import IngestionConfigError

SUPPORTED_WAVES: tuple[int, ...] = (6, 7, 8)
COMBINED_WAVE_LABEL = "6-8"
DEFAULT_TOP_K = 10
DEFAULT_OVERFLOW_RANK = 21
SHARE_TOLERANCE = 1e-9


class ValueScale(str, Enum):
    """How raw ratio cells should be interpreted."""

    FRACTION = "fraction"
    PERCENT = "percent"
    AUTO = "auto"


class MalformedWeekStrategy(str, Enum):
    """What to do with a record whose week cannot be normalized."""

    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True)
class ValidationPolicy:
    """Rules applied by ``ObservationValidator`` to raw observations."""

    malformed_week: MalformedWeekStrategy = MalformedWeekStrategy.SKIP
    allowed_waves: tuple[int, ...] = SUPPORTED_WAVES
    drop_zero_values: bool = False

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> ValidationPolicy:
        payload = payload or {}
        return cls(
            malformed_week=MalformedWeekStrategy(payload.get("malformed_week", "skip")),
            allowed_waves=tuple(int(wave) for wave in payload.get("allowed_waves", SUPPORTED_WAVES)),
            drop_zero_values=bool(payload.get("drop_zero_values", False)),
        )


_NAMED_PARAMS = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "params": {"type": "object"},
    },
    "additionalProperties": False,
}

INGESTION_CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["adapters"],
    "properties": {
        "adapters": {"type": "array", "minItems": 1, "items": _NAMED_PARAMS},
        "plugins": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "module", "class_name"],
                "properties": {
                    "name": {"type": "string"},
                    "module": {"type": "string"},
                    "class_name": {"type": "string"},
                },
            },
        },
        "validation": {
            "type": "object",
            "properties": {
                "malformed_week": {"enum": [item.value for item in MalformedWeekStrategy]},
                "allowed_waves": {"type": "array", "items": {"type": "integer"}},
                "drop_zero_values": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "storage": {
            "type": "object",
            "required": ["type"],
            "properties": {
                "type": {"type": "string"},
                "params": {"type": "object"},
            },
        },
        "publishers": {"type": "array", "items": _NAMED_PARAMS},
    },
    "additionalProperties": False,
}


def load_ingestion_config(path: str | Path) -> dict[str, Any]:
    """Load an ingestion JSON config and validate it against the schema.

    All schema errors are reported together in a single
    ``IngestionConfigError``.
    """

    config_path = Path(path)
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise IngestionConfigError(
            f"{config_path}: JSON parse error: {exc.msg} (line {exc.lineno}, col {exc.colno})"
        ) from exc

    validate_ingestion_config(payload, origin=str(config_path))
    return payload


def validate_ingestion_config(payload: Any, *, origin: str = "<config>") -> None:
    validator_cls = validator_for(INGESTION_CONFIG_SCHEMA)
    validator = validator_cls(INGESTION_CONFIG_SCHEMA, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path])
    if not errors:
        return

    lines = [
        f"{origin}: {err.message} (path=/{'/'.join(str(part) for part in err.path)})"
        for err in errors
    ]
    raise IngestionConfigError("\n".join(lines))
