"""Wave selector convention shared by every query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lineagehub.config import COMBINED_WAVE_LABEL, SUPPORTED_WAVES
from lineagehub.errors import UnknownWaveError

_COMBINED_ALIASES = {COMBINED_WAVE_LABEL, "combined", "all"}


@dataclass(frozen=True)
class WaveSelection:
    """One supported wave, or the union of all of them."""

    waves: tuple[int, ...]
    label: str

    @property
    def combined(self) -> bool:
        return self.label == COMBINED_WAVE_LABEL


COMBINED = WaveSelection(waves=SUPPORTED_WAVES, label=COMBINED_WAVE_LABEL)


def parse_wave(value: Any) -> WaveSelection:
    """Parse ``6``, ``"7"``, ``"6-8"``, ``"combined"`` and friends."""

    if isinstance(value, WaveSelection):
        return value
    if isinstance(value, bool):
        raise UnknownWaveError(f"Unknown wave: {value!r}")

    if isinstance(value, int):
        wave = value
    else:
        text = str(value).strip().lower()
        if text in _COMBINED_ALIASES:
            return COMBINED
        if not text.isdigit():
            raise UnknownWaveError(
                f"Unknown wave: {value!r}. Expected one of {_choices()}"
            )
        wave = int(text)

    if wave not in SUPPORTED_WAVES:
        raise UnknownWaveError(f"Unknown wave: {value!r}. Expected one of {_choices()}")
    return WaveSelection(waves=(wave,), label=str(wave))


def all_selections() -> list[WaveSelection]:
    """Every selection the dashboard offers, single waves first."""

    return [WaveSelection(waves=(wave,), label=str(wave)) for wave in SUPPORTED_WAVES] + [COMBINED]


def _choices() -> str:
    return ", ".join([str(wave) for wave in SUPPORTED_WAVES] + [COMBINED_WAVE_LABEL])
