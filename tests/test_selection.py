import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from lineagehub.errors import UnknownPrefectureError, UnknownWaveError  # noqa: E402
from lineagehub.prefectures import (  # noqa: E402
    NATIONAL,
    PREFECTURES,
    is_known_prefecture,
    resolve_prefecture,
    to_japanese,
)
from lineagehub.selection import COMBINED, all_selections, parse_wave  # noqa: E402


@pytest.mark.parametrize("value", [6, 7, 8, "6", " 7 ", "8"])
def test_single_waves(value) -> None:
    selection = parse_wave(value)

    assert selection.waves == (int(str(value).strip()),)
    assert not selection.combined


@pytest.mark.parametrize("value", ["6-8", "combined", "ALL"])
def test_combined_sentinel_is_union(value) -> None:
    selection = parse_wave(value)

    assert selection is COMBINED
    assert selection.waves == (6, 7, 8)
    assert selection.label == "6-8"


@pytest.mark.parametrize("value", [5, 9, "9", "six", "", "6-7", True, None])
def test_unknown_waves_raise(value) -> None:
    with pytest.raises(UnknownWaveError):
        parse_wave(value)


def test_all_selections_lists_singles_then_union() -> None:
    assert [selection.label for selection in all_selections()] == ["6", "7", "8", "6-8"]


def test_prefecture_table_is_complete() -> None:
    assert len(PREFECTURES) == 48
    assert resolve_prefecture("東京都") == "Tokyo"
    assert resolve_prefecture("tokyo") == "Tokyo"
    assert resolve_prefecture("Gumma") == "Gunma"
    assert resolve_prefecture("全国") == NATIONAL
    assert to_japanese("Osaka") == "大阪府"


def test_unknown_prefecture() -> None:
    assert not is_known_prefecture("Atlantis")

    with pytest.raises(UnknownPrefectureError) as excinfo:
        resolve_prefecture("Atlantis")

    assert "Atlantis" in str(excinfo.value)
