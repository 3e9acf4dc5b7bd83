"""Japanese prefecture names and their romanized forms."""

from __future__ import annotations

from lineagehub.errors import UnknownPrefectureError

NATIONAL = "All"

PREFECTURES: tuple[tuple[str, str], ...] = (
    ("北海道", "Hokkaido"),
    ("青森県", "Aomori"),
    ("岩手県", "Iwate"),
    ("宮城県", "Miyagi"),
    ("秋田県", "Akita"),
    ("山形県", "Yamagata"),
    ("福島県", "Fukushima"),
    ("茨城県", "Ibaraki"),
    ("栃木県", "Tochigi"),
    ("群馬県", "Gunma"),
    ("埼玉県", "Saitama"),
    ("千葉県", "Chiba"),
    ("東京都", "Tokyo"),
    ("神奈川県", "Kanagawa"),
    ("新潟県", "Niigata"),
    ("富山県", "Toyama"),
    ("石川県", "Ishikawa"),
    ("福井県", "Fukui"),
    ("山梨県", "Yamanashi"),
    ("長野県", "Nagano"),
    ("岐阜県", "Gifu"),
    ("静岡県", "Shizuoka"),
    ("愛知県", "Aichi"),
    ("三重県", "Mie"),
    ("滋賀県", "Shiga"),
    ("京都府", "Kyoto"),
    ("大阪府", "Osaka"),
    ("兵庫県", "Hyogo"),
    ("奈良県", "Nara"),
    ("和歌山県", "Wakayama"),
    ("鳥取県", "Tottori"),
    ("島根県", "Shimane"),
    ("岡山県", "Okayama"),
    ("広島県", "Hiroshima"),
    ("山口県", "Yamaguchi"),
    ("徳島県", "Tokushima"),
    ("香川県", "Kagawa"),
    ("愛媛県", "Ehime"),
    ("高知県", "Kochi"),
    ("福岡県", "Fukuoka"),
    ("佐賀県", "Saga"),
    ("長崎県", "Nagasaki"),
    ("熊本県", "Kumamoto"),
    ("大分県", "Oita"),
    ("宮崎県", "Miyazaki"),
    ("鹿児島県", "Kagoshima"),
    ("沖縄県", "Okinawa"),
    ("全国", NATIONAL),
)

ENGLISH_TO_JAPANESE: dict[str, str] = {en: jp for jp, en in PREFECTURES}
JAPANESE_TO_ENGLISH: dict[str, str] = {jp: en for jp, en in PREFECTURES}

# Alternative romanizations seen in source file names.
_ALIASES: dict[str, str] = {
    "gumma": "Gunma",
    "all": NATIONAL,
    "japan": NATIONAL,
}
_BY_LOWER: dict[str, str] = {en.lower(): en for en in ENGLISH_TO_JAPANESE}


def resolve_prefecture(name: str) -> str:
    """Return the canonical English name for a Japanese or romanized name."""

    cleaned = str(name).strip()
    if cleaned in JAPANESE_TO_ENGLISH:
        return JAPANESE_TO_ENGLISH[cleaned]

    key = cleaned.lower()
    if key in _BY_LOWER:
        return _BY_LOWER[key]
    if key in _ALIASES:
        return _ALIASES[key]

    raise UnknownPrefectureError(f"Unknown prefecture: {name!r}")


def to_japanese(name: str) -> str:
    return ENGLISH_TO_JAPANESE[resolve_prefecture(name)]


def is_known_prefecture(name: str) -> bool:
    try:
        resolve_prefecture(name)
    except UnknownPrefectureError:
        return False
    return True
