"""
model/enums.py

Domain enums and keyword tables for the ePOS receipt simulator.

Every enum is a ``str`` enum whose value is the exact attribute keyword used in
print documents, so ``Color("color_2")`` and ``Color.COLOR_2.value`` round-trip.
Parsing helpers (``parse``) are lenient: unknown or missing keywords fall back to
the documented default instead of raising, because the layout pass never rejects
a command for a cosmetic attribute.

NO layout logic here!

See Also:
    - eposim.model.schema (allowed attributes, option lists, numeric ranges)
    - eposim.layout (calculators consuming these tables)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, FrozenSet, Optional, Tuple

_logger: Final[logging.Logger] = logging.getLogger(__name__)

# === DEVICE CONSTANTS ===
PRINT_WIDTH_DEFAULT: Final[int] = 576  # 72 mm at 203 dpi
LINE_HEIGHT_DEFAULT: Final[int] = 24
CHAR_WIDTH_DEFAULT: Final[int] = 12
REFERENCE_DPI: Final[int] = 203

MIN_TEXT_SCALE: Final[int] = 1
MAX_TEXT_SCALE: Final[int] = 8

CJK_LANGUAGES: Final[FrozenSet[str]] = frozenset({"ja", "zh-cn", "zh-tw", "ko", "multi"})

# Code point ranges rendered full-width for CJK languages
FULL_WIDTH_RANGES: Final[Tuple[Tuple[int, int], ...]] = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x2E80, 0x9FFF),  # CJK radicals .. unified ideographs, kana
    (0xAC00, 0xD7AF),  # Hangul syllables
    (0xF900, 0xFAFF),  # CJK compatibility ideographs
    (0xFE30, 0xFE4F),  # CJK compatibility forms
    (0xFF01, 0xFF60),  # Fullwidth forms
    (0xFFE0, 0xFFE6),  # Fullwidth symbol variants
)


# === DOMAINS ===


class CommandKind(str, Enum):
    """Kind of a print command node, keyed by its document tag."""

    TEXT = "text"
    HLINE = "hline"
    VLINE_BEGIN = "vline-begin"
    VLINE_END = "vline-end"
    BARCODE = "barcode"
    SYMBOL = "symbol"
    IMAGE = "image"
    LOGO = "logo"
    FEED = "feed"
    CUT = "cut"
    CONTAINER = "container"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "CommandKind":
        """Map a document tag to a kind; anything unknown is a container."""
        if not tag:
            return cls.CONTAINER
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.CONTAINER

    @property
    def is_leaf(self) -> bool:
        return self is not CommandKind.CONTAINER


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Alignment":
        low = (value or "").strip().lower()
        if low in ("center", "centre"):
            return cls.CENTER
        if low == "right":
            return cls.RIGHT
        return DEFAULT_ALIGNMENT

    @property
    def is_block(self) -> bool:
        """Non-left alignment turns a graphic into a block of its own row."""
        return self is not Alignment.LEFT

    def offset(self, page_width: int, content_width: float) -> int:
        """Start x for content of the given width on an otherwise empty row."""
        if self is Alignment.CENTER:
            return max(0, int((page_width - content_width) // 2))
        if self is Alignment.RIGHT:
            return max(0, int(page_width - content_width))
        return 0


class Color(str, Enum):
    COLOR_1 = "color_1"
    COLOR_2 = "color_2"
    COLOR_3 = "color_3"
    COLOR_4 = "color_4"
    NONE = "none"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Color":
        try:
            return cls((value or DEFAULT_COLOR.value).strip().lower())
        except ValueError:
            return DEFAULT_COLOR

    @property
    def is_visible(self) -> bool:
        return self is not Color.NONE

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return {
            Color.COLOR_2: (255, 0, 0),
            Color.COLOR_3: (0, 0, 255),
            Color.COLOR_4: (0, 128, 0),
        }.get(self, (0, 0, 0))


class FontName(str, Enum):
    FONT_A = "font_a"
    FONT_B = "font_b"
    FONT_C = "font_c"
    FONT_D = "font_d"
    FONT_E = "font_e"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FontName":
        try:
            return cls((value or DEFAULT_FONT.value).strip().lower())
        except ValueError:
            return DEFAULT_FONT


class LineStyle(str, Enum):
    THIN = "line_thin"
    MEDIUM = "line_medium"
    THICK = "line_thick"
    THIN_DOUBLE = "line_thin_double"
    MEDIUM_DOUBLE = "line_medium_double"
    THICK_DOUBLE = "line_thick_double"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LineStyle":
        try:
            return cls((value or DEFAULT_LINE_STYLE.value).strip().lower())
        except ValueError:
            return DEFAULT_LINE_STYLE

    @property
    def thickness(self) -> int:
        if self in (LineStyle.THICK, LineStyle.THICK_DOUBLE):
            return 3
        if self in (LineStyle.MEDIUM, LineStyle.MEDIUM_DOUBLE):
            return 2
        return 1

    @property
    def is_double(self) -> bool:
        return self.value.endswith("_double")

    @property
    def stroke_extent(self) -> int:
        """Dots covered across the stroke, including the gap of a double line."""
        return self.thickness * 2 + 1 if self.is_double else self.thickness


class HriPosition(str, Enum):
    NONE = "none"
    ABOVE = "above"
    BELOW = "below"
    BOTH = "both"

    @classmethod
    def parse(cls, value: Optional[str]) -> "HriPosition":
        try:
            return cls((value or DEFAULT_HRI.value).strip().lower())
        except ValueError:
            return DEFAULT_HRI

    @property
    def has_above(self) -> bool:
        return self in (HriPosition.ABOVE, HriPosition.BOTH)

    @property
    def has_below(self) -> bool:
        return self in (HriPosition.BELOW, HriPosition.BOTH)


class SymbolFamily(str, Enum):
    """Rendering family a symbol type keyword falls into."""

    QR = "qr"
    PDF417 = "pdf417"
    DATAMATRIX = "datamatrix"

    @classmethod
    def from_type(cls, symbol_type: Optional[str]) -> "SymbolFamily":
        low = (symbol_type or "").lower()
        if "pdf417" in low:
            return cls.PDF417
        if "datamatrix" in low:
            return cls.DATAMATRIX
        return cls.QR

    @property
    def quiet_zone(self) -> int:
        """Blank modules on each side of the symbol."""
        return {
            SymbolFamily.QR: 4,
            SymbolFamily.PDF417: 2,
            SymbolFamily.DATAMATRIX: 1,
        }[self]


class ImageMode(str, Enum):
    MONO = "mono"
    GRAY16 = "gray16"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ImageMode":
        try:
            return cls((value or DEFAULT_IMAGE_MODE.value).strip().lower())
        except ValueError:
            return DEFAULT_IMAGE_MODE

    @property
    def pixels_per_byte(self) -> int:
        return 8 if self is ImageMode.MONO else 2

    def bytes_per_row(self, width: int) -> int:
        ppb = self.pixels_per_byte
        return (width + ppb - 1) // ppb


class CutType(str, Enum):
    FEED = "feed"
    NO_FEED = "no_feed"
    RESERVE = "reserve"

    @classmethod
    def parse(cls, value: Optional[str]) -> "CutType":
        try:
            return cls((value or DEFAULT_CUT_TYPE.value).strip().lower())
        except ValueError:
            return DEFAULT_CUT_TYPE


class FeedPosition(str, Enum):
    PEELING = "peeling"
    CUTTING = "cutting"
    CURRENT_TOF = "current_tof"
    NEXT_TOF = "next_tof"

    @property
    def dots(self) -> int:
        return {
            FeedPosition.PEELING: 30,
            FeedPosition.CUTTING: 50,
            FeedPosition.CURRENT_TOF: 0,
            FeedPosition.NEXT_TOF: 120,
        }[self]


# Fill density of the simulated QR-style data area per error-correction level
SYMBOL_LEVEL_DENSITY: Final = {
    "level_l": 0.50,
    "level_m": 0.55,
    "level_q": 0.60,
    "level_h": 0.65,
}


def symbol_density(level: Optional[str]) -> float:
    return SYMBOL_LEVEL_DENSITY.get((level or "level_m").strip().lower(), 0.50)


def is_full_width(char: str, lang: Optional[str]) -> bool:
    """True when ``char`` takes two character cells under language ``lang``."""
    if not char or not lang or lang.lower() not in CJK_LANGUAGES:
        return False
    code = ord(char[0])
    return any(lo <= code <= hi for lo, hi in FULL_WIDTH_RANGES)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# === DEFAULTS ===
DEFAULT_ALIGNMENT: Final[Alignment] = Alignment.LEFT
DEFAULT_COLOR: Final[Color] = Color.COLOR_1
DEFAULT_FONT: Final[FontName] = FontName.FONT_A
DEFAULT_LANGUAGE: Final[str] = "en"
DEFAULT_LINE_STYLE: Final[LineStyle] = LineStyle.THIN
DEFAULT_HRI: Final[HriPosition] = HriPosition.NONE
DEFAULT_SYMBOL_TYPE: Final[str] = "qrcode_model_2"
DEFAULT_SYMBOL_LEVEL: Final[str] = "level_m"
DEFAULT_BARCODE_TYPE: Final[str] = "code128"
DEFAULT_IMAGE_MODE: Final[ImageMode] = ImageMode.MONO
DEFAULT_CUT_TYPE: Final[CutType] = CutType.FEED


__all__ = [
    "PRINT_WIDTH_DEFAULT",
    "LINE_HEIGHT_DEFAULT",
    "CHAR_WIDTH_DEFAULT",
    "REFERENCE_DPI",
    "MIN_TEXT_SCALE",
    "MAX_TEXT_SCALE",
    "CJK_LANGUAGES",
    "FULL_WIDTH_RANGES",
    "CommandKind",
    "Alignment",
    "Color",
    "FontName",
    "LineStyle",
    "HriPosition",
    "SymbolFamily",
    "ImageMode",
    "CutType",
    "FeedPosition",
    "SYMBOL_LEVEL_DENSITY",
    "symbol_density",
    "is_full_width",
    "clamp",
    "DEFAULT_ALIGNMENT",
    "DEFAULT_COLOR",
    "DEFAULT_FONT",
    "DEFAULT_LANGUAGE",
    "DEFAULT_LINE_STYLE",
    "DEFAULT_HRI",
    "DEFAULT_SYMBOL_TYPE",
    "DEFAULT_SYMBOL_LEVEL",
    "DEFAULT_BARCODE_TYPE",
    "DEFAULT_IMAGE_MODE",
    "DEFAULT_CUT_TYPE",
]
