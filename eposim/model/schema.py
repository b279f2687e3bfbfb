"""
schema.py: допустимые атрибуты команд печати и их проверка.

Attribute schema of print commands: which attributes each kind accepts, the
keyword options of enumerated attributes and the numeric range of numeric
ones. Editors use it to build property panels; ``validate_command`` and
``validate_tree`` report problems without raising.

Advisory only: the layout engine never consults this module and lays out
whatever it receives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Final, FrozenSet, List, Mapping, Optional, Tuple

from eposim.model.command import PrintCommand, parse_int
from eposim.model.enums import PRINT_WIDTH_DEFAULT, CommandKind

logger = logging.getLogger(__name__)

_COMMON: Final = ("align", "color")

ALLOWED_ATTRIBUTES: Final[Mapping[CommandKind, Tuple[str, ...]]] = {
    CommandKind.TEXT: _COMMON
    + (
        "font", "width", "height", "dw", "dh", "ul", "em", "reverse", "smooth",
        "x", "y", "linespc", "lang",
    ),
    CommandKind.HLINE: ("x1", "x2", "style", "color"),
    CommandKind.VLINE_BEGIN: ("x", "style", "color"),
    CommandKind.VLINE_END: ("x", "style", "color"),
    CommandKind.BARCODE: _COMMON + ("type", "hri", "font", "width", "height"),
    CommandKind.SYMBOL: _COMMON
    + ("type", "level", "width", "height", "size", "x", "y"),
    CommandKind.IMAGE: _COMMON + ("width", "height", "mode"),
    CommandKind.LOGO: ("key1", "key2", "align"),
    CommandKind.FEED: ("unit", "line", "linespc", "pos"),
    CommandKind.CUT: ("type",),
}

_BOOL: Final = ("true", "false")

ATTRIBUTE_OPTIONS: Final[Mapping[str, Tuple[str, ...]]] = {
    "font": ("font_a", "font_b", "font_c", "font_d", "font_e", "special_a", "special_b"),
    "align": ("left", "center", "right"),
    "color": ("color_1", "color_2", "color_3", "color_4", "none"),
    "dw": _BOOL,
    "dh": _BOOL,
    "ul": _BOOL,
    "em": _BOOL,
    "reverse": _BOOL,
    "smooth": _BOOL,
    "style": (
        "line_thin", "line_medium", "line_thick",
        "line_thin_double", "line_medium_double", "line_thick_double",
    ),
    "hri": ("none", "above", "below", "both"),
    "mode": ("mono", "gray16"),
    "pos": ("peeling", "cutting", "current_tof", "next_tof"),
    "lang": ("en", "ja", "zh-cn", "zh-tw", "ko", "th", "vi", "multi"),
}

KIND_OPTIONS: Final[Mapping[Tuple[CommandKind, str], Tuple[str, ...]]] = {
    (CommandKind.BARCODE, "type"): (
        "upc_a", "upc_e", "jan13", "jan8", "code39", "itf", "codabar", "code93",
        "code128", "gs1_128", "gs1_databar_omnidirectional",
        "gs1_databar_truncated", "gs1_databar_limited", "gs1_databar_expanded",
    ),
    (CommandKind.SYMBOL, "type"): (
        "pdf417", "qrcode_model_1", "qrcode_model_2", "maxicode_model_2",
        "maxicode_model_3", "maxicode_model_4", "maxicode_model_5",
        "maxicode_model_6", "datamatrix", "gs1_databar_stacked",
        "gs1_databar_stacked_omnidirectional", "gs1_databar_expanded_stacked",
        "aztec", "data_mono_back",
    ),
    (CommandKind.SYMBOL, "level"): (
        "level_l", "level_m", "level_q", "level_h",
        "level_0", "level_1", "level_2", "level_3", "level_4",
        "level_5", "level_6", "level_7", "level_8",
    ),
    (CommandKind.CUT, "type"): ("no_feed", "feed", "reserve"),
}

# Accepted spellings that editors do not offer
_ALIASES: Final[Mapping[str, FrozenSet[str]]] = {"align": frozenset({"centre"})}

NUMERIC_ATTRIBUTES: Final[FrozenSet[str]] = frozenset(
    {"width", "height", "x", "y", "x1", "x2", "unit", "line", "linespc", "size", "key1", "key2"}
)


@dataclass(frozen=True)
class NumericInfo:
    """Editing range of a numeric attribute."""

    min: int
    max: int
    step: int = 1
    default: Optional[int] = None

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


def numeric_info(
    name: str, kind: CommandKind, page_width: int = PRINT_WIDTH_DEFAULT
) -> Optional[NumericInfo]:
    """Range of a numeric attribute for ``kind``, None for non-numeric names."""
    if name not in NUMERIC_ATTRIBUTES:
        return None
    if name in ("width", "height"):
        if kind is CommandKind.TEXT:
            return NumericInfo(1, 8, default=1)
        if kind is CommandKind.BARCODE:
            if name == "width":
                return NumericInfo(2, 6, default=3)
            return NumericInfo(1, 255, default=162)
        if kind is CommandKind.SYMBOL:
            return NumericInfo(1, 16)
        if kind is CommandKind.IMAGE:
            return NumericInfo(1, 1000)
        return NumericInfo(0, 1000)
    if name == "size":
        return NumericInfo(1, 16, default=4)
    if name in ("x", "y", "x1", "x2"):
        return NumericInfo(0, page_width)
    # unit, line, linespc, key1, key2
    return NumericInfo(0, 255)


def attribute_options(name: str, kind: CommandKind) -> Optional[Tuple[str, ...]]:
    """Keyword options of an enumerated attribute, None for free-form ones."""
    return KIND_OPTIONS.get((kind, name)) or ATTRIBUTE_OPTIONS.get(name)


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationError(Exception):
    """One attribute problem found on a command."""

    def __init__(
        self,
        message: str,
        attribute: Optional[str] = None,
        command: Optional[PrintCommand] = None,
    ):
        super().__init__(message)
        self.attribute = attribute
        self.command = command


class ValidationResult:
    """
    Результат валидации.
    errors: список ValidationError.
    """

    def __init__(self) -> None:
        self.errors: List[ValidationError] = []

    def add(self, error: ValidationError) -> None:
        self.errors.append(error)

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def messages(self) -> List[str]:
        return [str(e) for e in self.errors]


def validate_command(
    command: PrintCommand, page_width: int = PRINT_WIDTH_DEFAULT
) -> ValidationResult:
    """Check the attributes of one leaf command; containers always pass."""
    result = ValidationResult()
    allowed = ALLOWED_ATTRIBUTES.get(command.kind)
    if allowed is None:
        return result

    for name, value in command.attributes.items():
        if name not in allowed:
            result.add(
                ValidationError(f"{command.tag}: unknown attribute {name!r}", name, command)
            )
            continue
        options = attribute_options(name, command.kind)
        if options is not None:
            if value not in options and value not in _ALIASES.get(name, ()):
                result.add(
                    ValidationError(
                        f"{command.tag}.{name}: unknown value {value!r}", name, command
                    )
                )
            continue
        info = numeric_info(name, command.kind, page_width)
        if info is None:
            continue
        number = parse_int(value)
        if number is None:
            result.add(
                ValidationError(
                    f"{command.tag}.{name}: not a number ({value!r})", name, command
                )
            )
        elif not info.contains(number):
            result.add(
                ValidationError(
                    f"{command.tag}.{name}: {number} outside [{info.min}, {info.max}]",
                    name,
                    command,
                )
            )
    return result


def validate_tree(
    root: PrintCommand, page_width: int = PRINT_WIDTH_DEFAULT
) -> ValidationResult:
    """Validate every command below (and including) ``root``."""
    result = ValidationResult()
    for command in root.walk():
        result.extend(validate_command(command, page_width))
    if not result.ok:
        logger.debug("Document has %d attribute problem(s)", len(result.errors))
    return result


def describe(kind: CommandKind) -> Dict[str, object]:
    """Property-panel description of every attribute of ``kind``."""
    out: Dict[str, object] = {}
    for name in ALLOWED_ATTRIBUTES.get(kind, ()):
        options = attribute_options(name, kind)
        if options is not None:
            out[name] = options
        else:
            out[name] = numeric_info(name, kind)
    return out


__all__ = [
    "ALLOWED_ATTRIBUTES",
    "ATTRIBUTE_OPTIONS",
    "KIND_OPTIONS",
    "NUMERIC_ATTRIBUTES",
    "NumericInfo",
    "numeric_info",
    "attribute_options",
    "ValidationError",
    "ValidationResult",
    "validate_command",
    "validate_tree",
    "describe",
]
