"""
Text flow: greedy character packing with wrapping and newline handling.

Rows are packed left to right from the cursor. A character that would cross
the page edge closes the current segment and starts a new row; every newline
closes the row with an extra marker cell. Full-width characters take two cells,
but only under a CJK-family language tag.

Each drawn row produces one ``PositionedElement`` (role ``text``, or
``newline`` for a row holding only the marker).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from eposim.layout.fonts import metrics_for
from eposim.model.command import PrintCommand
from eposim.model.enums import (
    DEFAULT_LANGUAGE,
    MAX_TEXT_SCALE,
    MIN_TEXT_SCALE,
    Alignment,
    Color,
    FontName,
    clamp,
    is_full_width,
)
from eposim.model.geometry import CursorState, PositionedElement
from eposim.model.settings import LayoutSettings

logger = logging.getLogger(__name__)


def normalize_text(raw: str) -> str:
    """Turn escaped ``\\n`` sequences into real newlines."""
    return raw.replace("\\n", "\n")


def text_scale(command: PrintCommand, name: str, flag: str) -> int:
    """
    Character scale along one axis: explicit ``width``/``height`` wins over the
    ``dw``/``dh`` flag; an unparseable explicit value counts as 1.
    """
    raw = command.attr(name)
    if raw:
        value = command.int_attr(name)
        scale = 1 if value is None else value
    else:
        scale = 2 if command.bool_attr(flag) else 1
    return clamp(scale, MIN_TEXT_SCALE, MAX_TEXT_SCALE)


def cell_widths(line: str, char_width: int, lang: Optional[str]) -> List[int]:
    return [char_width * 2 if is_full_width(ch, lang) else char_width for ch in line]


def measure(line: str, char_width: int, lang: Optional[str]) -> int:
    """Pixel width of a run of characters."""
    return sum(cell_widths(line, char_width, lang))


def _fit(widths: Sequence[int], start: int, available: float) -> int:
    """Index one past the last character from ``start`` that fits."""
    used = 0
    end = start
    while end < len(widths) and used + widths[end] <= available:
        used += widths[end]
        end += 1
    return end


def layout_text(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    page_width = settings.page_width
    font = FontName.parse(command.attr("font"))
    lang = command.attr("lang") or DEFAULT_LANGUAGE
    align = Alignment.parse(command.attr("align"))
    color = Color.parse(command.attr("color"))

    width_scale = text_scale(command, "width", "dw")
    height_scale = text_scale(command, "height", "dh")
    metrics = metrics_for(font).scaled(width_scale, height_scale)
    char_width = metrics.char_width
    line_height = metrics.line_height

    linespc = command.int_attr("linespc") if command.attr("linespc") else None
    abs_x = command.int_attr("x")
    abs_y = command.int_attr("y")

    if abs_x is not None:
        cursor.current_x = max(0, abs_x)
    if abs_y is not None:
        cursor.current_y = max(0, abs_y)
        cursor.max_line_height = line_height
    cursor.max_line_height = max(cursor.max_line_height, line_height)

    base_style = {
        "font": font.value,
        "lang": lang,
        "color": color.value,
        "rgb": color.rgb,
        "char_width": char_width,
        "line_height": line_height,
        "width_scale": width_scale,
        "height_scale": height_scale,
        "em": command.bool_attr("em"),
        "ul": command.bool_attr("ul"),
        "reverse": command.bool_attr("reverse"),
        "smooth": command.bool_attr("smooth"),
    }

    elements: List[PositionedElement] = []
    # any x attribute, even an unparseable one, turns alignment off for every row
    aligned = align.is_block and not command.has_attr("x")

    def next_row() -> None:
        cursor.current_y += linespc if linespc is not None else cursor.max_line_height
        cursor.new_row(line_height)

    lines = normalize_text(command.text_content).split("\n")
    for index, line in enumerate(lines):
        is_last = index == len(lines) - 1
        widths = cell_widths(line, char_width, lang)
        pos = 0
        while True:
            if (
                pos < len(line)
                and cursor.current_x > 0
                and cursor.current_x + widths[pos] > page_width
            ):
                next_row()
                continue

            end = _fit(widths, pos, page_width - cursor.current_x)
            if end == pos and pos < len(line):
                # an empty row too narrow for one character still takes one
                end = pos + 1
            segment_width = sum(widths[pos:end])
            marker = end == len(line) and not is_last
            if end == pos and not marker:
                break

            if cursor.current_x == 0 and aligned:
                cursor.current_x = align.offset(page_width, segment_width)

            start_x = cursor.current_x
            cursor.current_x += segment_width
            segment = line[pos:end]
            style = dict(base_style)
            style.update(
                text=segment,
                cells=tuple(widths[pos:end]),
                newline=marker,
            )
            elements.append(
                PositionedElement(
                    command=command,
                    x=start_x,
                    y=cursor.current_y,
                    width=segment_width + (char_width if marker else 0),
                    height=line_height,
                    role="text" if segment else "newline",
                    style=style,
                )
            )
            pos = end
            if pos < len(line):
                next_row()
                continue
            break

        if not is_last:
            next_row()

    logger.debug("Text %r laid out in %d segment(s)", command.text_content[:16], len(elements))
    return elements


__all__ = ["layout_text", "normalize_text", "text_scale", "cell_widths", "measure"]
