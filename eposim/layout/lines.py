"""
Horizontal rules and paired vertical lines.

A horizontal line always sits on a row of its own. Vertical lines are opened
by ``vline-begin`` and closed by the most recent ``vline-end`` at the same x;
their stroke runs from the opening y to the effective bottom of the row that
is active when they close.
"""

import logging
from typing import List, Optional

from eposim.model.command import PrintCommand
from eposim.model.enums import Color, LineStyle
from eposim.model.geometry import CursorState, PositionedElement, VerticalLine
from eposim.model.settings import LayoutSettings

logger = logging.getLogger(__name__)

LINE_MARGIN = 1  # blank dot below a horizontal rule


def _stroke_style(style: LineStyle, color: Color) -> dict:
    return {
        "line_style": style.value,
        "thickness": style.thickness,
        "double": style.is_double,
        "gap": 1 if style.is_double else 0,
        "color": color.value,
        "rgb": color.rgb,
    }


def _coordinate(command: PrintCommand, name: str, default: int) -> int:
    value = command.int_attr(name)
    return default if value is None else value


def layout_hline(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    """
    Place a horizontal rule from ``x1`` (default 0) to ``x2`` (default the last
    dot of the page). ``color="none"`` still takes the vertical space.
    """
    x1 = _coordinate(command, "x1", 0)
    x2 = _coordinate(command, "x2", settings.page_width - 1)
    style = LineStyle.parse(command.attr("style"))
    color = Color.parse(command.attr("color"))

    cursor.break_row(settings.line_height)
    top = cursor.current_y
    advance = style.stroke_extent + LINE_MARGIN
    cursor.current_y += advance
    cursor.new_row(settings.line_height)

    return [
        PositionedElement(
            command=command,
            x=x1,
            y=top,
            width=max(0, x2 - x1 + 1),
            height=advance,
            role="hline",
            style=_stroke_style(style, color),
        )
    ]


def begin_vline(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    cursor.active_vertical_lines.append(
        VerticalLine(
            x=_coordinate(command, "x", 0),
            start_y=cursor.current_y,
            style=LineStyle.parse(command.attr("style")),
            color=Color.parse(command.attr("color")),
            command=command,
        )
    )
    return []


def vline_element(line: VerticalLine, end_y: float) -> PositionedElement:
    """Stroke of a closed vertical line, reported against its begin command."""
    return PositionedElement(
        command=line.command,
        x=line.x,
        y=line.start_y,
        width=line.style.stroke_extent,
        height=max(0, end_y - line.start_y),
        role="vline",
        style=_stroke_style(line.style, line.color),
    )


def find_open_vline(cursor: CursorState, x: int) -> Optional[int]:
    """Index of the most recently opened line at ``x``, if any."""
    for index in range(len(cursor.active_vertical_lines) - 1, -1, -1):
        if cursor.active_vertical_lines[index].x == x:
            return index
    return None


def end_vline(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    x = _coordinate(command, "x", 0)
    index = find_open_vline(cursor, x)
    if index is None:
        logger.debug("vline-end at x=%d has no open line", x)
        return []
    line = cursor.active_vertical_lines.pop(index)
    return [vline_element(line, cursor.row_bottom)]


def close_all_vlines(cursor: CursorState) -> List[PositionedElement]:
    """Close every open vertical line at the current row bottom, oldest first."""
    end_y = cursor.row_bottom
    elements = [vline_element(line, end_y) for line in cursor.active_vertical_lines]
    cursor.active_vertical_lines.clear()
    return elements


__all__ = [
    "layout_hline",
    "begin_vline",
    "end_vline",
    "vline_element",
    "find_open_vline",
    "close_all_vlines",
]
