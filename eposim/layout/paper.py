"""
Paper movement: feeds and cuts.

Both terminate the active row. A feed moves the paper by a dot amount chosen
from exactly one selector attribute (``unit`` > ``line`` > ``pos``). A cut
draws a mark across the page, optionally after an implicit feed to the
cutting position; a reserved cut is only remembered and performed when the
document is flushed.
"""

import logging
from typing import List, Tuple

from eposim.model.command import PrintCommand
from eposim.model.enums import CutType, FeedPosition
from eposim.model.geometry import CursorState, PendingCut, PositionedElement
from eposim.model.settings import LayoutSettings

logger = logging.getLogger(__name__)


def feed_amount(command: PrintCommand, cursor: CursorState) -> Tuple[int, str]:
    """Return the feed amount in dots and a short label describing it."""
    if command.has_attr("unit"):
        unit = command.int_attr("unit", 0)
        return unit, f'unit="{unit}"'
    if command.has_attr("line"):
        lines = command.int_attr("line", 0)
        spacing = command.int_attr("linespc")
        if spacing is None or spacing <= 0:
            spacing = cursor.max_line_height
            label = f'line="{lines}"'
        else:
            label = f'line="{lines}" linespc="{spacing}"'
        return lines * spacing, label
    if command.has_attr("pos"):
        pos = (command.attr("pos") or "").strip().lower()
        try:
            return FeedPosition(pos).dots, f'pos="{pos}"'
        except ValueError:
            logger.debug("Unknown feed position %r", pos)
            return 0, f'pos="{pos}"'
    return 0, "feed"


def layout_feed(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    amount, label = feed_amount(command, cursor)
    elements: List[PositionedElement] = []
    if amount > 0:
        elements.append(
            PositionedElement(
                command=command,
                x=0,
                y=cursor.current_y,
                width=settings.page_width,
                height=amount,
                role="feed",
                style={"label": f"feed: {label}", "amount": amount},
            )
        )
        cursor.current_y += amount
    cursor.new_row(settings.line_height)
    return elements


def draw_cut(
    command: PrintCommand,
    cursor: CursorState,
    settings: LayoutSettings,
    cut_type: CutType,
) -> PositionedElement:
    """Perform a cut now; ``no_feed`` skips the implicit feed."""
    cursor.break_row(settings.line_height)
    top = cursor.current_y
    feed = 0 if cut_type is CutType.NO_FEED else settings.cut_feed
    cursor.current_y += feed
    mark_y = cursor.current_y
    cursor.current_y += settings.cut_margin
    cursor.new_row(settings.line_height)
    return PositionedElement(
        command=command,
        x=0,
        y=top,
        width=settings.page_width,
        height=cursor.current_y - top,
        role="cut",
        style={"cut_type": cut_type.value, "feed": feed, "mark_y": mark_y},
    )


def layout_cut(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    cut_type = CutType.parse(command.attr("type"))
    if cut_type is CutType.RESERVE:
        cursor.break_row(settings.line_height)
        cursor.pending_cut = PendingCut(command)
        return []
    return [draw_cut(command, cursor, settings, cut_type)]


def flush_pending_cut(
    cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    """Perform the reserved cut, if any, as a feed cut."""
    pending = cursor.pending_cut
    if pending is None:
        return []
    cursor.pending_cut = None
    return [draw_cut(pending.command, cursor, settings, CutType.FEED)]


__all__ = [
    "feed_amount",
    "layout_feed",
    "draw_cut",
    "layout_cut",
    "flush_pending_cut",
]
