"""
Row-flow helpers shared by the block-capable calculators (barcode, symbol,
image, logo).

A left-aligned graphic continues the active row like a very tall glyph. A
centered or right-aligned one terminates the row first, sits on a row of its
own and leaves the cursor at the left edge below itself.
"""

from eposim.model.enums import Alignment
from eposim.model.geometry import CursorState
from eposim.model.settings import LayoutSettings


def block_start(
    cursor: CursorState, settings: LayoutSettings, align: Alignment, width: float
) -> float:
    """Return the start x of a graphic, breaking the row for block alignment."""
    if align.is_block:
        cursor.break_row(settings.line_height)
        return align.offset(settings.page_width, width)
    return cursor.current_x


def finish_block(
    cursor: CursorState,
    settings: LayoutSettings,
    align: Alignment,
    x: float,
    width: float,
    height: float,
    gap: int = 0,
) -> None:
    """Advance the cursor past a placed graphic."""
    if align.is_block:
        cursor.current_y += height + gap
        cursor.new_row(settings.line_height)
    else:
        cursor.current_x = x + width
        cursor.max_line_height = max(cursor.max_line_height, height)


__all__ = ["block_start", "finish_block"]
