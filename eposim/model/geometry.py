"""
Geometry and cursor state for one layout pass.

``CursorState`` is the single mutable value threaded through every calculator of
a pass. ``PositionedElement`` is what a pass produces: one box in device dots per
visible unit, with the style the painter needs to draw it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from eposim.model.command import PrintCommand
from eposim.model.enums import LINE_HEIGHT_DEFAULT, Color, LineStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerticalLine:
    """An open vertical line waiting for its matching end command."""

    x: int
    start_y: float
    style: LineStyle
    color: Color
    command: PrintCommand


@dataclass(frozen=True)
class PendingCut:
    """A reserved cut, performed when the document is flushed."""

    command: PrintCommand


@dataclass
class CursorState:
    """
    Flow cursor of a layout pass.

    Attributes:
        current_x: Horizontal pen position in dots.
        current_y: Top of the active row in dots.
        max_line_height: Height reserved for the active row.
        active_vertical_lines: Stack of open vertical lines, oldest first.
        pending_cut: Deferred cut, if any.
    """

    current_x: float = 0
    current_y: float = 0
    max_line_height: float = LINE_HEIGHT_DEFAULT
    active_vertical_lines: List[VerticalLine] = field(default_factory=list)
    pending_cut: Optional[PendingCut] = None

    @property
    def is_mid_row(self) -> bool:
        return self.current_x > 0

    @property
    def row_bottom(self) -> float:
        """Effective bottom of the current row: below it if mid-row, else at it."""
        if self.is_mid_row:
            return self.current_y + self.max_line_height
        return self.current_y

    def new_row(self, default_height: float) -> None:
        """Reset to the left edge with a fresh default-height row."""
        self.current_x = 0
        self.max_line_height = default_height

    def break_row(self, default_height: float) -> None:
        """Terminate the active row if anything has been placed on it."""
        if self.is_mid_row:
            self.current_y += self.max_line_height
            self.new_row(default_height)

    def copy(self) -> "CursorState":
        return replace(self, active_vertical_lines=list(self.active_vertical_lines))


@dataclass(frozen=True)
class PositionedElement:
    """
    One laid-out box of a command.

    A command may emit several elements (one per wrapped text row, for
    instance). ``style`` holds the resolved drawing data for the painter; its
    content depends on ``role``.
    """

    command: PrintCommand
    x: float
    y: float
    width: float
    height: float
    role: str = "box"
    style: Dict[str, Any] = field(default_factory=dict)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Inclusive point-in-rectangle test."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.command.tag,
            "role": self.role,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "style": dict(self.style),
        }

    def __hash__(self) -> int:
        return hash((id(self.command), self.role, self.x, self.y, self.width, self.height))


__all__ = ["VerticalLine", "PendingCut", "CursorState", "PositionedElement"]
