"""
LayoutEngine: single-pass flow layout of a print-command tree.

The engine walks the tree depth-first in document order. Containers (and any
unknown tag) recurse into their children; each leaf kind is dispatched through
a kind-to-calculator table. Every calculator receives a private copy of the
cursor; the copy replaces the live cursor only when the calculator returns, so
a command that turns out to be invalid leaves no trace.

After the walk, open vertical lines are closed at the effective row bottom and
a reserved cut is performed.

Example:
    >>> from eposim.layout.engine import LayoutEngine
    >>> from eposim.model.command import PrintCommand
    >>> doc = PrintCommand.container(PrintCommand.make("text", "Hello"))
    >>> result = LayoutEngine().layout(doc)
    >>> result.elements[0].width
    60
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from eposim.layout import spatial
from eposim.layout.codes import layout_barcode, layout_symbol
from eposim.layout.errors import InvalidCommandError
from eposim.layout.graphics import layout_image, layout_logo
from eposim.layout.lines import begin_vline, close_all_vlines, end_vline, layout_hline
from eposim.layout.paper import flush_pending_cut, layout_cut, layout_feed
from eposim.layout.text import layout_text
from eposim.model.command import PrintCommand
from eposim.model.enums import PRINT_WIDTH_DEFAULT, CommandKind
from eposim.model.geometry import CursorState, PositionedElement
from eposim.model.settings import LayoutSettings

logger = logging.getLogger(__name__)

Calculator = Callable[
    [PrintCommand, CursorState, LayoutSettings], List[PositionedElement]
]

CALCULATORS: Mapping[CommandKind, Calculator] = MappingProxyType(
    {
        CommandKind.TEXT: layout_text,
        CommandKind.HLINE: layout_hline,
        CommandKind.VLINE_BEGIN: begin_vline,
        CommandKind.VLINE_END: end_vline,
        CommandKind.BARCODE: layout_barcode,
        CommandKind.SYMBOL: layout_symbol,
        CommandKind.IMAGE: layout_image,
        CommandKind.LOGO: layout_logo,
        CommandKind.FEED: layout_feed,
        CommandKind.CUT: layout_cut,
    }
)


@dataclass(frozen=True)
class LayoutResult:
    """
    Output of one layout pass.

    Attributes:
        elements: Positioned boxes in document and reading order.
        content_height: Height of the laid-out content in dots.
        page_width: Page width the pass ran with.
    """

    elements: Tuple[PositionedElement, ...]
    content_height: float
    page_width: int

    def __iter__(self) -> Iterator[PositionedElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def hit_test(self, x: float, y: float) -> Optional[PositionedElement]:
        return spatial.hit_test(self.elements, x, y)

    def segments_for(self, command: PrintCommand) -> List[PositionedElement]:
        return spatial.segments_for(self.elements, command)

    def by_role(self, role: str) -> List[PositionedElement]:
        return [e for e in self.elements if e.role == role]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_width": self.page_width,
            "content_height": self.content_height,
            "elements": [e.to_dict() for e in self.elements],
        }


class LayoutEngine:
    """
    Flow layout engine.

    The engine keeps no per-pass state: one instance may lay out many
    documents, from several threads at once.

    Args:
        settings: Device constants; defaults to ``LayoutSettings()``.
        calculators: Optional overrides of the kind-to-calculator table.
    """

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        calculators: Optional[Mapping[CommandKind, Calculator]] = None,
    ) -> None:
        self.settings = settings if settings is not None else LayoutSettings()
        table: Dict[CommandKind, Calculator] = dict(CALCULATORS)
        if calculators:
            table.update(calculators)
        self._calculators: Mapping[CommandKind, Calculator] = MappingProxyType(table)

    def layout(
        self, root: PrintCommand, page_width: Optional[int] = None
    ) -> LayoutResult:
        """
        Lay out ``root`` and everything below it.

        Args:
            root: Root of the command tree (usually a container).
            page_width: Overrides the configured page width for this pass.

        Returns:
            A new LayoutResult. Per-command failures never raise; the
            offending command is skipped.

        Raises:
            TypeError: If ``root`` is not a PrintCommand.
            ValueError: If ``page_width`` is not a positive integer.
        """
        if not isinstance(root, PrintCommand):
            raise TypeError(f"root must be PrintCommand, got {type(root).__name__}")
        settings = self.settings
        if page_width is not None:
            settings = settings.with_page_width(page_width)

        cursor = CursorState(max_line_height=settings.line_height)
        elements: List[PositionedElement] = []
        cursor = self._process(root, cursor, settings, elements)

        elements.extend(close_all_vlines(cursor))
        elements.extend(flush_pending_cut(cursor, settings))

        content_height = max(
            cursor.current_y + cursor.max_line_height, settings.min_content_height
        )
        logger.debug(
            "Layout pass: %d element(s), content height %s, page width %d",
            len(elements),
            content_height,
            settings.page_width,
        )
        return LayoutResult(tuple(elements), content_height, settings.page_width)

    def _process(
        self,
        command: PrintCommand,
        cursor: CursorState,
        settings: LayoutSettings,
        out: List[PositionedElement],
    ) -> CursorState:
        calculator = self._calculators.get(command.kind)
        if calculator is None:
            for child in command.children:
                cursor = self._process(child, cursor, settings, out)
            return cursor

        trial = cursor.copy()
        try:
            produced = calculator(command, trial, settings)
        except InvalidCommandError as e:
            logger.debug("Skipping %r: %s", command, e)
            return cursor
        except (ValueError, TypeError, ArithmeticError):
            logger.warning("Layout of %r failed, command skipped", command, exc_info=True)
            return cursor
        out.extend(produced)
        return trial

    def layout_many(
        self, roots: Sequence[PrintCommand], page_width: Optional[int] = None
    ) -> List[LayoutResult]:
        return [self.layout(root, page_width) for root in roots]


_default_engine = LayoutEngine()


def layout(root: PrintCommand, page_width: int = PRINT_WIDTH_DEFAULT) -> LayoutResult:
    """Lay out ``root`` with default settings at the given page width."""
    return _default_engine.layout(root, page_width)


__all__ = ["Calculator", "CALCULATORS", "LayoutResult", "LayoutEngine", "layout"]
