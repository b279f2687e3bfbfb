"""
Spatial queries over a layout output list.

The list is used as-is as the spatial index: boxes are tested in reverse
insertion order, so where boxes overlap the most recently emitted one wins.
"""

from typing import List, Optional, Sequence, Tuple

from eposim.model.command import PrintCommand
from eposim.model.geometry import PositionedElement


def hit_test(
    elements: Sequence[PositionedElement], x: float, y: float
) -> Optional[PositionedElement]:
    """Topmost element whose box contains (x, y), bounds inclusive."""
    for element in reversed(elements):
        if element.contains(x, y):
            return element
    return None


def hits(
    elements: Sequence[PositionedElement], x: float, y: float
) -> List[PositionedElement]:
    """Every element containing (x, y), topmost first."""
    return [e for e in reversed(elements) if e.contains(x, y)]


def segments_for(
    elements: Sequence[PositionedElement], command: PrintCommand
) -> List[PositionedElement]:
    """All boxes emitted for ``command``, in emission order."""
    return [e for e in elements if e.command is command]


def bounding_box(
    elements: Sequence[PositionedElement],
) -> Optional[Tuple[float, float, float, float]]:
    """Union (x, y, width, height) of the given boxes, None when empty."""
    if not elements:
        return None
    left = min(e.x for e in elements)
    top = min(e.y for e in elements)
    right = max(e.right for e in elements)
    bottom = max(e.bottom for e in elements)
    return left, top, right - left, bottom - top


__all__ = ["hit_test", "hits", "segments_for", "bounding_box"]
