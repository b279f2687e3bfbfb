"""
layout

Flow layout of a print-command tree into positioned boxes.

Public API:
    - LayoutEngine, LayoutResult, layout: the single-pass engine
    - LayoutError, InvalidCommandError: per-command failures (never escape layout)
    - hit_test, segments_for: spatial queries over the output
"""

from eposim.layout.engine import CALCULATORS, LayoutEngine, LayoutResult, layout
from eposim.layout.errors import InvalidCommandError, LayoutError
from eposim.layout.spatial import hit_test, segments_for

__all__ = [
    "CALCULATORS",
    "LayoutEngine",
    "LayoutResult",
    "layout",
    "LayoutError",
    "InvalidCommandError",
    "hit_test",
    "segments_for",
]
