"""
Barcode and 2D symbol placement.

The drawn pattern comes from ``eposim.barcodegen``; this module only sizes the
box, resolves alignment and absolute positioning, and moves the cursor.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from eposim.barcodegen.simulated import (
    SimulatedBarcode,
    SimulatedCodeError,
    SimulatedSymbol,
)
from eposim.layout.errors import InvalidCommandError
from eposim.layout.flow import block_start, finish_block
from eposim.layout.fonts import metrics_for
from eposim.model.command import PrintCommand
from eposim.model.enums import (
    DEFAULT_BARCODE_TYPE,
    DEFAULT_SYMBOL_LEVEL,
    DEFAULT_SYMBOL_TYPE,
    Alignment,
    FontName,
    HriPosition,
    clamp,
)
from eposim.model.geometry import CursorState, PositionedElement
from eposim.model.settings import LayoutSettings

logger = logging.getLogger(__name__)

BARCODE_MODULE_DEFAULT = 3
BARCODE_MODULE_MIN = 2
BARCODE_MODULE_MAX = 6
BARCODE_HEIGHT_DEFAULT = 162
BARCODE_HEIGHT_MIN = 1
BARCODE_HEIGHT_MAX = 255
HRI_ABOVE_MARGIN = 4
HRI_BELOW_MARGIN = 10
HRI_BELOW_OFFSET = 4

SYMBOL_MODULE_DEFAULT = 4
SYMBOL_MODULE_MIN = 1
SYMBOL_MODULE_MAX = 16


def _payload(command: PrintCommand) -> str:
    data = command.text_content.strip()
    if not data:
        raise InvalidCommandError(
            f"{command.kind.value} without data", command=command
        )
    return data


def layout_barcode(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    data = _payload(command)
    barcode_type = command.attr("type") or DEFAULT_BARCODE_TYPE
    hri = HriPosition.parse(command.attr("hri"))
    font = FontName.parse(command.attr("font"))
    align = Alignment.parse(command.attr("align"))

    module_width = clamp(
        command.int_attr("width", BARCODE_MODULE_DEFAULT),
        BARCODE_MODULE_MIN,
        BARCODE_MODULE_MAX,
    )
    bar_height = clamp(
        command.int_attr("height", BARCODE_HEIGHT_DEFAULT),
        BARCODE_HEIGHT_MIN,
        BARCODE_HEIGHT_MAX,
    )

    try:
        code = SimulatedBarcode(barcode_type, data)
        bars = code.bars()
    except SimulatedCodeError as e:
        raise InvalidCommandError(str(e), command=command) from e

    width = code.module_count * module_width
    hri_height = metrics_for(font).hri_height
    above = hri_height + HRI_ABOVE_MARGIN if hri.has_above else 0
    below = hri_height + HRI_BELOW_MARGIN if hri.has_below else 0
    total_height = bar_height + above + below

    x = block_start(cursor, settings, align, width)
    y = cursor.current_y

    hri_boxes = []
    if hri.has_above:
        hri_boxes.append((x, y, width, hri_height))
    if hri.has_below:
        hri_boxes.append((x, y + above + bar_height + HRI_BELOW_OFFSET, width, hri_height))

    style: Dict[str, Any] = {
        "type": barcode_type,
        "data": data,
        "bars": bars,
        "module_count": code.module_count,
        "module_width": module_width,
        "bar_y": y + above,
        "bar_height": bar_height,
        "hri": hri.value,
        "hri_font": font.value,
        "hri_height": hri_height,
        "hri_boxes": tuple(hri_boxes),
    }
    element = PositionedElement(
        command=command,
        x=x,
        y=y,
        width=width,
        height=total_height,
        role="barcode",
        style=style,
    )
    finish_block(cursor, settings, align, x, width, total_height, settings.block_gap)
    return [element]


def symbol_module_size(command: PrintCommand) -> Tuple[int, int]:
    """Module (width, height): ``width`` > ``size`` > 4, height defaults to width."""
    module_width: Optional[int] = command.int_attr("width")
    if module_width is None:
        module_width = command.int_attr("size", SYMBOL_MODULE_DEFAULT)
    module_width = clamp(module_width, SYMBOL_MODULE_MIN, SYMBOL_MODULE_MAX)
    module_height = command.int_attr("height", module_width)
    module_height = clamp(module_height, SYMBOL_MODULE_MIN, SYMBOL_MODULE_MAX)
    return module_width, module_height


def layout_symbol(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    data = _payload(command)
    symbol = SimulatedSymbol(
        command.attr("type") or DEFAULT_SYMBOL_TYPE,
        data,
        command.attr("level") or DEFAULT_SYMBOL_LEVEL,
    )
    try:
        matrix = symbol.matrix()
    except SimulatedCodeError as e:
        raise InvalidCommandError(str(e), command=command) from e

    module_width, module_height = symbol_module_size(command)
    cols, rows = symbol.dimensions()
    quiet = symbol.family.quiet_zone
    width = (cols + 2 * quiet) * module_width
    height = (rows + 2 * quiet) * module_height

    abs_x = command.int_attr("x")
    abs_y = command.int_attr("y")
    if abs_x is not None:
        cursor.current_x = max(0, abs_x)
    if abs_y is not None:
        cursor.current_y = max(0, abs_y)
        cursor.max_line_height = rows * module_height

    # an absolute x pins the symbol, alignment is ignored
    align = Alignment.LEFT if abs_x is not None else Alignment.parse(command.attr("align"))
    x = block_start(cursor, settings, align, width)
    y = cursor.current_y

    style: Dict[str, Any] = {
        "type": symbol.symbol_type,
        "family": symbol.family.value,
        "level": symbol.level,
        "data": data,
        "matrix": matrix,
        "cols": cols,
        "rows": rows,
        "module_width": module_width,
        "module_height": module_height,
        "quiet_zone": quiet,
        "origin": (x + quiet * module_width, y + quiet * module_height),
    }
    element = PositionedElement(
        command=command,
        x=x,
        y=y,
        width=width,
        height=height,
        role="symbol",
        style=style,
    )
    finish_block(cursor, settings, align, x, width, height, settings.block_gap)
    return [element]


__all__ = ["layout_barcode", "layout_symbol", "symbol_module_size"]
