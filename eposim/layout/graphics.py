"""
Raster images and stored-logo placeholders.

Both reserve a box in the flow; decoding the raster payload happens here so a
payload that yields no bytes skips the command before the cursor moves.
"""

import logging
from typing import List

from eposim.layout.errors import InvalidCommandError
from eposim.layout.flow import block_start, finish_block
from eposim.model.command import PrintCommand
from eposim.model.enums import Alignment, Color, ImageMode
from eposim.model.geometry import CursorState, PositionedElement
from eposim.model.settings import LayoutSettings
from eposim.raster import codec

logger = logging.getLogger(__name__)


def _positive(command: PrintCommand, name: str) -> int:
    value = command.int_attr(name)
    if value is None or value <= 0:
        raise InvalidCommandError(
            f"image needs a positive integer {name}, got {command.attr(name)!r}",
            command=command,
            attribute=name,
        )
    return value


def layout_image(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    width = _positive(command, "width")
    height = _positive(command, "height")
    mode = ImageMode.parse(command.attr("mode"))
    data = codec.decode(command.text_content)
    if not data:
        raise InvalidCommandError("image payload is empty or undecodable", command=command)

    expected = mode.bytes_per_row(width) * height
    if len(data) < expected:
        logger.debug(
            "Image payload short: %d of %d bytes, missing pixels stay blank",
            len(data),
            expected,
        )

    color = Color.parse(command.attr("color"))
    align = Alignment.parse(command.attr("align"))
    x = block_start(cursor, settings, align, width)
    y = cursor.current_y
    element = PositionedElement(
        command=command,
        x=x,
        y=y,
        width=width,
        height=height,
        role="image",
        style={
            "mode": mode.value,
            "data": data,
            "bytes_per_row": mode.bytes_per_row(width),
            "color": color.value,
            "rgb": color.rgb,
        },
    )
    finish_block(cursor, settings, align, x, width, height)
    return [element]


def layout_logo(
    command: PrintCommand, cursor: CursorState, settings: LayoutSettings
) -> List[PositionedElement]:
    key1 = command.int_attr("key1")
    key2 = command.int_attr("key2")
    if key1 is None or key2 is None:
        raise InvalidCommandError("logo needs integer key1 and key2", command=command)

    width = settings.logo_width
    height = settings.logo_height
    align = Alignment.parse(command.attr("align"))
    x = block_start(cursor, settings, align, width)
    y = cursor.current_y
    element = PositionedElement(
        command=command,
        x=x,
        y=y,
        width=width,
        height=height,
        role="logo",
        style={"key1": key1, "key2": key2, "label": f"key1={key1}, key2={key2}"},
    )
    finish_block(cursor, settings, align, x, width, height)
    return [element]


__all__ = ["layout_image", "layout_logo"]
