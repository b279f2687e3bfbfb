"""
RasterCodec: packed-bitmap image payloads of print documents.

Payload text is either hex byte pairs or standard base64. The decoded bytes
are a row-major bitmap in one of two packings:

    mono    1 bit per pixel, MSB first, bytes_per_row = ceil(width / 8),
            bit 1 = ink
    gray16  1 nibble per pixel, high nibble = even x, low nibble = odd x,
            bytes_per_row = ceil(width / 2), 0 = no ink .. 15 = full ink

Every function here is pure and stateless. Pillow does the resampling of
oversized sources and builds preview images.
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
import re
from dataclasses import dataclass
from typing import Final, List, Sequence, Tuple, Union

from PIL import Image
from PIL.Image import Resampling

from eposim.model.enums import PRINT_WIDTH_DEFAULT, ImageMode

logger = logging.getLogger(__name__)

__all__ = [
    "RasterDecodeError",
    "EncodedRaster",
    "decode",
    "decode_strict",
    "pack",
    "unpack",
    "ink_level",
    "encode",
    "encode_image",
    "to_image",
]

_HEX_RE: Final = re.compile(r"^[0-9a-fA-F]+$")
_NON_BASE64_RE: Final = re.compile(r"[^A-Za-z0-9+/=]")

MONO_INK_ALPHA: Final[int] = 128
MONO_INK_LUMA: Final[int] = 128
GRAY_ALPHA_CUTOFF: Final[int] = 128
GRAY_LEVELS: Final[int] = 16

Pixel = Tuple[int, int, int, int]
PixelRows = Sequence[Sequence[Pixel]]
InkRows = Sequence[Sequence[int]]


class RasterDecodeError(ValueError):
    """Payload text is neither hex nor valid base64."""


@dataclass(frozen=True)
class EncodedRaster:
    width: int
    height: int
    mode: ImageMode
    data: bytes

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


# =============================================================================
# TEXT <-> BYTES
# =============================================================================


def decode_strict(text: str) -> bytes:
    """
    Decode payload text to bytes.

    Whitespace is ignored. An even-length run of hex digits is read as hex
    byte pairs; anything else has its non-base64 characters dropped and is
    read as standard base64 (missing padding tolerated).

    Raises:
        RasterDecodeError: If the base64 body is malformed.

    Example:
        >>> decode_strict("ff ff")
        b'\\xff\\xff'
    """
    compact = "".join((text or "").split())
    if not compact:
        return b""
    if len(compact) % 2 == 0 and _HEX_RE.match(compact):
        return bytes.fromhex(compact)

    body = _NON_BASE64_RE.sub("", compact).rstrip("=")
    if len(body) % 4 == 1:
        raise RasterDecodeError(f"Truncated base64 payload ({len(body)} symbols)")
    body += "=" * (-len(body) % 4)
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise RasterDecodeError(f"Malformed base64 payload: {e}") from e


def decode(text: str) -> bytes:
    """Lenient variant of :func:`decode_strict`: malformed input gives ``b""``."""
    try:
        return decode_strict(text)
    except RasterDecodeError as e:
        logger.warning("Raster payload not decodable, treating as empty: %s", e)
        return b""


# =============================================================================
# PACKING
# =============================================================================


def pack(pixels: InkRows, width: int, height: int, mode: ImageMode) -> bytes:
    """
    Pack rows of ink levels (mono: truthy = ink, gray16: 0..15) into bytes.

    Rows shorter than ``width`` and missing rows are padded with no ink.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Invalid raster size {width}x{height}")
    row_bytes = mode.bytes_per_row(width)
    out = bytearray(row_bytes * height)
    for y in range(min(height, len(pixels))):
        row = pixels[y]
        base = y * row_bytes
        for x in range(min(width, len(row))):
            level = row[x]
            if mode is ImageMode.MONO:
                if level:
                    out[base + x // 8] |= 0x80 >> (x % 8)
            else:
                nibble = max(0, min(GRAY_LEVELS - 1, int(level)))
                if x % 2 == 0:
                    out[base + x // 2] |= nibble << 4
                else:
                    out[base + x // 2] |= nibble
    return bytes(out)


def unpack(data: bytes, width: int, height: int, mode: ImageMode) -> List[List[int]]:
    """
    Unpack bytes into rows of ink levels. Bytes past the end of ``data`` read
    as 0, so a short payload yields blank trailing pixels.
    """
    row_bytes = mode.bytes_per_row(width)
    size = len(data)
    rows: List[List[int]] = []
    for y in range(height):
        base = y * row_bytes
        row: List[int] = []
        for x in range(width):
            if mode is ImageMode.MONO:
                i = base + x // 8
                byte = data[i] if i < size else 0
                row.append((byte >> (7 - x % 8)) & 1)
            else:
                i = base + x // 2
                byte = data[i] if i < size else 0
                row.append((byte >> 4) & 0x0F if x % 2 == 0 else byte & 0x0F)
        rows.append(row)
    return rows


def ink_level(pixel: Pixel, mode: ImageMode) -> int:
    """Ink level of one RGBA pixel: mono 0/1, gray16 0..15."""
    r, g, b, a = pixel
    avg = (r + g + b) / 3
    if mode is ImageMode.MONO:
        return 1 if a > MONO_INK_ALPHA and avg < MONO_INK_LUMA else 0
    if a < GRAY_ALPHA_CUTOFF:
        return 0
    level = math.floor((255 - avg) / 17 + 0.5)
    return max(0, min(GRAY_LEVELS - 1, level))


# =============================================================================
# IMAGE ENCODING
# =============================================================================


def _image_from_rows(pixels: PixelRows) -> Image.Image:
    height = len(pixels)
    width = len(pixels[0]) if height else 0
    if width == 0:
        raise ValueError("Pixel rows must not be empty")
    raw = bytearray()
    for row in pixels:
        if len(row) != width:
            raise ValueError("Pixel rows must all have the same length")
        for px in row:
            raw.extend(px)
    return Image.frombytes("RGBA", (width, height), bytes(raw))


def encode_image(
    image: Image.Image,
    mode: ImageMode = ImageMode.MONO,
    max_width: int = PRINT_WIDTH_DEFAULT,
) -> EncodedRaster:
    """
    Quantize and pack a Pillow image.

    Sources wider than ``max_width`` are downscaled to ``max_width`` keeping the
    aspect ratio (height rounded, at least 1).
    """
    if max_width < 1:
        raise ValueError(f"max_width must be positive, got {max_width}")
    img = image.convert("RGBA")
    width, height = img.size
    if width > max_width:
        new_height = max(1, round(height * max_width / width))
        logger.debug(
            "Downscaling raster %dx%d -> %dx%d", width, height, max_width, new_height
        )
        img = img.resize((max_width, new_height), Resampling.LANCZOS)
        width, height = img.size

    raw = img.tobytes()
    levels: List[List[int]] = []
    for y in range(height):
        offset = y * width * 4
        levels.append(
            [
                ink_level(
                    (raw[i], raw[i + 1], raw[i + 2], raw[i + 3]), mode
                )
                for i in range(offset, offset + width * 4, 4)
            ]
        )
    return EncodedRaster(width, height, mode, pack(levels, width, height, mode))


def encode(
    source: Union[Image.Image, PixelRows],
    mode: ImageMode = ImageMode.MONO,
    max_width: int = PRINT_WIDTH_DEFAULT,
) -> str:
    """
    Encode a Pillow image or rows of RGBA tuples to a base64 payload.

    Example:
        >>> encode([[(0, 0, 0, 255)] * 8])
        '/w=='
    """
    image = source if isinstance(source, Image.Image) else _image_from_rows(source)
    return encode_image(image, mode, max_width).to_base64()


def to_image(
    data: bytes,
    width: int,
    height: int,
    mode: ImageMode = ImageMode.MONO,
    rgb: Tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """
    Build an RGBA preview of packed raster bytes in the given ink colour.
    Mono ink is opaque; gray16 maps level to alpha (level / 15 * 255).
    """
    if width < 1 or height < 1:
        raise ValueError(f"Invalid raster size {width}x{height}")
    r, g, b = rgb
    buf = bytearray()
    for row in unpack(data, width, height, mode):
        for level in row:
            if mode is ImageMode.MONO:
                alpha = 255 if level else 0
            else:
                alpha = round(level * 255 / (GRAY_LEVELS - 1))
            buf.extend((r, g, b, alpha))
    return Image.frombytes("RGBA", (width, height), bytes(buf))
