"""Raster payload codec (hex/base64 text, mono and gray16 packed bitmaps)."""

from eposim.raster.codec import (
    EncodedRaster,
    RasterDecodeError,
    decode,
    decode_strict,
    encode,
    encode_image,
    ink_level,
    pack,
    to_image,
    unpack,
)

__all__ = [
    "EncodedRaster",
    "RasterDecodeError",
    "decode",
    "decode_strict",
    "encode",
    "encode_image",
    "ink_level",
    "pack",
    "to_image",
    "unpack",
]
