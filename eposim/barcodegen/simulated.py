"""
RU: Детерминированная имитация штрихкодов и 2D-символов для предпросмотра.
EN: Deterministic look-alike barcodes and 2D symbols for receipt previews.

Provides:
- 1D barcode module counts and a per-module bar vector
- QR-style, PDF417 and DataMatrix module matrices with their fixed structures
  (finder blocks, timing lines, start/stop rows, L-shaped borders)
- Pure integer bit-mixing, no RNG object: identical inputs always give the
  identical pattern, in any process and any thread

The output is a placeholder with the right proportions, not a decodable code.
"""

from __future__ import annotations

import logging
import math
from typing import Final, Optional, Tuple

from eposim.model.enums import (
    DEFAULT_BARCODE_TYPE,
    DEFAULT_SYMBOL_LEVEL,
    DEFAULT_SYMBOL_TYPE,
    SymbolFamily,
    clamp,
    symbol_density,
)

logger = logging.getLogger(__name__)

__all__ = [
    "SimulatedCodeError",
    "SimulatedBarcode",
    "SimulatedSymbol",
    "string_seed",
    "cell_noise",
    "Matrix",
]

Matrix = Tuple[Tuple[bool, ...], ...]

_MASK32: Final[int] = 0xFFFFFFFF

BAR_INK_THRESHOLD: Final[float] = 0.4
FINDER_SIZE: Final[int] = 7
TIMING_INDEX: Final[int] = 6
PDF417_COLUMNS: Final[int] = 17
PDF417_MIN_ROWS: Final[int] = 3
PDF417_MAX_ROWS: Final[int] = 90
DATAMATRIX_SIZES: Final[Tuple[int, ...]] = (
    10, 12, 14, 16, 18, 20, 22, 24, 26, 32, 36, 40, 44, 48,
)
DATAMATRIX_DENSITY: Final[float] = 0.45
PDF417_DENSITY: Final[float] = 0.5
QR_MIN_VERSION: Final[int] = 1
QR_MAX_VERSION: Final[int] = 10


class SimulatedCodeError(ValueError):
    """Simulated barcode/symbol input error."""


def _int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def string_seed(text: str) -> int:
    """Classic 31-multiplier string hash, wrapped to a signed 32-bit integer."""
    h = 0
    for ch in text:
        h = _int32((h << 5) - h + ord(ch))
    return h


def _fmix32(v: int) -> int:
    v &= _MASK32
    v ^= v >> 16
    v = (v * 0x85EBCA6B) & _MASK32
    v ^= v >> 13
    v = (v * 0xC2B2AE35) & _MASK32
    v ^= v >> 16
    return v


def cell_noise(seed: int, i: int, j: int = 0) -> float:
    """Reproducible value in [0, 1) for cell (i, j) under ``seed``."""
    v = seed ^ (i * 374761393) ^ (j * 668265263)
    return _fmix32(v) / 4294967296.0


class SimulatedBarcode:
    """
    1D barcode look-alike.

    Args:
        barcode_type: Type keyword (``upc_a``, ``jan13``, ``code39``, ``code128``...).
        data: Payload; must be non-blank.

    Example:
        >>> bc = SimulatedBarcode("code128", "12345678")
        >>> bc.module_count
        110
    """

    def __init__(self, barcode_type: Optional[str], data: str) -> None:
        self.barcode_type = (barcode_type or DEFAULT_BARCODE_TYPE).strip()
        self.data = data

    def validate(self) -> None:
        if not isinstance(self.data, str) or not self.data.strip():
            raise SimulatedCodeError("Barcode data must be a non-empty string")

    @property
    def module_count(self) -> int:
        low = self.barcode_type.lower()
        if "upc_a" in low or "jan13" in low:
            return 95
        if "upc_e" in low or "jan8" in low:
            return 67
        if "code39" in low:
            return (len(self.data) + 2) * 16
        return (len(self.data) + 2) * 11

    @property
    def seed(self) -> int:
        return string_seed(f"{self.data}|{self.barcode_type}")

    def bars(self) -> Tuple[bool, ...]:
        """One boolean per module, True for a dark bar."""
        self.validate()
        seed = self.seed
        return tuple(
            cell_noise(seed, i) > BAR_INK_THRESHOLD for i in range(self.module_count)
        )

    def __repr__(self) -> str:
        return f"SimulatedBarcode({self.barcode_type!r}, {self.data!r})"


class SimulatedSymbol:
    """
    2D symbol look-alike (QR family, PDF417, DataMatrix).

    Args:
        symbol_type: Type keyword; anything that is not PDF417 or DataMatrix is
            drawn QR-style (QR models, MaxiCode, Aztec, GS1 DataBar stacked...).
        data: Payload; must be non-blank.
        level: Error-correction keyword, only steers the fill density.
    """

    def __init__(
        self,
        symbol_type: Optional[str],
        data: str,
        level: Optional[str] = None,
    ) -> None:
        self.symbol_type = (symbol_type or DEFAULT_SYMBOL_TYPE).strip()
        self.data = data
        self.level = (level or DEFAULT_SYMBOL_LEVEL).strip()
        self.family = SymbolFamily.from_type(self.symbol_type)

    def validate(self) -> None:
        if not isinstance(self.data, str) or not self.data.strip():
            raise SimulatedCodeError("Symbol data must be a non-empty string")

    @property
    def seed(self) -> int:
        return string_seed(f"{self.data}|{self.symbol_type}|{self.level}")

    @property
    def qr_version(self) -> int:
        return clamp(math.ceil((len(self.data) + 8) / 10), QR_MIN_VERSION, QR_MAX_VERSION)

    def dimensions(self) -> Tuple[int, int]:
        """(columns, rows) in modules, quiet zone excluded."""
        n = len(self.data)
        if self.family is SymbolFamily.PDF417:
            rows = clamp(math.ceil((n + 10) / 8), PDF417_MIN_ROWS, PDF417_MAX_ROWS)
            return PDF417_COLUMNS, rows
        if self.family is SymbolFamily.DATAMATRIX:
            side = DATAMATRIX_SIZES[min(len(DATAMATRIX_SIZES) - 1, n // 6)]
            return side, side
        side = 21 + 4 * self.qr_version
        return side, side

    def matrix(self) -> Matrix:
        """Module matrix, row-major, True for a dark module."""
        self.validate()
        cols, rows = self.dimensions()
        seed = self.seed
        if self.family is SymbolFamily.PDF417:
            cell = self._pdf417_cell
        elif self.family is SymbolFamily.DATAMATRIX:
            cell = self._datamatrix_cell
        else:
            cell = self._qr_cell
        density = symbol_density(self.level)
        return tuple(
            tuple(cell(seed, r, c, rows, cols, density) for c in range(cols))
            for r in range(rows)
        )

    # ---- per-family cell rules ----

    @staticmethod
    def _pdf417_cell(seed: int, r: int, c: int, rows: int, cols: int, density: float) -> bool:
        # start/stop rows
        if r == 0 or r == rows - 1:
            return True
        return cell_noise(seed, r, c) > 1 - PDF417_DENSITY

    @staticmethod
    def _datamatrix_cell(seed: int, r: int, c: int, rows: int, cols: int, density: float) -> bool:
        if c == 0 or r == rows - 1:
            return True
        if r == 0 or c == cols - 1:
            return (r + c) % 2 == 0
        return cell_noise(seed, r, c) > 1 - DATAMATRIX_DENSITY

    @staticmethod
    def _finder_cell(fr: int, fc: int) -> bool:
        """Nested square rings of a 7x7 finder block."""
        ring = min(fr, fc, FINDER_SIZE - 1 - fr, FINDER_SIZE - 1 - fc)
        return ring != 1

    @classmethod
    def _qr_cell(
        cls, seed: int, r: int, c: int, rows: int, cols: int, density: float
    ) -> bool:
        fp = FINDER_SIZE
        if r < fp and c < fp:
            return cls._finder_cell(r, c)
        if r < fp and c >= cols - fp:
            return cls._finder_cell(r, c - (cols - fp))
        if r >= rows - fp and c < fp:
            return cls._finder_cell(r - (rows - fp), c)
        if r == TIMING_INDEX:
            return c % 2 == 0
        if c == TIMING_INDEX:
            return r % 2 == 0
        return cell_noise(seed, r, c) > 1 - density

    def is_reserved(self, r: int, c: int) -> bool:
        """True for finder/timing cells of a QR-style symbol."""
        if self.family is not SymbolFamily.QR:
            return False
        cols, rows = self.dimensions()
        fp = FINDER_SIZE
        in_finder = (
            (r < fp and c < fp)
            or (r < fp and c >= cols - fp)
            or (r >= rows - fp and c < fp)
        )
        return in_finder or r == TIMING_INDEX or c == TIMING_INDEX

    def __repr__(self) -> str:
        return (
            f"SimulatedSymbol({self.symbol_type!r}, {self.data!r}, level={self.level!r})"
        )
