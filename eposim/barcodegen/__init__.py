"""
barcodegen

Имитация штрихкодов и 2D-символов для предпросмотра чека.

- 1D barcodes: module counts per type family and a stable bar vector.
- 2D symbols: QR-style, PDF417 and DataMatrix module matrices.
- Deterministic: patterns depend only on (data, type[, level]).

Public API:
    - SimulatedBarcode: 1D look-alike (class)
    - SimulatedSymbol: 2D look-alike (class)
    - SimulatedCodeError: invalid input (exception)
    - string_seed, cell_noise: the underlying pure mixing functions

Examples:
    >>> from eposim.barcodegen import SimulatedBarcode, SimulatedSymbol
    >>> SimulatedBarcode("code128", "12345678").module_count
    110
    >>> len(SimulatedSymbol("qrcode_model_2", "hello").matrix())
    29
"""

from eposim.barcodegen.simulated import (
    Matrix,
    SimulatedBarcode,
    SimulatedCodeError,
    SimulatedSymbol,
    cell_noise,
    string_seed,
)

__all__ = [
    "Matrix",
    "SimulatedBarcode",
    "SimulatedCodeError",
    "SimulatedSymbol",
    "cell_noise",
    "string_seed",
]
