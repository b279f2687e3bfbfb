"""
Font metrics of the simulated printer.

Each font keyword has a fixed base cell (character width and line height in
dots) and a separate height used for barcode HRI text.
"""

from dataclasses import dataclass
from typing import Dict, Final

from eposim.model.enums import FontName


@dataclass(frozen=True)
class FontMetrics:
    char_width: int
    line_height: int
    hri_height: int

    def scaled(self, width_scale: int, height_scale: int) -> "FontMetrics":
        return FontMetrics(
            char_width=self.char_width * width_scale,
            line_height=self.line_height * height_scale,
            hri_height=self.hri_height,
        )


FONT_METRICS: Final[Dict[FontName, FontMetrics]] = {
    FontName.FONT_A: FontMetrics(char_width=12, line_height=24, hri_height=24),
    FontName.FONT_B: FontMetrics(char_width=10, line_height=24, hri_height=18),
    FontName.FONT_C: FontMetrics(char_width=8, line_height=16, hri_height=14),
    FontName.FONT_D: FontMetrics(char_width=9, line_height=17, hri_height=12),
    FontName.FONT_E: FontMetrics(char_width=7, line_height=15, hri_height=10),
}


def metrics_for(font: FontName) -> FontMetrics:
    return FONT_METRICS.get(font, FONT_METRICS[FontName.FONT_A])


__all__ = ["FontMetrics", "FONT_METRICS", "metrics_for"]
