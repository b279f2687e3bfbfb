"""
Layout settings: the device constants a layout pass runs with.

Built from the application configuration (see ``eposim.load_config``) or used
with defaults. Immutable, so one instance may be shared by concurrent passes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Final, Mapping

from eposim.model.enums import LINE_HEIGHT_DEFAULT, PRINT_WIDTH_DEFAULT, REFERENCE_DPI

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutSettings:
    """
    Attributes:
        page_width: Printable width in dots.
        dpi: Reference resolution, informational.
        line_height: Default row height in dots.
        logo_width: Placeholder box width for stored logos.
        logo_height: Placeholder box height for stored logos.
        cut_feed: Implicit feed before a ``feed`` cut.
        cut_margin: Gap left after a cut mark.
        block_gap: Gap after a centered/right-aligned barcode or symbol.
        min_content_height: Lower bound for the reported content height.
    """

    page_width: int = PRINT_WIDTH_DEFAULT
    dpi: int = REFERENCE_DPI
    line_height: int = LINE_HEIGHT_DEFAULT
    logo_width: int = 128
    logo_height: int = 64
    cut_feed: int = 50
    cut_margin: int = 2
    block_gap: int = 10
    min_content_height: int = 100

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{f.name} must be >= 0, got {value}")
        if self.page_width < 1:
            raise ValueError("page_width must be positive")
        if self.line_height < 1:
            raise ValueError("line_height must be positive")

    def with_page_width(self, page_width: int) -> "LayoutSettings":
        if page_width == self.page_width:
            return self
        values = self.to_dict()
        values["page_width"] = page_width
        return LayoutSettings(**values)

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "LayoutSettings":
        """Pick the layout keys out of an application config mapping."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in config.items():
            if key not in known:
                continue
            try:
                values[key] = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for {key}: {value!r}") from e
        settings = cls(**values)
        logger.debug("Layout settings: %s", settings)
        return settings


__all__ = ["LayoutSettings"]
