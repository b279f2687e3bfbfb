"""
Пакет eposim: симулятор чековой термопечати
============================================

Layout core of an ePOS thermal receipt simulator.

This package provides:
    - A typed print-command tree (text, lines, barcodes, 2D symbols, images,
      logos, feeds, cuts, vertical-line pairs and generic containers)
    - A single-pass flow layout engine producing absolute boxes in device dots
    - Deterministic, visually plausible barcode and 2D symbol placeholders
    - A packed raster codec (hex/base64, 1bpp mono and 4-bit gray16)
    - Hit testing over the layout output

Basic usage:
    >>> from eposim import PrintCommand
    >>> from eposim.layout import layout
    >>>
    >>> doc = PrintCommand.container(
    ...     PrintCommand.make("text", "STORE #42\\n", align="center", dw="true"),
    ...     PrintCommand.make("hline", style="line_medium"),
    ...     PrintCommand.make("barcode", "12345678", type="code128", hri="below"),
    ...     PrintCommand.make("cut"),
    ... )
    >>> result = layout(doc, page_width=576)
    >>> result.content_height
    >>> result.hit_test(10, 5)

Configuration:
    >>> import os
    >>> os.environ["EPOSIM_LOG_LEVEL"] = "DEBUG"
    >>> from eposim import LayoutEngine, LayoutSettings, load_config
    >>> engine = LayoutEngine(LayoutSettings.from_config(load_config()))

Version: 0.1.0
License: MIT
Python: 3.11+
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# VERSION METADATA
# =============================================================================

__version__ = "0.1.0"
__description__ = "Flow layout engine for a simulated ePOS thermal receipt printer"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"eposim requires Python 3.11 or newer. "
        f"Current version: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# LOGGING
# =============================================================================

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _setup_logging() -> None:
    """
    Configure the package logger.

    - stderr handler for WARNING and above
    - rotating file handler for every level, only when EPOSIM_LOG_DIR is set
    - level from EPOSIM_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Idempotent: a logger that already has handlers is left alone.
    """
    log_level = _LOG_LEVELS.get(
        os.environ.get("EPOSIM_LOG_LEVEL", "INFO").upper(), logging.INFO
    )

    root_logger = logging.getLogger("eposim")
    if root_logger.handlers:
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_dir = os.environ.get("EPOSIM_LOG_DIR")
    if log_dir:
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=path / "eposim.log",
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(
                "File logging unavailable (%s), using console only", e
            )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Return a logger inside the ``eposim`` namespace.

    Pass ``__name__``; names outside the package are prefixed with ``eposim.``
    and ``__main__`` maps to ``eposim.main``.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Laid out %d elements", 12)
    """
    if module_name.startswith("eposim"):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger("eposim.main")
    return logging.getLogger(f"eposim.{module_name.lstrip('.')}")


# =============================================================================
# CONFIGURATION
# =============================================================================

_DEFAULT_CONFIG: Dict[str, Any] = {
    "page_width": 576,
    "dpi": 203,
    "line_height": 24,
    "logo_width": 128,
    "logo_height": 64,
    "cut_feed": 50,
    "cut_margin": 2,
    "block_gap": 10,
    "min_content_height": 100,
    "log_level": "INFO",
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file merged over the defaults.

    Keys:
        - page_width: int - printable width in dots (576 = 72 mm at 203 dpi)
        - dpi: int - reference resolution
        - line_height: int - default row height in dots
        - logo_width / logo_height: int - stored-logo placeholder box
        - cut_feed: int - implicit feed before a cut
        - cut_margin: int - gap after a cut mark
        - block_gap: int - gap after an aligned barcode/symbol
        - min_content_height: int - lower bound of the content height
        - log_level: str - informational, logging reads EPOSIM_LOG_LEVEL

    Args:
        config_path: Path to the file. Defaults to ``eposim.json`` in the
            current directory.

    Returns:
        A new dict that always contains every default key.
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path("eposim.json")

    config = _DEFAULT_CONFIG.copy()

    if not config_path.exists():
        logger.info("Config file %s not found, using defaults", config_path)
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
        if not isinstance(user_config, dict):
            raise ValueError(
                f"Config file must contain a JSON object, got {type(user_config).__name__}"
            )
        config.update(user_config)
        logger.info("Configuration loaded from %s", config_path)
        logger.debug("Configuration: %s", config)
    except json.JSONDecodeError as e:
        logger.warning(
            "Cannot parse %s: invalid JSON at line %d, column %d. Using defaults.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning("Cannot read %s: %s. Using defaults.", config_path, e)
    except ValueError as e:
        logger.warning("Invalid config format: %s. Using defaults.", e)

    return config


# Logging first, before the submodules start emitting records
_setup_logging()

from eposim.layout.engine import LayoutEngine, LayoutResult  # noqa: E402
from eposim.layout.errors import InvalidCommandError, LayoutError  # noqa: E402
from eposim.model.command import PrintCommand  # noqa: E402
from eposim.model.enums import CommandKind  # noqa: E402
from eposim.model.geometry import CursorState, PositionedElement  # noqa: E402
from eposim.model.settings import LayoutSettings  # noqa: E402
from eposim.raster import codec as raster_codec  # noqa: E402

__all__ = [
    "__version__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    "get_logger",
    "load_config",
    "LayoutEngine",
    "LayoutResult",
    "LayoutError",
    "InvalidCommandError",
    "PrintCommand",
    "CommandKind",
    "CursorState",
    "PositionedElement",
    "LayoutSettings",
    "raster_codec",
]
