"""
RS_Libs - Raster Studio Library Modules

This package contains core functionality for the Raster Studio project,
organized into specialized sub-packages:

- ImageEditingLib: Raster buffers, geometric transforms, pixel filters,
  watermark compositing and the Pillow codec adapter
- CropLib: Crop selection state machine driven by pointer events
- BatchLib: Operation registry and the batch processing pipeline
"""

import logging
import os
import sys
from typing import Optional

from RS_Libs.constants import LOG_LEVEL_ENV_VAR, LOGGER_NAME

__version__ = "0.1.0"


def configure_logging(level: Optional[int] = None) -> logging.Logger:
    """
    Attach a single stderr handler to the library logger.

    The level can be overridden with the RASTER_STUDIO_LOG_LEVEL environment
    variable (debug, info, warning, error, critical). Calling this more than
    once updates the existing handler instead of adding another one.

    Args:
        level: Logging level to use when the environment does not override it

    Returns:
        The configured RS_Libs logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    env_level = (os.getenv(LOG_LEVEL_ENV_VAR) or "").strip().upper()
    if env_level and isinstance(logging.getLevelName(env_level), int):
        level = logging.getLevelName(env_level)
    logger.setLevel(level if level is not None else logging.INFO)

    handler = next(
        (h for h in logger.handlers if getattr(h, "stream", None) is sys.stderr),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(handler)

    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    return logger
