"""
CropLib - Crop selection editing

Pure selection geometry (hit-testing, drags, aspect ratio fitting) and the
pointer-driven CropSession built on top of it.
"""

from RS_Libs.CropLib.crop_selection import (
    CropSelection,
    HANDLES,
    apply_drag,
    clamp_selection,
    cursor_for_handle,
    fit_display_size,
    fit_to_aspect_ratio,
    hit_test,
    initial_selection,
    parse_aspect_ratio,
    set_box_numeric,
)
from RS_Libs.CropLib.crop_session import CropSession, CropState

__all__ = [
    "CropSelection",
    "HANDLES",
    "apply_drag",
    "clamp_selection",
    "cursor_for_handle",
    "fit_display_size",
    "fit_to_aspect_ratio",
    "hit_test",
    "initial_selection",
    "parse_aspect_ratio",
    "set_box_numeric",
    "CropSession",
    "CropState",
]
