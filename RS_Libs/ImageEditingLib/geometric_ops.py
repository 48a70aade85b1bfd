"""
Geometric transforms for Raster Studio.

Each transform maps one RasterBuffer (plus parameters) to a new buffer with
new dimensions. Resampling goes through Pillow's bilinear resampler, the
same primitive a browser canvas uses for drawImage().

Functions:
    resize: Fit, fill or stretch an image to a target size
    crop: Extract a rectangular window clamped to the image
    rotate: Rotate about the centre by an arbitrary angle
    flip: Mirror horizontally and/or vertically
"""

import logging
import math
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps

from RS_Libs.constants import RESIZE_FILL, RESIZE_FIT, RESIZE_STRETCH, TRANSPARENT
from RS_Libs.ImageEditingLib.errors import InvalidDimensionsError
from RS_Libs.ImageEditingLib.image_models import ResizeParams
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer, ensure_not_empty

logger = logging.getLogger(__name__)

# Slack for float error when converting computed canvas sizes to pixels
_SIZE_EPSILON = 1e-6


def _canvas_dimension(value: float) -> int:
    """Truncate a computed canvas dimension the way canvas.width does."""
    return max(1, int(math.floor(value + _SIZE_EPSILON)))


def _require_positive(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"Requested dimensions must be positive, got {width}x{height}"
        )


# ============================================================================
# Resize
# ============================================================================

def resize(buf: RasterBuffer, target_width: int, target_height: int, mode: str = RESIZE_FIT) -> RasterBuffer:
    """
    Resize a buffer towards a target box.

    Args:
        buf: Source buffer
        target_width: Requested width in pixels
        target_height: Requested height in pixels
        mode: 'fit' scales by min(tw/sw, th/sh) and returns the scaled size,
              'fill' scales by max(...) and centres the result on a canvas of
              exactly tw x th, 'stretch' ignores the aspect ratio

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
        InvalidDimensionsError: If a requested dimension is not positive
        ValueError: If mode is unknown
    """
    ensure_not_empty(buf)
    params = ResizeParams(target_width, target_height, mode).clamped()
    _require_positive(params.target_width, params.target_height)

    target = (params.target_width, params.target_height)
    image = buf.to_image()

    if params.mode == RESIZE_FIT:
        scale = min(target[0] / buf.width, target[1] / buf.height)
        size = (_canvas_dimension(buf.width * scale), _canvas_dimension(buf.height * scale))
        result = image.resize(size, Image.Resampling.BILINEAR)
    elif params.mode == RESIZE_FILL:
        # Scale by the larger ratio and keep the centred part of the image
        result = ImageOps.fit(image, target, method=Image.Resampling.BILINEAR, centering=(0.5, 0.5))
    elif params.mode == RESIZE_STRETCH:
        result = image.resize(target, Image.Resampling.BILINEAR)
    else:
        raise ValueError(f"Unknown resize mode: {params.mode}")

    logger.debug(f"Resized {buf.width}x{buf.height} -> {result.width}x{result.height} ({params.mode})")
    return RasterBuffer.from_image(result)


# ============================================================================
# Crop
# ============================================================================

def clamp_crop_window(
    image_width: int,
    image_height: int,
    x: float,
    y: float,
    width: float,
    height: float,
) -> Tuple[int, int, int, int]:
    """
    Clamp a crop window so that it lies fully inside the image.

    The origin is clamped into the image first, then width and height are
    reduced to fit the right and bottom edges.

    Returns:
        Integer (x, y, width, height) window

    Raises:
        InvalidDimensionsError: If width or height is not positive
    """
    _require_positive(width, height)

    left = int(min(max(0, math.floor(x)), image_width - 1))
    top = int(min(max(0, math.floor(y)), image_height - 1))
    w = int(min(max(1, round(width)), image_width - left))
    h = int(min(max(1, round(height)), image_height - top))
    return left, top, w, h


def crop(buf: RasterBuffer, x: float, y: float, width: float, height: float) -> RasterBuffer:
    """
    Extract the window [x, x+width) x [y, y+height).

    Args:
        buf: Source buffer
        x: Left edge in source pixels
        y: Top edge in source pixels
        width: Window width
        height: Window height

    Returns:
        New RasterBuffer with the window contents

    Raises:
        EmptyBufferError: If buf has zero area
        InvalidDimensionsError: If width or height is not positive
    """
    ensure_not_empty(buf)
    left, top, w, h = clamp_crop_window(buf.width, buf.height, x, y, width, height)

    window = buf.as_array()[top:top + h, left:left + w]
    logger.debug(f"Cropped {buf.width}x{buf.height} to window ({left}, {top}, {w}, {h})")
    return RasterBuffer.from_array(np.array(window))


# ============================================================================
# Rotate
# ============================================================================

def rotated_size(width: int, height: int, angle_degrees: float) -> Tuple[int, int]:
    """
    Size of the axis-aligned bounding box of a rotated rectangle.

    Returns:
        (|w cos| + |h sin|, |w sin| + |h cos|) truncated to whole pixels
    """
    radians = math.radians(angle_degrees)
    cos = abs(math.cos(radians))
    sin = abs(math.sin(radians))
    return (
        _canvas_dimension(width * cos + height * sin),
        _canvas_dimension(width * sin + height * cos),
    )


def rotate(buf: RasterBuffer, angle_degrees: float) -> RasterBuffer:
    """
    Rotate a buffer about its centre.

    Positive angles rotate clockwise on screen. The output canvas is the
    bounding box of the rotated image; pixels outside the rotated footprint
    are fully transparent. Quarter turns are exact pixel permutations.

    Args:
        buf: Source buffer
        angle_degrees: Rotation angle, any magnitude (normalised mod 360)

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    angle = float(angle_degrees) % 360.0

    quarter_turns = {
        0.0: None,
        90.0: Image.Transpose.ROTATE_270,
        180.0: Image.Transpose.ROTATE_180,
        270.0: Image.Transpose.ROTATE_90,
    }
    if angle in quarter_turns:
        if quarter_turns[angle] is None:
            return buf.copy()
        result = buf.to_image().transpose(quarter_turns[angle])
        logger.debug(f"Rotated {buf.width}x{buf.height} by {angle} degrees (transpose)")
        return RasterBuffer.from_image(result)

    new_width, new_height = rotated_size(buf.width, buf.height, angle)
    radians = math.radians(angle)
    cos = math.cos(radians)
    sin = math.sin(radians)

    # Inverse mapping: output coordinate -> source coordinate
    src_cx, src_cy = buf.width / 2.0, buf.height / 2.0
    dst_cx, dst_cy = new_width / 2.0, new_height / 2.0
    matrix = (
        cos, sin, src_cx - cos * dst_cx - sin * dst_cy,
        -sin, cos, src_cy + sin * dst_cx - cos * dst_cy,
    )

    result = buf.to_image().transform(
        (new_width, new_height),
        Image.Transform.AFFINE,
        matrix,
        resample=Image.Resampling.BILINEAR,
        fillcolor=TRANSPARENT,
    )
    logger.debug(f"Rotated {buf.width}x{buf.height} by {angle} degrees -> {new_width}x{new_height}")
    return RasterBuffer.from_image(result)


# ============================================================================
# Flip
# ============================================================================

def flip(buf: RasterBuffer, horizontal: bool = True, vertical: bool = False) -> RasterBuffer:
    """
    Mirror pixel columns and/or rows.

    Args:
        buf: Source buffer
        horizontal: Mirror left-right
        vertical: Mirror top-bottom (both together reflect through the centre)

    Returns:
        New RasterBuffer with identical dimensions

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    array = buf.as_array()
    if horizontal:
        array = array[:, ::-1]
    if vertical:
        array = array[::-1, :]
    return RasterBuffer.from_array(np.array(array))
