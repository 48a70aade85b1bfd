"""
Pixel filters for Raster Studio.

Per-pixel and neighbourhood operations implemented with vectorized NumPy
arithmetic. Every stage writes its result the way a browser's clamped byte
array does: round half to even, then clamp to 0-255. Alpha is preserved
unless a filter states otherwise.

Example:
    >>> buf = RasterBuffer.solid(64, 64, (200, 100, 50, 255))
    >>>
    >>> # Half-way grayscale
    >>> muted = grayscale(buf, intensity=0.5)
    >>>
    >>> # Tonal adjustments (contrast -> brightness -> saturation)
    >>> punchy = color_adjust(buf, brightness=10, contrast=20, saturation=30)
    >>>
    >>> # Neighbourhood filters
    >>> soft = box_blur(buf, radius=3)
    >>> blocky = pixelate(buf, block_size=8)
"""

import logging

import numpy as np

from RS_Libs.constants import (
    FILTER_INVERT,
    FILTER_SATURATE,
    FILTER_SEPIA,
    LUMA_BLUE,
    LUMA_GREEN,
    LUMA_RED,
    SATURATE_BOOST_FACTOR,
)
from RS_Libs.ImageEditingLib.image_models import (
    BlurParams,
    ColorAdjustParams,
    FilterParams,
    GrayscaleParams,
    PixelateParams,
)
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer, ensure_not_empty

logger = logging.getLogger(__name__)

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ]
)


def _to_bytes(values: np.ndarray) -> np.ndarray:
    """Store float channel values as clamped bytes."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _split(buf: RasterBuffer):
    """Return (rgb as float64, alpha as uint8) arrays for a buffer."""
    array = buf.as_array()
    return array[..., :3].astype(np.float64), array[..., 3:].copy()


def _join(rgb: np.ndarray, alpha: np.ndarray) -> RasterBuffer:
    return RasterBuffer.from_array(np.concatenate([rgb, alpha], axis=2))


def _luminance(rgb: np.ndarray) -> np.ndarray:
    return (
        rgb[..., 0:1] * LUMA_RED
        + rgb[..., 1:2] * LUMA_GREEN
        + rgb[..., 2:3] * LUMA_BLUE
    )


# ============================================================================
# Grayscale
# ============================================================================

def grayscale(buf: RasterBuffer, intensity: float = 1.0) -> RasterBuffer:
    """
    Blend every pixel towards its luminance.

    Args:
        buf: Source buffer
        intensity: 0.0 leaves the image untouched, 1.0 is full grayscale

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    intensity = GrayscaleParams(intensity).clamped().intensity
    if intensity == 0.0:
        return buf.copy()

    rgb, alpha = _split(buf)
    gray = _luminance(rgb)
    blended = rgb + (gray - rgb) * intensity
    return _join(_to_bytes(blended), alpha)


# ============================================================================
# Brightness / contrast / saturation
# ============================================================================

def _apply_contrast(channels: np.ndarray, contrast: float) -> np.ndarray:
    factor = (contrast + 100.0) / 100.0
    return _to_bytes((channels - 128.0) * factor + 128.0).astype(np.float64)


def _apply_brightness(channels: np.ndarray, brightness: float) -> np.ndarray:
    return _to_bytes(channels + (brightness / 100.0) * 255.0).astype(np.float64)


def _apply_saturation(channels: np.ndarray, saturation: float) -> np.ndarray:
    factor = (saturation + 100.0) / 100.0
    gray = _luminance(channels)
    return _to_bytes(gray + (channels - gray) * factor).astype(np.float64)


def color_adjust(
    buf: RasterBuffer,
    brightness: float = 0.0,
    contrast: float = 0.0,
    saturation: float = 0.0,
) -> RasterBuffer:
    """
    Apply contrast, then brightness, then saturation.

    The order is fixed and each stage is clamped to 0-255 before the next
    one runs. A stage whose parameter is 0 is skipped.

    Args:
        buf: Source buffer
        brightness: -100..100
        contrast: -100..100
        saturation: -100..100

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    params = ColorAdjustParams(brightness, contrast, saturation).clamped()

    rgb, alpha = _split(buf)
    if params.contrast != 0:
        rgb = _apply_contrast(rgb, params.contrast)
    if params.brightness != 0:
        rgb = _apply_brightness(rgb, params.brightness)
    if params.saturation != 0:
        rgb = _apply_saturation(rgb, params.saturation)

    return _join(rgb.astype(np.uint8), alpha)


# ============================================================================
# Stylized filters
# ============================================================================

def apply_filter(buf: RasterBuffer, kind: str) -> RasterBuffer:
    """
    Apply one of the single-pass stylized filters.

    Args:
        buf: Source buffer
        kind: 'sepia', 'invert' or 'saturate'

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
        ValueError: If kind is unknown
    """
    ensure_not_empty(buf)
    kind = FilterParams(kind).clamped().kind
    rgb, alpha = _split(buf)

    if kind == FILTER_SEPIA:
        result = np.minimum(255.0, rgb @ SEPIA_MATRIX.T)
    elif kind == FILTER_INVERT:
        result = 255.0 - rgb
    elif kind == FILTER_SATURATE:
        delta = rgb.max(axis=2, keepdims=True) - rgb.min(axis=2, keepdims=True)
        boosted = np.minimum(255.0, rgb + delta * SATURATE_BOOST_FACTOR)
        result = np.where(delta > 0, boosted, rgb)
    else:
        raise ValueError(f"Unknown filter kind: {kind}")

    logger.debug(f"Applied {kind} filter to {buf.width}x{buf.height} buffer")
    return _join(_to_bytes(result), alpha)


# ============================================================================
# Box blur
# ============================================================================

def box_blur(buf: RasterBuffer, radius: int) -> RasterBuffer:
    """
    Average every pixel over its (2r+1) x (2r+1) neighbourhood.

    Out-of-bounds neighbours replicate the nearest edge pixel. All four
    channels are averaged. The source snapshot is never written, so every
    output pixel sees only original neighbours.

    Args:
        buf: Source buffer
        radius: Neighbourhood radius in pixels; < 1 returns a copy

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    radius = BlurParams(radius).clamped().radius
    if radius < 1:
        return buf.copy()

    source = buf.as_array().astype(np.int64)
    padded = np.pad(source, ((radius, radius), (radius, radius), (0, 0)), mode="edge")

    # Summed-area table with a leading zero row/column
    table = np.zeros((padded.shape[0] + 1, padded.shape[1] + 1, 4), dtype=np.int64)
    table[1:, 1:] = padded.cumsum(axis=0).cumsum(axis=1)

    size = 2 * radius + 1
    height, width = buf.height, buf.width
    window_sums = (
        table[size:size + height, size:size + width]
        - table[0:height, size:size + width]
        - table[size:size + height, 0:width]
        + table[0:height, 0:width]
    )

    logger.debug(f"Box blur radius {radius} on {width}x{height} buffer")
    return RasterBuffer.from_array(_to_bytes(window_sums / float(size * size)))


# ============================================================================
# Pixelate
# ============================================================================

def pixelate(buf: RasterBuffer, block_size: int) -> RasterBuffer:
    """
    Replace each block_size x block_size tile with its mean colour.

    Tiles along the right and bottom edges are truncated. The mean covers
    all four channels and is rounded half up.

    Args:
        buf: Source buffer
        block_size: Tile edge length in pixels; < 1 returns a copy

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
    """
    ensure_not_empty(buf)
    size = PixelateParams(block_size).clamped().block_size
    if size < 1:
        return buf.copy()

    source = buf.as_array().astype(np.int64)
    row_starts = np.arange(0, buf.height, size)
    col_starts = np.arange(0, buf.width, size)

    sums = np.add.reduceat(np.add.reduceat(source, row_starts, axis=0), col_starts, axis=1)
    row_counts = np.diff(np.append(row_starts, buf.height))
    col_counts = np.diff(np.append(col_starts, buf.width))
    counts = np.outer(row_counts, col_counts)[..., np.newaxis]

    means = np.floor(sums / counts + 0.5).astype(np.uint8)
    expanded = np.repeat(np.repeat(means, row_counts, axis=0), col_counts, axis=1)

    logger.debug(f"Pixelated {buf.width}x{buf.height} buffer with block size {size}")
    return RasterBuffer.from_array(expanded)
