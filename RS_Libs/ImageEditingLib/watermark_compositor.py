"""
Watermark compositor for Raster Studio.

Draws a text or image watermark over a target buffer with standard alpha
compositing. Text is drawn like a canvas strokeText()/fillText() pair: a
faint dark outline first, then the white fill, both anchored on the text
baseline. Image watermarks are scaled to the requested box and drawn with a
uniform opacity.

Example:
    >>> photo = RasterBuffer.solid(800, 600, (30, 60, 90, 255))
    >>> params = WatermarkParams(
    ...     content=TextContent(text="© 2025", font_size=48),
    ...     x=40, y=560, opacity=0.5,
    ... )
    >>> marked = composite_watermark(photo, params)
    >>>
    >>> # Thumbnail preview with identical relative placement
    >>> preview, scale = render_preview(photo, params, max_width=500)
"""

import logging
from dataclasses import replace
from functools import lru_cache
from typing import Any, Tuple

from PIL import Image, ImageDraw, ImageFont

from RS_Libs.constants import (
    WATERMARK_FILL_COLOR,
    WATERMARK_FONT_CANDIDATES,
    WATERMARK_PREVIEW_MAX_WIDTH,
    WATERMARK_STROKE_ALPHA_FACTOR,
    WATERMARK_STROKE_COLOR,
    WATERMARK_STROKE_WIDTH,
)
from RS_Libs.ImageEditingLib.errors import InvalidDimensionsError, MissingWatermarkSourceError
from RS_Libs.ImageEditingLib.image_models import (
    ImageContent,
    TextContent,
    WatermarkParams,
    round_half_up,
)
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer, ensure_not_empty

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def load_watermark_font(font_size: int) -> Any:
    """
    Load a bold TrueType font at the given pixel size.

    Tries the common bold system fonts first and falls back to Pillow's
    bundled default font scaled to the same size.
    """
    for candidate in WATERMARK_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, font_size)
        except OSError:
            continue
    logger.debug(f"No bold system font found, using Pillow default font at {font_size}px")
    return ImageFont.load_default(size=font_size)


def _alpha_byte(opacity: float) -> int:
    return int(round(max(0.0, min(1.0, opacity)) * 255))


class WatermarkCompositor:
    """Handles text and image watermark composition."""

    @staticmethod
    def composite(base: Any, params: WatermarkParams) -> Any:
        """
        Composite a watermark onto an RGBA PIL Image.

        Args:
            base: RGBA PIL Image (full resolution target)
            params: Clamped watermark parameters

        Returns:
            New RGBA PIL Image

        Raises:
            MissingWatermarkSourceError: If image content has no buffer
            TypeError: If content is neither TextContent nor ImageContent
        """
        content = params.content
        if isinstance(content, TextContent):
            return WatermarkCompositor._composite_text(base, content, params)
        if isinstance(content, ImageContent):
            return WatermarkCompositor._composite_image(base, content, params)
        raise TypeError(f"Unsupported watermark content: {type(content)}")

    @staticmethod
    def _composite_text(base: Any, content: TextContent, params: WatermarkParams) -> Any:
        if not content.text:
            return base.copy()

        font = load_watermark_font(content.font_size)
        position = (params.x, params.y)

        stroke_rgba = WATERMARK_STROKE_COLOR + (_alpha_byte(params.opacity * WATERMARK_STROKE_ALPHA_FACTOR),)
        fill_rgba = WATERMARK_FILL_COLOR + (_alpha_byte(params.opacity),)

        # Outline pass, composited before the fill like strokeText() then fillText()
        stroke_layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        ImageDraw.Draw(stroke_layer).text(
            position,
            content.text,
            font=font,
            fill=stroke_rgba,
            anchor="ls",
            stroke_width=WATERMARK_STROKE_WIDTH,
            stroke_fill=stroke_rgba,
        )
        result = Image.alpha_composite(base, stroke_layer)

        fill_layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        ImageDraw.Draw(fill_layer).text(position, content.text, font=font, fill=fill_rgba, anchor="ls")
        return Image.alpha_composite(result, fill_layer)

    @staticmethod
    def _composite_image(base: Any, content: ImageContent, params: WatermarkParams) -> Any:
        if content.buffer is None:
            raise MissingWatermarkSourceError("Image watermark has no source buffer attached")
        ensure_not_empty(content.buffer)

        size = (round_half_up(params.width), round_half_up(params.height))
        if size[0] <= 0 or size[1] <= 0:
            raise InvalidDimensionsError(
                f"Watermark size must be positive, got {params.width}x{params.height}"
            )

        overlay = content.buffer.to_image().resize(size, Image.Resampling.BILINEAR)
        overlay = WatermarkCompositor._apply_opacity(overlay, params.opacity)

        # paste() clips anything that falls outside the target
        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        layer.paste(overlay, (round_half_up(params.x), round_half_up(params.y)))
        return Image.alpha_composite(base, layer)

    @staticmethod
    def _apply_opacity(image: Any, opacity: float) -> Any:
        """
        Scale the alpha channel of an RGBA image by a uniform opacity.

        Args:
            image: RGBA PIL Image
            opacity: 0.0-1.0

        Returns:
            RGBA PIL Image with alpha multiplied by opacity
        """
        if opacity >= 1.0:
            return image
        r, g, b, a = image.split()
        a = a.point(lambda value: int(round(value * opacity)))
        return Image.merge("RGBA", (r, g, b, a))


def composite_watermark(buf: RasterBuffer, params: WatermarkParams) -> RasterBuffer:
    """
    Draw a watermark over a full-resolution buffer.

    Args:
        buf: Target buffer
        params: Watermark parameters (clamped before use)

    Returns:
        New RasterBuffer

    Raises:
        EmptyBufferError: If buf has zero area
        MissingWatermarkSourceError: If image content has no buffer
    """
    ensure_not_empty(buf)
    params = params.clamped()
    result = WatermarkCompositor.composite(buf.to_image(), params)
    logger.debug(f"Composited {type(params.content).__name__} watermark at ({params.x}, {params.y})")
    return RasterBuffer.from_image(result)


def composite(
    buf: RasterBuffer,
    content: Any,
    x: float,
    y: float,
    width: float,
    height: float,
    opacity: float,
) -> RasterBuffer:
    """Positional form of composite_watermark()."""
    return composite_watermark(
        buf,
        WatermarkParams(content=content, x=x, y=y, width=width, height=height, opacity=opacity),
    )


def scale_params(params: WatermarkParams, scale: float) -> WatermarkParams:
    """Scale every position, size and font size of a watermark by scale."""
    content = params.content
    if isinstance(content, TextContent):
        content = replace(content, font_size=max(1, round_half_up(content.font_size * scale)))
    return replace(
        params,
        content=content,
        x=params.x * scale,
        y=params.y * scale,
        width=params.width * scale,
        height=params.height * scale,
    )


def render_preview(
    buf: RasterBuffer,
    params: WatermarkParams,
    max_width: int = WATERMARK_PREVIEW_MAX_WIDTH,
) -> Tuple[RasterBuffer, float]:
    """
    Render a scaled-down preview of a watermarked image.

    The preview is at most max_width pixels wide; every watermark position
    and size is multiplied by the same scale so relative placement matches
    the full-resolution render.

    Returns:
        Tuple of (preview buffer, preview scale)

    Raises:
        EmptyBufferError: If buf has zero area
        MissingWatermarkSourceError: If image content has no buffer
    """
    ensure_not_empty(buf)
    preview_width = max(1, min(buf.width, int(max_width)))
    scale = preview_width / buf.width
    preview_height = max(1, int(buf.height * scale))

    base = buf.to_image().resize((preview_width, preview_height), Image.Resampling.BILINEAR)
    scaled = scale_params(params.clamped(), scale)
    result = WatermarkCompositor.composite(base, scaled)
    return RasterBuffer.from_image(result), scale
