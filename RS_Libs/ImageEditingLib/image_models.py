"""
Transform parameter models for Raster Studio.

Each operation of the image core takes one frozen dataclass describing its
parameters. The dataclasses double as persistable presets via to_dict() and
from_dict(), and every one knows how to clamp itself to its declared domain
so operations never depend on caller-side validation.

Classes:
    ResizeParams, CropParams, RotateParams, FlipParams, BlurParams,
    PixelateParams, GrayscaleParams, FilterParams, ColorAdjustParams,
    WatermarkParams, ConvertParams, CompressParams: Operation parameters
    TextContent, ImageContent: Watermark content variants

Type Aliases:
    TransformParams: Union of every operation parameter class
    WatermarkContent: Union of the watermark content variants
"""

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, ClassVar, Dict, Optional, Union

from RS_Libs.constants import (
    FILTER_KINDS,
    FILTER_SEPIA,
    MAX_ADJUSTMENT,
    MAX_BLUR_RADIUS,
    MAX_FONT_SIZE,
    MAX_PIXEL_BLOCK_SIZE,
    MIN_ADJUSTMENT,
    MIN_FONT_SIZE,
    RESIZE_FIT,
    RESIZE_MODES,
)
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go towards +infinity)."""
    return int(math.floor(value + 0.5))


class _ParamsMixin:
    """Shared dictionary conversion for parameter dataclasses."""

    operation: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["operation"] = self.operation
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known}
        return cls(**filtered)

    def clamped(self):
        return self


@dataclass(frozen=True)
class ResizeParams(_ParamsMixin):
    """Parameters for resize.

    Attributes:
        target_width: Requested output width in pixels
        target_height: Requested output height in pixels
        mode: 'fit' (keep aspect, inside box), 'fill' (cover box and clip)
              or 'stretch' (ignore aspect)
    """
    operation: ClassVar[str] = "resize"

    target_width: int = 800
    target_height: int = 600
    mode: str = RESIZE_FIT

    def clamped(self) -> "ResizeParams":
        mode = str(self.mode).strip().lower()
        if mode not in RESIZE_MODES:
            raise ValueError(f"Unknown resize mode: {self.mode}. Valid modes: {', '.join(RESIZE_MODES)}")
        return replace(self, target_width=int(self.target_width), target_height=int(self.target_height), mode=mode)


@dataclass(frozen=True)
class CropParams(_ParamsMixin):
    operation: ClassVar[str] = "crop"

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class RotateParams(_ParamsMixin):
    """Rotation angle in degrees; positive turns clockwise."""
    operation: ClassVar[str] = "rotate"

    angle_degrees: float = 90.0

    def clamped(self) -> "RotateParams":
        return replace(self, angle_degrees=float(self.angle_degrees) % 360.0)


@dataclass(frozen=True)
class FlipParams(_ParamsMixin):
    operation: ClassVar[str] = "flip"

    horizontal: bool = True
    vertical: bool = False


@dataclass(frozen=True)
class BlurParams(_ParamsMixin):
    operation: ClassVar[str] = "blur"

    radius: int = 5

    def clamped(self) -> "BlurParams":
        return replace(self, radius=int(clamp(round_half_up(float(self.radius)), 0, MAX_BLUR_RADIUS)))


@dataclass(frozen=True)
class PixelateParams(_ParamsMixin):
    operation: ClassVar[str] = "pixelate"

    block_size: int = 10

    def clamped(self) -> "PixelateParams":
        return replace(
            self,
            block_size=int(clamp(round_half_up(float(self.block_size)), 0, MAX_PIXEL_BLOCK_SIZE)),
        )


@dataclass(frozen=True)
class GrayscaleParams(_ParamsMixin):
    """Blend amount between the original (0.0) and full grayscale (1.0)."""
    operation: ClassVar[str] = "grayscale"

    intensity: float = 1.0

    def clamped(self) -> "GrayscaleParams":
        return replace(self, intensity=clamp(float(self.intensity), 0.0, 1.0))


@dataclass(frozen=True)
class FilterParams(_ParamsMixin):
    operation: ClassVar[str] = "filters"

    kind: str = FILTER_SEPIA

    def clamped(self) -> "FilterParams":
        kind = str(self.kind).strip().lower()
        if kind not in FILTER_KINDS:
            raise ValueError(f"Unknown filter kind: {self.kind}. Valid kinds: {', '.join(FILTER_KINDS)}")
        return replace(self, kind=kind)


@dataclass(frozen=True)
class ColorAdjustParams(_ParamsMixin):
    """Tonal adjustments, each in -100..100 where 0 leaves the image alone."""
    operation: ClassVar[str] = "color_adjust"

    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0

    def clamped(self) -> "ColorAdjustParams":
        return replace(
            self,
            brightness=clamp(float(self.brightness), MIN_ADJUSTMENT, MAX_ADJUSTMENT),
            contrast=clamp(float(self.contrast), MIN_ADJUSTMENT, MAX_ADJUSTMENT),
            saturation=clamp(float(self.saturation), MIN_ADJUSTMENT, MAX_ADJUSTMENT),
        )


@dataclass(frozen=True)
class TextContent:
    text: str = "© 2025"
    font_size: int = 48

    def clamped(self) -> "TextContent":
        return replace(self, font_size=int(clamp(round_half_up(float(self.font_size)), MIN_FONT_SIZE, MAX_FONT_SIZE)))


@dataclass(frozen=True)
class ImageContent:
    buffer: Optional[RasterBuffer] = None


WatermarkContent = Union[TextContent, ImageContent]


@dataclass(frozen=True)
class WatermarkParams(_ParamsMixin):
    """Watermark placement.

    Attributes:
        content: TextContent or ImageContent
        x: Left position (text: baseline start) in target pixels
        y: Top position (text: baseline) in target pixels
        width: Width the image content is scaled to
        height: Height the image content is scaled to
        opacity: Overall opacity 0.0-1.0
    """
    operation: ClassVar[str] = "watermark"

    content: Any = field(default_factory=TextContent)
    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0
    opacity: float = 0.5

    def clamped(self) -> "WatermarkParams":
        content = self.content
        if isinstance(content, TextContent):
            content = content.clamped()
        return replace(self, content=content, opacity=clamp(float(self.opacity), 0.0, 1.0))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (image content buffers are not serialized)."""
        data = {
            "operation": self.operation,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "opacity": self.opacity,
        }
        if isinstance(self.content, TextContent):
            data["content"] = {"type": "text", **asdict(self.content)}
        else:
            data["content"] = {"type": "image"}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatermarkParams":
        content_data = dict(data.get("content") or {})
        if content_data.pop("type", "text") == "image":
            content: Any = ImageContent(buffer=content_data.get("buffer"))
        else:
            content = TextContent(**{k: v for k, v in content_data.items() if k in ("text", "font_size")})
        return cls(
            content=content,
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            width=data.get("width", 100.0),
            height=data.get("height", 100.0),
            opacity=data.get("opacity", 0.5),
        )


@dataclass(frozen=True)
class ConvertParams(_ParamsMixin):
    """Pass-through operation; only the output format changes."""
    operation: ClassVar[str] = "format"


@dataclass(frozen=True)
class CompressParams(_ParamsMixin):
    """Pass-through operation whose quality overrides the encode quality."""
    operation: ClassVar[str] = "compress"

    quality: float = 0.8

    def clamped(self) -> "CompressParams":
        return replace(self, quality=clamp(float(self.quality), 0.0, 1.0))


TransformParams = Union[
    ResizeParams,
    CropParams,
    RotateParams,
    FlipParams,
    BlurParams,
    PixelateParams,
    GrayscaleParams,
    FilterParams,
    ColorAdjustParams,
    WatermarkParams,
    ConvertParams,
    CompressParams,
]

PARAMS_TYPES = (
    ResizeParams,
    CropParams,
    RotateParams,
    FlipParams,
    BlurParams,
    PixelateParams,
    GrayscaleParams,
    FilterParams,
    ColorAdjustParams,
    WatermarkParams,
    ConvertParams,
    CompressParams,
)


def params_from_dict(data: Dict[str, Any]) -> Any:
    """
    Rebuild a parameter object from a dictionary produced by to_dict().

    Args:
        data: Dictionary containing an 'operation' key

    Returns:
        The matching parameter dataclass instance

    Raises:
        ValueError: If the operation name is unknown
    """
    operation = str(data.get("operation", "")).strip()
    for params_type in PARAMS_TYPES:
        if params_type.operation == operation:
            return params_type.from_dict(data)
    valid = ", ".join(p.operation for p in PARAMS_TYPES)
    raise ValueError(f"Unknown operation: {operation}. Valid operations: {valid}")
