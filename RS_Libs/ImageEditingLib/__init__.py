"""
ImageEditingLib - Core image editing functionality

This module provides the raster buffer model, geometric transforms, pixel
filters, the watermark compositor and the Pillow codec adapter for the
Raster Studio project.
"""

from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer, RgbaColor
from RS_Libs.ImageEditingLib.errors import (
    ImageProcessingError,
    EmptyBufferError,
    InvalidDimensionsError,
    MissingWatermarkSourceError,
    DecodeError,
    EncodeError,
)
from RS_Libs.ImageEditingLib.image_models import (
    ResizeParams,
    CropParams,
    RotateParams,
    FlipParams,
    BlurParams,
    PixelateParams,
    GrayscaleParams,
    FilterParams,
    ColorAdjustParams,
    TextContent,
    ImageContent,
    WatermarkParams,
    ConvertParams,
    CompressParams,
    params_from_dict,
)
from RS_Libs.ImageEditingLib.geometric_ops import resize, crop, rotate, flip
from RS_Libs.ImageEditingLib.pixel_filters import (
    grayscale,
    color_adjust,
    apply_filter,
    box_blur,
    pixelate,
)
from RS_Libs.ImageEditingLib.watermark_compositor import (
    composite,
    composite_watermark,
    render_preview,
)
from RS_Libs.ImageEditingLib.codec_adapter import (
    OutputFormat,
    decode,
    encode,
    load_image,
    save_image,
    validate_image_file,
    format_file_size,
)

__all__ = [
    "RasterBuffer",
    "RgbaColor",
    "ImageProcessingError",
    "EmptyBufferError",
    "InvalidDimensionsError",
    "MissingWatermarkSourceError",
    "DecodeError",
    "EncodeError",
    "ResizeParams",
    "CropParams",
    "RotateParams",
    "FlipParams",
    "BlurParams",
    "PixelateParams",
    "GrayscaleParams",
    "FilterParams",
    "ColorAdjustParams",
    "TextContent",
    "ImageContent",
    "WatermarkParams",
    "ConvertParams",
    "CompressParams",
    "params_from_dict",
    "resize",
    "crop",
    "rotate",
    "flip",
    "grayscale",
    "color_adjust",
    "apply_filter",
    "box_blur",
    "pixelate",
    "composite",
    "composite_watermark",
    "render_preview",
    "OutputFormat",
    "decode",
    "encode",
    "load_image",
    "save_image",
    "validate_image_file",
    "format_file_size",
]
