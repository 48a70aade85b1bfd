"""
Constants and configuration values for Raster Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the library.
"""

# Luminance weights (ITU-R BT.601)
LUMA_RED = 0.299
LUMA_GREEN = 0.587
LUMA_BLUE = 0.114

# Parameter domains
MIN_ADJUSTMENT = -100.0
MAX_ADJUSTMENT = 100.0
MAX_BLUR_RADIUS = 50
MAX_PIXEL_BLOCK_SIZE = 50
MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 500
SATURATE_BOOST_FACTOR = 0.2

# Resize modes
RESIZE_FIT = "fit"
RESIZE_FILL = "fill"
RESIZE_STRETCH = "stretch"
RESIZE_MODES = (RESIZE_FIT, RESIZE_FILL, RESIZE_STRETCH)

# Stylized filter kinds
FILTER_SEPIA = "sepia"
FILTER_INVERT = "invert"
FILTER_SATURATE = "saturate"
FILTER_KINDS = (FILTER_SEPIA, FILTER_INVERT, FILTER_SATURATE)

# Crop selection
CROP_MIN_SIZE = 10.0
CROP_HANDLE_RADIUS = 15.0
CROP_MAX_DISPLAY_WIDTH = 600
ASPECT_RATIO_FREE = "free"
ASPECT_RATIO_PRESETS = {
    "1:1": 1.0,
    "4:3": 4.0 / 3.0,
    "16:9": 16.0 / 9.0,
    "3:4": 3.0 / 4.0,
    "9:16": 9.0 / 16.0,
}

# Watermark
WATERMARK_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")
WATERMARK_FILL_COLOR = (255, 255, 255)
WATERMARK_STROKE_COLOR = (0, 0, 0)
WATERMARK_STROKE_ALPHA_FACTOR = 0.3
WATERMARK_STROKE_WIDTH = 3
WATERMARK_PREVIEW_MAX_WIDTH = 500

# Output / encoding
DEFAULT_OUTPUT_FORMAT = "PNG"
DEFAULT_QUALITY = 0.9
DEFAULT_BACKGROUND_COLOR = (0, 0, 0)
TRANSPARENT = (0, 0, 0, 0)
BATCH_FILENAME_TEMPLATE = "batch_{operation}_{index}.{ext}"

# File intake
MAX_FILE_SIZE_MB = 50
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
FILE_SIZE_UNITS = ("Bytes", "KB", "MB")

# Logging
LOGGER_NAME = "RS_Libs"
LOG_LEVEL_ENV_VAR = "RASTER_STUDIO_LOG_LEVEL"
