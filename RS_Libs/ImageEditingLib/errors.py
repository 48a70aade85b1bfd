"""
Error types raised by the Raster Studio image core.

All errors derive from ImageProcessingError, which is a ValueError so that
callers already catching ValueError for bad image input keep working.
"""


class ImageProcessingError(ValueError):
    """Base class for every typed failure of the image core."""


class EmptyBufferError(ImageProcessingError):
    """Raised when an operation receives a buffer with zero area."""


class InvalidDimensionsError(ImageProcessingError):
    """Raised when a requested width or height is not positive."""


class MissingWatermarkSourceError(ImageProcessingError):
    """Raised when an image watermark has no source buffer attached."""


class DecodeError(ImageProcessingError):
    """Raised when input bytes cannot be decoded into a raster buffer."""


class EncodeError(ImageProcessingError):
    """Raised when a raster buffer cannot be encoded to the requested format."""
