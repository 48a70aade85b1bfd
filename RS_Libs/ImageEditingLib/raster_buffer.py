"""
Raster buffer model for Raster Studio.

A RasterBuffer owns the width, height and an interleaved 8-bit RGBA channel
array of an image. Every transform, filter and compositor consumes one
buffer and produces a new one; buffers are never mutated in place by the
library.

Classes:
    RasterBuffer: Width/height plus a flat uint8 RGBA pixel array

Functions:
    ensure_not_empty: Raise EmptyBufferError for zero-area buffers
"""

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np
from PIL import Image

from RS_Libs.ImageEditingLib.errors import EmptyBufferError, InvalidDimensionsError

RgbaColor = Tuple[int, int, int, int]

CHANNELS = 4


@dataclass(frozen=True, eq=False)
class RasterBuffer:
    """Interleaved RGBA pixel data with its dimensions.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        pixels: Flat uint8 array of length width * height * 4 (R, G, B, A)
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidDimensionsError(
                f"Buffer dimensions must not be negative, got {self.width}x{self.height}"
            )

        raw = self.pixels
        if isinstance(raw, (bytes, bytearray, memoryview)):
            raw = np.frombuffer(raw, dtype=np.uint8)
        pixels = np.ascontiguousarray(raw, dtype=np.uint8).reshape(-1)
        expected = self.width * self.height * CHANNELS
        if pixels.size != expected:
            raise InvalidDimensionsError(
                f"Pixel data has {pixels.size} values, expected {expected} "
                f"for a {self.width}x{self.height} RGBA buffer"
            )
        object.__setattr__(self, "pixels", pixels)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterBuffer":
        """Create a buffer from a height x width x 4 array."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidDimensionsError(
                f"Expected an array of shape (height, width, 4), got {array.shape}"
            )
        height, width = array.shape[:2]
        return cls(width=int(width), height=int(height), pixels=array.reshape(-1).copy())

    @classmethod
    def from_image(cls, image: Any) -> "RasterBuffer":
        """Create a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = rgba.size
        pixels = np.frombuffer(rgba.tobytes(), dtype=np.uint8).copy()
        return cls(width=width, height=height, pixels=pixels)

    @classmethod
    def solid(cls, width: int, height: int, color: Sequence[int]) -> "RasterBuffer":
        """Create a buffer filled with a single RGBA color."""
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(
                f"Buffer dimensions must be positive, got {width}x{height}"
            )
        rgba = tuple(color) + (255,) * (CHANNELS - len(color))
        array = np.empty((height, width, CHANNELS), dtype=np.uint8)
        array[:, :] = rgba[:CHANNELS]
        return cls.from_array(array)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def as_array(self) -> np.ndarray:
        """Return a read-only height x width x 4 view of the pixels."""
        view = self.pixels.reshape(self.height, self.width, CHANNELS).view()
        view.flags.writeable = False
        return view

    def get_pixel(self, x: int, y: int) -> RgbaColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[offset:offset + CHANNELS]
        return int(r), int(g), int(b), int(a)

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image holding a copy of the pixels."""
        ensure_not_empty(self)
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels.tobytes())

    def copy(self) -> "RasterBuffer":
        return RasterBuffer(self.width, self.height, self.pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"RasterBuffer(width={self.width}, height={self.height})"


def ensure_not_empty(buf: RasterBuffer) -> None:
    """
    Validate that a buffer can be processed.

    Args:
        buf: Buffer to check

    Raises:
        TypeError: If buf is not a RasterBuffer
        EmptyBufferError: If the buffer has zero area
    """
    if not isinstance(buf, RasterBuffer):
        raise TypeError(f"Expected RasterBuffer, got {type(buf)}")
    if buf.is_empty:
        raise EmptyBufferError(
            f"Cannot process an empty buffer ({buf.width}x{buf.height})"
        )
