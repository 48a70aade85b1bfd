"""
Codec adapter for Raster Studio.

Decodes input bytes into RasterBuffers and encodes RasterBuffers into PNG,
JPEG or WEBP byte streams using Pillow. Also provides the small file-intake
helpers used by hosts before handing bytes to the core.

Classes:
    OutputFormat: Supported output formats with extension and MIME type

Functions:
    decode: Bytes -> RasterBuffer
    encode: RasterBuffer -> bytes
    load_image: Read and decode a file from disk
    save_image: Encode and write a buffer to disk
    validate_image_file: Check extension and size of an input file
    format_file_size: Human readable file size
"""

import io
import logging
import math
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from RS_Libs.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_QUALITY,
    FILE_SIZE_UNITS,
    MAX_FILE_SIZE_MB,
    SUPPORTED_STANDARD_IMAGES,
)
from RS_Libs.ImageEditingLib.errors import DecodeError, EncodeError
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer, ensure_not_empty

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    PNG = "PNG"
    JPEG = "JPEG"
    WEBP = "WEBP"

    @property
    def extension(self) -> str:
        return {"PNG": "png", "JPEG": "jpg", "WEBP": "webp"}[self.value]

    @property
    def mime_type(self) -> str:
        return f"image/{self.value.lower()}"

    @property
    def supports_alpha(self) -> bool:
        return self is not OutputFormat.JPEG

    @classmethod
    def from_value(cls, value: Union[str, "OutputFormat"]) -> "OutputFormat":
        """
        Parse a format name, extension or MIME type.

        Accepts e.g. 'png', 'JPG', '.jpeg', 'image/webp'.

        Raises:
            ValueError: If the format is not supported
        """
        if isinstance(value, OutputFormat):
            return value
        name = str(value).strip().lower()
        if name.startswith("image/"):
            name = name[len("image/"):]
        name = name.lstrip(".")
        if name == "jpg":
            name = "jpeg"
        for fmt in cls:
            if fmt.value.lower() == name:
                return fmt
        raise ValueError(f"Unsupported output format: {value}. Use PNG, JPEG or WEBP.")


def decode(data: bytes) -> RasterBuffer:
    """
    Decode encoded image bytes into an RGBA RasterBuffer.

    Args:
        data: Encoded image bytes (any format Pillow can read)

    Returns:
        Decoded RasterBuffer

    Raises:
        DecodeError: If the bytes are empty, not a readable image or exceed
                     Pillow's decompression bomb limit
    """
    if not data:
        raise DecodeError("Cannot decode empty input")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            buf = RasterBuffer.from_image(image)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to decode image: {str(e)}") from e

    if buf.is_empty:
        raise DecodeError("Decoded image has zero area")
    return buf


def _quality_to_pillow(quality: float) -> int:
    """Map a 0.0-1.0 quality to Pillow's 1-100 scale."""
    return int(max(1, min(100, round(float(quality) * 100))))


def encode(
    buf: RasterBuffer,
    output_format: Union[str, OutputFormat] = OutputFormat.PNG,
    quality: float = DEFAULT_QUALITY,
) -> bytes:
    """
    Encode a RasterBuffer into an image byte stream.

    Quality is ignored for PNG. JPEG has no alpha channel, so transparent
    pixels are flattened onto the default background colour.

    Args:
        buf: Buffer to encode
        output_format: PNG, JPEG or WEBP (name, extension or MIME type)
        quality: 0.0-1.0 for lossy formats

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the buffer is empty, the format unsupported, or
                     Pillow fails to encode
    """
    try:
        fmt = OutputFormat.from_value(output_format)
        ensure_not_empty(buf)
    except (ValueError, TypeError) as e:
        raise EncodeError(str(e)) from e

    image = buf.to_image()
    save_kwargs = {"format": fmt.value}

    if fmt is OutputFormat.JPEG:
        background = Image.new("RGBA", image.size, DEFAULT_BACKGROUND_COLOR + (255,))
        image = Image.alpha_composite(background, image).convert("RGB")
    if fmt is not OutputFormat.PNG:
        save_kwargs["quality"] = _quality_to_pillow(quality)

    output = io.BytesIO()
    try:
        image.save(output, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode image as {fmt.value}: {str(e)}") from e

    logger.debug(f"Encoded {buf.width}x{buf.height} buffer as {fmt.value} ({output.tell()} bytes)")
    return output.getvalue()


def load_image(path: Union[str, Path]) -> RasterBuffer:
    """
    Read a file from disk and decode it.

    Raises:
        DecodeError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Failed to read image file {path}: {str(e)}") from e
    return decode(data)


def save_image(
    buf: RasterBuffer,
    path: Union[str, Path],
    output_format: Optional[Union[str, OutputFormat]] = None,
    quality: float = DEFAULT_QUALITY,
) -> Path:
    """
    Encode a buffer and write it to disk.

    Args:
        buf: Buffer to save
        path: Destination file path (parent directories are created)
        output_format: Format to use; defaults to the path's extension
        quality: 0.0-1.0 for lossy formats

    Returns:
        The path that was written

    Raises:
        EncodeError: If encoding fails
        OSError: If the file cannot be written
    """
    path = Path(path)
    fmt = output_format if output_format is not None else (path.suffix or ".png")
    data = encode(buf, fmt, quality)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def validate_image_file(path: Union[str, Path], max_size_mb: float = MAX_FILE_SIZE_MB) -> Tuple[bool, str]:
    """
    Check that a file looks like a supported image and is not too large.

    Returns:
        Tuple of (is_valid, error_message); the message is empty when valid
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_STANDARD_IMAGES:
        return False, "Please select a valid image file."

    try:
        size = path.stat().st_size
    except OSError as e:
        return False, f"Cannot access file: {str(e)}"

    max_bytes = max_size_mb * 1024 * 1024
    if size > max_bytes:
        return False, (
            f"File size exceeds {max_size_mb:g}MB limit. "
            f"Current size: {format_file_size(size)}"
        )
    return True, ""


def format_file_size(num_bytes: int) -> str:
    """
    Format a byte count as e.g. '0 Bytes', '512 Bytes', '1.5 KB', '2.25 MB'.
    """
    if num_bytes <= 0:
        return "0 Bytes"
    k = 1024
    index = min(int(math.floor(math.log(num_bytes) / math.log(k))), len(FILE_SIZE_UNITS) - 1)
    value = round(num_bytes / (k ** index) * 100) / 100
    return f"{value:g} {FILE_SIZE_UNITS[index]}"
