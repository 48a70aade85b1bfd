"""
Image factories shared by the test modules.
"""

import io
import struct
import zlib

import numpy as np
from PIL import Image

from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer


def make_gradient_buffer(width: int = 8, height: int = 6) -> RasterBuffer:
    """
    Build a buffer whose pixels are all distinct.

    R encodes x, G encodes y, B mixes both and alpha varies, so any
    permutation of pixels is detectable.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.stack(
        [
            (xs * 255 // max(1, width - 1)),
            (ys * 255 // max(1, height - 1)),
            ((xs * 7 + ys * 13) % 256),
            (255 - (xs + ys) % 64),
        ],
        axis=2,
    ).astype(np.uint8)
    return RasterBuffer.from_array(array)


def make_png_bytes(width: int = 4, height: int = 4, color=(255, 0, 0, 255)) -> bytes:
    """Encode a solid image as PNG bytes."""
    output = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(output, format="PNG")
    return output.getvalue()


def make_png_header_bytes(width: int, height: int) -> bytes:
    """PNG with only IHDR and IEND chunks, declaring width x height RGBA."""
    def chunk(kind: bytes, payload: bytes) -> bytes:
        crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
        return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IEND", b"")
