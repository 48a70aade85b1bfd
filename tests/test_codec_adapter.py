"""
Tests for the codec adapter.

Tests cover:
- Decoding bytes and files
- Encoding PNG / JPEG / WEBP
- Output format parsing
- File intake validation
- File size formatting
"""

import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from RS_Libs.ImageEditingLib.codec_adapter import (
    OutputFormat,
    decode,
    encode,
    format_file_size,
    load_image,
    save_image,
    validate_image_file,
)
from RS_Libs.ImageEditingLib.errors import DecodeError, EncodeError
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer
from helpers import make_gradient_buffer, make_png_bytes, make_png_header_bytes


class TestDecode(unittest.TestCase):
    """Test decoding."""

    def test_decode_png(self):
        buf = decode(make_png_bytes(3, 2, (1, 2, 3, 4)))

        self.assertEqual(buf.size, (3, 2))
        self.assertEqual(buf.get_pixel(2, 1), (1, 2, 3, 4))

    def test_decode_rgb_jpeg_gains_alpha(self):
        output = io.BytesIO()
        Image.new("RGB", (5, 5), (0, 128, 255)).save(output, format="JPEG")
        buf = decode(output.getvalue())

        self.assertEqual(buf.size, (5, 5))
        self.assertEqual(buf.get_pixel(0, 0)[3], 255)

    def test_decode_empty(self):
        with self.assertRaises(DecodeError):
            decode(b"")

    def test_decode_garbage(self):
        with self.assertRaises(DecodeError):
            decode(b"definitely not an image")

    def test_decode_oversized_image(self):
        """Dimensions past Pillow's bomb limit raise DecodeError, not a Pillow error."""
        with self.assertRaises(DecodeError):
            decode(make_png_header_bytes(20000, 20000))


class TestEncode(unittest.TestCase):
    """Test encoding."""

    def setUp(self):
        self.buf = make_gradient_buffer(6, 4)

    def test_png_round_trip_is_lossless(self):
        self.assertEqual(decode(encode(self.buf, "PNG")), self.buf)

    def test_jpeg_signature(self):
        data = encode(self.buf, OutputFormat.JPEG, 0.8)

        self.assertTrue(data.startswith(b"\xff\xd8"))

    def test_jpeg_flattens_onto_black(self):
        transparent = RasterBuffer.solid(8, 8, (255, 255, 255, 0))
        decoded = decode(encode(transparent, "jpeg", 1.0))
        r, g, b, a = decoded.get_pixel(4, 4)

        self.assertLess(max(r, g, b), 8)
        self.assertEqual(a, 255)

    def test_webp_signature(self):
        data = encode(self.buf, "image/webp", 0.9)

        self.assertEqual(data[:4], b"RIFF")
        self.assertEqual(data[8:12], b"WEBP")

    def test_lower_quality_is_smaller(self):
        big = make_gradient_buffer(64, 64)

        self.assertLess(len(encode(big, "JPEG", 0.1)), len(encode(big, "JPEG", 1.0)))

    def test_unsupported_format(self):
        with self.assertRaises(EncodeError):
            encode(self.buf, "tiff")

    def test_empty_buffer(self):
        with self.assertRaises(EncodeError):
            encode(RasterBuffer(0, 0, b""), "PNG")


class TestOutputFormat(unittest.TestCase):
    """Test format parsing and properties."""

    def test_from_value(self):
        self.assertIs(OutputFormat.from_value("png"), OutputFormat.PNG)
        self.assertIs(OutputFormat.from_value("JPG"), OutputFormat.JPEG)
        self.assertIs(OutputFormat.from_value(".jpeg"), OutputFormat.JPEG)
        self.assertIs(OutputFormat.from_value("image/webp"), OutputFormat.WEBP)
        self.assertIs(OutputFormat.from_value(OutputFormat.PNG), OutputFormat.PNG)

    def test_from_value_invalid(self):
        with self.assertRaises(ValueError):
            OutputFormat.from_value("gif")

    def test_properties(self):
        self.assertEqual(OutputFormat.JPEG.extension, "jpg")
        self.assertEqual(OutputFormat.WEBP.mime_type, "image/webp")
        self.assertFalse(OutputFormat.JPEG.supports_alpha)
        self.assertTrue(OutputFormat.PNG.supports_alpha)


class TestFileHelpers(unittest.TestCase):
    """Test loading, saving and intake validation."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_and_load(self):
        buf = make_gradient_buffer(5, 5)
        path = save_image(buf, self.dir / "nested" / "out.png")

        self.assertTrue(path.exists())
        self.assertEqual(load_image(path), buf)

    def test_save_uses_extension(self):
        path = save_image(make_gradient_buffer(5, 5), self.dir / "out.jpg")

        self.assertTrue(path.read_bytes().startswith(b"\xff\xd8"))

    def test_load_missing_file(self):
        with self.assertRaises(DecodeError):
            load_image(self.dir / "missing.png")

    def test_validate_ok(self):
        path = self.dir / "photo.png"
        path.write_bytes(make_png_bytes())

        self.assertEqual(validate_image_file(path), (True, ""))

    def test_validate_extension(self):
        path = self.dir / "notes.txt"
        path.write_text("hello")

        is_valid, message = validate_image_file(path)
        self.assertFalse(is_valid)
        self.assertIn("valid image", message)

    def test_validate_size_limit(self):
        path = self.dir / "big.png"
        path.write_bytes(b"\0" * 2048)

        is_valid, message = validate_image_file(path, max_size_mb=0.001)
        self.assertFalse(is_valid)
        self.assertIn("2 KB", message)

    def test_validate_missing(self):
        is_valid, _ = validate_image_file(self.dir / "missing.png")

        self.assertFalse(is_valid)

    def test_format_file_size(self):
        self.assertEqual(format_file_size(0), "0 Bytes")
        self.assertEqual(format_file_size(512), "512 Bytes")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(5 * 1024 * 1024), "5 MB")


if __name__ == "__main__":
    unittest.main()
