"""
Tests for geometric transforms.

Tests cover:
- Resize fit / fill / stretch
- Crop window clamping
- Rotation (quarter turns and arbitrary angles)
- Flip
- Error handling
"""

import unittest

from RS_Libs.ImageEditingLib.errors import EmptyBufferError, InvalidDimensionsError
from RS_Libs.ImageEditingLib.geometric_ops import (
    clamp_crop_window,
    crop,
    flip,
    resize,
    rotate,
    rotated_size,
)
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer
from helpers import make_gradient_buffer


class TestResize(unittest.TestCase):
    """Test resize modes."""

    def setUp(self):
        self.square = RasterBuffer.solid(100, 100, (200, 10, 10, 255))

    def test_fit_keeps_aspect(self):
        """Fit 100x100 into 50x200 gives 50x50."""
        result = resize(self.square, 50, 200, "fit")

        self.assertEqual(result.size, (50, 50))

    def test_fit_upscales(self):
        result = resize(RasterBuffer.solid(10, 5, (0, 0, 0, 255)), 40, 40, "fit")

        self.assertEqual(result.size, (40, 20))

    def test_fill_is_exact_target(self):
        result = resize(RasterBuffer.solid(100, 50, (0, 0, 0, 255)), 40, 40, "fill")

        self.assertEqual(result.size, (40, 40))

    def test_stretch_ignores_aspect(self):
        result = resize(self.square, 30, 5, "stretch")

        self.assertEqual(result.size, (30, 5))

    def test_solid_colour_preserved(self):
        result = resize(self.square, 37, 21, "stretch")

        self.assertEqual(result.get_pixel(18, 10), (200, 10, 10, 255))

    def test_mode_is_case_insensitive(self):
        self.assertEqual(resize(self.square, 20, 20, "FIT").size, (20, 20))

    def test_invalid_dimensions(self):
        with self.assertRaises(InvalidDimensionsError):
            resize(self.square, 0, 10, "fit")

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            resize(self.square, 10, 10, "zoom")

    def test_empty_buffer(self):
        with self.assertRaises(EmptyBufferError):
            resize(RasterBuffer(0, 0, b""), 10, 10, "fit")


class TestCrop(unittest.TestCase):
    """Test crop windows."""

    def setUp(self):
        self.buf = make_gradient_buffer(200, 100)

    def test_crop_window(self):
        """Crop (50, 0, 100, 100) of 200x100 starts at source (50, 0)."""
        result = crop(self.buf, 50, 0, 100, 100)

        self.assertEqual(result.size, (100, 100))
        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(50, 0))
        self.assertEqual(result.get_pixel(99, 99), self.buf.get_pixel(149, 99))

    def test_crop_reduced_to_fit(self):
        result = crop(self.buf, 190, 95, 50, 50)

        self.assertEqual(result.size, (10, 5))
        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(190, 95))

    def test_crop_origin_clamped(self):
        result = crop(self.buf, -5, -5, 3, 3)

        self.assertEqual(result.size, (3, 3))
        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(0, 0))

    def test_clamp_crop_window(self):
        self.assertEqual(clamp_crop_window(8, 6, 6, 4, 10, 10), (6, 4, 2, 2))
        self.assertEqual(clamp_crop_window(8, 6, 20, 20, 5, 5), (7, 5, 1, 1))

    def test_invalid_size(self):
        with self.assertRaises(InvalidDimensionsError):
            crop(self.buf, 0, 0, 0, 10)
        with self.assertRaises(InvalidDimensionsError):
            crop(self.buf, 0, 0, 10, -1)

    def test_input_not_mutated(self):
        before = self.buf.copy()
        crop(self.buf, 10, 10, 20, 20)

        self.assertEqual(self.buf, before)


class TestRotate(unittest.TestCase):
    """Test rotation."""

    def setUp(self):
        self.buf = make_gradient_buffer(8, 6)

    def test_full_turn_is_identity(self):
        self.assertEqual(rotate(self.buf, 360), self.buf)
        self.assertEqual(rotate(self.buf, 0), self.buf)

    def test_quarter_turn_is_clockwise(self):
        """Top-left pixel ends up top-right after +90 degrees."""
        result = rotate(self.buf, 90)

        self.assertEqual(result.size, (6, 8))
        self.assertEqual(result.get_pixel(5, 0), self.buf.get_pixel(0, 0))
        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(0, 5))

    def test_quarter_turn_inverse(self):
        self.assertEqual(rotate(rotate(self.buf, 90), -90), self.buf)

    def test_half_turn_twice(self):
        self.assertEqual(rotate(rotate(self.buf, 180), 180), self.buf)

    def test_negative_angle_normalised(self):
        self.assertEqual(rotate(self.buf, -270), rotate(self.buf, 90))

    def test_arbitrary_angle_expands_canvas(self):
        square = RasterBuffer.solid(10, 10, (255, 0, 0, 255))
        result = rotate(square, 45)

        self.assertEqual(result.size, (14, 14))
        self.assertEqual(result.get_pixel(0, 0)[3], 0)
        self.assertEqual(result.get_pixel(7, 7), (255, 0, 0, 255))

    def test_rotated_size(self):
        self.assertEqual(rotated_size(100, 50, 90), (50, 100))
        self.assertEqual(rotated_size(100, 50, 180), (100, 50))
        self.assertEqual(rotated_size(10, 10, 45), (14, 14))


class TestFlip(unittest.TestCase):
    """Test mirroring."""

    def setUp(self):
        self.buf = make_gradient_buffer(7, 5)

    def test_horizontal(self):
        result = flip(self.buf, horizontal=True)

        self.assertEqual(result.size, self.buf.size)
        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(6, 0))

    def test_vertical(self):
        result = flip(self.buf, horizontal=False, vertical=True)

        self.assertEqual(result.get_pixel(2, 0), self.buf.get_pixel(2, 4))

    def test_both(self):
        result = flip(self.buf, horizontal=True, vertical=True)

        self.assertEqual(result.get_pixel(0, 0), self.buf.get_pixel(6, 4))

    def test_self_inverse(self):
        for horizontal, vertical in ((True, False), (False, True), (True, True)):
            with self.subTest(horizontal=horizontal, vertical=vertical):
                twice = flip(flip(self.buf, horizontal, vertical), horizontal, vertical)
                self.assertEqual(twice, self.buf)

    def test_no_axes_is_copy(self):
        self.assertEqual(flip(self.buf, False, False), self.buf)


if __name__ == "__main__":
    unittest.main()
