"""
Tests for crop selection geometry.

Tests cover:
- Hit-testing handles, edges and the move area
- Free and fixed-ratio drags
- Aspect ratio fitting and parsing
- Numeric edits
- Invariants under random drags
"""

import random
import unittest

from RS_Libs.CropLib.crop_selection import (
    HANDLES,
    CropSelection,
    apply_drag,
    clamp_selection,
    cursor_for_handle,
    fit_display_size,
    fit_to_aspect_ratio,
    hit_test,
    initial_selection,
    parse_aspect_ratio,
    set_box_numeric,
)

BOUNDS_TOLERANCE = 1e-9
RATIO_TOLERANCE = 1e-3


def assert_valid_selection(test, selection, image_width, image_height, min_size=10.0):
    """Check the bounds, minimum size and aspect ratio of a selection."""
    test.assertGreaterEqual(selection.x, -BOUNDS_TOLERANCE)
    test.assertGreaterEqual(selection.y, -BOUNDS_TOLERANCE)
    test.assertLessEqual(selection.right, image_width + BOUNDS_TOLERANCE)
    test.assertLessEqual(selection.bottom, image_height + BOUNDS_TOLERANCE)
    test.assertGreaterEqual(selection.width, min_size - BOUNDS_TOLERANCE)
    test.assertGreaterEqual(selection.height, min_size - BOUNDS_TOLERANCE)
    if selection.aspect_ratio is not None:
        test.assertAlmostEqual(selection.width / selection.height, selection.aspect_ratio, delta=RATIO_TOLERANCE)


class TestHitTest(unittest.TestCase):
    """Test handle resolution."""

    def setUp(self):
        self.selection = CropSelection(100, 100, 200, 100)

    def test_corners(self):
        self.assertEqual(hit_test(self.selection, 100, 100), "nw")
        self.assertEqual(hit_test(self.selection, 305, 95), "ne")
        self.assertEqual(hit_test(self.selection, 90, 210), "sw")
        self.assertEqual(hit_test(self.selection, 310, 210), "se")

    def test_edges(self):
        self.assertEqual(hit_test(self.selection, 200, 105), "n")
        self.assertEqual(hit_test(self.selection, 200, 195), "s")
        self.assertEqual(hit_test(self.selection, 95, 150), "w")
        self.assertEqual(hit_test(self.selection, 305, 150), "e")

    def test_move_inside(self):
        self.assertEqual(hit_test(self.selection, 200, 150), "move")

    def test_miss(self):
        self.assertIsNone(hit_test(self.selection, 50, 50))
        self.assertIsNone(hit_test(self.selection, 200, 250))

    def test_radius_is_exclusive(self):
        self.assertEqual(hit_test(self.selection, 200, 115), "move")
        self.assertIsNone(hit_test(self.selection, 200, 85))

    def test_display_scale(self):
        """Handles are hit in display space."""
        self.assertEqual(hit_test(self.selection, 150, 100, display_scale=0.5), "se")
        self.assertEqual(hit_test(self.selection, 100, 75, display_scale=0.5), "move")

    def test_cursors(self):
        self.assertEqual(cursor_for_handle("move"), "move")
        self.assertEqual(cursor_for_handle("nw"), "nwse-resize")
        self.assertEqual(cursor_for_handle("ne"), "nesw-resize")
        self.assertEqual(cursor_for_handle("e"), "ew-resize")
        self.assertEqual(cursor_for_handle("s"), "ns-resize")
        self.assertEqual(cursor_for_handle(None), "default")


class TestFreeDrag(unittest.TestCase):
    """Test drags without an aspect ratio."""

    def setUp(self):
        self.start = CropSelection(100, 100, 200, 100)

    def test_move(self):
        result = apply_drag(self.start, "move", 30, -20, 800, 600)

        self.assertEqual(result.as_tuple(), (130, 80, 200, 100))

    def test_move_clamped(self):
        result = apply_drag(self.start, "move", 1000, -1000, 800, 600)

        self.assertEqual(result.as_tuple(), (600, 0, 200, 100))

    def test_east_edge(self):
        result = apply_drag(self.start, "e", 50, 999, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 250, 100))

    def test_west_edge_anchors_right(self):
        result = apply_drag(self.start, "w", -40, 0, 800, 600)

        self.assertEqual(result.as_tuple(), (60, 100, 240, 100))

    def test_nw_corner(self):
        result = apply_drag(self.start, "nw", 20, 30, 800, 600)

        self.assertEqual(result.as_tuple(), (120, 130, 180, 70))

    def test_minimum_size(self):
        result = apply_drag(self.start, "se", -500, -500, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 10, 10))

    def test_edge_clamped_to_image(self):
        result = apply_drag(self.start, "sw", -500, 900, 800, 600)

        self.assertEqual(result.as_tuple(), (0, 100, 300, 500))

    def test_unknown_handle(self):
        with self.assertRaises(ValueError):
            apply_drag(self.start, "north", 0, 0, 800, 600)

    def test_start_not_modified(self):
        apply_drag(self.start, "se", 10, 10, 800, 600)

        self.assertEqual(self.start.as_tuple(), (100, 100, 200, 100))


class TestFixedRatioDrag(unittest.TestCase):
    """Test drags with a locked aspect ratio."""

    def setUp(self):
        self.start = CropSelection(100, 100, 200, 100, aspect_ratio=2.0)

    def test_east_drives_width(self):
        result = apply_drag(self.start, "e", 40, 0, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 240, 120))

    def test_south_drives_height(self):
        result = apply_drag(self.start, "s", 0, 50, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 300, 150))

    def test_nw_anchors_bottom_right(self):
        result = apply_drag(self.start, "nw", -40, 0, 800, 600)

        self.assertEqual(result.right, 300)
        self.assertEqual(result.bottom, 200)
        self.assertEqual((result.width, result.height), (240, 120))

    def test_width_shrinks_to_fit(self):
        """The east edge stops where the derived height reaches the bottom."""
        result = apply_drag(self.start, "e", 2000, 0, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 700, 350))

    def test_height_limited_by_width(self):
        result = apply_drag(self.start, "s", 0, 2000, 800, 600)

        self.assertEqual(result.as_tuple(), (100, 100, 700, 350))

    def test_minimum_size_respects_ratio(self):
        result = apply_drag(self.start, "se", -1000, 0, 800, 600)

        self.assertEqual((result.width, result.height), (20, 10))

    def test_sixteen_by_nine(self):
        ratio = 16 / 9
        start = initial_selection(1920, 1080, ratio)
        result = apply_drag(start, "nw", 300, 300, 1920, 1080)

        assert_valid_selection(self, result, 1920, 1080)
        self.assertAlmostEqual(result.right, 1920)
        self.assertAlmostEqual(result.bottom, 1080)


class TestRandomDrags(unittest.TestCase):
    """Invariants hold after any sequence of drags."""

    def run_random_drags(self, image_width, image_height, ratio, seed):
        rng = random.Random(seed)
        selection = initial_selection(image_width, image_height, ratio)
        for _ in range(500):
            handle = rng.choice(HANDLES)
            dx = rng.uniform(-1.5, 1.5) * image_width
            dy = rng.uniform(-1.5, 1.5) * image_height
            selection = apply_drag(selection, handle, dx, dy, image_width, image_height)
            assert_valid_selection(self, selection, image_width, image_height)

    def test_free(self):
        self.run_random_drags(800, 600, None, seed=1)

    def test_square(self):
        self.run_random_drags(640, 480, 1.0, seed=2)

    def test_sixteen_by_nine(self):
        self.run_random_drags(1920, 1080, 16 / 9, seed=3)

    def test_portrait(self):
        self.run_random_drags(300, 900, 9 / 16, seed=4)

    def test_small_deltas(self):
        rng = random.Random(5)
        selection = initial_selection(1000, 700, 4 / 3)
        for _ in range(500):
            handle = rng.choice(HANDLES)
            selection = apply_drag(selection, handle, rng.uniform(-25, 25), rng.uniform(-25, 25), 1000, 700)
            assert_valid_selection(self, selection, 1000, 700)


class TestAspectRatio(unittest.TestCase):
    """Test ratio parsing and fitting."""

    def test_parse_presets(self):
        self.assertIsNone(parse_aspect_ratio("free"))
        self.assertIsNone(parse_aspect_ratio(None))
        self.assertEqual(parse_aspect_ratio("1:1"), 1.0)
        self.assertAlmostEqual(parse_aspect_ratio("16:9"), 16 / 9)
        self.assertAlmostEqual(parse_aspect_ratio("3:4"), 0.75)
        self.assertAlmostEqual(parse_aspect_ratio("21:9"), 21 / 9)
        self.assertEqual(parse_aspect_ratio(1.5), 1.5)

    def test_parse_invalid(self):
        for value in ("abc", "1:0", "0:1", -2, "x:y"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_aspect_ratio(value)

    def test_fit_recomputes_height(self):
        result = fit_to_aspect_ratio(CropSelection(10, 10, 200, 50), 2.0, 800, 600)

        self.assertEqual(result.as_tuple(), (10, 10, 200, 100))
        self.assertEqual(result.aspect_ratio, 2.0)

    def test_fit_shrinks_and_shifts(self):
        result = fit_to_aspect_ratio(CropSelection(0, 500, 800, 100), 1.0, 800, 600)

        self.assertEqual(result.as_tuple(), (0, 0, 600, 600))

    def test_fit_moves_origin_inside(self):
        result = fit_to_aspect_ratio(CropSelection(700, 550, 100, 50), 1.0, 800, 600)

        self.assertEqual(result.as_tuple(), (700, 500, 100, 100))

    def test_unlock(self):
        result = fit_to_aspect_ratio(CropSelection(0, 0, 100, 50, 2.0), None, 800, 600)

        self.assertIsNone(result.aspect_ratio)
        self.assertEqual(result.as_tuple(), (0, 0, 100, 50))

    def test_initial_selection(self):
        self.assertEqual(initial_selection(800, 600).as_tuple(), (0, 0, 800, 600))
        self.assertEqual(initial_selection(800, 600, 1.0).as_tuple(), (0, 0, 600, 600))

    def test_tiny_image_caps_minimum(self):
        selection = initial_selection(6, 4)

        self.assertEqual(apply_drag(selection, "se", -50, -50, 6, 4).as_tuple(), (0, 0, 6, 4))


class TestNumericEdits(unittest.TestCase):
    """Test numeric box edits and clamping."""

    def test_free_edit_clamped(self):
        selection = CropSelection(0, 0, 100, 100)
        result = set_box_numeric(selection, 750, -20, 100, 5, 800, 600)

        self.assertEqual(result.as_tuple(), (700, 0, 100, 10))

    def test_fixed_ratio_width_drives(self):
        selection = CropSelection(0, 0, 200, 100, 2.0)
        result = set_box_numeric(selection, 0, 0, 300, 100, 800, 600)

        self.assertEqual(result.as_tuple(), (0, 0, 300, 150))

    def test_fixed_ratio_height_only(self):
        selection = CropSelection(0, 0, 200, 100, 2.0)
        result = set_box_numeric(selection, 0, 0, 200, 50, 800, 600)

        self.assertEqual(result.as_tuple(), (0, 0, 100, 50))

    def test_clamp_selection(self):
        result = clamp_selection(CropSelection(-10, 590, 5000, 50), 800, 600)

        self.assertEqual(result.as_tuple(), (0, 550, 800, 50))

    def test_display_size(self):
        self.assertEqual(fit_display_size(1200, 800), (600, 400))
        self.assertEqual(fit_display_size(300, 200), (300, 200))


if __name__ == "__main__":
    unittest.main()
