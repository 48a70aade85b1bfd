"""
Pytest configuration and shared fixtures for Raster Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest

from helpers import make_gradient_buffer, make_png_bytes


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for batch output files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a not yet created output directory
    """
    return tmp_path / "output"


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def gradient_buffer():
    return make_gradient_buffer()


@pytest.fixture
def png_bytes():
    return make_png_bytes()
