"""
Interactive crop session.

Holds the state of one crop editor: the loaded image size, the display
scale, the current selection and the drag in progress. Pointer events are
given in display coordinates and converted to image pixels here; all
geometry is delegated to crop_selection.

Example:
    >>> session = CropSession()
    >>> session.load_image(1920, 1080)          # shown 600px wide
    >>> session.set_aspect_ratio("16:9")
    >>> session.on_pointer_down(590, 330)       # grabs the 'se' corner
    'se'
    >>> session.on_pointer_move(400, 200)
    >>> session.on_pointer_up()
    >>> session.box.as_tuple()
"""

import logging
from enum import Enum
from typing import Optional, Tuple, Union

from RS_Libs.constants import CROP_MAX_DISPLAY_WIDTH
from RS_Libs.CropLib.crop_selection import (
    CropSelection,
    apply_drag,
    cursor_for_handle,
    fit_display_size,
    fit_to_aspect_ratio,
    hit_test,
    initial_selection,
    parse_aspect_ratio,
    set_box_numeric,
)

logger = logging.getLogger(__name__)


class CropState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class CropSession:
    """
    Pointer-driven crop selection editor.

    States are IDLE and DRAGGING; while dragging, active_handle names the
    handle being dragged. Every move recomputes the selection from the box
    captured at pointer-down and the total pointer delta.

    Not thread-safe; one session serves one editor.
    """

    def __init__(self, max_display_width: float = CROP_MAX_DISPLAY_WIDTH):
        self.max_display_width = max_display_width
        self._image_size: Optional[Tuple[int, int]] = None
        self._display_scale = 1.0
        self._aspect_ratio: Optional[float] = None
        self._box: Optional[CropSelection] = None

        self._state = CropState.IDLE
        self._active_handle: Optional[str] = None
        self._drag_origin: Optional[Tuple[float, float]] = None
        self._drag_start_box: Optional[CropSelection] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def box(self) -> Optional[CropSelection]:
        """Current selection in image pixels, or None before load_image()."""
        return self._box

    @property
    def state(self) -> CropState:
        return self._state

    @property
    def active_handle(self) -> Optional[str]:
        return self._active_handle

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._aspect_ratio

    @property
    def display_scale(self) -> float:
        return self._display_scale

    @property
    def image_size(self) -> Optional[Tuple[int, int]]:
        return self._image_size

    @property
    def display_size(self) -> Optional[Tuple[float, float]]:
        if self._image_size is None:
            return None
        width, height = self._image_size
        return width * self._display_scale, height * self._display_scale

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def load_image(self, width: int, height: int, display_width: Optional[float] = None) -> CropSelection:
        """
        Start editing an image of the given size.

        The selection covers the full image (fitted to the active ratio, if
        any) and any drag is abandoned.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            display_width: Width the image is shown at; defaults to the image
                           width capped at max_display_width

        Returns:
            The initial selection

        Raises:
            ValueError: If a dimension is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

        if display_width is None:
            display_width, _ = fit_display_size(width, height, self.max_display_width)
        if display_width <= 0:
            raise ValueError(f"Display width must be positive, got {display_width}")

        self._image_size = (int(width), int(height))
        self._display_scale = display_width / width
        self._box = initial_selection(width, height, self._aspect_ratio)
        self._end_drag()

        logger.debug(f"Crop session loaded {width}x{height} image at display scale {self._display_scale:.4f}")
        return self._box

    def reset(self) -> Optional[CropSelection]:
        """Reset the selection to the full image, keeping the aspect ratio."""
        self._end_drag()
        if self._image_size is None:
            return None
        width, height = self._image_size
        self._box = initial_selection(width, height, self._aspect_ratio)
        return self._box

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def on_pointer_down(self, x: float, y: float) -> Optional[str]:
        """
        Begin a drag if the pointer hits the selection.

        Args:
            x: Pointer x in display pixels
            y: Pointer y in display pixels

        Returns:
            The grabbed handle, or None when the pointer missed
        """
        if self._box is None:
            return None

        handle = hit_test(self._box, x, y, self._display_scale)
        if handle is None:
            return None

        self._state = CropState.DRAGGING
        self._active_handle = handle
        self._drag_origin = (x, y)
        self._drag_start_box = self._box
        return handle

    def on_pointer_move(self, x: float, y: float) -> Optional[CropSelection]:
        """
        Update the selection for the current pointer position.

        Ignored while idle.

        Returns:
            The current selection
        """
        if self._state is not CropState.DRAGGING:
            return self._box

        origin_x, origin_y = self._drag_origin
        dx = (x - origin_x) / self._display_scale
        dy = (y - origin_y) / self._display_scale
        width, height = self._image_size
        self._box = apply_drag(self._drag_start_box, self._active_handle, dx, dy, width, height)
        return self._box

    def on_pointer_up(self) -> Optional[CropSelection]:
        self._end_drag()
        return self._box

    def hover_cursor(self, x: float, y: float) -> str:
        """CSS cursor to show at a display position."""
        if self._state is CropState.DRAGGING:
            return cursor_for_handle(self._active_handle)
        if self._box is None:
            return cursor_for_handle(None)
        return cursor_for_handle(hit_test(self._box, x, y, self._display_scale))

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_aspect_ratio(self, ratio: Union[None, str, float]) -> Optional[CropSelection]:
        """
        Lock the selection to an aspect ratio ('free', '16:9', 1.5, ...).

        Applied immediately. During a drag the captured start box is
        replaced by the refitted selection so the drag continues from it.

        Raises:
            ValueError: If the ratio cannot be parsed
        """
        self._aspect_ratio = parse_aspect_ratio(ratio)
        if self._box is None:
            return None

        width, height = self._image_size
        self._box = fit_to_aspect_ratio(self._box, self._aspect_ratio, width, height)
        if self._state is CropState.DRAGGING:
            self._drag_start_box = self._box
        return self._box

    def set_box_numeric(self, x: float, y: float, width: float, height: float) -> Optional[CropSelection]:
        """Apply numeric field edits in image pixels."""
        if self._box is None:
            return None
        image_width, image_height = self._image_size
        self._box = set_box_numeric(self._box, x, y, width, height, image_width, image_height)
        if self._state is CropState.DRAGGING:
            self._drag_start_box = self._box
        return self._box

    def crop_window(self) -> Optional[Tuple[int, int, int, int]]:
        """Selection rounded to whole pixels, ready to pass to crop()."""
        if self._box is None:
            return None
        return tuple(int(round(v)) for v in self._box.as_tuple())

    def _end_drag(self) -> None:
        self._state = CropState.IDLE
        self._active_handle = None
        self._drag_origin = None
        self._drag_start_box = None
