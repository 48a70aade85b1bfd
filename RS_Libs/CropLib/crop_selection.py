"""
Crop selection geometry for Raster Studio.

Pure functions that map (current selection, handle, pointer delta) to the
next selection. The selection lives in source-image pixel space; pointer
hit-testing happens in display space using a display scale factor.

Every function returns a selection satisfying:
    0 <= x, 0 <= y, x + width <= image_width, y + height <= image_height,
    width >= min size, height >= min size,
    width / height == aspect_ratio when a ratio is locked.

The minimum size is 10px, capped by the image dimensions for images that
are smaller than that.

Classes:
    CropSelection: Bounding box plus optional locked aspect ratio

Functions:
    initial_selection: Selection covering the whole image
    hit_test: Resolve a display-space point to a drag handle
    apply_drag: Next selection for a handle drag from a captured start box
    fit_to_aspect_ratio: Re-fit a selection to a (new) aspect ratio
    clamp_selection: Force a free selection back inside the image
    set_box_numeric: Apply numeric x/y/width/height edits
    parse_aspect_ratio: Parse 'free', '16:9', 1.5, ...
    cursor_for_handle: CSS cursor name for a handle
    fit_display_size: Display size for an image under a maximum width
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from RS_Libs.constants import (
    ASPECT_RATIO_FREE,
    ASPECT_RATIO_PRESETS,
    CROP_HANDLE_RADIUS,
    CROP_MAX_DISPLAY_WIDTH,
    CROP_MIN_SIZE,
)

HANDLE_MOVE = "move"
CORNER_HANDLES = ("nw", "ne", "sw", "se")
EDGE_HANDLES = ("n", "s", "w", "e")
HANDLES = (HANDLE_MOVE,) + CORNER_HANDLES + EDGE_HANDLES

HANDLE_CURSORS = {
    "move": "move",
    "nw": "nwse-resize",
    "se": "nwse-resize",
    "ne": "nesw-resize",
    "sw": "nesw-resize",
    "n": "ns-resize",
    "s": "ns-resize",
    "e": "ew-resize",
    "w": "ew-resize",
}


@dataclass(frozen=True)
class CropSelection:
    """Crop bounding box in source-image pixels.

    Attributes:
        x: Left edge
        y: Top edge
        width: Box width
        height: Box height
        aspect_ratio: Locked width/height ratio, or None for free cropping
    """
    x: float
    y: float
    width: float
    height: float
    aspect_ratio: Optional[float] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _min_sizes(image_width: float, image_height: float, ratio: Optional[float]) -> Tuple[float, float]:
    """Smallest allowed (width, height), capped by what fits in the image."""
    if ratio is None:
        return min(CROP_MIN_SIZE, image_width), min(CROP_MIN_SIZE, image_height)

    min_width = max(CROP_MIN_SIZE, CROP_MIN_SIZE * ratio)
    min_width = min(min_width, image_width, image_height * ratio)
    return min_width, min_width / ratio


def _require_image(image_width: float, image_height: float) -> None:
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image_width}x{image_height}")


def parse_aspect_ratio(value: Union[None, str, float]) -> Optional[float]:
    """
    Parse an aspect ratio preset or value.

    Args:
        value: None or 'free' for no constraint, a preset such as '16:9',
               any 'a:b' string, or a positive number

    Returns:
        width/height ratio, or None for free

    Raises:
        ValueError: If the value cannot be parsed or is not positive
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("", ASPECT_RATIO_FREE):
            return None
        if text in ASPECT_RATIO_PRESETS:
            return ASPECT_RATIO_PRESETS[text]
        if ":" in text:
            left, _, right = text.partition(":")
            try:
                ratio = float(left) / float(right)
            except (ValueError, ZeroDivisionError):
                raise ValueError(f"Invalid aspect ratio: {value}")
        else:
            try:
                ratio = float(text)
            except ValueError:
                raise ValueError(f"Invalid aspect ratio: {value}")
    else:
        ratio = float(value)

    if ratio <= 0:
        raise ValueError(f"Aspect ratio must be positive, got {value}")
    return ratio


def cursor_for_handle(handle: Optional[str]) -> str:
    return HANDLE_CURSORS.get(handle or "", "default")


def fit_display_size(
    image_width: int,
    image_height: int,
    max_display_width: float = CROP_MAX_DISPLAY_WIDTH,
) -> Tuple[float, float]:
    """Display size of an image shown at most max_display_width wide (never upscaled)."""
    _require_image(image_width, image_height)
    scale = min(1.0, max_display_width / image_width)
    return image_width * scale, image_height * scale


def clamp_selection(selection: CropSelection, image_width: float, image_height: float) -> CropSelection:
    """
    Force a free-ratio selection inside the image and above the minimum size.

    Dimensions are clamped first, then the origin is moved so the box fits.
    """
    _require_image(image_width, image_height)
    min_width, min_height = _min_sizes(image_width, image_height, None)
    width = _clamp(selection.width, min_width, image_width)
    height = _clamp(selection.height, min_height, image_height)
    return replace(
        selection,
        x=_clamp(selection.x, 0.0, image_width - width),
        y=_clamp(selection.y, 0.0, image_height - height),
        width=width,
        height=height,
    )


def fit_to_aspect_ratio(
    selection: CropSelection,
    ratio: Optional[float],
    image_width: float,
    image_height: float,
) -> CropSelection:
    """
    Lock a selection to a new aspect ratio.

    The current width drives: height is recomputed as width / ratio. The width
    is shrunk when the resulting box would not fit in the image, and the
    origin is moved back inside the image if needed. A ratio of None unlocks
    the selection and only clamps it.
    """
    _require_image(image_width, image_height)
    if ratio is None:
        return clamp_selection(replace(selection, aspect_ratio=None), image_width, image_height)
    if ratio <= 0:
        raise ValueError(f"Aspect ratio must be positive, got {ratio}")

    min_width, _ = _min_sizes(image_width, image_height, ratio)
    max_width = min(image_width, image_height * ratio)
    width = min(max(selection.width, min_width), max_width)
    height = width / ratio
    return CropSelection(
        x=_clamp(selection.x, 0.0, image_width - width),
        y=_clamp(selection.y, 0.0, image_height - height),
        width=width,
        height=height,
        aspect_ratio=ratio,
    )


def initial_selection(
    image_width: float,
    image_height: float,
    aspect_ratio: Optional[float] = None,
) -> CropSelection:
    """Selection covering the full image (fitted to the ratio if one is locked)."""
    _require_image(image_width, image_height)
    full = CropSelection(0.0, 0.0, float(image_width), float(image_height))
    if aspect_ratio is None:
        return full
    return fit_to_aspect_ratio(full, aspect_ratio, image_width, image_height)


def set_box_numeric(
    selection: CropSelection,
    x: float,
    y: float,
    width: float,
    height: float,
    image_width: float,
    image_height: float,
) -> CropSelection:
    """
    Apply numeric field edits to a selection.

    With a locked ratio the width drives unless only the height was changed,
    in which case the width is derived from the new height.
    """
    edited = replace(selection, x=float(x), y=float(y), width=float(width), height=float(height))
    ratio = selection.aspect_ratio
    if ratio is None:
        return clamp_selection(edited, image_width, image_height)

    if width == selection.width and height != selection.height:
        edited = replace(edited, width=float(height) * ratio)
    return fit_to_aspect_ratio(edited, ratio, image_width, image_height)


def hit_test(
    selection: CropSelection,
    px: float,
    py: float,
    display_scale: float = 1.0,
    radius: float = CROP_HANDLE_RADIUS,
) -> Optional[str]:
    """
    Resolve a display-space pointer position to a drag handle.

    Corners win when the point is within radius of both edges, then edges
    within radius along their perpendicular axis (and inside the edge span),
    then 'move' anywhere inside the box.

    Args:
        selection: Current selection in image pixels
        px: Pointer x in display pixels
        py: Pointer y in display pixels
        display_scale: Display pixels per image pixel
        radius: Handle grab radius in display pixels

    Returns:
        Handle name, or None when the point misses the selection
    """
    left = selection.x * display_scale
    top = selection.y * display_scale
    right = selection.right * display_scale
    bottom = selection.bottom * display_scale

    near_left = abs(px - left) < radius
    near_right = abs(px - right) < radius
    near_top = abs(py - top) < radius
    near_bottom = abs(py - bottom) < radius
    within_x = left <= px <= right
    within_y = top <= py <= bottom

    if near_left and near_top:
        return "nw"
    if near_right and near_top:
        return "ne"
    if near_left and near_bottom:
        return "sw"
    if near_right and near_bottom:
        return "se"

    if near_top and within_x:
        return "n"
    if near_bottom and within_x:
        return "s"
    if near_left and within_y:
        return "w"
    if near_right and within_y:
        return "e"

    if within_x and within_y:
        return HANDLE_MOVE
    return None


def apply_drag(
    start: CropSelection,
    handle: str,
    dx: float,
    dy: float,
    image_width: float,
    image_height: float,
) -> CropSelection:
    """
    Compute the selection for a drag of handle by (dx, dy) image pixels.

    The delta is always measured from the drag start and applied to the box
    captured at drag start, so repeated calls never accumulate error.

    - 'move' translates the box, clamped inside the image.
    - Edge and corner handles move their own edges; the opposite edges stay
      anchored.
    - With a locked ratio, handles touching the east/west edges drive the
      width (height = width / ratio), 'n' and 's' drive the height
      (width = height * ratio). The driven dimension shrinks as needed for
      the box to stay in the image from its anchor.
    - The minimum size applies last.

    Raises:
        ValueError: If handle is unknown or the image size is not positive
    """
    _require_image(image_width, image_height)
    if handle not in HANDLES:
        raise ValueError(f"Unknown crop handle: {handle}. Valid handles: {', '.join(HANDLES)}")

    if handle == HANDLE_MOVE:
        return replace(
            start,
            x=_clamp(start.x + dx, 0.0, image_width - start.width),
            y=_clamp(start.y + dy, 0.0, image_height - start.height),
        )

    moves_left = "w" in handle
    moves_right = "e" in handle
    moves_top = "n" in handle
    moves_bottom = "s" in handle

    left, top, right, bottom = start.x, start.y, start.right, start.bottom
    ratio = start.aspect_ratio

    if ratio is None:
        min_width, min_height = _min_sizes(image_width, image_height, None)
        if moves_left:
            left = _clamp(left + dx, 0.0, right - min_width)
        if moves_right:
            right = _clamp(right + dx, left + min_width, image_width)
        if moves_top:
            top = _clamp(top + dy, 0.0, bottom - min_height)
        if moves_bottom:
            bottom = _clamp(bottom + dy, top + min_height, image_height)
        return replace(start, x=left, y=top, width=right - left, height=bottom - top)

    min_width, min_height = _min_sizes(image_width, image_height, ratio)
    available_width = right if moves_left else image_width - left
    available_height = bottom if moves_top else image_height - top

    if moves_left or moves_right:
        raw_width = right - (left + dx) if moves_left else (right + dx) - left
        max_width = min(available_width, available_height * ratio)
        width = min(max(raw_width, min_width), max_width)
        height = width / ratio
    else:
        raw_height = bottom - (top + dy) if moves_top else (bottom + dy) - top
        max_height = min(available_height, available_width / ratio)
        height = min(max(raw_height, min_height), max_height)
        width = height * ratio

    return replace(
        start,
        x=right - width if moves_left else left,
        y=bottom - height if moves_top else top,
        width=width,
        height=height,
    )
