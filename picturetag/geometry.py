"""Output dimensions for a resize request, with aspect preservation and no upscaling."""

import math
from typing import Optional, Tuple


def round_px(value: float) -> int:
    """Round half away from zero; Python's round() would send 200.5 to 200."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def resolve(
    orig_width: int,
    orig_height: int,
    req_width: Optional[float] = None,
    req_height: Optional[float] = None,
) -> Tuple[float, float, bool]:
    """
    Returns (width, height, was_undersized).

    Values stay unrounded; callers round with round_px() only when naming the
    file or handing the box to the resize step.
    """
    if orig_width <= 0 or orig_height <= 0:
        raise ValueError(f"Invalid source dimensions {orig_width}x{orig_height}")

    orig_ratio = orig_width / orig_height

    if req_width is None and req_height is None:
        width, height = float(orig_width), float(orig_height)
    elif req_height is None:
        width = float(req_width)
        height = width / orig_ratio
    elif req_width is None:
        height = float(req_height)
        width = orig_ratio * height
    else:
        width, height = float(req_width), float(req_height)

    if width <= orig_width and height <= orig_height:
        return width, height, False

    # Largest box within the source that keeps the requested ratio.
    target_ratio = width / height
    width = orig_width if orig_ratio < target_ratio else orig_height * target_ratio
    height = orig_height if orig_ratio > target_ratio else orig_width / target_ratio
    return float(width), float(height), True
