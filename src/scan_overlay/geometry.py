"""scan_overlay.geometry - sensor space -> view space box mapping

The code detector reports boxes in the coordinate space of the raw scan
frame. On a phone-style mount the sensor is landscape while the preview is
shown in portrait, so the frame is rotated 90° relative to the view and a
plain per-axis scale puts the overlay in the wrong place.

Mapping policy:
- frame orientation == view orientation -> same-axis scale
  (a square frame in an equally sized view is the identity)
- orientations differ -> fixed 90° rotation, then scale:
      x' = (frame.height - y - h) * view.width  / frame.height
      y' = x                      * view.height / frame.width
      w' = h * scale_x
      h' = w * scale_y

Everything here is pure and safe to call from any thread.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Tuple

import numpy as np


class InvalidDimensions(ValueError):
    """Zero, negative or non-finite extents fed to the mapper."""


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


@dataclass(frozen=True)
class Box:
    """Axis-aligned box; origin top-left, x right, y down."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_points(cls, points: Any) -> "Box":
        """Bounding box of an (N,2) array-like of corner points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if pts.size == 0:
            raise ValueError("no points")
        x0, y0 = pts.min(axis=0)
        x1, y1 = pts.max(axis=0)
        return cls(x=float(x0), y=float(y0), width=float(x1 - x0), height=float(y1 - y0))


@dataclass(frozen=True)
class FrameDimensions:
    width: float
    height: float

    @classmethod
    def placeholder(cls) -> "FrameDimensions":
        # Used before the first frame arrives; keeps divisors non-zero.
        return cls(width=1, height=1)

    @property
    def orientation(self) -> Orientation:
        return orientation_of(self.width, self.height)


@dataclass(frozen=True)
class ViewLayout:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def unmeasured(cls) -> "ViewLayout":
        return cls(x=0, y=0, width=0, height=0)

    @property
    def orientation(self) -> Orientation:
        return orientation_of(self.width, self.height)


def orientation_of(width: float, height: float) -> Orientation:
    return Orientation.LANDSCAPE if width > height else Orientation.PORTRAIT


def needs_rotation(frame: FrameDimensions, view: ViewLayout) -> bool:
    """True when the scan frame is rotated 90° relative to the view."""
    return frame.orientation is not view.orientation


def _check_extent(name: str, value: float, allow_zero: bool) -> None:
    if not math.isfinite(value):
        raise InvalidDimensions(f"{name} must be finite, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidDimensions(f"{name} must be {bound}, got {value!r}")


def _check_frame(frame: FrameDimensions) -> None:
    _check_extent("frame.width", frame.width, allow_zero=False)
    _check_extent("frame.height", frame.height, allow_zero=False)


def _check_view(view: ViewLayout) -> None:
    _check_extent("view.width", view.width, allow_zero=True)
    _check_extent("view.height", view.height, allow_zero=True)


def _scale_factors(frame: FrameDimensions, view: ViewLayout) -> Tuple[bool, float, float]:
    """Returns (rotate, scale_x, scale_y).

    After a 90° turn the view's x axis runs along the frame's height and the
    y axis along its width, hence the cross mapping.
    """
    rotate = needs_rotation(frame, view)
    if rotate:
        span_x, span_y = frame.height, frame.width
    else:
        span_x, span_y = frame.width, frame.height

    if span_x <= 0 or span_y <= 0:
        raise InvalidDimensions(f"effective extents must be > 0, got {span_x!r}x{span_y!r}")

    scale_x, scale_y = view.width / span_x, view.height / span_y
    if not (math.isfinite(scale_x) and math.isfinite(scale_y)):
        raise InvalidDimensions(f"scale overflows for frame {span_x!r}x{span_y!r} and view {view.width!r}x{view.height!r}")
    return rotate, scale_x, scale_y


def _check_box(box: Box) -> None:
    for name in ("x", "y"):
        v = getattr(box, name)
        if not math.isfinite(v):
            raise InvalidDimensions(f"box.{name} must be finite, got {v!r}")
    _check_extent("box.width", box.width, allow_zero=True)
    _check_extent("box.height", box.height, allow_zero=True)


def _check_mapped(mapped: Box) -> Box:
    if not all(math.isfinite(v) for v in (mapped.x, mapped.y, mapped.width, mapped.height)):
        raise InvalidDimensions(f"mapped box overflows: {mapped!r}")
    return mapped


def _map_checked(box: Box, frame: FrameDimensions, rotate: bool, scale_x: float, scale_y: float) -> Box:
    _check_box(box)

    if rotate:
        mapped = Box(
            x=(frame.height - box.y - box.height) * scale_x,
            y=box.x * scale_y,
            width=box.height * scale_x,
            height=box.width * scale_y,
        )
    else:
        mapped = Box(
            x=box.x * scale_x,
            y=box.y * scale_y,
            width=box.width * scale_x,
            height=box.height * scale_y,
        )
    return _check_mapped(mapped)


def map_to_view(box: Box, frame: FrameDimensions, view: ViewLayout) -> Box:
    """Map one sensor-space box into view space.

    Parameters:
        box: detected code box in scan-frame coordinates
        frame: scan frame size reported with the same detection batch
        view: measured preview layout; a zero-size view yields a zero-size box

    Raises:
        InvalidDimensions: frame extents <= 0, negative view or box extents,
            any non-finite value, or a result that overflows to Infinity.
    """
    _check_frame(frame)
    _check_view(view)
    rotate, scale_x, scale_y = _scale_factors(frame, view)
    return _map_checked(box, frame, rotate, scale_x, scale_y)


def map_boxes_to_view(boxes: Iterable[Box], frame: FrameDimensions, view: ViewLayout) -> Tuple[Box, ...]:
    """Map a whole detection batch. Validation happens before any box is mapped."""
    _check_frame(frame)
    _check_view(view)
    rotate, scale_x, scale_y = _scale_factors(frame, view)
    return tuple(_map_checked(b, frame, rotate, scale_x, scale_y) for b in boxes)
