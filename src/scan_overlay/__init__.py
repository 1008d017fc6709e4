"""scan_overlay - bounding-box overlays for codes found in a live camera feed."""

from .controller import ControllerState, NoCameraDevice, OverlayController, OverlaySnapshot
from .geometry import (
    Box,
    FrameDimensions,
    InvalidDimensions,
    Orientation,
    ViewLayout,
    map_boxes_to_view,
    map_to_view,
    needs_rotation,
    orientation_of,
)

__all__ = [
    "Box",
    "ControllerState",
    "FrameDimensions",
    "InvalidDimensions",
    "NoCameraDevice",
    "Orientation",
    "OverlayController",
    "OverlaySnapshot",
    "ViewLayout",
    "map_boxes_to_view",
    "map_to_view",
    "needs_rotation",
    "orientation_of",
]
