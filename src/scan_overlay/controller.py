"""scan_overlay.controller - overlay state owner

Holds the latest detection batch (raw boxes + the frame dimensions they came
with), the latest measured view layout, and the derived list of view-space
overlay boxes. The derived list is recomputed in full whenever either input
changes, using the most recently stored value of the other.

Detector and layout callbacks may arrive on different threads; one lock
serialises the read-modify-publish of the stored state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from .geometry import Box, FrameDimensions, ViewLayout, map_boxes_to_view
from .logging_utils import format_box, rate_limited_print


class ControllerState(str, Enum):
    AWAITING_DEVICE = "awaiting_device"
    READY = "ready"
    NO_DEVICE = "no_device"


class NoCameraDevice(RuntimeError):
    """Device acquisition reported no camera; there is nothing to overlay."""


@dataclass(frozen=True)
class OverlaySnapshot:
    state: ControllerState
    frame: FrameDimensions
    layout: ViewLayout
    boxes: Tuple[Box, ...]


class OverlayController:
    """
    Usage:
        ctl = OverlayController()
        ctl.set_device_available(camera is not None)
        ctl.on_layout(ViewLayout(0, 0, 480, 640))
        ctl.on_detection([code.frame for code in codes], frame_dims)
        boxes = ctl.current_overlay_boxes()
    """

    def __init__(self, debug: bool = False, print_hz: float = 5.0) -> None:
        self.debug = bool(debug)
        self.print_hz = float(print_hz)

        self._lock = threading.Lock()
        self._state = ControllerState.AWAITING_DEVICE
        self._frame = FrameDimensions.placeholder()
        self._raw: Tuple[Box, ...] = ()
        self._layout = ViewLayout.unmeasured()
        self._mapped: Tuple[Box, ...] = ()
        self._print_state: dict = {}

    @property
    def state(self) -> ControllerState:
        with self._lock:
            return self._state

    @property
    def no_device(self) -> bool:
        with self._lock:
            return self._state is ControllerState.NO_DEVICE

    def set_device_available(self, available: bool) -> ControllerState:
        """Feed the result of device acquisition (checked once per update cycle)."""
        with self._lock:
            if available:
                self._state = ControllerState.READY
            else:
                if self._state is not ControllerState.NO_DEVICE:
                    self._reset_locked()
                self._state = ControllerState.NO_DEVICE
            return self._state

    def _reset_locked(self) -> None:
        self._frame = FrameDimensions.placeholder()
        self._raw = ()
        self._mapped = ()

    def on_detection(self, boxes: Iterable[Box], frame: FrameDimensions) -> bool:
        """Replace the detection batch and re-derive overlay boxes.

        Returns False if the event was dropped because no device is ready.
        Raises InvalidDimensions without touching the stored state.
        """
        raw = tuple(boxes)
        with self._lock:
            if self._state is not ControllerState.READY:
                return False
            mapped = map_boxes_to_view(raw, frame, self._layout)
            self._frame = frame
            self._raw = raw
            self._mapped = mapped
            layout = self._layout
        self._debug_print("detection", mapped, frame, layout)
        return True

    def on_layout(self, layout: ViewLayout) -> bool:
        """Replace the view layout and re-map the stored batch."""
        with self._lock:
            if self._state is not ControllerState.READY:
                return False
            mapped = map_boxes_to_view(self._raw, self._frame, layout)
            self._layout = layout
            self._mapped = mapped
            frame = self._frame
        self._debug_print("layout", mapped, frame, layout)
        return True

    def current_overlay_boxes(self) -> Tuple[Box, ...]:
        with self._lock:
            if self._state is ControllerState.NO_DEVICE:
                raise NoCameraDevice("No camera device found")
            return self._mapped

    def snapshot(self) -> OverlaySnapshot:
        with self._lock:
            return OverlaySnapshot(
                state=self._state,
                frame=self._frame,
                layout=self._layout,
                boxes=self._mapped,
            )

    def _debug_print(self, cause: str, mapped: Tuple[Box, ...], frame: FrameDimensions, layout: ViewLayout) -> None:
        if not self.debug:
            return
        first = format_box(mapped[0]) if mapped else "-"
        rate_limited_print(
            f"[overlay] {cause}: boxes={len(mapped)} first={first} "
            f"frame={frame.width:g}x{frame.height:g} layout={layout.width:g}x{layout.height:g}",
            self.print_hz,
            self._print_state,
        )
