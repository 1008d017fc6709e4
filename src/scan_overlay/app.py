#!/usr/bin/env python3
"""
Live code scanner with box overlays
Architecture: acquire -> capture -> detect -> map -> draw -> log

- Camera: picamera2, main stream in sensor orientation (landscape)
- Preview: OpenCV window at `view_size`; rotated 90° clockwise when the view
  orientation differs from the sensor's (portrait preview of a landscape sensor)
- Overlay: green translucent box per decoded code, mapped by OverlayController
- Output: rate-limited console line per code, optional CSV log
"""

from __future__ import annotations

import signal
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from .camera import AcquisitionStatus, CameraHandle, find_camera
from .config import AppConfig, parse_size
from .controller import OverlayController
from .detector import QrCodeDetector
from .geometry import FrameDimensions, InvalidDimensions, ViewLayout, needs_rotation
from .logging_utils import CsvLogger, format_box, rate_limited_print
from .overlay import HighlightStyle, draw_highlights, draw_no_device

WINDOW_NAME = "scan_overlay"


def render_view(frame: np.ndarray, frame_dims: FrameDimensions, layout: ViewLayout) -> np.ndarray:
    """Turn a sensor frame into the preview image the overlay boxes are mapped onto."""
    if needs_rotation(frame_dims, layout):
        frame = cv2.rotate(frame, cv2.ROTATE_90_CLOCKWISE)
    return cv2.resize(frame, (int(layout.width), int(layout.height)))


def _show_no_device(view_w: int, view_h: int, status: AcquisitionStatus) -> int:
    reason = status.last_error or "unknown"
    print(f"[camera] No camera device found ({reason})", flush=True)
    image = np.zeros((view_h, view_w, 3), dtype=np.uint8)
    draw_no_device(image)
    cv2.imshow(WINDOW_NAME, image)
    while cv2.waitKey(100) & 0xFF not in (ord("q"), 27):
        if cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1:
            break
    cv2.destroyAllWindows()
    return 1


def _open_camera(handle: CameraHandle):
    from picamera2 import Picamera2  # type: ignore

    picam2 = Picamera2(handle.num)
    config = picam2.create_preview_configuration({"format": "RGB888"}, buffer_count=4)
    picam2.configure(config)
    return picam2


def run(cfg: AppConfig, controller: Optional[OverlayController] = None) -> int:
    view_w, view_h = parse_size(cfg.view_size)
    layout = ViewLayout(x=0, y=0, width=view_w, height=view_h)
    style = HighlightStyle(color=cfg.highlight_color, border_px=cfg.border_px, fill_alpha=cfg.fill_alpha)

    ctl = controller or OverlayController(debug=cfg.debug, print_hz=cfg.print_hz)

    status = AcquisitionStatus()
    handle = find_camera(cfg.camera_position, status)
    ctl.set_device_available(handle is not None)
    if ctl.no_device:
        return _show_no_device(view_w, view_h, status)

    print(f"[camera] using #{handle.num} {handle.model} (location={handle.location})", flush=True)
    ctl.on_layout(layout)

    detector = QrCodeDetector(cfg.code_types)
    if not detector.supports_barcodes and any(t != "qr" for t in detector.code_types):
        print("[detector] cv2.barcode not available; 1-D codes disabled", flush=True)

    logger = CsvLogger(Path(cfg.csv_path), enabled=cfg.enable_csv)
    logger.open()

    stop = False

    def _sigint(_sig, _frame):
        nonlocal stop
        stop = True

    prev_sigint = signal.signal(signal.SIGINT, _sigint)

    picam2 = None
    print_state: dict = {}
    try:
        picam2 = _open_camera(handle)
        picam2.start()

        while not stop:
            frame = picam2.capture_array("main")

            # Keep the preview running even if a frame causes trouble
            try:
                codes, frame_dims = detector.detect(frame)
                ctl.on_detection([c.frame for c in codes], frame_dims)
                boxes = ctl.current_overlay_boxes()
            except (InvalidDimensions, cv2.error) as e:
                print(f"[frame] {type(e).__name__}: {e}", flush=True)
                continue

            for code, box in zip(codes, boxes):
                rate_limited_print(f"[{code.type}] {code.value!r} box={format_box(box)}", cfg.print_hz, print_state)
                logger.log(code.type, code.value, box)

            view = render_view(frame, frame_dims, layout)
            draw_highlights(view, boxes, style)
            cv2.imshow(WINDOW_NAME, view)
            if cv2.waitKey(1) & 0xFF in (ord("q"), 27):
                break
    finally:
        signal.signal(signal.SIGINT, prev_sigint)
        logger.close()
        if picam2 is not None:
            picam2.stop()
        cv2.destroyAllWindows()

    return 0
