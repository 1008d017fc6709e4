"""scan_overlay.overlay - drawing helpers

Keep drawing code isolated so preview/GUI choices can change later. Boxes
arrive already in view space; nothing here does coordinate math beyond
rounding and clipping to the image.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import cv2
import numpy as np

from .geometry import Box


def hex_to_bgr(s: str) -> Tuple[int, int, int]:
    s = s.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"bad colour: {s!r}")
    r, g, b = int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
    return (b, g, r)


@dataclass(frozen=True)
class HighlightStyle:
    color: str = "#00FF00"
    border_px: int = 2
    fill_alpha: float = 0.2


def _clip(box: Box, img_w: int, img_h: int) -> Optional[Tuple[int, int, int, int]]:
    x0 = max(0, int(round(box.x)))
    y0 = max(0, int(round(box.y)))
    x1 = min(img_w - 1, int(round(box.x + box.width)))
    y1 = min(img_h - 1, int(round(box.y + box.height)))
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def draw_highlight(image: np.ndarray, box: Box, style: HighlightStyle = HighlightStyle()) -> bool:
    """Draw one translucent box with a solid border. Returns False if it fell outside the image."""
    h, w = image.shape[:2]
    clipped = _clip(box, w, h)
    if clipped is None:
        return False
    x0, y0, x1, y1 = clipped
    color = hex_to_bgr(style.color)

    alpha = min(1.0, max(0.0, float(style.fill_alpha)))
    if alpha > 0:
        roi = image[y0:y1 + 1, x0:x1 + 1]
        fill = np.empty_like(roi)
        fill[:] = color
        image[y0:y1 + 1, x0:x1 + 1] = cv2.addWeighted(fill, alpha, roi, 1.0 - alpha, 0)

    if style.border_px > 0:
        cv2.rectangle(image, (x0, y0), (x1, y1), color, int(style.border_px))
    return True


def draw_highlights(image: np.ndarray, boxes: Iterable[Box], style: HighlightStyle = HighlightStyle()) -> int:
    """Draw all overlay boxes in place; returns how many were visible."""
    return sum(1 for b in boxes if draw_highlight(image, b, style))


def draw_no_device(image: np.ndarray, message: str = "No camera device found") -> None:
    """Black frame with centred white text."""
    image[:] = 0
    h, w = image.shape[:2]
    font = cv2.FONT_HERSHEY_SIMPLEX
    scale = 0.7
    thickness = 2
    (tw, th), _ = cv2.getTextSize(message, font, scale, thickness)
    org = (max(0, (w - tw) // 2), max(th, (h + th) // 2))
    cv2.putText(image, message, org, font, scale, (255, 255, 255), thickness, cv2.LINE_AA)
