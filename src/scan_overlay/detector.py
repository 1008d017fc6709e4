"""scan_overlay.detector - OpenCV code detection adapter

Purpose:
- Isolate OpenCV detector output handling here so library differences don't
  cascade into the overlay logic.
- Normalize outputs to a common form: Code(frame=Box, value, type), always
  paired with the FrameDimensions of the image they were found in.

Only `frame` and the dimensions matter to the overlay; value/type are kept
for logging.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .geometry import Box, FrameDimensions

SUPPORTED_CODE_TYPES: Tuple[str, ...] = ("qr", "code-128")


@dataclass(frozen=True)
class Code:
    """
    Single decoded code.

    frame: bounding box in scan-frame (sensor) coordinates
    value: decoded payload
    type: symbol type, lower-case with dashes ("qr", "code-128", "ean-13", ...)
    """
    frame: Box
    value: str
    type: str


def normalize_code_type(name: str) -> str:
    """OpenCV barcode names ("CODE_128", "EAN_13") -> "code-128", "ean-13"."""
    return str(name).strip().lower().replace("_", "-")


def frame_dimensions_of(image: Any) -> FrameDimensions:
    """Frame size from a numpy image (H, W[, C])."""
    shape = getattr(image, "shape", None)
    if shape is None or len(shape) < 2:
        raise ValueError(f"expected an image array, got {type(image).__name__}")
    return FrameDimensions(width=int(shape[1]), height=int(shape[0]))


def _points_per_code(points: Any) -> Optional[np.ndarray]:
    """
    Robustly normalize corner points to shape (N, K, 2).

    OpenCV returns (N,4,2) for multi-detect, (1,4,2) or (4,2) for a single
    code, or None when nothing was found.
    """
    if points is None:
        return None
    pts = np.asarray(points, dtype=np.float64)
    if pts.size == 0 or pts.shape[-1] != 2:
        return None
    if pts.ndim == 2:
        pts = pts.reshape(1, -1, 2)
    while pts.ndim > 3 and pts.shape[0] == 1:
        pts = pts[0]
    if pts.ndim != 3:
        return None
    return pts


def codes_from_points(
    decoded: Sequence[str],
    points: Any,
    code_type: str = "qr",
    types: Optional[Sequence[str]] = None,
) -> List[Code]:
    """
    Build Code objects from decoder output.

    decoded: one payload per detected code ("" when detection succeeded but decoding did not)
    points:  corner points, see _points_per_code
    types:   optional per-code type names (overrides code_type)
    """
    pts = _points_per_code(points)
    if pts is None:
        return []

    codes: List[Code] = []
    n = min(len(decoded), len(pts))
    for i in range(n):
        value = decoded[i]
        if not value:
            continue
        box = Box.from_points(pts[i])
        if box.width <= 0 or box.height <= 0:
            continue
        kind = normalize_code_type(types[i]) if types is not None and i < len(types) else code_type
        codes.append(Code(frame=box, value=str(value), type=kind))
    return codes


def filter_by_type(codes: Iterable[Code], types: Iterable[str]) -> List[Code]:
    wanted = {normalize_code_type(t) for t in types}
    return [c for c in codes if c.type in wanted]


class QrCodeDetector:
    """
    QR + 1-D barcode detection on BGR frames.

    Usage:
        det = QrCodeDetector(code_types=("qr", "code-128"))
        codes, frame_dims = det.detect(image)
    """

    def __init__(self, code_types: Sequence[str] = SUPPORTED_CODE_TYPES) -> None:
        self.code_types = tuple(normalize_code_type(t) for t in code_types)
        self._qr = cv2.QRCodeDetector() if "qr" in self.code_types else None

        # cv2.barcode is part of the main OpenCV build from 4.8 on.
        self._barcode = None
        wants_1d = any(t != "qr" for t in self.code_types)
        barcode_mod = getattr(cv2, "barcode", None)
        if wants_1d and barcode_mod is not None:
            self._barcode = barcode_mod.BarcodeDetector()

    @property
    def supports_barcodes(self) -> bool:
        return self._barcode is not None

    def detect(self, image: np.ndarray) -> Tuple[List[Code], FrameDimensions]:
        frame_dims = frame_dimensions_of(image)
        codes: List[Code] = []

        if self._qr is not None:
            ok, decoded, points, _ = self._qr.detectAndDecodeMulti(image)
            if ok:
                codes.extend(codes_from_points(decoded, points, code_type="qr"))

        if self._barcode is not None:
            ok, decoded, kinds, points = self._barcode.detectAndDecodeWithType(image)
            if ok:
                codes.extend(codes_from_points(decoded, points, types=kinds))

        return filter_by_type(codes, self.code_types), frame_dims
