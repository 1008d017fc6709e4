"""
scan_overlay.camera - camera device acquisition.

Answers one question per update cycle: is there a usable camera, and which
one. Opening/streaming is left to the app.

picamera2 is imported lazily so the rest of the package (geometry,
controller, tests) works on machines without libcamera.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# libcamera properties::Location
LOCATIONS: Dict[str, int] = {"front": 0, "back": 1, "external": 2}


@dataclass(frozen=True)
class CameraHandle:
    num: int
    model: str = ""
    location: Optional[int] = None


@dataclass
class AcquisitionStatus:
    found: bool = False
    handle: Optional[CameraHandle] = None
    last_error: Optional[str] = None


def _global_camera_info() -> List[Dict[str, Any]]:
    from picamera2 import Picamera2  # type: ignore

    return list(Picamera2.global_camera_info())


def pick_camera(infos: List[Dict[str, Any]], position: str = "back") -> Optional[CameraHandle]:
    """
    Prefer a camera at the requested location, then fall back to the first
    one listed. Returns None when the list is empty.
    """
    if not infos:
        return None

    want = LOCATIONS.get((position or "").lower())
    chosen = infos[0]
    if want is not None:
        for info in infos:
            if info.get("Location") == want:
                chosen = info
                break

    num = chosen.get("Num", infos.index(chosen))
    return CameraHandle(num=int(num), model=str(chosen.get("Model", "")), location=chosen.get("Location"))


def find_camera(position: str = "back", status: Optional[AcquisitionStatus] = None) -> Optional[CameraHandle]:
    """Return a handle for a usable camera, or None for "no device".

    Pass an AcquisitionStatus to get the reason when nothing was found.
    """
    status = status if status is not None else AcquisitionStatus()
    try:
        infos = _global_camera_info()
    except ImportError as e:
        status.found = False
        status.handle = None
        status.last_error = f"picamera2 not available ({type(e).__name__})"
        return None

    handle = pick_camera(infos, position)
    status.found = handle is not None
    status.handle = handle
    status.last_error = None if handle is not None else "no camera listed by libcamera"
    return handle
