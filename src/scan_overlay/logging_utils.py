"""scan_overlay.logging_utils - stdout + CSV helpers

Targets:
- SSH-friendly stdout output (rate-limited, one line per event)
- Optional CSV log of decoded codes and their view-space boxes
"""

from __future__ import annotations

import csv
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .geometry import Box

HEADER = ["ts_unix", "type", "value", "x", "y", "w", "h"]


def hz_to_dt(hz: float, min_hz: float = 0.1) -> float:
    """Minimum interval (seconds) between prints at `hz`; junk or tiny rates clamp to `min_hz`."""
    try:
        return 1.0 / max(min_hz, float(hz))
    except (TypeError, ValueError):
        return 1.0 / min_hz


def rate_limited_print(msg: str, hz: float, state: dict) -> bool:
    """Print at most `hz` times per second. Returns True if printed.

    `state` keeps the last print time between calls; pass the same dict each time.
    """
    t = time.monotonic()
    last = state.get("last_t")
    if last is None or (t - last) >= hz_to_dt(hz):
        print(msg, flush=True)
        state["last_t"] = t
        return True
    return False


def format_box(box: Box) -> str:
    return f"(x={box.x:.1f}, y={box.y:.1f}, w={box.width:.1f}, h={box.height:.1f})"


# ----------------------------
# CSV logger
# ----------------------------

@dataclass
class CsvLogger:
    """Append-only CSV logger for scanned codes.

    Columns:
        ts_unix, type, value, x, y, w, h   (box in view space)
    """
    path: Path
    enabled: bool = False
    _fh: Optional[object] = None
    _writer: Optional[object] = None

    def open(self) -> None:
        if not self.enabled or self._fh is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        new_file = not self.path.exists() or self.path.stat().st_size == 0
        self._fh = self.path.open("a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh)
        if new_file:
            self._writer.writerow(HEADER)
            self._fh.flush()

    def log(self, code_type: str, value: str, box: Box) -> None:
        if not self._writer or not self._fh:
            return
        self._writer.writerow([
            f"{time.time():.6f}",
            code_type,
            value,
            f"{box.x:.2f}",
            f"{box.y:.2f}",
            f"{box.width:.2f}",
            f"{box.height:.2f}",
        ])
        self._fh.flush()

    def close(self) -> None:
        fh, self._fh, self._writer = self._fh, None, None
        if fh is not None:
            fh.close()
