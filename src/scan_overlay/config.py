"""scan_overlay.config - central configuration

Rules:
- Avoid absolute paths in Python code where possible.
- Keep code types, preview size, highlight style and logging flags here.

This loader is deliberately forgiving:
- missing config file -> defaults
- unknown keys -> ignored
- values that don't coerce -> that field's default
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class AppConfig:
    """
    Runtime configuration.

    Notes:
    - `view_size` is the preview stream size; it is fed to the overlay
      controller as the view layout.
    - `code_types` limits which decoded symbols get an overlay.
    """
    camera_position: str = "back"
    code_types: Tuple[str, ...] = ("qr", "code-128")

    view_size: str = "480x640"

    print_hz: float = 5.0
    debug: bool = False
    enable_csv: bool = False
    csv_path: str = "logs/codes.csv"

    highlight_color: str = "#00FF00"
    border_px: int = 2
    fill_alpha: float = 0.2


def parse_size(s: str) -> Tuple[int, int]:
    """'640x480' -> (640, 480)."""
    parts = str(s).lower().replace(" ", "").split("x")
    if len(parts) != 2:
        raise ValueError(f"size must look like WxH, got {s!r}")
    w, h = int(parts[0]), int(parts[1])
    if w <= 0 or h <= 0:
        raise ValueError(f"size must be positive, got {s!r}")
    return w, h


def _coerce_float(v: Any, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _coerce_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        if v.strip().lower() in ("1", "true", "yes", "on"):
            return True
        if v.strip().lower() in ("0", "false", "no", "off"):
            return False
    return default


def _coerce_types(v: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if isinstance(v, str):
        v = [p for p in v.split(",") if p.strip()]
    if not isinstance(v, (list, tuple)) or not v:
        return default
    return tuple(str(t).strip() for t in v)


def _coerce_size(v: Any, default: str) -> str:
    try:
        parse_size(v)
    except (TypeError, ValueError):
        return default
    return str(v)


def load_config(path: Path) -> AppConfig:
    """
    Load config JSON. Unknown keys are ignored.
    Missing file or invalid JSON -> defaults.
    """
    cfg = AppConfig()
    if not path.exists():
        return cfg

    try:
        data: Dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    return AppConfig(
        camera_position=str(data.get("camera_position", cfg.camera_position)),
        code_types=_coerce_types(data.get("code_types"), cfg.code_types),
        view_size=_coerce_size(data.get("view_size", cfg.view_size), cfg.view_size),
        print_hz=_coerce_float(data.get("print_hz", cfg.print_hz), cfg.print_hz),
        debug=_coerce_bool(data.get("debug", cfg.debug), cfg.debug),
        enable_csv=_coerce_bool(data.get("enable_csv", cfg.enable_csv), cfg.enable_csv),
        csv_path=str(data.get("csv_path", cfg.csv_path)),
        highlight_color=str(data.get("highlight_color", cfg.highlight_color)),
        border_px=_coerce_int(data.get("border_px", cfg.border_px), cfg.border_px),
        fill_alpha=_coerce_float(data.get("fill_alpha", cfg.fill_alpha), cfg.fill_alpha),
    )
