#!/usr/bin/env python3
"""scan_overlay.main - entry point

Loads the runtime config, applies CLI overrides, then hands over to app.run().
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from .config import AppConfig, load_config


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Live QR / barcode scanner with box overlays")
    p.add_argument("--config", default="configs/runtime.json",
                   help="Optional runtime config JSON.")
    p.add_argument("--view-size", default="", help="Preview size override, e.g. 480x640.")
    p.add_argument("--csv", default="", help="Optional CSV log path (e.g., logs/codes.csv).")
    p.add_argument("--debug", action="store_true", help="Verbose overlay debug output.")
    return p.parse_args()


def build_config(args: argparse.Namespace) -> AppConfig:
    cfg: AppConfig = load_config(Path(args.config))
    if args.view_size:
        cfg = replace(cfg, view_size=args.view_size)
    if args.csv:
        cfg = replace(cfg, enable_csv=True, csv_path=args.csv)
    if args.debug:
        cfg = replace(cfg, debug=True)
    return cfg


def main() -> int:
    args = parse_args()
    cfg = build_config(args)

    print(f"Config path: {args.config}")
    print(f"Code types: {', '.join(cfg.code_types)}")
    print(f"View size: {cfg.view_size}")

    from .app import run

    return run(cfg)


if __name__ == "__main__":
    raise SystemExit(main())
