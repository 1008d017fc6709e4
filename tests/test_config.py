import json

import pytest

from scan_overlay.config import AppConfig, load_config, parse_size


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.json") == AppConfig()


def test_invalid_json_gives_defaults(tmp_path):
    p = tmp_path / "runtime.json"
    p.write_text("{not json", encoding="utf-8")
    assert load_config(p) == AppConfig()


def test_values_are_loaded_and_coerced(tmp_path):
    p = tmp_path / "runtime.json"
    p.write_text(json.dumps({
        "camera_position": "front",
        "code_types": "qr, ean-13",
        "view_size": "720x1280",
        "print_hz": "2.5",
        "debug": "yes",
        "border_px": 4,
        "unknown_key": 1,
    }), encoding="utf-8")

    cfg = load_config(p)

    assert cfg.camera_position == "front"
    assert cfg.code_types == ("qr", "ean-13")
    assert cfg.view_size == "720x1280"
    assert cfg.print_hz == 2.5
    assert cfg.debug is True
    assert cfg.border_px == 4
    assert cfg.fill_alpha == AppConfig().fill_alpha


def test_bad_values_fall_back(tmp_path):
    p = tmp_path / "runtime.json"
    p.write_text(json.dumps({"view_size": "big", "print_hz": "fast", "code_types": [], "debug": 3}), encoding="utf-8")
    assert load_config(p) == AppConfig()


def test_parse_size():
    assert parse_size("640x480") == (640, 480)
    assert parse_size(" 480 X 640 ") == (480, 640)
    for bad in ("640", "0x480", "axb"):
        with pytest.raises(ValueError):
            parse_size(bad)
