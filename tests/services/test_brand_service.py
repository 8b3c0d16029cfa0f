"""
Tests for selfaccounting/services/brand_service.py

Covers brand loading, caching, fallback logic, colour helpers and image
directory resolution. The branding root is redirected to tmp_path.
"""

import json
from unittest.mock import patch

import pytest

import selfaccounting.services.brand_service as brand_mod
from selfaccounting.services.brand_service import (
    _DEFAULTS,
    _load_brand_json,
    brand_color,
    get_app_logo_path,
    get_brand,
    get_brand_images_dir,
    hex_to_rgb,
    reload_brand,
)


@pytest.fixture
def brand_root(tmp_path):
    """Point the brand service at an empty branding directory."""
    with patch.object(brand_mod, "_branding_root", return_value=tmp_path):
        yield tmp_path


def _write_brand(root, variant, data):
    folder = root / variant
    folder.mkdir(parents=True, exist_ok=True)
    (folder / "brand.json").write_text(json.dumps(data))


# ---------------------------------------------------------------------------
# _load_brand_json
# ---------------------------------------------------------------------------


class TestLoadBrandJson:
    """Tests for _load_brand_json()"""

    def test_valid_json_file(self, tmp_path):
        data = {"name": "TestBrand"}
        brand_file = tmp_path / "brand.json"
        brand_file.write_text(json.dumps(data))
        assert _load_brand_json(brand_file) == data

    def test_missing_file_returns_none(self, tmp_path):
        assert _load_brand_json(tmp_path / "nonexistent.json") is None

    def test_invalid_json_returns_none(self, tmp_path):
        """Malformed JSON returns None (logged, not raised)."""
        brand_file = tmp_path / "brand.json"
        brand_file.write_text("{invalid json!!")
        assert _load_brand_json(brand_file) is None

    def test_directory_path_returns_none(self, tmp_path):
        assert _load_brand_json(tmp_path) is None


# ---------------------------------------------------------------------------
# get_brand
# ---------------------------------------------------------------------------


class TestGetBrand:
    """Tests for get_brand() merging and caching"""

    def test_no_files_uses_defaults(self, brand_root):
        brand = get_brand()
        assert brand["name"] == _DEFAULTS["name"]
        assert brand["colors"]["primary"] == "#1e3a8a"

    def test_custom_preferred_over_template(self, brand_root):
        _write_brand(brand_root, "template", {"name": "Template"})
        _write_brand(brand_root, "custom", {"name": "Custom"})
        assert get_brand()["name"] == "Custom"

    def test_template_used_when_no_custom(self, brand_root):
        _write_brand(brand_root, "template", {"name": "Template"})
        assert get_brand()["name"] == "Template"

    def test_nested_colors_merge_with_defaults(self, brand_root):
        _write_brand(brand_root, "custom", {"colors": {"primary": "#ff0000"}})
        colors = get_brand()["colors"]
        assert colors["primary"] == "#ff0000"
        assert colors["rowTint"] == _DEFAULTS["colors"]["rowTint"]

    def test_result_is_cached(self, brand_root):
        _write_brand(brand_root, "custom", {"name": "First"})
        assert get_brand()["name"] == "First"
        _write_brand(brand_root, "custom", {"name": "Second"})
        assert get_brand()["name"] == "First"

    def test_reload_brand_rereads(self, brand_root):
        _write_brand(brand_root, "custom", {"name": "First"})
        get_brand()
        _write_brand(brand_root, "custom", {"name": "Second"})
        assert reload_brand()["name"] == "Second"


# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------


class TestColors:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1e3a8a") == (30, 58, 138)

    def test_short_hex(self):
        assert hex_to_rgb("fff") == (255, 255, 255)

    def test_invalid_hex_uses_fallback(self):
        assert hex_to_rgb("nope", (1, 2, 3)) == (1, 2, 3)
        assert hex_to_rgb(None) == (30, 58, 138)

    def test_brand_color_from_config(self, brand_root):
        _write_brand(brand_root, "custom", {"colors": {"primary": "#000000"}})
        assert brand_color("primary") == (0, 0, 0)

    def test_brand_color_unknown_key(self, brand_root):
        assert brand_color("doesNotExist") == (30, 58, 138)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class TestImages:
    def test_template_images_by_default(self, brand_root):
        assert get_brand_images_dir() == brand_root / "template" / "images"

    def test_custom_images_when_present(self, brand_root):
        custom = brand_root / "custom" / "images"
        custom.mkdir(parents=True)
        (custom / "app-logo.png").write_bytes(b"x")
        assert get_brand_images_dir() == custom

    def test_app_logo_missing_returns_none(self, brand_root):
        assert get_app_logo_path() is None

    def test_app_logo_found(self, brand_root, png_bytes):
        images = brand_root / "template" / "images"
        images.mkdir(parents=True)
        (images / "app-logo.png").write_bytes(png_bytes)
        assert get_app_logo_path() == images / "app-logo.png"
