"""
Brand Service - Load and serve product branding for generated documents.

Reads brand.json from branding/custom/ (falls back to branding/template/).
The result is cached on first access and treated as read-only afterwards,
so concurrent renders never share mutable state through it.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

from selfaccounting.config import settings

logger = logging.getLogger(__name__)

# Resolve paths relative to project root (selfaccounting/../branding/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Default brand values (fallback if no brand.json found at all)
_DEFAULTS = {
    "name": "SelfAccounting.AI",
    "logoText": "selfAccounting.AI",
    "defaultOrganization": "SmartExpense UAE",
    "disclaimer": "This is a system-generated report, no signature required.",
    "colors": {
        "primary": "#1e3a8a",
        "headerBackground": "#f3f6fa",
        "border": "#d0d7de",
        "rowTint": "#f9fafb",
        "totalFill": "#e8eef5",
        "text": "#1f2937",
        "muted": "#6b7280",
    },
    "images": {
        "appLogo": "app-logo.png",
    },
}

# Cached brand config (loaded once at first access)
_brand_config: Optional[dict] = None


def _branding_root() -> Path:
    if settings.brand_dir:
        return Path(settings.brand_dir)
    return _PROJECT_ROOT / "branding"


def _load_brand_json(path: Path) -> Optional[dict]:
    """Try to load and parse a brand.json file."""
    try:
        if path.is_file():
            with open(path, "r") as f:
                return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read %s: %s", path, e)
    return None


def get_brand() -> dict:
    """Get the active brand configuration (cached after first call)."""
    global _brand_config
    if _brand_config is not None:
        return _brand_config

    root = _branding_root()
    config = _load_brand_json(root / "custom" / "brand.json")
    if config is None:
        config = _load_brand_json(root / "template" / "brand.json")
    if config is None:
        logger.warning("No brand.json found, using built-in defaults")
        config = {}

    # Merge with defaults so missing keys don't break anything
    merged = dict(_DEFAULTS)
    for key, value in config.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value

    _brand_config = merged
    logger.info("Brand loaded: %s", merged.get("name", "unknown"))
    return _brand_config


def get_brand_images_dir() -> Path:
    """Get the path to the active brand's images directory."""
    root = _branding_root()
    custom_images = root / "custom" / "images"
    if custom_images.is_dir() and any(custom_images.iterdir()):
        return custom_images
    return root / "template" / "images"


def get_app_logo_path() -> Optional[Path]:
    """Path to the product logo used when an organization has none."""
    name = get_brand().get("images", {}).get("appLogo")
    if not name:
        return None
    path = get_brand_images_dir() / name
    return path if path.is_file() else None


def hex_to_rgb(hex_color: str, fallback: Tuple[int, int, int] = (30, 58, 138)) -> Tuple[int, int, int]:
    """Convert '#1e3a8a' (or '1e3a8a') to an (r, g, b) tuple."""
    h = (hex_color or "").lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    except (ValueError, IndexError):
        return fallback


def brand_color(key: str) -> Tuple[int, int, int]:
    """RGB tuple for a named brand colour."""
    colors = get_brand().get("colors", {})
    return hex_to_rgb(colors.get(key) or _DEFAULTS["colors"].get(key, "#1e3a8a"))


def reload_brand() -> dict:
    """Force reload brand config (e.g., after editing brand.json)."""
    global _brand_config
    _brand_config = None
    return get_brand()
