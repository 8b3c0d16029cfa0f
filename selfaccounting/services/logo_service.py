"""
Logo Service - Resolve an organization logo into validated raster bytes.

Sources are tried in order: a pre-fetched buffer, then ``logoUrl`` (an
http(s) URL fetched with httpx, or a local file path), then the product
logo from the brand images directory. SVG logos are detected and skipped
because the print backend only embeds raster images. Any failure is logged
and yields ``None`` so the caller falls back to the text placeholder.
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from selfaccounting.config import Settings, settings as default_settings
from selfaccounting.services.brand_service import get_app_logo_path

logger = logging.getLogger(__name__)

# Formats the print backend embeds as-is; anything else is converted to PNG
_NATIVE_FORMATS = {"PNG", "JPEG", "GIF"}


@dataclass(frozen=True)
class ResolvedLogo:
    data: bytes
    format: str
    width: int
    height: int
    source: str

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 1.0


def _url_parts(source: str):
    """urlparse result, or None for a malformed URL (e.g. an unclosed IPv6 bracket)."""
    try:
        return urlparse(source)
    except ValueError:
        return None


def is_svg(data: Optional[bytes] = None, content_type: str = "", source: str = "") -> bool:
    """
    Detect SVG content by extension, content type, or leading bytes

    Args:
        data: Raw bytes (only the first 256 bytes are inspected)
        content_type: HTTP Content-Type header, if any
        source: URL or file path the data came from
    """
    if source:
        parts = _url_parts(source)
        path = parts.path if parts is not None else source
        if path.lower().endswith((".svg", ".svgz")):
            return True
    if content_type and "svg" in content_type.lower():
        return True
    if data:
        head = data[:256].lstrip().lower()
        if head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in data[:1024].lower()):
            return True
    return False


def validate_raster(data: bytes, source: str = "buffer") -> Optional[ResolvedLogo]:
    """
    Validate raster image bytes with Pillow

    Returns:
        ResolvedLogo with PNG/JPEG/GIF bytes (other formats are re-encoded
        as PNG), or None when the bytes are not a readable image
    """
    if not data:
        return None
    if is_svg(data, source=source):
        logger.warning("Skipping SVG logo from %s (raster formats only)", source)
        return None
    try:
        with Image.open(BytesIO(data)) as img:
            fmt = (img.format or "").upper()
            width, height = img.size
            img.verify()
        if fmt not in _NATIVE_FORMATS:
            with Image.open(BytesIO(data)) as img:
                converted = BytesIO()
                img.convert("RGBA").save(converted, format="PNG")
            data = converted.getvalue()
            fmt = "PNG"
    # verify() raises SyntaxError for PNG chunks with a bad checksum
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        logger.warning("Invalid logo image from %s: %s", source, e)
        return None
    return ResolvedLogo(data=data, format=fmt, width=width, height=height, source=source)


async def fetch_logo_bytes(url: str, config: Settings = None) -> Optional[bytes]:
    """Download a logo over http(s) with a bounded timeout and size limit."""
    config = config or default_settings
    try:
        async with httpx.AsyncClient(timeout=config.logo_fetch_timeout, follow_redirects=True) as client:
            resp = await client.get(url, headers={"Accept": "image/*"})
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("Error downloading logo %s: %s", url, e)
        return None

    if resp.status_code != 200:
        logger.warning("Failed to download logo (status %s): %s", resp.status_code, url)
        return None

    content_type = resp.headers.get("content-type", "")
    if is_svg(resp.content, content_type, url):
        logger.warning("Skipping SVG logo: %s", url)
        return None
    if content_type and not content_type.startswith("image/"):
        logger.warning("Logo URL is not an image (content-type: %s): %s", content_type, url)
        return None
    if len(resp.content) > config.max_logo_size:
        logger.warning("Logo too large (%d bytes): %s", len(resp.content), url)
        return None
    return resp.content


def read_logo_file(path: str, config: Settings = None) -> Optional[bytes]:
    """Read a logo from the local filesystem."""
    config = config or default_settings
    file_path = Path(path)
    if is_svg(source=str(file_path)):
        logger.warning("Skipping SVG logo: %s", file_path)
        return None
    try:
        if not file_path.is_file():
            logger.warning("Logo file not found: %s", file_path)
            return None
        if file_path.stat().st_size > config.max_logo_size:
            logger.warning("Logo file too large: %s", file_path)
            return None
        return file_path.read_bytes()
    except OSError as e:
        logger.warning("Failed to read logo %s: %s", file_path, e)
        return None


async def resolve_logo(metadata, config: Settings = None, use_app_logo: bool = True) -> Optional[ResolvedLogo]:
    """
    Resolve the logo for a report before layout starts

    Args:
        metadata: ReportMetadata (logo_buffer / logo_url are consulted)
        config: Settings override (defaults to module settings)
        use_app_logo: Fall back to the product logo when the organization has none

    Returns:
        ResolvedLogo, or None when no usable raster logo exists
    """
    config = config or default_settings

    if metadata is not None and metadata.logo_buffer:
        logo = validate_raster(metadata.logo_buffer, source="buffer")
        if logo:
            return logo

    url = metadata.logo_url if metadata is not None else None
    parts = _url_parts(url) if url else None
    if url and parts is None:
        logger.warning("Malformed logo URL, skipping: %s", url)
    elif url:
        scheme = parts.scheme.lower()
        if scheme in ("http", "https"):
            data = await fetch_logo_bytes(url, config)
        else:
            data = read_logo_file(url[7:] if scheme == "file" else url, config)
        logo = validate_raster(data, source=url) if data else None
        if logo:
            return logo

    if use_app_logo:
        app_logo = get_app_logo_path()
        if app_logo is not None:
            data = read_logo_file(str(app_logo), config)
            logo = validate_raster(data, source=str(app_logo)) if data else None
            if logo:
                return logo

    logger.debug("No usable logo, using text placeholder")
    return None
