"""Image URL utilities."""

from __future__ import annotations

import re

DRIVE_ID_PATTERNS = (
    re.compile(r"/file/d/([^/]+)"),
    re.compile(r"/thumbnail/([^/]+)"),
    re.compile(r"[?&]id=([^&]+)"),
)
DRIVE_THUMBNAIL_URL = "https://drive.google.com/thumbnail?id={drive_id}&sz=w1000"


def extract_drive_id(url: str) -> str | None:
    if "drive.google.com" not in url:
        return None
    for pattern in DRIVE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def normalize_image_url(url: str) -> str:
    """Trim an image reference and rewrite Drive share links to a servable thumbnail."""
    trimmed = url.strip()
    if not trimmed:
        return ""
    drive_id = extract_drive_id(trimmed)
    if drive_id:
        return DRIVE_THUMBNAIL_URL.format(drive_id=drive_id)
    return trimmed
