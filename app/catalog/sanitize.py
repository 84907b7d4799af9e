"""Field sanitation for admin-submitted product data."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from app.utils.urls import normalize_image_url

CATEGORIES = ("Shoes", "Bags")
DEFAULT_CATEGORY = "Shoes"
TRUE_STRINGS = {"true", "1", "yes", "on"}

Number = int | float


def to_number(value: Any) -> Number | None:
    """Coerce to a finite number; integral values come back as ``int``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_category(value: Any) -> str:
    text = clean_text(value).lower()
    for category in CATEGORIES:
        if category.lower() == text:
            return category
    return ""


def sanitize_images(values: Any) -> list[str]:
    if not isinstance(values, Iterable) or isinstance(values, (str, bytes, Mapping)):
        return []
    images = []
    for value in values:
        if not isinstance(value, str):
            continue
        url = normalize_image_url(value)
        if url:
            images.append(url)
    return images


def sanitize_sizes(values: Any) -> list[Number]:
    if not isinstance(values, Iterable) or isinstance(values, (str, bytes, Mapping)):
        return []
    sizes = {size for size in (to_number(value) for value in values) if size is not None}
    return sorted(sizes)


def positive_number(value: Any) -> Number | None:
    number = to_number(value)
    if number is None or number <= 0:
        return None
    return number


SANITIZERS = {
    "name": clean_text,
    "description": clean_text,
    "price": to_number,
    "offerPrice": to_number,
    "images": sanitize_images,
    "brand": clean_text,
    "category": normalize_category,
    "sizes": sanitize_sizes,
    "isBestSeller": to_bool,
}


def sanitize_product_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Sanitize the known product fields present in ``fields``.

    Keys that are absent stay absent so callers can tell "not supplied"
    apart from "supplied empty". Unknown keys and ``id`` are dropped.
    """
    return {key: sanitize(fields[key]) for key, sanitize in SANITIZERS.items() if key in fields}
