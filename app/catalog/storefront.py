"""Storefront filtering and ordering over priced products."""

from __future__ import annotations

import random
from typing import Sequence

from app.catalog.query import PricedProduct

ALL_BRANDS = "All"
SORT_STRATEGIES = ("featured", "newest", "price-asc", "price-desc", "random")


def brand_options(items: Sequence[PricedProduct]) -> list[str]:
    brands = {item.product.brand for item in items if item.product.brand}
    return [ALL_BRANDS, *sorted(brands)]


def filter_priced(
    items: Sequence[PricedProduct],
    *,
    brand: str | None = None,
    category: str | None = None,
    search: str | None = None,
) -> list[PricedProduct]:
    result = list(items)
    if brand and brand != ALL_BRANDS:
        wanted = brand.strip().lower()
        result = [item for item in result if item.product.brand.lower() == wanted]
    if category:
        wanted = category.strip().lower()
        result = [item for item in result if item.product.display_category.lower() == wanted]
    query = (search or "").strip().lower()
    if query:
        result = [item for item in result if query in item.product.name.lower()]
    return result


def _recency(item: PricedProduct) -> int:
    return int(item.product.id) if item.product.id.isdigit() else 0


def sort_priced(
    items: Sequence[PricedProduct], strategy: str = "featured", *, rng: random.Random | None = None
) -> list[PricedProduct]:
    if strategy not in SORT_STRATEGIES:
        raise ValueError(f"Unknown sort strategy {strategy!r}")
    result = list(items)
    if strategy == "featured":
        result.sort(key=lambda item: (item.product.is_best_seller, _recency(item)), reverse=True)
    elif strategy == "newest":
        result.sort(key=_recency, reverse=True)
    elif strategy == "price-asc":
        result.sort(key=lambda item: item.effective_price)
    elif strategy == "price-desc":
        result.sort(key=lambda item: item.effective_price, reverse=True)
    else:
        (rng or random.Random()).shuffle(result)
    return result
