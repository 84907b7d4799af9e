"""Catalog helpers."""

from __future__ import annotations

import pathlib
from typing import Any

import yaml

SEED_PATH = pathlib.Path(__file__).with_name("seed.yml")


def load_seed_products(path: pathlib.Path = SEED_PATH, limit: int | None = None) -> list[dict[str, Any]]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    products = [dict(item) for item in data]
    if limit:
        return products[:limit]
    return products
