"""Product repository over the ``products`` document."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, TypeVar

from app.catalog.models import Product
from app.catalog.sanitize import positive_number, sanitize_product_fields
from app.errors import NotFound, ValidationError
from app.store import PRODUCTS, DocumentStore, Snapshot
from app.store.codec import decode_document, encode_document
from app.utils.retry import retry_conflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProductRepository:
    def __init__(self, store: DocumentStore, *, clock: Callable[[], float] = time.time) -> None:
        self.store = store
        self._clock = clock

    async def list(self) -> list[Product]:
        _, products = await self._load()
        return products

    async def get(self, product_id: str) -> Product:
        _, products = await self._load()
        return _find(products, product_id)

    async def create(self, fields: Mapping[str, Any]) -> Product:
        data = sanitize_product_fields(fields)
        name = data.get("name", "")
        offer_price = positive_number(data.get("offerPrice"))
        images = data.get("images", [])
        if not name or offer_price is None or not images:
            raise ValidationError("Name, a positive offerPrice, and at least one image are required.")
        price = data.get("price")

        def apply(products: list[Product]) -> Product:
            product = Product(
                id=self._next_id(products),
                name=name,
                offer_price=offer_price,
                price=price if price is not None and price > 0 else offer_price,
                description=data.get("description", ""),
                images=images,
                brand=data.get("brand", ""),
                category=data.get("category", ""),
                sizes=data.get("sizes", []),
                is_best_seller=data.get("isBestSeller", False),
            )
            products.append(product)
            return product

        product = await self._mutate(apply)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def update(self, product_id: str, fields: Mapping[str, Any]) -> Product:
        data = sanitize_product_fields(fields)
        if "name" in data and not data["name"]:
            raise ValidationError("Name cannot be empty.")
        if "offerPrice" in data and positive_number(data["offerPrice"]) is None:
            raise ValidationError("offerPrice must be a positive number.")
        if not data:
            return await self.get(product_id)

        def apply(products: list[Product]) -> Product:
            index = _index_of(products, product_id)
            current = products[index]
            products[index] = _merge(current, data)
            return products[index]

        product = await self._mutate(apply)
        logger.info("Updated product %s (%s)", product.id, ", ".join(sorted(data)))
        return product

    async def delete(self, product_id: str) -> None:
        def apply(products: list[Product]) -> None:
            del products[_index_of(products, product_id)]

        await self._mutate(apply)
        logger.info("Deleted product %s", product_id)

    async def _load(self) -> tuple[Snapshot, list[Product]]:
        snapshot = await self.store.read(PRODUCTS)
        if not snapshot.exists:
            return snapshot, []
        raw = decode_document(snapshot.content, PRODUCTS)
        if not isinstance(raw, list):
            raw = []
        return snapshot, [Product.from_dict(item) for item in raw if isinstance(item, Mapping)]

    @retry_conflict
    async def _mutate(self, apply: Callable[[list[Product]], T]) -> T:
        snapshot, products = await self._load()
        result = apply(products)
        content = encode_document([product.to_dict() for product in products])
        await self.store.write(PRODUCTS, content, snapshot.revision)
        return result

    def _next_id(self, products: list[Product]) -> str:
        candidate = int(self._clock() * 1000)
        numeric = [int(p.id) for p in products if p.id.isdigit()]
        if numeric and candidate <= max(numeric):
            candidate = max(numeric) + 1
        return str(candidate)


def _find(products: list[Product], product_id: str) -> Product:
    return products[_index_of(products, product_id)]


def _index_of(products: list[Product], product_id: str) -> int:
    for index, product in enumerate(products):
        if product.id == product_id:
            return index
    raise NotFound(f"Product {product_id} not found.")


def _merge(current: Product, data: Mapping[str, Any]) -> Product:
    images = data.get("images") or current.images
    price = data["price"] if "price" in data else current.price
    return Product(
        id=current.id,
        name=data.get("name", current.name),
        offer_price=data.get("offerPrice", current.offer_price),
        price=price,
        description=data.get("description", current.description),
        images=list(images),
        brand=data.get("brand", current.brand),
        category=data.get("category", current.category),
        sizes=list(data["sizes"]) if "sizes" in data else list(current.sizes),
        is_best_seller=data.get("isBestSeller", current.is_best_seller),
    )
