"""Read-side composition of products with sale pricing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from app.catalog.models import Product, SaleDocument
from app.catalog.sale import effective_price, is_active
from app.catalog.sanitize import Number


@dataclass(slots=True, frozen=True)
class PricedProduct:
    product: Product
    effective_price: Number
    sale_active: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.product.to_dict(),
            "effectivePrice": self.effective_price,
            "saleActive": self.sale_active,
        }


def price_product(product: Product, document: SaleDocument, as_of: datetime) -> PricedProduct:
    campaign = document.current
    return PricedProduct(
        product=product,
        effective_price=effective_price(product, campaign, as_of),
        sale_active=is_active(campaign, as_of),
    )


def price_catalog(products: Iterable[Product], document: SaleDocument, as_of: datetime) -> list[PricedProduct]:
    active = is_active(document.current, as_of)
    return [
        PricedProduct(
            product=product,
            effective_price=effective_price(product, document.current, as_of) if active else product.offer_price,
            sale_active=active,
        )
        for product in products
    ]
