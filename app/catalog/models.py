"""Catalog data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.catalog.sanitize import (
    DEFAULT_CATEGORY,
    Number,
    clean_text,
    normalize_category,
    sanitize_images,
    sanitize_sizes,
    to_bool,
    to_number,
)


@dataclass(slots=True)
class Product:
    id: str
    name: str
    offer_price: Number
    price: Number | None = None
    description: str = ""
    images: list[str] = field(default_factory=list)
    brand: str = ""
    category: str = ""
    sizes: list[Number] = field(default_factory=list)
    is_best_seller: bool = False

    @property
    def base_price(self) -> Number:
        """Price a discount is taken from: the original price when set, else the offer price."""
        if self.price is not None and self.price > 0:
            return self.price
        return self.offer_price

    @property
    def display_category(self) -> str:
        return self.category or DEFAULT_CATEGORY

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Product:
        return cls(
            id=str(data.get("id", "")),
            name=clean_text(data.get("name")),
            offer_price=to_number(data.get("offerPrice")) or 0,
            price=to_number(data.get("price")),
            description=clean_text(data.get("description")),
            images=sanitize_images(data.get("images")),
            brand=clean_text(data.get("brand")),
            category=normalize_category(data.get("category")),
            sizes=sanitize_sizes(data.get("sizes")),
            is_best_seller=to_bool(data.get("isBestSeller", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "offerPrice": self.offer_price,
            "images": list(self.images),
            "brand": self.brand,
            "category": self.category,
            "sizes": list(self.sizes),
            "isBestSeller": self.is_best_seller,
        }


@dataclass(slots=True)
class Campaign:
    name: str = ""
    description: str = ""
    price: Number | None = None
    start_date: str | None = None
    end_date: str | None = None
    enabled: bool = False

    def history_key(self) -> tuple[str, str | None, str | None, Number | None]:
        return (self.name, self.start_date, self.end_date, self.price)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Campaign:
        return cls(**_campaign_fields(data))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "enabled": self.enabled,
        }


@dataclass(slots=True)
class HistoryEntry(Campaign):
    id: str = ""
    enabled_at: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HistoryEntry:
        return cls(
            **_campaign_fields(data),
            id=clean_text(data.get("id")),
            enabled_at=clean_text(data.get("enabledAt")),
        )

    @classmethod
    def archive(cls, campaign: Campaign, *, entry_id: str, enabled_at: str) -> HistoryEntry:
        return cls(
            name=campaign.name,
            description=campaign.description,
            price=campaign.price,
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            enabled=campaign.enabled,
            id=entry_id,
            enabled_at=enabled_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **Campaign.to_dict(self), "enabledAt": self.enabled_at}


@dataclass(slots=True)
class SaleDocument:
    current: Campaign | None = None
    history: list[HistoryEntry] = field(default_factory=list)

    def has_in_history(self, campaign: Campaign) -> bool:
        key = campaign.history_key()
        return any(entry.history_key() == key for entry in self.history)

    @classmethod
    def from_dict(cls, data: Any) -> SaleDocument:
        if not isinstance(data, Mapping) or not data:
            return cls()
        if "current" not in data and "history" not in data:
            # Older documents stored the campaign itself at the root.
            return cls(current=Campaign.from_dict(data), history=[])
        current = data.get("current")
        history = data.get("history") or []
        return cls(
            current=Campaign.from_dict(current) if isinstance(current, Mapping) else None,
            history=[HistoryEntry.from_dict(item) for item in history if isinstance(item, Mapping)],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "current": self.current.to_dict() if self.current else None,
            "history": [entry.to_dict() for entry in self.history],
        }


def _campaign_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": clean_text(data.get("name")),
        "description": clean_text(data.get("description")),
        "price": to_number(data.get("price")),
        "start_date": clean_text(data.get("startDate")) or None,
        "end_date": clean_text(data.get("endDate")) or None,
        "enabled": to_bool(data.get("enabled", False)),
    }
