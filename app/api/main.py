"""FastAPI application for the storefront and admin catalog."""

from __future__ import annotations

import functools
import hmac
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Literal

from dotenv import load_dotenv
from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from app.catalog.products import ProductRepository
from app.catalog.query import price_catalog, price_product
from app.catalog.sale import SaleEngine
from app.catalog.storefront import brand_options, filter_priced, sort_priced
from app.errors import Conflict, NotFound, StoreUnavailable, ValidationError
from app.store import DocumentStore, create_store_from_env
from app.utils.dates import now_in_tz, parse_instant
from app.utils.log import configure_logging

load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def get_store() -> DocumentStore:
    """The backend chosen at startup, shared by every request."""
    return create_store_from_env()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    if get_store.cache_info().currsize:
        await get_store().close()
        get_store.cache_clear()


app = FastAPI(title="Sneaker Catalog API", lifespan=lifespan)

SortName = Literal["featured", "newest", "price-asc", "price-desc", "random"]


class ProductPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    description: Any = None
    price: Any = None
    offerPrice: Any = None
    images: Any = None
    brand: Any = None
    category: Any = None
    sizes: Any = None
    isBestSeller: Any = None


class CampaignPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: str = ""
    price: Any = None
    startDate: str | None = None
    endDate: str | None = None
    enabled: bool = False


class MessageResponse(BaseModel):
    message: str


def get_products(store: DocumentStore = Depends(get_store)) -> ProductRepository:
    return ProductRepository(store)


def get_sale(store: DocumentStore = Depends(get_store)) -> SaleEngine:
    return SaleEngine(store)


def require_admin(authorization: str | None = Header(default=None)) -> None:
    expected = os.environ.get("ADMIN_TOKEN", "")
    token = (authorization or "").removeprefix("Bearer ").strip()
    if not expected or not token or not hmac.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized.")


def _as_of(at: str | None):
    if not at:
        return now_in_tz()
    try:
        return parse_instant(at)
    except ValueError as exc:
        raise ValidationError(f"Invalid 'at' value: {at}") from exc


@app.exception_handler(ValidationError)
async def validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse({"message": str(exc)}, status_code=400)


@app.exception_handler(NotFound)
async def not_found(_request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse({"message": str(exc)}, status_code=404)


@app.exception_handler(Conflict)
async def conflict(_request: Request, exc: Conflict) -> JSONResponse:
    return JSONResponse({"message": str(exc)}, status_code=409)


@app.exception_handler(StoreUnavailable)
async def store_unavailable(_request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Store unavailable: %s", exc)
    return JSONResponse({"message": "Catalog storage is unavailable."}, status_code=503)


@app.get("/products")
async def list_products(
    brand: str | None = None,
    category: str | None = None,
    q: str | None = None,
    sort: SortName = "featured",
    at: str | None = None,
    products: ProductRepository = Depends(get_products),
    sale: SaleEngine = Depends(get_sale),
) -> list[dict[str, Any]]:
    as_of = _as_of(at)
    priced = price_catalog(await products.list(), await sale.get_document(), as_of)
    priced = filter_priced(priced, brand=brand, category=category, search=q)
    return [item.to_dict() for item in sort_priced(priced, sort)]


@app.get("/brands")
async def list_brands(
    products: ProductRepository = Depends(get_products),
    sale: SaleEngine = Depends(get_sale),
) -> list[str]:
    priced = price_catalog(await products.list(), await sale.get_document(), now_in_tz())
    return brand_options(priced)


@app.get("/products/{product_id}")
async def get_product(
    product_id: str,
    at: str | None = None,
    products: ProductRepository = Depends(get_products),
    sale: SaleEngine = Depends(get_sale),
) -> dict[str, Any]:
    product = await products.get(product_id)
    return price_product(product, await sale.get_document(), _as_of(at)).to_dict()


@app.post("/products", status_code=201, dependencies=[Depends(require_admin)])
async def create_product(
    payload: ProductPayload, products: ProductRepository = Depends(get_products)
) -> dict[str, Any]:
    product = await products.create(payload.model_dump(exclude_unset=True))
    return product.to_dict()


@app.put("/products/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: str, payload: ProductPayload, products: ProductRepository = Depends(get_products)
) -> dict[str, Any]:
    product = await products.update(product_id, payload.model_dump(exclude_unset=True))
    return product.to_dict()


@app.delete("/products/{product_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_product(product_id: str, products: ProductRepository = Depends(get_products)) -> MessageResponse:
    await products.delete(product_id)
    return MessageResponse(message="Product deleted.")


@app.get("/sale")
async def get_sale_document(sale: SaleEngine = Depends(get_sale)) -> dict[str, Any]:
    document = await sale.get_document()
    return document.to_dict()


@app.put("/sale", dependencies=[Depends(require_admin)])
async def set_sale_campaign(
    payload: CampaignPayload | None = Body(default=None),
    sale: SaleEngine = Depends(get_sale),
) -> dict[str, Any]:
    fields = payload.model_dump() if payload else None
    document = await sale.set_current(fields)
    return document.to_dict()
