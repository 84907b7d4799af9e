"""Seed an empty catalog with demo products."""

from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

from app.catalog import load_seed_products
from app.catalog.products import ProductRepository
from app.store import create_store_from_env
from app.utils.log import configure_logging

logger = logging.getLogger(__name__)


async def seed(repository: ProductRepository, limit: int | None = None) -> int:
    existing = await repository.list()
    if existing:
        logger.info("Catalog already has %d products; skipping seed", len(existing))
        return 0
    created = 0
    for fields in load_seed_products(limit=limit):
        await repository.create(fields)
        created += 1
    return created


async def main() -> None:
    load_dotenv()
    configure_logging()
    store = create_store_from_env()
    try:
        created = await seed(ProductRepository(store))
    finally:
        await store.close()
    print(f"Seed complete: {created} products created")


if __name__ == "__main__":
    asyncio.run(main())
