import pytest

from app.catalog import load_seed_products
from app.catalog.products import ProductRepository
from scripts.seed import seed


def test_seed_file_has_complete_products():
    products = load_seed_products()
    assert products
    for fields in products:
        assert fields["name"]
        assert fields["offerPrice"] > 0
        assert fields["images"]


def test_seed_limit():
    assert len(load_seed_products(limit=2)) == 2


@pytest.mark.asyncio
async def test_seed_only_fills_an_empty_catalog(memory_store):
    repository = ProductRepository(memory_store)
    created = await seed(repository)
    assert created == len(load_seed_products())
    products = await repository.list()
    assert len({p.id for p in products}) == created
    assert {p.display_category for p in products} == {"Shoes", "Bags"}

    assert await seed(repository) == 0
    assert len(await repository.list()) == created
