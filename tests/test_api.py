import asyncio
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.main import app, get_store
from app.errors import StoreUnavailable

ADMIN = {"Authorization": "Bearer secret-token"}


@pytest.fixture()
def client(monkeypatch, memory_store):
    monkeypatch.setenv("ADMIN_TOKEN", "secret-token")
    app.dependency_overrides[get_store] = lambda: memory_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_admin_routes_require_token(client, product_fields):
    assert client.post("/products", json=product_fields).status_code == 401
    wrong = {"Authorization": "Bearer nope"}
    assert client.post("/products", json=product_fields, headers=wrong).status_code == 401
    assert client.put("/sale", json=None, headers=wrong).status_code == 401


def test_product_lifecycle(client, product_fields):
    created = client.post("/products", json=product_fields, headers=ADMIN)
    assert created.status_code == 201
    product_id = created.json()["id"]

    updated = client.put(f"/products/{product_id}", json={"sizes": []}, headers=ADMIN)
    assert updated.status_code == 200
    assert updated.json()["sizes"] == []
    assert updated.json()["name"] == product_fields["name"]

    fetched = client.get(f"/products/{product_id}")
    assert fetched.json()["effectivePrice"] == 1800

    deleted = client.delete(f"/products/{product_id}", headers=ADMIN)
    assert deleted.json() == {"message": "Product deleted."}
    assert client.get(f"/products/{product_id}").status_code == 404
    assert client.delete(f"/products/{product_id}", headers=ADMIN).status_code == 404


def test_create_validation_error_is_400(client, product_fields):
    response = client.post("/products", json={**product_fields, "images": []}, headers=ADMIN)
    assert response.status_code == 400
    assert "image" in response.json()["message"]


def test_listing_applies_sale_at_requested_instant(client, product_fields, january_sale):
    client.post("/products", json=product_fields, headers=ADMIN)
    client.post("/products", json={**product_fields, "name": "Tote", "category": "bags", "brand": "Noft"}, headers=ADMIN)
    sale = client.put("/sale", json=january_sale, headers=ADMIN)
    assert sale.status_code == 200
    assert len(sale.json()["history"]) == 1

    during = client.get("/products", params={"at": "2024-01-15", "category": "Shoes"}).json()
    assert [(p["name"], p["effectivePrice"], p["saleActive"]) for p in during] == [("Air Jordan 1", 1700, True)]

    after = client.get("/products", params={"at": "2024-02-01"}).json()
    assert {p["effectivePrice"] for p in after} == {1800}
    assert not any(p["saleActive"] for p in after)

    assert client.get("/brands").json() == ["All", "Nike", "Noft"]


def test_invalid_instant_is_400(client):
    assert client.get("/products", params={"at": "someday"}).status_code == 400


def test_unknown_sort_is_rejected(client):
    assert client.get("/products", params={"sort": "cheapest"}).status_code == 422


def test_clearing_sale(client, january_sale):
    client.put("/sale", json=january_sale, headers=ADMIN)
    cleared = client.put("/sale", json=None, headers=ADMIN)
    assert cleared.json()["current"] is None
    assert client.get("/sale").json()["history"][0]["name"] == "New Year"


def test_store_failures_are_503(client, memory_store):
    async def broken_read(name):
        raise StoreUnavailable("disk gone")

    memory_store.read = broken_read
    assert client.get("/products").status_code == 503


@pytest.mark.asyncio
async def test_concurrent_writes_share_one_store(monkeypatch, tmp_path, january_sale):
    monkeypatch.setenv("ADMIN_TOKEN", "secret-token")
    monkeypatch.setenv("STORE_BACKEND", "local")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    get_store.cache_clear()
    store = get_store()
    replace = store._replace
    active, overlaps = [], []

    def slow_replace(path, content, deadline):
        active.append(path)
        if len(active) > 1:
            overlaps.append(path)
        time.sleep(0.05)
        try:
            replace(path, content, deadline)
        finally:
            active.remove(path)

    monkeypatch.setattr(store, "_replace", slow_replace)
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://catalog") as client:
            responses = await asyncio.gather(
                client.put("/sale", json=january_sale, headers=ADMIN),
                client.put("/sale", json=None, headers=ADMIN),
            )
        assert get_store() is store
    finally:
        get_store.cache_clear()

    assert [r.status_code for r in responses] == [200, 200]
    assert overlaps == []
    assert (tmp_path / "sale.json").exists()
