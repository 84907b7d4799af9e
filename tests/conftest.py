import hashlib
import json

import pytest

from app.errors import Conflict
from app.store.base import Snapshot


class MemoryStore:
    """Conditional-write store keyed by content hash, like the GitHub backend."""

    def __init__(self, documents=None):
        self.documents: dict[str, bytes] = {}
        self.writes: list[str] = []
        self.conflicts_to_raise = 0
        for name, value in (documents or {}).items():
            self.documents[name] = json.dumps(value).encode("utf-8")

    @staticmethod
    def revision_of(content: bytes) -> str:
        return hashlib.sha1(content).hexdigest()

    async def read(self, name):
        content = self.documents.get(name)
        if content is None:
            return Snapshot(content=None, revision=None)
        return Snapshot(content=content, revision=self.revision_of(content))

    async def write(self, name, content, expected_revision):
        current = self.documents.get(name)
        current_revision = self.revision_of(current) if current is not None else None
        if self.conflicts_to_raise:
            self.conflicts_to_raise -= 1
            raise Conflict(f"{name} changed")
        if current_revision != expected_revision:
            raise Conflict(f"{name} changed")
        self.documents[name] = content
        self.writes.append(name)
        return self.revision_of(content)

    async def close(self):
        return None

    def load(self, name):
        return json.loads(self.documents[name])


@pytest.fixture()
def memory_store():
    return MemoryStore()


@pytest.fixture(autouse=True)
def fixed_timezone(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "Asia/Kolkata")


@pytest.fixture()
def product_fields():
    return {
        "name": "Air Jordan 1",
        "description": "Chicago",
        "price": 2000,
        "offerPrice": 1800,
        "images": ["https://img.example.com/aj1.jpg"],
        "brand": "Nike",
        "category": "Shoes",
        "sizes": [9, 8, 10],
        "isBestSeller": True,
    }


@pytest.fixture()
def january_sale():
    return {
        "name": "New Year",
        "description": "Flat 300 off",
        "price": 300,
        "startDate": "2024-01-01",
        "endDate": "2024-01-31",
        "enabled": True,
    }


@pytest.fixture()
def make_store():
    return MemoryStore
