"""Document store contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

PRODUCTS = "products"
SALE = "sale"
DOCUMENT_NAMES = (PRODUCTS, SALE)


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Bytes of a document as read, plus the revision tag to present on write.

    ``content`` is ``None`` when the document has never been written.
    """

    content: bytes | None
    revision: str | None = None

    @property
    def exists(self) -> bool:
        return self.content is not None


class DocumentStore(Protocol):
    async def read(self, name: str) -> Snapshot:
        ...

    async def write(self, name: str, content: bytes, expected_revision: str | None) -> str | None:
        ...

    async def close(self) -> None:
        ...
