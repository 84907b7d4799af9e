"""JSON encoding shared by every backend."""

from __future__ import annotations

import json
from typing import Any

from app.errors import StoreUnavailable


def encode_document(value: Any) -> bytes:
    return (json.dumps(value, ensure_ascii=False, indent=2) + "\n").encode("utf-8")


def decode_document(content: bytes, name: str) -> Any:
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StoreUnavailable(f"Document {name!r} is not valid JSON") from exc
