"""Document store backends and the startup factory."""

from __future__ import annotations

import os

from app.store.base import DOCUMENT_NAMES, PRODUCTS, SALE, DocumentStore, Snapshot
from app.store.github import GITHUB_API_URL, GitHubContentStore
from app.store.local import LocalFileStore

DEFAULT_DATA_DIR = "data"
DEFAULT_TIMEOUT = 15.0

__all__ = [
    "DOCUMENT_NAMES",
    "PRODUCTS",
    "SALE",
    "DocumentStore",
    "GitHubContentStore",
    "LocalFileStore",
    "Snapshot",
    "create_store_from_env",
]


def create_store_from_env() -> DocumentStore:
    """Create the backend selected by STORE_BACKEND."""
    backend = os.environ.get("STORE_BACKEND", "local").lower()
    timeout = float(os.environ.get("STORE_TIMEOUT", DEFAULT_TIMEOUT))
    if backend == "local":
        return LocalFileStore(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR), timeout=timeout)
    if backend == "github":
        token = os.environ.get("GITHUB_TOKEN")
        repo = os.environ.get("GITHUB_REPO")
        if not token or not repo:
            raise RuntimeError("GITHUB_TOKEN and GITHUB_REPO are required for the github backend")
        return GitHubContentStore(
            token,
            repo,
            branch=os.environ.get("GITHUB_BRANCH", "main"),
            directory=os.environ.get("GITHUB_DATA_DIR", DEFAULT_DATA_DIR),
            api_url=os.environ.get("GITHUB_API_URL", GITHUB_API_URL),
            timeout=timeout,
        )
    raise RuntimeError(f"Unknown STORE_BACKEND {backend!r}")
