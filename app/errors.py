"""Error taxonomy shared by the store, repository and sale engine."""

from __future__ import annotations


class CatalogError(RuntimeError):
    pass


class ValidationError(CatalogError):
    """Malformed or missing required input."""


class NotFound(CatalogError):
    """Referenced product id is absent."""


class Conflict(CatalogError):
    """The document changed since it was read."""


class StoreUnavailable(CatalogError):
    """Backend I/O failed or timed out."""
