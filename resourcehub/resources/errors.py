from __future__ import annotations


class StoreError(Exception):
    """Base class for store-level failures surfaced to the HTTP layer."""


class NotFoundError(StoreError, LookupError):
    pass


class ConflictError(StoreError):
    pass


class PermissionDeniedError(StoreError):
    pass


class ValidationError(StoreError, ValueError):
    pass
