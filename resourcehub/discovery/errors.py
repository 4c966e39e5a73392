from __future__ import annotations

from typing import Any


class DiscoveryError(Exception):
    """Base class for conditions signalled by the discovery core."""


class ResourceNotFoundError(DiscoveryError, LookupError):
    def __init__(self, resource_id: Any) -> None:
        super().__init__(f"Resource {resource_id!r} not found")
        self.resource_id = resource_id


class InvalidArgumentError(DiscoveryError, ValueError):
    pass
