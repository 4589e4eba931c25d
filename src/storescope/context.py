"""StoreApi: the narrow lookup handle passed down to containers and consumers.

Containers and subscriptions take a StoreApi explicitly instead of reaching
for an ambient global. default_api wraps default_registry and is what they
fall back to when none is given.
"""

from __future__ import annotations

from storescope.registry import StoreInstance, StoreRegistry, default_registry
from storescope.store import StoreType


class StoreApi:
    """Lookup handle: get_store(store_type, scope) plus the global registry."""

    __slots__ = ("global_registry",)

    def __init__(self, registry: StoreRegistry | None = None) -> None:
        self.global_registry = registry if registry is not None else default_registry

    def get_store(self, store_type: StoreType, scope: str | None = None) -> StoreInstance:
        return self.global_registry.get_store(store_type, scope)

    def __repr__(self) -> str:
        return f"StoreApi({self.global_registry!r})"


default_api = StoreApi()
