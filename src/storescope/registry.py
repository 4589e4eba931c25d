"""StoreRegistry: scope-keyed map of live store instances.

A registry creates an instance lazily on first lookup of a
(store type, scope id) pair and hands back the same instance until it is
deleted. Deletion only happens when nobody is subscribed, and callers only
ask for it at well-defined lifecycle boundaries (scope-change commit,
unmount), never on unsubscribe.
"""

from __future__ import annotations

import logging
from typing import Iterator

from storescope.action import ActionSet, bind_actions
from storescope.store import StoreState, StoreType

logger = logging.getLogger("storescope.registry")

ScopeKey = tuple[str, "str | None"]


class StoreInstance:
    """A registry entry: the live StoreState and its actions bound without props."""

    __slots__ = ("store_state", "actions")

    def __init__(self, store_state: StoreState, actions: ActionSet) -> None:
        self.store_state = store_state
        self.actions = actions

    def listeners(self) -> list:
        return self.store_state.listeners()

    def __repr__(self) -> str:
        return f"StoreInstance({self.store_state!r})"


class StoreRegistry:
    """Owns every StoreInstance keyed under it."""

    def __init__(self, name: str = "__global__") -> None:
        self.name = name
        self._stores: dict[ScopeKey, StoreInstance] = {}

    @staticmethod
    def _key(store_type: StoreType, scope_id: str | None) -> ScopeKey:
        return (store_type.key, scope_id)

    def init_store(self, store_type: StoreType, scope_id: str | None = None) -> StoreInstance:
        """Create and register a fresh instance, replacing any existing one."""
        store_state = store_type.create_state()
        instance = StoreInstance(store_state, bind_actions(store_type.actions, store_state))
        self._stores[self._key(store_type, scope_id)] = instance
        logger.debug("%s: created %s (scope=%r)", self.name, store_type.key, scope_id)
        return instance

    def get_store(self, store_type: StoreType, scope_id: str | None = None) -> StoreInstance:
        """Return the instance for (store_type, scope_id), creating it if absent."""
        instance = self._stores.get(self._key(store_type, scope_id))
        if instance is None:
            instance = self.init_store(store_type, scope_id)
        return instance

    def has_store(self, store_type: StoreType, scope_id: str | None = None) -> bool:
        return self._key(store_type, scope_id) in self._stores

    def delete_store(self, store_type: StoreType, scope_id: str | None = None) -> bool:
        """Remove the instance if it has no listeners.

        Missing entries and instances that are still subscribed are left alone.
        Returns True only when an entry was removed.
        """
        key = self._key(store_type, scope_id)
        instance = self._stores.get(key)
        if instance is None:
            return False
        if instance.listeners():
            logger.debug(
                "%s: kept %s (scope=%r), %d listener(s)",
                self.name, store_type.key, scope_id, len(instance.listeners()),
            )
            return False
        del self._stores[key]
        logger.debug("%s: retired %s (scope=%r)", self.name, store_type.key, scope_id)
        return True

    def clear(self) -> None:
        """Drop every instance regardless of listeners. Mostly useful for tests."""
        self._stores.clear()

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[ScopeKey]:
        return iter(list(self._stores))

    def __repr__(self) -> str:
        return f"StoreRegistry({self.name!r}, stores={len(self._stores)})"


# Process-wide registry shared by every global or scoped binding.
default_registry = StoreRegistry()
