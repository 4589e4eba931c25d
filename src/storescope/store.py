"""Store types and store state.

A StoreType is the definition: a key, an initial state and named action
definitions. A StoreState is one live instance of that definition, created
by a StoreRegistry per scope. StoreState owns the value and the listener
list; its listener count is what registries use to decide retirement.
"""

from __future__ import annotations

import copy
import itertools
from typing import Any, Callable, Mapping

from storescope import defaults
from storescope._tracking import schedule
from storescope.middleware import apply_middleware

Listener = Callable[[Any], None]
Unsubscribe = Callable[[], None]

_key_counter = itertools.count(1)


def _fresh(value: Any) -> Any:
    # Top-level copy only; nested values may be locks, clients or handles.
    if isinstance(value, (dict, list, set)):
        return copy.copy(value)
    return value


class StoreType:
    """Definition of a store: key, initial state and action definitions.

    Instances are hashable by identity and used as registry keys together
    with a scope id.
    """

    __slots__ = ("key", "name", "_initial_state", "actions")

    def __init__(
        self,
        initial_state: Any,
        actions: Mapping[str, Callable] | None = None,
        *,
        name: str = "",
    ) -> None:
        self.name = name or "store"
        self.key = f"{self.name}#{next(_key_counter)}"
        self._initial_state = initial_state
        self.actions: dict[str, Callable] = dict(actions or {})

    def initial_state(self) -> Any:
        """Produce a fresh initial value for a new instance.

        Callables are treated as factories. Top-level containers are copied so
        that scoped instances never share them.
        """
        value = self._initial_state
        if callable(value):
            return value()
        return _fresh(value)

    def create_state(self) -> StoreState:
        return StoreState(self.key, self.initial_state())

    def __repr__(self) -> str:
        return f"StoreType({self.key!r}, actions={sorted(self.actions)!r})"


def create_store(
    initial_state: Any,
    actions: Mapping[str, Callable] | None = None,
    *,
    name: str = "",
) -> StoreType:
    """Define a store type.

    Usage:
        def increment(by=1):
            def thunk(api, props):
                api.set_state(api.get_state() + by)
            return thunk

        Counter = create_store(0, {"increment": increment}, name="counter")
    """
    return StoreType(initial_state, actions, name=name)


class StoreState:
    """A single store instance: current value plus subscribed listeners."""

    __slots__ = ("key", "_state", "_initial", "_listeners", "_mutator", "_set_state")

    def __init__(self, key: str, initial: Any) -> None:
        self.key = key
        self._initial = _fresh(initial)
        self._state = initial
        self._listeners: list[Listener] = []
        self._mutator = defaults.mutator
        self._set_state = apply_middleware(self, list(defaults.middlewares), self._mutate)

    def get_state(self) -> Any:
        return self._state

    def set_state(self, partial_state: Any) -> None:
        """Apply a partial update through the middleware chain."""
        self._set_state(partial_state)

    def reset_state(self) -> None:
        """Restore the value this instance was created with, bypassing the mutator."""
        self._state = _fresh(self._initial)
        schedule(self)

    def _mutate(self, partial_state: Any) -> None:
        self._state = self._mutator(self._state, partial_state)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def listeners(self) -> list[Listener]:
        return list(self._listeners)

    def notify(self) -> None:
        """Call every listener with the current value."""
        state = self._state
        for listener in list(self._listeners):
            listener(state)

    def __repr__(self) -> str:
        return f"StoreState({self.key!r}, {self._state!r}, listeners={len(self._listeners)})"
