"""Subscriptions: the consumer side of a store.

A Subscription looks a store up through a StoreApi (or a ContainerApi, to
pick up a container's scoped instance and prop-bound actions), listens to it
and calls on_change only when the selected value changes. While it is alive
it counts as a listener, which keeps the store from being retired.
"""

from __future__ import annotations

from typing import Any, Callable

from storescope.action import ActionSet
from storescope.context import default_api
from storescope.store import StoreState, StoreType

_UNSET = object()

Selector = Callable[[Any, Any], Any]


class Subscription:
    """Selected view of one store instance, kept in sync until dispose()."""

    __slots__ = ("store_state", "actions", "_selector", "_props", "_on_change", "_value", "_unsubscribe")

    def __init__(
        self,
        api,
        store_type: StoreType,
        on_change: Callable[[Any], None] | None = None,
        *,
        selector: Selector | None = None,
        scope: Any = _UNSET,
        props: Any = None,
    ) -> None:
        if api is None:
            api = default_api
        instance = api.get_store(store_type) if scope is _UNSET else api.get_store(store_type, scope)
        self.store_state: StoreState = instance.store_state
        self.actions: ActionSet = instance.actions
        self._selector = selector
        self._props = props
        self._on_change = on_change
        self._value = self._select(self.store_state.get_state())
        self._unsubscribe: Callable[[], None] | None = self.store_state.subscribe(self._on_store_change)

    @property
    def state(self) -> Any:
        return self._value

    @property
    def disposed(self) -> bool:
        return self._unsubscribe is None

    def _select(self, state: Any) -> Any:
        if self._selector is None:
            return state
        return self._selector(state, self._props)

    def _on_store_change(self, state: Any) -> None:
        new_value = self._select(state)
        old = self._value
        if new_value is old or new_value == old:
            return
        self._value = new_value
        if self._on_change is not None:
            self._on_change(new_value)

    def update_props(self, props: Any) -> None:
        """Re-run the selector with new props. Fires on_change if the result moved."""
        self._props = props
        self._on_store_change(self.store_state.get_state())

    def dispose(self) -> None:
        """Stop listening. Safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"Subscription({self.store_state.key!r}, {state}, state={self._value!r})"


def subscribe(
    api,
    store_type: StoreType,
    on_change: Callable[[Any], None] | None = None,
    *,
    selector: Selector | None = None,
    scope: Any = _UNSET,
    props: Any = None,
) -> Subscription:
    """Subscribe to store_type through api. Returns the Subscription (call .dispose() to stop).

    Usage:
        todos = subscribe(container.api, Todos, render, selector=lambda s, p: len(s["items"]))
        todos.actions.add("milk")   # render(1)
        todos.dispose()
    """
    return Subscription(api, store_type, on_change, selector=selector, scope=scope, props=props)
