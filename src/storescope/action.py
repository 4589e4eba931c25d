"""Action binding and notification batching.

Action definitions are plain functions returning a thunk:

    def add_todo(text):
        def thunk(api, props):
            api.set_state({"todos": [*api.get_state()["todos"], text]})
        return thunk

bind_actions() turns a mapping of such definitions into callables bound to
one StoreState. Each call evaluates get_props() at call time, so a bound
action always sees the latest container properties even if it was bound
before they changed.

Wrapping mutations in @batch or `with transaction()` defers listener
notification until the outermost scope exits.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator, ParamSpec, TypeVar

from storescope import defaults
from storescope._tracking import begin_batch, end_batch

if TYPE_CHECKING:
    from storescope.store import StoreState

P = ParamSpec("P")
R = TypeVar("R")

PropsGetter = Callable[[], "Mapping[str, Any] | None"]


def _no_props() -> None:
    return None


def batch(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: defer listener notification for all mutations inside fn.

    Listeners fire once per store after fn returns, not during.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


@contextmanager
def transaction() -> Iterator[None]:
    """Context manager for batching mutations.

    Usage:
        with transaction():
            todos.actions.add("a")
            todos.actions.add("b")
            # listeners fire here, once
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()


class ActionApi:
    """What an action thunk receives as its first argument."""

    __slots__ = ("_store_state", "_get_props", "actions")

    def __init__(
        self,
        store_state: StoreState,
        get_props: PropsGetter,
        actions: ActionSet | None,
    ) -> None:
        self._store_state = store_state
        self._get_props = get_props
        self.actions = actions

    def get_state(self) -> Any:
        return self._store_state.get_state()

    def set_state(self, partial_state: Any) -> None:
        self._store_state.set_state(partial_state)

    def dispatch(self, thunk: Callable[[ActionApi, Any], R]) -> R:
        """Run another thunk against the same store with the live properties."""
        return thunk(self, self._get_props())


class ActionSet(Mapping):
    """Read-only mapping of action name to bound callable.

    Attribute access works too: actions.increment() == actions["increment"]().
    """

    __slots__ = ("_bound",)

    def __init__(self) -> None:
        self._bound: dict[str, Callable] = {}

    def __getitem__(self, name: str) -> Callable:
        return self._bound[name]

    def __iter__(self):
        return iter(self._bound)

    def __len__(self) -> int:
        return len(self._bound)

    def __getattr__(self, name: str) -> Callable:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._bound[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"ActionSet({sorted(self._bound)!r})"


def bind_action(
    store_state: StoreState,
    definition: Callable[..., Callable],
    name: str,
    get_props: PropsGetter | None = None,
    actions: ActionSet | None = None,
) -> Callable:
    """Bind one action definition to a store.

    The returned callable forwards its arguments to definition and calls the
    resulting thunk with (api, get_props()).
    """
    api = ActionApi(store_state, get_props or _no_props, actions)

    def bound(*args: Any, **kwargs: Any) -> Any:
        thunk = definition(*args, **kwargs)
        if defaults.batch_updates:
            begin_batch()
            try:
                return thunk(api, api._get_props())
            finally:
                end_batch()
        return thunk(api, api._get_props())

    bound.__name__ = name
    bound.__qualname__ = f"{store_state.key}.{name}"
    bound.__doc__ = definition.__doc__
    return bound


def bind_actions(
    definitions: Mapping[str, Callable[..., Callable]],
    store_state: StoreState,
    get_props: PropsGetter | None = None,
) -> ActionSet:
    """Bind every definition to store_state. Each action's api.actions is the full set."""
    actions = ActionSet()
    for name, definition in definitions.items():
        actions._bound[name] = bind_action(store_state, definition, name, get_props, actions)
    return actions
