"""Middleware chain for StoreState.set_state.

A middleware is a curried callable:

    def my_middleware(store_state):
        def wrap(next_fn):
            def handle(partial_state):
                ...  # before
                next_fn(partial_state)
                ...  # after
            return handle
        return wrap

The innermost link is always the update middleware, which applies the
mutator and schedules listener notification.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

from storescope._tracking import schedule

if TYPE_CHECKING:
    from storescope.store import StoreState

logger = logging.getLogger("storescope.middleware")

SetState = Callable[[Any], None]
Middleware = Callable[["StoreState"], Callable[[SetState], SetState]]


def update_middleware(store_state: StoreState) -> Callable[[SetState], SetState]:
    """Terminal link: mutate, then notify listeners if the state changed."""

    def wrap(next_fn: SetState) -> SetState:
        def handle(partial_state: Any) -> None:
            old = store_state.get_state()
            next_fn(partial_state)
            new = store_state.get_state()
            if old is not new and old != new:
                schedule(store_state)

        return handle

    return wrap


def logger_middleware(store_state: StoreState) -> Callable[[SetState], SetState]:
    """Log every mutation at DEBUG on the storescope.middleware logger."""

    def wrap(next_fn: SetState) -> SetState:
        def handle(partial_state: Any) -> None:
            next_fn(partial_state)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "%s: set_state(%r) -> %r",
                    store_state.key, partial_state, store_state.get_state(),
                )

        return handle

    return wrap


def apply_middleware(
    store_state: StoreState,
    middlewares: Iterable[Middleware],
    mutate: SetState,
) -> SetState:
    """Compose middlewares around mutate. The first middleware runs outermost."""
    chain = [*middlewares, update_middleware]
    set_state = mutate
    for middleware in reversed(chain):
        set_state = middleware(store_state)(set_state)
    return set_state
