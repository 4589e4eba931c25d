"""Library-wide settings.

Call configure() once at startup, before stores are created:
    storescope.defaults.configure(batch_updates=True)

mutator and middlewares are captured by each StoreState when it is created;
batch_updates is read on every bound action call.
"""

from __future__ import annotations

from typing import Any, Callable


def default_mutator(prev_state: Any, partial_state: Any) -> Any:
    """Merge dict partials into dict state, replace anything else."""
    if isinstance(prev_state, dict) and isinstance(partial_state, dict):
        return {**prev_state, **partial_state}
    return partial_state


batch_updates: bool = False
mutator: Callable[[Any, Any], Any] = default_mutator
# Insertion-ordered set of middlewares, applied outermost first.
middlewares: dict[Callable, None] = {}

_SETTINGS = ("batch_updates", "mutator", "middlewares")


def configure(**settings: Any) -> None:
    """Update one or more settings. Unknown names raise TypeError."""
    global batch_updates, mutator, middlewares
    unknown = set(settings) - set(_SETTINGS)
    if unknown:
        raise TypeError(f"Unknown storescope setting(s): {', '.join(sorted(unknown))}")
    if "batch_updates" in settings:
        batch_updates = bool(settings["batch_updates"])
    if "mutator" in settings:
        mutator = settings["mutator"]
    if "middlewares" in settings:
        middlewares = dict.fromkeys(settings["middlewares"])


def add_middleware(middleware: Callable) -> None:
    middlewares[middleware] = None


def remove_middleware(middleware: Callable) -> None:
    middlewares.pop(middleware, None)


def reset() -> None:
    """Restore the built-in settings. Mostly useful for tests."""
    global batch_updates, mutator, middlewares
    batch_updates = False
    mutator = default_mutator
    middlewares = {}
