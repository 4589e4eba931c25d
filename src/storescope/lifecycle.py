"""Lifecycle gate: decides whether a property delivery fires on_init, on_update or nothing.

Every delivery is stripped of structural fields and shallow-compared with the
last captured bag. Unchanged bags are dropped. A changed bag fires exactly
one hook: on_init if one is pending since the last (re)bind, on_update
otherwise.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

STRUCTURAL_PROPS = frozenset({"children", "scope", "is_global"})

_PRIMITIVES = (str, int, float, complex, bytes, bool, type(None))

Hook = Callable[[], Any]


def strip_structural(props: Mapping[str, Any] | None) -> dict[str, Any]:
    if not props:
        return {}
    return {k: v for k, v in props.items() if k not in STRUCTURAL_PROPS}


def shallow_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    """Same key set, and each value identical, or an equal primitive of the same type.

    Never recurses. 1, True and 1.0 are all different values here.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False
    if a.keys() != b.keys():
        return False
    for key, value in a.items():
        other = b[key]
        if value is other:
            continue
        # Only primitives compare by value; objects must be the same instance.
        if not isinstance(value, _PRIMITIVES) or type(value) is not type(other):
            return False
        if value != other:
            return False
    return True


class GateState:
    """Controller-owned diff state. Rebuilt hooks go through rebind()."""

    __slots__ = ("last_captured", "pending_init", "on_init", "on_update")

    def __init__(self) -> None:
        self.last_captured: dict[str, Any] | None = None
        self.pending_init = False
        self.on_init: Hook | None = None
        self.on_update: Hook | None = None

    def rebind(self, on_init: Hook, on_update: Hook) -> None:
        """Install a fresh hook pair. The next changed delivery fires on_init."""
        self.on_init = on_init
        self.on_update = on_update
        self.pending_init = True
        self.last_captured = None

    def __repr__(self) -> str:
        return f"GateState(pending_init={self.pending_init}, last_captured={self.last_captured!r})"


def trigger_container_action(gate: GateState, props: Mapping[str, Any] | None) -> str | None:
    """Run the gate for one delivery. Returns "init", "update" or None."""
    candidate = strip_structural(props)
    if shallow_equal(gate.last_captured, candidate):
        return None

    gate.last_captured = candidate

    if gate.pending_init:
        if gate.on_init is not None:
            gate.on_init()
        gate.pending_init = False
        return "init"
    if gate.on_update is not None:
        gate.on_update()
    return "update"
