"""Container: binds a store type to a scope for the lifetime of a host node.

A container is driven by its host (a UI framework, a test, a request
handler) through four calls:

    container = CounterContainer({"scope": "s1", "step": 2})   # mount
    container.receive_props({"scope": "s2", "step": 2})         # every update pass
    container.commit()                                          # after the pass
    container.unmount()

receive_props() runs two ordered phases. First it derives the binding: if the
scope or the registry selection changed, the actions and lifecycle hooks are
rebound to the store living at the new key. Then it runs the lifecycle gate
against the already-rebound hooks. commit() and unmount() are the only places
where stores are retired, and only when nobody is subscribed to them.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Mapping

from storescope.action import ActionSet, bind_action, bind_actions
from storescope.context import default_api
from storescope.lifecycle import GateState, trigger_container_action
from storescope.registry import StoreInstance, StoreRegistry
from storescope.store import StoreState, StoreType

logger = logging.getLogger("storescope.container")

_UNSET = object()


def _noop():
    return lambda api, props: None


class ContainerStatus(enum.Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    REBINDING = "rebinding"
    UNMOUNTED = "unmounted"


class ContainerApi:
    """What a container exposes to the nodes below it.

    Same shape as StoreApi, so it can be passed as another container's context.
    """

    __slots__ = ("get_store", "global_registry")

    def __init__(self, get_store: Callable[..., StoreInstance], global_registry: StoreRegistry) -> None:
        self.get_store = get_store
        self.global_registry = global_registry


class _Binding:
    __slots__ = ("registry", "scope", "store_state", "actions")

    def __init__(
        self,
        registry: StoreRegistry,
        scope: str | None,
        store_state: StoreState,
        actions: ActionSet,
    ) -> None:
        self.registry = registry
        self.scope = scope
        self.store_state = store_state
        self.actions = actions

    def same_key(self, other: _Binding) -> bool:
        return self.registry is other.registry and self.scope == other.scope


class Container:
    """Base class. Use create_container() to get a subclass bound to a store type."""

    store_type: StoreType | None = None
    hooks: dict[str, Callable] = {"on_init": _noop, "on_update": _noop}
    display_name = "Container"

    def __init__(self, props: Mapping[str, Any] | None = None, *, context=None) -> None:
        if self.store_type is None:
            raise TypeError(f"{type(self).__name__} has no store_type; use create_container()")
        self.status = ContainerStatus.UNBOUND
        self.context = context if context is not None else default_api
        # Private registry for unscoped, non-global use; dies with the container.
        self.registry = StoreRegistry("__local__")
        self.props: dict[str, Any] = dict(props or {})
        self.gate = GateState()
        self._uncommitted: list[_Binding] = []
        self.api = ContainerApi(self._get_store, self.context.global_registry)

        self._binding = self._bind(self.props)
        self.status = ContainerStatus.BOUND
        trigger_container_action(self.gate, self.props)

    # --- Host-driven lifecycle ---

    def receive_props(self, props: Mapping[str, Any] | None) -> str | None:
        """Deliver properties for one update pass.

        Returns "init", "update" or None depending on which hook fired.
        """
        if self.status is ContainerStatus.UNMOUNTED:
            raise RuntimeError(f"{self.display_name} is unmounted")
        props = dict(props or {})
        self._derive_binding(props)
        self.props = props
        return trigger_container_action(self.gate, props)

    def commit(self) -> int:
        """Retire stores left behind by rebinds in the last pass. Returns how many went away."""
        retired = 0
        uncommitted, self._uncommitted = self._uncommitted, []
        for binding in uncommitted:
            if binding.same_key(self._binding):
                continue
            if binding.registry.delete_store(self.store_type, binding.scope):
                retired += 1
        return retired

    def unmount(self) -> None:
        if self.status is ContainerStatus.UNMOUNTED:
            return
        self.commit()
        self._binding.registry.delete_store(self.store_type, self._binding.scope)
        self.status = ContainerStatus.UNMOUNTED
        logger.debug("%s: unmounted (scope=%r)", self.display_name, self._binding.scope)

    def __enter__(self) -> Container:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.unmount()

    # --- Binding ---

    @property
    def scope(self) -> str | None:
        return self._binding.scope

    @property
    def actions(self) -> ActionSet:
        return self._binding.actions

    @property
    def store_state(self) -> StoreState:
        return self._binding.store_state

    def _select_registry(self, props: Mapping[str, Any]) -> StoreRegistry:
        if not props.get("scope") and not props.get("is_global"):
            return self.registry
        return self.context.global_registry

    def _get_container_props(self) -> dict[str, Any] | None:
        return self.gate.last_captured

    def _bind(self, props: Mapping[str, Any]) -> _Binding:
        registry = self._select_registry(props)
        scope = props.get("scope") or None
        store_state = registry.get_store(self.store_type, scope).store_state

        get_props = self._get_container_props
        actions = bind_actions(self.store_type.actions, store_state, get_props)
        on_init = bind_action(store_state, self.hooks["on_init"], "on_init", get_props, actions)
        on_update = bind_action(store_state, self.hooks["on_update"], "on_update", get_props, actions)
        self.gate.rebind(on_init, on_update)

        logger.debug("%s: bound to %s (scope=%r)", self.display_name, registry.name, scope)
        return _Binding(registry, scope, store_state, actions)

    def _derive_binding(self, props: Mapping[str, Any]) -> bool:
        """Rebind if the store key changed. Never retires anything."""
        registry = self._select_registry(props)
        scope = props.get("scope") or None
        if registry is self._binding.registry and scope == self._binding.scope:
            return False
        self.status = ContainerStatus.REBINDING
        try:
            binding = self._bind(props)
        finally:
            self.status = ContainerStatus.BOUND
        # The old binding is queued only once the new one exists.
        self._uncommitted.append(self._binding)
        self._binding = binding
        return True

    # --- Lookup for descendants ---

    def _get_scoped_store(self, store_type: StoreType, scope: str | None) -> StoreInstance | None:
        if store_type is not self.store_type or scope != self._binding.scope:
            return None
        # Hand out the prop-bound actions, not the registry's unbound ones.
        return StoreInstance(self._binding.store_state, self._binding.actions)

    def _get_store(self, store_type: StoreType, scope: Any = _UNSET) -> StoreInstance:
        if scope is _UNSET:
            scoped = self._get_scoped_store(store_type, self._binding.scope)
            return scoped if scoped is not None else self.context.get_store(store_type)
        scoped = self._get_scoped_store(store_type, scope or None)
        return scoped if scoped is not None else self.context.get_store(store_type, scope)

    def __repr__(self) -> str:
        return f"<{self.display_name} {self.status.value} scope={self._binding.scope!r}>"


def create_container(
    store_type: StoreType,
    *,
    on_init: Callable | None = None,
    on_update: Callable | None = None,
    display_name: str = "",
) -> type[Container]:
    """Create a Container subclass bound to store_type.

    on_init and on_update are action-style definitions taking no arguments:

        def on_init():
            def thunk(api, props):
                api.set_state({"page": props["page"]})
            return thunk
    """
    if not isinstance(store_type, StoreType):
        raise TypeError(f"create_container() expects a StoreType, got {type(store_type).__name__}")
    name = display_name or f"Container({store_type.name})"
    return type(
        name,
        (Container,),
        {
            "store_type": store_type,
            "hooks": {"on_init": on_init or _noop, "on_update": on_update or _noop},
            "display_name": name,
        },
    )
