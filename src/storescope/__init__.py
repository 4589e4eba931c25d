"""storescope: scoped, reference-counted store instances for Python."""

from importlib.metadata import version as _version

__version__ = _version("storescope")

from storescope import defaults
from storescope._tracking import get_pending_count
from storescope.store import StoreState, StoreType, create_store
from storescope.action import ActionApi, ActionSet, batch, bind_action, bind_actions, transaction
from storescope.registry import StoreInstance, StoreRegistry, default_registry
from storescope.context import StoreApi, default_api
from storescope.lifecycle import GateState, shallow_equal, trigger_container_action
from storescope.container import Container, ContainerApi, ContainerStatus, create_container
from storescope.subscriber import Subscription, subscribe
from storescope.middleware import apply_middleware, logger_middleware
# textual NOT auto-imported, opt-in only

__all__ = [
    "defaults",
    "get_pending_count",
    "StoreState",
    "StoreType",
    "create_store",
    "ActionApi",
    "ActionSet",
    "batch",
    "bind_action",
    "bind_actions",
    "transaction",
    "StoreInstance",
    "StoreRegistry",
    "default_registry",
    "StoreApi",
    "default_api",
    "GateState",
    "shallow_equal",
    "trigger_container_action",
    "Container",
    "ContainerApi",
    "ContainerStatus",
    "create_container",
    "Subscription",
    "subscribe",
    "apply_middleware",
    "logger_middleware",
]
