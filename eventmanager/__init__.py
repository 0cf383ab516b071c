"""
eventmanager - synchronous in-process event dispatch

Contains:
- events: Event value object, Priority, WILDCARD
- dispatcher: EventDispatcher (trigger / trigger_until / attach / detach)
- shared: SharedListenerRegistry for cross-cutting listeners keyed by identifier
- registry: per-dispatcher ListenerRegistry
- responses: ResponseCollection
- aggregate: listener bundles attached and detached as one unit
- aware: EventDispatcherAware mixin
- config_io: JSON configuration with defaults
"""

from .events import Event, Priority, WILDCARD
from .handles import ListenerHandle
from .responses import ResponseCollection
from .registry import ListenerRegistry
from .shared import SharedListenerRegistry
from .dispatcher import EventDispatcher
from .aggregate import ListenerAggregate, AbstractListenerAggregate
from .aware import EventDispatcherAware
from .errors import (
    EventManagerError,
    InvalidSubscriptionError,
    InvalidListenerError,
    ConfigError,
)
from .config_io import load_config, save_config

__all__ = [
    "Event",
    "Priority",
    "WILDCARD",
    "ListenerHandle",
    "ResponseCollection",
    "ListenerRegistry",
    "SharedListenerRegistry",
    "EventDispatcher",
    "ListenerAggregate",
    "AbstractListenerAggregate",
    "EventDispatcherAware",
    "EventManagerError",
    "InvalidSubscriptionError",
    "InvalidListenerError",
    "ConfigError",
    "load_config",
    "save_config",
]
