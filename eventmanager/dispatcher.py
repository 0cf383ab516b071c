"""
Event dispatcher - trigger/attach surface of the engine.

A trigger resolves its listeners once, up front, by merging the local
registry with the shared registry (if any) for this dispatcher's
identifiers. Local and shared listeners interleave by priority, ties keep
attachment order. Listeners run synchronously on the caller's stack.
Attach/detach calls made from inside a listener only affect later triggers.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import (
    Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TYPE_CHECKING
)

from .config_io import dispatcher_section
from .events import Event, Priority
from .handles import ListenerHandle
from .registry import (
    ListenerRegistry, check_priority, normalize_pattern, order_handles
)
from .responses import ResponseCollection
from .shared import SharedListenerRegistry

if TYPE_CHECKING:
    from .aggregate import ListenerAggregate

logger = logging.getLogger(__name__)

Listener = Callable[[Event], Any]
Predicate = Callable[[Any], bool]


def _normalize_identifiers(identifiers: Any) -> List[str]:
    # Unlike subscription patterns, an empty identifier list is valid
    if not isinstance(identifiers, str) and isinstance(identifiers, Iterable):
        identifiers = list(identifiers)
        if not identifiers:
            return []
    return list(normalize_pattern(identifiers, what="identifier"))


class EventDispatcher:
    """
    Publish/subscribe core with priorities, shared listeners and short-circuiting.

    Usage:
        shared = SharedListenerRegistry()
        events = EventDispatcher(shared=shared, identifiers=["CachedRepository", "Repository"])

        # Local listener
        events.attach("fetch", load_from_db, priority=Priority.NORMAL)

        # Cross-cutting listener for every dispatcher identified as "Repository"
        shared.attach("Repository", "fetch", read_cache, priority=Priority.HIGH)

        # First non-None answer wins
        results = events.trigger_until(lambda r: r is not None, "fetch", self, {"id": 7})
        if results.stopped():
            row = results.last()
    """

    def __init__(
        self,
        shared: Optional[SharedListenerRegistry] = None,
        identifiers: Iterable[str] = (),
        event_class: Type[Event] = Event,
        debug: bool = False,
        default_priority: int = Priority.NORMAL,
    ) -> None:
        self._registry = ListenerRegistry()
        self._shared = shared
        self._identifiers: List[str] = []
        self._event_class: Type[Event] = Event
        self._debug = debug
        self.default_priority = check_priority(default_priority)

        self._trigger_count: Dict[str, int] = defaultdict(int)
        self._total_triggers = 0
        self._stats_lock = threading.Lock()

        self.event_class = event_class
        if identifiers:
            self.set_identifiers(identifiers)

    @classmethod
    def from_config(
        cls,
        config: Optional[Mapping[str, Any]] = None,
        shared: Optional[SharedListenerRegistry] = None,
    ) -> "EventDispatcher":
        """Build a dispatcher from a config dict as returned by config_io.load_config()."""
        section = dispatcher_section(config)
        return cls(
            shared=shared,
            identifiers=section["identifiers"],
            debug=section["debug"],
            default_priority=section["default_priority"],
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def event_class(self) -> Type[Event]:
        return self._event_class

    @event_class.setter
    def event_class(self, event_class: Type[Event]) -> None:
        if not (isinstance(event_class, type) and issubclass(event_class, Event)):
            raise TypeError(f"event_class must be an Event subclass, got {event_class!r}")
        self._event_class = event_class

    @property
    def identifiers(self) -> List[str]:
        return list(self._identifiers)

    def set_identifiers(self, identifiers: Iterable[str]) -> None:
        """Replace the identity tags presented to the shared registry."""
        self._identifiers = _normalize_identifiers(identifiers)

    def add_identifiers(self, identifiers: Iterable[str]) -> None:
        for identifier in _normalize_identifiers(identifiers):
            if identifier not in self._identifiers:
                self._identifiers.append(identifier)

    def get_shared_registry(self) -> Optional[SharedListenerRegistry]:
        return self._shared

    def set_shared_registry(self, shared: Optional[SharedListenerRegistry]) -> None:
        """Swap the shared registry; None stops shared lookups until one is set again."""
        self._shared = shared

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def attach(
        self,
        events: Any,
        listener: Listener,
        priority: Optional[int] = None,
        once: bool = False,
    ) -> ListenerHandle:
        """
        Attach a listener to an event name, a collection of names, or WILDCARD.

        Args:
            events: Event name, iterable of names, or "*"
            listener: Callable receiving the Event; its non-None return value is collected
            priority: Higher runs first; defaults to default_priority
            once: If True, detach automatically before the first invocation

        Returns:
            Handle to pass to detach()
        """
        if priority is None:
            priority = self.default_priority
        handle = self._registry.attach(events, listener, priority=priority, once=once)
        if self._debug:
            logger.debug(f"Attached {handle!r}")
        return handle

    def once(self, events: Any, listener: Listener, priority: Optional[int] = None) -> ListenerHandle:
        """Attach a listener for a single invocation only."""
        return self.attach(events, listener, priority=priority, once=True)

    def on(
        self, events: Any, priority: Optional[int] = None
    ) -> Callable[[Listener], Listener]:
        """Decorator for attaching listeners."""
        def decorator(fn: Listener) -> Listener:
            self.attach(events, fn, priority=priority)
            return fn
        return decorator

    def detach(self, handle: ListenerHandle) -> bool:
        """Remove exactly the subscription behind handle. Returns True if it was removed."""
        if handle.is_shared:
            removed = self._shared.detach(handle) if self._shared is not None else False
        else:
            removed = self._registry.detach(handle)
        if self._debug:
            logger.debug(f"Detached {handle!r}" if removed else f"Detach of {handle!r}: not attached")
        return removed

    def attach_aggregate(
        self, aggregate: "ListenerAggregate", priority: Optional[int] = None
    ) -> None:
        aggregate.attach_all(self, priority=self.default_priority if priority is None else priority)

    def detach_aggregate(self, aggregate: "ListenerAggregate") -> None:
        aggregate.detach_all(self)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_listeners(self, event_name: str) -> List[ListenerHandle]:
        """The ordered listener sequence a trigger of event_name would invoke right now."""
        local = self._registry.listeners_for(event_name)
        if self._shared is None:
            return local
        shared = self._shared.listeners_for(self._identifiers, event_name)
        if not shared:
            return local
        return order_handles(local + shared)

    def get_events(self) -> List[str]:
        """Event names with at least one local listener."""
        return self._registry.get_events()

    def clear_listeners(self, event_name: Optional[str] = None) -> None:
        self._registry.clear_listeners(event_name)

    def listener_count(self, event_name: Optional[str] = None) -> int:
        return self._registry.listener_count(event_name)

    def get_stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            total = self._total_triggers
            counts = dict(self._trigger_count)
        return {
            "total_triggers": total,
            "trigger_counts": counts,
            "listener_counts": {
                name: self._registry.listener_count(name) for name in self._registry.get_events()
            },
            "identifiers": list(self._identifiers),
            "shared": self._shared is not None,
        }

    # ------------------------------------------------------------------
    # Triggering
    # ------------------------------------------------------------------

    def _make_event(
        self, name: str, target: Any, params: Optional[Mapping[str, Any]]
    ) -> Event:
        return self._event_class(name=name, target=target, params=dict(params or {}))

    def trigger(
        self, name: str, target: Any = None, params: Optional[Mapping[str, Any]] = None
    ) -> ResponseCollection:
        return self.trigger_event(self._make_event(name, target, params))

    def trigger_until(
        self,
        predicate: Predicate,
        name: str,
        target: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ResponseCollection:
        return self.trigger_event_until(predicate, self._make_event(name, target, params))

    def trigger_event(self, event: Event) -> ResponseCollection:
        """Invoke every listener for event.name until one stops propagation."""
        return self._trigger_listeners(event)

    def trigger_event_until(self, predicate: Predicate, event: Event) -> ResponseCollection:
        """Like trigger_event, but halt after the first response satisfying predicate."""
        return self._trigger_listeners(event, predicate=predicate)

    def trigger_event_resilient(
        self, event: Event, predicate: Optional[Predicate] = None
    ) -> ResponseCollection:
        """
        Best-effort trigger: a failing listener is logged and recorded on
        ResponseCollection.errors, and the remaining listeners still run.
        """
        return self._trigger_listeners(event, predicate=predicate, resilient=True)

    def _trigger_listeners(
        self,
        event: Event,
        predicate: Optional[Predicate] = None,
        resilient: bool = False,
    ) -> ResponseCollection:
        name = event.name
        with self._stats_lock:
            self._total_triggers += 1
            self._trigger_count[name] += 1

        # A reused event (e.g. ".pre" then ".post") starts every trigger un-stopped
        event.stop_propagation(False)
        listeners = self.get_listeners(name)

        if self._debug:
            logger.debug(f"Triggering {name!r} with {len(listeners)} listener(s): {event!r}")

        responses = ResponseCollection()
        for handle in listeners:
            if handle.once and not self.detach(handle):
                # Already consumed, e.g. by a re-entrant trigger
                continue

            if resilient:
                try:
                    result = handle.handle(event)
                except Exception as e:
                    logger.error(f"Error in listener {handle!r} for {name!r}: {e}", exc_info=True)
                    responses.errors.append((handle.listener, e))
                    result = None
            else:
                result = handle.handle(event)

            if result is not None:
                responses.append(result)
                if predicate is not None and predicate(result):
                    responses.mark_stopped()
                    break

            if event.propagation_stopped:
                responses.mark_stopped()
                break

        return responses

    def __repr__(self) -> str:
        return (
            f"<EventDispatcher identifiers={self._identifiers!r} "
            f"events={self.get_events()!r} shared={self._shared is not None}>"
        )
