"""
Local listener registry - one per EventDispatcher.

Listeners are stored per event name in attachment order and ordered at
lookup time: priority descending, then attachment order. Listeners attached
under WILDCARD are candidates for every event name.
"""
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .errors import InvalidListenerError, InvalidSubscriptionError
from .events import Event, Priority, WILDCARD
from .handles import ListenerHandle


def normalize_pattern(pattern: Any, what: str = "event name") -> Tuple[str, ...]:
    """Turn a name, iterable of names, or WILDCARD into a tuple of unique names.

    Raises InvalidSubscriptionError for anything else.
    """
    if isinstance(pattern, str):
        if not pattern:
            raise InvalidSubscriptionError(f"{what} must not be empty", pattern)
        return (pattern,)
    if isinstance(pattern, (bytes, bytearray)) or not isinstance(pattern, Iterable):
        raise InvalidSubscriptionError(
            f"{what} must be a string or an iterable of strings", pattern
        )
    names: List[str] = []
    for item in pattern:
        if not isinstance(item, str) or not item:
            raise InvalidSubscriptionError(
                f"every {what} in a collection must be a non-empty string", item
            )
        if item not in names:
            names.append(item)
    if not names:
        raise InvalidSubscriptionError(f"at least one {what} is required", pattern)
    return tuple(names)


def check_listener(listener: Any) -> None:
    if not callable(listener):
        raise InvalidListenerError("listener must be callable", listener)


def check_priority(priority: Any) -> int:
    # bool is an int subclass but never a meaningful priority
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidSubscriptionError("priority must be an integer", priority)
    return int(priority)


def order_handles(handles: Iterable[ListenerHandle]) -> List[ListenerHandle]:
    """De-duplicate and sort handles: higher priority first, ties by attachment order."""
    unique = dict.fromkeys(handles)
    return sorted(unique, key=lambda h: h.sort_key)


class ListenerRegistry:
    """Event name -> listeners mapping owned by a single dispatcher."""

    def __init__(self) -> None:
        self._buckets: Dict[str, List[ListenerHandle]] = defaultdict(list)
        self._lock = threading.RLock()

    def attach(
        self,
        events: Any,
        listener: Callable[[Event], Any],
        priority: int = Priority.NORMAL,
        once: bool = False,
    ) -> ListenerHandle:
        names = normalize_pattern(events)
        check_listener(listener)
        priority = check_priority(priority)
        handle = ListenerHandle(
            listener=listener, events=names, priority=priority, once=once
        )
        with self._lock:
            for name in names:
                self._buckets[name].append(handle)
        return handle

    def detach(self, handle: ListenerHandle) -> bool:
        """Remove the handle from every bucket it occupies. Returns False if it was not attached here."""
        removed = False
        with self._lock:
            for name in handle.events:
                bucket = self._buckets.get(name)
                if not bucket:
                    continue
                for i, candidate in enumerate(bucket):
                    if candidate is handle:
                        bucket.pop(i)
                        removed = True
                        break
                if not bucket:
                    del self._buckets[name]
        return removed

    def listeners_for(self, event_name: str) -> List[ListenerHandle]:
        """Ordered snapshot of listeners for event_name, wildcard listeners included."""
        with self._lock:
            candidates = list(self._buckets.get(event_name, ()))
            if event_name != WILDCARD:
                candidates.extend(self._buckets.get(WILDCARD, ()))
        return order_handles(candidates)

    def get_events(self) -> List[str]:
        with self._lock:
            return [name for name, bucket in self._buckets.items() if bucket]

    def has_listeners(self, event_name: str) -> bool:
        return bool(self.listeners_for(event_name))

    def listener_count(self, event_name: Optional[str] = None) -> int:
        with self._lock:
            if event_name is not None:
                return len(self._buckets.get(event_name, ()))
            return len({id(h) for bucket in self._buckets.values() for h in bucket})

    def clear_listeners(self, event_name: Optional[str] = None) -> None:
        """Clear one event name's bucket, or every bucket."""
        with self._lock:
            if event_name is None:
                self._buckets.clear()
            else:
                self._buckets.pop(event_name, None)
