"""
Shared listener registry - cross-cutting listeners keyed by identifier.

A dispatcher presents its identifiers (for example a concrete and an
abstract class name); every listener attached under a matching identifier,
or under the WILDCARD identifier, is merged into that dispatcher's triggers.

The registry is an ordinary object: create one and inject it into the
dispatchers that should consult it. Passing None to a dispatcher turns
shared lookups off for it.
"""
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Optional

from .events import Event, Priority, WILDCARD
from .handles import ListenerHandle
from .registry import check_listener, check_priority, normalize_pattern, order_handles


class SharedListenerRegistry:
    """Identifier -> event name -> listeners mapping, safe to share between dispatchers."""

    def __init__(self) -> None:
        self._identifiers: DefaultDict[str, Dict[str, List[ListenerHandle]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._lock = threading.RLock()

    def attach(
        self,
        identifiers: Any,
        events: Any,
        listener: Callable[[Event], Any],
        priority: int = Priority.NORMAL,
        once: bool = False,
    ) -> ListenerHandle:
        ids = normalize_pattern(identifiers, what="identifier")
        names = normalize_pattern(events)
        check_listener(listener)
        priority = check_priority(priority)
        handle = ListenerHandle(
            listener=listener,
            events=names,
            priority=priority,
            identifiers=ids,
            once=once,
        )
        with self._lock:
            for identifier in ids:
                by_event = self._identifiers[identifier]
                for name in names:
                    by_event[name].append(handle)
        return handle

    def detach(self, handle: ListenerHandle) -> bool:
        if not handle.is_shared:
            return False
        removed = False
        with self._lock:
            for identifier in handle.identifiers:
                by_event = self._identifiers.get(identifier)
                if by_event is None:
                    continue
                for name in handle.events:
                    bucket = by_event.get(name)
                    if not bucket:
                        continue
                    for i, candidate in enumerate(bucket):
                        if candidate is handle:
                            bucket.pop(i)
                            removed = True
                            break
                    if not bucket:
                        del by_event[name]
                if not by_event:
                    del self._identifiers[identifier]
        return removed

    def listeners_for(self, identifiers: Iterable[str], event_name: str) -> List[ListenerHandle]:
        """Ordered union of listeners for any of identifiers (plus WILDCARD) and event_name (plus WILDCARD)."""
        id_keys = list(dict.fromkeys([*identifiers, WILDCARD]))
        name_keys = list(dict.fromkeys([event_name, WILDCARD]))
        candidates: List[ListenerHandle] = []
        with self._lock:
            for identifier in id_keys:
                by_event = self._identifiers.get(identifier)
                if not by_event:
                    continue
                for name in name_keys:
                    candidates.extend(by_event.get(name, ()))
        return order_handles(candidates)

    def get_identifiers(self) -> List[str]:
        with self._lock:
            return [i for i, by_event in self._identifiers.items() if by_event]

    def get_events(self, identifier: str) -> List[str]:
        with self._lock:
            by_event = self._identifiers.get(identifier)
            if not by_event:
                return []
            return [name for name, bucket in by_event.items() if bucket]

    def clear_listeners(self, identifier: str, event_name: Optional[str] = None) -> None:
        with self._lock:
            if identifier not in self._identifiers:
                return
            if event_name is None:
                del self._identifiers[identifier]
                return
            by_event = self._identifiers[identifier]
            by_event.pop(event_name, None)
            if not by_event:
                del self._identifiers[identifier]

    def __repr__(self) -> str:
        return f"<SharedListenerRegistry identifiers={self.get_identifiers()!r}>"
