from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

from .events import Priority
from .handles import ListenerHandle

if TYPE_CHECKING:
    from .dispatcher import EventDispatcher


class ListenerAggregate(ABC):
    """A bundle of related listeners attached to and detached from a dispatcher as one unit."""

    @abstractmethod
    def attach_all(self, dispatcher: "EventDispatcher", priority: int = Priority.NORMAL) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def detach_all(self, dispatcher: "EventDispatcher") -> None:  # pragma: no cover - interface
        raise NotImplementedError


class AbstractListenerAggregate(ListenerAggregate):
    """Aggregate that remembers its handles so detach_all() can undo attach_all().

    Subclasses implement attach_all() and append every handle they get back
    to self.handles:

        class AuditListeners(AbstractListenerAggregate):
            def attach_all(self, dispatcher, priority=Priority.NORMAL):
                self.handles.append(dispatcher.attach("save.post", self.on_save, priority))
    """

    def __init__(self) -> None:
        self.handles: List[ListenerHandle] = []

    def detach_all(self, dispatcher: "EventDispatcher") -> None:
        for handle in self.handles:
            dispatcher.detach(handle)
        self.handles.clear()
