from __future__ import annotations

from typing import ClassVar, List, Optional

from .dispatcher import EventDispatcher
from .shared import SharedListenerRegistry


class EventDispatcherAware:
    """
    Mixin giving an object its own lazily created EventDispatcher.

    The dispatcher is identified by the object's class name and the names of
    its base classes, so a shared listener attached to a base class name
    fires for every subclass:

        class Repository(EventDispatcherAware): ...
        class UserRepository(Repository): ...

        shared.attach("Repository", "save", audit)
        UserRepository().events.trigger("save")   # audit runs
    """

    event_identifier: ClassVar[Optional[str]] = None
    shared_listeners: ClassVar[Optional[SharedListenerRegistry]] = None

    _event_dispatcher: Optional[EventDispatcher] = None

    @classmethod
    def event_identifiers(cls) -> List[str]:
        ids: List[str] = []
        for klass in cls.__mro__:
            # Helper bases (ABC, Generic, unrelated mixins) are not identities
            if klass is EventDispatcherAware or not issubclass(klass, EventDispatcherAware):
                continue
            ids.append(klass.__name__)
        if cls.event_identifier and cls.event_identifier not in ids:
            ids.append(cls.event_identifier)
        return ids

    @property
    def events(self) -> EventDispatcher:
        if self._event_dispatcher is None:
            self.set_event_dispatcher(EventDispatcher(shared=self.shared_listeners))
        return self._event_dispatcher

    def set_event_dispatcher(
        self,
        dispatcher: EventDispatcher,
        shared: Optional[SharedListenerRegistry] = None,
    ) -> None:
        """Inject a dispatcher, tagging it with this class's identifiers."""
        dispatcher.add_identifiers(self.event_identifiers())
        if shared is not None:
            dispatcher.set_shared_registry(shared)
        self._event_dispatcher = dispatcher
