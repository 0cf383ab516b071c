from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from .events import Event


# Shared by every registry so local and shared handles interleave by attachment order
_sequence = itertools.count()


def next_sequence() -> int:
    return next(_sequence)


@dataclass(eq=False)
class ListenerHandle:
    """Token for one attached listener. Pass it to detach() to remove exactly that subscription.

    Handles compare and hash by identity, so two subscriptions of the same
    callable under the same name and priority are still distinct.
    """
    listener: Callable[[Event], Any]
    events: Tuple[str, ...]
    priority: int
    identifiers: Optional[Tuple[str, ...]] = None
    once: bool = False
    sequence: int = field(default_factory=next_sequence)

    @property
    def is_shared(self) -> bool:
        return self.identifiers is not None

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (-self.priority, self.sequence)

    def handle(self, event: Event) -> Any:
        return self.listener(event)

    def __repr__(self) -> str:
        name = getattr(self.listener, "__qualname__", None) or repr(self.listener)
        scope = f" identifiers={self.identifiers!r}" if self.is_shared else ""
        return f"<ListenerHandle {name} events={self.events!r}{scope} priority={self.priority}>"
