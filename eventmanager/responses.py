from __future__ import annotations

from typing import Any, Iterator, List, Optional, Tuple


class ResponseCollection:
    """Ordered results of one trigger call.

    Holds the non-None return value of each invoked listener, in invocation
    order, plus a stopped flag telling whether traversal halted early.
    """

    def __init__(self) -> None:
        self._responses: List[Any] = []
        self._stopped = False
        # Only filled by EventDispatcher.trigger_event_resilient()
        self.errors: List[Tuple[Any, BaseException]] = []

    def append(self, value: Any) -> None:
        self._responses.append(value)

    def first(self) -> Optional[Any]:
        return self._responses[0] if self._responses else None

    def last(self) -> Optional[Any]:
        return self._responses[-1] if self._responses else None

    def contains(self, value: Any) -> bool:
        return value in self._responses

    def mark_stopped(self) -> None:
        self._stopped = True

    def stopped(self) -> bool:
        return self._stopped

    def to_list(self) -> List[Any]:
        return list(self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._responses)

    def __getitem__(self, index: int) -> Any:
        return self._responses[index]

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def __repr__(self) -> str:
        return f"ResponseCollection({self._responses!r}, stopped={self._stopped})"
