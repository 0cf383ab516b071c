"""
Event values passed through the dispatcher.

Features:
- Named priorities (any int is accepted, higher runs first)
- Generic string-keyed params for ad-hoc events
- Typed events via dataclass subclasses with named fields
- Propagation control shared by every listener of one trigger
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional


WILDCARD = "*"


# ============================================================================
# Listener Priority
# ============================================================================

class Priority(IntEnum):
    """Listener priority - higher values execute first."""
    LOWEST = -10000
    LOW = -100
    NORMAL = 1
    HIGH = 100
    HIGHEST = 10000


# ============================================================================
# Base Event Class
# ============================================================================

_BASE_FIELDS = frozenset({"name", "target", "params", "_propagation_stopped"})


@dataclass
class Event:
    """
    A named occurrence dispatched through an EventDispatcher.

    The target is a plain back-reference to whatever the event concerns and
    may be None. Params are read by key; subclasses may instead declare
    typed fields, which get_param() also resolves:

        @dataclass
        class CacheLookupEvent(Event):
            key: str = ""

        event = CacheLookupEvent(name="cache.get", key="user:1")
        event.key                 # "user:1"
        event.get_param("key")    # "user:1"
    """
    name: str = ""
    target: Any = None
    params: Dict[str, Any] = field(default_factory=dict)
    _propagation_stopped: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        # Copy so the caller's mapping is never mutated by set_param()
        self.params = dict(self.params) if self.params is not None else {}

    # -- params -------------------------------------------------------------

    def _typed_fields(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in _BASE_FIELDS and not f.name.startswith("_")
        }

    def get_param(self, key: str, default: Any = None) -> Any:
        if key in self.params:
            return self.params[key]
        typed = self._typed_fields()
        if key in typed:
            return typed[key]
        return default

    def set_param(self, key: str, value: Any) -> None:
        if key in self._typed_fields():
            setattr(self, key, value)
        else:
            self.params[key] = value

    def get_params(self) -> Dict[str, Any]:
        """All params, typed fields first, then string-keyed entries."""
        merged = self._typed_fields()
        merged.update(self.params)
        return merged

    def set_params(self, params: Optional[Mapping[str, Any]]) -> None:
        """Replace string-keyed params. Typed fields named in the mapping are assigned."""
        self.params = {}
        for key, value in dict(params or {}).items():
            self.set_param(key, value)

    # -- propagation --------------------------------------------------------

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def stop_propagation(self, flag: bool = True) -> None:
        """Stop (or with flag=False, re-allow) invocation of further listeners."""
        self._propagation_stopped = bool(flag)
