"""Tests for Event values and ResponseCollection."""
from dataclasses import dataclass

import pytest

from eventmanager.events import Event, Priority, WILDCARD
from eventmanager.responses import ResponseCollection


@dataclass
class CacheLookupEvent(Event):
    key: str = ""
    ttl: int = 0


class TestEvent:
    """Test the generic Event value object."""

    def test_defaults(self):
        """A bare event has no name, target or params and is not stopped."""
        event = Event()
        assert event.name == ""
        assert event.target is None
        assert event.params == {}
        assert not event.propagation_stopped

    def test_params_are_copied(self):
        """Constructing an event does not share the caller's dict."""
        source = {"foo": "bar"}
        event = Event(name="do", params=source)
        event.set_param("foo", "baz")
        assert source == {"foo": "bar"}
        assert event.get_param("foo") == "baz"

    def test_get_param_default(self):
        """Missing keys return the given default."""
        event = Event(name="do", params={"a": 1})
        assert event.get_param("a") == 1
        assert event.get_param("missing") is None
        assert event.get_param("missing", 42) == 42

    def test_params_keep_insertion_order(self):
        """Params keep the order they were supplied in."""
        event = Event(name="do", params={"b": 2, "a": 1})
        event.set_param("c", 3)
        assert list(event.get_params()) == ["b", "a", "c"]

    def test_set_params_replaces(self):
        """set_params replaces the previous string-keyed params."""
        event = Event(name="do", params={"a": 1})
        event.set_params({"b": 2})
        assert event.get_params() == {"b": 2}

    def test_name_is_mutable(self):
        """An event can be renamed between triggers."""
        event = Event(name="save.pre")
        event.name = "save.post"
        assert event.name == "save.post"

    def test_stop_propagation(self):
        """stop_propagation toggles the flag both ways."""
        event = Event(name="do")
        event.stop_propagation()
        assert event.propagation_stopped
        event.stop_propagation(False)
        assert not event.propagation_stopped


class TestTypedEvent:
    """Test dataclass subclasses with named fields."""

    def test_typed_fields(self):
        """Typed fields are plain attributes."""
        event = CacheLookupEvent(name="cache.get", key="user:1", ttl=30)
        assert event.key == "user:1"
        assert event.ttl == 30

    def test_get_param_reads_typed_fields(self):
        """Generic listeners can read typed fields by key."""
        event = CacheLookupEvent(name="cache.get", key="user:1")
        assert event.get_param("key") == "user:1"
        assert event.get_params() == {"key": "user:1", "ttl": 0}

    def test_set_param_assigns_typed_field(self):
        """set_param on a typed field name updates the attribute, not params."""
        event = CacheLookupEvent(name="cache.get")
        event.set_param("key", "user:2")
        event.set_param("extra", True)
        assert event.key == "user:2"
        assert event.params == {"extra": True}

    def test_base_fields_not_exposed_as_params(self):
        """name/target are not reported as params."""
        event = CacheLookupEvent(name="cache.get", target=object())
        assert "name" not in event.get_params()
        assert "target" not in event.get_params()


class TestPriority:
    """Test priority constants."""

    def test_ordering(self):
        """Named priorities are ordered lowest to highest."""
        assert Priority.LOWEST < Priority.LOW < Priority.NORMAL < Priority.HIGH < Priority.HIGHEST

    def test_default_and_wildcard(self):
        assert Priority.NORMAL == 1
        assert WILDCARD == "*"


class TestResponseCollection:
    """Test the ordered response container."""

    def test_empty(self):
        """An empty collection has no first/last and is not stopped."""
        responses = ResponseCollection()
        assert len(responses) == 0
        assert responses.first() is None
        assert responses.last() is None
        assert not responses.stopped()

    def test_first_last_contains(self):
        """first/last/contains follow append order."""
        responses = ResponseCollection()
        for value in ("a", "b", "c"):
            responses.append(value)
        assert responses.first() == "a"
        assert responses.last() == "c"
        assert responses.contains("b")
        assert not responses.contains("z")
        assert "b" in responses
        assert list(responses) == ["a", "b", "c"]
        assert responses[1] == "b"
        assert responses.to_list() == ["a", "b", "c"]

    def test_mark_stopped(self):
        responses = ResponseCollection()
        responses.mark_stopped()
        assert responses.stopped()

    def test_errors_start_empty(self):
        assert ResponseCollection().errors == []
