"""Tests for JSON configuration loading."""
import json

import pytest

from eventmanager import ConfigError, EventDispatcher, SharedListenerRegistry
from eventmanager.config_io import DEFAULTS, load_config, save_config


class TestConfigIO:
    """Test load/save with defaults."""

    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "absent.json")
        assert cfg == {"dispatcher": DEFAULTS["dispatcher"]}
        assert cfg["dispatcher"] is not DEFAULTS["dispatcher"]

    def test_merges_over_defaults(self, tmp_path):
        p = tmp_path / "cfg.json"
        p.write_text(json.dumps({"dispatcher": {"debug": True}}), encoding="utf-8")
        cfg = load_config(p)
        assert cfg["dispatcher"]["debug"] is True
        assert cfg["dispatcher"]["default_priority"] == 1
        assert cfg["dispatcher"]["identifiers"] == []

    def test_invalid_json(self, tmp_path):
        p = tmp_path / "cfg.json"
        p.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(p)

    def test_non_object_root(self, tmp_path):
        p = tmp_path / "cfg.json"
        p.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(p)

    @pytest.mark.parametrize("section", ["oops", [1], 5])
    def test_dispatcher_section_not_object(self, tmp_path, section):
        p = tmp_path / "cfg.json"
        p.write_text(json.dumps({"dispatcher": section}), encoding="utf-8")
        with pytest.raises(ConfigError) as info:
            load_config(p)
        assert info.value.path == str(p)

    @pytest.mark.parametrize(
        "values",
        [
            {"debug": "yes"},
            {"identifiers": 5},
            {"identifiers": ["ok", 3]},
            {"identifiers": [""]},
            {"default_priority": "x"},
            {"default_priority": 1.5},
            {"default_priority": True},
        ],
    )
    def test_bad_values(self, tmp_path, values):
        """Known keys with the wrong type are reported as ConfigError."""
        p = tmp_path / "cfg.json"
        p.write_text(json.dumps({"dispatcher": values}), encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(p)

    def test_save_round_trip_drops_unknown_keys(self, tmp_path):
        p = tmp_path / "nested" / "cfg.json"
        save_config({"dispatcher": {"identifiers": ["A"], "bogus": 1}}, p)
        data = json.loads(p.read_text(encoding="utf-8"))
        assert "bogus" not in data["dispatcher"]
        assert load_config(p)["dispatcher"]["identifiers"] == ["A"]


class TestFromConfig:
    """Test building dispatchers from config."""

    def test_from_config(self):
        shared = SharedListenerRegistry()
        cfg = {"dispatcher": {"identifiers": ["Repo"], "default_priority": 7, "debug": False}}
        events = EventDispatcher.from_config(cfg, shared=shared)
        assert events.identifiers == ["Repo"]
        assert events.default_priority == 7
        assert events.get_shared_registry() is shared
        shared.attach("Repo", "do", lambda e: "shared")
        assert events.attach("do", lambda e: "local").priority == 7
        assert events.trigger("do").to_list() == ["local", "shared"]

    def test_from_config_validates_mapping(self):
        with pytest.raises(ConfigError):
            EventDispatcher.from_config({"dispatcher": {"identifiers": "Repo"}})

    def test_from_empty_config(self):
        events = EventDispatcher.from_config(None)
        assert events.identifiers == []
        assert events.default_priority == 1
