from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import copy
import json

from .errors import ConfigError


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "dispatcher": {
        "debug": False,
        "identifiers": [],
        "default_priority": 1,
    },
}

PathLike = Union[str, Path]


def _config_path(path: Optional[PathLike] = None) -> Path:
    return Path(path) if path is not None else Path("eventmanager.json")


def dispatcher_section(
    config: Optional[Mapping[str, Any]] = None, path: Optional[str] = None
) -> Dict[str, Any]:
    """The "dispatcher" section of config merged over DEFAULTS (shallow).

    Raises ConfigError when the section or one of its known values has the wrong type.
    """
    section = copy.deepcopy(DEFAULTS["dispatcher"])
    raw = (config or {}).get("dispatcher")
    if raw is None:
        return section
    if not isinstance(raw, Mapping):
        raise ConfigError("'dispatcher' section must be an object", path)
    section.update(raw)

    if not isinstance(section["debug"], bool):
        raise ConfigError("'dispatcher.debug' must be true or false", path)
    identifiers = section["identifiers"]
    if not isinstance(identifiers, list) or not all(
        isinstance(i, str) and i for i in identifiers
    ):
        raise ConfigError("'dispatcher.identifiers' must be a list of non-empty strings", path)
    priority = section["default_priority"]
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ConfigError("'dispatcher.default_priority' must be an integer", path)
    return section


def load_config(path: Optional[PathLike] = None) -> dict:
    """Load a JSON config file; a missing file yields the defaults."""
    p = _config_path(path)
    if not p.exists():
        return {"dispatcher": dispatcher_section()}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config: {e}", str(p)) from e
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a JSON object", str(p))
    return {"dispatcher": dispatcher_section(data, str(p))}


def save_config(config: Mapping[str, Any], path: Optional[PathLike] = None) -> Path:
    p = _config_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    # Keep only known keys
    known = {k: v for k, v in dispatcher_section(config).items() if k in DEFAULTS["dispatcher"]}
    p.write_text(json.dumps({"dispatcher": known}, ensure_ascii=False, indent=2), encoding="utf-8")
    return p
