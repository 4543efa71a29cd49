from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict

from .paths import get_default_settings_paths, get_logs_dir
from .settings_schema import SETTINGS_VALIDATOR

LOGGER = logging.getLogger("offvocal.settings")

__all__ = [
    "DEFAULT_KEYWORDS",
    "DEFAULT_SETTINGS",
    "SETTINGS_VERSION",
    "load_settings",
    "merge_defaults",
    "save_settings",
    "update_settings",
]

SETTINGS_VERSION = 1

DEFAULT_KEYWORDS = (
    "karaoke|カラオケ|offvocal|off vocal|off-vocal|オフボーカル|instrumental|instr.|"
    "インストゥルメンタル|accoustic|acoustic|acapella|アカペラ|orchestra|オーケストラ"
)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "version": SETTINGS_VERSION,
    "offvocal": {
        "execution_mode": "Audit",
        "selected_libraries": [],
        "keywords": DEFAULT_KEYWORDS,
    },
    "catalog": {
        "base_url": "http://127.0.0.1:8096",
        "api_key": None,
        "user_id": None,
        "timeout_s": 30,
        "verify_tls": True,
    },
    "api": {
        "host": "127.0.0.1",
        "port": 8757,
        "api_key": None,
    },
    "logging": {
        "level": "INFO",
    },
}


# Top-level keys of the plugin-era configuration document, moved into the
# ``offvocal`` block on load. An explicit ``offvocal`` value wins.
_PLUGIN_KEYS = {
    "ExecutionMode": "execution_mode",
    "SelectedMediaLibraries": "selected_libraries",
    "OffVocalKeywords": "keywords",
}
_PLUGIN_EXECUTION_MODES = ("Audit", "Destructive")


def merge_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    def _merge(default: Dict[str, Any], payload: Dict[str, Any], path: str) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in default.items():
            current = payload.get(key)
            if isinstance(value, dict):
                result[key] = _merge(value, current if isinstance(current, dict) else {}, f"{path}{key}.")
            elif isinstance(value, list):
                if isinstance(current, list):
                    result[key] = list(current)
                elif isinstance(current, str):
                    result[key] = [current]
                else:
                    if current is not None:
                        LOGGER.warning("Setting %s%s is not a list (%r); using the default", path, key, current)
                    result[key] = list(value)
            else:
                result[key] = payload.get(key, value)
        result.update({key: value for key, value in payload.items() if key not in result})
        return result

    return _merge(DEFAULT_SETTINGS, data or {}, "")


def _import_plugin_keys(data: Dict[str, Any]) -> bool:
    present = [key for key in _PLUGIN_KEYS if key in data]
    if not present:
        return False
    block = data.get("offvocal")
    block = dict(block) if isinstance(block, dict) else {}
    data["offvocal"] = block
    for legacy in present:
        value = data.pop(legacy)
        if legacy == "ExecutionMode" and isinstance(value, int) and 0 <= value < len(_PLUGIN_EXECUTION_MODES):
            value = _PLUGIN_EXECUTION_MODES[value]
        block.setdefault(_PLUGIN_KEYS[legacy], value)
    LOGGER.info("Imported plugin configuration keys: %s", ", ".join(present))
    return True


def _apply_migrations(data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        version = int(data.get("version") or 0)
    except (TypeError, ValueError):
        version = 0
    if version < 1:
        _import_plugin_keys(data)
    data["version"] = max(version, SETTINGS_VERSION)
    return data


def _log_unknown_keys(settings: Dict[str, Any], working_dir: Path) -> None:
    unknown = list(SETTINGS_VALIDATOR.unknown_keys(settings))
    if not unknown:
        return
    LOGGER.warning("Unknown settings keys: %s", ", ".join(unknown))
    logs_dir = get_logs_dir(working_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    target = logs_dir / "settings_unknown.json"
    try:
        with open(target, "w", encoding="utf-8") as handle:
            json.dump({"ts": time.time(), "unknown": unknown}, handle, ensure_ascii=False, indent=2)
    except OSError:
        LOGGER.debug("Could not write %s", target, exc_info=True)


def _read_first_document(working_dir: Path) -> Dict[str, Any]:
    for candidate in get_default_settings_paths(working_dir):
        try:
            with open(candidate, "r", encoding="utf-8") as handle:
                loaded = json.load(handle)
        except FileNotFoundError:
            continue
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Ignoring unreadable settings file %s: %s", candidate, exc)
            continue
        if isinstance(loaded, dict):
            return loaded
    return {}


def _normalize(data: Dict[str, Any], working_dir: Path) -> Dict[str, Any]:
    merged = merge_defaults(_apply_migrations(dict(data)))
    merged.setdefault("working_dir", str(working_dir))
    return merged


def load_settings(working_dir: Path) -> Dict[str, Any]:
    """Read ``settings.json``, upgrade it and fill in every default."""

    merged = _normalize(_read_first_document(working_dir), working_dir)
    _log_unknown_keys(merged, working_dir)
    return merged


def save_settings(settings: Dict[str, Any], working_dir: Path) -> None:
    merged = _normalize(settings, working_dir)
    path = working_dir / "settings.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(merged, handle, ensure_ascii=False, indent=2)


def update_settings(working_dir: Path, **values: Any) -> None:
    current = load_settings(working_dir)
    current.update(values)
    save_settings(current, working_dir)
