# modregistry/app/settings.py
from __future__ import annotations
import json5, os
from pydantic import JsonValue
from pathlib import Path
from typing import Any, cast
from functools import lru_cache

from modregistry.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_DEFAULT_PATH", "SETTINGS_ENV_VAR", "SETTINGS", "userSettingsPath",
    "loadUserSettings", "loadSettings", "reloadSettings", "deepMerge",
    "settings", "settingsBool",
]



SETTINGS_DEFAULT_PATH = Path(__file__).resolve().parent / "settings_default.json5"
SETTINGS_ENV_VAR = "MODREGISTRY_SETTINGS"
SETTINGS: JsonValue = (
    json5.loads(SETTINGS_DEFAULT_PATH.read_text(encoding="utf-8"))
    if SETTINGS_DEFAULT_PATH.exists()
    else {
        "__source": "MODREGISTRY_DEFAULTS",
        "mods": {
            "modsRoot": None,
            "fallbackRoot": None,
            "manifestGlob": "*.json",
            "createModsRoot": True,
        },
        "logging": {
            "devMode": True,
            "file": {"enabled": False, "path": "modregistry.log", "maxBytes": 10 * 1024 * 1024, "backupCount": 5},
        },
    }
)



def userSettingsPath() -> Path:
    """$MODREGISTRY_SETTINGS when set, otherwise ~/.modregistry/settings.json5."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~/.modregistry/settings.json5"))



def loadUserSettings() -> JsonValue:
    filePath = userSettingsPath()
    if filePath.exists():
        try:
            data = json5.loads(filePath.read_text(encoding="utf-8"))
        except Exception as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring '%s': top level must be an object, got %s", filePath, type(data).__name__)
            return {}
        return cast(JsonValue, data)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(SETTINGS, loadUserSettings())



def reloadSettings() -> JsonValue:
    """Drops the cached merge so the user file is read again."""
    loadSettings.cache_clear()
    return loadSettings()



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = dict(first)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], cast(JsonValue, value))
            else:
                out[key] = cast(JsonValue, value)
        return cast(JsonValue, out)
    return cast(JsonValue, second)

# ---------- Ergonomic accessors over merged settings ----------

def settings(path: str, default: Any = None) -> Any:
    """Returns value at `path` from merged settings, or `default` if missing or null."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False) -> bool:
    """Returns bool value at `path` or `default` if missing."""
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val)
