# scenegroups/app/settings.py
from __future__ import annotations
import json5, os
from pydantic import JsonValue
from pathlib import Path
from typing import Any, cast
from functools import lru_cache

from scenegroups.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "PACKAGE_DIR", "SETTINGS_DEFAULT_PATH", "SETTINGS", "USER_SETTINGS_PATH",
    "loadUserSettings", "loadSettings", "deepMerge",
    "settings", "settingsBool", "settingsInt", "settingsFloat",
]


PACKAGE_DIR = Path(__file__).resolve().parents[1]
SETTINGS_DEFAULT_PATH = PACKAGE_DIR / "settings_default.json5"
USER_SETTINGS_PATH = Path(os.path.expanduser("~/.scenegroups/settings.json5"))
SETTINGS: JsonValue = (
    json5.loads(SETTINGS_DEFAULT_PATH.read_text(encoding="utf-8"))
    if SETTINGS_DEFAULT_PATH.exists()
    else {
        "__source": "PACKAGE_DEFAULTS",
        "sceneGroups": {
            "persistentName": "Boot",
            "releaseFreedResources": False,
            "pollIntervalMs": 100,
            "loadTimeoutMs": 0,
        },
        "loader": {"smoothProgressSpeed": 0.5, "logMessages": False},
        "logging": {"file": None},
        "debug": {
            "devModeEnabled": True,
            "suppressRecurringMessages": {"enabled": False, "windowSeconds": 60, "maxPerWindow": 5, "summaryLevel": "INFO"},
        },
    }
)



def loadUserSettings(filePath: Path | None = None) -> JsonValue:
    filePath = filePath or USER_SETTINGS_PATH
    if filePath.exists():
        try:
            return json5.loads(filePath.read_text(encoding="utf-8"))
        except Exception as err:
            logger.error("Failed to parse '%s': %s", filePath, err)
    return {}



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(SETTINGS, loadUserSettings())



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
    """Returns value at `path` from merged settings, or `default` if missing."""
    val = getByPath(loadSettings(), path)
    return default if val is None else val



def settingsBool(path: str, default: bool = False) -> bool:
    val = getByPath(loadSettings(), path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)



def settingsInt(path: str, default: int = 0) -> int:
    val = getByPath(loadSettings(), path)
    try:
        return default if val is None else int(val)
    except (TypeError, ValueError):
        logger.warning("Setting '%s' is not an integer (%r), using %d", path, val, default)
        return default



def settingsFloat(path: str, default: float = 0.0) -> float:
    val = getByPath(loadSettings(), path)
    try:
        return default if val is None else float(val)
    except (TypeError, ValueError):
        logger.warning("Setting '%s' is not a number (%r), using %s", path, val, default)
        return default
