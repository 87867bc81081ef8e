# scenegroups/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, resetLogContext, clearLogContext, getLogContext
from .filters import RecurringSuppressFilter
from .formatters import DevFormatter, JsonFormatter
from .setup import configureLogging, getLogger

__all__ = [
    "configureLogging",
    "getLogger",
    "setLogContext",
    "resetLogContext",
    "clearLogContext",
    "getLogContext",
    "RecurringSuppressFilter",
    "DevFormatter",
    "JsonFormatter",
]
