# scenegroups/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from pathlib import Path

from scenegroups.app.settings import settings, settingsBool, settingsInt
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

__all__ = [
    "NO_PROPAGATE",
    "configureLogging",
    "getLogger",
]



# Disable propagation from noisy libraries
NO_PROPAGATE = ["asyncio", "concurrent.futures"]



def configureLogging(*, devMode: bool | None = None, logFile: str | Path | None = None) -> logging.Logger:
    """
    Initiate the global logging configuration.

    Dev:
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG) when a log file is configured

    Prod:
      - Console INFO
      - JSON file log INFO with rotation
      - Optional recurring suppression (toggle)
    """
    if devMode is None:
        devMode = settingsBool("debug.devModeEnabled", True)
    if logFile is None:
        logFile = settings("logging.file", None)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    handlers: list[logging.Handler] = []

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers.append(consoleHandler)

    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    # Optional recurring suppression (disabled by default)
    if settingsBool("debug.suppressRecurringMessages.enabled", False):
        # Resolve summaryLevel string like "INFO" → logging.INFO, fallback safe
        levelName = str(settings("debug.suppressRecurringMessages.summaryLevel", "INFO")).upper()
        summaryLevel = getattr(logging, levelName, logging.INFO)

        suppressFilter = RecurringSuppressFilter(
            windowSeconds=settingsInt("debug.suppressRecurringMessages.windowSeconds", 60),
            maxPerWindow=settingsInt("debug.suppressRecurringMessages.maxPerWindow", 5),
            summaryLevel=summaryLevel,
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)

    return root



def getLogger(name: str, side: str = "") -> logging.Logger:
    return logging.getLogger(f"{str(side).strip()}.{str(name).strip()}" if str(side).strip() else str(name).strip())
