# scenegroups/core/logging/formatters.py
from __future__ import annotations

import json
import logging

from .context import getLogContext

__all__ = ["JsonFormatter", "DevFormatter"]



class JsonFormatter(logging.Formatter):
    """One-line JSON records for log files."""
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": int(record.created * 1000),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            "ctx": getLogContext() or {},
            "proc": {"pid": record.process, "name": record.processName},
        }

        if record.exc_info:
            excType, excValue, _tb = record.exc_info
            base["exc"] = {
                "type": getattr(excType, "__name__", "Error"),
                "message": str(excValue),
                "stack": self.formatException(record.exc_info),
            }

        # default=str keeps non-JSON values (enums, paths) from breaking a record
        return json.dumps(base, ensure_ascii=False, separators=(",", ":"), default=str)



class DevFormatter(logging.Formatter):
    """Human-friendly console formatter (dev mode)."""
    def format(self, record: logging.LogRecord) -> str:
        ctx = getLogContext()
        ctxStr = ""
        if ctx:
            md = [str(ctx[key]) for key in ("groupId", "phase") if ctx.get(key)]
            if md:
                ctxStr = " [" + "/".join(md) + "]"
        msg = record.getMessage()
        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            msg += "\n" + str(record.stack_info)
        return f"{record.levelname}: [{record.name}] {msg}{ctxStr}"
