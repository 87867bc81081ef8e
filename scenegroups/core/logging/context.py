# scenegroups/core/logging/context.py
from __future__ import annotations
import contextvars

# Per-task log context. The orchestrator enriches it with groupId/phase.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("scenegroups.logctx", default=None)

def setLogContext(**kvs) -> contextvars.Token:
    """
    Set or update per-log context values (groupId, phase, ...).

    Returns a token that can be handed to resetLogContext() to restore
    the previous context.
    """
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    return _logContextVar.set(current)

def resetLogContext(token: contextvars.Token) -> None:
    _logContextVar.reset(token)

def clearLogContext():
    _logContextVar.set(None)

def getLogContext() -> dict[str, object] | None:
    return _logContextVar.get()
