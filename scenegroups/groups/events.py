# scenegroups/groups/events.py
from __future__ import annotations
from collections.abc import Callable
from typing import Any

from scenegroups.groups.definition import ResourceKind

import logging
logger = logging.getLogger(__name__)

__all__ = ["EventHook", "GroupLifecycleListener"]



class EventHook:
    """
    Ordered list of callbacks fired synchronously by emit().

    A subscriber that raises is logged and skipped; the remaining
    subscribers still run.
    """
    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: list[Callable[..., Any]] = []

    def subscribe(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        """Adds `callback` and returns it, so it works as a decorator too."""
        if not callable(callback):
            raise TypeError(f"Subscriber for '{self.name}' must be callable")
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[..., Any]) -> bool:
        try:
            self._subscribers.remove(callback)
            return True
        except ValueError:
            return False

    def emit(self, *args: Any) -> None:
        for callback in list(self._subscribers):
            try:
                callback(*args)
            except Exception:
                logger.exception("Subscriber %r of '%s' raised an exception.", callback, self.name)

    def clear(self) -> None:
        self._subscribers.clear()

    def __len__(self) -> int:
        return len(self._subscribers)



class GroupLifecycleListener:
    """
    Optional hook interface for systems that want to observe group loads.

    Implementations may override any subset of methods. All methods have
    safe no-op defaults.
    """

    def onResourceLoaded(self, name: str, kind: ResourceKind) -> None:
        """
        Called when a load is dispatched for a resource. The resource may
        not be usable yet.
        """
        return

    def onResourceUnloaded(self, name: str) -> None:
        """
        Called when an unload is requested for a resource.
        """
        return

    def onGroupLoaded(self) -> None:
        """
        Called once per loadGroup() after every operation settled and the
        active resource was selected.
        """
        return
