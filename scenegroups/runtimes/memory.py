# scenegroups/runtimes/memory.py
from __future__ import annotations
import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

from scenegroups.groups.definition import ResourceKind, ResourceReference
from scenegroups.groups.runtimes import LoadMode

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "MemoryOperation",
    "MemoryIndirectHandle",
    "MemoryDirectRuntime",
    "MemoryIndirectRuntime",
    "MemoryResourceRuntime",
    "MemoryClock",
]



@dataclass
class _Entry:
    name: str
    isLoaded: bool



class MemoryOperation:
    """Step-driven operation: done after `stepsTotal` calls to step()."""
    def __init__(self, name: str, action: str, stepsTotal: int, mode: LoadMode = LoadMode.ADDITIVE) -> None:
        self.name = name
        self.action = action     # "load" | "unload"
        self.mode = mode
        self.stepsTotal = max(0, int(stepsTotal))
        self.stepsDone = 0

    @property
    def progress(self) -> float:
        if self.stepsTotal == 0:
            return 1.0
        return min(1.0, self.stepsDone / self.stepsTotal)

    @property
    def isDone(self) -> bool:
        return self.stepsDone >= self.stepsTotal

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.action} {self.name!r} {self.stepsDone}/{self.stepsTotal}>"



class MemoryIndirectHandle(MemoryOperation):
    def __init__(self, reference: ResourceReference, stepsTotal: int, mode: LoadMode = LoadMode.ADDITIVE) -> None:
        super().__init__(reference.name, "load", stepsTotal, mode)
        self.reference = reference
        self.released = False

    @property
    def resolvedName(self) -> str | None:
        return self.name if self.isDone else None



class MemoryDirectRuntime:
    """Direct-loading side of a MemoryResourceRuntime."""
    def __init__(self, owner: MemoryResourceRuntime) -> None:
        self._owner = owner

    def issueLoad(self, name: str, mode: LoadMode = LoadMode.ADDITIVE) -> MemoryOperation | None:
        return self._owner._issueLoad(name, ResourceKind.DIRECT, mode)

    def issueUnload(self, name: str) -> MemoryOperation | None:
        return self._owner._issueUnload(name)

    async def reclaimUnused(self) -> None:
        self._owner.reclaimCount += 1
        await asyncio.sleep(0)



class MemoryIndirectRuntime:
    """Indirect-resolution side of a MemoryResourceRuntime."""
    def __init__(self, owner: MemoryResourceRuntime) -> None:
        self._owner = owner

    def issueLoad(self, reference: ResourceReference, mode: LoadMode = LoadMode.ADDITIVE) -> MemoryIndirectHandle:
        handle = self._owner._issueLoad(reference.name, ResourceKind.INDIRECT, mode, reference=reference)
        assert isinstance(handle, MemoryIndirectHandle)
        return handle

    def release(self, handle: MemoryIndirectHandle) -> None:
        self._owner._release(handle)



class MemoryResourceRuntime:
    """
    Deterministic in-process stand-in for a host's resource runtimes.

    One object holds the loaded-resource list (and implements the
    LoadedResources enumeration); `direct` and `indirect` expose the two
    loading paths. Nothing advances on its own: each step() moves every
    in-flight operation one step forward.
    """
    def __init__(
        self,
        loaded: Iterable[str] = ("Boot",),
        *,
        activeName: str | None = None,
        stepsPerOperation: int = 3,
        available: Iterable[str] | None = None,
    ) -> None:
        self._entries: list[_Entry] = [_Entry(name, True) for name in loaded]
        self._active: str | None = activeName if activeName is not None else (
            self._entries[0].name if self._entries else None
        )
        self.stepsPerOperation = max(0, int(stepsPerOperation))
        # Names the direct path can load; None = any name
        self.available: set[str] | None = set(available) if available is not None else None

        self._pending: list[MemoryOperation] = []
        self._stalled: set[str] = set()

        self.issuedLoads: list[tuple[str, ResourceKind]] = []
        self.issuedUnloads: list[str] = []
        self.releasedHandles: list[MemoryIndirectHandle] = []
        self.reclaimCount = 0
        self.stepCount = 0

        self.direct = MemoryDirectRuntime(self)
        self.indirect = MemoryIndirectRuntime(self)

    # ----- LoadedResources -----

    def count(self) -> int:
        return len(self._entries)

    def at(self, index: int) -> tuple[str, bool]:
        entry = self._entries[index]
        return entry.name, entry.isLoaded

    def activeName(self) -> str | None:
        return self._active

    def setActive(self, name: str) -> None:
        if not any(entry.name == name and entry.isLoaded for entry in self._entries):
            raise KeyError(f"Resource '{name}' is not loaded")
        self._active = name

    # ----- Inspection -----

    def names(self, *, onlyLoaded: bool = True) -> list[str]:
        return [entry.name for entry in self._entries if entry.isLoaded or not onlyLoaded]

    @property
    def pending(self) -> list[MemoryOperation]:
        return list(self._pending)

    def stall(self, name: str) -> None:
        """Operations on `name` stop advancing until unstall()."""
        self._stalled.add(name)

    def unstall(self, name: str) -> None:
        self._stalled.discard(name)

    # ----- Driving -----

    def step(self) -> None:
        self.stepCount += 1
        for operation in list(self._pending):
            if operation.name in self._stalled:
                continue
            operation.stepsDone += 1
            if operation.isDone:
                self._complete(operation)

    def runUntilIdle(self, maxSteps: int = 10_000) -> None:
        for _ in range(maxSteps):
            if not self._pending:
                return
            self.step()
        raise RuntimeError(f"Operations still pending after {maxSteps} steps: {self._pending}")

    # ----- Internals -----

    def _issueLoad(
        self,
        name: str,
        kind: ResourceKind,
        mode: LoadMode,
        *,
        reference: ResourceReference | None = None,
    ) -> MemoryOperation | None:
        if kind is ResourceKind.DIRECT and self.available is not None and name not in self.available:
            logger.debug("No such resource '%s'", name)
            return None

        self.issuedLoads.append((name, kind))
        if kind is ResourceKind.INDIRECT:
            operation: MemoryOperation = MemoryIndirectHandle(
                reference or ResourceReference(name, kind), self.stepsPerOperation, mode
            )
        else:
            operation = MemoryOperation(name, "load", self.stepsPerOperation, mode)

        self._entries.append(_Entry(name, False))
        self._track(operation)
        return operation

    def _issueUnload(self, name: str) -> MemoryOperation | None:
        if not any(entry.name == name and entry.isLoaded for entry in self._entries):
            return None
        self.issuedUnloads.append(name)
        operation = MemoryOperation(name, "unload", self.stepsPerOperation)
        self._track(operation)
        return operation

    def _release(self, handle: MemoryIndirectHandle) -> None:
        if handle.released:
            return
        handle.released = True
        self.releasedHandles.append(handle)
        if handle in self._pending:
            self._pending.remove(handle)
        self._dropEntry(handle.name, loadedOnly=handle.isDone)

    def _track(self, operation: MemoryOperation) -> None:
        if operation.isDone:
            self._complete(operation)
        else:
            self._pending.append(operation)

    def _complete(self, operation: MemoryOperation) -> None:
        if operation in self._pending:
            self._pending.remove(operation)

        if operation.action == "unload":
            self._dropEntry(operation.name, loadedOnly=True)
            return

        for entry in self._entries:
            if entry.name == operation.name and not entry.isLoaded:
                entry.isLoaded = True
                break

        if operation.mode is LoadMode.SINGLE:
            self._entries = [entry for entry in self._entries if entry.name == operation.name or not entry.isLoaded]
            self._active = operation.name

    def _dropEntry(self, name: str, *, loadedOnly: bool) -> None:
        for index, entry in enumerate(self._entries):
            if entry.name == name and (entry.isLoaded or not loadedOnly):
                del self._entries[index]
                break
        if self._active == name and not any(entry.name == name for entry in self._entries):
            self._active = None



class MemoryClock:
    """
    Virtual clock for a MemoryResourceRuntime: sleeping advances virtual
    time and steps the runtime once.
    """
    def __init__(self, runtime: MemoryResourceRuntime | None = None) -> None:
        self.runtime = runtime
        self.elapsedMs = 0
        self.sleepCalls: list[float] = []

    def nowMs(self) -> int:
        return self.elapsedMs

    async def sleep(self, seconds: float) -> None:
        self.sleepCalls.append(seconds)
        self.elapsedMs += int(round(seconds * 1000))
        if self.runtime is not None:
            self.runtime.step()
        await asyncio.sleep(0)
