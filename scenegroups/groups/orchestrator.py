# scenegroups/groups/orchestrator.py
from __future__ import annotations
import inspect
from typing import Protocol

from scenegroups.app.settings import settings, settingsBool, settingsInt
from scenegroups.core.errors import GroupLoadTimeoutError
from scenegroups.core.logging import setLogContext, resetLogContext
from scenegroups.core.time import AsyncioClock, Clock
from scenegroups.groups.definition import ResourceGroupDefinition, ResourceKind, RoleTag
from scenegroups.groups.events import EventHook, GroupLifecycleListener
from scenegroups.groups.operations import (
    CombinedProgress,
    DirectOperationGroup,
    IndirectHandleGroup,
    ProgressSource,
)
from scenegroups.groups.runtimes import (
    DirectLoadingRuntime,
    IndirectResolutionRuntime,
    LoadedResources,
    LoadMode,
)

import logging
logger = logging.getLogger(__name__)

__all__ = ["ProgressReporter", "GroupOrchestrator"]



class ProgressReporter(Protocol):
    def report(self, value: float) -> None: ...



class GroupOrchestrator:
    """
    Swaps the loaded set of resources from one group definition to the next.

    loadGroup() always unloads first: everything loaded except the active
    resource and the persistent (boot) resource goes away, then the new
    group is dispatched and polled until it settles, and finally the
    group's activeTarget becomes the active resource.

    Indirect handles are kept in `indirectHandles` across calls because
    they have to be released explicitly. The next unloadGroup() releases
    them and clears the registry.

    Precondition: one loadGroup()/unloadGroup() at a time per instance.
    Overlapping calls are not guarded against.
    """
    def __init__(
        self,
        *,
        directRuntime: DirectLoadingRuntime,
        indirectRuntime: IndirectResolutionRuntime,
        loadedResources: LoadedResources,
        clock: Clock | None = None,
        persistentName: str | None = None,
        releaseFreedResources: bool | None = None,
        pollIntervalMs: int | None = None,
        timeoutMs: int | None = None,
    ) -> None:
        self.directRuntime = directRuntime
        self.indirectRuntime = indirectRuntime
        self.loadedResources = loadedResources
        self.clock: Clock = clock or AsyncioClock()

        self.persistentName: str = (
            persistentName if persistentName is not None
            else str(settings("sceneGroups.persistentName", "Boot"))
        )
        self.releaseFreedResources: bool = (
            releaseFreedResources if releaseFreedResources is not None
            else settingsBool("sceneGroups.releaseFreedResources", False)
        )
        self.pollIntervalMs: int = (
            pollIntervalMs if pollIntervalMs is not None
            else settingsInt("sceneGroups.pollIntervalMs", 100)
        )
        # 0 = wait forever
        self.timeoutMs: int = (
            timeoutMs if timeoutMs is not None
            else settingsInt("sceneGroups.loadTimeoutMs", 0)
        )
        if self.pollIntervalMs < 0:
            raise ValueError("pollIntervalMs must be >= 0")
        if self.timeoutMs < 0:
            raise ValueError("timeoutMs must be >= 0")

        self.activeDefinition: ResourceGroupDefinition | None = None
        self.indirectHandles = IndirectHandleGroup(10)

        self.onResourceLoaded = EventHook("onResourceLoaded")
        self.onResourceUnloaded = EventHook("onResourceUnloaded")
        self.onGroupLoaded = EventHook("onGroupLoaded")

    # ----- Listeners -----

    def addListener(self, listener: GroupLifecycleListener) -> None:
        self.onResourceLoaded.subscribe(listener.onResourceLoaded)
        self.onResourceUnloaded.subscribe(listener.onResourceUnloaded)
        self.onGroupLoaded.subscribe(listener.onGroupLoaded)

    def removeListener(self, listener: GroupLifecycleListener) -> None:
        self.onResourceLoaded.unsubscribe(listener.onResourceLoaded)
        self.onResourceUnloaded.unsubscribe(listener.onResourceUnloaded)
        self.onGroupLoaded.unsubscribe(listener.onGroupLoaded)

    # ----- Enumeration helpers -----

    def loadedNames(self, *, onlyLoaded: bool = False) -> list[str]:
        names: list[str] = []
        for index in range(self.loadedResources.count()):
            name, isLoaded = self.loadedResources.at(index)
            if onlyLoaded and not isLoaded:
                continue
            names.append(name)
        return names

    def isLoaded(self, name: str) -> bool:
        return name in self.loadedNames(onlyLoaded=True)

    # ----- Load / unload -----

    async def loadGroup(
        self,
        definition: ResourceGroupDefinition | None,
        progress: ProgressReporter | None = None,
        reloadDuplicates: bool = False,
    ) -> None:
        """
        Unloads the current group, then loads `definition`.

        With nothing to load this returns immediately without touching
        the loaded resources or firing any event.
        """
        if definition is None or len(definition) == 0:
            logger.debug("No group definition to load, nothing to do")
            return

        self.activeDefinition = definition
        token = setLogContext(groupId=definition.id or definition.name, phase="load")
        try:
            startMs = self.clock.nowMs()
            logger.info("Loading scene group %r", definition)

            await self.unloadGroup()

            # Survivors of the unload: active + persistent resources
            loadedNames = set(self.loadedNames())

            operations = DirectOperationGroup(1)
            for ref, _role in definition.items():
                if not reloadDuplicates and ref.name in loadedNames:
                    logger.debug("Skipping '%s', already loaded", ref.name)
                    continue

                if ref.kind is ResourceKind.DIRECT:
                    operation = self.directRuntime.issueLoad(ref.name, LoadMode.ADDITIVE)
                    if operation is not None:
                        operations.add(operation)
                else:
                    self.indirectHandles.add(self.indirectRuntime.issueLoad(ref, LoadMode.ADDITIVE))

                logger.debug("Dispatched load for '%s' [%s]", ref.name, ref.kind.value)
                self.onResourceLoaded.emit(ref.name, ref.kind)

            await self._waitUntilDone(
                CombinedProgress(operations, self.indirectHandles),
                phase="load",
                progress=progress,
            )

            self._selectActive(definition)

            logger.info(
                "Scene group %r loaded in %d ms",
                definition, self.clock.nowMs() - startMs,
            )
            self.onGroupLoaded.emit()
        finally:
            resetLogContext(token)

    async def unloadGroup(self) -> None:
        """
        Unloads every loaded resource except the active one and the
        persistent one, and releases all indirect handles.
        """
        token = setLogContext(phase="unload")
        try:
            names = self._collectUnloadable()

            operations = DirectOperationGroup(len(names))
            for name in names:
                operation = self.directRuntime.issueUnload(name)
                if operation is None:
                    logger.debug("'%s' is already gone, skipping", name)
                    continue
                operations.add(operation)
                logger.debug("Dispatched unload for '%s'", name)
                self.onResourceUnloaded.emit(name)

            # Indirect unloads are fire-and-forget
            released = len(self.indirectHandles)
            for handle in self.indirectHandles:
                self.indirectRuntime.release(handle)
            self.indirectHandles.clear()
            if released:
                logger.debug("Released %d indirect handle(s)", released)

            await self._waitUntilDone(operations, phase="unload")

            if self.releaseFreedResources:
                await self._reclaimUnused()
        finally:
            resetLogContext(token)

    # ----- Internals -----

    def _collectUnloadable(self) -> list[str]:
        activeName = self.loadedResources.activeName()
        names: list[str] = []
        # Newest first
        for index in range(self.loadedResources.count() - 1, -1, -1):
            name, isLoaded = self.loadedResources.at(index)
            if not isLoaded:
                continue
            if name == activeName or name == self.persistentName:
                continue
            # Indirect resources also show up here; they go through release()
            if self.indirectHandles.containsResolved(name):
                continue
            names.append(name)
        return names

    async def _waitUntilDone(
        self,
        source: ProgressSource,
        *,
        phase: str,
        progress: ProgressReporter | None = None,
    ) -> None:
        startMs = self.clock.nowMs()
        while not source.isDone:
            value = source.progress
            if progress is not None:
                progress.report(value)
            logger.debug("Waiting for %s, progress %.2f", phase, value)

            if self.timeoutMs and self.clock.nowMs() - startMs >= self.timeoutMs:
                raise GroupLoadTimeoutError(phase=phase, timeoutMs=self.timeoutMs, progress=value)

            await self.clock.sleep(self.pollIntervalMs / 1000)

    def _selectActive(self, definition: ResourceGroupDefinition) -> None:
        targetName = definition.findNameByRole(RoleTag.ACTIVE_TARGET)
        if targetName is None:
            logger.debug("Group %r has no active target, keeping '%s'", definition, self.loadedResources.activeName())
            return
        if not self.isLoaded(targetName):
            logger.warning("Active target '%s' of group %r is not loaded, keeping '%s'",
                           targetName, definition, self.loadedResources.activeName())
            return
        self.loadedResources.setActive(targetName)
        logger.debug("Active resource is now '%s'", targetName)

    async def _reclaimUnused(self) -> None:
        try:
            result = self.directRuntime.reclaimUnused()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Releasing freed resources failed")
