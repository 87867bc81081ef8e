# scenegroups/ui/progress.py
from __future__ import annotations

from scenegroups.app.settings import settingsBool, settingsFloat
from scenegroups.groups.definition import ResourceGroupDefinition, ResourceKind
from scenegroups.groups.events import EventHook
from scenegroups.groups.orchestrator import GroupOrchestrator

import logging
logger = logging.getLogger(__name__)

__all__ = ["LoadingProgress", "ProgressSmoother", "GroupLoader"]



class LoadingProgress:
    """Progress sink for GroupOrchestrator.loadGroup(); re-emits reports."""
    RATIO = 1.0

    def __init__(self) -> None:
        self.onProgressed = EventHook("onProgressed")

    def report(self, value: float) -> None:
        self.onProgressed.emit(value / self.RATIO)



class ProgressSmoother:
    """
    Follows a noisy progress target with exponential damping.

    The approach rate scales with the remaining distance, so the follower
    slows down as it closes in and never overshoots.
    """
    def __init__(self, speedFactor: float = 0.5, value: float = 0.0) -> None:
        if speedFactor <= 0:
            raise ValueError("speedFactor must be > 0")
        self.speedFactor = float(speedFactor)
        self.value = float(value)

    def advance(self, target: float, elapsedSeconds: float, speedFactor: float | None = None) -> float:
        speed = self.speedFactor if speedFactor is None else speedFactor
        effectiveRate = abs(self.value - target) * speed
        self.value += (target - self.value) * min(1.0, max(0.0, elapsedSeconds) * effectiveRate)
        return self.value

    def reset(self, value: float = 0.0) -> None:
        self.value = float(value)



class GroupLoader:
    """
    Per-frame driver around a GroupOrchestrator.

    Remembers the last group it was given, tracks the raw target progress
    of the running load and exposes a smoothed value for progress bars.
    Call update() once per frame.
    """
    def __init__(
        self,
        orchestrator: GroupOrchestrator,
        definition: ResourceGroupDefinition | None = None,
        *,
        logMessages: bool | None = None,
        smoothProgressSpeed: float | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.definition = definition
        self._smoother = ProgressSmoother(
            smoothProgressSpeed if smoothProgressSpeed is not None
            else settingsFloat("loader.smoothProgressSpeed", 0.5)
        )
        self._targetProgress = 0.0
        self._isLoading = False

        if logMessages is None:
            logMessages = settingsBool("loader.logMessages", False)
        if logMessages:
            orchestrator.onResourceLoaded.subscribe(self._logLoaded)
            orchestrator.onResourceUnloaded.subscribe(self._logUnloaded)
            orchestrator.onGroupLoaded.subscribe(self._logGroupLoaded)

    @property
    def isLoading(self) -> bool:
        return self._isLoading

    @property
    def targetProgress(self) -> float:
        return self._targetProgress

    @property
    def smoothProgress(self) -> float:
        return self._smoother.value

    @property
    def smoothProgressSpeed(self) -> float:
        return self._smoother.speedFactor

    @smoothProgressSpeed.setter
    def smoothProgressSpeed(self, value: float) -> None:
        if value <= 0:
            raise ValueError("smoothProgressSpeed must be > 0")
        self._smoother.speedFactor = float(value)

    async def loadGroup(self, definition: ResourceGroupDefinition | None = None) -> None:
        """
        Loads `definition`, or the last configured one when omitted.
        Returns right away when there is nothing configured.
        """
        if definition is not None:
            self.definition = definition

        if self.definition is None:
            return

        self._targetProgress = 0.0
        self._smoother.reset()

        progress = LoadingProgress()
        progress.onProgressed.subscribe(self._raiseTarget)

        self._isLoading = True
        try:
            await self.orchestrator.loadGroup(self.definition, progress)
        finally:
            self._isLoading = False

    def update(self, deltaSeconds: float) -> None:
        if not self._isLoading:
            return
        self._smoother.advance(self._targetProgress, deltaSeconds)

    def _raiseTarget(self, value: float) -> None:
        # Target only moves forward
        self._targetProgress = max(value, self._targetProgress)

    def _logLoaded(self, name: str, kind: ResourceKind) -> None:
        logger.info("Loaded: %s [%s]", name, kind.value)

    def _logUnloaded(self, name: str) -> None:
        logger.info("Unloaded: %s", name)

    def _logGroupLoaded(self) -> None:
        logger.info("Scene group loaded")
