# scenegroups/core/errors.py
from __future__ import annotations

__all__ = ["SceneGroupError", "GroupDefinitionError", "GroupLoadTimeoutError"]



class SceneGroupError(Exception):
    """Base class for errors raised by scenegroups."""
    pass



class GroupDefinitionError(SceneGroupError):
    """Raised when a group definition asset cannot be read or validated."""
    pass



class GroupLoadTimeoutError(SceneGroupError):
    """
    Raised when a load or unload poll loop does not settle within the
    configured timeout. Nothing is rolled back.
    """
    def __init__(self, *, phase: str, timeoutMs: int, progress: float) -> None:
        super().__init__(
            f"Scene group {phase} did not settle within {timeoutMs} ms (progress {progress:.2f})"
        )
        self.phase = phase
        self.timeoutMs = timeoutMs
        self.progress = progress
