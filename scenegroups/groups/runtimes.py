# scenegroups/groups/runtimes.py
from __future__ import annotations
from enum import Enum
from typing import Any, Protocol, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from scenegroups.groups.definition import ResourceReference

__all__ = [
    "LoadMode",
    "LoadOperationHandle",
    "IndirectLoadHandle",
    "DirectLoadingRuntime",
    "IndirectResolutionRuntime",
    "LoadedResources",
]



class LoadMode(str, Enum):
    """How a load request combines with what is already loaded."""
    ADDITIVE = "additive"
    SINGLE = "single"



@runtime_checkable
class LoadOperationHandle(Protocol):
    """In-flight direct load or unload. Owned by the direct runtime."""
    @property
    def progress(self) -> float: ...

    @property
    def isDone(self) -> bool: ...



@runtime_checkable
class IndirectLoadHandle(Protocol):
    """
    In-flight indirect load. Must be handed back to the indirect runtime
    via release(); dropping the reference does not free the resource.
    """
    @property
    def progress(self) -> float: ...

    @property
    def isDone(self) -> bool: ...

    @property
    def resolvedName(self) -> str | None:
        """Name of the loaded resource. Only meaningful once isDone is true."""
        ...



class DirectLoadingRuntime(Protocol):
    def issueLoad(self, name: str, mode: LoadMode) -> LoadOperationHandle | None: ...

    def issueUnload(self, name: str) -> LoadOperationHandle | None: ...

    def reclaimUnused(self) -> Any:
        """Best-effort release of unused resources. May return an awaitable."""
        ...



class IndirectResolutionRuntime(Protocol):
    def issueLoad(self, reference: ResourceReference, mode: LoadMode) -> IndirectLoadHandle: ...

    def release(self, handle: IndirectLoadHandle) -> None: ...



class LoadedResources(Protocol):
    """Enumeration of the resources the host currently has loaded."""
    def count(self) -> int: ...

    def at(self, index: int) -> tuple[str, bool]:
        """Returns (name, isLoaded) for the resource at `index`."""
        ...

    def activeName(self) -> str | None: ...

    def setActive(self, name: str) -> None: ...
