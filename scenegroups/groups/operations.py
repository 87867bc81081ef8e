# scenegroups/groups/operations.py
from __future__ import annotations
from collections.abc import Iterator
from typing import Protocol

from scenegroups.groups.runtimes import IndirectLoadHandle, LoadOperationHandle

__all__ = ["ProgressSource", "DirectOperationGroup", "IndirectHandleGroup", "CombinedProgress"]



class ProgressSource(Protocol):
    """What the orchestrator's poll loop needs from a group of operations."""
    @property
    def progress(self) -> float: ...

    @property
    def isDone(self) -> bool: ...



class DirectOperationGroup:
    """
    Direct load/unload operations tracked as one unit.

    progress is 0 when empty, isDone is True when empty. Callers rely on
    "nothing to wait for" meaning already done.
    """
    __slots__ = ("operations", "capacityHint")

    def __init__(self, capacityHint: int = 0) -> None:
        # Python lists grow on their own; the hint is informational only
        self.capacityHint = max(0, int(capacityHint))
        self.operations: list[LoadOperationHandle] = []

    def add(self, operation: LoadOperationHandle) -> None:
        self.operations.append(operation)

    @property
    def progress(self) -> float:
        if not self.operations:
            return 0.0
        return sum(op.progress for op in self.operations) / len(self.operations)

    @property
    def isDone(self) -> bool:
        return all(op.isDone for op in self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[LoadOperationHandle]:
        return iter(self.operations)



class IndirectHandleGroup:
    """
    Indirect load handles. The orchestrator keeps one of these alive
    across load calls as its registry of handles awaiting release.
    """
    __slots__ = ("handles", "capacityHint")

    def __init__(self, capacityHint: int = 0) -> None:
        self.capacityHint = max(0, int(capacityHint))
        self.handles: list[IndirectLoadHandle] = []

    def add(self, handle: IndirectLoadHandle) -> None:
        self.handles.append(handle)

    @property
    def progress(self) -> float:
        if not self.handles:
            return 0.0
        return sum(handle.progress for handle in self.handles) / len(self.handles)

    @property
    def isDone(self) -> bool:
        return len(self.handles) == 0 or all(handle.isDone for handle in self.handles)

    def containsResolved(self, name: str) -> bool:
        """True if a completed handle resolved to `name`."""
        return any(handle.isDone and handle.resolvedName == name for handle in self.handles)

    def clear(self) -> None:
        self.handles.clear()

    def __len__(self) -> int:
        return len(self.handles)

    def __iter__(self) -> Iterator[IndirectLoadHandle]:
        return iter(self.handles)



class CombinedProgress:
    """
    Direct and indirect groups viewed as one ProgressSource.

    progress is always (direct + indirect) / 2, even when one side is
    empty and contributes 0. Progress bars downstream are tuned against
    this, so it is not weighted by group size.
    """
    __slots__ = ("direct", "indirect")

    def __init__(self, direct: ProgressSource, indirect: ProgressSource) -> None:
        self.direct = direct
        self.indirect = indirect

    @property
    def progress(self) -> float:
        return (self.direct.progress + self.indirect.progress) / 2

    @property
    def isDone(self) -> bool:
        return self.direct.isDone and self.indirect.isDone
