# scenegroups/groups/definition.py
from __future__ import annotations
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "ResourceKind",
    "RoleTag",
    "Role",
    "ResourceReference",
    "ResourceGroupDefinition",
    "coerceRole",
]



class ResourceKind(str, Enum):
    """Which loading path a resource goes through."""
    DIRECT = "direct"       # Native loader, plain progress/done handle
    INDIRECT = "indirect"   # Resolved through a reference; handle must be released



class RoleTag(str, Enum):
    """
    Role a resource plays inside a group. Only ACTIVE_TARGET means anything
    to the orchestrator; the rest are labels for tooling and subscribers.
    """
    ACTIVE_TARGET = "activeTarget"
    MAIN_MENU = "mainMenu"
    USER_INTERFACE = "userInterface"
    HUD = "hud"
    CINEMATIC = "cinematic"
    ENVIRONMENT = "environment"
    TOOLING = "tooling"


# Roles are an open set: unknown descriptive roles stay plain strings.
Role = RoleTag | str



def coerceRole(value: Role) -> Role:
    if isinstance(value, RoleTag):
        return value
    try:
        return RoleTag(value)
    except ValueError:
        return str(value)



@dataclass(frozen=True, slots=True)
class ResourceReference:
    """A loadable unit addressed by name."""
    name: str
    kind: ResourceKind = ResourceKind.DIRECT

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("ResourceReference name must be a non-empty string")
        object.__setattr__(self, "kind", ResourceKind(self.kind))

    @property
    def isIndirect(self) -> bool:
        return self.kind is ResourceKind.INDIRECT



class ResourceGroupDefinition:
    """
    Ordered, read-only mapping of ResourceReference -> role.

    Keys are unique. At most one entry is expected to carry
    RoleTag.ACTIVE_TARGET; if several do, the first in definition order wins.
    """
    def __init__(
        self,
        scenes: Mapping[ResourceReference, Role] | None = None,
        *,
        id: str | None = None,
        name: str | None = None,
    ) -> None:
        self.id = id
        self.name = name or id
        self._scenes: dict[ResourceReference, Role] = {
            ref: coerceRole(role) for ref, role in (scenes or {}).items()
        }

    @classmethod
    def fromPairs(
        cls,
        pairs: Iterable[tuple[ResourceReference, Role]],
        *,
        id: str | None = None,
        name: str | None = None,
    ) -> ResourceGroupDefinition:
        scenes: dict[ResourceReference, Role] = {}
        for ref, role in pairs:
            if ref in scenes:
                raise ValueError(f"Resource '{ref.name}' ({ref.kind.value}) is listed twice")
            scenes[ref] = role
        return cls(scenes, id=id, name=name)

    def findByRole(self, role: Role) -> ResourceReference | None:
        """First reference whose role equals `role`, or None."""
        wanted = coerceRole(role)
        for ref, entryRole in self._scenes.items():
            if entryRole == wanted:
                return ref
        return None

    def findNameByRole(self, role: Role) -> str | None:
        ref = self.findByRole(role)
        return ref.name if ref is not None else None

    def roleOf(self, ref: ResourceReference) -> Role | None:
        return self._scenes.get(ref)

    def items(self) -> Iterator[tuple[ResourceReference, Role]]:
        return iter(list(self._scenes.items()))

    def references(self) -> list[ResourceReference]:
        return list(self._scenes.keys())

    def __contains__(self, ref: object) -> bool:
        return ref in self._scenes

    def __iter__(self) -> Iterator[ResourceReference]:
        return iter(list(self._scenes))

    def __len__(self) -> int:
        return len(self._scenes)

    def __repr__(self) -> str:
        label = self.id or "<anonymous>"
        return f"ResourceGroupDefinition({label!r}, scenes={len(self._scenes)})"
