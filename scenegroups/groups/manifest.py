# scenegroups/groups/manifest.py
from __future__ import annotations
from pathlib import Path
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scenegroups.core.errors import GroupDefinitionError
from scenegroups.groups.definition import (
    ResourceGroupDefinition,
    ResourceKind,
    ResourceReference,
    RoleTag,
    coerceRole,
)

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "GroupSceneEntry",
    "GroupManifest",
    "parseGroupManifest",
    "loadGroupManifest",
    "loadGroupDefinition",
]



class GroupSceneEntry(BaseModel):
    """One resource listed in a group definition file."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    kind: ResourceKind = ResourceKind.DIRECT
    role: str

    @field_validator("name", "role")
    @classmethod
    def _stripped(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value



class GroupManifest(BaseModel):
    """Validated group definition file."""
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str | None = None
    description: str | None = None
    scenes: list[GroupSceneEntry] = Field(default_factory=list)

    def toDefinition(self) -> ResourceGroupDefinition:
        pairs = [
            (ResourceReference(entry.name, entry.kind), coerceRole(entry.role))
            for entry in self.scenes
        ]
        try:
            definition = ResourceGroupDefinition.fromPairs(pairs, id=self.id, name=self.name)
        except ValueError as err:
            raise GroupDefinitionError(f"Group '{self.id}': {err}") from err

        activeCount = sum(1 for _ref, role in definition.items() if role == RoleTag.ACTIVE_TARGET)
        if activeCount > 1:
            logger.warning(
                "Group '%s' tags %d scenes as '%s'; the first one wins",
                self.id, activeCount, RoleTag.ACTIVE_TARGET.value,
            )
        return definition



def parseGroupManifest(data: Any, *, source: str = "<memory>") -> GroupManifest:
    try:
        return GroupManifest.model_validate(data)
    except ValidationError as err:
        raise GroupDefinitionError(f"Invalid group definition '{source}': {err}") from err



def loadGroupManifest(path: Path | str) -> GroupManifest:
    filePath = Path(path)
    try:
        raw = json5.loads(filePath.read_text(encoding="utf-8"))
    except FileNotFoundError as err:
        raise GroupDefinitionError(f"Group definition '{filePath}' not found") from err
    except ValueError as err:
        raise GroupDefinitionError(f"Failed to parse '{filePath}': {err}") from err
    return parseGroupManifest(raw, source=str(filePath))



def loadGroupDefinition(path: Path | str) -> ResourceGroupDefinition:
    """Reads a json5 group definition file into a ResourceGroupDefinition."""
    definition = loadGroupManifest(path).toDefinition()
    logger.debug("Loaded group definition %r from '%s'", definition, path)
    return definition
