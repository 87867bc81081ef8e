# tests/scenegroups/groups/test_manifest.py
from __future__ import annotations
import logging
from pathlib import Path

import json5
import pytest

from scenegroups.core.errors import GroupDefinitionError
from scenegroups.groups.definition import ResourceKind, ResourceReference, RoleTag
from scenegroups.groups.manifest import loadGroupDefinition, loadGroupManifest, parseGroupManifest


def write_group(dir_path: Path, payload: dict, fileName: str = "group.json5") -> Path:
    dir_path.mkdir(parents=True, exist_ok=True)
    path = dir_path / fileName
    path.write_text(json5.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def test_load_group_definition_preserves_order_and_kinds(tmp_path):
    path = write_group(tmp_path, {
        "id": "level-01",
        "name": "Level 01",
        "scenes": [
            {"name": "Level01", "kind": "direct", "role": "activeTarget"},
            {"name": "Hud", "kind": "indirect", "role": "hud"},
            {"name": "Rain", "role": "weather"},
        ],
    })

    definition = loadGroupDefinition(path)
    assert definition.id == "level-01"
    assert definition.name == "Level 01"
    assert definition.references() == [
        ResourceReference("Level01"),
        ResourceReference("Hud", ResourceKind.INDIRECT),
        ResourceReference("Rain"),
    ]
    assert definition.findNameByRole(RoleTag.ACTIVE_TARGET) == "Level01"
    assert definition.roleOf(ResourceReference("Rain")) == "weather"


def test_json5_comments_and_trailing_commas_are_accepted(tmp_path):
    path = tmp_path / "menu.json5"
    path.write_text(
        """
        // main menu group
        {
          id: "menu",
          scenes: [
            { name: "MainMenu", role: "activeTarget" },
          ],
        }
        """,
        encoding="utf-8",
    )
    manifest = loadGroupManifest(path)
    assert manifest.id == "menu"
    assert manifest.scenes[0].kind is ResourceKind.DIRECT


def test_missing_file_raises_definition_error(tmp_path):
    with pytest.raises(GroupDefinitionError, match="not found"):
        loadGroupDefinition(tmp_path / "missing.json5")


def test_unparseable_file_raises_definition_error(tmp_path):
    path = tmp_path / "broken.json5"
    path.write_text("{ id: ", encoding="utf-8")
    with pytest.raises(GroupDefinitionError, match="Failed to parse"):
        loadGroupDefinition(path)


@pytest.mark.parametrize("payload", [
    {"scenes": []},
    {"id": "x", "scenes": [{"name": "A", "kind": "teleport", "role": "hud"}]},
    {"id": "x", "scenes": [{"name": "  ", "role": "hud"}]},
    {"id": "x", "scenes": [{"name": "A", "role": "hud", "extra": 1}]},
    {"id": "x", "unknown": True},
])
def test_invalid_manifest_raises_definition_error(payload):
    with pytest.raises(GroupDefinitionError):
        parseGroupManifest(payload)


def test_duplicate_scene_raises_definition_error():
    manifest = parseGroupManifest({
        "id": "dupes",
        "scenes": [
            {"name": "A", "role": "hud"},
            {"name": "A", "role": "environment"},
        ],
    })
    with pytest.raises(GroupDefinitionError, match="listed twice"):
        manifest.toDefinition()


def test_several_active_targets_warn_and_first_wins(caplog):
    manifest = parseGroupManifest({
        "id": "two-active",
        "scenes": [
            {"name": "A", "role": "activeTarget"},
            {"name": "B", "role": "activeTarget"},
        ],
    })
    with caplog.at_level(logging.WARNING, logger="scenegroups.groups.manifest"):
        definition = manifest.toDefinition()
    assert definition.findNameByRole(RoleTag.ACTIVE_TARGET) == "A"
    assert "first one wins" in caplog.text
