# tests/scenegroups/core/test_dictpath.py
from __future__ import annotations
from types import SimpleNamespace

import pytest

from scenegroups.core.dictpath import getByPath, hasPath, splitPath


def test_split_path_handles_escapes():
    assert splitPath("a.b.c") == ["a", "b", "c"]
    assert splitPath("a\\.b.c") == ["a.b", "c"]


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a.", "a\\"])
def test_split_path_rejects_invalid(path):
    with pytest.raises(ValueError):
        splitPath(path)


def test_get_by_path_walks_mappings_and_attributes():
    data = {"sceneGroups": {"persistentName": "Boot"}, "obj": SimpleNamespace(speed=0.5)}
    assert getByPath(data, "sceneGroups.persistentName") == "Boot"
    assert getByPath(data, "obj.speed") == 0.5
    assert getByPath(data, "sceneGroups.missing", "dflt") == "dflt"
    assert getByPath(data, "a..b", 7) == 7


def test_has_path_distinguishes_none_from_missing():
    data = {"logging": {"file": None}}
    assert hasPath(data, "logging.file") is True
    assert hasPath(data, "logging.level") is False
