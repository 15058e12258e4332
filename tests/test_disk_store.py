from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from levers.disk_store import DiskJsonDocumentStore
from levers.json_store import atomic_write_json, read_json
from levers.locks import GLOBAL_PATH_LOCKS, PathLockRegistry


def test_read_json_missing_empty_and_invalid(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    assert read_json(tmp_path / "missing.json") is None

    empty = tmp_path / "empty.json"
    empty.write_text("   \n", encoding="utf-8")
    assert read_json(empty) is None

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="levers.json_store"):
        assert read_json(broken) is None
    assert "not valid JSON" in caplog.text

    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    assert read_json(binary) is None


def test_read_json_propagates_other_os_errors(tmp_path: Path):
    folder = tmp_path / "dir.json"
    folder.mkdir()
    with pytest.raises(OSError):
        read_json(folder)


def test_atomic_write_json_pretty_prints_in_insertion_order(tmp_path: Path):
    target = tmp_path / "nested" / "out.json"
    atomic_write_json(target, {"b": 1, "a": {"ü": "ß"}})
    text = target.read_text(encoding="utf-8")
    assert text == '{\n  "b": 1,\n  "a": {\n    "ü": "ß"\n  }\n}\n'
    assert [p.name for p in target.parent.iterdir()] == ["out.json"]


def test_atomic_write_json_compact(tmp_path: Path):
    target = tmp_path / "out.json"
    atomic_write_json(target, {"a": [1, 2]}, indent=None)
    assert target.read_text(encoding="utf-8") == '{"a": [1, 2]}\n'


def test_atomic_write_json_unserializable_keeps_old_file(tmp_path: Path):
    target = tmp_path / "out.json"
    atomic_write_json(target, {"ok": True})
    with pytest.raises(TypeError):
        atomic_write_json(target, {"bad": object()})
    assert json.loads(target.read_text(encoding="utf-8")) == {"ok": True}
    assert sorted(os.listdir(tmp_path)) == ["out.json"]


def test_disk_store_roundtrip(tmp_path: Path):
    store = DiskJsonDocumentStore(tmp_path / "doc.json")
    assert store.load() == {}
    store.save({"theme": "dark", "n": [1, None, 2.5]})
    assert store.load() == {"theme": "dark", "n": [1, None, 2.5]}
    assert store.path == tmp_path / "doc.json"


def test_disk_store_non_object_top_level_is_empty(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    target = tmp_path / "doc.json"
    target.write_text("[1, 2, 3]", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="levers.disk_store"):
        assert DiskJsonDocumentStore(target).load() == {}
    assert "not an object" in caplog.text


def test_lock_registry_one_lock_per_path(tmp_path: Path):
    registry = PathLockRegistry()
    a = registry.lock_for(tmp_path / "a.json")
    assert registry.lock_for(tmp_path / "x" / ".." / "a.json") is a
    assert registry.lock_for(tmp_path / "b.json") is not a
    assert len(registry) == 2

    # re-entrant: a store holding its file lock can save again
    with a:
        with a:
            pass

    assert GLOBAL_PATH_LOCKS.lock_for(tmp_path / "a.json") is GLOBAL_PATH_LOCKS.lock_for(tmp_path / "a.json")
