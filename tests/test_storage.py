from __future__ import annotations

import json
from pathlib import Path

import pytest

from nodegraph.runtime.storage import InMemoryStorage, JsonFileStorage


def test_in_memory_storage_roundtrip() -> None:
    storage = InMemoryStorage({"a": "1"})
    assert storage.get("a") == "1"
    assert storage.get("missing") is None
    storage.set("b", "2")
    assert sorted(storage.keys()) == ["a", "b"]


def test_blank_keys_are_rejected() -> None:
    storage = InMemoryStorage()
    with pytest.raises(ValueError):
        storage.get("  ")
    with pytest.raises(ValueError):
        storage.set("", "x")
    with pytest.raises(ValueError):
        storage.set("k", 123)  # type: ignore[arg-type]


def test_json_file_storage_writes_schema_and_values(tmp_path: Path) -> None:
    file_path = tmp_path / "kv" / "store.json"
    storage = JsonFileStorage(file_path)
    assert storage.get("k") is None, "文件不存在时视为空"

    storage.set("k", "中文值")
    payload = json.loads(file_path.read_text(encoding="utf-8"))
    assert payload == {"schema_version": 1, "values": {"k": "中文值"}}
    assert not (tmp_path / "kv" / "store.json.tmp").exists(), "临时文件应被替换掉"

    reopened = JsonFileStorage(file_path)
    assert reopened.get("k") == "中文值"

    reopened.delete("k")
    assert reopened.keys() == []


def test_json_file_storage_tolerates_unexpected_content(tmp_path: Path) -> None:
    file_path = tmp_path / "store.json"
    file_path.write_text("", encoding="utf-8")
    storage = JsonFileStorage(file_path)
    assert storage.get("k") is None

    file_path.write_text(json.dumps({"schema_version": "x", "values": {"k": 1, "s": "ok"}}), encoding="utf-8")
    assert storage.get("k") is None, "非字符串值按缺失处理"
    assert storage.get("s") == "ok"

    with pytest.raises(ValueError):
        storage.set(" ", "v")
