from __future__ import annotations

import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Protocol

_DEFAULT_JSON_INDENT = 2
_DEFAULT_KV_SCHEMA_VERSION = 1


class KeyValueStorage(Protocol):
    """项目快照的持久化介质：按字符串键读写字符串值。"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def _require_key(key: str) -> None:
    if not isinstance(key, str) or not key.strip():
        raise ValueError("KV key 必须为非空字符串")


class InMemoryStorage:
    """进程内键值存储（测试与一次性会话使用）。"""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        _require_key(key)
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        _require_key(key)
        if not isinstance(value, str):
            raise ValueError("KV str value 必须为字符串")
        self._values[key] = value

    def keys(self):
        return list(self._values)


class JsonFileStorage:
    """单个 JSON 文件承载的键值存储。

    文件结构：{"schema_version": 1, "values": {key: value}}
    - 每次写入都走"写 tmp -> replace"的原子写策略，避免中断产生半写入文件；
    - 同一实例内的读写由锁串行化。
    """

    def __init__(self, file_path: Path) -> None:
        self.file_path = Path(file_path)
        self._lock = Lock()

    # --------------------------------------------------------------------- 读写
    def get(self, key: str) -> Optional[str]:
        _require_key(key)
        with self._lock:
            values_payload = self._load_payload()["values"]
        raw_value = values_payload.get(key)
        return raw_value if isinstance(raw_value, str) else None

    def set(self, key: str, value: Optional[str]) -> None:
        _require_key(key)
        if value is not None and not isinstance(value, str):
            raise ValueError("KV str value 必须为字符串")
        with self._lock:
            payload = self._load_payload()
            if value is None:
                payload["values"].pop(key, None)
            else:
                payload["values"][key] = value
            self._save_payload(payload)

    def delete(self, key: str) -> None:
        self.set(key, None)

    def keys(self):
        with self._lock:
            return list(self._load_payload()["values"])

    # --------------------------------------------------------------------- 文件
    def _load_payload(self) -> Dict[str, Any]:
        if not self.file_path.exists():
            return {"schema_version": _DEFAULT_KV_SCHEMA_VERSION, "values": {}}
        serialized_text = self.file_path.read_text(encoding="utf-8")
        if not serialized_text.strip():
            return {"schema_version": _DEFAULT_KV_SCHEMA_VERSION, "values": {}}
        loaded_payload = json.loads(serialized_text)
        if not isinstance(loaded_payload, dict):
            return {"schema_version": _DEFAULT_KV_SCHEMA_VERSION, "values": {}}

        values_payload = loaded_payload.get("values")
        if not isinstance(values_payload, dict):
            values_payload = {}
        schema_version = loaded_payload.get("schema_version", _DEFAULT_KV_SCHEMA_VERSION)
        if not isinstance(schema_version, int):
            schema_version = _DEFAULT_KV_SCHEMA_VERSION
        return {"schema_version": int(schema_version), "values": values_payload}

    def _save_payload(self, payload: Dict[str, Any]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_name(f"{self.file_path.name}.tmp")
        serialized_text = json.dumps(
            {
                "schema_version": int(payload.get("schema_version", _DEFAULT_KV_SCHEMA_VERSION)),
                "values": payload.get("values", {}),
            },
            ensure_ascii=False,
            indent=_DEFAULT_JSON_INDENT,
            sort_keys=True,
        )
        tmp_path.write_text(serialized_text, encoding="utf-8")
        tmp_path.replace(self.file_path)


__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
]
