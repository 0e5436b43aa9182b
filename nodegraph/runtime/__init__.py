from __future__ import annotations

from .editor_session import EditorSession
from .storage import InMemoryStorage, JsonFileStorage, KeyValueStorage

__all__ = [
    "EditorSession",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
]
