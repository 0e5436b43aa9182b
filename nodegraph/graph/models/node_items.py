"""节点内的可增删条目：switch 分支条件、fetch 状态码、parallel/race 分支、键值对与子流程绑定。

条目统一以 dict 形式存放在节点 data 中（与存储格式一致），
这里负责把任意来源的列表规范成 `[{id, ...}]`，供命令与持久化复用。
"""
from __future__ import annotations

from typing import Any, Dict, List

ItemList = List[Dict[str, str]]

# 至少保留一个键值对条目的节点种类
KEY_VALUE_MIN_ONE_KINDS = frozenset(
    {
        "setState",
        "computed",
        "renderComponent",
        "conditionalRender",
        "listRender",
    }
)

BRANCH_KINDS = frozenset({"parallel", "race"})

BINDING_FIELDS = ("inputBindings", "outputBindings")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _item_id(raw: Dict[str, Any], index: int) -> str:
    return _text(raw.get("id")) or str(index)


def normalize_cases(cases: Any) -> ItemList:
    if not isinstance(cases, list):
        return []
    result: ItemList = []
    for index, item in enumerate(cases):
        if isinstance(item, str):
            result.append({"id": str(index), "label": item})
        elif isinstance(item, dict):
            result.append(
                {
                    "id": _item_id(item, index),
                    "label": _text(item.get("label")) or f"case-{index + 1}",
                }
            )
    return [item for item in result if item["id"]]


def normalize_status_codes(status_codes: Any) -> ItemList:
    if not isinstance(status_codes, list):
        return []
    result: ItemList = []
    for index, item in enumerate(status_codes):
        if isinstance(item, str):
            result.append({"id": str(index), "code": item or str(200 + index)})
        elif isinstance(item, dict):
            result.append(
                {
                    "id": _item_id(item, index),
                    "code": _text(item.get("code")) or str(200 + index),
                }
            )
    return [item for item in result if item["id"]]


def normalize_branches(branches: Any) -> ItemList:
    if not isinstance(branches, list):
        return []
    result: ItemList = []
    for index, item in enumerate(branches):
        if isinstance(item, str):
            result.append({"id": str(index), "label": item or f"branch-{index + 1}"})
        elif isinstance(item, dict):
            result.append(
                {
                    "id": _item_id(item, index),
                    "label": _text(item.get("label")) or f"branch-{index + 1}",
                }
            )
    return [item for item in result if item["id"]]


def normalize_key_value_entries(entries: Any) -> ItemList:
    if not isinstance(entries, list):
        return []
    result: ItemList = []
    for index, item in enumerate(entries):
        if not isinstance(item, dict):
            continue
        result.append(
            {
                "id": _item_id(item, index),
                "key": _text(item.get("key")),
                "value": _text(item.get("value")),
            }
        )
    return [item for item in result if item["id"]]


def normalize_binding_entries(entries: Any) -> ItemList:
    return normalize_key_value_entries(entries)


__all__ = [
    "ItemList",
    "KEY_VALUE_MIN_ONE_KINDS",
    "BRANCH_KINDS",
    "BINDING_FIELDS",
    "normalize_cases",
    "normalize_status_codes",
    "normalize_branches",
    "normalize_key_value_entries",
    "normalize_binding_entries",
]
