"""操作提示文案

提示是短暂显示的一行文字，由会话在 HINT_DISMISS_SECONDS 秒后自动清除。
"""
from __future__ import annotations

from typing import Dict, Optional

HINT_KEEP_AT_LEAST_ONE_CASE = "keepAtLeastOneCase"
HINT_KEEP_AT_LEAST_ONE_BRANCH = "keepAtLeastOneBranch"
HINT_KEEP_AT_LEAST_ONE_STATUS = "keepAtLeastOneStatus"
HINT_KEEP_AT_LEAST_ONE_ENTRY = "keepAtLeastOneEntry"
HINT_KEEP_AT_LEAST_ONE_BINDING = "keepAtLeastOneBinding"
HINT_KEEP_AT_LEAST_ONE_GRAPH = "keepAtLeastOneGraph"
HINT_INVALID_PORT_HANDLE = "invalidPortHandle"
HINT_NO_MATCHING_INPUT = "noMatchingInput"
HINT_NO_MATCHING_OUTPUT = "noMatchingOutput"

HINT_TEXTS: Dict[str, str] = {
    HINT_KEEP_AT_LEAST_ONE_CASE: "至少保留一个分支条件。",
    HINT_KEEP_AT_LEAST_ONE_BRANCH: "至少保留一个并行分支。",
    HINT_KEEP_AT_LEAST_ONE_STATUS: "至少保留一个状态码。",
    HINT_KEEP_AT_LEAST_ONE_ENTRY: "至少保留一个键值对。",
    HINT_KEEP_AT_LEAST_ONE_BINDING: "至少保留一个参数绑定。",
    HINT_KEEP_AT_LEAST_ONE_GRAPH: "至少保留一个节点图。",
    HINT_INVALID_PORT_HANDLE: "端口标识无法识别，无法创建节点。",
    HINT_NO_MATCHING_INPUT: "所选节点没有可匹配的输入端口。",
    HINT_NO_MATCHING_OUTPUT: "所选节点没有可匹配的输出端口。",
}


def hint_text(hint_key: Optional[str]) -> Optional[str]:
    if hint_key is None:
        return None
    return HINT_TEXTS.get(hint_key, hint_key)


__all__ = [
    "HINT_KEEP_AT_LEAST_ONE_CASE",
    "HINT_KEEP_AT_LEAST_ONE_BRANCH",
    "HINT_KEEP_AT_LEAST_ONE_STATUS",
    "HINT_KEEP_AT_LEAST_ONE_ENTRY",
    "HINT_KEEP_AT_LEAST_ONE_BINDING",
    "HINT_KEEP_AT_LEAST_ONE_GRAPH",
    "HINT_INVALID_PORT_HANDLE",
    "HINT_NO_MATCHING_INPUT",
    "HINT_NO_MATCHING_OUTPUT",
    "HINT_TEXTS",
    "hint_text",
]
