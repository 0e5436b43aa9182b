"""端口标识（handle）编解码

端口标识是挂在连线上的字符串，格式为 "{role}.{semantic}.{suffix}"：
- role: "in"（输入，连线终点）/ "out"（输出，连线起点）
- semantic: "control"（流程）/ "data"（数据）/ "condition"（条件）
- suffix: 由节点种类决定的不透明后缀，例如 "prev"、"case-{caseId}"

旧版本存档中存在少量简写形式（如 "in.prev"、"out.case-xxx"），
加载与连线前统一经 `normalize_handle` 转成规范形式。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

ROLE_IN = "in"
ROLE_OUT = "out"

SEMANTIC_CONTROL = "control"
SEMANTIC_DATA = "data"
SEMANTIC_CONDITION = "condition"

SIDE_SOURCE = "source"
SIDE_TARGET = "target"

MULTIPLICITY_SINGLE = "single"
MULTIPLICITY_MULTI = "multi"

# 条件结果输出口：无论按规则推导是什么，始终允许多连
CONDITION_RESULT_HANDLE = "out.condition.result"

_HANDLE_PATTERN = re.compile(r"^(in|out)\.(control|data|condition)\.")

_CANONICAL_PREFIXES = (
    "in.control.",
    "out.control.",
    "in.data.",
    "out.data.",
    "in.condition.",
    "out.condition.",
)

# 旧版整串别名
_LEGACY_EXACT_ALIASES = {
    "in.prev": "in.control.prev",
    "out.next": "out.control.next",
    "in.value": "in.data.value",
}


@dataclass(frozen=True)
class HandleInfo:
    role: str
    semantic: str
    suffix: str = ""


def parse_handle(handle_id: Optional[str]) -> Optional[HandleInfo]:
    """解析端口标识。

    Args:
        handle_id: 端口标识（不做别名归一化）

    Returns:
        HandleInfo；空串或不符合格式时返回 None
    """
    if not handle_id:
        return None
    matched = _HANDLE_PATTERN.match(handle_id)
    if matched is None:
        return None
    return HandleInfo(
        role=matched.group(1),
        semantic=matched.group(2),
        suffix=handle_id[matched.end():],
    )


def normalize_handle(handle_id: Optional[str]) -> Optional[str]:
    """把旧版简写归一为规范端口标识。

    规范形式与无法识别的字符串原样返回（交给连线校验拒绝，而不是在这里吞掉）。
    """
    if not handle_id:
        return None
    if handle_id.startswith(_CANONICAL_PREFIXES):
        return handle_id
    alias = _LEGACY_EXACT_ALIASES.get(handle_id)
    if alias is not None:
        return alias
    if handle_id.startswith("out.case-"):
        return f"out.control.{handle_id[len('out.'):]}"
    if handle_id.startswith("in.case-"):
        return f"in.condition.{handle_id[len('in.'):]}"
    return handle_id


def resolve_multiplicity(side: str, semantic: str) -> str:
    """按连线端（source/target）与语义推导端口是否允许多连。"""
    if side == SIDE_TARGET and semantic == SEMANTIC_CONTROL:
        return MULTIPLICITY_MULTI
    if side == SIDE_SOURCE and semantic == SEMANTIC_DATA:
        return MULTIPLICITY_MULTI
    return MULTIPLICITY_SINGLE


def is_multi_handle(handle_id: Optional[str]) -> bool:
    handle = parse_handle(handle_id)
    if handle is None:
        return False
    side = SIDE_TARGET if handle.role == ROLE_IN else SIDE_SOURCE
    if resolve_multiplicity(side, handle.semantic) == MULTIPLICITY_MULTI:
        return True
    return handle_id == CONDITION_RESULT_HANDLE


# -------- 动态条目端口 --------

def case_source_handle(case_id: str) -> str:
    return f"out.control.case-{case_id}"


def case_target_handle(case_id: str) -> str:
    return f"in.condition.case-{case_id}"


def branch_source_handle(branch_id: str) -> str:
    return f"out.control.branch-{branch_id}"


def status_source_handle(status_id: str) -> str:
    return f"out.control.status-{status_id}"


def role_for_side(side: str) -> str:
    """连线端对应的端口角色：source 端是 out，target 端是 in。"""
    return ROLE_OUT if side == SIDE_SOURCE else ROLE_IN


__all__ = [
    "ROLE_IN",
    "ROLE_OUT",
    "SEMANTIC_CONTROL",
    "SEMANTIC_DATA",
    "SEMANTIC_CONDITION",
    "SIDE_SOURCE",
    "SIDE_TARGET",
    "MULTIPLICITY_SINGLE",
    "MULTIPLICITY_MULTI",
    "CONDITION_RESULT_HANDLE",
    "HandleInfo",
    "parse_handle",
    "normalize_handle",
    "resolve_multiplicity",
    "is_multi_handle",
    "case_source_handle",
    "case_target_handle",
    "branch_source_handle",
    "status_source_handle",
    "role_for_side",
]
