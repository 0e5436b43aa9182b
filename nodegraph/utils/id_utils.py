from __future__ import annotations

import random
import string
import time

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    """非负整数转为小写 base36 文本。"""
    if value < 0:
        raise ValueError(f"to_base36 仅支持非负整数：{value!r}")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def _random_suffix(length: int) -> str:
    return "".join(random.choice(_BASE36_ALPHABET) for _ in range(length))


def generate_prefixed_id(prefix: str, random_length: int = 4) -> str:
    """生成 "{prefix}-{毫秒时间戳base36}-{随机串}" 形式的ID。"""
    timestamp_ms = int(time.time() * 1000)
    return f"{prefix}-{to_base36(timestamp_ms)}-{_random_suffix(random_length)}"


def create_node_id() -> str:
    return generate_prefixed_id("node", 4)


def create_graph_id() -> str:
    return generate_prefixed_id("graph", 4)


def create_switch_case_id() -> str:
    return generate_prefixed_id("case", 3)


def create_fetch_status_id() -> str:
    return generate_prefixed_id("status", 3)


def create_branch_id() -> str:
    return generate_prefixed_id("branch", 3)


def create_binding_id() -> str:
    return generate_prefixed_id("bind", 3)


def create_edge_id() -> str:
    # 连线ID沿用节点ID生成器，带 "e-" 前缀
    return f"e-{create_node_id()}"


__all__ = [
    "to_base36",
    "generate_prefixed_id",
    "create_node_id",
    "create_graph_id",
    "create_switch_case_id",
    "create_fetch_status_id",
    "create_branch_id",
    "create_binding_id",
    "create_edge_id",
]
