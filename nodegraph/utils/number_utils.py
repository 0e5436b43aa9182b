"""数值解析与格式化

存档与表单中的数值经常以字符串出现（"360"、"12px"、"1.50"），
这里按"取合法前缀"的宽松规则解析，并提供与前端一致的取整与输出格式。
"""
from __future__ import annotations

import math
import re
from typing import Any, Optional

_INT_PREFIX_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def clamp_number(value: float, min_value: float, max_value: float) -> float:
    return min(max(value, min_value), max_value)


def round_half_up(value: float) -> int:
    """四舍五入（.5 一律向正无穷方向），与内置 round 的银行家舍入不同。"""
    return int(math.floor(value + 0.5))


def parse_int_prefix(value: Any) -> Optional[int]:
    """解析文本开头的整数部分："12.7px" → 12；无数字前缀返回 None。"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if not isinstance(value, str):
        return None
    matched = _INT_PREFIX_PATTERN.match(value)
    if matched is None:
        return None
    return int(matched.group(1))


def format_number(value: float) -> str:
    """整数值输出为不带小数点的形式：1.0 → "1"，1.5 → "1.5"。"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "clamp_number",
    "round_half_up",
    "parse_int_prefix",
    "format_number",
]
