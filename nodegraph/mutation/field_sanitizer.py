"""表单字段取值清洗

数值型字段在输入过程中逐字符清洗：去掉非法字符、解析、限制范围后转回文本。
无法解析时返回空串（表示"未填写"），其余字段原样返回。
"""
from __future__ import annotations

import re

from nodegraph.utils.number_utils import clamp_number, format_number

# 非负整数字段
NON_NEGATIVE_NUMBER_FIELDS = frozenset(
    {
        "timeoutMs",
        "waitMs",
        "maxWaitMs",
        "reconnectMs",
        "heartbeatMs",
        "maxSizeMB",
        "mobileMax",
        "tabletMax",
        "debounceMs",
        "ttlMs",
        "maxSize",
        "iterations",
        "boxWidth",
        "boxHeight",
    }
)

NON_NEGATIVE_MAX = 1_000_000
OFFSET_LIMIT = 100_000
SPEED_MIN = 0
SPEED_MAX = 100

_NOT_DIGIT = re.compile(r"[^\d]")
_NOT_DIGIT_OR_MINUS = re.compile(r"[^\d-]")
_NOT_DIGIT_OR_DOT = re.compile(r"[^\d.]")

_SIGNED_INT_PREFIX = re.compile(r"^-?\d+")
_DECIMAL_PREFIX = re.compile(r"^(?:\d+\.?\d*|\.\d+)")


def sanitize_field_value(field: str, value: str) -> str:
    """清洗字段值

    Args:
        field: 字段名
        value: 用户输入的原始文本

    Returns:
        清洗后的文本；数值字段无法解析时为 ""
    """
    if field in NON_NEGATIVE_NUMBER_FIELDS:
        digits_only = _NOT_DIGIT.sub("", value)
        if not digits_only:
            return ""
        return format_number(clamp_number(int(digits_only), 0, NON_NEGATIVE_MAX))

    if field == "offset":
        normalized = _NOT_DIGIT_OR_MINUS.sub("", value)
        matched = _SIGNED_INT_PREFIX.match(normalized)
        if matched is None:
            return ""
        return format_number(clamp_number(int(matched.group(0)), -OFFSET_LIMIT, OFFSET_LIMIT))

    if field == "speed":
        normalized = _NOT_DIGIT_OR_DOT.sub("", value)
        matched = _DECIMAL_PREFIX.match(normalized)
        if matched is None:
            return ""
        return format_number(clamp_number(float(matched.group(0)), SPEED_MIN, SPEED_MAX))

    return value


__all__ = [
    "NON_NEGATIVE_NUMBER_FIELDS",
    "sanitize_field_value",
]
