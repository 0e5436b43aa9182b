"""节点几何（纯函数）

尺寸解析规则：
- 分组框：显式覆盖 > node.width/height > data 中的 autoBoxWidth/boxWidth，结果限制在 220~2200 × 140~1800
- 便签：显式覆盖 > node.width/height > 按内容估算，结果限制在 24~1200 × 30~1200
- 其它节点：node.width/height，缺省 220×96，限制在 120~2200 × 64~1800

分组框"内容区"是去掉标题栏与内边距之后的矩形，落点判断与新建节点的位置约束都基于它。
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from nodegraph.graph.models.graph_model import GROUP_BOX_KIND, STICKY_NOTE_KIND, NodeModel
from nodegraph.layout.constants import (
    FALLBACK_GRID_COLUMNS,
    FALLBACK_GRID_X_STEP,
    FALLBACK_GRID_Y_STEP,
    GROUP_BOX_DEFAULT_HEIGHT,
    GROUP_BOX_DEFAULT_WIDTH,
    GROUP_BOX_HEADER_HEIGHT,
    GROUP_BOX_MAX_HEIGHT,
    GROUP_BOX_MAX_WIDTH,
    GROUP_BOX_MIN_HEIGHT,
    GROUP_BOX_MIN_WIDTH,
    GROUP_BOX_PADDING_BOTTOM,
    GROUP_BOX_PADDING_LEFT,
    GROUP_BOX_PADDING_RIGHT,
    GROUP_BOX_PADDING_TOP,
    GROUP_BOX_PARSE_MIN_HEIGHT,
    GROUP_BOX_PARSE_MIN_WIDTH,
    NODE_DEFAULT_HEIGHT,
    NODE_DEFAULT_WIDTH,
    NODE_MAX_HEIGHT,
    NODE_MAX_WIDTH,
    NODE_MIN_HEIGHT,
    NODE_MIN_WIDTH,
    STICKY_NOTE_CHAR_WIDTH,
    STICKY_NOTE_CHARS_PER_EXTRA_ROW,
    STICKY_NOTE_CONTENT_MIN_SIZE,
    STICKY_NOTE_EMPTY_MIN_SIZE,
    STICKY_NOTE_ESTIMATE_MAX_HEIGHT,
    STICKY_NOTE_ESTIMATE_MAX_WIDTH,
    STICKY_NOTE_EXTRA_ROW_HEIGHT,
    STICKY_NOTE_LINE_HEIGHT,
    STICKY_NOTE_MAX_HEIGHT,
    STICKY_NOTE_MAX_WIDTH,
    STICKY_NOTE_MIN_HEIGHT,
    STICKY_NOTE_MIN_WIDTH,
    STICKY_NOTE_PADDING_X,
    STICKY_NOTE_PADDING_Y,
)
from nodegraph.utils.number_utils import clamp_number, parse_int_prefix, round_half_up

Size = Tuple[float, float]

# 便签估算宽度时忽略的 markdown 标记字符
_MARKDOWN_MARKS_PATTERN = re.compile(r"[`*_~\[\]()>#-]")


@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def contains_point(self, x: float, y: float) -> bool:
        # 边界上的点视为在内
        return self.left <= x <= self.right and self.top <= y <= self.bottom


def fallback_grid_position(index: int) -> Tuple[float, float]:
    """坐标缺失时按下标排成 4 列网格：(0,0) (220,0) (440,0) (660,0) (0,140) ..."""
    column = index % FALLBACK_GRID_COLUMNS
    row = index // FALLBACK_GRID_COLUMNS
    return (column * FALLBACK_GRID_X_STEP, row * FALLBACK_GRID_Y_STEP)


# -------- 尺寸 --------

def estimate_sticky_note_size(content: str) -> Tuple[int, int]:
    """按文本内容估算便签尺寸。

    Returns:
        (width, height)
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    plain_lines = [_MARKDOWN_MARKS_PATTERN.sub("", line).strip() for line in lines]
    longest_line = max((len(line) for line in plain_lines), default=0)
    line_count = max(len(lines), 1)
    has_content = bool(normalized.strip())
    extra_rows = len(normalized) // STICKY_NOTE_CHARS_PER_EXTRA_ROW
    min_width, min_height = STICKY_NOTE_CONTENT_MIN_SIZE if has_content else STICKY_NOTE_EMPTY_MIN_SIZE
    width = min(
        max(longest_line * STICKY_NOTE_CHAR_WIDTH + STICKY_NOTE_PADDING_X * 2, min_width),
        STICKY_NOTE_ESTIMATE_MAX_WIDTH,
    )
    height = min(
        max(
            line_count * STICKY_NOTE_LINE_HEIGHT
            + STICKY_NOTE_PADDING_Y * 2
            + extra_rows * STICKY_NOTE_EXTRA_ROW_HEIGHT,
            min_height,
        ),
        STICKY_NOTE_ESTIMATE_MAX_HEIGHT,
    )
    return width, height


def resolve_sticky_note_content(data: Dict[str, Any]) -> str:
    content = data.get("description")
    if content is None:
        content = data.get("value")
    if content is None:
        return ""
    return content if isinstance(content, str) else str(content)


def _parse_box_dimension(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    # 0 与无法解析的值都回到默认值
    return parse_int_prefix(raw) or default


def resolve_group_box_size(data: Dict[str, Any]) -> Tuple[float, float]:
    """从分组框 data 解析尺寸：autoBoxWidth 优先于 boxWidth，缺省 360×220。"""
    raw_width = data.get("autoBoxWidth")
    if raw_width is None:
        raw_width = data.get("boxWidth")
    raw_height = data.get("autoBoxHeight")
    if raw_height is None:
        raw_height = data.get("boxHeight")
    return (
        clamp_number(
            _parse_box_dimension(raw_width, GROUP_BOX_DEFAULT_WIDTH),
            GROUP_BOX_PARSE_MIN_WIDTH,
            GROUP_BOX_MAX_WIDTH,
        ),
        clamp_number(
            _parse_box_dimension(raw_height, GROUP_BOX_DEFAULT_HEIGHT),
            GROUP_BOX_PARSE_MIN_HEIGHT,
            GROUP_BOX_MAX_HEIGHT,
        ),
    )


def _pick(override: Optional[float], current: Optional[float], fallback: float) -> float:
    if override is not None:
        return override
    if current is not None:
        return current
    return fallback


def resolve_node_size(node: NodeModel, size_override: Optional[Size] = None) -> Size:
    """解析节点的渲染尺寸（已取整并限制范围）。"""
    override_width = size_override[0] if size_override is not None else None
    override_height = size_override[1] if size_override is not None else None

    if node.kind == GROUP_BOX_KIND:
        fallback_width, fallback_height = resolve_group_box_size(node.data)
        return (
            clamp_number(
                round_half_up(_pick(override_width, node.width, fallback_width)),
                GROUP_BOX_MIN_WIDTH,
                GROUP_BOX_MAX_WIDTH,
            ),
            clamp_number(
                round_half_up(_pick(override_height, node.height, fallback_height)),
                GROUP_BOX_MIN_HEIGHT,
                GROUP_BOX_MAX_HEIGHT,
            ),
        )

    if node.kind == STICKY_NOTE_KIND:
        estimated_width, estimated_height = estimate_sticky_note_size(resolve_sticky_note_content(node.data))
        return (
            clamp_number(
                round_half_up(_pick(override_width, node.width, estimated_width)),
                STICKY_NOTE_MIN_WIDTH,
                STICKY_NOTE_MAX_WIDTH,
            ),
            clamp_number(
                round_half_up(_pick(override_height, node.height, estimated_height)),
                STICKY_NOTE_MIN_HEIGHT,
                STICKY_NOTE_MAX_HEIGHT,
            ),
        )

    # 普通节点不接受尺寸覆盖
    return (
        clamp_number(round_half_up(_pick(None, node.width, NODE_DEFAULT_WIDTH)), NODE_MIN_WIDTH, NODE_MAX_WIDTH),
        clamp_number(round_half_up(_pick(None, node.height, NODE_DEFAULT_HEIGHT)), NODE_MIN_HEIGHT, NODE_MAX_HEIGHT),
    )


# -------- 边界 --------

def resolve_node_bounds(node: NodeModel, size_override: Optional[Size] = None) -> Bounds:
    width, height = resolve_node_size(node, size_override)
    x, y = node.pos
    return Bounds(left=x, top=y, right=x + width, bottom=y + height)


def resolve_group_body_bounds(group_node: NodeModel, size_override: Optional[Size] = None) -> Bounds:
    """分组框内容区：去掉标题栏与四周内边距；宽高至少为 1。"""
    group_width, group_height = resolve_node_size(group_node, size_override)
    x, y = group_node.pos
    left = x + GROUP_BOX_PADDING_LEFT
    right = max(left + 1, x + group_width - GROUP_BOX_PADDING_RIGHT)
    top = y + GROUP_BOX_HEADER_HEIGHT + GROUP_BOX_PADDING_TOP
    bottom = max(top + 1, y + group_height - GROUP_BOX_PADDING_BOTTOM)
    return Bounds(left=left, top=top, right=right, bottom=bottom)


def is_node_center_inside_group_body(
    node: NodeModel,
    group_node: NodeModel,
    group_size_override: Optional[Size] = None,
) -> bool:
    if node.id == group_node.id:
        return False
    center_x, center_y = resolve_node_bounds(node).center
    return resolve_group_body_bounds(group_node, group_size_override).contains_point(center_x, center_y)


def resolve_drop_target_group(node: NodeModel, nodes: Iterable[NodeModel]) -> Optional[NodeModel]:
    """节点中心落在哪个分组框内容区内。

    多个分组框重叠时取内容区面积最小者；面积相同按节点顺序取第一个。
    分组框自身不会被放入其它分组框。
    """
    if node.kind == GROUP_BOX_KIND:
        return None
    best: Optional[NodeModel] = None
    best_area = math.inf
    for group_node in nodes:
        if group_node.kind != GROUP_BOX_KIND or group_node.id == node.id:
            continue
        if not is_node_center_inside_group_body(node, group_node):
            continue
        area = resolve_group_body_bounds(group_node).area
        if area < best_area:
            best = group_node
            best_area = area
    return best


def resolve_attached_group_box_id(node: NodeModel, nodes: Iterable[NodeModel]) -> Optional[str]:
    """节点当前有效的所属分组框ID；指向不存在的分组框时返回 None。"""
    if node.kind == GROUP_BOX_KIND or not node.group_box_id:
        return None
    for item in nodes:
        if item.kind == GROUP_BOX_KIND and item.id == node.group_box_id:
            return node.group_box_id
    return None


__all__ = [
    "Size",
    "Bounds",
    "clamp_number",
    "fallback_grid_position",
    "estimate_sticky_note_size",
    "resolve_sticky_note_content",
    "resolve_group_box_size",
    "resolve_node_size",
    "resolve_node_bounds",
    "resolve_group_body_bounds",
    "is_node_center_inside_group_body",
    "resolve_drop_target_group",
    "resolve_attached_group_box_id",
]
