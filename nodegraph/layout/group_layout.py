"""分组框自动布局

分组框的位置与尺寸由成员节点推导：包围所有成员的矩形再加上标题栏与内边距。
没有成员的分组框保持当前位置与（限制范围后的）当前尺寸。

本模块只做纯计算，每一轮 `run_group_layout_pass` 都是幂等的：
对同一组节点重复执行，第二次起返回原列表对象。
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import GROUP_BOX_KIND, STICKY_NOTE_KIND, NodeModel
from nodegraph.layout.constants import (
    GROUP_BOX_HEADER_HEIGHT,
    GROUP_BOX_MAX_HEIGHT,
    GROUP_BOX_MAX_WIDTH,
    GROUP_BOX_MIN_HEIGHT,
    GROUP_BOX_MIN_WIDTH,
    GROUP_BOX_PADDING_BOTTOM,
    GROUP_BOX_PADDING_LEFT,
    GROUP_BOX_PADDING_RIGHT,
    GROUP_BOX_PADDING_TOP,
)
from nodegraph.layout.geometry import (
    estimate_sticky_note_size,
    resolve_attached_group_box_id,
    resolve_group_box_size,
    resolve_node_bounds,
    resolve_sticky_note_content,
)
from nodegraph.utils.logging.logger import log_debug
from nodegraph.utils.number_utils import clamp_number, round_half_up


@dataclass(frozen=True)
class GroupLayout:
    """一个分组框的目标位置与尺寸"""

    x: float
    y: float
    width: float
    height: float


GroupLayoutMap = Dict[str, GroupLayout]


def _current_group_size(group_node: NodeModel) -> tuple:
    fallback_width, fallback_height = resolve_group_box_size(group_node.data)
    width = group_node.width if group_node.width is not None else fallback_width
    height = group_node.height if group_node.height is not None else fallback_height
    return (
        clamp_number(round_half_up(width), GROUP_BOX_MIN_WIDTH, GROUP_BOX_MAX_WIDTH),
        clamp_number(round_half_up(height), GROUP_BOX_MIN_HEIGHT, GROUP_BOX_MAX_HEIGHT),
    )


def compute_group_auto_layout(nodes: List[NodeModel]) -> GroupLayoutMap:
    """计算每个分组框的目标布局

    Args:
        nodes: 当前节点图的全部节点

    Returns:
        {分组框ID: GroupLayout}，按节点顺序插入
    """
    result: GroupLayoutMap = {}
    for group_node in nodes:
        if group_node.kind != GROUP_BOX_KIND:
            continue
        members = [
            node
            for node in nodes
            if node.id != group_node.id
            and node.kind != GROUP_BOX_KIND
            and resolve_attached_group_box_id(node, nodes) == group_node.id
        ]
        if not members:
            width, height = _current_group_size(group_node)
            result[group_node.id] = GroupLayout(
                x=group_node.pos[0],
                y=group_node.pos[1],
                width=width,
                height=height,
            )
            continue

        bounds = [resolve_node_bounds(node) for node in members]
        min_left = min(item.left for item in bounds)
        min_top = min(item.top for item in bounds)
        max_right = max(item.right for item in bounds)
        max_bottom = max(item.bottom for item in bounds)

        result[group_node.id] = GroupLayout(
            x=round_half_up(min_left - GROUP_BOX_PADDING_LEFT),
            y=round_half_up(min_top - GROUP_BOX_HEADER_HEIGHT - GROUP_BOX_PADDING_TOP),
            width=clamp_number(
                math.ceil(max_right - min_left + GROUP_BOX_PADDING_LEFT + GROUP_BOX_PADDING_RIGHT),
                GROUP_BOX_MIN_WIDTH,
                GROUP_BOX_MAX_WIDTH,
            ),
            height=clamp_number(
                math.ceil(
                    max_bottom
                    - min_top
                    + GROUP_BOX_HEADER_HEIGHT
                    + GROUP_BOX_PADDING_TOP
                    + GROUP_BOX_PADDING_BOTTOM
                ),
                GROUP_BOX_MIN_HEIGHT,
                GROUP_BOX_MAX_HEIGHT,
            ),
        )
    return result


def clear_dangling_group_memberships(nodes: List[NodeModel]) -> List[NodeModel]:
    """清除指向不存在分组框的 group_box_id；无变化时返回原列表。"""
    group_ids = {node.id for node in nodes if node.kind == GROUP_BOX_KIND}
    changed = False
    next_nodes: List[NodeModel] = []
    for node in nodes:
        if node.kind == GROUP_BOX_KIND and node.group_box_id:
            # 分组框不嵌套
            next_nodes.append(node.with_group(None))
            changed = True
            continue
        if node.group_box_id and node.group_box_id not in group_ids:
            log_debug("GROUP_LAYOUT_VERBOSE", "[分组布局] 清除失效成员关系：{} → {}", node.id, node.group_box_id)
            next_nodes.append(node.with_group(None))
            changed = True
            continue
        next_nodes.append(node)
    return next_nodes if changed else nodes


def _apply_group_layout(node: NodeModel, layout: GroupLayout, epsilon: float) -> Optional[NodeModel]:
    updated = node
    if abs(node.pos[0] - layout.x) >= epsilon or abs(node.pos[1] - layout.y) >= epsilon:
        updated = replace(updated, pos=(layout.x, layout.y))
    if node.width != layout.width or node.height != layout.height:
        updated = replace(updated, width=layout.width, height=layout.height)
    if node.data.get("autoBoxWidth") != layout.width or node.data.get("autoBoxHeight") != layout.height:
        updated = updated.with_data(autoBoxWidth=layout.width, autoBoxHeight=layout.height)
    return None if updated is node else updated


def _apply_sticky_note_cache(node: NodeModel) -> Optional[NodeModel]:
    width, height = estimate_sticky_note_size(resolve_sticky_note_content(node.data))
    if node.data.get("autoNoteWidth") == width and node.data.get("autoNoteHeight") == height:
        return None
    return node.with_data(autoNoteWidth=width, autoNoteHeight=height)


def apply_group_auto_layout(nodes: List[NodeModel], layouts: GroupLayoutMap) -> List[NodeModel]:
    """把布局结果写回分组框，并刷新便签的估算尺寸缓存

    拖动中或调整尺寸中的分组框保持不动；位置偏差小于 GROUP_LAYOUT_EPSILON 时不移动。

    Returns:
        新节点列表；没有任何变化时返回传入的同一个列表对象
    """
    epsilon = float(settings.GROUP_LAYOUT_EPSILON)
    changed = False
    next_nodes: List[NodeModel] = []
    for node in nodes:
        updated: Optional[NodeModel] = None
        if node.kind == GROUP_BOX_KIND:
            layout = layouts.get(node.id)
            if layout is not None and not node.dragging and not node.resizing:
                updated = _apply_group_layout(node, layout, epsilon)
                if updated is not None:
                    log_debug(
                        "GROUP_LAYOUT_VERBOSE",
                        "[分组布局] {} → ({}, {}) {}×{}",
                        node.id,
                        layout.x,
                        layout.y,
                        layout.width,
                        layout.height,
                    )
        elif node.kind == STICKY_NOTE_KIND:
            updated = _apply_sticky_note_cache(node)
        if updated is None:
            next_nodes.append(node)
        else:
            next_nodes.append(updated)
            changed = True
    return next_nodes if changed else nodes


def run_group_layout_pass(nodes: List[NodeModel]) -> List[NodeModel]:
    """清理失效成员关系 → 计算布局 → 写回。"""
    cleaned = clear_dangling_group_memberships(nodes)
    layouts = compute_group_auto_layout(cleaned)
    return apply_group_auto_layout(cleaned, layouts)


__all__ = [
    "GroupLayout",
    "GroupLayoutMap",
    "compute_group_auto_layout",
    "clear_dangling_group_memberships",
    "apply_group_auto_layout",
    "run_group_layout_pass",
]
