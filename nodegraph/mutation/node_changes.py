"""节点变更批处理

一次用户手势（拖动、缩放、选择、删除、粘贴）产生一批变更。处理分四步：
1. 逐条应用变更，得到新节点列表（不修改传入列表）
2. 分组框移动时，把同样的位移施加到它的成员上
3. 对"已落定"的普通节点位置变更做落点检测，记录待确认的入组请求
4. 按顺序逐个确认入组请求；拒绝时保留移动结果但不入组
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, Union

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import GROUP_BOX_KIND, NodeModel, find_node, release_group_members
from nodegraph.layout.geometry import resolve_drop_target_group
from nodegraph.utils.logging.logger import log_debug

ConfirmCallback = Callable[[str], bool]


# -------- 变更类型 --------

@dataclass(frozen=True)
class PositionChange:
    id: str
    pos: Optional[Tuple[float, float]] = None
    # None 表示本条变更不涉及拖动状态
    dragging: Optional[bool] = None


@dataclass(frozen=True)
class DimensionsChange:
    id: str
    width: float
    height: float
    resizing: Optional[bool] = None


@dataclass(frozen=True)
class SelectChange:
    id: str
    selected: bool


@dataclass(frozen=True)
class RemoveChange:
    id: str


@dataclass(frozen=True)
class AddChange:
    node: NodeModel


NodeChange = Union[PositionChange, DimensionsChange, SelectChange, RemoveChange, AddChange]


def _apply_single_change(nodes: List[NodeModel], change: NodeChange) -> List[NodeModel]:
    if isinstance(change, AddChange):
        return [*nodes, change.node]

    if isinstance(change, RemoveChange):
        target = find_node(nodes, change.id)
        if target is None:
            return nodes
        remaining = [node for node in nodes if node.id != change.id]
        if target.kind == GROUP_BOX_KIND:
            remaining = release_group_members(remaining, [target.id])
        return remaining

    next_nodes: List[NodeModel] = []
    for node in nodes:
        if node.id != change.id:
            next_nodes.append(node)
            continue
        if isinstance(change, PositionChange):
            updated = node
            if change.pos is not None:
                updated = replace(updated, pos=(float(change.pos[0]), float(change.pos[1])))
            if change.dragging is not None:
                updated = replace(updated, dragging=change.dragging)
            next_nodes.append(updated)
        elif isinstance(change, DimensionsChange):
            updated = replace(node, width=change.width, height=change.height)
            if change.resizing is not None:
                updated = replace(updated, resizing=change.resizing)
            next_nodes.append(updated)
        elif isinstance(change, SelectChange):
            next_nodes.append(replace(node, selected=change.selected))
        else:
            raise ValueError(f"未知的节点变更类型：{type(change).__name__}")
    return next_nodes


def apply_node_changes(changes: Sequence[NodeChange], nodes: List[NodeModel]) -> List[NodeModel]:
    """按顺序应用一批变更；未知节点ID的变更被忽略。"""
    next_nodes = list(nodes)
    for change in changes:
        next_nodes = _apply_single_change(next_nodes, change)
    return next_nodes


# -------- 分组处理 --------

def resolve_group_label(group_node: NodeModel) -> str:
    """分组框显示名：data.value 去空白后的文本，为空时用 label。"""
    value = group_node.data.get("value")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return group_node.label


def build_attach_confirm_message(group_label: str) -> str:
    return f"是否将节点加入分组「{group_label}」？"


def _propagate_group_moves(
    changes: Sequence[NodeChange],
    previous_by_id: Dict[str, NodeModel],
    nodes: List[NodeModel],
) -> List[NodeModel]:
    moved_in_batch: Set[str] = {
        change.id for change in changes if isinstance(change, PositionChange) and change.pos is not None
    }
    for change in changes:
        if not isinstance(change, PositionChange):
            continue
        previous_group = previous_by_id.get(change.id)
        moved_group = find_node(nodes, change.id)
        if previous_group is None or moved_group is None or previous_group.kind != GROUP_BOX_KIND:
            continue
        delta_x = moved_group.pos[0] - previous_group.pos[0]
        delta_y = moved_group.pos[1] - previous_group.pos[1]
        if not delta_x and not delta_y:
            continue
        next_nodes: List[NodeModel] = []
        for node in nodes:
            if (
                node.id == moved_group.id
                or node.kind == GROUP_BOX_KIND
                or node.group_box_id != moved_group.id
                or node.id in moved_in_batch
            ):
                next_nodes.append(node)
                continue
            next_nodes.append(node.with_pos(node.pos[0] + delta_x, node.pos[1] + delta_y))
        nodes = next_nodes
    return nodes


def _collect_pending_attaches(
    changes: Sequence[NodeChange],
    previous_by_id: Dict[str, NodeModel],
    nodes: List[NodeModel],
) -> Dict[str, str]:
    # 按变更顺序记录；同一节点多次变更时以最后一次为准
    pending: Dict[str, str] = {}
    for change in changes:
        if not isinstance(change, PositionChange):
            continue
        if change.dragging:
            continue
        previous_node = previous_by_id.get(change.id)
        moved_node = find_node(nodes, change.id)
        if previous_node is None or moved_node is None:
            continue
        if previous_node.kind == GROUP_BOX_KIND or moved_node.kind == GROUP_BOX_KIND:
            continue
        target_group = resolve_drop_target_group(moved_node, nodes)
        if target_group is None:
            pending.pop(moved_node.id, None)
            continue
        if moved_node.group_box_id == target_group.id:
            pending.pop(moved_node.id, None)
            continue
        pending[moved_node.id] = target_group.id
    return pending


def apply_node_changes_with_grouping(
    changes: Sequence[NodeChange],
    nodes: List[NodeModel],
    confirm: Optional[ConfirmCallback] = None,
) -> List[NodeModel]:
    """应用变更并维护分组成员关系

    Args:
        changes: 本次手势产生的变更
        nodes: 变更前的节点列表（不会被修改）
        confirm: 入组确认回调，参数为提示文案；为 None 或关闭确认时直接入组

    Returns:
        新的节点列表
    """
    previous_by_id = {node.id: node for node in nodes}
    next_nodes = apply_node_changes(changes, nodes)
    next_nodes = _propagate_group_moves(changes, previous_by_id, next_nodes)
    pending = _collect_pending_attaches(changes, previous_by_id, next_nodes)

    for node_id, group_id in pending.items():
        node = find_node(next_nodes, node_id)
        group_node = find_node(next_nodes, group_id)
        if node is None or group_node is None or node.kind == GROUP_BOX_KIND:
            continue
        if settings.CONFIRM_ATTACH_TO_GROUP and confirm is not None:
            if not confirm(build_attach_confirm_message(resolve_group_label(group_node))):
                log_debug("ENGINE_LOG_VERBOSE", "[分组] 用户拒绝入组：{} → {}", node_id, group_id)
                continue
        log_debug("ENGINE_LOG_VERBOSE", "[分组] 节点入组：{} → {}", node_id, group_id)
        next_nodes = [
            item.with_group(group_id) if item.id == node_id else item
            for item in next_nodes
        ]
    return next_nodes


__all__ = [
    "ConfirmCallback",
    "PositionChange",
    "DimensionsChange",
    "SelectChange",
    "RemoveChange",
    "AddChange",
    "NodeChange",
    "apply_node_changes",
    "apply_node_changes_with_grouping",
    "resolve_group_label",
    "build_attach_confirm_message",
]
