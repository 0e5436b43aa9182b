"""画布右键菜单与连线动作

每个动作接收当前节点/连线列表，返回 `NodeActionOutcome`：
新的节点与连线、可选提示文案，以及（新建类动作）新节点ID。
传入列表不会被修改。
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Tuple

from nodegraph.graph.handles import (
    ROLE_IN,
    ROLE_OUT,
    SIDE_SOURCE,
    SIDE_TARGET,
    normalize_handle,
    parse_handle,
)
from nodegraph.graph.models.graph_model import (
    EdgeModel,
    NodeModel,
    add_edge_if_absent,
    find_node,
    release_group_members,
    remove_node_edges,
    remove_port_connections,
)
from nodegraph.layout.constants import (
    DUPLICATE_OFFSET,
    GROUP_BOX_CREATE_INSET,
    PORT_CREATE_OFFSET_X,
    PORT_CREATE_OFFSET_Y,
)
from nodegraph.layout.geometry import resolve_group_body_bounds, resolve_group_box_size, resolve_node_size
from nodegraph.layout.group_layout import GroupLayout
from nodegraph.mutation.hints import (
    HINT_INVALID_PORT_HANDLE,
    HINT_NO_MATCHING_INPUT,
    HINT_NO_MATCHING_OUTPUT,
    hint_text,
)
from nodegraph.nodes.node_catalog import get_theme_options, is_annotation_kind, is_container_kind
from nodegraph.nodes.node_factory import create_node, get_default_handle_for_node
from nodegraph.utils.id_utils import create_edge_id, create_node_id
from nodegraph.utils.logging.logger import log_debug
from nodegraph.utils.number_utils import clamp_number
from nodegraph.validate.connection_validator import (
    CONNECTION_HINT_BY_REASON,
    ConnectionCandidate,
    validate_connection,
)


@dataclass
class NodeActionOutcome:
    nodes: List[NodeModel]
    edges: List[EdgeModel]
    hint: Optional[str] = None
    created_node_id: Optional[str] = None


def _unchanged(nodes: List[NodeModel], edges: List[EdgeModel], hint: Optional[str] = None) -> NodeActionOutcome:
    return NodeActionOutcome(nodes=nodes, edges=edges, hint=hint)


# -------- 新建节点 --------

def create_node_from_canvas(
    nodes: List[NodeModel],
    edges: List[EdgeModel],
    kind: str,
    pos: Tuple[float, float],
) -> NodeActionOutcome:
    created = create_node(kind, pos)
    return NodeActionOutcome(nodes=[*nodes, created], edges=edges, created_node_id=created.id)


def create_node_from_group_box(
    nodes: List[NodeModel],
    edges: List[EdgeModel],
    group_id: str,
    kind: str,
    pos: Tuple[float, float],
    group_layouts: Optional[Mapping[str, GroupLayout]] = None,
) -> NodeActionOutcome:
    """在分组框内新建节点

    落点限制在分组框内容区内：距左/上边缘至少 GROUP_BOX_CREATE_INSET，
    且新节点的右/下边缘不超出内容区（内容区放不下时贴左/上）。
    新节点自动归属该分组框；新建的是分组框时不归属。
    """
    group_node = find_node(nodes, group_id)
    if group_node is None or not is_container_kind(group_node.kind):
        return _unchanged(nodes, edges)

    layout = (group_layouts or {}).get(group_node.id)
    if layout is not None:
        group_size = (layout.width, layout.height)
    else:
        group_size = resolve_group_box_size(group_node.data)
    body = resolve_group_body_bounds(group_node, group_size)

    draft_width, draft_height = resolve_node_size(create_node(kind, pos, node_id="draft"))
    min_x = body.left + GROUP_BOX_CREATE_INSET
    min_y = body.top + GROUP_BOX_CREATE_INSET
    x = clamp_number(pos[0], min_x, max(min_x, body.right - draft_width))
    y = clamp_number(pos[1], min_y, max(min_y, body.bottom - draft_height))

    created = create_node(kind, (x, y))
    if not is_container_kind(created.kind):
        created = created.with_group(group_node.id)
    return NodeActionOutcome(nodes=[*nodes, created], edges=edges, created_node_id=created.id)


def create_node_from_port(
    nodes: List[NodeModel],
    edges: List[EdgeModel],
    node_id: str,
    handle_id: str,
    side: str,
    kind: str,
) -> NodeActionOutcome:
    """从端口右键菜单新建节点并自动连线

    source 端口：新节点放在右侧，连到新节点的默认输入口；
    target 端口：新节点放在左侧，从新节点的默认输出口连过来。
    连线不合法时仍保留新节点，只返回提示。
    """
    anchor_node = find_node(nodes, node_id)
    if anchor_node is None:
        return _unchanged(nodes, edges)

    normalized_handle = normalize_handle(handle_id)
    handle_info = parse_handle(normalized_handle)
    if handle_info is None or normalized_handle is None:
        return _unchanged(nodes, edges, hint_text(HINT_INVALID_PORT_HANDLE))

    x_offset = PORT_CREATE_OFFSET_X if side == SIDE_SOURCE else -PORT_CREATE_OFFSET_X
    created = create_node(kind, (anchor_node.pos[0] + x_offset, anchor_node.pos[1] + PORT_CREATE_OFFSET_Y))
    next_nodes = [*nodes, created]

    if side == SIDE_SOURCE:
        target_handle = get_default_handle_for_node(created, ROLE_IN, handle_info.semantic)
        if not target_handle:
            return NodeActionOutcome(next_nodes, edges, hint_text(HINT_NO_MATCHING_INPUT), created.id)
        candidate = ConnectionCandidate(
            source=node_id,
            target=created.id,
            source_handle=normalized_handle,
            target_handle=target_handle,
        )
    else:
        source_handle = get_default_handle_for_node(created, ROLE_OUT, handle_info.semantic)
        if not source_handle:
            return NodeActionOutcome(next_nodes, edges, hint_text(HINT_NO_MATCHING_OUTPUT), created.id)
        candidate = ConnectionCandidate(
            source=created.id,
            target=node_id,
            source_handle=source_handle,
            target_handle=normalized_handle,
        )

    validation = validate_connection(candidate, next_nodes, edges)
    if not validation.valid:
        return NodeActionOutcome(next_nodes, edges, CONNECTION_HINT_BY_REASON[validation.reason], created.id)

    edge = EdgeModel(
        id=create_edge_id(),
        src_node=candidate.source,
        src_port=candidate.source_handle,
        dst_node=candidate.target,
        dst_port=candidate.target_handle,
    )
    return NodeActionOutcome(nodes=next_nodes, edges=[*edges, edge], created_node_id=created.id)


# -------- 节点菜单 --------

def delete_node(nodes: List[NodeModel], edges: List[EdgeModel], node_id: str) -> NodeActionOutcome:
    """删除节点及其全部连线；删除分组框时释放成员。"""
    target = find_node(nodes, node_id)
    if target is None:
        return _unchanged(nodes, edges)
    remaining = [node for node in nodes if node.id != node_id]
    if is_container_kind(target.kind):
        remaining = release_group_members(remaining, [node_id])
    log_debug("ENGINE_LOG_VERBOSE", "[节点] 删除 {}（{}）", node_id, target.kind)
    return NodeActionOutcome(nodes=remaining, edges=remove_node_edges(edges, node_id))


def duplicate_node(nodes: List[NodeModel], edges: List[EdgeModel], node_id: str) -> NodeActionOutcome:
    target = find_node(nodes, node_id)
    if target is None:
        return _unchanged(nodes, edges)
    duplicated = replace(
        target,
        id=create_node_id(),
        pos=(target.pos[0] + DUPLICATE_OFFSET, target.pos[1] + DUPLICATE_OFFSET),
        data=copy.deepcopy(target.data),
        dragging=False,
        resizing=False,
        selected=False,
    )
    return NodeActionOutcome(nodes=[*nodes, duplicated], edges=edges, created_node_id=duplicated.id)


def detach_node_from_box(nodes: List[NodeModel], edges: List[EdgeModel], node_id: str) -> NodeActionOutcome:
    target = find_node(nodes, node_id)
    if target is None or is_container_kind(target.kind) or not target.group_box_id:
        return _unchanged(nodes, edges)
    next_nodes = [node.with_group(None) if node.id == node_id else node for node in nodes]
    return NodeActionOutcome(nodes=next_nodes, edges=edges)


def update_node_color_theme(
    nodes: List[NodeModel],
    edges: List[EdgeModel],
    node_id: str,
    color: str,
) -> NodeActionOutcome:
    """修改注释节点配色；主题值不在该种类的可选范围内时忽略。"""
    target = find_node(nodes, node_id)
    if target is None or not is_annotation_kind(target.kind):
        return _unchanged(nodes, edges)
    if color not in get_theme_options(target.kind):
        return _unchanged(nodes, edges)
    next_nodes = [node.with_data(color=color) if node.id == node_id else node for node in nodes]
    return NodeActionOutcome(nodes=next_nodes, edges=edges)


# -------- 端口菜单与连线 --------

def disconnect_port(
    nodes: List[NodeModel],
    edges: List[EdgeModel],
    node_id: str,
    handle_id: str,
    side: str,
) -> NodeActionOutcome:
    """断开端口上的全部连线

    Args:
        side: "source"（输出端口）或 "target"（输入端口）
    """
    normalized_handle = normalize_handle(handle_id) or handle_id
    kept, removed_ids = remove_port_connections(edges, node_id, normalized_handle, is_input=side == SIDE_TARGET)
    if not removed_ids:
        return _unchanged(nodes, edges)
    return NodeActionOutcome(nodes=nodes, edges=kept)


def on_connect(
    candidate: ConnectionCandidate,
    nodes: List[NodeModel],
    edges: List[EdgeModel],
) -> NodeActionOutcome:
    """用户拖出一条连线：归一化端口后校验，合法则加入（四元组相同的连线不重复添加）。"""
    normalized = ConnectionCandidate(
        source=candidate.source,
        target=candidate.target,
        source_handle=normalize_handle(candidate.source_handle),
        target_handle=normalize_handle(candidate.target_handle),
    )
    validation = validate_connection(normalized, nodes, edges)
    if not validation.valid:
        return _unchanged(nodes, edges, CONNECTION_HINT_BY_REASON[validation.reason])
    edge = EdgeModel(
        id=create_edge_id(),
        src_node=normalized.source,
        src_port=normalized.source_handle,
        dst_node=normalized.target,
        dst_port=normalized.target_handle,
    )
    return NodeActionOutcome(nodes=nodes, edges=add_edge_if_absent(edges, edge))


__all__ = [
    "NodeActionOutcome",
    "create_node_from_canvas",
    "create_node_from_group_box",
    "create_node_from_port",
    "delete_node",
    "duplicate_node",
    "detach_node_from_box",
    "update_node_color_theme",
    "disconnect_port",
    "on_connect",
]
