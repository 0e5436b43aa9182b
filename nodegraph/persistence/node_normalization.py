"""存档节点/连线的宽松读取

存档来自旧版本、手工编辑或外部工具，字段可能缺失或类型不对。
这里把任意 dict 规范成 NodeModel/EdgeModel：缺省值补齐、非法值丢弃，不抛异常。
"""
from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any, Dict, List, Optional

from nodegraph.graph.models.graph_model import (
    DEFAULT_EDGE_TYPE,
    DEFAULT_NODE_TYPE,
    GROUP_BOX_KIND,
    EdgeModel,
    NodeModel,
)
from nodegraph.graph.handles import normalize_handle
from nodegraph.graph.models.graph_serialization import is_finite_number
from nodegraph.graph.models.node_items import (
    BINDING_FIELDS,
    BRANCH_KINDS,
    KEY_VALUE_MIN_ONE_KINDS,
    normalize_binding_entries,
    normalize_branches,
    normalize_cases,
    normalize_key_value_entries,
    normalize_status_codes,
)
from nodegraph.layout.geometry import fallback_grid_position
from nodegraph.nodes.node_catalog import get_node_catalog_item
from nodegraph.utils.id_utils import create_edge_id, create_node_id
from nodegraph.utils.logging.logger import log_debug, log_warn

DEFAULT_NODE_KIND = "process"


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _normalize_node_data(kind: str, raw_data: Dict[str, Any]) -> Dict[str, Any]:
    defaults = get_node_catalog_item(kind).default_data()
    data: Dict[str, Any] = {**defaults, **copy.deepcopy(raw_data)}
    data["collapsed"] = bool(raw_data.get("collapsed"))
    # kind 与 groupBoxId 由 NodeModel 字段承载
    data.pop("kind", None)
    data.pop("groupBoxId", None)

    if kind == "switch":
        cases = normalize_cases(raw_data.get("cases"))
        data["cases"] = cases or [{"id": "case-1", "label": "case-1"}]
    if kind == "fetch":
        status_codes = normalize_status_codes(raw_data.get("statusCodes"))
        data["statusCodes"] = status_codes or [{"id": "status-200", "code": "200"}]
        data["method"] = raw_data.get("method") or "GET"
    if kind in BRANCH_KINDS:
        branches = normalize_branches(raw_data.get("branches"))
        data["branches"] = branches or [{"id": "branch-1", "label": "branch-1"}]
    elif isinstance(raw_data.get("branches"), list):
        data["branches"] = normalize_branches(raw_data.get("branches"))

    if isinstance(data.get("keyValueEntries"), list):
        entries = normalize_key_value_entries(data.get("keyValueEntries"))
        if kind in KEY_VALUE_MIN_ONE_KINDS and not entries:
            entries = [{"id": "entry-1", "key": "key", "value": "value"}]
        data["keyValueEntries"] = entries

    if kind == "subFlowCall":
        input_bindings = normalize_binding_entries(raw_data.get("inputBindings"))
        output_bindings = normalize_binding_entries(raw_data.get("outputBindings"))
        data["inputBindings"] = input_bindings or [{"id": "input-1", "key": "payload", "value": ""}]
        data["outputBindings"] = output_bindings or [{"id": "output-1", "key": "result", "value": ""}]
    else:
        for binding in BINDING_FIELDS:
            if isinstance(raw_data.get(binding), list):
                data[binding] = normalize_binding_entries(raw_data.get(binding))
    return data


def _positive_number(value: Any) -> Optional[float]:
    if is_finite_number(value) and value > 0:
        return value
    return None


def _resolve_position(raw: Dict[str, Any], index: int) -> tuple:
    position = raw.get("position")
    if isinstance(position, dict):
        x = position.get("x")
        y = position.get("y")
        if is_finite_number(x) and is_finite_number(y):
            return (x, y)
    return fallback_grid_position(index)


def normalize_persisted_node(raw: Dict[str, Any], index: int) -> NodeModel:
    """把存档中的一个节点 dict 规范成 NodeModel

    Args:
        raw: 存档节点（react-flow 风格）
        index: 节点在图中的下标，坐标缺失时用于回退网格

    Returns:
        NodeModel；kind 缺失时视为 process，id 缺失时生成新ID
    """
    raw_data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
    kind = _text(raw_data.get("kind")) or DEFAULT_NODE_KIND
    node_id = _text(raw.get("id"))
    if not node_id:
        node_id = create_node_id()
        log_warn("[存档] 第 {} 个节点缺少 id，已生成 {}", index, node_id)

    node_type = raw.get("type")
    extent = raw.get("extent")
    z_index = raw.get("zIndex")
    parent_id = _text(raw.get("parentId"))
    return NodeModel(
        id=node_id,
        kind=kind,
        pos=_resolve_position(raw, index),
        data=_normalize_node_data(kind, raw_data),
        width=_positive_number(raw.get("width")),
        height=_positive_number(raw.get("height")),
        group_box_id=_text(raw_data.get("groupBoxId")) or None,
        node_type=node_type.strip() if isinstance(node_type, str) and node_type.strip() else DEFAULT_NODE_TYPE,
        parent_id=parent_id or None,
        extent="parent" if extent == "parent" else None,
        z_index=z_index if is_finite_number(z_index) else None,
    )


def normalize_persisted_edge(raw: Dict[str, Any]) -> Optional[EdgeModel]:
    """规范存档中的一条连线；缺少起点或终点时返回 None。"""
    source = _text(raw.get("source"))
    target = _text(raw.get("target"))
    if not source or not target:
        log_warn("[存档] 丢弃缺少端点的连线：{}", raw.get("id"))
        return None
    edge_id = _text(raw.get("id")) or create_edge_id()
    edge_type = raw.get("type")
    return EdgeModel(
        id=edge_id,
        src_node=source,
        src_port=normalize_handle(raw.get("sourceHandle") if isinstance(raw.get("sourceHandle"), str) else None),
        dst_node=target,
        dst_port=normalize_handle(raw.get("targetHandle") if isinstance(raw.get("targetHandle"), str) else None),
        edge_type=edge_type if isinstance(edge_type, str) and edge_type else DEFAULT_EDGE_TYPE,
    )


def normalize_persisted_nodes(raw_nodes: Any) -> List[NodeModel]:
    """规范节点列表：非 dict 条目跳过，重复ID的后来者换新ID。"""
    if not isinstance(raw_nodes, list):
        return []
    nodes: List[NodeModel] = []
    used_ids = set()
    for index, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict):
            log_warn("[存档] 跳过非法节点条目（下标 {}）", index)
            continue
        node = normalize_persisted_node(raw, index)
        if node.id in used_ids:
            fresh_id = create_node_id()
            log_warn("[存档] 节点ID重复：{}，已改为 {}", node.id, fresh_id)
            node = replace(node, id=fresh_id)
        used_ids.add(node.id)
        nodes.append(node)
    return nodes


def normalize_persisted_edges(raw_edges: Any, nodes: List[NodeModel]) -> List[EdgeModel]:
    """规范连线列表并剪除端点不在图中的连线。"""
    if not isinstance(raw_edges, list):
        return []
    node_ids = {node.id for node in nodes}
    edges: List[EdgeModel] = []
    for raw in raw_edges:
        if not isinstance(raw, dict):
            continue
        edge = normalize_persisted_edge(raw)
        if edge is None:
            continue
        if edge.src_node not in node_ids or edge.dst_node not in node_ids:
            log_debug("PERSISTENCE_VERBOSE", "[存档] 剪除悬空连线 {}", edge.id)
            continue
        edges.append(edge)
    return edges


def clear_dangling_group_box_ids(nodes: List[NodeModel]) -> List[NodeModel]:
    """group_box_id 必须指向同图中存在的分组框，否则清除。"""
    group_ids = {node.id for node in nodes if node.kind == GROUP_BOX_KIND}
    result: List[NodeModel] = []
    for node in nodes:
        if node.group_box_id and (node.kind == GROUP_BOX_KIND or node.group_box_id not in group_ids):
            log_debug("PERSISTENCE_VERBOSE", "[存档] 清除失效分组归属 {} → {}", node.id, node.group_box_id)
            node = node.with_group(None)
        result.append(node)
    return result


__all__ = [
    "DEFAULT_NODE_KIND",
    "normalize_persisted_node",
    "normalize_persisted_edge",
    "normalize_persisted_nodes",
    "normalize_persisted_edges",
    "clear_dangling_group_box_ids",
]
