"""节点图序列化模块

负责把内存中的节点/连线/节点图转换为存储格式（react-flow 风格的 camelCase 字典）。
反方向（宽松读取 + 规范化）见 `nodegraph.persistence.node_normalization`。

注意：节点与连线保持原有顺序输出，不做排序；节点下标参与回退坐标的计算。
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from nodegraph.graph.models.graph_model import EdgeModel, GraphDocument, NodeModel, ProjectSnapshot


def is_finite_number(value: Any) -> bool:
    # bool 是 int 的子类，需要排除
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def serialize_node_data(node: "NodeModel") -> Dict[str, Any]:
    """节点 data：写回 kind 与 groupBoxId。"""
    payload: Dict[str, Any] = dict(node.data)
    payload["kind"] = node.kind
    if node.group_box_id:
        payload["groupBoxId"] = node.group_box_id
    else:
        payload.pop("groupBoxId", None)
    return payload


def serialize_node(node: "NodeModel") -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": node.id,
        "type": node.node_type,
        "position": {"x": node.pos[0], "y": node.pos[1]},
        "data": serialize_node_data(node),
    }
    if is_finite_number(node.width) and node.width > 0:
        payload["width"] = node.width
    if is_finite_number(node.height) and node.height > 0:
        payload["height"] = node.height
    if node.parent_id:
        payload["parentId"] = node.parent_id
    if node.extent == "parent":
        payload["extent"] = "parent"
    if is_finite_number(node.z_index):
        payload["zIndex"] = node.z_index
    return payload


def serialize_edge(edge: "EdgeModel") -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": edge.id,
        "source": edge.src_node,
        "target": edge.dst_node,
        "type": edge.edge_type,
    }
    if edge.src_port:
        payload["sourceHandle"] = edge.src_port
    if edge.dst_port:
        payload["targetHandle"] = edge.dst_port
    return payload


def serialize_graph(graph: "GraphDocument") -> dict:
    """序列化节点图为字典

    Args:
        graph: 节点图

    Returns:
        {"id", "name", "nodes", "edges"}
    """
    return {
        "id": graph.graph_id,
        "name": graph.graph_name,
        "nodes": [serialize_node(node) for node in graph.nodes],
        "edges": [serialize_edge(edge) for edge in graph.edges],
    }


def serialize_snapshot(snapshot: "ProjectSnapshot") -> dict:
    return {
        "version": snapshot.version,
        "activeGraphId": snapshot.active_graph_id,
        "graphs": [serialize_graph(graph) for graph in snapshot.graphs],
    }
