"""节点图（流程）管理：新建、复制、删除、重命名、切换

所有动作作用于 ProjectSnapshot，返回新的快照与可选提示；传入快照不会被修改。
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from typing import Dict, Optional

from nodegraph.graph.models.graph_model import GraphDocument, ProjectSnapshot
from nodegraph.mutation.hints import HINT_KEEP_AT_LEAST_ONE_GRAPH, hint_text
from nodegraph.nodes.node_factory import create_starter_graph
from nodegraph.utils.id_utils import create_edge_id, create_graph_id, create_node_id
from nodegraph.utils.logging.logger import log_info

GRAPH_NAME_MAX_LENGTH = 40
UNTITLED_GRAPH_NAME = "Untitled"
COPY_SUFFIX = "Copy"


@dataclass
class GraphActionOutcome:
    snapshot: ProjectSnapshot
    hint: Optional[str] = None
    changed: bool = False


def _flow_name(index: int) -> str:
    return f"Flow {index}"


def create_graph(snapshot: ProjectSnapshot) -> GraphActionOutcome:
    """新建一张初始节点图并设为当前图。名称为 "Flow {n}"，n 从图数量+1 起避开重名。"""
    existing_names = {graph.graph_name for graph in snapshot.graphs}
    index = len(snapshot.graphs) + 1
    while _flow_name(index) in existing_names:
        index += 1
    graph = create_starter_graph(_flow_name(index))
    log_info("[节点图] 新建 {}（{}）", graph.graph_name, graph.graph_id)
    return GraphActionOutcome(
        snapshot=replace(snapshot, active_graph_id=graph.graph_id, graphs=[*snapshot.graphs, graph]),
        changed=True,
    )


def duplicate_graph(snapshot: ProjectSnapshot) -> GraphActionOutcome:
    """复制当前图：节点与连线全部换新ID，连线端点与分组归属按新ID重映射。"""
    source = snapshot.get_graph(snapshot.active_graph_id)
    if source is None:
        return GraphActionOutcome(snapshot=snapshot)

    node_id_map: Dict[str, str] = {}
    for node in source.nodes:
        node_id_map[node.id] = create_node_id()

    cloned_nodes = [
        replace(
            node,
            id=node_id_map[node.id],
            data=copy.deepcopy(node.data),
            group_box_id=node_id_map.get(node.group_box_id, node.group_box_id) if node.group_box_id else None,
            parent_id=node_id_map.get(node.parent_id, node.parent_id) if node.parent_id else None,
        )
        for node in source.nodes
    ]
    cloned_edges = [
        replace(
            edge,
            id=create_edge_id(),
            src_node=node_id_map.get(edge.src_node, edge.src_node),
            dst_node=node_id_map.get(edge.dst_node, edge.dst_node),
        )
        for edge in source.edges
    ]
    duplicated = GraphDocument(
        graph_id=create_graph_id(),
        graph_name=f"{source.graph_name} {COPY_SUFFIX}",
        nodes=cloned_nodes,
        edges=cloned_edges,
    )
    log_info("[节点图] 复制 {} → {}", source.graph_id, duplicated.graph_id)
    return GraphActionOutcome(
        snapshot=replace(snapshot, active_graph_id=duplicated.graph_id, graphs=[*snapshot.graphs, duplicated]),
        changed=True,
    )


def delete_graph(snapshot: ProjectSnapshot) -> GraphActionOutcome:
    """删除当前图；只剩一张图时拒绝。删除后选中同位置的图，没有则选前一张。"""
    if len(snapshot.graphs) <= 1:
        return GraphActionOutcome(snapshot=snapshot, hint=hint_text(HINT_KEEP_AT_LEAST_ONE_GRAPH))
    current_index = next(
        (index for index, graph in enumerate(snapshot.graphs) if graph.graph_id == snapshot.active_graph_id),
        -1,
    )
    if current_index < 0:
        return GraphActionOutcome(snapshot=snapshot)
    next_graphs = [graph for graph in snapshot.graphs if graph.graph_id != snapshot.active_graph_id]
    if current_index < len(next_graphs):
        next_active = next_graphs[current_index]
    else:
        next_active = next_graphs[max(0, current_index - 1)]
    log_info("[节点图] 删除 {}，切换到 {}", snapshot.active_graph_id, next_active.graph_id)
    return GraphActionOutcome(
        snapshot=replace(snapshot, active_graph_id=next_active.graph_id, graphs=next_graphs),
        changed=True,
    )


def normalize_graph_name_input(name: str) -> str:
    return name.lstrip()[:GRAPH_NAME_MAX_LENGTH] or UNTITLED_GRAPH_NAME


def rename_active_graph(snapshot: ProjectSnapshot, name: str) -> GraphActionOutcome:
    """重命名当前图：去掉前导空白、截断到 40 个字符，为空时用 "Untitled"。"""
    next_name = normalize_graph_name_input(name)
    next_graphs = [
        replace(graph, graph_name=next_name) if graph.graph_id == snapshot.active_graph_id else graph
        for graph in snapshot.graphs
    ]
    return GraphActionOutcome(snapshot=replace(snapshot, graphs=next_graphs), changed=True)


def switch_graph(snapshot: ProjectSnapshot, graph_id: str) -> GraphActionOutcome:
    if snapshot.get_graph(graph_id) is None or graph_id == snapshot.active_graph_id:
        return GraphActionOutcome(snapshot=snapshot)
    return GraphActionOutcome(snapshot=replace(snapshot, active_graph_id=graph_id), changed=True)


__all__ = [
    "GraphActionOutcome",
    "create_graph",
    "duplicate_graph",
    "delete_graph",
    "rename_active_graph",
    "switch_graph",
    "normalize_graph_name_input",
]
