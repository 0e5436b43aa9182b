from __future__ import annotations

from typing import List, Optional, Tuple

from nodegraph.graph.handles import (
    ROLE_IN,
    SEMANTIC_CONDITION,
    SEMANTIC_CONTROL,
    branch_source_handle,
    case_source_handle,
    case_target_handle,
    status_source_handle,
)
from nodegraph.graph.models.graph_model import EdgeModel, GraphDocument, NodeModel
from nodegraph.graph.models.node_items import (
    BRANCH_KINDS,
    normalize_branches,
    normalize_cases,
    normalize_status_codes,
)
from nodegraph.nodes.node_catalog import CONTROL_IN, CONTROL_OUT, get_node_catalog_item, get_node_port_handle
from nodegraph.utils.id_utils import (
    create_binding_id,
    create_branch_id,
    create_fetch_status_id,
    create_graph_id,
    create_node_id,
    create_switch_case_id,
)


def create_node(kind: str, pos: Tuple[float, float], node_id: Optional[str] = None) -> NodeModel:
    """按目录新建节点：label/kind + 目录默认值，再补齐需要独立ID的条目列表。"""
    catalog_item = get_node_catalog_item(kind)
    data = {"label": catalog_item.label, **catalog_item.default_data()}

    if kind == "switch":
        data["collapsed"] = False
        data["cases"] = [
            {"id": create_switch_case_id(), "label": "case-1"},
            {"id": create_switch_case_id(), "label": "case-2"},
        ]
    elif kind == "fetch":
        data["collapsed"] = False
        data["value"] = ""
        data["method"] = "GET"
        data["statusCodes"] = [
            {"id": create_fetch_status_id(), "code": "200"},
            {"id": create_fetch_status_id(), "code": "201"},
        ]
    elif kind in BRANCH_KINDS:
        data["collapsed"] = False
        data["branches"] = [
            {"id": create_branch_id(), "label": "branch-1"},
            {"id": create_branch_id(), "label": "branch-2"},
        ]
    elif kind == "subFlowCall":
        data["inputBindings"] = [{"id": create_binding_id(), "key": "payload", "value": ""}]
        data["outputBindings"] = [{"id": create_binding_id(), "key": "result", "value": ""}]

    return NodeModel(
        id=node_id or create_node_id(),
        kind=kind,
        pos=(float(pos[0]), float(pos[1])),
        data=data,
    )


def get_default_handle_for_node(node: NodeModel, role: str, semantic: str) -> Optional[str]:
    """新节点与某个端口自动连线时，新节点这一侧使用的端口。

    带动态条目的节点（switch/fetch/parallel/race）优先落到第一个条目上。
    """
    if role == ROLE_IN:
        if semantic == SEMANTIC_CONDITION and node.kind == "switch":
            cases = normalize_cases(node.data.get("cases"))
            if not cases:
                return None
            return case_target_handle(cases[0]["id"])
        return get_node_port_handle(node.kind, role, semantic)

    if semantic == SEMANTIC_CONTROL:
        if node.kind == "if":
            return "out.control.true"
        if node.kind == "tryCatch":
            return "out.control.try"
        if node.kind == "forEach":
            return "out.control.body"
        if node.kind in BRANCH_KINDS:
            branches = normalize_branches(node.data.get("branches"))
            if branches:
                return branch_source_handle(branches[0]["id"])
            return "out.control.done"
        if node.kind == "switch":
            cases = normalize_cases(node.data.get("cases"))
            if not cases:
                return "out.control.default"
            return case_source_handle(cases[0]["id"])
        if node.kind == "fetch":
            status_codes = normalize_status_codes(node.data.get("statusCodes"))
            if status_codes:
                return status_source_handle(status_codes[0]["id"])
            return "out.control.error-request"

    return get_node_port_handle(node.kind, role, semantic)


# -------- 初始节点图 --------

def _create_starter_nodes() -> List[NodeModel]:
    return [
        create_node("start", (100, 180)),
        create_node("switch", (380, 120)),
        create_node("process", (720, 120)),
        create_node("end", (980, 250)),
    ]


def _create_starter_edges(nodes: List[NodeModel]) -> List[EdgeModel]:
    start_node, switch_node, process_node, end_node = nodes
    switch_cases = normalize_cases(switch_node.data.get("cases"))
    switch_out = case_source_handle(switch_cases[0]["id"]) if switch_cases else "out.control.default"
    return [
        EdgeModel("e-initial-1", start_node.id, CONTROL_OUT, switch_node.id, CONTROL_IN),
        EdgeModel("e-initial-2", switch_node.id, switch_out, process_node.id, CONTROL_IN),
        EdgeModel("e-initial-3", process_node.id, CONTROL_OUT, end_node.id, CONTROL_IN),
    ]


def create_starter_graph(name: str) -> GraphDocument:
    """四节点骨架：start → switch(case-1) → process → end。"""
    nodes = _create_starter_nodes()
    return GraphDocument(
        graph_id=create_graph_id(),
        graph_name=name,
        nodes=nodes,
        edges=_create_starter_edges(nodes),
    )


__all__ = [
    "create_node",
    "get_default_handle_for_node",
    "create_starter_graph",
]
