"""逻辑导出与回填

逻辑导出只含业务数据：节点 {id, type, data}（去掉编辑器专用字段，不含坐标），
连线做端口归一化。分组归属保留在 data.groupBoxId。

组合文档把逻辑与编辑器布局放在一起交给外部消费者：
    {"logic": {"activeGraphId", "graphs"}, "x-nodeGraphEditor": EditorLayoutState}
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import (
    DEFAULT_NODE_TYPE,
    EDITOR_ONLY_NODE_DATA_FIELDS,
    GraphDocument,
    NodeModel,
    ProjectSnapshot,
)
from nodegraph.graph.models.graph_serialization import serialize_edge, serialize_node_data
from nodegraph.persistence.editor_state import (
    EditorLayoutState,
    apply_editor_state_to_graphs,
    build_editor_state,
    normalize_editor_state,
)
from nodegraph.persistence.project_snapshot import normalize_graph_documents

NODE_GRAPH_EDITOR_STATE_KEY = "x-nodeGraphEditor"
LOGIC_KEY = "logic"


def strip_editor_only_data_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key not in EDITOR_ONLY_NODE_DATA_FIELDS}


def _serialize_logic_node(node: NodeModel) -> Dict[str, Any]:
    node_type = node.node_type.strip() if isinstance(node.node_type, str) else ""
    return {
        "id": node.id,
        "type": node_type or DEFAULT_NODE_TYPE,
        "data": strip_editor_only_data_fields(serialize_node_data(node)),
    }


def serialize_graphs_for_logic(graphs: List[GraphDocument]) -> List[Dict[str, Any]]:
    return [
        {
            "id": graph.graph_id,
            "name": graph.graph_name,
            "nodes": [_serialize_logic_node(node) for node in graph.nodes],
            "edges": [serialize_edge(edge.normalized()) for edge in graph.edges],
        }
        for graph in graphs
    ]


def hydrate_logic_graphs(logic_graphs: Any, editor_state: Optional[EditorLayoutState]) -> List[GraphDocument]:
    """逻辑导出 + 布局状态 → 完整节点图。

    没有布局记录的节点按下标落到回退网格 (0,0) (220,0) (440,0) (660,0) (0,140) ...
    """
    graphs = normalize_graph_documents(
        logic_graphs,
        create_fallback_when_empty=True,
        fallback_graph_name=settings.DEFAULT_GRAPH_NAME,
    )
    return apply_editor_state_to_graphs(graphs, editor_state)


def build_project_document(snapshot: ProjectSnapshot) -> Dict[str, Any]:
    return {
        LOGIC_KEY: {
            "activeGraphId": snapshot.active_graph_id,
            "graphs": serialize_graphs_for_logic(snapshot.graphs),
        },
        NODE_GRAPH_EDITOR_STATE_KEY: build_editor_state(snapshot).serialize(),
    }


def read_project_document(document: Any) -> ProjectSnapshot:
    """读取组合文档；activeGraphId 依次取逻辑部分、布局状态，无效时取第一张图。"""
    logic = document.get(LOGIC_KEY) if isinstance(document, dict) else None
    if not isinstance(logic, dict):
        logic = {}
    editor_state = normalize_editor_state(
        document.get(NODE_GRAPH_EDITOR_STATE_KEY) if isinstance(document, dict) else None
    )
    graphs = hydrate_logic_graphs(logic.get("graphs"), editor_state)

    candidates = [logic.get("activeGraphId")]
    if editor_state is not None:
        candidates.append(editor_state.active_graph_id)
    graph_ids = {graph.graph_id for graph in graphs}
    active_graph_id = graphs[0].graph_id
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip() in graph_ids:
            active_graph_id = candidate.strip()
            break
    return ProjectSnapshot(active_graph_id=active_graph_id, graphs=graphs)


__all__ = [
    "NODE_GRAPH_EDITOR_STATE_KEY",
    "LOGIC_KEY",
    "strip_editor_only_data_fields",
    "serialize_graphs_for_logic",
    "hydrate_logic_graphs",
    "build_project_document",
    "read_project_document",
]
