"""编辑器布局状态（EditorLayoutState v1）

逻辑导出只保存节点的业务数据，坐标、尺寸、折叠等编辑器信息单独保存在这份状态里：
    {"version": 1, "activeGraphId": "...",
     "graphs": [{"id": "...", "nodes": [{"id", "x", "y", "width"?, "height"?,
                                         "parentId"?, "extent"?, "zIndex"?, "collapsed"?}]}]}
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from nodegraph.graph.models.graph_model import GraphDocument, NodeModel, ProjectSnapshot
from nodegraph.graph.models.graph_serialization import is_finite_number
from nodegraph.layout.geometry import fallback_grid_position
from nodegraph.utils.logging.logger import log_debug

EDITOR_STATE_VERSION = 1


@dataclass
class EditorNodeState:
    id: str
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None
    parent_id: Optional[str] = None
    extent: Optional[str] = None
    z_index: Optional[float] = None
    collapsed: Optional[bool] = None

    def serialize(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "x": self.x, "y": self.y}
        if self.width is not None:
            payload["width"] = self.width
        if self.height is not None:
            payload["height"] = self.height
        if self.parent_id:
            payload["parentId"] = self.parent_id
        if self.extent == "parent":
            payload["extent"] = "parent"
        if self.z_index is not None:
            payload["zIndex"] = self.z_index
        if self.collapsed is not None:
            payload["collapsed"] = self.collapsed
        return payload


@dataclass
class EditorGraphState:
    id: str
    nodes: List[EditorNodeState] = field(default_factory=list)

    def serialize(self) -> Dict[str, Any]:
        return {"id": self.id, "nodes": [node.serialize() for node in self.nodes]}


@dataclass
class EditorLayoutState:
    graphs: List[EditorGraphState] = field(default_factory=list)
    active_graph_id: Optional[str] = None
    version: int = EDITOR_STATE_VERSION

    def get_graph(self, graph_id: str) -> Optional[EditorGraphState]:
        for graph in self.graphs:
            if graph.id == graph_id:
                return graph
        return None

    def serialize(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"version": self.version}
        if self.active_graph_id:
            payload["activeGraphId"] = self.active_graph_id
        payload["graphs"] = [graph.serialize() for graph in self.graphs]
        return payload


# -------- 构建 --------

def _coordinate(value: Any) -> float:
    return value if is_finite_number(value) else 0


def _positive(value: Any) -> Optional[float]:
    return value if is_finite_number(value) and value > 0 else None


def _build_node_state(node: NodeModel) -> EditorNodeState:
    parent_id = node.parent_id if isinstance(node.parent_id, str) and node.parent_id.strip() else None
    return EditorNodeState(
        id=node.id,
        x=_coordinate(node.pos[0]),
        y=_coordinate(node.pos[1]),
        width=_positive(node.width),
        height=_positive(node.height),
        parent_id=parent_id,
        extent="parent" if node.extent == "parent" else None,
        z_index=node.z_index if is_finite_number(node.z_index) else None,
        # 只记录折叠状态为 True 的节点
        collapsed=True if node.data.get("collapsed") is True else None,
    )


def build_editor_state(snapshot: ProjectSnapshot) -> EditorLayoutState:
    return EditorLayoutState(
        active_graph_id=snapshot.active_graph_id,
        graphs=[
            EditorGraphState(id=graph.graph_id, nodes=[_build_node_state(node) for node in graph.nodes])
            for graph in snapshot.graphs
        ],
    )


# -------- 读取 --------

def _trimmed_id(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _normalize_node_state(source: Any) -> Optional[EditorNodeState]:
    if not isinstance(source, dict):
        return None
    node_id = _trimmed_id(source.get("id"))
    if not node_id:
        return None
    x = source.get("x")
    y = source.get("y")
    if not is_finite_number(x) or not is_finite_number(y):
        return None
    parent_id = _trimmed_id(source.get("parentId"))
    collapsed = source.get("collapsed")
    z_index = source.get("zIndex")
    return EditorNodeState(
        id=node_id,
        x=x,
        y=y,
        width=_positive(source.get("width")),
        height=_positive(source.get("height")),
        parent_id=parent_id or None,
        extent="parent" if source.get("extent") == "parent" else None,
        z_index=z_index if is_finite_number(z_index) else None,
        collapsed=collapsed if isinstance(collapsed, bool) else None,
    )


def _normalize_graph_state(source: Any) -> Optional[EditorGraphState]:
    if not isinstance(source, dict):
        return None
    graph_id = _trimmed_id(source.get("id"))
    if not graph_id:
        return None
    raw_nodes = source.get("nodes") if isinstance(source.get("nodes"), list) else []
    used_ids = set()
    nodes: List[EditorNodeState] = []
    for raw_node in raw_nodes:
        node_state = _normalize_node_state(raw_node)
        # 同一节点ID只保留第一条
        if node_state is None or node_state.id in used_ids:
            continue
        used_ids.add(node_state.id)
        nodes.append(node_state)
    return EditorGraphState(id=graph_id, nodes=nodes)


def normalize_editor_state(source: Any) -> Optional[EditorLayoutState]:
    """宽松读取布局状态；既没有图也没有 activeGraphId 时返回 None。"""
    if not isinstance(source, dict):
        return None
    raw_graphs = source.get("graphs") if isinstance(source.get("graphs"), list) else []
    used_ids = set()
    graphs: List[EditorGraphState] = []
    for raw_graph in raw_graphs:
        graph_state = _normalize_graph_state(raw_graph)
        if graph_state is None or graph_state.id in used_ids:
            continue
        used_ids.add(graph_state.id)
        graphs.append(graph_state)
    active_graph_id = _trimmed_id(source.get("activeGraphId"))
    if not graphs and not active_graph_id:
        return None
    return EditorLayoutState(graphs=graphs, active_graph_id=active_graph_id or None)


# -------- 合并 --------

def _resolve_position(node: NodeModel, node_state: Optional[EditorNodeState], index: int) -> tuple:
    if node_state is not None:
        return (node_state.x, node_state.y)
    if is_finite_number(node.pos[0]) and is_finite_number(node.pos[1]):
        return node.pos
    return fallback_grid_position(index)


def _first_defined(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _apply_node_state(node: NodeModel, node_state: Optional[EditorNodeState], index: int) -> NodeModel:
    data = node.data
    if node_state is not None and node_state.collapsed is not None:
        data = {**node.data, "collapsed": node_state.collapsed}
    state_width = node_state.width if node_state is not None else None
    state_height = node_state.height if node_state is not None else None
    return replace(
        node,
        pos=_resolve_position(node, node_state, index),
        width=_first_defined(state_width, _positive(node.width)),
        height=_first_defined(state_height, _positive(node.height)),
        parent_id=_first_defined(node_state.parent_id if node_state else None, node.parent_id),
        extent=_first_defined(node_state.extent if node_state else None, node.extent),
        z_index=_first_defined(node_state.z_index if node_state else None, node.z_index),
        data=data,
    )


def apply_editor_state_to_graphs(
    graphs: List[GraphDocument],
    editor_state: Optional[EditorLayoutState],
) -> List[GraphDocument]:
    """把布局状态合并回节点图

    坐标优先取布局状态，其次取节点自身坐标，最后按下标落到回退网格；
    尺寸、父节点、层级与折叠状态按同样的优先级合并。
    """
    if editor_state is None or not editor_state.graphs:
        return graphs
    graph_state_by_id = {graph_state.id: graph_state for graph_state in editor_state.graphs}
    result: List[GraphDocument] = []
    for graph in graphs:
        graph_state = graph_state_by_id.get(graph.graph_id)
        if graph_state is None:
            result.append(graph)
            continue
        node_state_by_id = {node_state.id: node_state for node_state in graph_state.nodes}
        next_nodes = [
            _apply_node_state(node, node_state_by_id.get(node.id), index)
            for index, node in enumerate(graph.nodes)
        ]
        log_debug(
            "PERSISTENCE_VERBOSE",
            "[布局状态] 图 {}：{} / {} 个节点有布局记录",
            graph.graph_id,
            sum(1 for node in graph.nodes if node.id in node_state_by_id),
            len(graph.nodes),
        )
        result.append(replace(graph, nodes=next_nodes))
    return result


__all__ = [
    "EDITOR_STATE_VERSION",
    "EditorNodeState",
    "EditorGraphState",
    "EditorLayoutState",
    "build_editor_state",
    "normalize_editor_state",
    "apply_editor_state_to_graphs",
]
