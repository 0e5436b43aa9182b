from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from nodegraph.graph.handles import normalize_handle

GROUP_BOX_KIND = "groupBox"
STICKY_NOTE_KIND = "stickyNote"
DEFAULT_NODE_TYPE = "graphNode"
DEFAULT_EDGE_TYPE = "smoothstep"

PROJECT_SNAPSHOT_VERSION = 2

# 仅编辑器使用的节点数据字段：不进入逻辑导出
EDITOR_ONLY_NODE_DATA_FIELDS: Tuple[str, ...] = (
    "collapsed",
    "validationMessage",
    "autoBoxWidth",
    "autoBoxHeight",
    "autoNoteWidth",
    "autoNoteHeight",
)


@dataclass
class NodeModel:
    """节点图中的一个节点。

    `data` 保存种类相关的负载（label/value/cases/...）以及编辑器专用字段；
    `kind` 与 `group_box_id` 单独成字段，序列化时写回 data["kind"] / data["groupBoxId"]。
    """

    id: str
    kind: str
    pos: Tuple[float, float] = (0.0, 0.0)
    data: Dict[str, Any] = field(default_factory=dict)
    width: Optional[float] = None
    height: Optional[float] = None
    # 所属分组框节点ID；为空表示不在任何分组内
    group_box_id: Optional[str] = None
    node_type: str = DEFAULT_NODE_TYPE
    parent_id: Optional[str] = None
    extent: Optional[str] = None  # 仅允许 "parent"
    z_index: Optional[float] = None

    # 交互期状态（不持久化）
    dragging: bool = False
    resizing: bool = False
    selected: bool = False

    @property
    def label(self) -> str:
        value = self.data.get("label")
        return value if isinstance(value, str) else ""

    @property
    def is_group_box(self) -> bool:
        return self.kind == GROUP_BOX_KIND

    @property
    def is_sticky_note(self) -> bool:
        return self.kind == STICKY_NOTE_KIND

    @property
    def collapsed(self) -> bool:
        return bool(self.data.get("collapsed"))

    def with_pos(self, x: float, y: float) -> "NodeModel":
        return replace(self, pos=(x, y))

    def with_data(self, **updates: Any) -> "NodeModel":
        """返回合并了 data 更新的新节点；值为 None 的键会被删除。"""
        next_data = dict(self.data)
        for key, value in updates.items():
            if value is None:
                next_data.pop(key, None)
            else:
                next_data[key] = value
        return replace(self, data=next_data)

    def with_group(self, group_box_id: Optional[str]) -> "NodeModel":
        return replace(self, group_box_id=group_box_id or None)


@dataclass(frozen=True)
class EdgeModel:
    id: str
    src_node: str
    src_port: Optional[str]
    dst_node: str
    dst_port: Optional[str]
    edge_type: str = DEFAULT_EDGE_TYPE

    def same_endpoints(self, other: "EdgeModel") -> bool:
        return (
            self.src_node == other.src_node
            and self.src_port == other.src_port
            and self.dst_node == other.dst_node
            and self.dst_port == other.dst_port
        )

    def touches(self, node_id: str) -> bool:
        return self.src_node == node_id or self.dst_node == node_id

    def normalized(self) -> "EdgeModel":
        return replace(
            self,
            src_port=normalize_handle(self.src_port),
            dst_port=normalize_handle(self.dst_port),
        )


@dataclass
class GraphDocument:
    graph_id: str
    graph_name: str
    nodes: List[NodeModel] = field(default_factory=list)
    edges: List[EdgeModel] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[NodeModel]:
        return find_node(self.nodes, node_id)

    def with_content(self, nodes: List[NodeModel], edges: List[EdgeModel]) -> "GraphDocument":
        return replace(self, nodes=list(nodes), edges=list(edges))

    def serialize(self) -> dict:
        """序列化节点图为字典（ProjectSnapshot 中的单图结构）"""
        from nodegraph.graph.models.graph_serialization import serialize_graph
        return serialize_graph(self)


@dataclass
class ProjectSnapshot:
    """一个项目的全部节点图；至少包含一张图。"""

    active_graph_id: str
    graphs: List[GraphDocument] = field(default_factory=list)
    version: int = PROJECT_SNAPSHOT_VERSION

    def get_graph(self, graph_id: str) -> Optional[GraphDocument]:
        for graph in self.graphs:
            if graph.graph_id == graph_id:
                return graph
        return None

    @property
    def active_graph(self) -> GraphDocument:
        graph = self.get_graph(self.active_graph_id)
        if graph is None:
            raise ValueError(f"activeGraphId 不在项目中：{self.active_graph_id!r}")
        return graph

    def replace_graph(self, graph: GraphDocument) -> "ProjectSnapshot":
        next_graphs = [graph if item.graph_id == graph.graph_id else item for item in self.graphs]
        return replace(self, graphs=next_graphs)

    def serialize(self) -> dict:
        from nodegraph.graph.models.graph_serialization import serialize_snapshot
        return serialize_snapshot(self)


# -------- 节点/连线列表辅助（纯函数，返回新列表）--------

def find_node(nodes: Iterable[NodeModel], node_id: Optional[str]) -> Optional[NodeModel]:
    if not node_id:
        return None
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def replace_node(nodes: List[NodeModel], updated: NodeModel) -> List[NodeModel]:
    return [updated if node.id == updated.id else node for node in nodes]


def add_edge_if_absent(edges: List[EdgeModel], edge: EdgeModel) -> List[EdgeModel]:
    """若相同四元组的连线不存在则追加，否则原样返回。"""
    for existing_edge in edges:
        if existing_edge.same_endpoints(edge):
            return edges
    return [*edges, edge]


def remove_node_edges(edges: List[EdgeModel], node_id: str) -> List[EdgeModel]:
    return [edge for edge in edges if not edge.touches(node_id)]


def remove_port_connections(
    edges: List[EdgeModel],
    node_id: str,
    handle_id: str,
    is_input: bool,
) -> Tuple[List[EdgeModel], List[str]]:
    """删除指定端口的所有连线

    Returns:
        (剩余连线, 被删除的连线ID列表)
    """
    kept: List[EdgeModel] = []
    removed_ids: List[str] = []
    for edge in edges:
        if is_input:
            hit = edge.dst_node == node_id and edge.dst_port == handle_id
        else:
            hit = edge.src_node == node_id and edge.src_port == handle_id
        if hit:
            removed_ids.append(edge.id)
        else:
            kept.append(edge)
    return kept, removed_ids


def release_group_members(nodes: List[NodeModel], group_ids: Iterable[str]) -> List[NodeModel]:
    """清除指向给定分组框的成员关系。"""
    released = set(group_ids)
    if not released:
        return nodes
    return [
        node.with_group(None) if node.group_box_id in released else node
        for node in nodes
    ]


__all__ = [
    "GROUP_BOX_KIND",
    "STICKY_NOTE_KIND",
    "DEFAULT_NODE_TYPE",
    "DEFAULT_EDGE_TYPE",
    "PROJECT_SNAPSHOT_VERSION",
    "EDITOR_ONLY_NODE_DATA_FIELDS",
    "NodeModel",
    "EdgeModel",
    "GraphDocument",
    "ProjectSnapshot",
    "find_node",
    "replace_node",
    "add_edge_if_absent",
    "remove_node_edges",
    "remove_port_connections",
    "release_group_members",
]
