from __future__ import annotations

from .graph_model import (
    DEFAULT_EDGE_TYPE,
    DEFAULT_NODE_TYPE,
    EDITOR_ONLY_NODE_DATA_FIELDS,
    GROUP_BOX_KIND,
    PROJECT_SNAPSHOT_VERSION,
    STICKY_NOTE_KIND,
    EdgeModel,
    GraphDocument,
    NodeModel,
    ProjectSnapshot,
)
from .graph_serialization import serialize_edge, serialize_graph, serialize_node, serialize_snapshot

__all__ = [
    "DEFAULT_EDGE_TYPE",
    "DEFAULT_NODE_TYPE",
    "EDITOR_ONLY_NODE_DATA_FIELDS",
    "GROUP_BOX_KIND",
    "PROJECT_SNAPSHOT_VERSION",
    "STICKY_NOTE_KIND",
    "EdgeModel",
    "GraphDocument",
    "NodeModel",
    "ProjectSnapshot",
    "serialize_edge",
    "serialize_graph",
    "serialize_node",
    "serialize_snapshot",
]
