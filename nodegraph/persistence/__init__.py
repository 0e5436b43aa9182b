from __future__ import annotations

from .editor_state import (
    EditorGraphState,
    EditorLayoutState,
    EditorNodeState,
    apply_editor_state_to_graphs,
    build_editor_state,
    normalize_editor_state,
)
from .logic_export import (
    NODE_GRAPH_EDITOR_STATE_KEY,
    build_project_document,
    hydrate_logic_graphs,
    read_project_document,
    serialize_graphs_for_logic,
)
from .node_normalization import normalize_persisted_edge, normalize_persisted_node
from .project_snapshot import (
    create_storage_key,
    ensure_project_graph_snapshot,
    load_project_snapshot,
    migrate_legacy_snapshot,
    normalize_graph_documents,
    save_project_snapshot,
)

__all__ = [
    "EditorGraphState",
    "EditorLayoutState",
    "EditorNodeState",
    "apply_editor_state_to_graphs",
    "build_editor_state",
    "normalize_editor_state",
    "NODE_GRAPH_EDITOR_STATE_KEY",
    "build_project_document",
    "hydrate_logic_graphs",
    "read_project_document",
    "serialize_graphs_for_logic",
    "normalize_persisted_edge",
    "normalize_persisted_node",
    "create_storage_key",
    "ensure_project_graph_snapshot",
    "load_project_snapshot",
    "migrate_legacy_snapshot",
    "normalize_graph_documents",
    "save_project_snapshot",
]
