from __future__ import annotations

from .field_sanitizer import sanitize_field_value
from .graph_actions import (
    GraphActionOutcome,
    create_graph,
    delete_graph,
    duplicate_graph,
    rename_active_graph,
    switch_graph,
)
from .hints import HINT_TEXTS
from .node_actions import (
    NodeActionOutcome,
    create_node_from_canvas,
    create_node_from_group_box,
    create_node_from_port,
    delete_node,
    detach_node_from_box,
    disconnect_port,
    duplicate_node,
    on_connect,
    update_node_color_theme,
)
from .node_changes import (
    AddChange,
    DimensionsChange,
    PositionChange,
    RemoveChange,
    SelectChange,
    apply_node_changes,
    apply_node_changes_with_grouping,
)
from .node_commands import CommandOutcome, apply_node_command

__all__ = [
    "sanitize_field_value",
    "GraphActionOutcome",
    "create_graph",
    "delete_graph",
    "duplicate_graph",
    "rename_active_graph",
    "switch_graph",
    "HINT_TEXTS",
    "NodeActionOutcome",
    "create_node_from_canvas",
    "create_node_from_group_box",
    "create_node_from_port",
    "delete_node",
    "detach_node_from_box",
    "disconnect_port",
    "duplicate_node",
    "on_connect",
    "update_node_color_theme",
    "AddChange",
    "DimensionsChange",
    "PositionChange",
    "RemoveChange",
    "SelectChange",
    "apply_node_changes",
    "apply_node_changes_with_grouping",
    "CommandOutcome",
    "apply_node_command",
]
