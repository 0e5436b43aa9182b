from __future__ import annotations

from .geometry import (
    Bounds,
    clamp_number,
    estimate_sticky_note_size,
    fallback_grid_position,
    is_node_center_inside_group_body,
    resolve_attached_group_box_id,
    resolve_drop_target_group,
    resolve_group_body_bounds,
    resolve_group_box_size,
    resolve_node_bounds,
    resolve_node_size,
)
from .group_layout import (
    GroupLayout,
    apply_group_auto_layout,
    clear_dangling_group_memberships,
    compute_group_auto_layout,
    run_group_layout_pass,
)

__all__ = [
    "Bounds",
    "clamp_number",
    "estimate_sticky_note_size",
    "fallback_grid_position",
    "is_node_center_inside_group_body",
    "resolve_attached_group_box_id",
    "resolve_drop_target_group",
    "resolve_group_body_bounds",
    "resolve_group_box_size",
    "resolve_node_bounds",
    "resolve_node_size",
    "GroupLayout",
    "apply_group_auto_layout",
    "clear_dangling_group_memberships",
    "compute_group_auto_layout",
    "run_group_layout_pass",
]
