from __future__ import annotations

from dataclasses import replace

from nodegraph.graph.models.graph_model import NodeModel
from nodegraph.layout.geometry import resolve_group_body_bounds, resolve_node_bounds
from nodegraph.layout.group_layout import (
    GroupLayout,
    apply_group_auto_layout,
    clear_dangling_group_memberships,
    compute_group_auto_layout,
    run_group_layout_pass,
)


def _group(node_id: str, pos=(0.0, 0.0), **kwargs) -> NodeModel:
    return NodeModel(id=node_id, kind="groupBox", pos=pos, data={"label": "Group Box", "value": ""}, **kwargs)


def _member(node_id: str, pos, group_id: str) -> NodeModel:
    return NodeModel(id=node_id, kind="process", pos=pos, data={"label": "Process"}, group_box_id=group_id)


def test_layout_wraps_single_member() -> None:
    nodes = [_group("g", pos=(500, 500)), _member("p", (100, 100), "g")]
    layouts = compute_group_auto_layout(nodes)
    assert layouts["g"] == GroupLayout(x=66, y=50, width=288, height=170)


def test_layout_without_members_keeps_position_and_size() -> None:
    nodes = [_group("g", pos=(12.5, 40), width=500, height=90)]
    layouts = compute_group_auto_layout(nodes)
    assert layouts["g"] == GroupLayout(x=12.5, y=40, width=500, height=140), "高度按下限 140 限制"


def test_members_stay_inside_group_body_after_layout() -> None:
    nodes = [
        _group("g"),
        _member("a", (100, 100), "g"),
        _member("b", (600, 420), "g"),
        NodeModel(id="n", kind="stickyNote", pos=(300, 300), data={"description": "note"}, group_box_id="g"),
    ]
    laid_out = run_group_layout_pass(nodes)
    group = laid_out[0]
    body = resolve_group_body_bounds(group)
    for node in laid_out[1:]:
        bounds = resolve_node_bounds(node)
        assert body.left <= bounds.left and bounds.right <= body.right, f"{node.id} 横向应在内容区内"
        assert body.top <= bounds.top and bounds.bottom <= body.bottom, f"{node.id} 纵向应在内容区内"
    assert group.data["autoBoxWidth"] == group.width
    assert group.data["autoBoxHeight"] == group.height


def test_layout_pass_is_idempotent() -> None:
    nodes = [_group("g"), _member("p", (100, 100), "g")]
    first = run_group_layout_pass(nodes)
    second = run_group_layout_pass(first)
    assert second is first, "第二次布局不应产生新列表"


def test_dragging_group_is_not_moved() -> None:
    nodes = [_group("g", dragging=True), _member("p", (100, 100), "g")]
    assert run_group_layout_pass(nodes) is nodes


def test_small_offsets_below_epsilon_are_ignored() -> None:
    group = _group("g", pos=(66.3, 50), width=288, height=170)
    group = group.with_data(autoBoxWidth=288, autoBoxHeight=170)
    nodes = [group, _member("p", (100, 100), "g")]
    assert apply_group_auto_layout(nodes, compute_group_auto_layout(nodes)) is nodes


def test_sticky_note_size_cache_is_refreshed() -> None:
    note = NodeModel(id="n", kind="stickyNote", data={"description": "hello"})
    result = run_group_layout_pass([note])
    assert result[0].data["autoNoteWidth"] == 80
    assert result[0].data["autoNoteHeight"] == 46


def test_dangling_memberships_are_cleared() -> None:
    nodes = [
        _group("g", group_box_id="other"),
        _member("p", (0, 0), "missing"),
        _member("q", (0, 0), "g"),
    ]
    cleaned = clear_dangling_group_memberships(nodes)
    assert cleaned[0].group_box_id is None, "分组框不能属于其它分组框"
    assert cleaned[1].group_box_id is None
    assert cleaned[2].group_box_id == "g"

    untouched = [_member("q", (0, 0), None), _group("g")]
    assert clear_dangling_group_memberships(untouched) is untouched


def test_member_of_resizing_group_keeps_group_geometry() -> None:
    group = replace(_group("g", width=400, height=300), resizing=True)
    nodes = [group, _member("p", (100, 100), "g")]
    result = run_group_layout_pass(nodes)
    assert result[0].pos == (0.0, 0.0)
    assert result[0].width == 400
