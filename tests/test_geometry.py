from __future__ import annotations

from nodegraph.graph.models.graph_model import NodeModel
from nodegraph.layout.geometry import (
    Bounds,
    estimate_sticky_note_size,
    fallback_grid_position,
    is_node_center_inside_group_body,
    resolve_attached_group_box_id,
    resolve_drop_target_group,
    resolve_group_body_bounds,
    resolve_group_box_size,
    resolve_node_size,
)
from nodegraph.utils.number_utils import format_number, parse_int_prefix, round_half_up


def _group(node_id: str, pos=(0.0, 0.0), width=None, height=None) -> NodeModel:
    return NodeModel(id=node_id, kind="groupBox", pos=pos, width=width, height=height, data={"label": "Group Box"})


def _process(node_id: str, pos) -> NodeModel:
    return NodeModel(id=node_id, kind="process", pos=pos, data={"label": "Process"})


def test_number_helpers() -> None:
    assert round_half_up(2.5) == 3, "0.5 应向上取整"
    assert round_half_up(-2.5) == -2
    assert parse_int_prefix("12.7px") == 12
    assert parse_int_prefix("px12") is None
    assert format_number(1.0) == "1"
    assert format_number(1.5) == "1.5"


def test_fallback_grid() -> None:
    positions = [fallback_grid_position(index) for index in range(5)]
    assert positions == [(0, 0), (220, 0), (440, 0), (660, 0), (0, 140)]


def test_group_box_size_from_data() -> None:
    assert resolve_group_box_size({}) == (360, 220)
    assert resolve_group_box_size({"boxWidth": "500px", "boxHeight": "300"}) == (500, 300)
    assert resolve_group_box_size({"autoBoxWidth": 400, "boxWidth": 500}) == (400, 220), "autoBoxWidth 优先"
    assert resolve_group_box_size({"boxWidth": "0"}) == (360, 220), "0 回到默认值"
    assert resolve_group_box_size({"boxWidth": 50, "boxHeight": 99999}) == (160, 1800)


def test_node_size_clamps() -> None:
    assert resolve_node_size(_process("p", (0, 0))) == (220, 96)
    tiny = NodeModel(id="t", kind="process", width=10, height=10)
    assert resolve_node_size(tiny) == (120, 64)
    assert resolve_node_size(_group("g"), size_override=(100, 100)) == (220, 140), "分组框尺寸下限 220×140"


def test_sticky_note_estimate() -> None:
    assert estimate_sticky_note_size("") == (86, 46)
    assert estimate_sticky_note_size("hello") == (80, 46)
    width, height = estimate_sticky_note_size("**bold**\nsecond line")
    assert width == len("second line") * 8 + 40
    assert height == 2 * 18 + 28


def test_group_body_bounds() -> None:
    body = resolve_group_body_bounds(_group("g"))
    assert body == Bounds(left=34, top=50, right=326, bottom=196)


def test_center_on_boundary_counts_as_inside() -> None:
    group = _group("g")
    on_edge = _process("p", (-76, 2))  # 中心 (34, 50)
    assert is_node_center_inside_group_body(on_edge, group) is True
    just_outside = _process("q", (-77, 2))
    assert is_node_center_inside_group_body(just_outside, group) is False
    assert is_node_center_inside_group_body(group, group) is False


def test_drop_target_prefers_smallest_group() -> None:
    big = _group("big", width=800, height=600)
    small = _group("small")
    node = _process("p", (50, 60))
    assert resolve_drop_target_group(node, [big, small, node]).id == "small"


def test_drop_target_tie_keeps_first_group() -> None:
    first = _group("g1")
    second = _group("g2")
    node = _process("p", (50, 60))
    assert resolve_drop_target_group(node, [first, second, node]).id == "g1"


def test_group_box_is_never_dropped_into_group() -> None:
    outer = _group("outer", width=1000, height=1000)
    inner = _group("inner", pos=(100, 100))
    assert resolve_drop_target_group(inner, [outer, inner]) is None


def test_attached_group_requires_existing_group() -> None:
    group = _group("g")
    member = _process("p", (50, 60)).with_group("g")
    orphan = _process("q", (50, 60)).with_group("missing")
    assert resolve_attached_group_box_id(member, [group, member]) == "g"
    assert resolve_attached_group_box_id(orphan, [group, orphan]) is None
