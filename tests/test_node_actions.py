from __future__ import annotations

from typing import List, Tuple

from nodegraph.graph.models.graph_model import EdgeModel, NodeModel, find_node
from nodegraph.mutation.hints import HINT_INVALID_PORT_HANDLE, HINT_NO_MATCHING_INPUT, HINT_TEXTS
from nodegraph.mutation.node_actions import (
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
from nodegraph.nodes.node_factory import create_node
from nodegraph.validate.connection_validator import (
    CONNECTION_HINT_BY_REASON,
    REASON_SOURCE_OCCUPIED,
    REASON_WRONG_DIRECTION,
    ConnectionCandidate,
)


def _graph() -> Tuple[List[NodeModel], List[EdgeModel]]:
    nodes = [
        create_node("start", (100, 180), node_id="start"),
        create_node("end", (900, 180), node_id="end"),
        create_node("groupBox", (0, 400), node_id="g"),
        create_node("process", (60, 480), node_id="member").with_group("g"),
    ]
    edges = [EdgeModel("e1", "start", "out.control.next", "end", "in.control.prev")]
    return nodes, edges


def test_create_node_from_canvas() -> None:
    nodes, edges = _graph()
    outcome = create_node_from_canvas(nodes, edges, "delay", (5, 6))
    created = find_node(outcome.nodes, outcome.created_node_id)
    assert created.kind == "delay"
    assert created.pos == (5.0, 6.0)
    assert outcome.edges is edges


def test_create_node_inside_group_box_is_clamped_to_body() -> None:
    group = create_node("groupBox", (0, 0), node_id="g")
    outcome = create_node_from_group_box([group], [], "g", "process", (0, 0))
    created = find_node(outcome.nodes, outcome.created_node_id)
    assert created.pos == (42.0, 58.0), "落点距内容区左/上边缘 8 像素"
    assert created.group_box_id == "g"

    far = create_node_from_group_box([group], [], "g", "process", (900, 900))
    assert find_node(far.nodes, far.created_node_id).pos == (106.0, 100.0), "新节点右/下边缘不超出内容区"


def test_create_group_box_inside_group_box_is_not_attached() -> None:
    group = create_node("groupBox", (0, 0), node_id="g")
    outcome = create_node_from_group_box([group], [], "g", "groupBox", (50, 60))
    assert find_node(outcome.nodes, outcome.created_node_id).group_box_id is None


def test_create_node_from_source_port_connects_forward() -> None:
    nodes = [create_node("start", (100, 180), node_id="start")]
    outcome = create_node_from_port(nodes, [], "start", "out.next", "source", "process")
    created = find_node(outcome.nodes, outcome.created_node_id)
    assert created.pos == (360.0, 204.0)
    assert outcome.hint is None
    assert len(outcome.edges) == 1
    edge = outcome.edges[0]
    assert (edge.src_node, edge.src_port, edge.dst_node, edge.dst_port) == (
        "start",
        "out.control.next",
        created.id,
        "in.control.prev",
    )


def test_create_node_from_target_port_connects_backward() -> None:
    nodes = [create_node("end", (900, 180), node_id="end")]
    outcome = create_node_from_port(nodes, [], "end", "in.control.prev", "target", "process")
    created = find_node(outcome.nodes, outcome.created_node_id)
    assert created.pos == (640.0, 204.0)
    assert outcome.edges[0].src_node == created.id
    assert outcome.edges[0].dst_node == "end"


def test_create_node_from_port_failures() -> None:
    nodes, edges = _graph()
    invalid = create_node_from_port(nodes, edges, "start", "bogus", "source", "process")
    assert invalid.hint == HINT_TEXTS[HINT_INVALID_PORT_HANDLE]
    assert invalid.nodes is nodes

    no_input = create_node_from_port(nodes, edges, "start", "out.control.next", "source", "start")
    assert no_input.hint == HINT_TEXTS[HINT_NO_MATCHING_INPUT]
    assert len(no_input.nodes) == len(nodes) + 1, "没有匹配端口时仍保留新节点"

    occupied = create_node_from_port(nodes, edges, "start", "out.control.next", "source", "process")
    assert occupied.hint == CONNECTION_HINT_BY_REASON[REASON_SOURCE_OCCUPIED]
    assert occupied.edges is edges
    assert occupied.created_node_id is not None


def test_delete_node_removes_edges_and_releases_members() -> None:
    nodes, edges = _graph()
    outcome = delete_node(nodes, edges, "start")
    assert find_node(outcome.nodes, "start") is None
    assert outcome.edges == []

    released = delete_node(nodes, edges, "g")
    assert find_node(released.nodes, "member").group_box_id is None


def test_duplicate_node_offsets_copy() -> None:
    nodes, edges = _graph()
    outcome = duplicate_node(nodes, edges, "member")
    copy = find_node(outcome.nodes, outcome.created_node_id)
    assert copy.id != "member"
    assert copy.pos == (96.0, 516.0)
    assert copy.group_box_id == "g"
    assert copy.data is not find_node(nodes, "member").data


def test_duplicate_node_does_not_share_item_lists() -> None:
    source = create_node("switch", (0, 0), node_id="sw")
    outcome = duplicate_node([source], [], "sw")
    copied = find_node(outcome.nodes, outcome.created_node_id)
    assert copied.data["cases"] == source.data["cases"]
    assert copied.data["cases"] is not source.data["cases"], "条目列表应为独立副本"
    copied.data["cases"][0]["label"] = "changed"
    assert source.data["cases"][0]["label"] == "case-1"


def test_detach_node_from_box() -> None:
    nodes, edges = _graph()
    outcome = detach_node_from_box(nodes, edges, "member")
    assert find_node(outcome.nodes, "member").group_box_id is None
    assert detach_node_from_box(nodes, edges, "start").nodes is nodes


def test_update_node_color_theme_accepts_only_known_themes() -> None:
    nodes, edges = _graph()
    outcome = update_node_color_theme(nodes, edges, "g", "cyan")
    assert find_node(outcome.nodes, "g").data["color"] == "cyan"
    assert update_node_color_theme(nodes, edges, "g", "neon").nodes is nodes
    assert update_node_color_theme(nodes, edges, "start", "cyan").nodes is nodes


def test_disconnect_port() -> None:
    nodes, edges = _graph()
    outcome = disconnect_port(nodes, edges, "start", "out.next", "source")
    assert outcome.edges == []
    untouched = disconnect_port(nodes, edges, "start", "out.control.next", "target")
    assert untouched.edges is edges


def test_on_connect_adds_validated_edge_once() -> None:
    nodes, _ = _graph()
    candidate = ConnectionCandidate("start", "end", "out.next", "in.prev")
    first = on_connect(candidate, nodes, [])
    assert len(first.edges) == 1
    assert first.edges[0].src_port == "out.control.next", "连线保存规范端口标识"

    again = on_connect(candidate, nodes, first.edges)
    assert again.edges is first.edges, "四元组相同的连线不重复添加"

    wrong = on_connect(ConnectionCandidate("start", "end", "in.control.prev", "out.control.next"), nodes, [])
    assert wrong.hint == CONNECTION_HINT_BY_REASON[REASON_WRONG_DIRECTION]
