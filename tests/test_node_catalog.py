from __future__ import annotations

from nodegraph.graph.handles import ROLE_IN, ROLE_OUT, SEMANTIC_CONDITION, SEMANTIC_CONTROL, SEMANTIC_DATA
from nodegraph.nodes.node_catalog import (
    CONTROL_IN,
    CONTROL_OUT,
    NODE_CATALOG,
    NODE_MENU_GROUPS,
    get_node_catalog_item,
    get_node_port_handle,
    get_theme_options,
    is_annotation_kind,
    is_container_kind,
    resolve_port_menu_groups,
)
from nodegraph.nodes.node_factory import create_node, create_starter_graph, get_default_handle_for_node


def test_catalog_kinds_are_unique() -> None:
    kinds = [item.kind for item in NODE_CATALOG]
    assert len(kinds) == len(set(kinds)), "节点目录中 kind 不应重复"


def test_unknown_kind_falls_back_to_control_through() -> None:
    item = get_node_catalog_item("customThing")
    assert item.group_id == "misc"
    assert item.label == "CustomThing"
    assert item.ports.control_in == CONTROL_IN
    assert item.ports.control_out == CONTROL_OUT


def test_port_lookup() -> None:
    assert get_node_port_handle("start", ROLE_IN, SEMANTIC_CONTROL) is None
    assert get_node_port_handle("start", ROLE_OUT, SEMANTIC_CONTROL) == CONTROL_OUT
    assert get_node_port_handle("fetch", ROLE_IN, SEMANTIC_DATA) == "in.data.url"
    assert get_node_port_handle("expression", ROLE_OUT, SEMANTIC_CONDITION) == "out.condition.result"
    assert get_node_port_handle("groupBox", ROLE_IN, SEMANTIC_CONTROL) is None, "分组框没有端口"


def test_default_data_is_not_shared_between_nodes() -> None:
    first = create_node("setState", (0, 0))
    second = create_node("setState", (0, 0))
    first.data["keyValueEntries"].append({"id": "x", "key": "k", "value": "v"})
    assert len(second.data["keyValueEntries"]) == 1, "目录默认值必须深拷贝"


def test_menu_groups_follow_catalog_order() -> None:
    assert NODE_MENU_GROUPS[0].id == "flow-control"
    assert NODE_MENU_GROUPS[0].items[0].kind == "start"
    assert sum(len(group.items) for group in NODE_MENU_GROUPS) == len(NODE_CATALOG)


def test_port_menu_only_lists_kinds_with_matching_port() -> None:
    groups = resolve_port_menu_groups("out.condition.result", "source")
    kinds = {entry.kind for group in groups for entry in group.items}
    assert "if" in kinds and "switch" in kinds and "filter" in kinds
    assert "start" not in kinds, "start 没有条件输入口"

    assert resolve_port_menu_groups("garbage", "source") == ()


def test_theme_options() -> None:
    assert "cyan" in get_theme_options("groupBox")
    assert "lime" in get_theme_options("stickyNote")
    assert get_theme_options("process") == ()


def test_container_and_annotation_kinds() -> None:
    assert is_container_kind("groupBox") is True
    assert is_container_kind("stickyNote") is False, "便签不能容纳节点"
    assert is_annotation_kind("stickyNote") is True
    assert is_annotation_kind("process") is False


def test_create_node_fills_item_lists() -> None:
    switch_node = create_node("switch", (10, 20))
    assert switch_node.pos == (10.0, 20.0)
    assert [item["label"] for item in switch_node.data["cases"]] == ["case-1", "case-2"]
    assert switch_node.data["label"] == "Switch"

    fetch_node = create_node("fetch", (0, 0))
    assert [item["code"] for item in fetch_node.data["statusCodes"]] == ["200", "201"]
    assert fetch_node.data["method"] == "GET"

    race_node = create_node("race", (0, 0))
    assert len(race_node.data["branches"]) == 2
    assert race_node.data["branches"][0]["id"] != "branch-a", "新建节点的分支应生成独立ID"


def test_default_handle_prefers_first_item() -> None:
    switch_node = create_node("switch", (0, 0))
    first_case = switch_node.data["cases"][0]["id"]
    assert get_default_handle_for_node(switch_node, ROLE_OUT, SEMANTIC_CONTROL) == f"out.control.case-{first_case}"
    assert get_default_handle_for_node(switch_node, ROLE_IN, SEMANTIC_CONDITION) == f"in.condition.case-{first_case}"

    if_node = create_node("if", (0, 0))
    assert get_default_handle_for_node(if_node, ROLE_OUT, SEMANTIC_CONTROL) == "out.control.true"
    assert get_default_handle_for_node(if_node, ROLE_IN, SEMANTIC_CONTROL) == CONTROL_IN

    end_node = create_node("end", (0, 0))
    assert get_default_handle_for_node(end_node, ROLE_OUT, SEMANTIC_CONTROL) is None


def test_starter_graph_shape() -> None:
    graph = create_starter_graph("Main")
    assert graph.graph_name == "Main"
    assert [node.kind for node in graph.nodes] == ["start", "switch", "process", "end"]
    assert [node.pos for node in graph.nodes] == [(100.0, 180.0), (380.0, 120.0), (720.0, 120.0), (980.0, 250.0)]
    assert [edge.id for edge in graph.edges] == ["e-initial-1", "e-initial-2", "e-initial-3"]
    first_case = graph.nodes[1].data["cases"][0]["id"]
    assert graph.edges[1].src_port == f"out.control.case-{first_case}"
