from __future__ import annotations

from nodegraph.graph.models.graph_model import EdgeModel, GraphDocument, NodeModel, ProjectSnapshot
from nodegraph.mutation.graph_actions import (
    create_graph,
    delete_graph,
    duplicate_graph,
    normalize_graph_name_input,
    rename_active_graph,
    switch_graph,
)
from nodegraph.mutation.hints import HINT_KEEP_AT_LEAST_ONE_GRAPH, HINT_TEXTS


def _snapshot() -> ProjectSnapshot:
    nodes = [
        NodeModel(id="g", kind="groupBox", data={"label": "Group Box"}),
        NodeModel(id="a", kind="start", data={"label": "Start"}, group_box_id="g"),
        NodeModel(id="b", kind="end", data={"label": "End"}),
    ]
    edges = [EdgeModel("e1", "a", "out.control.next", "b", "in.control.prev")]
    return ProjectSnapshot(
        active_graph_id="main",
        graphs=[
            GraphDocument("main", "Main", nodes, edges),
            GraphDocument("second", "Second", [], []),
        ],
    )


def test_create_graph_picks_unused_flow_name() -> None:
    outcome = create_graph(_snapshot())
    created = outcome.snapshot.graphs[-1]
    assert created.graph_name == "Flow 3"
    assert outcome.snapshot.active_graph_id == created.graph_id
    assert len(created.nodes) == 4, "新图是初始节点图"

    renamed = _snapshot()
    renamed.graphs[1].graph_name = "Flow 3"
    assert create_graph(renamed).snapshot.graphs[-1].graph_name == "Flow 4"


def test_duplicate_graph_remaps_ids() -> None:
    source = _snapshot()
    outcome = duplicate_graph(source)
    copy = outcome.snapshot.active_graph
    assert copy.graph_name == "Main Copy"
    assert copy.graph_id not in {"main", "second"}
    copied_ids = {node.id for node in copy.nodes}
    assert copied_ids.isdisjoint({"g", "a", "b"}), "复制后的节点应使用新ID"

    copied_group, copied_start, copied_end = copy.nodes
    assert copied_start.group_box_id == copied_group.id, "分组归属按新ID重映射"
    edge = copy.edges[0]
    assert (edge.src_node, edge.dst_node) == (copied_start.id, copied_end.id)
    assert edge.id != "e1"
    assert len(source.graphs) == 2, "传入快照不应被修改"


def test_delete_graph_selects_neighbour() -> None:
    outcome = delete_graph(_snapshot())
    assert [graph.graph_id for graph in outcome.snapshot.graphs] == ["second"]
    assert outcome.snapshot.active_graph_id == "second"

    last = ProjectSnapshot(active_graph_id="second", graphs=_snapshot().graphs)
    assert delete_graph(last).snapshot.active_graph_id == "main", "删除最后一张图时选中前一张"


def test_last_graph_cannot_be_deleted() -> None:
    single = ProjectSnapshot(active_graph_id="only", graphs=[GraphDocument("only", "Only")])
    outcome = delete_graph(single)
    assert outcome.changed is False
    assert outcome.hint == HINT_TEXTS[HINT_KEEP_AT_LEAST_ONE_GRAPH]
    assert outcome.snapshot is single


def test_rename_active_graph() -> None:
    assert normalize_graph_name_input("   ") == "Untitled"
    assert normalize_graph_name_input("  登录流程 ") == "登录流程 "
    assert len(normalize_graph_name_input("x" * 100)) == 40

    outcome = rename_active_graph(_snapshot(), "  Checkout")
    assert outcome.snapshot.active_graph.graph_name == "Checkout"
    assert outcome.snapshot.get_graph("second").graph_name == "Second"


def test_switch_graph() -> None:
    snapshot = _snapshot()
    assert switch_graph(snapshot, "second").snapshot.active_graph_id == "second"
    assert switch_graph(snapshot, "missing").changed is False
    assert switch_graph(snapshot, "main").changed is False


def test_duplicate_graph_does_not_share_item_lists() -> None:
    switch_node = NodeModel(
        id="sw",
        kind="switch",
        data={"label": "Switch", "cases": [{"id": "c1", "label": "case-1"}]},
    )
    source = ProjectSnapshot(active_graph_id="main", graphs=[GraphDocument("main", "Main", [switch_node], [])])
    copied_node = duplicate_graph(source).snapshot.active_graph.nodes[0]
    assert copied_node.data["cases"] is not switch_node.data["cases"]
    copied_node.data["cases"][0]["label"] = "changed"
    assert switch_node.data["cases"][0]["label"] == "case-1", "修改副本不应影响原图"
