from __future__ import annotations

import json
from pathlib import Path

from nodegraph.persistence.node_normalization import normalize_persisted_edge, normalize_persisted_node
from nodegraph.persistence.project_snapshot import (
    create_starter_project,
    create_storage_key,
    ensure_project_graph_snapshot,
    load_project_snapshot,
    normalize_graph_documents,
    parse_project_payload,
    save_project_snapshot,
)
from nodegraph.runtime.storage import InMemoryStorage, JsonFileStorage


def test_storage_key_uses_prefix() -> None:
    assert create_storage_key("demo") == "mdr:nodegraph:native:demo"


def test_starter_project_persists_and_reloads() -> None:
    storage = InMemoryStorage()
    starter = create_starter_project()
    save_project_snapshot(storage, "demo", starter)

    payload = json.loads(storage.get("mdr:nodegraph:native:demo"))
    assert payload["version"] == 2
    assert payload["activeGraphId"] == starter.active_graph_id

    reloaded = load_project_snapshot(storage, "demo")
    assert reloaded.active_graph_id == starter.active_graph_id
    assert len(reloaded.graphs) == 1
    graph = reloaded.active_graph
    assert graph.graph_name == "Main"
    assert len(graph.nodes) == 4
    assert len(graph.edges) == 3
    assert [node.pos for node in graph.nodes] == [node.pos for node in starter.active_graph.nodes]


def test_missing_or_broken_records_fall_back_to_starter(capsys) -> None:
    storage = InMemoryStorage({"mdr:nodegraph:native:broken": "{not json", "mdr:nodegraph:native:odd": "[1, 2]"})
    assert len(load_project_snapshot(storage, "absent").active_graph.nodes) == 4
    assert len(load_project_snapshot(storage, "broken").active_graph.nodes) == 4
    assert len(load_project_snapshot(storage, "odd").active_graph.nodes) == 4
    assert "[WARN" in capsys.readouterr().out, "JSON 损坏应输出警告"


def test_legacy_payload_is_migrated_to_single_main_graph() -> None:
    legacy = {
        "nodes": [
            {"id": "a", "position": {"x": 1, "y": 2}, "data": {"kind": "start"}},
            {"id": "b", "data": {"kind": "end"}},
        ],
        "edges": [
            {"id": "e1", "source": "a", "sourceHandle": "out.next", "target": "b", "targetHandle": "in.prev"},
            {"id": "e2", "source": "a", "target": "ghost"},
        ],
    }
    snapshot = parse_project_payload(legacy)
    assert snapshot is not None
    assert snapshot.version == 2
    assert len(snapshot.graphs) == 1
    graph = snapshot.active_graph
    assert graph.graph_name == "Main"
    assert graph.graph_id.startswith("graph-")
    assert [node.pos for node in graph.nodes] == [(1, 2), (220, 0)]
    assert [edge.id for edge in graph.edges] == ["e1"], "悬空连线被剪除"
    assert graph.edges[0].src_port == "out.control.next"


def test_unrecognized_payload_returns_none() -> None:
    assert parse_project_payload({"hello": 1}) is None
    assert parse_project_payload("text") is None


def test_graph_documents_are_normalized() -> None:
    graphs = normalize_graph_documents(
        [
            "  solo  ",
            {"id": " x ", "name": "  ", "nodes": [], "edges": []},
            {"id": "x", "name": "Dup"},
            {"name": "NoId"},
            42,
            "",
        ]
    )
    assert [graph.graph_name for graph in graphs] == ["solo", "x", "Dup", "NoId"]
    assert graphs[0].graph_id == "solo"
    assert graphs[1].graph_id == "x"
    assert graphs[2].graph_id != "x", "重复ID重新生成"
    assert graphs[3].graph_id.startswith("graph-")

    assert normalize_graph_documents(None) == []
    assert len(normalize_graph_documents([], create_fallback_when_empty=True)) == 1


def test_active_graph_id_is_validated() -> None:
    snapshot = ensure_project_graph_snapshot(
        {"activeGraphId": "nope", "graphs": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}]}
    )
    assert snapshot.active_graph_id == "a"
    assert ensure_project_graph_snapshot({"activeGraphId": " b ", "graphs": ["a", "b"]}).active_graph_id == "b"


def test_node_normalization_defaults() -> None:
    node = normalize_persisted_node(
        {"id": " n1 ", "position": {"x": "1", "y": 2}, "width": 0, "height": 50, "data": {"kind": "switch"}},
        5,
    )
    assert node.id == "n1"
    assert node.pos == (220, 140), "坐标非法时落到回退网格"
    assert node.width is None
    assert node.height == 50
    assert node.data["cases"] == [{"id": "case-1", "label": "case-1"}]
    assert node.data["collapsed"] is False
    assert "kind" not in node.data

    fetch = normalize_persisted_node({"data": {"kind": "fetch"}}, 0)
    assert fetch.id.startswith("node-")
    assert fetch.data["statusCodes"] == [{"id": "status-200", "code": "200"}]
    assert fetch.data["method"] == "GET"

    unknown = normalize_persisted_node({"id": "u"}, 0)
    assert unknown.kind == "process"

    sub_flow = normalize_persisted_node({"id": "sf", "data": {"kind": "subFlowCall", "inputBindings": []}}, 0)
    assert sub_flow.data["inputBindings"] == [{"id": "input-1", "key": "payload", "value": ""}]

    set_state = normalize_persisted_node({"id": "st", "data": {"kind": "setState", "keyValueEntries": []}}, 0)
    assert set_state.data["keyValueEntries"] == [{"id": "entry-1", "key": "key", "value": "value"}]


def test_edge_normalization() -> None:
    assert normalize_persisted_edge({"id": "e", "source": "a"}) is None
    edge = normalize_persisted_edge({"source": "a", "target": "b", "targetHandle": "in.case-x"})
    assert edge.id.startswith("e-node-")
    assert edge.dst_port == "in.condition.case-x"
    assert edge.src_port is None
    assert edge.edge_type == "smoothstep"


def test_duplicate_node_ids_are_regenerated() -> None:
    graphs = normalize_graph_documents(
        [{"id": "g", "nodes": [{"id": "a", "data": {"kind": "end"}}, {"id": "a", "data": {"kind": "end"}}]}]
    )
    first, second = graphs[0].nodes
    assert first.id == "a"
    assert second.id != "a"


def test_unreadable_storage_file_falls_back_to_starter(tmp_path: Path, capsys) -> None:
    file_path = tmp_path / "store.json"
    file_path.write_text("{not json", encoding="utf-8")
    snapshot = load_project_snapshot(JsonFileStorage(file_path), "p")
    assert len(snapshot.graphs) == 1
    assert len(snapshot.active_graph.nodes) == 4, "存储文件损坏时使用初始项目"
    assert "[WARN" in capsys.readouterr().out
