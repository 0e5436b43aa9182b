from __future__ import annotations

from typing import List

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import find_node
from nodegraph.mutation.hints import HINT_KEEP_AT_LEAST_ONE_GRAPH, HINT_TEXTS
from nodegraph.mutation.node_changes import PositionChange, SelectChange
from nodegraph.mutation.node_commands import ChangeField, RemoveCase
from nodegraph.runtime.editor_session import EditorSession
from nodegraph.runtime.storage import InMemoryStorage
from nodegraph.validate.connection_validator import (
    CONNECTION_HINT_BY_REASON,
    REASON_WRONG_DIRECTION,
    ConnectionCandidate,
)
from nodegraph.validate.node_validation import NODE_VALIDATION_TEXTS

STORAGE_KEY = "mdr:nodegraph:native:demo"


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingStorage(InMemoryStorage):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        super().set(key, value)


def _open(storage=None, confirm=None, clock=None) -> EditorSession:
    return EditorSession(storage or InMemoryStorage(), "demo", confirm=confirm, clock=clock or FakeClock())


def test_new_session_starts_from_starter_project() -> None:
    storage = InMemoryStorage()
    session = _open(storage)
    assert [node.kind for node in session.nodes] == ["start", "switch", "process", "end"]
    assert len(session.edges) == 3
    assert session.is_dirty is False
    assert storage.get(STORAGE_KEY) is None, "未修改时不写入存储"


def test_settled_change_is_flushed_on_pump_and_reloaded() -> None:
    storage = InMemoryStorage()
    clock = FakeClock()
    session = _open(storage, clock=clock)
    created_id = session.create_node_from_canvas("delay", (10, 10))
    assert session.is_dirty is True
    assert session.flush_deadline == clock.now

    session.pump()
    assert session.is_dirty is False
    reopened = _open(storage)
    assert find_node(reopened.nodes, created_id) is not None
    assert reopened.snapshot.active_graph_id == session.snapshot.active_graph_id


def test_flushes_are_coalesced_within_interval(monkeypatch) -> None:
    monkeypatch.setattr(settings, "AUTO_SAVE_INTERVAL", 5.0)
    storage = CountingStorage()
    clock = FakeClock()
    session = _open(storage, clock=clock)
    session.create_node_from_canvas("delay", (0, 0))
    clock.now += 1
    session.create_node_from_canvas("delay", (50, 0))

    session.pump(clock.now + 1)
    assert storage.writes == 0, "间隔未到不写入"
    session.pump(clock.now + 5)
    assert storage.writes == 1, "多次修改合并为一次写入"


def test_mid_drag_changes_are_not_saved_and_can_be_cancelled() -> None:
    session = _open()
    start = session.nodes[0]
    session.on_nodes_change([PositionChange(start.id, pos=(400, 400), dragging=True)])
    assert find_node(session.nodes, start.id).pos == (400.0, 400.0)
    assert session.is_dirty is False, "拖动中不安排保存"

    session.cancel_drag()
    restored = find_node(session.nodes, start.id)
    assert restored.pos == start.pos
    assert restored.dragging is False


def test_selection_changes_do_not_mark_dirty() -> None:
    session = _open()
    session.on_nodes_change([SelectChange(session.nodes[0].id, True)])
    assert session.nodes[0].selected is True
    assert session.is_dirty is False


def test_drop_into_group_box_attaches_and_relayouts() -> None:
    messages: List[str] = []

    def confirm(message: str) -> bool:
        messages.append(message)
        return True

    session = _open(confirm=confirm)
    group_id = session.create_node_from_canvas("groupBox", (0, 0))
    process_id = session.nodes[2].id
    session.on_nodes_change([PositionChange(process_id, pos=(50, 60), dragging=False)])

    assert messages == ["是否将节点加入分组「Group Box」？"]
    assert find_node(session.nodes, process_id).group_box_id == group_id
    group = find_node(session.nodes, group_id)
    assert group.pos == (16, 10)
    assert (group.width, group.height) == (288, 170)


def test_invalid_connection_shows_hint_until_dismissed() -> None:
    clock = FakeClock()
    session = _open(clock=clock)
    start_id = session.nodes[0].id
    end_id = session.nodes[3].id
    connected = session.on_connect(ConnectionCandidate(start_id, end_id, "in.control.prev", "out.control.next"))
    assert connected is False
    assert session.hint == CONNECTION_HINT_BY_REASON[REASON_WRONG_DIRECTION]

    session.pump(clock.now + 2.1)
    assert session.hint is not None
    clock.now += 2.0
    session.set_hint("新的提示")
    session.pump(clock.now + 2.1)
    assert session.hint == "新的提示", "新提示重新计时"
    session.pump(clock.now + 3)
    assert session.hint is None


def test_is_valid_connection_uses_active_graph() -> None:
    session = _open()
    start_id = session.nodes[0].id
    process_id = session.nodes[2].id
    occupied = ConnectionCandidate(start_id, process_id, "out.control.next", "in.control.prev")
    assert session.is_valid_connection(occupied) is False, "start 的单接口输出已被占用"


def test_dispatch_remove_case_cleans_edges() -> None:
    session = _open()
    switch_node = session.nodes[1]
    first_case_id = switch_node.data["cases"][0]["id"]
    session.dispatch(RemoveCase(switch_node.id, first_case_id))
    assert [edge.id for edge in session.edges] == ["e-initial-1", "e-initial-3"]
    assert session.is_dirty is True


def test_validation_message_follows_field_changes() -> None:
    session = _open()
    env_id = session.create_node_from_canvas("envVar", (0, 400))
    assert "validationMessage" not in find_node(session.nodes, env_id).data
    session.dispatch(ChangeField(env_id, "key", ""))
    assert find_node(session.nodes, env_id).data["validationMessage"] == NODE_VALIDATION_TEXTS["envVarKeyRequired"]


def test_graph_management_through_session() -> None:
    session = _open()
    first_graph_id = session.snapshot.active_graph_id
    session.delete_graph()
    assert session.hint == HINT_TEXTS[HINT_KEEP_AT_LEAST_ONE_GRAPH]

    new_graph_id = session.create_graph()
    assert new_graph_id != first_graph_id
    assert session.active_graph.graph_name == "Flow 2"
    session.rename_active_graph("  Checkout")
    assert session.active_graph.graph_name == "Checkout"
    session.switch_graph(first_graph_id)
    assert session.snapshot.active_graph_id == first_graph_id
    copy_id = session.duplicate_graph()
    assert session.active_graph.graph_name == "Main Copy"
    session.delete_graph()
    assert copy_id not in {graph.graph_id for graph in session.snapshot.graphs}


def test_exports_and_close_flush() -> None:
    storage = InMemoryStorage()
    session = _open(storage)
    session.create_node_from_canvas("log", (0, 0))
    logic = session.export_logic()
    assert logic["activeGraphId"] == session.snapshot.active_graph_id
    assert all("position" not in node for node in logic["graphs"][0]["nodes"])
    state = session.export_editor_state()
    assert len(state["graphs"][0]["nodes"]) == 5
    document = session.export_document()
    assert set(document) == {"logic", "x-nodeGraphEditor"}

    session.close()
    assert storage.get(STORAGE_KEY) is not None
