"""编辑会话

一个打开的项目对应一个 EditorSession，它持有唯一可变的 ProjectSnapshot。
所有用户动作都经由会话进入纯函数（变更批处理 / 节点命令 / 菜单动作 / 节点图管理），
再由会话统一执行派生计算（分组框自动布局、节点校验提示）并安排保存。

会话内没有线程：提示自动消失与延迟保存都是记录在会话里的截止时间，
由宿主定期调用 `pump()` 触发。
"""
from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import (
    GROUP_BOX_KIND,
    EdgeModel,
    GraphDocument,
    NodeModel,
    ProjectSnapshot,
    find_node,
)
from nodegraph.layout.group_layout import compute_group_auto_layout, run_group_layout_pass
from nodegraph.mutation import graph_actions, node_actions
from nodegraph.mutation.graph_actions import GraphActionOutcome
from nodegraph.mutation.node_actions import NodeActionOutcome
from nodegraph.mutation.node_changes import (
    ConfirmCallback,
    DimensionsChange,
    NodeChange,
    PositionChange,
    SelectChange,
    apply_node_changes_with_grouping,
)
from nodegraph.mutation.node_commands import apply_node_command
from nodegraph.persistence.editor_state import build_editor_state
from nodegraph.persistence.logic_export import build_project_document, serialize_graphs_for_logic
from nodegraph.persistence.project_snapshot import load_project_snapshot, save_project_snapshot
from nodegraph.runtime.storage import KeyValueStorage
from nodegraph.utils.logging.logger import log_debug, log_info
from nodegraph.validate.connection_validator import ConnectionCandidate, is_valid_connection
from nodegraph.validate.node_validation import refresh_validation_messages

Clock = Callable[[], float]


def _derive_nodes(nodes: List[NodeModel], edges: List[EdgeModel]) -> List[NodeModel]:
    """分组框自动布局 + 节点校验提示"""
    return refresh_validation_messages(run_group_layout_pass(nodes), edges)


class EditorSession:
    """单个项目的编辑会话

    Args:
        storage: 键值存储
        project_id: 项目ID
        confirm: 入组确认回调（参数为提示文案）；None 表示直接入组
        clock: 单调时钟，默认 time.monotonic
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        project_id: str,
        confirm: Optional[ConfirmCallback] = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.storage = storage
        self.project_id = project_id
        self._confirm = confirm
        self._clock = clock

        loaded = load_project_snapshot(storage, project_id)
        self._snapshot = replace(
            loaded,
            graphs=[graph.with_content(_derive_nodes(graph.nodes, graph.edges), graph.edges) for graph in loaded.graphs],
        )

        self._hint: Optional[str] = None
        self._hint_deadline: Optional[float] = None
        self._dirty = False
        self._flush_deadline: Optional[float] = None
        # 拖动开始前的坐标，用于取消拖动
        self._drag_origins: Dict[str, Tuple[float, float]] = {}

        log_info(
            "[会话] 打开项目 {}：{} 张图，当前 {}",
            project_id,
            len(self._snapshot.graphs),
            self._snapshot.active_graph_id,
        )

    # ------------------------------------------------------------------ 状态
    @property
    def snapshot(self) -> ProjectSnapshot:
        return self._snapshot

    @property
    def active_graph(self) -> GraphDocument:
        return self._snapshot.active_graph

    @property
    def nodes(self) -> List[NodeModel]:
        return self.active_graph.nodes

    @property
    def edges(self) -> List[EdgeModel]:
        return self.active_graph.edges

    @property
    def hint(self) -> Optional[str]:
        return self._hint

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def flush_deadline(self) -> Optional[float]:
        return self._flush_deadline

    # ------------------------------------------------------------------ 提示
    def set_hint(self, text: Optional[str]) -> None:
        """显示提示；新提示会重新开始计时。"""
        if not text:
            self.clear_hint()
            return
        self._hint = text
        self._hint_deadline = self._clock() + float(settings.HINT_DISMISS_SECONDS)

    def clear_hint(self) -> None:
        self._hint = None
        self._hint_deadline = None

    # ------------------------------------------------------------------ 保存
    def _mark_dirty(self) -> None:
        self._dirty = True
        self._flush_deadline = self._clock() + float(settings.AUTO_SAVE_INTERVAL)

    def flush(self) -> bool:
        """立即写入存储；没有未保存修改时返回 False。"""
        self._flush_deadline = None
        if not self._dirty:
            return False
        save_project_snapshot(self.storage, self.project_id, self._snapshot)
        self._dirty = False
        log_debug("PERSISTENCE_VERBOSE", "[会话] 已保存项目 {}", self.project_id)
        return True

    def pump(self, now: Optional[float] = None) -> None:
        """触发到期的定时动作（提示消失、延迟保存）。"""
        current = self._clock() if now is None else now
        if self._hint_deadline is not None and current >= self._hint_deadline:
            self.clear_hint()
        if self._flush_deadline is not None and current >= self._flush_deadline:
            self.flush()

    def close(self) -> None:
        self.flush()
        log_info("[会话] 关闭项目 {}", self.project_id)

    # ------------------------------------------------------------------ 提交
    def _commit(self, nodes: List[NodeModel], edges: List[EdgeModel], settled: bool = True) -> None:
        graph = self.active_graph.with_content(_derive_nodes(nodes, edges), edges)
        self._snapshot = self._snapshot.replace_graph(graph)
        if settled:
            self._mark_dirty()

    def _commit_snapshot(self, snapshot: ProjectSnapshot) -> None:
        active = snapshot.active_graph
        derived = active.with_content(_derive_nodes(active.nodes, active.edges), active.edges)
        self._snapshot = snapshot.replace_graph(derived)
        self._drag_origins.clear()
        self._mark_dirty()

    def _apply_node_action(self, outcome: NodeActionOutcome) -> Optional[str]:
        if outcome.nodes is not self.nodes or outcome.edges is not self.edges:
            self._commit(outcome.nodes, outcome.edges)
        if outcome.hint:
            self.set_hint(outcome.hint)
        return outcome.created_node_id

    def _apply_graph_action(self, outcome: GraphActionOutcome) -> None:
        if outcome.changed:
            self._commit_snapshot(outcome.snapshot)
        if outcome.hint:
            self.set_hint(outcome.hint)

    # ------------------------------------------------------------------ 手势
    def _record_drag_origins(self, changes: Sequence[NodeChange]) -> None:
        current_nodes = self.nodes
        for change in changes:
            if not isinstance(change, PositionChange) or not change.dragging:
                continue
            node = find_node(current_nodes, change.id)
            if node is None or node.id in self._drag_origins:
                continue
            self._drag_origins[node.id] = node.pos
            if node.kind == GROUP_BOX_KIND:
                # 拖动分组框会带动成员
                for member in current_nodes:
                    if member.group_box_id == node.id and member.id not in self._drag_origins:
                        self._drag_origins[member.id] = member.pos

    @staticmethod
    def _is_settled_batch(changes: Sequence[NodeChange]) -> bool:
        for change in changes:
            if isinstance(change, PositionChange) and change.dragging:
                return False
            if isinstance(change, DimensionsChange) and change.resizing:
                return False
        return True

    def on_nodes_change(self, changes: Sequence[NodeChange]) -> None:
        """处理一批节点变更：分组维护 → 自动布局；拖动中不安排保存。"""
        if not changes:
            return
        self._record_drag_origins(changes)
        next_nodes = apply_node_changes_with_grouping(changes, self.nodes, self._confirm)

        settled = self._is_settled_batch(changes)
        selection_only = all(isinstance(change, SelectChange) for change in changes)
        self._commit(next_nodes, self.edges, settled=settled and not selection_only)
        if settled and not any(node.dragging for node in self.nodes):
            self._drag_origins.clear()

    def cancel_drag(self) -> None:
        """取消进行中的拖动：恢复拖动前坐标并清除拖动状态。"""
        if not self._drag_origins and not any(node.dragging for node in self.nodes):
            return
        restored: List[NodeModel] = []
        for node in self.nodes:
            origin = self._drag_origins.get(node.id)
            if origin is not None:
                node = replace(node, pos=origin, dragging=False)
            elif node.dragging:
                node = replace(node, dragging=False)
            restored.append(node)
        log_debug("ENGINE_LOG_VERBOSE", "[会话] 取消拖动，恢复 {} 个节点", len(self._drag_origins))
        self._drag_origins.clear()
        self._commit(restored, self.edges, settled=False)

    def is_valid_connection(self, candidate: ConnectionCandidate) -> bool:
        return is_valid_connection(candidate, self.nodes, self.edges)

    def on_connect(self, candidate: ConnectionCandidate) -> bool:
        """尝试建立连线；不合法时显示原因提示并返回 False。"""
        outcome = node_actions.on_connect(candidate, self.nodes, self.edges)
        if outcome.hint:
            self.set_hint(outcome.hint)
            return False
        if outcome.edges is not self.edges:
            self._commit(outcome.nodes, outcome.edges)
        return True

    def dispatch(self, command: Any) -> None:
        """执行节点编辑命令（见 nodegraph.mutation.node_commands）。"""
        outcome = apply_node_command(self.active_graph, command)
        if outcome.changed:
            self._commit(outcome.nodes, outcome.edges)
        if outcome.hint:
            self.set_hint(outcome.hint)

    # ------------------------------------------------------------------ 右键菜单
    def create_node_from_canvas(self, kind: str, pos: Tuple[float, float]) -> Optional[str]:
        return self._apply_node_action(node_actions.create_node_from_canvas(self.nodes, self.edges, kind, pos))

    def create_node_from_group_box(self, group_id: str, kind: str, pos: Tuple[float, float]) -> Optional[str]:
        layouts = compute_group_auto_layout(self.nodes)
        return self._apply_node_action(
            node_actions.create_node_from_group_box(self.nodes, self.edges, group_id, kind, pos, layouts)
        )

    def create_node_from_port(self, node_id: str, handle_id: str, side: str, kind: str) -> Optional[str]:
        return self._apply_node_action(
            node_actions.create_node_from_port(self.nodes, self.edges, node_id, handle_id, side, kind)
        )

    def delete_node(self, node_id: str) -> None:
        self._apply_node_action(node_actions.delete_node(self.nodes, self.edges, node_id))

    def duplicate_node(self, node_id: str) -> Optional[str]:
        return self._apply_node_action(node_actions.duplicate_node(self.nodes, self.edges, node_id))

    def detach_node_from_box(self, node_id: str) -> None:
        self._apply_node_action(node_actions.detach_node_from_box(self.nodes, self.edges, node_id))

    def disconnect_port(self, node_id: str, handle_id: str, side: str) -> None:
        self._apply_node_action(node_actions.disconnect_port(self.nodes, self.edges, node_id, handle_id, side))

    def update_node_color_theme(self, node_id: str, color: str) -> None:
        self._apply_node_action(node_actions.update_node_color_theme(self.nodes, self.edges, node_id, color))

    # ------------------------------------------------------------------ 节点图管理
    def create_graph(self) -> str:
        self._apply_graph_action(graph_actions.create_graph(self._snapshot))
        return self._snapshot.active_graph_id

    def duplicate_graph(self) -> str:
        self._apply_graph_action(graph_actions.duplicate_graph(self._snapshot))
        return self._snapshot.active_graph_id

    def delete_graph(self) -> None:
        self._apply_graph_action(graph_actions.delete_graph(self._snapshot))

    def rename_active_graph(self, name: str) -> None:
        self._apply_graph_action(graph_actions.rename_active_graph(self._snapshot, name))

    def switch_graph(self, graph_id: str) -> None:
        self._apply_graph_action(graph_actions.switch_graph(self._snapshot, graph_id))

    # ------------------------------------------------------------------ 导出
    def export_logic(self) -> dict:
        return {
            "activeGraphId": self._snapshot.active_graph_id,
            "graphs": serialize_graphs_for_logic(self._snapshot.graphs),
        }

    def export_editor_state(self) -> dict:
        return build_editor_state(self._snapshot).serialize()

    def export_document(self) -> dict:
        return build_project_document(self._snapshot)


__all__ = ["EditorSession"]
