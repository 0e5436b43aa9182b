"""节点内容编辑命令

节点卡片上的每个编辑动作（增删分支条件、改状态码、改字段……）都表示为一个命令对象，
由 `apply_node_command` 统一处理并返回新的节点/连线列表与可选提示。

约定：
- 命令指向的节点种类不符时不做任何修改
- 触发"至少保留一个"限制的删除不修改节点与连线，只返回提示
- 删除条目成功时一并删除挂在该条目端口上的连线
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from nodegraph.graph.handles import branch_source_handle, case_source_handle, case_target_handle, status_source_handle
from nodegraph.graph.models.graph_model import EdgeModel, GraphDocument, NodeModel, find_node, replace_node
from nodegraph.graph.models.node_items import (
    BINDING_FIELDS,
    BRANCH_KINDS,
    KEY_VALUE_MIN_ONE_KINDS,
    normalize_binding_entries,
    normalize_branches,
    normalize_cases,
    normalize_key_value_entries,
    normalize_status_codes,
)
from nodegraph.mutation.field_sanitizer import sanitize_field_value
from nodegraph.mutation.hints import (
    HINT_KEEP_AT_LEAST_ONE_BINDING,
    HINT_KEEP_AT_LEAST_ONE_BRANCH,
    HINT_KEEP_AT_LEAST_ONE_CASE,
    HINT_KEEP_AT_LEAST_ONE_ENTRY,
    HINT_KEEP_AT_LEAST_ONE_STATUS,
    hint_text,
)
from nodegraph.utils.id_utils import (
    create_binding_id,
    create_branch_id,
    create_fetch_status_id,
    create_node_id,
    create_switch_case_id,
)

# ChangeValue 适用的节点种类
VALUE_KINDS = frozenset({"string", "number", "boolean", "object", "array", "fetch"})

ENTRY_FIELDS = ("key", "value")


# ========== 命令 ==========

@dataclass(frozen=True)
class AddCase:
    node_id: str


@dataclass(frozen=True)
class RemoveCase:
    node_id: str
    case_id: str


@dataclass(frozen=True)
class ChangeBranchLabel:
    """修改 switch 分支条件或 parallel/race 分支的显示名"""

    node_id: str
    branch_id: str
    label: str


@dataclass(frozen=True)
class AddBranch:
    node_id: str


@dataclass(frozen=True)
class RemoveBranch:
    node_id: str
    branch_id: str


@dataclass(frozen=True)
class AddStatusCode:
    node_id: str


@dataclass(frozen=True)
class RemoveStatusCode:
    node_id: str
    status_id: str


@dataclass(frozen=True)
class ChangeStatusCode:
    node_id: str
    status_id: str
    code: str


@dataclass(frozen=True)
class ChangeMethod:
    node_id: str
    method: str


@dataclass(frozen=True)
class ChangeField:
    node_id: str
    field: str
    value: str


@dataclass(frozen=True)
class AddKeyValueEntry:
    node_id: str


@dataclass(frozen=True)
class RemoveKeyValueEntry:
    node_id: str
    entry_id: str


@dataclass(frozen=True)
class ChangeKeyValueEntry:
    node_id: str
    entry_id: str
    field: str  # "key" | "value"
    value: str


@dataclass(frozen=True)
class AddBindingEntry:
    node_id: str
    binding: str  # "inputBindings" | "outputBindings"


@dataclass(frozen=True)
class RemoveBindingEntry:
    node_id: str
    binding: str
    entry_id: str


@dataclass(frozen=True)
class ChangeBindingEntry:
    node_id: str
    binding: str
    entry_id: str
    field: str
    value: str


@dataclass(frozen=True)
class ToggleCollapse:
    node_id: str


@dataclass(frozen=True)
class ChangeValue:
    node_id: str
    value: str


@dataclass(frozen=True)
class ChangeExpression:
    node_id: str
    expression: str


@dataclass(frozen=True)
class ChangeCode:
    node_id: str
    code: str


@dataclass(frozen=True)
class ChangeCodeLanguage:
    node_id: str
    language: str


@dataclass(frozen=True)
class ChangeCodeSize:
    node_id: str
    size: str


@dataclass
class CommandOutcome:
    nodes: List[NodeModel]
    edges: List[EdgeModel]
    hint: Optional[str] = None
    # 命令是否真正修改了节点或连线
    changed: bool = False


# ========== 处理函数 ==========

_Handler = Callable[[NodeModel, List[EdgeModel], Any], Tuple[Optional[NodeModel], List[EdgeModel], Optional[str]]]


def _without_edges(edges: List[EdgeModel], predicate: Callable[[EdgeModel], bool]) -> List[EdgeModel]:
    return [edge for edge in edges if not predicate(edge)]


def _has_item(items: List[Dict[str, Any]], item_id: str) -> bool:
    return any(item["id"] == item_id for item in items)


def _add_case(node, edges, command: AddCase):
    if node.kind != "switch":
        return None, edges, None
    cases = normalize_cases(node.data.get("cases"))
    cases.append({"id": create_switch_case_id(), "label": f"case-{len(cases) + 1}"})
    return node.with_data(cases=cases), edges, None


def _remove_case(node, edges, command: RemoveCase):
    if node.kind != "switch":
        return None, edges, None
    cases = normalize_cases(node.data.get("cases"))
    if len(cases) <= 1:
        return None, edges, HINT_KEEP_AT_LEAST_ONE_CASE
    if not _has_item(cases, command.case_id):
        return None, edges, None
    source_handle = case_source_handle(command.case_id)
    target_handle = case_target_handle(command.case_id)
    next_edges = _without_edges(
        edges,
        lambda edge: (edge.src_node == node.id and edge.src_port == source_handle)
        or (edge.dst_node == node.id and edge.dst_port == target_handle),
    )
    next_node = node.with_data(cases=[item for item in cases if item["id"] != command.case_id])
    return next_node, next_edges, None


def _change_branch_label(node, edges, command: ChangeBranchLabel):
    if node.kind == "switch":
        cases = normalize_cases(node.data.get("cases"))
        for item in cases:
            if item["id"] == command.branch_id:
                item["label"] = command.label
        return node.with_data(cases=cases), edges, None
    if node.kind not in BRANCH_KINDS:
        return None, edges, None
    branches = normalize_branches(node.data.get("branches"))
    for item in branches:
        if item["id"] == command.branch_id:
            item["label"] = command.label
    return node.with_data(branches=branches), edges, None


def _add_branch(node, edges, command: AddBranch):
    if node.kind not in BRANCH_KINDS:
        return None, edges, None
    branches = normalize_branches(node.data.get("branches"))
    branches.append({"id": create_branch_id(), "label": f"branch-{len(branches) + 1}"})
    return node.with_data(branches=branches), edges, None


def _remove_branch(node, edges, command: RemoveBranch):
    if node.kind not in BRANCH_KINDS:
        return None, edges, None
    branches = normalize_branches(node.data.get("branches"))
    if len(branches) <= 1:
        return None, edges, HINT_KEEP_AT_LEAST_ONE_BRANCH
    if not _has_item(branches, command.branch_id):
        return None, edges, None
    source_handle = branch_source_handle(command.branch_id)
    next_edges = _without_edges(
        edges,
        lambda edge: edge.src_node == node.id and edge.src_port == source_handle,
    )
    next_node = node.with_data(branches=[item for item in branches if item["id"] != command.branch_id])
    return next_node, next_edges, None


def _add_status_code(node, edges, command: AddStatusCode):
    if node.kind != "fetch":
        return None, edges, None
    status_codes = normalize_status_codes(node.data.get("statusCodes"))
    status_codes.append({"id": create_fetch_status_id(), "code": "200"})
    return node.with_data(statusCodes=status_codes), edges, None


def _remove_status_code(node, edges, command: RemoveStatusCode):
    if node.kind != "fetch":
        return None, edges, None
    status_codes = normalize_status_codes(node.data.get("statusCodes"))
    if len(status_codes) <= 1:
        return None, edges, HINT_KEEP_AT_LEAST_ONE_STATUS
    if not _has_item(status_codes, command.status_id):
        return None, edges, None
    source_handle = status_source_handle(command.status_id)
    next_edges = _without_edges(
        edges,
        lambda edge: edge.src_node == node.id and edge.src_port == source_handle,
    )
    next_node = node.with_data(
        statusCodes=[item for item in status_codes if item["id"] != command.status_id]
    )
    return next_node, next_edges, None


def _change_status_code(node, edges, command: ChangeStatusCode):
    if node.kind != "fetch":
        return None, edges, None
    status_codes = normalize_status_codes(node.data.get("statusCodes"))
    for item in status_codes:
        if item["id"] == command.status_id:
            item["code"] = command.code
    return node.with_data(statusCodes=status_codes), edges, None


def _change_method(node, edges, command: ChangeMethod):
    if node.kind != "fetch":
        return None, edges, None
    return node.with_data(method=command.method), edges, None


def _change_field(node, edges, command: ChangeField):
    return node.with_data(**{command.field: sanitize_field_value(command.field, command.value)}), edges, None


def _add_key_value_entry(node, edges, command: AddKeyValueEntry):
    entries = normalize_key_value_entries(node.data.get("keyValueEntries"))
    entries.append({"id": create_node_id(), "key": "", "value": ""})
    return node.with_data(keyValueEntries=entries), edges, None


def _remove_key_value_entry(node, edges, command: RemoveKeyValueEntry):
    entries = normalize_key_value_entries(node.data.get("keyValueEntries"))
    if node.kind in KEY_VALUE_MIN_ONE_KINDS and len(entries) <= 1:
        return None, edges, HINT_KEEP_AT_LEAST_ONE_ENTRY
    if not _has_item(entries, command.entry_id):
        return None, edges, None
    next_entries = [item for item in entries if item["id"] != command.entry_id]
    return node.with_data(keyValueEntries=next_entries), edges, None


def _change_key_value_entry(node, edges, command: ChangeKeyValueEntry):
    if command.field not in ENTRY_FIELDS:
        raise ValueError(f"键值对字段只能是 key/value：{command.field!r}")
    entries = normalize_key_value_entries(node.data.get("keyValueEntries"))
    for item in entries:
        if item["id"] == command.entry_id:
            item[command.field] = command.value
    return node.with_data(keyValueEntries=entries), edges, None


def _check_binding(binding: str) -> None:
    if binding not in BINDING_FIELDS:
        raise ValueError(f"未知的参数绑定列表：{binding!r}")


def _add_binding_entry(node, edges, command: AddBindingEntry):
    _check_binding(command.binding)
    if node.kind != "subFlowCall":
        return None, edges, None
    entries = normalize_binding_entries(node.data.get(command.binding))
    entries.append({"id": create_binding_id(), "key": "", "value": ""})
    return node.with_data(**{command.binding: entries}), edges, None


def _remove_binding_entry(node, edges, command: RemoveBindingEntry):
    _check_binding(command.binding)
    if node.kind != "subFlowCall":
        return None, edges, None
    entries = normalize_binding_entries(node.data.get(command.binding))
    if len(entries) <= 1:
        return None, edges, HINT_KEEP_AT_LEAST_ONE_BINDING
    if not _has_item(entries, command.entry_id):
        return None, edges, None
    next_entries = [item for item in entries if item["id"] != command.entry_id]
    return node.with_data(**{command.binding: next_entries}), edges, None


def _change_binding_entry(node, edges, command: ChangeBindingEntry):
    _check_binding(command.binding)
    if command.field not in ENTRY_FIELDS:
        raise ValueError(f"参数绑定字段只能是 key/value：{command.field!r}")
    if node.kind != "subFlowCall":
        return None, edges, None
    entries = normalize_binding_entries(node.data.get(command.binding))
    for item in entries:
        if item["id"] == command.entry_id:
            item[command.field] = command.value
    return node.with_data(**{command.binding: entries}), edges, None


def _toggle_collapse(node, edges, command: ToggleCollapse):
    return node.with_data(collapsed=not node.collapsed), edges, None


def _change_value(node, edges, command: ChangeValue):
    if node.kind not in VALUE_KINDS:
        return None, edges, None
    return node.with_data(value=command.value), edges, None


def _change_expression(node, edges, command: ChangeExpression):
    if node.kind != "expression":
        return None, edges, None
    return node.with_data(expression=command.expression), edges, None


def _change_code(node, edges, command: ChangeCode):
    if node.kind != "code":
        return None, edges, None
    return node.with_data(code=command.code), edges, None


def _change_code_language(node, edges, command: ChangeCodeLanguage):
    if node.kind != "code":
        return None, edges, None
    return node.with_data(codeLanguage=command.language), edges, None


def _change_code_size(node, edges, command: ChangeCodeSize):
    if node.kind != "code":
        return None, edges, None
    return node.with_data(codeSize=command.size), edges, None


_COMMAND_HANDLERS: Dict[type, _Handler] = {
    AddCase: _add_case,
    RemoveCase: _remove_case,
    ChangeBranchLabel: _change_branch_label,
    AddBranch: _add_branch,
    RemoveBranch: _remove_branch,
    AddStatusCode: _add_status_code,
    RemoveStatusCode: _remove_status_code,
    ChangeStatusCode: _change_status_code,
    ChangeMethod: _change_method,
    ChangeField: _change_field,
    AddKeyValueEntry: _add_key_value_entry,
    RemoveKeyValueEntry: _remove_key_value_entry,
    ChangeKeyValueEntry: _change_key_value_entry,
    AddBindingEntry: _add_binding_entry,
    RemoveBindingEntry: _remove_binding_entry,
    ChangeBindingEntry: _change_binding_entry,
    ToggleCollapse: _toggle_collapse,
    ChangeValue: _change_value,
    ChangeExpression: _change_expression,
    ChangeCode: _change_code,
    ChangeCodeLanguage: _change_code_language,
    ChangeCodeSize: _change_code_size,
}

NODE_COMMAND_TYPES: Tuple[type, ...] = tuple(_COMMAND_HANDLERS)


def apply_node_command(graph: GraphDocument, command: Any) -> CommandOutcome:
    """执行一个节点编辑命令

    Args:
        graph: 当前节点图（不会被修改）
        command: 本模块定义的命令对象之一

    Returns:
        CommandOutcome；节点不存在或种类不符时 nodes/edges 为原列表，changed=False

    Raises:
        ValueError: 未知命令类型
    """
    handler = _COMMAND_HANDLERS.get(type(command))
    if handler is None:
        raise ValueError(f"未知的节点命令：{type(command).__name__}")

    node = find_node(graph.nodes, command.node_id)
    if node is None:
        return CommandOutcome(nodes=graph.nodes, edges=graph.edges)

    next_node, next_edges, hint_key = handler(node, graph.edges, command)
    if next_node is None:
        return CommandOutcome(nodes=graph.nodes, edges=graph.edges, hint=hint_text(hint_key))
    return CommandOutcome(
        nodes=replace_node(graph.nodes, next_node),
        edges=next_edges,
        hint=hint_text(hint_key),
        changed=True,
    )


__all__ = [
    "AddCase",
    "RemoveCase",
    "ChangeBranchLabel",
    "AddBranch",
    "RemoveBranch",
    "AddStatusCode",
    "RemoveStatusCode",
    "ChangeStatusCode",
    "ChangeMethod",
    "ChangeField",
    "AddKeyValueEntry",
    "RemoveKeyValueEntry",
    "ChangeKeyValueEntry",
    "AddBindingEntry",
    "RemoveBindingEntry",
    "ChangeBindingEntry",
    "ToggleCollapse",
    "ChangeValue",
    "ChangeExpression",
    "ChangeCode",
    "ChangeCodeLanguage",
    "ChangeCodeSize",
    "CommandOutcome",
    "NODE_COMMAND_TYPES",
    "apply_node_command",
]
