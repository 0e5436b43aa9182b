"""连线合法性校验

校验顺序固定，命中第一条失败即返回：
missing-endpoint → invalid-handle → wrong-direction → semantic-mismatch
→ node-not-found → source-occupied → target-occupied

校验结果以值返回，不抛异常；调用方据 reason 查表得到提示文案。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from nodegraph.graph.handles import ROLE_IN, ROLE_OUT, is_multi_handle, normalize_handle, parse_handle
from nodegraph.graph.models.graph_model import EdgeModel, NodeModel, find_node
from nodegraph.utils.logging.logger import log_debug

REASON_MISSING_ENDPOINT = "missing-endpoint"
REASON_INVALID_HANDLE = "invalid-handle"
REASON_WRONG_DIRECTION = "wrong-direction"
REASON_SEMANTIC_MISMATCH = "semantic-mismatch"
REASON_NODE_NOT_FOUND = "node-not-found"
REASON_SOURCE_OCCUPIED = "source-occupied"
REASON_TARGET_OCCUPIED = "target-occupied"

CONNECTION_HINT_BY_REASON: Dict[str, str] = {
    REASON_MISSING_ENDPOINT: "连接无效：缺少起点或终点。",
    REASON_INVALID_HANDLE: "连接无效：端口标识无法识别。",
    REASON_WRONG_DIRECTION: "连接无效：只能从输出端口连接到输入端口。",
    REASON_SEMANTIC_MISMATCH: "连接无效：端口语义不匹配。",
    REASON_NODE_NOT_FOUND: "连接无效：节点状态已变化，请重试。",
    REASON_SOURCE_OCCUPIED: "连接无效：该输出端口是单接口，已被占用。",
    REASON_TARGET_OCCUPIED: "连接无效：该输入端口是单接口，已被占用。",
}


@dataclass(frozen=True)
class ConnectionCandidate:
    """一次拟建立的连线（端口标识可以是旧版简写）。"""

    source: Optional[str]
    target: Optional[str]
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


@dataclass(frozen=True)
class ConnectionValidationResult:
    valid: bool
    reason: Optional[str] = None

    @property
    def hint(self) -> Optional[str]:
        if self.reason is None:
            return None
        return CONNECTION_HINT_BY_REASON.get(self.reason)


_VALID = ConnectionValidationResult(valid=True)


def _reject(reason: str, candidate: ConnectionCandidate) -> ConnectionValidationResult:
    log_debug(
        "CONNECTION_VALIDATOR_VERBOSE",
        "[连线校验] 拒绝 {}:{} → {}:{}，原因={}",
        candidate.source,
        candidate.source_handle,
        candidate.target,
        candidate.target_handle,
        reason,
    )
    return ConnectionValidationResult(valid=False, reason=reason)


def validate_connection(
    candidate: ConnectionCandidate,
    nodes: Iterable[NodeModel],
    edges: Iterable[EdgeModel],
) -> ConnectionValidationResult:
    """校验一条候选连线。

    Args:
        candidate: 候选连线
        nodes: 当前节点图的节点
        edges: 当前节点图的连线（比较前同样做端口归一化）

    Returns:
        ConnectionValidationResult；与已有连线四元组完全相同时视为合法（重复提交）
    """
    if not candidate.source or not candidate.target:
        return _reject(REASON_MISSING_ENDPOINT, candidate)

    source_handle = normalize_handle(candidate.source_handle)
    target_handle = normalize_handle(candidate.target_handle)
    source_info = parse_handle(source_handle)
    target_info = parse_handle(target_handle)
    if source_info is None or target_info is None:
        return _reject(REASON_INVALID_HANDLE, candidate)
    if source_info.role != ROLE_OUT or target_info.role != ROLE_IN:
        return _reject(REASON_WRONG_DIRECTION, candidate)
    if source_info.semantic != target_info.semantic:
        return _reject(REASON_SEMANTIC_MISMATCH, candidate)

    node_list = list(nodes)
    if find_node(node_list, candidate.source) is None or find_node(node_list, candidate.target) is None:
        return _reject(REASON_NODE_NOT_FOUND, candidate)

    normalized_edges = [edge.normalized() for edge in edges]

    source_used = any(
        edge.src_node == candidate.source
        and edge.src_port == source_handle
        and not (edge.dst_node == candidate.target and edge.dst_port == target_handle)
        for edge in normalized_edges
    )
    if source_used and not is_multi_handle(source_handle):
        return _reject(REASON_SOURCE_OCCUPIED, candidate)

    target_used = any(
        edge.dst_node == candidate.target
        and edge.dst_port == target_handle
        and not (edge.src_node == candidate.source and edge.src_port == source_handle)
        for edge in normalized_edges
    )
    if target_used and not is_multi_handle(target_handle):
        return _reject(REASON_TARGET_OCCUPIED, candidate)

    return _VALID


def is_valid_connection(
    candidate: ConnectionCandidate,
    nodes: Iterable[NodeModel],
    edges: Iterable[EdgeModel],
) -> bool:
    return validate_connection(candidate, nodes, edges).valid


__all__ = [
    "REASON_MISSING_ENDPOINT",
    "REASON_INVALID_HANDLE",
    "REASON_WRONG_DIRECTION",
    "REASON_SEMANTIC_MISMATCH",
    "REASON_NODE_NOT_FOUND",
    "REASON_SOURCE_OCCUPIED",
    "REASON_TARGET_OCCUPIED",
    "CONNECTION_HINT_BY_REASON",
    "ConnectionCandidate",
    "ConnectionValidationResult",
    "validate_connection",
    "is_valid_connection",
]
