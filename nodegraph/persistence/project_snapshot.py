"""项目快照（ProjectSnapshot v2）的规范化、加载、保存与旧格式迁移

存储键：`{STORAGE_KEY_PREFIX}:{project_id}`，值为快照 JSON 文本：
    {"version": 2, "activeGraphId": "...", "graphs": [{"id", "name", "nodes", "edges"}, ...]}

旧格式（v1 之前的单图存档）为 {"nodes": [...], "edges": [...]}，加载时迁移为名为 Main 的单图快照。
任何无法识别的内容都回退为只含初始节点图的新项目，不抛异常。
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, List, Optional, Set

from nodegraph.configs.settings import settings
from nodegraph.graph.models.graph_model import PROJECT_SNAPSHOT_VERSION, GraphDocument, ProjectSnapshot
from nodegraph.nodes.node_factory import create_starter_graph
from nodegraph.persistence.node_normalization import (
    clear_dangling_group_box_ids,
    normalize_persisted_edges,
    normalize_persisted_nodes,
)
from nodegraph.utils.id_utils import create_graph_id
from nodegraph.utils.logging.logger import log_debug, log_info, log_warn

if TYPE_CHECKING:
    from nodegraph.runtime.storage import KeyValueStorage


def create_storage_key(project_id: str) -> str:
    return f"{settings.STORAGE_KEY_PREFIX}:{project_id}"


def _normalize_graph_id(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _normalize_graph_name(value: Any, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    return value.strip() or fallback


def _fresh_graph_id(used_ids: Set[str]) -> str:
    graph_id = create_graph_id()
    while graph_id in used_ids:
        graph_id = create_graph_id()
    return graph_id


def normalize_graph_documents(
    source: Any,
    create_fallback_when_empty: bool = False,
    fallback_graph_name: Optional[str] = None,
) -> List[GraphDocument]:
    """规范节点图列表

    Args:
        source: 存档中的 graphs 字段（任意类型）
        create_fallback_when_empty: 结果为空时是否补一张初始节点图
        fallback_graph_name: 补图时使用的名称，缺省为 settings.DEFAULT_GRAPH_NAME

    Returns:
        GraphDocument 列表；图ID唯一且非空（重复或空白时重新生成）
    """
    input_graphs = source if isinstance(source, list) else []
    normalized: List[GraphDocument] = []
    used_ids: Set[str] = set()

    for index, entry in enumerate(input_graphs):
        if isinstance(entry, str):
            trimmed = entry.strip()
            if not trimmed:
                continue
            graph_id = trimmed
            graph_name = trimmed
            nodes = []
            edges = []
        elif isinstance(entry, dict):
            graph_id = _normalize_graph_id(entry.get("id"))
            graph_name = _normalize_graph_name(entry.get("name"), graph_id or f"graph-{index + 1}")
            nodes = clear_dangling_group_box_ids(normalize_persisted_nodes(entry.get("nodes")))
            edges = normalize_persisted_edges(entry.get("edges"), nodes)
        else:
            log_warn("[存档] 跳过非法节点图条目（下标 {}）", index)
            continue

        if not graph_id or graph_id in used_ids:
            fresh_id = _fresh_graph_id(used_ids)
            log_warn("[存档] 节点图ID为空或重复：{!r}，已改为 {}", graph_id, fresh_id)
            graph_id = fresh_id
        used_ids.add(graph_id)
        normalized.append(
            GraphDocument(
                graph_id=graph_id,
                graph_name=_normalize_graph_name(graph_name, graph_id),
                nodes=nodes,
                edges=edges,
            )
        )

    if not normalized and create_fallback_when_empty:
        return [create_starter_graph(fallback_graph_name or settings.DEFAULT_GRAPH_NAME)]
    return normalized


def ensure_project_graph_snapshot(source: Any, fallback_graph_name: Optional[str] = None) -> ProjectSnapshot:
    """把任意输入规范为至少含一张图的 v2 快照；activeGraphId 无效时取第一张图。"""
    graphs = normalize_graph_documents(
        source.get("graphs") if isinstance(source, dict) else None,
        create_fallback_when_empty=True,
        fallback_graph_name=fallback_graph_name,
    )
    raw_active_id = _normalize_graph_id(source.get("activeGraphId")) if isinstance(source, dict) else ""
    if any(graph.graph_id == raw_active_id for graph in graphs):
        active_graph_id = raw_active_id
    else:
        active_graph_id = graphs[0].graph_id
    return ProjectSnapshot(active_graph_id=active_graph_id, graphs=graphs, version=PROJECT_SNAPSHOT_VERSION)


def create_starter_project() -> ProjectSnapshot:
    return ensure_project_graph_snapshot(None, fallback_graph_name=settings.DEFAULT_GRAPH_NAME)


def is_legacy_payload(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and isinstance(payload.get("nodes"), list)
        and isinstance(payload.get("edges"), list)
    )


def migrate_legacy_snapshot(payload: dict) -> ProjectSnapshot:
    """旧版单图存档 {nodes, edges} → 只含一张 Main 图的 v2 快照。"""
    graph_id = create_graph_id()
    log_info("[存档] 迁移旧版单图存档 → {}", graph_id)
    return ensure_project_graph_snapshot(
        {
            "activeGraphId": graph_id,
            "graphs": [
                {
                    "id": graph_id,
                    "name": settings.DEFAULT_GRAPH_NAME,
                    "nodes": payload.get("nodes"),
                    "edges": payload.get("edges"),
                }
            ],
        },
        fallback_graph_name=settings.DEFAULT_GRAPH_NAME,
    )


def parse_project_payload(payload: Any) -> Optional[ProjectSnapshot]:
    """识别已解析的 JSON：v2 快照或旧版单图存档；都不是时返回 None。"""
    if isinstance(payload, dict) and isinstance(payload.get("graphs"), list):
        return ensure_project_graph_snapshot(payload, fallback_graph_name=settings.DEFAULT_GRAPH_NAME)
    if is_legacy_payload(payload):
        return migrate_legacy_snapshot(payload)
    return None


def load_project_snapshot(storage: "KeyValueStorage", project_id: str) -> ProjectSnapshot:
    """从键值存储加载项目快照

    Args:
        storage: 键值存储
        project_id: 项目ID

    Returns:
        ProjectSnapshot；记录缺失、JSON 损坏或结构不可识别时返回初始项目
    """
    storage_key = create_storage_key(project_id)
    try:
        raw = storage.get(storage_key)
        if not raw:
            log_debug("PERSISTENCE_VERBOSE", "[存档] {} 无记录，使用初始项目", storage_key)
            return create_starter_project()
        payload = json.loads(raw)
    except (json.JSONDecodeError, OSError) as exc:
        log_warn("[存档] {} 读取失败或不是合法 JSON，使用初始项目：{}", storage_key, exc)
        return create_starter_project()

    snapshot = parse_project_payload(payload)
    if snapshot is None:
        log_warn("[存档] {} 结构无法识别，使用初始项目", storage_key)
        return create_starter_project()
    return snapshot


def dump_project_snapshot(snapshot: ProjectSnapshot) -> str:
    return json.dumps(snapshot.serialize(), ensure_ascii=False)


def save_project_snapshot(storage: "KeyValueStorage", project_id: str, snapshot: ProjectSnapshot) -> None:
    storage_key = create_storage_key(project_id)
    storage.set(storage_key, dump_project_snapshot(snapshot))
    log_debug(
        "PERSISTENCE_VERBOSE",
        "[存档] 已保存 {}（{} 张图）",
        storage_key,
        len(snapshot.graphs),
    )


__all__ = [
    "create_storage_key",
    "normalize_graph_documents",
    "ensure_project_graph_snapshot",
    "create_starter_project",
    "is_legacy_payload",
    "migrate_legacy_snapshot",
    "parse_project_payload",
    "load_project_snapshot",
    "dump_project_snapshot",
    "save_project_snapshot",
]
