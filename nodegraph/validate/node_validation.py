from __future__ import annotations

from typing import Any, Iterable, Optional

from nodegraph.graph.models.graph_model import EdgeModel, NodeModel

# 节点必填项缺失时显示在节点上的提示
NODE_VALIDATION_TEXTS = {
    "playAnimationRequired": "请填写目标元素与时间轴名称。",
    "scrollToSelectorRequired": "滚动目标为选择器时，请填写选择器。",
    "focusControlSelectorRequired": "请填写要聚焦的控件选择器。",
    "validateSchemaOrRulesRequired": "请提供校验 schema、规则，或连接规则输入。",
    "envVarKeyRequired": "请填写环境变量名。",
}

RULES_INPUT_HANDLE = "in.data.rules"


def _blank(value: Any) -> bool:
    if not isinstance(value, str):
        return True
    return not value.strip()


def resolve_node_validation_message(node: NodeModel, edges: Iterable[EdgeModel]) -> Optional[str]:
    """按节点种类检查必填项，返回提示文案；无问题返回 None。"""
    data = node.data
    if node.kind == "playAnimation":
        if _blank(data.get("targetId")) or _blank(data.get("timelineName")):
            return NODE_VALIDATION_TEXTS["playAnimationRequired"]
        return None
    if node.kind == "scrollTo":
        if data.get("target") == "selector" and _blank(data.get("selector")):
            return NODE_VALIDATION_TEXTS["scrollToSelectorRequired"]
        return None
    if node.kind == "focusControl":
        if _blank(data.get("selector")):
            return NODE_VALIDATION_TEXTS["focusControlSelectorRequired"]
        return None
    if node.kind == "validate":
        has_rules_input = any(
            edge.dst_node == node.id and edge.dst_port == RULES_INPUT_HANDLE for edge in edges
        )
        if _blank(data.get("schema")) and _blank(data.get("rules")) and not has_rules_input:
            return NODE_VALIDATION_TEXTS["validateSchemaOrRulesRequired"]
        return None
    if node.kind == "envVar":
        if _blank(data.get("key")):
            return NODE_VALIDATION_TEXTS["envVarKeyRequired"]
        return None
    return None


def refresh_validation_messages(nodes: list, edges: list) -> list:
    """把校验提示写入各节点的 validationMessage；无变化时返回原列表。"""
    changed = False
    next_nodes = []
    for node in nodes:
        message = resolve_node_validation_message(node, edges)
        if node.data.get("validationMessage") != message:
            node = node.with_data(validationMessage=message)
            changed = True
        next_nodes.append(node)
    return next_nodes if changed else nodes


__all__ = [
    "NODE_VALIDATION_TEXTS",
    "resolve_node_validation_message",
    "refresh_validation_messages",
]
