"""节点种类目录：kind → 显示名/菜单分组/端口配置/默认数据。

每个节点种类在目录中登记一次；端口查询、右键菜单分组、新建节点的默认值都从这里派生，
调用方不再按 kind 写分支链。未登记的 kind 返回带流程入/出口的通用条目（分组 misc）。
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from nodegraph.graph.models.graph_model import GROUP_BOX_KIND, STICKY_NOTE_KIND
from nodegraph.graph.handles import (
    ROLE_IN,
    SEMANTIC_CONTROL,
    SEMANTIC_DATA,
    normalize_handle,
    parse_handle,
    role_for_side,
)

CONTROL_IN = "in.control.prev"
CONTROL_OUT = "out.control.next"
DATA_IN = "in.data.value"
DATA_OUT = "out.data.value"
CONDITION_IN = "in.condition.value"
CONDITION_OUT = "out.condition.result"


MISC_GROUP_ID = "misc"

# 菜单分组ID → 分组显示名（按目录出现顺序）
GROUP_LABELS: Dict[str, str] = {
    "flow-control": "Flow Control",
    "events": "Events",
    "data-input": "Data Input",
    "data-transform": "Data Transform",
    "state": "State",
    "network": "Network",
    "routing": "Routing",
    "ui": "UI",
    "interaction-motion": "Interaction & Motion",
    "advanced-forms": "Advanced Forms",
    "realtime-files": "Real-time & Files",
    "system-environment": "System & Environment",
    "abstraction": "Abstraction",
    "annotation": "Annotations",
    "debug": "Debug",
    MISC_GROUP_ID: "Misc",
}


@dataclass(frozen=True)
class NodePortProfile:
    control_in: Optional[str] = None
    control_out: Optional[str] = None
    data_in: Optional[str] = None
    data_out: Optional[str] = None
    condition_in: Optional[str] = None
    condition_out: Optional[str] = None

    def handle_for(self, role: str, semantic: str) -> Optional[str]:
        if role == ROLE_IN:
            if semantic == SEMANTIC_CONTROL:
                return self.control_in
            if semantic == SEMANTIC_DATA:
                return self.data_in
            return self.condition_in
        if semantic == SEMANTIC_CONTROL:
            return self.control_out
        if semantic == SEMANTIC_DATA:
            return self.data_out
        return self.condition_out

    def all_handles(self) -> Tuple[str, ...]:
        handles = (
            self.control_in,
            self.control_out,
            self.data_in,
            self.data_out,
            self.condition_in,
            self.condition_out,
        )
        return tuple(handle for handle in handles if handle)


@dataclass(frozen=True)
class NodeCatalogItem:
    kind: str
    label: str
    group_id: str
    ports: NodePortProfile = NodePortProfile()
    icon: str = "○"
    defaults: Dict[str, Any] = field(default_factory=dict)

    @property
    def group_label(self) -> str:
        return GROUP_LABELS.get(self.group_id, self.group_id)

    def default_data(self) -> Dict[str, Any]:
        """默认数据的深拷贝（列表/字典默认值不能在节点之间共享）。"""
        return copy.deepcopy(self.defaults)


@dataclass(frozen=True)
class NodeMenuEntry:
    kind: str
    label: str
    icon: str


@dataclass(frozen=True)
class NodeMenuGroup:
    id: str
    label: str
    items: Tuple[NodeMenuEntry, ...]


def _ports(**kwargs: str) -> NodePortProfile:
    return NodePortProfile(**kwargs)


_CONTROL_THROUGH = _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT)
_CONTROL_THROUGH_WITH_DATA = _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT, data_in=DATA_IN)
_EVENT_PORTS = _ports(control_out=CONTROL_OUT)
_LITERAL_PORTS = _ports(data_out=DATA_OUT)
_TRANSFORM_PORTS = _ports(data_in=DATA_IN, data_out=DATA_OUT)


def _two_branches() -> List[Dict[str, str]]:
    return [
        {"id": "branch-a", "label": "branch-1"},
        {"id": "branch-b", "label": "branch-2"},
    ]


# ========== 节点目录 ==========
NODE_CATALOG: Tuple[NodeCatalogItem, ...] = (
    # 流程控制
    NodeCatalogItem("start", "Start", "flow-control", _ports(control_out=CONTROL_OUT)),
    NodeCatalogItem("end", "End", "flow-control", _ports(control_in=CONTROL_IN)),
    NodeCatalogItem("process", "Process", "flow-control", _CONTROL_THROUGH),
    NodeCatalogItem(
        "if",
        "If",
        "flow-control",
        _ports(control_in=CONTROL_IN, control_out="out.control.true", condition_in="in.condition.guard"),
        icon="◇",
    ),
    NodeCatalogItem(
        "switch",
        "Switch",
        "flow-control",
        _ports(
            control_in=CONTROL_IN,
            data_in="in.data.value",
            condition_in="in.condition.case",
            control_out="out.control.default",
        ),
        icon="◇",
        defaults={"collapsed": False},
    ),
    NodeCatalogItem(
        "forEach",
        "ForEach",
        "flow-control",
        _ports(
            control_in=CONTROL_IN,
            control_out="out.control.body",
            data_in="in.data.items",
            data_out="out.data.item",
        ),
        defaults={"value": "item"},
    ),
    NodeCatalogItem("tryCatch", "Try/Catch", "flow-control", _ports(control_in=CONTROL_IN, control_out="out.control.try")),
    NodeCatalogItem(
        "delay",
        "Delay",
        "flow-control",
        _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT, data_in="in.data.ms"),
        defaults={"timeoutMs": "300"},
    ),
    NodeCatalogItem(
        "parallel",
        "Parallel",
        "flow-control",
        _ports(control_in=CONTROL_IN, control_out="out.control.branch"),
        defaults={"branches": _two_branches()},
    ),
    NodeCatalogItem(
        "race",
        "Race",
        "flow-control",
        _ports(control_in=CONTROL_IN, control_out="out.control.branch"),
        defaults={"branches": _two_branches()},
    ),
    # 事件
    NodeCatalogItem("onMount", "On Mount", "events", _EVENT_PORTS, defaults={"description": "fire once after mount"}),
    NodeCatalogItem("onClick", "On Click", "events", _EVENT_PORTS, defaults={"selector": "#button"}),
    NodeCatalogItem("onInput", "On Input", "events", _EVENT_PORTS, defaults={"selector": "input"}),
    NodeCatalogItem("onSubmit", "On Submit", "events", _EVENT_PORTS, defaults={"selector": "form"}),
    NodeCatalogItem("onRouteEnter", "On Route Enter", "events", _EVENT_PORTS, defaults={"routePath": "/"}),
    NodeCatalogItem("onTimer", "On Timer", "events", _EVENT_PORTS, defaults={"timeoutMs": "1000"}),
    # 数据输入
    NodeCatalogItem("string", "String", "data-input", _LITERAL_PORTS, defaults={"value": "hello", "collapsed": False}),
    NodeCatalogItem("number", "Number", "data-input", _LITERAL_PORTS, defaults={"value": "42", "collapsed": False}),
    NodeCatalogItem("boolean", "Boolean", "data-input", _LITERAL_PORTS, defaults={"value": "true", "collapsed": False}),
    NodeCatalogItem(
        "object", "Object", "data-input", _LITERAL_PORTS, defaults={"value": '{"key":"value"}', "collapsed": False}
    ),
    NodeCatalogItem("array", "Array", "data-input", _LITERAL_PORTS, defaults={"value": "[1,2,3]", "collapsed": False}),
    NodeCatalogItem(
        "expression",
        "Expression",
        "data-input",
        _ports(data_out=DATA_OUT, condition_out=CONDITION_OUT),
        defaults={"expression": "a > b", "collapsed": False},
    ),
    NodeCatalogItem(
        "code",
        "Code",
        "data-input",
        _CONTROL_THROUGH,
        defaults={
            "code": "console.log('hello mdr');",
            "codeLanguage": "tsx",
            "codeSize": "md",
            "collapsed": False,
        },
    ),
    # 数据变换
    NodeCatalogItem(
        "compare",
        "Compare",
        "data-transform",
        _ports(data_in=DATA_IN, data_out=DATA_OUT, condition_out=CONDITION_OUT),
        defaults={"operator": "===", "value": "0"},
    ),
    NodeCatalogItem("math", "Math", "data-transform", _TRANSFORM_PORTS, defaults={"operator": "+", "value": "0"}),
    NodeCatalogItem(
        "templateString", "Template String", "data-transform", _TRANSFORM_PORTS, defaults={"expression": "Hello ${name}"}
    ),
    NodeCatalogItem("jsonParse", "JSON Parse", "data-transform", _TRANSFORM_PORTS, defaults={"value": '{"ok":true}'}),
    NodeCatalogItem(
        "jsonStringify", "JSON Stringify", "data-transform", _TRANSFORM_PORTS, defaults={"value": '{"ok":true}'}
    ),
    NodeCatalogItem("map", "Map", "data-transform", _TRANSFORM_PORTS, defaults={"expression": "(item) => item"}),
    NodeCatalogItem(
        "filter",
        "Filter",
        "data-transform",
        _ports(data_in=DATA_IN, data_out=DATA_OUT, condition_in=CONDITION_IN),
        defaults={"expression": "(item) => true"},
    ),
    NodeCatalogItem(
        "reduce",
        "Reduce",
        "data-transform",
        _TRANSFORM_PORTS,
        defaults={"expression": "(acc, item) => acc + item", "value": "0"},
    ),
    # 状态
    NodeCatalogItem("getState", "Get State", "state", _LITERAL_PORTS, defaults={"stateKey": "count"}),
    NodeCatalogItem(
        "setState",
        "Set State",
        "state",
        _CONTROL_THROUGH_WITH_DATA,
        defaults={
            "stateKey": "count",
            "expression": "count + 1",
            "keyValueEntries": [{"id": "dep-1", "key": "count", "value": "state.count"}],
        },
    ),
    NodeCatalogItem(
        "computed",
        "Computed",
        "state",
        _TRANSFORM_PORTS,
        defaults={
            "stateKey": "doubleCount",
            "expression": "(state) => state.count * 2",
            "keyValueEntries": [{"id": "dep-1", "key": "count", "value": "state.count"}],
        },
    ),
    NodeCatalogItem(
        "watchState",
        "Watch State",
        "state",
        _ports(control_out=CONTROL_OUT, data_in=DATA_IN),
        defaults={"stateKey": "count"},
    ),
    NodeCatalogItem(
        "localStorageRead", "LocalStorage Read", "state", _TRANSFORM_PORTS, defaults={"stateKey": "auth.token"}
    ),
    NodeCatalogItem(
        "localStorageWrite",
        "LocalStorage Write",
        "state",
        _CONTROL_THROUGH_WITH_DATA,
        defaults={"stateKey": "auth.token", "expression": "value"},
    ),
    # 网络
    NodeCatalogItem(
        "fetch",
        "Fetch",
        "network",
        _ports(control_in=CONTROL_IN, data_in="in.data.url", control_out="out.control.error-request"),
        defaults={"method": "GET", "value": "", "collapsed": False},
    ),
    NodeCatalogItem("retry", "Retry", "network", _CONTROL_THROUGH, defaults={"value": "3"}),
    NodeCatalogItem("timeout", "Timeout", "network", _CONTROL_THROUGH_WITH_DATA, defaults={"timeoutMs": "3000"}),
    NodeCatalogItem("cancel", "Cancel", "network", _CONTROL_THROUGH, defaults={"description": "cancel request"}),
    NodeCatalogItem("cacheRead", "Cache Read", "network", _TRANSFORM_PORTS, defaults={"stateKey": "cache:user:list"}),
    NodeCatalogItem(
        "cacheWrite", "Cache Write", "network", _CONTROL_THROUGH_WITH_DATA, defaults={"stateKey": "cache:user:list"}
    ),
    # 路由
    NodeCatalogItem("navigate", "Navigate", "routing", _CONTROL_THROUGH_WITH_DATA, defaults={"routePath": "/dashboard"}),
    NodeCatalogItem("routeParams", "Route Params", "routing", _LITERAL_PORTS, defaults={"routePath": "/orders/:id"}),
    NodeCatalogItem(
        "routeQuery", "Route Query", "routing", _LITERAL_PORTS, defaults={"routePath": "/orders?status=paid"}
    ),
    NodeCatalogItem(
        "routeGuard",
        "Route Guard",
        "routing",
        _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT, condition_in=CONDITION_IN),
        defaults={"routePath": "/admin"},
    ),
    # UI
    NodeCatalogItem(
        "renderComponent",
        "Render Component",
        "ui",
        _CONTROL_THROUGH_WITH_DATA,
        defaults={"value": "Card", "keyValueEntries": [{"id": "prop-1", "key": "title", "value": "state.title"}]},
    ),
    NodeCatalogItem(
        "conditionalRender",
        "Conditional Render",
        "ui",
        _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT, data_in=DATA_IN, condition_in=CONDITION_IN),
        defaults={
            "value": "ProtectedPanel",
            "keyValueEntries": [{"id": "prop-1", "key": "user", "value": "state.user"}],
        },
    ),
    NodeCatalogItem(
        "listRender",
        "List Render",
        "ui",
        _CONTROL_THROUGH_WITH_DATA,
        defaults={"value": "ListItem", "keyValueEntries": [{"id": "prop-1", "key": "item", "value": "item"}]},
    ),
    NodeCatalogItem("toast", "Toast", "ui", _CONTROL_THROUGH_WITH_DATA, defaults={"description": "Saved successfully"}),
    NodeCatalogItem("modal", "Modal", "ui", _CONTROL_THROUGH_WITH_DATA, defaults={"value": "settings-modal"}),
    # 交互与动效
    NodeCatalogItem(
        "playAnimation",
        "Play Animation",
        "interaction-motion",
        _ports(control_in=CONTROL_IN, data_in="in.data.target", control_out="out.control.complete"),
        defaults={
            "targetId": "hero-banner",
            "timelineName": "fade-in",
            "action": "play",
            "speed": "1",
            "iterations": "1",
        },
    ),
    NodeCatalogItem(
        "scrollTo",
        "Scroll To",
        "interaction-motion",
        _ports(control_in=CONTROL_IN, data_in="in.data.target", control_out="out.control.done"),
        defaults={"target": "top", "selector": "#section-anchor", "behavior": "smooth", "offset": "0"},
    ),
    NodeCatalogItem(
        "focusControl",
        "Focus Control",
        "interaction-motion",
        _ports(control_in=CONTROL_IN, data_in="in.data.target", control_out="out.control.done"),
        defaults={"action": "focus", "selector": "#email-input"},
    ),
    NodeCatalogItem(
        "clipboard",
        "Clipboard",
        "interaction-motion",
        _ports(control_in=CONTROL_IN, data_in="in.data.value", data_out="out.data.value", control_out="out.control.done"),
        defaults={"mode": "copy", "value": "copied text"},
    ),
    # 高级表单
    NodeCatalogItem(
        "validate",
        "Validate",
        "advanced-forms",
        _ports(
            control_in=CONTROL_IN,
            data_in="in.data.value",
            data_out="out.data.cleaned",
            control_out="out.control.valid",
        ),
        defaults={"ruleType": "schema", "schema": "", "stopAtFirstError": "false", "rules": ""},
    ),
    NodeCatalogItem(
        "rateLimit",
        "Rate Limit",
        "advanced-forms",
        _ports(control_in=CONTROL_IN, data_in="in.data.value", data_out="out.data.value", control_out="out.control.fire"),
        defaults={"mode": "debounce", "waitMs": "300", "leading": "false", "trailing": "true", "maxWaitMs": "0"},
    ),
    NodeCatalogItem(
        "formContext",
        "Form Context",
        "advanced-forms",
        _ports(control_in=CONTROL_IN, data_out="out.data.form", control_out="out.control.changed"),
        defaults={"formId": "checkout-form", "autoCreate": "true", "resetOnSubmit": "false"},
    ),
    NodeCatalogItem(
        "formField",
        "Form Field",
        "advanced-forms",
        _ports(
            control_in=CONTROL_IN,
            data_in="in.data.value",
            data_out="out.data.value",
            control_out="out.control.changed",
        ),
        defaults={"fieldName": "email", "action": "bind", "defaultValue": ""},
    ),
    # 实时与文件
    NodeCatalogItem(
        "webSocket",
        "WebSocket",
        "realtime-files",
        _ports(
            control_in="in.control.connect",
            data_in="in.data.url",
            data_out="out.data.message",
            control_out="out.control.open",
        ),
        defaults={
            "autoReconnect": "true",
            "reconnectMs": "1500",
            "heartbeatMs": "30000",
            "protocols": "",
            "value": "wss://echo.websocket.events",
        },
    ),
    NodeCatalogItem(
        "uploadFile",
        "Upload File",
        "realtime-files",
        _ports(
            control_in=CONTROL_IN,
            data_in="in.data.file",
            data_out="out.data.response",
            control_out="out.control.success",
        ),
        defaults={
            "endpoint": "/api/upload",
            "method": "POST",
            "fieldName": "file",
            "accept": "*/*",
            "maxSizeMB": "10",
        },
    ),
    NodeCatalogItem(
        "download",
        "Download",
        "realtime-files",
        _ports(control_in=CONTROL_IN, data_in="in.data.url", control_out="out.control.done"),
        defaults={"filename": "download.bin", "mimeType": "application/octet-stream", "openMode": "save"},
    ),
    # 系统与环境
    NodeCatalogItem(
        "envVar",
        "Env Var",
        "system-environment",
        _ports(data_in="in.data.key", data_out="out.data.value"),
        defaults={"key": "API_BASE_URL", "fallback": "", "parse": "string"},
    ),
    NodeCatalogItem(
        "theme",
        "Theme",
        "system-environment",
        _ports(control_in=CONTROL_IN, data_in="in.data.theme", data_out="out.data.theme", control_out="out.control.done"),
        defaults={"action": "set", "theme": "light", "persist": "true"},
    ),
    NodeCatalogItem(
        "i18n",
        "I18n",
        "system-environment",
        _ports(data_in="in.data.key", data_out="out.data.value", control_out="out.control.missing"),
        defaults={"key": "app.title", "locale": "zh-CN", "namespace": "common", "fallbackLocale": "en-US"},
    ),
    NodeCatalogItem(
        "mediaQuery",
        "Media Query",
        "system-environment",
        _ports(data_out="out.data.current", control_out="out.control.changed"),
        defaults={"mobileMax": "767", "tabletMax": "1023", "debounceMs": "120"},
    ),
    # 抽象
    NodeCatalogItem(
        "subFlowCall",
        "SubFlow Call",
        "abstraction",
        _ports(control_in=CONTROL_IN, data_in="in.data.args", data_out="out.data.result", control_out="out.control.done"),
        defaults={
            "subGraphId": "flow-main",
            "timeoutMs": "3000",
            "inputBindings": [{"id": "input-1", "key": "payload", "value": "in.data.args"}],
            "outputBindings": [{"id": "output-1", "key": "result", "value": "out.data.result"}],
        },
    ),
    NodeCatalogItem(
        "subFlowInput",
        "SubFlow Input",
        "abstraction",
        _ports(data_out="out.data.value"),
        defaults={"name": "payload", "type": "any", "required": "false", "defaultValue": ""},
    ),
    NodeCatalogItem(
        "subFlowOutput",
        "SubFlow Output",
        "abstraction",
        _ports(control_in=CONTROL_IN, data_in="in.data.value", control_out="out.control.done"),
        defaults={"name": "result", "type": "any"},
    ),
    NodeCatalogItem(
        "memoCache",
        "Memo Cache",
        "abstraction",
        _ports(control_in=CONTROL_IN, data_in="in.data.key", data_out="out.data.value", control_out="out.control.hit"),
        defaults={"strategy": "memory", "ttlMs": "60000", "maxSize": "128"},
    ),
    # 注释（无端口）
    NodeCatalogItem(GROUP_BOX_KIND, "Group Box", "annotation", defaults={"value": "", "color": "minimal"}),
    NodeCatalogItem(
        STICKY_NOTE_KIND, "Sticky Note", "annotation", defaults={"value": "", "description": "", "color": "minimal"}
    ),
    # 调试
    NodeCatalogItem("log", "Log", "debug", _CONTROL_THROUGH_WITH_DATA, defaults={"description": "node graph log"}),
    NodeCatalogItem(
        "assert",
        "Assert",
        "debug",
        _ports(control_in=CONTROL_IN, control_out=CONTROL_OUT, condition_in=CONDITION_IN),
        defaults={"description": "assert should pass"},
    ),
    NodeCatalogItem("breakpoint", "Breakpoint", "debug", _CONTROL_THROUGH, defaults={"description": "manual pause"}),
    NodeCatalogItem("mockData", "Mock Data", "debug", _LITERAL_PORTS, defaults={"value": '{"mock":true}'}),
    NodeCatalogItem("perfMark", "Perf Mark", "debug", _CONTROL_THROUGH_WITH_DATA, defaults={"description": "render-start"}),
)

_CATALOG_BY_KIND: Dict[str, NodeCatalogItem] = {item.kind: item for item in NODE_CATALOG}

# 注释节点可选的配色主题
GROUP_BOX_THEMES: Tuple[str, ...] = ("minimal", "mono", "slate", "cyan", "amber", "rose")
STICKY_NOTE_THEMES: Tuple[str, ...] = ("minimal", "mono", "amber", "lime", "sky", "rose")


def is_container_kind(kind: str) -> bool:
    """能容纳其他节点的种类（拖入入组、自动布局）。"""
    return kind == GROUP_BOX_KIND


def is_annotation_kind(kind: str) -> bool:
    return kind in (GROUP_BOX_KIND, STICKY_NOTE_KIND)


def get_node_catalog_item(kind: str) -> NodeCatalogItem:
    """按 kind 查目录；未登记的 kind 返回通用条目（流程入/出口，分组 misc）。"""
    entry = _CATALOG_BY_KIND.get(kind)
    if entry is not None:
        return entry
    label = kind[:1].upper() + kind[1:] if kind else "Node"
    return NodeCatalogItem(kind=kind, label=label, group_id=MISC_GROUP_ID, ports=_CONTROL_THROUGH)


def get_node_port_handle(kind: str, role: str, semantic: str) -> Optional[str]:
    return get_node_catalog_item(kind).ports.handle_for(role, semantic)


def supports_port_semantic(kind: str, role: str, semantic: str) -> bool:
    return get_node_port_handle(kind, role, semantic) is not None


def get_theme_options(kind: str) -> Tuple[str, ...]:
    if kind == GROUP_BOX_KIND:
        return GROUP_BOX_THEMES
    if kind == STICKY_NOTE_KIND:
        return STICKY_NOTE_THEMES
    return ()


def _build_menu_groups() -> Tuple[NodeMenuGroup, ...]:
    grouped: Dict[str, List[NodeMenuEntry]] = {}
    for item in NODE_CATALOG:
        grouped.setdefault(item.group_id, []).append(NodeMenuEntry(kind=item.kind, label=item.label, icon=item.icon))
    return tuple(
        NodeMenuGroup(id=group_id, label=GROUP_LABELS.get(group_id, group_id), items=tuple(entries))
        for group_id, entries in grouped.items()
    )


NODE_MENU_GROUPS: Tuple[NodeMenuGroup, ...] = _build_menu_groups()


def resolve_port_menu_groups(handle_id: str, side: str) -> Tuple[NodeMenuGroup, ...]:
    """从端口右键新建节点时可选的节点种类。

    source 端口（out）需要新节点有同语义的输入口，target 端口（in）反之。
    端口标识无法解析时返回空。
    """
    handle_info = parse_handle(normalize_handle(handle_id))
    if handle_info is None:
        return ()
    # 新节点承担另一端：source 端口上新建的节点作为 target
    required_role = role_for_side("target" if side == "source" else "source")
    result: List[NodeMenuGroup] = []
    for group in NODE_MENU_GROUPS:
        items = tuple(
            entry for entry in group.items if supports_port_semantic(entry.kind, required_role, handle_info.semantic)
        )
        if items:
            result.append(NodeMenuGroup(id=group.id, label=group.label, items=items))
    return tuple(result)


__all__ = [
    "CONTROL_IN",
    "CONTROL_OUT",
    "DATA_IN",
    "DATA_OUT",
    "CONDITION_IN",
    "CONDITION_OUT",
    "GROUP_BOX_KIND",
    "STICKY_NOTE_KIND",
    "GROUP_LABELS",
    "GROUP_BOX_THEMES",
    "STICKY_NOTE_THEMES",
    "NodePortProfile",
    "NodeCatalogItem",
    "NodeMenuEntry",
    "NodeMenuGroup",
    "NODE_CATALOG",
    "NODE_MENU_GROUPS",
    "get_node_catalog_item",
    "get_node_port_handle",
    "supports_port_semantic",
    "get_theme_options",
    "is_container_kind",
    "is_annotation_kind",
    "resolve_port_menu_groups",
]
