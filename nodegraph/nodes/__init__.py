from __future__ import annotations

from .node_catalog import (
    NODE_CATALOG,
    NODE_MENU_GROUPS,
    NodeCatalogItem,
    NodePortProfile,
    get_node_catalog_item,
    get_node_port_handle,
    is_annotation_kind,
    is_container_kind,
    resolve_port_menu_groups,
    supports_port_semantic,
)
from .node_factory import create_node, create_starter_graph, get_default_handle_for_node

__all__ = [
    "NODE_CATALOG",
    "NODE_MENU_GROUPS",
    "NodeCatalogItem",
    "NodePortProfile",
    "get_node_catalog_item",
    "get_node_port_handle",
    "is_annotation_kind",
    "is_container_kind",
    "resolve_port_menu_groups",
    "supports_port_semantic",
    "create_node",
    "create_starter_graph",
    "get_default_handle_for_node",
]
