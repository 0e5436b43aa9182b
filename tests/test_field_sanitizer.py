from __future__ import annotations

from nodegraph.graph.models.graph_model import EdgeModel, NodeModel
from nodegraph.mutation.field_sanitizer import sanitize_field_value
from nodegraph.validate.node_validation import (
    NODE_VALIDATION_TEXTS,
    refresh_validation_messages,
    resolve_node_validation_message,
)


def test_non_negative_fields_keep_digits_only() -> None:
    assert sanitize_field_value("timeoutMs", "12a3") == "123"
    assert sanitize_field_value("timeoutMs", "abc") == ""
    assert sanitize_field_value("maxSize", "-5") == "5"
    assert sanitize_field_value("waitMs", "99999999") == "1000000"


def test_offset_accepts_sign_and_clamps() -> None:
    assert sanitize_field_value("offset", "-12x3") == "-123"
    assert sanitize_field_value("offset", "200000") == "100000"
    assert sanitize_field_value("offset", "--5") == ""
    assert sanitize_field_value("offset", "") == ""


def test_speed_is_decimal_between_zero_and_hundred() -> None:
    assert sanitize_field_value("speed", "1.5x") == "1.5"
    assert sanitize_field_value("speed", "2") == "2"
    assert sanitize_field_value("speed", "150") == "100"
    assert sanitize_field_value("speed", ".") == ""


def test_other_fields_are_untouched() -> None:
    assert sanitize_field_value("selector", "  #id ") == "  #id "


def test_validation_messages_per_kind() -> None:
    play = NodeModel(id="a", kind="playAnimation", data={"targetId": "hero", "timelineName": " "})
    assert resolve_node_validation_message(play, []) == NODE_VALIDATION_TEXTS["playAnimationRequired"]

    scroll_top = NodeModel(id="b", kind="scrollTo", data={"target": "top", "selector": ""})
    assert resolve_node_validation_message(scroll_top, []) is None
    scroll_selector = NodeModel(id="c", kind="scrollTo", data={"target": "selector", "selector": ""})
    assert resolve_node_validation_message(scroll_selector, []) == NODE_VALIDATION_TEXTS["scrollToSelectorRequired"]

    env = NodeModel(id="d", kind="envVar", data={"key": ""})
    assert resolve_node_validation_message(env, []) == NODE_VALIDATION_TEXTS["envVarKeyRequired"]


def test_validate_node_accepts_rules_input_edge() -> None:
    node = NodeModel(id="v", kind="validate", data={"schema": "", "rules": ""})
    assert resolve_node_validation_message(node, []) == NODE_VALIDATION_TEXTS["validateSchemaOrRulesRequired"]
    edges = [EdgeModel("e1", "src", "out.data.value", "v", "in.data.rules")]
    assert resolve_node_validation_message(node, edges) is None


def test_refresh_writes_and_clears_messages() -> None:
    focus = NodeModel(id="f", kind="focusControl", data={"selector": ""})
    refreshed = refresh_validation_messages([focus], [])
    assert refreshed[0].data["validationMessage"] == NODE_VALIDATION_TEXTS["focusControlSelectorRequired"]
    assert refresh_validation_messages(refreshed, []) is refreshed, "无变化时返回原列表"

    fixed = [refreshed[0].with_data(selector="#email")]
    cleared = refresh_validation_messages(fixed, [])
    assert "validationMessage" not in cleared[0].data
