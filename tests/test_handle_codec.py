from __future__ import annotations

from hypothesis import given, settings as hypothesis_settings
from hypothesis import strategies as st

from nodegraph.graph.handles import (
    CONDITION_RESULT_HANDLE,
    HandleInfo,
    is_multi_handle,
    normalize_handle,
    parse_handle,
    resolve_multiplicity,
)

_ROLES = st.sampled_from(["in", "out"])
_SEMANTICS = st.sampled_from(["control", "data", "condition"])
_SUFFIXES = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_.", max_size=16)


@hypothesis_settings(max_examples=200, deadline=None)
@given(role=_ROLES, semantic=_SEMANTICS, suffix=_SUFFIXES)
def test_parse_handle_splits_canonical_form(role: str, semantic: str, suffix: str) -> None:
    handle_id = f"{role}.{semantic}.{suffix}"
    parsed = parse_handle(handle_id)
    assert parsed == HandleInfo(role=role, semantic=semantic, suffix=suffix), "规范端口应拆出 role/semantic/suffix"
    assert normalize_handle(handle_id) == handle_id, "规范端口归一化后应保持不变"


@hypothesis_settings(max_examples=200, deadline=None)
@given(text=st.text(max_size=24))
def test_normalize_handle_is_idempotent(text: str) -> None:
    once = normalize_handle(text)
    assert normalize_handle(once) == once, "归一化应幂等"


def test_parse_handle_rejects_malformed_input() -> None:
    for handle_id in (None, "", "in", "in.control", "side.control.x", "in.signal.x", "IN.control.x"):
        assert parse_handle(handle_id) is None, f"{handle_id!r} 不应被解析"


def test_parse_handle_accepts_empty_suffix() -> None:
    assert parse_handle("out.data.") == HandleInfo(role="out", semantic="data", suffix="")


def test_normalize_handle_maps_legacy_aliases() -> None:
    assert normalize_handle("in.prev") == "in.control.prev"
    assert normalize_handle("out.next") == "out.control.next"
    assert normalize_handle("in.value") == "in.data.value"
    assert normalize_handle("out.case-abc") == "out.control.case-abc"
    assert normalize_handle("in.case-abc") == "in.condition.case-abc"


def test_normalize_handle_keeps_unknown_text() -> None:
    assert normalize_handle(None) is None
    assert normalize_handle("") is None
    assert normalize_handle("whatever") == "whatever", "无法识别的端口原样返回，由连线校验拒绝"


def test_multiplicity_rules() -> None:
    assert resolve_multiplicity("target", "control") == "multi"
    assert resolve_multiplicity("source", "data") == "multi"
    assert resolve_multiplicity("source", "control") == "single"
    assert resolve_multiplicity("target", "data") == "single"
    assert resolve_multiplicity("target", "condition") == "single"
    assert resolve_multiplicity("source", "condition") == "single"


def test_is_multi_handle() -> None:
    assert is_multi_handle("in.control.prev") is True
    assert is_multi_handle("out.data.value") is True
    assert is_multi_handle("out.control.next") is False
    assert is_multi_handle("in.data.value") is False
    assert is_multi_handle(CONDITION_RESULT_HANDLE) is True, "条件结果输出口始终允许多连"
    assert is_multi_handle("out.condition.other") is False
    assert is_multi_handle("garbage") is False
