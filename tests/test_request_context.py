import dataclasses

import pytest

from framework_metrics.context import (
    RequestContext,
    current_request_context,
    merge_tags,
    new_request_context,
    push_request_context,
    route_from_ctx,
    start_time_from_ctx,
    tags_from_ctx,
)
from framework_metrics.labels import ensure_labels, resolve_label_set


def test_ensure_labels_keeps_caller_values_and_fills_defaults():
    labels = {"route": "a.b", "shard": "7"}
    defaults = {"shard": "none", "region": "eu"}
    out = ensure_labels(labels, defaults)
    assert out == {"route": "a.b", "shard": "7", "region": "eu"}
    # caller map untouched
    assert labels == {"route": "a.b", "shard": "7"}


@pytest.mark.parametrize("labels", [None, {}, {"region": "us"}, {"x": "1", "shard": ""}])
def test_ensure_labels_idempotent(labels):
    defaults = {"shard": "none", "region": "eu"}
    once = ensure_labels(labels, defaults)
    assert ensure_labels(once, defaults) == once
    for key in defaults:
        assert key in once


def test_resolve_label_set_projects_onto_schema():
    schema = ("serverType", "shard", "route", "code")
    out = resolve_label_set(
        {"route": "r", "extra": "dropped", "serverType": "spoofed"},
        schema,
        defaults={"shard": "none"},
        const_labels={"serverType": "connector"},
    )
    assert out == {"serverType": "connector", "shard": "none", "route": "r", "code": ""}
    assert list(out) == list(schema)


def test_extractors_read_typed_fields():
    ctx = new_request_context("room.join", tags={"k": "v"}, start_time_ns=123)
    assert start_time_from_ctx(ctx) == 123
    assert route_from_ctx(ctx) == "room.join"
    assert tags_from_ctx(ctx) == {"k": "v"}


def test_tags_degrade_to_empty_when_absent_or_wrong_type():
    assert tags_from_ctx(None) == {}
    assert tags_from_ctx(RequestContext(1, "r")) == {}
    assert tags_from_ctx(RequestContext(1, "r", tags="not-map")) == {}  # type: ignore[arg-type]
    assert tags_from_ctx(RequestContext(1, "r", tags={"ok": "v", "bad": 3})) == {"ok": "v"}  # type: ignore[dict-item]


def test_merge_tags_reserved_keys_win():
    ctx = new_request_context("r", tags={"route": "evil", "status": "evil", "key": "value"})
    merged = merge_tags({"route": "R", "status": "ok"}, ctx)
    assert merged == {"route": "R", "status": "ok", "key": "value"}


def test_context_is_immutable_and_with_tags_copies():
    ctx = new_request_context("r", tags={"a": "1"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.route = "other"  # type: ignore[misc]
    ctx2 = ctx.with_tags(b="2")
    assert tags_from_ctx(ctx) == {"a": "1"}
    assert tags_from_ctx(ctx2) == {"a": "1", "b": "2"}
    assert ctx2.start_time_ns == ctx.start_time_ns


def test_push_request_context_binds_for_block_only():
    assert current_request_context() is None
    with push_request_context("outer") as outer:
        assert current_request_context() is outer
        with push_request_context("inner", tags={"t": "1"}) as inner:
            assert current_request_context() is inner
        assert current_request_context() is outer
    assert current_request_context() is None
