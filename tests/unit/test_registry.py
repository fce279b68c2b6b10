from __future__ import annotations

import pytest

from eventlog import ConsoleLevel, ErrorRecorded, EventLogConfig, InvalidName, Registry, Stream, StreamPatch


def test_create_stream_applies_registry_defaults(clock):
    registry = Registry(console="warn", clock=clock, clone=True, limit=3)
    stream = registry.create_stream("net")

    assert isinstance(stream, Stream)
    assert stream.console is ConsoleLevel.WARN
    assert stream.clock is clock
    assert stream.clone is True
    assert stream.limit == 3
    assert registry.stream("net") is stream


def test_present_options_win_over_defaults_even_when_falsy(clock):
    registry = Registry(console="all", clone=True, limit=5, clock=clock)
    stream = registry.create_stream("net", console=None, clone=False, limit=0)

    assert stream.console is ConsoleLevel.OFF
    assert stream.clone is False
    assert stream.limit == 0


def test_workspace_default_is_shared_unless_overridden(clock):
    shared = {"team": "core"}
    registry = Registry(workspace=shared, clock=clock)

    assert registry.create_stream("a").workspace is shared
    own = {"team": "edge"}
    assert registry.create_stream("b", workspace=own).workspace is own
    assert registry.create_stream("c", workspace=None).workspace == {}


def test_streams_created_up_front(clock):
    registry = Registry(clock=clock, streams={"net": {"limit": 2}, "dom": None})

    assert registry.names() == ["net", "dom"]
    assert registry.stream("net").limit == 2
    assert "dom" in registry
    assert "missing" not in registry


def test_soft_lookup_returns_none_for_invalid_or_missing(clock):
    registry = Registry(clock=clock)
    assert registry.stream("nope") is None
    assert registry.stream("") is None
    assert registry.stream(None) is None


def test_strict_entry_points_raise_on_invalid_names(clock):
    registry = Registry(clock=clock)
    with pytest.raises(InvalidName):
        registry.create_stream("  ")
    with pytest.raises(InvalidName):
        registry.ensure_stream(None)
    with pytest.raises(InvalidName):
        registry.log("", "payload")


def test_ensure_stream_is_get_or_create(clock):
    registry = Registry(clock=clock)
    first = registry.ensure_stream("net", limit=4)
    second = registry.ensure_stream(" net ", limit=9)

    assert first is second
    assert second.limit == 4


def test_numeric_names_are_coerced(clock):
    registry = Registry(clock=clock)
    stream = registry.create_stream(7)
    assert stream.name == "7"
    assert registry.stream("7") is stream


def test_forwarding_calls_emit_on_named_stream(clock):
    registry = Registry(clock=clock, streams={"app": {}})

    assert registry.log("app", "a").header.level == "log"
    assert registry.info("app", "b").header.level == "info"
    assert registry.warn("app", "c", event="retry").header.event == "retry"
    assert registry.error("app", "d").header.level == "error"
    assert registry.log("unknown", "x") is None

    assert [r.body["value"] for r in registry.query("app")] == ["a", "b", "c", "d"]
    assert [r.body["value"] for r in registry.query("app", {"level": "error"})] == ["d"]
    assert registry.query("app", limit=1)[0].body["value"] == "d"
    assert registry.query("unknown") == []


def test_disabled_registry_forwards_nothing(clock):
    registry = Registry(enabled=False, clock=clock, streams={"app": {}})
    assert registry.info("app", "x") is None
    assert registry.stream("app").enabled is False


def test_error_raises_after_storing_when_configured(clock):
    registry = Registry(raise_on_error=True, clock=clock, streams={"app": {}})

    with pytest.raises(ErrorRecorded) as excinfo:
        registry.error("app", {"msg": "bad"})

    assert excinfo.value.stream == "app"
    assert excinfo.value.record.body == {"msg": "bad"}
    assert len(registry.query("app")) == 1
    assert registry.warn("app", "fine") is not None


def test_configure_stream_creates_and_patches(clock):
    registry = Registry(clock=clock)
    workspace = {"k": 1}

    stream = registry.configure_stream("net", {"limit": 2, "workspace": workspace, "console": "info"})
    assert registry.stream("net") is stream
    assert stream.limit == 2
    assert stream.workspace is workspace
    assert stream.console is ConsoleLevel.INFO

    again = registry.configure_stream("net", StreamPatch(enabled=False))
    assert again is stream
    assert stream.enabled is False
    assert stream.limit == 2


def test_clear_one_or_all(clock):
    registry = Registry(clock=clock, streams={"a": {}, "b": {}})
    registry.log("a", 1)
    registry.log("b", 2)

    registry.clear("a")
    assert registry.query("a") == []
    assert len(registry.query("b")) == 1

    registry.clear()
    assert registry.query("b") == []
    registry.clear("missing")


def test_list_returns_stats_per_stream(clock):
    registry = Registry(clock=clock, streams={"a": {"limit": 1}, "b": {}})
    registry.log("a", 1)
    registry.log("a", 2)

    stats = {s.name: s for s in registry.list()}
    assert stats["a"].size == 1
    assert stats["a"].total_accepted == 2
    assert stats["a"].is_ring is True
    assert stats["b"].size == 0


def test_from_config_uses_config_defaults(clock):
    config = EventLogConfig(console="error", limit=10, clone=True, raise_on_error=True)
    registry = Registry.from_config(config, clock=clock)
    stream = registry.create_stream("net")

    assert registry.raise_on_error is True
    assert stream.console is ConsoleLevel.ERROR
    assert stream.limit == 10
    assert stream.clone is True
    assert stream.clock is clock


def test_streams_share_nothing(clock):
    registry = Registry(clock=clock, streams={"a": {}, "b": {}})
    registry.log("a", "only-a")
    assert registry.query("b") == []
