import pytest

from eventlog import ConsoleLevel, EventLogConfig, load_config

_ENV_VARS = [
    "EVENTLOG_CONSOLE",
    "EVENTLOG_LIMIT",
    "EVENTLOG_ENABLED",
    "EVENTLOG_CLONE",
    "EVENTLOG_RAISE_ON_ERROR",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


def test_load_config_defaults():
    cfg = load_config()
    assert cfg.console is ConsoleLevel.OFF
    assert cfg.limit == 0
    assert cfg.enabled is True
    assert cfg.clone is False
    assert cfg.raise_on_error is False


def test_load_config_parses_values(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTLOG_CONSOLE", "Warn")
    monkeypatch.setenv("EVENTLOG_LIMIT", "500")
    monkeypatch.setenv("EVENTLOG_ENABLED", "no")
    monkeypatch.setenv("EVENTLOG_CLONE", "yes")
    monkeypatch.setenv("EVENTLOG_RAISE_ON_ERROR", "1")

    cfg = load_config()
    assert cfg.console is ConsoleLevel.WARN
    assert cfg.limit == 500
    assert cfg.enabled is False
    assert cfg.clone is True
    assert cfg.raise_on_error is True


@pytest.mark.parametrize("raw, expected", [("true", ConsoleLevel.ALL), ("3", ConsoleLevel.INFO), ("nonsense", ConsoleLevel.OFF)])
def test_load_config_console_forms(monkeypatch: pytest.MonkeyPatch, raw, expected):
    monkeypatch.setenv("EVENTLOG_CONSOLE", raw)
    assert load_config().console is expected


def test_load_config_rejects_bad_limit(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTLOG_LIMIT", "-5")
    with pytest.raises(ValueError):
        load_config()


def test_load_config_rejects_bad_bool(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("EVENTLOG_CLONE", "maybe")
    with pytest.raises(ValueError, match="EVENTLOG_CLONE"):
        load_config()


def test_config_model_accepts_direct_values():
    cfg = EventLogConfig(console=True, limit="25")
    assert cfg.console is ConsoleLevel.ALL
    assert cfg.limit == 25
