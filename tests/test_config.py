"""Tests for configuration loading and call contexts."""

from datetime import timedelta

import pytest

from verisig.config import VerisigConfig, configure_logging, load_config
from verisig.context import CallContext
from verisig.errors import OperationCancelled


def test_defaults(monkeypatch):
    for name in [
        "VERISIG_MAX_AGE_HOURS",
        "VERISIG_MAX_CLOCK_SKEW_SECONDS",
        "VERISIG_SIGNED_HEADERS",
        "VERISIG_ACTOR_FETCH_TIMEOUT",
        "VERISIG_USER_AGENT",
        "VERISIG_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.max_age_hours == 12
    assert config.max_clock_skew is None
    assert config.signed_headers is None
    assert config.user_agent.startswith("verisig/")


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("VERISIG_MAX_AGE_HOURS", "6")
    monkeypatch.setenv("VERISIG_MAX_CLOCK_SKEW_SECONDS", "300")
    monkeypatch.setenv("VERISIG_SIGNED_HEADERS", "(request-target) host date digest")
    monkeypatch.setenv("VERISIG_ACTOR_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("VERISIG_USER_AGENT", "myserver/1.0")

    config = load_config()

    assert config.max_age_hours == 6
    assert config.max_clock_skew == timedelta(minutes=5)
    assert config.signed_headers == ["(request-target)", "host", "date", "digest"]
    assert config.actor_fetch_timeout == 2.5
    assert config.user_agent == "myserver/1.0"


def test_invalid_env_value(monkeypatch):
    monkeypatch.setenv("VERISIG_MAX_AGE_HOURS", "twelve")

    with pytest.raises(ValueError):
        load_config()


def test_config_model():
    assert VerisigConfig(max_clock_skew_seconds=0).max_clock_skew == timedelta(0)


def test_context_lifecycle():
    ctx = CallContext.with_timeout(60)

    ctx.check()
    assert not ctx.cancelled
    assert not ctx.expired

    ctx.cancel()
    assert ctx.cancelled
    with pytest.raises(OperationCancelled):
        ctx.check()


def test_context_without_deadline_never_expires():
    assert CallContext().expired is False


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr("logging.basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("debug")

    assert calls == [{"level": "DEBUG"}]
