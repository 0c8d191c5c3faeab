from __future__ import annotations

import pytest

from uiagent.config.settings import Settings


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("", False)])
def test_mock_agent_flag_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("MOCK_AGENT", raw)

    assert Settings().mock_agent is expected


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("PLANNER_TEMPERATURE", "0.5")

    cfg = Settings()

    assert cfg.has_model_credentials is True
    assert cfg.model == "gpt-test"
    assert cfg.planner_temperature == 0.5
    assert cfg.tracing_enabled is False


def test_defaults(monkeypatch):
    for name in ("OPENAI_API_KEY", "OPENAI_MODEL", "MOCK_AGENT", "LANGFUSE_PUBLIC_KEY", "LANGFUSE_SECRET_KEY"):
        monkeypatch.delenv(name, raising=False)

    cfg = Settings()

    assert cfg.model == "gpt-5"
    assert cfg.mock_agent is False
    assert cfg.has_model_credentials is False
    assert cfg.prompt_char_limit == 4000
