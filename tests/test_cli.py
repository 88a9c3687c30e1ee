from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from oracle.app import AppConfigError, ask_question, parse_examples
from oracle.cli.main import app
from oracle.config import LLMConfig, OracleConfig
from oracle.llm.base import LLMConfigurationError, TransportError


def test_cli_ask_invokes_ask_question(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = CliRunner()
    captured: dict[str, object] = {}
    reference = tmp_path / "notes.txt"
    reference.write_text("notes", encoding="utf-8")

    def fake_ask_question(**kwargs: object) -> str:
        captured.update(kwargs)
        return "even"

    monkeypatch.setattr("oracle.cli.main.ask_question", fake_ask_question)

    result = runner.invoke(
        app,
        [
            "ask",
            "4",
            "--purpose",
            "parity",
            "--example",
            "2=even",
            "--reference",
            str(reference),
            "--provider",
            "anthropic",
            "--config",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "even" in result.output
    assert captured["question"] == "4"
    assert captured["purpose"] == "parity"
    assert captured["examples"] == ["2=even"]
    assert captured["references"] == [reference]
    config = captured["config"]
    assert isinstance(config, OracleConfig)
    assert config.llm.provider == "anthropic"


def test_cli_ask_reports_client_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = CliRunner()

    def fake_ask_question(**_kwargs: object) -> str:
        raise TransportError("OpenAI API request failed with status 500: down", status_code=500)

    monkeypatch.setattr("oracle.cli.main.ask_question", fake_ask_question)

    result = runner.invoke(app, ["ask", "hi", "--config", str(tmp_path)])

    assert result.exit_code == 1
    assert "Error: OpenAI API request failed with status 500" in result.output


def test_cli_show_config_masks_key(tmp_path: Path) -> None:
    runner = CliRunner()
    config_path = tmp_path / "oracle.yaml"
    config_path.write_text('{"llm": {"provider": "openai", "api_key": "secret"}}', encoding="utf-8")

    result = runner.invoke(app, ["show-config", "--config", str(config_path)])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["llm"]["api_key"] == "***"
    assert "secret" not in result.output


def test_parse_examples_requires_separator() -> None:
    assert parse_examples(["2=even", "a=b=c"]) == [("2", "even"), ("a", "b=c")]
    with pytest.raises(AppConfigError):
        parse_examples(["no separator"])


def test_ask_question_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    with pytest.raises(LLMConfigurationError):
        ask_question(question="hi", config=OracleConfig(llm=LLMConfig(provider="anthropic")))


def test_ask_question_reports_missing_reference(tmp_path: Path) -> None:
    with pytest.raises(AppConfigError):
        ask_question(
            question="hi",
            references=[tmp_path / "missing.png"],
            config=OracleConfig(llm=LLMConfig(api_key="k")),
        )


def test_cli_uses_configured_log_level(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    runner = CliRunner()
    levels: list[str] = []
    monkeypatch.delenv("ORACLE_LOG_LEVEL", raising=False)
    monkeypatch.setattr("oracle.cli.main.configure_logging", levels.append)
    config_path = tmp_path / "oracle.yaml"
    config_path.write_text("log_level: debug\nllm:\n  provider: openai\n", encoding="utf-8")

    result = runner.invoke(app, ["show-config", "--config", str(config_path)])

    assert result.exit_code == 0
    assert levels == ["DEBUG"]


def test_cli_log_level_flag_overrides_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    runner = CliRunner()
    levels: list[str] = []
    monkeypatch.setenv("ORACLE_LOG_LEVEL", "INFO")
    monkeypatch.setattr("oracle.cli.main.configure_logging", levels.append)
    config_path = tmp_path / "oracle.yaml"
    config_path.write_text("log_level: DEBUG\n", encoding="utf-8")

    result = runner.invoke(
        app, ["--log-level", "error", "show-config", "--config", str(config_path)]
    )

    assert result.exit_code == 0
    assert levels == ["ERROR"]
