"""CLI entrypoints for oracle."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from oracle.app import AppConfigError, ask_question, resolve_config
from oracle.config import OracleConfig, config_to_dict
from oracle.llm.base import LLMClientError
from oracle.util.logging import configure_logging, resolve_log_level

app = typer.Typer(help="Ask questions of an LLM provider.")


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING). Overrides ORACLE_LOG_LEVEL "
        "and the config file.",
    ),
) -> None:
    """Configure CLI-level options."""

    ctx.obj = {"log_level": log_level}


def _setup_logging(ctx: typer.Context, config: OracleConfig | None) -> None:
    cli_level = (ctx.obj or {}).get("log_level")
    configure_logging(resolve_log_level(cli_level, config.log_level if config else None))


@app.command()
def ask(
    ctx: typer.Context,
    question: str = typer.Argument(..., help="Question to ask."),
    purpose: str = typer.Option("", "--purpose", "-p", help="Purpose sent as system text."),
    example: list[str] = typer.Option(
        [],
        "--example",
        "-e",
        help="Few-shot example as INPUT=OUTPUT. Repeatable.",
    ),
    reference: list[Path] = typer.Option(
        [],
        "--reference",
        "-r",
        help="File attached as a reference (text or image). Repeatable.",
    ),
    provider: Optional[str] = typer.Option(None, "--provider", help="openai|anthropic"),
    model: Optional[str] = typer.Option(None, "--model", help="Model override."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path."),
    debug_dump: Optional[Path] = typer.Option(
        None,
        "--debug-dump",
        help="Write the assembled messages to this JSON file.",
    ),
) -> None:
    """Ask a question and print the completion."""

    config: OracleConfig | None = None
    try:
        config = resolve_config(
            config_path, provider=provider, model=model, debug_dump=debug_dump
        )
        _setup_logging(ctx, config)
        answer = ask_question(
            question=question,
            purpose=purpose,
            examples=example,
            references=reference,
            config=config,
        )
    except (AppConfigError, LLMClientError, ValueError) as exc:
        if config is None:
            _setup_logging(ctx, None)
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(answer)


@app.command("show-config")
def show_config(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path."),
) -> None:
    """Print the effective configuration with secrets masked."""

    try:
        config = resolve_config(config_path)
    except AppConfigError as exc:
        _setup_logging(ctx, None)
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    _setup_logging(ctx, config)
    typer.echo(json.dumps(config_to_dict(config), indent=2))
