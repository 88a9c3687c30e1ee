"""Application wiring for CLI-friendly completions."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from oracle.config import OracleConfig, load_config, update_llm
from oracle.llm.registry import create_llm_client
from oracle.oracle import Oracle
from oracle.util.logging import get_logger
from oracle.util.observability import create_observability_manager


class AppConfigError(RuntimeError):
    """Raised when command-line options cannot be turned into a request."""


_LOGGER = get_logger("oracle.app")


def resolve_config(
    config_path: Path | None = None,
    *,
    provider: str | None = None,
    model: str | None = None,
    debug_dump: Path | None = None,
) -> OracleConfig:
    """Load configuration and apply command-line overrides."""

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as exc:
        raise AppConfigError(f"Failed to load configuration: {exc}") from exc
    return update_llm(
        config,
        provider=provider.lower() if provider else None,
        model=model,
        debug_dump_path=debug_dump,
    )


def parse_examples(examples: Iterable[str]) -> list[tuple[str, str]]:
    """Split ``INPUT=OUTPUT`` strings into pairs."""

    pairs: list[tuple[str, str]] = []
    for example in examples:
        given_input, separator, ideal_output = example.partition("=")
        if not separator:
            raise AppConfigError(f"Example must look like INPUT=OUTPUT: {example!r}")
        pairs.append((given_input, ideal_output))
    return pairs


def ask_question(
    *,
    question: str,
    purpose: str = "",
    examples: Iterable[str] = (),
    references: Iterable[Path] = (),
    config: OracleConfig,
) -> str:
    """Ask a single question with the configured provider.

    Raises:
        AppConfigError: If an example or reference file is invalid.
        LLMClientError: If the completion fails.
    """

    pairs = parse_examples(examples)
    try:
        payloads = [path.read_bytes() for path in references]
    except OSError as exc:
        raise AppConfigError(f"Failed to read reference: {exc}") from exc

    client = create_llm_client(config.llm, observability=create_observability_manager())
    oracle = Oracle(client, purpose=purpose)
    for given_input, ideal_output in pairs:
        oracle.give_example(given_input, ideal_output)
    _LOGGER.debug(
        "Asking %s with %d example(s) and %d reference(s).",
        config.llm.provider,
        len(pairs),
        len(payloads),
    )
    return oracle.ask(question, *payloads)
