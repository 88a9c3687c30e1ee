"""LLM client registry and factory utilities."""

from __future__ import annotations

from oracle.config import LLMConfig
from oracle.debug import DebugSink, FileDebugSink
from oracle.llm.anthropic_client import AnthropicClient
from oracle.llm.base import LLMClient
from oracle.llm.openai_client import DEFAULT_VISION_MAX_TOKENS, OpenAIClient
from oracle.util.observability import ObservabilityManager


def create_llm_client(
    config: LLMConfig,
    *,
    observability: ObservabilityManager | None = None,
    debug_sink: DebugSink | None = None,
) -> LLMClient:
    """Create an LLM client instance from configuration.

    Args:
        config: LLM configuration settings.
        observability: Optional structured event and metrics sink.
        debug_sink: Optional message sink; defaults to a file sink when the
            config names a ``debug_dump_path``.

    Returns:
        An initialized LLM client.

    Raises:
        ValueError: If the provider is unknown.
        LLMConfigurationError: If the provider's API key is missing.
    """

    if debug_sink is None and config.debug_dump_path is not None:
        debug_sink = FileDebugSink(config.debug_dump_path)

    provider = config.provider.lower()
    if provider == "openai":
        return OpenAIClient(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            vision_model=config.vision_model,
            max_tokens=config.max_tokens,
            vision_max_tokens=(
                DEFAULT_VISION_MAX_TOKENS
                if config.vision_max_tokens is None
                else config.vision_max_tokens
            ),
            timeout_s=config.timeout_s,
            vision_enabled=config.vision_enabled,
            observability=observability,
            debug_sink=debug_sink,
        )
    if provider == "anthropic":
        return AnthropicClient(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model,
            max_tokens=config.max_tokens,
            anthropic_version=config.anthropic_version,
            timeout_s=config.timeout_s,
            vision_enabled=config.vision_enabled,
            observability=observability,
            debug_sink=debug_sink,
        )
    raise ValueError(f"Unknown LLM provider: {config.provider}")
