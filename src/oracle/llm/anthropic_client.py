"""Anthropic messages client."""

from __future__ import annotations

import os
from typing import Any

import requests  # type: ignore[import-untyped]

from oracle.debug import DebugSink
from oracle.llm.http_client import CompletionStrategy, HTTPCompletionClient, resolve_api_key
from oracle.llm.messages import AnthropicMessageBuilder, Message
from oracle.llm.responses import parse_messages_response
from oracle.prompt import Prompt
from oracle.util.observability import ObservabilityManager

DEFAULT_ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-latest"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_ANTHROPIC_MAX_TOKENS = 1024


class AnthropicClient(HTTPCompletionClient):
    """LLM client for the Anthropic messages API.

    The messages endpoint has no system role, so the prompt purpose is sent in
    the top-level ``system`` field instead of being dropped.
    """

    provider_name = "Anthropic"
    message_builder_type = AnthropicMessageBuilder

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = DEFAULT_ANTHROPIC_MAX_TOKENS,
        anthropic_version: str | None = None,
        timeout_s: float | None = None,
        vision_enabled: bool = True,
        session: requests.Session | None = None,
        observability: ObservabilityManager | None = None,
        debug_sink: DebugSink | None = None,
    ) -> None:
        resolved_max_tokens = DEFAULT_ANTHROPIC_MAX_TOKENS if max_tokens is None else max_tokens
        super().__init__(
            api_key=resolve_api_key(api_key, "ANTHROPIC_API_KEY"),
            base_url=base_url or os.getenv("ANTHROPIC_BASE_URL") or DEFAULT_ANTHROPIC_BASE_URL,
            model=model or os.getenv("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            max_tokens=resolved_max_tokens,
            vision_max_tokens=resolved_max_tokens,
            timeout_s=timeout_s,
            vision_enabled=vision_enabled,
            session=session,
            observability=observability,
            debug_sink=debug_sink,
        )
        self._anthropic_version = anthropic_version or DEFAULT_ANTHROPIC_VERSION

    def _build_payload(
        self,
        prompt: Prompt,
        messages: list[Message],
        strategy: CompletionStrategy,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": self._config.max_tokens,
            "messages": messages,
        }
        if prompt.purpose:
            payload["system"] = prompt.purpose
        return payload

    def _endpoint_path(self, strategy: CompletionStrategy) -> str:
        return "/messages"

    def _build_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._config.api_key,
            "anthropic-version": self._anthropic_version,
        }

    def _parse_response(self, body: bytes) -> str:
        return parse_messages_response(body)
