"""OpenAI chat-completions client."""

from __future__ import annotations

import os
from typing import Any

import requests  # type: ignore[import-untyped]

from oracle.debug import DebugSink
from oracle.llm.http_client import CompletionStrategy, HTTPCompletionClient, resolve_api_key
from oracle.llm.messages import Message, OpenAIMessageBuilder
from oracle.llm.responses import parse_chat_completion
from oracle.prompt import Prompt
from oracle.util.observability import ObservabilityManager

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_VISION_MODEL = "gpt-4o"
DEFAULT_VISION_MAX_TOKENS = 300


class OpenAIClient(HTTPCompletionClient):
    """LLM client for the OpenAI chat-completions API.

    Plain-text prompts go to ``model``; prompts carrying image references are
    sent to ``vision_model`` with an explicit ``max_tokens`` cap.
    """

    provider_name = "OpenAI"
    message_builder_type = OpenAIMessageBuilder

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        vision_model: str | None = None,
        max_tokens: int | None = None,
        vision_max_tokens: int | None = DEFAULT_VISION_MAX_TOKENS,
        timeout_s: float | None = None,
        vision_enabled: bool = True,
        session: requests.Session | None = None,
        observability: ObservabilityManager | None = None,
        debug_sink: DebugSink | None = None,
    ) -> None:
        """Initialize the OpenAI client.

        Args:
            api_key: API key; falls back to ``OPENAI_API_KEY``.
            base_url: API base URL; falls back to ``OPENAI_BASE_URL``.
            model: Model for plain-text completions; falls back to ``OPENAI_MODEL``.
            vision_model: Model for image completions; falls back to
                ``OPENAI_VISION_MODEL``.
            max_tokens: Optional token cap for plain-text completions.
            vision_max_tokens: Token cap for image completions.
            timeout_s: Optional request timeout in seconds.
            vision_enabled: When false, image references are described in text
                and every request uses the text model.
            session: Optional requests session for testing or reuse.
            observability: Optional structured event and metrics sink.
            debug_sink: Optional sink receiving every assembled message list.
        """

        super().__init__(
            api_key=resolve_api_key(api_key, "OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL,
            model=model or os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            vision_model=(
                vision_model or os.getenv("OPENAI_VISION_MODEL") or DEFAULT_OPENAI_VISION_MODEL
            ),
            max_tokens=max_tokens,
            vision_max_tokens=vision_max_tokens,
            timeout_s=timeout_s,
            vision_enabled=vision_enabled,
            session=session,
            observability=observability,
            debug_sink=debug_sink,
        )

    def _build_payload(
        self,
        prompt: Prompt,
        messages: list[Message],
        strategy: CompletionStrategy,
    ) -> dict[str, Any]:
        if strategy is CompletionStrategy.VISION:
            model = self._config.vision_model
            max_tokens = self._config.vision_max_tokens
        else:
            model = self._config.model
            max_tokens = self._config.max_tokens
        payload: dict[str, Any] = {"model": model, "messages": messages}
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    def _endpoint_path(self, strategy: CompletionStrategy) -> str:
        return "/chat/completions"

    def _build_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.api_key}"}

    def _parse_response(self, body: bytes) -> str:
        return parse_chat_completion(body)
