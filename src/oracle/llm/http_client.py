"""Shared HTTP plumbing for completion clients."""

from __future__ import annotations

import json
import os
import threading
import time
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable

import requests  # type: ignore[import-untyped]

from oracle.content import Classification
from oracle.debug import DebugSink, safe_dump
from oracle.llm.base import (
    CancelledError,
    LLMClient,
    LLMConfigurationError,
    RequestBuildError,
    TransportError,
)
from oracle.llm.messages import Message, MessageBuilder, read_and_classify
from oracle.prompt import Prompt
from oracle.util.logging import get_logger
from oracle.util.observability import ObservabilityManager

if TYPE_CHECKING:
    from oracle.cancellation import CancellationToken

_READ_CHUNK_SIZE = 8192


class CompletionStrategy(str, Enum):
    """How a completion request is constructed."""

    TEXT = "text"
    VISION = "vision"


def select_strategy(classifications: Iterable[Classification | None]) -> CompletionStrategy:
    """Return VISION when any reference classified as an image."""

    for classification in classifications:
        if classification is not None and classification.is_image:
            return CompletionStrategy.VISION
    return CompletionStrategy.TEXT


def resolve_api_key(api_key: str | None, env_var: str) -> str:
    """Return an explicit API key or the one in ``env_var``.

    Raises:
        LLMConfigurationError: If neither is set.
    """

    resolved = api_key or os.getenv(env_var)
    if not resolved:
        raise LLMConfigurationError(f"{env_var} environment variable not set.")
    return resolved


@dataclass(frozen=True)
class HTTPClientConfig:
    """Read-only settings for one completion client."""

    api_key: str
    base_url: str
    model: str
    vision_model: str
    max_tokens: int | None
    vision_max_tokens: int | None
    timeout_s: float | None


class HTTPCompletionClient(LLMClient):
    """Completion client that sends one JSON POST per call via ``requests``.

    Subclasses supply the message builder, endpoint, headers, payload shape
    and response parser for their provider.
    """

    provider_name = "LLM"
    message_builder_type: type[MessageBuilder]

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        vision_model: str | None = None,
        max_tokens: int | None = None,
        vision_max_tokens: int | None = None,
        timeout_s: float | None = None,
        vision_enabled: bool = True,
        session: requests.Session | None = None,
        observability: ObservabilityManager | None = None,
        debug_sink: DebugSink | None = None,
    ) -> None:
        if not base_url:
            raise LLMConfigurationError(f"base_url is required for {self.provider_name} clients.")
        if not model:
            raise LLMConfigurationError(f"model is required for {self.provider_name} clients.")

        self._config = HTTPClientConfig(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            model=model,
            vision_model=vision_model or model,
            max_tokens=max_tokens,
            vision_max_tokens=vision_max_tokens,
            timeout_s=timeout_s,
        )
        self.message_builder = self.message_builder_type(supports_image_blocks=vision_enabled)
        self._session = session or requests.Session()
        self._logger = get_logger(self.__class__.__name__)
        self._observability = observability
        self._debug_sink = debug_sink

    @property
    def config(self) -> HTTPClientConfig:
        return self._config

    def completion(
        self,
        prompt: Prompt,
        *,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Generate a completion for ``prompt`` with a single HTTP round trip."""

        if cancel is not None:
            cancel.raise_if_cancelled()

        references = read_and_classify(prompt)
        strategy = CompletionStrategy.TEXT
        if self.message_builder.supports_image_blocks:
            strategy = select_strategy(classification for _, classification in references)
        messages = self.message_builder.build(prompt, references)
        safe_dump(self._debug_sink, messages)
        payload = self._build_payload(prompt, messages, strategy)

        self._logger.debug(
            "Requesting %s completion with model '%s'.", strategy.value, payload.get("model")
        )
        start = time.perf_counter()
        if self._observability:
            self._observability.metrics.increment("llm.completions")
            self._observability.log_event(
                "llm.completion_requested",
                {
                    "provider": self.provider_name,
                    "model": payload.get("model"),
                    "strategy": strategy.value,
                    "message_count": len(messages),
                },
            )
        try:
            body = self._post(self._endpoint_path(strategy), payload, cancel)
            result = self._parse_response(body)
        except Exception as exc:
            if self._observability:
                self._observability.log_event(
                    "llm.completion_failed",
                    {
                        "provider": self.provider_name,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
            raise
        duration = time.perf_counter() - start
        if self._observability:
            self._observability.metrics.record_duration("llm.completion_duration", duration)
            self._observability.log_event(
                "llm.completion_completed",
                {
                    "provider": self.provider_name,
                    "model": payload.get("model"),
                    "duration_s": duration,
                },
            )
        return result

    @abstractmethod
    def _build_payload(
        self,
        prompt: Prompt,
        messages: list[Message],
        strategy: CompletionStrategy,
    ) -> dict[str, Any]:
        """Return the JSON request body."""

    @abstractmethod
    def _endpoint_path(self, strategy: CompletionStrategy) -> str:
        """Return the path appended to the base URL."""

    @abstractmethod
    def _build_headers(self) -> dict[str, str]:
        """Return provider authentication and version headers."""

    @abstractmethod
    def _parse_response(self, body: bytes) -> str:
        """Reduce the response body to the generated text."""

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        cancel: CancellationToken | None,
    ) -> bytes:
        url = f"{self._config.base_url}{path}"
        try:
            data = json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise RequestBuildError("Failed to encode request body.") from exc
        headers = {"Content-Type": "application/json", **self._build_headers()}

        if cancel is not None:
            cancel.raise_if_cancelled()
        try:
            response = self._send(url, data, headers, cancel)
        except requests.RequestException as exc:
            if cancel is not None and cancel.cancelled:
                raise CancelledError("Completion was cancelled.") from exc
            raise TransportError(f"{self.provider_name} API request failed.") from exc

        unregister = cancel.register(response.close) if cancel is not None else None
        try:
            body = self._read_body(response, cancel)
        finally:
            if unregister is not None:
                unregister()
            response.close()

        if not 200 <= response.status_code < 300:
            text = body.decode("utf-8", errors="replace")
            raise TransportError(
                f"{self.provider_name} API request failed with status "
                f"{response.status_code}: {text}",
                status_code=response.status_code,
                body=text,
            )
        return body

    def _send(
        self,
        url: str,
        data: bytes,
        headers: dict[str, str],
        cancel: CancellationToken | None,
    ) -> requests.Response:
        """Send the POST, returning early with CancelledError if ``cancel`` fires.

        Without a token the request runs on the calling thread. With one, it
        runs on a daemon worker so that a server which never sends headers
        cannot hold the caller past cancellation; a response that arrives
        after the caller gave up is closed by the worker.
        """

        def post() -> requests.Response:
            return self._session.post(
                url,
                data=data,
                headers=headers,
                timeout=self._config.timeout_s,
                stream=True,
            )

        if cancel is None:
            return post()

        outcome: dict[str, Any] = {}
        finished = threading.Event()

        def run() -> None:
            try:
                outcome["response"] = post()
            except Exception as exc:  # noqa: BLE001
                outcome["error"] = exc
            finally:
                finished.set()
                if cancel.cancelled and "response" in outcome:
                    outcome["response"].close()

        unregister = cancel.register(finished.set)
        worker = threading.Thread(
            target=run, name=f"{self.provider_name}-request", daemon=True
        )
        worker.start()
        try:
            finished.wait()
        finally:
            unregister()

        if "error" in outcome:
            raise outcome["error"]
        if cancel.cancelled:
            if "response" in outcome:
                outcome["response"].close()
            raise CancelledError("Completion was cancelled.")
        return outcome["response"]

    def _read_body(
        self,
        response: requests.Response,
        cancel: CancellationToken | None,
    ) -> bytes:
        chunks: list[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=_READ_CHUNK_SIZE):
                if cancel is not None:
                    cancel.raise_if_cancelled()
                chunks.append(chunk)
        except (requests.RequestException, OSError, ValueError) as exc:
            if cancel is not None and cancel.cancelled:
                raise CancelledError("Completion was cancelled.") from exc
            raise TransportError(
                f"Failed to read {self.provider_name} response body.",
                status_code=response.status_code,
            ) from exc
        if cancel is not None:
            cancel.raise_if_cancelled()
        return b"".join(chunks)
