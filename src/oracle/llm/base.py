"""Base interfaces and errors for LLM clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from oracle.cancellation import CancellationToken
    from oracle.prompt import Prompt


class LLMClientError(RuntimeError):
    """Base exception for LLM client failures."""


class LLMConfigurationError(LLMClientError):
    """Raised when LLM client configuration is invalid or incomplete."""


class RequestBuildError(LLMClientError):
    """Raised when the request body or request object cannot be built."""


class TransportError(LLMClientError):
    """Raised when the HTTP call fails or returns a non-success status.

    Attributes:
        status_code: HTTP status, when a response was received.
        body: Response body text, when a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(LLMClientError):
    """Raised when a response body does not match the expected envelope."""


class EmptyCompletionError(LLMClientError):
    """Raised when a well-formed envelope carries no generated content."""


class CancelledError(LLMClientError):
    """Raised when the caller cancels a completion before it finishes."""


class LLMClient(ABC):
    """Abstract interface for LLM clients."""

    @abstractmethod
    def completion(
        self,
        prompt: Prompt,
        *,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Generate a completion for a prompt.

        Args:
            prompt: Purpose, history, question and references to send.
            cancel: Optional token that aborts the call when cancelled.

        Returns:
            The generated text.
        """
