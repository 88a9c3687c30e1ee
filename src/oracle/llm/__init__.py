"""LLM client package."""

from oracle.llm.anthropic_client import AnthropicClient
from oracle.llm.base import (
    CancelledError,
    EmptyCompletionError,
    LLMClient,
    LLMClientError,
    LLMConfigurationError,
    RequestBuildError,
    ResponseDecodeError,
    TransportError,
)
from oracle.llm.dummy import DummyClient
from oracle.llm.http_client import CompletionStrategy, select_strategy
from oracle.llm.openai_client import OpenAIClient
from oracle.llm.registry import create_llm_client

__all__ = [
    "AnthropicClient",
    "CancelledError",
    "CompletionStrategy",
    "DummyClient",
    "EmptyCompletionError",
    "LLMClient",
    "LLMClientError",
    "LLMConfigurationError",
    "OpenAIClient",
    "RequestBuildError",
    "ResponseDecodeError",
    "TransportError",
    "create_llm_client",
    "select_strategy",
]
