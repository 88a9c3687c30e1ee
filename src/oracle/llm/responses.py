"""Parsers that reduce provider response envelopes to plain text."""

from __future__ import annotations

import json
from typing import Any

from oracle.llm.base import EmptyCompletionError, ResponseDecodeError


def parse_chat_completion(body: bytes | str) -> str:
    """Parse a ``{"choices": [{"message": {"content": ...}}]}`` envelope.

    Raises:
        ResponseDecodeError: If the body is not a chat-completions envelope.
        EmptyCompletionError: If the envelope carries no choice with content.
    """

    data = _decode(body)
    choices = data.get("choices")
    if not isinstance(choices, list):
        raise ResponseDecodeError("Response envelope is missing a 'choices' list.")
    if not choices:
        raise EmptyCompletionError("no choices returned")
    fragments: list[str] = []
    try:
        for choice in choices:
            content = choice["message"]["content"]
            if content is None:
                continue
            if not isinstance(content, str):
                raise TypeError(f"choice content has type {type(content).__name__}")
            fragments.append(content)
    except (KeyError, TypeError) as exc:
        raise ResponseDecodeError("Unexpected choice format in chat completion.") from exc
    if not fragments:
        raise EmptyCompletionError("no choices returned")
    return "".join(fragments)


def parse_messages_response(body: bytes | str) -> str:
    """Parse a ``{"content": [{"text": ...}]}`` envelope.

    Raises:
        ResponseDecodeError: If the body is not a messages envelope.
        EmptyCompletionError: If the envelope carries no content blocks.
    """

    data = _decode(body)
    blocks = data.get("content")
    if not isinstance(blocks, list):
        raise ResponseDecodeError("Response envelope is missing a 'content' list.")
    if not blocks:
        raise EmptyCompletionError("no content returned")
    fragments: list[str] = []
    for block in blocks:
        if not isinstance(block, dict):
            raise ResponseDecodeError("Unexpected content block in messages response.")
        text = block.get("text", "")
        if not isinstance(text, str):
            raise ResponseDecodeError("Content block text must be a string.")
        fragments.append(text)
    return "".join(fragments)


def _decode(body: bytes | str) -> dict[str, Any]:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ResponseDecodeError("Failed to decode response body.") from exc
    if not isinstance(data, dict):
        raise ResponseDecodeError("Response body must be a JSON object.")
    return data
