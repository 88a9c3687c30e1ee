"""Optional sinks for inspecting assembled message lists."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from oracle.util.logging import get_logger

_LOGGER = get_logger("oracle.debug")


class DebugSink(Protocol):
    """Receives the message list of every outgoing request."""

    def dump(self, messages: list[dict[str, Any]]) -> None:
        ...


class NullDebugSink:
    """Sink that discards everything."""

    def dump(self, messages: list[dict[str, Any]]) -> None:
        return None


class FileDebugSink:
    """Writes the most recent message list to a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def dump(self, messages: list[dict[str, Any]]) -> None:
        self._path.write_text(json.dumps(messages, indent=2), encoding="utf-8")


def safe_dump(sink: DebugSink | None, messages: list[dict[str, Any]]) -> None:
    """Send messages to a sink without letting its failures escape."""

    if sink is None:
        return
    try:
        sink.dump(messages)
    except Exception:  # noqa: BLE001
        _LOGGER.warning("Debug sink %r failed to dump messages.", sink, exc_info=True)
