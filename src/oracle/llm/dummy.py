"""In-process client returning a fixed response."""

from __future__ import annotations

from typing import TYPE_CHECKING

from oracle.llm.base import LLMClient
from oracle.prompt import Prompt

if TYPE_CHECKING:
    from oracle.cancellation import CancellationToken


class DummyClient(LLMClient):
    """Returns ``fixed_response`` or raises ``failure`` and records the prompt."""

    def __init__(self, fixed_response: str = "", failure: Exception | None = None) -> None:
        self.fixed_response = fixed_response
        self.failure = failure
        self.prompts: list[Prompt] = []

    @property
    def last_prompt(self) -> Prompt | None:
        return self.prompts[-1] if self.prompts else None

    def completion(
        self,
        prompt: Prompt,
        *,
        cancel: CancellationToken | None = None,
    ) -> str:
        self.prompts.append(prompt)
        if cancel is not None:
            cancel.raise_if_cancelled()
        if self.failure is not None:
            raise self.failure
        return self.fixed_response
