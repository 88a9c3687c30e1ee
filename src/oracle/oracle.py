"""High-level question answering on top of an LLM client."""

from __future__ import annotations

from typing import TYPE_CHECKING

from oracle.llm.base import LLMClient
from oracle.prompt import Prompt, Reference

if TYPE_CHECKING:
    from oracle.cancellation import CancellationToken


class Oracle:
    """Holds a purpose and few-shot examples and asks questions with them.

    An Oracle is not thread-safe while it is being configured; once the
    purpose and examples are set it may be shared, since each call builds
    its own immutable Prompt.
    """

    def __init__(self, client: LLMClient, purpose: str = "") -> None:
        self._client = client
        self._purpose = purpose
        self._example_inputs: list[str] = []
        self._ideal_outputs: list[str] = []

    @property
    def purpose(self) -> str:
        return self._purpose

    def set_purpose(self, purpose: str) -> None:
        self._purpose = purpose

    def give_example(self, given_input: str, ideal_output: str) -> None:
        """Add one input/ideal-output pair to the history."""

        self._example_inputs.append(given_input)
        self._ideal_outputs.append(ideal_output)

    def reset(self) -> None:
        """Forget every example given so far."""

        self._example_inputs.clear()
        self._ideal_outputs.clear()

    def prompt(self, question: str, *references: Reference) -> Prompt:
        return Prompt(
            purpose=self._purpose,
            example_inputs=tuple(self._example_inputs),
            ideal_outputs=tuple(self._ideal_outputs),
            question=question,
            references=references,
        )

    def ask(
        self,
        question: str,
        *references: Reference,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Ask a question using the stored purpose and examples."""

        return self._client.completion(self.prompt(question, *references), cancel=cancel)

    def completion(self, prompt: Prompt, *, cancel: CancellationToken | None = None) -> str:
        return self._client.completion(prompt, cancel=cancel)
