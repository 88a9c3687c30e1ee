"""Prompt model shared by every completion client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Union

Reference = Union[bytes, bytearray, memoryview, IO[bytes]]


class ReferenceReadError(Exception):
    """Raised when a reference payload cannot be read."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause


@dataclass(frozen=True)
class Prompt:
    """Abstract conversational request.

    Attributes:
        purpose: Instructions describing what the assistant is for.
        example_inputs: Prior user inputs, paired by index with ``ideal_outputs``.
        ideal_outputs: Ideal assistant replies for each prior input.
        question: The current question.
        references: Opaque payloads attached to the question (text or images).
    """

    purpose: str = ""
    example_inputs: tuple[str, ...] = ()
    ideal_outputs: tuple[str, ...] = ()
    question: str = ""
    references: tuple[Reference, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "example_inputs", tuple(self.example_inputs))
        object.__setattr__(self, "ideal_outputs", tuple(self.ideal_outputs))
        object.__setattr__(self, "references", tuple(self.references))
        if len(self.example_inputs) != len(self.ideal_outputs):
            raise ValueError(
                "example_inputs and ideal_outputs must have the same length "
                f"({len(self.example_inputs)} != {len(self.ideal_outputs)})."
            )

    def history(self) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Return the paired ``(inputs, outputs)`` history."""

        return self.example_inputs, self.ideal_outputs

    def read_references(self) -> list[bytes | ReferenceReadError]:
        """Read every reference once, keeping failures in place."""

        results: list[bytes | ReferenceReadError] = []
        for reference in self.references:
            try:
                results.append(read_reference(reference))
            except ReferenceReadError as exc:
                results.append(exc)
        return results


def read_reference(reference: Reference) -> bytes:
    """Return the raw bytes of a reference.

    Raises:
        ReferenceReadError: If the underlying source fails to read or yields
            something other than bytes or text.
    """

    if isinstance(reference, (bytes, bytearray, memoryview)):
        return bytes(reference)
    try:
        data = reference.read()
    except Exception as exc:  # noqa: BLE001
        raise ReferenceReadError(exc) from exc
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise ReferenceReadError(TypeError(f"read() returned {type(data).__name__}, not bytes"))
