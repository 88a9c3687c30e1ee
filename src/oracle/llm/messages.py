"""Provider-shaped message construction from a Prompt."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from oracle.content import Classification, classify, encode_base64, to_data_uri
from oracle.prompt import Prompt, ReferenceReadError

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

Message = dict[str, Any]
ReadReference = tuple[bytes | ReferenceReadError, Classification | None]


def read_and_classify(prompt: Prompt) -> list[ReadReference]:
    """Read each reference once and classify the readable ones."""

    results: list[ReadReference] = []
    for data in prompt.read_references():
        if isinstance(data, ReferenceReadError):
            results.append((data, None))
        else:
            results.append((data, classify(data)))
    return results


class MessageBuilder(ABC):
    """Turns a Prompt into an ordered provider message list.

    The ordering is shared by every provider: system purpose (when supported),
    history pairs, the question, then one trailing user turn per reference.
    Subclasses only decide how text and images are encoded.

    A builder created with ``supports_image_blocks=False`` targets text-only
    models: image references are described in a text turn instead of being
    inlined.
    """

    supports_system_role: bool = True
    supports_image_blocks: bool = True

    def __init__(self, *, supports_image_blocks: bool | None = None) -> None:
        if supports_image_blocks is not None:
            self.supports_image_blocks = supports_image_blocks

    def build(
        self,
        prompt: Prompt,
        references: Sequence[ReadReference] | None = None,
    ) -> list[Message]:
        """Build the message list for ``prompt``.

        Args:
            prompt: Prompt to convert.
            references: Pre-read references from ``read_and_classify``. When
                omitted the prompt's references are read here.
        """

        if references is None:
            references = read_and_classify(prompt)

        messages: list[Message] = []
        if self.supports_system_role:
            messages.append(self.text_message(ROLE_SYSTEM, prompt.purpose))
        inputs, outputs = prompt.history()
        for given_input, ideal_output in zip(inputs, outputs):
            messages.append(self.text_message(ROLE_USER, given_input))
            messages.append(self.text_message(ROLE_ASSISTANT, ideal_output))
        messages.append(self.text_message(ROLE_USER, prompt.question))

        for index, (data, classification) in enumerate(references, start=1):
            if isinstance(data, ReferenceReadError):
                messages.append(
                    self.text_message(ROLE_USER, f"Error reading reference: {data}")
                )
            elif classification is not None and classification.is_image:
                if self.supports_image_blocks:
                    messages.append(self.image_message(data, classification.media_type))
                else:
                    messages.append(
                        self.text_message(
                            ROLE_USER,
                            f"Reference {index}: [{classification.media_type} image, "
                            f"{len(data)} bytes, not shown]",
                        )
                    )
            else:
                text = data.decode("utf-8", errors="replace")
                messages.append(self.text_message(ROLE_USER, f"Reference {index}: {text}"))
        return messages

    def text_message(self, role: str, text: str) -> Message:
        return {"role": role, "content": text}

    @abstractmethod
    def image_message(self, data: bytes, media_type: str) -> Message:
        """Return a user message carrying a single inline image block."""


class OpenAIMessageBuilder(MessageBuilder):
    """Chat-completions format: system role, ``image_url`` data-URI blocks."""

    def image_message(self, data: bytes, media_type: str) -> Message:
        return {
            "role": ROLE_USER,
            "content": [
                {
                    "type": "image_url",
                    "image_url": {"url": to_data_uri(data, media_type)},
                }
            ],
        }


class AnthropicMessageBuilder(MessageBuilder):
    """Messages format: no system role, base64 ``image`` source blocks.

    The purpose is not part of the message list; the client sends it as the
    request's top-level ``system`` field.
    """

    supports_system_role = False

    def image_message(self, data: bytes, media_type: str) -> Message:
        return {
            "role": ROLE_USER,
            "content": [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": encode_base64(data),
                    },
                }
            ],
        }
