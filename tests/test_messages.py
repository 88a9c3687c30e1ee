from __future__ import annotations

import base64

import pytest

from oracle.llm.messages import AnthropicMessageBuilder, OpenAIMessageBuilder
from oracle.prompt import Prompt


def test_openai_builder_orders_purpose_history_question() -> None:
    prompt = Prompt(purpose="parity", example_inputs=["2"], ideal_outputs=["even"], question="4")

    messages = OpenAIMessageBuilder().build(prompt)

    assert messages == [
        {"role": "system", "content": "parity"},
        {"role": "user", "content": "2"},
        {"role": "assistant", "content": "even"},
        {"role": "user", "content": "4"},
    ]


@pytest.mark.parametrize("history_size", [0, 1, 3])
@pytest.mark.parametrize("reference_count", [0, 2])
def test_message_count_and_alternation(history_size: int, reference_count: int) -> None:
    inputs = [f"in-{index}" for index in range(history_size)]
    outputs = [f"out-{index}" for index in range(history_size)]
    references = [f"ref-{index}".encode() for index in range(reference_count)]
    prompt = Prompt(
        purpose="p",
        example_inputs=inputs,
        ideal_outputs=outputs,
        question="q",
        references=references,
    )

    openai_messages = OpenAIMessageBuilder().build(prompt)
    anthropic_messages = AnthropicMessageBuilder().build(prompt)

    assert len(openai_messages) == 1 + 2 * history_size + 1 + reference_count
    assert len(anthropic_messages) == 2 * history_size + 1 + reference_count
    history = openai_messages[1 : 1 + 2 * history_size]
    assert [message["role"] for message in history] == ["user", "assistant"] * history_size
    assert [message["content"] for message in history[::2]] == inputs
    assert [message["content"] for message in history[1::2]] == outputs


def test_text_references_are_labelled_from_one() -> None:
    prompt = Prompt(
        example_inputs=["a", "b"],
        ideal_outputs=["c", "d"],
        question="q",
        references=[b"first", b"second"],
    )

    messages = OpenAIMessageBuilder().build(prompt)

    assert messages[-2:] == [
        {"role": "user", "content": "Reference 1: first"},
        {"role": "user", "content": "Reference 2: second"},
    ]


def test_openai_builder_emits_image_url_block_for_png(png_bytes: bytes) -> None:
    prompt = Prompt(purpose="p", question="what is this?", references=[png_bytes])

    messages = OpenAIMessageBuilder().build(prompt)

    last = messages[-1]
    assert last["role"] == "user"
    assert len(last["content"]) == 1
    block = last["content"][0]
    assert block["type"] == "image_url"
    assert block["image_url"]["url"].startswith("data:image/png;base64,")


def test_anthropic_builder_emits_image_block_with_sniffed_type(
    png_bytes: bytes, jpeg_bytes: bytes
) -> None:
    prompt = Prompt(purpose="p", question="compare", references=[png_bytes, jpeg_bytes])

    messages = AnthropicMessageBuilder().build(prompt)

    png_block = messages[-2]["content"][0]
    jpeg_block = messages[-1]["content"][0]
    assert png_block["type"] == "image"
    assert png_block["source"]["type"] == "base64"
    assert png_block["source"]["media_type"] == "image/png"
    assert base64.b64decode(png_block["source"]["data"]) == png_bytes
    assert jpeg_block["source"]["media_type"] == "image/jpeg"


def test_anthropic_builder_has_no_system_message() -> None:
    prompt = Prompt(purpose="parity", example_inputs=["2"], ideal_outputs=["even"], question="4")

    messages = AnthropicMessageBuilder().build(prompt)

    assert [message["role"] for message in messages] == ["user", "assistant", "user"]


def test_unreadable_reference_becomes_error_message(failing_reader: object) -> None:
    prompt = Prompt(question="q", references=[failing_reader, b"still here"])

    messages = OpenAIMessageBuilder().build(prompt)

    assert messages[-2]["content"].startswith("Error reading reference:")
    assert "disk on fire" in messages[-2]["content"]
    assert messages[-1]["content"] == "Reference 2: still here"


class _ExplodingReader:
    def read(self) -> bytes:
        raise RuntimeError("decoder exploded")


class _EmptyHandedReader:
    def read(self) -> None:
        return None


def test_misbehaving_readers_do_not_abort_the_build() -> None:
    prompt = Prompt(question="q", references=[_ExplodingReader(), _EmptyHandedReader(), b"next"])

    messages = OpenAIMessageBuilder().build(prompt)

    assert messages[-3]["content"] == "Error reading reference: decoder exploded"
    assert messages[-2]["content"].startswith("Error reading reference: read() returned NoneType")
    assert messages[-1]["content"] == "Reference 3: next"


def test_text_only_builder_describes_images(png_bytes: bytes) -> None:
    prompt = Prompt(question="what is this?", references=[png_bytes, b"caption"])

    messages = OpenAIMessageBuilder(supports_image_blocks=False).build(prompt)

    assert messages[-2] == {
        "role": "user",
        "content": f"Reference 1: [image/png image, {len(png_bytes)} bytes, not shown]",
    }
    assert messages[-1]["content"] == "Reference 2: caption"
