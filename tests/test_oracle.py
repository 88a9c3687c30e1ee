from __future__ import annotations

import pytest

from oracle.llm.base import TransportError
from oracle.llm.dummy import DummyClient
from oracle.oracle import Oracle


def test_ask_builds_prompt_from_purpose_and_examples() -> None:
    client = DummyClient("+++even+++")
    oracle = Oracle(client)
    oracle.set_purpose("To answer if a number is odd or even in a specific format")
    oracle.give_example("2", "+++even+++")
    oracle.give_example("3", "---odd---")

    answer = oracle.ask("6", b"a reference")

    assert answer == "+++even+++"
    prompt = client.last_prompt
    assert prompt is not None
    assert prompt.purpose == "To answer if a number is odd or even in a specific format"
    assert prompt.history() == (("2", "3"), ("+++even+++", "---odd---"))
    assert prompt.question == "6"
    assert prompt.references == (b"a reference",)


def test_reset_clears_examples_but_keeps_purpose() -> None:
    client = DummyClient("42")
    oracle = Oracle(client, purpose="You always answer with 42.")
    oracle.give_example("q", "42")

    oracle.reset()
    oracle.ask("What is the meaning of life?")

    prompt = client.last_prompt
    assert prompt is not None
    assert prompt.history() == ((), ())
    assert prompt.purpose == "You always answer with 42."


def test_prompts_are_snapshots() -> None:
    client = DummyClient("ok")
    oracle = Oracle(client)
    oracle.give_example("a", "b")
    oracle.ask("first")
    oracle.give_example("c", "d")
    oracle.ask("second")

    assert client.prompts[0].history() == (("a",), ("b",))
    assert client.prompts[1].history() == (("a", "c"), ("b", "d"))


def test_client_failures_propagate() -> None:
    oracle = Oracle(DummyClient(failure=TransportError("boom", status_code=503)))

    with pytest.raises(TransportError):
        oracle.ask("hi")
