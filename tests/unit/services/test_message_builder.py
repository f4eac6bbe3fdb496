"""
Unit tests for the conversation builders.
"""

import copy

import pytest

from app.entities.message import ImageAttachment
from app.entities.review import Phase
from app.services.MessageBuilder.message_builder import (
    REVIEW_INSTRUCTION,
    EmptyPromptError,
    build_conversation,
    build_initial_conversation,
    build_review_conversation,
)


@pytest.fixture
def image() -> ImageAttachment:
    return {
        "base64": "iVBORw0KGgo=",
        "file_name": "chart.png",
        "mime_type": "image/png",
        "size_bytes": 8,
    }


PROMPTS = [
    "What is the capital of France?",
    "Describe the image in under 50 words.",
    "  leading and trailing spaces  ",
    "línea uno\nlínea dos",
]


class TestInitialConversation:
    @pytest.mark.parametrize("prompt", PROMPTS)
    def test_exactly_one_user_message_with_prompt(self, prompt: str) -> None:
        conversation = build_initial_conversation(prompt)

        users = [m for m in conversation if m["role"] == "user"]
        assert len(users) == 1
        assert users[0]["content"] == prompt
        assert users[0]["attachments"] == []

    def test_image_goes_into_the_prompt_message(self, image: ImageAttachment) -> None:
        conversation = build_initial_conversation("What is this?", image)

        assert conversation == [
            {"role": "user", "content": "What is this?", "attachments": [image]}
        ]

    def test_system_prompt_precedes_user_message(self) -> None:
        conversation = build_initial_conversation(
            "Hello", system_prompt="You are terse."
        )

        assert [m["role"] for m in conversation] == ["system", "user"]
        assert conversation[0]["content"] == "You are terse."

    def test_blank_system_prompt_is_ignored(self) -> None:
        conversation = build_initial_conversation("Hello", system_prompt="   ")

        assert [m["role"] for m in conversation] == ["user"]

    @pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
    def test_empty_prompt_raises(self, prompt: str) -> None:
        with pytest.raises(EmptyPromptError):
            build_initial_conversation(prompt)

    def test_is_deterministic(self, image: ImageAttachment) -> None:
        assert build_initial_conversation("Hi", image) == build_initial_conversation(
            "Hi", image
        )


class TestReviewConversation:
    @pytest.mark.parametrize("system_prompt", [None, "You are careful."])
    def test_length_is_initial_plus_two(
        self, image: ImageAttachment, system_prompt: str | None
    ) -> None:
        initial = build_initial_conversation("Q?", image, system_prompt)
        review = build_review_conversation("Q?", "A.", image, system_prompt)

        assert len(review) == len(initial) + 2

    def test_initial_messages_embedded_unchanged(self, image: ImageAttachment) -> None:
        initial = build_initial_conversation("Describe it.", image, "Be brief.")
        review = build_review_conversation("Describe it.", "A cat.", image, "Be brief.")

        assert review[: len(initial)] == initial
        assert review[len(initial) - 1]["attachments"] == [image]

    def test_answer_and_instruction_are_appended(self) -> None:
        answer = 'The capital is "Paris".\nIt is in France.'
        review = build_review_conversation("Capital of France?", answer)

        assert review[-2] == {"role": "assistant", "content": answer, "attachments": []}
        assert review[-1] == {
            "role": "user",
            "content": REVIEW_INSTRUCTION,
            "attachments": [],
        }

    def test_instruction_mentions_original_constraints(self) -> None:
        assert "original prompt" in REVIEW_INSTRUCTION
        assert "revised response" in REVIEW_INSTRUCTION

    def test_does_not_mutate_inputs(self, image: ImageAttachment) -> None:
        before = copy.deepcopy(image)

        build_review_conversation("Q?", "A.", image)

        assert image == before

    def test_empty_prompt_raises(self) -> None:
        with pytest.raises(EmptyPromptError):
            build_review_conversation("", "A.")


class TestBuildConversation:
    def test_dispatches_initial(self, image: ImageAttachment) -> None:
        assert build_conversation(
            Phase.INITIAL, "Q?", image=image
        ) == build_initial_conversation("Q?", image)

    def test_dispatches_review(self, image: ImageAttachment) -> None:
        assert build_conversation(
            Phase.REVIEW, "Q?", image=image, answer="A."
        ) == build_review_conversation("Q?", "A.", image)

    def test_review_without_answer_raises(self) -> None:
        with pytest.raises(ValueError, match="initial answer"):
            build_conversation(Phase.REVIEW, "Q?")
