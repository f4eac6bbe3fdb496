"""
Conversation construction for the initial and review phases.

Everything here is pure: the same inputs always produce equal conversations,
and no file or network I/O happens. Prompt text is opaque; any constraint it
states (length limits, format) is passed through, never interpreted.
"""

from typing import Literal

from app.entities.message import Conversation, ImageAttachment, MessagePayload
from app.entities.review import Phase


REVIEW_INSTRUCTION = (
    "Please review your previous response against the original prompt "
    "(and the image, if one was provided). Check it for mistakes, omissions "
    "and anything that does not follow the original instructions, keeping to "
    "every constraint the original prompt states. Then provide a final, "
    "potentially revised response."
)


class EmptyPromptError(ValueError):
    def __init__(self) -> None:
        super().__init__("Prompt must not be empty")


def _message(
    role: Literal["system", "user", "assistant"],
    content: str,
    attachments: list[ImageAttachment] | None = None,
) -> MessagePayload:
    return {
        "role": role,
        "content": content,
        "attachments": list(attachments or []),
    }


def build_initial_conversation(
    prompt: str,
    image: ImageAttachment | None = None,
    system_prompt: str | None = None,
) -> Conversation:
    """Phase 1: an optional system message, then one user message with the prompt and image."""
    if not prompt or not prompt.strip():
        raise EmptyPromptError()

    conversation: Conversation = []
    if system_prompt and system_prompt.strip():
        conversation.append(_message("system", system_prompt))

    conversation.append(_message("user", prompt, [image] if image else None))
    return conversation


def build_review_conversation(
    prompt: str,
    answer: str,
    image: ImageAttachment | None = None,
    system_prompt: str | None = None,
) -> Conversation:
    """
    Phase 2: the phase-1 conversation, the phase-1 answer as an assistant
    turn, and a user turn asking the model to review and revise that answer.

    The image, if any, stays in the reconstructed user message so the model
    can look at it again.
    """
    conversation = build_initial_conversation(prompt, image, system_prompt)
    conversation.append(_message("assistant", answer))
    conversation.append(_message("user", REVIEW_INSTRUCTION))
    return conversation


def build_conversation(
    phase: Phase,
    prompt: str,
    image: ImageAttachment | None = None,
    answer: str | None = None,
    system_prompt: str | None = None,
) -> Conversation:
    if phase is Phase.INITIAL:
        return build_initial_conversation(prompt, image, system_prompt)

    if phase is Phase.REVIEW:
        if answer is None:
            raise ValueError("Review phase requires the initial answer")
        return build_review_conversation(prompt, answer, image, system_prompt)

    raise ValueError(f"Unknown phase: {phase}")
