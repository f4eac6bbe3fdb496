from dataclasses import dataclass, field
from typing import Any

from app.entities.message import MessagePayload


@dataclass(frozen=True)
class InferenceRequest:
    """One chat-completion call: the conversation plus generation parameters."""

    conversation: list[MessagePayload]
    model: str | None = None
    temperature: float = 0.7
    max_tokens: int | None = None


@dataclass(frozen=True)
class InferenceResponse:
    """Text of the first completion choice."""

    text: str
    model: str | None = None
    finish_reason: str | None = None
    usage: dict[str, Any] = field(default_factory=dict)
