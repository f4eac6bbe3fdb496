from abc import ABC, abstractmethod

from app.entities.inference import InferenceRequest, InferenceResponse
from app.entities.message import MessagePayload


class InferenceServiceInterface(ABC):
    """Interface for a chat-completion inference server."""

    @abstractmethod
    def new_request(self, conversation: list[MessagePayload]) -> InferenceRequest:
        """Wrap a conversation with the configured model and generation defaults."""

    @abstractmethod
    def complete(self, request: InferenceRequest) -> InferenceResponse:
        """Send one conversation and return the first completion."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying HTTP client, if owned."""
