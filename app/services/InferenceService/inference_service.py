"""
HTTP client for an OpenAI-compatible chat-completion server.

One POST per call, no streaming and no retries. Transport and protocol
failures are mapped onto the InferenceError hierarchy so callers never see
raw httpx or JSON exceptions.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx
from langfuse import observe

from app.entities.inference import InferenceRequest, InferenceResponse
from app.entities.message import MessagePayload
from app.services.InferenceService.inference_service_interface import (
    InferenceServiceInterface,
)


DEFAULT_BASE_URL = "http://localhost:8080"
COMPLETIONS_PATH = "/v1/chat/completions"


class InferenceError(Exception):
    """Base error for failed inference calls."""


class TransportError(InferenceError):
    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ProtocolError(InferenceError):
    """Raised when the server response does not have the expected shape."""


class EmptyCompletionError(InferenceError):
    def __init__(self) -> None:
        super().__init__("Server returned no completion choices")


@runtime_checkable
class HttpClientProtocol(Protocol):
    """Protocol for HTTP clients (httpx.Client or mocks)."""

    def post(
        self, url: str, *, json: Any = None, timeout: float | None = None
    ) -> Any: ...


def completions_url(base_url: str) -> str:
    """Resolve the chat-completion URL, accepting bases that already include /v1."""
    url = base_url.rstrip("/")
    if url.endswith(COMPLETIONS_PATH):
        return url
    if url.endswith("/v1"):
        return f"{url}/chat/completions"
    return f"{url}{COMPLETIONS_PATH}"


def serialize_message(message: MessagePayload) -> dict[str, Any]:
    attachments = message.get("attachments", [])
    if not attachments:
        return {"role": message["role"], "content": message["content"]}

    parts: list[dict[str, Any]] = [{"type": "text", "text": message["content"]}]
    for attachment in attachments:
        data_url = f"data:{attachment['mime_type']};base64,{attachment['base64']}"
        parts.append({"type": "image_url", "image_url": {"url": data_url}})
    return {"role": message["role"], "content": parts}


def build_payload(request: InferenceRequest) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "messages": [serialize_message(m) for m in request.conversation],
        "stream": False,
        "temperature": request.temperature,
    }
    if request.model:
        payload["model"] = request.model
    if request.max_tokens is not None:
        payload["max_tokens"] = request.max_tokens
    return payload


def parse_completion(body: Any) -> InferenceResponse:
    if not isinstance(body, dict):
        raise ProtocolError("Response body is not a JSON object")

    choices = body.get("choices")
    if not isinstance(choices, list):
        raise ProtocolError("Response has no 'choices' list")
    if not choices:
        raise EmptyCompletionError()

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise ProtocolError("First choice has no text 'message.content'")

    usage = body.get("usage")
    return InferenceResponse(
        text=content,
        model=body.get("model"),
        finish_reason=first.get("finish_reason"),
        usage=usage if isinstance(usage, dict) else {},
    )


class InferenceService(InferenceServiceInterface):
    """
    Chat-completion client for a locally hosted inference server.

    The base URL and model are explicit constructor values. When no HTTP
    client is injected, an httpx.Client with the given timeout is created and
    owned by this service.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str | None = None,
        logger: logging.Logger | None = None,
        timeout: float | None = 300.0,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        http_client: HttpClientProtocol | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.url = completions_url(self.base_url)
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger or logging.getLogger("inference_client")

        self._owns_client = http_client is None
        self._client: HttpClientProtocol = http_client or httpx.Client(timeout=timeout)

        self.logger.info(
            "InferenceService initialized: url=%s model=%s timeout=%s",
            self.url,
            self.model or "<server default>",
            self.timeout,
        )

    def new_request(self, conversation: list[MessagePayload]) -> InferenceRequest:
        """Wrap a conversation with this client's generation defaults."""
        return InferenceRequest(
            conversation=conversation,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    @observe(capture_input=False)
    def complete(self, request: InferenceRequest) -> InferenceResponse:
        payload = build_payload(request)
        self.logger.info(
            "Sending %d message(s) to %s", len(payload["messages"]), self.url
        )

        started = time.monotonic()
        try:
            resp = self._client.post(self.url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as e:
            self.logger.warning("Request to %s timed out: %s", self.url, e)
            raise TransportError(f"Request to {self.url} timed out") from e
        except httpx.RequestError as e:
            self.logger.warning("Request to %s failed: %s", self.url, e)
            raise TransportError(f"Could not reach {self.url}: {e}") from e

        if not 200 <= resp.status_code < 300:
            body = resp.text[:500]
            self.logger.warning(
                "Server returned status %d: %s", resp.status_code, body
            )
            raise TransportError(
                f"Server returned error status {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            data = resp.json()
        except ValueError as e:
            self.logger.warning("Response from %s is not valid JSON: %s", self.url, e)
            raise ProtocolError(f"Response is not valid JSON: {e}") from e

        response = parse_completion(data)
        self.logger.info(
            "Completion received in %.2fs (%d characters, finish_reason=%s)",
            time.monotonic() - started,
            len(response.text),
            response.finish_reason,
        )
        return response

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client and hasattr(self._client, "close"):
            self._client.close()  # type: ignore[union-attr]

    def __enter__(self) -> "InferenceService":
        return self

    def __exit__(self, *args) -> None:
        self.close()
