"""
Pytest configuration and fixtures for the test suite.

This file is automatically loaded by pytest before running tests.
It disables Langfuse tracing to prevent sending traces during test runs.
"""

import os
import logging
from typing import Any

import httpx
import pytest

# Disable Langfuse tracing before any test modules import Langfuse
# This must be set BEFORE langfuse is imported
os.environ["LANGFUSE_TRACING_ENABLED"] = "false"

# Silence Langfuse logger immediately at module load time
# This needs to happen BEFORE pytest's logging is configured
_langfuse_logger = logging.getLogger("langfuse")
_langfuse_logger.setLevel(logging.CRITICAL)
_langfuse_logger.propagate = False


_SETTINGS = (
    "LLM_BASE_URL",
    "MODEL_NAME",
    "LLM_TIMEOUT",
    "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS",
    "SYSTEM_PROMPT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Keep a developer's own .env or shell settings out of the tests."""
    for key in _SETTINGS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        "app.components.configuration.configuration.load_dotenv",
        lambda *args, **kwargs: False,
    )


class MockHttpClient:
    """Mock HTTP client that implements the HttpClientProtocol."""

    def __init__(self):
        self.responses: list[httpx.Response] = []
        self.post_exception: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_payload(self) -> dict[str, Any] | None:
        return self.calls[-1]["json"] if self.calls else None

    def queue_json(self, data: Any, status_code: int = 200) -> None:
        self.responses.append(httpx.Response(status_code, json=data))

    def queue_completion(self, text: str, **extra: Any) -> None:
        body = {
            "model": "test-model",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": text},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 10, "completion_tokens": 5},
        }
        body.update(extra)
        self.queue_json(body)

    def queue_raw(self, content: bytes, status_code: int = 200) -> None:
        self.responses.append(httpx.Response(status_code, content=content))

    def post(
        self,
        url: str,
        *,
        json: Any = None,
        timeout: Any = None,
        **kwargs,
    ) -> httpx.Response:
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.post_exception:
            raise self.post_exception
        if not self.responses:
            raise AssertionError("No mock response configured for POST")
        return self.responses.pop(0)


@pytest.fixture
def mock_http() -> MockHttpClient:
    """Create a mock HTTP client."""
    return MockHttpClient()


@pytest.fixture
def png_file(tmp_path):
    """A small file with a PNG signature; the bytes are never decoded."""
    path = tmp_path / "chart.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(32)))
    return path
