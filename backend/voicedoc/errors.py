"""Domain exceptions mapped to JSON error bodies by the app factory."""

from __future__ import annotations

from typing import Optional


class AppBaseException(Exception):
    """Domain-level base exception so we can map to JSON responses easily."""

    status_code: int = 500

    def __init__(self, error: str, details: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(error if details is None else f"{error} ({details})")
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(AppBaseException):
    """Empty or whitespace-only text."""

    status_code = 400


class UpstreamUnavailable(AppBaseException):
    """Ollama refused the connection; ``details`` names the configured URL."""

    status_code = 503

    def __init__(self, upstream_url: str) -> None:
        super().__init__(
            "Cannot connect to Ollama. Please ensure Ollama is running locally.",
            f"Trying to connect to: {upstream_url}",
        )
        self.upstream_url = upstream_url


class GenerationFailed(AppBaseException):
    """Any other upstream failure while generating a summary."""

    status_code = 500

    def __init__(self, details: str) -> None:
        super().__init__("Failed to generate summary", details)


class StreamError(AppBaseException):
    """Failure during a streaming relay.

    Never turned into an HTTP status: by the time it happens the SSE headers
    are committed, so the relay reports it as a terminal ``error`` event.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
