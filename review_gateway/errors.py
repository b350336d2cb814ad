from __future__ import annotations

from typing import Any, Optional


class GatewayError(Exception):
    """Base class for failures surfaced to the caller as a 5xx response."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class EmptyResponse(GatewayError):
    """The model returned no content."""


class MalformedOutput(GatewayError):
    """Model text was present but not parsable, even after repair."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message, details=_snippet(raw_text))
        self.raw_text = raw_text


class UnexpectedShape(GatewayError):
    """The parsed value has the wrong top-level shape for the task."""


class UpstreamFailure(GatewayError):
    """The provider call itself failed."""


class MissingCredential(GatewayError):
    """A provider was configured without its API key."""


def _snippet(raw_text: str, limit: int = 200) -> str:
    snippet = raw_text.strip().replace("\n", " ")
    return (snippet[:limit] + "...") if len(snippet) > limit else snippet


def error_details(exc: BaseException) -> str:
    if isinstance(exc, GatewayError) and exc.details:
        return exc.details
    response: Any = getattr(exc, "response", None)
    if response is not None:
        text = getattr(response, "text", None)
        if text:
            return str(text)
        reason = getattr(response, "reason_phrase", None)
        if reason:
            return str(reason)
    message = str(exc)
    return message or "Unknown error"
