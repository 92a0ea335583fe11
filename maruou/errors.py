"""
Error taxonomy for the quiz generation pipeline.

Every error is scoped to one request. `payload_key` decides under which key
the diagnostic payload is exposed in the JSON error body ("detail" or "raw").
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class QuizError(Exception):
    status_code = 500
    payload_key = "detail"

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.payload = payload

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.payload is not None:
            body[self.payload_key] = self.payload
        return body


class ValidationError(QuizError):
    """Bad caller input (topic, session selection)."""

    status_code = 400


class ConfigError(QuizError):
    """Operator-fixable misconfiguration, e.g. missing API key."""


class UpstreamError(QuizError):
    """Non-2xx answer or transport failure talking to the LLM service."""

    def __init__(self, message: str, payload: Any = None, *, upstream_status: Optional[int] = None):
        super().__init__(message, payload)
        self.upstream_status = upstream_status

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.upstream_status is not None:
            body["status"] = self.upstream_status
        return body


class ParseError(QuizError):
    payload_key = "raw"


class EnvelopeParseError(ParseError):
    """Upstream body is not valid JSON."""


class ContentParseError(ParseError):
    """Generated text is not a JSON array, even after fence stripping."""


class EmptyContentError(QuizError):
    """No generated text in any known envelope shape."""

    payload_key = "raw"


class SchemaError(QuizError):
    def __init__(self, index: Optional[int], field: str, reason: str):
        where = f"item {index}" if index is not None else "quiz"
        super().__init__(
            f"Generated quiz failed validation: {where}, field '{field}': {reason}",
            {"index": index, "field": field, "reason": reason},
        )
        self.index = index
        self.field = field
        self.reason = reason
