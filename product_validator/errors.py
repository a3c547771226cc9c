"""Typed failures raised by the product validator."""
from typing import Optional


class ProductValidatorError(Exception):
    """Base class for validator failures."""


class InvalidPayloadError(ProductValidatorError):
    """The `spec` or `candidates` field is missing or malformed.

    Raised before any candidate is processed, so callers never see
    partial results.
    """


class UpstreamJudgeError(ProductValidatorError):
    """The batch judge call failed.

    Covers transport errors, non-success status codes, and responses that
    stay unparsable after the array-extraction fallback.

    Attributes:
        status: HTTP status reported by the judge service, if any
        body: Raw response body (or text) returned by the service, if any
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body
