"""Typed errors surfaced to API callers.

Every error that may reach a caller derives from ``StackScoutError`` and carries
the fields of the JSON error envelope (``error``, ``details``, ``code``) plus the
HTTP status the API layer should answer with.
"""
from __future__ import annotations


class StackScoutError(Exception):
    status_code: int = 500
    code: str | None = None

    def __init__(self, message: str, details: str | None = None, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if code is not None:
            self.code = code

    def to_envelope(self) -> dict[str, str]:
        envelope: dict[str, str] = {"error": self.message}
        if self.details:
            envelope["details"] = self.details
        if self.code:
            envelope["code"] = self.code
        return envelope


class ValidationError(StackScoutError):
    status_code = 400
    code = "VALIDATION_ERROR"


class NotAuthenticatedError(StackScoutError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, details: str = "Authentication required"):
        super().__init__("Unauthorized", details)


class RateLimitError(StackScoutError):
    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, service: str, retry_after: int | None = None):
        message = (
            f"Rate limit exceeded for {service}. Retry after {retry_after}s"
            if retry_after
            else f"Rate limit exceeded for {service}"
        )
        super().__init__(message)
        self.retry_after = retry_after


class PlannerError(StackScoutError):
    """The reasoning model could not produce a research plan."""

    status_code = 502
    code = "PLANNER_ERROR"


class PlannerTimeoutError(PlannerError):
    status_code = 504
    code = "PLANNER_TIMEOUT"

    def __init__(self, timeout_seconds: float):
        super().__init__(
            "Research failed, please retry",
            f"Research query generation timed out after {timeout_seconds:g}s",
        )
        self.timeout_seconds = timeout_seconds


class PlanValidationError(PlannerError):
    """The planner answered, but its plan failed shape or field checks."""

    code = "PLAN_VALIDATION_ERROR"


class JSONParseError(ValueError):
    """Model output could not be turned into JSON.

    Only a short preview of the offending text is kept.
    """

    PREVIEW_CHARS = 100

    def __init__(self, message: str, text: str = "", cause: Exception | None = None):
        self.preview = text[: self.PREVIEW_CHARS]
        self.cause = cause
        detail = f"{message}. Preview: {self.preview}"
        if cause is not None:
            detail += f" Original error: {cause}"
        super().__init__(detail)
