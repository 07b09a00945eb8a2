"""
Service Error Types

Custom exception classes shared by the revision core and service layer.
Every error carries an HTTP-style status code and a machine-readable error
code so callers (API handlers, CLIs) can translate them into user-facing
messages without string matching.

Usage:
    from algo_revise.errors import MissingFieldError, RangeError

    try:
        updated, session = updater.complete_revision(problem, outcome, now)
    except MissingFieldError as e:
        print(e.fields)
    except RangeError as e:
        print(e.field, e.value)

Hierarchy:
    ServiceError
    ├── ValidationError
    │   ├── MissingFieldError
    │   └── RangeError
    ├── NotFoundError
    └── LLMError
"""

from typing import Any, Optional


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Repository unavailable", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the standard error payload shape."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ServiceError):
    """
    Data validation error.

    Raised when a problem record is malformed (e.g. missing last_revised)
    or a review outcome fails validation.
    """

    status_code = 422
    error_code = "validation_error"


class MissingFieldError(ValidationError):
    """Raised when required review outcome fields are absent."""

    error_code = "missing_fields"

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields: {', '.join(self.fields)}",
            details={"fields": self.fields},
        )


class RangeError(ValidationError):
    """Raised when a review outcome value lies outside its allowed range."""

    error_code = "out_of_range"

    def __init__(
        self,
        field: str,
        value: Any,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
    ):
        self.field = field
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        if maximum is None:
            bounds = f"> {minimum}"
        else:
            bounds = f"in [{minimum}, {maximum}]"
        super().__init__(
            f"{field} must be {bounds}, got {value!r}",
            details={"field": field, "value": value, "min": minimum, "max": maximum},
        )


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Raised when a problem doesn't exist or belongs to another user.
    """

    status_code = 404
    error_code = "not_found"


class LLMError(ServiceError):
    """
    LLM provider error.

    Raised when LLM API calls fail (rate limits, timeouts, bad JSON, etc.)
    """

    status_code = 502
    error_code = "llm_error"
