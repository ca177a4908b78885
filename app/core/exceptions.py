"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A transport status per error category, so the API layer never has to
  guess how a domain failure maps to HTTP

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation and business rule failures (400)
    ├── NotFoundError - Resource not found (404)
    ├── PermissionDeniedError - Authorization failures (403)
    └── ExternalServiceError - Backing service failures, retry may help (503)

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("Invalid date")

    # Raise with error code and details for client handling
    raise NotFoundError(
        f"Contract {contract_id} not found",
        error_code="CONTRACT_NOT_FOUND",
        details={"contract_id": contract_id},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
    core.exception_handler renders both through one response shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, amounts, field names)
        status_code: HTTP status the API layer should answer with
        retryable: Whether retrying the same request may succeed

    Example:
        try:
            service.pay_job(caller, job_id)
        except BaseApplicationError as e:
            logger.warning(f"Payment rejected: {e.error_code}")
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400
    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Contract 7 not found",
                "error_code": "NOT_FOUND",
                "details": {"contract_id": 7}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation or a business rule fails.

    Use for:
    - Malformed or out-of-range parameters (dates, limits, amounts)
    - Business rule violations (insufficient funds, caps)

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use NotFoundError for single-resource lookups where existence is
    expected. List queries return empty results instead.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the caller lacks permission for an operation.

    Use for:
    - Role-based access control violations
    - Acting on a resource owned by someone else

    Note:
        For authentication failures (missing/invalid identity), use DRF's
        AuthenticationFailed. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a backing service (database, third-party API) fails.

    These failures are not caused by the request itself, so retrying
    may help. Log the original error for debugging but don't expose
    internal details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 503
    retryable: bool = True
