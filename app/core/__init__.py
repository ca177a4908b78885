"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. No business logic
lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for services bound to a database alias

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError: Input validation and business rule failures
    - NotFoundError: Resource not found
    - PermissionDeniedError: Authorization failures
    - ExternalServiceError: Backing service failures (retryable)

API (referenced from settings):
    - core.exception_handler.application_exception_handler
    - core.views.health_check

Usage:
    from core.exceptions import NotFoundError
    from core.models import BaseModel
    from core.services import BaseService

    class InvoiceService(BaseService):
        def close(self, invoice_id):
            with self.atomic():
                ...

Note:
    Django models are NOT imported here to avoid AppRegistryNotReady
    errors. Import them directly from core.models.
"""

from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .services import BaseService

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ExternalServiceError",
]
