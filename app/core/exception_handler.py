"""
DRF exception handler for application errors.

Renders every core.exceptions.BaseApplicationError raised from a view (or
from a service the view calls) as a JSON body produced by ``to_dict()``
with the error's own ``status_code``. Anything else falls through to DRF's
default handler.

Configured in settings:
    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.exception_handler.application_exception_handler",
    }
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


def application_exception_handler(exc: Exception, context: dict[str, Any]):
    """
    Convert application errors into API responses.

    Args:
        exc: The exception raised while handling the request
        context: DRF handler context (view, request, args, kwargs)

    Returns:
        Response for application errors, DRF's default response otherwise
        (None for unhandled exceptions, which Django turns into a 500)
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log_level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(
            log_level,
            f"Request failed with {exc.error_code}",
            extra={
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "view": view.__class__.__name__ if view else None,
            },
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
