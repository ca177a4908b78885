"""
Tests for the project DRF exception handler.
"""

from decimal import Decimal

from rest_framework import exceptions

from core.exception_handler import application_exception_handler
from core.exceptions import ExternalServiceError
from ledger.exceptions import InsufficientFunds, NotResourceOwner


class TestApplicationExceptionHandler:
    """Tests for application_exception_handler."""

    def test_renders_application_error(self):
        error = InsufficientFunds(3, required=Decimal("40.00"), available=Decimal("1.00"))

        response = application_exception_handler(error, {"view": None})

        assert response.status_code == 400
        assert response.data == {
            "error": "There are not sufficient funds to process the payment",
            "error_code": "INSUFFICIENT_FUNDS",
            "details": {"profile_id": 3, "required": "40.00", "available": "1.00"},
        }

    def test_status_follows_category(self):
        response = application_exception_handler(
            NotResourceOwner("Not yours"), {"view": None}
        )

        assert response.status_code == 403

    def test_server_side_failures_logged_as_error(self, caplog):
        application_exception_handler(ExternalServiceError("Store down"), {})

        record = caplog.records[-1]
        assert record.levelname == "ERROR"
        assert record.error_code == "EXTERNAL_SERVICE_ERROR"

    def test_falls_back_to_drf(self):
        response = application_exception_handler(
            exceptions.NotAuthenticated(), {"view": None, "request": None}
        )

        assert response.status_code == 401

    def test_unknown_exceptions_left_to_django(self):
        assert application_exception_handler(RuntimeError("boom"), {}) is None
