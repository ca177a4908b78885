"""
Ledger-specific exceptions for settlement, deposit and report operations.

Every failure the ledger reports to a caller is one of these kinds. Each
kind carries a stable error code, a human-readable message, and the HTTP
status the API layer answers with (inherited from the core category it
belongs to).

Exception Hierarchy:
    LedgerError (base)
    ├── NotFound - No matching contract/job (404)
    ├── Forbidden - Authorization failure (403)
    │   ├── IdentityRequired - Operation needs a caller profile
    │   ├── WrongRole - Caller has the wrong profile type
    │   └── NotResourceOwner - Resource belongs to someone else
    ├── InsufficientFunds - Balance below job price (400)
    ├── NoOpenContracts - Deposit with no open exposure (400)
    ├── DepositCapExceeded - Deposit above exposure cap (400)
    ├── InvalidParameter - Malformed date, limit or amount (400)
    └── SettlementFailed - Store failure after preconditions passed (503)

Only SettlementFailed is retryable; every other kind means the request
itself is invalid in the current ledger state.

Usage:
    from ledger.exceptions import InsufficientFunds, NotFound

    if caller.balance < job.price:
        raise InsufficientFunds(caller.id, required=job.price, available=caller.balance)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

if TYPE_CHECKING:
    from decimal import Decimal
    from typing import Any


class LedgerError(BaseApplicationError):
    """
    Base exception for all ledger operations.

    Catch this to handle every ledger outcome in one place; the
    concrete kind is in ``error_code``.
    """

    default_error_code: str = "LEDGER_ERROR"


class NotFound(LedgerError, NotFoundError):
    """
    Raised when no contract/job matches the request.

    For settlement this also covers a job that has already been paid:
    it no longer matches the "unpaid" precondition.
    """

    default_error_code: str = "NOT_FOUND"


class Forbidden(LedgerError, PermissionDeniedError):
    """Raised when the caller may not perform the operation."""

    default_error_code: str = "FORBIDDEN"


class IdentityRequired(Forbidden):
    """Raised when an identity-bound operation is called without a profile."""

    default_error_code: str = "IDENTITY_REQUIRED"


class WrongRole(Forbidden):
    """Raised when the caller's profile type is not allowed for the operation."""

    default_error_code: str = "WRONG_ROLE"


class NotResourceOwner(Forbidden):
    """Raised when the caller does not own the targeted resource."""

    default_error_code: str = "NOT_OWNER"


class InsufficientFunds(LedgerError, ValidationError):
    """
    Raised when a client's balance is below the price of the job.

    Attributes:
        profile_id: The client whose balance is short
        required: The job price
        available: The balance at the time of the check
    """

    default_error_code: str = "INSUFFICIENT_FUNDS"

    def __init__(
        self,
        profile_id: int,
        required: Decimal,
        available: Decimal,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.profile_id = profile_id
        self.required = required
        self.available = available

        full_details = {
            "profile_id": profile_id,
            "required": str(required),
            "available": str(available),
        }
        if details:
            full_details.update(details)

        super().__init__(
            message="There are not sufficient funds to process the payment",
            error_code=error_code,
            details=full_details,
        )


class NoOpenContracts(LedgerError, ValidationError):
    """Raised when a deposit is attempted with zero open exposure."""

    default_error_code: str = "NO_OPEN_CONTRACTS"


class DepositCapExceeded(LedgerError, ValidationError):
    """
    Raised when a deposit exceeds the share of open exposure a client
    may pre-fund.

    Attributes:
        amount: Requested deposit
        cap: Largest deposit currently allowed
        exposure: Sum of unpaid job prices on in-progress contracts
    """

    default_error_code: str = "DEPOSIT_CAP_EXCEEDED"

    def __init__(
        self,
        amount: Decimal,
        cap: Decimal,
        exposure: Decimal,
        error_code: str | None = None,
    ):
        self.amount = amount
        self.cap = cap
        self.exposure = exposure

        super().__init__(
            message=(
                f"Deposit of {amount} exceeds the allowed maximum of {cap} "
                f"for open jobs totalling {exposure}"
            ),
            error_code=error_code,
            details={
                "amount": str(amount),
                "cap": str(cap),
                "exposure": str(exposure),
            },
        )


class InvalidParameter(LedgerError, ValidationError):
    """
    Raised when a request parameter is semantically invalid.

    Attributes:
        parameter: Name of the offending parameter (e.g. "start", "limit")
    """

    default_error_code: str = "INVALID_PARAMETER"

    def __init__(self, parameter: str, message: str, value: Any = None):
        self.parameter = parameter
        details: dict[str, Any] = {"parameter": parameter}
        if value is not None:
            details["value"] = str(value)
        super().__init__(message=message, details=details)


class SettlementFailed(LedgerError, ExternalServiceError):
    """
    Raised when the store fails after all preconditions passed.

    The surrounding transaction has already been rolled back when this
    reaches the caller. Retrying may succeed.
    """

    default_error_code: str = "SETTLEMENT_FAILED"
