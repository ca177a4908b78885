"""
Data types for ledger operations.

This module defines the dataclasses passed between the ledger services
and their callers, plus the parsing helpers that turn raw parameters into
them.

Types:
    SettlementReceipt: Confirmation of one paid job
    DepositReceipt: Confirmation of one deposit with the new balance
    DateRange: Validated inclusive calendar-date window for reports
    ProfessionEarnings: Best-profession report row
    ClientPayment: Best-clients report row
    ReportResult: Report rows, or the explicit "no paid jobs" marker

Usage:
    from ledger.types import DateRange, parse_amount

    window = DateRange.parse("2020-08-01", "2020-08-31")
    amount = parse_amount("25.50")
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.utils.dateparse import parse_date

from ledger.exceptions import InvalidParameter
from ledger.models import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS

if TYPE_CHECKING:
    from typing import Any

PAYMENT_CONFIRMATION = "The job was successfully paid"
NO_PAID_JOBS = "No paid jobs found in the given date range"

CENT = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)
MAX_AMOUNT_EXCLUSIVE = Decimal(1).scaleb(MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES)


def parse_amount(value: Any, parameter: str = "amount") -> Decimal:
    """
    Parse a positive monetary amount.

    Accepts Decimal, int or numeric strings. Floats are converted through
    their string form so binary noise never reaches a balance.

    Args:
        value: Raw amount
        parameter: Parameter name reported on failure

    Returns:
        The amount as a Decimal with at most two decimal places

    Raises:
        InvalidParameter: If the value is not a positive amount in cents
    """
    if isinstance(value, bool):
        raise InvalidParameter(parameter, f"{parameter} must be a number", value)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidParameter(parameter, f"{parameter} must be a number", value)

    if not amount.is_finite() or amount <= 0:
        raise InvalidParameter(
            parameter, f"{parameter} must be a positive amount", value
        )
    if amount.adjusted() >= MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES:
        raise InvalidParameter(
            parameter,
            f"{parameter} must be below {MAX_AMOUNT_EXCLUSIVE}",
            value,
        )
    if amount != amount.quantize(CENT):
        raise InvalidParameter(
            parameter,
            f"{parameter} must have at most {MONEY_DECIMAL_PLACES} decimal places",
            value,
        )
    return amount


def parse_limit(value: Any, default: int, maximum: int | None = None) -> int:
    """
    Parse a positive result-count limit.

    Args:
        value: Raw limit; None or "" selects the default
        default: Limit used when none is given
        maximum: Largest limit accepted, if any

    Returns:
        The limit as an int

    Raises:
        InvalidParameter: If the limit is not a positive integer
            or exceeds the maximum
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidParameter("limit", "limit must be a positive integer", value)
    if isinstance(value, int):
        limit = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidParameter("limit", "limit must be a positive integer", value)
        limit = int(text)

    if limit < 1:
        raise InvalidParameter("limit", "limit must be a positive integer", value)
    if maximum is not None and limit > maximum:
        raise InvalidParameter("limit", f"limit must be at most {maximum}", value)
    return limit


def _parse_bound(value: Any, parameter: str) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            # Well-formed but impossible, e.g. 2021-02-30
            parsed = None
        if parsed is not None:
            return parsed
    raise InvalidParameter(
        parameter, f"{parameter} is not a valid date (expected YYYY-MM-DD)", value
    )


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive calendar-date window.

    Attributes:
        start: First day included
        end: Last day included
    """

    start: datetime.date
    end: datetime.date

    @classmethod
    def parse(cls, start: Any, end: Any) -> DateRange:
        """
        Validate raw bounds into a DateRange.

        Raises:
            InvalidParameter: Naming "start" or "end" when that bound does not
                parse as a calendar date, or "end" when it precedes start
        """
        start_date = _parse_bound(start, "start")
        end_date = _parse_bound(end, "end")
        if end_date < start_date:
            raise InvalidParameter("end", "end must not be before start", end)
        return cls(start=start_date, end=end_date)

    def as_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class SettlementReceipt:
    """
    Confirmation that a job was paid.

    Attributes:
        job_id: The paid job
        contract_id: The contract terminated by the payment
        client_id: Profile debited
        contractor_id: Profile credited
        amount: Price moved between the two balances
        paid_at: Timestamp written to the job's payment_date
    """

    job_id: int
    contract_id: int
    client_id: int
    contractor_id: int
    amount: Decimal
    paid_at: datetime.datetime
    message: str = PAYMENT_CONFIRMATION


@dataclass(frozen=True)
class DepositReceipt:
    """
    Confirmation that a deposit was applied.

    Attributes:
        profile_id: Profile credited
        amount: Amount added
        balance: Balance after the deposit
    """

    profile_id: int
    amount: Decimal
    balance: Decimal


@dataclass(frozen=True)
class ProfessionEarnings:
    """Total earned by contractors of one profession."""

    profession: str
    total_earned: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"profession": self.profession, "total_earned": self.total_earned}


@dataclass(frozen=True)
class ClientPayment:
    """Total paid by one client."""

    id: int
    full_name: str
    paid: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "full_name": self.full_name, "paid": self.paid}


@dataclass(frozen=True)
class ReportResult:
    """
    Outcome of a report query.

    An empty window is not an error: ``no_data`` is True and ``message``
    says so explicitly.

    Attributes:
        period: The window the report covers
        rows: Ranked report rows, best first
    """

    period: DateRange
    rows: list[ProfessionEarnings] | list[ClientPayment] = field(default_factory=list)

    @property
    def no_data(self) -> bool:
        return not self.rows

    @property
    def message(self) -> str | None:
        return NO_PAID_JOBS if self.no_data else None

    def first(self) -> ProfessionEarnings | ClientPayment | None:
        return self.rows[0] if self.rows else None
