"""
Report service: earnings rankings over a date window.

Both reports look only at paid jobs on terminated contracts whose
payment date falls within the window, inclusive on both ends. They are
read-only and run without an explicit transaction.

Usage:
    from ledger.services import ReportService

    result = ReportService().best_profession("2020-08-01", "2020-08-31")
    if result.no_data:
        print(result.message)
    else:
        print(result.first().profession)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db.models import F, QuerySet, Sum

from core.services import BaseService
from ledger.access import AccessPolicy, Operation
from ledger.models import ContractStatus, Job
from ledger.types import (
    ClientPayment,
    DateRange,
    ProfessionEarnings,
    ReportResult,
    parse_limit,
)

if TYPE_CHECKING:
    from typing import Any

DEFAULT_BEST_CLIENTS_LIMIT = 2
MAX_BEST_CLIENTS_LIMIT = 100


class ReportService(BaseService):
    """Aggregates paid jobs by contractor profession or by client."""

    @property
    def default_client_limit(self) -> int:
        return getattr(
            settings, "LEDGER_BEST_CLIENTS_DEFAULT_LIMIT", DEFAULT_BEST_CLIENTS_LIMIT
        )

    @property
    def max_client_limit(self) -> int:
        return getattr(settings, "LEDGER_BEST_CLIENTS_MAX_LIMIT", MAX_BEST_CLIENTS_LIMIT)

    def _paid_jobs(self, period: DateRange) -> QuerySet[Job]:
        return Job.objects.using(self.using).filter(
            paid=True,
            contract__status=ContractStatus.TERMINATED,
            payment_date__date__range=(period.start, period.end),
        )

    def best_profession(self, start: Any, end: Any) -> ReportResult:
        """
        The profession that earned the most in the window.

        Ties go to the profession name that sorts first.

        Args:
            start: First day included (ISO date string or date)
            end: Last day included (ISO date string or date)

        Returns:
            ReportResult with at most one ProfessionEarnings row

        Raises:
            InvalidParameter: A bound is not a date, or end precedes start
        """
        AccessPolicy.check(Operation.BEST_PROFESSION_REPORT, None)
        period = DateRange.parse(start, end)

        rows = (
            self._paid_jobs(period)
            .values(profession=F("contract__contractor__profession"))
            .annotate(total_earned=Sum("price"))
            .order_by("-total_earned", "profession")[:1]
        )
        result = ReportResult(
            period=period,
            rows=[
                ProfessionEarnings(
                    profession=row["profession"], total_earned=row["total_earned"]
                )
                for row in rows
            ],
        )
        self.get_logger().debug(
            "Best profession report computed",
            extra={**period.as_dict(), "rows": len(result.rows)},
        )
        return result

    def best_clients(self, start: Any, end: Any, limit: Any = None) -> ReportResult:
        """
        The clients that paid the most in the window.

        Args:
            start: First day included (ISO date string or date)
            end: Last day included (ISO date string or date)
            limit: Maximum number of rows; defaults to
                LEDGER_BEST_CLIENTS_DEFAULT_LIMIT, at most
                LEDGER_BEST_CLIENTS_MAX_LIMIT

        Returns:
            ReportResult of ClientPayment rows, highest total first, ties
            by ascending client id

        Raises:
            InvalidParameter: Bad date bounds, or limit is not a positive
                integer or is above the maximum
        """
        AccessPolicy.check(Operation.BEST_CLIENTS_REPORT, None)
        period = DateRange.parse(start, end)
        limit = parse_limit(
            limit, self.default_client_limit, maximum=self.max_client_limit
        )

        # "paid" is a Job field, so the sum is annotated under another name
        rows = (
            self._paid_jobs(period)
            .values(
                client_id=F("contract__client_id"),
                first_name=F("contract__client__first_name"),
                last_name=F("contract__client__last_name"),
            )
            .annotate(total_paid=Sum("price"))
            .order_by("-total_paid", "client_id")[:limit]
        )
        result = ReportResult(
            period=period,
            rows=[
                ClientPayment(
                    id=row["client_id"],
                    full_name=f"{row['first_name']} {row['last_name']}",
                    paid=row["total_paid"],
                )
                for row in rows
            ],
        )
        self.get_logger().debug(
            "Best clients report computed",
            extra={**period.as_dict(), "limit": limit, "rows": len(result.rows)},
        )
        return result
