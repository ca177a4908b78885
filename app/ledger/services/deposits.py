"""
Deposit service: crediting a client's own balance.

A client may top up their balance, but only up to a fraction of what they
currently owe: the sum of unpaid job prices on their in-progress contracts
("open exposure"). With the default divisor of 4, a client owing 80 may
deposit at most 20 at a time.

Usage:
    from ledger.services import DepositService

    receipt = DepositService().deposit(caller, caller.id, Decimal("20.00"))
    print(receipt.balance)
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError
from django.db.models import DecimalField, F, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.services import BaseService
from ledger.access import AccessPolicy, Operation
from ledger.exceptions import (
    DepositCapExceeded,
    NoOpenContracts,
    NotFound,
    SettlementFailed,
)
from ledger.models import (
    MONEY_DECIMAL_PLACES,
    MONEY_MAX_DIGITS,
    ContractStatus,
    Job,
    Profile,
)
from ledger.types import CENT, DepositReceipt, parse_amount

if TYPE_CHECKING:
    from typing import Any

DEFAULT_EXPOSURE_DIVISOR = 4


class DepositService(BaseService):
    """Validates and applies deposits against the open-exposure cap."""

    @property
    def exposure_divisor(self) -> int:
        return getattr(
            settings, "LEDGER_DEPOSIT_EXPOSURE_DIVISOR", DEFAULT_EXPOSURE_DIVISOR
        )

    def open_exposure(self, client_id: int) -> Decimal:
        """
        Sum of unpaid job prices on the client's in-progress contracts.

        Args:
            client_id: The paying client

        Returns:
            Exposure as a Decimal, zero when nothing is owed
        """
        money = DecimalField(
            max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES
        )
        result = (
            Job.objects.using(self.using)
            .filter(
                paid=False,
                contract__client_id=client_id,
                contract__status=ContractStatus.IN_PROGRESS,
            )
            .aggregate(
                total=Coalesce(Sum("price"), Value(Decimal("0")), output_field=money)
            )
        )
        return result["total"].quantize(CENT)

    def deposit_cap(self, exposure: Decimal) -> Decimal:
        """Largest deposit allowed for the given exposure, rounded down to the cent."""
        return (exposure / self.exposure_divisor).quantize(CENT, rounding=ROUND_DOWN)

    def deposit(self, caller: Profile, account_id: int, amount: Any) -> DepositReceipt:
        """
        Credit the caller's own balance.

        Args:
            caller: The client depositing
            account_id: Target profile; must be the caller
            amount: Amount to deposit (Decimal, int or numeric string)

        Returns:
            DepositReceipt with the balance after the deposit

        Raises:
            Forbidden: Target is not the caller, or caller is not a client
            InvalidParameter: Amount is not a positive amount in cents
            NoOpenContracts: Caller owes nothing on in-progress contracts
            DepositCapExceeded: Amount is above exposure / divisor
            SettlementFailed: The store failed; the balance is unchanged
        """
        AccessPolicy.check(Operation.DEPOSIT, caller, owner_ids={account_id})
        amount = parse_amount(amount)

        try:
            with self.atomic():
                # Step 1: How much does the caller currently owe?
                exposure = self.open_exposure(caller.pk)
                if exposure == 0:
                    raise NoOpenContracts(
                        "There are no unpaid jobs on active contracts to deposit against",
                        details={"profile_id": caller.pk},
                    )

                # Step 2: Deposit may not exceed the cap (compared unrounded)
                if amount * self.exposure_divisor > exposure:
                    raise DepositCapExceeded(
                        amount=amount,
                        cap=self.deposit_cap(exposure),
                        exposure=exposure,
                    )

                # Step 3: Single atomic increment
                updated = (
                    Profile.objects.using(self.using)
                    .filter(pk=account_id)
                    .update(balance=F("balance") + amount, updated_at=timezone.now())
                )
                if not updated:
                    raise NotFound(
                        f"Profile {account_id} not found",
                        details={"profile_id": account_id},
                    )
                balance = (
                    Profile.objects.using(self.using)
                    .values_list("balance", flat=True)
                    .get(pk=account_id)
                )
        except (NoOpenContracts, DepositCapExceeded) as exc:
            self.get_logger().warning(
                "Deposit rejected",
                extra={
                    "profile_id": caller.pk,
                    "amount": str(amount),
                    "error_code": exc.error_code,
                },
            )
            raise
        except DatabaseError as exc:
            self.get_logger().exception(
                "Deposit failed and was rolled back",
                extra={"profile_id": account_id, "amount": str(amount)},
            )
            raise SettlementFailed(
                "An error has occurred while depositing. Please try again",
                details={"profile_id": account_id},
            ) from exc

        self.get_logger().info(
            "Deposit applied",
            extra={"profile_id": account_id, "amount": str(amount)},
        )
        return DepositReceipt(profile_id=account_id, amount=amount, balance=balance)
