"""
Settlement service: paying a job.

Paying a job moves its price from the client's balance to the
contractor's balance, terminates the contract and marks the job paid.
The four writes happen in one transaction:

    1. Job:        paid False -> True, payment_date = now
    2. Contract:   in_progress -> terminated
    3. Client:     balance -= price   (only where balance >= price)
    4. Contractor: balance += price

Every write is a conditional QuerySet.update() with database-side F()
expressions, so the rules checked up front are re-checked by the store
inside the transaction. When two requests race to pay the same job, the
loser's job update matches zero rows, its transaction rolls back and it
fails NotFound - a job is never paid twice.

Usage:
    from ledger.services import SettlementService

    receipt = SettlementService().pay_job(caller, job_id)
    print(receipt.message)  # "The job was successfully paid"
"""

from __future__ import annotations

import datetime
from decimal import Decimal

from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone

from core.services import BaseService
from ledger.access import AccessPolicy, Operation
from ledger.exceptions import InsufficientFunds, NotFound, SettlementFailed
from ledger.models import Contract, ContractStatus, Job, Profile
from ledger.types import SettlementReceipt


class SettlementService(BaseService):
    """
    Executes job payments.

    Preconditions are checked before the transaction opens so that
    ordinary rejections never take row locks. The transactional body
    repeats each of them as a conditional update.
    """

    def pay_job(self, caller: Profile, job_id: int) -> SettlementReceipt:
        """
        Pay a job on behalf of its client.

        Args:
            caller: The client paying
            job_id: The job to pay

        Returns:
            SettlementReceipt describing the transfer

        Raises:
            Forbidden: Caller is not a client
            NotFound: No unpaid job with this id on an in-progress contract
                of the caller (includes jobs that are already paid)
            InsufficientFunds: Caller balance is below the job price
            SettlementFailed: The store failed; nothing was changed
        """
        AccessPolicy.check(Operation.PAY_JOB, caller)

        try:
            # Step 1: The job must be payable by this caller
            job = self._find_payable_job(caller, job_id)

            # Step 2: The caller must be able to afford it
            if caller.balance < job.price:
                self.get_logger().warning(
                    "Payment rejected for insufficient funds",
                    extra={
                        "job_id": job.pk,
                        "client_id": caller.pk,
                        "price": str(job.price),
                        "balance": str(caller.balance),
                    },
                )
                raise InsufficientFunds(
                    caller.pk, required=job.price, available=caller.balance
                )

            # Step 3: Move the money and flip the state, all or nothing
            with self.atomic():
                paid_at = self._settle(job)
        except DatabaseError as exc:
            self.get_logger().exception(
                "Settlement failed and was rolled back",
                extra={"job_id": job_id, "client_id": caller.pk},
            )
            raise SettlementFailed(
                "An error has occurred while paying the job. Please try again",
                details={"job_id": job_id},
            ) from exc

        contract = job.contract
        self.get_logger().info(
            "Job paid",
            extra={
                "job_id": job.pk,
                "contract_id": contract.pk,
                "client_id": contract.client_id,
                "contractor_id": contract.contractor_id,
                "amount": str(job.price),
            },
        )
        return SettlementReceipt(
            job_id=job.pk,
            contract_id=contract.pk,
            client_id=contract.client_id,
            contractor_id=contract.contractor_id,
            amount=job.price,
            paid_at=paid_at,
        )

    def _find_payable_job(self, caller: Profile, job_id: int) -> Job:
        """
        Look up the caller's unpaid job on an in-progress contract.

        Raises:
            NotFound: If no such job exists
        """
        job = (
            Job.objects.using(self.using)
            .select_related("contract")
            .filter(
                pk=job_id,
                paid=False,
                contract__client_id=caller.pk,
                contract__status=ContractStatus.IN_PROGRESS,
            )
            .first()
        )
        if job is None:
            raise NotFound(
                "The job was not found or was already paid",
                details={"job_id": job_id},
            )
        return job

    def _settle(self, job: Job) -> datetime.datetime:
        """
        Apply the four settlement writes. Must run inside a transaction.

        Returns:
            The payment timestamp written to the job

        Raises:
            NotFound: The job or contract changed since the precondition check
            InsufficientFunds: The client's balance dropped below the price
        """
        contract = job.contract
        paid_at = timezone.now()

        # Lock both balances in a consistent order to prevent deadlocks
        list(
            Profile.objects.using(self.using)
            .select_for_update()
            .filter(pk__in=[contract.client_id, contract.contractor_id])
            .order_by("pk")
        )

        if not self._mark_job_paid(job, paid_at):
            raise NotFound(
                "The job was not found or was already paid",
                details={"job_id": job.pk},
            )

        if not self._terminate_contract(contract, paid_at):
            raise NotFound(
                "The contract is no longer in progress",
                details={"contract_id": contract.pk},
            )

        if not self._debit(contract.client_id, job.price, paid_at):
            available = (
                Profile.objects.using(self.using)
                .values_list("balance", flat=True)
                .get(pk=contract.client_id)
            )
            raise InsufficientFunds(
                contract.client_id, required=job.price, available=available
            )

        if not self._credit(contract.contractor_id, job.price, paid_at):
            raise DatabaseError(
                f"Contractor profile {contract.contractor_id} could not be credited"
            )

        return paid_at

    def _mark_job_paid(self, job: Job, paid_at: datetime.datetime) -> bool:
        updated = (
            Job.objects.using(self.using)
            .filter(pk=job.pk, paid=False)
            .update(paid=True, payment_date=paid_at, updated_at=paid_at)
        )
        return updated == 1

    def _terminate_contract(
        self, contract: Contract, changed_at: datetime.datetime
    ) -> bool:
        updated = (
            Contract.objects.using(self.using)
            .filter(pk=contract.pk, status=ContractStatus.IN_PROGRESS)
            .update(status=ContractStatus.TERMINATED, updated_at=changed_at)
        )
        return updated == 1

    def _debit(
        self, profile_id: int, amount: Decimal, changed_at: datetime.datetime
    ) -> bool:
        updated = (
            Profile.objects.using(self.using)
            .filter(pk=profile_id, balance__gte=amount)
            .update(balance=F("balance") - amount, updated_at=changed_at)
        )
        return updated == 1

    def _credit(
        self, profile_id: int, amount: Decimal, changed_at: datetime.datetime
    ) -> bool:
        updated = (
            Profile.objects.using(self.using)
            .filter(pk=profile_id)
            .update(balance=F("balance") + amount, updated_at=changed_at)
        )
        return updated == 1
