"""
Ledger models for client/contractor settlement.

This module defines the three persisted entities of the ledger:
- Profile: A client or contractor holding a monetary balance
- Contract: Agreement between exactly one client and one contractor
- Job: Priced unit of work under a contract, paid at most once

Money is stored as DecimalField(max_digits=12, decimal_places=2) and
manipulated as decimal.Decimal end to end; floats never touch balances.

Usage:
    from ledger.models import Contract, ContractStatus, Job, Profile, ProfileType

    client = Profile.objects.create(
        first_name="Ada", last_name="Lovelace", profession="Engineer",
        type=ProfileType.CLIENT, balance=Decimal("100.00"),
    )
    exposure = Job.objects.filter(
        paid=False,
        contract__client=client,
        contract__status=ContractStatus.IN_PROGRESS,
    )
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q

from core.models import BaseModel

MONEY_MAX_DIGITS = 12
MONEY_DECIMAL_PLACES = 2


class ProfileType(models.TextChoices):
    """
    Roles a profile can play in a contract.

    Values:
        CLIENT: Pays for jobs and may deposit funds
        CONTRACTOR: Earns the price of paid jobs
    """

    CLIENT = "client", "Client"
    CONTRACTOR = "contractor", "Contractor"


class ContractStatus(models.TextChoices):
    """
    Contract lifecycle.

    Status only moves toward TERMINATED; paying a job terminates its
    contract.
    """

    NEW = "new", "New"
    IN_PROGRESS = "in_progress", "In Progress"
    TERMINATED = "terminated", "Terminated"


class Profile(BaseModel):
    """
    A client or contractor with a balance.

    The profile doubles as the authenticated caller for API requests
    (see ledger.authentication), hence ``is_authenticated``.

    Fields:
        first_name, last_name: Display name parts
        profession: Contractor trade; reports group earnings by it
        type: client or contractor
        balance: Available funds, never negative

    Constraints:
        - balance >= 0
    """

    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    profession = models.CharField(max_length=255)
    type = models.CharField(
        max_length=20,
        choices=ProfileType.choices,
        help_text="Role of this profile in its contracts",
    )
    balance = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        default=Decimal("0.00"),
        help_text="Available funds",
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name="ledger_profile_balance_non_negative",
            )
        ]

    def __str__(self) -> str:
        return f"{self.full_name} ({self.get_type_display()})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_client(self) -> bool:
        return self.type == ProfileType.CLIENT

    @property
    def is_contractor(self) -> bool:
        return self.type == ProfileType.CONTRACTOR

    @property
    def is_authenticated(self) -> bool:
        """Profiles resolved by the API layer are always authenticated."""
        return True

    @property
    def is_anonymous(self) -> bool:
        return False


class Contract(BaseModel):
    """
    Agreement between one client and one contractor.

    Neither profile exclusively owns a contract; both parties may read it,
    only the client pays its jobs.
    """

    terms = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=ContractStatus.choices,
        default=ContractStatus.NEW,
        db_index=True,
    )
    client = models.ForeignKey(
        Profile,
        on_delete=models.PROTECT,
        related_name="client_contracts",
    )
    contractor = models.ForeignKey(
        Profile,
        on_delete=models.PROTECT,
        related_name="contractor_contracts",
    )

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"Contract {self.pk} ({self.get_status_display()})"


class Job(BaseModel):
    """
    A priced unit of work under a contract.

    ``paid`` only ever goes from False to True, and ``payment_date`` is
    written in the same update. A paid job is never modified again.

    Constraints:
        - price > 0
    """

    description = models.TextField()
    price = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
    )
    paid = models.BooleanField(default=False, db_index=True)
    payment_date = models.DateTimeField(null=True, blank=True, db_index=True)
    contract = models.ForeignKey(
        Contract,
        on_delete=models.PROTECT,
        related_name="jobs",
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(price__gt=0),
                name="ledger_job_price_positive",
            )
        ]

    def __str__(self) -> str:
        state = "paid" if self.paid else "unpaid"
        return f"Job {self.pk}: {self.price} ({state})"
