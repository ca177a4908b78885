"""
Contract service: read access to a caller's contracts and jobs.

A client sees the contracts it pays for; a contractor sees the ones it
works on. The side is picked from the caller's profile type.
"""

from __future__ import annotations

from django.db.models import Q, QuerySet

from core.services import BaseService
from ledger.access import AccessPolicy, Operation
from ledger.exceptions import NotFound
from ledger.models import Contract, ContractStatus, Job, Profile


def _party_filter(caller: Profile, prefix: str = "") -> Q:
    field = "client_id" if caller.is_client else "contractor_id"
    return Q(**{f"{prefix}{field}": caller.pk})


class ContractService(BaseService):
    """Contract and job lookups scoped to the caller."""

    def get_contract(self, caller: Profile, contract_id: int) -> Contract:
        """
        Fetch one contract the caller is a party to.

        Raises:
            Forbidden: No caller, or caller is neither client nor contractor
            NotFound: No contract with this id
        """
        AccessPolicy.check(Operation.VIEW_CONTRACT, caller)

        contract = (
            Contract.objects.using(self.using).filter(pk=contract_id).first()
        )
        if contract is None:
            raise NotFound(
                f"Contract {contract_id} not found",
                details={"contract_id": contract_id},
            )

        AccessPolicy.check(
            Operation.VIEW_CONTRACT,
            caller,
            owner_ids=AccessPolicy.contract_parties(contract),
        )
        return contract

    def list_active_contracts(self, caller: Profile) -> QuerySet[Contract]:
        """Non-terminated contracts on the caller's side, ordered by id."""
        AccessPolicy.check(Operation.LIST_CONTRACTS, caller)
        return (
            Contract.objects.using(self.using)
            .filter(_party_filter(caller))
            .exclude(status=ContractStatus.TERMINATED)
            .order_by("id")
        )

    def list_unpaid_jobs(self, caller: Profile) -> QuerySet[Job]:
        """Unpaid jobs on the caller's in-progress contracts, ordered by id."""
        AccessPolicy.check(Operation.LIST_UNPAID_JOBS, caller)
        return (
            Job.objects.using(self.using)
            .select_related("contract")
            .filter(
                _party_filter(caller, prefix="contract__"),
                paid=False,
                contract__status=ContractStatus.IN_PROGRESS,
            )
            .order_by("id")
        )
