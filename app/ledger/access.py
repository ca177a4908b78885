"""
Access policy for ledger operations.

Every ledger operation passes through AccessPolicy.check() before it
touches the store. The policy knows, per operation:
- whether a caller identity is needed at all (the two reports are public)
- which profile type may call it
- and, given the resource owner, whether the caller owns the resource

Failures are Forbidden subclasses whose error codes tell the caller which
rule was broken:
    IDENTITY_REQUIRED: no caller profile for an identity-bound operation
    WRONG_ROLE: caller's profile type is not allowed
    NOT_OWNER: resource belongs to another profile

Usage:
    from ledger.access import AccessPolicy, Operation

    AccessPolicy.check(Operation.PAY_JOB, caller)
    AccessPolicy.check(Operation.DEPOSIT, caller, owner_ids={account_id})
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

from ledger.exceptions import IdentityRequired, NotResourceOwner, WrongRole
from ledger.models import ProfileType

if TYPE_CHECKING:
    from ledger.models import Contract, Profile


class Operation(str, Enum):
    """Operations guarded by the access policy."""

    VIEW_CONTRACT = "view_contract"
    LIST_CONTRACTS = "list_contracts"
    LIST_UNPAID_JOBS = "list_unpaid_jobs"
    PAY_JOB = "pay_job"
    DEPOSIT = "deposit"
    BEST_PROFESSION_REPORT = "best_profession_report"
    BEST_CLIENTS_REPORT = "best_clients_report"

    @property
    def is_public(self) -> bool:
        """Public operations run without a caller identity."""
        return self in PUBLIC_OPERATIONS

    @property
    def allowed_roles(self) -> frozenset[str]:
        return ROLE_RULES.get(self, ALL_ROLES)


ALL_ROLES = frozenset(ProfileType.values)

PUBLIC_OPERATIONS = frozenset(
    {Operation.BEST_PROFESSION_REPORT, Operation.BEST_CLIENTS_REPORT}
)

ROLE_RULES: dict[Operation, frozenset[str]] = {
    Operation.PAY_JOB: frozenset({ProfileType.CLIENT}),
    Operation.DEPOSIT: frozenset({ProfileType.CLIENT}),
}

ROLE_REASONS: dict[Operation, str] = {
    Operation.PAY_JOB: "Only a client is allowed to initiate a payment",
    Operation.DEPOSIT: "Only a client is allowed to deposit funds",
}


class AccessPolicy:
    """
    Role and ownership checks for ledger operations.

    All methods are static - the policy holds no state and never queries
    the store; callers pass in the resolved profile and owner ids.
    """

    @staticmethod
    def check(
        operation: Operation,
        caller: Profile | None,
        owner_ids: Iterable[int] | None = None,
    ) -> None:
        """
        Authorize ``caller`` for ``operation``.

        Checks run in order: identity, ownership, role. Ownership comes
        before role so that acting on someone else's account is reported
        as such, whatever the caller's type.

        Args:
            operation: The operation being attempted
            caller: The resolved caller profile, or None for anonymous calls
            owner_ids: Profiles that own the targeted resource; the caller
                must be one of them. None skips the ownership check.

        Raises:
            IdentityRequired: Identity-bound operation without a caller
            NotResourceOwner: Caller is not among owner_ids
            WrongRole: Caller's type is not allowed for the operation
        """
        if operation.is_public:
            return

        if caller is None or not getattr(caller, "is_authenticated", False):
            raise IdentityRequired(
                "A caller profile is required for this operation",
                details={"operation": operation.value},
            )

        if owner_ids is not None:
            AccessPolicy.require_owner(caller, owner_ids, operation)

        AccessPolicy.require_role(caller, operation)

    @staticmethod
    def require_role(caller: Profile, operation: Operation) -> None:
        """
        Raises:
            WrongRole: If the caller's type may not perform the operation
        """
        if caller.type in operation.allowed_roles:
            return
        raise WrongRole(
            ROLE_REASONS.get(
                operation, f"Profiles of type {caller.type} may not do this"
            ),
            details={
                "operation": operation.value,
                "profile_type": caller.type,
                "allowed_types": sorted(operation.allowed_roles),
            },
        )

    @staticmethod
    def require_owner(
        caller: Profile,
        owner_ids: Iterable[int],
        operation: Operation,
    ) -> None:
        """
        Raises:
            NotResourceOwner: If the caller is not among the owners
        """
        owners = {int(owner_id) for owner_id in owner_ids}
        if caller.pk in owners:
            return
        raise NotResourceOwner(
            "The requested resource does not belong to the caller",
            details={"operation": operation.value, "profile_id": caller.pk},
        )

    @staticmethod
    def contract_parties(contract: Contract) -> set[int]:
        """Owner ids of a contract: its client and its contractor."""
        return {contract.client_id, contract.contractor_id}
