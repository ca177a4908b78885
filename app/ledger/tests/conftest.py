"""
Pytest fixtures for ledger tests.

The default scenario mirrors a typical settlement: a client with 100.00,
a contractor with 10.00, an in-progress contract between them and one
unpaid job priced 40.00.

Usage:
    def test_pay(client_profile, job):
        SettlementService().pay_job(client_profile, job.id)
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from ledger.models import ContractStatus
from ledger.tests.factories import ContractFactory, JobFactory, ProfileFactory


# =============================================================================
# Profile Fixtures
# =============================================================================


@pytest.fixture
def client_profile(db):
    """A client holding 100.00."""
    return ProfileFactory(
        first_name="Harry", last_name="Potter", balance=Decimal("100.00")
    )


@pytest.fixture
def contractor_profile(db):
    """A programmer holding 10.00."""
    return ProfileFactory(
        contractor=True,
        first_name="Linus",
        last_name="Torvalds",
        profession="Programmer",
        balance=Decimal("10.00"),
    )


@pytest.fixture
def other_client(db):
    """A client with no relation to the default contract."""
    return ProfileFactory(balance=Decimal("500.00"))


# =============================================================================
# Contract and Job Fixtures
# =============================================================================


@pytest.fixture
def contract(client_profile, contractor_profile):
    """In-progress contract between the default client and contractor."""
    return ContractFactory(
        client=client_profile,
        contractor=contractor_profile,
        status=ContractStatus.IN_PROGRESS,
    )


@pytest.fixture
def job(contract):
    """Unpaid job priced 40.00 on the default contract."""
    return JobFactory(contract=contract, price=Decimal("40.00"))


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def as_profile(api_client):
    """
    Return an API client that sends the profile_id header of ``profile``.

    Usage:
        response = as_profile(client_profile).get("/api/v1/contracts/")
    """

    def _as_profile(profile):
        api_client.credentials(HTTP_PROFILE_ID=str(profile.pk))
        return api_client

    return _as_profile
