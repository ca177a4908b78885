"""
End-to-end ledger workflows through the HTTP API.

A client owes two jobs, tops up within the cap, pays both, and the
reports reflect the payments.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from freezegun import freeze_time

from ledger.models import ContractStatus, Profile
from ledger.tests.factories import ContractFactory, JobFactory, ProfileFactory


@pytest.fixture
def scenario(db):
    client = ProfileFactory(first_name="Ash", last_name="Kethcum", balance=Decimal("55.00"))
    programmer = ProfileFactory(
        contractor=True, profession="Programmer", balance=Decimal("0.00")
    )
    musician = ProfileFactory(contractor=True, profession="Musician", balance=Decimal("0.00"))
    first = ContractFactory(client=client, contractor=programmer)
    second = ContractFactory(client=client, contractor=musician)
    return {
        "client": client,
        "programmer": programmer,
        "musician": musician,
        "code_job": JobFactory(contract=first, price=Decimal("60.00")),
        "song_job": JobFactory(contract=second, price=Decimal("20.00")),
    }


class TestSettlementWorkflow:
    """Deposit, pay, report."""

    def test_full_workflow(self, as_profile, api_client, scenario):
        client = scenario["client"]
        api = as_profile(client)

        # Owes 80.00 across two contracts
        unpaid = api.get(reverse("ledger:job-unpaid")).json()
        assert {job["id"] for job in unpaid} == {
            scenario["code_job"].id,
            scenario["song_job"].id,
        }

        # 25% of 80.00 is the most that can be deposited
        deposit_url = reverse("ledger:balance-deposit", args=[client.id])
        assert api.post(deposit_url, {"amount": "20.01"}, format="json").status_code == 400
        assert api.post(deposit_url, {"amount": "20.00"}, format="json").status_code == 200

        # 75.00 now covers the 60.00 job
        with freeze_time("2020-08-10 09:00:00"):
            response = api.post(reverse("ledger:job-pay", args=[scenario["code_job"].id]))
        assert response.status_code == 200

        with freeze_time("2020-08-12 09:00:00"):
            response = api.post(reverse("ledger:job-pay", args=[scenario["song_job"].id]))
        assert response.status_code == 400
        assert response.json()["error_code"] == "INSUFFICIENT_FUNDS"

        # Exposure is now 20.00, so at most 5.00 may go in
        assert api.post(deposit_url, {"amount": "5"}, format="json").status_code == 200

        with freeze_time("2020-08-12 09:00:00"):
            response = api.post(reverse("ledger:job-pay", args=[scenario["song_job"].id]))
        assert response.status_code == 200

        balances = dict(Profile.objects.values_list("id", "balance"))
        assert balances[client.id] == Decimal("0.00")
        assert balances[scenario["programmer"].id] == Decimal("60.00")
        assert balances[scenario["musician"].id] == Decimal("20.00")

        # Both contracts are done; nothing left to deposit against
        assert api.get(reverse("ledger:contract-list")).json() == []
        response = api.post(deposit_url, {"amount": "1"}, format="json")
        assert response.json()["error_code"] == "NO_OPEN_CONTRACTS"

        # Reports are public
        api_client.credentials()
        window = {"start": "2020-08-01", "end": "2020-08-31"}
        best = api_client.get(reverse("ledger:best-profession"), window).json()
        assert best["results"] == [{"profession": "Programmer", "total_earned": "60.00"}]

        clients = api_client.get(reverse("ledger:best-clients"), window).json()
        assert clients["results"] == [
            {"id": client.id, "full_name": "Ash Kethcum", "paid": "80.00"}
        ]

        only_first_day = {"start": "2020-08-10", "end": "2020-08-10"}
        best = api_client.get(reverse("ledger:best-profession"), only_first_day).json()
        assert best["results"][0]["profession"] == "Programmer"

    def test_contract_terminated_by_payment(self, as_profile, scenario):
        client = scenario["client"]
        job = scenario["song_job"]

        as_profile(client).post(reverse("ledger:job-pay", args=[job.id]))

        response = as_profile(client).get(
            reverse("ledger:contract-detail", args=[job.contract_id])
        )
        assert response.json()["status"] == ContractStatus.TERMINATED
