"""
Tests for ReportService.

Windows are inclusive calendar days; only paid jobs on terminated
contracts count.
"""

import datetime
from decimal import Decimal

import pytest
from django.test import override_settings

from ledger.exceptions import InvalidParameter
from ledger.models import ContractStatus, Job
from ledger.services import ReportService
from ledger.tests.factories import ContractFactory, JobFactory, ProfileFactory
from ledger.types import NO_PAID_JOBS


def paid_at(day, hour=12):
    return datetime.datetime(2020, 8, day, hour, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def professionals(db):
    return {
        "programmer": ProfileFactory(contractor=True, profession="Programmer"),
        "musician": ProfileFactory(contractor=True, profession="Musician"),
        "fighter": ProfileFactory(contractor=True, profession="Fighter"),
    }


@pytest.fixture
def clients(db):
    return [
        ProfileFactory(first_name="Harry", last_name="Potter"),
        ProfileFactory(first_name="Mr", last_name="Robot"),
        ProfileFactory(first_name="John", last_name="Snow"),
    ]


def pay(client, contractor, price, when):
    return JobFactory(
        contract__client=client,
        contract__contractor=contractor,
        price=Decimal(price),
        paid_on=when,
    )


class TestBestProfession:
    """Tests for ReportService.best_profession."""

    def test_highest_total_wins(self, professionals, clients):
        pay(clients[0], professionals["programmer"], "200", paid_at(10))
        pay(clients[1], professionals["programmer"], "150", paid_at(11))
        pay(clients[0], professionals["musician"], "300", paid_at(12))

        result = ReportService().best_profession("2020-08-01", "2020-08-31")

        assert result.no_data is False
        assert result.first().profession == "Programmer"
        assert result.first().total_earned == Decimal("350.00")
        assert len(result.rows) == 1

    def test_window_is_inclusive(self, professionals, clients):
        pay(clients[0], professionals["musician"], "100", paid_at(1, hour=0))
        pay(clients[0], professionals["musician"], "100", paid_at(31, hour=23))
        pay(clients[0], professionals["fighter"], "150", paid_at(15))

        result = ReportService().best_profession("2020-08-01", "2020-08-31")

        assert result.first().profession == "Musician"
        assert result.first().total_earned == Decimal("200.00")

    def test_jobs_outside_window_ignored(self, professionals, clients):
        pay(clients[0], professionals["musician"], "500", paid_at(20))
        pay(clients[0], professionals["fighter"], "10", paid_at(5))

        result = ReportService().best_profession("2020-08-01", "2020-08-10")

        assert result.first().profession == "Fighter"

    def test_tie_broken_by_profession_name(self, professionals, clients):
        pay(clients[0], professionals["programmer"], "100", paid_at(10))
        pay(clients[1], professionals["fighter"], "100", paid_at(10))

        result = ReportService().best_profession("2020-08-10", "2020-08-10")

        assert result.first().profession == "Fighter"

    def test_only_terminated_contracts_count(self, professionals, clients):
        contract = ContractFactory(
            client=clients[0],
            contractor=professionals["musician"],
            status=ContractStatus.IN_PROGRESS,
        )
        job = JobFactory(contract=contract, price=Decimal("900"))
        Job.objects.filter(pk=job.pk).update(paid=True, payment_date=paid_at(10))
        pay(clients[0], professionals["fighter"], "10", paid_at(10))

        result = ReportService().best_profession("2020-08-01", "2020-08-31")

        assert result.first().profession == "Fighter"

    def test_unpaid_jobs_ignored(self, professionals, clients):
        JobFactory(
            contract__client=clients[0],
            contract__contractor=professionals["musician"],
            price=Decimal("900"),
        )

        result = ReportService().best_profession("2020-08-01", "2020-08-31")

        assert result.no_data is True

    def test_empty_window(self, db):
        result = ReportService().best_profession("2020-01-01", "2020-01-31")

        assert result.no_data is True
        assert result.rows == []
        assert result.message == NO_PAID_JOBS

    def test_invalid_window(self, db):
        with pytest.raises(InvalidParameter) as exc_info:
            ReportService().best_profession("2020-08-31", "2020-08-01")

        assert exc_info.value.parameter == "end"


class TestBestClients:
    """Tests for ReportService.best_clients."""

    @pytest.fixture
    def payments(self, professionals, clients):
        harry, robot, snow = clients
        pay(harry, professionals["programmer"], "200", paid_at(10))
        pay(harry, professionals["musician"], "100", paid_at(11))
        pay(robot, professionals["programmer"], "250", paid_at(12))
        pay(snow, professionals["fighter"], "50", paid_at(13))
        return clients

    def test_default_limit(self, payments):
        harry, robot, _ = payments

        result = ReportService().best_clients("2020-08-01", "2020-08-31")

        assert [row.to_dict() for row in result.rows] == [
            {"id": harry.id, "full_name": "Harry Potter", "paid": Decimal("300.00")},
            {"id": robot.id, "full_name": "Mr Robot", "paid": Decimal("250.00")},
        ]

    def test_explicit_limit(self, payments):
        result = ReportService().best_clients("2020-08-01", "2020-08-31", limit="3")

        assert len(result.rows) == 3
        assert result.rows[-1].full_name == "John Snow"

    def test_limit_larger_than_clients(self, payments):
        result = ReportService().best_clients("2020-08-01", "2020-08-31", limit=10)

        assert len(result.rows) == 3

    def test_tie_broken_by_client_id(self, professionals, clients):
        harry, robot, _ = clients
        pay(robot, professionals["programmer"], "100", paid_at(10))
        pay(harry, professionals["programmer"], "100", paid_at(10))

        result = ReportService().best_clients("2020-08-10", "2020-08-10", limit=1)

        assert result.first().id == min(harry.id, robot.id)

    @pytest.mark.parametrize("limit", ["0", "-1", "abc", 0, "9223372036854775808"])
    def test_invalid_limit(self, db, limit):
        with pytest.raises(InvalidParameter) as exc_info:
            ReportService().best_clients("2020-08-01", "2020-08-31", limit=limit)

        assert exc_info.value.parameter == "limit"

    @override_settings(LEDGER_BEST_CLIENTS_MAX_LIMIT=2)
    def test_limit_above_maximum_from_settings(self, payments):
        with pytest.raises(InvalidParameter) as exc_info:
            ReportService().best_clients("2020-08-01", "2020-08-31", limit=3)

        assert exc_info.value.parameter == "limit"

    @override_settings(LEDGER_BEST_CLIENTS_DEFAULT_LIMIT=1)
    def test_default_limit_from_settings(self, payments):
        result = ReportService().best_clients("2020-08-01", "2020-08-31")

        assert len(result.rows) == 1

    def test_empty_window(self, payments):
        result = ReportService().best_clients("2021-01-01", "2021-01-31")

        assert result.no_data is True
        assert result.message == NO_PAID_JOBS

    def test_reports_do_not_modify_balances(self, payments):
        balances = {p.id: p.balance for p in payments}

        ReportService().best_clients("2020-08-01", "2020-08-31")

        for profile in payments:
            profile.refresh_from_db()
            assert profile.balance == balances[profile.id]
