"""
Factory Boy factories for ledger test data.

Usage:
    from ledger.tests.factories import ContractFactory, JobFactory, ProfileFactory

    # A client with money and a contractor
    client = ProfileFactory(balance=Decimal("100.00"))
    contractor = ProfileFactory(contractor=True)

    # An unpaid job on an in-progress contract between them
    job = JobFactory(contract__client=client, contract__contractor=contractor)

    # A job paid on a given day
    JobFactory(paid_on=datetime(2020, 8, 15, tzinfo=UTC))
"""

from decimal import Decimal

import factory

from ledger.models import Contract, ContractStatus, Job, Profile, ProfileType


class ProfileFactory(factory.django.DjangoModelFactory):
    """
    Factory for Profile instances.

    Builds a client by default; pass ``contractor=True`` for a contractor.
    """

    class Meta:
        model = Profile

    class Params:
        contractor = factory.Trait(
            type=ProfileType.CONTRACTOR,
            profession=factory.Iterator(["Programmer", "Musician", "Fighter"]),
        )

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    profession = "Engineer"
    type = ProfileType.CLIENT
    balance = Decimal("0.00")


class ContractFactory(factory.django.DjangoModelFactory):
    """Factory for Contract instances; in progress by default."""

    class Meta:
        model = Contract

    terms = factory.Sequence(lambda n: f"Contract terms #{n}")
    status = ContractStatus.IN_PROGRESS
    client = factory.SubFactory(ProfileFactory)
    contractor = factory.SubFactory(ProfileFactory, contractor=True)


class JobFactory(factory.django.DjangoModelFactory):
    """
    Factory for Job instances; unpaid by default.

    ``paid_on`` sets paid and payment_date together and terminates the
    contract, the state a real settlement leaves behind.
    """

    class Meta:
        model = Job
        skip_postgeneration_save = True

    class Params:
        paid_on = None

    description = factory.Sequence(lambda n: f"Job #{n}")
    price = Decimal("50.00")
    contract = factory.SubFactory(ContractFactory)
    paid = factory.LazyAttribute(lambda o: o.paid_on is not None)
    payment_date = factory.LazyAttribute(lambda o: o.paid_on)

    @factory.post_generation
    def terminate_contract(obj, create, extracted, **kwargs):
        if create and obj.paid and obj.contract.status != ContractStatus.TERMINATED:
            obj.contract.status = ContractStatus.TERMINATED
            obj.contract.save(update_fields=["status", "updated_at"])
