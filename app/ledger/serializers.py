"""
Serializers for the ledger API.

Model serializers are read-only; every write goes through a service.

Serializer Hierarchy:
    ProfileSummarySerializer: Party of a contract
    ContractSerializer: Contract with both parties
    JobSerializer: Job with its contract id

    DepositRequestSerializer: Deposit body {"amount"}
    SettlementReceiptSerializer: Result of paying a job
    DepositReceiptSerializer: Result of a deposit

    ProfessionEarningsSerializer / ClientPaymentSerializer: Report rows
    BestProfessionReportSerializer / BestClientsReportSerializer: Report envelopes
"""

from __future__ import annotations

from rest_framework import serializers

from ledger.models import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS, Contract, Job, Profile


def money_field(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        read_only=True,
        **kwargs,
    )


# =============================================================================
# Model Serializers
# =============================================================================


class ProfileSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = ["id", "full_name", "profession", "type"]
        read_only_fields = fields


class ContractSerializer(serializers.ModelSerializer):
    """Contract with both parties expanded."""

    client = ProfileSummarySerializer(read_only=True)
    contractor = ProfileSummarySerializer(read_only=True)

    class Meta:
        model = Contract
        fields = ["id", "terms", "status", "client", "contractor", "created_at", "updated_at"]
        read_only_fields = fields


class JobSerializer(serializers.ModelSerializer):
    contract_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Job
        fields = ["id", "description", "price", "paid", "payment_date", "contract_id"]
        read_only_fields = fields


# =============================================================================
# Settlement and Deposit Serializers
# =============================================================================


class DepositRequestSerializer(serializers.Serializer):
    """
    Deposit request body.

    The amount is passed on as text; DepositService validates it so that
    bad amounts fail the same way from every entry point.
    """

    amount = serializers.CharField(
        help_text="Positive amount with at most two decimal places, e.g. \"20.00\""
    )


class SettlementReceiptSerializer(serializers.Serializer):
    message = serializers.CharField(read_only=True)
    job_id = serializers.IntegerField(read_only=True)
    contract_id = serializers.IntegerField(read_only=True)
    client_id = serializers.IntegerField(read_only=True)
    contractor_id = serializers.IntegerField(read_only=True)
    amount = money_field()
    paid_at = serializers.DateTimeField(read_only=True)


class DepositReceiptSerializer(serializers.Serializer):
    profile_id = serializers.IntegerField(read_only=True)
    amount = money_field()
    balance = money_field(help_text="Balance after the deposit")


# =============================================================================
# Report Serializers
# =============================================================================


class PeriodSerializer(serializers.Serializer):
    start = serializers.DateField(read_only=True)
    end = serializers.DateField(read_only=True)


class ProfessionEarningsSerializer(serializers.Serializer):
    profession = serializers.CharField(read_only=True)
    total_earned = money_field()


class ClientPaymentSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    paid = money_field()


class BestProfessionReportSerializer(serializers.Serializer):
    """
    Report envelope.

    ``message`` is set, and ``results`` empty, when no paid jobs fall in
    the window.
    """

    period = PeriodSerializer(read_only=True)
    results = ProfessionEarningsSerializer(source="rows", many=True, read_only=True)
    no_data = serializers.BooleanField(read_only=True)
    message = serializers.CharField(read_only=True, allow_null=True)


class BestClientsReportSerializer(BestProfessionReportSerializer):
    results = ClientPaymentSerializer(source="rows", many=True, read_only=True)
