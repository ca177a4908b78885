"""
URL configuration for the ledger API.

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from ledger.views import (
    BestClientsView,
    BestProfessionView,
    ContractDetailView,
    ContractListView,
    DepositView,
    PayJobView,
    UnpaidJobListView,
)

app_name = "ledger"

urlpatterns = [
    path("contracts/", ContractListView.as_view(), name="contract-list"),
    path(
        "contracts/<int:contract_id>/",
        ContractDetailView.as_view(),
        name="contract-detail",
    ),
    path("jobs/unpaid/", UnpaidJobListView.as_view(), name="job-unpaid"),
    path("jobs/<int:job_id>/pay/", PayJobView.as_view(), name="job-pay"),
    path(
        "balances/deposit/<int:user_id>/",
        DepositView.as_view(),
        name="balance-deposit",
    ),
    path(
        "admin/best-profession/",
        BestProfessionView.as_view(),
        name="best-profession",
    ),
    path("admin/best-clients/", BestClientsView.as_view(), name="best-clients"),
]
