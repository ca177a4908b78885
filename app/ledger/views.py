"""
API views for the ledger.

URL Structure:
    /api/v1/contracts/                       GET   caller's active contracts
    /api/v1/contracts/{id}/                  GET   one contract of the caller
    /api/v1/jobs/unpaid/                     GET   caller's unpaid jobs
    /api/v1/jobs/{job_id}/pay/               POST  pay a job (clients)
    /api/v1/balances/deposit/{user_id}/      POST  deposit (clients, own id)
    /api/v1/admin/best-profession/           GET   public report
    /api/v1/admin/best-clients/              GET   public report

Views hold no business rules. They resolve the caller, call a service and
serialize the result; ledger errors raised by the services are turned
into responses by core.exception_handler.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ledger.serializers import (
    BestClientsReportSerializer,
    BestProfessionReportSerializer,
    ContractSerializer,
    DepositReceiptSerializer,
    DepositRequestSerializer,
    JobSerializer,
    SettlementReceiptSerializer,
)
from ledger.services import (
    ContractService,
    DepositService,
    ReportService,
    SettlementService,
)

PROFILE_ID_HEADER = OpenApiParameter(
    name="profile_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Id of the calling profile",
)

REPORT_WINDOW_PARAMETERS = [
    OpenApiParameter(
        name="start",
        type=OpenApiTypes.DATE,
        required=True,
        description="First day included (YYYY-MM-DD)",
    ),
    OpenApiParameter(
        name="end",
        type=OpenApiTypes.DATE,
        required=True,
        description="Last day included (YYYY-MM-DD)",
    ),
]


class ContractListView(APIView):
    """
    GET /api/v1/contracts/
        Non-terminated contracts the caller is a party to.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_contracts",
        summary="List active contracts",
        parameters=[PROFILE_ID_HEADER],
        responses={200: ContractSerializer(many=True)},
        tags=["Ledger - Contracts"],
    )
    def get(self, request):
        contracts = ContractService().list_active_contracts(request.user)
        contracts = contracts.select_related("client", "contractor")
        return Response(ContractSerializer(contracts, many=True).data)


class ContractDetailView(APIView):
    """
    GET /api/v1/contracts/{id}/

    Response:
        200 OK: Contract details
        403 Forbidden: Caller is not a party to the contract
        404 Not Found: Contract doesn't exist
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_contract",
        summary="Get contract",
        parameters=[PROFILE_ID_HEADER],
        responses={
            200: ContractSerializer,
            403: OpenApiResponse(description="Caller is not a party to the contract"),
            404: OpenApiResponse(description="Contract not found"),
        },
        tags=["Ledger - Contracts"],
    )
    def get(self, request, contract_id):
        contract = ContractService().get_contract(request.user, contract_id)
        return Response(ContractSerializer(contract).data)


class UnpaidJobListView(APIView):
    """
    GET /api/v1/jobs/unpaid/
        Unpaid jobs on the caller's in-progress contracts.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_unpaid_jobs",
        summary="List unpaid jobs",
        parameters=[PROFILE_ID_HEADER],
        responses={200: JobSerializer(many=True)},
        tags=["Ledger - Jobs"],
    )
    def get(self, request):
        jobs = ContractService().list_unpaid_jobs(request.user)
        return Response(JobSerializer(jobs, many=True).data)


class PayJobView(APIView):
    """
    POST /api/v1/jobs/{job_id}/pay/
        Pay a job: the price moves from the caller to the contractor and
        the contract is terminated.

    Response:
        200 OK: Job paid
        400 Bad Request: Insufficient funds
        403 Forbidden: Caller is not a client
        404 Not Found: Job not found or already paid
        503 Service Unavailable: Settlement failed, nothing changed
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="pay_job",
        summary="Pay a job",
        parameters=[PROFILE_ID_HEADER],
        request=None,
        responses={
            200: SettlementReceiptSerializer,
            400: OpenApiResponse(description="Insufficient funds"),
            403: OpenApiResponse(description="Only a client may pay"),
            404: OpenApiResponse(description="Job not found or already paid"),
            503: OpenApiResponse(description="Settlement failed; retry"),
        },
        tags=["Ledger - Jobs"],
    )
    def post(self, request, job_id):
        receipt = SettlementService().pay_job(request.user, job_id)
        return Response(SettlementReceiptSerializer(receipt).data)


class DepositView(APIView):
    """
    POST /api/v1/balances/deposit/{user_id}/
        Deposit into the caller's own balance, at most a quarter of what
        the caller owes on in-progress contracts.

    Request:
        {"amount": "20.00"}

    Response:
        200 OK: Deposit applied
        400 Bad Request: Invalid amount, nothing owed, or cap exceeded
        403 Forbidden: Not the caller's account, or caller is not a client
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="deposit",
        summary="Deposit funds",
        parameters=[PROFILE_ID_HEADER],
        request=DepositRequestSerializer,
        responses={
            200: DepositReceiptSerializer,
            400: OpenApiResponse(description="Invalid amount or deposit not allowed"),
            403: OpenApiResponse(description="Deposit target is not the caller"),
        },
        tags=["Ledger - Balances"],
    )
    def post(self, request, user_id):
        serializer = DepositRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        receipt = DepositService().deposit(
            request.user, user_id, serializer.validated_data["amount"]
        )
        return Response(DepositReceiptSerializer(receipt).data, status=status.HTTP_200_OK)


class BestProfessionView(APIView):
    """
    GET /api/v1/admin/best-profession/?start=YYYY-MM-DD&end=YYYY-MM-DD

    Public; no caller profile needed.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="best_profession",
        summary="Best-earning profession",
        parameters=REPORT_WINDOW_PARAMETERS,
        responses={
            200: BestProfessionReportSerializer,
            400: OpenApiResponse(description="Invalid date window"),
        },
        tags=["Ledger - Reports"],
    )
    def get(self, request):
        result = ReportService().best_profession(
            request.query_params.get("start"), request.query_params.get("end")
        )
        return Response(BestProfessionReportSerializer(result).data)


class BestClientsView(APIView):
    """
    GET /api/v1/admin/best-clients/?start=YYYY-MM-DD&end=YYYY-MM-DD&limit=N

    Public; no caller profile needed. ``limit`` defaults to 2.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="best_clients",
        summary="Best-paying clients",
        parameters=[
            *REPORT_WINDOW_PARAMETERS,
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                required=False,
                description="Maximum number of clients (default 2, at most 100)",
            ),
        ],
        responses={
            200: BestClientsReportSerializer,
            400: OpenApiResponse(description="Invalid date window or limit"),
        },
        tags=["Ledger - Reports"],
    )
    def get(self, request):
        params = request.query_params
        result = ReportService().best_clients(
            params.get("start"), params.get("end"), params.get("limit")
        )
        return Response(BestClientsReportSerializer(result).data)
