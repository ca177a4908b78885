"""
Ledger - Balance settlement between clients and contractors.

Clients hold balances and pay for jobs done under contracts; contractors
are credited with the price of every paid job. The ledger app owns the
rules that keep those balances consistent.

Public API:
    Models (ledger.models):
        Profile - Client or contractor with a balance
        Contract - Agreement between a client and a contractor
        Job - Priced unit of work, paid at most once

    Services (ledger.services):
        SettlementService - Pay a job
        DepositService - Credit a client's own balance, capped by exposure
        ReportService - Best profession / best clients over a date window
        ContractService - The caller's contracts and unpaid jobs

    Access (ledger.access):
        AccessPolicy, Operation - Role and ownership checks

    Exceptions (ledger.exceptions):
        LedgerError - Base exception for ledger operations
        NotFound, Forbidden, InsufficientFunds, NoOpenContracts,
        DepositCapExceeded, InvalidParameter, SettlementFailed

Usage:
    from ledger.services import DepositService, SettlementService

    receipt = SettlementService().pay_job(caller, job_id=2)
    DepositService().deposit(caller, caller.id, "20.00")
"""
