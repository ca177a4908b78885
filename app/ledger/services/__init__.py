"""
Ledger services.

Each service takes the database alias it works against, defaulting to
the project's default database:

    from ledger.services import SettlementService

    SettlementService(using="default").pay_job(caller, job_id)
"""

from ledger.services.contracts import ContractService
from ledger.services.deposits import DepositService
from ledger.services.reports import ReportService
from ledger.services.settlement import SettlementService

__all__ = [
    "ContractService",
    "DepositService",
    "ReportService",
    "SettlementService",
]
