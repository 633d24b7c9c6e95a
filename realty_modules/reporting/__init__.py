"""
Realty Reporting Module (``realty_modules.reporting``).

Responsibility
--------------
Read-only module that derives statements from a ledger snapshot: balance
sheet with consistency check, hierarchical category report, profit &
loss, vendor/contract/owner/client running-balance ledgers, budget vs
actual, PM-cost accrual, contract and project summaries.

Architecture position
---------------------
**Modules layer** -- no writes.  All statement generation is implemented
as pure functions over the accumulator's ``Aggregates``.

Invariants enforced
-------------------
* No records are created or changed by this module.
* Statements derive entirely from an immutable snapshot; nothing is
  cached between calls.

Failure modes
-------------
* Unbalanced books -> reported on the DTO, never raised.
* Category cycles -> ``CategoryCycleError``.
"""

from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.consistency import check, check_totals
from realty_modules.reporting.models import (
    AccountLine,
    AssetsSection,
    BalanceSheetReport,
    BudgetReport,
    BudgetRow,
    BudgetStatus,
    CategoryReport,
    CategoryReportRow,
    CategorySort,
    ConsistencyResult,
    ContractSummaryReport,
    ContractSummaryRow,
    EquitySection,
    LedgerEntryKind,
    LedgerReport,
    LedgerRow,
    LiabilitiesSection,
    PmCostReport,
    PmCostRow,
    ProfitAndLossReport,
    ProjectSummaryReport,
    ProjectSummaryRow,
    ReportMetadata,
    ReportType,
)
from realty_modules.reporting.service import ReportingService

__all__ = [
    # Service
    "ReportingService",
    # Config
    "ReportingConfig",
    # Consistency
    "check",
    "check_totals",
    # Models
    "ReportType",
    "ReportMetadata",
    "AccountLine",
    "AssetsSection",
    "LiabilitiesSection",
    "EquitySection",
    "BalanceSheetReport",
    "ConsistencyResult",
    "CategorySort",
    "CategoryReportRow",
    "CategoryReport",
    "ProfitAndLossReport",
    "LedgerEntryKind",
    "LedgerRow",
    "LedgerReport",
    "BudgetStatus",
    "BudgetRow",
    "BudgetReport",
    "PmCostRow",
    "PmCostReport",
    "ContractSummaryRow",
    "ContractSummaryReport",
    "ProjectSummaryRow",
    "ProjectSummaryReport",
]
