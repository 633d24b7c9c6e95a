"""
Reporting Domain Models (``realty_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for every statement the engine derives:
balance sheet, consistency result, category report, profit & loss,
running-balance ledgers, budget vs actual, PM-cost accrual, contract and
project summaries.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from realty_engines.accumulator import AccrualAnomaly


# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    BALANCE_SHEET = "balance_sheet"
    CATEGORY_REPORT = "category_report"
    PROFIT_AND_LOSS = "profit_and_loss"
    VENDOR_LEDGER = "vendor_ledger"
    CONTRACT_LEDGER = "contract_ledger"
    OWNER_RENT_LEDGER = "owner_rent_ledger"
    OWNER_SECURITY_LEDGER = "owner_security_ledger"
    CLIENT_LEDGER = "client_ledger"
    BUDGET_VS_ACTUAL = "budget_vs_actual"
    PM_COST = "pm_cost"
    CONTRACT_SUMMARY = "contract_summary"
    PROJECT_SUMMARY = "project_summary"


class CategorySort(str, Enum):
    """NAME keeps the tree order; the others flatten it."""

    NAME = "name"
    AMOUNT = "amount"
    COUNT = "count"


class BudgetStatus(str, Enum):
    UNDER = "under"
    ON_TRACK = "on_track"
    OVER = "over"


class LedgerEntryKind(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


# =========================================================================
# Report Metadata (common to all reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every report."""

    report_type: ReportType
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    as_of_date: date | None = None
    period_start: date | None = None
    period_end: date | None = None
    project_id: str = "all"
    counterparty_id: str | None = None


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class AccountLine:
    """
    One account on the balance sheet.

    Liability and equity balances are shown sign-flipped.  ``linked_pool``
    is set when the account displays a liability pool instead of its
    ledger balance.
    """

    account_id: str
    name: str
    account_type: str
    balance: Decimal
    linked_pool: str | None = None


@dataclass(frozen=True)
class AssetsSection:
    accounts: tuple[AccountLine, ...]
    accounts_receivable: Decimal
    loans_receivable: Decimal
    total: Decimal


@dataclass(frozen=True)
class LiabilitiesSection:
    accounts: tuple[AccountLine, ...]
    accounts_payable: Decimal
    outstanding_loans: Decimal
    security_deposits_held: Decimal
    owner_funds_held: Decimal
    total: Decimal


@dataclass(frozen=True)
class EquitySection:
    accounts: tuple[AccountLine, ...]
    owner_contribution: Decimal
    retained_earnings: Decimal
    total: Decimal


@dataclass(frozen=True)
class ConsistencyResult:
    """Outcome of the assets = liabilities + equity check."""

    is_balanced: bool
    discrepancy: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet for one scope.

    ``market_inventory`` is memo-only: unsold unit value, never part of
    the totals or the balance check.
    """

    metadata: ReportMetadata
    assets: AssetsSection
    liabilities: LiabilitiesSection
    equity: EquitySection
    market_inventory: Decimal
    is_balanced: bool
    discrepancy: Decimal
    accrual_anomalies: tuple[AccrualAnomaly, ...] = ()

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.liabilities.total + self.equity.total


# =========================================================================
# Category Report / Profit & Loss
# =========================================================================


@dataclass(frozen=True)
class CategoryReportRow:
    category_id: str
    category_name: str
    count: int
    amount: Decimal
    percentage: Decimal
    level: int
    has_children: bool


@dataclass(frozen=True)
class CategoryReport:
    metadata: ReportMetadata
    transaction_type: str
    rows: tuple[CategoryReportRow, ...]
    total_amount: Decimal
    total_count: int
    sort_by: CategorySort = CategorySort.NAME


@dataclass(frozen=True)
class ProfitAndLossReport:
    metadata: ReportMetadata
    income_rows: tuple[CategoryReportRow, ...]
    expense_rows: tuple[CategoryReportRow, ...]
    total_income: Decimal
    total_expense: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expense


# =========================================================================
# Running-balance ledgers
# =========================================================================


@dataclass(frozen=True)
class LedgerRow:
    date: date
    counterparty_name: str
    particulars: str
    credit: Decimal
    debit: Decimal
    balance: Decimal
    reference_id: str
    entry_kind: LedgerEntryKind


@dataclass(frozen=True)
class LedgerReport:
    metadata: ReportMetadata
    counterparty_id: str
    counterparty_name: str
    rows: tuple[LedgerRow, ...]
    total_credit: Decimal
    total_debit: Decimal

    @property
    def closing_balance(self) -> Decimal:
        return self.total_credit - self.total_debit


# =========================================================================
# Budget vs Actual
# =========================================================================


@dataclass(frozen=True)
class BudgetRow:
    category_id: str
    category_name: str
    budgeted: Decimal
    total_spent: Decimal
    variance: Decimal
    percent_used: Decimal
    status: BudgetStatus
    monthly_spending: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class BudgetReport:
    metadata: ReportMetadata
    rows: tuple[BudgetRow, ...]
    months: tuple[str, ...]
    total_budgeted: Decimal
    total_spent: Decimal

    @property
    def total_variance(self) -> Decimal:
        return self.total_budgeted - self.total_spent


# =========================================================================
# PM-Cost Accrual
# =========================================================================


@dataclass(frozen=True)
class PmCostRow:
    """Accrual for one (month, project) bucket."""

    month: str
    project_id: str
    project_name: str
    total_expense: Decimal
    excluded_amount: Decimal
    net_base: Decimal
    accrued_fee: Decimal
    paid_fee: Decimal
    balance: Decimal


@dataclass(frozen=True)
class PmCostReport:
    metadata: ReportMetadata
    pm_percentage: Decimal
    rows: tuple[PmCostRow, ...]
    total_expense: Decimal
    excluded_amount: Decimal
    net_base: Decimal
    accrued_fee: Decimal
    paid_fee: Decimal

    @property
    def balance(self) -> Decimal:
        return self.accrued_fee - self.paid_fee


# =========================================================================
# Contract / project summaries
# =========================================================================


@dataclass(frozen=True)
class ContractSummaryRow:
    contract_id: str
    contract_number: str
    name: str
    vendor_name: str
    project_id: str | None
    status: str
    total_amount: Decimal
    paid: Decimal
    balance: Decimal
    progress_percent: Decimal


@dataclass(frozen=True)
class ContractSummaryReport:
    metadata: ReportMetadata
    rows: tuple[ContractSummaryRow, ...]
    total_amount: Decimal
    total_paid: Decimal
    total_balance: Decimal


@dataclass(frozen=True)
class ProjectSummaryRow:
    project_id: str
    project_name: str
    revenue: Decimal
    expense: Decimal
    net: Decimal


@dataclass(frozen=True)
class ProjectSummaryReport:
    metadata: ReportMetadata
    rows: tuple[ProjectSummaryRow, ...]
    total_revenue: Decimal
    total_expense: Decimal
