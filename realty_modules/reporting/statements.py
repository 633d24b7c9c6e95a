"""
Pure statement builders.

Every builder projects an ``Aggregates`` (from the ledger accumulator)
into one report DTO.  ZERO I/O. ZERO side effects.

Functions in this module follow the engine purity convention:
- No database access
- No clock access (timestamps arrive in ReportMetadata)
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from realty_engines.accumulator import Aggregates, CategoryLine
from realty_engines.category_tree import CategoryTree, build_category_tree
from realty_engines.classifier import EffectKind, Pool
from realty_engines.reference_index import EntityIndex
from realty_kernel.domain.entities import (
    AccountType,
    AgreementStatus,
    CategoryRole,
    TransactionType,
)
from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.consistency import check_totals
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
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"

_COMPANY_EFFECTS = frozenset({
    EffectKind.COMPANY_REVENUE,
    EffectKind.COMPANY_EXPENSE,
    EffectKind.REVENUE_REDUCTION,
})


# =========================================================================
# Helpers
# =========================================================================


def percent_of(part: Decimal, whole: Decimal, places: int = 2) -> Decimal:
    """``part / whole * 100`` rounded half-up; zero when ``whole <= 0``."""
    if whole <= 0:
        return ZERO
    quantum = Decimal(1).scaleb(-places)
    return (part / whole * HUNDRED).quantize(quantum, rounding=ROUND_HALF_UP)


def _is_rental_category(index: EntityIndex, category_id: str | None) -> bool:
    category = index.category(category_id)
    return category is not None and category.is_rental


def _category_rows(
    entries: Iterable[tuple[str | None, Decimal]],
    tree: CategoryTree,
    places: int,
) -> tuple[list[CategoryReportRow], Decimal, int]:
    """
    Roll ``(category_id, amount)`` entries up ``tree``.

    Entries whose category is not in the tree land in an "Uncategorized"
    root row, so the total always equals the sum of root rows.
    """
    own: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    total = ZERO
    total_count = 0
    for category_id, amount in entries:
        key = category_id if category_id in tree else UNCATEGORIZED_ID
        own[key] += amount
        counts[key] += 1
        total += amount
        total_count += 1

    amounts = tree.rollup(own, ZERO)
    rolled_counts = tree.rollup(counts, 0)

    rows: list[CategoryReportRow] = []
    for category, level in tree.walk():
        amount = amounts[category.id]
        count = rolled_counts[category.id]
        if amount == 0 and count == 0:
            continue
        rows.append(
            CategoryReportRow(
                category_id=category.id,
                category_name=category.name,
                count=count,
                amount=amount,
                percentage=percent_of(amount, total, places),
                level=level,
                has_children=bool(tree.children_of(category.id)),
            )
        )

    if counts.get(UNCATEGORIZED_ID):
        rows.append(
            CategoryReportRow(
                category_id=UNCATEGORIZED_ID,
                category_name=UNCATEGORIZED_NAME,
                count=counts[UNCATEGORIZED_ID],
                amount=own[UNCATEGORIZED_ID],
                percentage=percent_of(own[UNCATEGORIZED_ID], total, places),
                level=0,
                has_children=False,
            )
        )
    return rows, total, total_count


def _sort_rows(
    rows: list[CategoryReportRow],
    sort_by: CategorySort,
) -> tuple[CategoryReportRow, ...]:
    if sort_by == CategorySort.AMOUNT:
        return tuple(sorted(rows, key=lambda r: r.amount, reverse=True))
    if sort_by == CategorySort.COUNT:
        return tuple(sorted(rows, key=lambda r: r.count, reverse=True))
    return tuple(rows)


# =========================================================================
# 1. BALANCE SHEET
# =========================================================================


def link_pool_accounts(
    index: EntityIndex,
    config: ReportingConfig,
) -> dict[str, Pool]:
    """
    Map liability accounts to the pool they materialize.

    Each pool links at most one account (first match in snapshot order)
    and each account links at most one pool.
    """
    engine = config.engine
    candidates = (
        (Pool.SECURITY_DEPOSIT, engine.security_liability_keywords),
        (Pool.OWNER_FUNDS, engine.rental_liability_keywords),
    )
    links: dict[str, Pool] = {}
    for pool, keywords in candidates:
        for account in index.accounts.values():
            if account.type != AccountType.LIABILITY or account.id in links:
                continue
            name = account.name.lower()
            if any(kw.lower() in name for kw in keywords):
                links[account.id] = pool
                break
    return links


def build_balance_sheet(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> BalanceSheetReport:
    """
    Partition account balances into assets, liabilities and equity and
    append the accrual and pool lines.

    Accounts are shown only with in-scope activity and a non-zero balance.
    A linked liability account shows its pool value instead of its ledger
    balance, whenever that pool is non-zero.
    """
    engine = config.engine
    index = aggregates.context.index
    links = link_pool_accounts(index, config)

    assets: list[AccountLine] = []
    liabilities: list[AccountLine] = []
    equity: list[AccountLine] = []

    for account in index.accounts.values():
        pool = links.get(account.id)
        if pool is not None:
            value = engine.zeroed(aggregates.pool(pool))
            if value != 0:
                liabilities.append(
                    AccountLine(
                        account.id, account.name, account.type.value, value,
                        linked_pool=pool.value,
                    )
                )
            continue

        if account.id not in aggregates.accounts_with_activity:
            continue
        balance = aggregates.balance_of(account.id)
        if engine.is_zero(balance):
            continue
        if account.type.is_asset:
            assets.append(AccountLine(account.id, account.name, account.type.value, balance))
        elif account.type == AccountType.LIABILITY:
            liabilities.append(
                AccountLine(account.id, account.name, account.type.value, -balance)
            )
        else:
            equity.append(AccountLine(account.id, account.name, account.type.value, -balance))

    linked = set(links.values())
    security = ZERO if Pool.SECURITY_DEPOSIT in linked else engine.zeroed(
        aggregates.pool(Pool.SECURITY_DEPOSIT)
    )
    owner_funds = ZERO if Pool.OWNER_FUNDS in linked else engine.zeroed(
        aggregates.pool(Pool.OWNER_FUNDS)
    )
    loans_payable = engine.zeroed(aggregates.pool(Pool.LOANS_PAYABLE))
    loans_receivable = engine.zeroed(aggregates.pool(Pool.LOANS_RECEIVABLE))
    receivable = engine.zeroed(aggregates.accounts_receivable)
    payable = engine.zeroed(aggregates.accounts_payable)
    contribution = engine.zeroed(aggregates.owner_contribution)
    retained = engine.zeroed(aggregates.retained_earnings)

    total_assets = sum((a.balance for a in assets), ZERO) + receivable + loans_receivable
    total_liabilities = (
        sum((line.balance for line in liabilities), ZERO)
        + payable + loans_payable + security + owner_funds
    )
    total_equity = sum((e.balance for e in equity), ZERO) + contribution + retained

    result = check_totals(
        total_assets, total_liabilities, total_equity, engine.balance_tolerance,
    )

    return BalanceSheetReport(
        metadata=metadata,
        assets=AssetsSection(
            accounts=tuple(assets),
            accounts_receivable=receivable,
            loans_receivable=loans_receivable,
            total=total_assets,
        ),
        liabilities=LiabilitiesSection(
            accounts=tuple(liabilities),
            accounts_payable=payable,
            outstanding_loans=loans_payable,
            security_deposits_held=security,
            owner_funds_held=owner_funds,
            total=total_liabilities,
        ),
        equity=EquitySection(
            accounts=tuple(equity),
            owner_contribution=contribution,
            retained_earnings=retained,
            total=total_equity,
        ),
        market_inventory=engine.zeroed(aggregates.market_inventory),
        is_balanced=result.is_balanced,
        discrepancy=result.discrepancy,
        accrual_anomalies=aggregates.accrual_anomalies,
    )


# =========================================================================
# 2. CATEGORY REPORT / PROFIT & LOSS
# =========================================================================


def build_category_report(
    aggregates: Aggregates,
    transaction_type: TransactionType,
    config: ReportingConfig,
    metadata: ReportMetadata,
    sort_by: CategorySort = CategorySort.NAME,
) -> CategoryReport:
    """
    Hierarchical totals for one transaction type.

    Rental-flagged categories are left out of both the tree and the total.
    Split bill allocations count once per allocation.
    """
    if transaction_type not in (TransactionType.INCOME, TransactionType.EXPENSE):
        raise ValueError(f"Category report needs Income or Expense, got {transaction_type}")

    index = aggregates.context.index
    tree = build_category_tree(index.categories.values(), transaction_type)
    entries = [
        (line.category_id, line.amount)
        for line in aggregates.category_lines
        if line.tx_type == transaction_type
        and not _is_rental_category(index, line.category_id)
    ]
    rows, total, total_count = _category_rows(entries, tree, config.display_precision)

    return CategoryReport(
        metadata=metadata,
        transaction_type=transaction_type.value,
        rows=_sort_rows(rows, sort_by),
        total_amount=total,
        total_count=total_count,
        sort_by=sort_by,
    )


def build_profit_and_loss(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ProfitAndLossReport:
    """
    Company income and expense hierarchies.

    Only company effects count: pass-through pools, equity movements and
    clearing entries never reach P&L.  An expense booked against an income
    category reduces that income category.
    """
    index = aggregates.context.index
    equity_ids = (
        aggregates.context.roles.ids_for(CategoryRole.OWNER_EQUITY)
        | aggregates.context.roles.ids_for(CategoryRole.OWNER_WITHDRAWAL)
    )
    income_tree = build_category_tree(
        index.categories.values(), TransactionType.INCOME, exclude_ids=equity_ids,
    )
    expense_tree = build_category_tree(
        index.categories.values(), TransactionType.EXPENSE, exclude_ids=equity_ids,
    )

    income: list[tuple[str | None, Decimal]] = []
    expense: list[tuple[str | None, Decimal]] = []
    for line in aggregates.category_lines:
        if line.effect not in _COMPANY_EFFECTS:
            continue
        if _is_rental_category(index, line.category_id):
            continue
        if line.effect == EffectKind.COMPANY_REVENUE:
            income.append((line.category_id, line.amount))
        elif line.effect == EffectKind.REVENUE_REDUCTION:
            income.append((line.category_id, -line.amount))
        else:
            expense.append((line.category_id, line.amount))

    places = config.display_precision
    income_rows, total_income, _ = _category_rows(income, income_tree, places)
    expense_rows, total_expense, _ = _category_rows(expense, expense_tree, places)

    return ProfitAndLossReport(
        metadata=metadata,
        income_rows=tuple(income_rows),
        expense_rows=tuple(expense_rows),
        total_income=total_income,
        total_expense=total_expense,
    )


# =========================================================================
# 3. RUNNING-BALANCE LEDGERS
# =========================================================================


@dataclasses.dataclass(frozen=True)
class LedgerEvent:
    """Bridge type: one credit or debit before running balances are applied."""

    date: date
    kind: LedgerEntryKind
    amount: Decimal
    particulars: str
    reference_id: str
    counterparty_name: str = ""


def running_balance(
    events: Iterable[LedgerEvent],
    counterparty_name: str,
) -> tuple[tuple[LedgerRow, ...], Decimal, Decimal]:
    """
    Order events by date, credits before debits on the same date, then by
    arrival, and apply ``balance += credit - debit``.
    """
    ordered = sorted(
        enumerate(events),
        key=lambda pair: (
            pair[1].date,
            0 if pair[1].kind == LedgerEntryKind.CREDIT else 1,
            pair[0],
        ),
    )
    rows: list[LedgerRow] = []
    balance = ZERO
    total_credit = ZERO
    total_debit = ZERO
    for _seq, event in ordered:
        credit = event.amount if event.kind == LedgerEntryKind.CREDIT else ZERO
        debit = event.amount if event.kind == LedgerEntryKind.DEBIT else ZERO
        balance += credit - debit
        total_credit += credit
        total_debit += debit
        rows.append(
            LedgerRow(
                date=event.date,
                counterparty_name=event.counterparty_name or counterparty_name,
                particulars=event.particulars,
                credit=credit,
                debit=debit,
                balance=balance,
                reference_id=event.reference_id,
                entry_kind=event.kind,
            )
        )
    return tuple(rows), total_credit, total_debit


def _document_label(prefix: str, number: str, description: str) -> str:
    label = f"{prefix} #{number}" if number else prefix
    return f"{label} - {description}" if description else label


def _ledger_report(
    metadata: ReportMetadata,
    counterparty_id: str,
    counterparty_name: str,
    events: list[LedgerEvent],
) -> LedgerReport:
    rows, total_credit, total_debit = running_balance(events, counterparty_name)
    return LedgerReport(
        metadata=metadata,
        counterparty_id=counterparty_id,
        counterparty_name=counterparty_name,
        rows=rows,
        total_credit=total_credit,
        total_debit=total_debit,
    )


def build_vendor_ledger(
    aggregates: Aggregates,
    vendor_id: str,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> LedgerReport:
    """Bills issued by the vendor are credits; expense payments are debits."""
    index = aggregates.context.index
    scope = aggregates.scope
    events: list[LedgerEvent] = []

    for bill in index.bills.values():
        if bill.contact_id != vendor_id:
            continue
        if not scope.contains(bill.issue_date) or not scope.admits_project(bill.project_id):
            continue
        events.append(
            LedgerEvent(
                bill.issue_date, LedgerEntryKind.CREDIT, bill.amount,
                _document_label("Bill", bill.bill_number, bill.description), bill.id,
            )
        )
    for resolved in aggregates.resolved:
        tx = resolved.transaction
        if tx.type == TransactionType.EXPENSE and resolved.contact_id == vendor_id:
            events.append(
                LedgerEvent(
                    tx.date, LedgerEntryKind.DEBIT, tx.amount,
                    tx.description or "Payment", tx.id,
                )
            )

    return _ledger_report(metadata, vendor_id, index.contact_name(vendor_id), events)


def build_contract_ledger(
    aggregates: Aggregates,
    contract_id: str,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> LedgerReport:
    """Bills against the contract are credits; payments linked to it are debits."""
    index = aggregates.context.index
    scope = aggregates.scope
    contract = index.contract(contract_id)
    vendor_name = index.contact_name(contract.vendor_id) if contract else ""
    events: list[LedgerEvent] = []

    for bill in index.bills.values():
        if bill.contract_id != contract_id or not scope.contains(bill.issue_date):
            continue
        events.append(
            LedgerEvent(
                bill.issue_date, LedgerEntryKind.CREDIT, bill.amount,
                _document_label("Bill", bill.bill_number, bill.description), bill.id,
                counterparty_name=vendor_name,
            )
        )
    for resolved in aggregates.resolved:
        tx = resolved.transaction
        if tx.type == TransactionType.EXPENSE and resolved.contract_id == contract_id:
            events.append(
                LedgerEvent(
                    tx.date, LedgerEntryKind.DEBIT, tx.amount,
                    tx.description or "Payment", tx.id,
                    counterparty_name=vendor_name,
                )
            )

    name = contract.name if contract else ""
    return _ledger_report(metadata, contract_id, name, events)


def _owner_lines(
    aggregates: Aggregates,
    owner_id: str,
    pool: Pool,
) -> Iterable[CategoryLine]:
    properties = aggregates.context.index.properties_of_owner(owner_id)
    for line in aggregates.category_lines:
        if line.pool != pool:
            continue
        if line.property_id in properties or line.contact_id == owner_id:
            yield line


def build_owner_ledger(
    aggregates: Aggregates,
    owner_id: str,
    pool: Pool,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> LedgerReport:
    """
    Owner statement over one pass-through pool.

    ``Pool.OWNER_FUNDS`` gives the rent ledger (rental income credited,
    payouts and owner-borne property costs debited); ``Pool.SECURITY_DEPOSIT``
    gives the security ledger.  Lines belong to the owner through their
    property or, for payouts, through the owner contact.
    """
    if pool not in (Pool.OWNER_FUNDS, Pool.SECURITY_DEPOSIT):
        raise ValueError(f"Owner ledger is defined for owner funds or security deposits, not {pool}")

    index = aggregates.context.index
    events: list[LedgerEvent] = []
    for line in _owner_lines(aggregates, owner_id, pool):
        kind = (
            LedgerEntryKind.CREDIT
            if line.effect == EffectKind.POOL_INCREASE
            else LedgerEntryKind.DEBIT
        )
        prop = index.property(line.property_id)
        particulars = index.category_name(line.category_id) or "Uncategorized"
        if prop is not None:
            particulars = f"{particulars} - {prop.name}"
        events.append(
            LedgerEvent(line.date, kind, line.amount, particulars, line.transaction_id)
        )

    return _ledger_report(metadata, owner_id, index.contact_name(owner_id), events)


def build_client_ledger(
    aggregates: Aggregates,
    client_id: str,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> LedgerReport:
    """Receivable invoices are credits; the client's income payments are debits."""
    engine = config.engine
    index = aggregates.context.index
    scope = aggregates.scope
    events: list[LedgerEvent] = []

    for invoice in index.invoices.values():
        if invoice.contact_id != client_id:
            continue
        if invoice.invoice_type not in engine.receivable_invoice_types:
            continue
        if engine.void_marker and engine.void_marker in invoice.description:
            continue
        agreement = index.agreement(invoice.agreement_id)
        if agreement is not None and agreement.status == AgreementStatus.CANCELLED:
            continue
        if not scope.contains(invoice.issue_date) or not scope.admits_project(invoice.project_id):
            continue
        events.append(
            LedgerEvent(
                invoice.issue_date, LedgerEntryKind.CREDIT, invoice.amount,
                _document_label("Invoice", invoice.invoice_number, invoice.description),
                invoice.id,
            )
        )
    for resolved in aggregates.resolved:
        tx = resolved.transaction
        if tx.type == TransactionType.INCOME and resolved.contact_id == client_id:
            events.append(
                LedgerEvent(
                    tx.date, LedgerEntryKind.DEBIT, tx.amount,
                    tx.description or "Payment", tx.id,
                )
            )

    return _ledger_report(metadata, client_id, index.contact_name(client_id), events)


# =========================================================================
# 4. BUDGET VS ACTUAL
# =========================================================================


def budget_status(
    budgeted: Decimal,
    spent: Decimal,
    under_threshold: Decimal,
) -> BudgetStatus:
    """over above 100%, under below the threshold, on track otherwise."""
    if budgeted <= 0:
        return BudgetStatus.ON_TRACK
    if spent > budgeted:
        return BudgetStatus.OVER
    if spent < budgeted * under_threshold:
        return BudgetStatus.UNDER
    return BudgetStatus.ON_TRACK


def build_budget_report(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> BudgetReport:
    """
    Per-category, per-month actual spend against budget.

    A project-scoped run uses that project's budgets only; an unscoped run
    sums budgets across projects per category.
    """
    engine = config.engine
    index = aggregates.context.index
    scope = aggregates.scope

    budgeted: dict[str, Decimal] = {}
    for budget in index.budgets:
        if scope.is_project_scoped and budget.project_id != scope.project_id:
            continue
        budgeted[budget.category_id] = budgeted.get(budget.category_id, ZERO) + budget.amount

    spent: dict[str, Decimal] = defaultdict(lambda: ZERO)
    monthly: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
    months: set[str] = set()
    for line in aggregates.category_lines:
        if line.tx_type != TransactionType.EXPENSE or line.category_id not in budgeted:
            continue
        spent[line.category_id] += line.amount
        monthly[line.category_id][line.month] += line.amount
        months.add(line.month)

    rows: list[BudgetRow] = []
    for category_id, amount in budgeted.items():
        total_spent = spent.get(category_id, ZERO)
        rows.append(
            BudgetRow(
                category_id=category_id,
                category_name=index.category_name(category_id),
                budgeted=amount,
                total_spent=total_spent,
                variance=amount - total_spent,
                percent_used=percent_of(total_spent, amount, config.display_precision),
                status=budget_status(amount, total_spent, engine.budget_under_threshold),
                monthly_spending=dict(sorted(monthly.get(category_id, {}).items())),
            )
        )
    rows.sort(key=lambda r: (r.category_name.casefold(), r.category_id))

    return BudgetReport(
        metadata=metadata,
        rows=tuple(rows),
        months=tuple(sorted(months)),
        total_budgeted=sum((r.budgeted for r in rows), ZERO),
        total_spent=sum((r.total_spent for r in rows), ZERO),
    )


# =========================================================================
# 5. PM-COST ACCRUAL
# =========================================================================


def accrue_fee(net_base: Decimal, pm_percentage: Decimal) -> Decimal:
    return (net_base * pm_percentage / HUNDRED).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_pm_cost_report(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> PmCostReport:
    """
    PM fee accrued per (month, project) against PM fee paid.

    Expenses in the PM-cost role are the fee paid; every other project
    expense is the fee base, less the commission, rebate, discount and
    payout roles.  Rental categories are left out.
    ``accrued = (expense - excluded) * pm_percentage / 100``.
    """
    engine = config.engine
    index = aggregates.context.index
    roles = aggregates.context.roles
    excluded_roles = frozenset(engine.pm_excluded_roles)

    expense: dict[tuple[str, str], Decimal] = defaultdict(lambda: ZERO)
    excluded: dict[tuple[str, str], Decimal] = defaultdict(lambda: ZERO)
    paid: dict[tuple[str, str], Decimal] = defaultdict(lambda: ZERO)
    keys: set[tuple[str, str]] = set()

    for line in aggregates.category_lines:
        if line.tx_type != TransactionType.EXPENSE or not line.project_id:
            continue
        if line.effect == EffectKind.EXCLUDED:
            continue
        if _is_rental_category(index, line.category_id):
            continue
        key = (line.month, line.project_id)
        keys.add(key)
        role = roles.role_of(line.category_id)
        if role == CategoryRole.PM_COST:
            paid[key] += line.amount
            continue
        expense[key] += line.amount
        if role in excluded_roles:
            excluded[key] += line.amount

    def project_name(project_id: str) -> str:
        project = index.projects.get(project_id)
        return project.name if project else project_id

    rows: list[PmCostRow] = []
    for month, project_id in sorted(keys, key=lambda k: (k[0], project_name(k[1]), k[1])):
        key = (month, project_id)
        net_base = expense[key] - excluded[key]
        accrued = accrue_fee(net_base, engine.pm_percentage)
        rows.append(
            PmCostRow(
                month=month,
                project_id=project_id,
                project_name=project_name(project_id),
                total_expense=expense[key],
                excluded_amount=excluded[key],
                net_base=net_base,
                accrued_fee=accrued,
                paid_fee=paid[key],
                balance=accrued - paid[key],
            )
        )

    return PmCostReport(
        metadata=metadata,
        pm_percentage=engine.pm_percentage,
        rows=tuple(rows),
        total_expense=sum((r.total_expense for r in rows), ZERO),
        excluded_amount=sum((r.excluded_amount for r in rows), ZERO),
        net_base=sum((r.net_base for r in rows), ZERO),
        accrued_fee=sum((r.accrued_fee for r in rows), ZERO),
        paid_fee=sum((r.paid_fee for r in rows), ZERO),
    )


# =========================================================================
# 6. CONTRACT / PROJECT SUMMARIES
# =========================================================================


def build_contract_summary(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ContractSummaryReport:
    """Paid-to-date, open balance and progress for every in-scope contract."""
    index = aggregates.context.index
    scope = aggregates.scope

    paid: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for resolved in aggregates.resolved:
        if resolved.contract_id and resolved.transaction.type == TransactionType.EXPENSE:
            paid[resolved.contract_id] += resolved.amount

    rows: list[ContractSummaryRow] = []
    for contract in index.contracts.values():
        if not scope.admits_project(contract.project_id):
            continue
        contract_paid = paid.get(contract.id, ZERO)
        rows.append(
            ContractSummaryRow(
                contract_id=contract.id,
                contract_number=contract.contract_number,
                name=contract.name,
                vendor_name=index.contact_name(contract.vendor_id),
                project_id=contract.project_id,
                status=contract.status.value,
                total_amount=contract.total_amount,
                paid=contract_paid,
                balance=max(ZERO, contract.total_amount - contract_paid),
                progress_percent=percent_of(
                    contract_paid, contract.total_amount, config.display_precision,
                ),
            )
        )
    rows.sort(key=lambda r: (r.contract_number, r.name, r.contract_id))

    return ContractSummaryReport(
        metadata=metadata,
        rows=tuple(rows),
        total_amount=sum((r.total_amount for r in rows), ZERO),
        total_paid=sum((r.paid for r in rows), ZERO),
        total_balance=sum((r.balance for r in rows), ZERO),
    )


def build_project_summary(
    aggregates: Aggregates,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ProjectSummaryReport:
    """Company revenue and expense per project."""
    index = aggregates.context.index
    rows = []
    for project_id, totals in aggregates.project_totals.items():
        project = index.projects.get(project_id)
        rows.append(
            ProjectSummaryRow(
                project_id=project_id,
                project_name=project.name if project else project_id,
                revenue=totals.revenue,
                expense=totals.expense,
                net=totals.net,
            )
        )
    rows.sort(key=lambda r: (r.project_name.casefold(), r.project_id))
    return ProjectSummaryReport(
        metadata=metadata,
        rows=tuple(rows),
        total_revenue=sum((r.revenue for r in rows), ZERO),
        total_expense=sum((r.expense for r in rows), ZERO),
    )


# =========================================================================
# 7. RENDERER (dict/JSON output)
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to plain JSON-able values.

    Handles:
    - Decimal -> str (preserving precision)
    - date -> ISO format string
    - Enum -> .value (also as dict keys)
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {
            (k.value if isinstance(k, Enum) else str(k)): render_to_dict(v)
            for k, v in obj.items()
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
