"""
Ledger Accumulator -- one pass over a snapshot producing every aggregate.

Responsibility:
    ``accumulate(snapshot, scope, config)`` derives per-account balances,
    company revenue and expense, liability pools, owner contribution,
    receivables, payables, unsold inventory and per-allocation category
    lines.  Statement builders are thin projections over the result.

Architecture position:
    Engines -- pure calculation, zero I/O beyond log records.

Invariants enforced:
    - Pure: identical (snapshot, scope, config) yield equal Aggregates.
    - Cash effect is applied to every in-scope transaction, including
      clearing-account ones whose classification is excluded.
    - Derived due amounts are clamped at zero; overpaid documents are
      reported as AccrualAnomaly, never corrected.
    - retained_earnings = (revenue - expense) + receivables - payables.

Failure modes:
    - CategoryCycleError is not raised here; only tree-building callers
      can hit it.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from realty_config.schema import EngineConfig
from realty_engines.classifier import (
    ClassifiedEffect,
    ClassifyContext,
    EffectKind,
    Pool,
    classify,
)
from realty_engines.link_resolver import ResolvedTransaction, resolve
from realty_engines.reference_index import EntityIndex
from realty_engines.tracer import traced_engine
from realty_kernel.domain.entities import (
    AgreementStatus,
    LoanSubtype,
    Transaction,
    TransactionType,
)
from realty_kernel.domain.snapshot import LedgerSnapshot, Scope
from realty_kernel.logging_config import get_logger

logger = get_logger("engines.accumulator")

ZERO = Decimal("0")


@dataclass(frozen=True)
class CategoryLine:
    """One classified income/expense allocation, as category reports see it."""

    transaction_id: str
    tx_type: TransactionType
    category_id: str | None
    amount: Decimal
    date: date
    project_id: str | None
    contact_id: str | None
    property_id: str | None
    effect: EffectKind
    pool: Pool | None = None

    @property
    def month(self) -> str:
        return self.date.strftime("%Y-%m")


@dataclass(frozen=True)
class AccrualAnomaly:
    """A document whose paid amount exceeds its amount."""

    document_type: str
    document_id: str
    amount: Decimal
    paid_amount: Decimal

    @property
    def overpaid_by(self) -> Decimal:
        return self.paid_amount - self.amount


@dataclass(frozen=True)
class ProjectTotals:
    revenue: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.revenue - self.expense


@dataclass(frozen=True)
class Aggregates:
    scope: Scope
    account_balances: dict[str, Decimal]
    accounts_with_activity: frozenset[str]
    company_revenue: Decimal
    company_expense: Decimal
    revenue_reductions: Decimal
    pools: dict[Pool, Decimal]
    owner_contribution: Decimal
    accounts_receivable: Decimal
    accounts_payable: Decimal
    market_inventory: Decimal
    category_lines: tuple[CategoryLine, ...]
    resolved: tuple[ResolvedTransaction, ...]
    project_totals: dict[str, ProjectTotals]
    accrual_anomalies: tuple[AccrualAnomaly, ...]
    context: ClassifyContext = field(compare=False, repr=False)

    @property
    def retained_earnings(self) -> Decimal:
        return (
            self.company_revenue - self.company_expense
            + self.accounts_receivable - self.accounts_payable
        )

    def pool(self, pool: Pool) -> Decimal:
        return self.pools.get(pool, ZERO)

    def balance_of(self, account_id: str) -> Decimal:
        return self.account_balances.get(account_id, ZERO)


def cash_effects(tx: Transaction) -> list[tuple[str, Decimal]]:
    """Signed (account_id, delta) pairs for one transaction."""
    if tx.type == TransactionType.TRANSFER:
        effects = []
        if tx.from_account_id:
            effects.append((tx.from_account_id, -tx.amount))
        if tx.to_account_id:
            effects.append((tx.to_account_id, tx.amount))
        return effects
    if not tx.account_id:
        return []
    if tx.type == TransactionType.INCOME:
        return [(tx.account_id, tx.amount)]
    if tx.type == TransactionType.LOAN:
        inflow = tx.subtype in (LoanSubtype.RECEIVE, LoanSubtype.COLLECT)
        return [(tx.account_id, tx.amount if inflow else -tx.amount)]
    return [(tx.account_id, -tx.amount)]


class _Buckets:
    """Mutable running totals for one accumulate() call."""

    def __init__(self) -> None:
        self.revenue = ZERO
        self.expense = ZERO
        self.revenue_reductions = ZERO
        self.contribution = ZERO
        self.pools: dict[Pool, Decimal] = {p: ZERO for p in Pool}
        self.project_revenue: dict[str, Decimal] = defaultdict(lambda: ZERO)
        self.project_expense: dict[str, Decimal] = defaultdict(lambda: ZERO)

    def apply(self, effect: ClassifiedEffect, project_id: str | None) -> None:
        kind = effect.kind
        if kind == EffectKind.COMPANY_REVENUE:
            self.revenue += effect.amount
            if project_id:
                self.project_revenue[project_id] += effect.amount
        elif kind == EffectKind.REVENUE_REDUCTION:
            self.revenue -= effect.amount
            self.revenue_reductions += effect.amount
            if project_id:
                self.project_revenue[project_id] -= effect.amount
        elif kind == EffectKind.COMPANY_EXPENSE:
            self.expense += effect.amount
            if project_id:
                self.project_expense[project_id] += effect.amount
        elif kind == EffectKind.EQUITY_CONTRIBUTION:
            self.contribution += effect.amount
        elif kind == EffectKind.EQUITY_WITHDRAWAL:
            self.contribution -= effect.amount
        elif effect.pool is not None:
            self.pools[effect.pool] += effect.signed_pool_delta

    def project_totals(self) -> dict[str, ProjectTotals]:
        keys = sorted(set(self.project_revenue) | set(self.project_expense))
        return {
            k: ProjectTotals(
                revenue=self.project_revenue.get(k, ZERO),
                expense=self.project_expense.get(k, ZERO),
            )
            for k in keys
        }


def _receivables(
    snapshot: LedgerSnapshot,
    index: EntityIndex,
    scope: Scope,
    config: EngineConfig,
    anomalies: list[AccrualAnomaly],
) -> Decimal:
    # Receivables are open balances at run time; issue dates are ignored.
    total = ZERO
    for invoice in snapshot.invoices:
        if invoice.invoice_type not in config.receivable_invoice_types:
            continue
        if not scope.admits_project(invoice.project_id):
            continue
        agreement = index.agreement(invoice.agreement_id)
        if agreement is not None and agreement.status == AgreementStatus.CANCELLED:
            continue
        if config.void_marker and config.void_marker in invoice.description:
            continue
        if invoice.paid_amount > invoice.amount + config.epsilon:
            anomalies.append(
                AccrualAnomaly("invoice", invoice.id, invoice.amount, invoice.paid_amount)
            )
        total += max(ZERO, invoice.amount - invoice.paid_amount)
    return total


def _payables(
    snapshot: LedgerSnapshot,
    scope: Scope,
    config: EngineConfig,
    anomalies: list[AccrualAnomaly],
) -> Decimal:
    # Property bills are owner liabilities, not company payables.
    total = ZERO
    cutoff = scope.cutoff
    for bill in snapshot.bills:
        if bill.property_id:
            continue
        if not scope.admits_project(bill.project_id):
            continue
        if cutoff is not None and bill.issue_date > cutoff:
            continue
        if bill.paid_amount > bill.amount + config.epsilon:
            anomalies.append(
                AccrualAnomaly("bill", bill.id, bill.amount, bill.paid_amount)
            )
        total += max(ZERO, bill.amount - bill.paid_amount)
    return total


def _market_inventory(snapshot: LedgerSnapshot, scope: Scope) -> Decimal:
    cutoff = scope.cutoff
    sold: set[str] = set()
    for agreement in snapshot.agreements:
        if agreement.status != AgreementStatus.ACTIVE:
            continue
        if cutoff is not None and agreement.issue_date > cutoff:
            continue
        sold.update(agreement.unit_ids)
    return sum(
        (
            unit.sale_price or ZERO
            for unit in snapshot.units
            if scope.admits_project(unit.project_id) and unit.id not in sold
        ),
        ZERO,
    )


@traced_engine("ledger_accumulator", "1.0", fingerprint_fields=("snapshot", "scope"))
def accumulate(
    snapshot: LedgerSnapshot,
    scope: Scope,
    config: EngineConfig,
) -> Aggregates:
    """
    Derive every aggregate for ``scope`` from ``snapshot``.

    A transaction is in scope when its date is inside the scope window and
    its resolved project is admitted by the scope.
    """
    index = EntityIndex.from_snapshot(snapshot)
    ctx = ClassifyContext.build(index, config)

    balances: dict[str, Decimal] = defaultdict(lambda: ZERO)
    activity: set[str] = set()
    buckets = _Buckets()
    lines: list[CategoryLine] = []
    resolved_in_scope: list[ResolvedTransaction] = []

    for tx in snapshot.transactions:
        if not scope.contains(tx.date):
            continue
        resolved = resolve(tx, index)
        if not scope.admits_project(resolved.project_id):
            continue
        resolved_in_scope.append(resolved)

        for account_id, delta in cash_effects(tx):
            balances[account_id] += delta
            activity.add(account_id)

        for effect in classify(resolved, ctx):
            buckets.apply(effect, resolved.project_id)
            if tx.type in (TransactionType.INCOME, TransactionType.EXPENSE):
                lines.append(
                    CategoryLine(
                        transaction_id=tx.id,
                        tx_type=tx.type,
                        category_id=effect.category_id,
                        amount=effect.amount,
                        date=tx.date,
                        project_id=resolved.project_id,
                        contact_id=resolved.contact_id,
                        property_id=resolved.property_id,
                        effect=effect.kind,
                        pool=effect.pool,
                    )
                )

    anomalies: list[AccrualAnomaly] = []
    receivable = _receivables(snapshot, index, scope, config, anomalies)
    payable = _payables(snapshot, scope, config, anomalies)
    for anomaly in anomalies:
        logger.warning(
            "accrual_anomaly_detected",
            extra={
                "document_type": anomaly.document_type,
                "document_id": anomaly.document_id,
                "amount": anomaly.amount,
                "paid_amount": anomaly.paid_amount,
            },
        )

    aggregates = Aggregates(
        scope=scope,
        account_balances=dict(balances),
        accounts_with_activity=frozenset(activity),
        company_revenue=buckets.revenue,
        company_expense=buckets.expense,
        revenue_reductions=buckets.revenue_reductions,
        pools=dict(buckets.pools),
        owner_contribution=buckets.contribution,
        accounts_receivable=receivable,
        accounts_payable=payable,
        market_inventory=_market_inventory(snapshot, scope),
        category_lines=tuple(lines),
        resolved=tuple(resolved_in_scope),
        project_totals=buckets.project_totals(),
        accrual_anomalies=tuple(anomalies),
        context=ctx,
    )
    logger.debug(
        "aggregates_accumulated",
        extra={
            "transactions_in_scope": len(resolved_in_scope),
            "category_lines": len(lines),
            "anomalies": len(anomalies),
        },
    )
    return aggregates
