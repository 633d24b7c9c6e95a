"""
Category Classifier -- decides which derived bucket each allocation feeds.

Responsibility:
    ``classify(resolved, ctx)`` returns one ClassifiedEffect per allocation
    of a resolved transaction.  Cash movement is not decided here; the
    accumulator applies it for every transaction regardless of the effect.

Rules, first match wins:
    1. Loan: Receive/Repay move the loans-payable pool, Give/Collect the
       loans-receivable pool.  A loan without subtype is treated as Repay.
    2. Transfer: no bucket.
    3. Income or expense on the clearing account: excluded.
    4. Income: owner-equity role -> equity contribution; security-deposit
       role -> security pool up; rental-income role -> owner-funds pool up;
       otherwise company revenue.
    5. Expense: owner-withdrawal role -> equity withdrawal; security-refund
       role -> security pool down; owner-payout role -> owner-funds pool
       down; category typed Income -> revenue reduction; tenant contact,
       tenant-deduction role or marker in the category name -> security
       pool down; property without project -> owner-funds pool down;
       otherwise company expense.

Failure modes:
    - None.  A missing named category disables its rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from realty_config.schema import EngineConfig
from realty_engines.category_roles import RoleTable
from realty_engines.link_resolver import Allocation, ResolvedTransaction
from realty_engines.reference_index import EntityIndex
from realty_kernel.domain.entities import (
    CategoryRole,
    ContactType,
    LoanSubtype,
    TransactionType,
)


class EffectKind(str, Enum):
    COMPANY_REVENUE = "company_revenue"
    COMPANY_EXPENSE = "company_expense"
    REVENUE_REDUCTION = "revenue_reduction"
    EQUITY_CONTRIBUTION = "equity_contribution"
    EQUITY_WITHDRAWAL = "equity_withdrawal"
    POOL_INCREASE = "pool_increase"
    POOL_DECREASE = "pool_decrease"
    TRANSFER = "transfer"
    EXCLUDED = "excluded"


class Pool(str, Enum):
    SECURITY_DEPOSIT = "security_deposit"
    OWNER_FUNDS = "owner_funds"
    LOANS_PAYABLE = "loans_payable"
    LOANS_RECEIVABLE = "loans_receivable"


@dataclass(frozen=True)
class ClassifiedEffect:
    kind: EffectKind
    amount: Decimal
    category_id: str | None
    pool: Pool | None = None
    rule: str = ""

    @property
    def signed_pool_delta(self) -> Decimal:
        if self.kind == EffectKind.POOL_INCREASE:
            return self.amount
        if self.kind == EffectKind.POOL_DECREASE:
            return -self.amount
        return Decimal("0")


@dataclass(frozen=True)
class ClassifyContext:
    """Per-run lookups the classifier needs."""

    index: EntityIndex
    roles: RoleTable
    config: EngineConfig

    @classmethod
    def build(cls, index: EntityIndex, config: EngineConfig) -> ClassifyContext:
        roles = RoleTable.build(tuple(index.categories.values()), config)
        return cls(index=index, roles=roles, config=config)

    def is_clearing_account(self, account_id: str | None) -> bool:
        account = self.index.account(account_id)
        return account is not None and account.name == self.config.clearing_account_name


_LOAN_EFFECTS = {
    LoanSubtype.RECEIVE: (EffectKind.POOL_INCREASE, Pool.LOANS_PAYABLE),
    LoanSubtype.REPAY: (EffectKind.POOL_DECREASE, Pool.LOANS_PAYABLE),
    LoanSubtype.GIVE: (EffectKind.POOL_INCREASE, Pool.LOANS_RECEIVABLE),
    LoanSubtype.COLLECT: (EffectKind.POOL_DECREASE, Pool.LOANS_RECEIVABLE),
}


def _classify_income(alloc: Allocation, ctx: ClassifyContext) -> ClassifiedEffect:
    role = ctx.roles.role_of(alloc.category_id)
    if role == CategoryRole.OWNER_EQUITY:
        return ClassifiedEffect(
            EffectKind.EQUITY_CONTRIBUTION, alloc.amount, alloc.category_id,
            rule="owner_equity",
        )
    if role == CategoryRole.SECURITY_DEPOSIT:
        return ClassifiedEffect(
            EffectKind.POOL_INCREASE, alloc.amount, alloc.category_id,
            pool=Pool.SECURITY_DEPOSIT, rule="security_deposit",
        )
    if role == CategoryRole.RENTAL_INCOME:
        return ClassifiedEffect(
            EffectKind.POOL_INCREASE, alloc.amount, alloc.category_id,
            pool=Pool.OWNER_FUNDS, rule="rental_income",
        )
    return ClassifiedEffect(
        EffectKind.COMPANY_REVENUE, alloc.amount, alloc.category_id,
        rule="company_revenue",
    )


def _is_tenant_deduction(
    resolved: ResolvedTransaction,
    alloc: Allocation,
    ctx: ClassifyContext,
) -> bool:
    contact = ctx.index.contact(resolved.contact_id)
    if contact is not None and contact.type == ContactType.TENANT:
        return True
    if ctx.roles.has_role(alloc.category_id, CategoryRole.TENANT_DEDUCTION):
        return True
    marker = ctx.config.tenant_deduction_marker
    return bool(marker) and marker in ctx.index.category_name(alloc.category_id)


def _classify_expense(
    resolved: ResolvedTransaction,
    alloc: Allocation,
    ctx: ClassifyContext,
) -> ClassifiedEffect:
    role = ctx.roles.role_of(alloc.category_id)
    if role == CategoryRole.OWNER_WITHDRAWAL:
        return ClassifiedEffect(
            EffectKind.EQUITY_WITHDRAWAL, alloc.amount, alloc.category_id,
            rule="owner_withdrawal",
        )
    if role == CategoryRole.SECURITY_REFUND:
        return ClassifiedEffect(
            EffectKind.POOL_DECREASE, alloc.amount, alloc.category_id,
            pool=Pool.SECURITY_DEPOSIT, rule="security_refund",
        )
    if role == CategoryRole.OWNER_PAYOUT:
        return ClassifiedEffect(
            EffectKind.POOL_DECREASE, alloc.amount, alloc.category_id,
            pool=Pool.OWNER_FUNDS, rule="owner_payout",
        )

    category = ctx.index.category(alloc.category_id)
    if category is not None and category.type == TransactionType.INCOME:
        return ClassifiedEffect(
            EffectKind.REVENUE_REDUCTION, alloc.amount, alloc.category_id,
            rule="revenue_reduction",
        )
    if _is_tenant_deduction(resolved, alloc, ctx):
        return ClassifiedEffect(
            EffectKind.POOL_DECREASE, alloc.amount, alloc.category_id,
            pool=Pool.SECURITY_DEPOSIT, rule="tenant_deduction",
        )
    if resolved.property_id and not resolved.project_id:
        return ClassifiedEffect(
            EffectKind.POOL_DECREASE, alloc.amount, alloc.category_id,
            pool=Pool.OWNER_FUNDS, rule="owner_expense",
        )
    return ClassifiedEffect(
        EffectKind.COMPANY_EXPENSE, alloc.amount, alloc.category_id,
        rule="company_expense",
    )


def classify(
    resolved: ResolvedTransaction,
    ctx: ClassifyContext,
) -> tuple[ClassifiedEffect, ...]:
    """Classify every allocation of ``resolved``."""
    tx = resolved.transaction

    if tx.type == TransactionType.LOAN:
        kind, pool = _LOAN_EFFECTS[tx.subtype or LoanSubtype.REPAY]
        return (
            ClassifiedEffect(kind, tx.amount, resolved.category_id, pool=pool, rule="loan"),
        )
    if tx.type == TransactionType.TRANSFER:
        return (
            ClassifiedEffect(EffectKind.TRANSFER, tx.amount, None, rule="transfer"),
        )
    if ctx.is_clearing_account(tx.account_id):
        return tuple(
            ClassifiedEffect(EffectKind.EXCLUDED, a.amount, a.category_id, rule="clearing")
            for a in resolved.allocations
        )

    if tx.type == TransactionType.INCOME:
        return tuple(_classify_income(a, ctx) for a in resolved.allocations)
    return tuple(_classify_expense(resolved, a, ctx) for a in resolved.allocations)
