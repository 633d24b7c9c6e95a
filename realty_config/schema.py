"""
Configuration schema (``realty_config.schema``).

Responsibility
--------------
Frozen dataclass holding every named constant the derivation engine
depends on: category names per accounting role, account-name keywords
that link liability accounts to pools, the PM-cost percentage, and the
numeric tolerances.  The engine is a pure function of
``(snapshot, scope, EngineConfig)``; nothing here is read from ambient
state.

Invariants enforced
-------------------
* ``epsilon >= 0``; ``balance_tolerance > 0``.
* ``0 <= pm_percentage <= 100``.
* ``0 < budget_under_threshold <= 1``.
* ``category_names`` keys are ``CategoryRole`` members.

Failure modes
-------------
* ``ConfigurationError`` on any violated invariant, raised at construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from realty_kernel.domain.entities import CategoryRole, InvoiceType
from realty_kernel.exceptions import ConfigurationError


def default_category_names() -> dict[CategoryRole, tuple[str, ...]]:
    """Category names recognised when a category carries no explicit role."""
    return {
        CategoryRole.OWNER_EQUITY: ("Owner Equity",),
        CategoryRole.OWNER_WITHDRAWAL: ("Owner Withdrawn",),
        CategoryRole.SECURITY_DEPOSIT: ("Security Deposit",),
        CategoryRole.RENTAL_INCOME: ("Rental Income",),
        CategoryRole.SECURITY_REFUND: (
            "Security Deposit Refund",
            "Owner Security Payout",
        ),
        CategoryRole.OWNER_PAYOUT: ("Owner Payout",),
        CategoryRole.PM_COST: ("Project Management Cost",),
        CategoryRole.BROKER_FEE: ("Broker Fee",),
        CategoryRole.REBATE: ("Rebate Amount",),
        CategoryRole.DISCOUNT: (
            "Customer Discount",
            "Floor Discount",
            "Lump Sum Discount",
            "Misc Discount",
        ),
    }


@dataclass(frozen=True)
class EngineConfig:
    """
    Explicit configuration passed to every engine entry point.

    ``pm_percentage`` is a percent (10 means 10%).  An empty name tuple for
    a role disables that classification branch; matching transactions fall
    through to company revenue or expense.
    """

    pm_percentage: Decimal = Decimal("0")
    epsilon: Decimal = Decimal("0.01")
    balance_tolerance: Decimal = Decimal("1.0")
    category_names: Mapping[CategoryRole, tuple[str, ...]] = field(
        default_factory=default_category_names,
    )
    clearing_account_name: str = "Internal Clearing"
    tenant_deduction_marker: str = "(Tenant)"
    rental_liability_keywords: tuple[str, ...] = (
        "rental liability",
        "rent liability",
        "rental suspense",
    )
    security_liability_keywords: tuple[str, ...] = (
        "security liability",
        "security deposit liability",
    )
    void_marker: str = "VOIDED"
    receivable_invoice_types: tuple[InvoiceType, ...] = (InvoiceType.INSTALLMENT,)
    pm_excluded_roles: tuple[CategoryRole, ...] = (
        CategoryRole.BROKER_FEE,
        CategoryRole.REBATE,
        CategoryRole.DISCOUNT,
        CategoryRole.OWNER_PAYOUT,
    )
    budget_under_threshold: Decimal = Decimal("0.9")

    def __post_init__(self) -> None:
        if self.epsilon < 0:
            raise ConfigurationError("epsilon", "cannot be negative")
        if self.balance_tolerance <= 0:
            raise ConfigurationError("balance_tolerance", "must be positive")
        if not Decimal("0") <= self.pm_percentage <= Decimal("100"):
            raise ConfigurationError("pm_percentage", "must be between 0 and 100")
        if not Decimal("0") < self.budget_under_threshold <= Decimal("1"):
            raise ConfigurationError(
                "budget_under_threshold", "must be in (0, 1]",
            )
        for role in self.category_names:
            if not isinstance(role, CategoryRole):
                raise ConfigurationError(
                    "category_names", f"unknown category role {role!r}",
                )
        for role in self.pm_excluded_roles:
            if not isinstance(role, CategoryRole):
                raise ConfigurationError(
                    "pm_excluded_roles", f"unknown category role {role!r}",
                )

    def names_for(self, role: CategoryRole) -> tuple[str, ...]:
        return tuple(self.category_names.get(role, ()))

    def is_zero(self, amount: Decimal) -> bool:
        """True if ``amount`` is within epsilon of zero."""
        return abs(amount) <= self.epsilon

    def zeroed(self, amount: Decimal) -> Decimal:
        """``amount``, or exactly zero when it is within epsilon."""
        return Decimal("0") if self.is_zero(amount) else amount
