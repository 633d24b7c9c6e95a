"""
Synthetic snapshot data for pure engine and builder tests (no DB required).

Every factory takes keyword overrides and fills the rest with defaults so a
test only spells out the fields it is about.
"""

from __future__ import annotations

import itertools
from datetime import date
from decimal import Decimal

from realty_kernel.domain.entities import (
    Account,
    AccountType,
    Agreement,
    Bill,
    Budget,
    Category,
    CategoryRole,
    Contact,
    ContactType,
    Contract,
    ExpenseCategoryItem,
    Invoice,
    InvoiceType,
    LoanSubtype,
    Project,
    Property,
    Transaction,
    TransactionType,
    Unit,
)
from realty_kernel.domain.snapshot import LedgerSnapshot
from realty_modules.reporting.models import ReportMetadata, ReportType

_ids = itertools.count(1)

DEFAULT_DATE = date(2024, 3, 15)

BANK = Account(id="acc-bank", name="Main Bank", type=AccountType.BANK)
CASH = Account(id="acc-cash", name="Petty Cash", type=AccountType.CASH)

PROJECT_A = Project(id="proj-a", name="Alpha Towers")
PROJECT_B = Project(id="proj-b", name="Beta Heights")


def next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def D(value: str | int) -> Decimal:
    return Decimal(str(value))


def category(
    name: str,
    type: TransactionType = TransactionType.EXPENSE,
    id: str | None = None,
    parent: str | None = None,
    is_rental: bool = False,
    role: CategoryRole | None = None,
) -> Category:
    return Category(
        id=id or f"cat-{name.lower().replace(' ', '-')}",
        name=name,
        type=type,
        parent_category_id=parent,
        is_rental=is_rental,
        role=role,
    )


def contact(name: str, type: ContactType = ContactType.VENDOR, id: str | None = None) -> Contact:
    return Contact(id=id or f"ct-{name.lower().replace(' ', '-')}", name=name, type=type)


def income(amount: str | int, **kwargs) -> Transaction:
    kwargs.setdefault("id", next_id("tx"))
    kwargs.setdefault("date", DEFAULT_DATE)
    kwargs.setdefault("account_id", BANK.id)
    return Transaction(type=TransactionType.INCOME, amount=D(amount), **kwargs)


def expense(amount: str | int, **kwargs) -> Transaction:
    kwargs.setdefault("id", next_id("tx"))
    kwargs.setdefault("date", DEFAULT_DATE)
    kwargs.setdefault("account_id", BANK.id)
    return Transaction(type=TransactionType.EXPENSE, amount=D(amount), **kwargs)


def transfer(amount: str | int, from_account_id: str, to_account_id: str, **kwargs) -> Transaction:
    kwargs.setdefault("id", next_id("tx"))
    kwargs.setdefault("date", DEFAULT_DATE)
    return Transaction(
        type=TransactionType.TRANSFER,
        amount=D(amount),
        from_account_id=from_account_id,
        to_account_id=to_account_id,
        **kwargs,
    )


def loan(amount: str | int, subtype: LoanSubtype | None, **kwargs) -> Transaction:
    kwargs.setdefault("id", next_id("tx"))
    kwargs.setdefault("date", DEFAULT_DATE)
    kwargs.setdefault("account_id", BANK.id)
    return Transaction(type=TransactionType.LOAN, amount=D(amount), subtype=subtype, **kwargs)


def invoice(amount: str | int, paid: str | int = 0, **kwargs) -> Invoice:
    kwargs.setdefault("id", next_id("inv"))
    kwargs.setdefault("issue_date", DEFAULT_DATE)
    kwargs.setdefault("invoice_type", InvoiceType.INSTALLMENT)
    return Invoice(amount=D(amount), paid_amount=D(paid), **kwargs)


def bill(amount: str | int, paid: str | int = 0, items: tuple = (), **kwargs) -> Bill:
    kwargs.setdefault("id", next_id("bill"))
    kwargs.setdefault("issue_date", DEFAULT_DATE)
    return Bill(
        amount=D(amount),
        paid_amount=D(paid),
        expense_category_items=tuple(
            ExpenseCategoryItem(category_id=cat, net_value=D(net)) for cat, net in items
        ),
        **kwargs,
    )


def agreement(list_price: str | int, unit_ids: tuple[str, ...] = (), **kwargs) -> Agreement:
    kwargs.setdefault("id", next_id("agr"))
    kwargs.setdefault("issue_date", DEFAULT_DATE)
    kwargs.setdefault("project_id", PROJECT_A.id)
    return Agreement(list_price=D(list_price), unit_ids=unit_ids, **kwargs)


def contract(name: str, total: str | int, **kwargs) -> Contract:
    kwargs.setdefault("id", next_id("con"))
    return Contract(name=name, total_amount=D(total), **kwargs)


def unit(name: str, sale_price: str | int | None, project_id: str = PROJECT_A.id) -> Unit:
    return Unit(
        id=f"unit-{name.lower()}",
        name=name,
        project_id=project_id,
        sale_price=D(sale_price) if sale_price is not None else None,
    )


def budget(category_id: str, amount: str | int, project_id: str | None = None) -> Budget:
    return Budget(
        id=next_id("bud"), category_id=category_id, amount=D(amount), project_id=project_id,
    )


def property_(name: str, owner_id: str | None, id: str | None = None) -> Property:
    return Property(id=id or f"prop-{name.lower().replace(' ', '-')}", name=name, owner_id=owner_id)


def snapshot(**collections) -> LedgerSnapshot:
    """LedgerSnapshot with the bank/cash accounts and both projects by default."""
    collections.setdefault("accounts", (BANK, CASH))
    collections.setdefault("projects", (PROJECT_A, PROJECT_B))
    collections.setdefault("snapshot_id", "snap-test")
    return LedgerSnapshot(**{k: tuple(v) if isinstance(v, list) else v for k, v in collections.items()})


def metadata(report_type: ReportType = ReportType.BALANCE_SHEET, **kwargs) -> ReportMetadata:
    return ReportMetadata(
        report_type=report_type,
        entity_name="Test Realty",
        currency="USD",
        generated_at="2024-01-01T12:00:00+00:00",
        **kwargs,
    )
