"""
Snapshot entities -- read-only records handed to the derivation engine.

Responsibility:
    Frozen dataclass value objects for every source record the engine reads:
    accounts, categories, contacts, projects, properties, units, invoices,
    bills, agreements, contracts, budgets and transactions.  Entry forms and
    the record store own these records; the engine only reads them.

Invariants enforced:
    - All entities are ``frozen=True``; the engine never mutates them.
    - All monetary fields are ``Decimal``.
    - Transaction and document amounts are non-negative (construction
      raises ``ValueError`` otherwise).  This is the creation boundary; the
      engine itself never validates entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


# =========================================================================
# Enums
# =========================================================================


class TransactionType(str, Enum):
    """Single-sided record types."""

    INCOME = "Income"
    EXPENSE = "Expense"
    TRANSFER = "Transfer"
    LOAN = "Loan"


class LoanSubtype(str, Enum):
    """Direction of a loan transaction."""

    RECEIVE = "Receive Loan"
    REPAY = "Repay Loan"
    GIVE = "Give Loan"
    COLLECT = "Collect Loan"


class AccountType(str, Enum):
    """Account types; Bank, Cash and Asset all sit on the asset side."""

    BANK = "Bank"
    CASH = "Cash"
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"

    @property
    def is_asset(self) -> bool:
        return self in (AccountType.BANK, AccountType.CASH, AccountType.ASSET)


class ContactType(str, Enum):
    OWNER = "Owner"
    TENANT = "Tenant"
    STAFF = "Staff"
    BROKER = "Broker"
    DEALER = "Dealer"
    FRIEND_FAMILY = "Friend & Family"
    CLIENT = "Client"
    LEAD = "Lead"
    VENDOR = "Vendor"


class InvoiceType(str, Enum):
    RENTAL = "Rental"
    SECURITY_DEPOSIT = "Security Deposit"
    SERVICE_CHARGE = "Service Charge"
    INSTALLMENT = "Installment"


class DocumentStatus(str, Enum):
    """Payment status shared by invoices and bills."""

    UNPAID = "Unpaid"
    PAID = "Paid"
    PARTIALLY_PAID = "Partially Paid"
    OVERDUE = "Overdue"
    DRAFT = "Draft"


class AgreementStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class ContractStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    TERMINATED = "Terminated"


class CategoryRole(str, Enum):
    """
    Accounting role of a category.

    A category either carries an explicit role or gets one from the
    configured name table at the start of each derivation run.
    """

    OWNER_EQUITY = "owner_equity"
    OWNER_WITHDRAWAL = "owner_withdrawal"
    SECURITY_DEPOSIT = "security_deposit"
    RENTAL_INCOME = "rental_income"
    SECURITY_REFUND = "security_refund"
    OWNER_PAYOUT = "owner_payout"
    TENANT_DEDUCTION = "tenant_deduction"
    PM_COST = "pm_cost"
    BROKER_FEE = "broker_fee"
    REBATE = "rebate"
    DISCOUNT = "discount"


# =========================================================================
# Reference entities
# =========================================================================


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    type: AccountType


@dataclass(frozen=True)
class Category:
    """A transaction category; ``parent_category_id`` forms a tree."""

    id: str
    name: str
    type: TransactionType
    parent_category_id: str | None = None
    is_rental: bool = False
    role: CategoryRole | None = None


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    type: ContactType


@dataclass(frozen=True)
class Project:
    id: str
    name: str


@dataclass(frozen=True)
class Building:
    id: str
    name: str


@dataclass(frozen=True)
class Property:
    id: str
    name: str
    owner_id: str | None = None
    building_id: str | None = None


@dataclass(frozen=True)
class Unit:
    id: str
    name: str
    project_id: str | None = None
    sale_price: Decimal | None = None


@dataclass(frozen=True)
class Budget:
    id: str
    category_id: str
    amount: Decimal
    project_id: str | None = None


# =========================================================================
# Accrual documents
# =========================================================================


@dataclass(frozen=True)
class ExpenseCategoryItem:
    """One line of a multi-category bill or contract."""

    category_id: str | None
    net_value: Decimal
    quantity: Decimal | None = None
    unit: str | None = None


def _require_non_negative(kind: str, record_id: str, **amounts: Decimal) -> None:
    for name, value in amounts.items():
        if value < Decimal("0"):
            raise ValueError(f"{kind} {record_id}: {name} cannot be negative")


@dataclass(frozen=True)
class Invoice:
    """
    Receivable document.

    ``paid_amount`` may transiently exceed ``amount``; the engine clamps the
    derived due amount and reports the anomaly.
    """

    id: str
    amount: Decimal
    paid_amount: Decimal
    issue_date: date
    invoice_type: InvoiceType
    status: DocumentStatus = DocumentStatus.UNPAID
    invoice_number: str = ""
    contact_id: str | None = None
    project_id: str | None = None
    category_id: str | None = None
    agreement_id: str | None = None
    property_id: str | None = None
    building_id: str | None = None
    unit_id: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        _require_non_negative(
            "Invoice", self.id, amount=self.amount, paid_amount=self.paid_amount,
        )


@dataclass(frozen=True)
class Bill:
    """Payable document, optionally split over several expense categories."""

    id: str
    amount: Decimal
    paid_amount: Decimal
    issue_date: date
    status: DocumentStatus = DocumentStatus.UNPAID
    bill_number: str = ""
    contact_id: str | None = None
    project_id: str | None = None
    category_id: str | None = None
    agreement_id: str | None = None
    contract_id: str | None = None
    property_id: str | None = None
    building_id: str | None = None
    description: str = ""
    expense_category_items: tuple[ExpenseCategoryItem, ...] = ()

    def __post_init__(self) -> None:
        _require_non_negative(
            "Bill", self.id, amount=self.amount, paid_amount=self.paid_amount,
        )


@dataclass(frozen=True)
class Agreement:
    """Sales agreement for one or more project units."""

    id: str
    project_id: str | None
    list_price: Decimal
    issue_date: date
    status: AgreementStatus = AgreementStatus.ACTIVE
    agreement_number: str = ""
    client_id: str | None = None
    unit_ids: tuple[str, ...] = ()
    customer_discount: Decimal = Decimal("0")
    floor_discount: Decimal = Decimal("0")
    lump_sum_discount: Decimal = Decimal("0")
    misc_discount: Decimal = Decimal("0")
    rebate_amount: Decimal = Decimal("0")

    @property
    def total_discount(self) -> Decimal:
        return (
            self.customer_discount
            + self.floor_discount
            + self.lump_sum_discount
            + self.misc_discount
        )

    @property
    def selling_price(self) -> Decimal:
        return self.list_price - self.total_discount


@dataclass(frozen=True)
class Contract:
    """Vendor contract against a project."""

    id: str
    name: str
    total_amount: Decimal
    project_id: str | None = None
    vendor_id: str | None = None
    status: ContractStatus = ContractStatus.ACTIVE
    contract_number: str = ""
    expense_category_items: tuple[ExpenseCategoryItem, ...] = ()


# =========================================================================
# Transactions
# =========================================================================


@dataclass(frozen=True)
class Transaction:
    """
    Single-sided ledger record.

    Income/Expense/Loan move ``account_id``; Transfer moves
    ``from_account_id`` -> ``to_account_id``.  Project, category, building
    and property may be missing and resolved through the link ids.
    """

    id: str
    type: TransactionType
    amount: Decimal
    date: date
    account_id: str | None = None
    from_account_id: str | None = None
    to_account_id: str | None = None
    category_id: str | None = None
    contact_id: str | None = None
    project_id: str | None = None
    property_id: str | None = None
    building_id: str | None = None
    unit_id: str | None = None
    invoice_id: str | None = None
    bill_id: str | None = None
    agreement_id: str | None = None
    contract_id: str | None = None
    payslip_id: str | None = None
    subtype: LoanSubtype | None = None
    description: str = ""

    def __post_init__(self) -> None:
        _require_non_negative("Transaction", self.id, amount=self.amount)

    @property
    def touched_accounts(self) -> tuple[str, ...]:
        """Accounts whose ledger balance this transaction moves."""
        if self.type == TransactionType.TRANSFER:
            return tuple(
                a for a in (self.from_account_id, self.to_account_id) if a
            )
        return (self.account_id,) if self.account_id else ()
