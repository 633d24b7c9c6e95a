"""
Module: realty_kernel.selectors.snapshot_selector
Responsibility: Load the whole record store into an immutable LedgerSnapshot.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/base.py.

Invariants enforced:
    - Every collection is read in primary-key order, so two loads of the
      same store produce equal snapshots.
    - Enum-valued columns are converted to the domain enums here; the
      engine never sees raw strings.

Failure modes:
    - SnapshotError when a stored row cannot be turned into a domain entity
      (unknown enum value, negative amount).
"""

from decimal import Decimal
from typing import Any, Callable
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from realty_kernel.domain.entities import (
    Account,
    AccountType,
    Agreement,
    AgreementStatus,
    Bill,
    Budget,
    Building,
    Category,
    CategoryRole,
    Contact,
    ContactType,
    Contract,
    ContractStatus,
    DocumentStatus,
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
from realty_kernel.exceptions import SnapshotError
from realty_kernel.logging_config import get_logger
from realty_kernel.models import (
    AccountModel,
    AgreementModel,
    BillModel,
    BudgetModel,
    BuildingModel,
    CategoryModel,
    ContactModel,
    ContractModel,
    InvoiceModel,
    ProjectModel,
    PropertyModel,
    TransactionModel,
    UnitModel,
)
from realty_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.snapshot")


def _items(rows: list[Any]) -> tuple[ExpenseCategoryItem, ...]:
    return tuple(
        ExpenseCategoryItem(
            category_id=r.category_id,
            net_value=Decimal(r.net_value),
            quantity=r.quantity,
            unit=r.unit,
        )
        for r in rows
    )


def _to_account(row: AccountModel) -> Account:
    return Account(id=row.id, name=row.name, type=AccountType(row.account_type))


def _to_category(row: CategoryModel) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        type=TransactionType(row.category_type),
        parent_category_id=row.parent_category_id,
        is_rental=bool(row.is_rental),
        role=CategoryRole(row.role) if row.role else None,
    )


def _to_contact(row: ContactModel) -> Contact:
    return Contact(id=row.id, name=row.name, type=ContactType(row.contact_type))


def _to_property(row: PropertyModel) -> Property:
    return Property(
        id=row.id, name=row.name, owner_id=row.owner_id, building_id=row.building_id,
    )


def _to_unit(row: UnitModel) -> Unit:
    return Unit(
        id=row.id, name=row.name, project_id=row.project_id, sale_price=row.sale_price,
    )


def _to_budget(row: BudgetModel) -> Budget:
    return Budget(
        id=row.id, category_id=row.category_id, amount=row.amount,
        project_id=row.project_id,
    )


def _to_invoice(row: InvoiceModel) -> Invoice:
    return Invoice(
        id=row.id,
        amount=row.amount,
        paid_amount=row.paid_amount,
        issue_date=row.issue_date,
        invoice_type=InvoiceType(row.invoice_type),
        status=DocumentStatus(row.status),
        invoice_number=row.invoice_number,
        contact_id=row.contact_id,
        project_id=row.project_id,
        category_id=row.category_id,
        agreement_id=row.agreement_id,
        property_id=row.property_id,
        building_id=row.building_id,
        unit_id=row.unit_id,
        description=row.description,
    )


def _to_bill(row: BillModel) -> Bill:
    return Bill(
        id=row.id,
        amount=row.amount,
        paid_amount=row.paid_amount,
        issue_date=row.issue_date,
        status=DocumentStatus(row.status),
        bill_number=row.bill_number,
        contact_id=row.contact_id,
        project_id=row.project_id,
        category_id=row.category_id,
        agreement_id=row.agreement_id,
        contract_id=row.contract_id,
        property_id=row.property_id,
        building_id=row.building_id,
        description=row.description,
        expense_category_items=_items(row.category_items),
    )


def _to_agreement(row: AgreementModel) -> Agreement:
    return Agreement(
        id=row.id,
        project_id=row.project_id,
        list_price=row.list_price,
        issue_date=row.issue_date,
        status=AgreementStatus(row.status),
        agreement_number=row.agreement_number,
        client_id=row.client_id,
        unit_ids=tuple(u.unit_id for u in row.units),
        customer_discount=row.customer_discount,
        floor_discount=row.floor_discount,
        lump_sum_discount=row.lump_sum_discount,
        misc_discount=row.misc_discount,
        rebate_amount=row.rebate_amount,
    )


def _to_contract(row: ContractModel) -> Contract:
    return Contract(
        id=row.id,
        name=row.name,
        total_amount=row.total_amount,
        project_id=row.project_id,
        vendor_id=row.vendor_id,
        status=ContractStatus(row.status),
        contract_number=row.contract_number,
        expense_category_items=_items(row.category_items),
    )


def _to_transaction(row: TransactionModel) -> Transaction:
    return Transaction(
        id=row.id,
        type=TransactionType(row.transaction_type),
        amount=row.amount,
        date=row.transaction_date,
        account_id=row.account_id,
        from_account_id=row.from_account_id,
        to_account_id=row.to_account_id,
        category_id=row.category_id,
        contact_id=row.contact_id,
        project_id=row.project_id,
        property_id=row.property_id,
        building_id=row.building_id,
        unit_id=row.unit_id,
        invoice_id=row.invoice_id,
        bill_id=row.bill_id,
        agreement_id=row.agreement_id,
        contract_id=row.contract_id,
        payslip_id=row.payslip_id,
        subtype=LoanSubtype(row.loan_subtype) if row.loan_subtype else None,
        description=row.description,
    )


class SnapshotSelector(BaseSelector):
    """
    Read the record store into a LedgerSnapshot.

    Usage:
        snapshot = SnapshotSelector(session).load()
    """

    def _convert(
        self,
        entity: str,
        model: type,
        convert: Callable[[Any], Any],
        *options: Any,
    ) -> tuple:
        stmt = select(model).order_by(model.id)
        if options:
            stmt = stmt.options(*options)
        out = []
        for row in self.session.scalars(stmt):
            try:
                out.append(convert(row))
            except ValueError as exc:
                raise SnapshotError(entity, row.id, str(exc)) from exc
        return tuple(out)

    def load(self, snapshot_id: str | None = None) -> LedgerSnapshot:
        """Load every collection; ``snapshot_id`` defaults to a fresh uuid4."""
        snapshot = LedgerSnapshot(
            accounts=self._convert("account", AccountModel, _to_account),
            categories=self._convert("category", CategoryModel, _to_category),
            contacts=self._convert("contact", ContactModel, _to_contact),
            projects=self._convert(
                "project", ProjectModel, lambda r: Project(id=r.id, name=r.name),
            ),
            buildings=self._convert(
                "building", BuildingModel, lambda r: Building(id=r.id, name=r.name),
            ),
            properties=self._convert("property", PropertyModel, _to_property),
            units=self._convert("unit", UnitModel, _to_unit),
            invoices=self._convert("invoice", InvoiceModel, _to_invoice),
            bills=self._convert(
                "bill", BillModel, _to_bill, selectinload(BillModel.category_items),
            ),
            agreements=self._convert(
                "agreement", AgreementModel, _to_agreement,
                selectinload(AgreementModel.units),
            ),
            contracts=self._convert(
                "contract", ContractModel, _to_contract,
                selectinload(ContractModel.category_items),
            ),
            budgets=self._convert("budget", BudgetModel, _to_budget),
            transactions=self._convert("transaction", TransactionModel, _to_transaction),
            snapshot_id=snapshot_id or str(uuid4()),
        )
        logger.info(
            "snapshot_loaded",
            extra={
                "snapshot_id": snapshot.snapshot_id,
                "record_count": snapshot.record_count,
                "transaction_count": len(snapshot.transactions),
            },
        )
        return snapshot
