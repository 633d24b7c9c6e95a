"""
Module: realty_kernel.models.documents
Responsibility: ORM persistence for accrual documents -- invoices, bills,
    sales agreements and vendor contracts, plus their category line items.
Architecture position: Kernel > Models.  May import from db/base.py only.

Failure modes:
    - IntegrityError if a line item references a missing parent document.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from realty_kernel.db.base import Base


class InvoiceModel(Base):
    """Receivable document (rental, security deposit, installment...)."""

    __tablename__ = "invoices"

    __table_args__ = (
        Index("idx_invoice_project", "project_id"),
        Index("idx_invoice_agreement", "agreement_id"),
    )

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    invoice_type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Unpaid")
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    issue_date: Mapped[date] = mapped_column(nullable=False)
    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    agreement_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    property_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    building_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    unit_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")


class BillModel(Base):
    """Payable document; category_items split it over several categories."""

    __tablename__ = "bills"

    __table_args__ = (
        Index("idx_bill_project", "project_id"),
        Index("idx_bill_contact", "contact_id"),
    )

    bill_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Unpaid")
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    issue_date: Mapped[date] = mapped_column(nullable=False)
    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    agreement_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contract_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    property_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    building_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    category_items: Mapped[list["BillCategoryItemModel"]] = relationship(
        order_by="BillCategoryItemModel.position",
        cascade="all, delete-orphan",
    )


class BillCategoryItemModel(Base):
    __tablename__ = "bill_category_items"

    bill_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("bills.id"), nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    net_value: Mapped[Decimal] = mapped_column(nullable=False)
    quantity: Mapped[Decimal | None] = mapped_column(nullable=True)
    unit: Mapped[str | None] = mapped_column(String(30), nullable=True)


class AgreementModel(Base):
    """Sales agreement for one or more project units."""

    __tablename__ = "agreements"

    agreement_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active")
    issue_date: Mapped[date] = mapped_column(nullable=False)
    list_price: Mapped[Decimal] = mapped_column(nullable=False)
    customer_discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    floor_discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    lump_sum_discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    misc_discount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    rebate_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    units: Mapped[list["AgreementUnitModel"]] = relationship(
        order_by="AgreementUnitModel.position",
        cascade="all, delete-orphan",
    )


class AgreementUnitModel(Base):
    __tablename__ = "agreement_units"

    agreement_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("agreements.id"), nullable=False,
    )
    unit_id: Mapped[str] = mapped_column(String(64), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ContractModel(Base):
    """Vendor contract against a project."""

    __tablename__ = "contracts"

    contract_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    vendor_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active")
    total_amount: Mapped[Decimal] = mapped_column(nullable=False)

    category_items: Mapped[list["ContractCategoryItemModel"]] = relationship(
        order_by="ContractCategoryItemModel.position",
        cascade="all, delete-orphan",
    )


class ContractCategoryItemModel(Base):
    __tablename__ = "contract_category_items"

    contract_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("contracts.id"), nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    net_value: Mapped[Decimal] = mapped_column(nullable=False)
    quantity: Mapped[Decimal | None] = mapped_column(nullable=True)
    unit: Mapped[str | None] = mapped_column(String(30), nullable=True)
