"""
Module: realty_kernel.models.ledger
Responsibility: ORM persistence for single-sided transactions.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount is stored non-negative; direction comes from transaction_type,
      loan_subtype and the from/to account pair.
    - Nothing here stores a balance.  Every balance is derived at read time.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from realty_kernel.db.base import Base


class TransactionModel(Base):
    """A single ledger record (Income, Expense, Transfer or Loan)."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_date", "transaction_date"),
        Index("idx_transaction_project", "project_id"),
        Index("idx_transaction_bill", "bill_id"),
        Index("idx_transaction_invoice", "invoice_id"),
    )

    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    loan_subtype: Mapped[str | None] = mapped_column(String(20), nullable=True)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    transaction_date: Mapped[date] = mapped_column(nullable=False)
    account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    from_account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    to_account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    category_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contact_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    property_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    building_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    unit_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    invoice_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    bill_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    agreement_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    contract_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    payslip_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Transaction {self.id}: {self.transaction_type} {self.amount}>"
