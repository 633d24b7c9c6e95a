"""
Module: realty_kernel.models.reference
Responsibility: ORM persistence for reference records -- accounts,
    categories, contacts, projects, buildings, properties, units and budgets.
Architecture position: Kernel > Models.  May import from db/base.py only.

Enum-valued columns store the enum's string value; the snapshot selector
converts them back to the domain enums.
"""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from realty_kernel.db.base import Base


class AccountModel(Base):
    """A cash, bank, asset, liability or equity account."""

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # AccountType value
    account_type: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<Account {self.name} ({self.account_type})>"


class CategoryModel(Base):
    """Transaction category; parent_category_id forms a tree."""

    __tablename__ = "categories"

    __table_args__ = (
        Index("idx_category_parent", "parent_category_id"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # TransactionType value (Income or Expense)
    category_type: Mapped[str] = mapped_column(String(20), nullable=False)
    parent_category_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id"),
        nullable=True,
    )
    is_rental: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Optional CategoryRole value; wins over name matching
    role: Mapped[str | None] = mapped_column(String(40), nullable=True)

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class ContactModel(Base):
    __tablename__ = "contacts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_type: Mapped[str] = mapped_column(String(30), nullable=False)


class ProjectModel(Base):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class BuildingModel(Base):
    __tablename__ = "buildings"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class PropertyModel(Base):
    """A rental property, owned by a contact and located in a building."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("contacts.id"), nullable=True,
    )
    building_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("buildings.id"), nullable=True,
    )


class UnitModel(Base):
    """A saleable project unit."""

    __tablename__ = "units"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("projects.id"), nullable=True,
    )
    sale_price: Mapped[Decimal | None] = mapped_column(nullable=True)


class BudgetModel(Base):
    """Budgeted spend for one category, optionally per project."""

    __tablename__ = "budgets"

    __table_args__ = (
        Index("idx_budget_project_category", "project_id", "category_id"),
    )

    category_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("categories.id"), nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    project_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("projects.id"), nullable=True,
    )
