"""ORM models for the record store."""

from realty_kernel.models.documents import (
    AgreementModel,
    AgreementUnitModel,
    BillCategoryItemModel,
    BillModel,
    ContractCategoryItemModel,
    ContractModel,
    InvoiceModel,
)
from realty_kernel.models.ledger import TransactionModel
from realty_kernel.models.reference import (
    AccountModel,
    BudgetModel,
    BuildingModel,
    CategoryModel,
    ContactModel,
    ProjectModel,
    PropertyModel,
    UnitModel,
)

__all__ = [
    "AccountModel",
    "AgreementModel",
    "AgreementUnitModel",
    "BillCategoryItemModel",
    "BillModel",
    "BudgetModel",
    "BuildingModel",
    "CategoryModel",
    "ContactModel",
    "ContractCategoryItemModel",
    "ContractModel",
    "InvoiceModel",
    "ProjectModel",
    "PropertyModel",
    "TransactionModel",
    "UnitModel",
]
