"""
Entity Reference Index -- id-keyed lookup tables over a LedgerSnapshot.

Built once per derivation run and shared read-only by the resolver, the
classifier and the statement builders.  Unknown ids return ``None``; a
dangling reference is never an error.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TypeVar

from realty_kernel.domain.entities import (
    Account,
    Agreement,
    Bill,
    Budget,
    Building,
    Category,
    Contact,
    Contract,
    Invoice,
    Project,
    Property,
    Unit,
)
from realty_kernel.domain.snapshot import LedgerSnapshot

T = TypeVar("T")


def _by_id(items: tuple[T, ...]) -> dict[str, T]:
    # Later duplicates win, matching a last-write record store.
    return {item.id: item for item in items}  # type: ignore[attr-defined]


@dataclass(frozen=True)
class EntityIndex:
    """Lookup tables for every snapshot collection."""

    accounts: dict[str, Account]
    categories: dict[str, Category]
    contacts: dict[str, Contact]
    projects: dict[str, Project]
    buildings: dict[str, Building]
    properties: dict[str, Property]
    units: dict[str, Unit]
    invoices: dict[str, Invoice]
    bills: dict[str, Bill]
    agreements: dict[str, Agreement]
    contracts: dict[str, Contract]
    budgets: tuple[Budget, ...]
    children: dict[str | None, tuple[Category, ...]]

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> EntityIndex:
        children: dict[str | None, list[Category]] = defaultdict(list)
        for category in snapshot.categories:
            children[category.parent_category_id].append(category)
        return cls(
            accounts=_by_id(snapshot.accounts),
            categories=_by_id(snapshot.categories),
            contacts=_by_id(snapshot.contacts),
            projects=_by_id(snapshot.projects),
            buildings=_by_id(snapshot.buildings),
            properties=_by_id(snapshot.properties),
            units=_by_id(snapshot.units),
            invoices=_by_id(snapshot.invoices),
            bills=_by_id(snapshot.bills),
            agreements=_by_id(snapshot.agreements),
            contracts=_by_id(snapshot.contracts),
            budgets=snapshot.budgets,
            children={k: tuple(v) for k, v in children.items()},
        )

    def account(self, account_id: str | None) -> Account | None:
        return self.accounts.get(account_id) if account_id else None

    def category(self, category_id: str | None) -> Category | None:
        return self.categories.get(category_id) if category_id else None

    def contact(self, contact_id: str | None) -> Contact | None:
        return self.contacts.get(contact_id) if contact_id else None

    def property(self, property_id: str | None) -> Property | None:
        return self.properties.get(property_id) if property_id else None

    def bill(self, bill_id: str | None) -> Bill | None:
        return self.bills.get(bill_id) if bill_id else None

    def invoice(self, invoice_id: str | None) -> Invoice | None:
        return self.invoices.get(invoice_id) if invoice_id else None

    def agreement(self, agreement_id: str | None) -> Agreement | None:
        return self.agreements.get(agreement_id) if agreement_id else None

    def contract(self, contract_id: str | None) -> Contract | None:
        return self.contracts.get(contract_id) if contract_id else None

    def contact_name(self, contact_id: str | None) -> str:
        contact = self.contact(contact_id)
        return contact.name if contact else ""

    def category_name(self, category_id: str | None) -> str:
        category = self.category(category_id)
        return category.name if category else ""

    def properties_of_owner(self, owner_id: str) -> frozenset[str]:
        return frozenset(
            p.id for p in self.properties.values() if p.owner_id == owner_id
        )
