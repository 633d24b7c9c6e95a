"""
Link Resolver -- fills a transaction's missing attribution from its links.

Responsibility:
    ``resolve(tx, index)`` returns a ResolvedTransaction whose project,
    category, contact, building and property are completed from the linked
    bill, then the linked invoice, then (project only) the linked agreement
    and contract.  A bill with expense category items turns the single
    category into proportional allocations.

Invariants enforced:
    - Explicit transaction fields are never overwritten.
    - First non-empty source wins.
    - Allocations always sum exactly to the transaction amount: each split
      part is quantized to 0.01 and the remainder goes to the last part.

Failure modes:
    - None.  A dangling link id yields no enrichment.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from realty_engines.reference_index import EntityIndex
from realty_kernel.domain.entities import Bill, ExpenseCategoryItem, Transaction

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Allocation:
    """Part of a transaction attributed to one category (None = uncategorized)."""

    category_id: str | None
    amount: Decimal


@dataclass(frozen=True)
class ResolvedTransaction:
    transaction: Transaction
    project_id: str | None
    category_id: str | None
    contact_id: str | None
    building_id: str | None
    property_id: str | None
    contract_id: str | None
    allocations: tuple[Allocation, ...]
    is_split: bool = False

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount


def _first(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def split_amount(amount: Decimal, weights: list[Decimal]) -> list[Decimal]:
    """
    Split ``amount`` proportionally to ``weights``.

    Every part but the last is quantized to 0.01; the last takes the
    remainder so the parts sum exactly to ``amount``.
    """
    if not weights:
        return []
    total = sum(weights, Decimal("0"))
    if total <= 0:
        raise ValueError("Total weight must be positive")

    parts: list[Decimal] = []
    allocated = Decimal("0")
    for weight in weights[:-1]:
        part = (amount * weight / total).quantize(_CENT)
        parts.append(part)
        allocated += part
    parts.append(amount - allocated)
    return parts


def _split_items(
    amount: Decimal,
    items: tuple[ExpenseCategoryItem, ...],
) -> tuple[Allocation, ...] | None:
    weighted = [item for item in items if item.net_value > 0]
    if not weighted:
        return None
    parts = split_amount(amount, [item.net_value for item in weighted])
    return tuple(
        Allocation(category_id=item.category_id, amount=part)
        for item, part in zip(weighted, parts)
    )


def _allocations(
    tx: Transaction,
    bill: Bill | None,
    category_id: str | None,
) -> tuple[tuple[Allocation, ...], bool]:
    if bill is not None and bill.expense_category_items:
        split = _split_items(tx.amount, bill.expense_category_items)
        if split is not None:
            return split, True
    return (Allocation(category_id=category_id, amount=tx.amount),), False


def resolve(tx: Transaction, index: EntityIndex) -> ResolvedTransaction:
    """Resolve one transaction against the reference index."""
    bill = index.bill(tx.bill_id)
    invoice = index.invoice(tx.invoice_id)
    agreement = index.agreement(
        _first(
            tx.agreement_id,
            bill.agreement_id if bill else None,
            invoice.agreement_id if invoice else None,
        )
    )
    contract_id = _first(tx.contract_id, bill.contract_id if bill else None)
    contract = index.contract(contract_id)

    project_id = _first(
        tx.project_id,
        bill.project_id if bill else None,
        invoice.project_id if invoice else None,
        agreement.project_id if agreement else None,
        contract.project_id if contract else None,
    )
    category_id = _first(
        tx.category_id,
        bill.category_id if bill else None,
        invoice.category_id if invoice else None,
    )
    allocations, is_split = _allocations(tx, bill, category_id)

    return ResolvedTransaction(
        transaction=tx,
        project_id=project_id,
        category_id=None if is_split else category_id,
        contact_id=_first(
            tx.contact_id,
            bill.contact_id if bill else None,
            invoice.contact_id if invoice else None,
        ),
        building_id=_first(
            tx.building_id,
            bill.building_id if bill else None,
            invoice.building_id if invoice else None,
        ),
        property_id=_first(
            tx.property_id,
            bill.property_id if bill else None,
            invoice.property_id if invoice else None,
        ),
        contract_id=contract_id,
        allocations=allocations,
        is_split=is_split,
    )
