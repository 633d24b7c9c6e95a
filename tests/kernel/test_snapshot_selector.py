"""
SnapshotSelector: record store rows into an immutable LedgerSnapshot.
"""

from datetime import date
from decimal import Decimal

import pytest

from realty_kernel.domain.entities import (
    AccountType,
    AgreementStatus,
    CategoryRole,
    LoanSubtype,
    TransactionType,
)
from realty_kernel.exceptions import SnapshotError
from realty_kernel.models import (
    AccountModel,
    AgreementModel,
    AgreementUnitModel,
    BillCategoryItemModel,
    BillModel,
    CategoryModel,
    TransactionModel,
)
from realty_kernel.selectors.snapshot_selector import SnapshotSelector


@pytest.fixture
def seeded(session):
    session.add_all([
        AccountModel(id="acc-2", name="Petty Cash", account_type="Cash"),
        AccountModel(id="acc-1", name="Main Bank", account_type="Bank"),
        CategoryModel(id="cat-util", name="Utilities", category_type="Expense"),
        CategoryModel(
            id="cat-water", name="Water", category_type="Expense",
            parent_category_id="cat-util", role="pm_cost",
        ),
        TransactionModel(
            id="tx-1", transaction_type="Loan", loan_subtype="Receive Loan",
            amount=Decimal("5000"), transaction_date=date(2024, 1, 2), account_id="acc-1",
        ),
    ])
    b = BillModel(
        id="bill-1", amount=Decimal("100"), paid_amount=Decimal("0"),
        issue_date=date(2024, 1, 3), bill_number="B-1",
    )
    b.category_items = [
        BillCategoryItemModel(id="bci-2", position=1, category_id="cat-util", net_value=Decimal("40")),
        BillCategoryItemModel(id="bci-1", position=0, category_id="cat-water", net_value=Decimal("60")),
    ]
    a = AgreementModel(
        id="agr-1", project_id="proj-a", status="Cancelled",
        issue_date=date(2024, 1, 1), list_price=Decimal("90000"),
    )
    a.units = [AgreementUnitModel(id="au-1", unit_id="unit-101")]
    session.add_all([b, a])
    session.flush()
    session.expire_all()
    return session


class TestSnapshotSelector:
    def test_rows_become_domain_entities(self, seeded):
        snap = SnapshotSelector(seeded).load(snapshot_id="snap-1")

        assert snap.snapshot_id == "snap-1"
        assert [a.id for a in snap.accounts] == ["acc-1", "acc-2"]
        assert snap.accounts[0].type == AccountType.BANK

        water = next(c for c in snap.categories if c.id == "cat-water")
        assert water.type == TransactionType.EXPENSE
        assert water.parent_category_id == "cat-util"
        assert water.role == CategoryRole.PM_COST

        (tx,) = snap.transactions
        assert tx.subtype == LoanSubtype.RECEIVE
        assert tx.amount == Decimal("5000")
        assert tx.date == date(2024, 1, 2)

    def test_line_items_in_position_order(self, seeded):
        (b,) = SnapshotSelector(seeded).load().bills
        assert [i.category_id for i in b.expense_category_items] == ["cat-water", "cat-util"]
        assert b.expense_category_items[0].net_value == Decimal("60")

    def test_agreement_units(self, seeded):
        (a,) = SnapshotSelector(seeded).load().agreements
        assert a.unit_ids == ("unit-101",)
        assert a.status == AgreementStatus.CANCELLED

    def test_two_loads_are_equal(self, seeded):
        selector = SnapshotSelector(seeded)
        assert selector.load(snapshot_id="s") == selector.load(snapshot_id="s")

    def test_fresh_snapshot_id(self, seeded):
        selector = SnapshotSelector(seeded)
        assert selector.load().snapshot_id != selector.load().snapshot_id

    def test_unknown_enum_value(self, session):
        session.add(AccountModel(id="acc-x", name="Odd", account_type="Savings"))
        session.flush()

        with pytest.raises(SnapshotError) as exc_info:
            SnapshotSelector(session).load()
        assert exc_info.value.entity == "account"
        assert exc_info.value.record_id == "acc-x"

    def test_negative_amount(self, session):
        session.add(TransactionModel(
            id="tx-neg", transaction_type="Expense", amount=Decimal("-1"),
            transaction_date=date(2024, 1, 1),
        ))
        session.flush()

        with pytest.raises(SnapshotError, match="tx-neg"):
            SnapshotSelector(session).load()

    def test_load_is_logged(self, seeded, captured_logs):
        SnapshotSelector(seeded).load(snapshot_id="snap-9")
        (record,) = [r for r in captured_logs() if r["message"] == "snapshot_loaded"]
        assert record["snapshot_id"] == "snap-9"
        assert record["transaction_count"] == 1

    def test_selector_does_not_write(self, seeded):
        SnapshotSelector(seeded).load()
        assert not seeded.new
        assert not seeded.dirty
