"""
ReportingService end to end: ORM rows in SQLite, statements out.
"""

from datetime import date
from decimal import Decimal

import pytest

from realty_config.schema import EngineConfig
from realty_engines.classifier import Pool
from realty_kernel.domain.entities import TransactionType
from realty_kernel.exceptions import ScopeError
from realty_kernel.models import (
    AccountModel,
    BillModel,
    BudgetModel,
    CategoryModel,
    ContactModel,
    ContractModel,
    ProjectModel,
    TransactionModel,
)
from realty_modules.reporting import ReportingService
from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.models import BudgetStatus, ReportType


def _tx(id, tx_type, amount, day, **kwargs):
    return TransactionModel(
        id=id,
        transaction_type=tx_type,
        amount=Decimal(amount),
        transaction_date=day,
        **kwargs,
    )


@pytest.fixture
def store(session):
    session.add_all([
        AccountModel(id="acc-bank", name="Main Bank", account_type="Bank"),
        ProjectModel(id="proj-a", name="Alpha Towers"),
        ProjectModel(id="proj-b", name="Beta Heights"),
        CategoryModel(id="cat-sales", name="Unit Sales", category_type="Income"),
        CategoryModel(id="cat-rep", name="Repairs", category_type="Expense"),
        ContactModel(id="ct-acme", name="Acme Builders", contact_type="Vendor"),
        ContractModel(
            id="con-1", name="Civil works", project_id="proj-a", vendor_id="ct-acme",
            total_amount=Decimal("1000"), contract_number="C-1",
        ),
        BillModel(
            id="bill-1", amount=Decimal("400"), paid_amount=Decimal("300"),
            issue_date=date(2024, 2, 5), contact_id="ct-acme", project_id="proj-a",
            contract_id="con-1", bill_number="B-1",
        ),
        BudgetModel(id="bud-1", category_id="cat-rep", amount=Decimal("500"), project_id="proj-a"),
        _tx("tx-1", "Income", "1000", date(2024, 2, 1),
            account_id="acc-bank", category_id="cat-sales", project_id="proj-a"),
        _tx("tx-2", "Expense", "300", date(2024, 2, 10),
            account_id="acc-bank", category_id="cat-rep", bill_id="bill-1"),
        _tx("tx-3", "Income", "200", date(2024, 3, 1),
            account_id="acc-bank", category_id="cat-sales", project_id="proj-b"),
    ])
    session.flush()
    return session


@pytest.fixture
def service(store, deterministic_clock):
    config = ReportingConfig(
        engine=EngineConfig(pm_percentage=Decimal("10")),
        entity_name="Harbor Estates",
    )
    return ReportingService(store, clock=deterministic_clock, config=config)


class TestBalanceSheet:
    def test_balanced_sheet_with_metadata(self, service):
        sheet = service.balance_sheet(as_of_date=date(2024, 12, 31))

        assert sheet.metadata.report_type == ReportType.BALANCE_SHEET
        assert sheet.metadata.generated_at == "2024-01-01T12:00:00+00:00"
        assert sheet.metadata.as_of_date == date(2024, 12, 31)
        assert sheet.metadata.entity_name == "Harbor Estates"
        assert sheet.assets.total == Decimal("900")
        assert sheet.liabilities.accounts_payable == Decimal("100")
        assert sheet.equity.retained_earnings == Decimal("800")
        assert sheet.is_balanced

    def test_each_run_reads_the_clock(self, service, deterministic_clock):
        first = service.balance_sheet(as_of_date=date(2024, 12, 31))
        deterministic_clock.advance(90)
        second = service.balance_sheet(as_of_date=date(2024, 12, 31))

        assert first.metadata.generated_at == "2024-01-01T12:00:00+00:00"
        assert second.metadata.generated_at == "2024-01-01T12:01:30+00:00"

    def test_as_of_excludes_later_activity(self, service):
        sheet = service.balance_sheet(as_of_date=date(2024, 2, 1))
        assert sheet.assets.total == Decimal("1000")
        assert sheet.liabilities.accounts_payable == Decimal("0")

    def test_project_scope(self, service):
        sheet = service.balance_sheet(as_of_date=date(2024, 12, 31), project_id="proj-b")
        assert sheet.assets.total == Decimal("200")
        assert sheet.metadata.project_id == "proj-b"

    def test_report_generated_log_carries_context(self, service, captured_logs):
        service.balance_sheet(as_of_date=date(2024, 12, 31))

        (record,) = [r for r in captured_logs() if r["message"] == "report_generated"]
        assert record["statement"] == "balance_sheet"
        assert record["project_id"] == "all"
        assert record["run_id"]
        assert record["snapshot_id"]
        assert record["as_of_date"] == "2024-12-31"

    def test_discrepancy_is_logged_not_raised(self, store, deterministic_clock, captured_logs):
        store.add_all([
            AccountModel(id="acc-clear", name="Internal Clearing", account_type="Asset"),
            _tx("tx-9", "Expense", "50", date(2024, 3, 5),
                account_id="acc-clear", category_id="cat-rep"),
        ])
        store.flush()

        sheet = ReportingService(store, clock=deterministic_clock).balance_sheet(
            as_of_date=date(2024, 12, 31),
        )

        assert not sheet.is_balanced
        assert sheet.discrepancy == Decimal("-50")
        warnings = [r for r in captured_logs() if r["message"] == "balance_sheet_discrepancy"]
        assert len(warnings) == 1
        assert warnings[0]["level"] == "WARNING"
        assert Decimal(warnings[0]["discrepancy"]) == Decimal("-50")


class TestPeriodStatements:
    def test_profit_and_loss(self, service):
        report = service.profit_and_loss(date(2024, 1, 1), date(2024, 12, 31))
        assert report.total_income == Decimal("1200")
        assert report.total_expense == Decimal("300")
        assert report.metadata.period_start == date(2024, 1, 1)

    def test_category_report(self, service):
        report = service.category_report(TransactionType.INCOME, project_id="proj-a")
        assert [(r.category_id, r.amount) for r in report.rows] == [
            ("cat-sales", Decimal("1000")),
        ]

    def test_unscoped_statements_drop_projectless_records(self, store, service):
        """Records with no resolvable project stay out even for all projects."""
        store.add(_tx("tx-9", "Expense", "75", date(2024, 2, 15),
                      account_id="acc-bank", category_id="cat-rep"))
        store.flush()

        pnl = service.profit_and_loss(date(2024, 1, 1), date(2024, 12, 31))
        expenses = service.category_report(TransactionType.EXPENSE)

        assert pnl.total_expense == Decimal("300")
        assert [(r.category_id, r.amount) for r in expenses.rows] == [
            ("cat-rep", Decimal("300")),
        ]

    def test_invalid_range(self, service):
        with pytest.raises(ScopeError):
            service.profit_and_loss(date(2024, 2, 1), date(2024, 1, 1))

    def test_budget_report(self, service):
        report = service.budget_report(project_id="proj-a")
        (row,) = report.rows
        assert row.total_spent == Decimal("300")
        assert row.status == BudgetStatus.UNDER

    def test_pm_cost_report(self, service):
        report = service.pm_cost_report()
        (row,) = report.rows
        assert (row.month, row.project_id) == ("2024-02", "proj-a")
        assert row.accrued_fee == Decimal("30.00")

    def test_project_summary(self, service):
        report = service.project_summary()
        assert [(r.project_id, r.net) for r in report.rows] == [
            ("proj-a", Decimal("700")),
            ("proj-b", Decimal("200")),
        ]

    def test_contract_summary(self, service):
        (row,) = service.contract_summary().rows
        assert row.paid == Decimal("300")
        assert row.balance == Decimal("700")
        assert row.vendor_name == "Acme Builders"


class TestLedgers:
    def test_vendor_ledger(self, service):
        report = service.vendor_ledger("ct-acme")
        assert report.metadata.counterparty_id == "ct-acme"
        assert [r.balance for r in report.rows] == [Decimal("400"), Decimal("100")]

    def test_contract_ledger(self, service):
        report = service.contract_ledger("con-1")
        assert report.metadata.report_type == ReportType.CONTRACT_LEDGER
        assert report.closing_balance == Decimal("100")

    def test_owner_ledger_rejects_loan_pools(self, service):
        with pytest.raises(ValueError):
            service.owner_ledger("ct-owner", pool=Pool.LOANS_RECEIVABLE)

    def test_owner_security_ledger_type(self, service):
        report = service.owner_ledger("ct-owner", pool=Pool.SECURITY_DEPOSIT)
        assert report.metadata.report_type == ReportType.OWNER_SECURITY_LEDGER
        assert report.rows == ()


class TestRendering:
    def test_to_dict(self, service):
        rendered = ReportingService.to_dict(service.balance_sheet(as_of_date=date(2024, 12, 31)))
        assert rendered["metadata"]["generated_at"] == "2024-01-01T12:00:00+00:00"
        assert rendered["is_balanced"] is True
