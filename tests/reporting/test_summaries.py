"""
Contract summary, project summary, consistency checker and dict rendering.
"""

import json
from datetime import date
from decimal import Decimal

from realty_config.schema import EngineConfig
from realty_engines.accumulator import accumulate
from realty_kernel.domain.entities import ContractStatus, TransactionType
from realty_kernel.domain.snapshot import Scope
from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.consistency import check, check_totals
from realty_modules.reporting.models import ReportType
from realty_modules.reporting.statements import (
    build_balance_sheet,
    build_contract_summary,
    build_project_summary,
    render_to_dict,
)

from tests.factories import (
    PROJECT_A,
    PROJECT_B,
    bill,
    category,
    contact,
    contract,
    expense,
    income,
    metadata,
    snapshot,
)

REPAIRS = category("Repairs")
SALES = category("Unit Sales", TransactionType.INCOME)
VENDOR = contact("Acme Builders")


def _aggregates(scope: Scope | None = None, **collections):
    collections.setdefault("categories", (REPAIRS, SALES))
    collections.setdefault("contacts", (VENDOR,))
    return accumulate(snapshot(**collections), scope or Scope(), EngineConfig())


class TestContractSummary:
    def test_paid_balance_progress(self):
        con = contract(
            "Civil works", 10000, project_id=PROJECT_A.id, vendor_id=VENDOR.id,
            contract_number="C-001",
        )
        b = bill(2000, contract_id=con.id)
        agg = _aggregates(
            contracts=(con,),
            bills=(b,),
            transactions=(
                expense(2000, bill_id=b.id, category_id=REPAIRS.id),
                expense(500, contract_id=con.id, category_id=REPAIRS.id),
            ),
        )
        report = build_contract_summary(
            agg, ReportingConfig(), metadata(ReportType.CONTRACT_SUMMARY),
        )

        (row,) = report.rows
        assert row.vendor_name == "Acme Builders"
        assert row.paid == Decimal("2500")
        assert row.balance == Decimal("7500")
        assert row.progress_percent == Decimal("25.00")
        assert row.status == ContractStatus.ACTIVE.value

    def test_overpaid_contract_balance_clamped(self):
        con = contract("Paint", 100, project_id=PROJECT_A.id)
        agg = _aggregates(
            contracts=(con,),
            transactions=(expense(150, contract_id=con.id, category_id=REPAIRS.id),),
        )
        report = build_contract_summary(
            agg, ReportingConfig(), metadata(ReportType.CONTRACT_SUMMARY),
        )
        assert report.rows[0].balance == Decimal("0")
        assert report.rows[0].progress_percent == Decimal("150.00")

    def test_project_scope(self):
        agg = _aggregates(
            scope=Scope.between(None, None, PROJECT_A.id),
            contracts=(
                contract("A works", 100, project_id=PROJECT_A.id),
                contract("B works", 100, project_id=PROJECT_B.id),
            ),
        )
        report = build_contract_summary(
            agg, ReportingConfig(), metadata(ReportType.CONTRACT_SUMMARY),
        )
        assert [r.name for r in report.rows] == ["A works"]
        assert report.total_balance == Decimal("100")


class TestProjectSummary:
    def test_rows_by_project_name(self):
        agg = _aggregates(transactions=(
            income(1000, category_id=SALES.id, project_id=PROJECT_B.id),
            income(3000, category_id=SALES.id, project_id=PROJECT_A.id),
            expense(1200, category_id=REPAIRS.id, project_id=PROJECT_A.id),
        ))
        report = build_project_summary(
            agg, ReportingConfig(), metadata(ReportType.PROJECT_SUMMARY),
        )

        assert [(r.project_name, r.net) for r in report.rows] == [
            ("Alpha Towers", Decimal("1800")),
            ("Beta Heights", Decimal("1000")),
        ]
        assert report.total_revenue == Decimal("4000")
        assert report.total_expense == Decimal("1200")


class TestConsistency:
    def test_within_tolerance(self):
        result = check_totals(
            Decimal("100.50"), Decimal("50"), Decimal("50"), Decimal("1.0"),
        )
        assert result.is_balanced is True
        assert result.discrepancy == Decimal("0.50")

    def test_at_tolerance_is_unbalanced(self):
        result = check_totals(Decimal("101"), Decimal("50"), Decimal("50"), Decimal("1.0"))
        assert result.is_balanced is False
        assert result.discrepancy == Decimal("1")

    def test_check_balance_sheet(self):
        agg = _aggregates(transactions=(income(500, category_id=SALES.id),))
        sheet = build_balance_sheet(agg, ReportingConfig(), metadata())
        result = check(sheet)
        assert result.is_balanced is True
        assert result.total_assets == Decimal("500")
        assert result.total_equity == Decimal("500")


class TestRenderToDict:
    def test_balance_sheet_is_json_serializable(self):
        agg = _aggregates(transactions=(income(500, category_id=SALES.id),))
        sheet = build_balance_sheet(
            agg, ReportingConfig(), metadata(as_of_date=date(2024, 12, 31)),
        )
        rendered = render_to_dict(sheet)

        assert rendered["metadata"]["report_type"] == "balance_sheet"
        assert rendered["metadata"]["as_of_date"] == "2024-12-31"
        assert rendered["assets"]["total"] == "500"
        assert rendered["assets"]["accounts"][0]["name"] == "Main Bank"
        json.dumps(rendered)

    def test_enum_dict_keys(self):
        assert render_to_dict({ReportType.PM_COST: Decimal("1.10")}) == {"pm_cost": "1.10"}
