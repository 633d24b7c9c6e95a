"""
Consistency Checker.

Recomputes ``assets - (liabilities + equity)`` and reports the figure as
data.  The checker never repairs anything; an unbalanced sheet points at
upstream data quality, not an engine fault.
"""

from __future__ import annotations

from decimal import Decimal

from realty_config.schema import EngineConfig
from realty_modules.reporting.models import BalanceSheetReport, ConsistencyResult


def check_totals(
    total_assets: Decimal,
    total_liabilities: Decimal,
    total_equity: Decimal,
    tolerance: Decimal,
) -> ConsistencyResult:
    discrepancy = total_assets - (total_liabilities + total_equity)
    return ConsistencyResult(
        is_balanced=abs(discrepancy) < tolerance,
        discrepancy=discrepancy,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
    )


def check(
    balance_sheet: BalanceSheetReport,
    config: EngineConfig | None = None,
) -> ConsistencyResult:
    """Check a built balance sheet against its own section totals."""
    tolerance = (config or EngineConfig()).balance_tolerance
    return check_totals(
        balance_sheet.assets.total,
        balance_sheet.liabilities.total,
        balance_sheet.equity.total,
        tolerance,
    )
