"""
Reporting Module Service (``realty_modules.reporting.service``).

Responsibility
--------------
Orchestrates statement generation -- balance sheet, category report,
profit & loss, vendor/contract/owner/client ledgers, budget vs actual,
PM-cost accrual, contract and project summaries -- by bridging the
``SnapshotSelector`` to the ledger accumulator and the pure builders in
``statements.py``.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ReportingService`` is the sole public
entry point for statement generation.  Constructor: ``session`` +
``clock`` + ``config``.

Invariants enforced
-------------------
* Read-only -- the selector never adds, flushes or commits.
* Every call loads a fresh immutable snapshot; no state is kept between
  calls, so concurrent statements never observe each other.
* Report metadata carries the generation timestamp from the injected
  clock and the scope parameters.

Failure modes
-------------
* Selector query failure  -> exception propagates (read-only, nothing to
  roll back).
* Invalid scope (end before start)  -> ``ScopeError`` before any query.
* Malformed stored rows  -> ``SnapshotError`` from the selector.
* Category cycles  -> ``CategoryCycleError`` from the tree builder.
* Unbalanced balance sheet  -> NOT an error; logged at WARNING and
  reported on the DTO.
"""

from __future__ import annotations

from datetime import date
from uuid import uuid4

from sqlalchemy.orm import Session

from realty_engines.accumulator import Aggregates, accumulate
from realty_engines.classifier import Pool
from realty_kernel.domain.clock import Clock, SystemClock
from realty_kernel.domain.entities import TransactionType
from realty_kernel.domain.snapshot import ALL_PROJECTS, Scope
from realty_kernel.logging_config import LogContext, get_logger
from realty_kernel.selectors.snapshot_selector import SnapshotSelector
from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.consistency import check
from realty_modules.reporting.models import (
    BalanceSheetReport,
    BudgetReport,
    CategoryReport,
    CategorySort,
    ContractSummaryReport,
    LedgerReport,
    PmCostReport,
    ProfitAndLossReport,
    ProjectSummaryReport,
    ReportMetadata,
    ReportType,
)
from realty_modules.reporting.statements import (
    build_balance_sheet,
    build_budget_report,
    build_category_report,
    build_client_ledger,
    build_contract_ledger,
    build_contract_summary,
    build_owner_ledger,
    build_pm_cost_report,
    build_profit_and_loss,
    build_project_summary,
    build_vendor_ledger,
    render_to_dict,
)

logger = get_logger("modules.reporting.service")

_OWNER_LEDGER_TYPES = {
    Pool.OWNER_FUNDS: ReportType.OWNER_RENT_LEDGER,
    Pool.SECURITY_DEPOSIT: ReportType.OWNER_SECURITY_LEDGER,
}


class ReportingService:
    """
    Statement generation service.

    Contract
    --------
    * Every public method returns a typed report DTO.
    * All methods are **read-only**.

    Guarantees
    ----------
    * No accounting logic lives in this class; it scopes, loads, and
      delegates.
    * Clock is injectable for deterministic testing.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._snapshots = SnapshotSelector(session)

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "default_currency": self._config.default_currency,
                "pm_percentage": self._config.engine.pm_percentage,
            },
        )

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _build_metadata(
        self,
        report_type: ReportType,
        scope: Scope,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            entity_name=self._config.entity_name,
            currency=self._config.default_currency,
            generated_at=self._clock.now().isoformat(),
            as_of_date=scope.as_of,
            period_start=scope.start,
            period_end=scope.end,
            project_id=scope.project_id,
            counterparty_id=scope.counterparty_id,
        )

    def _derive(self, report_type: ReportType, scope: Scope, builder) -> object:
        """Load a snapshot, accumulate it for ``scope`` and run ``builder``."""
        run_id = str(uuid4())
        with LogContext.bind(
            run_id=run_id,
            statement=report_type.value,
            project_id=scope.project_id,
        ):
            snapshot = self._snapshots.load()
            with LogContext.bind(snapshot_id=snapshot.snapshot_id):
                aggregates: Aggregates = accumulate(snapshot, scope, self._config.engine)
                metadata = self._build_metadata(report_type, scope)
                report = builder(aggregates, metadata)
                logger.info(
                    "report_generated",
                    extra={
                        "report_type": report_type.value,
                        "project_id": scope.project_id,
                        "as_of_date": scope.as_of,
                        "period_start": scope.start,
                        "period_end": scope.end,
                        "record_count": snapshot.record_count,
                    },
                )
        return report

    # =========================================================================
    # Balance sheet
    # =========================================================================

    def balance_sheet(
        self,
        as_of_date: date,
        project_id: str = ALL_PROJECTS,
    ) -> BalanceSheetReport:
        """
        Generate the balance sheet as of ``as_of_date``.

        The consistency check always runs; an unbalanced result is logged
        at WARNING and carried on the report.
        """
        scope = Scope.as_of_date(as_of_date, project_id)
        report = self._derive(
            ReportType.BALANCE_SHEET,
            scope,
            lambda agg, meta: build_balance_sheet(agg, self._config, meta),
        )
        result = check(report, self._config.engine)
        if not result.is_balanced:
            logger.warning(
                "balance_sheet_discrepancy",
                extra={
                    "as_of_date": as_of_date.isoformat(),
                    "project_id": project_id,
                    "discrepancy": str(result.discrepancy),
                    "total_assets": str(result.total_assets),
                    "total_liabilities": str(result.total_liabilities),
                    "total_equity": str(result.total_equity),
                },
            )
        return report

    # =========================================================================
    # Category hierarchies
    # =========================================================================

    def category_report(
        self,
        transaction_type: TransactionType,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
        sort_by: CategorySort = CategorySort.NAME,
    ) -> CategoryReport:
        scope = Scope.between(start, end, project_id, require_project=True)
        return self._derive(
            ReportType.CATEGORY_REPORT,
            scope,
            lambda agg, meta: build_category_report(
                agg, transaction_type, self._config, meta, sort_by,
            ),
        )

    def profit_and_loss(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> ProfitAndLossReport:
        scope = Scope.between(start, end, project_id, require_project=True)
        return self._derive(
            ReportType.PROFIT_AND_LOSS,
            scope,
            lambda agg, meta: build_profit_and_loss(agg, self._config, meta),
        )

    # =========================================================================
    # Running-balance ledgers
    # =========================================================================

    def vendor_ledger(
        self,
        vendor_id: str,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> LedgerReport:
        scope = Scope.between(start, end, project_id, counterparty_id=vendor_id)
        return self._derive(
            ReportType.VENDOR_LEDGER,
            scope,
            lambda agg, meta: build_vendor_ledger(agg, vendor_id, self._config, meta),
        )

    def contract_ledger(
        self,
        contract_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerReport:
        scope = Scope.between(start, end, counterparty_id=contract_id)
        return self._derive(
            ReportType.CONTRACT_LEDGER,
            scope,
            lambda agg, meta: build_contract_ledger(agg, contract_id, self._config, meta),
        )

    def owner_ledger(
        self,
        owner_id: str,
        pool: Pool = Pool.OWNER_FUNDS,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerReport:
        """Rent ledger for ``Pool.OWNER_FUNDS``, security ledger for ``Pool.SECURITY_DEPOSIT``."""
        if pool not in _OWNER_LEDGER_TYPES:
            raise ValueError(f"No owner ledger for pool {pool}")
        scope = Scope.between(start, end, counterparty_id=owner_id)
        return self._derive(
            _OWNER_LEDGER_TYPES[pool],
            scope,
            lambda agg, meta: build_owner_ledger(agg, owner_id, pool, self._config, meta),
        )

    def client_ledger(
        self,
        client_id: str,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> LedgerReport:
        scope = Scope.between(start, end, project_id, counterparty_id=client_id)
        return self._derive(
            ReportType.CLIENT_LEDGER,
            scope,
            lambda agg, meta: build_client_ledger(agg, client_id, self._config, meta),
        )

    # =========================================================================
    # Budget / PM cost / summaries
    # =========================================================================

    def budget_report(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> BudgetReport:
        scope = Scope.between(start, end, project_id)
        return self._derive(
            ReportType.BUDGET_VS_ACTUAL,
            scope,
            lambda agg, meta: build_budget_report(agg, self._config, meta),
        )

    def pm_cost_report(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> PmCostReport:
        scope = Scope.between(start, end, project_id, require_project=True)
        return self._derive(
            ReportType.PM_COST,
            scope,
            lambda agg, meta: build_pm_cost_report(agg, self._config, meta),
        )

    def contract_summary(
        self,
        start: date | None = None,
        end: date | None = None,
        project_id: str = ALL_PROJECTS,
    ) -> ContractSummaryReport:
        scope = Scope.between(start, end, project_id)
        return self._derive(
            ReportType.CONTRACT_SUMMARY,
            scope,
            lambda agg, meta: build_contract_summary(agg, self._config, meta),
        )

    def project_summary(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> ProjectSummaryReport:
        scope = Scope.between(start, end, require_project=True)
        return self._derive(
            ReportType.PROJECT_SUMMARY,
            scope,
            lambda agg, meta: build_project_summary(agg, self._config, meta),
        )

    # =========================================================================
    # Rendering
    # =========================================================================

    @staticmethod
    def to_dict(report: object) -> dict:
        """Convert any report to a plain dictionary."""
        return render_to_dict(report)
