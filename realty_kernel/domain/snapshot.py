"""
LedgerSnapshot and Scope -- the two inputs of every derivation run.

A snapshot is an immutable copy of the record store.  Derivations never
hold a live reference to mutable records, so two statements built from the
same snapshot can run at the same time without coordination.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

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
    Transaction,
    Unit,
)
from realty_kernel.exceptions import ScopeError

ALL_PROJECTS = "all"


@dataclass(frozen=True)
class LedgerSnapshot:
    """Every entity collection the engine reads, as tuples."""

    accounts: tuple[Account, ...] = ()
    categories: tuple[Category, ...] = ()
    contacts: tuple[Contact, ...] = ()
    projects: tuple[Project, ...] = ()
    buildings: tuple[Building, ...] = ()
    properties: tuple[Property, ...] = ()
    units: tuple[Unit, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    bills: tuple[Bill, ...] = ()
    agreements: tuple[Agreement, ...] = ()
    contracts: tuple[Contract, ...] = ()
    budgets: tuple[Budget, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    snapshot_id: str = ""

    @property
    def record_count(self) -> int:
        return sum(
            len(getattr(self, name))
            for name in (
                "accounts", "categories", "contacts", "projects", "buildings",
                "properties", "units", "invoices", "bills", "agreements",
                "contracts", "budgets", "transactions",
            )
        )


@dataclass(frozen=True)
class Scope:
    """
    Filter applied when deriving a statement.

    Either ``as_of`` (everything on or before) or a ``start``/``end`` range
    (inclusive); with neither, every date is in scope.  ``project_id`` is a
    project id or the ``"all"`` sentinel.  ``require_project`` drops records
    whose project cannot be resolved, even when unscoped.
    """

    as_of: date | None = None
    start: date | None = None
    end: date | None = None
    project_id: str = ALL_PROJECTS
    require_project: bool = False
    counterparty_id: str | None = None

    def __post_init__(self) -> None:
        if self.as_of is not None and (self.start is not None or self.end is not None):
            raise ScopeError("as_of cannot be combined with a start/end range")
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ScopeError(f"end {self.end} is before start {self.start}")
        if not self.project_id:
            raise ScopeError("project_id must be a project id or 'all'")

    @classmethod
    def as_of_date(cls, as_of: date, project_id: str = ALL_PROJECTS) -> Scope:
        return cls(as_of=as_of, project_id=project_id)

    @classmethod
    def between(
        cls,
        start: date | None,
        end: date | None,
        project_id: str = ALL_PROJECTS,
        require_project: bool = False,
        counterparty_id: str | None = None,
    ) -> Scope:
        return cls(
            start=start,
            end=end,
            project_id=project_id,
            require_project=require_project,
            counterparty_id=counterparty_id,
        )

    @property
    def is_project_scoped(self) -> bool:
        return self.project_id != ALL_PROJECTS

    @property
    def cutoff(self) -> date | None:
        """Last date in scope, if bounded."""
        return self.as_of if self.as_of is not None else self.end

    def contains(self, d: date) -> bool:
        """True if ``d`` falls inside the date window."""
        if self.start is not None and d < self.start:
            return False
        cutoff = self.cutoff
        return cutoff is None or d <= cutoff

    def admits_project(self, project_id: str | None) -> bool:
        """True if a record resolved to ``project_id`` belongs in scope."""
        if project_id is None:
            return not (self.require_project or self.is_project_scoped)
        return not self.is_project_scoped or project_id == self.project_id
