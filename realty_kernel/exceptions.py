"""
Typed exception hierarchy for the realty ledger engine.

The derivation engine reports almost every data-quality problem as data
(unresolved links, missing named categories, balance discrepancies,
overpaid documents).  Exceptions are reserved for conditions the caller
must act on before a statement can be produced at all.

    RealtyLedgerError (base)
    |
    +-- ConfigurationError      INVALID_CONFIGURATION
    +-- ScopeError              INVALID_SCOPE
    +-- CategoryCycleError      CATEGORY_CYCLE
    +-- SnapshotError           SNAPSHOT_INVALID

Every class carries a ``code`` class attribute for machine-readable
identification and stores its context as attributes, never only in the
message string.
"""


class RealtyLedgerError(Exception):
    """
    Base exception for all realty ledger errors.

    All subclasses must have a `code` class attribute.
    """

    code: str = "REALTY_LEDGER_ERROR"


class ConfigurationError(RealtyLedgerError):
    """Engine configuration value is missing or out of range."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for {field}: {reason}")


class ScopeError(RealtyLedgerError):
    """Statement scope is self-contradictory (e.g. end before start)."""

    code: str = "INVALID_SCOPE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid scope: {reason}")


class CategoryCycleError(RealtyLedgerError):
    """The parent_category_id chain loops back on itself."""

    code: str = "CATEGORY_CYCLE"

    def __init__(self, category_ids: tuple[str, ...]):
        self.category_ids = category_ids
        super().__init__(
            f"Category hierarchy contains a cycle: {' -> '.join(category_ids)}"
        )


class SnapshotError(RealtyLedgerError):
    """A stored record cannot be turned into a snapshot entity."""

    code: str = "SNAPSHOT_INVALID"

    def __init__(self, entity: str, record_id: str, reason: str):
        self.entity = entity
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"Invalid {entity} {record_id}: {reason}")
