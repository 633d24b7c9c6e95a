"""
Realty Engines -- pure calculation over a LedgerSnapshot.

No database access, no clock, no mutable shared state.  Each derivation
run builds an ``EntityIndex``, resolves and classifies every in-scope
transaction, and folds the effects into ``Aggregates``.
"""

from realty_engines.accumulator import (
    AccrualAnomaly,
    Aggregates,
    CategoryLine,
    ProjectTotals,
    accumulate,
    cash_effects,
)
from realty_engines.category_roles import RoleTable
from realty_engines.category_tree import CategoryTree, build_category_tree
from realty_engines.classifier import (
    ClassifiedEffect,
    ClassifyContext,
    EffectKind,
    Pool,
    classify,
)
from realty_engines.link_resolver import (
    Allocation,
    ResolvedTransaction,
    resolve,
    split_amount,
)
from realty_engines.reference_index import EntityIndex
from realty_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "AccrualAnomaly",
    "Aggregates",
    "CategoryLine",
    "ProjectTotals",
    "accumulate",
    "cash_effects",
    "RoleTable",
    "CategoryTree",
    "build_category_tree",
    "ClassifiedEffect",
    "ClassifyContext",
    "EffectKind",
    "Pool",
    "classify",
    "Allocation",
    "ResolvedTransaction",
    "resolve",
    "split_amount",
    "EntityIndex",
    "compute_input_fingerprint",
    "traced_engine",
]
