"""
Category tree -- filtered category hierarchy with recursive rollup.

A category whose parent is missing from the filtered set is treated as a
root, so every filtered category is reachable from exactly one root and
the sum of root rollups equals the sum of all own amounts in the tree.
Siblings are ordered by name.

Failure modes:
    - CategoryCycleError when parent links form a cycle.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar

from realty_kernel.domain.entities import Category, TransactionType
from realty_kernel.exceptions import CategoryCycleError

V = TypeVar("V", int, Decimal)


def _name_key(category: Category) -> tuple[str, str, str]:
    return (category.name.casefold(), category.name, category.id)


def _check_acyclic(nodes: Mapping[str, Category]) -> None:
    done: set[str] = set()
    for start in nodes:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current is not None and current in nodes and current not in done:
            if current in on_path:
                cycle = path[path.index(current):] + [current]
                raise CategoryCycleError(tuple(cycle))
            path.append(current)
            on_path.add(current)
            current = nodes[current].parent_category_id
        done.update(path)


@dataclass(frozen=True)
class CategoryTree:
    nodes: dict[str, Category]
    children: dict[str | None, tuple[Category, ...]]

    @property
    def roots(self) -> tuple[Category, ...]:
        return self.children.get(None, ())

    def children_of(self, category_id: str) -> tuple[Category, ...]:
        return self.children.get(category_id, ())

    def __contains__(self, category_id: object) -> bool:
        return category_id in self.nodes

    def walk(self) -> Iterator[tuple[Category, int]]:
        """Depth-first (category, level) pairs, siblings by name."""
        stack: list[tuple[Category, int]] = [(c, 0) for c in reversed(self.roots)]
        while stack:
            category, level = stack.pop()
            yield category, level
            for child in reversed(self.children_of(category.id)):
                stack.append((child, level + 1))

    def rollup(self, own: Mapping[str, V], zero: V) -> dict[str, V]:
        """Own value plus the rolled-up values of all descendants, per node."""
        totals: dict[str, V] = {}
        for category, _level in reversed(list(self.walk())):
            total = own.get(category.id, zero)
            for child in self.children_of(category.id):
                total = total + totals[child.id]
            totals[category.id] = total
        return totals

    def ancestors(self, category_id: str) -> list[str]:
        """Ids from ``category_id`` up to its root, inclusive."""
        chain: list[str] = []
        current: str | None = category_id
        while current is not None and current in self.nodes:
            chain.append(current)
            current = self.nodes[current].parent_category_id
        return chain


def build_category_tree(
    categories: Iterable[Category],
    tx_type: TransactionType | None = None,
    exclude_rental: bool = True,
    exclude_ids: frozenset[str] = frozenset(),
) -> CategoryTree:
    """
    Build the tree of categories matching ``tx_type``.

    Rental-flagged categories and ``exclude_ids`` are left out.
    """
    nodes = {
        c.id: c
        for c in categories
        if (tx_type is None or c.type == tx_type)
        and not (exclude_rental and c.is_rental)
        and c.id not in exclude_ids
    }
    _check_acyclic(nodes)

    grouped: dict[str | None, list[Category]] = {}
    for category in nodes.values():
        parent = category.parent_category_id
        key = parent if parent in nodes else None
        grouped.setdefault(key, []).append(category)

    return CategoryTree(
        nodes=nodes,
        children={k: tuple(sorted(v, key=_name_key)) for k, v in grouped.items()},
    )
