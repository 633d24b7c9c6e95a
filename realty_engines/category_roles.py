"""
Category role table.

Maps every category id to its accounting role once per run.  An explicit
``Category.role`` wins; otherwise the category's exact name is looked up
in ``EngineConfig.category_names``.  A role whose names match no category
simply never fires, so classification falls through to the generic
revenue/expense buckets.
"""

from __future__ import annotations

from dataclasses import dataclass

from realty_config.schema import EngineConfig
from realty_kernel.domain.entities import Category, CategoryRole


@dataclass(frozen=True)
class RoleTable:
    roles: dict[str, CategoryRole]

    @classmethod
    def build(cls, categories: tuple[Category, ...] | list[Category], config: EngineConfig) -> RoleTable:
        by_name: dict[str, CategoryRole] = {}
        for role, names in config.category_names.items():
            for name in names:
                by_name.setdefault(name, role)

        roles: dict[str, CategoryRole] = {}
        for category in categories:
            role = category.role or by_name.get(category.name)
            if role is not None:
                roles[category.id] = role
        return cls(roles=roles)

    def role_of(self, category_id: str | None) -> CategoryRole | None:
        if category_id is None:
            return None
        return self.roles.get(category_id)

    def has_role(self, category_id: str | None, *roles: CategoryRole) -> bool:
        return self.role_of(category_id) in roles

    def ids_for(self, role: CategoryRole) -> frozenset[str]:
        return frozenset(cid for cid, r in self.roles.items() if r == role)
