"""
Configuration Loader (``realty_config.loader``).

Responsibility
--------------
Loads an engine configuration YAML file and parses it into an
``EngineConfig``.  Keys absent from the file keep their schema defaults.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown role or invoice type, non-numeric amount  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from realty_config.schema import EngineConfig
from realty_kernel.domain.entities import CategoryRole, InvoiceType
from realty_kernel.exceptions import ConfigurationError

_DECIMAL_FIELDS = (
    "pm_percentage",
    "epsilon",
    "balance_tolerance",
    "budget_under_threshold",
)
_STRING_FIELDS = (
    "clearing_account_name",
    "tenant_deduction_marker",
    "void_marker",
)
_KEYWORD_FIELDS = (
    "rental_liability_keywords",
    "security_liability_keywords",
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(name: str, value: Any) -> Decimal:
    """Parse a YAML scalar as Decimal; floats go through ``str`` first."""
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigurationError(name, f"not a number: {value!r}") from exc


def parse_role(name: str, value: str) -> CategoryRole:
    try:
        return CategoryRole(value)
    except ValueError as exc:
        raise ConfigurationError(name, f"unknown category role {value!r}") from exc


def parse_category_names(data: dict[str, Any]) -> dict[CategoryRole, tuple[str, ...]]:
    """Parse ``role: [name, ...]``; a bare string is a single name."""
    out: dict[CategoryRole, tuple[str, ...]] = {}
    for key, names in data.items():
        role = parse_role("category_names", key)
        if names is None:
            out[role] = ()
        elif isinstance(names, str):
            out[role] = (names,)
        else:
            out[role] = tuple(str(n) for n in names)
    return out


def parse_engine_config(data: dict[str, Any]) -> EngineConfig:
    """
    Parse an ``EngineConfig`` from a dict.

    Only keys present in ``data`` override schema defaults.  A
    ``category_names`` mapping replaces the names of the roles it lists and
    keeps the defaults of the others.
    """
    kwargs: dict[str, Any] = {}
    for name in _DECIMAL_FIELDS:
        if name in data:
            kwargs[name] = parse_decimal(name, data[name])
    for name in _STRING_FIELDS:
        if name in data:
            kwargs[name] = str(data[name])
    for name in _KEYWORD_FIELDS:
        if name in data:
            kwargs[name] = tuple(str(k).lower() for k in data[name] or ())

    if "category_names" in data:
        names = dict(EngineConfig().category_names)
        names.update(parse_category_names(data["category_names"] or {}))
        kwargs["category_names"] = names

    if "receivable_invoice_types" in data:
        types = []
        for value in data["receivable_invoice_types"] or ():
            try:
                types.append(InvoiceType(value))
            except ValueError as exc:
                raise ConfigurationError(
                    "receivable_invoice_types", f"unknown invoice type {value!r}",
                ) from exc
        kwargs["receivable_invoice_types"] = tuple(types)

    if "pm_excluded_roles" in data:
        kwargs["pm_excluded_roles"] = tuple(
            parse_role("pm_excluded_roles", r) for r in data["pm_excluded_roles"] or ()
        )

    return EngineConfig(**kwargs)


def load_engine_config(path: Path) -> EngineConfig:
    """Load ``path`` and parse its ``engine`` section."""
    data = load_yaml_file(path)
    return parse_engine_config(data.get("engine") or {})


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
