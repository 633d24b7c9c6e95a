"""
realty_engines.tracer -- Engine invocation tracer emitting REALTY_ENGINE_TRACE.

Responsibility:
    ``@traced_engine`` wraps pure engine entry points with one structured
    log record carrying engine_name, engine_version, an input fingerprint
    (SHA-256 of selected arguments) and duration_ms.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Emits a log record only; never touches inputs.

Invariants enforced:
    - Fingerprints are deterministic: dict keys are sorted, snapshots are
      reduced to their id and record count, Decimals use their string form.

Usage:
    @traced_engine("accumulator", "1.0", fingerprint_fields=("scope",))
    def accumulate(snapshot, scope, config):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from realty_kernel.domain.snapshot import LedgerSnapshot

_logger = logging.getLogger("realty_kernel.engines.tracer")


def _canonicalize(value: Any) -> str:
    """Stable string form of ``value`` for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, LedgerSnapshot):
        return f"snapshot:{value.snapshot_id}:{value.record_count}"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: _canonicalize(kv[0]))
        return "{" + ",".join(
            f"{_canonicalize(k)}:{_canonicalize(v)}" for k, v in items
        ) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """16-char SHA-256 prefix over the named arguments; missing ones are "null"."""
    parts = [
        f"{name}={_canonicalize(arguments.get(name))}"
        for name in fingerprint_fields
    ]
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits REALTY_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g. "accumulator").
        engine_version: Engine version (e.g. "1.0").
        fingerprint_fields: Parameter names (positional or keyword) to
            include in the input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            _logger.info(
                "REALTY_ENGINE_TRACE",
                extra={
                    "trace_type": "REALTY_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
