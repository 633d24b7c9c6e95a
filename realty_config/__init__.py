"""
realty_config -- engine configuration entrypoint.

Responsibility:
    ``get_active_config()`` returns the ``EngineConfig`` every derivation
    run receives explicitly.  The engine never reads files or globals; the
    service layer resolves the config once and passes it in.

Architecture position:
    Configuration.  Sits above ``realty_kernel`` and below
    ``realty_engines`` / ``realty_modules``.  The kernel MUST NEVER import
    from here.

Failure modes:
    - ``FileNotFoundError`` if the requested YAML file does not exist.
    - ``ConfigurationError`` on invalid values.
"""

from __future__ import annotations

import logging
from pathlib import Path

from realty_config.loader import (
    compute_checksum,
    load_yaml_file,
    parse_engine_config,
)
from realty_config.schema import EngineConfig, default_category_names

_logger = logging.getLogger("realty_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> EngineConfig:
    """
    Load and validate the engine configuration.

    Emits a ``REALTY_CONFIG_TRACE`` log entry carrying the source path and
    a checksum of the parsed YAML.

    Args:
        config_path: YAML file to load.  Defaults to the shipped
            ``sets/default.yaml``.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data = load_yaml_file(path)
    config = parse_engine_config(data.get("engine") or {})

    _logger.info(
        "REALTY_CONFIG_TRACE",
        extra={
            "trace_type": "REALTY_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": compute_checksum(data),
            "pm_percentage": str(config.pm_percentage),
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "EngineConfig",
    "default_category_names",
    "get_active_config",
]
