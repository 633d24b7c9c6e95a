"""
Reporting Configuration Schema.

Display options for generated reports plus the ``EngineConfig`` the
derivation engine runs with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

from realty_config.loader import parse_engine_config
from realty_config.schema import EngineConfig
from realty_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    ``engine`` holds every classification name, keyword and tolerance;
    the remaining fields only affect presentation.
    """

    engine: EngineConfig = field(default_factory=EngineConfig)

    # Currency code shown on reports
    default_currency: str = "USD"

    # Entity name shown on reports
    entity_name: str = "Company"

    # Decimal places for percentages
    display_precision: int = 2

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary; ``engine`` may be a nested dict."""
        data = dict(data)
        if "engine" in data and isinstance(data["engine"], dict):
            data["engine"] = parse_engine_config(data["engine"])
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
