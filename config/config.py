"""
Configuration for the seller analytics engines.
Defines tolerances, labels and storage limits in a type-safe, extensible way.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.money import EPSILON
from utils.env import env_decimal, env_float, env_int, env_str, load_project_dotenv

ENV_PREFIX = "MARKETPLACE_"


@dataclass
class EngineConfig:
    epsilon: Decimal = EPSILON  # Monetary comparison tolerance
    storage_timeout_seconds: float = 10.0
    unknown_product_label: str = "Unknown Product"
    uncategorized_label: str = "Uncategorized"
    default_top_products_limit: int = 10
    timezone: str = "UTC"  # Used for trend bucket boundaries and year-to-date
    log_level: str = "INFO"
    tzinfo: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self):
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        if self.storage_timeout_seconds <= 0:
            raise ValueError("storage_timeout_seconds must be positive")
        if self.default_top_products_limit < 1:
            raise ValueError("default_top_products_limit must be at least 1")
        if logging.getLevelName(self.log_level.upper()) not in (
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
            logging.CRITICAL,
        ):
            raise ValueError(f"Unknown log level: {self.log_level}")
        try:
            self.tzinfo = ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone}") from e

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from MARKETPLACE_* variables (and the project .env file)."""
        load_project_dotenv()
        defaults = cls()
        return cls(
            epsilon=env_decimal(f"{ENV_PREFIX}EPSILON", str(defaults.epsilon)),
            storage_timeout_seconds=env_float(
                f"{ENV_PREFIX}STORAGE_TIMEOUT_SECONDS", defaults.storage_timeout_seconds
            ),
            unknown_product_label=env_str(
                f"{ENV_PREFIX}UNKNOWN_PRODUCT_LABEL", defaults.unknown_product_label
            ),
            uncategorized_label=env_str(
                f"{ENV_PREFIX}UNCATEGORIZED_LABEL", defaults.uncategorized_label
            ),
            default_top_products_limit=env_int(
                f"{ENV_PREFIX}TOP_PRODUCTS_LIMIT", defaults.default_top_products_limit
            ),
            timezone=env_str(f"{ENV_PREFIX}TIMEZONE", defaults.timezone),
            log_level=env_str(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
        )


# Example usage:
# config = EngineConfig.from_env()
# engine = RevenueAggregationEngine(data_source, config=config)
