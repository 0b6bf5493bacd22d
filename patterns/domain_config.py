"""Dataclass-based domain configuration pattern.

The discount engine's knobs live in a frozen dataclass. This gives you:
- Type safety (IDE autocompletion, mypy checking)
- Default values (sensible out-of-the-box)
- Immutability (frozen=True prevents accidental mutation)
- Easy overrides (from env vars, config files, or shop settings)
"""

import math
import os
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DiscountEngineConfig:
    """Configuration for the Buy X Get Y discount engine.

    Usage::

        config = DiscountEngineConfig.default()
        if config.discount_class not in requested_classes:
            return RunResult.empty()
    """

    # Discount class this engine answers for (checkout function enum value)
    discount_class: str = "PRODUCT"
    selection_strategy: str = "FIRST"
    max_percentage: float = 100.0
    message_template: str = "Buy {buy_quantity} get {percentage}% off"

    @classmethod
    def default(cls) -> "DiscountEngineConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "BXGY_") -> "DiscountEngineConfig":
        """Create config from environment variables.

        Example: BXGY_MESSAGE_TEMPLATE="Buy {buy_quantity}, save {percentage}%"
        """
        overrides = {}
        template = os.getenv(f"{prefix}MESSAGE_TEMPLATE")
        if template:
            overrides["message_template"] = template

        max_pct = os.getenv(f"{prefix}MAX_PERCENTAGE")
        if max_pct:
            parsed = _percentage(max_pct)
            if parsed is None:
                logger.warning(
                    "invalid_config_value",
                    key=f"{prefix}MAX_PERCENTAGE",
                    value=max_pct,
                    using=cls.max_percentage,
                )
            else:
                overrides["max_percentage"] = parsed

        return cls(**overrides)


def _percentage(raw: str) -> float | None:
    """A finite percentage in (0, 100], or None."""
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or not 0 < value <= 100:
        return None
    return value
