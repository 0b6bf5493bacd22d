"""Discount vertical configuration.

Loads the engine's DiscountEngineConfig once at import, honouring BXGY_*
environment overrides.
"""

from patterns.domain_config import DiscountEngineConfig

config = DiscountEngineConfig.from_env()
