"""Tiers discount configuration.

Re-exports the TiersDiscountConfig from the patterns module, together
with the process settings the function reads its metafield with.
"""

from patterns.domain_config import FunctionSettings, Tier, TiersDiscountConfig

# Process settings (metafield namespace/key, logging)
settings = FunctionSettings.from_env()

__all__ = ["Tier", "TiersDiscountConfig", "settings"]
