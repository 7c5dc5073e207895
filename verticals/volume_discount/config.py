"""Volume discount configuration.

Re-exports the VolumeDiscountConfig from the patterns module, together
with the process settings the function reads its metafield with.
"""

from patterns.domain_config import FunctionSettings, VolumeDiscountConfig

# Process settings (metafield namespace/key, logging)
settings = FunctionSettings.from_env()

__all__ = ["VolumeDiscountConfig", "settings"]
