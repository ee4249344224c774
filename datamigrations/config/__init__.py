"""
datamigrations Configuration.
"""

from datamigrations.config.loader import (
    DEFAULT_REGION,
    DEFAULT_TABLE_NAME,
    ConfigLoader,
    StoreConfig,
)

__all__ = [
    "ConfigLoader",
    "StoreConfig",
    "DEFAULT_TABLE_NAME",
    "DEFAULT_REGION",
]
