"""
Runtime Configuration Module

Provides configuration loading and management for the MMR engine.
"""

from .runtime import (
    ApiConfig,
    HasherConfig,
    RuntimeConfig,
    StoreConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ApiConfig",
    "HasherConfig",
    "RuntimeConfig",
    "StoreConfig",
    "get_default_config",
    "set_default_config",
]
