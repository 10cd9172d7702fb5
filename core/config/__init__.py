"""
Runtime Configuration Module

Provides configuration loading and management for BlockProof.
"""

from .runtime import (
    ClientConfig,
    RuntimeConfig,
    ServerConfig,
    get_default_config,
    get_default_config_template,
    load_runtime_config,
    set_default_config,
)

__all__ = [
    "ClientConfig",
    "RuntimeConfig",
    "ServerConfig",
    "get_default_config",
    "get_default_config_template",
    "load_runtime_config",
    "set_default_config",
]
