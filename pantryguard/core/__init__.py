"""
PantryGuard - Core Package
==========================

Configuration, logging and persistence shared by every service.

DESIGN:
    Core modules are singletons or global instances so state stays
    consistent across the engine:
    - get_config() returns the same Config instance
    - get_db() returns the same DatabaseManager instance
    - logger is a global TreeLogger instance
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    get_config,
    reset_config,
    validate_and_log_config,
)

from .database import DatabaseManager, PersistenceGateway, get_db

from .logger import logger, TreeLogger


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "reset_config",
    "validate_and_log_config",
    "DatabaseManager",
    "PersistenceGateway",
    "get_db",
    "logger",
    "TreeLogger",
]
