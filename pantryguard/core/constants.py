"""
PantryGuard - Centralized Constants
===================================

Storage tuning values shared by the database layer.
Engine thresholds live in services/abuse/constants.py and Config.
"""

# =============================================================================
# Storage Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0          # seconds sqlite3.connect waits on a lock
SQLITE_BUSY_TIMEOUT = 5000            # ms, PRAGMA busy_timeout
SQLITE_CACHE_SIZE_KB = 64000          # PRAGMA cache_size (negative = KiB)

# =============================================================================
# Display Constants
# =============================================================================

LOG_TRUNCATE_LENGTH = 50              # max chars of free text in log lines


__all__ = [
    "DB_CONNECTION_TIMEOUT",
    "SQLITE_BUSY_TIMEOUT",
    "SQLITE_CACHE_SIZE_KB",
    "LOG_TRUNCATE_LENGTH",
]
