"""
PantryGuard - Database Schema Module
====================================

Table definitions and indexes.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pantryguard.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        DESIGN: Tables are created if not exist, allowing safe restarts.
        Indexes mirror the access paths the engine uses: by user ordered by
        time, by week, by severity.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # User Profiles
        # DESIGN: Schema-less profile document; suspension fields live inside
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                user_id TEXT PRIMARY KEY,
                profile_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Privacy Settings
        # DESIGN: One row per user; absent row means "use defaults"
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS privacy_settings (
                user_id TEXT PRIMARY KEY,
                settings_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Friendships
        # DESIGN: Directed rows; a friendship may be stored from either side
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS friendships (
                user_id TEXT NOT NULL,
                friend_id TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                PRIMARY KEY (user_id, friend_id)
            )
        """)

        # -----------------------------------------------------------------
        # Violations
        # DESIGN: Append-only. Descriptive columns are nullable so malformed
        # historical rows can still be stored and counted.
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS violations (
                violation_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                violation_type TEXT,
                severity TEXT,
                evidence_json TEXT,
                week_key TEXT,
                created_at TEXT,
                expires_at TEXT
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_violations_user_time ON violations(user_id, created_at)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_violations_week_time ON violations(week_key, created_at)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_violations_severity_time ON violations(severity, created_at)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_violations_expires ON violations(expires_at)"
        )

        # -----------------------------------------------------------------
        # Suspensions
        # DESIGN: Superseded/lifted rows are deactivated, never deleted.
        # Partial unique index keeps at most one active row per user.
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS suspensions (
                suspension_id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                reason TEXT NOT NULL,
                tier INTEGER NOT NULL DEFAULT 0,
                suspended_at TEXT NOT NULL,
                suspended_until TEXT,
                suspended_by TEXT NOT NULL,
                triggered_by_violation_id TEXT,
                is_active INTEGER NOT NULL DEFAULT 1,
                ended_at TEXT,
                ended_by TEXT,
                superseded_by TEXT
            )
        """)
        cursor.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_suspensions_one_active "
            "ON suspensions(user_id) WHERE is_active = 1"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_suspensions_active_until ON suspensions(is_active, suspended_until)"
        )

        # -----------------------------------------------------------------
        # Suspension History
        # DESIGN: Append-only audit trail, one row per transition
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS suspension_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                suspension_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                event TEXT NOT NULL,
                reason TEXT,
                tier INTEGER,
                suspended_at TEXT,
                suspended_until TEXT,
                duration_hours REAL,
                can_appeal INTEGER,
                actor TEXT,
                week_key TEXT,
                triggered_by_violation_id TEXT,
                stats_json TEXT,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_suspension_history_user ON suspension_history(user_id, created_at)"
        )

        # -----------------------------------------------------------------
        # Admin Notifications
        # DESIGN: One per (user, week); the unique index backs the
        # existence check against concurrent inserts
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS admin_notifications (
                notification_id TEXT PRIMARY KEY,
                notification_type TEXT NOT NULL,
                user_id TEXT NOT NULL,
                week_key TEXT NOT NULL,
                violation_count INTEGER NOT NULL,
                violations_json TEXT,
                severity_breakdown_json TEXT,
                priority TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT
            )
        """)
        cursor.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_admin_notifications_user_week "
            "ON admin_notifications(user_id, week_key)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_admin_notifications_status ON admin_notifications(status, created_at)"
        )

        # -----------------------------------------------------------------
        # Admin Escalations
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS admin_escalations (
                escalation_id TEXT PRIMARY KEY,
                escalation_type TEXT NOT NULL,
                user_id TEXT NOT NULL,
                stats_json TEXT,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_admin_escalations_status ON admin_escalations(status, created_at)"
        )

        conn.commit()


__all__ = ["SchemaMixin"]
