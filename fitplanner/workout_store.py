"""
SQLite persistence for users, profiles, generated plans and tracked plans.

Every record is scoped to a user id. Writes are single statements or short
transactions; there is no optimistic concurrency control, so two sessions
editing the same user's data can overwrite each other's changes.
"""

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from functools import wraps

from fitplanner.errors import PersistenceError
from fitplanner.models import GeneratedPlan, Profile, TrackedPlan, User


logger = logging.getLogger(__name__)


def _persistence_errors(method):
    """Log sqlite failures and surface them as PersistenceError."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except sqlite3.Error as e:
            logger.error("%s failed: %s", method.__name__, e)
            raise PersistenceError(f"Could not {method.__name__.replace('_', ' ')}: {e}") from e

    return wrapper


class WorkoutStore:
    """Small SQLite wrapper for per-user documents."""

    def __init__(self, db_path):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Context manager for atomic write operations."""
        try:
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    @_persistence_errors
    def init_schema(self):
        """Create core schema if it does not already exist."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT,
                provider TEXT NOT NULL DEFAULT 'password',
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS profiles (
                user_id INTEGER PRIMARY KEY,
                data TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS generated_plans (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                plan TEXT NOT NULL,
                preferences TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS tracked_plans (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                schedule TEXT NOT NULL,
                workouts_by_day TEXT NOT NULL,
                source_plan_id INTEGER,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(source_plan_id) REFERENCES generated_plans(id) ON DELETE SET NULL
            );

            CREATE TABLE IF NOT EXISTS progress_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                tracked_plan_id INTEGER NOT NULL,
                entry_date TEXT NOT NULL,
                completed INTEGER NOT NULL DEFAULT 1,
                exercises TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                FOREIGN KEY(tracked_plan_id) REFERENCES tracked_plans(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_generated_plans_user ON generated_plans(user_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_tracked_plans_user ON tracked_plans(user_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_progress_entries_plan ON progress_entries(tracked_plan_id);
            """
        )
        self.conn.commit()

    # ── Users ──────────────────────────────────────────────────────────

    @_persistence_errors
    def create_user(self, email, password_hash=None, provider="password"):
        """Insert a user and return its id."""
        with self.transaction():
            cursor = self.conn.execute(
                "INSERT INTO users (email, password_hash, provider) VALUES (?, ?, ?)",
                (email, password_hash, provider),
            )
        return int(cursor.lastrowid)

    @_persistence_errors
    def find_user_by_email(self, email):
        """Return (User, password_hash) or None."""
        row = self.conn.execute(
            "SELECT id, email, provider, password_hash FROM users WHERE email = ?",
            (email,),
        ).fetchone()
        if not row:
            return None
        user = User(id=int(row["id"]), email=row["email"], provider=row["provider"])
        return user, row["password_hash"]

    # ── Profile ────────────────────────────────────────────────────────

    @_persistence_errors
    def save_profile(self, user_id, profile):
        """Insert or overwrite the user's profile."""
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO profiles (user_id, data, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(user_id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = datetime('now')
                """,
                (user_id, json.dumps(profile.to_dict())),
            )

    @_persistence_errors
    def load_profile(self, user_id):
        row = self.conn.execute(
            "SELECT data FROM profiles WHERE user_id = ?", (user_id,)
        ).fetchone()
        if not row:
            return None
        return Profile.from_dict(json.loads(row["data"]))

    # ── Generated plans ────────────────────────────────────────────────

    @_persistence_errors
    def append_generated_plan(self, user_id, plan):
        """Append a generated plan to the user's history and return its id."""
        with self.transaction():
            cursor = self.conn.execute(
                "INSERT INTO generated_plans (user_id, plan, preferences) VALUES (?, ?, ?)",
                (user_id, plan.plan, json.dumps(plan.preferences.to_dict())),
            )
        return int(cursor.lastrowid)

    @_persistence_errors
    def list_recent_plans(self, user_id, limit=5):
        """Return the user's generated plans, newest first."""
        rows = self.conn.execute(
            """
            SELECT id, plan, preferences, created_at
            FROM generated_plans
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [
            GeneratedPlan.from_dict(
                {
                    "id": int(row["id"]),
                    "plan": row["plan"],
                    "preferences": json.loads(row["preferences"]),
                    "created_at": row["created_at"],
                }
            )
            for row in rows
        ]

    # ── Tracked plans ──────────────────────────────────────────────────

    @_persistence_errors
    def create_tracked_plan(self, user_id, plan):
        """Store a tracked plan (without progress) and return its id."""
        with self.transaction():
            cursor = self.conn.execute(
                """
                INSERT INTO tracked_plans (
                    user_id,
                    name,
                    description,
                    schedule,
                    workouts_by_day,
                    source_plan_id
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    plan.name,
                    plan.description,
                    json.dumps(plan.schedule),
                    json.dumps({day: w.to_dict() for day, w in plan.workouts_by_day.items()}),
                    plan.source_plan_id,
                ),
            )
        return int(cursor.lastrowid)

    @_persistence_errors
    def list_tracked_plans(self, user_id):
        """Return the user's tracked plans with their progress, newest first."""
        rows = self.conn.execute(
            """
            SELECT id, name, description, schedule, workouts_by_day, source_plan_id, created_at
            FROM tracked_plans
            WHERE user_id = ?
            ORDER BY created_at DESC, id DESC
            """,
            (user_id,),
        ).fetchall()

        plans = []
        for row in rows:
            progress_rows = self.conn.execute(
                """
                SELECT entry_date, completed, exercises
                FROM progress_entries
                WHERE tracked_plan_id = ?
                ORDER BY id
                """,
                (row["id"],),
            ).fetchall()
            plans.append(
                TrackedPlan.from_dict(
                    {
                        "id": int(row["id"]),
                        "name": row["name"],
                        "description": row["description"],
                        "schedule": json.loads(row["schedule"]),
                        "workouts_by_day": json.loads(row["workouts_by_day"]),
                        "source_plan_id": row["source_plan_id"],
                        "created_at": row["created_at"],
                        "progress": [
                            {
                                "date": p["entry_date"],
                                "completed": bool(p["completed"]),
                                "exercises": json.loads(p["exercises"]),
                            }
                            for p in progress_rows
                        ],
                    }
                )
            )
        return plans

    def _owned_plan_exists(self, user_id, plan_id):
        row = self.conn.execute(
            "SELECT 1 FROM tracked_plans WHERE id = ? AND user_id = ?",
            (plan_id, user_id),
        ).fetchone()
        return row is not None

    @_persistence_errors
    def append_progress(self, user_id, plan_id, entry):
        """
        Append one progress entry to a tracked plan.

        Raises:
            PersistenceError: If the plan does not exist for this user
        """
        if not self._owned_plan_exists(user_id, plan_id):
            raise PersistenceError(f"Tracked plan {plan_id} not found")

        payload = entry.to_dict()
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO progress_entries (tracked_plan_id, entry_date, completed, exercises)
                VALUES (?, ?, ?, ?)
                """,
                (plan_id, payload["date"], int(entry.completed), json.dumps(payload["exercises"])),
            )

    @_persistence_errors
    def delete_tracked_plan(self, user_id, plan_id):
        """Delete a tracked plan and its progress. Returns True when a row was removed."""
        with self.transaction():
            cursor = self.conn.execute(
                "DELETE FROM tracked_plans WHERE id = ? AND user_id = ?",
                (plan_id, user_id),
            )
        return cursor.rowcount > 0

    @_persistence_errors
    def count_summary(self, user_id):
        """Return high-level row counts for the sidebar."""
        generated = self.conn.execute(
            "SELECT COUNT(*) AS c FROM generated_plans WHERE user_id = ?", (user_id,)
        ).fetchone()["c"]
        tracked = self.conn.execute(
            "SELECT COUNT(*) AS c FROM tracked_plans WHERE user_id = ?", (user_id,)
        ).fetchone()["c"]
        sessions = self.conn.execute(
            """
            SELECT COUNT(*) AS c
            FROM progress_entries pe
            JOIN tracked_plans tp ON tp.id = pe.tracked_plan_id
            WHERE tp.user_id = ?
            """,
            (user_id,),
        ).fetchone()["c"]
        return {
            "generated_plans": int(generated),
            "tracked_plans": int(tracked),
            "sessions": int(sessions),
        }
