"""Database connection factory for SQLite (local) and PostgreSQL (cloud)."""

import json
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg2
from psycopg2.extras import RealDictCursor

from datagraph.config import DATA_DIR, DATABASE_URL, DB_PATH


class DatabaseConnection:
    """Wrapper for database connections that provides a consistent interface."""

    def __init__(self, conn: Any, is_postgres: bool = False):
        self.conn = conn
        self.is_postgres = is_postgres
        self._cursor = None

    def cursor(self, dictionary: bool = False) -> Any:
        """Get a cursor for executing database operations.

        Args:
            dictionary: If True, rows are returned as dict-like objects
                (RealDictCursor on PostgreSQL, sqlite3.Row on SQLite) so
                columns can be accessed by name.

        Returns:
            Database cursor object for executing queries and fetching results.
        """
        if self.is_postgres:
            self._cursor = self.conn.cursor(cursor_factory=RealDictCursor if dictionary else None)
        else:
            self._cursor = self.conn.cursor()
            if dictionary:
                self.conn.row_factory = sqlite3.Row
        return self._cursor

    def begin_write(self) -> None:
        """Start a transaction that holds the write lock until commit.

        SQLite takes the database-wide RESERVED lock immediately. PostgreSQL
        starts its transaction implicitly; callers lock the rows they need
        with SELECT ... FOR UPDATE.
        """
        if not self.is_postgres:
            self.conn.execute("BEGIN IMMEDIATE")

    def commit(self) -> None:
        """Commit the transaction."""
        self.conn.commit()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self.conn.rollback()

    def close(self) -> None:
        """Close the connection."""
        if self._cursor:
            self._cursor.close()
        self.conn.close()

    @property
    def placeholder(self) -> str:
        """Return the parameter placeholder for this database."""
        return "%s" if self.is_postgres else "?"


@contextmanager
def get_connection() -> Generator[DatabaseConnection, None, None]:
    """Get a database connection.

    Uses PostgreSQL if DATABASE_URL is set, otherwise falls back to SQLite.

    Yields:
        DatabaseConnection wrapper with consistent interface.
    """
    if DATABASE_URL:
        conn = psycopg2.connect(DATABASE_URL)
        db = DatabaseConnection(conn, is_postgres=True)
    else:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(DB_PATH, check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        db = DatabaseConnection(conn, is_postgres=False)

    try:
        yield db
    finally:
        db.close()


def init_tables() -> None:
    """Initialize database tables.

    Creates all required tables if they don't exist.
    Uses appropriate syntax for PostgreSQL or SQLite.
    """
    with get_connection() as db:
        if db.is_postgres:
            _init_postgres_tables(db)
        else:
            _init_sqlite_tables(db)
        db.commit()


def _init_postgres_tables(db: DatabaseConnection) -> None:
    """Create PostgreSQL tables."""
    cursor = db.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            category TEXT,
            points_reward INTEGER NOT NULL DEFAULT 0,
            required_skills JSONB NOT NULL DEFAULT '[]',
            required_languages JSONB NOT NULL DEFAULT '[]',
            required_experience TEXT,
            max_assignments INTEGER NOT NULL CHECK (max_assignments > 0),
            deadline TIMESTAMPTZ,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            is_published BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT,
            email TEXT,
            skills JSONB NOT NULL DEFAULT '[]',
            languages JSONB NOT NULL DEFAULT '[]',
            experience_level TEXT,
            has_onboarded BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS user_projects (
            id SERIAL PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id),
            project_id TEXT NOT NULL REFERENCES projects(id),
            match_score FLOAT NOT NULL,
            status TEXT NOT NULL DEFAULT 'assigned',
            created_at TIMESTAMPTZ DEFAULT NOW(),
            UNIQUE (user_id, project_id)
        )
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_projects_project_id
        ON user_projects(project_id)
    """)


def _init_sqlite_tables(db: DatabaseConnection) -> None:
    """Create SQLite tables (for local development/testing)."""
    cursor = db.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT,
            category TEXT,
            points_reward INTEGER NOT NULL DEFAULT 0,
            required_skills TEXT NOT NULL DEFAULT '[]',
            required_languages TEXT NOT NULL DEFAULT '[]',
            required_experience TEXT,
            max_assignments INTEGER NOT NULL CHECK (max_assignments > 0),
            deadline TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            is_published INTEGER NOT NULL DEFAULT 0,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT,
            email TEXT,
            skills TEXT NOT NULL DEFAULT '[]',
            languages TEXT NOT NULL DEFAULT '[]',
            experience_level TEXT,
            has_onboarded INTEGER NOT NULL DEFAULT 0,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS user_projects (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL REFERENCES users(id),
            project_id TEXT NOT NULL REFERENCES projects(id),
            match_score REAL NOT NULL,
            status TEXT NOT NULL DEFAULT 'assigned',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, project_id)
        )
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_projects_project_id
        ON user_projects(project_id)
    """)


def load_json_list(value: Any) -> list:
    """Decode a JSON list column (TEXT on SQLite, JSONB on PostgreSQL)."""
    if value is None:
        return []
    if isinstance(value, str):
        return json.loads(value)
    return list(value)
