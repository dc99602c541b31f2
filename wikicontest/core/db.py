"""
SQLite storage for contest submissions and their screening event log.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator
from .config import get_db_path, ensure_db_directory


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(get_db_path())
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database with required tables."""
    ensure_db_directory()

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS submissions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                unique_code TEXT NOT NULL UNIQUE,
                title TEXT,
                status TEXT NOT NULL DEFAULT 'draft',
                author_id INTEGER,
                submitter_name TEXT DEFAULT '',
                submitter_email TEXT DEFAULT '',
                submitter_country TEXT DEFAULT '',
                submitter_wiki_user TEXT DEFAULT '',
                submitter_phone TEXT DEFAULT '',
                submitter_pronouns TEXT DEFAULT '',
                explanation_creation TEXT DEFAULT '',
                explanation_inspiration TEXT DEFAULT '',
                creation_process TEXT,      -- JSON object of free-form answers
                contributing_authors TEXT,  -- JSON array, order preserved
                audio_file TEXT,
                audio_file_meta TEXT,       -- JSON object, only sanitized keys
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Append-only: nothing in this code base updates or deletes these rows
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS screening_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                submission_id INTEGER NOT NULL REFERENCES submissions(id),
                event_type TEXT NOT NULL,
                agent TEXT NOT NULL,
                decision TEXT NOT NULL DEFAULT 'none',
                author TEXT,
                content TEXT,   -- JSON {"status": ..., "flags": [...]}
                flags TEXT,     -- JSON array duplicating content.flags for queries
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute(
            'CREATE INDEX IF NOT EXISTS idx_screening_events_submission_ts '
            'ON screening_events(submission_id, created_at)'
        )

        conn.commit()


def health_check():
    """Check database health."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [table[0] for table in cursor.fetchall()]

            required_tables = ['submissions', 'screening_events']
            return all(table in table_names for table in required_tables)
    except sqlite3.Error:
        return False
