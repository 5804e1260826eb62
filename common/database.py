import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional
from common.config import config
from common.errors import ScoreStorageError
from common.logging.logger import get_logger

logger = get_logger("database")

class Database:
    def __init__(self, db_path: Optional[str] = None):
        if db_path is None:
            # Absolute path so worker threads resolve the same file
            raw_path = config.get("database.sqlite_path")
            self.db_path = os.path.abspath(raw_path)
        elif db_path == ":memory:":
            self.db_path = ":memory:"
        else:
            self.db_path = os.path.abspath(db_path)
        self._init_db()

    def get_connection(self):
        return sqlite3.connect(self.db_path)

    @contextmanager
    def connection(self):
        """Context manager that provides a connection with automatic commit/rollback."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Initialize the database schema."""
        schema = """
        -- Score definitions, keyed by machine name
        CREATE TABLE IF NOT EXISTS score_definitions (
            name TEXT PRIMARY KEY,
            definition JSON NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- Fields each bundle defines
        CREATE TABLE IF NOT EXISTS field_definitions (
            entity_type TEXT NOT NULL,
            bundle TEXT NOT NULL,
            field_name TEXT NOT NULL,
            field_type TEXT NOT NULL,
            label TEXT,
            is_multiple INTEGER DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (entity_type, bundle, field_name)
        );

        -- Content records and terms; field values stored as JSON
        CREATE TABLE IF NOT EXISTS records (
            entity_type TEXT NOT NULL,
            id TEXT NOT NULL,
            bundle TEXT NOT NULL,
            fields JSON NOT NULL DEFAULT '{}',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (entity_type, id)
        );

        CREATE INDEX IF NOT EXISTS idx_records_bundle ON records(entity_type, bundle);
        """

        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.get_connection() as conn:
                conn.executescript(schema)
            logger.info(f"Database initialized at {self.db_path}")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {e}")
            raise ScoreStorageError("schema", str(e)) from e

db = Database()
