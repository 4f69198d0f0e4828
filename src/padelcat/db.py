"""SQLite database connection manager with migration support.

Manages the connection lifecycle, applies PRAGMAs on every connect, and
runs pending SQL migrations shipped in ``padelcat/migrations/`` using
PRAGMA user_version for tracking.
"""

import sqlite3
from pathlib import Path

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


class Database:
    """SQLite connection manager with migration support.

    Usage::

        db = Database("data/padelcat.db")
        db.initialize()  # connect + apply migrations
        repo = PlayerRepository(db.conn)
        db.close()

    Or as a context manager::

        with Database("data/padelcat.db") as db:
            db.apply_migrations()
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> sqlite3.Connection:
        """Open connection and configure PRAGMAs."""
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode = WAL")
        self._conn.execute("PRAGMA foreign_keys = ON")
        # Another CLI run may hold the write lock briefly
        self._conn.execute("PRAGMA busy_timeout = 5000")
        return self._conn

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection or raise if not connected."""
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def get_schema_version(self) -> int:
        """Return the current schema version (PRAGMA user_version)."""
        return self.conn.execute("PRAGMA user_version").fetchone()[0]

    def apply_migrations(self, migrations_dir: Path | None = None) -> int:
        """Apply pending SQL migration files.

        Migration files are named ``NNN_description.sql``. Files with
        version <= current user_version are skipped; after each applied
        file, user_version is set to its version number.

        Returns:
            Number of migrations applied.
        """
        migrations_dir = Path(migrations_dir) if migrations_dir else MIGRATIONS_DIR

        current = self.get_schema_version()
        applied = 0

        for migration_file in sorted(migrations_dir.glob("*.sql")):
            version = int(migration_file.name.split("_")[0])
            if version <= current:
                continue

            self.conn.executescript(migration_file.read_text(encoding="utf-8"))
            self.conn.execute(f"PRAGMA user_version = {version}")
            applied += 1

        return applied

    def initialize(self) -> sqlite3.Connection:
        """Connect and apply all pending migrations.

        This is the standard entry point for application code.
        """
        self.connect()
        self.apply_migrations()
        return self.conn
