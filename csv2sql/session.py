import logging
import sqlite3
import sys
from dataclasses import dataclass, field
from typing import TextIO

from csv2sql.errors import DatabaseError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def open_database(db_path: str = MEMORY_DB) -> sqlite3.Connection:
    """Open (or create) a SQLite database, in memory by default.

    The connection autocommits; ingestion and SQL scripts open their own
    transactions with explicit ``begin``.
    """
    try:
        return sqlite3.connect(db_path, isolation_level=None)
    except sqlite3.Error as e:
        raise DatabaseError(f"error opening database {db_path}: {e}") from e


def db_file_name(name: str) -> str:
    """Append the ``.db`` suffix unless the name already carries it."""
    return name if name.endswith(".db") else name + ".db"


@dataclass
class Session:
    """Mutable state carried across command-line tokens within one run."""

    conn: sqlite3.Connection = field(default_factory=open_database)
    headers: bool = True
    replace: bool = False
    plain_text: bool = False
    # pending --table override, consumed by the next ingestion
    table_name: str = ""
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)

    def use_database(self, name: str) -> None:
        """Switch to a persistent database file, closing the current handle."""
        db_path = db_file_name(name)
        conn = open_database(db_path)
        self.conn.close()
        self.conn = conn
        logger.debug("using database %s", db_path)

    def take_table_name(self, default: str) -> str:
        """Return the pending table override (or ``default``) and clear it."""
        table_name = self.table_name or default
        self.table_name = ""
        return table_name

    def close(self) -> None:
        self.conn.close()
