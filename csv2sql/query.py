import logging
import sqlite3
from pathlib import Path
from typing import Any, List

from csv2sql.errors import QueryError
from csv2sql.session import Session
from csv2sql.writers import get_writer

logger = logging.getLogger(__name__)


def read_sql_file(file_name: str) -> str:
    try:
        return Path(file_name).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise QueryError(f"error reading SQL file {file_name}: {e}") from e


def split_statements(sql: str) -> List[str]:
    """
    Split a SQL script into complete statements.

    A ';' only ends a statement when sqlite3.complete_statement agrees, so
    semicolons inside string literals, quoted identifiers and comments are kept.
    Trailing text without a terminating ';' becomes the last statement.
    """
    statements: List[str] = []
    buf = ""
    pieces = sql.split(";")
    for i, piece in enumerate(pieces):
        buf += piece
        if i < len(pieces) - 1:
            buf += ";"
        if sqlite3.complete_statement(buf):
            if buf.strip().rstrip(";").strip():
                statements.append(buf.strip())
            buf = ""
    if buf.strip():
        statements.append(buf.strip())
    return statements


def as_text(value: Any) -> str:
    """Render one result field as text; NULL becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, float):
        # whole numbers print without the fraction: 2.0 -> "2"
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


def execute_query(session: Session, query: str) -> int:
    """Run ``query`` and stream its rows to the session's output writer.

    Returns the number of data rows written. Statements without a result set
    (DDL, inserts, begin/commit) write nothing.
    """
    conn = session.conn
    try:
        cursor = conn.execute(query)
    except sqlite3.Error as e:
        raise QueryError(f"error executing query {query!r}: {e}") from e

    try:
        if cursor.description is None:
            return 0

        columns = [d[0] for d in cursor.description]
        writer = get_writer(session.stdout, session.plain_text)
        count = 0
        try:
            if session.headers:
                writer.write(columns)
            for row in cursor:
                writer.write([as_text(v) for v in row])
                count += 1
        except sqlite3.Error as e:
            raise QueryError(f"error scanning rows: {e}") from e
        finally:
            writer.flush()
        return count
    finally:
        cursor.close()


def execute_script(session: Session, sql: str) -> int:
    """Run every statement of a SQL script in order, writing each result set."""
    total = 0
    for statement in split_statements(sql):
        total += execute_query(session, statement)
    return total
