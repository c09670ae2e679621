import csv
import logging
import sqlite3
import sys
from typing import List, TextIO

from csv2sql.errors import IngestError
from csv2sql.names import sql_name_from_string
from csv2sql.session import Session

logger = logging.getLogger(__name__)

BATCH_SIZE = 10000

# no cap on cell size; 2**31 - 1 fits a C long everywhere
FIELD_SIZE_LIMIT = min(sys.maxsize, 2 ** 31 - 1)


def read_records(source: TextIO, source_name: str) -> List[List[str]]:
    """Read every CSV record from ``source`` at once.

    Rows may have differing field counts, spaces after a delimiter are
    skipped and stray quotes inside unquoted fields are kept as-is.
    """
    csv.field_size_limit(FIELD_SIZE_LIMIT)
    reader = csv.reader(source, skipinitialspace=True, strict=False)
    try:
        # blank lines carry no record
        return [record for record in reader if record]
    except (csv.Error, OSError, UnicodeDecodeError) as e:
        raise IngestError(f"failed to read all of CSV from {source_name}: {e}") from e


def create_table_from_csv(session: Session, table_name: str, file_name: str) -> int:
    try:
        f = open(file_name, "r", newline="", encoding="utf-8-sig")
    except OSError as e:
        raise IngestError(f"error opening the CSV file {file_name}: {e}") from e
    with f:
        return create_table_from_reader(session, table_name, f, file_name)


def create_table_from_reader(session: Session, table_name: str, source: TextIO,
                             source_name: str) -> int:
    """Materialize a CSV source as ``table_name``; return the number of rows inserted."""
    records = read_records(source, source_name)
    if not records:
        raise IngestError(f"CSV from {source_name} has no header row")

    field_names = [sql_name_from_string(name) for name in records[0]]
    field_count = len(field_names)
    conn = session.conn

    if session.replace:
        try:
            conn.execute(f"drop table if exists {table_name}")
        except sqlite3.Error as e:
            raise IngestError(f"error dropping table {table_name}: {e}") from e

    try:
        conn.execute(f"create table {table_name} ({', '.join(field_names)})")
    except sqlite3.Error as e:
        if "already exists" not in str(e):
            raise IngestError(f"error creating table {table_name}: {e}") from e
        logger.warning("table %s already exists", table_name)

    placeholders = ", ".join("?" for _ in field_names)
    insert_sql = f"insert into {table_name} ({', '.join(field_names)}) values ({placeholders})"

    # join a transaction a SQL script left open instead of starting one
    owns_transaction = not conn.in_transaction
    total = 0
    batch = []
    try:
        if owns_transaction:
            conn.execute("begin")
        for record in records[1:]:
            # pad short rows with nulls for the missing trailing fields
            batch.append(record + [None] * (field_count - len(record)))
            if len(batch) >= BATCH_SIZE:
                conn.executemany(insert_sql, batch)
                total += len(batch)
                batch.clear()

        if batch:
            conn.executemany(insert_sql, batch)
            total += len(batch)
        if owns_transaction:
            conn.execute("commit")
    except sqlite3.Error as e:
        raise IngestError(f"error inserting record into {table_name}: {e}") from e

    logger.info("imported %d rows into table %s from %s", total, table_name, source_name)
    return total
