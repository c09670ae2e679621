#!/usr/bin/env python3
"""
csv2sql: load CSV files into SQLite and query them from the command line.

Arguments are processed left to right, e.g.

    csv2sql people.csv "select name from people where age > 30"
    cat data.csv | csv2sql --table t stdin --plain "select * from t"
    csv2sql --db store --replace sales.csv report.sql
"""
import logging
import sys
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from csv2sql.errors import ArgumentError, Csv2SqlError
from csv2sql.ingest import create_table_from_csv, create_table_from_reader
from csv2sql.log_config import setup_logger
from csv2sql.names import sql_name_from_string
from csv2sql.query import execute_query, execute_script, read_sql_file
from csv2sql.session import Session

logger = logging.getLogger(__name__)

USAGE = (
    "Usage: csv2sql [--db NAME] [--table NAME] [--replace] [--no-headers|--headers]\n"
    "               [--plain-text] (FILE.csv | stdin | FILE.sql | 'select ...') ..."
)


class TokenKind(Enum):
    PLAIN_TEXT = "plain_text"
    REPLACE = "replace"
    DB = "db"
    TABLE = "table"
    NO_HEADERS = "no_headers"
    HEADERS = "headers"
    CSV_FILE = "csv_file"
    SQL_FILE = "sql_file"
    STDIN = "stdin"
    SELECT = "select"
    UNKNOWN = "unknown"


FLAGS = {
    "--plain-text": TokenKind.PLAIN_TEXT,
    "--plain": TokenKind.PLAIN_TEXT,
    "--text": TokenKind.PLAIN_TEXT,
    "--replace": TokenKind.REPLACE,
    "--db": TokenKind.DB,
    "--table": TokenKind.TABLE,
    "--no-headers": TokenKind.NO_HEADERS,
    "--no-header": TokenKind.NO_HEADERS,
    "--headers": TokenKind.HEADERS,
}


def classify_token(token: str) -> TokenKind:
    if token in FLAGS:
        return FLAGS[token]
    if token.endswith(".csv"):
        return TokenKind.CSV_FILE
    if token.endswith(".sql"):
        return TokenKind.SQL_FILE
    if token == "stdin":
        return TokenKind.STDIN
    if token.startswith("select"):
        return TokenKind.SELECT
    return TokenKind.UNKNOWN


def _flag_value(flag: str, tokens: Iterator[str]) -> str:
    value = next(tokens, None)
    if value is None:
        raise ArgumentError(f"{flag} requires an argument")
    return value


def dispatch(session: Session, args: Sequence[str]) -> None:
    """Process every token in order against ``session``; the first error aborts."""
    tokens = iter(args)
    for token in tokens:
        kind = classify_token(token)

        if kind is TokenKind.PLAIN_TEXT:
            session.plain_text = True
        elif kind is TokenKind.REPLACE:
            session.replace = True
        elif kind is TokenKind.DB:
            session.use_database(_flag_value(token, tokens))
        elif kind is TokenKind.TABLE:
            session.table_name = _flag_value(token, tokens)
        elif kind is TokenKind.NO_HEADERS:
            session.headers = False
        elif kind is TokenKind.HEADERS:
            session.headers = True
        elif kind is TokenKind.CSV_FILE:
            table_name = session.take_table_name(sql_name_from_string(token))
            create_table_from_csv(session, table_name, token)
        elif kind is TokenKind.SQL_FILE:
            execute_script(session, read_sql_file(token))
        elif kind is TokenKind.STDIN:
            table_name = session.take_table_name("stdin")
            create_table_from_reader(session, table_name, session.stdin, "stdin")
        elif kind is TokenKind.SELECT:
            execute_query(session, token)
        else:
            raise ArgumentError(f"unknown argument: {token}")


def run(args: Sequence[str], session: Optional[Session] = None) -> None:
    session = session or Session()
    try:
        dispatch(session, args)
    finally:
        session.close()


def main(argv: Optional[List[str]] = None) -> None:
    setup_logger("csv2sql")
    args = sys.argv[1:] if argv is None else argv
    # an empty command line is a usage error, not a silent no-op
    if not args:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    try:
        run(args)
    except Csv2SqlError as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
