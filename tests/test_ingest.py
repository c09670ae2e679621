import io
import logging

import pytest

from csv2sql.errors import IngestError
from csv2sql.ingest import create_table_from_csv, create_table_from_reader, read_records
from csv2sql.session import Session


@pytest.fixture
def session():
    s = Session(stdout=io.StringIO())
    yield s
    s.close()


def get_columns(conn, table):
    return [row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()]


def ingest(session, table, text):
    return create_table_from_reader(session, table, io.StringIO(text), "test")


def test_read_records_is_lenient():
    records = read_records(io.StringIO('a, b\n1,  "x y"\n2,a"b\n\n3\n'), "test")
    assert records == [["a", "b"], ["1", "x y"], ["2", 'a"b'], ["3"]]


def test_columns_are_sanitized(session):
    ingest(session, "t", "First Name,e-mail,age\nann,a@x,3\n")
    assert get_columns(session.conn, "t") == ["First_Name", "e_mail", "age"]


def test_every_row_has_header_width(session):
    total = ingest(session, "t", "a,b,c\n1,2,3\n4\n5,6\n")
    assert total == 3
    rows = session.conn.execute("select a, b, c from t order by a").fetchall()
    assert rows == [("1", "2", "3"), ("4", None, None), ("5", "6", None)]


def test_values_are_stored_as_text(session):
    ingest(session, "t", "n\n42\n")
    assert session.conn.execute("select typeof(n) from t").fetchone() == ("text",)


def test_empty_fields_stay_empty_strings(session):
    ingest(session, "t", "a,b\n,x\n")
    assert session.conn.execute("select a from t").fetchone() == ("",)


def test_header_only_source_creates_empty_table(session):
    assert ingest(session, "t", "a,b\n") == 0
    assert get_columns(session.conn, "t") == ["a", "b"]


def test_empty_source_is_fatal(session):
    with pytest.raises(IngestError, match="no header row"):
        ingest(session, "t", "")


def test_rows_longer_than_header_are_fatal(session):
    with pytest.raises(IngestError, match="error inserting record"):
        ingest(session, "t", "a\n1,2\n")


def test_duplicate_sanitized_columns_are_fatal(session):
    with pytest.raises(IngestError, match="error creating table t"):
        ingest(session, "t", "x y,x-y\n1,2\n")


def test_existing_table_accumulates_with_warning(session, caplog):
    ingest(session, "t", "a\n1\n")
    with caplog.at_level(logging.WARNING, logger="csv2sql"):
        ingest(session, "t", "a\n2\n")
    assert "table t already exists" in caplog.text
    assert session.conn.execute("select count(*) from t").fetchone() == (2,)


def test_replace_drops_previous_table(session):
    ingest(session, "t", "a\n1\n2\n")
    session.replace = True
    ingest(session, "t", "b\n3\n")
    assert get_columns(session.conn, "t") == ["b"]
    assert session.conn.execute("select b from t").fetchall() == [("3",)]


def test_create_table_from_csv_file(session, tmp_path):
    path = tmp_path / "people.csv"
    path.write_text("\ufeffname,age\nann,3\nbob,5\n", encoding="utf-8")
    assert create_table_from_csv(session, "people", str(path)) == 2
    assert get_columns(session.conn, "people") == ["name", "age"]


def test_create_table_from_missing_file(session, tmp_path):
    with pytest.raises(IngestError, match="error opening the CSV file"):
        create_table_from_csv(session, "t", str(tmp_path / "missing.csv"))


def test_large_cells_are_accepted(session):
    big = "x" * 200000
    assert ingest(session, "t", f"a,b\n{big},1\n") == 1
    assert session.conn.execute("select length(a) from t").fetchone() == (200000,)


def test_only_spaces_are_skipped_before_a_field():
    records = read_records(io.StringIO("a,b\n1, \t2\n"), "test")
    assert records[1] == ["1", "\t2"]


def test_ingest_joins_open_transaction(session):
    session.conn.execute("begin")
    ingest(session, "t", "a\n1\n")
    assert session.conn.in_transaction
    session.conn.execute("rollback")
    assert session.conn.execute(
        "select count(*) from sqlite_master where name = 't'").fetchone() == (0,)
