from pathlib import Path

from src.hr_attendance.hr_attendance.database.bootstrap import iter_schema_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_file_splits_into_table_statements():
    statements = list(iter_schema_statements(SCHEMA.read_text(encoding="utf-8")))

    assert [s.split("(")[0].split()[-1] for s in statements] == ["employees", "attendance_records", "notifications"]
    assert all(not s.endswith(";") for s in statements)


def test_preamble_and_comments_are_dropped():
    sql = "-- demo\nCREATE DATABASE x;\nUSE x;\nCREATE TABLE t (\n  id INT\n);\nINSERT INTO t VALUES (1)"

    assert list(iter_schema_statements(sql)) == ["CREATE TABLE t (\n  id INT\n)", "INSERT INTO t VALUES (1)"]
