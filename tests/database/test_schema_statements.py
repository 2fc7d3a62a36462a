from pathlib import Path

from src.shift_attendance.shift_attendance.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_schema_splits_into_create_table_statements():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))

    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 5
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    assert "version INT NOT NULL" in statements[-1]


def test_semicolons_inside_quotes_do_not_split():
    sql = "INSERT INTO t VALUES ('a;b');\n-- comment;\nSELECT 1;"

    assert list(_iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
