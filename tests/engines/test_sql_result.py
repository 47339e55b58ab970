"""Unit tests for engines.sql.result."""

from unittest.mock import MagicMock

from pgwild.engines.sql.result import QueryResult, parse_result, result_from_cursor


def _cursor(status: str | None, rows: list[tuple] | None = None, rowcount: int = 0) -> MagicMock:
    cur = MagicMock()
    cur.statusmessage = status
    cur.rowcount = rowcount
    if rows is None:
        cur.description = None
    else:
        cur.description = [("n",)]
        cur.fetchall.return_value = rows
    return cur


class TestParseResult:
    def test_insert_without_rows_returns_rowcount(self):
        assert parse_result(QueryResult("INSERT", [], 3)) == 3

    def test_insert_returning_rows(self):
        rows = [{"id": 1}]
        assert parse_result(QueryResult("INSERT", rows, 1)) == rows

    def test_update_and_delete(self):
        assert parse_result(QueryResult("UPDATE", [], 0)) == 0
        assert parse_result(QueryResult("DELETE", [{"id": 2}], 1)) == [{"id": 2}]

    def test_select_always_rows(self):
        assert parse_result(QueryResult("SELECT", [], 0)) == []
        assert parse_result(QueryResult("SELECT", [{"n": 1}], 1)) == [{"n": 1}]

    def test_other_command_unchanged(self):
        r = QueryResult("BEGIN", [], -1)
        assert parse_result(r) is r


class TestResultFromCursor:
    def test_select(self):
        r = result_from_cursor(_cursor("SELECT 1", rows=[(1,)], rowcount=1))
        assert r == QueryResult("SELECT", [{"n": 1}], 1)

    def test_insert(self):
        r = result_from_cursor(_cursor("INSERT 0 3", rowcount=3))
        assert r == QueryResult("INSERT", [], 3)

    def test_no_status(self):
        r = result_from_cursor(_cursor(None))
        assert r.command == ""

    def test_rowcount_none(self):
        cur = _cursor("CREATE TABLE")
        cur.rowcount = None
        assert result_from_cursor(cur).rowcount == 0
