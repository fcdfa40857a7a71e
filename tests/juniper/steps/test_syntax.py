"""Tests for the sqlglot syntax layer."""

import pytest
from sqlglot import parse_one
from sqlglot.errors import ParseError, TokenError

from juniper.steps.syntax import (
    BodyKind,
    StatementKind,
    body_kind,
    parse_statements,
    preview,
    statement_kind,
    statement_type,
    to_sql,
)


class TestParseStatements:
    """Tests for parse_statements."""

    def test_multiple_statements(self):
        """Test statements are returned in source order."""
        statements = parse_statements("SELECT 1; DROP TABLE t1; SELECT 2")

        assert [to_sql(s) for s in statements] == [
            "SELECT 1",
            "DROP TABLE t1",
            "SELECT 2",
        ]

    def test_trailing_semicolon(self):
        """Test empty statements are dropped."""
        assert len(parse_statements("SELECT 1;;")) == 1

    def test_comment_only_source(self):
        """Test a source with nothing but comments is rejected."""
        with pytest.raises(ParseError, match="No valid SQL statements found"):
            parse_statements("-- nothing here")

    def test_invalid_sql(self):
        """Test the parse error is wrapped."""
        with pytest.raises(ParseError, match="Invalid SQL syntax"):
            parse_statements("INVALID SQL SYNTAX HERE")

    def test_unterminated_string(self):
        """Test that tokenizer errors are wrapped in ParseError."""
        with pytest.raises(ParseError, match="Invalid SQL syntax") as exc_info:
            parse_statements("SELECT 'abc FROM t1")

        assert isinstance(exc_info.value.__cause__, TokenError)


class TestClassification:
    """Tests for statement and body classification."""

    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("SELECT * FROM t1", StatementKind.QUERY),
            ("SELECT 1 UNION SELECT 2", StatementKind.QUERY),
            ("WITH a AS (SELECT 1) SELECT * FROM a", StatementKind.QUERY),
            ("INSERT INTO t1 VALUES (1)", StatementKind.INSERT),
            ("DROP TABLE t1", StatementKind.OTHER),
            ("CREATE TABLE t1 AS SELECT 1", StatementKind.OTHER),
            ("UPDATE t1 SET a = 1", StatementKind.OTHER),
            ("DELETE FROM t1", StatementKind.OTHER),
        ],
    )
    def test_statement_kind(self, sql, expected):
        """Test statements map to the closed set of kinds."""
        assert statement_kind(parse_one(sql, dialect="postgres")) == expected

    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("SELECT * FROM t1", BodyKind.SELECT),
            ("SELECT 1 UNION ALL SELECT 2", BodyKind.SET_OPERATION),
            ("SELECT 1 INTERSECT SELECT 2", BodyKind.SET_OPERATION),
            ("SELECT 1 EXCEPT SELECT 2", BodyKind.SET_OPERATION),
        ],
    )
    def test_body_kind(self, sql, expected):
        """Test query bodies map to the closed set of kinds."""
        assert body_kind(parse_one(sql, dialect="postgres")) == expected

    def test_values_body(self):
        """Test an INSERT VALUES source is a VALUES body."""
        insert = parse_one("INSERT INTO t1 VALUES (1), (2)", dialect="postgres")

        assert body_kind(insert.expression) == BodyKind.VALUES

    def test_missing_body(self):
        """Test a missing body is classified as OTHER."""
        assert body_kind(None) == BodyKind.OTHER


class TestDescriptions:
    """Tests for statement descriptions."""

    def test_statement_type(self):
        """Test human-readable statement types."""
        assert statement_type(parse_one("INSERT INTO t1 VALUES (1)")) == "INSERT"
        assert statement_type(parse_one("SELECT 1 UNION SELECT 2")) == "SELECT"
        assert statement_type(parse_one("CREATE TABLE t1 (a INT)")) == "CREATE TABLE"

    def test_preview_truncates(self):
        """Test long statements are truncated to 100 chars."""
        columns = ", ".join(f"column_{i}" for i in range(40))
        text = preview(parse_one(f"SELECT {columns} FROM t1"))

        assert len(text) == 103
        assert text.endswith("...")
