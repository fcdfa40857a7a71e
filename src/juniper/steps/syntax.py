"""Thin layer over sqlglot: parsing, serialization and node classification.

Every call takes the SQL dialect explicitly so the same tree can be parsed and
rendered under different dialects in one process.
"""

from enum import Enum
from typing import List, Optional

from sqlglot import exp, parse
from sqlglot.errors import ParseError, TokenError

from juniper.global_models import DEFAULT_DIALECT


class StatementKind(str, Enum):
    """Kind of a top-level statement."""

    QUERY = "QUERY"
    INSERT = "INSERT"
    OTHER = "OTHER"


class BodyKind(str, Enum):
    """Kind of a query body."""

    SELECT = "SELECT"
    SET_OPERATION = "SET_OPERATION"
    VALUES = "VALUES"
    OTHER = "OTHER"


SET_OPERATIONS = (exp.Union, exp.Intersect, exp.Except)


def parse_statements(sql: str, dialect: str = DEFAULT_DIALECT) -> List[exp.Expression]:
    """
    Parse a SQL source into its statements.

    Args:
        sql: SQL source (can contain multiple semicolon-separated statements)
        dialect: SQL dialect used for parsing

    Returns:
        List of parsed statements in source order

    Raises:
        ParseError: If the SQL cannot be tokenized, parsed, or holds no
            statements
    """
    try:
        # Filter out None values (can happen with empty statements or comments)
        statements = [expr for expr in parse(sql, dialect=dialect) if expr is not None]

        if not statements:
            raise ParseError("No valid SQL statements found")

    except (ParseError, TokenError) as e:
        raise ParseError(f"Invalid SQL syntax: {e}") from e

    return statements


def to_sql(node: exp.Expression, dialect: str = DEFAULT_DIALECT) -> str:
    """Render a node as canonical SQL text."""
    return node.sql(dialect=dialect)


def statement_kind(statement: exp.Expression) -> StatementKind:
    """Classify a top-level statement."""
    if isinstance(statement, exp.Insert):
        return StatementKind.INSERT
    if isinstance(statement, (exp.Query, exp.Values)):
        return StatementKind.QUERY
    return StatementKind.OTHER


def body_kind(node: Optional[exp.Expression]) -> BodyKind:
    """Classify the body of a query (or of an INSERT source)."""
    if isinstance(node, exp.Select):
        return BodyKind.SELECT
    if isinstance(node, SET_OPERATIONS):
        return BodyKind.SET_OPERATION
    if isinstance(node, exp.Values):
        return BodyKind.VALUES
    return BodyKind.OTHER


def statement_type(statement: exp.Expression) -> str:
    """Get human-readable statement type."""
    if isinstance(statement, exp.Create):
        kind = statement.args.get("kind") or ""
        return f"CREATE {kind}".strip()

    if isinstance(statement, SET_OPERATIONS):
        return "SELECT"

    return type(statement).__name__.upper()


def preview(statement: exp.Expression, dialect: str = DEFAULT_DIALECT) -> str:
    """Generate preview string (first 100 chars)."""
    text = " ".join(to_sql(statement, dialect).split())
    if len(text) > 100:
        return text[:100] + "..."
    return text
