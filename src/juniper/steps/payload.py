"""Row-count queries for INSERT statements."""

from sqlglot import exp

from juniper.global_models import DEFAULT_DIALECT
from juniper.steps.builder import CteScope, count_select, count_star, own_ctes
from juniper.steps.models import (
    InsertAnalysis,
    PayloadKind,
    UnsupportedInsertSourceError,
)
from juniper.steps.syntax import BodyKind, body_kind, to_sql

# Alias of the source select when it is counted as a subquery
PAYLOAD_ALIAS = "payload"

# Select keys that make the row count depend on more than FROM and WHERE
ROW_LIMITING_CLAUSES = ("limit", "offset", "fetch")
ROW_SHAPING_CLAUSES = ("distinct", "group", "having", "qualify") + ROW_LIMITING_CLAUSES


def analyze_insert(
    insert: exp.Insert,
    dialect: str = DEFAULT_DIALECT,
    statement_index: int = 0,
) -> InsertAnalysis:
    """
    Build the target-count and payload-count queries of an INSERT.

    Args:
        insert: Parsed INSERT statement
        dialect: SQL dialect used to render the queries
        statement_index: Index of the statement in its source file

    Returns:
        InsertAnalysis for the statement

    Raises:
        UnsupportedInsertSourceError: If the source is neither a SELECT nor
            a VALUES list
    """
    table = target_table(insert)
    source = insert.expression
    kind = body_kind(source)

    if kind == BodyKind.SELECT:
        payload_kind = PayloadKind.SELECT
        payload_count = to_sql(_count_payload_select(insert, source), dialect)
    elif kind == BodyKind.VALUES:
        payload_kind = PayloadKind.VALUES
        row_count = exp.Literal.number(len(source.expressions))
        payload_count = to_sql(exp.select(row_count), dialect)
    else:
        source_kind = type(source).__name__.upper() if source is not None else "NONE"
        raise UnsupportedInsertSourceError(source_kind, statement_index=statement_index)

    return InsertAnalysis(
        statement_index=statement_index,
        insert_statement=to_sql(insert, dialect),
        target_table=to_sql(table, dialect),
        target_table_initial_count=to_sql(count_select().from_(table.copy()), dialect),
        payload_count=payload_count,
        payload_kind=payload_kind,
    )


def target_table(insert: exp.Insert) -> exp.Expression:
    """Get the target table of an INSERT, without its column list."""
    target = insert.this
    if isinstance(target, exp.Schema):
        target = target.this
    return target


def _count_payload_select(insert: exp.Insert, source: exp.Select) -> exp.Select:
    """
    Build the COUNT(*) query of an INSERT ... SELECT source.

    A plain select is counted by swapping its projection for COUNT(*). When
    the source deduplicates, groups, aggregates or limits its rows, the
    projection determines the row count, so the source is counted as a
    subquery instead.

    Args:
        insert: INSERT statement, for the CTEs written before INSERT
        source: The INSERT's source select

    Returns:
        Payload count query with every CTE the source can reference
    """
    if _shapes_rows(source):
        inner = source.copy()
        inner.set("with", None)
        if not any(inner.args.get(clause) for clause in ROW_LIMITING_CLAUSES):
            inner.set("order", None)
        payload = count_select().from_(inner.subquery(PAYLOAD_ALIAS))
    else:
        payload = source.select(count_star(), append=False)
        payload.set("order", None)

    # CTEs written before INSERT belong to the payload query as well
    insert_ctes, insert_recursive = own_ctes(insert)
    source_ctes, source_recursive = own_ctes(source)
    scope = CteScope().extended(insert_ctes, insert_recursive)
    return scope.extended(source_ctes, source_recursive).attach(payload)


def _shapes_rows(select: exp.Select) -> bool:
    """Check if the projection or a trailing clause changes the row count."""
    if any(select.args.get(clause) for clause in ROW_SHAPING_CLAUSES):
        return True
    return any(
        _collapses_rows(aggregate, select)
        for projection in select.expressions
        for aggregate in projection.find_all(exp.AggFunc)
    )


def _collapses_rows(aggregate: exp.AggFunc, select: exp.Select) -> bool:
    # Window aggregates and aggregates of scalar subqueries keep every row
    return aggregate.find_ancestor(exp.Window, exp.Select) is select
