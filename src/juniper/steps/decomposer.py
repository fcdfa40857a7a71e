"""Clause decomposition: rebuild a query one clause element at a time.

Every step is a ``COUNT(*)`` query that differs from the previous one by a
single table, join, filter or grouping key, so running the steps in order
shows which clause changes the row count.
"""

from typing import Iterator, List, Optional, Tuple

from sqlglot import exp

from juniper.global_models import DEFAULT_DIALECT
from juniper.steps.builder import CteScope, count_select, from_items, own_ctes, render
from juniper.steps.models import ClauseStep, ClauseType
from juniper.steps.syntax import BodyKind, body_kind

# Group modifiers that are not plain grouping expressions
GROUP_MODIFIERS = ("grouping_sets", "cube", "rollup", "totals", "all")


def decompose(query: exp.Expression, dialect: str = DEFAULT_DIALECT) -> List[str]:
    """
    Decompose a query into incremental COUNT(*) query texts.

    Args:
        query: Parsed query (SELECT, set operation, VALUES, ...)
        dialect: SQL dialect used to render the steps

    Returns:
        Step texts: the steps of each CTE in declaration order, then the
        steps of the main body. Empty when the body is not a SELECT.
    """
    return [step.sql for step in iter_clause_steps(query, dialect=dialect)]


def iter_clause_steps(
    query: exp.Expression,
    dialect: str = DEFAULT_DIALECT,
    scope: Optional[CteScope] = None,
) -> Iterator[ClauseStep]:
    """
    Yield the clause steps of a query, numbered from 0.

    Args:
        query: Parsed query
        dialect: SQL dialect used to render the steps
        scope: CTEs inherited from enclosing queries

    Yields:
        ClauseStep objects in order
    """
    for step_index, (clause, sql, cte_name) in enumerate(
        _walk(query, scope or CteScope(), dialect, cte_name=None)
    ):
        yield ClauseStep(
            step_index=step_index, clause=clause, sql=sql, cte_name=cte_name
        )


def _walk(
    query: exp.Expression,
    scope: CteScope,
    dialect: str,
    cte_name: Optional[str],
) -> Iterator[Tuple[ClauseType, str, Optional[str]]]:
    """
    Walk a query's CTEs depth-first, then its own clauses.

    Args:
        query: Query whose steps are generated
        scope: CTEs visible from the enclosing queries
        dialect: SQL dialect used to render the steps
        cte_name: Name of the CTE this query defines, None for the main body

    Yields:
        (clause, rendered step SQL, CTE name) tuples
    """
    ctes, recursive = own_ctes(query)

    # Each CTE only sees the CTEs declared before it
    for position, cte in enumerate(ctes):
        cte_scope = scope.extended(ctes[:position], recursive=recursive)
        yield from _walk(cte.this, cte_scope, dialect, cte_name=cte.alias)

    # Set operations and VALUES lists have no clauses to add one by one
    if body_kind(query) != BodyKind.SELECT:
        return

    visible = scope.extended(ctes, recursive=recursive)
    for clause, working in _select_snapshots(query):
        yield clause, render(working, visible, dialect), cte_name


def _select_snapshots(select: exp.Select) -> Iterator[Tuple[ClauseType, exp.Select]]:
    """Yield (clause, working select) pairs, each a fresh copy of the last."""
    working = count_select()

    for item in from_items(select):
        if isinstance(item.relation, exp.Join):
            working = working.join(item.relation.copy())
        else:
            working = working.from_(item.relation.copy())
        yield ClauseType.TABLE, working

        for join in item.joins:
            working = working.join(join.copy())
            yield ClauseType.JOIN, working

    where = select.args.get("where")
    if where is not None:
        working = working.where(where.this.copy())
        yield ClauseType.WHERE, working

    group = select.args.get("group")
    if group is not None:
        for key in group.expressions:
            working = working.group_by(key.copy())
            yield ClauseType.GROUP_BY, working

        if any(group.args.get(modifier) for modifier in GROUP_MODIFIERS):
            working = working.copy()
            working.set("group", group.copy())
            yield ClauseType.GROUP_BY, working

    having = select.args.get("having")
    if having is not None:
        working = working.having(having.this.copy())
        yield ClauseType.HAVING, working
