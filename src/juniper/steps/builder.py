"""Shared helpers for building COUNT(*) queries out of parsed SQL."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlglot import exp

from juniper.global_models import DEFAULT_DIALECT
from juniper.steps.syntax import to_sql

JOIN_OPERATORS = ("method", "side", "kind", "on", "using")


def count_star() -> exp.Expression:
    """Build a fresh COUNT(*) projection."""
    return exp.Count(this=exp.Star())


def count_select() -> exp.Select:
    """Build a select whose only content is the COUNT(*) projection."""
    return exp.select(count_star())


@dataclass(frozen=True)
class CteScope:
    """CTEs visible at one nesting level, in declaration order."""

    ctes: Tuple[exp.CTE, ...] = ()
    recursive: bool = False

    @property
    def names(self) -> List[str]:
        return [cte.alias for cte in self.ctes]

    def extended(self, ctes: List[exp.CTE], recursive: bool = False) -> "CteScope":
        """Return a new scope with ``ctes`` appended after the current ones."""
        return CteScope(
            ctes=self.ctes + tuple(ctes), recursive=self.recursive or recursive
        )

    def attach(self, query: exp.Select) -> exp.Select:
        """Return a copy of ``query`` whose WITH clause is exactly this scope."""
        snapshot = query.copy()
        if self.ctes:
            snapshot.set(
                "with",
                exp.With(
                    expressions=[cte.copy() for cte in self.ctes],
                    recursive=self.recursive or None,
                ),
            )
        else:
            snapshot.set("with", None)
        return snapshot


def own_ctes(query: exp.Expression) -> Tuple[List[exp.CTE], bool]:
    """
    Get the CTEs declared directly on a query.

    Returns:
        Tuple of (CTE list in declaration order, RECURSIVE flag)
    """
    with_clause = query.args.get("with")
    if not with_clause:
        return [], False
    ctes = [cte for cte in with_clause.expressions if isinstance(cte, exp.CTE)]
    return ctes, bool(with_clause.args.get("recursive"))


@dataclass(frozen=True)
class FromItem:
    """A base relation and the joins chained onto it.

    For the first from-item ``relation`` is the FROM relation itself; for later
    ones it is the comma join that introduces the relation.
    """

    relation: exp.Expression
    joins: Tuple[exp.Join, ...] = ()


def is_comma_join(join: exp.Join) -> bool:
    """Check if a join is a plain comma separator between from-items."""
    return not any(join.args.get(key) for key in JOIN_OPERATORS)


def from_items(select: exp.Select) -> List[FromItem]:
    """
    Split the FROM clause of a select into from-items.

    sqlglot keeps every relation after the first in the ``joins`` list; a
    comma join starts a new from-item, any other join extends the current one.

    Args:
        select: The select to inspect

    Returns:
        List of FromItem in source order (empty when there is no FROM)
    """
    from_clause = select.args.get("from")
    if from_clause is None:
        return []

    items: List[FromItem] = []
    relation: exp.Expression = from_clause.this
    joins: List[exp.Join] = []

    for join in select.args.get("joins") or []:
        if is_comma_join(join):
            items.append(FromItem(relation=relation, joins=tuple(joins)))
            relation, joins = join, []
        else:
            joins.append(join)

    items.append(FromItem(relation=relation, joins=tuple(joins)))
    return items


def render(
    query: exp.Select,
    scope: Optional[CteScope] = None,
    dialect: str = DEFAULT_DIALECT,
) -> str:
    """Render a working query with its CTE scope attached."""
    if scope is None:
        scope = CteScope()
    return to_sql(scope.attach(query), dialect)
