"""Analysis of a SQL file: clause steps for queries, counts for inserts."""

from typing import List

from sqlglot import exp

from juniper.global_models import DEFAULT_DIALECT
from juniper.steps.decomposer import iter_clause_steps
from juniper.steps.models import (
    Analysis,
    QueryAnalysis,
    SkippedStatement,
    UnsupportedInsertSourceError,
)
from juniper.steps.payload import analyze_insert
from juniper.steps.syntax import (
    StatementKind,
    parse_statements,
    preview,
    statement_kind,
    statement_type,
    to_sql,
)


class StepAnalyzer:
    """Analyze every statement of a SQL source."""

    def __init__(
        self,
        sql: str,
        dialect: str = DEFAULT_DIALECT,
        skip_unsupported_inserts: bool = False,
    ):
        """
        Initialize the step analyzer.

        Args:
            sql: SQL source (can contain multiple statements)
            dialect: SQL dialect used for parsing and rendering
            skip_unsupported_inserts: Record INSERTs with an unsupported source
                as skipped instead of failing the whole analysis

        Raises:
            ParseError: If the SQL cannot be parsed
        """
        self.sql = sql
        self.dialect = dialect
        self.skip_unsupported_inserts = skip_unsupported_inserts
        self.statements: List[exp.Expression] = parse_statements(sql, dialect=dialect)

    def analyze(self) -> Analysis:
        """
        Analyze all statements in source order.

        Queries produce a QueryAnalysis, inserts an InsertAnalysis; every
        other statement is ignored.

        Returns:
            Analysis for the whole source

        Raises:
            UnsupportedInsertSourceError: If an INSERT source cannot be counted
                and unsupported inserts are not skipped
        """
        analysis = Analysis()

        for statement_index, statement in enumerate(self.statements):
            kind = statement_kind(statement)

            if kind == StatementKind.QUERY:
                analysis.queries.append(self.analyze_query(statement, statement_index))

            elif kind == StatementKind.INSERT:
                try:
                    analysis.inserts.append(
                        analyze_insert(
                            statement,
                            dialect=self.dialect,
                            statement_index=statement_index,
                        )
                    )
                except UnsupportedInsertSourceError as e:
                    if not self.skip_unsupported_inserts:
                        raise
                    analysis.skipped.append(
                        SkippedStatement(
                            statement_index=statement_index,
                            statement_type=statement_type(statement),
                            reason=str(e),
                            statement_preview=preview(statement, self.dialect),
                        )
                    )

        return analysis

    def analyze_query(
        self, query: exp.Expression, statement_index: int = 0
    ) -> QueryAnalysis:
        """Decompose a single query into its clause steps."""
        return QueryAnalysis(
            statement_index=statement_index,
            sql=to_sql(query, self.dialect),
            steps=list(iter_clause_steps(query, dialect=self.dialect)),
        )


def analyze(sql: str, dialect: str = DEFAULT_DIALECT) -> Analysis:
    """Parse and analyze a SQL source in one call."""
    return StepAnalyzer(sql, dialect=dialect).analyze()
