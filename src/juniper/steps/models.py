"""Pydantic models for clause-step analysis results."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ClauseType(str, Enum):
    """Clause element added by a single decomposition step."""

    TABLE = "TABLE"
    JOIN = "JOIN"
    WHERE = "WHERE"
    GROUP_BY = "GROUP_BY"
    HAVING = "HAVING"


class PayloadKind(str, Enum):
    """Shape of the rows supplied to an INSERT."""

    SELECT = "SELECT"
    VALUES = "VALUES"


class UnsupportedInsertSourceError(ValueError):
    """Raised when an INSERT source is neither a SELECT nor a VALUES list."""

    def __init__(self, source_kind: str, statement_index: Optional[int] = None):
        self.source_kind = source_kind
        self.statement_index = statement_index
        location = (
            f"statement {statement_index}" if statement_index is not None else "INSERT"
        )
        super().__init__(
            f"Cannot count the payload of {location}: "
            f"unsupported INSERT source ({source_kind})"
        )


class ClauseStep(BaseModel):
    """A single COUNT(*) query produced by clause decomposition."""

    step_index: int = Field(..., description="0-based position within the query")
    clause: ClauseType = Field(..., description="Clause element this step adds")
    sql: str = Field(..., description="COUNT(*) query text for this step")
    cte_name: Optional[str] = Field(
        None, description="CTE whose inner query produced the step (None = main body)"
    )


class QueryAnalysis(BaseModel):
    """Decomposition of one top-level query."""

    statement_index: int = Field(..., description="0-based statement index in file")
    sql: str = Field(..., description="Canonical text of the original query")
    steps: List[ClauseStep] = Field(
        default_factory=list,
        description="Clause steps in execution order (empty for UNION/VALUES)",
    )

    @property
    def step_sqls(self) -> List[str]:
        """Get the step query texts in order."""
        return [step.sql for step in self.steps]


class InsertAnalysis(BaseModel):
    """Row-count queries for one INSERT statement."""

    statement_index: int = Field(..., description="0-based statement index in file")
    insert_statement: str = Field(..., description="Canonical text of the INSERT")
    target_table: str = Field(..., description="Qualified name of the target table")
    target_table_initial_count: str = Field(
        ..., description="Query counting the rows already in the target table"
    )
    payload_count: str = Field(
        ..., description="Query counting the rows the INSERT would add"
    )
    payload_kind: PayloadKind = Field(..., description="Shape of the INSERT source")


class SkippedStatement(BaseModel):
    """Information about a statement that could not be analyzed."""

    statement_index: int = Field(..., description="0-based statement index")
    statement_type: str = Field(..., description="Type of SQL statement")
    reason: str = Field(..., description="Reason for skipping")
    statement_preview: str = Field(..., description="First 100 chars of statement")


class Analysis(BaseModel):
    """Complete analysis of a SQL file."""

    queries: List[QueryAnalysis] = Field(default_factory=list)
    inserts: List[InsertAnalysis] = Field(default_factory=list)
    skipped: List[SkippedStatement] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether no statement produced an analysis."""
        return not self.queries and not self.inserts

    def get_query(self, statement_index: int) -> Optional[QueryAnalysis]:
        """Find the query analysis for a statement index.

        Args:
            statement_index: The 0-based statement index in the source file.

        Returns:
            The matching QueryAnalysis or None if the statement is not a query.
        """
        for query in self.queries:
            if query.statement_index == statement_index:
                return query
        return None
