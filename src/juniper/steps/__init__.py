"""Clause-step analysis: decompose queries into incremental COUNT(*) queries."""

from juniper.steps.analyzer import StepAnalyzer, analyze
from juniper.steps.decomposer import decompose, iter_clause_steps
from juniper.steps.models import (
    Analysis,
    ClauseStep,
    ClauseType,
    InsertAnalysis,
    PayloadKind,
    QueryAnalysis,
    SkippedStatement,
    UnsupportedInsertSourceError,
)
from juniper.steps.payload import analyze_insert

__all__ = [
    "Analysis",
    "ClauseStep",
    "ClauseType",
    "InsertAnalysis",
    "PayloadKind",
    "QueryAnalysis",
    "SkippedStatement",
    "StepAnalyzer",
    "UnsupportedInsertSourceError",
    "analyze",
    "analyze_insert",
    "decompose",
    "iter_clause_steps",
]
