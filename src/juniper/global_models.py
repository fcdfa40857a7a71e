"""Shared models and enums used across juniper modules."""

from enum import Enum


class OutputFormat(str, Enum):
    """Output format for analysis reports."""

    TEXT = "text"
    JSON = "json"
    CSV = "csv"
    SQL = "sql"


DEFAULT_DIALECT = "postgres"
