"""Juniper - clause-by-clause row-count debugging for SQL."""

__version__ = "0.1.0"
