"""Utility functions for juniper."""

from juniper.utils.config import ConfigSettings, find_config_file, load_config
from juniper.utils.file_utils import SqlFileReadError, read_sql_file

__all__ = [
    "ConfigSettings",
    "SqlFileReadError",
    "find_config_file",
    "load_config",
    "read_sql_file",
]
