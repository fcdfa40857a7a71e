"""Reading SQL source files."""

from pathlib import Path


class SqlFileReadError(Exception):
    """Raised when a SQL source file cannot be read or decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


def read_sql_file(file_path: Path) -> str:
    """
    Read a SQL source file as text.

    The file is decoded as UTF-8; a leading byte order mark is dropped so it
    never reaches the SQL tokenizer.

    Args:
        file_path: Path to the SQL file

    Returns:
        The SQL source

    Raises:
        SqlFileReadError: If the path is missing, is not a regular file, cannot
            be opened, or does not hold UTF-8 text. The underlying error is
            chained as the cause.
    """
    if not file_path.exists():
        raise SqlFileReadError(file_path, "SQL file not found")

    if not file_path.is_file():
        raise SqlFileReadError(file_path, "Path is not a file")

    try:
        return file_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise SqlFileReadError(
            file_path, f"File is not valid UTF-8 (byte {e.start})"
        ) from e
    except OSError as e:
        raise SqlFileReadError(file_path, f"Cannot read file ({e.strerror})") from e
