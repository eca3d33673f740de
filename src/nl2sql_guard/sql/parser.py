"""SQL parsing helpers backed by SQLGlot."""

from __future__ import annotations

from sqlglot import exp, parse
from sqlglot.errors import ParseError, TokenError

from nl2sql_guard.sql.rules import SQL_DIALECT


class SQLParseError(RuntimeError):
    """Raised when SQL cannot be parsed safely."""


def parse_sql(sql: str, *, dialect: str = SQL_DIALECT) -> exp.Expression:
    """Parse exactly one SQL statement using the target dialect."""
    normalized = sql.strip()
    if not normalized:
        raise SQLParseError("SQL cannot be empty.")

    try:
        statements = [item for item in parse(normalized, read=dialect) if item is not None]
    except (ParseError, TokenError) as exc:
        raise SQLParseError(f"Invalid SQL: {exc}") from exc

    if len(statements) != 1:
        raise SQLParseError(
            f"Expected exactly one SQL statement, found {len(statements)}."
        )
    return statements[0]
