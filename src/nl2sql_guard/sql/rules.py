"""SQL safety rules and quoting vocabulary for nl2sql-guard validation."""

from __future__ import annotations

import re

from sqlglot import exp

DISALLOWED_KEYWORDS = (
    "DROP",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "INSERT",
    "UPDATE",
    "DELETE",
    "MERGE",
    "COPY",
    # Non-SQL commands occasionally emitted by the generating model.
    "PUT",
    "GET",
)

DISALLOWED_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(rf"\b{keyword}\b", re.IGNORECASE) for keyword in DISALLOWED_KEYWORDS
)

BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"

# Tokens that stay double-quoted even when the registry does not know them.
QUOTABLE_KEYWORDS = frozenset(
    {
        "select",
        "from",
        "where",
        "group",
        "by",
        "order",
        "having",
        "join",
        "left",
        "right",
        "inner",
        "outer",
        "on",
        "as",
        "and",
        "or",
        "not",
        "count",
        "sum",
        "avg",
        "min",
        "max",
        "distinct",
        "limit",
        "offset",
    }
)

IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$", re.IGNORECASE)

SQL_DIALECT = "sqlite"

ALLOWED_QUERY_ROOT_TYPES: tuple[type[exp.Expression], ...] = (
    exp.Query,
    exp.Select,
    exp.Union,
    exp.Intersect,
    exp.Except,
)
