"""Statement-level safety scan run before any SQL reaches the database."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nl2sql_guard.sql.parser import SQLParseError, parse_sql
from nl2sql_guard.sql.rules import (
    ALLOWED_QUERY_ROOT_TYPES,
    BLOCK_COMMENT_CLOSE,
    BLOCK_COMMENT_OPEN,
    DISALLOWED_PATTERNS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate outcome of a validation pass."""

    ok: bool
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {"ok": self.ok, "issues": list(self.issues)}


def _has_multiple_statements(sql: str) -> bool:
    cleaned = sql.strip()
    semis = cleaned.count(";")
    return semis > 1 or (semis == 1 and not cleaned.endswith(";"))


def scan_statement_safety(sql: str, *, strict: bool = False) -> ValidationResult:
    """Reject multi-statement, destructive, or malformed SQL.

    Every rule is evaluated so the caller receives all problems at once.
    With ``strict`` the statement must also parse as a single query.
    """
    issues: list[str] = []

    if _has_multiple_statements(sql):
        issues.append("Multiple statements detected.")

    for pattern in DISALLOWED_PATTERNS:
        if pattern.search(sql):
            issues.append(f"Disallowed token: {pattern.pattern}")

    if sql.count(BLOCK_COMMENT_OPEN) != sql.count(BLOCK_COMMENT_CLOSE):
        issues.append("Unclosed or unmatched block comment.")

    if strict:
        try:
            expression = parse_sql(sql)
        except SQLParseError as exc:
            issues.append(str(exc))
        else:
            if not isinstance(expression, ALLOWED_QUERY_ROOT_TYPES):
                issues.append("Only SELECT query forms are allowed.")

    if issues:
        logger.debug("Statement safety scan found %d issue(s)", len(issues))
    return ValidationResult(ok=not issues, issues=issues)
