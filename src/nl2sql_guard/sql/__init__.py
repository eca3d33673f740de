"""SQL quoting, safety and semantic validation utilities."""

from nl2sql_guard.sql.parser import SQLParseError, parse_sql
from nl2sql_guard.sql.quotes import normalize_quotes
from nl2sql_guard.sql.safety import ValidationResult, scan_statement_safety
from nl2sql_guard.sql.validator import (
    SemanticValidationResult,
    SQLValidationError,
    SQLValidationResult,
    ensure_valid_sql,
    validate_semantics,
    validate_sql,
)

__all__ = [
    "SQLParseError",
    "parse_sql",
    "normalize_quotes",
    "ValidationResult",
    "scan_statement_safety",
    "SemanticValidationResult",
    "SQLValidationError",
    "SQLValidationResult",
    "validate_semantics",
    "validate_sql",
    "ensure_valid_sql",
]
