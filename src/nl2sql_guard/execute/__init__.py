"""Execution-time error classification."""

from nl2sql_guard.execute.errors import (
    CLASSIFIERS,
    AmbiguousColumn,
    ClassifiedError,
    ColumnNotFound,
    QuoteSyntax,
    Timeout,
    classify_error,
    error_message,
    is_ambiguous_column,
    is_column_not_found,
    is_quote_syntax_error,
    is_timeout,
)

__all__ = [
    "CLASSIFIERS",
    "AmbiguousColumn",
    "ClassifiedError",
    "ColumnNotFound",
    "QuoteSyntax",
    "Timeout",
    "classify_error",
    "error_message",
    "is_ambiguous_column",
    "is_column_not_found",
    "is_quote_syntax_error",
    "is_timeout",
]
