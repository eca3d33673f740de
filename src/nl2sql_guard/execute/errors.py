"""Classification of raw database error text for the SQL repair loop.

Each ``is_*`` function accepts whatever the execution layer raised (an
exception, an object or mapping carrying ``message``, a plain string or
``None``) and returns a typed match or ``None``. They never raise.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

logger = logging.getLogger(__name__)

_INVALID_IDENTIFIER = re.compile(r"invalid identifier\s*['\"]([^'\"]+)['\"]", re.I)
_COLUMN_NOT_FOUND_PHRASE = re.compile(r"column .* not found", re.I)
_COLUMN_NOT_FOUND_NAME = re.compile(r"column ([^ ]+) not found", re.I)
_DOUBLE_QUOTED = re.compile(r'"([^"]+)"')
_NO_SUCH_COLUMN = re.compile(r"no such column:\s*[\"']([^\"']+)[\"']", re.I)
_ALL_CAPS = re.compile(r"^[A-Z_]+$")

UNKNOWN_COLUMN = "(unknown)"


@dataclass(frozen=True)
class ColumnNotFound:
    missing_columns: tuple[str, ...]
    retryable = True


@dataclass(frozen=True)
class AmbiguousColumn:
    columns: tuple[str, ...]
    retryable = True


@dataclass(frozen=True)
class Timeout:
    message: str
    retryable = False


@dataclass(frozen=True)
class QuoteSyntax:
    message: str
    needs_single_quotes: bool = False
    needs_double_quotes: bool = False
    retryable = True


ClassifiedError = Union[ColumnNotFound, AmbiguousColumn, Timeout, QuoteSyntax]


def error_message(err: Any) -> str:
    """Extract message text the way the repair loop reports it."""
    if err is None:
        return ""
    if isinstance(err, str):
        return err
    try:
        if isinstance(err, Mapping):
            message = err.get("message")
        else:
            message = getattr(err, "message", None)
        return str(message if message is not None else err)
    except Exception:  # noqa: BLE001 - classifiers must never raise
        logger.debug("Could not render error value of type %s", type(err).__name__)
        return ""


def _unique(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value))


def is_column_not_found(err: Any) -> ColumnNotFound | None:
    msg = error_message(err)
    names = _INVALID_IDENTIFIER.findall(msg)
    if names:
        return ColumnNotFound(missing_columns=_unique(names))

    if _COLUMN_NOT_FOUND_PHRASE.search(msg):
        match = _COLUMN_NOT_FOUND_NAME.search(msg)
        name = match.group(1).replace('"', "").replace("'", "") if match else ""
        return ColumnNotFound(missing_columns=_unique([name]))
    return None


def is_ambiguous_column(err: Any) -> AmbiguousColumn | None:
    msg = error_message(err)
    lowered = msg.lower()
    if "ambiguous" not in lowered or "column" not in lowered:
        return None
    columns = _unique(_DOUBLE_QUOTED.findall(msg))
    return AmbiguousColumn(columns=columns or (UNKNOWN_COLUMN,))


def is_timeout(err: Any) -> Timeout | None:
    # Also covers "Statement timeout: ..." messages.
    msg = error_message(err)
    if "timeout" in msg.lower():
        return Timeout(message=msg)
    return None


def _looks_like_literal(name: str) -> bool:
    # PascalCase identifiers are misread as literals here.
    return name[0] == name[0].upper() and not _ALL_CAPS.match(name)


def is_quote_syntax_error(err: Any) -> QuoteSyntax | None:
    msg = error_message(err)
    lowered = msg.lower()
    has_double_quote = '"' in msg

    if "unrecognized token" in lowered and has_double_quote:
        return QuoteSyntax(message=msg, needs_single_quotes=True)

    if "no such column" in lowered:
        match = _NO_SUCH_COLUMN.search(msg)
        if match and _looks_like_literal(match.group(1)):
            return QuoteSyntax(message=msg, needs_single_quotes=True)

    if ("syntax error" in lowered or "near" in lowered) and has_double_quote:
        return QuoteSyntax(message=msg, needs_single_quotes=True)
    return None


Classifier = Callable[[Any], ClassifiedError | None]

CLASSIFIERS: tuple[Classifier, ...] = (
    is_timeout,
    is_column_not_found,
    is_ambiguous_column,
    is_quote_syntax_error,
)


def classify_error(err: Any) -> ClassifiedError | None:
    """Return the first matching classification, or ``None``."""
    for classifier in CLASSIFIERS:
        result = classifier(err)
        if result is not None:
            logger.debug("Classified database error via %s", classifier.__name__)
            return result
    return None
