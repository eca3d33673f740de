"""Quote repair for generated SQLite SQL.

SQLite reads ``"..."`` as an identifier and ``'...'`` as a string literal,
but generated SQL frequently double-quotes literal values such as
``WHERE industry = "Technology"``. :func:`normalize_quotes` rewrites those
tokens to single quotes while leaving real identifiers untouched. It is a
best-effort repair step: it never raises and never rejects input.
"""

from __future__ import annotations

import enum
import logging

from nl2sql_guard.schema.registry import Registry
from nl2sql_guard.sql.rules import IDENTIFIER_PATTERN, QUOTABLE_KEYWORDS

logger = logging.getLogger(__name__)


class _State(enum.Enum):
    OUTSIDE = enum.auto()
    SINGLE = enum.auto()
    DOUBLE = enum.auto()


def is_identifier_token(token: str, registry: Registry) -> bool:
    """Return whether a double-quoted token should stay an identifier."""
    lowered = token.lower()
    return (
        token in registry.known_identifiers
        or lowered in registry.known_identifiers_lower
        or lowered in QUOTABLE_KEYWORDS
        or IDENTIFIER_PATTERN.match(token) is not None
    )


def _as_literal(token: str) -> str:
    return "'" + token.replace("'", "''") + "'"


def normalize_quotes(sql: str, registry: Registry) -> str:
    """Return ``sql`` with double-quoted literal values rewritten as strings."""
    out: list[str] = []
    state = _State.OUTSIDE
    token_start = 0
    converted = 0
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]

        if state is _State.OUTSIDE:
            if ch == "'":
                out.append(ch)
                state = _State.SINGLE
            elif ch == '"':
                token_start = i + 1
                state = _State.DOUBLE
            else:
                out.append(ch)
            i += 1

        elif state is _State.SINGLE:
            out.append(ch)
            if ch == "'" and sql[i - 1] != "\\":
                state = _State.OUTSIDE
            i += 1

        else:
            end = sql.find('"', i)
            if end == -1:
                end = length
            token = sql[token_start:end]
            if is_identifier_token(token, registry):
                out.append('"' + token + '"')
            else:
                out.append(_as_literal(token))
                converted += 1
            state = _State.OUTSIDE
            i = end + 1

    # An opening quote as the very last character leaves an empty token.
    if state is _State.DOUBLE:
        out.append(_as_literal(""))
        converted += 1

    if converted:
        logger.debug("Rewrote %d double-quoted literal(s) to single quotes", converted)
    return "".join(out)
