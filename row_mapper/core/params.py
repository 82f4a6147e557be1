"""SQL placeholder normalization.

Statements are written with ``?`` ordinal placeholders. Drivers that use the
``format`` paramstyle (psycopg) get ``%s`` instead, with string literals left
untouched.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Matches single-quoted string literals ('' escapes included)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^']|'')*'")

# Bare procedure names: identifiers joined by dots, nothing else
_PROCEDURE_NAME_PATTERN = re.compile(r"^[A-Za-z_][\w$]*(\.[A-Za-z_][\w$]*)*$")


def normalize_placeholders(sql: str, paramstyle: str) -> str:
    """Convert ``?`` placeholders to the target param style.

    Args:
        sql: SQL string with ``?`` placeholders.
        paramstyle: Target style - 'qmark' (no conversion) or 'format' (``%s``).

    Returns:
        SQL with placeholders converted to the target style.
    """
    if paramstyle == "qmark":
        return sql
    return _convert_to_format(sql)


@lru_cache(maxsize=256)
def _convert_to_format(sql: str) -> str:
    """Convert ? to %s outside string literals and escape literal percent signs."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_format_segment(sql[last_end:start]))
        # psycopg parses '%' inside literals too
        parts.append(match.group().replace("%", "%%"))
        last_end = end

    if last_end < len(sql):
        parts.append(_format_segment(sql[last_end:]))

    return "".join(parts)


def _format_segment(segment: str) -> str:
    return segment.replace("%", "%%").replace("?", "%s")


def is_procedure_name(sql: str) -> bool:
    """Return True if *sql* is a bare (optionally schema-qualified) procedure name.

    Anything containing whitespace, parentheses or punctuation is treated as a
    callable block and executed as-is.
    """
    return _PROCEDURE_NAME_PATTERN.match(sql.strip()) is not None
