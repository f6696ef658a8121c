"""
db/placeholders.py
------------------
Rewrites store-agnostic `?` markers into PostgreSQL's `$1`, `$2`, ... syntax.

This is plain token substitution, not SQL parsing: a `?` inside a quoted
literal is rewritten too. Statements in this project never embed one.
"""

import re

_MARKER = re.compile(r"\?")


def to_native(sql: str) -> str:
    """
    Replace each `?` with an incrementing `$n`, left to right, starting at 1.

    >>> to_native("SELECT * FROM t WHERE a = ? AND b = ?")
    'SELECT * FROM t WHERE a = $1 AND b = $2'
    """
    index = 0

    def _next(_match: re.Match) -> str:
        nonlocal index
        index += 1
        return f"${index}"

    return _MARKER.sub(_next, sql)
