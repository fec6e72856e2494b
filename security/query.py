"""
Parameterized query construction.

User supplied values reach the database only as bound parameters. The SQL
text passed to bound_query() must be a constant; the static scanner
(security.static_rules) rejects f-strings, concatenation and .format() here.
"""

import re

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from app.exceptions import ServiceValidationError

# ":name" placeholders, skipping "::type" casts
_PLACEHOLDER_RE = re.compile(r"(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)")


def placeholders(sql: str) -> set[str]:
    """Return the bind parameter names referenced in a SQL string."""
    return set(_PLACEHOLDER_RE.findall(sql))


def bound_query(sql: str, **params) -> TextClause:
    """
    Build a text() clause whose values are supplied only as bind parameters.

    Raises:
        ServiceValidationError: a placeholder has no value, or a value has no
            placeholder (a sign the caller meant to splice it into the text)
    """
    names = placeholders(sql)
    missing = names - params.keys()
    unused = params.keys() - names
    if missing:
        raise ServiceValidationError(
            "Query placeholders without values", details={"missing": sorted(missing)}
        )
    if unused:
        raise ServiceValidationError(
            "Query values without placeholders", details={"unused": sorted(unused)}
        )
    return text(sql).bindparams(**params)
