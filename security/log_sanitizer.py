"""Neutralise untrusted values before they are written to logs (CWE-117)."""

import re

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_for_log(value, max_length: int = 200) -> str:
    """Replace control characters (CR/LF included) and truncate long values."""
    text = _CONTROL_CHARS_RE.sub("?", str(value))
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text
