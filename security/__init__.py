"""
Security package - input validation and secure-primitive policy.

Each module is an independent, stateless checker used at the boundary
between untrusted input and the data store, file system, crypto or markup.
"""

from security.path_sanitizer import resolve as resolve_path
from security.query import bound_query
from security.crypto import (
    hash_password,
    verify_password,
    random_bytes,
    generate_token,
    check_primitive,
)
from security.serialization import deserialize, parse_xml, model_from_xml
from security.output import encode_for_html, render_recipe_card
from security.secret_source import SecretSource
from security.log_sanitizer import sanitize_for_log

__all__ = [
    "resolve_path",
    "bound_query",
    "hash_password",
    "verify_password",
    "random_bytes",
    "generate_token",
    "check_primitive",
    "deserialize",
    "parse_xml",
    "model_from_xml",
    "encode_for_html",
    "render_recipe_card",
    "SecretSource",
    "sanitize_for_log",
]
