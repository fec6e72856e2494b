"""
Shape-pinned deserialization (CWE-502, CWE-611).

Externally supplied bytes are decoded only as JSON (or defusedxml-parsed XML)
into an explicit Pydantic model. Payloads that try to choose their own runtime
type, and binary object streams, are rejected before any decoding happens.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar, Union
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as DET
from pydantic import BaseModel, ValidationError

from app.exceptions import UnsafeDeserializationError

logger = logging.getLogger("mealplanner.security.serialization")

ModelT = TypeVar("ModelT", bound=BaseModel)

# Keys used by polymorphic serializers to name a runtime type
TYPE_DISCRIMINATOR_KEYS = frozenset(
    {
        "$type",
        "__type__",
        "__class__",
        "__reduce__",
        "__reduce_ex__",
        "__module__",
        "@type",
        "@class",
        "py/object",
        "py/reduce",
        "py/type",
        "py/function",
    }
)

# Pickle protocol 2+ opcode, marshal/pickle protocol 0 heuristics, YAML python tags
_BINARY_PREFIXES = (b"\x80", b"c__builtin__", b"cposix", b"(dp0", b"\xe3")
_TEXT_MARKERS = ("!!python/", "tag:yaml.org,2002:python/")

MAX_DEPTH = 32


def _as_text(payload: Union[bytes, str]) -> str:
    if isinstance(payload, bytes):
        if payload.startswith(_BINARY_PREFIXES):
            raise UnsafeDeserializationError("Binary object streams are not accepted")
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UnsafeDeserializationError("Payload is not UTF-8 text") from exc
    return payload


def find_type_discriminator(value: Any, depth: int = 0) -> Optional[str]:
    """Return the first self-describing type key found anywhere in a decoded JSON value."""
    if depth > MAX_DEPTH:
        return "<max depth>"
    if isinstance(value, dict):
        for key, item in value.items():
            if key in TYPE_DISCRIMINATOR_KEYS:
                return key
            found = find_type_discriminator(item, depth + 1)
            if found:
                return found
    elif isinstance(value, list):
        for item in value:
            found = find_type_discriminator(item, depth + 1)
            if found:
                return found
    return None


def deserialize(payload: Union[bytes, str], expected_shape: Type[ModelT]) -> ModelT:
    """
    Decode a JSON payload into expected_shape.

    Args:
        payload: Raw request bytes or text
        expected_shape: Pydantic model class the payload must match

    Returns:
        Instance of expected_shape

    Raises:
        UnsafeDeserializationError: binary stream, non-JSON text, a payload that
            names its own runtime type, or a shape mismatch
    """
    if not (isinstance(expected_shape, type) and issubclass(expected_shape, BaseModel)):
        raise UnsafeDeserializationError("Deserialization target must be an explicit model")

    text = _as_text(payload)
    if any(marker in text for marker in _TEXT_MARKERS):
        raise UnsafeDeserializationError("Payload carries language-specific type tags")

    try:
        raw = json.loads(text)
    except RecursionError as exc:
        raise UnsafeDeserializationError("Payload nests too deeply") from exc
    except ValueError as exc:
        raise UnsafeDeserializationError("Payload is not valid JSON") from exc

    discriminator = find_type_discriminator(raw)
    if discriminator:
        logger.warning("Rejected payload declaring runtime type via %r", discriminator)
        raise UnsafeDeserializationError(
            "Payload may not declare its own runtime type",
            details={"key": discriminator},
        )

    try:
        return expected_shape.model_validate(raw)
    except ValidationError as exc:
        raise UnsafeDeserializationError(
            f"Payload does not match {expected_shape.__name__}",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def parse_xml(payload: Union[bytes, str]) -> Element:
    """
    Parse untrusted XML with DTDs, entities and external references forbidden.

    Raises:
        UnsafeDeserializationError: the document is malformed or uses a
            forbidden construct
    """
    try:
        return DET.fromstring(payload, forbid_dtd=True)
    except DefusedXmlException as exc:
        raise UnsafeDeserializationError("XML uses forbidden constructs") from exc
    except DET.ParseError as exc:
        raise UnsafeDeserializationError("Payload is not well-formed XML") from exc


def _children(element: Element, leaves_only: bool = False) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for child in element:
        if child.tag in fields:
            raise UnsafeDeserializationError(
                "XML element is repeated", details={"element": child.tag}
            )
        if len(child) == 0:
            fields[child.tag] = (child.text or "").strip()
        elif leaves_only:
            raise UnsafeDeserializationError(
                "XML nests too deeply", details={"element": child.tag}
            )
        else:
            fields[child.tag] = [
                _children(item, leaves_only=True) if len(item) else (item.text or "").strip()
                for item in child
            ]
    return fields


def model_from_xml(payload: Union[bytes, str], expected_shape: Type[ModelT]) -> ModelT:
    """
    Map an XML document onto expected_shape.

    Each child of the root is a field. A leaf holds its text; an element with
    children is a list whose items are either text or a flat record, e.g.
    ``<ingredients><ingredient><ingredient_id>1</ingredient_id></ingredient></ingredients>``
    becomes ``[{"ingredient_id": "1"}]``. Repeated field elements and deeper
    nesting are rejected rather than dropped.
    """
    root = parse_xml(payload)
    raw = {k: v for k, v in _children(root).items() if v != ""}
    try:
        return expected_shape.model_validate(raw)
    except ValidationError as exc:
        raise UnsafeDeserializationError(
            f"Payload does not match {expected_shape.__name__}",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc
