"""
Schema walker for nested object and array schemas.

Describes the properties of a schema as plain data, recursing into nested
objects and array items up to ``MAX_DEPTH`` levels. Schemas may be cyclic
after dereferencing; the depth bound is what stops the walk.
"""

import copy
import logging
from typing import Any, Dict, Optional

from .models import ArgType

logger = logging.getLogger(__name__)

MAX_DEPTH = 10

DEPTH_LIMIT_NOTE = "recursion depth limit exceeded"


def schema_type(schema: Any) -> Optional[ArgType]:
    """Return the argument type of a schema, or None if it has no known type.

    A schema without ``type`` counts as an object when it declares properties
    and as an array when it declares items. For a list of types (OpenAPI 3.1)
    the first non-null entry is used.
    """
    if not isinstance(schema, dict):
        return None

    value = schema.get("type")
    if isinstance(value, list):
        value = next((t for t in value if t != "null"), None)
    if value is None:
        if schema.get("properties"):
            return ArgType.OBJECT
        if isinstance(schema.get("items"), dict):
            return ArgType.ARRAY
        return None

    try:
        return ArgType(value)
    except (ValueError, TypeError):
        return None


def type_label(schema: Any) -> str:
    """Return a schema's type as written, for documentation.

    Unlike ``schema_type`` this keeps types outside ``ArgType`` such as
    ``null``. A list of types gives its first non-null entry, or ``null``.
    """
    if not isinstance(schema, dict):
        return ""

    value = schema.get("type")
    if isinstance(value, list):
        names = [str(t) for t in value if t is not None]
        value = next((t for t in names if t != "null"), "null" if names else None)
    if value:
        return str(value)

    arg_type = schema_type(schema)
    return arg_type.value if arg_type else ""


def get_properties(schema: Any) -> Dict[Any, Any]:
    """Return a schema's property mapping, or an empty dict."""
    if not isinstance(schema, dict):
        return {}
    properties = schema.get("properties")
    return properties if isinstance(properties, dict) else {}


def get_items(schema: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(schema, dict):
        return None
    items = schema.get("items")
    return items if isinstance(items, dict) else None


def sorted_properties(schema: Any):
    """Yield ``(name, property_schema)`` pairs in name order."""
    properties = get_properties(schema)
    for name in sorted(properties, key=str):
        prop = properties[name]
        if isinstance(prop, dict):
            yield str(name), prop


def describe_properties(schema: Any, depth: int = 1) -> Optional[Dict[str, Any]]:
    """Describe the properties of a schema.

    Args:
        schema: The schema whose properties to describe
        depth: Nesting depth of this schema, 1 for top-level properties

    Returns:
        A mapping of property name to descriptor, None if the schema has no
        properties, or a note marking the branch as cut off once ``depth``
        exceeds ``MAX_DEPTH``
    """
    if not get_properties(schema):
        return None

    if depth > MAX_DEPTH:
        logger.debug("Schema nesting exceeds %d levels, truncating", MAX_DEPTH)
        return {"_note": DEPTH_LIMIT_NOTE}

    return {name: describe_schema(prop, depth) for name, prop in sorted_properties(schema)}


def describe_schema(schema: Dict[str, Any], depth: int) -> Dict[str, Any]:
    """Describe a single property schema found at ``depth``."""
    arg_type = schema_type(schema)
    info: Dict[str, Any] = {"type": arg_type.value if arg_type else ""}

    if schema.get("description"):
        info["description"] = schema["description"]
    if schema.get("enum"):
        info["enum"] = copy.deepcopy(list(schema["enum"]))
    if schema.get("default") is not None:
        info["default"] = copy.deepcopy(schema["default"])

    if arg_type is ArgType.ARRAY:
        items = describe_items(schema, depth)
        if items is not None:
            info["items"] = items

    if arg_type is ArgType.OBJECT:
        nested = describe_properties(schema, depth + 1)
        if nested is not None:
            info["properties"] = nested

    return info


def describe_items(schema: Dict[str, Any], depth: int) -> Optional[Dict[str, Any]]:
    """Describe the element type of an array schema found at ``depth``.

    Object items with properties get their properties described one level down.
    """
    items = get_items(schema)
    if items is None:
        return None

    item_type = schema_type(items)
    info: Dict[str, Any] = {"type": item_type.value if item_type else ""}
    if item_type is ArgType.OBJECT:
        nested = describe_properties(items, depth + 1)
        if nested is not None:
            info["properties"] = nested
    return info
