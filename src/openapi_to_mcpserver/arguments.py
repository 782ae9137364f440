"""
Derive tool arguments from operation parameters and request bodies.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Set

from .models import Arg, ArgPosition, ArgType
from .schema import describe_items, describe_properties, schema_type, sorted_properties

logger = logging.getLogger(__name__)

BODY_CONTENT_TYPES = ("application/json", "application/x-www-form-urlencoded")

PARAMETER_POSITIONS = ("query", "path", "header", "cookie")


def schema_arg(
    name: str,
    description: str,
    schema: Any,
    required: bool,
    position: ArgPosition,
) -> Arg:
    """Build an argument, taking type and nested detail from its schema."""
    arg = Arg(
        name=name,
        description=description or "",
        required=required,
        position=position,
    )
    if not isinstance(schema, dict):
        return arg

    arg.type = schema_type(schema)
    if schema.get("enum"):
        arg.enum = copy.deepcopy(list(schema["enum"]))
    if schema.get("default") is not None:
        arg.default = copy.deepcopy(schema["default"])

    # The argument sits one level above its own properties and item properties
    if arg.type is ArgType.ARRAY:
        arg.items = describe_items(schema, 0)
    if arg.type is ArgType.OBJECT:
        arg.properties = describe_properties(schema, 1)

    return arg


def _parameter_schema(param: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    schema = param.get("schema")
    if isinstance(schema, dict):
        return schema

    # Parameters may describe their value through a content map instead
    content = param.get("content")
    if isinstance(content, dict):
        for content_type in sorted(content):
            media = content[content_type]
            if isinstance(media, dict) and isinstance(media.get("schema"), dict):
                return media["schema"]
    return None


def convert_parameters(parameters: List[Dict[str, Any]]) -> List[Arg]:
    """Convert OpenAPI parameters to arguments.

    Parameters without a name, or placed anywhere but the query, path, headers
    or cookies (such as Swagger 2 `body` and `formData` parameters), are skipped.
    """
    args = []
    for param in parameters:
        if not isinstance(param, dict):
            continue

        name = param.get("name")
        if not name:
            logger.warning("Skipping parameter without a name")
            continue
        location = param.get("in")
        if location not in PARAMETER_POSITIONS:
            logger.warning("Skipping parameter %s with unsupported location %r", name, location)
            continue
        position = ArgPosition(location)

        args.append(
            schema_arg(
                str(name),
                param.get("description", ""),
                _parameter_schema(param),
                bool(param.get("required", False)),
                position,
            )
        )
    return args


def convert_request_body(request_body: Optional[Dict[str, Any]]) -> List[Arg]:
    """Convert the top-level properties of a request body to body arguments.

    Only JSON and form-encoded content is considered. Every qualifying content
    type contributes its own arguments, so a property declared under two
    content types yields two arguments with the same name.
    """
    if not isinstance(request_body, dict):
        return []
    content = request_body.get("content")
    if not isinstance(content, dict):
        return []

    args: List[Arg] = []
    seen: Set[str] = set()
    for content_type in sorted(content):
        media = content[content_type]
        schema = media.get("schema") if isinstance(media, dict) else None
        if not isinstance(schema, dict):
            continue

        if not any(body_type in content_type for body_type in BODY_CONTENT_TYPES):
            logger.debug("Skipping request body content type %s", content_type)
            continue
        if schema_type(schema) is not ArgType.OBJECT:
            continue

        required = schema.get("required")
        required = {str(r) for r in required} if isinstance(required, list) else set()
        names = set()
        for name, prop in sorted_properties(schema):
            if name in seen:
                logger.warning(
                    "Body argument %s is declared again under %s", name, content_type
                )
            names.add(name)
            args.append(
                schema_arg(
                    name,
                    prop.get("description", ""),
                    prop,
                    name in required,
                    ArgPosition.BODY,
                )
            )
        seen.update(names)

    return args


def derive_args(
    parameters: List[Dict[str, Any]], request_body: Optional[Dict[str, Any]]
) -> List[Arg]:
    """Return the sorted arguments of an operation."""
    args = convert_parameters(parameters) + convert_request_body(request_body)
    return sorted(args, key=lambda arg: arg.name)
