"""
Request and response templates for generated tools.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import ArgType, Header, RequestTemplate, ResponseTemplate
from .schema import (
    MAX_DEPTH,
    get_items,
    get_properties,
    schema_type,
    sorted_properties,
    type_label,
)

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_TEMPLATE_PATH = Path(__file__).parent / "conf" / "response_template.md"

FALLBACK_PREAMBLE = "# API Response Information\n\n## Response Structure\n\n"

ORIGINAL_RESPONSE_MARKER = "\n## Original Response\n\n"


def server_base_url(servers: List[Any]) -> str:
    """Return the first server URL without its trailing slash."""
    if not servers or not isinstance(servers[0], dict):
        return ""
    return str(servers[0].get("url") or "").rstrip("/")


def build_request_template(
    servers: List[Any],
    path: str,
    method: str,
    request_body: Optional[Dict[str, Any]] = None,
) -> RequestTemplate:
    """Create the request template for an operation.

    Args:
        servers: The document's server objects
        path: The operation path, placeholders left as they are
        method: HTTP method of the operation
        request_body: The operation's request body, if any

    Returns:
        The request template
    """
    template = RequestTemplate(url=server_base_url(servers) + path, method=method.upper())

    content = request_body.get("content") if isinstance(request_body, dict) else None
    if isinstance(content, dict) and content:
        # Smallest content type, so the choice does not depend on declaration order
        template.headers.append(Header(key="Content-Type", value=min(content, key=str)))

    return template


def find_success_response(responses: Any) -> Optional[Dict[str, Any]]:
    """Return the 2xx response with the smallest status code, if any."""
    if not isinstance(responses, dict):
        return None

    candidates = {
        str(code): response
        for code, response in responses.items()
        if str(code).startswith("2") and isinstance(response, dict)
    }
    if not candidates:
        return None
    return candidates[min(candidates)]


def _bullet(indent: str, path: str, schema: Dict[str, Any]) -> str:
    text = f"{indent}- **{path}**:"
    if schema.get("description"):
        text += f" {schema['description']}"
    label = type_label(schema)
    if label:
        text += f" (Type: {label})"
    return text + "\n"


def describe_nested(schema: Dict[str, Any], path: str, depth: int) -> List[str]:
    """Describe the nested fields below ``path``, one indented bullet per field."""
    if depth > MAX_DEPTH:
        return []

    indent = "  " * depth
    lines: List[str] = []
    arg_type = schema_type(schema)

    if arg_type is ArgType.ARRAY:
        items = get_items(schema)
        if items is None:
            return lines
        item_type = schema_type(items)
        if item_type is ArgType.OBJECT and get_properties(items):
            for name, prop in sorted_properties(items):
                prop_path = f"{path}[].{name}"
                lines.append(_bullet(indent, prop_path, prop))
                lines.extend(describe_nested(prop, prop_path, depth + 1))
        elif type_label(items):
            lines.append(f"{indent}- **{path}[]**: Items of type {type_label(items)}\n")
        return lines

    if arg_type is ArgType.OBJECT:
        for name, prop in sorted_properties(schema):
            prop_path = f"{path}.{name}"
            lines.append(_bullet(indent, prop_path, prop))
            lines.extend(describe_nested(prop, prop_path, depth + 1))

    return lines


def describe_response_schema(schema: Dict[str, Any]) -> List[str]:
    """Describe every field of a response schema as markdown bullets."""
    arg_type = schema_type(schema)

    if arg_type is ArgType.ARRAY and get_items(schema) is not None:
        lines = ["- **items**: Array of items (Type: array)\n"]
        lines.extend(describe_nested(schema, "items", 1))
        return lines

    lines = []
    if arg_type is ArgType.OBJECT:
        for name, prop in sorted_properties(schema):
            lines.append(_bullet("", name, prop))
            lines.extend(describe_nested(prop, name, 1))
    return lines


class ResponseTemplateBuilder:
    """Builds response templates documenting each operation's success response.

    The documentation starts with a preamble: the text given here, otherwise
    the contents of the default template file, otherwise a short built-in
    header. The file is read at most once per builder.
    """

    def __init__(
        self,
        preamble: Optional[str] = None,
        default_template_path: Union[str, Path] = DEFAULT_RESPONSE_TEMPLATE_PATH,
    ):
        self.preamble = preamble
        self.default_template_path = Path(default_template_path)
        self._default_preamble: Optional[str] = None

    def get_preamble(self) -> str:
        if self.preamble:
            return self.preamble + "\n\n"

        if self._default_preamble is None:
            try:
                content = self.default_template_path.read_text(encoding="utf-8")
                self._default_preamble = content + "\n\n"
            except OSError:
                logger.debug(
                    "No response template at %s, using built-in header",
                    self.default_template_path,
                )
                self._default_preamble = FALLBACK_PREAMBLE
        return self._default_preamble

    def build(self, responses: Any) -> ResponseTemplate:
        """Create the response template for an operation's responses."""
        response = find_success_response(responses)
        content = response.get("content") if response is not None else None
        if not isinstance(content, dict) or not content:
            return ResponseTemplate()

        parts = [self.get_preamble()]
        for content_type in sorted(content, key=str):
            media = content[content_type]
            schema = media.get("schema") if isinstance(media, dict) else None
            if not isinstance(schema, dict):
                continue

            parts.append(f"> Content-Type: {content_type}\n\n")
            parts.extend(describe_response_schema(schema))

        parts.append(ORIGINAL_RESPONSE_MARKER)
        return ResponseTemplate(prepend_body="".join(parts))
