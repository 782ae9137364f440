"""
Loader for OpenAPI documents.

Reads JSON or YAML, resolves references and optionally runs structural
validation. The converter only reads the resulting document through the
accessors below.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml

from .dereferencer import Dereferencer
from .exceptions import ParseError, ValidationError

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
PARAMETER_LOCATIONS = ("query", "header", "path", "cookie")
SUPPORTED_VERSIONS = ("3.0", "3.1")


def load_document(content: Union[str, bytes]) -> Dict[str, Any]:
    """Parse raw JSON or YAML into a document dictionary.

    Args:
        content: The raw document

    Returns:
        The parsed document

    Raises:
        ParseError: If the content is neither JSON nor YAML, or is not a mapping
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Failed to parse OpenAPI document: {e}") from e

    try:
        # Try JSON first
        document = json.loads(content)
    except json.JSONDecodeError:
        try:
            # Try YAML if JSON fails
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse OpenAPI document: {e}") from e

    if not isinstance(document, dict):
        raise ParseError("Failed to parse OpenAPI document: expected a mapping at the top level")
    return document


def validate_document(document: Dict[str, Any]) -> None:
    """Check the structure the converter relies on.

    Raises:
        ValidationError: If the document is not a usable OpenAPI 3 description
    """
    for field in ("openapi", "info", "paths"):
        if field not in document:
            raise ValidationError(f"Missing required field: {field}")

    version = str(document["openapi"])
    if not version.startswith(SUPPORTED_VERSIONS):
        raise ValidationError(f"Unsupported OpenAPI version: {version}")

    if not isinstance(document["info"], dict):
        raise ValidationError("Field 'info' must be an object")

    paths = document["paths"]
    if not isinstance(paths, dict):
        raise ValidationError("Field 'paths' must be an object")

    for path, path_item in paths.items():
        if not str(path).startswith("/"):
            raise ValidationError(f"Path must start with '/': {path}")
        if not isinstance(path_item, dict):
            raise ValidationError(f"Path item for {path} must be an object")

        _validate_parameters(path_item.get("parameters", []), path)
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation is None:
                continue
            if not isinstance(operation, dict):
                raise ValidationError(f"Operation {method.upper()} {path} must be an object")
            _validate_parameters(
                operation.get("parameters", []), f"{method.upper()} {path}"
            )


def _validate_parameters(parameters: Any, where: str) -> None:
    if not isinstance(parameters, list):
        raise ValidationError(f"Parameters of {where} must be a list")
    for param in parameters:
        if not isinstance(param, dict) or not param.get("name"):
            raise ValidationError(f"Parameter without a name in {where}")
        if param.get("in") not in PARAMETER_LOCATIONS:
            raise ValidationError(
                f"Parameter {param['name']} in {where} has invalid location: {param.get('in')}"
            )


class OpenAPIParser:
    """Parses OpenAPI documents and exposes the parts the converter reads."""

    def __init__(self, validate: bool = False, allow_external_refs: bool = True):
        self.validate = validate
        self.allow_external_refs = allow_external_refs
        self.document: Optional[Dict[str, Any]] = None

    def parse_file(self, path: Union[str, Path]) -> None:
        """Parse an OpenAPI document from a file.

        Relative file references are resolved against the file's directory.

        Raises:
            ParseError: If the file cannot be read or parsed
            ValidationError: If validation is enabled and fails
        """
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Failed to read OpenAPI file: {e}") from e

        self.parse_content(content, base_path=path.parent)

    def parse_content(
        self, content: Union[str, bytes], base_path: Optional[Union[str, Path]] = None
    ) -> None:
        """Parse an OpenAPI document from raw JSON or YAML content."""
        document = load_document(content)
        document = Dereferencer(
            document, base_path=base_path, allow_external=self.allow_external_refs
        ).dereference()
        if self.validate:
            validate_document(document)

        self.document = document
        logger.debug("Loaded OpenAPI document with %d paths", len(self.get_paths()))

    def get_paths(self) -> Dict[str, Any]:
        if self.document is None:
            return {}
        return self.document.get("paths") or {}

    def get_servers(self) -> List[Dict[str, Any]]:
        if self.document is None:
            return []
        return self.document.get("servers") or []

    def get_info(self) -> Dict[str, Any]:
        if self.document is None:
            return {}
        return self.document.get("info") or {}

    def iter_operations(self) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
        """Yield ``(path, method, operation)`` for every operation in the document."""
        for path, path_item in self.get_paths().items():
            if not isinstance(path_item, dict):
                continue
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if isinstance(operation, dict):
                    yield path, method, operation

    def get_parameters(self, path: str, operation: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return the operation's parameters, including those declared on its path.

        An operation parameter overrides a path parameter with the same name and location.

        Raises:
            ValidationError: If a parameter list is not a list
        """
        path_item = self.get_paths().get(path) or {}
        path_params = path_item.get("parameters") or []
        operation_params = operation.get("parameters") or []
        if not isinstance(path_params, list) or not isinstance(operation_params, list):
            raise ValidationError(f"Parameters of {path} must be a list")

        merged: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
        for param in path_params + operation_params:
            if isinstance(param, dict):
                merged[(param.get("name"), param.get("in"))] = param
        return list(merged.values())

    def get_operation_id(self, path: str, method: str, operation: Dict[str, Any]) -> str:
        """Return the operation ID, generating one from method and path if missing."""
        if operation.get("operationId"):
            return str(operation["operationId"])

        path_name = path.replace("/", "_").replace("{", "").replace("}", "")
        return f"{method.lower()}{path_name}"
