"""
Reference dereferencer for OpenAPI documents.

This module resolves $ref references in place, including:
- Local references (e.g. "#/components/schemas/Pet")
- File references (e.g. "./common.yaml#/components/schemas/Error")
- URL references (e.g. "https://example.com/schemas.json#/Pet")

Every reference to the same target resolves to the same object, so a
recursive schema comes out as a cycle in the resulting graph. Code that
walks schemas must bound its own recursion.
"""

import copy
import json
import logging
import urllib.request
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple, Union

import yaml

from .exceptions import DereferenceError

logger = logging.getLogger(__name__)

LOCAL_DOCUMENT = ""


class Dereferencer:
    """Resolves references throughout an OpenAPI document."""

    def __init__(
        self,
        spec: Dict[str, Any],
        base_path: Optional[Union[str, Path]] = None,
        allow_external: bool = True,
    ):
        """Initialize the dereferencer.

        Args:
            spec: The OpenAPI specification dictionary
            base_path: Base path for resolving relative file references. If not provided,
                      uses the current working directory.
            allow_external: Whether file and URL references may be loaded
        """
        self.spec = copy.deepcopy(spec)
        self.base_path = Path(base_path) if base_path else Path.cwd()
        self.allow_external = allow_external
        self._documents: Dict[str, Any] = {LOCAL_DOCUMENT: self.spec}
        self._resolved: Dict[Tuple[str, str], Any] = {}
        self._pending: Set[Tuple[str, str]] = set()
        self._visited: Set[int] = set()
        self._done = False

    def _resolve_json_pointer(self, obj: Any, pointer: str) -> Any:
        """Resolve a JSON pointer within an object.

        Args:
            obj: The object to traverse
            pointer: JSON pointer (e.g. "/components/schemas/Pet")

        Returns:
            The referenced value

        Raises:
            DereferenceError: If the pointer cannot be resolved
        """
        if not pointer:
            return obj
        if not pointer.startswith("/"):
            raise DereferenceError(f"Invalid JSON pointer: {pointer}")

        current = obj
        for part in pointer[1:].split("/"):
            # Unescape JSON pointer encoding
            part = part.replace("~1", "/").replace("~0", "~")

            try:
                if isinstance(current, list):
                    current = current[int(part)]
                else:
                    current = current[part]
            except (KeyError, TypeError, IndexError, ValueError):
                raise DereferenceError(f"Could not resolve pointer {pointer}")

        return current

    def _load_external_ref(self, ref_path: str) -> Any:
        """Load an external document from file or URL.

        Args:
            ref_path: Path or URL of the external document

        Returns:
            The loaded document

        Raises:
            DereferenceError: If the document cannot be loaded
        """
        if ref_path in self._documents:
            return self._documents[ref_path]
        if not self.allow_external:
            raise DereferenceError(f"External references are not allowed: {ref_path}")

        logger.debug("Loading external reference %s", ref_path)
        try:
            if ref_path.startswith(("http://", "https://")):
                with urllib.request.urlopen(ref_path) as response:
                    content = response.read()
                    if ref_path.endswith((".yaml", ".yml")):
                        data = yaml.safe_load(content)
                    else:
                        data = json.loads(content)
            else:
                file_path = self.base_path / ref_path
                with open(file_path) as f:
                    if str(file_path).endswith((".yaml", ".yml")):
                        data = yaml.safe_load(f)
                    else:
                        data = json.load(f)
        except Exception as e:
            raise DereferenceError(
                f"Failed to load external reference {ref_path}: {str(e)}"
            ) from e

        self._documents[ref_path] = data
        return data

    def _lookup(self, ref: str, document: str) -> Tuple[str, str, Any]:
        if "#" in ref:
            file_path, pointer = ref.split("#", 1)
        else:
            file_path, pointer = ref, ""

        if file_path:
            document = file_path
            obj = self._load_external_ref(file_path)
        else:
            obj = self._documents[document]

        return document, pointer, self._resolve_json_pointer(obj, pointer)

    def _resolve_node(self, node: Any, document: str) -> Any:
        if isinstance(node, dict) and isinstance(node.get("$ref"), str):
            return self._resolve_ref(node, document)
        self._resolve_children(node, document)
        return node

    def _resolve_ref(self, node: Dict[str, Any], document: str) -> Any:
        ref = node["$ref"]
        target_document, pointer, target = self._lookup(ref, document)
        key = (target_document, pointer)

        if key in self._resolved:
            resolved = self._resolved[key]
        elif isinstance(target, dict) and isinstance(target.get("$ref"), str):
            # A reference to another reference
            if key in self._pending:
                raise DereferenceError(f"Circular reference chain at {ref}")
            self._pending.add(key)
            try:
                resolved = self._resolve_ref(target, target_document)
            finally:
                self._pending.discard(key)
            self._resolved[key] = resolved
        else:
            # Registered before descending so self-references land on this object
            self._resolved[key] = target
            self._resolve_children(target, target_document)
            resolved = target

        siblings = {k: v for k, v in node.items() if k != "$ref"}
        if not siblings or not isinstance(resolved, dict):
            return resolved

        # Properties next to a $ref override the referenced ones
        merged = dict(resolved)
        for k, v in siblings.items():
            merged[k] = self._resolve_node(v, document)
        return merged

    def _resolve_children(self, node: Any, document: str) -> None:
        if not isinstance(node, (dict, list)) or id(node) in self._visited:
            return
        self._visited.add(id(node))

        if isinstance(node, dict):
            for key, value in list(node.items()):
                node[key] = self._resolve_node(value, document)
        else:
            for index, value in enumerate(node):
                node[index] = self._resolve_node(value, document)

    def dereference(self) -> Dict[str, Any]:
        """Dereference all references in the OpenAPI specification.

        Returns:
            The specification with every $ref replaced by its target

        Raises:
            DereferenceError: If any reference cannot be resolved
        """
        if not self._done:
            self._resolve_children(self.spec, LOCAL_DOCUMENT)
            self._done = True
        return self.spec
