"""Tests for the OpenAPI reference dereferencer."""

import pytest
import yaml

from openapi_to_mcpserver.dereferencer import Dereferencer
from openapi_to_mcpserver.exceptions import DereferenceError, ParseError


def test_local_schema_reference():
    """Test that a local schema reference is replaced by its target."""
    spec = {
        "paths": {
            "/pets": {
                "get": {
                    "responses": {
                        "200": {
                            "content": {
                                "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}
                            }
                        }
                    }
                }
            }
        },
        "components": {"schemas": {"Pet": {"type": "object", "properties": {"id": {"type": "integer"}}}}},
    }

    result = Dereferencer(spec).dereference()

    schema = result["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
    assert schema == {"type": "object", "properties": {"id": {"type": "integer"}}}
    assert schema is result["components"]["schemas"]["Pet"]


def test_input_is_not_modified():
    spec = {"paths": {"/a": {"$ref": "#/x"}}, "x": {"get": {}}}

    Dereferencer(spec).dereference()

    assert spec["paths"]["/a"] == {"$ref": "#/x"}


def test_invalid_path_ref_error():
    """Test that invalid path references raise appropriate errors."""
    spec = {"paths": {"/invalid": {"$ref": "#/paths/nonexistent"}}}

    dereferencer = Dereferencer(spec)
    with pytest.raises(DereferenceError):
        dereferencer.dereference()


def test_dereference_error_is_a_parse_error():
    assert issubclass(DereferenceError, ParseError)


def test_additional_path_properties_preservation():
    """Test that additional properties alongside path $ref are preserved."""
    spec = {
        "paths": {
            "/base": {"get": {"summary": "Base endpoint"}},
            "/extended": {
                "$ref": "#/paths/~1base",
                "description": "Extended endpoint",
                "servers": [{"url": "https://api.example.com"}],
            },
        }
    }

    dereferencer = Dereferencer(spec)
    result = dereferencer.dereference()

    extended = result["paths"]["/extended"]
    assert "get" in extended  # From base
    assert extended["description"] == "Extended endpoint"  # Additional property
    assert extended["servers"][0]["url"] == "https://api.example.com"
    assert "description" not in result["paths"]["/base"]


def test_non_path_content_preserved():
    """Test that non-path content in the spec is preserved."""
    spec = {
        "openapi": "3.0.0",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": {"/test": {"get": {"summary": "Test endpoint"}}},
        "components": {"schemas": {"Test": {"type": "object"}}},
    }

    dereferencer = Dereferencer(spec)
    result = dereferencer.dereference()

    # Check that non-path content is unchanged
    assert result["openapi"] == "3.0.0"
    assert result["info"]["title"] == "Test API"
    assert "components" in result
    assert result["components"]["schemas"]["Test"]["type"] == "object"


def test_circular_references():
    """Test that a recursive schema becomes a cycle."""
    spec = {
        "components": {
            "schemas": {
                "Node": {
                    "type": "object",
                    "properties": {
                        "next": {"$ref": "#/components/schemas/Node"},
                        "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                    },
                }
            }
        }
    }

    result = Dereferencer(spec).dereference()

    node = result["components"]["schemas"]["Node"]
    assert node["properties"]["next"] is node
    assert node["properties"]["children"]["items"] is node


def test_reference_chain():
    spec = {
        "components": {
            "schemas": {
                "Alias": {"$ref": "#/components/schemas/Pet"},
                "Pet": {"type": "object"},
            }
        },
        "paths": {"/pets": {"get": {"x-schema": {"$ref": "#/components/schemas/Alias"}}}},
    }

    result = Dereferencer(spec).dereference()

    assert result["paths"]["/pets"]["get"]["x-schema"] == {"type": "object"}
    assert result["components"]["schemas"]["Alias"] is result["components"]["schemas"]["Pet"]


def test_circular_reference_chain():
    """Test that references pointing only at each other are rejected."""
    spec = {
        "components": {
            "schemas": {
                "A": {"$ref": "#/components/schemas/B"},
                "B": {"$ref": "#/components/schemas/A"},
            }
        }
    }

    with pytest.raises(DereferenceError):
        Dereferencer(spec).dereference()


def test_external_file_reference(tmp_path):
    """Test resolving a reference into another file."""
    common = {
        "components": {
            "schemas": {
                "Error": {
                    "type": "object",
                    "properties": {"detail": {"$ref": "#/components/schemas/Detail"}},
                },
                "Detail": {"type": "string"},
            }
        }
    }
    (tmp_path / "common.yaml").write_text(yaml.safe_dump(common))
    spec = {"paths": {"/a": {"get": {"x-error": {"$ref": "./common.yaml#/components/schemas/Error"}}}}}

    result = Dereferencer(spec, base_path=tmp_path).dereference()

    assert result["paths"]["/a"]["get"]["x-error"] == {
        "type": "object",
        "properties": {"detail": {"type": "string"}},
    }


def test_missing_external_file(tmp_path):
    spec = {"paths": {"/a": {"$ref": "./missing.yaml#/paths/~1a"}}}

    with pytest.raises(DereferenceError) as exc_info:
        Dereferencer(spec, base_path=tmp_path).dereference()
    assert "missing.yaml" in str(exc_info.value)


def test_external_references_disallowed(tmp_path):
    (tmp_path / "common.yaml").write_text("Pet: {type: object}\n")
    spec = {"x-pet": {"$ref": "./common.yaml#/Pet"}}

    with pytest.raises(DereferenceError) as exc_info:
        Dereferencer(spec, base_path=tmp_path, allow_external=False).dereference()
    assert "not allowed" in str(exc_info.value)
