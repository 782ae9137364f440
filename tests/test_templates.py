"""Tests for request and response templates."""

from openapi_to_mcpserver.models import ResponseTemplate
from openapi_to_mcpserver.schema import MAX_DEPTH
from openapi_to_mcpserver.templates import (
    DEFAULT_RESPONSE_TEMPLATE_PATH,
    FALLBACK_PREAMBLE,
    ORIGINAL_RESPONSE_MARKER,
    ResponseTemplateBuilder,
    build_request_template,
    describe_response_schema,
    find_success_response,
)


def nested_schema(levels: int) -> dict:
    schema = {"type": "object", "properties": {"leaf": {"type": "string"}}}
    for _ in range(levels):
        schema = {"type": "object", "properties": {"child": schema}}
    return schema


def json_response(schema: dict) -> dict:
    return {"description": "OK", "content": {"application/json": {"schema": schema}}}


def test_request_url_and_method():
    template = build_request_template(
        [{"url": "https://api.example.com/v1/"}], "/pets/{id}", "get"
    )

    assert template.url == "https://api.example.com/v1/pets/{id}"
    assert template.method == "GET"
    assert template.headers == []
    assert template.body == ""
    assert not template.args_to_json_body
    assert not template.args_to_url_param
    assert not template.args_to_form_body


def test_request_url_without_servers():
    assert build_request_template([], "/pets", "post").url == "/pets"


def test_request_url_uses_first_server():
    servers = [{"url": "https://one.example.com"}, {"url": "https://two.example.com"}]

    assert build_request_template(servers, "/pets", "get").url == "https://one.example.com/pets"


def test_content_type_header():
    body = {"content": {"application/json": {"schema": {"type": "object"}}}}

    template = build_request_template([], "/pets", "post", body)

    assert [(h.key, h.value) for h in template.headers] == [("Content-Type", "application/json")]


def test_content_type_choice_ignores_declaration_order():
    first = {"content": {"application/x-www-form-urlencoded": {}, "application/json": {}}}
    second = {"content": {"application/json": {}, "application/x-www-form-urlencoded": {}}}

    for body in (first, second):
        template = build_request_template([], "/pets", "post", body)
        assert [h.value for h in template.headers] == ["application/json"]


def test_find_success_response():
    ok, created = {"description": "OK"}, {"description": "Created"}

    assert find_success_response({"201": created, "200": ok, "default": {}}) is ok
    assert find_success_response({200: ok}) is ok
    assert find_success_response({"2XX": ok, "204": created}) is created
    assert find_success_response({"404": ok}) is None
    assert find_success_response(None) is None


def test_pet_response_documentation(tmp_path):
    builder = ResponseTemplateBuilder(default_template_path=tmp_path / "missing.md")
    responses = {
        "200": json_response(
            {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "id": {"type": "integer", "description": "Pet ID"},
                },
            }
        )
    }

    template = builder.build(responses)

    assert template.prepend_body == (
        FALLBACK_PREAMBLE
        + "> Content-Type: application/json\n\n"
        + "- **id**: Pet ID (Type: integer)\n"
        + "- **name**: (Type: string)\n"
        + ORIGINAL_RESPONSE_MARKER
    )
    assert template.body == ""
    assert template.append_body == ""


def test_nested_paths():
    schema = {
        "type": "object",
        "properties": {
            "data": {
                "type": "object",
                "properties": {
                    "items": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string", "description": "Item name"}
                            },
                        },
                    }
                },
            },
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    }

    assert describe_response_schema(schema) == [
        "- **data**: (Type: object)\n",
        "  - **data.items**: (Type: array)\n",
        "    - **data.items[].name**: Item name (Type: string)\n",
        "- **tags**: (Type: array)\n",
        "  - **tags[]**: Items of type string\n",
    ]


def test_top_level_array():
    schema = {
        "type": "array",
        "items": {"type": "object", "properties": {"id": {"type": "integer"}}},
    }

    assert describe_response_schema(schema) == [
        "- **items**: Array of items (Type: array)\n",
        "  - **items[].id**: (Type: integer)\n",
    ]


def test_documentation_depth_is_bounded():
    lines = describe_response_schema(nested_schema(15))

    indents = [len(line) - len(line.lstrip(" ")) for line in lines]
    assert max(indents) == 2 * MAX_DEPTH


def test_cyclic_response_schema_terminates():
    node = {"type": "object", "properties": {"id": {"type": "string"}}}
    node["properties"]["parent"] = node

    lines = describe_response_schema(node)

    assert lines[0] == "- **id**: (Type: string)\n"
    assert any("parent.parent.id" in line for line in lines)


def test_content_types_are_sorted():
    schema = {"type": "object", "properties": {"id": {"type": "integer"}}}
    responses = {
        "200": {
            "content": {
                "text/plain": {"schema": {"type": "string"}},
                "application/json": {"schema": schema},
            }
        }
    }

    body = ResponseTemplateBuilder().build(responses).prepend_body

    assert body.index("> Content-Type: application/json") < body.index("> Content-Type: text/plain")


def test_caller_preamble():
    builder = ResponseTemplateBuilder(preamble="# Custom")

    body = builder.build({"200": json_response({"type": "string"})}).prepend_body

    assert body.startswith("# Custom\n\n> Content-Type: application/json\n\n")
    assert body.endswith(ORIGINAL_RESPONSE_MARKER)


def test_default_template_file(tmp_path):
    path = tmp_path / "response_template.md"
    path.write_text("# From file")
    builder = ResponseTemplateBuilder(default_template_path=path)

    body = builder.build({"200": json_response({"type": "string"})}).prepend_body

    assert body.startswith("# From file\n\n> Content-Type")


def test_default_template_file_is_read_once(tmp_path):
    path = tmp_path / "response_template.md"
    path.write_text("# First")
    builder = ResponseTemplateBuilder(default_template_path=path)
    responses = {"200": json_response({"type": "string"})}

    builder.build(responses)
    path.write_text("# Second")

    assert builder.build(responses).prepend_body.startswith("# First")


def test_packaged_default_template(tmp_path):
    """Test that the template shipped with the package is used from any directory."""
    (tmp_path / "conf").mkdir()
    (tmp_path / "conf" / "response_template.md").write_text("# Working directory")
    packaged = DEFAULT_RESPONSE_TEMPLATE_PATH.read_text(encoding="utf-8")

    body = ResponseTemplateBuilder().build({"200": json_response({"type": "string"})}).prepend_body

    assert DEFAULT_RESPONSE_TEMPLATE_PATH.is_absolute()
    assert body.startswith(packaged + "\n\n> Content-Type: application/json")
    assert not body.startswith("# Working directory")
    assert not body.startswith(FALLBACK_PREAMBLE)


def test_missing_template_file_falls_back(tmp_path):
    builder = ResponseTemplateBuilder(default_template_path=tmp_path / "missing.md")

    body = builder.build({"200": json_response({"type": "string"})}).prepend_body

    assert body.startswith(FALLBACK_PREAMBLE)


def test_no_success_response():
    builder = ResponseTemplateBuilder()

    assert builder.build({"404": json_response({"type": "string"})}) == ResponseTemplate()
    assert builder.build({"204": {"description": "No content"}}) == ResponseTemplate()
    assert builder.build(None) == ResponseTemplate()


def test_types_outside_argument_types_are_documented():
    schema = {
        "type": "object",
        "properties": {
            "deleted": {"type": "null", "description": "Always empty"},
            "nickname": {"type": ["null", "string"]},
            "upload": {"type": "file"},
            "notes": {"type": "array", "items": {"type": "null"}},
            "free": {"description": "Anything"},
        },
    }

    assert describe_response_schema(schema) == [
        "- **deleted**: Always empty (Type: null)\n",
        "- **free**: Anything\n",
        "- **nickname**: (Type: string)\n",
        "- **notes**: (Type: array)\n",
        "  - **notes[]**: Items of type null\n",
        "- **upload**: (Type: file)\n",
    ]
