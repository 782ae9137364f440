"""
Data models for OpenAPI to MCP conversion.

The output models serialize with the camelCase field names the MCP server
expects. Optional fields are left out of the serialized form when they are
empty, so a generated configuration only carries what the API described.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

DEFAULT_SERVER_NAME = "openapi-server"


class ArgType(str, Enum):
    """Primitive type names an argument can carry."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class ArgPosition(str, Enum):
    """Where an argument is placed in the HTTP call."""

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"


def _is_none(value: Any) -> bool:
    return value is None


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, dict)) and not value:
        return True
    return False


class _ConfigModel(BaseModel):
    """Base for the configuration models.

    Fields listed in ``omit_if_empty`` are dropped from the serialized output
    when their value is empty, fields in ``omit_if_none`` only when unset.
    """

    model_config = ConfigDict(populate_by_name=True)

    omit_if_empty: ClassVar[FrozenSet[str]] = frozenset()
    omit_if_none: ClassVar[FrozenSet[str]] = frozenset()

    @model_serializer(mode="wrap")
    def serialize_without_empty(self, handler):
        data = handler(self)
        fields = type(self).model_fields
        for name in self.omit_if_empty | self.omit_if_none:
            check = _is_empty if name in self.omit_if_empty else _is_none
            for key in (name, fields[name].alias):
                if key in data and check(data[key]):
                    del data[key]
        return data


class Header(_ConfigModel):
    """An HTTP header sent with every tool call."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    key: str
    value: str = ""


class RequestTemplate(_ConfigModel):
    """Shape of the HTTP call made when a tool is invoked."""

    omit_if_empty = frozenset(
        {"headers", "body", "args_to_json_body", "args_to_url_param", "args_to_form_body"}
    )

    url: str
    method: str
    headers: List[Header] = Field(default_factory=list)
    body: str = ""
    args_to_json_body: bool = Field(False, alias="argsToJsonBody")
    args_to_url_param: bool = Field(False, alias="argsToUrlParam")
    args_to_form_body: bool = Field(False, alias="argsToFormBody")


class ResponseTemplate(_ConfigModel):
    """Post-processing applied to the raw API response."""

    omit_if_empty = frozenset({"body", "prepend_body", "append_body"})

    body: str = ""
    prepend_body: str = Field("", alias="prependBody")
    append_body: str = Field("", alias="appendBody")


class Arg(_ConfigModel):
    """A typed tool argument and its place in the HTTP call."""

    omit_if_empty = frozenset(
        {"type", "required", "enum", "items", "properties", "position"}
    )
    omit_if_none = frozenset({"default"})

    name: str
    description: str = ""
    type: Optional[ArgType] = None
    required: bool = False
    default: Optional[Any] = None
    enum: Optional[List[Any]] = None
    items: Optional[Dict[str, Any]] = None
    properties: Optional[Dict[str, Any]] = None
    position: Optional[ArgPosition] = None


class Tool(_ConfigModel):
    """One invocable tool, generated from one API operation."""

    name: str
    description: str = ""
    args: List[Arg] = Field(default_factory=list)
    request_template: RequestTemplate = Field(alias="requestTemplate")
    response_template: ResponseTemplate = Field(
        default_factory=ResponseTemplate, alias="responseTemplate"
    )


class ServerConfig(_ConfigModel):
    """Server section of the generated configuration."""

    omit_if_empty = frozenset({"config", "allow_tools"})

    name: str = DEFAULT_SERVER_NAME
    config: Dict[str, Any] = Field(default_factory=dict)
    allow_tools: List[str] = Field(default_factory=list, alias="allowTools")


class MCPConfig(_ConfigModel):
    """The generated MCP server configuration."""

    omit_if_empty = frozenset({"tools"})

    server: ServerConfig = Field(default_factory=ServerConfig)
    tools: List[Tool] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as plain data with its serialized field names."""
        return self.model_dump(mode="json", by_alias=True)


# Overlay templates carry the same field names as the generated configuration,
# but every field is optional: only what is set is applied.


class RequestTemplateOverlay(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    headers: List[Header] = Field(default_factory=list)
    body: str = ""
    args_to_json_body: bool = Field(False, alias="argsToJsonBody")
    args_to_url_param: bool = Field(False, alias="argsToUrlParam")
    args_to_form_body: bool = Field(False, alias="argsToFormBody")


class ResponseTemplateOverlay(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    body: str = ""
    prepend_body: str = Field("", alias="prependBody")
    append_body: str = Field("", alias="appendBody")


class ToolTemplate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_template: Optional[RequestTemplateOverlay] = Field(None, alias="requestTemplate")
    response_template: Optional[ResponseTemplateOverlay] = Field(None, alias="responseTemplate")


class ServerTemplate(BaseModel):
    config: Optional[Dict[str, Any]] = None


class MCPConfigTemplate(BaseModel):
    """A partial configuration merged onto every generated tool."""

    server: Optional[ServerTemplate] = None
    tools: Optional[ToolTemplate] = None


class ConvertOptions(BaseModel):
    """Options for a single conversion run."""

    server_name: str = DEFAULT_SERVER_NAME
    tool_name_prefix: str = ""
    server_config: Dict[str, Any] = Field(default_factory=dict)
    template_path: Optional[str] = None
    template: Optional[str] = None
    response_template: Optional[str] = None

    @field_validator("server_name", mode="before")
    @classmethod
    def default_server_name(cls, value: Any) -> Any:
        return value or DEFAULT_SERVER_NAME

    @field_validator("server_config", mode="before")
    @classmethod
    def default_server_config(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("tool_name_prefix", mode="before")
    @classmethod
    def default_tool_name_prefix(cls, value: Any) -> Any:
        return value or ""
