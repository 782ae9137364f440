"""OpenAPI to MCP server configuration converter."""

from .converter import OpenAPItoMCPConverter, convert
from .exceptions import (
    ConversionError,
    DereferenceError,
    OpenAPIToMCPError,
    ParseError,
    TemplateError,
    ValidationError,
)
from .models import Arg, ConvertOptions, MCPConfig, MCPConfigTemplate, Tool
from .output import render
from .parser import OpenAPIParser

__version__ = "0.1.0"
__all__ = [
    "OpenAPItoMCPConverter",
    "OpenAPIParser",
    "convert",
    "render",
    "Arg",
    "ConvertOptions",
    "MCPConfig",
    "MCPConfigTemplate",
    "Tool",
    "OpenAPIToMCPError",
    "ParseError",
    "DereferenceError",
    "ValidationError",
    "ConversionError",
    "TemplateError",
]
