"""
Core functionality for converting OpenAPI specifications to MCP format.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .arguments import derive_args
from .exceptions import ConversionError
from .models import ConvertOptions, MCPConfig, MCPConfigTemplate, ServerConfig, Tool
from .output import render
from .overlay import apply_template, load_template, read_template
from .parser import OpenAPIParser
from .templates import ResponseTemplateBuilder, build_request_template

logger = logging.getLogger(__name__)


def get_description(operation: Dict[str, Any]) -> str:
    """Join an operation's summary and description."""
    summary = operation.get("summary") or ""
    description = operation.get("description") or ""
    if summary and description:
        return f"{summary} - {description}"
    return summary or description


class OpenAPItoMCPConverter:
    """Converts OpenAPI specifications to MCP format."""

    def __init__(self, parser: OpenAPIParser, options: Optional[ConvertOptions] = None):
        """Initialize the converter.

        Args:
            parser: Parser holding the loaded OpenAPI document
            options: Conversion options, defaults when not provided
        """
        self.parser = parser
        self.options = options or ConvertOptions()
        self.response_builder = ResponseTemplateBuilder(preamble=self.options.response_template)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        options: Optional[ConvertOptions] = None,
        validate: bool = False,
    ) -> "OpenAPItoMCPConverter":
        """Create a converter instance from a JSON or YAML file.

        Args:
            path: Path to the OpenAPI file
            options: Conversion options
            validate: Whether to validate the document after loading

        Returns:
            An instance of OpenAPItoMCPConverter
        """
        parser = OpenAPIParser(validate=validate)
        parser.parse_file(path)
        return cls(parser, options)

    def _load_template(self) -> Optional[MCPConfigTemplate]:
        if self.options.template:
            return load_template(self.options.template)
        if self.options.template_path:
            return read_template(self.options.template_path)
        return None

    def convert(self) -> MCPConfig:
        """Convert the OpenAPI document to an MCP configuration.

        Returns:
            The generated configuration, tools sorted by name

        Raises:
            ConversionError: If no document is loaded or an operation fails to convert
            TemplateError: If the overlay template cannot be read or parsed
        """
        if self.parser.document is None:
            raise ConversionError("no OpenAPI document loaded")

        template = self._load_template()

        config = MCPConfig(
            server=ServerConfig(
                name=self.options.server_name,
                config=copy.deepcopy(self.options.server_config),
            )
        )

        for path, method, operation in self.parser.iter_operations():
            try:
                tool = self.convert_operation(path, method, operation)
            except Exception as e:
                raise ConversionError(
                    f"failed to convert operation {method} {path}: {e}"
                ) from e
            config.tools.append(tool)

        if template is not None:
            apply_template(config, template)

        config.tools.sort(key=lambda tool: tool.name)
        logger.info("Converted %d operations to tools", len(config.tools))
        return config

    def convert_operation(self, path: str, method: str, operation: Dict[str, Any]) -> Tool:
        """Convert a single OpenAPI operation to an MCP tool."""
        name = self.options.tool_name_prefix + self.parser.get_operation_id(path, method, operation)
        logger.debug("Converting %s %s to tool %s", method.upper(), path, name)

        request_body = operation.get("requestBody")
        return Tool(
            name=name,
            description=get_description(operation),
            args=derive_args(self.parser.get_parameters(path, operation), request_body),
            request_template=build_request_template(
                self.parser.get_servers(), path, method, request_body
            ),
            response_template=self.response_builder.build(operation.get("responses")),
        )

    def save_mcp(self, output_path: Union[str, Path], fmt: str = "yaml") -> None:
        """Convert and save the MCP configuration.

        Nothing is written if the conversion fails.

        Args:
            output_path: Path where to save the configuration
            fmt: Output format, "yaml" or "json"
        """
        content = render(self.convert(), fmt)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")


def convert(parser: OpenAPIParser, options: Optional[ConvertOptions] = None) -> MCPConfig:
    """Convert a loaded OpenAPI document to an MCP configuration."""
    return OpenAPItoMCPConverter(parser, options).convert()
