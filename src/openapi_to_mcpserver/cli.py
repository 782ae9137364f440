"""
Command-line interface for the OpenAPI to MCP converter.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from .converter import OpenAPItoMCPConverter
from .exceptions import OpenAPIToMCPError
from .models import DEFAULT_SERVER_NAME, ConvertOptions

app = typer.Typer(help="Convert OpenAPI specifications to MCP server configurations")


class OutputFormat(str, Enum):
    yaml = "yaml"
    json = "json"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _read_text(path: Path) -> str:
    """Read a text file.

    Args:
        path: Path to the file

    Returns:
        The file content

    Raises:
        typer.Exit: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error loading {path}: {str(e)}", err=True)
        raise typer.Exit(1)


@app.command()
def convert(
    input_file: Path = typer.Argument(..., help="Path to the OpenAPI specification (JSON or YAML)"),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Path to save the MCP configuration. If not provided, will use input filename with .mcp.yaml or .mcp.json extension",
    ),
    server_name: str = typer.Option(
        DEFAULT_SERVER_NAME,
        "--server-name",
        envvar="OPENAPI_TO_MCP_SERVER_NAME",
        help="Name of the MCP server",
    ),
    tool_prefix: str = typer.Option(
        "",
        "--tool-prefix",
        envvar="OPENAPI_TO_MCP_TOOL_PREFIX",
        help="Prefix for tool names",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.yaml, "--format", "-f", help="Output format"
    ),
    template: Optional[Path] = typer.Option(
        None, "--template", "-t", help="Overlay template applied to every tool"
    ),
    response_template: Optional[Path] = typer.Option(
        None,
        "--response-template",
        help="Markdown file placed before the generated response documentation",
    ),
    validate: bool = typer.Option(
        False, "--validate", help="Validate the OpenAPI specification before converting"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Convert an OpenAPI specification to an MCP server configuration."""
    _configure_logging(verbose)

    if output_file is None:
        output_file = input_file.parent / f"{input_file.stem}.mcp.{output_format.value}"

    options = ConvertOptions(
        server_name=server_name,
        tool_name_prefix=tool_prefix,
        template_path=str(template) if template else None,
        response_template=_read_text(response_template) if response_template else None,
    )

    try:
        converter = OpenAPItoMCPConverter.from_file(input_file, options, validate=validate)
        converter.save_mcp(output_file, output_format.value)
    except (OpenAPIToMCPError, OSError) as e:
        typer.echo(f"Error: {str(e)}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Successfully converted {input_file} to {output_file}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", envvar="OPENAPI_TO_MCP_HOST"),
    port: int = typer.Option(8080, "--port", envvar="OPENAPI_TO_MCP_PORT"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Run the HTTP conversion service."""
    import uvicorn

    from .api import app as api_app

    _configure_logging(verbose)
    uvicorn.run(api_app, host=host, port=port, log_level="debug" if verbose else "info")


def main():
    """Entry point for the CLI."""
    app()
