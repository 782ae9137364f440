"""
api.py

FastAPI service exposing the converter over HTTP.
"""
import logging
from typing import Any, Dict, Literal, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from .converter import convert
from .exceptions import ConversionError, ParseError, ValidationError
from .models import ConvertOptions
from .output import render
from .parser import OpenAPIParser

logger = logging.getLogger(__name__)

MEDIA_TYPES = {"json": "application/json", "yaml": "application/x-yaml"}

app = FastAPI(title="OpenAPI to MCP", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


class ConvertRequestOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server_name: str = ""
    tool_name_prefix: str = ""
    server_config: Optional[Dict[str, Any]] = None
    response_template: Optional[str] = None
    template: Optional[str] = None
    validate_document: bool = Field(False, alias="validate")


class ConvertRequest(BaseModel):
    openapi_spec: str
    options: ConvertRequestOptions = Field(default_factory=ConvertRequestOptions)
    format: Literal["yaml", "json"]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/openapi-to-mcp")
def convert_openapi(req: ConvertRequest):
    """
    Converts the given OpenAPI specification and returns the MCP configuration
    in the requested format.
    """
    if not req.openapi_spec.strip():
        return _error(400, "openapi_spec must be provided and must not be empty")

    # Only the submitted document is read; file and URL references are refused
    parser = OpenAPIParser(
        validate=req.options.validate_document, allow_external_refs=False
    )
    try:
        parser.parse_content(req.openapi_spec)
    except ValidationError as e:
        return _error(400, f"OpenAPI specification validation failed: {e}")
    except ParseError as e:
        return _error(400, f"Invalid OpenAPI specification, expected YAML or JSON: {e}")

    options = ConvertOptions(
        server_name=req.options.server_name,
        tool_name_prefix=req.options.tool_name_prefix,
        server_config=req.options.server_config,
        response_template=req.options.response_template,
        template=req.options.template,
    )
    try:
        config = convert(parser, options)
    except ConversionError as e:
        logger.info("Conversion failed: %s", e)
        return _error(422, f"Conversion failed: {e}")

    return Response(content=render(config, req.format), media_type=MEDIA_TYPES[req.format])
