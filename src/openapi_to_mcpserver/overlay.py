"""
Overlay templates: partial configurations merged onto generated tools.

An overlay never replaces the generated configuration. Headers are appended,
serialization flags can only be switched on, and string fields are replaced
only by non-empty overlay values. The same overlay applies to every tool.
"""

import logging
from pathlib import Path
from typing import Union

import pydantic
import yaml

from .exceptions import TemplateError
from .models import MCPConfig, MCPConfigTemplate

logger = logging.getLogger(__name__)


def load_template(text: Union[str, bytes]) -> MCPConfigTemplate:
    """Parse an overlay template from YAML (or JSON) text.

    Raises:
        TemplateError: If the text is not a valid overlay template
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateError(f"failed to parse template: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TemplateError("failed to parse template: expected a mapping at the top level")

    try:
        return MCPConfigTemplate.model_validate(data)
    except pydantic.ValidationError as e:
        raise TemplateError(f"failed to parse template: {e}") from e


def read_template(path: Union[str, Path]) -> MCPConfigTemplate:
    """Read and parse an overlay template file.

    Raises:
        TemplateError: If the file cannot be read or parsed
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateError(f"failed to read template file: {e}") from e
    return load_template(text)


def apply_template(config: MCPConfig, template: MCPConfigTemplate) -> None:
    """Merge an overlay template into a generated configuration in place."""
    if template.server is not None and template.server.config:
        config.server.config.update(template.server.config)

    if template.tools is None:
        return
    request = template.tools.request_template
    response = template.tools.response_template
    if request is None and response is None:
        return

    for tool in config.tools:
        if request is not None:
            tool.request_template.headers.extend(
                header.model_copy() for header in request.headers
            )
            if request.body:
                tool.request_template.body = request.body
            if request.args_to_json_body:
                tool.request_template.args_to_json_body = True
            if request.args_to_url_param:
                tool.request_template.args_to_url_param = True
            if request.args_to_form_body:
                tool.request_template.args_to_form_body = True

        if response is not None:
            if response.body:
                tool.response_template.body = response.body
            if response.prepend_body:
                tool.response_template.prepend_body = response.prepend_body
            if response.append_body:
                tool.response_template.append_body = response.append_body

    logger.debug("Applied overlay template to %d tools", len(config.tools))
