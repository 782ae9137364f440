"""
Rendering of generated configurations.
"""

import json

import yaml

from .models import MCPConfig

FORMATS = ("yaml", "json")


class _ConfigDumper(yaml.SafeDumper):
    """Safe dumper writing multi-line strings as literal blocks, without anchors."""

    def ignore_aliases(self, data):
        return True


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_ConfigDumper.add_representer(str, _represent_str)


def render(config: MCPConfig, fmt: str = "yaml") -> str:
    """Serialize a configuration as YAML or JSON text.

    Args:
        config: The configuration to render
        fmt: "yaml" or "json"

    Returns:
        The serialized configuration

    Raises:
        ValueError: If the format is not supported
    """
    data = config.to_dict()
    if fmt == "yaml":
        return yaml.dump(
            data,
            Dumper=_ConfigDumper,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
            default_flow_style=False,
        )
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unsupported output format: {fmt}")
