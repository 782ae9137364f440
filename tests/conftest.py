"""Shared fixtures for converter tests."""

from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from openapi_to_mcpserver.parser import OpenAPIParser

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test in an empty working directory."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def load_spec() -> Callable[[Dict[str, Any]], OpenAPIParser]:
    """Return a function that loads a spec dictionary into a parser."""

    def _load(spec: Dict[str, Any]) -> OpenAPIParser:
        parser = OpenAPIParser()
        parser.parse_content(yaml.safe_dump(spec))
        return parser

    return _load


@pytest.fixture
def petstore_dir() -> Path:
    return FIXTURES / "petstore"
