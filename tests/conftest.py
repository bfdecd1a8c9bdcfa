"""Shared fixtures for plugin schema tests."""

import pytest

from plugin_schema.schema import SchemaRegistry, clear_cache
from plugin_schema.validation import ValidationPipeline

VALID_MANIFEST = """\
version: 0.0.1
type: plugin
author: langgenius
name: weather_tool
label:
  en_US: Weather
  zh_Hans: 天气
description:
  en_US: Query the weather
icon: icon.svg
resource:
  memory: 268435456
  permission:
    tool:
      enabled: true
    storage:
      enabled: true
      size: 1048576
plugins:
  tools:
    - provider/weather.yaml
meta:
  version: 0.0.1
  arch:
    - amd64
    - arm64
  runner:
    language: python
    version: "3.12"
    entrypoint: main
created_at: 2024-09-20T08:03:44.658609186Z
"""

VALID_TOOL = """\
identity:
  name: weather_search
  author: langgenius
  label:
    en_US: Weather Search
description:
  human:
    en_US: Search the weather
  llm: Searches the weather for a city
parameters:
  - name: city
    type: string
    required: true
    label:
      en_US: City
    form: llm
extra:
  python:
    source: tools/weather_search.py
"""

VALID_PROVIDER = """\
identity:
  author: langgenius
  name: weather
  label:
    en_US: Weather
  description:
    en_US: Weather tools
  icon: icon.svg
  tags:
    - weather
credentials_for_provider:
  api_key:
    type: secret-input
    required: true
    label:
      en_US: API Key
tools:
  - tools/weather_search.yaml
extra:
  python:
    source: provider/weather.py
"""


@pytest.fixture(autouse=True)
def _clear_schema_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def registry():
    return SchemaRegistry()


@pytest.fixture
def pipeline(registry):
    return ValidationPipeline(registry.validators())


def line_of(text: str, line: str) -> int:
    """0-based index of the first line equal to ``line``."""
    return text.splitlines().index(line)
