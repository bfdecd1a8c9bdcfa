# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""JSON Schema loader for plugin document validation."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..exceptions import ConfigurationError
from ..models.schema_kind import SchemaKind
from ..validation.schema_validator import CompiledValidator, compile_schema

logger = logging.getLogger(__name__)


# Schema cache to avoid reloading files
_SCHEMA_CACHE: Dict[str, dict] = {}


def get_schema_path(kind: SchemaKind, schema_dir: Union[str, Path, None] = None) -> Path:
    """Get the path to the JSON Schema file for the given document kind.

    Args:
        kind: Document kind (manifest, tool, provider)
        schema_dir: Directory holding the schema files. Defaults to the
            schemas bundled with this package.

    Returns:
        Path to the schema file
    """
    directory = Path(schema_dir) if schema_dir is not None else Path(__file__).parent
    return directory / f"{SchemaKind(kind).value}.json"


def load_schema(kind: SchemaKind, schema_dir: Union[str, Path, None] = None) -> dict:
    """Load the JSON Schema file for the given document kind.

    Raises:
        ConfigurationError: If the schema file is missing or is not valid JSON
    """
    schema_path = get_schema_path(kind, schema_dir)

    cache_key = str(schema_path)
    if cache_key in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[cache_key]

    if not schema_path.exists():
        raise ConfigurationError(f"Schema file not found for {SchemaKind(kind).value}: {schema_path}")

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in schema file {schema_path}: {e.msg} (line {e.lineno})") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read schema file {schema_path}: {e}") from e

    _SCHEMA_CACHE[cache_key] = schema

    return schema


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()


class SchemaRegistry:
    """Loads and compiles one validator per document kind.

    A kind whose schema cannot be loaded or compiled is logged and left
    without a validator, so documents of that kind are not schema-checked
    until the artifact is fixed.
    """

    def __init__(self, schema_dir: Union[str, Path, None] = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else None
        self._validators: Dict[SchemaKind, Optional[CompiledValidator]] = {}

    def validator_for(self, kind: SchemaKind) -> Optional[CompiledValidator]:
        kind = SchemaKind(kind)
        if kind not in self._validators:
            self._validators[kind] = self._compile(kind)
        return self._validators[kind]

    def validators(self) -> Dict[SchemaKind, CompiledValidator]:
        """Compiled validators for every kind whose schema is usable."""
        compiled = {}
        for kind in SchemaKind:
            validator = self.validator_for(kind)
            if validator is not None:
                compiled[kind] = validator
        return compiled

    def _compile(self, kind: SchemaKind) -> Optional[CompiledValidator]:
        try:
            validator = compile_schema(load_schema(kind, self.schema_dir))
        except ConfigurationError as e:
            logger.error(f"Schema for '{kind.value}' is unavailable, validation disabled: {e}")
            return None
        logger.debug(f"Compiled schema for '{kind.value}'")
        return validator
