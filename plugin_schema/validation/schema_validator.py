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

"""Compiled JSON Schema (draft-07) validators producing structured failures."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError, ValidationError

from ..exceptions import ConfigurationError
from ..models.failure import (
    AdditionalPropertyParams,
    ConstParams,
    EnumParams,
    FailureKind,
    FormatParams,
    LimitParams,
    OtherParams,
    PatternParams,
    RequiredParams,
    TypeParams,
    ValidationFailure,
)

logger = logging.getLogger(__name__)


def _missing_properties(error: ValidationError) -> List[str]:
    instance = error.instance if isinstance(error.instance, dict) else {}
    return [name for name in error.validator_value if name not in instance]


def _unexpected_properties(error: ValidationError) -> List[str]:
    if not isinstance(error.instance, dict):
        return []
    properties = error.schema.get("properties", {})
    patterns = error.schema.get("patternProperties", {})
    return [
        name
        for name in error.instance
        if name not in properties and not any(re.search(pattern, str(name)) for pattern in patterns)
    ]


class CompiledValidator:
    """Reusable validator for one schema document.

    ``validate`` is a pure function of (schema, value); the wrapped
    ``Draft7Validator`` holds no per-call state.
    """

    def __init__(self, schema: Dict[str, Any]):
        self.schema = schema
        self._validator = Draft7Validator(schema, format_checker=FormatChecker())

    def validate(self, value: Any) -> List[ValidationFailure]:
        """Validate ``value`` and return failures in the engine's order."""
        failures: List[ValidationFailure] = []
        # jsonschema reports each missing property as its own error, in the
        # order of the schema's ``required`` list.
        required_seen: Dict[Tuple[Tuple[Any, ...], Tuple[Any, ...]], int] = {}

        for error in self._validator.iter_errors(value):
            path = tuple(error.absolute_path)
            if error.validator == "required":
                key = (path, tuple(error.absolute_schema_path))
                position = required_seen.get(key, 0)
                required_seen[key] = position + 1
                missing = _missing_properties(error)
                if position < len(missing):
                    failures.append(
                        ValidationFailure(path, FailureKind.REQUIRED, RequiredParams(missing[position]))
                    )
                    continue
            elif error.validator == "additionalProperties" and error.validator_value is False:
                failures.extend(
                    ValidationFailure(path, FailureKind.ADDITIONAL_PROPERTIES, AdditionalPropertyParams(name))
                    for name in _unexpected_properties(error)
                )
                continue
            failures.append(self._to_failure(path, error))

        return failures

    @staticmethod
    def _to_failure(path: Tuple[Any, ...], error: ValidationError) -> ValidationFailure:
        keyword = error.validator
        expected = error.validator_value

        if keyword == "type":
            types = (expected,) if isinstance(expected, str) else tuple(expected)
            return ValidationFailure(path, FailureKind.TYPE, TypeParams(types))
        if keyword == "enum":
            return ValidationFailure(path, FailureKind.ENUM, EnumParams(tuple(expected)))
        if keyword == "const":
            return ValidationFailure(path, FailureKind.CONST, ConstParams(expected))
        if keyword == "pattern":
            return ValidationFailure(path, FailureKind.PATTERN, PatternParams(expected))
        if keyword == "format":
            return ValidationFailure(path, FailureKind.FORMAT, FormatParams(expected))
        if keyword == "minimum":
            return ValidationFailure(path, FailureKind.MINIMUM, LimitParams(expected))
        if keyword == "maximum":
            return ValidationFailure(path, FailureKind.MAXIMUM, LimitParams(expected))
        if keyword == "minProperties":
            return ValidationFailure(path, FailureKind.MIN_PROPERTIES, LimitParams(expected))
        return ValidationFailure(path, FailureKind.OTHER, OtherParams(error.message))


def compile_schema(schema: Dict[str, Any]) -> CompiledValidator:
    """Check and compile a draft-07 schema.

    Raises:
        ConfigurationError: If the schema itself is invalid
    """
    if not isinstance(schema, dict):
        raise ConfigurationError(f"Schema must be a JSON object, got {type(schema).__name__}")
    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        raise ConfigurationError(f"Invalid JSON Schema: {e.message}") from e
    return CompiledValidator(schema)

