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

"""Human-readable messages for validation failures."""

import json
from typing import Any

from ..models.failure import FailureKind, ValidationFailure

ROOT_LABEL = "manifest"


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def format_failure(failure: ValidationFailure) -> str:
    """Return the message for ``failure``; pure and side-effect free."""
    kind = failure.kind
    params = failure.params
    path = failure.dotted_path or ROOT_LABEL

    if kind == FailureKind.REQUIRED:
        return f"Missing required property: '{params.missing_property}'"
    if kind == FailureKind.TYPE:
        return f"'{path}' should be {' or '.join(params.types)}"
    if kind == FailureKind.ENUM:
        allowed = ", ".join(_render_value(value) for value in params.allowed_values)
        return f"'{path}' should be one of: {allowed}"
    if kind == FailureKind.CONST:
        return f"'{path}' should be equal to: {_render_value(params.value)}"
    if kind == FailureKind.PATTERN:
        return f"'{path}' should match pattern: {params.pattern}"
    if kind == FailureKind.FORMAT:
        return f"'{path}' should be a valid {params.format}"
    if kind == FailureKind.MINIMUM:
        return f"'{path}' should be >= {params.limit}"
    if kind == FailureKind.MAXIMUM:
        return f"'{path}' should be <= {params.limit}"
    if kind == FailureKind.MIN_PROPERTIES:
        return f"'{path}' should have at least {params.limit} properties"
    if kind == FailureKind.ADDITIONAL_PROPERTIES:
        return f"'{path}' has unexpected property: '{params.property_name}'"

    message = getattr(params, "message", None)
    return message or f"Validation error in {path}"
