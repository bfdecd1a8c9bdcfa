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

"""Structured schema validation failures.

A failure carries the JSON-Pointer path into the parsed value, its kind, and
a kind-specific parameter record. Each parameter record holds only the
fields its kind needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

PathSegment = Union[str, int]


class FailureKind(str, Enum):
    REQUIRED = "required"
    TYPE = "type"
    ENUM = "enum"
    CONST = "const"
    PATTERN = "pattern"
    FORMAT = "format"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    MIN_PROPERTIES = "minProperties"
    ADDITIONAL_PROPERTIES = "additionalProperties"
    OTHER = "other"


@dataclass(frozen=True)
class RequiredParams:
    missing_property: str


@dataclass(frozen=True)
class TypeParams:
    types: Tuple[str, ...]


@dataclass(frozen=True)
class EnumParams:
    allowed_values: Tuple[Any, ...]


@dataclass(frozen=True)
class ConstParams:
    value: Any


@dataclass(frozen=True)
class PatternParams:
    pattern: str


@dataclass(frozen=True)
class FormatParams:
    format: str


@dataclass(frozen=True)
class LimitParams:
    limit: Union[int, float]


@dataclass(frozen=True)
class AdditionalPropertyParams:
    property_name: str


@dataclass(frozen=True)
class OtherParams:
    message: Optional[str] = None


FailureParams = Union[
    RequiredParams,
    TypeParams,
    EnumParams,
    ConstParams,
    PatternParams,
    FormatParams,
    LimitParams,
    AdditionalPropertyParams,
    OtherParams,
]


@dataclass(frozen=True)
class ValidationFailure:
    path: Tuple[PathSegment, ...]
    kind: FailureKind
    params: FailureParams

    @property
    def dotted_path(self) -> str:
        """Path rendered as ``meta.runner.language`` (empty for the root)."""
        return ".".join(str(segment) for segment in self.path)
