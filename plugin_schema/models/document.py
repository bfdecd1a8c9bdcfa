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

"""Document, position and diagnostic records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True)
class Document:
    """Immutable snapshot of a text document."""

    uri: str
    text: str
    version: int = 0


@dataclass(frozen=True)
class Position:
    line: int  # 0-based
    character: int  # 0-based


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def from_coords(cls, start_line: int, start_col: int, end_line: int, end_col: int) -> "Range":
        return cls(Position(start_line, start_col), Position(end_line, end_col))


DOCUMENT_START = Range.from_coords(0, 0, 0, 0)


class Severity(IntEnum):
    # Values follow the LSP DiagnosticSeverity numbering.
    ERROR = 1
    WARNING = 2


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: Severity = Severity.ERROR
