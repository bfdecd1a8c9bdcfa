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

"""Map validation failure paths back to text ranges."""

from __future__ import annotations

import logging
from typing import Sequence

from ..models.document import DOCUMENT_START, Range
from ..models.failure import AdditionalPropertyParams, FailureKind, PathSegment, ValidationFailure
from ..parsing.source_index import SourceIndex

logger = logging.getLogger(__name__)

# List items are expected two columns deeper than their owning key.
LIST_ITEM_INDENT = 2


def resolve_path(path: Sequence[PathSegment], index: SourceIndex) -> Range:
    """Range of the token that ``path`` ends at.

    String segments resolve to the key token, integer segments to the list
    item marker. Paths found in the composed source map are answered from it;
    otherwise the path is walked over the text. Any segment that cannot be
    located yields the document start.
    """
    if not path:
        return DOCUMENT_START

    composed = index.locate_path(path)
    if composed is not None:
        return composed.range

    scope_start = 0
    current_indent = -1
    resolved = DOCUMENT_START

    for segment in path:
        # bool keys (yes/no/on/off) are mapping keys, not list indexes
        if type(segment) is int:
            indent = current_indent + LIST_ITEM_INDENT if current_indent >= 0 else 0
            match = index.locate_list_marker(scope_start, indent, segment)
        else:
            match = index.locate_key(scope_start, str(segment), current_indent)

        if match is None:
            logger.debug(f"Could not locate segment {segment!r} of path {list(path)}")
            return DOCUMENT_START

        # Markers anchor their item block at the marker itself; keys anchor
        # their value block just past the key token.
        scope_start = match.start if type(segment) is int else match.end
        current_indent = match.indent
        resolved = match.range

    return resolved


def resolve(failure: ValidationFailure, index: SourceIndex) -> Range:
    """Best-effort text range for ``failure``.

    ``Required`` failures carry the parent object's path, so they range the
    parent key (document start for a missing top-level property).
    ``AdditionalProperties`` failures range the unexpected key itself.
    """
    if failure.kind == FailureKind.ADDITIONAL_PROPERTIES and isinstance(failure.params, AdditionalPropertyParams):
        return resolve_path(failure.path + (failure.params.property_name,), index)
    return resolve_path(failure.path, index)
