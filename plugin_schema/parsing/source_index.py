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

"""Line/column index over raw YAML text.

At build time the text is composed with PyYAML and every value path is
mapped to the marks of its key token (mappings) or item marker (sequences);
``locate_path`` answers from that map.

When composition fails or a path is not in the map, the range resolver walks
the path with a forward token scan instead: ``locate_key`` finds the key
``K`` inside the block that starts at a given offset, ``locate_list_marker``
the n-th list item marker at a given indentation. The scan is not a grammar
parse; it does not see flow collections or aliases.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple

import yaml

from ..models.document import Position, Range
from .yaml_parser import PluginYamlLoader

logger = logging.getLogger(__name__)

_DASH_PREFIX = re.compile(r"(?:-(?: +|$))*")
_MERGE_TAG = "tag:yaml.org,2002:merge"
_BOM = "\ufeff"

NodePath = Tuple[Any, ...]


@dataclass(frozen=True)
class TokenMatch:
    """Located token: offsets into the text plus its column."""

    start: int
    end: int
    indent: int
    range: Range


@dataclass(frozen=True)
class _Line:
    number: int
    start: int
    text: str
    leading: int
    content_column: int
    is_content: bool

    @property
    def is_list_item(self) -> bool:
        return self.content_column > self.leading


def _scan_line(number: int, start: int, text: str) -> _Line:
    stripped = text.lstrip(" ")
    leading = len(text) - len(stripped)
    is_content = bool(stripped.strip()) and not stripped.startswith("#")
    if is_content and leading == 0 and text.startswith(("---", "...", "%")):
        is_content = False
    dashes = _DASH_PREFIX.match(text, leading)
    return _Line(
        number=number,
        start=start,
        text=text,
        leading=leading,
        content_column=leading + len(dashes.group(0)),
        is_content=is_content,
    )


def _key_pattern(key: str) -> "re.Pattern[str]":
    return re.compile(r"(?P<quote>[\"']?)(?P<key>%s)(?P=quote)[ \t]*:(?=\s|$)" % re.escape(key))


def _mapping_pairs(node: yaml.MappingNode, merging: FrozenSet[int] = frozenset()):
    """Key/value node pairs as the loader sees them: explicit keys, then merged ones."""
    pairs = [(key, value) for key, value in node.value if key.tag != _MERGE_TAG]
    for key, value in node.value:
        if key.tag != _MERGE_TAG:
            continue
        sources = value.value if isinstance(value, yaml.SequenceNode) else [value]
        for source in sources:
            if isinstance(source, yaml.MappingNode) and id(source) not in merging:
                pairs.extend(_mapping_pairs(source, merging | {id(source)}))
    return pairs


class SourceIndex:
    """Queryable index of a document's text."""

    def __init__(self, text: str):
        self.text = text
        self._line_starts: List[int] = []
        self._lines: List[_Line] = []

        offset = 0
        for number, raw in enumerate(text.split("\n")):
            body = raw[:-1] if raw.endswith("\r") else raw
            self._line_starts.append(offset)
            if number == 0 and body.startswith(_BOM):
                # The byte order mark takes no column in the scan.
                self._lines.append(_scan_line(number, offset + 1, body[1:]))
            else:
                self._lines.append(_scan_line(number, offset, body))
            offset += len(raw) + 1

        self._paths: Dict[NodePath, TokenMatch] = self._build_path_map()

    @classmethod
    def build(cls, text: str) -> "SourceIndex":
        return cls(text)

    def _build_path_map(self) -> Dict[NodePath, TokenMatch]:
        """Map value paths to key tokens and item markers using PyYAML node marks."""
        paths: Dict[NodePath, TokenMatch] = {}
        loader = PluginYamlLoader(self.text)
        try:
            root = loader.get_single_node()
            if root is not None:
                self._walk(loader, root, (), paths, set())
        except yaml.YAMLError as e:
            # Parse errors are reported by the parser; the scan still works.
            logger.debug(f"Source map unavailable, using text scan: {e}")
            return {}
        finally:
            loader.dispose()
        return paths

    def _walk(self, loader, node, path: NodePath, paths: Dict[NodePath, TokenMatch], walked: Set[int]):
        # An aliased node is mapped under its first path only.
        if id(node) in walked:
            return
        walked.add(id(node))

        if isinstance(node, yaml.MappingNode):
            for key_node, value_node in _mapping_pairs(node):
                if not isinstance(key_node, yaml.ScalarNode):
                    continue
                try:
                    key = loader.construct_object(key_node, deep=True)
                except yaml.YAMLError:
                    continue
                child = path + (key,)
                # First occurrence wins, as in the loader.
                if child in paths:
                    continue
                paths[child] = self._key_token(key_node)
                self._walk(loader, value_node, child, paths, walked)
        elif isinstance(node, yaml.SequenceNode):
            for position, item in enumerate(node.value):
                child = path + (position,)
                paths[child] = self._item_token(node, item)
                self._walk(loader, item, child, paths, walked)

    def _token(self, start: int, end: int) -> TokenMatch:
        return TokenMatch(start, end, self.position_at(start).character, self.range_between(start, end))

    def _key_token(self, key_node: yaml.ScalarNode) -> TokenMatch:
        start, end = key_node.start_mark.index, key_node.end_mark.index
        if key_node.style in ("'", '"') and end - start >= 2:
            start, end = start + 1, end - 1
        return self._token(start, end)

    def _item_token(self, sequence: yaml.SequenceNode, item) -> TokenMatch:
        """The ``-`` marker of a block item, or the item itself inside ``[...]``."""
        if not sequence.flow_style:
            offset = item.start_mark.index - 1
            while offset >= 0 and self.text[offset] in " \t\r\n":
                offset -= 1
            if offset >= 0 and self.text[offset] == "-":
                return self._token(offset, offset + 1)
        return self._token(item.start_mark.index, max(item.end_mark.index, item.start_mark.index))

    def locate_path(self, path: NodePath) -> Optional[TokenMatch]:
        """Key token or item marker of the value at ``path``, if composed."""
        return self._paths.get(tuple(path))

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_of(self, offset: int) -> int:
        offset = min(max(offset, 0), len(self.text))
        return bisect_right(self._line_starts, offset) - 1

    def position_at(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self.text))
        line = self.line_of(offset)
        return Position(line, offset - self._line_starts[line])

    def range_between(self, start: int, end: int) -> Range:
        return Range(self.position_at(start), self.position_at(end))

    def line_range(self, line: int) -> Range:
        """Full-width range of ``line``, clamped to the last line."""
        line = min(max(line, 0), len(self._lines) - 1)
        return Range.from_coords(line, 0, line, len(self._lines[line].text))

    def locate_key(self, scope_start: int, key: str, parent_indent: int = -1) -> Optional[TokenMatch]:
        """Find ``key:`` in the block starting at ``scope_start``.

        Args:
            scope_start: Offset to scan forward from (never backward)
            key: Mapping key to find
            parent_indent: Column of the block's owner; a content line at or
                left of it ends the block. -1 scans to the end of the text.

        Returns:
            The key token (quotes excluded), or None
        """
        pattern = _key_pattern(key)
        first_line = self.line_of(scope_start)
        child_column = None

        for line in self._lines[first_line:]:
            if not line.is_content:
                continue
            if line.start + line.content_column < scope_start:
                continue
            if line.number != first_line and parent_indent >= 0 and line.leading <= parent_indent:
                return None

            # A bare "-" line opens an item whose keys start on the next line.
            if line.content_column >= len(line.text.rstrip()):
                continue

            # Sibling keys of the block share the column of its first key.
            if child_column is None:
                child_column = line.content_column
            if line.content_column != child_column:
                continue

            match = pattern.match(line.text, line.content_column)
            if match:
                start = line.start + match.start("key")
                end = line.start + match.end("key")
                return TokenMatch(start, end, line.content_column, self.range_between(start, end))

        return None

    def locate_list_marker(self, scope_start: int, indent: int, n: int) -> Optional[TokenMatch]:
        """Find the ``n``-th (0-based) ``- `` item marker at exactly ``indent`` spaces.

        The list ends at the first content line left of ``indent`` or at a
        non-item line at ``indent``.
        """
        first_line = self.line_of(scope_start)
        count = 0

        for line in self._lines[first_line:]:
            if not line.is_content:
                continue
            if line.start + line.leading < scope_start:
                continue
            if line.leading < indent:
                return None
            if line.leading > indent:
                continue
            if not line.is_list_item:
                return None
            if count == n:
                start = line.start + line.leading
                return TokenMatch(start, start + 1, indent, self.range_between(start, start + 1))
            count += 1

        return None
