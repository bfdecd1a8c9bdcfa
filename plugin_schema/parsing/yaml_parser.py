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

"""YAML document parser used by the validation pipeline."""

import logging
from collections.abc import Hashable
from pathlib import Path
from typing import Any, Union

import yaml
from yaml.constructor import ConstructorError

from ..exceptions import YamlParseError

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class PluginYamlLoader(yaml.SafeLoader):
    """SafeLoader variant for plugin documents.

    - Timestamps stay plain strings so string formats (``date-time``) are
      checked against the text the author wrote.
    - On duplicate mapping keys the first occurrence wins.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        explicit_count = sum(1 for key_node, _ in node.value if key_node.tag != "tag:yaml.org,2002:merge")
        self.flatten_mapping(node)
        # flatten_mapping prepends merged pairs; explicit keys must take precedence
        split = len(node.value) - explicit_count
        pairs = node.value[split:] + list(reversed(node.value[:split]))

        mapping = {}
        for position, (key_node, value_node) in enumerate(pairs):
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    "found unhashable key", key_node.start_mark,
                )
            if key in mapping:
                if position < explicit_count:
                    logger.debug(f"Ignoring duplicate key {key!r} at line {key_node.start_mark.line + 1}")
                continue
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


PluginYamlLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _error_line(exc: yaml.YAMLError):
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    if mark is None:
        return None
    return int(mark.line)


class YamlParser:
    """Parses document text into a plain value tree."""

    def parse(self, content: str) -> Any:
        """Parse YAML content.

        Args:
            content: YAML text of a single document

        Returns:
            Parsed value

        Raises:
            YamlParseError: If the content is not valid YAML, holds more than
                one document, or is empty
        """
        try:
            value = yaml.load(content, Loader=PluginYamlLoader)
        except yaml.YAMLError as exc:
            raise YamlParseError(str(exc), line=_error_line(exc)) from exc

        if value is None:
            raise YamlParseError("Empty document")

        return value

    def read_text(self, file_path: Union[str, Path]) -> str:
        """Read a document from disk as UTF-8 text."""
        path = Path(file_path)
        logger.debug(f"Reading document: {path}")
        return path.read_text(encoding="utf-8")


# Global parser instance
yaml_parser = YamlParser()
