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

"""Custom exceptions for the plugin schema validator."""

from typing import Optional


class PluginSchemaError(Exception):
    """Base exception for plugin schema related errors."""
    pass


class YamlParseError(PluginSchemaError):
    """Exception raised when a document cannot be parsed as YAML.

    Args:
        message: Parser message
        line: 0-based line reported by the parser, if any
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line


class ConfigurationError(PluginSchemaError):
    """Exception raised when a schema artifact is missing or invalid."""
    pass
