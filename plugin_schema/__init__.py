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

"""Schema diagnostics for plugin configuration documents."""

from .exceptions import ConfigurationError, PluginSchemaError, YamlParseError
from .models import DOCUMENT_START, Diagnostic, Document, Position, Range, SchemaKind, Severity
from .project import ProjectClassifier, ProjectEvent, ProjectEventKind
from .schema import SchemaRegistry
from .validation import ValidationPipeline, schema_kind_for_path

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DOCUMENT_START",
    "Diagnostic",
    "Document",
    "PluginSchemaError",
    "Position",
    "ProjectClassifier",
    "ProjectEvent",
    "ProjectEventKind",
    "Range",
    "SchemaKind",
    "SchemaRegistry",
    "Severity",
    "ValidationPipeline",
    "YamlParseError",
    "schema_kind_for_path",
]
