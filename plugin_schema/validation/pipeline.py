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

"""Validation pipeline: parse, validate, resolve ranges, format."""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Any, List, Mapping, Optional, Protocol, Union

from ..exceptions import YamlParseError
from ..models.document import DOCUMENT_START, Diagnostic, Document, Severity
from ..models.failure import ValidationFailure
from ..parsing.source_index import SourceIndex
from ..parsing.yaml_parser import YamlParser, yaml_parser
from ..models.schema_kind import SchemaKind
from .formatter import format_failure
from .range_resolver import resolve

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.yaml"
_KIND_DIRECTORIES = {
    "tools": SchemaKind.TOOL,
    "provider": SchemaKind.PROVIDER,
}


class Validator(Protocol):
    def validate(self, value: Any) -> List[ValidationFailure]:
        ...


def schema_kind_for_path(path: Union[str, PurePath]) -> Optional[SchemaKind]:
    """Document kind for a file path, or None if the file is not validated."""
    file_path = PurePath(path)
    if file_path.name == MANIFEST_FILENAME:
        return SchemaKind.MANIFEST
    if file_path.suffix == ".yaml":
        return _KIND_DIRECTORIES.get(file_path.parent.name)
    return None


def project_root_for(path: Union[str, PurePath], kind: SchemaKind) -> PurePath:
    """Directory whose recognition gates validation of ``path``."""
    file_path = PurePath(path)
    if SchemaKind(kind) == SchemaKind.MANIFEST:
        return file_path.parent
    return file_path.parent.parent


class ValidationPipeline:
    """Runs one validation pass over a document snapshot.

    The pipeline keeps no memory between calls; the validators it is given
    are read-only and may be shared across documents.
    """

    def __init__(self, validators: Mapping[SchemaKind, Validator], parser: Optional[YamlParser] = None):
        self.validators = validators
        self.parser = parser if parser is not None else yaml_parser

    def run(self, document: Document, schema_kind: SchemaKind) -> List[Diagnostic]:
        """Return the full diagnostic list for ``document`` (empty if valid)."""
        try:
            return self._run(document, SchemaKind(schema_kind))
        except Exception as e:
            logger.exception(f"Unexpected error while validating {document.uri}")
            return [Diagnostic(DOCUMENT_START, f"Validation error: {e}", Severity.ERROR)]

    def _run(self, document: Document, schema_kind: SchemaKind) -> List[Diagnostic]:
        index = SourceIndex.build(document.text)

        try:
            value = self.parser.parse(document.text)
        except YamlParseError as e:
            logger.debug(f"Parse failure in {document.uri}: {e.message}")
            error_range = index.line_range(e.line) if e.line is not None else DOCUMENT_START
            return [Diagnostic(error_range, f"YAML parsing error: {e.message}", Severity.ERROR)]

        validator = self.validators.get(schema_kind)
        if validator is None:
            logger.debug(f"No validator for '{schema_kind.value}', skipping schema checks for {document.uri}")
            return []

        failures = validator.validate(value)
        diagnostics = [
            Diagnostic(resolve(failure, index), format_failure(failure), Severity.ERROR)
            for failure in failures
        ]
        logger.debug(f"{document.uri} (v{document.version}): {len(diagnostics)} diagnostics")
        return diagnostics
