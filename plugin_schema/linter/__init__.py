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

"""Linter package for plugin document validation."""

import logging
from pathlib import Path
from typing import List, Optional

from ..models.document import Document
from ..project.classifier import ProjectClassifier
from ..validation.pipeline import ValidationPipeline, project_root_for, schema_kind_for_path
from .report import LintResult

__all__ = ['lint_files', 'LintResult']

logger = logging.getLogger(__name__)


def lint_files(
    file_paths: List[Path],
    pipeline: ValidationPipeline,
    classifier: Optional[ProjectClassifier] = None,
) -> List[LintResult]:
    """Lint a list of plugin YAML files.

    Args:
        file_paths: List of file paths to lint
        pipeline: Pipeline with the compiled validators
        classifier: When given, files outside recognized plugin directories
            are skipped

    Returns:
        List of LintResult objects, one per linted file
    """
    results = []

    for file_path in file_paths:
        kind = schema_kind_for_path(file_path)
        if kind is None:
            continue

        if classifier is not None:
            root = project_root_for(file_path, kind)
            if classifier.state(root) is None:
                classifier.check_path(root)
            if not classifier.is_recognized(root):
                logger.info(f"Skipping {file_path}: not inside a plugin directory")
                continue

        result = LintResult(file_path)
        try:
            text = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Failed to read file: {e}")
            results.append(result)
            continue

        document = Document(uri=file_path.resolve().as_uri(), text=text)
        for diagnostic in pipeline.run(document, kind):
            result.add_diagnostic(diagnostic)

        results.append(result)

    return results
