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

"""Lint results and their output formats."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

from ..models.document import Diagnostic, Severity


class LintResult:
    """Container for linting results for a single file."""

    def __init__(self, file_path: Path):
        """Initialize lint result.

        Args:
            file_path: Path to the file being linted
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    def add_diagnostic(self, diagnostic: Diagnostic):
        """Record a diagnostic with 1-based line/column."""
        entry = {
            'message': diagnostic.message,
            'line': diagnostic.range.start.line + 1,
            'column': diagnostic.range.start.character + 1,
        }
        if diagnostic.severity == Severity.WARNING:
            self.warnings.append(entry)
        else:
            self.errors.append(entry)

    def add_error(self, message: str):
        """Add an error message that has no source location."""
        self.errors.append({'message': message})

    def entries(self):
        """Yield ``(label, entry)`` pairs, errors first."""
        for entry in self.errors:
            yield 'error', entry
        for entry in self.warnings:
            yield 'warning', entry


def total_errors(results: List[LintResult]) -> int:
    return sum(len(r.errors) for r in results)


def report_json(results: List[LintResult]) -> None:
    summary = {
        'files': len(results),
        'errors': total_errors(results),
        'warnings': sum(len(r.warnings) for r in results),
        'results': [
            {'file': str(r.file_path), 'errors': r.errors, 'warnings': r.warnings}
            for r in results
        ],
    }
    print(json.dumps(summary, indent=2))


def report_github_actions(results: List[LintResult]) -> None:
    # Workflow command annotations; entries without a location point at 1:1
    for result in results:
        for label, entry in result.entries():
            location = f"line={entry.get('line', 1)},col={entry.get('column', 1)}"
            print(f"::{label} file={result.file_path},{location}::{entry['message']}")


def report_human(results: List[LintResult]) -> None:
    for result in results:
        if not (result.errors or result.warnings):
            continue
        print(f"\n{result.file_path}:")
        for label, entry in result.entries():
            location = f":{entry['line']}:{entry['column']}" if 'line' in entry else ""
            print(f"  {label.upper()}{location}: {entry['message']}")
    if not total_errors(results):
        print("Lint succeeded with no errors.")


REPORTERS: Dict[str, Callable[[List[LintResult]], None]] = {
    'human': report_human,
    'json': report_json,
    'github-actions': report_github_actions,
}
