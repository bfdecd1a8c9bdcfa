#!/usr/bin/env python3
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

"""CLI entry point for linting plugin manifest, tool and provider files."""

import argparse
import sys
from pathlib import Path
from typing import Iterable, List

from ..config import validator_config
from ..project.classifier import ProjectClassifier
from ..schema.json_schema_loader import SchemaRegistry
from ..validation.pipeline import ValidationPipeline, schema_kind_for_path
from . import lint_files
from .report import REPORTERS, total_errors

DOCUMENT_GLOBS = ('manifest.yaml', 'tools/*.yaml', 'provider/*.yaml')


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def find_yaml_files(paths: Iterable[str]) -> List[Path]:
    """Collect plugin documents from files and directory trees."""
    found = set()

    for path in map(Path, paths):
        if path.is_dir():
            for pattern in DOCUMENT_GLOBS:
                found.update(path.rglob(pattern))
        elif path.is_file():
            if schema_kind_for_path(path) is None:
                _warn(f"{path} is not a manifest, tools/*.yaml or provider/*.yaml document")
                continue
            found.add(path)
        elif not path.exists():
            _warn(f"Path does not exist: {path}")
        else:
            _warn(f"Path is neither file nor directory: {path}")

    return sorted(found)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='plugin-schema-lint',
        description='Validate plugin manifest, tool and provider YAML files',
    )
    parser.add_argument('paths', nargs='*', help='Files or directories to lint (default: current directory)')
    parser.add_argument('--format', choices=sorted(REPORTERS), default='human', help='Output format (default: human)')
    parser.add_argument(
        '--projects-only',
        action='store_true',
        help='Skip documents outside directories holding every project marker file',
    )
    parser.add_argument(
        '--schema-dir',
        type=Path,
        help='Directory with manifest.json, tool.json and provider.json (default: bundled schemas)',
    )
    return parser


def main(argv: List[str] | None = None) -> None:
    """Lint the given paths and exit with status 1 on any error."""
    args = build_parser().parse_args(argv)
    validator_config.set_logging(low_stream=sys.stderr)

    yaml_files = find_yaml_files(args.paths or ['.'])
    if not yaml_files:
        print("No plugin YAML files found.", file=sys.stderr)
        sys.exit(1)

    registry = SchemaRegistry(args.schema_dir or validator_config.schema_dir)
    classifier = ProjectClassifier(validator_config.markers) if args.projects_only else None
    results = lint_files(yaml_files, ValidationPipeline(registry.validators()), classifier)

    REPORTERS[args.format](results)
    sys.exit(1 if total_errors(results) else 0)


if __name__ == '__main__':
    main()
