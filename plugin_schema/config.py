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

"""Configuration management for the plugin schema validator."""

import os
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Tuple

from .utils.logging_utils import configure_split_stream_logging

DEFAULT_MARKERS: Tuple[str, ...] = (".projectignore", "manifest.yaml", "main.py")
DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schema"


def _parse_markers(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return DEFAULT_MARKERS
    markers = tuple(item.strip() for item in value.split(",") if item.strip())
    return markers or DEFAULT_MARKERS


@dataclass
class ValidatorConfig:
    """Configuration class for the plugin schema validator."""
    log_level: str = "INFO"
    print_level: str = "WARNING"

    # paths
    schema_dir: Path = DEFAULT_SCHEMA_DIR

    # project recognition
    markers: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_MARKERS)

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        schema_dir = os.getenv('PLUGIN_SCHEMA_SCHEMA_DIR')
        return cls(
            log_level=os.getenv('PLUGIN_SCHEMA_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('PLUGIN_SCHEMA_PRINT_LEVEL', 'WARNING'),
            schema_dir=Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR,
            markers=_parse_markers(os.getenv('PLUGIN_SCHEMA_MARKERS')),
        )

    def set_logging(self, low_stream: Optional[TextIO] = None) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.WARNING)

        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        configure_split_stream_logging(
            level=level,
            stderr_level=stderr_level,
            formatter=formatter,
            low_stream=low_stream if low_stream is not None else sys.stdout,
        )

        return logging.getLogger('plugin_schema')


# Global configuration instance
validator_config = ValidatorConfig.from_env()
