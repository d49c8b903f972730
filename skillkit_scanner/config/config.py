# Copyright 2026 Cisco Systems, Inc.
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
#
# SPDX-License-Identifier: Apache-2.0

"""
Configuration class for SkillKit Scanner.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from ..core.models import ScanOptions, Severity
from .constants import ScannerConstants


@dataclass
class Config:
    """
    Configuration for SkillKit Scanner.

    Values not passed explicitly are read from ``SKILLKIT_SCAN_*``
    environment variables.
    """

    fail_on: str | None = None
    skip_rules: list[str] = field(default_factory=list)
    max_secret_file_chars: int | None = None
    output_format: str | None = None

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.fail_on is None:
            self.fail_on = os.getenv(ScannerConstants.ENV_FAIL_ON, ScannerConstants.DEFAULT_FAIL_ON)

        if not self.skip_rules:
            env_skip = os.getenv(ScannerConstants.ENV_SKIP_RULES, "")
            self.skip_rules = [r.strip() for r in env_skip.split(",") if r.strip()]

        if self.max_secret_file_chars is None:
            env_max = os.getenv(ScannerConstants.ENV_MAX_SECRET_FILE_CHARS)
            try:
                self.max_secret_file_chars = int(env_max) if env_max else ScannerConstants.DEFAULT_MAX_SECRET_FILE_CHARS
            except ValueError:
                raise ValueError(f"{ScannerConstants.ENV_MAX_SECRET_FILE_CHARS} must be an integer, got {env_max!r}")

        if self.output_format is None:
            self.output_format = os.getenv(ScannerConstants.ENV_OUTPUT_FORMAT, ScannerConstants.DEFAULT_OUTPUT_FORMAT)

    def to_scan_options(self) -> ScanOptions:
        """
        Build scan options from this configuration.

        Raises:
            ValueError: If ``fail_on`` is not a severity name.
        """
        return ScanOptions(fail_on=Severity.from_string(self.fail_on or ""), skip_rules=frozenset(self.skip_rules))

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from a .env file.

        Variables already set in the environment take precedence over the file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if Path(config_file).exists():
            load_dotenv(config_file, override=False)

        return cls.from_env()
