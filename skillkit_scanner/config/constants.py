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
Constants for SkillKit Scanner.
"""

from pathlib import Path

from .._version import __version__ as PACKAGE_VERSION


class ScannerConstants:
    """Constants used throughout the scanner."""

    VERSION = PACKAGE_VERSION
    TOOL_NAME = "skillkit-scanner"

    # Project paths
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    SIGNATURES_DIR = DATA_DIR / "packs" / "core" / "signatures"

    # Default values
    DEFAULT_FAIL_ON = "high"
    DEFAULT_OUTPUT_FORMAT = "summary"
    DEFAULT_MAX_SECRET_FILE_CHARS = 1_000_000

    OUTPUT_FORMATS = ("summary", "json", "table", "sarif")
    FAIL_ON_LEVELS = ("critical", "high", "medium", "low", "info")
    ANALYZERS = ("static", "manifest", "secrets")

    # Environment variables
    ENV_FAIL_ON = "SKILLKIT_SCAN_FAIL_ON"
    ENV_SKIP_RULES = "SKILLKIT_SCAN_SKIP_RULES"
    ENV_MAX_SECRET_FILE_CHARS = "SKILLKIT_SCAN_MAX_SECRET_FILE_CHARS"
    ENV_OUTPUT_FORMAT = "SKILLKIT_SCAN_OUTPUT_FORMAT"
    ENV_ALLOWED_ROOTS = "SKILLKIT_SCAN_ALLOWED_ROOTS"

    @classmethod
    def get_signatures_path(cls) -> Path:
        """Get path to the built-in signature directory."""
        return cls.SIGNATURES_DIR
