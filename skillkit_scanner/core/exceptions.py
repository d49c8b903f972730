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

"""SkillKit Scanner exceptions.

All exceptions inherit from SkillScannerError for easy catching.

Example:
    >>> from skillkit_scanner.core.scanner import SkillScanner
    >>> from skillkit_scanner.core.exceptions import ScanTargetError
    >>>
    >>> scanner = SkillScanner()
    >>>
    >>> try:
    ...     result = scanner.scan("path/to/skill")
    ... except ScanTargetError as e:
    ...     print(f"Cannot scan: {e}")
"""


class SkillScannerError(Exception):
    """Base exception for all SkillKit Scanner errors."""

    pass


class RuleLoadError(SkillScannerError):
    """Raised when the rule catalog cannot be built.

    This indicates a programming error in a signature pack:
    - Unreadable or non-list YAML file
    - Missing required rule field
    - Unknown category or severity
    - Regex that does not compile
    """

    pass


class ScanTargetError(SkillScannerError):
    """Raised when the scan target does not exist or is not a directory."""

    pass


class AnalyzerFailure(SkillScannerError):
    """Wraps an exception raised inside a single analyzer.

    The orchestrator records these on the ScanResult instead of letting
    them escape ``SkillScanner.scan``.
    """

    def __init__(self, analyzer: str, cause: BaseException):
        self.analyzer = analyzer
        self.cause = cause
        super().__init__(f"{analyzer} analyzer failed: {type(cause).__name__}: {cause}")
