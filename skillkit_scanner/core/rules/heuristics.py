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
Shared heuristics: file-type tagging, test-file detection and placeholder
suppression.

The placeholder lists trade recall for precision. A real secret deliberately
named ``example_key`` will be suppressed; that is a known limitation.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePath

EXT_TO_FILE_TYPE: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
    ".md": "markdown",
    ".mdx": "markdown",
}

# Used by the static analyzer on lines and multiline snippets
PLACEHOLDER_PATTERNS = (
    re.compile(r"your[-_]?api[-_]?key", re.IGNORECASE),
    re.compile(r"example[-_]?token", re.IGNORECASE),
    re.compile(r"sample[-_]?secret", re.IGNORECASE),
    re.compile(r"dummy[-_]?password", re.IGNORECASE),
    re.compile(r"placeholder", re.IGNORECASE),
    re.compile(r"xxx+", re.IGNORECASE),
    re.compile(r"\.\.\."),
    re.compile(r"TODO"),
    re.compile(r"FIXME"),
)

# Broader list used by the secrets analyzer
SECRET_PLACEHOLDER_PATTERNS = (
    re.compile(r"your[-_]?api[-_]?key", re.IGNORECASE),
    re.compile(r"example", re.IGNORECASE),
    re.compile(r"sample", re.IGNORECASE),
    re.compile(r"dummy", re.IGNORECASE),
    re.compile(r"placeholder", re.IGNORECASE),
    re.compile(r"xxx+", re.IGNORECASE),
    re.compile(r"test[-_]?key", re.IGNORECASE),
    re.compile(r"fake", re.IGNORECASE),
    re.compile(r"replace[-_]?with", re.IGNORECASE),
    re.compile(r"<.*key.*>", re.IGNORECASE),
)

TEST_FILE_PATTERNS = (
    re.compile(r"\.test\.[jt]sx?$"),
    re.compile(r"\.spec\.[jt]sx?$"),
    re.compile(r"\.stories\.[jt]sx?$"),
    re.compile(r"(?:^|/)__tests__/"),
    re.compile(r"(?:^|/)tests?/"),
    re.compile(r"(?:^|/)test_[^/]*\.py$"),
    re.compile(r"_test\.py$"),
)


def detect_file_type(path: str | PurePath) -> str | None:
    """Map a file extension to a file-type tag, or None when unknown."""
    return EXT_TO_FILE_TYPE.get(PurePath(path).suffix.lower())


def is_placeholder(text: str) -> bool:
    return any(p.search(text) for p in PLACEHOLDER_PATTERNS)


def is_secret_placeholder(text: str) -> bool:
    return any(p.search(text) for p in SECRET_PLACEHOLDER_PATTERNS)


def is_test_file(path: str | PurePath, root: str | Path | None = None) -> bool:
    """Check whether *path* is a test, spec or story file by naming convention.

    When *root* is given only the part of the path below it is considered, so
    a skill that itself lives under a ``tests/`` directory is still scanned.
    """
    pure = PurePath(path)
    if root is not None:
        try:
            pure = pure.relative_to(root)
        except ValueError:
            pass
    normalized = pure.as_posix()
    return any(p.search(normalized) for p in TEST_FILE_PATTERNS)
