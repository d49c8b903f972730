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
File discovery for skill directories.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Dependency caches and virtualenvs are never part of a skill's own content
SKIP_DIRECTORIES = frozenset({"node_modules", "__pycache__", ".venv", "venv", "bower_components"})


def _is_env_file(name: str) -> bool:
    return name == ".env" or name.startswith(".env.")


def _should_skip(name: str) -> bool:
    if name in SKIP_DIRECTORIES:
        return True
    return name.startswith(".") and not _is_env_file(name)


def discover_files(root: str | Path) -> list[Path]:
    """
    Recursively list the files of a skill directory.

    Dot-prefixed entries are skipped, except ``.env`` and ``.env.*`` files
    which are kept so the secrets analyzer can flag them. Directories that
    cannot be listed are treated as empty. Symlinked directories are not
    followed.

    Args:
        root: Skill directory

    Returns:
        Absolute file paths, ordered by name within each directory
    """
    root_path = Path(root).absolute()
    files: list[Path] = []
    _walk(root_path, files)
    return files


def _walk(directory: Path, files: list[Path]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return

    for entry in entries:
        if _should_skip(entry.name):
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                _walk(Path(entry.path), files)
            elif entry.is_file():
                files.append(Path(entry.path))
        except OSError as e:
            logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
