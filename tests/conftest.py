# Copyright 2026 Cisco Systems, Inc. and its affiliates
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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from dotenv import load_dotenv

from skillkit_scanner.core.models import ScanOptions
from skillkit_scanner.core.scanner import SkillScanner

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


# ---------------------------------------------------------------------------
# Skill content
# ---------------------------------------------------------------------------

VALID_SKILL_MD = """---
name: table-formatter
description: Formats markdown tables into aligned columns
---

# Table Formatter

Use this skill to align the columns of a markdown table.
"""


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_skill_dir(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes a skill directory from ``{relative_path: content}``.

    String content is written as UTF-8 text, bytes are written as-is.
    """

    def _factory(files: dict[str, str | bytes], name: str = "skill") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel_path, content in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _factory


@pytest.fixture
def valid_skill_dir(make_skill_dir) -> Path:
    """A well-formed skill that produces no findings."""
    return make_skill_dir({"SKILL.md": VALID_SKILL_MD}, name="table-formatter")


@pytest.fixture
def scanner() -> SkillScanner:
    """Scanner with default options and the three core analyzers."""
    return SkillScanner(options=ScanOptions())
