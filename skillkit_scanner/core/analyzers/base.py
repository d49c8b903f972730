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
Base analyzer interface for skill security scanning.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path

from ..models import Finding, ThreatCategory

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str | None:
    """Read a file as UTF-8 text, or return None if it cannot be read."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None


class BaseAnalyzer(ABC):
    """Abstract base class for all security analyzers.

    Analyzers keep no per-scan state on the instance, so one analyzer may be
    shared by concurrent scans.
    """

    #: Prefix for the analyzer-local finding ids (``F1``, ``MF1``, ...)
    id_prefix = ""

    def __init__(self, name: str, skip_rules: Iterable[str] | None = None):
        """
        Initialize analyzer.

        Args:
            name: Name of the analyzer
            skip_rules: Rule ids and/or category names that must not be evaluated.
        """
        self.name = name
        self.skip_rules = frozenset(skip_rules or ())

    @abstractmethod
    def analyze(self, skill_path: Path, files: list[Path]) -> list[Finding]:
        """
        Analyze the files of a skill for security issues.

        Args:
            skill_path: Root directory of the skill
            files: Files found under *skill_path* by discovery

        Returns:
            List of security findings
        """
        pass

    def get_name(self) -> str:
        """Get the analyzer name."""
        return self.name

    def is_skipped(self, rule_id: str, category: ThreatCategory) -> bool:
        """True if *rule_id* or its category was listed in ``skip_rules``."""
        return rule_id in self.skip_rules or category.value in self.skip_rules

    def id_sequence(self) -> Callable[[], str]:
        """Return a fresh id generator; ids restart at 1 for every ``analyze`` call."""
        counter = itertools.count(1)
        return lambda: f"{self.id_prefix}{next(counter)}"
