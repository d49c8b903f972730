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
Rule catalog: security rules loaded from YAML signature packs.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from ...data import SIGNATURES_DIR
from ..exceptions import RuleLoadError
from ..models import Severity, ThreatCategory

logger = logging.getLogger(__name__)

# Built-in signature files, in catalog order
CATALOG_GROUPS = (
    "prompt_injection",
    "command_injection",
    "data_exfiltration",
    "tool_abuse",
    "unicode",
)

_REQUIRED_FIELDS = ("id", "category", "severity", "patterns", "description")


def _compile(patterns: Any, rule_id: str, label: str) -> tuple[re.Pattern[str], ...]:
    if isinstance(patterns, str):
        patterns = [patterns]
    if not isinstance(patterns, list):
        raise RuleLoadError(f"Rule {rule_id}: '{label}' must be a list of regex strings")
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except (re.error, TypeError) as e:
            raise RuleLoadError(f"Rule {rule_id}: invalid {label} regex {pattern!r}: {e}") from e
    return tuple(compiled)


@dataclass(frozen=True)
class SecurityRule:
    """A single pattern-based detection rule.

    Rules are immutable once loaded; the same instances are shared by every
    scan in the process.
    """

    id: str
    category: ThreatCategory
    severity: Severity
    patterns: tuple[re.Pattern[str], ...]
    description: str
    remediation: str = ""
    exclude_patterns: tuple[re.Pattern[str], ...] = ()
    file_types: frozenset[str] = frozenset()
    multiline: bool = False

    @classmethod
    def from_dict(cls, rule_data: dict[str, Any]) -> SecurityRule:
        """Build a rule from one entry of a signature file.

        Raises:
            RuleLoadError: If a field is missing or invalid.
        """
        if not isinstance(rule_data, dict):
            raise RuleLoadError(f"Rule entry must be a mapping, got {type(rule_data).__name__}")
        missing = [f for f in _REQUIRED_FIELDS if f not in rule_data]
        if missing:
            raise RuleLoadError(f"Rule {rule_data.get('id', '<unknown>')}: missing field(s) {', '.join(missing)}")

        rule_id = str(rule_data["id"])
        try:
            category = ThreatCategory(rule_data["category"])
        except ValueError:
            raise RuleLoadError(f"Rule {rule_id}: unknown category {rule_data['category']!r}") from None
        try:
            severity = Severity.from_string(rule_data["severity"])
        except ValueError as e:
            raise RuleLoadError(f"Rule {rule_id}: {e}") from None

        patterns = _compile(rule_data["patterns"], rule_id, "patterns")
        if not patterns:
            raise RuleLoadError(f"Rule {rule_id}: at least one pattern is required")

        return cls(
            id=rule_id,
            category=category,
            severity=severity,
            patterns=patterns,
            description=str(rule_data["description"]),
            remediation=str(rule_data.get("remediation", "")),
            exclude_patterns=_compile(rule_data.get("exclude_patterns", []), rule_id, "exclude_patterns"),
            file_types=frozenset(rule_data.get("file_types", [])),
            multiline=bool(rule_data.get("multiline", False)),
        )

    def applies_to(self, file_type: str | None) -> bool:
        """Check if this rule applies to the given file type.

        Rules without ``file_types`` apply everywhere, and files of unknown
        type are checked against every rule.
        """
        if not self.file_types or file_type is None:
            return True
        return file_type in self.file_types

    def is_excluded(self, text: str) -> bool:
        return any(p.search(text) for p in self.exclude_patterns)

    def search(self, text: str) -> re.Match[str] | None:
        """Return the match of the first pattern that hits *text*."""
        for pattern in self.patterns:
            match = pattern.search(text)
            if match:
                return match
        return None


class RuleLoader:
    """Loads security rules from YAML files."""

    def __init__(self, rules_path: Path | None = None):
        """
        Initialize rule loader.

        Args:
            rules_path: Path to a single YAML file **or** a directory
                containing multiple ``*.yaml`` files.  If *None*, loads the
                built-in signature pack in catalog order.
        """
        self.rules_path = Path(rules_path) if rules_path is not None else None
        self.rules: list[SecurityRule] = []
        self.rules_by_id: dict[str, SecurityRule] = {}
        self.rules_by_category: dict[ThreatCategory, list[SecurityRule]] = {}

    def _rule_files(self) -> list[Path]:
        if self.rules_path is None:
            return [SIGNATURES_DIR / f"{group}.yaml" for group in CATALOG_GROUPS]
        if self.rules_path.is_dir():
            files = sorted(self.rules_path.glob("*.yaml"))
            if not files:
                raise RuleLoadError(f"No .yaml rule files found in {self.rules_path}")
            return files
        return [self.rules_path]

    def load_rules(self) -> list[SecurityRule]:
        """
        Load and validate every rule.

        Returns:
            List of SecurityRule objects in file order

        Raises:
            RuleLoadError: On unreadable files, malformed rules or duplicate ids.
        """
        rules: list[SecurityRule] = []
        by_id: dict[str, SecurityRule] = {}

        for rules_file in self._rule_files():
            try:
                with open(rules_file, encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise RuleLoadError(f"Failed to load rules from {rules_file}: {e}") from e

            if not isinstance(data, list):
                raise RuleLoadError(f"Failed to load rules from {rules_file}: expected a YAML list of rule objects")

            for entry in data:
                rule = SecurityRule.from_dict(entry)
                if rule.id in by_id:
                    raise RuleLoadError(f"Duplicate rule id {rule.id} in {rules_file}")
                by_id[rule.id] = rule
                rules.append(rule)
            logger.debug("Loaded %d rules from %s", len(data), rules_file.name)

        self.rules = rules
        self.rules_by_id = by_id
        self.rules_by_category = {}
        for rule in rules:
            self.rules_by_category.setdefault(rule.category, []).append(rule)
        return list(rules)

    def get_rule(self, rule_id: str) -> SecurityRule | None:
        return self.rules_by_id.get(rule_id)

    def get_rules_for_file_type(self, file_type: str | None) -> list[SecurityRule]:
        return [rule for rule in self.rules if rule.applies_to(file_type)]

    def get_rules_for_category(self, category: ThreatCategory) -> list[SecurityRule]:
        return list(self.rules_by_category.get(category, []))


@lru_cache(maxsize=1)
def _default_loader() -> RuleLoader:
    loader = RuleLoader()
    loader.load_rules()
    return loader


def get_all_rules() -> list[SecurityRule]:
    """Return the built-in catalog, loaded once per process.

    Order is prompt injection, command injection, data exfiltration, tool
    abuse, then unicode/obfuscation.
    """
    return list(_default_loader().rules)


def get_rule(rule_id: str) -> SecurityRule | None:
    """Look up a built-in rule by id."""
    return _default_loader().get_rule(rule_id)


def get_rules_for_category(category: ThreatCategory) -> list[SecurityRule]:
    return _default_loader().get_rules_for_category(category)
