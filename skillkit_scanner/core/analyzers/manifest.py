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
Manifest analyzer.

Validates SKILL.md frontmatter, flags dangerous ``allowed-tools`` grants and
vendor impersonation, and reports binary files shipped inside the skill.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

from ..models import Finding, Severity, ThreatCategory
from .base import BaseAnalyzer, read_text

logger = logging.getLogger(__name__)

DANGEROUS_TOOLS = frozenset({"Bash", "bash", "shell", "terminal", "exec", "system"})

_VENDORS = r"(?:anthropic|openai|google|microsoft|meta)"
IMPERSONATION_PATTERNS = (
    re.compile(rf"official\s+{_VENDORS}\s+(?:tool|skill|plugin)", re.IGNORECASE),
    re.compile(rf"{_VENDORS}\s+certified", re.IGNORECASE),
    re.compile(rf"endorsed\s+by\s+{_VENDORS}", re.IGNORECASE),
)

BINARY_EXTENSIONS = frozenset(
    {
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".bin",
        ".dat",
        ".zip",
        ".tar",
        ".gz",
        ".rar",
        ".7z",
        ".wasm",
        ".pyc",
        ".pyo",
        ".class",
    }
)

SKILL_NAME_RE = re.compile(r"[a-z0-9][a-z0-9._-]*", re.IGNORECASE)
MIN_DESCRIPTION_LENGTH = 20

# Rule id -> category, for every finding this analyzer can emit
MANIFEST_RULES: dict[str, ThreatCategory] = {
    "MF001": ThreatCategory.POLICY_VIOLATION,
    "MF002": ThreatCategory.POLICY_VIOLATION,
    "MF003": ThreatCategory.POLICY_VIOLATION,
    "MF004": ThreatCategory.POLICY_VIOLATION,
    "MF005": ThreatCategory.POLICY_VIOLATION,
    "MF006": ThreatCategory.TOOL_ABUSE,
    "MF007": ThreatCategory.SOCIAL_ENGINEERING,
    "MF008": ThreatCategory.POLICY_VIOLATION,
    "MF009": ThreatCategory.POLICY_VIOLATION,
}

_ALLOWED_TOOLS_KEY_RE = re.compile(r"^allowed[-_]tools\s*:", re.MULTILINE)

# Line-based reading of frontmatter that YAML rejects
_FIELD_LINE_RE = re.compile(r"^(name|description|allowed[-_]tools)[ \t]*:[ \t]*(.*)$")
_LIST_ITEM_RE = re.compile(r"^\s+-\s+(.+)$")

_yaml_handler = YAMLHandler()


def _tool_line(content: str, tool: str) -> int | None:
    """Line number of *tool* within the ``allowed-tools`` entry, if found."""
    key = _ALLOWED_TOOLS_KEY_RE.search(content)
    if not key:
        return None
    first_line = content.count("\n", 0, key.start()) + 1
    tool_re = re.compile(rf"(?<![\w-]){re.escape(tool)}(?![\w-])")
    for offset, line in enumerate(content[key.start() :].split("\n")):
        if offset and line.strip() == "---":
            break
        if tool_re.search(line):
            return first_line + offset
    return first_line


def _read_fields_by_line(raw: str) -> dict[str, Any]:
    """Pull ``name``, ``description`` and ``allowed-tools`` out of a raw block.

    Used when the block is not valid YAML (an unquoted colon in a value, tab
    indentation), so a broken manifest cannot hide its tool grants.
    """
    metadata: dict[str, Any] = {}
    items: list[str] | None = None
    for line in raw.splitlines():
        item = _LIST_ITEM_RE.match(line)
        if item and items is not None:
            items.append(item.group(1).strip())
            continue
        items = None
        field = _FIELD_LINE_RE.match(line)
        if not field:
            continue
        key, value = field.group(1), field.group(2).strip()
        if key in ("allowed-tools", "allowed_tools"):
            if value:
                metadata["allowed-tools"] = value.removeprefix("[").removesuffix("]")
            else:
                items = []
                metadata["allowed-tools"] = items
        else:
            metadata[key] = value.strip("\"'")
    return metadata


def _as_tool_list(value: Any) -> list[str]:
    """Normalize ``allowed-tools`` to a list of names.

    Accepts a YAML list (block or inline) or a comma-separated string.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    tools = []
    for item in items:
        tool = str(item).strip().strip("\"'")
        if tool:
            tools.append(tool)
    return tools


class ManifestAnalyzer(BaseAnalyzer):
    """Checks SKILL.md metadata and skill packaging policy."""

    id_prefix = "MF"

    def __init__(self, skip_rules: Iterable[str] | None = None):
        super().__init__("manifest", skip_rules)

    def analyze(self, skill_path: Path, files: list[Path]) -> list[Finding]:
        next_id = self.id_sequence()
        findings: list[Finding] = []

        for path in files:
            if not path.name.lower().endswith("skill.md"):
                continue
            content = read_text(path)
            if content is None:
                continue
            findings.extend(self._check_frontmatter(content, str(path), next_id))
            findings.extend(self._check_impersonation(content, str(path), next_id))

        findings.extend(self._check_binary_files(files, next_id))
        return findings

    def _emit(
        self,
        next_id: Callable[[], str],
        rule_id: str,
        severity: Severity,
        title: str,
        description: str,
        file_path: str,
        remediation: str,
        line_number: int | None = None,
        snippet: str | None = None,
    ) -> list[Finding]:
        category = MANIFEST_RULES[rule_id]
        if self.is_skipped(rule_id, category):
            return []
        return [
            Finding(
                id=next_id(),
                rule_id=rule_id,
                category=category,
                severity=severity,
                title=title,
                description=description,
                file_path=file_path,
                line_number=line_number,
                snippet=snippet,
                remediation=remediation,
                analyzer=self.name,
            )
        ]

    def _parse_frontmatter(self, content: str) -> tuple[str, dict[str, Any]]:
        """Return ``(status, metadata)`` where status is ``ok``, ``missing`` or ``invalid``.

        For an ``invalid`` block the metadata is read line by line instead.
        """
        if not _yaml_handler.detect(content):
            return "missing", {}
        try:
            raw, _body = _yaml_handler.split(content)
        except ValueError:
            # Opening delimiter without a closing one
            return "missing", {}
        try:
            metadata = _yaml_handler.load(raw)
        except yaml.YAMLError as e:
            logger.debug("Unparseable SKILL.md frontmatter: %s", e)
            return "invalid", _read_fields_by_line(raw)
        if metadata is None:
            return "ok", {}
        if not isinstance(metadata, dict):
            return "invalid", _read_fields_by_line(raw)
        return "ok", metadata

    def _check_frontmatter(self, content: str, file_path: str, next_id: Callable[[], str]) -> list[Finding]:
        status, metadata = self._parse_frontmatter(content)
        if status == "missing":
            return self._emit(
                next_id,
                "MF001",
                Severity.LOW,
                "Missing SKILL.md frontmatter",
                "SKILL.md should have YAML frontmatter with name, description, and allowed-tools",
                file_path,
                "Add YAML frontmatter with name, description, and allowed-tools fields.",
            )

        findings: list[Finding] = []
        if status == "invalid":
            findings += self._emit(
                next_id,
                "MF009",
                Severity.LOW,
                "Unparseable SKILL.md frontmatter",
                "SKILL.md frontmatter is delimited but is not a valid YAML mapping",
                file_path,
                "Fix the YAML syntax so the frontmatter parses as key/value pairs.",
            )

        name = metadata.get("name")
        name = "" if name is None else str(name).strip()
        if not name:
            findings += self._emit(
                next_id,
                "MF002",
                Severity.LOW,
                "Missing skill name in frontmatter",
                "SKILL.md frontmatter should include a name field",
                file_path,
                "Add a name field to the YAML frontmatter.",
            )
        elif not SKILL_NAME_RE.fullmatch(name):
            findings += self._emit(
                next_id,
                "MF003",
                Severity.LOW,
                "Invalid skill name format",
                f'Skill name "{name}" should use alphanumeric characters, dots, hyphens, or underscores',
                file_path,
                "Use a name matching [a-z0-9][a-z0-9._-]* pattern.",
            )

        description = metadata.get("description")
        description = "" if description is None else str(description).strip()
        if not description:
            findings += self._emit(
                next_id,
                "MF004",
                Severity.INFO,
                "Missing skill description",
                "SKILL.md should include a description for discoverability",
                file_path,
                "Add a description field to the YAML frontmatter.",
            )
        elif len(description) < MIN_DESCRIPTION_LENGTH:
            findings += self._emit(
                next_id,
                "MF005",
                Severity.INFO,
                "Short skill description",
                f'Description "{description}" is too short ({len(description)} chars). '
                f"Aim for at least {MIN_DESCRIPTION_LENGTH} characters.",
                file_path,
                "Provide a more detailed description.",
            )

        findings += self._check_allowed_tools(metadata, content, file_path, next_id)
        return findings

    def _check_allowed_tools(
        self, metadata: dict[str, Any], content: str, file_path: str, next_id: Callable[[], str]
    ) -> list[Finding]:
        # Grouped by line: an inline list puts every tool on one line, and
        # findings are deduplicated per line
        by_line: dict[int | None, list[str]] = {}
        tools_value = metadata.get("allowed-tools", metadata.get("allowed_tools"))
        for tool in _as_tool_list(tools_value):
            # Scoped grants such as "Bash(git:*)" still hand out the base tool
            base_tool = tool.split("(", 1)[0].strip()
            if base_tool not in DANGEROUS_TOOLS:
                continue
            tools = by_line.setdefault(_tool_line(content, tool), [])
            if tool not in tools:
                tools.append(tool)

        findings: list[Finding] = []
        for line_number, tools in by_line.items():
            if len(tools) == 1:
                detail = f'The tool "{tools[0]}" grants shell access.'
            else:
                detail = "The tools " + ", ".join(f'"{t}"' for t in tools) + " grant shell access."
            findings += self._emit(
                next_id,
                "MF006",
                Severity.HIGH,
                f"Dangerous tool in allowed-tools: {', '.join(tools)}",
                f"{detail} This is a significant security risk.",
                file_path,
                "Restrict allowed-tools to the minimum needed. Avoid shell/exec tools.",
                line_number=line_number,
            )
        return findings

    def _check_impersonation(self, content: str, file_path: str, next_id: Callable[[], str]) -> list[Finding]:
        findings: list[Finding] = []
        for pattern in IMPERSONATION_PATTERNS:
            match = pattern.search(content)
            if not match:
                continue
            findings += self._emit(
                next_id,
                "MF007",
                Severity.HIGH,
                "Impersonation detected",
                f'Skill claims official affiliation: "{match.group(0)}"',
                file_path,
                "Remove false claims of official endorsement or certification.",
                line_number=content.count("\n", 0, match.start()) + 1,
                snippet=match.group(0),
            )
        return findings

    def _check_binary_files(self, files: list[Path], next_id: Callable[[], str]) -> list[Finding]:
        findings: list[Finding] = []
        for path in files:
            ext = path.suffix.lower()
            if ext not in BINARY_EXTENSIONS:
                continue
            findings += self._emit(
                next_id,
                "MF008",
                Severity.MEDIUM,
                f"Binary file detected: {ext}",
                "Binary file found in skill directory. Skills should contain only text files.",
                str(path),
                "Remove binary files from skill directory. Use package managers for dependencies.",
            )
        return findings
