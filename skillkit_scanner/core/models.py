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
Data models for skill scan findings, options and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class Severity(str, Enum):
    """Severity levels for security findings.

    Members compare by rank rather than by their string value, so
    ``Severity.HIGH > Severity.MEDIUM`` and ``max(severities)`` behave as
    expected.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"
    SAFE = "safe"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def from_string(cls, value: str) -> Severity:
        """Parse a severity name case-insensitively.

        Raises:
            ValueError: If *value* is not a known severity name.
        """
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid severity '{value}'. Expected one of: {valid}") from None

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.CRITICAL: 5,
    Severity.HIGH: 4,
    Severity.MEDIUM: 3,
    Severity.LOW: 2,
    Severity.INFO: 1,
    Severity.SAFE: 0,
}

# Buckets reported in ScanResult.stats, highest first
STATS_SEVERITIES = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW, Severity.INFO)


class ThreatCategory(str, Enum):
    """Categories of security threats."""

    PROMPT_INJECTION = "prompt-injection"
    COMMAND_INJECTION = "command-injection"
    DATA_EXFILTRATION = "data-exfiltration"
    TOOL_ABUSE = "tool-abuse"
    HARDCODED_SECRETS = "hardcoded-secrets"
    UNICODE_STEGANOGRAPHY = "unicode-steganography"
    OBFUSCATION = "obfuscation"
    SOCIAL_ENGINEERING = "social-engineering"
    AUTONOMY_ABUSE = "autonomy-abuse"
    POLICY_VIOLATION = "policy-violation"


class Verdict(str, Enum):
    """Overall outcome of a scan."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class Finding:
    """A security issue discovered in a skill."""

    id: str  # Analyzer-local sequence id (e.g. "F3", "MF1", "SK2")
    rule_id: str  # Rule that triggered this finding
    category: ThreatCategory
    severity: Severity
    title: str
    description: str
    file_path: str | None = None
    line_number: int | None = None
    snippet: str | None = None
    remediation: str | None = None
    analyzer: str | None = None  # "static", "manifest" or "secrets"

    @property
    def dedupe_key(self) -> tuple[str, str | None, int | None]:
        return (self.rule_id, self.file_path, self.line_number)

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to dictionary."""
        return {
            "id": self.id,
            "rule_id": self.rule_id,
            "category": self.category.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "snippet": self.snippet,
            "remediation": self.remediation,
            "analyzer": self.analyzer,
        }


@dataclass(frozen=True)
class AnalyzerError:
    """An analyzer that raised instead of returning findings."""

    analyzer: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"analyzer": self.analyzer, "message": self.message}


@dataclass(frozen=True)
class ScanOptions:
    """Options controlling a single scan.

    ``skip_rules`` holds rule ids (``"PI001"``, ``"MF003"``, ``"SK-ENV"``) and/or
    category names (``"hardcoded-secrets"``). Unknown entries are ignored.
    """

    fail_on: Severity = Severity.HIGH
    skip_rules: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.fail_on, Severity):
            object.__setattr__(self, "fail_on", Severity.from_string(self.fail_on))
        if isinstance(self.skip_rules, str):
            parts = [p.strip() for p in self.skip_rules.split(",")]
            object.__setattr__(self, "skip_rules", frozenset(p for p in parts if p))
        elif not isinstance(self.skip_rules, frozenset):
            object.__setattr__(self, "skip_rules", frozenset(self.skip_rules))


@dataclass
class ScanResult:
    """Results from scanning a single skill directory."""

    skill_path: str
    skill_name: str
    verdict: Verdict
    findings: list[Finding] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    duration_ms: float = 0.0
    analyzers_used: list[str] = field(default_factory=list)
    analyzer_errors: list[AnalyzerError] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_safe(self) -> bool:
        """True unless the verdict is ``fail``."""
        return self.verdict != Verdict.FAIL

    @property
    def max_severity(self) -> Severity:
        """Get the highest severity level found."""
        if not self.findings:
            return Severity.SAFE
        return max(f.severity for f in self.findings)

    def get_findings_by_severity(self, severity: Severity) -> list[Finding]:
        """Get all findings of a specific severity."""
        return [f for f in self.findings if f.severity == severity]

    def get_findings_by_category(self, category: ThreatCategory) -> list[Finding]:
        """Get all findings of a specific category."""
        return [f for f in self.findings if f.category == category]

    def relative_path(self, file_path: str | None) -> str | None:
        """Express *file_path* relative to the scanned directory when possible."""
        if file_path is None:
            return None
        try:
            return Path(file_path).relative_to(self.skill_path).as_posix()
        except ValueError:
            return file_path

    def to_dict(self) -> dict[str, Any]:
        """Convert scan result to dictionary."""
        return {
            "skill_name": self.skill_name,
            "skill_path": self.skill_path,
            "verdict": self.verdict.value,
            "max_severity": self.max_severity.value,
            "findings_count": len(self.findings),
            "stats": dict(self.stats),
            "findings": [f.to_dict() for f in self.findings],
            "duration_ms": round(self.duration_ms, 3),
            "analyzers_used": list(self.analyzers_used),
            "analyzer_errors": [e.to_dict() for e in self.analyzer_errors],
            "timestamp": self.timestamp.isoformat(),
        }
