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
Secrets analyzer.

Flags bundled ``.env`` files and credential-shaped strings. Reported snippets
are always redacted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..models import Finding, Severity, ThreatCategory
from ..rules.heuristics import is_secret_placeholder
from .base import BaseAnalyzer, read_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_CHARS = 1_000_000
MAX_SNIPPET_CHARS = 100
REDACTION_MARKER = "[REDACTED]"

ENV_FILE_RULE_ID = "SK-ENV"
ENV_FILE_PATTERN = re.compile(r"^\.env")

# Bare UUIDs are everywhere; only report one when the line also talks about credentials
_UUID_KEYWORD_RE = re.compile(r"(?:key|token|secret|password|credential|api)", re.IGNORECASE)
UUID_RULE_ID = "SK013"


@dataclass(frozen=True)
class SecretPattern:
    id: str
    name: str
    pattern: re.Pattern[str]
    severity: Severity


# Evaluated in order; the first hit on a line wins
SECRET_PATTERNS: tuple[SecretPattern, ...] = (
    SecretPattern(
        "SK001", "OpenAI API key", re.compile(r"sk-(?!ant-)(?:proj-|admin-)?[A-Za-z0-9-]{20,}"), Severity.CRITICAL
    ),
    SecretPattern("SK002", "Stripe live key", re.compile(r"pk_live_[a-zA-Z0-9]{20,}"), Severity.CRITICAL),
    SecretPattern("SK003", "Stripe secret key", re.compile(r"sk_live_[a-zA-Z0-9]{20,}"), Severity.CRITICAL),
    SecretPattern("SK004", "GitHub personal access token", re.compile(r"ghp_[a-zA-Z0-9]{36}"), Severity.CRITICAL),
    SecretPattern("SK005", "GitHub OAuth token", re.compile(r"gho_[a-zA-Z0-9]{36}"), Severity.CRITICAL),
    SecretPattern("SK006", "AWS access key", re.compile(r"AKIA[0-9A-Z]{16}"), Severity.CRITICAL),
    SecretPattern("SK007", "Slack bot token", re.compile(r"xoxb-[0-9]{10,}-[a-zA-Z0-9]{20,}"), Severity.CRITICAL),
    SecretPattern("SK008", "Slack user token", re.compile(r"xoxp-[0-9]{10,}-[a-zA-Z0-9]{20,}"), Severity.CRITICAL),
    SecretPattern(
        "SK009",
        "Private key block",
        re.compile(r"-----BEGIN\s+(?:RSA\s+|EC\s+|DSA\s+|OPENSSH\s+)?PRIVATE\s+KEY-----"),
        Severity.CRITICAL,
    ),
    SecretPattern("SK010", "Google API key", re.compile(r"AIza[0-9A-Za-z_-]{35}"), Severity.HIGH),
    SecretPattern("SK011", "Anthropic API key", re.compile(r"sk-ant-[A-Za-z0-9-]{20,}"), Severity.CRITICAL),
    SecretPattern("SK012", "npm token", re.compile(r"npm_[a-zA-Z0-9]{36}"), Severity.HIGH),
    SecretPattern(
        UUID_RULE_ID,
        "Heroku API key",
        re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"),
        Severity.LOW,
    ),
)


def redact(line: str, pattern: re.Pattern[str]) -> str:
    """Replace every match of *pattern*, plus any other credential shape, then truncate."""
    text = pattern.sub(REDACTION_MARKER, line.strip())
    for secret in SECRET_PATTERNS:
        text = secret.pattern.sub(REDACTION_MARKER, text)
    return text[:MAX_SNIPPET_CHARS]


class SecretsAnalyzer(BaseAnalyzer):
    """Detects hardcoded credentials and bundled environment files."""

    id_prefix = "SK"

    def __init__(self, skip_rules: Iterable[str] | None = None, max_file_chars: int = DEFAULT_MAX_FILE_CHARS):
        """
        Initialize secrets analyzer.

        Args:
            skip_rules: Rule ids and/or category names to leave out.
            max_file_chars: Files with more characters than this are not scanned.
        """
        super().__init__("secrets", skip_rules)
        self.max_file_chars = max_file_chars
        self.patterns = [p for p in SECRET_PATTERNS if not self.is_skipped(p.id, ThreatCategory.HARDCODED_SECRETS)]
        self.check_env_files = not self.is_skipped(ENV_FILE_RULE_ID, ThreatCategory.HARDCODED_SECRETS)

    def analyze(self, skill_path: Path, files: list[Path]) -> list[Finding]:
        next_id = self.id_sequence()
        findings: list[Finding] = []

        for path in files:
            if self.check_env_files and ENV_FILE_PATTERN.match(path.name):
                findings.append(
                    Finding(
                        id=next_id(),
                        rule_id=ENV_FILE_RULE_ID,
                        category=ThreatCategory.HARDCODED_SECRETS,
                        severity=Severity.HIGH,
                        title=f"Environment file included: {path.name}",
                        description="Environment files should not be included in skill distributions",
                        file_path=str(path),
                        remediation="Remove .env files from skill directory. Add to .gitignore.",
                        analyzer=self.name,
                    )
                )
                continue

            if not self.patterns:
                continue

            content = read_text(path)
            if content is None:
                continue
            if len(content) > self.max_file_chars:
                logger.debug("Skipping %s: %d chars exceeds limit of %d", path, len(content), self.max_file_chars)
                continue

            for line_num, line in enumerate(content.split("\n"), start=1):
                if is_secret_placeholder(line):
                    continue
                secret = self._first_match(line)
                if secret is None:
                    continue
                findings.append(
                    Finding(
                        id=next_id(),
                        rule_id=secret.id,
                        category=ThreatCategory.HARDCODED_SECRETS,
                        severity=secret.severity,
                        title=f"{secret.name} detected",
                        description=f"Potential {secret.name} found in skill file",
                        file_path=str(path),
                        line_number=line_num,
                        snippet=redact(line, secret.pattern),
                        remediation="Remove hardcoded secrets. Use environment variables or secret managers.",
                        analyzer=self.name,
                    )
                )

        return findings

    def _first_match(self, line: str) -> SecretPattern | None:
        for secret in self.patterns:
            if not secret.pattern.search(line):
                continue
            if secret.id == UUID_RULE_ID and not _UUID_KEYWORD_RE.search(line):
                continue
            return secret
        return None
