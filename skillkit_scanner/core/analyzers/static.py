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
Static pattern analyzer.

Runs every applicable catalog rule against each discovered file, line by
line or over the whole content for multiline rules, and flags homoglyph
spoofing in code files.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path

from confusable_homoglyphs import confusables  # type: ignore[import-untyped]

from ..models import Finding, Severity, ThreatCategory
from ..rules.heuristics import detect_file_type, is_placeholder, is_test_file
from ..rules.patterns import SecurityRule, get_all_rules
from .base import BaseAnalyzer, read_text

logger = logging.getLogger(__name__)

SNIPPET_CONTEXT_CHARS = 40
MAX_SNIPPET_CHARS = 200

HOMOGLYPH_RULE_ID = "UC008"
_HOMOGLYPH_FILE_TYPES = frozenset({"python", "bash", "javascript", "typescript"})
# Lines that look like code rather than prose
_CODE_TOKEN_RE = re.compile(r"[=\(\)\[\]\{\};]|import |def |function |const |let |return ")
_STRING_LITERAL_RE = re.compile(r"(\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'|`(?:[^`\\]|\\.)*`)")
_COMMENT_PREFIXES = ("#", "//", "/*", "*")


class StaticAnalyzer(BaseAnalyzer):
    """Pattern-based detection using the rule catalog."""

    id_prefix = "F"

    def __init__(
        self,
        rules: list[SecurityRule] | None = None,
        skip_rules: Iterable[str] | None = None,
        check_homoglyphs: bool = True,
    ):
        """
        Initialize static analyzer.

        Args:
            rules: Rules to run. Defaults to the built-in catalog.
            skip_rules: Rule ids and/or category names to leave out.
            check_homoglyphs: Flag mixed-script identifiers in code files.
        """
        super().__init__("static", skip_rules)
        source = get_all_rules() if rules is None else rules
        self.rules = [r for r in source if not self.is_skipped(r.id, r.category)]
        self.check_homoglyphs = check_homoglyphs and not self.is_skipped(
            HOMOGLYPH_RULE_ID, ThreatCategory.UNICODE_STEGANOGRAPHY
        )

    def analyze(self, skill_path: Path, files: list[Path]) -> list[Finding]:
        next_id = self.id_sequence()
        findings: list[Finding] = []

        for path in files:
            if is_test_file(path, skill_path):
                continue

            file_type = detect_file_type(path)
            applicable = [r for r in self.rules if r.applies_to(file_type)]
            homoglyphs = self.check_homoglyphs and file_type in _HOMOGLYPH_FILE_TYPES
            if not applicable and not homoglyphs:
                continue

            content = read_text(path)
            if content is None:
                continue

            lines = content.split("\n")
            for rule in applicable:
                if rule.multiline:
                    findings.extend(self._scan_multiline(rule, content, str(path), next_id))
                else:
                    findings.extend(self._scan_lines(rule, lines, str(path), next_id))

            if homoglyphs:
                findings.extend(self._check_homoglyphs(lines, str(path), next_id))

        return findings

    def _finding(
        self, rule: SecurityRule, next_id: Callable[[], str], file_path: str, line_number: int, snippet: str
    ) -> Finding:
        return Finding(
            id=next_id(),
            rule_id=rule.id,
            category=rule.category,
            severity=rule.severity,
            title=rule.description,
            description=rule.description,
            file_path=file_path,
            line_number=line_number,
            snippet=snippet,
            remediation=rule.remediation,
            analyzer=self.name,
        )

    def _scan_lines(
        self, rule: SecurityRule, lines: list[str], file_path: str, next_id: Callable[[], str]
    ) -> list[Finding]:
        findings = []
        for line_num, line in enumerate(lines, start=1):
            if is_placeholder(line) or rule.is_excluded(line):
                continue
            # First matching pattern wins: at most one finding per rule per line
            if rule.search(line):
                snippet = line.strip()[:MAX_SNIPPET_CHARS]
                findings.append(self._finding(rule, next_id, file_path, line_num, snippet))
        return findings

    def _scan_multiline(
        self, rule: SecurityRule, content: str, file_path: str, next_id: Callable[[], str]
    ) -> list[Finding]:
        findings = []
        for pattern in rule.patterns:
            for match in pattern.finditer(content):
                start = max(0, match.start() - SNIPPET_CONTEXT_CHARS)
                snippet = content[start : match.end() + SNIPPET_CONTEXT_CHARS].strip()[:MAX_SNIPPET_CHARS]
                if is_placeholder(snippet) or rule.is_excluded(snippet):
                    continue
                line_num = content.count("\n", 0, match.start()) + 1
                findings.append(self._finding(rule, next_id, file_path, line_num, snippet))
        return findings

    def _check_homoglyphs(self, lines: list[str], file_path: str, next_id: Callable[[], str]) -> list[Finding]:
        """Detect Unicode homoglyph spoofing in code lines.

        Uses the confusable-homoglyphs library (backed by the Unicode
        Consortium's confusables.txt) to find characters from other scripts
        that render like Latin letters, e.g. Cyrillic U+0430 inside an
        identifier. Comments and string literals are ignored so localized
        text does not trigger.
        """
        findings = []
        for line_num, line in enumerate(lines, start=1):
            stripped = line.strip()
            if not stripped or stripped.isascii() or stripped.startswith(_COMMENT_PREFIXES):
                continue
            code = _STRING_LITERAL_RE.sub("", stripped)
            if code.isascii() or not _CODE_TOKEN_RE.search(code):
                continue
            if not confusables.is_dangerous(code, preferred_aliases=["LATIN"]):
                continue
            findings.append(
                Finding(
                    id=next_id(),
                    rule_id=HOMOGLYPH_RULE_ID,
                    category=ThreatCategory.UNICODE_STEGANOGRAPHY,
                    severity=Severity.HIGH,
                    title="Homoglyph characters in code",
                    description="Code mixes look-alike characters from different scripts, which can spoof identifiers",
                    file_path=file_path,
                    line_number=line_num,
                    snippet=stripped[:MAX_SNIPPET_CHARS],
                    remediation="Replace look-alike characters with their ASCII equivalents.",
                    analyzer=self.name,
                )
            )
        return findings
