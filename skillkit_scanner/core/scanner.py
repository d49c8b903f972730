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
Core scanner engine for orchestrating skill analysis.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

from .analyzer_factory import build_core_analyzers
from .analyzers.base import BaseAnalyzer
from .analyzers.secrets import DEFAULT_MAX_FILE_CHARS
from .discovery import discover_files
from .exceptions import AnalyzerFailure, ScanTargetError
from .models import STATS_SEVERITIES, AnalyzerError, Finding, ScanOptions, ScanResult, Severity, Verdict

logger = logging.getLogger(__name__)


def compute_verdict(findings: Iterable[Finding], fail_on: Severity = Severity.HIGH) -> Verdict:
    """Classify a finding set against a severity threshold.

    ``fail`` if any finding is at or above *fail_on*, else ``warn`` if any is
    at or above medium, else ``pass``. A skill with no findings always passes,
    whatever the threshold.
    """
    severities = [f.severity for f in findings]
    if not severities:
        return Verdict.PASS
    worst = max(severities)
    if worst >= fail_on:
        return Verdict.FAIL
    if worst >= Severity.MEDIUM:
        return Verdict.WARN
    return Verdict.PASS


def compute_stats(findings: Iterable[Finding]) -> dict[str, int]:
    """Count findings per severity bucket (``safe`` is not counted)."""
    stats = {severity.value: 0 for severity in STATS_SEVERITIES}
    for finding in findings:
        if finding.severity.value in stats:
            stats[finding.severity.value] += 1
    return stats


def dedupe_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Drop findings whose (rule_id, file_path, line_number) was already seen."""
    seen: set[tuple[str, str | None, int | None]] = set()
    unique = []
    for finding in findings:
        key = finding.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(finding)
    return unique


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Severity descending, then rule id, file path and line number."""
    return sorted(
        findings,
        key=lambda f: (-f.severity.rank, f.rule_id, f.file_path or "", f.line_number or 0),
    )


def _skill_name(path: str | Path) -> str:
    name = os.path.basename(str(path).rstrip("/\\"))
    if name in ("", ".", ".."):
        name = Path(path).resolve().name
    return name or "unknown"


class SkillScanner:
    """Main scanner that orchestrates skill analysis."""

    def __init__(
        self,
        options: ScanOptions | None = None,
        analyzers: list[BaseAnalyzer] | None = None,
        custom_rules_path: str | Path | None = None,
        max_secret_file_chars: int = DEFAULT_MAX_FILE_CHARS,
    ):
        """
        Initialize scanner with analyzers.

        Args:
            options: Severity threshold and skip list. Defaults to ``ScanOptions()``.
            analyzers: Analyzers to run. If None, builds the static, manifest
                and secrets analyzers from *options*.
            custom_rules_path: Extra YAML rules for the default static analyzer.
            max_secret_file_chars: Size ceiling for the default secrets analyzer.
        """
        self.options = options or ScanOptions()
        if analyzers is None:
            self.analyzers: list[BaseAnalyzer] = build_core_analyzers(
                self.options,
                custom_rules_path=custom_rules_path,
                max_secret_file_chars=max_secret_file_chars,
            )
        else:
            self.analyzers = analyzers

    def scan(self, skill_path: str | Path) -> ScanResult:
        """
        Scan a skill directory.

        Args:
            skill_path: Path to the skill directory

        Returns:
            ScanResult with deduplicated, sorted findings and a verdict

        Raises:
            ScanTargetError: If the path does not exist or is not a directory
        """
        root = Path(skill_path)
        if not root.exists():
            raise ScanTargetError(f"Path does not exist: {skill_path}")
        if not root.is_dir():
            raise ScanTargetError(f"Path is not a directory: {skill_path}")
        root = root.absolute()

        start_time = time.perf_counter()

        files = discover_files(root)
        logger.debug("Discovered %d files under %s", len(files), root)

        all_findings, analyzers_used, errors = self._run_analyzers(root, files)

        # Global safety net: enforce skip_rules across ALL analyzers
        skip = self.options.skip_rules
        if skip:
            all_findings = [f for f in all_findings if f.rule_id not in skip and f.category.value not in skip]

        findings = sort_findings(dedupe_findings(all_findings))
        verdict = compute_verdict(findings, self.options.fail_on)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Scanned %s: %d findings, verdict=%s (%.1f ms)", root, len(findings), verdict.value, duration_ms
        )

        return ScanResult(
            skill_path=str(root),
            skill_name=_skill_name(skill_path),
            verdict=verdict,
            findings=findings,
            stats=compute_stats(findings),
            duration_ms=duration_ms,
            analyzers_used=analyzers_used,
            analyzer_errors=errors,
        )

    async def scan_async(self, skill_path: str | Path) -> ScanResult:
        """Run :meth:`scan` in a worker thread so the event loop stays free."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.scan, skill_path)

    def _run_analyzers(
        self, root: Path, files: list[Path]
    ) -> tuple[list[Finding], list[str], list[AnalyzerError]]:
        """Run every analyzer concurrently over the same file list.

        A failing analyzer is logged and reported in the returned errors; the
        findings of the other analyzers are kept. Results are merged in
        analyzer order regardless of completion order.
        """
        findings: list[Finding] = []
        used: list[str] = []
        errors: list[AnalyzerError] = []
        if not self.analyzers:
            return findings, used, errors

        with concurrent.futures.ThreadPoolExecutor(max_workers=len(self.analyzers)) as executor:
            futures = [(analyzer, executor.submit(analyzer.analyze, root, files)) for analyzer in self.analyzers]

            for analyzer, future in futures:
                name = analyzer.get_name()
                try:
                    findings.extend(future.result())
                except Exception as e:
                    failure = AnalyzerFailure(name, e)
                    logger.error("%s", failure, exc_info=e)
                    errors.append(AnalyzerError(analyzer=name, message=str(failure)))
                    continue
                used.append(name)

        return findings, used, errors

    def add_analyzer(self, analyzer: BaseAnalyzer):
        """Add an analyzer to the scanner."""
        self.analyzers.append(analyzer)

    def list_analyzers(self) -> list[str]:
        """Get names of all configured analyzers."""
        return [analyzer.get_name() for analyzer in self.analyzers]


def scan_skill(
    skill_path: str | Path,
    fail_on: Severity | str = Severity.HIGH,
    skip_rules: Iterable[str] | str | None = None,
) -> ScanResult:
    """
    Convenience function to scan a single skill.

    Args:
        skill_path: Path to skill directory
        fail_on: Severity at or above which the verdict is ``fail``
        skip_rules: Rule ids and/or category names to suppress

    Returns:
        ScanResult
    """
    options = ScanOptions(fail_on=fail_on, skip_rules=skip_rules or frozenset())
    return SkillScanner(options=options).scan(skill_path)
