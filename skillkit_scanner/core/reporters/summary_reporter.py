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
Plain-text summary reporter (the CLI default).
"""

from ...core.models import STATS_SEVERITIES, ScanResult, Verdict

_VERDICT_LABELS = {
    Verdict.PASS: "[PASS] No blocking issues",
    Verdict.WARN: "[WARN] Issues found below the failure threshold",
    Verdict.FAIL: "[FAIL] Issues at or above the failure threshold",
}


class SummaryReporter:
    """Generates a short human-readable summary of a scan."""

    def __init__(self, max_findings: int = 10):
        """
        Args:
            max_findings: How many of the top findings to list.
        """
        self.max_findings = max_findings

    def generate_report(self, result: ScanResult) -> str:
        lines = [
            "=" * 60,
            f"Skill: {result.skill_name}",
            "=" * 60,
            f"Verdict: {_VERDICT_LABELS[result.verdict]}",
            f"Max Severity: {result.max_severity.value.upper()}",
            f"Total Findings: {len(result.findings)}",
            f"Scan Duration: {result.duration_ms:.1f}ms",
            "",
        ]
        if result.findings:
            lines.append("Findings Summary:")
            for severity in STATS_SEVERITIES:
                lines.append(f"  {severity.value.upper():>8s}: {result.stats.get(severity.value, 0)}")
            lines.append("")
            lines.append("Top Findings:")
            for finding in result.findings[: self.max_findings]:
                location = result.relative_path(finding.file_path) or "-"
                if finding.line_number:
                    location = f"{location}:{finding.line_number}"
                lines.append(f"  [{finding.severity.value.upper()}] {finding.rule_id} {finding.title} ({location})")
            remaining = len(result.findings) - self.max_findings
            if remaining > 0:
                lines.append(f"  ... and {remaining} more")
        if result.analyzer_errors:
            lines.append("")
            lines.append("Analyzer Errors:")
            for error in result.analyzer_errors:
                lines.append(f"  {error.analyzer}: {error.message}")
        return "\n".join(lines)

    def save_report(self, result: ScanResult, output_path: str):
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_report(result))
