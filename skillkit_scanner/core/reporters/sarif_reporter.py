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
SARIF format reporter for code-scanning integrations.

Implements SARIF 2.1.0 specification for security scan results.
https://docs.oasis-open.org/sarif/sarif/v2.1.0/sarif-v2.1.0.html
"""

import json
from pathlib import Path
from typing import Any

from ...config.constants import ScannerConstants
from ...core.models import Finding, ScanResult, Severity
from ...threats.taxonomy import get_threat_info


class SARIFReporter:
    """Generates SARIF 2.1.0 logs, one result per finding."""

    SARIF_VERSION = "2.1.0"
    SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"

    # Map severity to SARIF levels
    SEVERITY_TO_LEVEL = {
        Severity.CRITICAL: "error",
        Severity.HIGH: "error",
        Severity.MEDIUM: "warning",
        Severity.LOW: "note",
        Severity.INFO: "note",
        Severity.SAFE: "none",
    }

    def __init__(self, tool_name: str = ScannerConstants.TOOL_NAME, tool_version: str = ScannerConstants.VERSION):
        """
        Initialize SARIF reporter.

        Args:
            tool_name: Name of the scanning tool
            tool_version: Version of the scanning tool
        """
        self.tool_name = tool_name
        self.tool_version = tool_version

    def generate_report(self, result: ScanResult) -> str:
        """
        Generate SARIF report.

        Args:
            result: ScanResult to convert

        Returns:
            SARIF JSON string
        """
        return json.dumps(self.build_log(result), indent=2, default=str)

    def build_log(self, result: ScanResult) -> dict[str, Any]:
        """Build the SARIF log as a dictionary."""
        rules = self._extract_rules(result.findings)
        rule_index = {rule["id"]: i for i, rule in enumerate(rules)}

        return {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [
                {
                    "tool": {
                        "driver": {
                            "name": self.tool_name,
                            "version": self.tool_version,
                            "rules": rules,
                        }
                    },
                    "originalUriBaseIds": {
                        "%SRCROOT%": {"uri": Path(result.skill_path).absolute().as_uri() + "/"},
                    },
                    "results": [self._convert_finding(f, result, rule_index) for f in result.findings],
                    "invocations": [
                        {
                            "executionSuccessful": not result.analyzer_errors,
                            "endTimeUtc": result.timestamp.isoformat() + "Z",
                            "toolExecutionNotifications": [
                                {"level": "error", "message": {"text": e.message}} for e in result.analyzer_errors
                            ],
                        }
                    ],
                    "properties": {"verdict": result.verdict.value, "stats": dict(result.stats)},
                }
            ],
        }

    def _extract_rules(self, findings: list[Finding]) -> list[dict[str, Any]]:
        """Extract unique rules from findings, in first-seen order."""
        seen_rules: set[str] = set()
        rules = []

        for finding in findings:
            if finding.rule_id in seen_rules:
                continue
            seen_rules.add(finding.rule_id)

            threat = get_threat_info(finding.category)
            rule: dict[str, Any] = {
                "id": finding.rule_id,
                "name": threat.name.replace(" ", ""),
                "shortDescription": {"text": finding.title},
                "fullDescription": {"text": threat.description},
                "defaultConfiguration": {"level": self.SEVERITY_TO_LEVEL.get(finding.severity, "warning")},
                "properties": {
                    "category": finding.category.value,
                    "severity": finding.severity.value,
                    "tags": [finding.category.value, "security"],
                },
            }
            if finding.remediation:
                rule["help"] = {
                    "text": finding.remediation,
                    "markdown": f"**Remediation**: {finding.remediation}",
                }
            rules.append(rule)

        return rules

    def _convert_finding(self, finding: Finding, result: ScanResult, rule_index: dict[str, int]) -> dict[str, Any]:
        """Convert one finding to a SARIF result."""
        sarif_result: dict[str, Any] = {
            "ruleId": finding.rule_id,
            "ruleIndex": rule_index[finding.rule_id],
            "level": self.SEVERITY_TO_LEVEL.get(finding.severity, "warning"),
            "message": {"text": finding.description},
            "properties": {
                "category": finding.category.value,
                "severity": finding.severity.value,
                "analyzer": finding.analyzer,
            },
        }

        physical_location: dict[str, Any] = {
            "artifactLocation": {
                "uri": result.relative_path(finding.file_path) or ".",
                "uriBaseId": "%SRCROOT%",
            },
        }
        if finding.line_number:
            physical_location["region"] = {"startLine": finding.line_number}
            if finding.snippet:
                physical_location["region"]["snippet"] = {"text": finding.snippet}

        sarif_result["locations"] = [{"physicalLocation": physical_location}]
        sarif_result["partialFingerprints"] = {
            "skillkitFinding/v1": f"{finding.rule_id}:{result.relative_path(finding.file_path)}:{finding.line_number}",
        }
        return sarif_result

    def save_report(self, result: ScanResult, output_path: str):
        """
        Save SARIF report to file.

        Args:
            result: ScanResult to convert
            output_path: Path to save file
        """
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_report(result))
