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


"""Tests for report generation semantics across all reporter formats."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from skillkit_scanner.core.models import AnalyzerError, Finding, ScanResult, Severity, ThreatCategory, Verdict
from skillkit_scanner.core.reporters.json_reporter import JSONReporter
from skillkit_scanner.core.reporters.registry import REPORTERS, get_reporter
from skillkit_scanner.core.reporters.sarif_reporter import SARIFReporter
from skillkit_scanner.core.reporters.summary_reporter import SummaryReporter
from skillkit_scanner.core.reporters.table_reporter import TableReporter

SKILL_PATH = "/skills/deploy-helper"


def _sample_findings() -> list[Finding]:
    return [
        Finding(
            id="F1",
            rule_id="CI003",
            category=ThreatCategory.COMMAND_INJECTION,
            severity=Severity.CRITICAL,
            title="Shell execution with shell=True",
            description="subprocess called with shell=True runs input through the shell",
            file_path=f"{SKILL_PATH}/scripts/deploy.py",
            line_number=42,
            snippet="subprocess.run(cmd, shell=True)",
            remediation="Pass an argument list and drop shell=True.",
            analyzer="static",
        ),
        Finding(
            id="SK1",
            rule_id="SK006",
            category=ThreatCategory.HARDCODED_SECRETS,
            severity=Severity.CRITICAL,
            title="AWS access key detected",
            description="Potential AWS access key found in skill file",
            file_path=f"{SKILL_PATH}/config.txt",
            line_number=3,
            snippet="AWS_ACCESS_KEY_ID=[REDACTED]",
            remediation="Remove hardcoded secrets. Use environment variables or secret managers.",
            analyzer="secrets",
        ),
        Finding(
            id="MF1",
            rule_id="MF001",
            category=ThreatCategory.POLICY_VIOLATION,
            severity=Severity.LOW,
            title="Missing SKILL.md frontmatter",
            description="SKILL.md should have YAML frontmatter with name, description, and allowed-tools",
            file_path=f"{SKILL_PATH}/SKILL.md",
            analyzer="manifest",
        ),
    ]


@pytest.fixture
def scan_result() -> ScanResult:
    return ScanResult(
        skill_path=SKILL_PATH,
        skill_name="deploy-helper",
        verdict=Verdict.FAIL,
        findings=_sample_findings(),
        stats={"critical": 2, "high": 0, "medium": 0, "low": 1, "info": 0},
        duration_ms=12.5,
        analyzers_used=["static", "manifest", "secrets"],
        timestamp=datetime(2026, 1, 15, 9, 30, 0),
    )


@pytest.fixture
def clean_result() -> ScanResult:
    return ScanResult(
        skill_path=SKILL_PATH,
        skill_name="deploy-helper",
        verdict=Verdict.PASS,
        stats={"critical": 0, "high": 0, "medium": 0, "low": 0, "info": 0},
        analyzers_used=["static", "manifest", "secrets"],
    )


class TestRegistry:
    @pytest.mark.parametrize("name", ["summary", "json", "table", "sarif"])
    def test_known_formats(self, name):
        assert isinstance(get_reporter(name), REPORTERS[name])

    def test_kwargs_forwarded(self):
        assert get_reporter("json", pretty=False).pretty is False

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Invalid format 'xml'"):
            get_reporter("xml")


class TestSummaryReporter:
    def test_contents(self, scan_result):
        report = SummaryReporter().generate_report(scan_result)
        assert "Skill: deploy-helper" in report
        assert "Verdict: [FAIL]" in report
        assert "Max Severity: CRITICAL" in report
        assert "Total Findings: 3" in report
        assert "[CRITICAL] CI003 Shell execution with shell=True (scripts/deploy.py:42)" in report
        assert "[LOW] MF001 Missing SKILL.md frontmatter (SKILL.md)" in report

    def test_truncates_finding_list(self, scan_result):
        report = SummaryReporter(max_findings=1).generate_report(scan_result)
        assert "... and 2 more" in report

    def test_clean(self, clean_result):
        report = SummaryReporter().generate_report(clean_result)
        assert "Verdict: [PASS]" in report
        assert "Top Findings" not in report

    def test_analyzer_errors(self, clean_result):
        clean_result.analyzer_errors = [AnalyzerError("secrets", "secrets analyzer failed: OSError: boom")]
        report = SummaryReporter().generate_report(clean_result)
        assert "secrets: secrets analyzer failed: OSError: boom" in report


class TestJSONReporter:
    def test_pretty(self, scan_result):
        output = JSONReporter().generate_report(scan_result)
        data = json.loads(output)
        assert "\n  " in output
        assert data["verdict"] == "fail"
        assert data["findings_count"] == 3
        assert [f["rule_id"] for f in data["findings"]] == ["CI003", "SK006", "MF001"]
        assert data["timestamp"] == "2026-01-15T09:30:00"

    def test_compact(self, scan_result):
        output = JSONReporter(pretty=False).generate_report(scan_result)
        assert "\n" not in output
        assert json.loads(output)["stats"]["critical"] == 2

    def test_save(self, scan_result, tmp_path):
        out = tmp_path / "report.json"
        JSONReporter().save_report(scan_result, str(out))
        assert json.loads(out.read_text(encoding="utf-8"))["skill_name"] == "deploy-helper"


class TestTableReporter:
    def test_rows(self, scan_result):
        report = TableReporter(width=200).generate_report(scan_result)
        assert "CI003" in report
        assert "scripts/deploy.py:42" in report
        assert "Verdict: FAIL" in report
        assert "\x1b[" not in report

    def test_snippets_optional(self, scan_result):
        assert "Snippet" not in TableReporter(width=200).generate_report(scan_result)
        report = TableReporter(width=250, show_snippets=True).generate_report(scan_result)
        assert "Snippet" in report
        assert "subprocess.run(cmd, shell=True)" in report

    def test_no_findings(self, clean_result):
        report = TableReporter().generate_report(clean_result)
        assert "No findings in deploy-helper" in report
        assert "Verdict: PASS" in report


class TestSARIFReporter:
    def test_structure(self, scan_result):
        log = json.loads(SARIFReporter().generate_report(scan_result))
        assert log["version"] == "2.1.0"
        run = log["runs"][0]
        assert run["tool"]["driver"]["name"] == "skillkit-scanner"
        assert [r["id"] for r in run["tool"]["driver"]["rules"]] == ["CI003", "SK006", "MF001"]
        assert len(run["results"]) == 3

    def test_result_locations(self, scan_result):
        run = SARIFReporter().build_log(scan_result)["runs"][0]
        first = run["results"][0]
        assert first["ruleId"] == "CI003"
        assert first["ruleIndex"] == 0
        assert first["level"] == "error"
        location = first["locations"][0]["physicalLocation"]
        assert location["artifactLocation"] == {"uri": "scripts/deploy.py", "uriBaseId": "%SRCROOT%"}
        assert location["region"]["startLine"] == 42
        assert location["region"]["snippet"]["text"] == "subprocess.run(cmd, shell=True)"

    def test_result_without_line(self, scan_result):
        last = SARIFReporter().build_log(scan_result)["runs"][0]["results"][2]
        assert last["level"] == "note"
        assert "region" not in last["locations"][0]["physicalLocation"]

    def test_rule_metadata_from_taxonomy(self, scan_result):
        rules = SARIFReporter().build_log(scan_result)["runs"][0]["tool"]["driver"]["rules"]
        assert rules[1]["name"] == "HardcodedSecrets"
        assert rules[1]["help"]["text"].startswith("Remove hardcoded secrets")
        assert "help" not in rules[2]

    def test_invocation_reports_analyzer_errors(self, clean_result):
        clean_result.analyzer_errors = [AnalyzerError("static", "static analyzer failed: ValueError: bad")]
        invocation = SARIFReporter().build_log(clean_result)["runs"][0]["invocations"][0]
        assert invocation["executionSuccessful"] is False
        assert invocation["toolExecutionNotifications"][0]["message"]["text"].startswith("static analyzer failed")
