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


"""Tests for the core data models."""

from __future__ import annotations

import pytest

from skillkit_scanner.core.models import (
    STATS_SEVERITIES,
    AnalyzerError,
    Finding,
    ScanOptions,
    ScanResult,
    Severity,
    ThreatCategory,
    Verdict,
)


def _finding(**overrides) -> Finding:
    data = {
        "id": "F1",
        "rule_id": "CI001",
        "category": ThreatCategory.COMMAND_INJECTION,
        "severity": Severity.CRITICAL,
        "title": "Dynamic code evaluation",
        "description": "eval() executes arbitrary strings as code",
        "file_path": "/skills/demo/scripts/run.js",
        "line_number": 3,
        "snippet": "eval(payload)",
        "analyzer": "static",
    }
    data.update(overrides)
    return Finding(**data)


class TestSeverity:
    def test_total_order(self):
        ordered = [Severity.SAFE, Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        assert sorted(reversed(ordered)) == ordered
        for lower, higher in zip(ordered, ordered[1:]):
            assert lower < higher
            assert higher > lower
            assert higher >= lower
            assert lower <= higher

    def test_max_uses_rank_not_string_value(self):
        # "low" > "critical" alphabetically
        assert max([Severity.LOW, Severity.CRITICAL, Severity.MEDIUM]) == Severity.CRITICAL

    def test_from_string_is_case_insensitive(self):
        assert Severity.from_string("HIGH") == Severity.HIGH
        assert Severity.from_string(" Medium ") == Severity.MEDIUM

    def test_from_string_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid severity"):
            Severity.from_string("severe")

    def test_values_are_lowercase_strings(self):
        assert Severity.CRITICAL.value == "critical"
        assert Severity.CRITICAL == "critical"

    def test_stats_buckets_exclude_safe(self):
        assert Severity.SAFE not in STATS_SEVERITIES
        assert len(STATS_SEVERITIES) == 5


class TestThreatCategory:
    def test_ten_categories(self):
        assert len(ThreatCategory) == 10

    def test_values_are_hyphenated(self):
        assert ThreatCategory.HARDCODED_SECRETS.value == "hardcoded-secrets"
        assert ThreatCategory("unicode-steganography") is ThreatCategory.UNICODE_STEGANOGRAPHY


class TestFinding:
    def test_is_immutable(self):
        finding = _finding()
        with pytest.raises(AttributeError):
            finding.severity = Severity.LOW  # type: ignore[misc]

    def test_dedupe_key(self):
        assert _finding().dedupe_key == ("CI001", "/skills/demo/scripts/run.js", 3)
        assert _finding(file_path=None, line_number=None).dedupe_key == ("CI001", None, None)

    def test_to_dict_serializes_enums(self):
        data = _finding().to_dict()
        assert data["category"] == "command-injection"
        assert data["severity"] == "critical"
        assert data["rule_id"] == "CI001"
        assert data["remediation"] is None


class TestScanOptions:
    def test_defaults(self):
        options = ScanOptions()
        assert options.fail_on == Severity.HIGH
        assert options.skip_rules == frozenset()

    def test_coerces_string_fail_on(self):
        assert ScanOptions(fail_on="medium").fail_on == Severity.MEDIUM

    def test_coerces_comma_separated_skip_rules(self):
        options = ScanOptions(skip_rules="PI001, MF003,,")
        assert options.skip_rules == frozenset({"PI001", "MF003"})

    def test_coerces_iterable_skip_rules(self):
        options = ScanOptions(skip_rules=["SK006", "hardcoded-secrets"])
        assert isinstance(options.skip_rules, frozenset)
        assert "hardcoded-secrets" in options.skip_rules

    def test_rejects_unknown_fail_on(self):
        with pytest.raises(ValueError):
            ScanOptions(fail_on="extreme")


class TestScanResult:
    def test_empty_result(self):
        result = ScanResult(skill_path="/skills/demo", skill_name="demo", verdict=Verdict.PASS)
        assert result.max_severity == Severity.SAFE
        assert result.is_safe

    def test_fail_verdict_is_not_safe(self):
        result = ScanResult(skill_path="/skills/demo", skill_name="demo", verdict=Verdict.FAIL, findings=[_finding()])
        assert not result.is_safe
        assert result.max_severity == Severity.CRITICAL

    def test_warn_verdict_is_safe(self):
        finding = _finding(severity=Severity.MEDIUM)
        result = ScanResult(skill_path="/skills/demo", skill_name="demo", verdict=Verdict.WARN, findings=[finding])
        assert result.is_safe

    def test_filters(self):
        findings = [
            _finding(),
            _finding(id="F2", rule_id="DE003", category=ThreatCategory.DATA_EXFILTRATION, severity=Severity.MEDIUM),
        ]
        result = ScanResult(skill_path="/skills/demo", skill_name="demo", verdict=Verdict.FAIL, findings=findings)
        assert [f.rule_id for f in result.get_findings_by_severity(Severity.MEDIUM)] == ["DE003"]
        assert [f.rule_id for f in result.get_findings_by_category(ThreatCategory.COMMAND_INJECTION)] == ["CI001"]

    def test_relative_path(self):
        result = ScanResult(skill_path="/skills/demo", skill_name="demo", verdict=Verdict.PASS)
        assert result.relative_path("/skills/demo/scripts/run.js") == "scripts/run.js"
        assert result.relative_path("/elsewhere/file.txt") == "/elsewhere/file.txt"
        assert result.relative_path(None) is None

    def test_to_dict(self):
        result = ScanResult(
            skill_path="/skills/demo",
            skill_name="demo",
            verdict=Verdict.FAIL,
            findings=[_finding()],
            stats={"critical": 1, "high": 0, "medium": 0, "low": 0, "info": 0},
            duration_ms=12.34567,
            analyzers_used=["static", "manifest"],
            analyzer_errors=[AnalyzerError(analyzer="secrets", message="secrets analyzer failed: OSError: boom")],
        )
        data = result.to_dict()
        assert data["verdict"] == "fail"
        assert data["max_severity"] == "critical"
        assert data["findings_count"] == 1
        assert data["duration_ms"] == 12.346
        assert data["analyzers_used"] == ["static", "manifest"]
        assert data["analyzer_errors"] == [{"analyzer": "secrets", "message": "secrets analyzer failed: OSError: boom"}]
        assert data["findings"][0]["rule_id"] == "CI001"
        assert "timestamp" in data
