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
Table format reporter built on rich.
"""

import io

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...core.models import ScanResult, Severity, Verdict

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}

_VERDICT_STYLES: dict[Verdict, str] = {
    Verdict.PASS: "bold green",
    Verdict.WARN: "bold yellow",
    Verdict.FAIL: "bold red",
}


class TableReporter:
    """Renders findings as a table.

    Output is plain text unless ``color`` is set, so it can be written to
    files and compared in tests.
    """

    def __init__(self, width: int = 120, color: bool = False, show_snippets: bool = False):
        self.width = width
        self.color = color
        self.show_snippets = show_snippets

    def _build_table(self, result: ScanResult) -> Table:
        table = Table(title=f"Scan Results: {result.skill_name}", show_header=True, header_style="bold")
        table.add_column("Severity", justify="center")
        table.add_column("Rule", style="bold")
        table.add_column("Category")
        table.add_column("Location")
        table.add_column("Title")
        if self.show_snippets:
            table.add_column("Snippet", style="dim")

        for finding in result.findings:
            location = result.relative_path(finding.file_path) or "-"
            if finding.line_number:
                location = f"{location}:{finding.line_number}"
            row = [
                Text(finding.severity.value.upper(), style=_SEVERITY_STYLES.get(finding.severity, "")),
                finding.rule_id,
                finding.category.value,
                location,
                finding.title,
            ]
            if self.show_snippets:
                row.append(finding.snippet or "")
            table.add_row(*row)
        return table

    def generate_report(self, result: ScanResult) -> str:
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=self.width,
            force_terminal=self.color,
            color_system="auto" if self.color else None,
        )

        if result.findings:
            console.print(self._build_table(result))
        else:
            console.print(f"No findings in {result.skill_name}")

        counts = ", ".join(f"{name}: {count}" for name, count in result.stats.items())
        console.print(
            Text.assemble(
                ("Verdict: ", "bold"),
                (result.verdict.value.upper(), _VERDICT_STYLES[result.verdict]),
                f"  ({counts})",
            )
        )
        return buffer.getvalue()

    def save_report(self, result: ScanResult, output_path: str):
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_report(result))
