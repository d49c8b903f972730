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
Threat taxonomy for skill scan categories.

Every ThreatCategory has exactly one entry describing it for reports. The
taxonomy is descriptive only; detection never consults it, and a rule's own
severity may differ from its category default.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.models import Severity, ThreatCategory


@dataclass(frozen=True)
class ThreatInfo:
    """Human-facing description of a threat category."""

    category: ThreatCategory
    name: str
    description: str
    default_severity: Severity
    examples: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "default_severity": self.default_severity.value,
            "examples": list(self.examples),
        }


class ThreatTaxonomy:
    """Taxonomy entries keyed by category."""

    ENTRIES: dict[ThreatCategory, ThreatInfo] = {
        ThreatCategory.PROMPT_INJECTION: ThreatInfo(
            category=ThreatCategory.PROMPT_INJECTION,
            name="Prompt Injection",
            description="Attempts to override, manipulate, or bypass AI agent instructions through crafted text",
            default_severity=Severity.CRITICAL,
            examples=(
                "Instruction override (ignore previous instructions)",
                "Role manipulation (you are now...)",
                "System prompt extraction",
            ),
        ),
        ThreatCategory.COMMAND_INJECTION: ThreatInfo(
            category=ThreatCategory.COMMAND_INJECTION,
            name="Command Injection",
            description="Code execution via eval, exec, subprocess, or shell commands embedded in skill content",
            default_severity=Severity.CRITICAL,
            examples=(
                "eval() or Function() calls",
                "subprocess.run with shell=True",
                "child_process.exec with user input",
            ),
        ),
        ThreatCategory.DATA_EXFILTRATION: ThreatInfo(
            category=ThreatCategory.DATA_EXFILTRATION,
            name="Data Exfiltration",
            description="Attempts to send sensitive data to external endpoints or read protected files",
            default_severity=Severity.HIGH,
            examples=(
                "Webhook URLs to Discord/Telegram/Slack",
                "HTTP POST with environment variables",
                "Reading .env or credential files",
            ),
        ),
        ThreatCategory.TOOL_ABUSE: ThreatInfo(
            category=ThreatCategory.TOOL_ABUSE,
            name="Tool Abuse",
            description="Manipulation of AI agent tools through shadowing, chaining, or capability probing",
            default_severity=Severity.HIGH,
            examples=(
                "Redefining built-in tools",
                "Granting shell access through allowed-tools",
                "Chaining sensitive read + external send",
            ),
        ),
        ThreatCategory.HARDCODED_SECRETS: ThreatInfo(
            category=ThreatCategory.HARDCODED_SECRETS,
            name="Hardcoded Secrets",
            description="API keys, tokens, passwords, or other credentials embedded in skill files",
            default_severity=Severity.HIGH,
            examples=(
                "API keys (sk-, pk_live_, ghp_)",
                "Private key blocks",
                "Embedded .env file contents",
            ),
        ),
        ThreatCategory.UNICODE_STEGANOGRAPHY: ThreatInfo(
            category=ThreatCategory.UNICODE_STEGANOGRAPHY,
            name="Unicode Steganography",
            description="Hidden content using invisible Unicode characters, bidirectional overrides, or homoglyphs",
            default_severity=Severity.MEDIUM,
            examples=(
                "Zero-width characters hiding instructions",
                "Bidirectional text override attacks",
                "Tag characters encoding hidden payloads",
            ),
        ),
        ThreatCategory.OBFUSCATION: ThreatInfo(
            category=ThreatCategory.OBFUSCATION,
            name="Obfuscation",
            description="Deliberately obscured code or instructions to hide malicious intent",
            default_severity=Severity.MEDIUM,
            examples=(
                "Base64-encoded commands",
                "Hex-encoded payloads",
                "String concatenation to evade detection",
            ),
        ),
        ThreatCategory.SOCIAL_ENGINEERING: ThreatInfo(
            category=ThreatCategory.SOCIAL_ENGINEERING,
            name="Social Engineering",
            description="Manipulative language targeting the AI agent or the user to bypass safety measures",
            default_severity=Severity.MEDIUM,
            examples=(
                "Urgency pressure (do this immediately)",
                "Authority claims (as an admin, I require...)",
                "Impersonating an official vendor tool",
            ),
        ),
        ThreatCategory.AUTONOMY_ABUSE: ThreatInfo(
            category=ThreatCategory.AUTONOMY_ABUSE,
            name="Autonomy Abuse",
            description="Instructions that escalate agent autonomy beyond intended boundaries",
            default_severity=Severity.HIGH,
            examples=(
                "Run without user confirmation",
                "Keep retrying until success",
                "Auto-approve all actions",
            ),
        ),
        ThreatCategory.POLICY_VIOLATION: ThreatInfo(
            category=ThreatCategory.POLICY_VIOLATION,
            name="Policy Violation",
            description="Content that violates skill marketplace policies or naming conventions",
            default_severity=Severity.LOW,
            examples=(
                "Missing or malformed SKILL.md frontmatter",
                "Missing required metadata",
                "Binary files in skill directory",
            ),
        ),
    }

    @classmethod
    def get(cls, category: ThreatCategory | str) -> ThreatInfo:
        """Look up a category by enum member or its string value.

        Raises:
            ValueError: If *category* is a string that names no category.
        """
        return cls.ENTRIES[ThreatCategory(category)]

    @classmethod
    def all(cls) -> list[ThreatInfo]:
        return list(cls.ENTRIES.values())


def get_threat_info(category: ThreatCategory | str) -> ThreatInfo:
    """Return the taxonomy entry for *category*."""
    return ThreatTaxonomy.get(category)


def get_default_severity(category: ThreatCategory | str) -> Severity:
    """Return the default severity of *category*."""
    return ThreatTaxonomy.get(category).default_severity
