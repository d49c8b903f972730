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

"""Command-line interface for the SkillKit Scanner."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ..config.config import Config
from ..config.constants import ScannerConstants
from ..core.exceptions import RuleLoadError, ScanTargetError
from ..core.models import ScanOptions, ScanResult, Severity, ThreatCategory, Verdict
from ..core.reporters.registry import get_reporter
from ..core.rules.patterns import RuleLoader, get_all_rules
from ..core.scanner import SkillScanner
from ..threats.taxonomy import get_threat_info

logger = logging.getLogger("skillkit_scanner.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _load_config(args: argparse.Namespace) -> Config:
    env_file = getattr(args, "env_file", None)
    if env_file:
        return Config.from_file(Path(env_file))
    return Config.from_env()


def _parse_skip_rules(value: str | None) -> set[str]:
    if not value:
        return set()
    return {part.strip() for part in value.split(",") if part.strip()}


def _format_output(args: argparse.Namespace, output_format: str, result: ScanResult) -> str:
    """Generate the formatted output string for a scan result."""
    if output_format == "json":
        return get_reporter("json", pretty=not args.compact).generate_report(result)
    if output_format == "table":
        return get_reporter("table", show_snippets=args.show_snippets).generate_report(result)
    return get_reporter(output_format).generate_report(result)


def _write_output(args: argparse.Namespace, output: str) -> None:
    """Write *output* to a file or stdout."""
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(output)
        print(f"Report saved to: {args.output}")
    else:
        print(output)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def scan_command(args: argparse.Namespace) -> int:
    """Handle the ``scan`` command.

    Returns 1 when the verdict is ``fail`` or the input is invalid, else 0.
    """
    try:
        config = _load_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output_format = args.format or config.output_format
    if output_format not in ScannerConstants.OUTPUT_FORMATS:
        print(
            f"Error: Invalid format '{output_format}'. "
            f"Expected one of: {', '.join(ScannerConstants.OUTPUT_FORMATS)}",
            file=sys.stderr,
        )
        return 1

    fail_on_name = (args.fail_on or config.fail_on or "").lower()
    if fail_on_name not in ScannerConstants.FAIL_ON_LEVELS:
        print(
            f"Error: Invalid --fail-on value '{fail_on_name}'. "
            f"Expected one of: {', '.join(ScannerConstants.FAIL_ON_LEVELS)}",
            file=sys.stderr,
        )
        return 1

    skill_dir = Path(args.skill_directory)
    if not skill_dir.exists():
        print(f"Error: Path does not exist: {skill_dir}", file=sys.stderr)
        return 1

    options = ScanOptions(
        fail_on=Severity.from_string(fail_on_name),
        skip_rules=frozenset(set(config.skip_rules) | _parse_skip_rules(args.skip_rules)),
    )

    try:
        scanner = SkillScanner(
            options=options,
            custom_rules_path=args.custom_rules,
            max_secret_file_chars=config.max_secret_file_chars or ScannerConstants.DEFAULT_MAX_SECRET_FILE_CHARS,
        )
        result = scanner.scan(skill_dir)
    except RuleLoadError as e:
        print(f"Error loading rules: {e}", file=sys.stderr)
        return 1
    except ScanTargetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _write_output(args, _format_output(args, output_format, result))

    if result.verdict == Verdict.FAIL:
        return 1
    return 0


def list_rules_command(args: argparse.Namespace) -> int:
    """Handle the ``list-rules`` command."""
    rules = get_all_rules()
    if args.category:
        try:
            category = ThreatCategory(args.category)
        except ValueError:
            valid = ", ".join(c.value for c in ThreatCategory)
            print(f"Error: Unknown category '{args.category}'. Expected one of: {valid}", file=sys.stderr)
            return 1
        rules = [r for r in rules if r.category == category]

    if args.json:
        payload = [
            {
                "id": r.id,
                "category": r.category.value,
                "severity": r.severity.value,
                "description": r.description,
                "file_types": sorted(r.file_types),
            }
            for r in rules
        ]
        print(json.dumps(payload, indent=2))
        return 0

    current = None
    for rule in rules:
        if rule.category != current:
            current = rule.category
            print(f"\n{get_threat_info(current).name} ({current.value})")
        print(f"  {rule.id:<6} {rule.severity.value.upper():<8} {rule.description}")
    return 0


def validate_rules_command(args: argparse.Namespace) -> int:
    """Handle the ``validate-rules`` command."""
    try:
        loader = RuleLoader(Path(args.rules_file)) if args.rules_file else RuleLoader()
        rules = loader.load_rules()
    except RuleLoadError as e:
        print(f"[FAIL] Error validating rules: {e}", file=sys.stderr)
        return 1

    print(f"[OK] Successfully loaded {len(rules)} rules\n")
    print("Rules by category:")
    for category, category_rules in loader.rules_by_category.items():
        print(f"  - {category.value}: {len(category_rules)} rules")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillkit-scan",
        description="SkillKit Scanner - Content security scanner for AI agent skills",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skillkit-scan scan /path/to/skill
  skillkit-scan scan /path/to/skill --format sarif --output results.sarif
  skillkit-scan scan /path/to/skill --fail-on medium --skip-rules DE003,unicode-steganography
  skillkit-scan list-rules --category prompt-injection
  skillkit-scan validate-rules --rules-file my_rules/
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {ScannerConstants.VERSION}")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- scan --------------------------------------------------------------
    scan_p = subparsers.add_parser("scan", help="Scan a skill directory")
    scan_p.add_argument("skill_directory", help="Path to skill directory")
    # Validated in scan_command rather than with ``choices`` so bad values exit 1, not 2
    scan_p.add_argument("--format", default=None, help="Output format: summary (default), json, table, sarif")
    scan_p.add_argument(
        "--fail-on",
        default=None,
        help="Minimum severity that fails the scan: critical, high (default), medium, low, info",
    )
    scan_p.add_argument("--skip-rules", default=None, help="Comma-separated rule ids and/or category names to skip")
    scan_p.add_argument("--custom-rules", metavar="PATH", help="YAML file or directory of additional rules")
    scan_p.add_argument("--output", "-o", help="Output file path")
    scan_p.add_argument("--compact", action="store_true", help="Compact JSON output")
    scan_p.add_argument("--show-snippets", action="store_true", help="Include snippets in table output")
    scan_p.add_argument("--env-file", metavar="PATH", help="Load SKILLKIT_SCAN_* settings from a .env file")
    scan_p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # -- list-rules --------------------------------------------------------
    lr_p = subparsers.add_parser("list-rules", help="List built-in detection rules")
    lr_p.add_argument("--category", help="Only list rules of this threat category")
    lr_p.add_argument("--json", action="store_true", help="Print rules as JSON")

    # -- validate-rules ----------------------------------------------------
    vr_p = subparsers.add_parser("validate-rules", help="Validate rule signatures")
    vr_p.add_argument("--rules-file", help="Path to YAML rules file or directory (default: built-in signatures)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(getattr(args, "verbose", False))

    dispatch = {
        "scan": scan_command,
        "list-rules": list_rules_command,
        "validate-rules": validate_rules_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
