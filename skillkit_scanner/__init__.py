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
SkillKit Scanner - Content security scanner for AI agent skill bundles.
"""

from ._version import __version__

__author__ = "Cisco Systems, Inc."


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``python -m skillkit_scanner.cli.cli`` from importing the rule
    catalog, FastAPI and rich until a symbol is actually needed.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "ScannerConstants": (".config.constants", "ScannerConstants"),
        "Finding": (".core.models", "Finding"),
        "ScanOptions": (".core.models", "ScanOptions"),
        "ScanResult": (".core.models", "ScanResult"),
        "SecurityRule": (".core.rules.patterns", "SecurityRule"),
        "Severity": (".core.models", "Severity"),
        "ThreatCategory": (".core.models", "ThreatCategory"),
        "Verdict": (".core.models", "Verdict"),
        "SkillScanner": (".core.scanner", "SkillScanner"),
        "compute_verdict": (".core.scanner", "compute_verdict"),
        "scan_skill": (".core.scanner", "scan_skill"),
        "discover_files": (".core.discovery", "discover_files"),
        "get_all_rules": (".core.rules.patterns", "get_all_rules"),
        "get_rule": (".core.rules.patterns", "get_rule"),
        "get_threat_info": (".threats.taxonomy", "get_threat_info"),
        "get_default_severity": (".threats.taxonomy", "get_default_severity"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "SkillScanner",
    "scan_skill",
    "compute_verdict",
    "discover_files",
    "Finding",
    "ScanOptions",
    "ScanResult",
    "SecurityRule",
    "Severity",
    "ThreatCategory",
    "Verdict",
    "get_all_rules",
    "get_rule",
    "get_threat_info",
    "get_default_severity",
    "Config",
    "ScannerConstants",
]
