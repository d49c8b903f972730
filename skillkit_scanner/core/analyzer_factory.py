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
Centralized analyzer construction.

The CLI, the API router and ``SkillScanner`` all build their analyzers
through this module, so the set of core analyzers is defined in one place.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .analyzers.base import BaseAnalyzer
from .analyzers.manifest import ManifestAnalyzer
from .analyzers.secrets import DEFAULT_MAX_FILE_CHARS, SecretsAnalyzer
from .analyzers.static import StaticAnalyzer
from .models import ScanOptions
from .rules.patterns import RuleLoader, get_all_rules

logger = logging.getLogger(__name__)


def build_core_analyzers(
    options: ScanOptions,
    *,
    custom_rules_path: str | Path | None = None,
    max_secret_file_chars: int = DEFAULT_MAX_FILE_CHARS,
) -> list[BaseAnalyzer]:
    """Build the static, manifest and secrets analyzers, in that order.

    Args:
        options: Scan options; ``skip_rules`` is forwarded to every analyzer.
        custom_rules_path: Optional YAML file or directory of extra rules,
            run by the static analyzer after the built-in catalog.
        max_secret_file_chars: Size ceiling for the secrets analyzer.

    Returns:
        A list of analyzer instances.

    Raises:
        RuleLoadError: If the custom rules cannot be loaded.
    """
    rules = get_all_rules()
    if custom_rules_path is not None:
        extra = RuleLoader(Path(custom_rules_path)).load_rules()
        logger.info("Loaded %d custom rules from %s", len(extra), custom_rules_path)
        rules.extend(extra)

    return [
        StaticAnalyzer(rules=rules, skip_rules=options.skip_rules),
        ManifestAnalyzer(skip_rules=options.skip_rules),
        SecretsAnalyzer(skip_rules=options.skip_rules, max_file_chars=max_secret_file_chars),
    ]
