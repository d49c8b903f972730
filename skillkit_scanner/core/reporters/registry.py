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
Reporter lookup by output format name.
"""

from .json_reporter import JSONReporter
from .sarif_reporter import SARIFReporter
from .summary_reporter import SummaryReporter
from .table_reporter import TableReporter

REPORTERS = {
    "summary": SummaryReporter,
    "json": JSONReporter,
    "table": TableReporter,
    "sarif": SARIFReporter,
}


def get_reporter(output_format: str, **kwargs):
    """
    Instantiate the reporter for *output_format*.

    Raises:
        ValueError: If the format is not one of ``summary``, ``json``, ``table``, ``sarif``.
    """
    try:
        reporter_cls = REPORTERS[output_format]
    except KeyError:
        raise ValueError(
            f"Invalid format '{output_format}'. Expected one of: {', '.join(REPORTERS)}"
        ) from None
    return reporter_cls(**kwargs)
