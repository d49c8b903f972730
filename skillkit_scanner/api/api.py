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

"""API module for SkillKit Scanner.

This module provides a FastAPI application for scanning agent skill bundles.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__ as PACKAGE_VERSION
from ..config.constants import ScannerConstants
from .router import allowed_roots
from .router import router as api_router

logger = logging.getLogger("skillkit_scanner.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report the scan-path restriction once at startup."""
    roots = allowed_roots()
    if roots:
        logger.info("Scans restricted to: %s", ", ".join(str(root) for root in roots))
    else:
        logger.warning(
            "%s is not set; the API will scan any local directory", ScannerConstants.ENV_ALLOWED_ROOTS
        )
    yield


app = FastAPI(
    title="SkillKit Scanner API",
    description="Content security scanning API for AI agent skills",
    version=PACKAGE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(api_router)
