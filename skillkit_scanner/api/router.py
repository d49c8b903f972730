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

"""API router for SkillKit Scanner endpoints.

Exposes the scanner as a composable ``APIRouter`` so it can be mounted in
other FastAPI applications. Request options mirror the ``scan`` CLI command.
"""

import asyncio
import concurrent.futures
import logging
import os
from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .. import __version__ as PACKAGE_VERSION
from ..config.constants import ScannerConstants
from ..core.exceptions import ScanTargetError
from ..core.models import ScanOptions, Severity
from ..core.rules.patterns import get_all_rules
from ..core.scanner import SkillScanner

logger = logging.getLogger("skillkit_scanner.api")

router = APIRouter()


def allowed_roots() -> list[Path]:
    """Directories the API may scan, from ``SKILLKIT_SCAN_ALLOWED_ROOTS``.

    An empty list means any local path is allowed.
    """
    raw = os.environ.get(ScannerConstants.ENV_ALLOWED_ROOTS, "")
    return [Path(p).resolve() for p in raw.split(":") if p.strip()]


def _validate_path(user_input: str, *, label: str = "path") -> Path:
    """Sanitize and validate a user-supplied filesystem path.

    Rejects null bytes, resolves symlinks, and enforces the optional
    allowed-roots list.
    """
    if "\x00" in user_input:
        raise HTTPException(status_code=400, detail=f"Invalid {label}: null bytes are not allowed")

    resolved = Path(user_input).resolve()

    roots = allowed_roots()
    if roots and not any(resolved == root or resolved.is_relative_to(root) for root in roots):
        raise HTTPException(
            status_code=403,
            detail=f"Access denied: {label} is outside the allowed directories",
        )

    return resolved


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class ScanRequest(BaseModel):
    """Request model for scanning a skill."""

    path: str = Field(..., description="Path to skill directory")
    fail_on: str = Field("high", description="Minimum severity that produces a fail verdict")
    skip_rules: list[str] = Field(default_factory=list, description="Rule ids and/or category names to skip")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    analyzers_available: list[str]


class RuleSummary(BaseModel):
    """One entry of the rule catalog."""

    id: str
    category: str
    severity: str
    description: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {"service": "SkillKit Scanner API", "version": PACKAGE_VERSION, "docs": "/docs"}


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=PACKAGE_VERSION,
        analyzers_available=list(ScannerConstants.ANALYZERS),
    )


@router.get("/rules", response_model=list[RuleSummary])
async def list_rules():
    """List the built-in rule catalog."""
    return [
        RuleSummary(
            id=rule.id,
            category=rule.category.value,
            severity=rule.severity.value,
            description=rule.description,
        )
        for rule in get_all_rules()
    ]


@router.post("/scan", response_model=dict)
async def scan_skill(request: ScanRequest):
    """Scan a single skill directory."""
    skill_dir = _validate_path(request.path, label="path")

    if not skill_dir.exists():
        raise HTTPException(status_code=404, detail=f"Skill directory not found: {skill_dir}")

    if not skill_dir.is_dir():
        raise HTTPException(status_code=400, detail="path must be a directory")

    if request.fail_on.strip().lower() not in ScannerConstants.FAIL_ON_LEVELS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid fail_on '{request.fail_on}'. "
            f"Expected one of: {', '.join(ScannerConstants.FAIL_ON_LEVELS)}",
        )

    try:
        options = ScanOptions(fail_on=Severity.from_string(request.fail_on), skip_rules=frozenset(request.skip_rules))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    def run_scan():
        return SkillScanner(options=options).scan(skill_dir)

    try:
        loop = asyncio.get_running_loop()
        with concurrent.futures.ThreadPoolExecutor() as executor:
            result = await loop.run_in_executor(executor, run_scan)
    except ScanTargetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Scan of %s failed", skill_dir)
        raise HTTPException(status_code=500, detail=f"Scan failed: {str(e)}")

    return result.to_dict()
