"""
Site Audit API Server
=====================

FastAPI server exposing the site audit over HTTP for the admin UI and the
content generation pipeline.

Run directly:
    python -m site_audit.api
    uvicorn site_audit.api:app --host 0.0.0.0 --port 8766

Port configurable via SITE_AUDIT_API_PORT environment variable (default 8766).
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from site_audit import __version__, config
from site_audit.site_auditor import (
    SECTION_NAMES,
    SiteAudit,
    SiteConnectionError,
    run_site_audit,
)
from site_audit.wordpress_client import (
    SiteCredentials,
    SiteNotConfiguredError,
    WordPressError,
    resolve_credentials,
)

logger = config.get_logger("api")

ALLOWED_ORIGINS = os.getenv(
    "SITE_AUDIT_CORS_ORIGINS",
    "http://localhost:3000",
).split(",")

# ---------------------------------------------------------------------------
# Pydantic Models
# ---------------------------------------------------------------------------


class AuditRequest(BaseModel):
    api_url: str = Field(..., description="WP REST API URL, e.g. https://example.com/wp-json/wp/v2")
    username: str
    app_password: str
    section: Optional[str] = Field(None, description="Return only this section")


class SiteAuditRequest(BaseModel):
    section: Optional[str] = Field(None, description="Return only this section")


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str


# ---------------------------------------------------------------------------
# FastAPI App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="WordPress Site Audit API",
    description="Content, SEO, design, writing style and language audits of WordPress sites.",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_section(section: Optional[str]) -> None:
    if section is not None and section not in SECTION_NAMES:
        raise HTTPException(400, f"Unknown section: {section}. Use one of {', '.join(SECTION_NAMES)}.")


async def _audit(credentials: SiteCredentials, section: Optional[str]) -> Dict[str, Any]:
    try:
        audit: SiteAudit = await run_site_audit(credentials)
    except SiteNotConfiguredError as exc:
        raise HTTPException(400, str(exc))
    except SiteConnectionError as exc:
        logger.warning("Audit of %s failed: %s", credentials.label, exc)
        raise HTTPException(502, str(exc))
    except WordPressError as exc:
        logger.warning("Audit of %s failed: %s", credentials.label, exc)
        raise HTTPException(502, f"WordPress error: {exc}")

    document = audit.to_dict()
    if section:
        return {section: document[section]}
    return document


# ===================================================================
# Health
# ===================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health():
    return HealthResponse(status="ok", version=__version__, timestamp=_now_iso())


# ===================================================================
# Audits
# ===================================================================


@app.post("/audits", tags=["Audits"])
async def audit_site(req: AuditRequest):
    """Audit a site with credentials supplied in the request body."""
    _check_section(req.section)
    credentials = SiteCredentials(
        api_url=req.api_url, username=req.username, app_password=req.app_password
    )
    return await _audit(credentials, req.section)


@app.post("/audits/{site_id}", tags=["Audits"])
async def audit_registered_site(site_id: str, req: Optional[SiteAuditRequest] = None):
    """Audit a site whose credentials come from the registry or environment."""
    section = req.section if req else None
    _check_section(section)
    try:
        credentials = resolve_credentials(site_id)
    except SiteNotConfiguredError as exc:
        raise HTTPException(400, str(exc))
    return await _audit(credentials, section)


# ===================================================================
# Entry Point
# ===================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "site_audit.api:app",
        host="0.0.0.0",
        port=config.API_PORT,
        reload=False,
        log_level="info",
    )
