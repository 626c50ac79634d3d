"""
WordPress site audit.

Pulls a site's full content corpus over the WordPress REST API and turns it
into a multi-section audit profile (content, structure, SEO, design, media,
writing style, languages, technical stack) plus a synthesized site profile
for AI content generation.

Usage:
    from site_audit import run_site_audit
    from site_audit.wordpress_client import SiteCredentials

    audit = await run_site_audit(SiteCredentials(
        api_url="https://example.com/wp-json/wp/v2",
        username="admin",
        app_password="xxxx xxxx xxxx xxxx",
    ))
    print(audit.site_profile.system_prompt)
"""

__version__ = "1.0.0"

from site_audit.site_auditor import (  # noqa: E402
    AuditError,
    PartialFetchError,
    SiteAudit,
    SiteAuditor,
    SiteConnectionError,
    analyze_snapshot,
    run_site_audit,
    run_site_audit_sync,
)
from site_audit.models import ContentSnapshot  # noqa: E402

__all__ = [
    "AuditError",
    "ContentSnapshot",
    "PartialFetchError",
    "SiteAudit",
    "SiteAuditor",
    "SiteConnectionError",
    "analyze_snapshot",
    "run_site_audit",
    "run_site_audit_sync",
]
