"""
WordPress Site Auditor
======================

Runs a full audit of a WordPress site over the REST API: fetches the
content corpus, runs every analyzer over one immutable snapshot, then
derives recommendations and a site profile for AI content generation.

Pipeline:
    1. Connectivity probe         -- fatal on failure (SiteConnectionError)
    2. Ten concurrent fetches     -- a failed or timed-out fetch degrades
                                     only that collection to empty
    3. Analyzers (worker thread)  -- overview, content, structure, seo,
                                     design, media, writing, languages,
                                     technical
    4. Recommendations + profile

Usage:
    from site_audit.site_auditor import run_site_audit
    from site_audit.wordpress_client import SiteCredentials

    audit = await run_site_audit(SiteCredentials(
        api_url="https://example.com/wp-json/wp/v2",
        username="admin",
        app_password="xxxx xxxx xxxx xxxx",
    ))
    print(audit.content.niche)
    print(audit.site_profile.system_prompt)

    # Synchronous
    audit = run_site_audit_sync(creds)

CLI:
    python -m site_audit.site_auditor audit --site travelblog
    python -m site_audit.site_auditor audit --api-url https://example.com/wp-json/wp/v2 \\
        --username admin --password-env EXAMPLE_WP_PASSWORD --output audit.json
    python -m site_audit.site_auditor audit --site travelblog --section seo
    python -m site_audit.site_auditor audit --site travelblog --profile
    python -m site_audit.site_auditor sites
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import os
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, List, Optional, Tuple

from site_audit import config
from site_audit.content_analyzer import ContentAnalysis, analyze_content
from site_audit.design_analyzer import DesignAnalysis, analyze_design
from site_audit.language_analyzer import LanguageAnalysis, analyze_languages
from site_audit.media_analyzer import MediaAnalysis, analyze_media
from site_audit.models import AuditSection, ContentSnapshot
from site_audit.overview import SiteOverview, analyze_overview
from site_audit.recommendations import AuditFindings, generate_recommendations
from site_audit.seo_analyzer import SeoAnalysis, analyze_seo
from site_audit.site_profile import SiteProfile, synthesize_profile
from site_audit.structure_analyzer import StructureAnalysis, analyze_structure
from site_audit.technical_analyzer import TechnicalAnalysis, analyze_technical
from site_audit.wordpress_client import (
    SiteCredentials,
    SiteNotConfiguredError,
    WordPressClient,
    WordPressError,
    load_site_registry,
    resolve_credentials,
)
from site_audit.writing_style import WritingStyleAnalysis, analyze_writing_style

logger = config.get_logger("site_auditor")

UNKNOWN_SITE_NAME = "Unknown"
DEFAULT_PROFILE_SITE_NAME = "WordPress Site"
MEDIA_PAGE_SIZE = 100

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AuditError(Exception):
    """Base exception for the audit pipeline."""
    pass


class SiteConnectionError(AuditError):
    """The connectivity probe failed; the audit did not run."""
    pass


class PartialFetchError(AuditError):
    """One collection could not be fetched. Logged, never propagated."""

    def __init__(self, collection: str, cause: BaseException):
        self.collection = collection
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"Could not fetch {collection}: {detail}")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class AuditMeta(AuditSection):
    site_url: str = ""
    site_name: str = UNKNOWN_SITE_NAME
    audit_date: str = ""
    audit_duration: str = "0.0s"
    degraded_collections: List[str] = field(default_factory=list)


@dataclass
class SiteAudit(AuditSection):
    """The complete audit document for one site."""

    meta: AuditMeta
    overview: SiteOverview
    content: ContentAnalysis
    structure: StructureAnalysis
    seo: SeoAnalysis
    design: DesignAnalysis
    media: MediaAnalysis
    writing: WritingStyleAnalysis
    languages: LanguageAnalysis
    technical: TechnicalAnalysis
    recommendations: List[str]
    site_profile: SiteProfile

    def summary(self) -> str:
        lines = [
            f"Site:        {self.meta.site_name} ({self.meta.site_url})",
            f"Audited:     {self.meta.audit_date} in {self.meta.audit_duration}",
            f"Posts:       {self.overview.total_posts} published, "
            f"{self.overview.total_drafts} drafts, {self.overview.total_pages} pages",
            f"Frequency:   {self.overview.publish_frequency}",
            f"Niche:       {self.content.niche}",
            f"Avg words:   {self.content.avg_word_count} ({self.content.avg_reading_time} read)",
            f"SEO plugin:  {self.seo.seo_plugin or 'none'}",
            f"Builder:     {self.design.page_builder or 'none'}",
            f"Tone:        {self.writing.author_voice}",
            f"Languages:   {', '.join(self.languages.detected_languages)}",
        ]
        if self.meta.degraded_collections:
            lines.append(f"Degraded:    {', '.join(self.meta.degraded_collections)}")
        if self.recommendations:
            lines.append("")
            lines.append(f"Recommendations ({len(self.recommendations)}):")
            for rec in self.recommendations:
                lines.append(f"  - {rec}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _run_sync(coro):
    """Run an async coroutine synchronously.

    Handles the case where we are already inside an event loop (e.g.,
    Jupyter notebook, nested async call).
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(asyncio.run, coro)
            return future.result()
    else:
        return asyncio.run(coro)


def _site_title(snapshot: ContentSnapshot) -> str:
    title = snapshot.settings.get("title")
    return title if isinstance(title, str) else ""


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def analyze_snapshot(snapshot: ContentSnapshot, wp_version: str = "") -> SiteAudit:
    """
    Run every analyzer over a snapshot and assemble the audit.

    Pure and synchronous. ``meta`` carries the site identity and the
    current time; the orchestrator replaces it with timing and degraded
    collection details.
    """
    overview = analyze_overview(snapshot)
    content = analyze_content(snapshot)
    structure = analyze_structure(snapshot)
    seo = analyze_seo(snapshot)
    design = analyze_design(snapshot)
    media = analyze_media(snapshot)
    writing = analyze_writing_style(snapshot)
    languages = analyze_languages(snapshot)
    technical = analyze_technical(snapshot, wp_version=wp_version)

    recommendations = generate_recommendations(
        AuditFindings(
            overview=overview,
            content=content,
            seo=seo,
            design=design,
            media=media,
            writing=writing,
        )
    )

    title = _site_title(snapshot)
    profile = synthesize_profile(
        site_name=snapshot.site_name or title or DEFAULT_PROFILE_SITE_NAME,
        site_url=snapshot.site_url,
        content=content,
        design=design,
        writing=writing,
        languages=languages,
        seo=seo,
    )

    return SiteAudit(
        meta=AuditMeta(
            site_url=snapshot.site_url,
            site_name=snapshot.site_name or title or UNKNOWN_SITE_NAME,
            audit_date=_now_iso(),
        ),
        overview=overview,
        content=content,
        structure=structure,
        seo=seo,
        design=design,
        media=media,
        writing=writing,
        languages=languages,
        technical=technical,
        recommendations=recommendations,
        site_profile=profile,
    )


# ---------------------------------------------------------------------------
# SiteAuditor
# ---------------------------------------------------------------------------


class SiteAuditor:
    """
    Orchestrates one audit of one site.

    Parameters
    ----------
    credentials : SiteCredentials
        Site to audit.
    fetch_timeout : float
        Upper bound in seconds for each collection fetch, all pages included.
    request_timeout : float
        Per HTTP request timeout in seconds.
    client : WordPressClient, optional
        Pre-built client (mainly for tests). Not closed by the auditor.
    """

    def __init__(
        self,
        credentials: SiteCredentials,
        fetch_timeout: float = config.FETCH_TIMEOUT,
        request_timeout: float = config.REQUEST_TIMEOUT,
        client: Optional[WordPressClient] = None,
    ):
        self.credentials = credentials
        self.fetch_timeout = fetch_timeout
        self.request_timeout = request_timeout
        self._client = client

    async def run(self) -> SiteAudit:
        """
        Run the audit.

        Raises
        ------
        SiteNotConfiguredError
            If the credentials are incomplete.
        SiteConnectionError
            If the site cannot be reached or rejects the credentials.
        """
        if self._client is None and not self.credentials.is_configured:
            raise SiteNotConfiguredError(
                f"Site {self.credentials.label!r} has no credentials configured."
            )

        start = time.monotonic()
        logger.info("Starting audit of %s", self.credentials.api_url)

        if self._client is not None:
            snapshot, degraded, wp_version = await self._collect(self._client)
        else:
            # No retries: a failed fetch is final for this run
            async with WordPressClient(
                self.credentials, timeout=self.request_timeout, max_retries=0
            ) as client:
                snapshot, degraded, wp_version = await self._collect(client)

        audit = await asyncio.to_thread(analyze_snapshot, snapshot, wp_version)

        elapsed = time.monotonic() - start
        meta = dataclasses.replace(
            audit.meta,
            audit_duration=f"{elapsed:.1f}s",
            degraded_collections=degraded,
        )
        audit = dataclasses.replace(audit, meta=meta)

        logger.info(
            "Audit of %s complete in %s (%d recommendations, %d degraded collections)",
            meta.site_name,
            meta.audit_duration,
            len(audit.recommendations),
            len(degraded),
        )
        return audit

    async def _collect(
        self, client: WordPressClient
    ) -> Tuple[ContentSnapshot, List[str], str]:
        connection = await client.test_connection()
        if not connection.get("connected"):
            raise SiteConnectionError(
                f"Cannot connect to WordPress at {self.credentials.api_url}: "
                f"{connection.get('error') or 'unknown error'}"
            )

        degraded: List[str] = []
        (
            settings,
            posts,
            pages,
            categories,
            tags,
            media,
            users,
            plugins,
            themes,
            drafts,
        ) = await asyncio.gather(
            self._guarded("settings", client.get_settings(), {}, degraded),
            self._guarded("posts", client.get_all_posts(), [], degraded),
            self._guarded("pages", client.get_all_pages(), [], degraded),
            self._guarded("categories", client.get_categories(), [], degraded),
            self._guarded("tags", client.get_tags(), [], degraded),
            self._guarded("media", client.get_media(per_page=MEDIA_PAGE_SIZE), ([], 0), degraded),
            self._guarded("users", client.get_users(), [], degraded),
            self._guarded("plugins", client.get_plugins(), [], degraded),
            self._guarded("themes", client.get_themes(), [], degraded),
            self._guarded("drafts", client.get_all_posts("draft"), [], degraded),
        )

        media_items, media_total = media
        settings_url = settings.get("url") if isinstance(settings, dict) else None
        snapshot = ContentSnapshot.build(
            posts=posts,
            drafts=drafts,
            pages=pages,
            media=media_items,
            media_total=media_total,
            categories=categories,
            tags=tags,
            users=users,
            plugins=plugins,
            themes=themes,
            settings=settings,
            site_name=connection.get("site_name") or "",
            site_url=(
                connection.get("site_url")
                or (settings_url if isinstance(settings_url, str) else "")
                or self.credentials.api_url
            ),
        )
        logger.debug(
            "Snapshot: %d posts, %d drafts, %d pages, %d media, %d plugins",
            len(snapshot.posts),
            len(snapshot.drafts),
            len(snapshot.pages),
            len(snapshot.media),
            len(snapshot.plugins),
        )
        # Preserve fetch order regardless of completion order
        order = ["settings", "posts", "pages", "categories", "tags",
                 "media", "users", "plugins", "themes", "drafts"]
        degraded.sort(key=order.index)
        return snapshot, degraded, connection.get("wp_version") or ""

    async def _guarded(
        self,
        collection: str,
        fetch: Awaitable[Any],
        default: Any,
        degraded: List[str],
    ) -> Any:
        """
        Await one collection fetch, degrading to ``default`` on failure.

        Any error from the fetch degrades only this collection; the other
        fetches and the audit carry on.
        """
        try:
            return await asyncio.wait_for(fetch, timeout=self.fetch_timeout)
        except Exception as exc:
            error = PartialFetchError(collection, exc)
            logger.warning("%s; continuing without it", error)
            degraded.append(collection)
            return default


async def run_site_audit(credentials: SiteCredentials, **kwargs: Any) -> SiteAudit:
    """Audit one site. Keyword arguments go to ``SiteAuditor``."""
    return await SiteAuditor(credentials, **kwargs).run()


def run_site_audit_sync(credentials: SiteCredentials, **kwargs: Any) -> SiteAudit:
    """Synchronous wrapper for ``run_site_audit``."""
    return _run_sync(run_site_audit(credentials, **kwargs))


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

SECTION_NAMES = (
    "meta", "overview", "content", "structure", "seo", "design", "media",
    "writing", "languages", "technical", "recommendations", "siteProfile",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="site_auditor",
        description="WordPress site auditor: content, structure, SEO, design, "
        "media, writing style, languages and technical stack.",
    )
    sub = parser.add_subparsers(dest="command", help="Command to run")

    # audit
    audit_p = sub.add_parser("audit", help="Audit one site")
    target = audit_p.add_mutually_exclusive_group(required=True)
    target.add_argument("--site", type=str, help="Site ID (registry or WP_<SITE>_* env vars)")
    target.add_argument("--api-url", type=str, help="WP REST API URL (.../wp-json/wp/v2)")
    audit_p.add_argument("--username", type=str, default="", help="WordPress username (with --api-url)")
    audit_p.add_argument(
        "--password-env",
        type=str,
        default="",
        help="Env var holding the application password (with --api-url)",
    )
    audit_p.add_argument("--output", type=str, default=None, help="Write the audit JSON to this file")
    audit_p.add_argument(
        "--section",
        type=str,
        default=None,
        choices=SECTION_NAMES,
        help="Print one section as JSON",
    )
    audit_p.add_argument(
        "--profile",
        action="store_true",
        help="Print the system prompt, content and SEO guidelines",
    )
    audit_p.add_argument(
        "--registry",
        type=str,
        default=None,
        help="Site registry JSON (default: $SITE_AUDIT_REGISTRY)",
    )

    # sites
    sites_p = sub.add_parser("sites", help="List sites in the registry")
    sites_p.add_argument("--registry", type=str, default=None, help="Site registry JSON")

    return parser


def _credentials_from_args(args: argparse.Namespace) -> SiteCredentials:
    if args.site:
        registry = Path(args.registry) if args.registry else None
        return resolve_credentials(args.site, registry_path=registry)
    password = os.getenv(args.password_env, "") if args.password_env else ""
    return SiteCredentials(api_url=args.api_url, username=args.username, app_password=password)


async def _run_cli(args: argparse.Namespace) -> None:
    if args.command == "sites":
        registry = Path(args.registry) if args.registry else None
        sites = load_site_registry(registry)
        print(f"  {'Site':20s} {'Configured':10s} API URL")
        print(f"  {'-' * 70}")
        for site_id, creds in sorted(sites.items()):
            flag = "yes" if creds.is_configured else "no"
            print(f"  {site_id:20s} {flag:10s} {creds.api_url}")
        return

    if args.command == "audit":
        audit = await run_site_audit(_credentials_from_args(args))
        document = audit.to_dict()

        if args.output:
            with open(args.output, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2, ensure_ascii=False)
            print(f"Audit written to {args.output}")

        if args.section:
            print(json.dumps(document[args.section], indent=2, ensure_ascii=False))
        elif args.profile:
            profile = audit.site_profile
            print(profile.system_prompt)
            print()
            print(profile.content_guidelines)
            print()
            print(profile.seo_guidelines)
        elif not args.output:
            print(audit.summary())


def main() -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        asyncio.run(_run_cli(args))
    except KeyboardInterrupt:
        print("\nAborted.")
    except (AuditError, WordPressError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
