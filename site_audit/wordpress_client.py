"""
Read-only WordPress REST API client used by the site audit.

Async aiohttp client for a single site: connectivity probe, settings,
paginated posts/pages/categories/tags, a page of media, users, plugins and
themes. Authenticates with WordPress application passwords (Basic auth).

Usage:
    from site_audit.wordpress_client import SiteCredentials, WordPressClient

    creds = SiteCredentials(
        api_url="https://example.com/wp-json/wp/v2",
        username="admin",
        app_password="xxxx xxxx xxxx xxxx",
    )
    async with WordPressClient(creds) as client:
        status = await client.test_connection()
        posts = await client.get_all_posts()

    # Credentials from a registry file or WP_<SITE>_* env vars
    from site_audit.wordpress_client import resolve_credentials
    creds = resolve_credentials("travelblog")
"""

from __future__ import annotations

import asyncio
import base64
import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from site_audit import config

logger = config.get_logger("wordpress_client")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Retry configuration
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds
RETRY_STATUS_CODES = {429, 500, 502, 503, 504}

# WP REST API pagination limit
WP_MAX_PER_PAGE = 100

USER_AGENT = "wp-site-audit/1.0"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class WordPressError(Exception):
    """Base exception for WordPress API errors."""

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class AuthenticationError(WordPressError):
    """Raised on 401/403 responses."""
    pass


class NotFoundError(WordPressError):
    """Raised on 404 responses."""
    pass


class RateLimitError(WordPressError):
    """Raised on 429 responses after all retries exhausted."""
    pass


class SiteNotConfiguredError(WordPressError):
    """Raised when a site lacks credentials."""
    pass


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@dataclass
class SiteCredentials:
    """Connection details for one WordPress site."""

    api_url: str
    username: str = ""
    app_password: str = ""
    site_id: str = ""

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")

    @classmethod
    def from_domain(cls, domain: str, **kwargs: Any) -> "SiteCredentials":
        domain = re.sub(r"^https?://", "", domain).rstrip("/")
        return cls(api_url=f"https://{domain}/wp-json/wp/v2", **kwargs)

    @property
    def base_url(self) -> str:
        """WP REST API root URL (``/wp-json``)."""
        if self.api_url.endswith("/wp/v2"):
            return self.api_url[: -len("/wp/v2")]
        return self.api_url

    @property
    def auth_header(self) -> str:
        """Base64-encoded Basic auth header value."""
        if not self.username or not self.app_password:
            return ""
        credentials = f"{self.username}:{self.app_password}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("utf-8")
        return f"Basic {encoded}"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.username and self.app_password)

    @property
    def label(self) -> str:
        return self.site_id or self.api_url

    def __repr__(self) -> str:
        configured = "configured" if self.is_configured else "no-creds"
        return f"SiteCredentials({self.label!r}, {configured})"


def load_site_registry(registry_path: Optional[Path] = None) -> Dict[str, SiteCredentials]:
    """
    Load site credentials from a registry JSON file.

    Each entry names either ``api_url`` or ``domain``, a ``wp_user``, and
    ``wp_app_password_env``: the environment variable holding the
    application password. Sites whose variable is unset load as
    unconfigured.

    Raises
    ------
    FileNotFoundError
        If no registry path is given or configured, or the file is missing.
    """
    path = registry_path or config.REGISTRY_PATH
    if path is None or not Path(path).exists():
        raise FileNotFoundError(f"Site registry not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    sites: Dict[str, SiteCredentials] = {}
    for entry in data.get("sites", []):
        site_id = entry.get("id", "")
        app_password = ""
        env_var = entry.get("wp_app_password_env", "")
        if env_var:
            app_password = os.getenv(env_var, "")
            if not app_password:
                logger.debug(
                    "Site %s: env var %s not set, site will be unconfigured",
                    site_id or "unknown",
                    env_var,
                )

        kwargs = {
            "username": entry.get("wp_user", ""),
            "app_password": app_password,
            "site_id": site_id,
        }
        if entry.get("api_url"):
            sites[site_id] = SiteCredentials(api_url=entry["api_url"], **kwargs)
        else:
            sites[site_id] = SiteCredentials.from_domain(entry["domain"], **kwargs)

    logger.info(
        "Loaded %d sites from registry (%d configured)",
        len(sites),
        sum(1 for s in sites.values() if s.is_configured),
    )
    return sites


def credentials_from_env(site_id: str) -> Optional[SiteCredentials]:
    """
    Build credentials from ``WP_<SITE>_API_URL``, ``WP_<SITE>_USERNAME`` and
    ``WP_<SITE>_APP_PASSWORD`` (``WORDPRESS_`` prefix also accepted).

    Returns None if any of the three is missing.
    """
    prefix = site_id.upper().replace("-", "_")

    def _lookup(suffix: str) -> str:
        return (
            os.getenv(f"WP_{prefix}_{suffix}")
            or os.getenv(f"WORDPRESS_{prefix}_{suffix}")
            or ""
        )

    api_url = _lookup("API_URL")
    username = _lookup("USERNAME")
    app_password = _lookup("APP_PASSWORD")
    if not api_url or not username or not app_password:
        return None
    return SiteCredentials(
        api_url=api_url, username=username, app_password=app_password, site_id=site_id
    )


def resolve_credentials(
    site_id: str, registry_path: Optional[Path] = None
) -> SiteCredentials:
    """
    Find credentials for ``site_id``: environment first, then the registry.

    Raises
    ------
    SiteNotConfiguredError
        If neither source has usable credentials.
    """
    creds = credentials_from_env(site_id)
    if creds is not None:
        return creds

    try:
        sites = load_site_registry(registry_path)
    except FileNotFoundError:
        sites = {}

    creds = sites.get(site_id)
    if creds is None or not creds.is_configured:
        raise SiteNotConfiguredError(
            f"No credentials for site {site_id!r}. Set WP_{site_id.upper().replace('-', '_')}_API_URL, "
            f"_USERNAME and _APP_PASSWORD, or add it to the site registry."
        )
    return creds


# ---------------------------------------------------------------------------
# WordPressClient
# ---------------------------------------------------------------------------


class WordPressClient:
    """
    Async read-only WordPress REST API client for a single site.

    Parameters
    ----------
    credentials : SiteCredentials
        API URL and application password.
    timeout : float
        Per-request timeout in seconds.
    max_retries : int
        Retries on 429/5xx and network errors. The audit uses 0.
    """

    def __init__(
        self,
        credentials: SiteCredentials,
        timeout: float = config.REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
    ):
        self.credentials = credentials
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self._session: Optional[aiohttp.ClientSession] = None

    # -- Session management -------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            }
            if self.credentials.auth_header:
                headers["Authorization"] = self.credentials.auth_header

            connector = aiohttp.TCPConnector(limit=10, ttl_dns_cache=300)
            timeout_config = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                headers=headers,
                connector=connector,
                timeout=timeout_config,
            )
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # -- Core HTTP ----------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[int, Any, Dict[str, str]]:
        """
        Make an HTTP request, retrying transient failures with exponential
        backoff up to ``max_retries`` times.

        Returns
        -------
        tuple of (status_code, response_json_or_text, response_headers)
            Header names are lower-cased.

        Raises
        ------
        SiteNotConfiguredError
            If the credentials are incomplete.
        AuthenticationError
            On 401 or 403 responses.
        NotFoundError
            On 404 responses.
        RateLimitError
            On 429 after all retries exhausted.
        WordPressError
            On other non-2xx responses or network errors after retries.
        """
        if not self.credentials.is_configured:
            raise SiteNotConfiguredError(
                f"Site {self.credentials.label!r} has no credentials configured."
            )

        session = await self._get_session()
        label = self.credentials.label

        for attempt in range(self.max_retries + 1):
            try:
                logger.debug(
                    "API %s %s (attempt %d/%d) site=%s",
                    method.upper(),
                    url,
                    attempt + 1,
                    self.max_retries + 1,
                    label,
                )

                kwargs: Dict[str, Any] = {}
                if params is not None:
                    kwargs["params"] = {
                        k: v for k, v in params.items() if v is not None
                    }

                async with session.request(method, url, **kwargs) as resp:
                    status = resp.status
                    # Header names are case-insensitive; keep them lower-cased
                    resp_headers = {k.lower(): v for k, v in resp.headers.items()}

                    try:
                        body = await resp.json(content_type=None)
                    except (json.JSONDecodeError, ValueError):
                        body = await resp.text(errors="replace")

                    if status == 401 or status == 403:
                        raise AuthenticationError(
                            f"Authentication failed for {label}: HTTP {status}",
                            status_code=status,
                            response_body=str(body),
                        )

                    if status == 404:
                        raise NotFoundError(
                            f"Resource not found: {url}",
                            status_code=404,
                            response_body=str(body),
                        )

                    if status in RETRY_STATUS_CODES and attempt < self.max_retries:
                        delay = RETRY_BASE_DELAY * (2 ** attempt)
                        retry_after = resp_headers.get("retry-after")
                        if retry_after:
                            try:
                                delay = max(delay, float(retry_after))
                            except ValueError:
                                pass
                        logger.warning(
                            "Retryable error %d from %s, retrying in %.1fs",
                            status,
                            url,
                            delay,
                        )
                        await asyncio.sleep(delay)
                        continue

                    if status == 429:
                        raise RateLimitError(
                            f"Rate limited by {label} after {self.max_retries} retries",
                            status_code=429,
                            response_body=str(body),
                        )

                    if status >= 400:
                        error_msg = body
                        if isinstance(body, dict):
                            error_msg = body.get("message", str(body))
                        raise WordPressError(
                            f"HTTP {status} from {label}: {error_msg}",
                            status_code=status,
                            response_body=str(body),
                        )

                    return status, body, resp_headers

            except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                if attempt < self.max_retries:
                    delay = RETRY_BASE_DELAY * (2 ** attempt)
                    logger.warning(
                        "Network error on %s (%s), retrying in %.1fs: %s",
                        url,
                        type(exc).__name__,
                        delay,
                        str(exc),
                    )
                    await asyncio.sleep(delay)
                else:
                    raise WordPressError(
                        f"Network error after {self.max_retries} retries for {label}: {exc}"
                    ) from exc

        raise WordPressError(f"Request to {url} failed after {self.max_retries} retries")

    async def _get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> Tuple[Any, Dict[str, str]]:
        """GET a WP REST API v2 endpoint, returning (body, headers)."""
        url = f"{self.credentials.api_url}/{endpoint}"
        _, body, headers = await self._request("GET", url, params=params)
        return body, headers

    async def _get_paginated(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch every page of a collection endpoint.

        Stops at ``X-WP-TotalPages`` when the header is present, otherwise at
        the first short or empty page.
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            query = dict(params or {})
            query.update({"per_page": WP_MAX_PER_PAGE, "page": page})
            batch, headers = await self._get(endpoint, params=query)
            if not isinstance(batch, list) or not batch:
                break
            items.extend(batch)

            total_pages = _header_int(headers, "X-WP-TotalPages")
            if total_pages is not None:
                if page >= total_pages:
                    break
            elif len(batch) < WP_MAX_PER_PAGE:
                break
            page += 1

        logger.debug(
            "Fetched %d %s from %s", len(items), endpoint, self.credentials.label
        )
        return items

    # -----------------------------------------------------------------------
    # Connectivity
    # -----------------------------------------------------------------------

    async def test_connection(self) -> Dict[str, Any]:
        """
        Probe the REST API root (``/wp-json``).

        Never raises for API or network failures; reports them instead.

        Returns
        -------
        dict
            ``connected`` (bool), ``site_name``, ``site_url``,
            ``wp_version`` and ``error`` (str or None).
        """
        result: Dict[str, Any] = {
            "connected": False,
            "site_name": "",
            "site_url": "",
            "wp_version": "",
            "error": None,
        }
        try:
            _, info, _ = await self._request("GET", self.credentials.base_url)
        except WordPressError as exc:
            result["error"] = str(exc)
            logger.warning("Connection test failed for %s: %s", self.credentials.label, exc)
            return result

        if not isinstance(info, dict):
            result["error"] = "REST API root did not return a JSON object"
            return result

        result["connected"] = True
        result["site_name"] = str(info.get("name") or "")
        result["site_url"] = str(info.get("url") or info.get("home") or "")
        result["wp_version"] = str(info.get("wp_version") or "")
        return result

    # -----------------------------------------------------------------------
    # Collections
    # -----------------------------------------------------------------------

    async def get_settings(self) -> Dict[str, Any]:
        """Site settings (title, url, language, timezone_string, posts_per_page)."""
        body, _ = await self._get("settings")
        return body if isinstance(body, dict) else {}

    async def get_all_posts(self, status: str = "publish") -> List[Dict[str, Any]]:
        """All posts with the given status."""
        return await self._get_paginated("posts", params={"status": status})

    async def get_all_pages(self, status: str = "publish") -> List[Dict[str, Any]]:
        """All pages with the given status."""
        return await self._get_paginated("pages", params={"status": status})

    async def get_categories(self) -> List[Dict[str, Any]]:
        return await self._get_paginated("categories")

    async def get_tags(self) -> List[Dict[str, Any]]:
        return await self._get_paginated("tags")

    async def get_media(
        self, per_page: int = WP_MAX_PER_PAGE, page: int = 1
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        One page of the media library.

        Returns
        -------
        tuple of (media items, library total from ``X-WP-Total``)
        """
        body, headers = await self._get(
            "media", params={"per_page": min(per_page, WP_MAX_PER_PAGE), "page": page}
        )
        items = body if isinstance(body, list) else []
        total = _header_int(headers, "X-WP-Total")
        return items, total if total is not None else len(items)

    async def get_users(self) -> List[Dict[str, Any]]:
        body, _ = await self._get("users", params={"per_page": WP_MAX_PER_PAGE})
        return body if isinstance(body, list) else []

    async def get_plugins(self) -> List[Dict[str, Any]]:
        """Installed plugins (needs an administrator application password)."""
        body, _ = await self._get("plugins")
        return body if isinstance(body, list) else []

    async def get_themes(self) -> List[Dict[str, Any]]:
        body, _ = await self._get("themes")
        return body if isinstance(body, list) else []

    def __repr__(self) -> str:
        return f"WordPressClient({self.credentials!r})"


def _header_int(headers: Dict[str, str], name: str) -> Optional[int]:
    """Read an integer header from the lower-cased headers of ``_request``."""
    raw = headers.get(name.lower())
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None
