"""
Runtime configuration and package logging for the site audit.

Settings are read once from the environment at import time. Analyzer
thresholds live as constants at the top of each analyzer module.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("SITE_AUDIT_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("site_audit")
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(_handler)

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


# Upper bound for a single collection fetch (all pages of it), seconds
FETCH_TIMEOUT = _env_float("SITE_AUDIT_FETCH_TIMEOUT", 60.0)

# Per HTTP request timeout, seconds
REQUEST_TIMEOUT = _env_float("SITE_AUDIT_REQUEST_TIMEOUT", 30.0)

API_PORT = int(_env_float("SITE_AUDIT_API_PORT", 8766))

_registry_env = os.getenv("SITE_AUDIT_REGISTRY", "")
REGISTRY_PATH: Optional[Path] = Path(_registry_env) if _registry_env else None


def get_logger(name: str) -> logging.Logger:
    """Child logger of the package logger, e.g. ``site_audit.seo``."""
    return logger.getChild(name)
