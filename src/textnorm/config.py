"""Configuration for textnorm (env-overridable)."""

from __future__ import annotations

import os
from pathlib import Path


def _env_path(key: str, default: Path) -> Path:
    return Path(os.getenv(key, str(default))).expanduser()


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(key: str, default: str | None) -> str | None:
    raw = os.getenv(key)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw or raw.lower() == "none":
        return None
    return raw


PROJECT_ROOT = Path(__file__).resolve().parents[2]

MAX_DOC_BYTES = _env_int("TEXTNORM_MAX_DOC_BYTES", 30_000_000)
MAX_PDF_PAGES = _env_int("TEXTNORM_MAX_PDF_PAGES", 200)

# Document search preset; see textnorm.options.search_options.
SEARCH_UNIFY_NBSP = _env_bool("TEXTNORM_UNIFY_NBSP", True)
SEARCH_REMOVE_SOFT_HYPHEN = _env_bool("TEXTNORM_REMOVE_SOFT_HYPHEN", True)
SEARCH_REMOVE_ZERO_WIDTH = _env_bool("TEXTNORM_REMOVE_ZERO_WIDTH", True)
SEARCH_NORMALIZE_QUOTES = _env_bool("TEXTNORM_NORMALIZE_QUOTES", True)
SEARCH_CASE_INSENSITIVE = _env_bool("TEXTNORM_CASE_INSENSITIVE", False)
SEARCH_NORMALIZE_WHITESPACE = _env_bool("TEXTNORM_NORMALIZE_WHITESPACE", True)
SEARCH_PRESERVE_JOINERS = _env_bool("TEXTNORM_PRESERVE_JOINERS", False)
SEARCH_UNICODE_FORM = _env_str("TEXTNORM_UNICODE_FORM", "NFC")

EVAL_REPORT_PATH = _env_path(
    "TEXTNORM_EVAL_REPORT", PROJECT_ROOT / "eval" / "reports" / "latest.json"
)

LOG_LEVEL = (os.getenv("TEXTNORM_LOG_LEVEL") or "INFO").strip().upper()
