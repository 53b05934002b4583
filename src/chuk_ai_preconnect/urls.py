# chuk_ai_preconnect/urls.py
"""URL helpers shared by scoring and preloading."""

from __future__ import annotations

from urllib.parse import urlparse


def hostname(url: str | None) -> str | None:
    """Hostname of an absolute URL, or None when it cannot be parsed."""
    if not url:
        return None
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host or None


def path_segments(url: str) -> list[str]:
    """Non-empty path segments of a URL."""
    return [part for part in urlparse(url).path.split("/") if part]


def extract_domain(url: str) -> str:
    """Hostname of ``url`` or ``"unknown"``."""
    return hostname(url) or "unknown"
