"""SSRF admission guard.

A literal-hostname denylist checked against the canonical host produced by
:func:`~pagescout.extractors.urlnorm.normalize_url`, so aliases such as
``127.1``, ``2130706433`` or a fullwidth ``localhost`` are caught.  No DNS
resolution is performed, so private IP literals outside the list
(``10.0.0.1``, ``169.254.169.254``) and hostnames that resolve to internal
addresses are admitted.
"""

from __future__ import annotations

import logging

from pagescout.errors import BlockedHost
from pagescout.extractors.urlnorm import NormalizedURL, normalize_url
from pagescout.settings import BLOCKED_HOSTS, BLOCKED_SUFFIXES

logger = logging.getLogger(__name__)


def is_blocked_host(hostname: str) -> bool:
    """Return True if *hostname* is on the denylist (case-insensitive)."""
    host = (hostname or "").strip().lower()
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host in BLOCKED_HOSTS or host.endswith(BLOCKED_SUFFIXES)


def check_host(url: NormalizedURL) -> NormalizedURL:
    """Return *url* unchanged, or raise :class:`BlockedHost`."""
    if is_blocked_host(url.hostname):
        logger.warning("Blocked host %r for %s", url.hostname, url)
        raise BlockedHost(
            f"Blocked host: {url.hostname}", url=str(url), hostname=url.hostname,
        )
    return url


def admit(raw: str) -> NormalizedURL:
    """Normalize free-text *raw* and run it through the guard.

    Raises:
        InvalidURL:  the input cannot be normalized.
        BlockedHost: the normalized host is on the denylist.
    """
    return check_host(normalize_url(raw))
