"""Deterministic page metadata extraction from HTML.

Priority chains:
    title        <- first <title>
    description  <- <meta name="description"> -> <meta property="og:description">
    canonical    <- <link rel="canonical">
    og_image     <- <meta property="og:image">
"""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup, Tag

from pagescout.extractors.urlnorm import resolve_url

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str | None:
    """Return the trimmed ``content`` of the first matching, non-empty <meta>."""
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        if _safe_str(tag.get(attr)).strip().lower() != value:
            continue
        content = _safe_str(tag.get("content")).strip()
        if content:
            return content
    return None


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

def _extract_title(soup: BeautifulSoup) -> str | None:
    title_tag = soup.find("title")
    if not title_tag:
        return None
    return title_tag.get_text().strip() or None


def _extract_description(soup: BeautifulSoup) -> str | None:
    return (
        _meta_content(soup, "name", "description")
        or _meta_content(soup, "property", "og:description")
    )


def _extract_canonical(soup: BeautifulSoup, page_url: str) -> str | None:
    # rel is a multi-valued list in BS4
    for link in soup.find_all("link"):
        if not isinstance(link, Tag):
            continue
        rel_val = link.get("rel")
        rels = rel_val if isinstance(rel_val, list) else _safe_str(rel_val).split()
        if "canonical" in (r.lower() for r in rels):
            href = _safe_str(link.get("href")).strip()
            return resolve_url(page_url, href) if href else None
    return None


def _extract_og_image(soup: BeautifulSoup, page_url: str) -> str | None:
    content = _meta_content(soup, "property", "og:image")
    return resolve_url(page_url, content) if content else None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_metadata(
    html: str,
    page_url: str = "",
    soup: BeautifulSoup | None = None,
) -> dict:
    """Extract title, description, canonical URL and preview image from *html*.

    Args:
        html:     Raw HTML string.
        page_url: Page URL used to resolve relative canonical/image URLs.
        soup:     Pre-parsed BeautifulSoup object.  When provided the HTML is
                  not re-parsed.

    Returns a dict with keys ``title``, ``description``, ``canonical_url`` and
    ``og_image``; each is ``None`` when the page does not provide it.
    """
    if soup is None:
        try:
            soup = BeautifulSoup(html or "", "lxml")
        except Exception as exc:
            logger.debug("HTML parse failed for %s: %s", page_url, exc)
            return _empty_metadata()

    return {
        "title": _extract_title(soup),
        "description": _extract_description(soup),
        "canonical_url": _extract_canonical(soup, page_url),
        "og_image": _extract_og_image(soup, page_url),
    }


def _empty_metadata() -> dict:
    return {
        "title": None,
        "description": None,
        "canonical_url": None,
        "og_image": None,
    }
