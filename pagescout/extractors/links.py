"""Outbound link extraction."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from pagescout.extractors.urlnorm import resolve_url

logger = logging.getLogger(__name__)


def extract_links(
    html: str,
    base_url: str = "",
    soup: BeautifulSoup | None = None,
) -> list[dict]:
    """Extract every ``<a href>`` from *html* in document order.

    Each href is resolved against *base_url*; anchors whose href does not
    resolve to an absolute http(s) URL are dropped.  Duplicates are kept.
    Link text is the anchor's descendant text with whitespace collapsed.
    """
    if soup is None:
        try:
            soup = BeautifulSoup(html or "", "lxml")
        except Exception as exc:
            logger.debug("HTML parse failed for %s: %s", base_url, exc)
            return []

    links: list[dict] = []
    for a in soup.find_all("a", href=True):
        if not isinstance(a, Tag):
            continue
        raw_href = str(a.get("href") or "")
        href = resolve_url(base_url, raw_href)
        if href is None:
            logger.debug("Dropping unresolvable link %r on %s", raw_href, base_url)
            continue
        text = " ".join(a.get_text().split())
        links.append({"href": href, "text": text})

    return links
