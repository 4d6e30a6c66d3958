"""pagescout - fetch one web page safely and extract its structured signals.

Quick single-URL usage::

    from pagescout import fetch

    page = fetch("example.com")
    print(page.title)
    print(page.canonical_url)
    print([link.href for link in page.links])

Email harvesting::

    from pagescout import crawl

    page = crawl("https://example.com/contact")
    print(page.emails)

Reverse image lookup links (no network)::

    from pagescout import reverse_image_links

    result = reverse_image_links("https://x.test/a.jpg", safe="strict")
    for link in result.links:
        print(link.provider, link.url)
"""

from pagescout.email_scan import email_lookup
from pagescout.errors import (
    BlockedHost,
    FetchFailed,
    InvalidQuery,
    InvalidURL,
    PageScoutError,
    UnsupportedContentType,
)
from pagescout.guard import admit
from pagescout.items import CrawlResult, ExtractionResult, LookupSettings
from pagescout.query import crawl, extract, fetch, fetch_batch, fetch_html
from pagescout.reverse_image import build_links, reverse_image_links

__version__ = "0.1.0"
__all__ = [
    "BlockedHost",
    "CrawlResult",
    "ExtractionResult",
    "FetchFailed",
    "InvalidQuery",
    "InvalidURL",
    "LookupSettings",
    "PageScoutError",
    "UnsupportedContentType",
    "admit",
    "build_links",
    "crawl",
    "email_lookup",
    "extract",
    "fetch",
    "fetch_batch",
    "fetch_html",
    "reverse_image_links",
]
