"""pagescout.query - single-URL fetch and extraction API.

Lets any Python script fetch one page and get structured signals back
without a web framework.  Uses only the stdlib (``urllib``) for HTTP.

Basic usage::

    from pagescout.query import fetch

    page = fetch("example.com")
    print(page.title)
    print(page.description)
    for link in page.links:
        print(link.href, link.text)

    # With email harvesting
    page = crawl("https://example.com/contact")
    print(page.emails)

Low-level access::

    from pagescout.query import fetch_html, extract

    result = fetch_html("https://example.com/")
    page = extract(result.html, url=result.url)
"""

from __future__ import annotations

import gzip
import http.client
import logging
import urllib.error
import urllib.request
import zlib
from dataclasses import dataclass

from bs4 import BeautifulSoup

from pagescout.errors import FetchFailed, InvalidURL, UnsupportedContentType
from pagescout.extractors.emails import harvest_emails
from pagescout.extractors.links import extract_links
from pagescout.extractors.metadata import extract_metadata
from pagescout.extractors.urlnorm import NormalizedURL, normalize_url
from pagescout.guard import admit, check_host
from pagescout.items import CrawlResult, ExtractionResult, LinkRef
from pagescout.settings import ACCEPT_HEADER, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Body and provenance of one successful page fetch.

    ``url`` is the admitted URL and is the base for relative-link
    resolution; ``final_url`` is where redirects (if any) ended up.
    """

    html: str
    url: str
    final_url: str
    status: int = 200
    content_type: str = ""


# ---------------------------------------------------------------------------
# Low-level HTTP fetch
# ---------------------------------------------------------------------------

class _GuardedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Follow redirects only to targets that pass the SSRF guard."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        try:
            target = normalize_url(newurl)
        except InvalidURL as exc:
            raise FetchFailed(
                f"Redirect from {req.full_url} to invalid URL {newurl!r}",
                url=req.full_url,
                status=code,
            ) from exc
        check_host(target)
        logger.debug("Following %d redirect %s -> %s", code, req.full_url, target)
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def _decode_response_body(raw: bytes, headers: http.client.HTTPMessage | None, url: str) -> str:
    encoding = ""
    if headers is not None:
        encoding = str(headers.get("Content-Encoding", "")).lower().strip()

    try:
        if encoding == "gzip":
            raw = gzip.decompress(raw)
        elif encoding in ("deflate", "zlib"):
            raw = zlib.decompress(raw)
    except (OSError, zlib.error) as exc:
        raise FetchFailed(f"{encoding} decompression failed for {url}: {exc}", url=url) from exc
    if encoding == "br":
        raise FetchFailed(f"Unsupported Brotli-encoded response from {url}", url=url)

    charset = "utf-8"
    if headers is not None:
        charset = headers.get_content_charset("utf-8") or "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def fetch_html(
    url: NormalizedURL | str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
) -> FetchResult:
    """Fetch *url* with a single GET and return the decoded HTML.

    A plain string is normalized and guarded first; a
    :class:`NormalizedURL` is re-checked by the guard.  Either way no
    network access happens for a blocked host.  There are no retries.

    Args:
        url:        URL to fetch.
        timeout:    Socket timeout in seconds (default 30).
        user_agent: Override the default browser User-Agent string.

    Returns:
        :class:`FetchResult` with the body and the admitted URL.

    Raises:
        InvalidURL:             *url* is a string that cannot be normalized.
        BlockedHost:            the host (or a redirect target) is denylisted.
        FetchFailed:            transport failure or non-2xx status.
        UnsupportedContentType: the response is not ``text/html``.
    """
    target = check_host(url) if isinstance(url, NormalizedURL) else admit(url)
    page_url = str(target)

    req = urllib.request.Request(
        page_url,
        headers={
            "User-Agent": user_agent or DEFAULT_USER_AGENT,
            "Accept": ACCEPT_HEADER,
            "Accept-Encoding": "gzip, deflate",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        },
    )
    opener = urllib.request.build_opener(_GuardedRedirectHandler())

    try:
        with opener.open(req, timeout=timeout) as resp:
            status = int(getattr(resp, "status", 200) or 200)
            if not 200 <= status < 300:
                raise FetchFailed(
                    f"Fetch failed ({status}) for {page_url}", url=page_url, status=status,
                )
            content_type = str(resp.headers.get("Content-Type", "") or "")
            if "text/html" not in content_type.lower():
                raise UnsupportedContentType(
                    f"Unsupported content-type: {content_type}",
                    url=page_url,
                    content_type=content_type,
                )
            raw: bytes = resp.read()
            html = _decode_response_body(raw, resp.headers, page_url)
            final_url = resp.geturl() if hasattr(resp, "geturl") else page_url
    except urllib.error.HTTPError as exc:
        exc.close()
        raise FetchFailed(
            f"Fetch failed ({exc.code}) for {page_url}: {exc.reason}",
            url=page_url,
            status=exc.code,
        ) from exc
    except urllib.error.URLError as exc:
        raise FetchFailed(f"URL error fetching {page_url}: {exc.reason}", url=page_url) from exc
    except (OSError, http.client.HTTPException) as exc:
        raise FetchFailed(f"Network error fetching {page_url}: {exc}", url=page_url) from exc

    return FetchResult(
        html=html,
        url=page_url,
        final_url=str(final_url or page_url),
        status=status,
        content_type=content_type,
    )


# ---------------------------------------------------------------------------
# Extraction (pure HTML -> ExtractionResult, no network)
# ---------------------------------------------------------------------------

def extract(html: str, *, url: str = "") -> ExtractionResult:
    """Extract page signals from *html* without any network access.

    Malformed or truncated HTML never raises; missing elements come back
    as ``None`` and an unparseable document yields an empty result.

    Args:
        html: Raw HTML string of the page.
        url:  Page URL, the base for resolving relative links.
    """
    try:
        soup = BeautifulSoup(html or "", "lxml")
    except Exception as exc:
        logger.warning("HTML parse failed for %s: %s", url, exc)
        return ExtractionResult(url=url)

    meta = extract_metadata(html, page_url=url, soup=soup)
    links = extract_links(html, base_url=url, soup=soup)

    return ExtractionResult(
        url=url,
        title=meta["title"],
        description=meta["description"],
        canonical_url=meta["canonical_url"],
        og_image=meta["og_image"],
        links=[LinkRef(**link) for link in links],
    )


# ---------------------------------------------------------------------------
# Main public API
# ---------------------------------------------------------------------------

def fetch(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
) -> ExtractionResult:
    """Normalize, guard, fetch and extract one page.

    Example::

        from pagescout import fetch

        page = fetch("example.com")
        print(page.title, len(page.links))
        data = page.model_dump()
    """
    logger.info("fetch: %s", url)
    admitted = admit(url)
    result = fetch_html(admitted, timeout=timeout, user_agent=user_agent)
    return extract(result.html, url=result.url)


def crawl(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
) -> CrawlResult:
    """Like :func:`fetch`, plus email addresses harvested from the raw HTML."""
    logger.info("crawl: %s", url)
    admitted = admit(url)
    result = fetch_html(admitted, timeout=timeout, user_agent=user_agent)
    page = extract(result.html, url=result.url)
    return CrawlResult(**page.model_dump(), emails=harvest_emails(result.html))


# ---------------------------------------------------------------------------
# Batch API
# ---------------------------------------------------------------------------

def fetch_batch(
    urls: list[str],
    *,
    max_workers: int = 8,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
    on_error: str = "skip",
    harvest: bool = False,
) -> list[ExtractionResult | None]:
    """Fetch several independent URLs concurrently.

    Each URL goes through the full single-page pipeline on its own worker
    thread; nothing is shared between them.  Results keep the order of
    *urls*.

    Args:
        urls:        URLs to fetch.
        max_workers: Maximum number of concurrent fetch threads (default 8).
        on_error:    ``"skip"`` (default) omits failed URLs; ``"raise"``
                     re-raises the first failure; ``"include"`` puts ``None``
                     in the slot of each failed URL.
        harvest:     Use :func:`crawl` instead of :func:`fetch`.

    Raises:
        ValueError: For unknown *on_error* values.
    """
    from concurrent.futures import ThreadPoolExecutor, as_completed

    if on_error not in ("skip", "raise", "include"):
        raise ValueError(f"on_error must be 'skip', 'raise', or 'include'; got {on_error!r}")

    run = crawl if harvest else fetch
    results: list[ExtractionResult | None] = [None] * len(urls)

    def _fetch_one(idx: int, url: str) -> tuple[int, ExtractionResult | None]:
        try:
            return idx, run(url, timeout=timeout, user_agent=user_agent)
        except Exception as exc:
            if on_error == "raise":
                raise
            logger.warning("fetch_batch: failed to fetch %s: %s", url, exc)
            return idx, None

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_fetch_one, i, url): i
            for i, url in enumerate(urls)
        }
        for future in as_completed(futures):
            idx, page = future.result()
            results[idx] = page

    if on_error == "include":
        return results
    return [r for r in results if r is not None]
