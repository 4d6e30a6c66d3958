"""Error taxonomy shared by the fetch pipeline and link builders.

Every error is terminal for the current request.  The hosting layer maps
each category to its own status via :attr:`PageScoutError.http_status`.
"""

from __future__ import annotations

from typing import Any


class PageScoutError(Exception):
    """Base class for all pagescout failures."""

    category = "error"
    http_status = 500

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url

    def to_dict(self) -> dict[str, Any]:
        return {"message": str(self), "category": self.category}


class InvalidURL(PageScoutError, ValueError):
    """Input is empty, unparseable, or uses a scheme other than http/https."""

    category = "invalid_url"
    http_status = 400


class InvalidQuery(PageScoutError, ValueError):
    """A lookup query was empty after trimming."""

    category = "invalid_query"
    http_status = 400


class BlockedHost(PageScoutError):
    """The URL's host is on the SSRF denylist."""

    category = "blocked_host"
    http_status = 400

    def __init__(self, message: str, url: str = "", hostname: str = "") -> None:
        super().__init__(message, url=url)
        self.hostname = hostname


class FetchFailed(PageScoutError):
    """Raised when a page cannot be retrieved.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    category = "fetch_failed"
    http_status = 502

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message, url=url)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.status:
            data["status"] = self.status
        return data


class UnsupportedContentType(PageScoutError):
    """The response was not an HTML document."""

    category = "unsupported_content_type"
    http_status = 415

    def __init__(self, message: str, url: str = "", content_type: str = "") -> None:
        super().__init__(message, url=url)
        self.content_type = content_type
