"""Contact lookup links for an email address or a domain.

No network access: the result is a list of search deep links a user can
open to look for public traces of the address or domain.
"""

from __future__ import annotations

import re

from pagescout.errors import InvalidQuery, InvalidURL
from pagescout.extractors.urlnorm import normalize_url
from pagescout.items import EmailScanResult, ProfileLink
from pagescout.reverse_image import encode_component

_EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_query(query: str) -> str:
    """Lowercase an email-shaped *query*, otherwise reduce it to a hostname."""
    q = (query or "").strip()
    if not q:
        raise InvalidQuery("Missing q")
    if _EMAIL_SHAPE_RE.match(q):
        return q.lower()
    try:
        return normalize_url(q).hostname
    except InvalidURL:
        return q.lower()


def email_lookup(query: str) -> EmailScanResult:
    """Build contact lookup links for *query*.

    Raises:
        InvalidQuery: *query* is empty after trimming.
    """
    normalized = normalize_query(query)
    is_email = "@" in normalized
    domain = normalized.split("@", 1)[1] if is_email else normalized
    subject = normalized if is_email else domain

    exact = f'"{normalized}"' if is_email else f"site:{domain} contact email"
    profiles = [
        ProfileLink(
            label="Google (exact match)",
            url=f"https://www.google.com/search?q={encode_component(exact)}",
        ),
        ProfileLink(
            label="HaveIBeenPwned (manual check)",
            url="https://haveibeenpwned.com/",
        ),
        ProfileLink(
            label="Hunter.io (manual)",
            url=f"https://hunter.io/search/{encode_component(domain)}",
        ),
        ProfileLink(
            label="GitHub search",
            url=f"https://github.com/search?q={encode_component(subject)}&type=code",
        ),
        ProfileLink(
            label="LinkedIn (query)",
            url=(
                "https://www.google.com/search?q="
                f"{encode_component(f'{subject} site:linkedin.com')}"
            ),
        ),
    ]
    return EmailScanResult(
        input=query,
        normalized=normalized,
        is_email=is_email,
        possible_profiles=profiles,
    )
