"""Best-effort email address harvesting from raw page text.

This is a lexical scan, not an RFC 5322 parser: exotic but valid addresses
are missed and address-shaped strings (``sprite@2x.png``) can match.
"""

from __future__ import annotations

import re

from pagescout.settings import MAX_EMAILS

# re.ASCII keeps IGNORECASE from matching non-ASCII letters such as the
# Kelvin sign against [A-Z].
_EMAIL_RE = re.compile(
    r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}",
    re.IGNORECASE | re.ASCII,
)


def harvest_emails(text: str, limit: int = MAX_EMAILS) -> list[str]:
    """Return lowercase email addresses in *text*, first-seen order, at most *limit*."""
    seen: set[str] = set()
    emails: list[str] = []
    for match in _EMAIL_RE.finditer(text or ""):
        email = match.group(0).lower()
        if email in seen:
            continue
        seen.add(email)
        emails.append(email)
        if len(emails) >= limit:
            break
    return emails
