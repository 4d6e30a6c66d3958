"""URL normalization and relative-link resolution."""

from __future__ import annotations

import ipaddress
import re
import unicodedata
from dataclasses import dataclass
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from pagescout.errors import InvalidURL

ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})

# Tab and newline characters are removed from hrefs before resolution, the
# way browsers do.
_STRIP_CHARS_RE = re.compile(r"[\t\n\r]")
_WHITESPACE_RE = re.compile(r"\s")

_DECIMAL_RE = re.compile(r"[0-9]+")
_OCTAL_RE = re.compile(r"[0-7]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class NormalizedURL:
    """An absolute http(s) URL that has passed :func:`normalize_url`."""

    url: str
    scheme: str
    hostname: str
    port: int | None
    path: str
    query: str

    def __str__(self) -> str:
        return self.url


def _parse_ipv4_number(part: str) -> int | None:
    """Parse one dotted part as decimal, ``0x`` hex or leading-zero octal."""
    if not part:
        return None
    if part[:2].lower() == "0x":
        digits = part[2:]
        if not digits:
            return 0
        return int(digits, 16) if _HEX_RE.fullmatch(digits) else None
    if len(part) > 1 and part.startswith("0"):
        digits = part[1:]
        return int(digits, 8) if _OCTAL_RE.fullmatch(digits) else None
    return int(part) if _DECIMAL_RE.fullmatch(part) else None


def _ends_in_number(labels: list[str]) -> bool:
    last = labels[-1]
    return bool(_DECIMAL_RE.fullmatch(last)) or _parse_ipv4_number(last) is not None


def _canonical_ipv4(labels: list[str], raw: str) -> str:
    """Collapse numeric host forms (``127.1``, ``0x7f.0.0.1``, ``2130706433``)
    into a dotted quad.
    """
    if len(labels) > 4:
        raise InvalidURL(f"Invalid url: bad IPv4 host {raw!r}", url=raw)
    numbers = [_parse_ipv4_number(label) for label in labels]
    if any(n is None for n in numbers):
        raise InvalidURL(f"Invalid url: bad IPv4 host {raw!r}", url=raw)
    if any(n > 255 for n in numbers[:-1]) or numbers[-1] >= 256 ** (5 - len(numbers)):
        raise InvalidURL(f"Invalid url: IPv4 host out of range {raw!r}", url=raw)

    value = numbers[-1]
    for index, number in enumerate(numbers[:-1]):
        value += number * 256 ** (3 - index)
    return str(ipaddress.IPv4Address(value))


def _canonical_host(hostname: str, raw: str) -> str:
    """Return the form of *hostname* a resolver would actually connect to.

    IPv6 literals are compressed, other hosts are NFKC-folded, IDNA-encoded
    and stripped of one trailing dot, and numeric IPv4 spellings become a
    dotted quad.  This is the value the SSRF guard compares.

    Raises:
        InvalidURL: the host cannot be encoded or is a malformed IPv4 number.
    """
    if ":" in hostname:
        try:
            return ipaddress.IPv6Address(hostname).compressed
        except ValueError as exc:
            raise InvalidURL(f"Invalid url: bad IPv6 host {raw!r}", url=raw) from exc

    host = unicodedata.normalize("NFKC", hostname).lower()
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise InvalidURL(f"Invalid url: bad hostname {raw!r}", url=raw) from exc
    if host.endswith(".") and len(host) > 1:
        host = host[:-1]
    if not host or host.startswith("."):
        raise InvalidURL(f"Invalid url: bad hostname {raw!r}", url=raw)

    labels = host.split(".")
    if _ends_in_number(labels):
        return _canonical_ipv4(labels, raw)
    return host


def _remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments in an absolute path."""
    segments = path.split("/")
    if "." not in segments and ".." not in segments:
        return path
    resolved: list[str] = []
    for segment in segments:
        if segment == "..":
            if len(resolved) > 1:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/".join(resolved)


def _split_absolute(candidate: str) -> SplitResult | None:
    """Split *candidate* and return it only if it is a usable absolute URL."""
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates it (non-numeric or out of range raises)
        parts.port  # noqa: B018
    except ValueError:
        return None
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return None
    if not parts.hostname or _WHITESPACE_RE.search(parts.netloc):
        return None
    return parts


def normalize_url(raw: str) -> NormalizedURL:
    """Turn free-text input into a :class:`NormalizedURL`.

    Input containing ``://`` is parsed as-is; anything else is treated as a
    bare host (``example.com/path``) and prefixed with ``https://``.  Scheme
    and host are lowercased, the host is canonicalized (IDNA, numeric IPv4
    forms, trailing dot), dot segments are removed from the path and an
    empty path becomes ``/``.

    Raises:
        InvalidURL: empty input, unparseable URL, or a scheme other than
            ``http``/``https``.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        raise InvalidURL("Invalid url: empty input")

    candidate = trimmed if "://" in trimmed else f"https://{trimmed}"
    try:
        scheme = urlsplit(candidate).scheme.lower()
    except ValueError as exc:
        raise InvalidURL(f"Invalid url: {exc}", url=trimmed) from exc
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidURL(f"Invalid url: unsupported scheme {scheme!r}", url=trimmed)

    parts = _split_absolute(candidate)
    if parts is None:
        raise InvalidURL(f"Invalid url: {trimmed!r}", url=trimmed)

    hostname = _canonical_host(parts.hostname, trimmed)
    port = parts.port
    # Userinfo keeps its case; the host part is rebuilt from the canonical form
    userinfo, at, _ = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}[{hostname}]" if ":" in hostname else f"{userinfo}{at}{hostname}"
    if port is not None:
        netloc = f"{netloc}:{port}"
    path = _remove_dot_segments(parts.path or "/")

    url = urlunsplit((scheme, netloc, path, parts.query, parts.fragment))
    return NormalizedURL(
        url=url,
        scheme=scheme,
        hostname=hostname,
        port=port,
        path=path,
        query=parts.query,
    )


def resolve_url(base: str, href: str) -> str | None:
    """Resolve *href* against *base*.

    Returns ``None`` when the result is not a valid absolute http(s) URL.
    Dot segments are removed, so an already-absolute, already-clean *href*
    resolves to itself whatever the base.
    """
    cleaned = _STRIP_CHARS_RE.sub("", href or "").strip()
    if not cleaned:
        return None
    try:
        joined = urljoin(base, cleaned) if base else cleaned
    except ValueError:
        return None
    parts = _split_absolute(joined)
    if parts is None:
        return None
    # urljoin leaves dot segments alone when href is itself absolute
    path = _remove_dot_segments(parts.path)
    if path != parts.path:
        joined = urlunsplit(parts._replace(path=path))
    return joined


def extract_domain(url: str) -> str:
    """Return the netloc (host) component of a URL, lowercased."""
    try:
        return urlsplit(url).netloc.lower()
    except ValueError:
        return ""
