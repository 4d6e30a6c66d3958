"""Reverse image search deep links.

A fixed table maps each :class:`~pagescout.items.ProviderId` to its display
name and a URL builder.  Building links is pure: no I/O and no shared state.

Usage::

    from pagescout.reverse_image import reverse_image_links

    result = reverse_image_links("https://x.test/a.jpg", safe="strict")
    for link in result.links:
        print(link.provider, link.url)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import NamedTuple
from urllib.parse import quote

from pagescout.extractors.urlnorm import NormalizedURL, normalize_url
from pagescout.items import (
    DEFAULT_COUNTRY,
    DEFAULT_LANGUAGE,
    LookupSettings,
    ProviderId,
    ProviderLink,
    ReverseImageResult,
    SafeSearch,
    normalize_locale,
    parse_safe_search,
)

# Characters encodeURIComponent leaves untouched besides [A-Za-z0-9_.-~]
_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    """Percent-encode *value* for use as a single query parameter value."""
    return quote(str(value), safe=_COMPONENT_SAFE)


def _bing_adult(safe: SafeSearch) -> str:
    if safe is SafeSearch.STRICT:
        return "strict"
    if safe is SafeSearch.OFF:
        return "off"
    return "moderate"


def _yandex_safe(safe: SafeSearch) -> int:
    if safe is SafeSearch.STRICT:
        return 2
    if safe is SafeSearch.OFF:
        return 0
    return 1


# ---------------------------------------------------------------------------
# URL builders
# ---------------------------------------------------------------------------

def _google_url(image_url: str, settings: LookupSettings) -> str:
    return (
        "https://lens.google.com/uploadbyurl"
        f"?url={encode_component(image_url)}"
        f"&hl={encode_component(settings.language)}"
    )


def _bing_url(image_url: str, settings: LookupSettings) -> str:
    return (
        "https://www.bing.com/images/search"
        f"?q=imgurl:{encode_component(image_url)}"
        "&view=detailv2&iss=sbi"
        f"&setlang={encode_component(settings.language)}"
        f"&cc={encode_component(settings.country)}"
        f"&adlt={encode_component(_bing_adult(settings.safe_search))}"
    )


def _yandex_url(image_url: str, settings: LookupSettings) -> str:
    return (
        "https://yandex.com/images/search?rpt=imageview"
        f"&url={encode_component(image_url)}"
        f"&lang={encode_component(settings.language)}"
        f"&safe={_yandex_safe(settings.safe_search)}"
    )


def _tineye_url(image_url: str, settings: LookupSettings) -> str:  # noqa: ARG001
    # TinEye has no locale or safe-search parameters
    return f"https://tineye.com/search?url={encode_component(image_url)}"


class ProviderSpec(NamedTuple):
    display_name: str
    description: str
    build: Callable[[str, LookupSettings], str]


PROVIDERS: dict[ProviderId, ProviderSpec] = {
    ProviderId.GOOGLE: ProviderSpec(
        "Google Lens",
        "Broadest results; great for products and landmarks.",
        _google_url,
    ),
    ProviderId.BING: ProviderSpec(
        "Bing Visual Search",
        "Strong for shopping matches and visually similar images.",
        _bing_url,
    ),
    ProviderId.YANDEX: ProviderSpec(
        "Yandex Images",
        "Often finds alternate sources and reposts.",
        _yandex_url,
    ),
    ProviderId.TINEYE: ProviderSpec(
        "TinEye",
        "Best for tracking where an image appeared over time.",
        _tineye_url,
    ),
}

CANONICAL_ORDER: tuple[ProviderId, ...] = tuple(ProviderId)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_providers(raw: str | Iterable[str] | None) -> list[ProviderId]:
    """Parse a provider preference list.

    Accepts a comma-separated string or an iterable of ids.  Unknown ids
    are ignored and duplicates collapse to their first position.  When
    nothing known remains, the canonical order is returned.
    """
    if raw is None:
        return list(CANONICAL_ORDER)
    items = raw.split(",") if isinstance(raw, str) else raw

    known = {p.value: p for p in ProviderId}
    ordered: list[ProviderId] = []
    for item in items:
        key = str(getattr(item, "value", item)).strip().lower()
        provider = known.get(key)
        if provider is not None and provider not in ordered:
            ordered.append(provider)
    return ordered or list(CANONICAL_ORDER)


def build_links(
    image_url: NormalizedURL | str,
    settings: LookupSettings | None = None,
    providers: str | Iterable[str] | None = None,
) -> list[ProviderLink]:
    """Build one deep link per enabled provider, in preference order.

    Args:
        image_url: The resource to look up.  Should already be normalized.
        settings:  Locale and safety options; defaults to
                   :class:`LookupSettings` defaults.
        providers: Preference order (see :func:`parse_providers`).

    Providers missing from ``settings.enabled_providers`` are skipped; an
    empty enabled set enables all of them.
    """
    settings = settings or LookupSettings()
    enabled = settings.active_providers()
    resource = str(image_url)

    links: list[ProviderLink] = []
    for provider_id in parse_providers(providers):
        if provider_id not in enabled:
            continue
        spec = PROVIDERS[provider_id]
        links.append(
            ProviderLink(
                provider_id=provider_id,
                provider=spec.display_name,
                url=spec.build(resource, settings),
            ),
        )
    return links


def reverse_image_links(
    image_url: str,
    providers: str | Iterable[str] | None = None,
    lang: str | None = None,
    country: str | None = None,
    safe: str | SafeSearch | None = None,
    settings: LookupSettings | None = None,
) -> ReverseImageResult:
    """Lenient entry point for reverse image lookups.

    Only the image URL is validated.  Locale values that are empty or longer
    than 12 characters fall back to ``en``/``US`` (or to *settings* when
    given).  *safe* defaults to the *settings* level (``moderate`` without
    settings), and unknown safe-search levels fall back to ``moderate``.

    Raises:
        InvalidURL: *image_url* cannot be normalized.
    """
    normalized = normalize_url(image_url)
    base = settings or LookupSettings()
    effective = LookupSettings(
        enabled_providers=base.enabled_providers,
        language=normalize_locale(lang, base.language or DEFAULT_LANGUAGE),
        country=normalize_locale(country, base.country or DEFAULT_COUNTRY),
        safe_search=parse_safe_search(safe) if safe is not None else base.safe_search,
    )
    return ReverseImageResult(
        image_url=str(normalized),
        links=build_links(normalized, effective, providers),
    )
