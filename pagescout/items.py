"""Pydantic schemas for extraction results and reverse-image lookups."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Page extraction
# ---------------------------------------------------------------------------

class LinkRef(BaseModel):
    href: str
    text: str = ""


class ExtractionResult(BaseModel):
    """Structured signals extracted from one fetched HTML page."""

    url: str
    title: str | None = None
    description: str | None = None
    canonical_url: str | None = None
    og_image: str | None = None
    links: list[LinkRef] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class CrawlResult(ExtractionResult):
    """An :class:`ExtractionResult` plus email addresses found in the raw HTML."""

    emails: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Reverse image lookup
# ---------------------------------------------------------------------------

class ProviderId(str, Enum):
    # Declaration order is the canonical provider order
    GOOGLE = "google"
    BING = "bing"
    YANDEX = "yandex"
    TINEYE = "tineye"


class SafeSearch(str, Enum):
    OFF = "off"
    MODERATE = "moderate"
    STRICT = "strict"


DEFAULT_LANGUAGE = "en"
DEFAULT_COUNTRY = "US"
MAX_LOCALE_LENGTH = 12


def normalize_locale(raw: Any, fallback: str) -> str:
    """Return trimmed *raw*, or *fallback* when it is empty, too long or not a str."""
    if not isinstance(raw, str):
        return fallback
    value = raw.strip()
    if not value or len(value) > MAX_LOCALE_LENGTH:
        return fallback
    return value


def parse_safe_search(raw: Any) -> SafeSearch:
    """Map *raw* onto :class:`SafeSearch`; unknown values become ``moderate``."""
    if isinstance(raw, SafeSearch):
        return raw
    try:
        return SafeSearch(str(raw).strip().lower())
    except ValueError:
        return SafeSearch.MODERATE


class LookupSettings(BaseModel):
    """Locale and safety options for reverse image links.

    Invalid values are replaced by defaults instead of failing validation.
    An empty ``enabled_providers`` set means every provider is enabled.
    """

    model_config = {"frozen": True}

    enabled_providers: frozenset[ProviderId] = frozenset(ProviderId)
    language: str = DEFAULT_LANGUAGE
    country: str = DEFAULT_COUNTRY
    safe_search: SafeSearch = SafeSearch.MODERATE

    @field_validator("enabled_providers", mode="before")
    @classmethod
    def known_providers(cls, v: Any) -> Any:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        known = {p.value for p in ProviderId}
        return frozenset(
            ProviderId(str(getattr(p, "value", p)).strip().lower())
            for p in v
            if str(getattr(p, "value", p)).strip().lower() in known
        )

    @field_validator("language", mode="before")
    @classmethod
    def clean_language(cls, v: Any) -> str:
        return normalize_locale(v, DEFAULT_LANGUAGE)

    @field_validator("country", mode="before")
    @classmethod
    def clean_country(cls, v: Any) -> str:
        return normalize_locale(v, DEFAULT_COUNTRY)

    @field_validator("safe_search", mode="before")
    @classmethod
    def clean_safe_search(cls, v: Any) -> SafeSearch:
        return parse_safe_search(v)

    def active_providers(self) -> frozenset[ProviderId]:
        return self.enabled_providers or frozenset(ProviderId)


class ProviderLink(BaseModel):
    provider_id: ProviderId
    provider: str
    url: str


class ReverseImageResult(BaseModel):
    image_url: str
    links: list[ProviderLink] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Contact lookup
# ---------------------------------------------------------------------------

class ProfileLink(BaseModel):
    label: str
    url: str


class EmailScanResult(BaseModel):
    input: str
    normalized: str
    is_email: bool = False
    possible_profiles: list[ProfileLink] = Field(default_factory=list)
