"""pagescout configuration.

Module-level constants for the fetch pipeline plus helpers that turn a
persisted settings record (or a YAML file) into a :class:`LookupSettings`.
Nothing here is mutable at runtime: callers resolve a ``LookupSettings``
once per request and pass it explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from pagescout.items import LookupSettings, ProviderId

# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123 Safari/537.36"
)
ACCEPT_HEADER = "text/html,application/xhtml+xml"

# Seconds; applies to the single GET issued per request
DEFAULT_TIMEOUT = 30

# ---------------------------------------------------------------------------
# SSRF guard
# ---------------------------------------------------------------------------
BLOCKED_HOSTS: frozenset[str] = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})
BLOCKED_SUFFIXES: tuple[str, ...] = (".local",)

# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------
MAX_EMAILS = 50

# ---------------------------------------------------------------------------
# Reverse image lookup
# ---------------------------------------------------------------------------
DEFAULT_LOOKUP_SETTINGS = LookupSettings()


def settings_from_record(record: Any) -> LookupSettings:
    """Build :class:`LookupSettings` from a persisted settings record.

    The record has the shape ``{"providers": {"google": true, ...},
    "language": "en", "country": "US", "safeSearch": "moderate"}``.  Missing
    or mistyped fields fall back to :data:`DEFAULT_LOOKUP_SETTINGS`; a
    non-mapping record yields the defaults outright.
    """
    if not isinstance(record, Mapping):
        return DEFAULT_LOOKUP_SETTINGS

    enabled = set(ProviderId)
    providers = record.get("providers")
    if isinstance(providers, Mapping):
        for provider_id in ProviderId:
            flag = providers.get(provider_id.value)
            if isinstance(flag, bool) and not flag:
                enabled.discard(provider_id)

    return LookupSettings(
        enabled_providers=frozenset(enabled),
        language=record.get("language"),
        country=record.get("country"),
        safe_search=record.get("safeSearch", record.get("safe_search")),
    )


def load_settings(path: str | Path) -> LookupSettings:
    """Load a settings record from a YAML (or JSON) file.

    The file may hold the record at the top level or under a
    ``reverse_image`` key.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if isinstance(data, dict) and isinstance(data.get("reverse_image"), dict):
        data = data["reverse_image"]
    return settings_from_record(data)
