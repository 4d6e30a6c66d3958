"""Extraction sub-package: URL handling and deterministic HTML extraction."""

from .emails import harvest_emails
from .links import extract_links
from .metadata import extract_metadata
from .urlnorm import NormalizedURL, normalize_url, resolve_url

__all__ = [
    "NormalizedURL",
    "extract_links",
    "extract_metadata",
    "harvest_emails",
    "normalize_url",
    "resolve_url",
]
