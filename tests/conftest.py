"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PAGE_URL = "https://example.com/blog/post"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def page_html() -> str:
    return _read_fixture("page.html")


@pytest.fixture
def og_only_html() -> str:
    return _read_fixture("og_only.html")


@pytest.fixture
def truncated_html() -> str:
    return _read_fixture("truncated.html")
