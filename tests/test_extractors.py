"""Unit tests for extraction modules."""

from __future__ import annotations

import pytest

from pagescout.items import ExtractionResult
from pagescout.query import extract

PAGE_URL = "https://example.com/blog/post"


# ---------------------------------------------------------------------------
# Metadata extraction
# ---------------------------------------------------------------------------

class TestMetadataExtraction:
    def test_title_trimmed(self, page_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(page_html, PAGE_URL)
        assert meta["title"] == "Example Domain"

    def test_description_prefers_meta_name(self, page_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(page_html, PAGE_URL)
        assert meta["description"] == "An example page for extraction tests."

    def test_description_falls_back_to_og(self, og_only_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(og_only_html, PAGE_URL)
        assert meta["description"] == "Shared on social"

    def test_canonical_resolved(self, page_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(page_html, PAGE_URL)
        assert meta["canonical_url"] == "https://example.com/blog/example"

    def test_og_image_resolved(self, page_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(page_html, PAGE_URL)
        assert meta["og_image"] == "https://example.com/img/preview.png"

    def test_absolute_og_image_kept(self, og_only_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(og_only_html, PAGE_URL)
        assert meta["og_image"] == "https://cdn.example.net/card.jpg"

    def test_missing_fields_are_none(self, og_only_html):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata(og_only_html, PAGE_URL)
        assert meta["title"] is None
        assert meta["canonical_url"] is None

    def test_empty_title_is_none(self):
        from pagescout.extractors.metadata import extract_metadata

        meta = extract_metadata("<html><head><title>   </title></head></html>", PAGE_URL)
        assert meta["title"] is None

    def test_first_title_wins(self):
        from pagescout.extractors.metadata import extract_metadata

        html = "<html><head><title>First</title><title>Second</title></head></html>"
        assert extract_metadata(html, PAGE_URL)["title"] == "First"

    def test_unresolvable_canonical_is_none(self):
        from pagescout.extractors.metadata import extract_metadata

        html = '<html><head><link rel="canonical" href="javascript:void(0)"></head></html>'
        assert extract_metadata(html, PAGE_URL)["canonical_url"] is None

    def test_canonical_among_multiple_rel_values(self):
        from pagescout.extractors.metadata import extract_metadata

        html = '<html><head><link rel="alternate canonical" href="https://x.test/c"></head></html>'
        assert extract_metadata(html, PAGE_URL)["canonical_url"] == "https://x.test/c"


# ---------------------------------------------------------------------------
# Link extraction
# ---------------------------------------------------------------------------

class TestLinkExtraction:
    def test_links_in_document_order(self, page_html):
        from pagescout.extractors.links import extract_links

        links = extract_links(page_html, base_url=PAGE_URL)
        assert [link["href"] for link in links] == [
            "https://example.com/about",
            "https://other.test/page?x=1",
            "https://example.com/blog/post#top",
            "https://example.com/about",
            "https://example.com/blog/contact.html",
        ]

    def test_duplicates_preserved(self, page_html):
        from pagescout.extractors.links import extract_links

        hrefs = [link["href"] for link in extract_links(page_html, base_url=PAGE_URL)]
        assert hrefs.count("https://example.com/about") == 2

    def test_text_whitespace_collapsed(self, page_html):
        from pagescout.extractors.links import extract_links

        texts = [link["text"] for link in extract_links(page_html, base_url=PAGE_URL)]
        assert texts == ["About us", "Other site", "Top", "About again", "Contact page"]

    def test_unresolvable_hrefs_dropped(self, page_html):
        from pagescout.extractors.links import extract_links

        hrefs = [link["href"] for link in extract_links(page_html, base_url=PAGE_URL)]
        assert not any(h.startswith(("javascript:", "mailto:")) for h in hrefs)
        assert not any("broken" in h for h in hrefs)

    def test_anchor_without_href_ignored(self):
        from pagescout.extractors.links import extract_links

        assert extract_links('<a name="x">x</a>', base_url=PAGE_URL) == []

    def test_empty_text_allowed(self):
        from pagescout.extractors.links import extract_links

        links = extract_links('<a href="/img"><img src="a.png"></a>', base_url=PAGE_URL)
        assert links == [{"href": "https://example.com/img", "text": ""}]


# ---------------------------------------------------------------------------
# Email harvesting
# ---------------------------------------------------------------------------

class TestEmailHarvest:
    def test_dedup_and_order(self):
        from pagescout.extractors.emails import harvest_emails

        text = "A@b.com then a@b.com, c@d.org and again a@b.com"
        assert harvest_emails(text) == ["a@b.com", "c@d.org"]

    def test_lowercased(self):
        from pagescout.extractors.emails import harvest_emails

        assert harvest_emails("Write to John.Doe+News@Example.CO.UK") == [
            "john.doe+news@example.co.uk",
        ]

    def test_capped_at_fifty(self):
        from pagescout.extractors.emails import harvest_emails

        text = " ".join(f"user{i}@example.com" for i in range(80))
        emails = harvest_emails(text)
        assert len(emails) == 50
        assert emails[0] == "user0@example.com"
        assert emails[-1] == "user49@example.com"

    def test_custom_limit(self):
        from pagescout.extractors.emails import harvest_emails

        assert harvest_emails("a@b.com c@d.com e@f.com", limit=2) == ["a@b.com", "c@d.com"]

    def test_requires_alpha_tld(self):
        from pagescout.extractors.emails import harvest_emails

        assert harvest_emails("user@host.1 or user@host.c") == []

    def test_scans_raw_html(self, page_html):
        from pagescout.extractors.emails import harvest_emails

        assert harvest_emails(page_html) == [
            "sales@example.com",
            "info@example.com",
            "support@example.org",
        ]

    def test_non_ascii_letters_not_matched(self):
        from pagescout.extractors.emails import harvest_emails

        # U+212A KELVIN SIGN folds to "k" under a Unicode IGNORECASE match
        assert harvest_emails("user@example.\u212a\u212a") == []

    def test_empty_input(self):
        from pagescout.extractors.emails import harvest_emails

        assert harvest_emails("") == []


# ---------------------------------------------------------------------------
# extract() - pure HTML -> ExtractionResult
# ---------------------------------------------------------------------------

class TestExtract:
    def test_returns_extraction_result(self, page_html):
        result = extract(page_html, url=PAGE_URL)
        assert isinstance(result, ExtractionResult)
        assert result.url == PAGE_URL

    def test_all_fields(self, page_html):
        result = extract(page_html, url=PAGE_URL)
        assert result.title == "Example Domain"
        assert result.description == "An example page for extraction tests."
        assert result.canonical_url == "https://example.com/blog/example"
        assert result.og_image == "https://example.com/img/preview.png"
        assert len(result.links) == 5
        assert result.links[0].href == "https://example.com/about"
        assert result.links[0].text == "About us"

    def test_model_dump(self, page_html):
        data = extract(page_html, url=PAGE_URL).model_dump()
        assert set(data) == {"url", "title", "description", "canonical_url", "og_image", "links"}
        assert data["links"][1] == {"href": "https://other.test/page?x=1", "text": "Other site"}

    def test_truncated_html(self, truncated_html):
        result = extract(truncated_html, url=PAGE_URL)
        assert result.title == "Half a page"
        assert all(link.href.startswith("https://example.com/") for link in result.links)

    @pytest.mark.parametrize(
        "html",
        [
            "",
            "   ",
            "<",
            "<<<>>>",
            "<html><head><title>",
            "<a href=",
            '<a href="/x"><b><i>unclosed',
            "<meta property='og:image' content=''>",
            "<link rel=canonical>",
            "\x00\x01 binary-ish \xff",
            "<html>" * 500,
            "plain text, no markup at all",
        ],
    )
    def test_malformed_html_never_raises(self, html):
        result = extract(html, url=PAGE_URL)
        assert isinstance(result, ExtractionResult)
        assert result.canonical_url is None
        assert result.og_image is None

    def test_empty_document_yields_nulls(self):
        result = extract("<html><body></body></html>", url=PAGE_URL)
        assert result.title is None
        assert result.description is None
        assert result.links == []

    def test_no_base_url_keeps_only_absolute_links(self):
        html = '<a href="/relative">r</a><a href="https://abs.test/">a</a>'
        result = extract(html)
        assert [link.href for link in result.links] == ["https://abs.test/"]
