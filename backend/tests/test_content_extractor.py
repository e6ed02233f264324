"""Tests for :mod:`siteforge.services.content_extractor`."""

from __future__ import annotations

import time

from siteforge.services.content_extractor import (
    DEFAULT_TITLE,
    MAX_IMAGES,
    extract_business_info,
    extract_description_from_content,
    extract_images,
    extract_links,
    extract_title_from_content,
)


def test_extract_business_info_takes_first_match_of_each_kind() -> None:
    text = (
        "Call us at (555) 123-4567 or email hello@acme.com.\n"
        "Visit 123 Main Street, Springfield, IL 62701.\n"
        "Billing: billing@acme.com"
    )

    info = extract_business_info(text)

    assert info["email"] == "hello@acme.com"
    assert info["phone"] == "(555) 123-4567"
    assert "123 Main Street" in info["address"]


def test_extract_business_info_omits_missing_fields() -> None:
    assert extract_business_info("No contact details here at all.") == {}
    assert extract_business_info("") == {}


def test_extract_title_uses_first_non_blank_line_truncated() -> None:
    assert extract_title_from_content("\n\n  Acme Plumbing  \nMore text") == "Acme Plumbing"
    assert len(extract_title_from_content("x" * 250)) == 100


def test_extract_title_falls_back_to_placeholder() -> None:
    assert extract_title_from_content("   \n  \n") == DEFAULT_TITLE


def test_extract_description_uses_first_long_sentence() -> None:
    text = "Hi. Welcome to the best plumbing company in town. We fix pipes."

    assert extract_description_from_content(text) == "Welcome to the best plumbing company in town."


def test_extract_description_truncates_and_handles_no_match() -> None:
    assert extract_description_from_content("Short. Tiny.") == ""
    assert len(extract_description_from_content("y" * 500)) == 201


def test_extract_links_resolves_root_relative_and_drops_others() -> None:
    html = """
        <a href="/about">About</a>
        <a href="https://other.example.org/page">Other</a>
        <a href="mailto:hello@acme.com">Mail</a>
        <a href="javascript:void(0)">JS</a>
        <a href="#top">Top</a>
        <a href="relative/page">Relative</a>
        <a href="/about">About again</a>
        <a href="//cdn.example.com/lib">CDN</a>
    """

    links = extract_links(html, "https://acme.com/services/plumbing")

    assert links == [
        "https://acme.com/about",
        "https://other.example.org/page",
        "https://cdn.example.com/lib",
    ]


def test_extract_links_never_returns_relative_non_http_or_duplicates() -> None:
    html = "".join(f'<a href="/page-{i % 20}">x</a><a href="ftp://files/{i}">f</a>' for i in range(60))

    links = extract_links(html, "http://acme.com")

    assert len(links) == 15
    assert len(set(links)) == len(links)
    assert all(link.startswith("http://acme.com/page-") for link in links)


def test_extract_images_resolves_sources_and_defaults_alt() -> None:
    html = """
        <img src="/img/logo.png" alt="Logo">
        <img alt="Team" src="team.jpg">
        <img src="https://images.example.com/hero.jpg">
        <img src="data:image/png;base64,AAAA" alt="inline">
        <img data-src="/lazy.png">
        <img src="/img/logo.png" alt="Duplicate">
    """

    images = extract_images(html, "https://acme.com/about")

    assert images == [
        {"url": "https://acme.com/img/logo.png", "alt": "Logo"},
        {"url": "https://acme.com/about/team.jpg", "alt": "Team"},
        {"url": "https://images.example.com/hero.jpg", "alt": ""},
    ]


def test_extract_images_caps_and_deduplicates() -> None:
    html = "".join(f'<img src="/img/{i % 150}.png">' for i in range(400))

    images = extract_images(html, "https://acme.com")

    assert len(images) == MAX_IMAGES
    assert len({image["url"] for image in images}) == MAX_IMAGES


NAV_WORDS = "Home About Our Services Contact Blog Careers Store Locator Main Street road "


def test_extract_business_info_stays_fast_on_long_text_without_commas() -> None:
    texts = [
        "Open 24 Hours " + NAV_WORDS * 700 + ". Call us today.",
        "12 " + "Main Street road " * 3000,
        "Suite 12 " + "IL 62701 open daily " * 2500,
    ]

    for text in texts:
        assert len(text) > 45000
        started = time.perf_counter()
        info = extract_business_info(text)
        assert time.perf_counter() - started < 2.0
        assert "address" not in info


def test_extract_business_info_finds_address_after_long_noise() -> None:
    text = NAV_WORDS * 700 + "Visit 123 Main Street, Springfield, IL 62701 today."

    info = extract_business_info(text)

    assert info["address"] == "123 Main Street, Springfield, IL 62701"


def test_extract_business_info_address_without_commas() -> None:
    info = extract_business_info("Find us at 42 Oak Avenue Portland OR 97201")

    assert info["address"] == "42 Oak Avenue Portland OR 97201"
