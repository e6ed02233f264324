"""Tests for the ZIP export package."""

from __future__ import annotations

import io
import zipfile

from siteforge.models import BusinessFacts, GeneratedSite, ScrapedSite, ScrapeMetadata
from siteforge.services.export import build_export_package, export_filename


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


def test_export_filename_replaces_non_alphanumerics() -> None:
    assert export_filename("Acme Plumbing & Co.") == "acme_plumbing___co__complete_package.zip"
    assert export_filename("") == "website_complete_package.zip"


def test_package_without_scrape_data() -> None:
    site = GeneratedSite(html="<html>new</html>")
    facts = BusinessFacts(name="Acme", industry="Plumbing")

    archive = _open(build_export_package(site, facts))

    assert sorted(archive.namelist()) == ["README.md", "business-info.txt", "index.html"]
    assert archive.read("index.html").decode() == "<html>new</html>"
    info = archive.read("business-info.txt").decode()
    assert "Business Name: Acme" in info
    assert "Owner: N/A" in info


def test_package_with_scrape_data_includes_analysis() -> None:
    scraped = ScrapedSite(
        title="Old Acme",
        content="z" * 3000,
        links=[f"https://acme.com/page-{i}" for i in range(12)],
        metadata=ScrapeMetadata(url="https://acme.com", method="sitemap-comprehensive", word_count=1),
    )

    archive = _open(
        build_export_package(GeneratedSite(html="<html/>"), BusinessFacts(name="Acme"), scraped)
    )

    analysis = archive.read("original-website-analysis.txt").decode()
    assert "Title: Old Acme" in analysis
    assert "URL: https://acme.com" in analysis
    assert "Method: sitemap-comprehensive" in analysis
    assert "z" * 2000 + "..." in analysis
    assert "z" * 2001 not in analysis
    assert "https://acme.com/page-9" in analysis
    assert "https://acme.com/page-10" not in analysis
