"""ZIP export of a generated website with its supporting notes."""

import io
import logging
import re
import zipfile
from datetime import datetime, timezone

from siteforge.models import BusinessFacts, GeneratedSite, ScrapedSite

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_LENGTH = 2000
MAX_EXPORTED_LINKS = 10

README_TEMPLATE = """# Website Package

This package contains your newly generated website and related files.

## Files Included:
- index.html - Your new website (ready to upload)
- business-info.txt - Business information used for generation
- original-website-analysis.txt - Analysis of your original website
- README.md - This file

## How to Use:
1. Open index.html in a web browser to preview your new website
2. Upload index.html to your web hosting provider
3. Review the business information and analysis files for insights

## Generated by:
SiteForge
Generated: {generated_at}

## Next Steps:
1. Test the website thoroughly
2. Customize any content as needed
3. Upload to your hosting provider
4. Update DNS settings if necessary

For support, contact your web developer.
"""


def export_filename(business_name: str) -> str:
    """Download name such as ``acme_plumbing_complete_package.zip``."""
    base = re.sub(r"[^a-z0-9]", "_", business_name or "Website", flags=re.IGNORECASE)
    return f"{base.lower()}_complete_package.zip"


def _business_info_text(facts: BusinessFacts, generated_at: str) -> str:
    return (
        "# Business Information\n"
        f"Business Name: {facts.name or 'N/A'}\n"
        f"Industry: {facts.industry or 'N/A'}\n"
        f"Owner: {facts.owner or 'N/A'}\n"
        f"Email: {facts.email or 'N/A'}\n"
        f"Services: {facts.services or 'N/A'}\n"
        f"Issues Identified: {facts.issues or 'N/A'}\n"
        "\n"
        f"Generated: {generated_at}\n"
    )


def _scrape_analysis_text(scraped: ScrapedSite) -> str:
    metadata = scraped.metadata
    preview = (
        scraped.content[:CONTENT_PREVIEW_LENGTH] + "..." if scraped.content else "No content"
    )
    links = "\n".join(scraped.links[:MAX_EXPORTED_LINKS]) if scraped.links else "No links found"

    return (
        "# Original Website Analysis\n"
        f"Title: {scraped.title or 'N/A'}\n"
        f"Description: {scraped.description or 'N/A'}\n"
        f"URL: {scraped.url or 'N/A'}\n"
        f"Scraped: {metadata.scraped_at.isoformat() if metadata else 'N/A'}\n"
        f"Method: {metadata.method if metadata else 'N/A'}\n"
        f"Word Count: {metadata.word_count if metadata else 'N/A'}\n"
        "\n"
        "## Content Preview:\n"
        f"{preview}\n"
        "\n"
        "## Extracted Links:\n"
        f"{links}\n"
    )


def build_export_package(
    site: GeneratedSite,
    facts: BusinessFacts,
    scraped: ScrapedSite | None = None,
) -> bytes:
    """ZIP archive bytes: index.html, business-info.txt, README.md and,
    when scrape data is given, original-website-analysis.txt."""
    generated_at = datetime.now(timezone.utc).isoformat()

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("index.html", site.html)
        archive.writestr("business-info.txt", _business_info_text(facts, generated_at))
        if scraped is not None:
            archive.writestr("original-website-analysis.txt", _scrape_analysis_text(scraped))
        archive.writestr("README.md", README_TEMPLATE.format(generated_at=generated_at))

    logger.info(f"Built export package for {facts.name} ({buffer.tell()} bytes)")
    return buffer.getvalue()
