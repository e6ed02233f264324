"""LLM-backed generation routes: analysis, websites, outreach, export."""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, Response
from pydantic import Field

from siteforge.api.deps import AppSettings, HostedSites, Pipeline
from siteforge.api.errors import call_with_deadline
from siteforge.errors import InvalidInputError
from siteforge.models import (
    BusinessAnalysis,
    BusinessFacts,
    CamelModel,
    GeneratedSite,
    HostedSite,
    OutreachResult,
    ScrapedSite,
)
from siteforge.services.export import build_export_package, export_filename
from siteforge.services.generation import merge_business_facts
from siteforge.validation import clean_business_facts, require_email, sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_MODIFICATION_REQUEST_LENGTH = 3


class AnalyzeRequest(BusinessFacts):
    """Business facts with the scrape they should be checked against."""

    scraped_data: ScrapedSite | None = None


class AnalyzeResponse(CamelModel):
    success: bool = True
    extracted_info: BusinessAnalysis
    merged_info: BusinessFacts


class RecreateRequest(CamelModel):
    scraped_data: ScrapedSite | None = None
    business_info: BusinessFacts | None = None
    instructions: str | None = None
    version_count: int | str | None = 1


class RecreateResponse(CamelModel):
    versions: list[GeneratedSite]
    project_id: str
    hosted_site: HostedSite | None = None
    total_versions: int


class ModifyRequest(CamelModel):
    current_html: str | None = Field(default=None, alias="currentHTML")
    modification_request: str | None = None
    business_info: BusinessFacts | None = None
    scraped_data: ScrapedSite | None = None


class ModifyResponse(CamelModel):
    success: bool = True
    html: str
    modified_at: datetime


class OutreachRequest(CamelModel):
    business_info: BusinessFacts | None = None
    generated_website: GeneratedSite | None = None
    your_name: str | None = None
    your_email: str | None = None
    package_price: str | None = None


class ExportRequest(CamelModel):
    generated_website: GeneratedSite | None = None
    business_info: BusinessFacts | None = None
    scraped_data: ScrapedSite | None = None


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_business(
    request: AnalyzeRequest,
    pipeline: Pipeline,
    settings: AppSettings,
) -> AnalyzeResponse:
    """Extract business facts from the scraped site and merge them into the user's."""
    facts = clean_business_facts(
        BusinessFacts.model_validate(request.model_dump(include=set(BusinessFacts.model_fields))),
        field="businessInfo",
        name_field="name",
    )
    logger.info(f"Analyzing business: {facts.name}")

    analysis = await call_with_deadline(
        pipeline.analyze_business(facts, request.scraped_data),
        settings.request_timeout_seconds,
        "analyze business information",
    )
    merged = merge_business_facts(facts, analysis.model_dump(by_alias=True))
    return AnalyzeResponse(extracted_info=analysis, merged_info=merged)


@router.post("/recreate", response_model=RecreateResponse)
async def recreate_website(
    request: RecreateRequest,
    pipeline: Pipeline,
    hosted_sites: HostedSites,
    settings: AppSettings,
) -> RecreateResponse:
    """Generate 1-5 website versions and host the first for live preview."""
    if request.scraped_data is None:
        raise InvalidInputError("Scraped data is required", "scrapedData")
    facts = clean_business_facts(request.business_info)
    instructions = sanitize_string(request.instructions)

    versions = await call_with_deadline(
        pipeline.generate_versions(
            request.scraped_data, facts, instructions, request.version_count
        ),
        settings.request_timeout_seconds,
        "generate website",
    )

    hosted_site = None
    try:
        hosted_site = await hosted_sites.publish(versions[0].html, facts.name)
    except OSError as e:
        logger.warning(f"Could not auto-host website for {facts.name}: {e}")

    logger.info(f"Generated {len(versions)} version(s) for {facts.name}")
    return RecreateResponse(
        versions=versions,
        project_id=uuid4().hex,
        hosted_site=hosted_site,
        total_versions=len(versions),
    )


@router.post("/modify-website", response_model=ModifyResponse)
async def modify_website(
    request: ModifyRequest,
    pipeline: Pipeline,
    settings: AppSettings,
) -> ModifyResponse:
    """Apply a free-text change request to an existing website."""
    if not request.current_html or not request.modification_request:
        raise InvalidInputError(
            "Current HTML and modification request are required",
            "currentHTML" if not request.current_html else "modificationRequest",
        )
    modification = sanitize_string(request.modification_request)
    if len(modification) < MIN_MODIFICATION_REQUEST_LENGTH:
        raise InvalidInputError(
            "Please provide a more detailed modification request (at least 3 characters)",
            "modificationRequest",
        )

    html = await call_with_deadline(
        pipeline.modify_website(request.current_html, modification, request.scraped_data),
        settings.request_timeout_seconds,
        "modify website",
    )
    return ModifyResponse(html=html, modified_at=datetime.now(timezone.utc))


@router.post("/outreach", response_model=OutreachResult)
async def generate_outreach(
    request: OutreachRequest,
    pipeline: Pipeline,
    settings: AppSettings,
) -> OutreachResult:
    """Cold email and proposal for the prospect."""
    facts = clean_business_facts(request.business_info)
    if request.generated_website is None:
        raise InvalidInputError("Generated website information is required", "generatedWebsite")
    sender_name = sanitize_string(request.your_name)
    if not sender_name:
        raise InvalidInputError("Your name is required for outreach", "yourName")
    sender_email = require_email(request.your_email, "yourEmail").lower()

    logger.info(f"Generating outreach for: {facts.name}")
    return await call_with_deadline(
        pipeline.generate_outreach(facts, sender_name, sender_email, request.package_price),
        settings.request_timeout_seconds,
        "generate outreach content",
    )


@router.post("/export-package")
async def export_package(request: ExportRequest) -> Response:
    """Download the generated website and notes as a ZIP archive."""
    if request.generated_website is None:
        raise InvalidInputError("Generated website is required", "generatedWebsite")
    facts = clean_business_facts(request.business_info)

    archive = build_export_package(request.generated_website, facts, request.scraped_data)
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(facts.name)}"'},
    )
