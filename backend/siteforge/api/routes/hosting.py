"""Hosted website routes."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from siteforge.api.deps import HostedSites
from siteforge.errors import InvalidInputError
from siteforge.models import BusinessFacts, CamelModel, GeneratedSite, HostedSite
from siteforge.validation import is_valid_identifier, sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter()
public_router = APIRouter()

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head>
    <title>Site Not Found</title>
    <style>
        body { font-family: Arial, sans-serif; text-align: center; padding: 50px; }
        .error { color: #e74c3c; }
    </style>
</head>
<body>
    <h1 class="error">Website Not Found</h1>
    <p>The requested website could not be found or may have been removed.</p>
    <a href="/">&larr; Back to SiteForge</a>
</body>
</html>"""


class HostWebsiteRequest(CamelModel):
    """Either ``{html, businessName}`` or ``{websiteData, businessInfo}``."""

    html: str | None = None
    business_name: str | None = None
    website_data: GeneratedSite | None = None
    business_info: BusinessFacts | None = None


class HostWebsiteResponse(HostedSite):
    success: bool = True
    message: str = "Website hosted successfully"


class HostedSiteListResponse(CamelModel):
    success: bool = True
    sites: list[HostedSite]
    total: int


@router.post("/host-website", response_model=HostWebsiteResponse)
async def host_website(request: HostWebsiteRequest, hosted_sites: HostedSites) -> HostWebsiteResponse:
    """Publish a website under a new site id."""
    html = request.html or (request.website_data.html if request.website_data else None)
    if not html:
        raise InvalidInputError("Website HTML data is required", "websiteData.html")

    business_name = sanitize_string(
        request.business_name or (request.business_info.name if request.business_info else "")
    )
    if not business_name:
        raise InvalidInputError("Business information is required", "businessInfo.name")

    logger.info(f"Hosting website for: {business_name}")
    site = await hosted_sites.publish(html, business_name)
    return HostWebsiteResponse(**site.model_dump())


@router.get("/hosted-sites", response_model=HostedSiteListResponse)
async def list_hosted_sites(hosted_sites: HostedSites) -> HostedSiteListResponse:
    """List hosted websites, newest first."""
    sites = await hosted_sites.list()
    return HostedSiteListResponse(sites=sites, total=len(sites))


@public_router.get("/hosted/{site_id}", response_class=HTMLResponse)
async def view_hosted_site(site_id: str, hosted_sites: HostedSites):
    """Serve a hosted website and count the view."""
    if not is_valid_identifier(site_id):
        return PlainTextResponse("Invalid site ID format", status_code=status.HTTP_400_BAD_REQUEST)

    html = await hosted_sites.view(site_id)
    if html is None:
        return HTMLResponse(NOT_FOUND_PAGE, status_code=status.HTTP_404_NOT_FOUND)
    return HTMLResponse(html)
