"""Generation pipeline: business analysis, site synthesis, modification, outreach.

Every operation builds one prompt, calls the LLM gateway and post-processes
the text. Site synthesis and outreach fall back to deterministic templates
kept next to their primary generator; modification has no fallback and
raises.
"""

import asyncio
import json
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from siteforge.config import ConfigStore
from siteforge.errors import GenerationError
from siteforge.models import (
    BusinessAnalysis,
    BusinessFacts,
    GeneratedSite,
    ImageRef,
    OutreachResult,
    ScrapedSite,
)
from siteforge.prompts import (
    BUSINESS_ANALYSIS_PROMPT,
    OUTREACH_EMAIL_PROMPT,
    OUTREACH_PROPOSAL_PROMPT,
    SITE_MODIFICATION_PROMPT,
    SITE_SYNTHESIS_PROMPT,
    VERSION_VARIATION_INSTRUCTION,
)
from siteforge.prompts import site_modification, site_synthesis
from siteforge.services.content_extractor import EMAIL_PATTERN, PHONE_PATTERN
from siteforge.services.llm_gateway import LLMGateway
from siteforge.validation import (
    BUSINESS_NAME_MAX,
    BUSINESS_NAME_MIN,
    is_valid_email,
    sanitize_string,
)

logger = logging.getLogger(__name__)

# Character budgets for prompt context
ANALYSIS_CONTENT_LIMIT = 100000
SYNTHESIS_CONTENT_LIMIT = 500000
SYNTHESIS_IMAGE_LIMIT = 50
MODIFICATION_IMAGE_LIMIT = 30

MIN_VERSIONS, MAX_VERSIONS = 1, 5
DEFAULT_PRICE = "an affordable flat rate"

_CODE_FENCE_PATTERN = re.compile(r"```(?:html|json)?\n?")
_OWNER_LABELS = ["owner:", "founder:", "ceo:", "president:"]

# AI answer keys tried, in order, for each BusinessFacts field
FIELD_ALIASES: dict[str, list[str]] = {
    "name": ["businessName", "name", "companyName"],
    "industry": ["industry", "sector", "businessType"],
    "owner": ["owner", "founder", "contact", "contactPerson"],
    "email": ["email", "contactEmail"],
    "phone": ["phone", "phoneNumber", "contactPhone"],
    "services": ["services", "offerings", "products"],
    "issues": ["issues", "problems", "improvements"],
    "location": ["location", "address", "headquarters"],
    "description": ["description", "about", "companyDescription"],
}


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences an LLM wrapped around its answer."""
    return _CODE_FENCE_PATTERN.sub("", text or "").strip()


def clamp_version_count(value: Any) -> int:
    """Requested version count limited to 1..5; unparseable means 1."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return MIN_VERSIONS
    return min(max(count, MIN_VERSIONS), MAX_VERSIONS)


def _first_usable(extracted: Mapping[str, Any], keys: list[str]) -> str | None:
    for key in keys:
        value = sanitize_string(extracted.get(key))
        if value and value != "Unknown":
            return value
    return None


def merge_business_facts(facts: BusinessFacts, extracted: Mapping[str, Any]) -> BusinessFacts:
    """Overlay AI-extracted values onto user-supplied facts.

    An AI value wins only when, after sanitizing, it is a non-blank string
    other than "Unknown". Emails must also be syntactically valid and
    business names 2-100 characters long.
    """
    updates = {}
    for field, keys in FIELD_ALIASES.items():
        value = _first_usable(extracted, keys)
        if value is None:
            continue
        if field == "email" and not is_valid_email(value):
            continue
        if field == "name" and not BUSINESS_NAME_MIN <= len(value) <= BUSINESS_NAME_MAX:
            continue
        updates[field] = value
    return facts.model_copy(update=updates)


def extract_owner_from_text(text: str) -> str | None:
    """Value after the first ``owner:``/``founder:``/``ceo:``/``president:`` label."""
    for label in _OWNER_LABELS:
        match = re.search(re.escape(label) + r"\s*([^\n,]+)", text, re.IGNORECASE)
        if match:
            return match.group(1).strip()
    return None


def partial_analysis(text: str, facts: BusinessFacts) -> BusinessAnalysis:
    """Best-effort facts pulled from an LLM answer that was not valid JSON."""
    email = EMAIL_PATTERN.search(text)
    phone = PHONE_PATTERN.search(text)
    return BusinessAnalysis(
        business_name=facts.name,
        owner=extract_owner_from_text(text) or "",
        email=email.group(0) if email else "",
        phone=phone.group(0) if phone else "",
        services=facts.services,
        description=text[:200],
    )


def format_image_section(images: list[ImageRef], limit: int, header: str) -> str:
    """Numbered image list appended to generation prompts."""
    if not images:
        return ""
    shown = images[:limit]
    lines = [header.format(total=len(images), shown=len(shown))]
    for index, image in enumerate(shown, 1):
        alt = f' (alt: "{image.alt}")' if image.alt else ""
        lines.append(f"{index}. {image.url}{alt}\n")
    return "".join(lines)


def fallback_website(facts: BusinessFacts) -> str:
    """Minimal Tailwind page built only from business facts. Never fails."""
    name = sanitize_string(facts.name)
    services = sanitize_string(facts.services)
    industry = sanitize_string(facts.industry)
    year = datetime.now(timezone.utc).year

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name}</title>
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="bg-gray-50">
    <header class="bg-blue-600 text-white">
        <div class="container mx-auto px-6 py-4">
            <h1 class="text-3xl font-bold">{name}</h1>
        </div>
    </header>

    <main class="container mx-auto px-6 py-12">
        <section class="text-center mb-12">
            <h2 class="text-4xl font-bold text-gray-800 mb-4">Welcome to {name}</h2>
            <p class="text-xl text-gray-600">{services or 'Professional services you can trust'}</p>
        </section>

        <section class="grid md:grid-cols-3 gap-8 mb-12">
            <div class="bg-white p-6 rounded-lg shadow-md">
                <h3 class="text-xl font-bold mb-4">Our Services</h3>
                <p class="text-gray-600">{services or 'Quality services tailored to your needs.'}</p>
            </div>
            <div class="bg-white p-6 rounded-lg shadow-md">
                <h3 class="text-xl font-bold mb-4">About Us</h3>
                <p class="text-gray-600">Experienced professionals in {industry or 'our field'}.</p>
            </div>
            <div class="bg-white p-6 rounded-lg shadow-md">
                <h3 class="text-xl font-bold mb-4">Contact</h3>
                <p class="text-gray-600">Get in touch for a consultation.</p>
            </div>
        </section>
    </main>

    <footer class="bg-gray-800 text-white py-8">
        <div class="container mx-auto px-6 text-center">
            <p>&copy; {year} {name}. All rights reserved.</p>
        </div>
    </footer>
</body>
</html>"""


def fallback_email(facts: BusinessFacts, sender_name: str, sender_email: str, price: str) -> str:
    return f"""Subject: Quick Question About {facts.name}'s Website

Hi there,

I was looking at {facts.name}'s website and noticed a few areas where we might be able to help you get more customers online.

I specialize in creating modern, mobile-friendly websites that convert visitors into customers. I'd love to show you what a new website could look like for {facts.name}.

Would you be interested in seeing a quick mockup? No obligation, just want to show you the potential.

Best regards,
{sender_name}
{sender_email}

P.S. I'm offering complete website redesigns starting at {price}"""


def fallback_proposal(facts: BusinessFacts, sender_name: str, sender_email: str, price: str) -> str:
    return f"""WEBSITE REDESIGN PROPOSAL
{facts.name}

EXECUTIVE SUMMARY
This proposal outlines a complete website redesign for {facts.name} to improve online presence and customer acquisition.

CURRENT SITUATION
Your current website has several opportunities for improvement that could be limiting your business growth.

PROPOSED SOLUTION
- Modern, mobile-responsive design
- Fast loading times
- Professional appearance
- Contact forms and lead capture
- SEO optimization

INVESTMENT
Complete website redesign: {price}

TIMELINE
Project completion: 2-3 weeks

NEXT STEPS
Reply to this email to get started on your new website.

{sender_name}
{sender_email}"""


class GenerationPipeline:
    """LLM-backed generation steps for one sales workflow."""

    def __init__(self, gateway: LLMGateway, config_store: ConfigStore):
        self.gateway = gateway
        self.config_store = config_store

    async def analyze_business(
        self, facts: BusinessFacts, scraped: ScrapedSite | None
    ) -> BusinessAnalysis:
        """Extract business facts from scraped content.

        Provider errors propagate. A reply that is not a JSON object yields
        a partial result built from regexes instead.
        """
        content = (scraped.source_text if scraped else "") or "No content available"
        pages = 1
        if scraped and scraped.metadata and scraped.metadata.pages_scraped:
            pages = scraped.metadata.pages_scraped

        logger.info(f"Analyzing {len(content)} characters from {pages} pages for {facts.name}")

        prompt = BUSINESS_ANALYSIS_PROMPT.format(
            url=(scraped.url if scraped else "") or "Unknown URL",
            pages_analyzed=pages,
            content_length=len(content),
            content=content[:ANALYSIS_CONTENT_LIMIT],
        )
        config = self.config_store.current()
        text = strip_code_fences(await self.gateway.generate(prompt, config.max_analysis_tokens))

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Analysis reply was not JSON ({e}), extracting partial facts")
            return partial_analysis(text, facts)

        if not isinstance(parsed, dict):
            logger.warning("Analysis reply was JSON but not an object, extracting partial facts")
            return partial_analysis(text, facts)

        return BusinessAnalysis.model_validate(parsed)

    async def generate_website(
        self, scraped: ScrapedSite | None, facts: BusinessFacts, instructions: str
    ) -> GeneratedSite:
        """One complete HTML document; the fallback template replaces any failure."""
        content = (scraped.source_text if scraped else "")[:SYNTHESIS_CONTENT_LIMIT] or "No content"
        images = scraped.images if scraped else []

        prompt = SITE_SYNTHESIS_PROMPT.format(
            name=facts.name,
            industry=facts.industry,
            services=facts.services,
            content_length=len(content),
            content=content,
            image_section=format_image_section(
                images, SYNTHESIS_IMAGE_LIMIT, site_synthesis.IMAGE_SECTION_HEADER
            ),
            instructions=instructions,
        )
        config = self.config_store.current()

        try:
            document = strip_code_fences(
                await self.gateway.generate(prompt, config.max_website_tokens)
            )
            if not document:
                raise GenerationError("LLM returned an empty website")
        except Exception as e:
            logger.error(f"Website generation failed for {facts.name}, using template: {e}")
            return GeneratedSite(
                html=fallback_website(facts),
                title=f"{facts.name} Website",
                description=f"Professional website for {facts.name}",
                error=str(e),
            )

        return GeneratedSite(
            html=document,
            title=f"Modern {facts.name} Website",
            description=f"AI-generated modern website for {facts.name}",
        )

    async def generate_versions(
        self,
        scraped: ScrapedSite | None,
        facts: BusinessFacts,
        instructions: str,
        version_count: Any = 1,
    ) -> list[GeneratedSite]:
        """Generate 1..5 variants sequentially.

        Raises:
            GenerationError: if no version could be produced
        """
        count = clamp_version_count(version_count)
        logger.info(f"Generating {count} website version(s) for {facts.name}")

        versions = []
        for number in range(1, count + 1):
            version_instructions = instructions
            if count > 1:
                variation = VERSION_VARIATION_INSTRUCTION.format(number=number)
                version_instructions = f"{instructions}\n\n{variation}"

            try:
                site = await self.generate_website(scraped, facts, version_instructions)
            except Exception as e:
                logger.error(f"Version {number}/{count} failed: {e}")
                continue

            versions.append(
                site.model_copy(update={"version_number": number, "version_id": uuid4().hex})
            )
            logger.info(f"Version {number}/{count} generated")

        if not versions:
            raise GenerationError("Failed to generate any website versions")
        return versions

    async def modify_website(
        self, current_html: str, request: str, scraped: ScrapedSite | None = None
    ) -> str:
        """Apply a change request to ``current_html``. Failures propagate."""
        images = scraped.images if scraped else []
        prompt = SITE_MODIFICATION_PROMPT.format(
            html_length=len(current_html),
            html=current_html,
            image_section=format_image_section(
                images, MODIFICATION_IMAGE_LIMIT, site_modification.IMAGE_SECTION_HEADER
            ),
            request=request,
        )
        config = self.config_store.current()

        logger.info(f"Modifying website: {request[:100]}")
        document = strip_code_fences(await self.gateway.generate(prompt, config.max_website_tokens))
        if not document:
            raise GenerationError("LLM returned an empty document")
        return document

    async def generate_outreach(
        self,
        facts: BusinessFacts,
        sender_name: str,
        sender_email: str,
        price: str | None = None,
    ) -> OutreachResult:
        """Cold email and proposal, generated concurrently.

        Each piece falls back to its template independently.
        """
        price = sanitize_string(price) or DEFAULT_PRICE
        fields = {
            "name": facts.name,
            "industry": facts.industry,
            "services": facts.services,
            "issues": facts.issues,
            "sender_name": sender_name,
            "sender_email": sender_email,
            "price": price,
        }

        total_budget = self.config_store.current().max_outreach_tokens
        email_budget = total_budget // 3
        proposal_budget = total_budget - email_budget

        email_result, proposal_result = await asyncio.gather(
            self.gateway.generate(OUTREACH_EMAIL_PROMPT.format(**fields), email_budget),
            self.gateway.generate(OUTREACH_PROPOSAL_PROMPT.format(**fields), proposal_budget),
            return_exceptions=True,
        )

        errors = []
        email = self._outreach_text(email_result, "email", errors)
        if email is None:
            email = fallback_email(facts, sender_name, sender_email, price)
        proposal = self._outreach_text(proposal_result, "proposal", errors)
        if proposal is None:
            proposal = fallback_proposal(facts, sender_name, sender_email, price)

        return OutreachResult(
            email=email,
            proposal=proposal,
            error=errors[0] if errors else None,
        )

    @staticmethod
    def _outreach_text(result: Any, piece: str, errors: list[str]) -> str | None:
        """Trimmed LLM text, or None (recording why) when the template is needed."""
        if isinstance(result, BaseException):
            logger.error(f"Outreach {piece} generation failed, using template: {result}")
            errors.append(str(result))
            return None
        text = (result or "").strip()
        if not text:
            logger.warning(f"Outreach {piece} came back empty, using template")
            errors.append(f"LLM returned an empty {piece}")
            return None
        return text
