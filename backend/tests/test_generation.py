"""Tests for the generation pipeline."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeGateway
from siteforge.config import ConfigStore, LLMConfig
from siteforge.errors import GenerationError
from siteforge.models import BusinessFacts, ImageRef, ScrapedSite, ScrapeMetadata
from siteforge.services.generation import (
    DEFAULT_PRICE,
    GenerationPipeline,
    clamp_version_count,
    extract_owner_from_text,
    merge_business_facts,
    strip_code_fences,
)

FACTS = BusinessFacts(name="Acme Plumbing", industry="Plumbing", services="Repairs")


def _pipeline(gateway: FakeGateway, **config) -> GenerationPipeline:
    return GenerationPipeline(gateway, ConfigStore(LLMConfig(**config)))


def _scraped(content: str = "Acme Plumbing fixes pipes.") -> ScrapedSite:
    return ScrapedSite(
        title="Acme",
        content=content,
        full_content=content,
        images=[ImageRef(url="https://acme.com/logo.png", alt="Logo")],
        metadata=ScrapeMetadata(url="https://acme.com", method="single-page"),
    )


def test_strip_code_fences() -> None:
    assert strip_code_fences("```html\n<html></html>\n```") == "<html></html>"
    assert strip_code_fences('```json\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fences("   plain   ") == "plain"


@pytest.mark.parametrize(
    "value, expected",
    [(3, 3), (7, 5), (0, 1), (-3, 1), ("4", 4), ("abc", 1), (None, 1)],
)
def test_clamp_version_count(value: object, expected: int) -> None:
    assert clamp_version_count(value) == expected


def test_merge_business_facts_prefers_usable_ai_values() -> None:
    facts = BusinessFacts(name="User Name", email="user@example.com", owner="Jane")

    merged = merge_business_facts(
        facts,
        {
            "businessName": "Acme Plumbing LLC",
            "email": "not-an-email",
            "owner": "Unknown",
            "sector": "Plumbing",
            "phone": "   ",
        },
    )

    assert merged.name == "Acme Plumbing LLC"
    assert merged.email == "user@example.com"
    assert merged.owner == "Jane"
    assert merged.industry == "Plumbing"
    assert merged.phone == ""


@pytest.mark.parametrize("name", ["A", "<A>", "x" * 101])
def test_merge_business_facts_rejects_out_of_range_names(name: str) -> None:
    merged = merge_business_facts(BusinessFacts(name="User Name"), {"businessName": name})

    assert merged.name == "User Name"


def test_merge_business_facts_sanitizes_ai_values() -> None:
    merged = merge_business_facts(
        BusinessFacts(name="User Name"),
        {
            "businessName": "<>",
            "companyName": "  <Acme Plumbing>  ",
            "services": "Drains <and> pipes",
            "industry": "<script>",
        },
    )

    assert merged.name == "Acme Plumbing"
    assert merged.services == "Drains and pipes"
    assert merged.industry == "script"


def test_extract_owner_from_text() -> None:
    assert extract_owner_from_text("Founded in town.\nFounder: Jane Doe, since forever") == "Jane Doe"
    assert extract_owner_from_text("Nobody in charge") is None


def test_analyze_business_parses_fenced_json() -> None:
    gateway = FakeGateway('```json\n{"businessName": "Acme", "services": ["Drains", "Pipes"]}\n```')

    analysis = asyncio.run(_pipeline(gateway).analyze_business(FACTS, _scraped()))

    assert analysis.business_name == "Acme"
    assert analysis.services == "Drains, Pipes"
    prompt, max_tokens = gateway.calls[0]
    assert "Acme Plumbing fixes pipes." in prompt
    assert "https://acme.com" in prompt
    assert max_tokens == 4000


def test_analyze_business_keeps_alias_keys_as_extras() -> None:
    gateway = FakeGateway('{"companyName": "Acme Co"}')

    analysis = asyncio.run(_pipeline(gateway).analyze_business(FACTS, _scraped()))
    merged = merge_business_facts(FACTS, analysis.model_dump(by_alias=True))

    assert merged.name == "Acme Co"


def test_analyze_business_returns_partial_result_for_non_json() -> None:
    gateway = FakeGateway("The owner: Jane Doe\nReach them at jane@acme.com or 555-123-4567.")

    analysis = asyncio.run(_pipeline(gateway).analyze_business(FACTS, _scraped()))

    assert analysis.business_name == "Acme Plumbing"
    assert analysis.owner == "Jane Doe"
    assert analysis.email == "jane@acme.com"
    assert analysis.phone == "555-123-4567"
    assert analysis.services == "Repairs"


def test_analyze_business_propagates_provider_errors() -> None:
    gateway = FakeGateway(error=RuntimeError("quota exceeded"))

    with pytest.raises(RuntimeError, match="quota exceeded"):
        asyncio.run(_pipeline(gateway).analyze_business(FACTS, None))


def test_generate_website_strips_fences_and_lists_images() -> None:
    gateway = FakeGateway("```html\n<!DOCTYPE html><html><body>New</body></html>\n```")

    site = asyncio.run(_pipeline(gateway).generate_website(_scraped(), FACTS, "Make it blue"))

    assert site.html == "<!DOCTYPE html><html><body>New</body></html>"
    assert site.title == "Modern Acme Plumbing Website"
    assert site.error is None
    prompt, max_tokens = gateway.calls[0]
    assert "https://acme.com/logo.png" in prompt
    assert "Make it blue" in prompt
    assert max_tokens == 8000


@pytest.mark.parametrize(
    "gateway",
    [FakeGateway(error=RuntimeError("provider down")), FakeGateway("   ")],
)
def test_generate_website_falls_back_to_template(gateway: FakeGateway) -> None:
    facts = BusinessFacts(name="Bob & Sons", services="Roofing")

    site = asyncio.run(_pipeline(gateway).generate_website(None, facts, ""))

    assert site.html.startswith("<!DOCTYPE html>")
    assert "Bob & Sons" in site.html
    assert "&amp;" not in site.html
    assert "Roofing" in site.html
    assert site.error


def test_generate_versions_clamps_and_varies_instructions() -> None:
    gateway = FakeGateway("<html>site</html>")

    versions = asyncio.run(
        _pipeline(gateway).generate_versions(_scraped(), FACTS, "Base instructions", 7)
    )

    assert [site.version_number for site in versions] == [1, 2, 3, 4, 5]
    assert len({site.version_id for site in versions}) == 5
    assert len(gateway.calls) == 5
    for number, (prompt, _) in enumerate(gateway.calls, 1):
        assert f"[Version {number}:" in prompt


@pytest.mark.parametrize("requested", [0, -3])
def test_generate_versions_single_version_has_no_variation(requested: int) -> None:
    gateway = FakeGateway("<html>site</html>")

    versions = asyncio.run(_pipeline(gateway).generate_versions(None, FACTS, "Base", requested))

    assert len(versions) == 1
    assert "[Version" not in gateway.calls[0][0]


def test_generate_versions_uses_template_when_provider_fails() -> None:
    gateway = FakeGateway(error=RuntimeError("provider down"))

    versions = asyncio.run(_pipeline(gateway).generate_versions(None, FACTS, "", 2))

    assert len(versions) == 2
    assert all("Acme Plumbing" in site.html for site in versions)


def test_modify_website_returns_cleaned_document() -> None:
    gateway = FakeGateway("```html\n<html>changed</html>```")

    result = asyncio.run(
        _pipeline(gateway).modify_website("<html>old</html>", "Change the color", _scraped())
    )

    assert result == "<html>changed</html>"
    prompt, _ = gateway.calls[0]
    assert "<html>old</html>" in prompt
    assert "Change the color" in prompt


def test_modify_website_raises_on_failure() -> None:
    with pytest.raises(RuntimeError):
        asyncio.run(
            _pipeline(FakeGateway(error=RuntimeError("boom"))).modify_website("<html/>", "Change it")
        )
    with pytest.raises(GenerationError):
        asyncio.run(_pipeline(FakeGateway("")).modify_website("<html/>", "Change it"))


def test_outreach_splits_budget_and_uses_replies() -> None:
    gateway = FakeGateway(lambda prompt: "  EMAIL  " if "cold email" in prompt.lower() else " PROPOSAL ")

    result = asyncio.run(
        _pipeline(gateway, max_outreach_tokens=3000).generate_outreach(
            FACTS, "Sam Seller", "sam@agency.com", "$999"
        )
    )

    assert result.email == "EMAIL"
    assert result.proposal == "PROPOSAL"
    assert result.error is None
    assert sorted(max_tokens for _, max_tokens in gateway.calls) == [1000, 2000]
    assert all("$999" in prompt for prompt, _ in gateway.calls)


def test_outreach_falls_back_per_piece() -> None:
    def reply(prompt: str) -> str:
        if "cold email" in prompt.lower():
            raise RuntimeError("email generation failed")
        return "Generated proposal"

    gateway = FakeGateway(reply)

    result = asyncio.run(
        _pipeline(gateway).generate_outreach(FACTS, "Sam Seller", "sam@agency.com")
    )

    assert "Acme Plumbing" in result.email
    assert "sam@agency.com" in result.email
    assert DEFAULT_PRICE in result.email
    assert result.proposal == "Generated proposal"
    assert result.error == "email generation failed"


def test_outreach_full_fallback_names_business_and_sender() -> None:
    gateway = FakeGateway(error=RuntimeError("provider down"))

    result = asyncio.run(
        _pipeline(gateway).generate_outreach(FACTS, "Sam Seller", "sam@agency.com", "$500")
    )

    for text in (result.email, result.proposal):
        assert "Acme Plumbing" in text
        assert "Sam Seller" in text
        assert "sam@agency.com" in text
        assert "$500" in text
    assert result.error == "provider down"
