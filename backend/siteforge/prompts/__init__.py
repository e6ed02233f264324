"""LLM prompts for analysis, site generation and outreach."""

from siteforge.prompts.business_analysis import BUSINESS_ANALYSIS_PROMPT
from siteforge.prompts.outreach import OUTREACH_EMAIL_PROMPT, OUTREACH_PROPOSAL_PROMPT
from siteforge.prompts.site_modification import SITE_MODIFICATION_PROMPT
from siteforge.prompts.site_synthesis import SITE_SYNTHESIS_PROMPT, VERSION_VARIATION_INSTRUCTION

__all__ = [
    "BUSINESS_ANALYSIS_PROMPT",
    "OUTREACH_EMAIL_PROMPT",
    "OUTREACH_PROPOSAL_PROMPT",
    "SITE_MODIFICATION_PROMPT",
    "SITE_SYNTHESIS_PROMPT",
    "VERSION_VARIATION_INSTRUCTION",
]
