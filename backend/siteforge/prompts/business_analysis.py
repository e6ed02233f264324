"""Prompt for extracting business facts from scraped website content."""

BUSINESS_ANALYSIS_PROMPT = """You are a business intelligence analyst. Analyze the website content below and extract specific business information.

WEBSITE DATA:
URL: {url}
Pages Analyzed: {pages_analyzed}
Total Content Length: {content_length} characters

COMPLETE WEBSITE CONTENT:
{content}

YOUR TASK: Extract business information and return ONLY a valid JSON object (no markdown, no explanations). The JSON must have these exact fields:

{{
  "businessName": "exact business name",
  "industry": "specific industry (e.g., Hospitality & Tourism, Restaurant Chain, Resort Management)",
  "owner": "owner/founder/CEO name if found, or leave empty",
  "email": "primary contact email if found",
  "phone": "primary phone number if found",
  "services": "comma-separated list of main services/products (e.g., Beach Resorts, Restaurants, Vacation Rentals, Merchandise)",
  "issues": "list 2-3 potential website improvement areas (e.g., Mobile optimization needed, Add live chat, Improve booking flow)",
  "location": "headquarters or main location",
  "description": "2-3 sentence company description"
}}

EXTRACTION RULES:
- businessName: Use the exact company name from the website
- industry: Be specific and descriptive
- services: List 3-5 main offerings, comma-separated
- issues: Identify real website problems (navigation, mobile issues, missing features, outdated design)
- If information is not found, use empty string ""
- Return ONLY the JSON object, no other text

RETURN ONLY VALID JSON:"""
