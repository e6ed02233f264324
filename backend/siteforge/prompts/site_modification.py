"""Prompt for applying a free-text change request to existing HTML."""

SITE_MODIFICATION_PROMPT = """You are a professional web developer. Modify the existing HTML website based on the user's request.

CURRENT WEBSITE HTML ({html_length} characters):
{html}{image_section}

USER'S MODIFICATION REQUEST:
{request}

IMPORTANT INSTRUCTIONS:
- Make ONLY the changes requested by the user
- Maintain the existing design structure and Tailwind CSS styling
- Keep all existing content unless the user specifically asks to change it
- If adding images, use the available images list above or use https://images.unsplash.com/ placeholders
- Ensure the website remains responsive and mobile-friendly
- Fix any errors or broken elements if you notice them
- Return ONLY the complete modified HTML code, no explanations

Return ONLY the complete HTML code, no explanations."""

IMAGE_SECTION_HEADER = "\n\nAVAILABLE IMAGES ({total} total, showing {shown}):\n"
