"""Prompts for generating a complete website from business facts."""

SITE_SYNTHESIS_PROMPT = """Create a complete, modern HTML website for this business:

Business: {name}
Industry: {industry}
Services: {services}
Current Website Content ({content_length} characters): {content}{image_section}

Instructions: {instructions}

Create a complete HTML page with:
- Modern, professional design
- Responsive layout using Tailwind CSS
- Hero section with compelling headline
- Services/products section
- About section
- Contact section with form
- Professional color scheme
- Mobile-friendly design

IMPORTANT INSTRUCTIONS FOR IMAGES:
- Use the actual image URLs from the "AVAILABLE IMAGES" list above whenever possible
- Extract and use image URLs that appear in the website content
- If original images are not available or suitable, use placeholder images from https://images.unsplash.com/
- Include proper alt text for all images for accessibility
- Ensure all image URLs are absolute (not relative paths)
- Use responsive image techniques (e.g., object-fit: cover)

Return ONLY the complete HTML code, no explanations."""

IMAGE_SECTION_HEADER = "\n\nAVAILABLE IMAGES FROM ORIGINAL WEBSITE ({total} total, showing {shown}):\n"

VERSION_VARIATION_INSTRUCTION = (
    "[Version {number}: Create a unique design variation with different "
    "layout, color scheme, or style approach]"
)
