"""Regex-based extraction of business signals from raw HTML or page text.

They back up the scraping provider when its structured output is missing.
All of them work on plain strings, never parse a DOM and never raise on odd
input.
"""

import re
from urllib.parse import urlparse

MAX_LINKS = 15
MAX_IMAGES = 100
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 200
MIN_SENTENCE_LENGTH = 20
DEFAULT_TITLE = "Website Title"

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# "(555) 123-4567" style first, then loose international digit groups
PHONE_PATTERN = re.compile(
    r"(\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})"
    r"|(\+?\d{1,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9})"
)

# "123 Main Street, Springfield, IL 62701". Every quantifier is bounded and
# the pattern only runs in a window ending at a state + ZIP token.
ADDRESS_PATTERN = re.compile(
    r"\d{1,6}\s{1,3}(?:[A-Za-z]{1,30}\s{1,3}){0,6}?[A-Za-z]{0,20}?"
    r"(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd)"
    r"[^,\n]{0,40}[,\s]{0,3}[A-Za-z]{1,30}(?:\s{1,3}[A-Za-z]{1,30}){0,3}"
    r"[,\s]{0,3}[A-Z]{2}\s{0,3}\d{5}"
)
STATE_ZIP_PATTERN = re.compile(r"[A-Z]{2}\s{0,3}\d{5}")
ADDRESS_WINDOW = 400

HREF_PATTERN = re.compile(r"""href=["']([^"']+)["']""", re.IGNORECASE)
IMG_TAG_PATTERN = re.compile(r"<img[^>]+>", re.IGNORECASE)
IMG_SRC_PATTERN = re.compile(r"""(?<![\w-])src=["']([^"']+)["']""", re.IGNORECASE)
IMG_ALT_PATTERN = re.compile(r"""(?<![\w-])alt=["']([^"']+)["']""", re.IGNORECASE)

# Explicit scheme such as "data:", "mailto:", "javascript:"
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def extract_business_info(text: str) -> dict[str, str]:
    """Return the first email, phone and US street address found in ``text``.

    Fields without a match are omitted.
    """
    info: dict[str, str] = {}
    if not text:
        return info

    email = EMAIL_PATTERN.search(text)
    if email:
        info["email"] = email.group(0)

    phone = PHONE_PATTERN.search(text)
    if phone:
        info["phone"] = phone.group(0)

    address = _find_address(text)
    if address:
        info["address"] = address

    return info


def _find_address(text: str) -> str | None:
    """First street address, searched only just before each state + ZIP token."""
    for anchor in STATE_ZIP_PATTERN.finditer(text):
        match = ADDRESS_PATTERN.search(text, max(0, anchor.start() - ADDRESS_WINDOW), anchor.end())
        if match:
            return match.group(0)
    return None


def extract_title_from_content(text: str) -> str:
    """First non-blank line, at most 100 characters."""
    for line in (text or "").split("\n"):
        if line.strip():
            return line.strip()[:MAX_TITLE_LENGTH]
    return DEFAULT_TITLE


def extract_description_from_content(text: str) -> str:
    """First sentence longer than 20 characters, capped at 200 plus a period."""
    for sentence in (text or "").split("."):
        stripped = sentence.strip()
        if len(stripped) > MIN_SENTENCE_LENGTH:
            return stripped[:MAX_DESCRIPTION_LENGTH] + "."
    return ""


def _origin(base_url: str) -> str | None:
    try:
        parsed = urlparse(base_url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def _is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def extract_links(html: str, base_url: str) -> list[str]:
    """Absolute http(s) links from ``href`` attributes, deduplicated, at most 15."""
    origin = _origin(base_url)
    scheme = origin.split(":", 1)[0] if origin else "https"

    links: list[str] = []
    seen: set[str] = set()
    for match in HREF_PATTERN.finditer(html or ""):
        href = match.group(1).strip()
        if href.startswith("//"):
            href = f"{scheme}:{href}"
        elif href.startswith("/"):
            if origin is None:
                continue
            href = origin + href

        if not _is_http_url(href) or href in seen:
            continue
        seen.add(href)
        links.append(href)
        if len(links) >= MAX_LINKS:
            break

    return links


def _resolve_image_src(src: str, base_url: str) -> str | None:
    origin = _origin(base_url)
    if src.startswith("//"):
        return f"{origin.split(':', 1)[0]}:{src}" if origin else f"https:{src}"
    if src.startswith("/"):
        return origin + src if origin else None
    if _SCHEME_PATTERN.match(src):
        # Absolute already, or data:/javascript: which we cannot host
        return src if _is_http_url(src) else None
    if origin is None:
        return None

    # The page path is treated as a directory: /about + img.png -> /about/img.png
    path = urlparse(base_url).path or "/"
    if not path.endswith("/"):
        path += "/"
    return origin + path + src


def extract_images(html: str, base_url: str) -> list[dict[str, str]]:
    """``{"url", "alt"}`` for each ``<img>``, deduplicated by URL, at most 100."""
    images: list[dict[str, str]] = []
    seen: set[str] = set()

    for tag in IMG_TAG_PATTERN.findall(html or ""):
        src_match = IMG_SRC_PATTERN.search(tag)
        if not src_match:
            continue

        url = _resolve_image_src(src_match.group(1).strip(), base_url)
        if url is None or not _is_http_url(url) or url in seen:
            continue
        seen.add(url)

        alt_match = IMG_ALT_PATTERN.search(tag)
        images.append({"url": url, "alt": alt_match.group(1) if alt_match else ""})
        if len(images) >= MAX_IMAGES:
            break

    return images
