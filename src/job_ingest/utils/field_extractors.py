"""
Ordered fallback chains for pulling fields out of job posting HTML

No single selector is reliable across ATS templates, so each field is an
ordered list of extractors tried until one returns a non-empty value:

    title = extract_first(soup, [
        select_text("h1", max_len=150),
        meta_content("og:title", strip_suffix=True),
        page_title(),
    ], default=UNTITLED_POSITION)

Each extractor is a plain callable taking the soup, so chains can be tested
one link at a time.
"""

import json
import re
from collections.abc import Callable, Sequence
from typing import Any
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from job_ingest.utils.text_cleaning import clean_text, html_to_text

Extractor = Callable[[BeautifulSoup], str | None]

# Spaced separators only, so hyphenated titles like "Front-end Engineer" survive
TITLE_SEPARATORS = re.compile(r"\s+[|–—-]\s+")

NOISE_TAGS = ["script", "style", "nav", "footer", "iframe", "noscript"]


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def strip_noise(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove tags whose text would pollute body-text fallbacks"""
    for tag in soup(NOISE_TAGS):
        tag.decompose()
    return soup


def _block_text(element) -> str:
    lines = [clean_text(line) for line in element.get_text("\n").splitlines()]
    return "\n".join(line for line in lines if line)


def extract_first(
    soup: BeautifulSoup, chain: Sequence[Extractor], default: str | None = None
) -> str | None:
    """Return the first non-empty extractor result, or default"""
    for extractor in chain:
        value = extractor(soup)
        if value:
            return value
    return default


def _within(text: str, min_len: int, max_len: int | None) -> bool:
    if len(text) < min_len:
        return False
    return max_len is None or len(text) <= max_len


def select_text(selector: str, min_len: int = 1, max_len: int | None = None) -> Extractor:
    """Text of the first element matching a CSS selector"""

    def extractor(soup: BeautifulSoup) -> str | None:
        element = soup.select_one(selector)
        if element is None:
            return None
        text = clean_text(element.get_text(" "))
        return text if _within(text, min_len, max_len) else None

    return extractor


def select_block_text(selector: str) -> Extractor:
    """Multi-line text of the first matching element (for descriptions)"""

    def extractor(soup: BeautifulSoup) -> str | None:
        element = soup.select_one(selector)
        if element is None:
            return None
        return _block_text(element) or None

    return extractor


def meta_content(name: str, strip_suffix: bool = False) -> Extractor:
    """content= of a <meta property=...> or <meta name=...> tag"""

    def extractor(soup: BeautifulSoup) -> str | None:
        tag = soup.find("meta", attrs={"property": name})
        if tag is None:
            tag = soup.find("meta", attrs={"name": name})
        if tag is None:
            return None
        content = clean_text(tag.get("content"))
        if strip_suffix and content:
            content = split_title(content)[0]
        return content or None

    return extractor


def page_title() -> Extractor:
    """<title> text with any trailing " | Site Name" suffix removed"""

    def extractor(soup: BeautifulSoup) -> str | None:
        if soup.title is None:
            return None
        parts = split_title(soup.title.get_text())
        return parts[0] if parts else None

    return extractor


def page_title_suffix(min_len: int = 3, max_len: int = 50) -> Extractor:
    """Last separator-delimited part of <title>, usually the site or company name"""

    def extractor(soup: BeautifulSoup) -> str | None:
        if soup.title is None:
            return None
        parts = split_title(soup.title.get_text())
        if len(parts) < 2:
            return None
        last = parts[-1]
        return last if _within(last, min_len, max_len) else None

    return extractor


def page_title_match(pattern: str) -> Extractor:
    """First regex group matched against <title>"""
    regex = re.compile(pattern, re.IGNORECASE)

    def extractor(soup: BeautifulSoup) -> str | None:
        if soup.title is None:
            return None
        match = regex.search(clean_text(soup.title.get_text()))
        return clean_text(match.group(1)) if match else None

    return extractor


def body_text() -> Extractor:
    """Whole-document text, the last resort for descriptions"""
    return select_block_text("body")


def split_title(text: str | None) -> list[str]:
    """Split a page title on spaced separators, dropping empty parts"""
    return [part.strip() for part in TITLE_SEPARATORS.split(clean_text(text)) if part.strip()]


def company_from_url(url: str) -> str | None:
    """First hostname label after dropping www., e.g. careers.acme.com -> careers"""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return None
    hostname = hostname.removeprefix("www.")
    label = hostname.split(".")[0] if hostname else ""
    return label or None


def select_all_block_text(selector: str) -> Extractor:
    """Multi-line text of every matching element, joined (Lever splits descriptions)"""

    def extractor(soup: BeautifulSoup) -> str | None:
        blocks = [_block_text(element) for element in soup.select(selector)]
        text = "\n\n".join(block for block in blocks if block)
        return text or None

    return extractor


# ==================== Structured data (JSON-LD JobPosting) ====================


def find_job_posting(soup: BeautifulSoup) -> dict[str, Any]:
    """
    Locate a schema.org JobPosting in the page's JSON-LD blocks

    Must run before strip_noise(), which removes <script> tags.

    Returns:
        The JobPosting object, or {} when the page has none
    """
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or "")
        except ValueError:
            continue

        candidates = list(data) if isinstance(data, list) else [data]
        for candidate in list(candidates):
            if isinstance(candidate, dict) and isinstance(candidate.get("@graph"), list):
                candidates.extend(candidate["@graph"])

        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            types = candidate.get("@type")
            types = types if isinstance(types, list) else [types]
            if "JobPosting" in types:
                return candidate
    return {}


def structured(posting: dict[str, Any], *path: str) -> Extractor:
    """Value at path inside a JobPosting dict, as cleaned text"""

    def extractor(_soup: BeautifulSoup) -> str | None:
        value: Any = posting
        for key in path:
            if isinstance(value, list):
                value = value[0] if value else None
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        if isinstance(value, (str, int, float)):
            return clean_text(str(value)) or None
        return None

    return extractor


def structured_description(posting: dict[str, Any]) -> Extractor:
    """JobPosting.description, which is HTML, converted to text"""

    def extractor(_soup: BeautifulSoup) -> str | None:
        description = posting.get("description")
        if not isinstance(description, str):
            return None
        return html_to_text(description, unescape=True) or None

    return extractor


def structured_location(posting: dict[str, Any]) -> Extractor:
    """First JobPosting.jobLocation address as "City, Region, Country" """

    def extractor(_soup: BeautifulSoup) -> str | None:
        locations = posting.get("jobLocation")
        if isinstance(locations, list):
            locations = locations[0] if locations else None
        if not isinstance(locations, dict):
            return None
        address = locations.get("address")
        if isinstance(address, str):
            return clean_text(address) or None
        if not isinstance(address, dict):
            return None

        country = address.get("addressCountry")
        if isinstance(country, dict):
            country = country.get("name")
        parts = [address.get("addressLocality"), address.get("addressRegion"), country]
        text = ", ".join(clean_text(str(p)) for p in parts if p)
        return text or None

    return extractor


def is_structured_remote(posting: dict[str, Any]) -> bool:
    return str(posting.get("jobLocationType", "")).upper() == "TELECOMMUTE"
