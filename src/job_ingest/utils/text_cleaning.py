"""Text helpers shared by scrapers and connectors"""

import html
import re
from datetime import datetime, timezone

import html2text

REMOTE_TERMS = ("remote", "remoto", "home office", "home-office", "anywhere", "teletrabalho")

_h2t = html2text.HTML2Text()
_h2t.body_width = 0
_h2t.ignore_images = True
_h2t.ignore_links = True
_h2t.ignore_emphasis = True


def clean_text(text: str | None) -> str:
    """Collapse runs of whitespace and strip"""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def nested_text(record: dict, key: str, field: str) -> str | None:
    """Cleaned record[key][field], or None when either level is missing or not the expected type"""
    container = record.get(key)
    if not isinstance(container, dict):
        return None
    value = container.get(field)
    if not isinstance(value, str):
        return None
    return clean_text(value) or None


def strip_tags(text: str | None) -> str:
    """Drop anything that looks like an HTML tag (Adzuna snippets carry stray <strong> tags)"""
    if not text:
        return ""
    return clean_text(re.sub(r"<[^>]*>?", "", text))


def html_to_text(markup: str | None, unescape: bool = False) -> str:
    """
    Convert an HTML description from an API payload to readable plain text

    Args:
        markup: HTML string
        unescape: Decode entities first (Greenhouse double-escapes its content field)
    """
    if not markup:
        return ""
    if unescape:
        markup = html.unescape(markup)
    text = _h2t.handle(markup)
    # html2text leaves blank-line runs between blocks
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def has_remote_term(*texts: str | None) -> bool:
    """Case-insensitive substring test for remote-work terms in any of the texts"""
    haystack = " ".join(t for t in texts if t).lower()
    return any(term in haystack for term in REMOTE_TERMS)


def parse_datetime(value: str | int | float | None) -> datetime | None:
    """
    Best-effort date parsing for API payloads

    Accepts ISO 8601 strings (with or without a trailing Z) and epoch
    milliseconds. Anything else yields None rather than a guessed date.
    """
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    # Date-only prefix, e.g. "2024-05-01T10:00:00.123456789Z" with nanoseconds
    match = re.match(r"(\d{4}-\d{2}-\d{2})", text)
    if match:
        try:
            return datetime.fromisoformat(match.group(1))
        except ValueError:
            return None
    return None
