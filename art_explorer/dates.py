"""Best-effort parsing and display of free-form exhibition dates.

The collection API returns exhibition bounds as loosely formatted strings.
Several fixed formats are tried in order; when none match, a four-digit year
is pulled out of the text, and failing that the raw value is shown as-is.
"""

from __future__ import annotations

import re
from datetime import date, datetime

# Tried in order; "01/02/2020" therefore reads as January 2nd.
DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m",
    "%Y",
]

DISPLAY_FORMAT = "%b %d, %Y"
DATE_UNKNOWN = "Date unknown"

_YEAR_RE = re.compile(r"\b(\d{4})\b")


def parse_date(value: str | None) -> date | None:
    """Parse a date string using the known formats, or return None."""
    if not value:
        return None
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def extract_year(value: str | None) -> str | None:
    """Return the first four-digit year found in the text."""
    if not value:
        return None
    match = _YEAR_RE.search(value)
    return match.group(1) if match else None


def format_date(value: str | None) -> str:
    """Render a single bound for display. Empty input yields an empty string."""
    if not value or not value.strip():
        return ""
    text = value.strip()

    parsed = parse_date(text)
    if parsed is not None:
        # Bare years and year-months should not gain an invented day
        if re.fullmatch(r"\d{4}", text):
            return text
        if re.fullmatch(r"\d{4}-\d{1,2}", text):
            return parsed.strftime("%b %Y")
        return parsed.strftime(DISPLAY_FORMAT)

    return extract_year(text) or text


def format_date_range(begin: str | None, end: str | None) -> str:
    """Derive the display range for an exhibition from its two bounds."""
    begin_text = format_date(begin)
    end_text = format_date(end)

    if begin_text and end_text:
        return f"{begin_text} - {end_text}"
    if begin_text:
        return f"From {begin_text}"
    if end_text:
        return f"Until {end_text}"
    return DATE_UNKNOWN
