"""
Text and timestamp normalization shared by all source adapters.

Adapters in this domain often cannot see an exact publish instant (YouTube
shows "3 hours ago", scraped cards show "2 days ago"). Those are turned into
a best estimate relative to the adapter's clock at fetch time, and when no
signal exists at all the item is stamped with the fetch time itself. The
published_at field is never left empty.
"""

import calendar
import html
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

# Unit → hours. Months and years are approximate.
_UNIT_HOURS = {
    "second": 1 / 3600,
    "sec": 1 / 3600,
    "minute": 1 / 60,
    "min": 1 / 60,
    "hour": 1,
    "hr": 1,
    "day": 24,
    "week": 7 * 24,
    "month": 30 * 24,
    "year": 365 * 24,
}

_RELATIVE_RE = re.compile(
    r"\b(\d+|an?|one)\s*(seconds?|secs?|minutes?|mins?|hours?|hrs?|days?|weeks?|months?|years?)\s+ago\b",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")

MAX_TITLE_CHARS = 200


def parse_relative_time(text: Optional[str], now: datetime) -> Optional[datetime]:
    """Turn "3 hours ago" / "Streamed 1 week ago" / "yesterday" into a datetime.

    Returns None when the text carries no relative-time signal.
    """
    if not text:
        return None
    lowered = text.strip().lower()
    if lowered in ("just now", "now", "today", "moments ago"):
        return now
    if "yesterday" in lowered:
        return now - timedelta(hours=24)

    match = _RELATIVE_RE.search(lowered)
    if not match:
        return None
    count_raw, unit = match.group(1), match.group(2)
    count = 1 if count_raw in ("a", "an", "one") else int(count_raw)

    if unit.endswith("s"):
        unit = unit[:-1]
    hours = _UNIT_HOURS.get(unit)
    if hours is None:
        return None
    return now - timedelta(hours=count * hours)


def estimate_published(text: Optional[str], now: datetime) -> datetime:
    """Best-effort publish time: relative-time text, else the fetch time."""
    return parse_relative_time(text, now) or now


def parse_feed_datetime(entry: Any) -> Optional[datetime]:
    """Read feedparser's published_parsed/updated_parsed (UTC struct_time)."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key) if hasattr(entry, "get") else getattr(entry, key, None)
        if parsed:
            try:
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
            except (TypeError, ValueError, OverflowError):
                continue
    return None


def clean_title(
    title: Optional[str],
    publisher: Optional[str] = None,
    guess_suffix: bool = False,
) -> str:
    """Normalize a headline and trim the source-added " - Publisher" suffix.

    The suffix is cut when it equals the known publisher, or, with
    guess_suffix, when it is short enough to be a publisher name.
    """
    text = _WS_RE.sub(" ", html.unescape(title or "")).strip()
    if " - " in text:
        head, tail = (part.strip() for part in text.rsplit(" - ", 1))
        if head:
            if publisher and tail.lower() == publisher.strip().lower():
                text = head
            elif guess_suffix and not publisher and len(tail.split()) <= 4:
                text = head
    text = text.replace("*", "").replace("`", "'").replace("[", "(").replace("]", ")")
    return text[:MAX_TITLE_CHARS].strip()


def clean_description(text: Optional[str], limit: int = 300) -> str:
    """Strip HTML, decode entities, collapse whitespace and truncate."""
    if not text:
        return ""
    plain = html.unescape(_TAG_RE.sub(" ", text))
    plain = _WS_RE.sub(" ", plain).strip()
    if len(plain) > limit:
        return plain[:limit].rstrip() + "..."
    return plain
