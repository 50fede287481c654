"""
Display helpers for API responses and the CLI.
"""

from datetime import datetime
from typing import Optional

from newsradar.schemas import ensure_utc, utcnow


def format_age(published_at: datetime, now: Optional[datetime] = None) -> str:
    """Human age of a timestamp: "Just now", "5m ago", "3h ago", "Yesterday", "4d ago", or a date."""
    published_at = ensure_utc(published_at)
    seconds = (ensure_utc(now or utcnow()) - published_at).total_seconds()

    if seconds < 60:
        return "Just now"
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days}d ago"
    return published_at.strftime("%d %b %H:%M")


def truncate(text: str, limit: int = 120) -> str:
    """Shorten text for one-line display."""
    if not text or len(text) <= limit:
        return text or ""
    return text[: limit - 3].rstrip() + "..."
