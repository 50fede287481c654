"""
Relevance/freshness scoring for candidate items.

Additive integer rules, order-independent:
  +10  keyword in title (case-insensitive)
  +5   keyword in description
  +3   per distinct controversy-lexicon term in title or description
  +15  published within the recency window of `now`

No upper bound. score_item is pure: same item, keyword and clock give the
same integer.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from ..config import CONTROVERSY_LEXICON
from ..schemas import CandidateItem, ensure_utc

TITLE_MATCH_POINTS = 10
DESCRIPTION_MATCH_POINTS = 5
LEXICON_POINTS = 3
RECENCY_POINTS = 15

DEFAULT_WINDOW = timedelta(hours=24)


def is_recent(item: CandidateItem, now: datetime, window: timedelta = DEFAULT_WINDOW) -> bool:
    """Age <= window. An item exactly `window` old is still recent."""
    return ensure_utc(now) - item.published_at <= window


def lexicon_hits(text: str, lexicon: Iterable[str] = CONTROVERSY_LEXICON) -> List[str]:
    """Distinct lexicon terms present in text, in lexicon order."""
    lowered = (text or "").lower()
    return [term for term in dict.fromkeys(t.lower() for t in lexicon) if term in lowered]


def score_item(
    item: CandidateItem,
    keyword: str,
    now: datetime,
    window: timedelta = DEFAULT_WINDOW,
) -> int:
    title = item.title.lower()
    description = item.description.lower()
    needle = (keyword or "").strip().lower()

    score = 0
    if needle and needle in title:
        score += TITLE_MATCH_POINTS
    if needle and needle in description:
        score += DESCRIPTION_MATCH_POINTS

    score += LEXICON_POINTS * len(lexicon_hits(f"{title}\n{description}"))

    if is_recent(item, now, window):
        score += RECENCY_POINTS
    return score
