"""
Reddit search adapter (tertiary source).

Public search JSON, newest first, limited to the last day. Reddit rate-limits
anonymous clients aggressively, so the orchestrator only calls this adapter
for controversy-lexicon keywords.
"""

import logging
from datetime import datetime, timezone
from typing import List

from ..schemas import CandidateItem
from .base import SourceAdapter
from .normalize import clean_description, clean_title

logger = logging.getLogger(__name__)

REDDIT_SEARCH_URL = "https://www.reddit.com/search.json"


class RedditAdapter(SourceAdapter):
    name = "reddit"
    kind = "Reddit"
    default_timeout = 15.0

    async def _fetch(self, term: str) -> List[CandidateItem]:
        params = {
            "q": term,
            "sort": "new",
            "t": "day",
            "limit": min(self.max_items, 100),
            "raw_json": 1,
        }
        async with self._client() as client:
            response = await client.get(REDDIT_SEARCH_URL, params=params)
            response.raise_for_status()
            data = response.json()

        children = (data.get("data") or {}).get("children") or []
        items: List[CandidateItem] = []
        for child in children:
            post = child.get("data") or {}
            title = clean_title(post.get("title", ""))
            if not title or post.get("over_18"):
                continue

            published = self._created_at(post.get("created_utc"))
            subreddit = post.get("subreddit")
            permalink = post.get("permalink") or ""

            items.append(CandidateItem(
                title=title,
                description=clean_description(post.get("selftext", "")),
                url=f"https://www.reddit.com{permalink}" if permalink else post.get("url", ""),
                published_at=published,
                source_label=self.label(f"r/{subreddit}" if subreddit else None),
                matched_keyword=term,
            ))
        return items[: self.max_items]

    def _created_at(self, created) -> datetime:
        """created_utc as aware UTC; a missing or malformed value falls back to the clock."""
        if created:
            try:
                return datetime.fromtimestamp(float(created), tz=timezone.utc)
            except (TypeError, ValueError, OverflowError, OSError):
                logger.debug(f"Bad created_utc {created!r}, using fetch time")
        return self._clock()
