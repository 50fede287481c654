"""
Source adapters.

- base: SourceAdapter contract (failure boundary) + SourceHealth
- rss: GoogleNewsAdapter (primary), FeedAdapter (supplementary feeds)
- youtube: YouTubeAdapter (secondary)
- reddit: RedditAdapter (tertiary)
- static: StaticAdapter (in-process, tests and demo)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from newsradar.config import Settings, SUPPLEMENTARY_FEEDS
from newsradar.sources.base import SourceAdapter, SourceHealth
from newsradar.sources.rss import FeedAdapter, GoogleNewsAdapter
from newsradar.sources.youtube import YouTubeAdapter
from newsradar.sources.reddit import RedditAdapter
from newsradar.sources.static import StaticAdapter, demo_adapter

logger = logging.getLogger(__name__)


@dataclass
class AdapterSet:
    """The adapters one aggregation cycle fans out to."""
    primary: SourceAdapter
    secondary: Optional[SourceAdapter] = None
    tertiary: Optional[SourceAdapter] = None
    feeds: List[SourceAdapter] = field(default_factory=list)

    def all(self) -> List[SourceAdapter]:
        return [a for a in (self.primary, self.secondary, self.tertiary) if a] + list(self.feeds)


def build_adapters(settings: Settings) -> AdapterSet:
    """Construct the network adapters enabled in settings."""
    primary = GoogleNewsAdapter(
        hl=settings.google_news_hl,
        gl=settings.google_news_gl,
        ceid=settings.google_news_ceid,
        timeout=settings.primary_timeout,
        max_items=settings.max_items_per_source,
    )
    secondary = (
        YouTubeAdapter(timeout=settings.secondary_timeout, max_items=settings.max_items_per_source)
        if settings.youtube_enabled else None
    )
    tertiary = (
        RedditAdapter(timeout=settings.tertiary_timeout, max_items=settings.max_items_per_source)
        if settings.reddit_enabled else None
    )

    feeds: List[SourceAdapter] = []
    for feed_id in settings.supplementary_feed_ids():
        source = SUPPLEMENTARY_FEEDS.get(feed_id)
        if not source:
            logger.warning(f"Unknown supplementary feed '{feed_id}', ignoring")
            continue
        feeds.append(FeedAdapter.from_config(
            source, timeout=settings.feed_timeout, max_items=settings.max_items_per_source,
        ))

    adapters = AdapterSet(primary=primary, secondary=secondary, tertiary=tertiary, feeds=feeds)
    logger.info(f"Adapters: {', '.join(a.name for a in adapters.all())}")
    return adapters


def build_demo_adapters() -> AdapterSet:
    """Offline adapter set backed by canned sample items."""
    return AdapterSet(primary=demo_adapter())


__all__ = [
    "AdapterSet", "build_adapters", "build_demo_adapters",
    "SourceAdapter", "SourceHealth",
    "GoogleNewsAdapter", "FeedAdapter", "YouTubeAdapter", "RedditAdapter",
    "StaticAdapter", "demo_adapter",
]
