"""
Configuration management for NewsRadar.
All tunables of the aggregation cycle, the source adapters and the HTTP
surface are read from environment variables (or a .env file).
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Retention cache ──
    # Max items kept after a cycle. Cache is replaced wholesale every cycle.
    cache_capacity: int = Field(default=100, alias="CACHE_CAPACITY")
    # Items older than this (at cycle completion) never enter the cache.
    recency_window_hours: float = Field(default=24.0, alias="RECENCY_WINDOW_HOURS")
    # False = an empty cycle clears the cache (upstream outage shows as "no data").
    # True  = an empty cycle keeps the previous snapshot.
    retain_on_empty: bool = Field(default=False, alias="RETAIN_ON_EMPTY")

    # ── Aggregation cycle ──
    batch_size: int = Field(default=5, alias="BATCH_SIZE")
    # Secondary adapter only runs for the first N keywords of each batch
    secondary_prefix: int = Field(default=3, alias="SECONDARY_PREFIX")
    # Pause between batches (seconds). Rate limit against upstreams, not correctness.
    inter_batch_delay: float = Field(default=2.0, alias="INTER_BATCH_DELAY")
    refresh_interval_minutes: float = Field(default=15.0, alias="REFRESH_INTERVAL_MINUTES")

    # ── Source adapters ──
    primary_timeout: float = Field(default=10.0, alias="PRIMARY_TIMEOUT")
    secondary_timeout: float = Field(default=15.0, alias="SECONDARY_TIMEOUT")
    tertiary_timeout: float = Field(default=15.0, alias="TERTIARY_TIMEOUT")
    feed_timeout: float = Field(default=12.0, alias="FEED_TIMEOUT")
    max_items_per_source: int = Field(default=20, alias="MAX_ITEMS_PER_SOURCE")

    youtube_enabled: bool = Field(default=True, alias="YOUTUBE_ENABLED")
    reddit_enabled: bool = Field(default=True, alias="REDDIT_ENABLED")

    # Google News RSS locale (hl / gl / ceid query params)
    google_news_hl: str = Field(default="en-IN", alias="GOOGLE_NEWS_HL")
    google_news_gl: str = Field(default="IN", alias="GOOGLE_NEWS_GL")
    google_news_ceid: str = Field(default="IN:en", alias="GOOGLE_NEWS_CEID")

    # Comma-separated ids from SUPPLEMENTARY_FEEDS, run sequentially after the batches
    supplementary_feeds: str = Field(
        default="toi_entertainment,ndtv_trending,india_today",
        alias="SUPPLEMENTARY_FEEDS",
    )

    # ── Tracked keywords (seed values, mutable at runtime) ──
    tracked_entities: str = Field(default="CarryMinati", alias="TRACKED_ENTITIES")
    tracked_topics: str = Field(default="drama,controversy", alias="TRACKED_TOPICS")

    # ── HTTP surface ──
    api_key: str = Field(default="", alias="API_KEY")
    # Per-client limit on /api/ routes (slowapi syntax). An empty-cache read runs a full cycle.
    rate_limit: str = Field(default="100/15minutes", alias="RATE_LIMIT")
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    def supplementary_feed_ids(self) -> List[str]:
        return _split_csv(self.supplementary_feeds)

    def entity_seeds(self) -> List[str]:
        return _split_csv(self.tracked_entities)

    def topic_seeds(self) -> List[str]:
        return _split_csv(self.tracked_topics)


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Topic terms that grant a scoring bonus wherever they appear, independent of
# the keyword that triggered the fetch. Keywords equal to one of these terms
# are also the only ones sent to the tertiary (most expensive) adapter.
CONTROVERSY_LEXICON = (
    "drama",
    "controversy",
    "exposed",
    "scandal",
    "fight",
    "viral",
    "trending",
    "breaking",
    "beef",
    "roast",
    "diss",
    "leaked",
    "secret",
)

# Browser-like User-Agent; several feeds and YouTube reject library defaults
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

# Low-volume, keyword-agnostic feeds. Their entries are kept only when they
# mention a tracked keyword.
SUPPLEMENTARY_FEEDS = {
    "toi_entertainment": {
        "id": "toi_entertainment",
        "name": "Times of India",
        "rss_url": "https://timesofindia.indiatimes.com/rssfeeds/1081479906.cms",
        "category": "entertainment",
    },
    "ndtv_trending": {
        "id": "ndtv_trending",
        "name": "NDTV",
        "rss_url": "https://feeds.feedburner.com/ndtvnews-trending-news",
        "category": "trending",
    },
    "india_today": {
        "id": "india_today",
        "name": "India Today",
        "rss_url": "https://www.indiatoday.in/rss/1206514",
        "category": "trending",
    },
    "toi_sports": {
        "id": "toi_sports",
        "name": "Times of India Sports",
        "rss_url": "https://timesofindia.indiatimes.com/rssfeeds/4719148.cms",
        "category": "sports",
    },
    "ndtv_sports": {
        "id": "ndtv_sports",
        "name": "NDTV Sports",
        "rss_url": "https://feeds.feedburner.com/ndtvsports-latest",
        "category": "sports",
    },
    "dawn": {
        "id": "dawn",
        "name": "Dawn",
        "rss_url": "https://www.dawn.com/feeds/home",
        "category": "pakistan",
    },
}
