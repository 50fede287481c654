"""
Aggregation core.

- keywords: KeywordSet (tracked terms, thread-safe)
- scoring: additive relevance/freshness score
- dedup: title-prefix deduplication
- cache: RetentionCache (atomic snapshot publish) + read queries
- orchestrator: NewsAggregator (batched fan-out, one cycle end to end)
"""

from newsradar.news.cache import CacheSnapshot, RetentionCache, query_items
from newsradar.news.dedup import TitleDeduplicator, dedup_key, dedupe
from newsradar.news.keywords import KeywordSet
from newsradar.news.orchestrator import NewsAggregator
from newsradar.news.scoring import is_recent, score_item

__all__ = [
    "CacheSnapshot", "RetentionCache", "query_items",
    "TitleDeduplicator", "dedup_key", "dedupe",
    "KeywordSet",
    "NewsAggregator",
    "is_recent", "score_item",
]
