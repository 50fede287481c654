"""
Retention cache: the ranked, bounded, in-memory result of the last cycle.

The cache holds one immutable CacheSnapshot. The aggregation cycle builds a
complete new snapshot and publishes it with a single reference assignment,
so readers never need a lock: whichever snapshot they grab is complete. The
old snapshot is simply dropped.

Items are not re-validated between cycles. If a refresh is overdue an item
may be older than the recency window when read; that staleness is bounded
by the refresh interval.

Usage:
    cache = RetentionCache(capacity=100)
    cache.publish(ranked_items, cycle_id=3)   # orchestrator only
    cache.read_all()                          # copy of the current items
    cache.query(min_score=20, text="drama")   # derived read-only slices
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..schemas import CandidateItem, ensure_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class CacheSnapshot:
    items: Tuple[CandidateItem, ...] = ()
    published_at: Optional[datetime] = None
    cycle_id: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class RetentionCache:
    capacity: int = DEFAULT_CAPACITY
    _snapshot: CacheSnapshot = field(default_factory=CacheSnapshot, init=False, repr=False)

    def publish(self, items: Iterable[CandidateItem], cycle_id: Optional[int] = None) -> CacheSnapshot:
        """Replace the whole cache. Items must already be ranked."""
        snapshot = CacheSnapshot(
            items=tuple(items)[: self.capacity],
            published_at=utcnow(),
            cycle_id=cycle_id,
        )
        previous = len(self._snapshot)
        self._snapshot = snapshot
        logger.info(f"Cache published: {previous} -> {len(snapshot)} items (cycle {cycle_id})")
        return snapshot

    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def read_all(self) -> List[CandidateItem]:
        return list(self._snapshot.items)

    @property
    def is_empty(self) -> bool:
        return not self._snapshot.items

    @property
    def published_at(self) -> Optional[datetime]:
        return self._snapshot.published_at

    def __len__(self) -> int:
        return len(self._snapshot)

    def query(self, **filters) -> List[CandidateItem]:
        """Filtered read over the current snapshot. See query_items()."""
        return query_items(self._snapshot.items, **filters)

    def stats(self) -> Dict:
        items = self._snapshot.items
        if not items:
            return {"count": 0, "published_at": _iso(self.published_at), "sources": {}, "keywords": {}}
        return {
            "count": len(items),
            "capacity": self.capacity,
            "published_at": _iso(self.published_at),
            "cycle_id": self._snapshot.cycle_id,
            "top_score": items[0].score,
            "sources": dict(Counter(i.source_label.split(" - ", 1)[0] for i in items)),
            "keywords": dict(Counter(i.matched_keyword for i in items)),
            "newest": _iso(max(i.published_at for i in items)),
            "oldest": _iso(min(i.published_at for i in items)),
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# ── Pure read queries (never touch the cache) ─────────────────────────────────

def filter_by_score(items: Sequence[CandidateItem], min_score: int) -> List[CandidateItem]:
    return [i for i in items if i.score >= min_score]


def filter_recent(
    items: Sequence[CandidateItem],
    window: timedelta,
    now: Optional[datetime] = None,
) -> List[CandidateItem]:
    cutoff = ensure_utc(now or utcnow()) - window
    return [i for i in items if i.published_at >= cutoff]


def search_items(items: Sequence[CandidateItem], text: str) -> List[CandidateItem]:
    """Case-insensitive substring match on title, description, keyword and source."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(items)
    return [
        i for i in items
        if needle in i.title.lower()
        or needle in i.description.lower()
        or needle in i.matched_keyword.lower()
        or needle in i.source_label.lower()
    ]


def query_items(
    items: Sequence[CandidateItem],
    min_score: Optional[int] = None,
    within: Optional[timedelta] = None,
    text: Optional[str] = None,
    keyword: Optional[str] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[CandidateItem]:
    result = list(items)
    if min_score is not None:
        result = filter_by_score(result, min_score)
    if within is not None:
        result = filter_recent(result, within, now)
    if keyword:
        result = [i for i in result if i.matched_keyword.lower() == keyword.lower()]
    if text:
        result = search_items(result, text)
    if limit is not None:
        result = result[: max(0, limit)]
    return result
