"""
Aggregation orchestrator: one refresh cycle, end to end.

CYCLE:
  1. Snapshot the keyword set, split into batches (default 5) in order.
  2. Per batch: primary adapter for every keyword, secondary adapter for the
     first N keywords (default 3), tertiary adapter only for keywords that
     are themselves controversy-lexicon terms.
  3. All calls of a batch run concurrently; the batch waits for every call
     to settle. A failing call contributes nothing and never aborts the batch.
  4. Fixed pause between batches (self-imposed rate limit).
  5. Supplementary feeds run one after another; entries are kept only if
     they mention a tracked keyword.
  6. Merge: batches in order (keyword order, then primary/secondary/tertiary),
     then feeds in order. This order decides which duplicate survives.
  7. Score each item, then drop items older than the recency window.
  8. Dedup by title prefix.  9. Stable sort by score.  10. Truncate.
  11. Publish to the retention cache in one swap.

CONCURRENCY:
  Cycles never overlap. A second run_cycle() while one is in flight joins the
  running cycle and gets its report. The cycle task is shielded so a caller
  that gives up (HTTP client disconnect) does not cancel it.
"""

import asyncio
import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Deque, List, Optional, Sequence, Tuple

from ..config import CONTROVERSY_LEXICON, Settings, get_settings
from ..schemas import CandidateItem, CycleReport, utcnow
from ..sources import AdapterSet, SourceAdapter
from .cache import RetentionCache
from .dedup import TitleDeduplicator
from .keywords import KeywordSet
from .scoring import is_recent, score_item

logger = logging.getLogger(__name__)

_HISTORY_SIZE = 20

_LEXICON = frozenset(term.lower() for term in CONTROVERSY_LEXICON)


def partition(terms: Sequence[str], size: int) -> List[List[str]]:
    """Split into consecutive batches of `size`, preserving order."""
    size = max(1, size)
    return [list(terms[i:i + size]) for i in range(0, len(terms), size)]


def is_high_value(term: str) -> bool:
    return term.strip().lower() in _LEXICON


def first_matching_keyword(item: CandidateItem, keywords: Sequence[str]) -> Optional[str]:
    """First tracked keyword (snapshot order) found in title or description."""
    haystack = f"{item.title}\n{item.description}".lower()
    for keyword in keywords:
        if keyword.lower() in haystack:
            return keyword
    return None


class NewsAggregator:
    """
    Drives aggregation cycles and is the only writer of the retention cache.

    Usage:
        aggregator = NewsAggregator(keywords, cache, build_adapters(settings), settings)
        report = await aggregator.run_cycle()
        items = await aggregator.ensure_populated()
    """

    def __init__(
        self,
        keywords: KeywordSet,
        cache: RetentionCache,
        adapters: AdapterSet,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self.keywords = keywords
        self.cache = cache
        self.adapters = adapters
        self._clock = clock
        self._sleep = sleep
        self._dedup = TitleDeduplicator()
        self._inflight: Optional[asyncio.Future] = None
        self._cycle_counter = 0

        self.cycles_completed = 0
        self.last_report: Optional[CycleReport] = None
        self.history: Deque[CycleReport] = deque(maxlen=_HISTORY_SIZE)

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.settings.recency_window_hours)

    @property
    def is_running(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    # ── Public entry points ──────────────────────────────────────────────────

    async def run_cycle(self) -> CycleReport:
        """Run one cycle, or join the one already running."""
        if self.is_running:
            logger.info("Cycle already in progress, waiting for it instead of starting another")
        else:
            self._inflight = asyncio.ensure_future(self._run_cycle())
        return await asyncio.shield(self._inflight)

    async def aclose(self) -> None:
        """Cancel the in-flight cycle, if any. Shutdown path: run_cycle() callers cannot cancel it."""
        if not self.is_running:
            return
        self._inflight.cancel()
        try:
            await self._inflight
        except asyncio.CancelledError:
            pass
        logger.info("In-flight cycle cancelled on shutdown")

    async def ensure_populated(self) -> List[CandidateItem]:
        """Read fallback: run (or join) a cycle when the cache is empty."""
        if self.cache.is_empty:
            logger.info("Cache empty on read, triggering an out-of-band cycle")
            await self.run_cycle()
        return self.cache.read_all()

    # ── Cycle ────────────────────────────────────────────────────────────────

    async def _run_cycle(self) -> CycleReport:
        self._cycle_counter += 1
        report = CycleReport(cycle_id=self._cycle_counter, started_at=self._clock())

        terms = self.keywords.snapshot()
        batches = partition(terms, self.settings.batch_size)
        report.keywords = len(terms)
        report.batches = len(batches)
        logger.info(f"Cycle {report.cycle_id}: {len(terms)} keywords in {len(batches)} batches")

        collected: List[CandidateItem] = []
        for index, batch in enumerate(batches):
            collected.extend(await self._run_batch(batch, report))
            if index < len(batches) - 1 and self.settings.inter_batch_delay > 0:
                await self._sleep(self.settings.inter_batch_delay)

        collected.extend(await self._run_feeds(terms, report))
        report.collected = len(collected)

        scoring_now = self._clock()
        scored = [
            item.model_copy(update={"score": score_item(item, item.matched_keyword, scoring_now, self.window)})
            for item in collected
        ]

        filter_now = self._clock()
        fresh = [item for item in scored if is_recent(item, filter_now, self.window)]
        report.fresh = len(fresh)

        unique = self._dedup.deduplicate(fresh)
        report.unique = len(unique)

        # sorted() is stable: equal scores keep merge order
        ranked = sorted(unique, key=lambda item: item.score, reverse=True)
        ranked = ranked[: self.settings.cache_capacity]

        if not ranked and self.settings.retain_on_empty and not self.cache.is_empty:
            report.kept_previous = True
            report.published = len(self.cache)
            logger.warning(
                f"Cycle {report.cycle_id} produced no items; keeping previous "
                f"{len(self.cache)} cached items (RETAIN_ON_EMPTY)"
            )
        else:
            self.cache.publish(ranked, cycle_id=report.cycle_id)
            report.published = len(ranked)
            if not ranked:
                logger.warning(f"Cycle {report.cycle_id} produced no items; cache cleared")

        report.finished_at = self._clock()
        self.last_report = report
        self.history.append(report)
        self.cycles_completed += 1

        logger.info(
            f"Cycle {report.cycle_id} done in {report.duration_seconds:.1f}s: "
            f"collected {report.collected} -> fresh {report.fresh} -> unique {report.unique} "
            f"-> published {report.published} ({report.failed_invocations}/{report.invocations} calls failed)"
        )
        return report

    def _plan_batch(self, batch: Sequence[str]) -> List[Tuple[str, SourceAdapter]]:
        """(keyword, adapter) calls for one batch, in merge order."""
        calls: List[Tuple[str, SourceAdapter]] = []
        for position, term in enumerate(batch):
            calls.append((term, self.adapters.primary))
            if self.adapters.secondary and position < self.settings.secondary_prefix:
                calls.append((term, self.adapters.secondary))
            if self.adapters.tertiary and is_high_value(term):
                calls.append((term, self.adapters.tertiary))
        return calls

    async def _run_batch(self, batch: Sequence[str], report: CycleReport) -> List[CandidateItem]:
        calls = self._plan_batch(batch)
        report.invocations += len(calls)

        results = await asyncio.gather(
            *[adapter.fetch_outcome(term) for term, adapter in calls],
            return_exceptions=True,
        )

        # gather keeps call order, so this concatenation is deterministic
        items: List[CandidateItem] = []
        for (term, adapter), result in zip(calls, results):
            if isinstance(result, BaseException):
                report.failed_invocations += 1
                logger.warning(f"{adapter.name} raised for '{term}': {result}")
                continue
            fetched, error = result
            if error:
                report.failed_invocations += 1
            items.extend(
                item if item.matched_keyword else item.model_copy(update={"matched_keyword": term})
                for item in fetched
            )
        logger.info(f"Batch {batch}: {len(items)} items from {len(calls)} calls")
        return items

    async def _run_feeds(self, terms: Sequence[str], report: CycleReport) -> List[CandidateItem]:
        """Supplementary feeds, sequentially, keyword-filtered."""
        if not terms:
            return []

        kept: List[CandidateItem] = []
        for feed in self.adapters.feeds:
            report.invocations += 1
            try:
                entries, error = await feed.fetch_outcome("")
            except Exception as e:
                report.failed_invocations += 1
                logger.warning(f"{feed.name} raised: {e}")
                continue
            if error:
                report.failed_invocations += 1

            matched = 0
            for entry in entries:
                keyword = first_matching_keyword(entry, terms)
                if keyword is None:
                    continue
                kept.append(entry.model_copy(update={"matched_keyword": keyword}))
                matched += 1
            logger.debug(f"Feed {feed.name}: {matched}/{len(entries)} entries mention a keyword")
        return kept
