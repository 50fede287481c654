"""
Cross-source deduplication by normalized title prefix.

Key: lower-case title, drop every character that is not a word character or
whitespace, keep the first 50 characters. Equal keys are duplicates and only
the first item (in input order) survives.

This is deliberately approximate. "Foo Bar!!" from one source and "foo bar"
from another collapse, and so would two distinct stories sharing a long
title prefix. Input order is significant: the orchestrator merges batch
results before feed results, so earlier sources win.
"""

import logging
import re
from typing import Iterable, List

from ..schemas import CandidateItem

logger = logging.getLogger(__name__)

DEFAULT_PREFIX_LENGTH = 50

_NON_WORD_RE = re.compile(r"[^\w\s]")


def dedup_key(title: str, prefix_length: int = DEFAULT_PREFIX_LENGTH) -> str:
    return _NON_WORD_RE.sub("", (title or "").lower())[:prefix_length]


def dedupe(
    items: Iterable[CandidateItem],
    prefix_length: int = DEFAULT_PREFIX_LENGTH,
) -> List[CandidateItem]:
    """Order-preserving, first-occurrence-wins. Idempotent."""
    seen = set()
    unique = []
    for item in items:
        key = dedup_key(item.title, prefix_length)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


class TitleDeduplicator:
    """
    Title-prefix dedup stage used by the aggregation cycle.

    Same semantics as dedupe(); adds a log line with the removal count.
    """

    def __init__(self, prefix_length: int = DEFAULT_PREFIX_LENGTH):
        self.prefix_length = prefix_length

    def deduplicate(self, items: List[CandidateItem]) -> List[CandidateItem]:
        if not items:
            return []
        unique = dedupe(items, self.prefix_length)
        removed = len(items) - len(unique)
        if removed:
            logger.info(f"Dedup: {len(items)} -> {len(unique)} items ({removed} duplicates removed)")
        return unique
