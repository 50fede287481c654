"""
Tracked keyword set.

Ordered, case-sensitive, process-lifetime. Mutations come from outside the
aggregation cycle (HTTP endpoints, a chat front-end) and may run on other
threads, so every access goes through one lock. The cycle only ever reads
snapshot(), taken once per cycle at batch-partition time.
"""

import logging
import threading
from typing import Dict, List, Optional

from ..config import Settings
from ..schemas import KeywordCategory, KeywordMutation, MutationStatus, TrackedKeyword

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 2


class KeywordSet:
    """
    Usage:
        keywords = KeywordSet()
        keywords.add("CarryMinati", KeywordCategory.ENTITY)   # status=added
        keywords.add("CarryMinati")                            # status=exists
        keywords.snapshot()                                    # ["CarryMinati"]
    """

    def __init__(self):
        self._lock = threading.Lock()
        # dicts keep insertion order
        self._entries: Dict[str, TrackedKeyword] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "KeywordSet":
        keywords = cls()
        for term in settings.entity_seeds():
            keywords.add(term, KeywordCategory.ENTITY)
        for term in settings.topic_seeds():
            keywords.add(term, KeywordCategory.TOPIC)
        logger.info(f"Tracking {len(keywords)} keywords: {keywords.snapshot()}")
        return keywords

    @staticmethod
    def _validate(term: Optional[str]) -> Optional[str]:
        """Return an error message, or None when the term is acceptable."""
        if not term:
            return "keyword is empty"
        if len(term) < MIN_KEYWORD_LENGTH:
            return f"keyword must be at least {MIN_KEYWORD_LENGTH} characters"
        return None

    def add(self, term: str, category: KeywordCategory = KeywordCategory.TOPIC) -> KeywordMutation:
        term = (term or "").strip()
        error = self._validate(term)
        if error:
            return KeywordMutation(term=term, status=MutationStatus.INVALID, message=error)

        with self._lock:
            if term in self._entries:
                return KeywordMutation(
                    term=term, status=MutationStatus.EXISTS,
                    message=f"'{term}' is already tracked",
                )
            self._entries[term] = TrackedKeyword(term=term, category=KeywordCategory(category))

        logger.info(f"Keyword added: '{term}' ({KeywordCategory(category).value})")
        return KeywordMutation(term=term, status=MutationStatus.ADDED, message=f"now tracking '{term}'")

    def remove(self, term: str) -> KeywordMutation:
        term = (term or "").strip()
        error = self._validate(term)
        if error:
            return KeywordMutation(term=term, status=MutationStatus.INVALID, message=error)

        with self._lock:
            removed = self._entries.pop(term, None)

        if removed is None:
            return KeywordMutation(
                term=term, status=MutationStatus.NOT_FOUND,
                message=f"'{term}' is not tracked",
            )
        logger.info(f"Keyword removed: '{term}'")
        return KeywordMutation(term=term, status=MutationStatus.REMOVED, message=f"stopped tracking '{term}'")

    def add_many(self, text: str, category: KeywordCategory = KeywordCategory.TOPIC) -> List[KeywordMutation]:
        """Add comma-separated terms; one outcome per term."""
        return [self.add(part, category) for part in _split_terms(text)]

    def remove_many(self, text: str) -> List[KeywordMutation]:
        return [self.remove(part) for part in _split_terms(text)]

    def snapshot(self) -> List[str]:
        """Stable copy of the ordered terms."""
        with self._lock:
            return list(self._entries)

    def entries(self) -> List[TrackedKeyword]:
        with self._lock:
            return list(self._entries.values())

    def by_category(self, category: KeywordCategory) -> List[str]:
        category = KeywordCategory(category)
        return [e.term for e in self.entries() if e.category == category]

    def category_of(self, term: str) -> Optional[KeywordCategory]:
        with self._lock:
            entry = self._entries.get(term)
        return entry.category if entry else None

    def __contains__(self, term: object) -> bool:
        with self._lock:
            return term in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _split_terms(text: str) -> List[str]:
    parts = [p.strip() for p in (text or "").split(",")]
    return [p for p in parts if p] or [""]
