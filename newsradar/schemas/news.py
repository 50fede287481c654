"""
News item, keyword and cycle data models.

CandidateItem is the atomic unit of the pipeline: produced by a source
adapter, scored by the orchestrator, and held in the retention cache until
the next cycle replaces it.

Hierarchy: TrackedKeyword → (adapter fetch) → CandidateItem → CycleReport
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import KeywordCategory, MutationStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CandidateItem(BaseModel):
    """
    One normalized piece of content returned by a source adapter.

    Immutable: the orchestrator attaches the score (and, for feed items, the
    matched keyword) by making a copy with model_copy(update=...).
    """
    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    url: str = ""
    published_at: datetime
    source_label: str
    matched_keyword: str = ""
    score: int = 0

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, v):
        return (v or "").strip()

    @field_validator("published_at")
    @classmethod
    def published_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def age(self, now: Optional[datetime] = None) -> timedelta:
        return ensure_utc(now or utcnow()) - self.published_at


class TrackedKeyword(BaseModel):
    """A tracked term with its category tag."""
    model_config = ConfigDict(frozen=True)

    term: str
    category: KeywordCategory = KeywordCategory.TOPIC
    added_at: datetime = Field(default_factory=utcnow)


class KeywordMutation(BaseModel):
    """Result of a keyword add/remove, returned to the caller instead of raising."""
    term: str
    status: MutationStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in (MutationStatus.ADDED, MutationStatus.REMOVED)


class CycleReport(BaseModel):
    """Counters for one completed aggregation cycle."""
    cycle_id: int
    started_at: datetime
    finished_at: Optional[datetime] = None
    keywords: int = 0
    batches: int = 0
    invocations: int = 0
    failed_invocations: int = 0
    collected: int = 0      # raw items from all adapters and feeds
    fresh: int = 0          # after the recency filter
    unique: int = 0         # after dedup
    published: int = 0      # after truncation (what the cache now holds)
    kept_previous: bool = False

    @property
    def duration_seconds(self) -> float:
        if not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()
