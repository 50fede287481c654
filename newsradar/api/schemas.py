"""API response/request schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from newsradar.schemas import (
    CandidateItem, CycleReport, KeywordCategory, KeywordMutation, TrackedKeyword,
)
from newsradar.shared.helpers import format_age


# -- News --

class NewsItemResponse(BaseModel):
    title: str
    description: str = ""
    url: str = ""
    source: str
    keyword: str = ""
    score: int = 0
    published_at: datetime
    age: str = ""  # "3h ago", "Yesterday", ...

    @classmethod
    def from_item(cls, item: CandidateItem, now: Optional[datetime] = None) -> "NewsItemResponse":
        return cls(
            title=item.title,
            description=item.description,
            url=item.url,
            source=item.source_label,
            keyword=item.matched_keyword,
            score=item.score,
            published_at=item.published_at,
            age=format_age(item.published_at, now),
        )


class NewsListResponse(BaseModel):
    count: int
    total_cached: int
    published_at: Optional[datetime] = None
    items: List[NewsItemResponse] = Field(default_factory=list)


# -- Cycles --

class CycleReportResponse(BaseModel):
    cycle_id: int
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    keywords: int = 0
    batches: int = 0
    invocations: int = 0
    failed_invocations: int = 0
    collected: int = 0
    fresh: int = 0
    unique: int = 0
    published: int = 0
    kept_previous: bool = False

    @classmethod
    def from_report(cls, report: CycleReport) -> "CycleReportResponse":
        return cls(duration_seconds=report.duration_seconds, **report.model_dump())


# -- Keywords --

class KeywordResponse(BaseModel):
    term: str
    category: KeywordCategory
    added_at: datetime

    @classmethod
    def from_entry(cls, entry: TrackedKeyword) -> "KeywordResponse":
        return cls(term=entry.term, category=entry.category, added_at=entry.added_at)


class KeywordListResponse(BaseModel):
    count: int
    keywords: List[KeywordResponse] = Field(default_factory=list)
    by_category: Dict[str, List[str]] = Field(default_factory=dict)


class KeywordMutationRequest(BaseModel):
    terms: str  # one term or a comma-separated list
    category: KeywordCategory = KeywordCategory.TOPIC


class KeywordMutationResponse(BaseModel):
    results: List[KeywordMutation] = Field(default_factory=list)
    tracked: int = 0
