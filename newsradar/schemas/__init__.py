"""
Schemas package - data models for NewsRadar.

  - base.py: enums (keyword category, mutation status)
  - news.py: CandidateItem, TrackedKeyword, KeywordMutation, CycleReport
"""

from newsradar.schemas.base import KeywordCategory, MutationStatus
from newsradar.schemas.news import (
    CandidateItem, TrackedKeyword, KeywordMutation, CycleReport,
    ensure_utc, utcnow,
)

__all__ = [
    "KeywordCategory", "MutationStatus",
    "CandidateItem", "TrackedKeyword", "KeywordMutation", "CycleReport",
    "ensure_utc", "utcnow",
]
