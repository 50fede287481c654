"""FastAPI dependency injection -- Depends() patterns using app.state from lifespan."""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request

from newsradar.config import Settings
from newsradar.news.cache import RetentionCache
from newsradar.news.keywords import KeywordSet
from newsradar.news.orchestrator import NewsAggregator
from newsradar.scheduler import CycleScheduler


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_aggregator(request: Request) -> NewsAggregator:
    return request.app.state.aggregator


def get_keywords(request: Request) -> KeywordSet:
    return request.app.state.keywords


def get_cache(request: Request) -> RetentionCache:
    return request.app.state.cache


def get_scheduler(request: Request) -> Optional[CycleScheduler]:
    return getattr(request.app.state, "scheduler", None)


async def verify_api_key(
    request: Request,
    x_api_key: Annotated[Optional[str], Header()] = None,
):
    """API key gate. Empty API_KEY env var = dev mode (all requests pass)."""
    required_key = request.app.state.settings.api_key
    if required_key and x_api_key != required_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


# Type aliases for cleaner route signatures
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Aggregator = Annotated[NewsAggregator, Depends(get_aggregator)]
Keywords = Annotated[KeywordSet, Depends(get_keywords)]
Cache = Annotated[RetentionCache, Depends(get_cache)]
Scheduler = Annotated[Optional[CycleScheduler], Depends(get_scheduler)]
