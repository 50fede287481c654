"""News API router -- read-only views over the retention cache.

Reads never trigger fetching, with one exception: when the cache is empty
(first request before the initial cycle has finished, or after an empty
cycle) the request runs or joins a cycle before answering.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from newsradar.api.dependencies import Aggregator, Cache, verify_api_key
from newsradar.api.ratelimit import api_rate_limit, limiter
from newsradar.api.schemas import CycleReportResponse, NewsItemResponse, NewsListResponse
from newsradar.news.cache import query_items

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NewsListResponse)
@limiter.limit(api_rate_limit)
async def list_news(
    request: Request,
    aggregator: Aggregator,
    cache: Cache,
    min_score: Optional[int] = Query(None, ge=0, description="Minimum score"),
    hours: Optional[float] = Query(None, gt=0, le=24 * 7, description="Only items newer than this"),
    q: Optional[str] = Query(None, description="Text search over title, description, keyword, source"),
    keyword: Optional[str] = Query(None, description="Only items matched by this keyword"),
    limit: int = Query(20, ge=1, le=100),
):
    items = await aggregator.ensure_populated()
    now = datetime.now(timezone.utc)
    selected = query_items(
        items,
        min_score=min_score,
        within=timedelta(hours=hours) if hours else None,
        text=q,
        keyword=keyword,
        limit=limit,
        now=now,
    )
    return NewsListResponse(
        count=len(selected),
        total_cached=len(items),
        published_at=cache.published_at,
        items=[NewsItemResponse.from_item(item, now) for item in selected],
    )


@router.get("/stats")
@limiter.limit(api_rate_limit)
async def news_stats(request: Request, aggregator: Aggregator, cache: Cache):
    stats = cache.stats()
    stats["cycles_completed"] = aggregator.cycles_completed
    stats["recent_cycles"] = [
        CycleReportResponse.from_report(r).model_dump(mode="json") for r in aggregator.history
    ]
    return stats


@router.post(
    "/refresh",
    response_model=CycleReportResponse,
    dependencies=[Depends(verify_api_key)],
)
@limiter.limit(api_rate_limit)
async def refresh(request: Request, aggregator: Aggregator):
    """Run a cycle now, or wait for the one already running."""
    logger.info("Manual refresh requested")
    report = await aggregator.run_cycle()
    return CycleReportResponse.from_report(report)
