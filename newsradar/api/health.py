"""Health check router -- cache state, last cycle, adapter health, config summary."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from newsradar import __version__
from newsradar.api.dependencies import Aggregator, AppSettings, Cache, Scheduler
from newsradar.api.schemas import CycleReportResponse

router = APIRouter()


@router.get("/")
async def root():
    return {
        "service": "NewsRadar",
        "version": __version__,
        "features": [
            "Google News, YouTube and Reddit keyword search",
            "Supplementary publisher feeds",
            "Relevance and freshness scoring",
            "Title-prefix deduplication",
            "Bounded 24h retention cache",
        ],
    }


@router.get("/health")
async def health(
    request: Request,
    settings: AppSettings,
    aggregator: Aggregator,
    cache: Cache,
    scheduler: Scheduler,
):
    now = datetime.now(timezone.utc)
    started_at = getattr(request.app.state, "started_at", now)
    last = aggregator.last_report

    return {
        "status": "healthy",
        "timestamp": now.isoformat(),
        "uptime_seconds": round((now - started_at).total_seconds(), 1),
        "cache_size": len(cache),
        "cache_published_at": cache.published_at.isoformat() if cache.published_at else None,
        "cycles_completed": aggregator.cycles_completed,
        "cycle_running": aggregator.is_running,
        "scheduler_running": bool(scheduler and scheduler.running),
        "last_cycle": CycleReportResponse.from_report(last).model_dump(mode="json") if last else None,
        "sources": {a.name: a.health.status_report() for a in aggregator.adapters.all()},
        "config": {
            # Cycle
            "batch_size": settings.batch_size,
            "secondary_prefix": settings.secondary_prefix,
            "inter_batch_delay": settings.inter_batch_delay,
            "refresh_interval_minutes": settings.refresh_interval_minutes,
            # Cache
            "cache_capacity": settings.cache_capacity,
            "recency_window_hours": settings.recency_window_hours,
            "retain_on_empty": settings.retain_on_empty,
            # Sources
            "youtube_enabled": settings.youtube_enabled,
            "reddit_enabled": settings.reddit_enabled,
            "supplementary_feeds": settings.supplementary_feed_ids(),
            "auth_enabled": bool(settings.api_key),
            "rate_limit": settings.rate_limit if settings.rate_limit_enabled else None,
        },
    }
