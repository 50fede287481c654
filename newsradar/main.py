"""
NewsRadar - Main Entry Point.
FastAPI server and CLI interface.
"""

import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import __version__
from .api import health, keywords, news
from .api.ratelimit import configure_limiter, limiter
from .config import Settings, get_settings
from .news.cache import RetentionCache
from .news.keywords import KeywordSet
from .news.orchestrator import NewsAggregator
from .scheduler import CycleScheduler
from .shared.helpers import format_age, truncate
from .sources import AdapterSet, build_adapters, build_demo_adapters

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_aggregator(settings: Settings, adapters: Optional[AdapterSet] = None) -> NewsAggregator:
    """Wire keyword set, cache and adapters into an aggregator."""
    return NewsAggregator(
        keywords=KeywordSet.from_settings(settings),
        cache=RetentionCache(capacity=settings.cache_capacity),
        adapters=adapters or build_adapters(settings),
        settings=settings,
    )


def create_app(
    settings: Optional[Settings] = None,
    adapters: Optional[AdapterSet] = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """Application factory. Tests pass their own settings/adapters and disable the scheduler."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_settings = settings or get_settings()
        logging.getLogger().setLevel(app_settings.log_level.upper())
        logger.info("Starting NewsRadar...")
        configure_limiter(app_settings)

        aggregator = build_aggregator(app_settings, adapters)
        app.state.settings = app_settings
        app.state.aggregator = aggregator
        app.state.keywords = aggregator.keywords
        app.state.cache = aggregator.cache
        app.state.started_at = datetime.now(timezone.utc)
        app.state.scheduler = None

        if start_scheduler:
            app.state.scheduler = CycleScheduler(aggregator, app_settings.refresh_interval_minutes)
            app.state.scheduler.start()
        else:
            logger.info("Scheduler disabled; cycles run on demand only")

        yield

        if app.state.scheduler:
            await app.state.scheduler.stop()
        await aggregator.aclose()
        logger.info("NewsRadar stopped")

    application = FastAPI(
        title="NewsRadar",
        description="Keyword-driven trending news and social-media aggregation",
        version=__version__,
        lifespan=lifespan,
    )

    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router, tags=["health"])
    application.include_router(news.router, prefix="/api/news", tags=["news"])
    application.include_router(keywords.router, prefix="/api/keywords", tags=["keywords"])
    return application


app = create_app()


# CLI Runner
async def cli_main(args: argparse.Namespace):
    """Run one cycle and print the ranked cache."""
    settings = get_settings()
    adapters = build_demo_adapters() if args.demo else None
    aggregator = build_aggregator(settings, adapters)

    print("\n" + "=" * 60)
    print("NEWSRADAR")
    print("=" * 60 + "\n")

    if args.demo:
        print("Running in DEMO MODE (sample data, no network)\n")
    print(f"Keywords: {', '.join(aggregator.keywords.snapshot())}\n")

    report = await aggregator.run_cycle()
    items = aggregator.cache.read_all()

    print("\n" + "=" * 60)
    print("RESULTS")
    print("=" * 60)
    print(f"Calls: {report.invocations} ({report.failed_invocations} failed)")
    print(f"Collected: {report.collected} -> fresh {report.fresh} -> unique {report.unique}")
    print(f"Published: {report.published}")
    print(f"Runtime: {report.duration_seconds:.2f}s\n")

    now = datetime.now(timezone.utc)
    for rank, item in enumerate(items[: args.limit], start=1):
        print(f"{rank:>3}. [{item.score:>3}] {truncate(item.title, 90)}")
        print(f"       {item.source_label} | {item.matched_keyword} | {format_age(item.published_at, now)}")
        if item.url:
            print(f"       {item.url}")

    if not items:
        print("No items in the last 24 hours.")
    print("=" * 60 + "\n")


def main():
    """Entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="NewsRadar - keyword-driven news aggregation"
    )
    parser.add_argument(
        "--server",
        action="store_true",
        help="Start the FastAPI server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Server port (default: PORT env var or 8000)"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample data instead of live sources"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Items to print after a one-off cycle (default: 20)"
    )

    args = parser.parse_args()

    if args.server:
        import uvicorn
        server_app = create_app(adapters=build_demo_adapters()) if args.demo else app
        port = args.port or get_settings().port
        logger.info(f"Starting server on port {port}...")
        uvicorn.run(server_app, host="0.0.0.0", port=port)
    else:
        asyncio.run(cli_main(args))


if __name__ == "__main__":
    main()
