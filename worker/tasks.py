"""
Async task definitions for the final ranking.
Uses arq for task queue management.
"""
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from arq import cron
from arq.connections import RedisSettings

from config import settings
from config.logging import setup_logging
from database import close_db, init_db
from database.redis_client import RedisClient
from waitlist.exceptions import RankingInProgress
from waitlist.services import RankingService
import structlog

logger = structlog.get_logger()


# Redis settings for arq
def get_redis_settings() -> RedisSettings:
    """Get Redis settings from URL."""
    # Parse redis://[:password@]localhost:6379/0
    parsed = urlparse(settings.redis_url)

    return RedisSettings(
        host=parsed.hostname or 'localhost',
        port=parsed.port or 6379,
        database=int(parsed.path.lstrip('/') or 0),
        password=parsed.password
    )


def _stats_payload(stats) -> Dict[str, Any]:
    return {
        "total_users": stats.total_users,
        "top_user": stats.top_user,
        "jackpot_eligible_count": stats.jackpot_eligible_count,
        "failed_updates": stats.failed_updates,
        "timestamp": stats.timestamp.isoformat(),
    }


async def recalculate_final_points(ctx: dict) -> Optional[Dict[str, Any]]:
    """
    Run the final ranking on demand.
    """
    service = RankingService(ctx["store"])
    try:
        stats = await service.run_final_ranking()
    except RankingInProgress:
        logger.warning("Final ranking skipped: another run is in progress")
        return None
    return _stats_payload(stats)


async def launch_ranking(ctx: dict) -> Optional[Dict[str, Any]]:
    """
    Scheduled job: rank everyone once the launch instant has passed.
    """
    service = RankingService(ctx["store"])
    try:
        stats = await service.run_launch_ranking_once()
    except RankingInProgress:
        logger.info("Launch ranking deferred: another run is in progress")
        return None

    if stats is None:
        return None

    logger.info("Launch ranking completed", total_users=stats.total_users)
    return _stats_payload(stats)


class WorkerSettings:
    """arq worker settings."""

    functions = [
        recalculate_final_points,
        launch_ranking
    ]

    # Cron jobs - check for launch every 15 minutes
    cron_jobs = [
        cron(launch_ranking, minute={0, 15, 30, 45}, unique=True)
    ]

    redis_settings = get_redis_settings()

    max_jobs = settings.worker_concurrency
    job_timeout = settings.ranking_lock_ttl

    @staticmethod
    async def on_startup(ctx):
        """Worker startup hook."""
        setup_logging()
        await init_db()
        store = RedisClient()
        await store.connect()
        ctx["store"] = store
        logger.info("Worker started with launch ranking scheduler")

    @staticmethod
    async def on_shutdown(ctx):
        """Worker shutdown hook."""
        logger.info("Worker shutting down")
        await ctx["store"].close()
        await close_db()
