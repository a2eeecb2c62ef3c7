"""Broadcast arq worker: the daily puzzle sweep on a fixed wall-clock trigger.

Import path for arq CLI: arq advent.scheduler.worker.WorkerSettings
"""

from __future__ import annotations

import logging

from arq import cron
from arq.connections import RedisSettings

from advent.clock import DailyTrigger
from advent.config import get_settings
from advent.context import CampaignContext, build_context, close_context
from advent.database import close_db, get_session_factory, init_db
from advent.middleware.logging import setup_logging
from advent.scheduler.broadcast import BroadcastScheduler

logger = logging.getLogger(__name__)


async def broadcast_startup(ctx: dict) -> None:  # type: ignore[type-arg]
    """Initialize DB and collaborators on worker startup."""
    settings = get_settings()
    setup_logging(settings)
    await init_db(settings.database_url)
    ctx["campaign"] = build_context(settings, get_session_factory())
    logger.info("Broadcast worker started, trigger %r", daily_trigger())


async def broadcast_shutdown(ctx: dict) -> None:  # type: ignore[type-arg]
    """Clean up on worker shutdown."""
    campaign: CampaignContext | None = ctx.get("campaign")
    if campaign is not None:
        await close_context(campaign)
    await close_db()
    logger.info("Broadcast worker shut down")


async def daily_puzzle_sweep(ctx: dict) -> dict[str, int]:  # type: ignore[type-arg]
    """Scheduled arq task: send today's puzzle to every paid participant who lacks it."""
    campaign: CampaignContext = ctx["campaign"]
    report = await BroadcastScheduler(campaign).sweep()
    return report.as_dict()


def daily_trigger() -> DailyTrigger:
    settings = get_settings()
    return DailyTrigger(settings.sweep_hour, settings.sweep_minute)


def _cron_jobs() -> list:
    trigger = daily_trigger()
    return [
        cron(
            daily_puzzle_sweep,
            hour={trigger.hour},
            minute={trigger.minute},
            second={0},
            unique=True,
            run_at_startup=False,
        ),
    ]


class WorkerSettings:
    """arq worker settings for the daily broadcast."""

    functions = [daily_puzzle_sweep]
    cron_jobs = _cron_jobs()
    on_startup = broadcast_startup
    on_shutdown = broadcast_shutdown
    redis_settings = RedisSettings.from_dsn(get_settings().arq_redis_url)
    max_jobs = 4
    job_timeout = 1800  # 30 minutes for a full sweep
    allow_abort_jobs = True
