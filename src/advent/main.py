"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from advent.agent import CampaignAgent
from advent.catalog.seed import seed_puzzles
from advent.config import get_settings
from advent.context import build_context, close_context
from advent.database import close_db, get_session, get_session_factory, init_db
from advent.health.router import router as health_router
from advent.leaderboard.router import router as leaderboard_router
from advent.middleware import setup_middleware
from advent.transport.router import router as inbound_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Seed the puzzle catalog (idempotent)
    try:
        async for db in get_session():
            await seed_puzzles(db)
            break
    except Exception:
        logger.warning("Puzzle seeding failed (tables may not exist yet)", exc_info=True)

    campaign = build_context(settings, get_session_factory())
    app.state.campaign = campaign
    app.state.agent = CampaignAgent(campaign)
    await app.state.agent.on_started()

    yield

    await close_context(campaign)
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Advent Puzzle Agent",
        description="Daily paid puzzle campaign over direct messages",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(inbound_router)
    app.include_router(leaderboard_router)

    return app


app = create_app()
