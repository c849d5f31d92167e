"""Auto-Assignment Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from autoassign.adapters.persistence.database import async_session_factory, engine
from autoassign.config import settings
from autoassign.infrastructure.api.dependencies import build_run_cycle_uc, get_clock
from autoassign.infrastructure.api.error_handlers import register_error_handlers
from autoassign.infrastructure.api.routes_agents import router as agents_router
from autoassign.infrastructure.api.routes_assignment import router as assignment_router
from autoassign.infrastructure.api.routes_health import router as health_router
from autoassign.infrastructure.api.routes_policy import router as policy_router
from autoassign.infrastructure.scheduler.periodic_runner import PeriodicCycleRunner

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)

    runner = PeriodicCycleRunner(
        session_factory=async_session_factory,
        build_use_case=build_run_cycle_uc,
        clock=get_clock(),
        interval_seconds=settings.cycle_interval_seconds,
        timeout_seconds=settings.cycle_timeout_seconds,
    )
    app.state.runner = runner
    if settings.scheduler_enabled:
        runner.start()
    else:
        logger.info("Periodic auto-assignment disabled, manual trigger only")

    yield

    await runner.stop()
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = FastAPI(
        title="Auto-Assignment Engine",
        description="Routes unassigned support tickets to available agents",
        version="0.1.0",
        lifespan=lifespan,
    )
    register_error_handlers(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(policy_router, prefix="/api")
    app.include_router(assignment_router, prefix="/api")
    app.include_router(agents_router, prefix="/api")

    return app


app = create_app()
