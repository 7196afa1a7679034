"""Process entry point for the cycle insight engine.

Wires logging, the database pool, and the insight engine together for a
host application (web framework, worker, notebook):

    async with engine_lifespan() as engine:
        insights = await engine.generate_insights(user_id)
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from src.config import Settings, get_settings
from src.cycle_insights.config_loader import get_insight_config, reload_insight_config
from src.cycle_insights.engine import CycleInsightEngine
from src.cycle_insights.store import PostgresCycleStore
from src.services.supabase import close_pool, init_pool

logger = logging.getLogger("cycle_insights")


# ---------- Logging ----------

def configure_logging(settings: Settings | None = None) -> None:
    s = settings or get_settings()
    logging.basicConfig(
        level=s.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


# ---------- Lifespan ----------

@asynccontextmanager
async def engine_lifespan(
    settings: Settings | None = None,
) -> AsyncGenerator[CycleInsightEngine, None]:
    """Open the database pool, yield a ready engine, and close the pool on exit."""
    s = settings or get_settings()
    configure_logging(s)
    logger.info("Starting %s v%s [%s]", s.app_name, s.app_version, s.environment)

    if s.insight_config_path:
        config = reload_insight_config(s.insight_config_path)
    else:
        config = get_insight_config()

    await init_pool(s)
    try:
        yield CycleInsightEngine(PostgresCycleStore(), config)
    finally:
        await close_pool()
        logger.info("%s shut down", s.app_name)
