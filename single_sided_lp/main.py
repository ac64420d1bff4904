from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from single_sided_lp.api.routers.swap_and_join import router as swap_and_join_router
from single_sided_lp.api.routers.ticks import router as ticks_router
from single_sided_lp.infrastructure.db.engine import create_schema, get_engine
from single_sided_lp.shared.config import get_settings


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if settings.database_dsn:
        create_schema(get_engine(settings.database_dsn))
        logger.info("main: schema_ready")
    else:
        logger.warning("main: database_dsn_missing")
    yield


app = FastAPI(title="Single-sided LP API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(swap_and_join_router)
app.include_router(ticks_router)
