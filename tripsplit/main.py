import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tripsplit.core.config import settings
from tripsplit.core.logging_config import configure_logging
from tripsplit.db.mongo import connect_to_mongo, close_mongo_connection, get_db
from tripsplit.repositories.member_repo import MemberRepository
from tripsplit.services.settlement_feed import SettlementFeed
from tripsplit.api.v1.api import api_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await connect_to_mongo()
    await MemberRepository(get_db()).seed_if_empty()

    feed_task = None
    if settings.ENABLE_LIVE_UPDATES:
        feed = SettlementFeed()
        app.state.settlement_feed = feed
        feed_task = feed.start(get_db())
        logger.info("Live settlement updates enabled")

    yield

    if feed_task is not None and not feed_task.done():
        feed_task.cancel()
        with suppress(asyncio.CancelledError):
            await feed_task
    await close_mongo_connection()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {"message": "Welcome to Trip Split API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
