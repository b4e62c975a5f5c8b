"""
Push-style collection subscriptions on top of MongoDB change streams.

Every change is answered with the full current document list, never a
delta, so consumers simply recompute from the latest snapshot.
Change streams require a replica set or sharded cluster.
"""

import logging
from typing import Awaitable, Callable, List

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

OnChange = Callable[[List[dict]], Awaitable[None]]


async def list_all(db: AsyncIOMotorDatabase, collection_name: str) -> List[dict]:
    """Every document of a collection."""
    return await db[collection_name].find({}).to_list(None)


async def subscribe(db: AsyncIOMotorDatabase, collection_name: str, on_change: OnChange) -> None:
    """
    Deliver the full document list of `collection_name` to `on_change`,
    once immediately and again after each change event. Runs until cancelled.
    """
    collection = db[collection_name]
    await on_change(await list_all(db, collection_name))

    async with collection.watch() as stream:
        logger.info("Watching collection %s", collection_name)
        async for change in stream:
            logger.debug("%s change on %s", change.get("operationType"), collection_name)
            await on_change(await list_all(db, collection_name))
