import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.member import Member, DEFAULT_MEMBERS

logger = logging.getLogger(__name__)


class MemberRepository:
    """Trip roster operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["members"]

    async def list_all(self) -> List[Member]:
        """List every member, ordered by id."""
        docs = await self.collection.find({}).sort("_id", 1).to_list(None)
        return [Member.from_doc(doc) for doc in docs]

    async def get(self, member_id: str) -> Optional[Member]:
        doc = await self.collection.find_one({"_id": member_id})
        if doc:
            return Member.from_doc(doc)
        return None

    async def seed_if_empty(self) -> int:
        """Write the default roster when no member exists yet."""
        if await self.collection.count_documents({}) > 0:
            return 0

        await self.collection.insert_many([m.to_doc() for m in DEFAULT_MEMBERS])
        logger.info("Seeded %d default members", len(DEFAULT_MEMBERS))
        return len(DEFAULT_MEMBERS)

    async def update(self, member_id: str, update_data: dict) -> Optional[Member]:
        """Update name/avatar/color of a member."""
        update_data = {k: v for k, v in update_data.items() if k in ("name", "avatar", "color")}
        if not update_data:
            return await self.get(member_id)

        result = await self.collection.find_one_and_update(
            {"_id": member_id},
            {"$set": update_data},
            return_document=True
        )
        if result:
            return Member.from_doc(result)
        return None
