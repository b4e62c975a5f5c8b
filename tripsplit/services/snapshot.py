from dataclasses import dataclass, field
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.expense import ExpenseRecord
from tripsplit.models.member import Member
from tripsplit.models.trip_settings import TripSettings
from tripsplit.repositories.expense_repo import ExpenseRepository
from tripsplit.repositories.member_repo import MemberRepository
from tripsplit.repositories.settings_repo import SettingsRepository


@dataclass(frozen=True)
class TripSnapshot:
    """Everything settlement needs, read at one point in time."""
    members: List[Member] = field(default_factory=list)
    expenses: List[ExpenseRecord] = field(default_factory=list)
    settings: TripSettings = field(default_factory=TripSettings)


async def load_snapshot(db: AsyncIOMotorDatabase) -> TripSnapshot:
    return TripSnapshot(
        members=await MemberRepository(db).list_all(),
        expenses=await ExpenseRepository(db).list_all(),
        settings=await SettingsRepository(db).get()
    )
