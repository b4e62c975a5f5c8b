from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.trip_settings import TripSettings, SETTINGS_DOC_ID
from tripsplit.services.currency import is_valid_rate
from tripsplit.utils.expense_validation import ExpenseValidationError, normalize_category_label


class SettingsRepository:
    """The shared `config/settings` document: exchange rate and custom categories."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["config"]

    async def get(self) -> TripSettings:
        """Current settings, falling back to defaults when the document is missing."""
        doc = await self.collection.find_one({"_id": SETTINGS_DOC_ID})
        if doc:
            return TripSettings.from_doc(doc)
        return TripSettings()

    async def set_exchange_rate(self, rate: float) -> TripSettings:
        """Persist a new shared rate. Stored expenses are not rewritten."""
        if not is_valid_rate(rate):
            raise ExpenseValidationError(f"Exchange rate must be a positive number, got {rate!r}")

        await self.collection.update_one(
            {"_id": SETTINGS_DOC_ID},
            {"$set": {"exchange_rate": float(rate)}},
            upsert=True
        )
        return await self.get()

    async def add_category(self, label: str, icon: str) -> TripSettings:
        """Register a user-defined category label."""
        current = await self.get()
        label = normalize_category_label(label, current.categories().keys())

        await self.collection.update_one(
            {"_id": SETTINGS_DOC_ID},
            {"$set": {f"custom_categories.{label}": icon}},
            upsert=True
        )
        return await self.get()
