from typing import Dict

from pydantic import Field

from tripsplit.core.config import settings
from tripsplit.models.base import MongoModel

SETTINGS_DOC_ID = "settings"

BUILTIN_CATEGORIES: Dict[str, str] = {
    "Sightseeing": "🎡",
    "Food": "🍜",
    "Transport": "✈️",
    "Stay": "🏨",
    "Shopping": "🛍️",
    "Fan Events": "🌟",
}


class TripSettings(MongoModel):
    """The single shared settings document (`config/settings`)."""
    id: str = Field(default=SETTINGS_DOC_ID, alias="_id")
    exchange_rate: float = settings.DEFAULT_EXCHANGE_RATE
    custom_categories: Dict[str, str] = {}

    def categories(self) -> Dict[str, str]:
        """Built-in and user-defined category labels with their icons."""
        return {**BUILTIN_CATEGORIES, **self.custom_categories}
