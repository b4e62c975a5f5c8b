"""
Expense record - one purchase paid by one member for a group of participants.

Design principles:
- Flat document, one per expense, mirrored verbatim in the `expenses` collection
- Both currency amounts are stored at write time with the rate current at save
- `custom_split` (native currency) overrides the even split when present
- Deletion is permanent, there is no soft-delete flag
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from tripsplit.models.base import MongoModel, utcnow
from tripsplit.services.currency import Currency, PRIMARY


class ExpenseRecord(MongoModel):
    """
    Invariants (enforced by tripsplit.utils.expense_validation before save):
    - amount > 0 and finite
    - participant_ids non-empty and unique
    - custom_split keys are participants and values sum to amount
    """
    amount: float                      # as entered, in `currency`
    currency: Currency = Currency.KRW  # native currency
    amount_primary: float = 0.0
    amount_secondary: float = 0.0

    category: str = ""
    description: str = ""
    notes: Optional[str] = None

    payer_id: str
    participant_ids: List[str]
    custom_split: Optional[Dict[str, float]] = None

    date: str = ""  # YYYY-MM-DD
    time: str = ""  # HH:MM
    timestamp: datetime = Field(default_factory=utcnow)

    def stored_amount(self, currency: Currency) -> float:
        """Amount stored for `currency` at write time."""
        currency = Currency(currency)
        if currency == self.currency:
            return self.amount
        if currency == PRIMARY:
            return self.amount_primary
        return self.amount_secondary

    def has_custom_split(self) -> bool:
        return bool(self.custom_split)
