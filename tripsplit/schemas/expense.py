from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from tripsplit.services.currency import Currency

# Fixed width: stored as text and sorted lexically
DATE_PATTERN = r"^(\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01]))?$"
TIME_PATTERN = r"^(([01]\d|2[0-3]):[0-5]\d)?$"


class ExpenseBase(BaseModel):
    amount: float
    currency: Currency = Currency.KRW
    category: str = ""
    description: str = ""
    notes: Optional[str] = None
    payer_id: str
    participant_ids: List[str]
    custom_split: Optional[Dict[str, float]] = None
    date: str = Field("", pattern=DATE_PATTERN, description="YYYY-MM-DD")
    time: str = Field("", pattern=TIME_PATTERN, description="HH:MM")

    model_config = {"from_attributes": True}


class ExpenseCreate(ExpenseBase):
    """Log a new expense."""
    pass


class ExpenseUpdate(BaseModel):
    """Edit an expense. Only fields sent are replaced; `custom_split: null` reverts to even split."""
    amount: Optional[float] = None
    currency: Optional[Currency] = None
    category: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    payer_id: Optional[str] = None
    participant_ids: Optional[List[str]] = None
    custom_split: Optional[Dict[str, float]] = None
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)


class ExpenseResponse(ExpenseBase):
    id: str = Field(validation_alias="_id", serialization_alias="id")
    amount_primary: float
    amount_secondary: float
    timestamp: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class ExpenseDay(BaseModel):
    """Timeline bucket: every expense logged on one date."""
    date: str
    expenses: List[ExpenseResponse]
