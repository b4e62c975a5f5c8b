from typing import Dict

from pydantic import BaseModel, Field


class ExchangeRateUpdate(BaseModel):
    """New shared rate: secondary units per one primary unit."""
    exchange_rate: float = Field(..., gt=0, allow_inf_nan=False)


class CategoryCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=40)
    icon: str = Field("💸", max_length=8)


class TripSettingsResponse(BaseModel):
    exchange_rate: float
    custom_categories: Dict[str, str]
    categories: Dict[str, str]
