from fastapi import APIRouter, HTTPException, Depends, status
from tripsplit.db.mongo import get_db
from tripsplit.models.trip_settings import TripSettings
from tripsplit.repositories.settings_repo import SettingsRepository
from tripsplit.schemas.trip_settings import ExchangeRateUpdate, CategoryCreate, TripSettingsResponse
from tripsplit.utils.expense_validation import ExpenseValidationError

router = APIRouter()

def _response(trip_settings: TripSettings) -> TripSettingsResponse:
    return TripSettingsResponse(
        exchange_rate=trip_settings.exchange_rate,
        custom_categories=trip_settings.custom_categories,
        categories=trip_settings.categories()
    )

@router.get("/", response_model=TripSettingsResponse)
async def get_settings(db = Depends(get_db)):
    """Shared exchange rate and category labels"""
    return _response(await SettingsRepository(db).get())

@router.put("/exchange-rate", response_model=TripSettingsResponse)
async def set_exchange_rate(payload: ExchangeRateUpdate, db = Depends(get_db)):
    """Change the shared exchange rate"""
    try:
        trip_settings = await SettingsRepository(db).set_exchange_rate(payload.exchange_rate)
    except ExpenseValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _response(trip_settings)

@router.post("/categories", response_model=TripSettingsResponse, status_code=status.HTTP_201_CREATED)
async def add_category(payload: CategoryCreate, db = Depends(get_db)):
    """Add a custom expense category"""
    try:
        trip_settings = await SettingsRepository(db).add_category(payload.label, payload.icon)
    except ExpenseValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _response(trip_settings)
