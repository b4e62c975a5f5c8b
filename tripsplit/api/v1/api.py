from fastapi import APIRouter
from tripsplit.api.v1.endpoints import members, expenses, trip_settings, settlement

api_router = APIRouter()

api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(trip_settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(settlement.router, prefix="/settlement", tags=["settlement"])
