from typing import List
from fastapi import APIRouter, HTTPException, Depends, WebSocket, WebSocketDisconnect, status
from tripsplit.core.config import settings
from tripsplit.db.mongo import get_db
from tripsplit.models.settlement import SettlementReport, MemberShare
from tripsplit.services.currency import Currency
from tripsplit.services.ledger_service import LedgerService
from tripsplit.services.snapshot import load_snapshot

router = APIRouter()

@router.get("/", response_model=SettlementReport, response_model_by_alias=True)
async def get_settlement(db = Depends(get_db)):
    """Balances and settling transfers for the current data"""
    snapshot = await load_snapshot(db)
    return LedgerService.compute_settlement(
        snapshot.members,
        snapshot.expenses,
        snapshot.settings.exchange_rate,
        Currency(settings.SETTLEMENT_CURRENCY)
    )

@router.get("/members/{member_id}", response_model=List[MemberShare])
async def get_member_detail(member_id: str, db = Depends(get_db)):
    """Expenses a member shares in, with their share of each"""
    snapshot = await load_snapshot(db)
    if member_id not in {m.id for m in snapshot.members}:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return LedgerService.per_member_detail(
        member_id,
        snapshot.expenses,
        snapshot.settings.exchange_rate,
        Currency(settings.SETTLEMENT_CURRENCY)
    )

@router.websocket("/live")
async def settlement_live(websocket: WebSocket):
    """Push a fresh settlement report on every data change"""
    feed = getattr(websocket.app.state, "settlement_feed", None)
    if feed is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Live updates are disabled")
        return

    await websocket.accept()
    queue = feed.subscribe()
    try:
        while True:
            report = await queue.get()
            if report is None:
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason="Live updates stopped")
                break
            await websocket.send_json(report.model_dump(mode="json", by_alias=True))
    except WebSocketDisconnect:
        pass
    finally:
        feed.unsubscribe(queue)
