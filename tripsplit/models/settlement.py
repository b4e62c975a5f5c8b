"""
Settlement report - derived from a snapshot of members and expenses, never stored.

Positive net balance: the group owes the member.
Negative net balance: the member owes the group.
"""

from typing import Dict, List

from pydantic import BaseModel, Field, ConfigDict

from tripsplit.services.currency import Currency


class Transfer(BaseModel):
    """Debtor pays creditor `amount` whole units of settlement currency."""
    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: int


class MemberBalance(BaseModel):
    member_id: str
    name: str
    paid: float
    owed: float
    net: float


class MemberShare(BaseModel):
    """One expense as seen from a single participant."""
    expense_id: str
    description: str
    category: str
    date: str
    time: str
    payer_id: str
    currency: Currency
    amount: float
    share: float  # in settlement currency


class SettlementReport(BaseModel):
    settlement_currency: Currency
    exchange_rate: float
    paid_total: Dict[str, float] = {}
    owed_total: Dict[str, float] = {}
    net_balance: Dict[str, float] = {}
    balances: List[MemberBalance] = []
    transfers: List[Transfer] = []
    warnings: List[str] = []

    def is_settled(self) -> bool:
        return not self.transfers
