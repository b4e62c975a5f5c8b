from typing import Iterable, List

from tripsplit.core.config import settings
from tripsplit.models.expense import ExpenseRecord
from tripsplit.models.member import Member
from tripsplit.models.settlement import MemberBalance, MemberShare, SettlementReport
from tripsplit.services.balance_service import aggregate_balances, participant_shares
from tripsplit.services.currency import Currency
from tripsplit.services.settlement_service import SettlementService


class LedgerService:
    """
    Entry point for settlement figures.

    Every call is a pure function of the snapshot it is given (roster,
    expenses, rate, settlement currency); nothing is cached between calls,
    so it can be re-run on every store update.
    """

    @staticmethod
    def compute_settlement(
        members: Iterable[Member],
        expenses: Iterable[ExpenseRecord],
        exchange_rate: float,
        settlement_currency: Currency = Currency(settings.SETTLEMENT_CURRENCY)
    ) -> SettlementReport:
        """Balances per member plus the transfers that settle them."""
        members = list(members)
        balances = aggregate_balances(members, expenses, exchange_rate, settlement_currency)

        return SettlementReport(
            settlement_currency=settlement_currency,
            exchange_rate=exchange_rate,
            paid_total=balances.paid_total,
            owed_total=balances.owed_total,
            net_balance=balances.net_balance,
            balances=[
                MemberBalance(
                    member_id=m.id,
                    name=m.name,
                    paid=balances.paid_total[m.id],
                    owed=balances.owed_total[m.id],
                    net=balances.net_balance[m.id]
                )
                for m in members
            ],
            transfers=SettlementService.solve(balances.net_balance),
            warnings=balances.warnings
        )

    @staticmethod
    def per_member_detail(
        member_id: str,
        expenses: Iterable[ExpenseRecord],
        exchange_rate: float,
        settlement_currency: Currency = Currency(settings.SETTLEMENT_CURRENCY)
    ) -> List[MemberShare]:
        """Expenses `member_id` takes part in, with that member's share of each."""
        details = []
        for expense in expenses:
            if member_id not in expense.participant_ids:
                continue

            shares = participant_shares(expense, settlement_currency, exchange_rate)
            details.append(
                MemberShare(
                    expense_id=expense.id,
                    description=expense.description,
                    category=expense.category,
                    date=expense.date,
                    time=expense.time,
                    payer_id=expense.payer_id,
                    currency=expense.currency,
                    amount=expense.amount,
                    share=shares[member_id]
                )
            )
        return details
