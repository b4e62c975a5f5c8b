from typing import Dict, List

from tripsplit.core.config import settings
from tripsplit.models.settlement import Transfer
from tripsplit.services.currency import round_half_up


class SettlementService:
    @staticmethod
    def solve(net_balance: Dict[str, float], tolerance: float = settings.SETTLEMENT_TOLERANCE) -> List[Transfer]:
        """
        Turn net balances into debtor -> creditor transfers.

        Greedy: the largest debtor pays the largest creditor as much as
        either can absorb, until every balance is within tolerance of zero.
        Each step exhausts at least one party, so there are at most
        debtors + creditors - 1 transfers.
        """
        debtors = [[member_id, amount] for member_id, amount in net_balance.items() if amount < -tolerance]
        creditors = [[member_id, amount] for member_id, amount in net_balance.items() if amount > tolerance]

        # Most negative first / most positive first
        debtors.sort(key=lambda x: x[1])
        creditors.sort(key=lambda x: x[1], reverse=True)

        # A party is done once its remainder drops below this
        settled_below = max(tolerance, 1e-9)

        transfers: List[Transfer] = []
        i = 0
        j = 0

        while i < len(debtors) and j < len(creditors):
            debtor = debtors[i]
            creditor = creditors[j]

            amount = min(abs(debtor[1]), creditor[1])
            rounded = round_half_up(amount)
            if rounded > 0:
                transfers.append(Transfer(from_id=debtor[0], to_id=creditor[0], amount=rounded))

            debtor[1] += amount
            creditor[1] -= amount

            if abs(debtor[1]) < settled_below:
                i += 1
            if creditor[1] < settled_below:
                j += 1

        return transfers
