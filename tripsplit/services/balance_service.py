"""
Balance aggregation - folds expenses into per-member paid and owed totals.

Algorithm:
1. Start every member at paid = owed = 0
2. Value each expense in the settlement currency (current rate for foreign records)
3. Credit the payer with the full value
4. Debit each participant with their share (custom split or even split)
5. net = paid - owed

Records pointing at ids missing from the roster are skipped, not rejected:
the roster and expense collections are synced independently.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from tripsplit.models.expense import ExpenseRecord
from tripsplit.models.member import Member
from tripsplit.services.currency import Currency, convert, is_valid_rate

logger = logging.getLogger(__name__)


class ReferentialWarning(UserWarning):
    """An expense refers to a member id that is not in the current roster."""
    pass


@dataclass
class Balances:
    paid_total: Dict[str, float] = field(default_factory=dict)
    owed_total: Dict[str, float] = field(default_factory=dict)
    net_balance: Dict[str, float] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def value_in(expense: ExpenseRecord, settlement_currency: Currency, exchange_rate: float) -> float:
    """Expense value in the settlement currency."""
    if Currency(expense.currency) == Currency(settlement_currency):
        return expense.stored_amount(settlement_currency)
    return convert(expense.amount, expense.currency, settlement_currency, exchange_rate)


def participant_shares(
    expense: ExpenseRecord,
    settlement_currency: Currency,
    exchange_rate: float
) -> Dict[str, float]:
    """
    What each participant of `expense` owes, in the settlement currency.

    Custom split entries are taken as fractions of the split total and
    applied to the record's settlement value, unrounded, so the shares add
    up to what the payer is credited.
    """
    if not expense.participant_ids:
        return {}

    value = value_in(expense, settlement_currency, exchange_rate)

    if expense.has_custom_split():
        split_total = sum(expense.custom_split.get(pid, 0.0) for pid in expense.participant_ids)
        if split_total <= 0:
            return {pid: 0.0 for pid in expense.participant_ids}
        return {
            pid: value * expense.custom_split.get(pid, 0.0) / split_total
            for pid in expense.participant_ids
        }

    share = value / len(expense.participant_ids)
    return {pid: share for pid in expense.participant_ids}


def aggregate_balances(
    members: Iterable[Member],
    expenses: Iterable[ExpenseRecord],
    exchange_rate: float,
    settlement_currency: Currency
) -> Balances:
    """Fold `expenses` into paid, owed and net totals for every member."""
    balances = Balances()
    for member in members:
        balances.paid_total[member.id] = 0.0
        balances.owed_total[member.id] = 0.0

    if not is_valid_rate(exchange_rate):
        balances.warnings.append(
            f"Exchange rate {exchange_rate!r} is invalid; foreign amounts were not converted"
        )

    def skip(expense: ExpenseRecord, member_id: str, role: str) -> None:
        warning = ReferentialWarning(
            f"Expense {expense.id} references unknown {role} '{member_id}'; contribution skipped"
        )
        logger.warning("%s", warning)
        balances.warnings.append(str(warning))

    for expense in expenses:
        value = value_in(expense, settlement_currency, exchange_rate)

        if expense.payer_id in balances.paid_total:
            balances.paid_total[expense.payer_id] += value
        else:
            skip(expense, expense.payer_id, "payer")

        for pid, share in participant_shares(expense, settlement_currency, exchange_rate).items():
            if pid in balances.owed_total:
                balances.owed_total[pid] += share
            else:
                skip(expense, pid, "participant")

    for member_id in balances.paid_total:
        balances.net_balance[member_id] = balances.paid_total[member_id] - balances.owed_total[member_id]

    return balances
