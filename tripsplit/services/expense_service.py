from typing import Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.base import utcnow
from tripsplit.models.expense import ExpenseRecord
from tripsplit.models.member import Member
from tripsplit.repositories.expense_repo import ExpenseRepository
from tripsplit.repositories.member_repo import MemberRepository
from tripsplit.repositories.settings_repo import SettingsRepository
from tripsplit.schemas.expense import ExpenseCreate, ExpenseUpdate
from tripsplit.services.currency import Currency, PRIMARY, is_valid_rate, to_primary, to_secondary
from tripsplit.utils.expense_validation import ExpenseValidationError, validate_expense_fields


def derive_amounts(amount: float, currency: Currency, exchange_rate: float) -> Dict[str, float]:
    """Both stored currency amounts for `amount` entered in `currency`."""
    if Currency(currency) == PRIMARY:
        return {"amount_primary": amount, "amount_secondary": to_secondary(amount, exchange_rate)}
    return {"amount_primary": to_primary(amount, exchange_rate), "amount_secondary": amount}


def build_expense(
    expense_in: ExpenseCreate,
    members: Iterable[Member],
    exchange_rate: float,
    expense_id: Optional[str] = None
) -> ExpenseRecord:
    """
    Validate an expense and build the record to store.

    Raises ExpenseValidationError before anything is written.
    """
    if not is_valid_rate(exchange_rate):
        raise ExpenseValidationError(f"Exchange rate must be a positive number, got {exchange_rate!r}")
    validate_expense_fields(
        expense_in.amount,
        expense_in.payer_id,
        expense_in.participant_ids,
        expense_in.custom_split,
        [m.id for m in members]
    )

    data = expense_in.model_dump()
    data.update(derive_amounts(expense_in.amount, expense_in.currency, exchange_rate))
    data["custom_split"] = expense_in.custom_split or None
    data["timestamp"] = utcnow()
    if expense_id is not None:
        data["_id"] = expense_id
    return ExpenseRecord.model_validate(data)


def apply_update(
    existing: ExpenseRecord,
    expense_in: ExpenseUpdate,
    members: Iterable[Member],
    exchange_rate: float
) -> ExpenseRecord:
    """Merge the fields sent in `expense_in` over `existing` and revalidate."""
    merged = existing.model_dump(include=set(ExpenseCreate.model_fields))
    changes = expense_in.model_dump(exclude_unset=True)
    merged.update({k: v for k, v in changes.items() if v is not None or k in ("custom_split", "notes")})
    return build_expense(ExpenseCreate.model_validate(merged), members, exchange_rate, expense_id=existing.id)


def group_by_date(expenses: Iterable[ExpenseRecord]) -> List[tuple]:
    """Timeline buckets as (date, expenses), newest date and time first."""
    by_date: Dict[str, List[ExpenseRecord]] = {}
    for expense in expenses:
        by_date.setdefault(expense.date, []).append(expense)

    return [
        (day, sorted(by_date[day], key=lambda e: e.time, reverse=True))
        for day in sorted(by_date, reverse=True)
    ]


class ExpenseService:
    @staticmethod
    async def create(db: AsyncIOMotorDatabase, expense_in: ExpenseCreate) -> ExpenseRecord:
        """Log a new expense using the current roster and rate."""
        members = await MemberRepository(db).list_all()
        trip_settings = await SettingsRepository(db).get()

        expense = build_expense(expense_in, members, trip_settings.exchange_rate)
        return await ExpenseRepository(db).create(expense)

    @staticmethod
    async def update(db: AsyncIOMotorDatabase, expense_id: str, expense_in: ExpenseUpdate) -> Optional[ExpenseRecord]:
        repo = ExpenseRepository(db)
        existing = await repo.get(expense_id)
        if not existing:
            return None

        members = await MemberRepository(db).list_all()
        trip_settings = await SettingsRepository(db).get()

        expense = apply_update(existing, expense_in, members, trip_settings.exchange_rate)
        return await repo.update(expense)

    @staticmethod
    async def delete(db: AsyncIOMotorDatabase, expense_id: str) -> bool:
        return await ExpenseRepository(db).delete(expense_id)
