from unittest.mock import AsyncMock, MagicMock

import pytest

from tripsplit.models.member import Member
from tripsplit.schemas.expense import ExpenseCreate
from tripsplit.services.expense_service import build_expense

RATE = 0.0245  # TWD per KRW


@pytest.fixture
def members():
    """Five-member roster."""
    return [Member(id=f"m{i}", name=f"Member {i}") for i in range(1, 6)]


@pytest.fixture
def make_expense(members):
    """Build a validated expense record against the test roster."""
    def _make(amount, payer_id="m1", participant_ids=None, currency="KRW", custom_split=None,
              rate=RATE, **extra):
        expense_in = ExpenseCreate(
            amount=amount,
            currency=currency,
            payer_id=payer_id,
            participant_ids=participant_ids or [m.id for m in members],
            custom_split=custom_split,
            **extra
        )
        return build_expense(expense_in, members, rate)
    return _make


def make_cursor(docs):
    """Motor-like cursor: chainable sort(), awaitable to_list()."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def make_collection():
    collection = MagicMock()
    collection.find = MagicMock(return_value=make_cursor([]))
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.insert_many = AsyncMock()
    collection.update_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_replace = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mock_db():
    """Mock Motor database with members/expenses/config collections."""
    collections = {
        "members": make_collection(),
        "expenses": make_collection(),
        "config": make_collection(),
    }
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections[name]
    db.members = collections["members"]
    db.expenses = collections["expenses"]
    db.config = collections["config"]
    return db


@pytest.fixture
def cursor_of():
    return make_cursor
