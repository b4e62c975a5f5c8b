from datetime import timezone

import pytest
from pydantic import ValidationError

from tripsplit.schemas.expense import ExpenseCreate, ExpenseUpdate
from tripsplit.services.expense_service import apply_update, build_expense, derive_amounts, group_by_date
from tripsplit.utils.expense_validation import ExpenseValidationError

RATE = 0.0245


def test_build_expense_stores_both_currency_amounts(make_expense):
    expense = make_expense(90000, currency="KRW")

    assert expense.amount == 90000
    assert expense.amount_primary == 90000
    assert expense.amount_secondary == 2205
    assert expense.custom_split is None
    assert expense.id


def test_build_expense_from_secondary_currency(make_expense):
    expense = make_expense(245, currency="TWD")

    assert expense.amount_secondary == 245
    assert expense.amount_primary == 10000


def test_derive_amounts():
    assert derive_amounts(2000, "KRW", RATE) == {"amount_primary": 2000, "amount_secondary": 49}
    assert derive_amounts(49, "TWD", RATE) == {"amount_primary": 2000, "amount_secondary": 49}


@pytest.mark.parametrize("amount", [0, -100, float("nan"), float("inf")])
def test_rejects_non_positive_amount(make_expense, amount):
    with pytest.raises(ExpenseValidationError):
        make_expense(amount)


def test_rejects_empty_participants(members):
    expense_in = ExpenseCreate(amount=1000, payer_id="m1", participant_ids=[])
    with pytest.raises(ExpenseValidationError, match="at least one participant"):
        build_expense(expense_in, members, RATE)


def test_rejects_duplicate_participants(make_expense):
    with pytest.raises(ExpenseValidationError, match="unique"):
        make_expense(1000, participant_ids=["m1", "m1"])


def test_rejects_unknown_payer(make_expense):
    with pytest.raises(ExpenseValidationError, match="Payer"):
        make_expense(1000, payer_id="ghost")


def test_rejects_unknown_participant(make_expense):
    with pytest.raises(ExpenseValidationError, match="Unknown participants"):
        make_expense(1000, participant_ids=["m1", "ghost"])


def test_rejects_custom_split_with_wrong_sum(make_expense):
    with pytest.raises(ExpenseValidationError, match="does not equal"):
        make_expense(
            90000,
            participant_ids=["m1", "m2", "m3"],
            custom_split={"m1": 30000, "m2": 30000, "m3": 29000},
        )


def test_custom_split_within_tolerance_is_accepted(make_expense):
    expense = make_expense(100, participant_ids=["m1", "m2"], custom_split={"m1": 33.33, "m2": 66.7})
    assert expense.custom_split == {"m1": 33.33, "m2": 66.7}


def test_rejects_custom_split_for_non_participant(make_expense):
    with pytest.raises(ExpenseValidationError, match="non-participants"):
        make_expense(1000, participant_ids=["m1", "m2"], custom_split={"m1": 500, "m3": 500})


def test_rejects_invalid_rate(members):
    expense_in = ExpenseCreate(amount=1000, payer_id="m1", participant_ids=["m1"])
    with pytest.raises(ExpenseValidationError, match="Exchange rate"):
        build_expense(expense_in, members, 0)


def test_update_replaces_only_sent_fields(make_expense, members):
    expense = make_expense(90000, description="Dinner", participant_ids=["m1", "m2", "m3"])

    updated = apply_update(expense, ExpenseUpdate(amount=60000), members, RATE)

    assert updated.id == expense.id
    assert updated.amount == 60000
    assert updated.amount_secondary == 1470
    assert updated.description == "Dinner"
    assert updated.participant_ids == ["m1", "m2", "m3"]


def test_update_clearing_custom_split_reverts_to_even_split(make_expense, members):
    expense = make_expense(100, participant_ids=["m1", "m2"], custom_split={"m1": 30, "m2": 70})

    updated = apply_update(expense, ExpenseUpdate(custom_split=None), members, RATE)

    assert updated.custom_split is None


def test_update_runs_validation(make_expense, members):
    expense = make_expense(1000)
    with pytest.raises(ExpenseValidationError):
        apply_update(expense, ExpenseUpdate(participant_ids=[]), members, RATE)


def test_update_uses_current_rate(make_expense, members):
    expense = make_expense(10000, rate=0.0245)

    updated = apply_update(expense, ExpenseUpdate(description="Taxi"), members, 0.03)

    assert updated.amount_secondary == 300


def test_group_by_date_newest_first(make_expense):
    a = make_expense(1000, date="2025-01-02", time="09:00")
    b = make_expense(2000, date="2025-01-03", time="08:00")
    c = make_expense(3000, date="2025-01-02", time="18:30")

    timeline = group_by_date([a, b, c])

    assert [day for day, _ in timeline] == ["2025-01-03", "2025-01-02"]
    assert [e.id for e in timeline[1][1]] == [c.id, a.id]


def test_build_expense_stamps_utc_time(make_expense):
    expense = make_expense(1000, date="2025-01-02", time="09:00")

    assert expense.timestamp.tzinfo == timezone.utc


@pytest.mark.parametrize("field, value", [("date", "2025-1-2"), ("date", "2025-02-30x"), ("time", "24:00")])
def test_rejects_malformed_date_and_time(field, value):
    with pytest.raises(ValidationError):
        ExpenseCreate(amount=1000, payer_id="m1", participant_ids=["m1"], **{field: value})


def test_empty_date_and_time_are_allowed():
    expense_in = ExpenseCreate(amount=1000, payer_id="m1", participant_ids=["m1"])

    assert (expense_in.date, expense_in.time) == ("", "")
