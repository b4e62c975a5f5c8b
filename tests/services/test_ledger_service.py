import pytest

from tripsplit.services.currency import Currency
from tripsplit.services.ledger_service import LedgerService

RATE = 0.0245


def settle(report):
    remaining = dict(report.net_balance)
    for t in report.transfers:
        remaining[t.from_id] += t.amount
        remaining[t.to_id] -= t.amount
    return remaining


def test_empty_input_gives_zero_balances(members):
    report = LedgerService.compute_settlement(members, [], RATE, Currency.TWD)

    assert report.transfers == []
    assert report.is_settled()
    assert set(report.net_balance.values()) == {0}
    assert [b.member_id for b in report.balances] == ["m1", "m2", "m3", "m4", "m5"]


def test_single_payer_for_everyone(make_expense, members):
    expense = make_expense(50000, currency="TWD", payer_id="m1")

    report = LedgerService.compute_settlement(members, [expense], RATE, Currency.TWD)

    assert len(report.transfers) == 4
    assert {t.to_id for t in report.transfers} == {"m1"}
    assert {t.from_id for t in report.transfers} == {"m2", "m3", "m4", "m5"}
    assert all(t.amount == pytest.approx(10000, abs=1) for t in report.transfers)


def test_even_split_owed_share(make_expense, members):
    expense = make_expense(90000, payer_id="m1", participant_ids=["m1", "m2", "m3"])

    report = LedgerService.compute_settlement(members, [expense], RATE, Currency.KRW)

    assert report.owed_total["m1"] == 30000
    assert report.owed_total["m2"] == 30000
    assert report.owed_total["m3"] == 30000


def test_settlement_closes_every_balance(make_expense, members):
    expenses = [
        make_expense(120000, payer_id="m1"),
        make_expense(48000, payer_id="m2", participant_ids=["m2", "m3", "m4"]),
        make_expense(2500, currency="TWD", payer_id="m5", participant_ids=["m1", "m5"],
                     custom_split={"m1": 1000, "m5": 1500}),
        make_expense(77777, payer_id="m3", participant_ids=["m1", "m2", "m3", "m4"]),
    ]

    report = LedgerService.compute_settlement(members, expenses, RATE, Currency.TWD)

    assert sum(report.net_balance.values()) == pytest.approx(0, abs=1e-6)
    # each whole-unit transfer can be off by half a unit
    slack = 1 + 0.5 * len(report.transfers)
    assert all(abs(v) <= slack for v in settle(report).values())
    for t in report.transfers:
        assert t.amount > 0
        assert t.from_id != t.to_id
        assert report.net_balance[t.from_id] < 0
        assert report.net_balance[t.to_id] > 0


def test_compute_is_idempotent(make_expense, members):
    expenses = [
        make_expense(30000, payer_id="m1"),
        make_expense(900, currency="TWD", payer_id="m4", participant_ids=["m2", "m4"]),
    ]

    first = LedgerService.compute_settlement(members, expenses, RATE, Currency.TWD)
    second = LedgerService.compute_settlement(members, expenses, RATE, Currency.TWD)

    assert first == second


def test_rate_change_moves_totals_proportionally(make_expense, members):
    expenses = [make_expense(100000, payer_id="m1", participant_ids=["m1", "m2"])]

    low = LedgerService.compute_settlement(members, expenses, 0.02, Currency.TWD)
    high = LedgerService.compute_settlement(members, expenses, 0.04, Currency.TWD)

    assert low.paid_total["m1"] == 2000
    assert high.paid_total["m1"] == 4000
    assert high.transfers[0].amount == 2 * low.transfers[0].amount


def test_all_settled_input_has_no_transfers(make_expense, members):
    expenses = [
        make_expense(20000, payer_id="m1", participant_ids=["m1", "m2"]),
        make_expense(20000, payer_id="m2", participant_ids=["m1", "m2"]),
    ]

    report = LedgerService.compute_settlement(members, expenses, RATE, Currency.KRW)

    assert report.paid_total["m1"] == 20000
    assert report.transfers == []


def test_report_serializes_transfer_direction(make_expense, members):
    expense = make_expense(1000, currency="TWD", payer_id="m1", participant_ids=["m1", "m2"])

    report = LedgerService.compute_settlement(members, [expense], RATE, Currency.TWD)
    payload = report.model_dump(mode="json", by_alias=True)

    assert payload["transfers"] == [{"from": "m2", "to": "m1", "amount": 500}]
    assert payload["settlement_currency"] == "TWD"


def test_per_member_detail_lists_participations(make_expense):
    expenses = [
        make_expense(90000, payer_id="m1", participant_ids=["m1", "m2", "m3"], description="BBQ"),
        make_expense(600, currency="TWD", payer_id="m2", participant_ids=["m2", "m4"],
                     custom_split={"m2": 100, "m4": 500}),
        make_expense(5000, payer_id="m3", participant_ids=["m3", "m4"]),
    ]

    detail = LedgerService.per_member_detail("m2", expenses, RATE, Currency.KRW)

    assert [d.expense_id for d in detail] == [expenses[0].id, expenses[1].id]
    assert detail[0].share == 30000
    assert detail[0].description == "BBQ"
    assert detail[1].share == pytest.approx(24490 * 100 / 600)  # 100 of 600 TWD


def test_per_member_detail_matches_owed_total(make_expense, members):
    expenses = [
        make_expense(45000, payer_id="m1"),
        make_expense(800, currency="TWD", payer_id="m2", participant_ids=["m3", "m4"],
                     custom_split={"m3": 300, "m4": 500}),
    ]

    report = LedgerService.compute_settlement(members, expenses, RATE, Currency.TWD)
    detail = LedgerService.per_member_detail("m4", expenses, RATE, Currency.TWD)

    assert sum(d.share for d in detail) == pytest.approx(report.owed_total["m4"])


def test_converted_custom_split_closes(make_expense, members):
    expenses = [
        make_expense(10000, payer_id="m4", participant_ids=["m1", "m2", "m3"],
                     custom_split={"m1": 3333.3, "m2": 3333.3, "m3": 3333.4}),
    ] + [
        make_expense(10100, payer_id="m1", custom_split={m.id: 2020 for m in members})
        for _ in range(10)
    ]

    report = LedgerService.compute_settlement(members, expenses, RATE, Currency.TWD)

    assert report.paid_total["m4"] == 245
    assert sum(report.owed_total.values()) == pytest.approx(sum(report.paid_total.values()))
    assert sum(report.net_balance.values()) == pytest.approx(0, abs=1e-6)
    slack = 1 + 0.5 * len(report.transfers)
    assert all(abs(v) <= slack for v in settle(report).values())
