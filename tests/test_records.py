from datetime import date
from itertools import islice

from tracker.domain import Account, Transaction
from tracker.records import (
    UNKNOWN_ACCOUNT,
    account_name,
    filter_records,
    iter_transactions,
    record_rows,
    selected_range,
)


def make_tx(id, date, seq, type="expense", amount=10, acc_id="a1", sub=""):
    return Transaction(id=id, date=date, type=type, main_category="Living",
                       amount=amount, account_id=acc_id, sub_category=sub, seq=seq)


TODAY = date(2024, 1, 10)


def make_sample():
    return (
        make_tx("t1", "2024-01-09", 0),
        make_tx("t2", "2024-01-10", 1),
        make_tx("t3", "2024-01-10", 2),
        make_tx("t4", "2024-01-11", 3),
        make_tx("t5", "2024-01-01", 4),
    )


def test_default_is_today_only_newest_first():
    result = filter_records(make_sample(), today=TODAY)
    assert [t.id for t in result] == ["t3", "t2"]


def test_explicit_range_is_inclusive_and_descending():
    result = filter_records(make_sample(), "2024-01-09", "2024-01-11")
    assert [t.id for t in result] == ["t4", "t3", "t2", "t1"]


def test_default_equals_explicit_today_when_today_has_records():
    trans = make_sample()
    default = filter_records(trans, today=TODAY)
    explicit = filter_records(trans, "2024-01-10", "2024-01-10")
    assert default == explicit


def test_default_is_empty_when_nothing_today():
    trans = make_sample()
    assert filter_records(trans, today=date(2024, 2, 1)) == []
    assert filter_records(trans, "2024-02-01", "2024-02-01") == []


def test_same_day_tie_break_uses_insertion_order_not_id():
    trans = (
        make_tx("zzz", "2024-01-10", 0),
        make_tx("aaa", "2024-01-10", 1),
    )
    assert [t.id for t in filter_records(trans, today=TODAY)] == ["aaa", "zzz"]


def test_iter_transactions_is_lazy():
    calls = {"n": 0}

    def pred(t):
        calls["n"] += 1
        return True

    first = list(islice(iter_transactions(make_sample(), pred), 1))
    assert len(first) == 1
    assert calls["n"] == 1


def test_dangling_account_shows_unknown():
    accounts = (Account("a1", "Wallet", 0),)
    assert account_name(accounts, "a1") == "Wallet"
    assert account_name(accounts, "gone") == UNKNOWN_ACCOUNT

    rows = record_rows(
        (make_tx("t1", "2024-01-10", 0, acc_id="gone", sub="Food"),
         make_tx("t2", "2024-01-10", 1, type="income", amount=5)),
        accounts,
    )
    assert rows[0]["account"] == UNKNOWN_ACCOUNT
    assert rows[0]["category"] == "Living · Food"
    assert rows[0]["amount"] == -10
    assert rows[1]["account"] == "Wallet"
    assert rows[1]["amount"] == 5


def test_selected_range_from_picker_values():
    assert selected_range((date(2024, 1, 1), date(2024, 1, 9))) == ("2024-01-01", "2024-01-09")
    assert selected_range((date(2024, 1, 1),)) == ("2024-01-01", "2024-01-01")
    assert selected_range(date(2024, 1, 1)) == ("2024-01-01", "2024-01-01")
    assert selected_range(()) == (None, None)
    assert selected_range(None) == (None, None)


def test_cleared_picker_falls_back_to_today():
    trans = make_sample()
    assert filter_records(trans, *selected_range(()), today=TODAY) == filter_records(trans, today=TODAY)


def test_accounts_with_same_name_resolve_by_id():
    accounts = (Account("a1", "Wallet", 0), Account("a2", "Wallet", 50))
    trans = (make_tx("t1", "2024-01-10", 0, acc_id="a2"),)
    assert [account_name(accounts, a.id) for a in accounts] == ["Wallet", "Wallet"]
    assert record_rows(trans, accounts)[0]["account"] == "Wallet"
