from tracker.balances import account_balances, net_assets
from tracker.domain import Account, Transaction
from tracker.monthly import chronological, monthly_series


def make_tx(id, acc_id, type, amount, date, seq=0):
    return Transaction(id=id, date=date, type=type, main_category="Living",
                       amount=amount, account_id=acc_id, seq=seq)


def make_acc(id, initial_balance):
    return Account(id=id, name=id, initial_balance=initial_balance)


def test_empty_ledger_has_no_months():
    assert monthly_series((), ()) == []
    assert monthly_series((), (make_acc("a1", 100),)) == []


def test_months_are_chronological_and_running():
    accounts = (make_acc("a1", 1000), make_acc("a2", 500))
    trans = (
        make_tx("t3", "a1", "expense", 300, "2024-03-02", seq=2),
        make_tx("t1", "a1", "income", 200, "2024-01-15", seq=0),
        make_tx("t2", "a2", "expense", 50, "2024-01-20", seq=1),
    )
    series = monthly_series(trans, accounts)

    assert [p.month for p in series] == ["2024-01", "2024-03"]
    jan, mar = series
    assert (jan.income, jan.expense, jan.total_assets) == (200, 50, 1650)
    assert (mar.income, mar.expense, mar.total_assets) == (0, 300, 1350)


def test_gap_months_are_not_filled():
    trans = (
        make_tx("t1", "a1", "income", 10, "2024-01-01"),
        make_tx("t2", "a1", "income", 10, "2024-06-01"),
    )
    months = [p.month for p in monthly_series(trans, ())]
    assert months == ["2024-01", "2024-06"]


def test_expense_only_month_gets_entry():
    trans = (make_tx("t1", "a1", "expense", 80, "2024-02-10"),)
    (point,) = monthly_series(trans, (make_acc("a1", 100),))
    assert point.income == 0
    assert point.expense == 80
    assert point.total_assets == 20


def test_last_total_assets_matches_net_assets():
    accounts = (make_acc("a1", 100), make_acc("a2", 300))
    trans = (
        make_tx("t1", "a1", "income", 40, "2023-12-31"),
        make_tx("t2", "a2", "expense", 60, "2024-01-01"),
        make_tx("t3", "a1", "expense", 15, "2024-02-14"),
    )
    series = monthly_series(trans, accounts)
    assert series[-1].total_assets == net_assets(account_balances(accounts, trans))


def test_same_day_sorted_by_insertion_sequence():
    trans = (
        make_tx("b", "a1", "income", 1, "2024-01-01", seq=5),
        make_tx("a", "a1", "income", 1, "2024-01-01", seq=9),
        make_tx("c", "a1", "income", 1, "2024-01-01", seq=1),
    )
    assert [t.id for t in chronological(trans)] == ["c", "b", "a"]
