from typing import Dict, Iterable, List

from tracker.balances import total_initial_balance
from tracker.dates import month_of
from tracker.domain import INCOME, Account, MonthlyPoint, Transaction


def chronological(trans: Iterable[Transaction]) -> List[Transaction]:
    """Oldest first; same-day transactions keep insertion order."""
    return sorted(trans, key=lambda t: (t.date, t.seq, t.id))


def monthly_series(
    trans: Iterable[Transaction], accounts: Iterable[Account]
) -> List[MonthlyPoint]:
    """Income, expense and end-of-month total assets for every month with activity.

    The running total starts from the sum of all initial balances, as if
    every account existed before the first transaction. Months without
    transactions are left out rather than zero-filled.
    """
    running_total = total_initial_balance(accounts)
    buckets: Dict[str, dict] = {}

    for t in chronological(trans):
        month = month_of(t.date)
        bucket = buckets.setdefault(month, {"income": 0.0, "expense": 0.0, "total_assets": 0.0})
        if t.type == INCOME:
            bucket["income"] += t.amount
        else:
            bucket["expense"] += t.amount
        running_total += t.signed_amount
        bucket["total_assets"] = running_total

    # dicts keep insertion order and the walk is chronological
    return [MonthlyPoint(month=m, **values) for m, values in buckets.items()]
