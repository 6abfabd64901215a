from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from tracker.balances import apply_transaction, coerce_amount
from tracker.dates import format_date, iter_days, subtract, today as current_day
from tracker.domain import Account, Transaction, TrendPoint
from tracker.errors import UnknownRangeError

WEEK = "week"
MONTH = "month"
HALF_YEAR = "halfYear"
YEAR = "year"

# keyword arguments for dates.subtract
RANGES: Dict[str, dict] = {
    WEEK: {"days": 7},
    MONTH: {"months": 1},
    HALF_YEAR: {"months": 6},
    YEAR: {"years": 1},
}


def window_start(range_key: str, today: date) -> date:
    """First day of a trend window ending today.

    Month-based ranges step back by calendar months, so the window length
    depends on the current date: "month" on 2024-03-31 starts on 2024-02-29.
    """
    try:
        offset = RANGES[range_key]
    except KeyError:
        raise UnknownRangeError(range_key) from None
    return subtract(today, **offset)


def carry_forward_balance(
    account: Account, trans: Iterable[Transaction], start: date
) -> float:
    """Account balance accumulated from everything dated before start."""
    start_str = format_date(start)
    balance = coerce_amount(account.initial_balance)
    for t in trans:
        if t.account_id == account.id and t.date < start_str:
            balance = apply_transaction(balance, t)
    return balance


def range_trend(
    account_id: str,
    range_key: str,
    trans: Iterable[Transaction],
    accounts: Iterable[Account],
    today: Optional[date] = None,
) -> List[TrendPoint]:
    """Daily running balance of one account from the window start to today.

    Every day of the window gets a point, including days without activity.
    An unknown account id gives an empty list.
    """
    account = next((a for a in accounts if a.id == account_id), None)
    if account is None:
        return []

    today = today or current_day()
    start = window_start(range_key, today)
    trans = tuple(t for t in trans if t.account_id == account_id)

    by_day: Dict[str, List[Transaction]] = defaultdict(list)
    for t in trans:
        by_day[t.date].append(t)

    balance = carry_forward_balance(account, trans, start)
    points = []
    for day in iter_days(start, today):
        key = format_date(day)
        for t in by_day.get(key, ()):
            balance = apply_transaction(balance, t)
        points.append(TrendPoint(date=key, value=balance))
    return points
