from datetime import date
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from tracker.dates import format_date, today as current_day
from tracker.domain import INCOME, Account, Transaction

UNKNOWN_ACCOUNT = "Unknown account"


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def on_date(day: str):
    def _filter(t: Transaction) -> bool:
        return t.date == day

    return _filter


def by_date_range(start: str, end: str):
    def _filter(t: Transaction) -> bool:
        return start <= t.date <= end

    return _filter


def selected_range(value) -> Tuple[Optional[str], Optional[str]]:
    """Turn a date-picker value into (start, end) for filter_records.

    The picker gives an empty tuple when cleared and a one-element tuple
    while only the start is chosen. Nothing picked means no filter.
    """
    if isinstance(value, date):
        value = (value,)
    days = [d for d in (value or ()) if d is not None]
    if not days:
        return None, None
    return format_date(days[0]), format_date(days[-1])


def newest_first(trans: Iterable[Transaction]) -> List[Transaction]:
    return sorted(trans, key=lambda t: (t.date, t.seq), reverse=True)


def filter_records(
    trans: Iterable[Transaction],
    start: Optional[str] = None,
    end: Optional[str] = None,
    today: Optional[date] = None,
) -> List[Transaction]:
    """Transactions for the history view, newest first.

    Without a range only transactions dated exactly today are returned.
    With a range both ends are inclusive; a missing end defaults to the
    start and vice versa.
    """
    if start is None and end is None:
        pred = on_date(format_date(today or current_day()))
    else:
        pred = by_date_range(start or end, end or start)
    return newest_first(iter_transactions(trans, pred))


def account_name(accounts: Iterable[Account], account_id: str) -> str:
    return next((a.name for a in accounts if a.id == account_id), UNKNOWN_ACCOUNT)


def record_rows(trans: Iterable[Transaction], accounts: Iterable[Account]) -> List[dict]:
    """Flatten transactions into display rows with the account name resolved."""
    accounts = tuple(accounts)
    rows = []
    for t in trans:
        category = t.main_category
        if t.sub_category:
            category = f"{category} · {t.sub_category}"
        rows.append({
            "id": t.id,
            "date": t.date,
            "type": t.type,
            "category": category,
            "account": account_name(accounts, t.account_id),
            "amount": t.amount if t.type == INCOME else -t.amount,
            "note": t.note,
        })
    return rows
