import math
from functools import reduce
from typing import Any, Dict, Iterable

from tracker.domain import Account, Transaction


def coerce_amount(value: Any) -> float:
    """Convert a stored balance to a number, treating anything unusable as 0.

    Mirrors "convert to number, NaN counts as 0": None, blank or
    non-numeric strings and NaN all give 0.0.
    """
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def apply_transaction(balance: float, t: Transaction) -> float:
    return balance + t.signed_amount


def account_balance(account: Account, trans: Iterable[Transaction]) -> float:
    return reduce(
        lambda acc, t: apply_transaction(acc, t) if t.account_id == account.id else acc,
        trans,
        coerce_amount(account.initial_balance),
    )


def account_balances(
    accounts: Iterable[Account], trans: Iterable[Transaction]
) -> Dict[str, float]:
    trans = tuple(trans)
    return {a.id: account_balance(a, trans) for a in accounts}


def net_assets(balances: Dict[str, float]) -> float:
    return sum(balances.values(), 0.0)


def total_initial_balance(accounts: Iterable[Account]) -> float:
    return sum((coerce_amount(a.initial_balance) for a in accounts), 0.0)
