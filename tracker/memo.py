"""Cached versions of the calculators.

The store hands out tuples of frozen dataclasses, so a snapshot is hashable
and can key an lru_cache directly. Cached results are the same objects the
plain functions return; callers must not mutate them.
"""
from datetime import date
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from tracker.balances import account_balances
from tracker.domain import Account, MonthlyPoint, Transaction, TrendPoint
from tracker.monthly import monthly_series
from tracker.records import filter_records
from tracker.trends import range_trend


@lru_cache(maxsize=32)
def cached_balances(
    accounts: Tuple[Account, ...], trans: Tuple[Transaction, ...]
) -> Dict[str, float]:
    return account_balances(accounts, trans)


@lru_cache(maxsize=32)
def cached_monthly(
    trans: Tuple[Transaction, ...], accounts: Tuple[Account, ...]
) -> List[MonthlyPoint]:
    return monthly_series(trans, accounts)


@lru_cache(maxsize=64)
def cached_trend(
    account_id: str,
    range_key: str,
    trans: Tuple[Transaction, ...],
    accounts: Tuple[Account, ...],
    today: date,
) -> List[TrendPoint]:
    return range_trend(account_id, range_key, trans, accounts, today)


@lru_cache(maxsize=64)
def cached_records(
    trans: Tuple[Transaction, ...],
    start: Optional[str],
    end: Optional[str],
    today: date,
) -> List[Transaction]:
    return filter_records(trans, start, end, today)
