import logging
import random
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from tracker import memo
from tracker.balances import net_assets
from tracker.dates import today as current_day
from tracker.domain import Account, MonthlyPoint, Transaction, TrendPoint
from tracker.errors import ValidationError
from tracker.events import (
    ACCOUNT_ADDED,
    ACCOUNT_DELETED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    EventBus,
)
from tracker.functional import validate_account_form, validate_transaction_form
from tracker.storage import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)


def random_color() -> str:
    return f"hsl({random.uniform(0, 360):.0f}, 70%, 60%)"


class LedgerStore:
    """Owns the accounts and transactions of one user.

    Collections are immutable tuples that get replaced on every mutation,
    after which both snapshots are rewritten. With no data_dir nothing is
    persisted. Deleting an account leaves its transactions in place; they
    simply stop counting towards any balance.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None, bus: Optional[EventBus] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self.bus = bus or EventBus()
        self._accounts: Tuple[Account, ...] = ()
        self._transactions: Tuple[Transaction, ...] = ()
        self._next_seq = 0
        self.version = 0

    @classmethod
    def open(cls, data_dir: Union[str, Path], bus: Optional[EventBus] = None) -> "LedgerStore":
        store = cls(data_dir, bus)
        store.load()
        return store

    @property
    def accounts(self) -> Tuple[Account, ...]:
        return self._accounts

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def load(self) -> None:
        if self.data_dir is None:
            return
        self._accounts, self._transactions = load_snapshot(self.data_dir)
        self._next_seq = max((t.seq for t in self._transactions), default=-1) + 1
        self.version += 1
        logger.info("Opened ledger at %s (%d accounts, %d transactions)",
                    self.data_dir, len(self._accounts), len(self._transactions))

    def _commit(
        self,
        accounts: Tuple[Account, ...],
        transactions: Tuple[Transaction, ...],
        event: str,
        payload: dict,
    ) -> None:
        self._accounts = accounts
        self._transactions = transactions
        self.version += 1
        if self.data_dir is not None:
            save_snapshot(self.data_dir, accounts, transactions)
        self.bus.publish(event, payload)

    # --- accounts

    def add_account(self, name: str, initial_balance: Any, color: Optional[str] = None) -> Account:
        account = Account(
            id=uuid4().hex,
            name=name,
            initial_balance=initial_balance,
            color=color or random_color(),
        )
        self._commit(self._accounts + (account,), self._transactions,
                     ACCOUNT_ADDED, {"account_id": account.id, "name": name})
        return account

    def delete_account(self, account_id: str) -> bool:
        remaining = tuple(a for a in self._accounts if a.id != account_id)
        if len(remaining) == len(self._accounts):
            return False
        orphaned = sum(1 for t in self._transactions if t.account_id == account_id)
        if orphaned:
            logger.warning("Account %s deleted with %d transactions still referencing it",
                           account_id, orphaned)
        self._commit(remaining, self._transactions,
                     ACCOUNT_DELETED, {"account_id": account_id, "orphaned": orphaned})
        return True

    def submit_account(self, form: Mapping[str, Any]) -> Account:
        result = validate_account_form(form)
        if result.is_left():
            raise ValidationError(result.error)
        return self.add_account(**result.value)

    # --- transactions

    def add_transaction(
        self,
        date: str,
        type: str,
        main_category: str,
        amount: float,
        account_id: str,
        sub_category: str = "",
        note: str = "",
    ) -> Transaction:
        t = Transaction(
            id=uuid4().hex,
            date=date,
            type=type,
            main_category=main_category,
            amount=amount,
            account_id=account_id,
            sub_category=sub_category,
            note=note,
            seq=self._next_seq,
        )
        self._next_seq += 1
        self._commit(self._accounts, self._transactions + (t,),
                     TRANSACTION_ADDED, {"transaction_id": t.id, "account_id": account_id,
                                         "type": type, "amount": amount})
        return t

    def delete_transaction(self, transaction_id: str) -> bool:
        remaining = tuple(t for t in self._transactions if t.id != transaction_id)
        if len(remaining) == len(self._transactions):
            return False
        self._commit(self._accounts, remaining,
                     TRANSACTION_DELETED, {"transaction_id": transaction_id})
        return True

    def submit_transaction(self, form: Mapping[str, Any]) -> Transaction:
        result = validate_transaction_form(form, self._accounts)
        if result.is_left():
            raise ValidationError(result.error)
        return self.add_transaction(**result.value)

    # --- derived state

    def balances(self) -> Dict[str, float]:
        return memo.cached_balances(self._accounts, self._transactions)

    def net_assets(self) -> float:
        return net_assets(self.balances())

    def monthly(self) -> List[MonthlyPoint]:
        return memo.cached_monthly(self._transactions, self._accounts)

    def trend(self, account_id: str, range_key: str, today: Optional[date] = None) -> List[TrendPoint]:
        return memo.cached_trend(account_id, range_key, self._transactions,
                                 self._accounts, today or current_day())

    def records(
        self, start: Optional[str] = None, end: Optional[str] = None, today: Optional[date] = None
    ) -> List[Transaction]:
        return memo.cached_records(self._transactions, start, end, today or current_day())
