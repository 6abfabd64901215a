"""JSON snapshots of the two ledger collections.

Each collection is written whole to its own file on every change. Field
names follow the persisted layout (initialBalance, mainCategory, ...), not
the Python attribute names.
"""
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Iterable, Tuple

from tracker.dates import is_iso_date
from tracker.domain import TRANSACTION_TYPES, Account, Transaction

logger = logging.getLogger(__name__)

ACCOUNTS_FILE = "accounts.json"
TRANSACTIONS_FILE = "transactions.json"


def account_to_dict(a: Account) -> dict:
    return {
        "id": a.id,
        "name": a.name,
        "initialBalance": a.initial_balance,
        "color": a.color,
    }


def _scalar(value: Any) -> Any:
    # balances are coerced when computed; nested values would break hashing
    return value if isinstance(value, (int, float, str)) or value is None else None


def account_from_dict(d: dict) -> Account:
    return Account(
        id=str(d["id"]),
        name=d.get("name", ""),
        initial_balance=_scalar(d.get("initialBalance", 0)),
        color=d.get("color", ""),
    )


def transaction_to_dict(t: Transaction) -> dict:
    return {
        "id": t.id,
        "date": t.date,
        "type": t.type,
        "mainCategory": t.main_category,
        "subCategory": t.sub_category,
        "amount": t.amount,
        "note": t.note,
        "accountId": t.account_id,
        "seq": t.seq,
    }


def transaction_from_dict(d: dict, position: int = 0) -> Transaction:
    """Build a Transaction, raising ValueError on fields the calculators cannot use."""
    date = d["date"]
    if not is_iso_date(date):
        raise ValueError(f"bad transaction date {date!r}")
    if d["type"] not in TRANSACTION_TYPES:
        raise ValueError(f"bad transaction type {d['type']!r}")
    amount = float(d["amount"])
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"bad transaction amount {d['amount']!r}")

    return Transaction(
        id=str(d["id"]),
        date=date,
        type=d["type"],
        main_category=str(d.get("mainCategory", "")),
        sub_category=d.get("subCategory") or "",
        amount=amount,
        note=d.get("note") or "",
        account_id=str(d.get("accountId", "")),
        seq=int(d.get("seq", position)),
    )


def serialize_accounts(accounts: Iterable[Account]) -> str:
    return json.dumps([account_to_dict(a) for a in accounts], ensure_ascii=False, indent=2)


def serialize_transactions(trans: Iterable[Transaction]) -> str:
    return json.dumps([transaction_to_dict(t) for t in trans], ensure_ascii=False, indent=2)


def deserialize_accounts(text: str) -> Tuple[Account, ...]:
    return tuple(account_from_dict(d) for d in json.loads(text))


def deserialize_transactions(text: str) -> Tuple[Transaction, ...]:
    return tuple(transaction_from_dict(d, i) for i, d in enumerate(json.loads(text)))


def _read(path: Path, parse) -> Tuple[Any, ...]:
    """Parse one snapshot; a missing or malformed file gives an empty tuple."""
    if not path.exists():
        return ()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse(f.read())
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning("Ignoring unreadable snapshot %s: %s", path, e)
        return ()


def load_snapshot(data_dir: Path) -> Tuple[Tuple[Account, ...], Tuple[Transaction, ...]]:
    data_dir = Path(data_dir)
    accounts = _read(data_dir / ACCOUNTS_FILE, deserialize_accounts)
    transactions = _read(data_dir / TRANSACTIONS_FILE, deserialize_transactions)
    logger.debug("Loaded %d accounts, %d transactions from %s",
                 len(accounts), len(transactions), data_dir)
    return accounts, transactions


def _write(path: Path, text: str) -> None:
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp, path)


def save_snapshot(
    data_dir: Path, accounts: Iterable[Account], trans: Iterable[Transaction]
) -> None:
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    _write(data_dir / ACCOUNTS_FILE, serialize_accounts(accounts))
    _write(data_dir / TRANSACTIONS_FILE, serialize_transactions(trans))

