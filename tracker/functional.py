"""Form validation as a pipeline of small steps.

Each step takes the fields collected so far and returns Right(fields),
possibly cleaned, or Left(error). `validate` binds the steps in order, so
the first failing step decides the error.
"""
import math
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Dict, Generic, Iterable, Mapping, TypeVar, Union

from tracker.balances import coerce_amount
from tracker.dates import is_iso_date
from tracker.domain import TRANSACTION_TYPES, Account

T = TypeVar('T')


@dataclass(frozen=True)
class Right(Generic[T]):
    value: T

    def bind(self, f: Callable[[T], 'Either']) -> 'Either':
        return f(self.value)

    def is_left(self) -> bool:
        return False


@dataclass(frozen=True)
class Left:
    error: dict

    def bind(self, f: Callable[[Any], 'Either']) -> 'Either':
        return self

    def is_left(self) -> bool:
        return True


Either = Union[Left, Right]
Step = Callable[[Dict[str, Any]], Either]


def validate(fields: Mapping[str, Any], *steps: Step) -> Either:
    return reduce(lambda result, step: result.bind(step), steps, Right(dict(fields)))


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def require(field: str, code: str, message: str) -> Step:
    def _step(fields):
        if _blank(fields.get(field)):
            return Left({"error": code, "message": message})
        return Right(fields)

    return _step


def non_negative_amount(fields):
    raw = fields["amount"]
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return Left({"error": "invalid_amount", "message": f"Amount {raw!r} is not a number",
                     "amount": raw})
    if not math.isfinite(value):
        return Left({"error": "invalid_amount", "message": "Amount must be a finite number",
                     "amount": raw})
    if value < 0:
        return Left({"error": "invalid_amount", "message": "Amount cannot be negative",
                     "amount": value})
    return Right({**fields, "amount": value})


def known_account(accs: Iterable[Account]) -> Step:
    ids = {a.id for a in accs}

    def _step(fields):
        account_id = fields["account_id"]
        if account_id not in ids:
            return Left({"error": "account_not_found",
                         "message": f"Account with ID {account_id} does not exist",
                         "account_id": account_id})
        return Right(fields)

    return _step


def transaction_type(fields):
    if fields.get("type") not in TRANSACTION_TYPES:
        return Left({"error": "invalid_type",
                     "message": f"Transaction type must be one of {', '.join(TRANSACTION_TYPES)}",
                     "type": fields.get("type")})
    return Right(fields)


def iso_date(fields):
    date = fields.get("date")
    if not is_iso_date(date):
        return Left({"error": "invalid_date",
                     "message": f"Date {date!r} is not in YYYY-MM-DD format",
                     "date": date})
    return Right(fields)


def transaction_fields(fields):
    return Right({
        "date": fields["date"],
        "type": fields["type"],
        "main_category": str(fields["main_category"]),
        "sub_category": fields.get("sub_category") or "",
        "amount": fields["amount"],
        "account_id": fields["account_id"],
        "note": fields.get("note") or "",
    })


def account_fields(fields):
    return Right({
        "name": str(fields["name"]).strip(),
        "initial_balance": coerce_amount(fields["initial_balance"]),
        "color": fields.get("color") or None,
    })


def validate_account_form(form: Mapping[str, Any]) -> Either:
    """Both the name and the starting balance must be filled in."""
    return validate(
        form,
        require("name", "missing_name", "Account name is required"),
        require("initial_balance", "missing_balance", "Starting balance is required"),
        account_fields,
    )


def validate_transaction_form(form: Mapping[str, Any], accs: Iterable[Account]) -> Either:
    """Check the "new transaction" form against the current accounts.

    On success the value holds the keyword arguments for
    LedgerStore.add_transaction.
    """
    return validate(
        form,
        require("amount", "missing_amount", "Amount is required"),
        non_negative_amount,
        require("main_category", "missing_category", "Category is required"),
        require("account_id", "missing_account", "Select an account"),
        known_account(accs),
        transaction_type,
        iso_date,
        transaction_fields,
    )
