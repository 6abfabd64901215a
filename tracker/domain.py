from dataclasses import dataclass
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    initial_balance: float
    color: str = ""


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str            # "YYYY-MM-DD"
    type: str            # "income" or "expense"
    main_category: str
    amount: float        # absolute magnitude, sign comes from type
    account_id: str
    sub_category: str = ""
    note: str = ""
    seq: int = 0         # insertion order, assigned by the store

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == INCOME else -self.amount


# One bucket of the monthly chart
@dataclass(frozen=True)
class MonthlyPoint:
    month: str
    income: float
    expense: float
    total_assets: float


@dataclass(frozen=True)
class TrendPoint:
    date: str
    value: float


@dataclass(frozen=True)
class MonthlyComparison:
    current_month: str
    current_month_income: float
    current_month_expense: float
    current_month_surplus: float
    last_month: str
    last_month_surplus: float
    current_month_investment_income: float
    last_year_same_month_income: Optional[float] = None


INVESTMENT_INCOME = "Investment income"

INCOME_CATEGORIES = (
    "Work income",
    INVESTMENT_INCOME,
    "Variable income",
)

EXPENSE_STRUCTURE = {
    "Living": (
        "Food", "Clothing", "Utilities", "Phone & building fees",
        "Rent & mortgage", "Transport & car upkeep", "Education",
        "Leisure & travel", "Health & supplements", "Sundries",
    ),
    "Family": (),
    "Taxes": ("Property tax", "Income tax", "Vehicle license tax"),
    "Insurance": (
        "Health insurance", "Property insurance", "Life insurance",
        "Savings insurance",
    ),
    "Savings & investment": (),
    "Variable expenses": (),
}


def categories_for(type_: str) -> tuple[str, ...]:
    if type_ == INCOME:
        return INCOME_CATEGORIES
    return tuple(EXPENSE_STRUCTURE)


def sub_categories_for(main_category: str) -> tuple[str, ...]:
    return EXPENSE_STRUCTURE.get(main_category, ())
