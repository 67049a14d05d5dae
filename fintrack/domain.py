from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple, Union

INCOME = "income"
EXPENSE = "expense"
TYPES = (INCOME, EXPENSE)

DIVISIONS = ("Office", "Personal")

INCOME_CATEGORIES = ("Salary", "Freelance", "Investment", "Other")
EXPENSE_CATEGORIES = (
    "Food",
    "Transport",
    "Rent",
    "Utilities",
    "Entertainment",
    "Health",
    "Other",
)
CATEGORIES_BY_TYPE = {INCOME: INCOME_CATEGORIES, EXPENSE: EXPENSE_CATEGORIES}

ALL = "All"

DAY = "day"
WEEK = "week"
MONTH = "month"
GRANULARITIES = (DAY, WEEK, MONTH)

Amount = Union[int, Decimal]


def exact_amount(value: Any) -> Amount:
    """Whole amounts as int, fractional ones as Decimal; floats go through their repr."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return 0
    if not number.is_finite():
        return 0
    if number == number.to_integral_value():
        return int(number)
    return number


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Amount     # non-negative, sign comes from type
    type: str          # "income" or "expense"
    category: str
    division: str      # "Office" or "Personal"
    date: str          # raw ISO-8601 string as received from the store
    description: str = ""


@dataclass(frozen=True)
class FilterSet:
    division: str = ALL
    type: str = ALL
    category: str = ALL
    start_date: str = ""  # YYYY-MM-DD, "" when unset
    end_date: str = ""


@dataclass(frozen=True)
class BucketKey:
    key: str
    label: str
    sort_order: datetime


@dataclass(frozen=True)
class Bucket:
    key: str
    label: str
    sort_order: datetime
    income_total: Amount = 0
    expense_total: Amount = 0


@dataclass(frozen=True)
class CategorySlice:
    category: str
    total: Amount


@dataclass(frozen=True)
class Summary:
    income: Amount = 0
    expense: Amount = 0
    balance: Amount = 0


@dataclass(frozen=True)
class DashboardView:
    filtered: Tuple[Transaction, ...] = ()
    summary: Summary = field(default_factory=Summary)
    series: Tuple[Bucket, ...] = ()
    category_breakdown: Tuple[CategorySlice, ...] = ()
