from abc import ABC, abstractmethod
from datetime import date, datetime, time, timezone, tzinfo
from decimal import Decimal
from typing import Any, Callable, Generic, TypeVar

from fintrack.domain import CATEGORIES_BY_TYPE, DIVISIONS, Transaction, exact_amount

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Generic[T], Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Generic[T], Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def is_left(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Generic[E, T], Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Generic[E, T], Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def parse_timestamp(raw: Any, tz: tzinfo = timezone.utc) -> Maybe[datetime]:
    """Read a transaction timestamp as an aware datetime in ``tz``.

    Offset-aware input is converted into ``tz``; naive input is taken as
    wall-clock time in ``tz``. Anything unreadable gives ``Nothing()``.
    """
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, time.min)
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return Nothing()
    else:
        return Nothing()

    if value.tzinfo is None:
        return Some(value.replace(tzinfo=tz))
    return Some(value.astimezone(tz))


def parse_calendar_date(raw: Any) -> Maybe[date]:
    if isinstance(raw, datetime):
        return Some(raw.date())
    if isinstance(raw, date):
        return Some(raw)
    if not isinstance(raw, str) or not raw.strip():
        return Nothing()
    try:
        return Some(date.fromisoformat(raw.strip()[:10]))
    except ValueError:
        return Nothing()


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    """Creation-time checks for a new transaction; the analytics never call this."""
    if (
        isinstance(t.amount, bool)
        or not isinstance(t.amount, (int, float, Decimal))
        or exact_amount(t.amount) <= 0
    ):
        return Left({
            "error": "invalid_amount",
            "message": f"Amount must be a positive number, got {t.amount!r}",
            "amount": t.amount,
        })

    allowed = CATEGORIES_BY_TYPE.get(t.type)
    if allowed is None:
        return Left({
            "error": "invalid_type",
            "message": f"Type must be one of {', '.join(CATEGORIES_BY_TYPE)}, got {t.type!r}",
            "type": t.type,
        })

    if t.division not in DIVISIONS:
        return Left({
            "error": "invalid_division",
            "message": f"Division must be one of {', '.join(DIVISIONS)}, got {t.division!r}",
            "division": t.division,
        })

    if t.category not in allowed:
        return Left({
            "error": "category_type_mismatch",
            "message": f"Category {t.category} is not a valid {t.type} category",
            "category": t.category,
            "type": t.type,
        })

    if parse_timestamp(t.date).is_none():
        return Left({
            "error": "invalid_date",
            "message": f"Date {t.date!r} is not an ISO-8601 date or timestamp",
            "date": t.date,
        })

    return Right(t)


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
