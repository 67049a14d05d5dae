import json
from decimal import Decimal
from typing import Any, Iterable, Mapping, Tuple

from fintrack.domain import Transaction, exact_amount


def from_record(record: Mapping[str, Any]) -> Transaction:
    """Build a Transaction from a store record; ``_id`` is accepted for ``id``."""
    return Transaction(
        id=str(record.get("id") or record.get("_id") or ""),
        amount=exact_amount(record.get("amount")),
        type=str(record.get("type") or ""),
        category=str(record.get("category") or ""),
        division=str(record.get("division") or ""),
        date=str(record.get("date") or ""),
        description=str(record.get("description") or ""),
    )


def to_record(t: Transaction) -> dict:
    return {
        "id": t.id,
        "amount": t.amount,
        "type": t.type,
        "category": t.category,
        "division": t.division,
        "description": t.description,
        "date": t.date,
    }


def from_records(records: Iterable[Mapping[str, Any]]) -> Tuple[Transaction, ...]:
    return tuple(from_record(r) for r in records)


def load_transactions(path: str) -> Tuple[Transaction, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)

    # the list endpoint wraps records as {"data": [...]}
    if isinstance(data, Mapping):
        data = data.get("transactions", data.get("data", []))
    return from_records(data)


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def save_transactions(path: str, trans: Iterable[Transaction]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(
            {"transactions": [to_record(t) for t in trans]}, f, indent=2, ensure_ascii=False, default=_encode
        )


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def remove_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    if not any(t.id == tx_id for t in trans):
        raise KeyError(tx_id)
    return tuple(t for t in trans if t.id != tx_id)
