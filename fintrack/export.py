"""CSV rendering of a transaction list for spreadsheet download.

Only ``Description`` is free text, so it is the one quoted column; every
other column comes from a closed set or is numeric and is written bare.
"""

from datetime import timezone, tzinfo
from typing import Iterable

from fintrack.domain import Transaction, exact_amount
from fintrack.functional import parse_timestamp

CSV_HEADER = "Date,Description,Category,Amount,Type,Division"
BOM = "\ufeff"


def quote(text: str) -> str:
    return '"' + (text or "").replace('"', '""') + '"'


def format_amount(amount) -> str:
    value = exact_amount(amount)
    if isinstance(value, int):
        return str(value)
    return format(value, "f")  # fixed-point, never exponent form


def format_date(raw: str, tz: tzinfo = timezone.utc) -> str:
    return parse_timestamp(raw, tz).map(lambda when: when.date().isoformat()).get_or_else("")


def csv_row(t: Transaction, tz: tzinfo = timezone.utc) -> str:
    return ",".join((
        format_date(t.date, tz),
        quote(t.description),
        t.category,
        format_amount(t.amount),
        t.type,
        t.division,
    ))


def to_csv(transactions: Iterable[Transaction], tz: tzinfo = timezone.utc, bom: bool = False) -> str:
    """Header plus one row per transaction, in the order given."""
    lines = [CSV_HEADER]
    lines.extend(csv_row(t, tz) for t in transactions)
    return (BOM if bom else "") + "\n".join(lines) + "\n"


def to_csv_bytes(transactions: Iterable[Transaction], tz: tzinfo = timezone.utc, bom: bool = True) -> bytes:
    return to_csv(transactions, tz, bom).encode("utf-8")
