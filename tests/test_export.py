from decimal import Decimal
from zoneinfo import ZoneInfo

from fintrack.domain import Transaction
from fintrack.export import CSV_HEADER, format_amount, to_csv, to_csv_bytes


def make_tx(id, amount, type, category, division, date, description=""):
    return Transaction(id, amount, type, category, division, date, description)


def test_header_is_exact():
    assert CSV_HEADER == "Date,Description,Category,Amount,Type,Division"


def test_description_quotes_are_doubled():
    t = make_tx("t1", 40, "expense", "Food", "Personal", "2025-01-01", 'Say "hi"')
    lines = to_csv([t]).splitlines()
    assert lines == [CSV_HEADER, '2025-01-01,"Say ""hi""",Food,40,expense,Personal']


def test_rows_keep_input_order_and_drop_time_of_day():
    trans = [
        make_tx("b", 5, "income", "Salary", "Office", "2025-03-02T18:30:00Z", "second"),
        make_tx("a", 7.5, "expense", "Rent", "Personal", "2025-01-09T07:00:00.000Z", "first, really"),
    ]
    lines = to_csv(trans).splitlines()
    assert lines[1] == '2025-03-02,"second",Salary,5,income,Office'
    assert lines[2] == '2025-01-09,"first, really",Rent,7.5,expense,Personal'


def test_empty_description_is_an_empty_quoted_field():
    t = make_tx("t1", 1, "expense", "Other", "Office", "2025-01-01")
    assert to_csv([t]).splitlines()[1] == '2025-01-01,"",Other,1,expense,Office'


def test_empty_input_is_header_only():
    assert to_csv([]) == CSV_HEADER + "\n"


def test_date_uses_reference_timezone():
    t = make_tx("t1", 1, "expense", "Food", "Personal", "2025-01-01T23:30:00Z")
    assert to_csv([t], ZoneInfo("Asia/Kolkata")).splitlines()[1].startswith("2025-01-02,")


def test_bytes_are_utf8_with_bom():
    t = make_tx("t1", 10, "expense", "Food", "Personal", "2025-01-01", "Café ☕")
    data = to_csv_bytes([t])
    assert data.startswith(b"\xef\xbb\xbf")
    text = data.decode("utf-8-sig")
    assert text.splitlines()[0] == CSV_HEADER
    assert '"Café ☕"' in text


def test_format_amount():
    assert format_amount(40) == "40"
    assert format_amount(40.0) == "40"
    assert format_amount(12.25) == "12.25"


def test_format_amount_never_uses_exponent_form():
    assert format_amount(1e20) == "100000000000000000000"
    assert format_amount(1e-05) == "0.00001"
    assert format_amount(2.5e-07) == "0.00000025"
    assert format_amount(Decimal("0.10")) == "0.10"
    assert format_amount(Decimal("1E+3")) == "1000"


def test_large_and_tiny_amounts_in_rows():
    trans = [
        make_tx("a", 1e20, "income", "Investment", "Office", "2025-01-01"),
        make_tx("b", 1e-05, "expense", "Other", "Personal", "2025-01-02"),
    ]
    lines = to_csv(trans).splitlines()
    assert lines[1] == '2025-01-01,"",Investment,100000000000000000000,income,Office'
    assert lines[2] == '2025-01-02,"",Other,0.00001,expense,Personal'


def test_unreadable_date_is_an_empty_field():
    t = make_tx("t1", 3, "expense", "Food", "Personal", "not a date", "lost receipt")
    assert to_csv([t]).splitlines()[1] == ',"lost receipt",Food,3,expense,Personal'
