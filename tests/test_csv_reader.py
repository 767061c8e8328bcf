from smartspend.utils.csv_reader import read_csv_records

bank_export = (
    "\ufeffDate , Description,Amount,Category\n"
    "2024-01-05, Cafe ,-45.00,FOOD_AND_DRINK\n"
    "\n"
    "2024-01-07,Airline,\"-$1,100.00\",TRAVEL\n"
    "2024-01-08,Short row\n"
).encode("utf-8")


def test_reads_rows_with_trimmed_header_and_cells():
    records = read_csv_records(bank_export)
    assert records[0] == {"Date": "2024-01-05", "Description": "Cafe", "Amount": "-45.00", "Category": "FOOD_AND_DRINK"}
    assert records[1]["Amount"] == "-$1,100.00"


def test_skips_blank_lines_and_pads_short_rows():
    records = read_csv_records(bank_export)
    assert len(records) == 3
    assert records[2] == {"Date": "2024-01-08", "Description": "Short row", "Amount": "", "Category": ""}


def test_keeps_column_order():
    records = read_csv_records(b"Posted,Memo\n2024-02-01,Coffee\n")
    assert list(records[0]) == ["Posted", "Memo"]


def test_header_only_or_empty_file():
    assert read_csv_records(b"Date,Amount\n") == []
    assert read_csv_records(b"") == []


def test_latin1_fallback():
    records = read_csv_records("Date,Description\n2024-01-01,Caf\xe9\n".encode("latin-1"))
    assert records[0]["Description"] == "Caf\xe9"
