import logging

from campaign_feed import map_rows
from campaign_feed.data.adapters import parse_csv_text


def test_rows_keep_header_order_and_text(sample_csv):
    rows = parse_csv_text(sample_csv)
    assert len(rows) == 3  # the all-comma line is skipped
    first = rows[0]
    assert list(first)[:3] == ["Timestamp", "Date", "Campaign Incharge"]
    # Nothing is coerced: "NA" and numbers stay as written.
    assert first["Place 3"] == "NA"
    assert first["Staff Involve(d)"] == "4"
    assert first["Photo Upload"].startswith("https://drive.google.com/open?id=P1, ")
    assert rows[1]["Place 2"] == ""


def test_empty_input():
    assert parse_csv_text("") == []
    assert parse_csv_text(None) == []
    assert parse_csv_text("   \n") == []


def test_header_only():
    assert parse_csv_text("Date,Name\n") == []


def test_bom_is_stripped():
    rows = parse_csv_text("\ufeffDate,Name\n2024-01-01,Asha\n")
    assert rows == [{"Date": "2024-01-01", "Name": "Asha"}]


def test_blank_lines_skipped():
    rows = parse_csv_text("Date,Name\n\n2024-01-01,Asha\n,\n\n2024-01-02,Ravi\n")
    assert [r["Name"] for r in rows] == ["Asha", "Ravi"]


def test_short_rows_are_padded():
    rows = parse_csv_text("Date,Name,Place\n2024-01-01,Asha\n")
    assert rows == [{"Date": "2024-01-01", "Name": "Asha", "Place": ""}]


def test_long_line_is_trimmed_to_header_width(caplog):
    text = "Date,Name\n2024-01-01,Asha\n2024-01-02,Ravi,extra,cells\n2024-01-03,Meera\n"
    with caplog.at_level(logging.WARNING, logger="campaign_feed.data.adapters.csv_rows"):
        rows = parse_csv_text(text)
    assert [r["Name"] for r in rows] == ["Asha", "Ravi", "Meera"]
    assert rows[1] == {"Date": "2024-01-02", "Name": "Ravi"}
    assert any("over-long" in r.getMessage() for r in caplog.records)


def test_long_first_data_row_keeps_columns_aligned(fixed_now):
    text = (
        "Date,Campaign Incharge,Any Remark\n"
        "01-01-2024,Asha,great success,extra\n"
        "02-01-2024,Ravi,ok\n"
    )
    rows = parse_csv_text(text)
    assert rows == [
        {"Date": "01-01-2024", "Campaign Incharge": "Asha", "Any Remark": "great success"},
        {"Date": "02-01-2024", "Campaign Incharge": "Ravi", "Any Remark": "ok"},
    ]
    assert {r.name for r in map_rows(rows, now=fixed_now)} == {"Asha", "Ravi"}


def test_blank_and_repeated_headers_keep_their_cells():
    rows = parse_csv_text("Name,,Name\nAsha,x,y\n")
    assert rows == [{"Name": "Asha", "": "x", "Name.1": "y"}]



def test_quoted_cells_with_newlines():
    rows = parse_csv_text('Name,Any Remark\nAsha,"line one\nline two"\n')
    assert rows[0]["Any Remark"] == "line one\nline two"


def test_without_header_uses_positions():
    rows = parse_csv_text("2024-01-01,Asha\n", header=False)
    assert rows == [{"0": "2024-01-01", "1": "Asha"}]
