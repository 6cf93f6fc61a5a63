import csv
import io
import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from campaign_feed.exceptions import DataSourceError

logger = logging.getLogger(__name__)


def parse_csv_text(text: Optional[str], header: bool = True) -> List[Dict[str, str]]:
    """
    Tokenizes CSV text into raw rows (header -> cell text, column order kept).

    Every cell stays a string; nothing is coerced to numbers or NaN. Rows whose
    cells are all empty are skipped. Lines with more cells than the first record
    are cut to its width and logged; shorter lines are padded with "".

    Header cells are kept as written (a blank header stays ""). A repeated
    header gets a ".1", ".2", ... suffix so no column is lost.
    Without a header row the keys are column positions ("0", "1", ...).
    """
    text = (text or "").lstrip("\ufeff")
    if not text.strip():
        return []

    width = len(_first_record(text))

    def _trim_long_line(bad_line: List[str]) -> List[str]:
        logger.warning("Trimming over-long CSV line", extra={"cells": len(bad_line), "expected": width})
        return bad_line[:width]

    # The header row is read as data: pandas never infers an index column from it.
    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_trim_long_line,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, ValueError) as exc:
        raise DataSourceError(f"Failed to parse CSV: {exc}") from exc

    records = [[_cell_text(v) for v in values] for values in df.itertuples(index=False, name=None)]
    if header:
        if not records:
            return []
        columns = _column_names(records.pop(0))
    else:
        columns = [str(i) for i in range(len(df.columns))]

    rows: List[Dict[str, str]] = []
    for values in records:
        if all(not v.strip() for v in values):
            continue
        rows.append(dict(zip(columns, values)))
    return rows


def _first_record(text: str) -> List[str]:
    # Same notion of a blank line as pandas' skip_blank_lines.
    for record in csv.reader(io.StringIO(text)):
        if len(record) > 1 or (record and record[0].strip()):
            return record
    return []


def _column_names(cells: Sequence[str]) -> List[str]:
    seen: Dict[str, int] = {}
    names = []
    for cell in cells:
        count = seen.get(cell, 0)
        seen[cell] = count + 1
        names.append(cell if count == 0 else f"{cell}.{count}")
    return names


def _cell_text(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value)
