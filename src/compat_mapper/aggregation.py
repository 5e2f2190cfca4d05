"""
Aggregation of raw inventory rows into distinct model labels with counts.

Rows arrive already parsed (headers + lists of cell strings) from whatever
ingested the customer's export. The caller picks the model column and,
optionally, a count column:
    - no count column: each row counts as one device
    - count column:    the leading number of that cell is summed
                       ("3", " 2.5 ", "4 units", "" -> 3, 2.5, 4, 0)
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .config import COUNT_COLUMN_KEYWORDS, MODEL_COLUMN_KEYWORDS, MODEL_EXCLUDE_KEYWORDS
from .errors import ColumnSelectionError

logger = logging.getLogger(__name__)

Number = Union[int, float]
ColumnRef = Union[int, str]

# Leading decimal number, optional sign and exponent ("3 units" -> "3")
NUMBER_PREFIX_PATTERN = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass
class AggregatedModel:
    raw_label: str
    count: Number


# ---------------------------------------------------------------------------
# Number parsing
# ---------------------------------------------------------------------------

def parse_number(value) -> float:
    """
    Parse a count cell from its leading decimal number; no number counts as 0.

    Examples:
        '3' -> 3.0, ' 2.5 ' -> 2.5, '-1' -> -1.0, '1e3' -> 1000.0
        '3 units' -> 3.0, '1,000' -> 1.0, '1_000' -> 1.0
        '' -> 0.0, 'n/a' -> 0.0, 'nan' -> 0.0, None -> 0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = NUMBER_PREFIX_PATTERN.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(0))
    if not math.isfinite(number):
        return 0.0
    return number


# ---------------------------------------------------------------------------
# Column selection
# ---------------------------------------------------------------------------

def resolve_column(headers: Sequence[str], column: ColumnRef) -> int:
    """
    Turn a column index or header name into a validated index.

    Raises ColumnSelectionError for an out-of-range index or unknown name;
    a bad selection is the caller's bug and must not silently mis-index.
    """
    if isinstance(column, bool):
        raise ColumnSelectionError(f"Invalid column selection: {column!r}")
    if isinstance(column, int):
        if 0 <= column < len(headers):
            return column
        raise ColumnSelectionError(
            f"Column index {column} out of range for {len(headers)} columns"
        )
    if isinstance(column, str):
        try:
            return list(headers).index(column)
        except ValueError:
            raise ColumnSelectionError(f"Column {column!r} not found in headers") from None
    raise ColumnSelectionError(f"Invalid column selection: {column!r}")


def suggest_columns(headers: Sequence[str]) -> Dict[str, Optional[str]]:
    """
    Guess which headers hold the model label and the device count.

    Only a suggestion for the UI, the user still confirms the selection.
    Returns {'model_col': header or None, 'count_col': header or None}.
    """
    result = {'model_col': None, 'count_col': None}

    for header in headers:
        col_lower = str(header).lower().strip()
        if result['count_col'] is None and any(kw in col_lower for kw in COUNT_COLUMN_KEYWORDS):
            result['count_col'] = header
            continue
        if result['model_col'] is None:
            words = col_lower.replace('_', ' ').split()
            if any(kw in words for kw in MODEL_EXCLUDE_KEYWORDS):
                continue
            if any(kw in col_lower for kw in MODEL_COLUMN_KEYWORDS):
                result['model_col'] = header

    return result


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_models(
    rows: Sequence[Sequence[str]],
    model_index: int,
    count_index: Optional[int] = None,
) -> List[AggregatedModel]:
    """
    Group rows by the exact model cell and count or sum them.

    Labels are keyed verbatim (case-sensitive, untrimmed), so 'CamA' and
    'cama ' stay separate. Rows whose model cell is missing or empty are
    skipped. Output keeps first-seen order.

    Raises ColumnSelectionError for a negative or non-integer index, or a
    model index that no row reaches.
    """
    _check_index(model_index, 'model')
    if count_index is not None:
        _check_index(count_index, 'count')
    if rows and all(model_index >= len(row) for row in rows):
        raise ColumnSelectionError(f"Model column index {model_index} is beyond every row")

    totals: Dict[str, Number] = {}
    skipped = 0

    for row in rows:
        label = row[model_index] if model_index < len(row) else None
        if not isinstance(label, str) or label == '':
            skipped += 1
            continue

        if count_index is not None:
            cell = row[count_index] if count_index < len(row) else None
            totals[label] = totals.get(label, 0) + parse_number(cell)
        else:
            totals[label] = totals.get(label, 0) + 1

    if skipped:
        logger.debug(f"Skipped {skipped} rows with an empty model cell")

    return [AggregatedModel(raw_label=label, count=count) for label, count in totals.items()]


def _check_index(index, role: str) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ColumnSelectionError(f"Invalid {role} column index: {index!r}")


def aggregate_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    model_column: ColumnRef,
    count_column: Optional[ColumnRef] = None,
) -> List[AggregatedModel]:
    """aggregate_models() with column selection by index or header name."""
    model_index = resolve_column(headers, model_column)
    count_index = resolve_column(headers, count_column) if count_column is not None else None
    return aggregate_models(rows, model_index, count_index)


# ---------------------------------------------------------------------------
# pandas adapter
# ---------------------------------------------------------------------------

def frame_to_table(df: pd.DataFrame) -> Tuple[List[str], List[List[str]]]:
    """
    Convert a DataFrame into (headers, rows) of plain strings.

    Missing values become '' so they are skipped (model) or count as 0 (count).
    Whitespace inside cells is preserved because labels are keyed verbatim.
    """
    headers = [str(c) for c in df.columns]
    rows = []
    for values in df.itertuples(index=False, name=None):
        rows.append(['' if pd.isna(v) else str(v) for v in values])
    return headers, rows
