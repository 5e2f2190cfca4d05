"""Row aggregation, count parsing and column selection."""
import numpy as np
import pandas as pd
import pytest

from compat_mapper import (
    AggregatedModel,
    ColumnSelectionError,
    aggregate_models,
    aggregate_table,
    frame_to_table,
    parse_number,
    resolve_column,
    suggest_columns,
)


def as_dict(aggregated):
    return {m.raw_label: m.count for m in aggregated}


# ---------------------------------------------------------------------------
# parse_number
# ---------------------------------------------------------------------------

NUMBER_CASES = [
    ("3", 3.0),
    (" 2.5 ", 2.5),
    ("-1", -1.0),
    ("1e3", 1000.0),
    ("0", 0.0),
    ("", 0.0),
    ("n/a", 0.0),
    ("1,000", 1.0),                 # leading number only
    ("1_000", 1.0),
    ("3 units", 3.0),
    ("2 pcs", 2.0),
    (".5", 0.5),
    ("+4", 4.0),
    ("units: 3", 0.0),
    ("1e999", 0.0),                 # overflows to inf
    ("nan", 0.0),
    ("inf", 0.0),
    (None, 0.0),
    (7, 7.0),
]


@pytest.mark.parametrize("value,expected", NUMBER_CASES)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


# ---------------------------------------------------------------------------
# aggregate_models
# ---------------------------------------------------------------------------

def test_aggregate_sums_count_column():
    rows = [["CamA", "3"], ["CamA", "2"], ["CamB", "1"]]
    assert as_dict(aggregate_models(rows, 0, 1)) == {"CamA": 5, "CamB": 1}


def test_aggregate_counts_rows_without_count_column():
    rows = [["CamA", "3"], ["CamA", "2"], ["CamB", "1"]]
    assert as_dict(aggregate_models(rows, 0)) == {"CamA": 2, "CamB": 1}


def test_aggregate_keys_labels_verbatim():
    rows = [["CamA"], ["cama"], ["CamA "], ["CamA"]]
    assert as_dict(aggregate_models(rows, 0)) == {"CamA": 2, "cama": 1, "CamA ": 1}


def test_aggregate_skips_empty_and_missing_model_cells():
    rows = [["", "4"], [], ["CamA", "1"], [None, "9"]]
    assert as_dict(aggregate_models(rows, 0, 1)) == {"CamA": 1}


def test_unparseable_count_cells_contribute_zero():
    rows = [["CamA", "x"], ["CamA", "2"], ["CamB"]]
    assert as_dict(aggregate_models(rows, 0, 1)) == {"CamA": 2, "CamB": 0}


BAD_INDEX_CASES = [
    # (model_index, count_index)
    (-1, None),
    (0, -1),
    (5, None),          # no row is that wide
    (True, None),
    ("0", None),
]


@pytest.mark.parametrize("model_index,count_index", BAD_INDEX_CASES)
def test_aggregate_models_rejects_bad_index(model_index, count_index):
    rows = [["CamA", "3"], ["CamB", "1"]]
    with pytest.raises(ColumnSelectionError):
        aggregate_models(rows, model_index, count_index)


def test_aggregate_models_on_no_rows_is_empty():
    assert aggregate_models([], 3) == []


def test_aggregate_keeps_first_seen_order():
    rows = [["CamB"], ["CamA"], ["CamB"], ["CamC"]]
    assert [m.raw_label for m in aggregate_models(rows, 0)] == ["CamB", "CamA", "CamC"]


def test_count_conservation_without_count_column():
    rows = [["CamA"], [""], ["CamB"], ["CamA"], ["CamC"]]
    non_empty = sum(1 for r in rows if r and r[0])
    assert sum(m.count for m in aggregate_models(rows, 0)) == non_empty


def test_count_conservation_with_count_column():
    rows = [["CamA", "3"], ["CamB", "2.5"], ["CamA", "bad"], ["", "100"]]
    expected = sum(parse_number(r[1]) for r in rows if r[0])
    assert sum(m.count for m in aggregate_models(rows, 0, 1)) == expected


# ---------------------------------------------------------------------------
# Column selection
# ---------------------------------------------------------------------------

HEADERS = ["Name", "Model", "Qty"]


@pytest.mark.parametrize("column,expected", [(0, 0), (2, 2), ("Model", 1), ("Qty", 2)])
def test_resolve_column(column, expected):
    assert resolve_column(HEADERS, column) == expected


@pytest.mark.parametrize("column", [3, -1, "model", "Serial", 1.0, True])
def test_resolve_column_fails_fast(column):
    with pytest.raises(ColumnSelectionError):
        resolve_column(HEADERS, column)


def test_column_selection_error_is_value_error():
    assert issubclass(ColumnSelectionError, ValueError)


def test_aggregate_table_by_header_name():
    rows = [["cam1", "P3245", "2"], ["cam2", "P3245", "3"]]
    assert aggregate_table(HEADERS, rows, "Model", "Qty") == [AggregatedModel("P3245", 5.0)]


def test_aggregate_table_rejects_bad_count_column():
    with pytest.raises(ColumnSelectionError):
        aggregate_table(HEADERS, [["a", "b", "c"]], "Model", 7)


SUGGEST_CASES = [
    (["Serial Number", "Camera Model", "Qty"], {"model_col": "Camera Model", "count_col": "Qty"}),
    (["Device ID", "IP Address", "Device Name", "Count"], {"model_col": "Device Name", "count_col": "Count"}),
    (["Location", "Firmware"], {"model_col": None, "count_col": None}),
]


@pytest.mark.parametrize("headers,expected", SUGGEST_CASES)
def test_suggest_columns(headers, expected):
    assert suggest_columns(headers) == expected


# ---------------------------------------------------------------------------
# pandas adapter
# ---------------------------------------------------------------------------

def test_frame_to_table_renders_missing_as_empty():
    df = pd.DataFrame({"Model": ["P3245 ", None], "Qty": ["2", np.nan]})
    headers, rows = frame_to_table(df)
    assert headers == ["Model", "Qty"]
    assert rows == [["P3245 ", "2"], ["", ""]]
