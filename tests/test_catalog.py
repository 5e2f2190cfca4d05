"""Catalog loading and manufacturer vocabulary."""
import logging

import pandas as pd
import pytest

from compat_mapper import (
    ReferenceEntry,
    build_manufacturer_vocabulary,
    catalog_from_records,
    load_catalog,
)


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

VOCABULARY_CASES = [
    # (manufacturer, expected vocabulary)
    ("Axis", {"Axis"}),
    ("Hanwha Vision", {"Hanwha Vision", "Hanwha", "Vision"}),
    ("LG", {"LG"}),                                  # short name kept whole
    ("i-PRO Co Ltd", {"i-PRO Co Ltd", "i-PRO", "Ltd"}),  # 'Co' too short
    ("  Bosch  ", {"Bosch"}),                        # trimmed
    ("", set()),
    ("   ", set()),
]


@pytest.mark.parametrize("manufacturer,expected", VOCABULARY_CASES)
def test_build_manufacturer_vocabulary(manufacturer, expected):
    catalog = [ReferenceEntry(manufacturer, "M1")]
    assert build_manufacturer_vocabulary(catalog) == expected


def test_vocabulary_is_order_independent_and_idempotent(sample_catalog):
    forward = build_manufacturer_vocabulary(sample_catalog)
    backward = build_manufacturer_vocabulary(list(reversed(sample_catalog)))
    assert forward == backward
    assert build_manufacturer_vocabulary(sample_catalog + sample_catalog) == forward


def test_vocabulary_preserves_case():
    vocabulary = build_manufacturer_vocabulary([ReferenceEntry("HIKVISION", "X"), ReferenceEntry("Hikvision", "Y")])
    assert vocabulary == {"HIKVISION", "Hikvision"}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def test_catalog_from_records_accepts_camel_case_and_drops_empty_models():
    records = [
        {"manufacturer": "Axis", "modelName": "P3245-LVE", "minimumFirmware": "10.12", "notes": ""},
        {"manufacturer": "Axis", "model_name": "  ", "notes": "no model"},
        {"manufacturer": "Bosch", "model_name": "FLEXIDOME 5100i", "notes": None},
    ]
    catalog = catalog_from_records(records)
    assert catalog == [
        ReferenceEntry("Axis", "P3245-LVE", "10.12", ""),
        ReferenceEntry("Bosch", "FLEXIDOME 5100i", "", ""),
    ]


def test_reference_entry_is_immutable():
    entry = ReferenceEntry("Axis", "P3245-LVE")
    with pytest.raises(AttributeError):
        entry.model_name = "other"


# ---------------------------------------------------------------------------
# File loader
# ---------------------------------------------------------------------------

CSV_WITH_TITLE = """Command Connector Compatibility List
Last updated: 2024-05-01

Manufacturer,Model Name,Minimum Firmware,Notes
Axis,P3245-LVE,10.12,
Hikvision,DS-2CD2143G0-I,V5.5.0,"RTSP support only, no PTZ"
Bosch,,7.10,
,Orphan-1,,
Hanwha Vision,XNV-6080R,1.41,
"""


def test_load_catalog_csv_skips_title_lines_and_incomplete_rows(tmp_path):
    path = tmp_path / "compat.csv"
    path.write_text(CSV_WITH_TITLE, encoding="utf-8")

    catalog = load_catalog(str(path))

    assert [e.model_name for e in catalog] == ["P3245-LVE", "DS-2CD2143G0-I", "XNV-6080R"]
    assert catalog[1].notes == "RTSP support only, no PTZ"
    assert catalog[1].minimum_firmware == "V5.5.0"
    assert catalog[0].notes == ""


def test_load_catalog_excel(tmp_path):
    path = tmp_path / "compat.xlsx"
    pd.DataFrame([
        ["Compatibility list", None, None, None],
        ["Manufacturer", "Model Name", "Minimum Firmware", "Notes"],
        ["Axis", "P3245-LVE", "10.12", None],
        ["Axis", None, "9.0", None],
    ]).to_excel(path, header=False, index=False)

    catalog = load_catalog(str(path))

    assert catalog == [ReferenceEntry("Axis", "P3245-LVE", "10.12", "")]


def test_load_catalog_missing_file_returns_empty(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="compat_mapper.catalog"):
        catalog = load_catalog(str(tmp_path / "missing.csv"))
    assert catalog == []
    assert "missing.csv" in caplog.text


def test_load_catalog_without_header_returns_empty(tmp_path):
    path = tmp_path / "compat.csv"
    path.write_text("Vendor,Model\nAxis,P3245-LVE\n", encoding="utf-8")
    assert load_catalog(str(path)) == []


def test_load_catalog_missing_excel_engine_returns_empty(tmp_path, monkeypatch):
    path = tmp_path / "compat.xls"
    path.write_bytes(b"not really a workbook")

    def read_excel(*args, **kwargs):
        raise ImportError("Missing optional dependency 'xlrd'")

    monkeypatch.setattr(pd, "read_excel", read_excel)
    assert load_catalog(str(path)) == []
