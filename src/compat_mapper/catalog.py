"""
Reference catalog: the list of device models known to work with the connector.

The catalog is loaded once per session and treated as read-only. It feeds two
things:
    - ReferenceEntry records that the matcher compares inventory labels against
    - A manufacturer vocabulary used by the token cleaner to strip vendor names
      ("Axis", "Hanwha Vision", ...) out of free-text model labels
"""

import io
import logging
import os
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

import pandas as pd

from .config import DEFAULT_CATALOG_PATH, MIN_VOCABULARY_WORD_LENGTH
from .errors import CatalogFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceEntry:
    """One row of the compatibility list."""
    manufacturer: str
    model_name: str
    minimum_firmware: str = ''
    notes: str = ''


# ---------------------------------------------------------------------------
# Manufacturer vocabulary
# ---------------------------------------------------------------------------

def build_manufacturer_vocabulary(catalog: Iterable[ReferenceEntry]) -> FrozenSet[str]:
    """
    Collect manufacturer names to strip from inventory labels.

    For every entry with a non-blank manufacturer, adds the trimmed name itself
    plus each of its words longer than 2 characters. Case is preserved; the
    cleaner compares case-insensitively.

    Examples:
        'Axis'              -> {'Axis'}
        'Hanwha Vision'     -> {'Hanwha Vision', 'Hanwha', 'Vision'}
        'LG'                -> {'LG'}             (full name always kept)
        'i-PRO Co Ltd'      -> {'i-PRO Co Ltd', 'i-PRO', 'Ltd'}
    """
    vocabulary = set()
    for entry in catalog:
        manufacturer = entry.manufacturer.strip() if isinstance(entry.manufacturer, str) else ''
        if not manufacturer:
            continue
        vocabulary.add(manufacturer)
        for word in manufacturer.split():
            if len(word) > MIN_VOCABULARY_WORD_LENGTH:
                vocabulary.add(word)
    return frozenset(vocabulary)


# ---------------------------------------------------------------------------
# Catalog construction
# ---------------------------------------------------------------------------

def catalog_from_records(records: Iterable[Dict]) -> List[ReferenceEntry]:
    """
    Build ReferenceEntry objects from plain dicts.

    Accepts both snake_case and camelCase keys (model_name / modelName).
    Records without a model name are dropped; the matcher never sees them.
    """
    entries = []
    for record in records:
        model_name = _cell(record.get('model_name', record.get('modelName')))
        if not model_name:
            continue
        entries.append(ReferenceEntry(
            manufacturer=_cell(record.get('manufacturer')),
            model_name=model_name,
            minimum_firmware=_cell(record.get('minimum_firmware', record.get('minimumFirmware'))),
            notes=_cell(record.get('notes')),
        ))
    return entries


def _cell(value) -> str:
    """Stringify a catalog cell; None/NaN become ''."""
    if value is None:
        return ''
    if isinstance(value, float) and pd.isna(value):
        return ''
    return str(value).strip()


# ---------------------------------------------------------------------------
# Compatibility list loader (CSV / Excel)
# ---------------------------------------------------------------------------

def _is_header_row(values: Iterable) -> bool:
    """The data header is the first row mentioning both 'manufacturer' and 'model name'."""
    joined = ' '.join(_cell(v) for v in values).lower()
    return 'manufacturer' in joined and 'model name' in joined


def _find_column(headers: List[str], keyword: str) -> Optional[int]:
    for idx, header in enumerate(headers):
        if keyword in header.lower():
            return idx
    return None


def _read_csv_table(path: str) -> pd.DataFrame:
    """
    Read a compatibility CSV, skipping any title lines above the real header.

    The published list starts with a few lines of prose ("Last updated ...")
    before the Manufacturer/Model Name header, so the header line is located
    first and pandas parses from there.
    """
    with open(path, 'r', encoding='utf-8-sig') as f:
        lines = f.readlines()

    header_index = next((i for i, line in enumerate(lines) if _is_header_row([line])), None)
    if header_index is None:
        raise CatalogFormatError(f"Could not find header row in {path}")

    return pd.read_csv(
        io.StringIO(''.join(lines[header_index:])),
        header=0,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        on_bad_lines='skip',
    )


def _read_excel_table(path: str) -> pd.DataFrame:
    """Read the first worksheet, using the first Manufacturer/Model Name row as header."""
    df_raw = pd.read_excel(path, header=None, dtype=str)
    for i, row in df_raw.iterrows():
        if _is_header_row(row.values):
            df = df_raw.iloc[i + 1:].reset_index(drop=True)
            df.columns = [_cell(v) for v in row.values]
            return df
    raise CatalogFormatError(f"Could not find header row in {path}")


def _entries_from_frame(df: pd.DataFrame) -> List[ReferenceEntry]:
    headers = [str(c) for c in df.columns]
    manufacturer_idx = _find_column(headers, 'manufacturer')
    model_idx = _find_column(headers, 'model name')
    firmware_idx = _find_column(headers, 'firmware')
    notes_idx = _find_column(headers, 'notes')

    if manufacturer_idx is None or model_idx is None:
        raise CatalogFormatError("Required columns (Manufacturer, Model Name) not found")

    entries = []
    for row in df.itertuples(index=False, name=None):
        manufacturer = _cell(row[manufacturer_idx])
        model_name = _cell(row[model_idx])
        # Only rows with both a manufacturer and a model name are usable
        if not manufacturer or not model_name:
            continue
        entries.append(ReferenceEntry(
            manufacturer=manufacturer,
            model_name=model_name,
            minimum_firmware=_cell(row[firmware_idx]) if firmware_idx is not None else '',
            notes=_cell(row[notes_idx]) if notes_idx is not None else '',
        ))
    return entries


def load_catalog(path: str = DEFAULT_CATALOG_PATH) -> List[ReferenceEntry]:
    """
    Load the compatibility list from a .csv or .xlsx file.

    Never raises: a missing or malformed file is logged and an empty catalog is
    returned, so matching still runs (every label then comes back as 'none').
    """
    try:
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        if path.lower().endswith(('.xlsx', '.xls')):
            df = _read_excel_table(path)
        else:
            df = _read_csv_table(path)
        entries = _entries_from_frame(df)
    except (OSError, ValueError, ImportError, CatalogFormatError) as e:
        # pandas parser errors are ValueError subclasses; a missing Excel engine is ImportError
        logger.error(f"Error loading compatibility list {path}: {e}")
        return []

    if entries:
        logger.info(f"Loaded {len(entries):,} compatible models from {path}")
    else:
        logger.warning(f"No compatible models found in {path}; analysis will show no matches")
    return entries
