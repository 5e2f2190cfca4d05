"""
Legacy column-level noise detection.

The first version of the tool did not clean individual cells. Instead it
dropped entire columns that looked like they held serial numbers, IPs, MACs
or dates, using a sample of the first 1000 rows. It is kept as an alternate
front-end for callers that still want whole-column filtering before the
per-token cleaner runs.

Its patterns are deliberately NOT the token cleaner's:
    - "simple IP" is hyphenated digits (10-0-0-12), not a dotted quad
    - MAC accepts only the colon/hyphen form, not 001a.2b3c.4d5e
    - the date test is an unanchored YYYY-MM-DD search, so a cell like
      "installed 2023-04-01" flags the whole column
Do not merge the two sets without checking existing reports.
"""

import logging
import re
from collections import Counter
from typing import List, NamedTuple, Sequence

from .config import LEGACY_SAMPLE_SIZE

logger = logging.getLogger(__name__)

SERIAL_HEADER_PATTERN = re.compile(r'\b(sn|serial)\b', re.IGNORECASE)

LEGACY_CELL_PATTERNS = [
    re.compile(r'^\d+(-\d+){3}$'),                               # simple IP
    re.compile(r'^([0-9A-F]{2}[:-]){5}([0-9A-F]{2})$', re.IGNORECASE),  # MAC
    re.compile(r'\d{4}-\d{2}-\d{2}'),                            # date
]


class SanitizedTable(NamedTuple):
    headers: List[str]
    rows: List[List[str]]
    removed_columns: List[str]


def _looks_like_noise(cell) -> bool:
    if not isinstance(cell, str):
        return False
    return any(pattern.search(cell) for pattern in LEGACY_CELL_PATTERNS)


def find_noise_columns(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[int]:
    """Indexes of columns to drop: serial-like header, or any noisy sampled cell."""
    sample = rows[:LEGACY_SAMPLE_SIZE]
    noisy = []
    for idx, header in enumerate(headers):
        if SERIAL_HEADER_PATTERN.search(str(header)):
            noisy.append(idx)
            continue
        for row in sample:
            if idx < len(row) and _looks_like_noise(row[idx]):
                noisy.append(idx)
                break
    return noisy


def sanitize_columns(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> SanitizedTable:
    """
    Drop whole columns suspected of holding serials, IPs, MACs or dates.

    Example:
        headers ['Model', 'Serial', 'Address']
        rows    [['P3245', 'ACCC8E0001', '10-0-0-12']]
        -> headers ['Model'], rows [['P3245']], removed ['Serial', 'Address']
    """
    drop = set(find_noise_columns(headers, rows))
    kept_idx = [i for i in range(len(headers)) if i not in drop]

    kept_headers = [headers[i] for i in kept_idx]
    kept_rows = [[row[i] if i < len(row) else '' for i in kept_idx] for row in rows]
    removed = [headers[i] for i in sorted(drop)]

    if removed:
        logger.info(f"Dropped {len(removed)} noise column(s): {', '.join(map(str, removed))}")

    return SanitizedTable(headers=kept_headers, rows=kept_rows, removed_columns=removed)


def find_duplicate_rows(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[List[str]]:
    """
    Rows whose cells (across all headers) appear more than once, in input order.

    Every copy is returned so reviewers see the full extent of the duplication.
    """
    width = len(headers)

    def key(row):
        return tuple(row[i] if i < len(row) else '' for i in range(width))

    counts = Counter(key(row) for row in rows)
    return [list(row) for row in rows if counts[key(row)] > 1]
