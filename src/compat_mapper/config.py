"""
Tunable constants for the compatibility mapper.

Thresholds:
    - > 0.6 similarity: POTENTIAL match (needs human review)
    - Containment override: a candidate whose cleaned name contains (or is
      contained in) the cleaned query replaces the running best once its
      similarity clears 0.5, even if the running best scored higher
    - Exact matches are always reported with similarity 1.0
"""

import os

# ---------------------------------------------------------------------------
# Match classification
# ---------------------------------------------------------------------------
POTENTIAL_MATCH_THRESHOLD = 0.6      # Strictly greater than this -> potential
CONTAINMENT_SIMILARITY_FLOOR = 0.5   # Containment override needs more than this

MATCH_TYPE_EXACT = "exact"
MATCH_TYPE_POTENTIAL = "potential"
MATCH_TYPE_NONE = "none"

COMPATIBILITY_RTSP = "RTSP"
COMPATIBILITY_ONVIF = "ONVIF-S"      # Default when notes say nothing
RTSP_ONLY_MARKER = "rtsp support only"

# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------
# Manufacturer words of this length or shorter are not added to the vocabulary
# on their own ("HD", "IP"), only as part of the full manufacturer string
MIN_VOCABULARY_WORD_LENGTH = 2

# Only alphabetic tokens longer than this are checked against COMMON_WORDS
MIN_COMMON_WORD_LENGTH = 2

# Short English words plus surveillance-equipment vocabulary that shows up in
# inventory exports next to the model ("Axis P3245 outdoor dome camera")
COMMON_WORDS = frozenset({
    'the', 'and', 'for', 'are', 'but', 'not', 'you', 'all', 'can', 'had',
    'her', 'was', 'one', 'our', 'out', 'day', 'get', 'has', 'him', 'his',
    'how', 'man', 'new', 'now', 'old', 'see', 'two', 'way', 'who', 'boy',
    'did', 'its', 'let', 'put', 'say', 'she', 'too', 'use',
    'camera', 'security', 'surveillance', 'system', 'device', 'equipment',
    'network', 'wireless', 'indoor', 'outdoor', 'dome', 'bullet', 'ptz',
    'fixed', 'varifocal', 'lens', 'megapixel', 'resolution', 'night',
    'vision', 'infrared', 'audio', 'video', 'digital', 'analog', 'hybrid',
    'nvr', 'dvr', 'recorder', 'channel', 'port', 'power', 'supply',
    'adapter', 'cable', 'mount', 'bracket', 'housing', 'enclosure',
})

# ---------------------------------------------------------------------------
# Legacy column-level sanitizer
# ---------------------------------------------------------------------------
LEGACY_SAMPLE_SIZE = 1000   # Rows inspected per column

# ---------------------------------------------------------------------------
# Column role detection (used only for suggestions, the caller decides)
# ---------------------------------------------------------------------------
MODEL_COLUMN_KEYWORDS = ['model', 'device', 'product', 'camera', 'name', 'description', 'type']
COUNT_COLUMN_KEYWORDS = ['count', 'qty', 'quantity', 'total', 'units', 'number of']
# Columns that look like identifiers, never a model column
MODEL_EXCLUDE_KEYWORDS = ['serial', 'mac', 'ip', 'id', 'firmware', 'date']

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
CATALOG_FILENAME = "Command Connector Compatibility.csv"
# Relative to the working directory unless COMPAT_CATALOG_PATH is set
DEFAULT_CATALOG_PATH = os.environ.get("COMPAT_CATALOG_PATH", CATALOG_FILENAME)
