"""Connector compatibility mapper: match noisy inventory model labels to a catalog."""

from .aggregation import (
    AggregatedModel,
    aggregate_models,
    aggregate_table,
    frame_to_table,
    parse_number,
    resolve_column,
    suggest_columns,
)
from .catalog import (
    ReferenceEntry,
    build_manufacturer_vocabulary,
    catalog_from_records,
    load_catalog,
)
from .cleaning import CleaningResult, RemovedElement, clean_model_label, preprocess_model_for_matching
from .column_sanitizer import SanitizedTable, find_duplicate_rows, find_noise_columns, sanitize_columns
from .errors import CatalogFormatError, ColumnSelectionError, CompatMapperError
from .matcher import (
    MatchResult,
    ReferenceIndex,
    analyze_inventory,
    build_reference_index,
    compute_match_summary,
    explain_match,
    find_best_match,
    get_compatibility_type,
    match_label,
    match_models,
    results_to_frame,
)
from .similarity import levenshtein_distance, string_similarity

__version__ = "1.0.0"
