"""
Core matching engine for connector compatibility analysis.

Matching Approach:
    - Every inventory label and every catalog model name is cleaned with the
      same manufacturer vocabulary (IPs, MACs, dates, vendor names, filler
      words and stray punctuation removed)
    - EXACT: cleaned label equals a cleaned catalog name (case-insensitive).
      First catalog entry wins.
    - POTENTIAL: otherwise the catalog is scanned once, in order, scoring each
      cleaned name with Levenshtein similarity. The running best is replaced
      when a candidate scores higher, OR when one cleaned string contains the
      other and the candidate scores above 0.5. That second clause can replace
      a better-scoring candidate with a worse one; it is kept as-is because
      reviewers rely on the current output (open for product review).
    - The best candidate is reported only if its similarity is strictly above
      0.6; otherwise the label is NO match.

Compatibility Type:
    - Catalog notes containing "RTSP support only" -> RTSP
    - Anything else (including no notes)           -> ONVIF-S

Catalog entries are cleaned once per (catalog, vocabulary) in a ReferenceIndex
instead of once per query. The result is identical, only faster.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import pandas as pd
from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from .aggregation import AggregatedModel, ColumnRef, Number, aggregate_table
from .catalog import ReferenceEntry, build_manufacturer_vocabulary
from .cleaning import CleaningResult, RemovedElement, clean_model_label, preprocess_model_for_matching
from .config import (
    COMPATIBILITY_ONVIF,
    COMPATIBILITY_RTSP,
    CONTAINMENT_SIMILARITY_FLOOR,
    MATCH_TYPE_EXACT,
    MATCH_TYPE_NONE,
    MATCH_TYPE_POTENTIAL,
    POTENTIAL_MATCH_THRESHOLD,
    RTSP_ONLY_MARKER,
)
from .similarity import string_similarity

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Classification of one distinct inventory label."""
    model: str
    cleaned_model: str
    count: Number
    match_type: str
    matched_with: Optional[str] = None
    similarity: Optional[float] = None
    removed_elements: List[RemovedElement] = field(default_factory=list)
    reference_entry: Optional[ReferenceEntry] = None
    compatibility_type: Optional[str] = None


class BestMatch(NamedTuple):
    match_type: str
    matched_with: Optional[str] = None
    similarity: Optional[float] = None
    reference_entry: Optional[ReferenceEntry] = None
    compatibility_type: Optional[str] = None


NO_MATCH = BestMatch(MATCH_TYPE_NONE)


# ---------------------------------------------------------------------------
# Compatibility type
# ---------------------------------------------------------------------------

def get_compatibility_type(entry: Optional[ReferenceEntry]) -> str:
    """RTSP when the catalog notes say 'RTSP support only', ONVIF-S otherwise."""
    if entry is None or not entry.notes:
        return COMPATIBILITY_ONVIF
    return COMPATIBILITY_RTSP if RTSP_ONLY_MARKER in entry.notes.lower() else COMPATIBILITY_ONVIF


# ---------------------------------------------------------------------------
# Reference index (catalog cleaned once)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReferenceIndex:
    """
    Read-only matching view of the catalog.

    cleaned_names[i] is entries[i].model_name cleaned with `vocabulary` and
    lowercased. Safe to share across threads.
    """
    entries: Tuple[ReferenceEntry, ...]
    vocabulary: FrozenSet[str]
    cleaned_names: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.entries)


def build_reference_index(
    catalog: Iterable[ReferenceEntry],
    vocabulary: Optional[Iterable[str]] = None,
) -> ReferenceIndex:
    """
    Clean every catalog model name once.

    If no vocabulary is given it is derived from the catalog itself, which is
    the normal case: the catalog's own manufacturers are the noise to strip.
    """
    entries = tuple(catalog)
    if vocabulary is None:
        vocabulary = build_manufacturer_vocabulary(entries)
    vocabulary = frozenset(vocabulary)
    cleaned_names = tuple(
        preprocess_model_for_matching(entry.model_name, vocabulary).lower()
        for entry in entries
    )
    return ReferenceIndex(entries=entries, vocabulary=vocabulary, cleaned_names=cleaned_names)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def find_best_match(cleaned_model: str, index: ReferenceIndex) -> BestMatch:
    """
    Classify an already-cleaned label against the catalog.

    Exact pass first; only if nothing is equal does the similarity scan run.
    """
    if not isinstance(cleaned_model, str) or not cleaned_model.strip():
        return NO_MATCH

    model_lower = cleaned_model.lower().strip()

    # --- Exact pass ---
    for entry, name in zip(index.entries, index.cleaned_names):
        if name == model_lower:
            return BestMatch(
                match_type=MATCH_TYPE_EXACT,
                matched_with=entry.model_name,
                similarity=1.0,
                reference_entry=entry,
                compatibility_type=get_compatibility_type(entry),
            )

    # --- Potential pass ---
    best_similarity = 0.0
    best_entry: Optional[ReferenceEntry] = None

    for entry, name in zip(index.entries, index.cleaned_names):
        similarity = string_similarity(model_lower, name)
        is_subset = model_lower in name or name in model_lower

        # Containment can replace a higher-scoring running best
        if similarity > best_similarity or (is_subset and similarity > CONTAINMENT_SIMILARITY_FLOOR):
            best_similarity = similarity
            best_entry = entry

    if best_entry is not None and best_similarity > POTENTIAL_MATCH_THRESHOLD:
        return BestMatch(
            match_type=MATCH_TYPE_POTENTIAL,
            matched_with=best_entry.model_name,
            similarity=best_similarity,
            reference_entry=best_entry,
            compatibility_type=get_compatibility_type(best_entry),
        )

    return NO_MATCH


def match_label(raw_label, index: ReferenceIndex, count: Number = 1) -> MatchResult:
    """Clean one raw inventory label and classify it."""
    cleaning = clean_model_label(raw_label, index.vocabulary)
    best = find_best_match(cleaning.cleaned, index)
    return MatchResult(
        model=raw_label if isinstance(raw_label, str) else '',
        cleaned_model=cleaning.cleaned,
        count=count,
        match_type=best.match_type,
        matched_with=best.matched_with,
        similarity=best.similarity,
        removed_elements=cleaning.removed_elements,
        reference_entry=best.reference_entry,
        compatibility_type=best.compatibility_type,
    )


def match_models(
    aggregated: Sequence[AggregatedModel],
    index: ReferenceIndex,
    progress_callback: Optional[Callable] = None,
) -> List[MatchResult]:
    """
    Classify every aggregated label, highest device count first.

    Ties keep first-seen order (sorted() is stable).
    """
    if len(index) == 0:
        logger.warning("Compatibility catalog is empty; every model will be reported as no match")

    total = len(aggregated)
    results = []
    for item in aggregated:
        result = match_label(item.raw_label, index, count=item.count)
        logger.debug(f"{item.raw_label!r} -> {result.cleaned_model!r}: {result.match_type}")
        results.append(result)

        if progress_callback and (len(results) % 50 == 0 or len(results) == total):
            progress_callback(len(results), total)

    return sorted(results, key=lambda r: r.count, reverse=True)


def analyze_inventory(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    model_column: ColumnRef,
    count_column: Optional[ColumnRef] = None,
    catalog: Optional[Iterable[ReferenceEntry]] = None,
    index: Optional[ReferenceIndex] = None,
    progress_callback: Optional[Callable] = None,
) -> List[MatchResult]:
    """
    Full pipeline for one inventory table: aggregate -> clean -> match -> sort.

    Args:
        headers: column names of the inventory table
        rows: row cells aligned to headers
        model_column: index or header name of the model column
        count_column: index or header name of a quantity column (optional)
        catalog: reference entries (ignored when `index` is given)
        index: prebuilt ReferenceIndex, reuse it across tables
        progress_callback: optional callable(current, total)

    Raises:
        ColumnSelectionError: a selected column does not exist
    """
    aggregated = aggregate_table(headers, rows, model_column, count_column)
    if index is None:
        index = build_reference_index(catalog or [])
    results = match_models(aggregated, index, progress_callback=progress_callback)
    logger.info(f"Analyzed {len(rows):,} rows -> {len(results):,} distinct models")
    return results


# ---------------------------------------------------------------------------
# Summary metrics
# ---------------------------------------------------------------------------

def compute_match_summary(results: Sequence[MatchResult]) -> Dict[str, float]:
    """
    Headline numbers for a finished analysis.

    Returns a dict with:
        total_models / total_devices
        exact_models, potential_models, none_models: distinct labels per type
        exact_devices, potential_devices, none_devices: summed counts per type
        exact_rate, potential_rate, none_rate: % of devices per type
    """
    summary = {'total_models': len(results), 'total_devices': 0}
    for match_type in (MATCH_TYPE_EXACT, MATCH_TYPE_POTENTIAL, MATCH_TYPE_NONE):
        subset = [r for r in results if r.match_type == match_type]
        summary[f'{match_type}_models'] = len(subset)
        summary[f'{match_type}_devices'] = sum(r.count for r in subset)
        summary['total_devices'] += summary[f'{match_type}_devices']

    total_devices = summary['total_devices']
    for match_type in (MATCH_TYPE_EXACT, MATCH_TYPE_POTENTIAL, MATCH_TYPE_NONE):
        devices = summary[f'{match_type}_devices']
        summary[f'{match_type}_rate'] = round(devices / total_devices * 100, 1) if total_devices else 0.0

    return summary


# ---------------------------------------------------------------------------
# Export table
# ---------------------------------------------------------------------------

EXPORT_COLUMNS = [
    'Original Model', 'Count', 'Match Type', 'Compatible Model',
    'Compatibility Type', 'Minimum Firmware', 'Notes',
]


def results_to_frame(
    results: Sequence[MatchResult],
    count_label: str = 'Count',
    include_details: bool = False,
) -> pd.DataFrame:
    """
    Tabular form of the results for the report/CSV writer.

    The count column is named after the user's count column when there is one
    (count_label), otherwise 'Count'. include_details adds the cleaned label,
    the similarity and the removed-element audit trail.
    """
    columns = [count_label if c == 'Count' else c for c in EXPORT_COLUMNS]
    if include_details:
        columns += ['Cleaned Model', 'Similarity', 'Removed Elements']

    records = []
    for r in results:
        entry = r.reference_entry
        record = {
            'Original Model': r.model,
            count_label: r.count,
            'Match Type': r.match_type,
            'Compatible Model': r.matched_with or '',
            'Compatibility Type': r.compatibility_type or '',
            'Minimum Firmware': entry.minimum_firmware if entry else '',
            'Notes': entry.notes if entry else '',
        }
        if include_details:
            record['Cleaned Model'] = r.cleaned_model
            record['Similarity'] = round(r.similarity, 4) if r.similarity is not None else None
            record['Removed Elements'] = '; '.join(str(e) for e in r.removed_elements)
        records.append(record)

    return pd.DataFrame(records, columns=columns)


# ---------------------------------------------------------------------------
# Single-label explanation (for "why did this match?" in the UI)
# ---------------------------------------------------------------------------

def explain_match(raw_label, index: ReferenceIndex, limit: int = 3) -> Dict:
    """
    Match one label and list the closest catalog names by similarity.

    The alternatives are ranked purely by score; the classification itself
    still comes from find_best_match() and its containment rule.
    """
    cleaning: CleaningResult = clean_model_label(raw_label, index.vocabulary)
    result = match_label(raw_label, index)

    if not cleaning.cleaned or len(index) == 0:
        return {
            'cleaning': cleaning,
            'best_match': result,
            'top_candidates': [],
        }

    top = process.extract(
        cleaning.cleaned.lower(),
        list(index.cleaned_names),
        scorer=Levenshtein.normalized_similarity,
        limit=limit,
    )

    candidates = []
    for cleaned_name, score, position in top:
        entry = index.entries[position]
        candidates.append({
            'model_name': entry.model_name,
            'cleaned_name': cleaned_name,
            'similarity': round(score, 4),
            'manufacturer': entry.manufacturer,
        })

    return {
        'cleaning': cleaning,
        'best_match': result,
        'top_candidates': candidates,
    }
