"""
Token cleaner for raw inventory model labels.

Inventory exports rarely hold a bare model number. A typical cell looks like
"Axis P3245-LVE 192.168.1.5 2023-04-01 outdoor dome", so before matching each
label is split on whitespace and every token is tested against these rules
(first hit wins, the token is dropped and recorded):

    1. IP        - IPv4 dotted quad (octets 0-255) or IPv6 (full/compressed)
    2. MAC       - 00:1A:2B:3C:4D:5E, 00-1A-..., or 001a.2b3c.4d5e
    3. Date      - 04/01/2023, 04-01-2023, 2023-04-01, 04.01.2023, Apr 1, 2023
    4. Manufacturer - equal to / contains / contained in a vocabulary entry
    5. Common word  - alphabetic, longer than 2 chars, in COMMON_WORDS
    6. Punctuation  - no letters or digits at all

Everything else survives and is re-joined with single spaces.
"""

import ipaddress
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet, Iterable, List, NamedTuple, Tuple

from .config import COMMON_WORDS, MIN_COMMON_WORD_LENGTH

REMOVED_IP = "IP"
REMOVED_MAC = "MAC"
REMOVED_DATE = "Date"
REMOVED_MANUFACTURER = "Manufacturer"
REMOVED_COMMON_WORD = "Common word"
REMOVED_PUNCTUATION = "Punctuation"

# ---------------------------------------------------------------------------
# Token patterns (pre-compiled, applied to one whitespace-free token)
# ---------------------------------------------------------------------------
_OCTET = r'(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)'
IPV4_PATTERN = re.compile(rf'^(?:{_OCTET}\.){{3}}{_OCTET}$')

MAC_PATTERN = re.compile(
    r'^(?:[0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$'    # 00:1A:2B:3C:4D:5E / 00-1A-...
    r'|^(?:[0-9A-Fa-f]{4}\.){2}[0-9A-Fa-f]{4}$'     # 001a.2b3c.4d5e (Cisco style)
)

DATE_PATTERNS = [
    re.compile(r'^\d{1,2}/\d{1,2}/\d{2,4}$'),       # MM/DD/YYYY or M/D/YY
    re.compile(r'^\d{1,2}-\d{1,2}-\d{2,4}$'),       # MM-DD-YYYY or M-D-YY
    re.compile(r'^\d{4}-\d{1,2}-\d{1,2}$'),         # YYYY-MM-DD
    re.compile(r'^\d{1,2}\.\d{1,2}\.\d{2,4}$'),     # MM.DD.YYYY
]

# "Apr 1, 2023" spans three tokens, so it is tested on a joined window
MONTH_DATE_PATTERN = re.compile(
    r'^(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{1,2},?\s+\d{2,4}$',
    re.IGNORECASE,
)
MONTH_DATE_TOKENS = 3

ALPHA_PATTERN = re.compile(r'^[A-Za-z]+$')


class RemovedElement(NamedTuple):
    kind: str
    value: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.value}"


@dataclass
class CleaningResult:
    original: str
    cleaned: str
    removed_elements: List[RemovedElement] = field(default_factory=list)

    @property
    def removed_labels(self) -> List[str]:
        """Removed elements rendered as 'IP: 10.0.0.1' strings (audit trail)."""
        return [str(e) for e in self.removed_elements]


# ---------------------------------------------------------------------------
# Individual token tests
# ---------------------------------------------------------------------------

def is_ip_address(token: str) -> bool:
    if IPV4_PATTERN.match(token):
        return True
    if ':' not in token:
        return False
    try:
        ipaddress.IPv6Address(token)
    except ValueError:
        return False
    return True


def is_mac_address(token: str) -> bool:
    return bool(MAC_PATTERN.match(token))


def is_date(token: str) -> bool:
    return any(pattern.match(token) for pattern in DATE_PATTERNS)


@lru_cache(maxsize=64)
def _lowered_vocabulary(vocabulary: FrozenSet[str]) -> Tuple[str, ...]:
    return tuple(sorted({v.lower() for v in vocabulary if v}))


def is_manufacturer(token: str, vocabulary: FrozenSet[str]) -> bool:
    """Equality or containment in either direction, case-insensitive."""
    token_lower = token.lower()
    return any(
        name == token_lower or name in token_lower or token_lower in name
        for name in _lowered_vocabulary(vocabulary)
    )


def is_common_word(token: str) -> bool:
    if len(token) <= MIN_COMMON_WORD_LENGTH or not ALPHA_PATTERN.match(token):
        return False
    return token.lower() in COMMON_WORDS


def is_punctuation(token: str) -> bool:
    return not any(ch.isalnum() for ch in token)


def classify_token(token: str, vocabulary: FrozenSet[str]) -> str:
    """Return the removal reason for a token, or '' if the token is kept."""
    if is_ip_address(token):
        return REMOVED_IP
    if is_mac_address(token):
        return REMOVED_MAC
    if is_date(token):
        return REMOVED_DATE
    if is_manufacturer(token, vocabulary):
        return REMOVED_MANUFACTURER
    if is_common_word(token):
        return REMOVED_COMMON_WORD
    if is_punctuation(token):
        return REMOVED_PUNCTUATION
    return ''


# ---------------------------------------------------------------------------
# Label cleaning
# ---------------------------------------------------------------------------

def clean_model_label(raw_label, vocabulary: Iterable[str] = frozenset()) -> CleaningResult:
    """
    Strip noise tokens from one raw model label.

    Never raises: non-string or blank input gives CleaningResult('', '', []).

    Examples (vocabulary {'Axis'}):
        'AXS-4000 192.168.1.5 2023-04-01 Axis'
            -> cleaned 'AXS-4000'
               removed ['IP: 192.168.1.5', 'Date: 2023-04-01', 'Manufacturer: Axis']
        'P3245-LVE   outdoor  dome' -> 'P3245-LVE'
        'Q6155-E installed Apr 3, 2021' -> 'Q6155-E installed'
    """
    if not isinstance(raw_label, str) or not raw_label.strip():
        return CleaningResult(original='', cleaned='', removed_elements=[])

    vocabulary = frozenset(vocabulary)
    original = raw_label.strip()
    tokens = original.split()

    kept: List[str] = []
    removed: List[RemovedElement] = []
    i = 0
    while i < len(tokens):
        window = ' '.join(tokens[i:i + MONTH_DATE_TOKENS])
        if (i + MONTH_DATE_TOKENS <= len(tokens)) and MONTH_DATE_PATTERN.match(window):
            removed.append(RemovedElement(REMOVED_DATE, window))
            i += MONTH_DATE_TOKENS
            continue

        token = tokens[i]
        reason = classify_token(token, vocabulary)
        if reason:
            removed.append(RemovedElement(reason, token))
        else:
            kept.append(token)
        i += 1

    return CleaningResult(
        original=original,
        cleaned=' '.join(kept).strip(),
        removed_elements=removed,
    )


def preprocess_model_for_matching(raw_label, vocabulary: Iterable[str] = frozenset()) -> str:
    """Cleaned text only; used when the audit trail is not needed."""
    return clean_model_label(raw_label, vocabulary).cleaned
