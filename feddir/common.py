"""Shared errors, name normalisation and string similarity scoring."""

from __future__ import annotations

import re
import unicodedata

MINIMUM_ROUTING_NUMBER_DIGITS = 2
MAXIMUM_ROUTING_NUMBER_DIGITS = 9

_WINKLER_PREFIX_LIMIT = 4
_WINKLER_SCALE = 0.1
_WINKLER_BOOST_THRESHOLD = 0.7

_DROPPED_PUNCTUATION = str.maketrans("", "", "'.\u2019")
_WORD = re.compile(r"[^\W_]+(?:['\u2019.][^\W_]+)*")


class FedError(Exception):
    """Base class for directory errors."""


class RecordWrongLengthError(FedError):
    """A record or query does not have the required length."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"must be {expected} characters and found {actual}")


class RoutingNumberNumericError(FedError):
    """A routing number query contains non-digit characters."""

    def __init__(self, message: str = "routing number must be numeric") -> None:
        super().__init__(message)


def normalize(name: str) -> str:
    """Return a cleaned form of an institution name for searching."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    stripped = stripped.translate(_DROPPED_PUNCTUATION)
    cleaned = "".join(c if c.isalnum() or c.isspace() else " " for c in stripped)
    return " ".join(cleaned.split())


def title_case(text: str) -> str:
    """Capitalise the first character of every word, lowering the rest."""
    return _WORD.sub(lambda m: m[0][0].upper() + m[0][1:].lower(), text.lower())


def _jaro(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    window = max(max(len(a), len(b)) // 2 - 1, 0)
    a_used = [False] * len(a)
    b_used = [False] * len(b)
    matches = 0
    for i, ch in enumerate(a):
        for j in range(max(0, i - window), min(len(b), i + window + 1)):
            if not b_used[j] and b[j] == ch:
                a_used[i] = b_used[j] = True
                matches += 1
                break
    if matches == 0:
        return 0.0
    a_matched = [c for c, used in zip(a, a_used) if used]
    b_matched = [c for c, used in zip(b, b_used) if used]
    transpositions = sum(x != y for x, y in zip(a_matched, b_matched)) / 2
    return (matches / len(a) + matches / len(b) + (matches - transpositions) / matches) / 3


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity of two strings, between 0.0 and 1.0."""
    score = _jaro(a, b)
    if score <= _WINKLER_BOOST_THRESHOLD:
        return score
    prefix = 0
    for x, y in zip(a[:_WINKLER_PREFIX_LIMIT], b[:_WINKLER_PREFIX_LIMIT]):
        if x != y:
            break
        prefix += 1
    return score + prefix * _WINKLER_SCALE * (1.0 - score)


def levenshtein(a: str, b: str) -> float:
    """Similarity from edit distance: 1 - distance / longest length."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return 1.0 - previous[-1] / longest


def validate_routing_number_query(s: str) -> str:
    """Check a routing number search string and return it trimmed."""
    s = s.strip()
    if len(s) < MINIMUM_ROUTING_NUMBER_DIGITS:
        raise RecordWrongLengthError(MINIMUM_ROUTING_NUMBER_DIGITS, len(s))
    if len(s) > MAXIMUM_ROUTING_NUMBER_DIGITS:
        raise RecordWrongLengthError(MAXIMUM_ROUTING_NUMBER_DIGITS, len(s))
    if not (s.isascii() and s.isdigit()):
        raise RoutingNumberNumericError()
    return s