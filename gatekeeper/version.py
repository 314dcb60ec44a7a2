"""Ordering of version-like strings (milestone titles, package versions).

Rules, in order:

1. Pre-release: ``a`` starting with ``b + "-"`` sorts before ``b``
   (``2.0.0-beta < 2.0.0``), and the symmetric case sorts after.
2. Natural comparison: digit runs compare numerically (``1.10 > 1.9``),
   everything else compares case-insensitively with the character classes
   ordered whitespace < punctuation < digits < letters.
3. Case tie-break: when both strings are equal ignoring case, the first
   differing character decides and the uppercase one is greater.
4. Code point comparison of the raw strings, so that only equal strings
   compare equal (``01`` vs ``1``).
"""

import functools
import re
from typing import Callable, List, Tuple

_TOKEN_RE = re.compile(r"\d+|\D")

# Token kinds, lowest first
_SPACE, _PUNCT, _DIGIT, _ALPHA = range(4)


def _char_kind(ch: str) -> int:
    if ch.isspace():
        return _SPACE
    if ch.isalpha():
        return _ALPHA
    if ch.isdigit():
        return _DIGIT
    return _PUNCT


def _natural_key(value: str) -> List[Tuple[int, int, str]]:
    key: List[Tuple[int, int, str]] = []
    for token in _TOKEN_RE.findall(value):
        if token.isdigit():
            key.append((_DIGIT, int(token), ""))
        else:
            key.append((_char_kind(token), 0, token.casefold()))
    return key


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _case_tiebreak(a: str, b: str) -> int:
    for x, y in zip(a, b):
        if x == y:
            continue
        if x.isupper() and not y.isupper():
            return 1
        if y.isupper() and not x.isupper():
            return -1
        return _cmp(x, y)
    return 0


def version_compare(a: str, b: str) -> int:
    """Compare two version strings, returning -1, 0 or 1."""
    if a == b:
        return 0
    if a.startswith(b + "-"):
        return -1
    if b.startswith(a + "-"):
        return 1
    result = _cmp(_natural_key(a), _natural_key(b))
    if result:
        return result
    result = _case_tiebreak(a, b)
    if result:
        return result
    return _cmp(a, b)


version_key: Callable[[str], object] = functools.cmp_to_key(version_compare)


def sort_versions(values: List[str]) -> List[str]:
    """Return ``values`` sorted ascending by :func:`version_compare`."""
    return sorted(values, key=version_key)


def is_newer(candidate: str, current: str) -> bool:
    """True when ``candidate`` sorts strictly after ``current``."""
    return version_compare(candidate, current) > 0
