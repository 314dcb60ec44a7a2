"""Tests for version_compare and helpers."""

import itertools

import pytest

from gatekeeper.version import is_newer, sort_versions, version_compare


def test_equal_strings() -> None:
    """A string compares equal to itself."""
    for value in ["1.0", "2.0.0-beta", "v3", ""]:
        assert version_compare(value, value) == 0


def test_numeric_runs_compare_numerically() -> None:
    """1.10 sorts after 1.9."""
    assert version_compare("1.9", "1.10") < 0
    assert version_compare("1.10", "1.9") > 0
    assert version_compare("2.0", "10.0") < 0


def test_prerelease_sorts_before_release() -> None:
    """x-suffix sorts before x."""
    assert version_compare("2.0.0-beta", "2.0.0") < 0
    assert version_compare("2.0.0", "2.0.0-beta") > 0
    assert version_compare("2.0.0-rc.1", "2.0.0") == -1


def test_shorter_prefix_sorts_first() -> None:
    assert version_compare("1.0", "1.0.1") < 0


def test_case_insensitive_then_uppercase_greater() -> None:
    """Letters compare case-insensitively; uppercase wins the tie-break."""
    assert version_compare("1.0-Alpha", "1.0-beta") < 0
    assert version_compare("1.0-RC", "1.0-rc") > 0
    assert version_compare("1.0-rc", "1.0-RC") < 0


def test_results_are_minus_one_zero_one() -> None:
    assert version_compare("1", "2") == -1
    assert version_compare("2", "1") == 1


def test_leading_zeros_do_not_compare_equal() -> None:
    """Only identical strings compare equal."""
    assert version_compare("01", "1") != 0
    assert version_compare("01", "1") == -version_compare("1", "01")


CORPUS = [
    "1.0",
    "1.0.0",
    "1.0.1",
    "1.1",
    "1.9",
    "1.10",
    "2.0.0-alpha",
    "2.0.0-beta",
    "2.0.0",
    "2.0.0-Beta",
    "v2.0",
    "V2.0",
    "10.0",
    "01.0",
    "Next",
    "next",
    "backlog",
]


@pytest.mark.parametrize("a,b", list(itertools.combinations(CORPUS, 2)))
def test_antisymmetric(a: str, b: str) -> None:
    assert version_compare(a, b) == -version_compare(b, a)


def test_transitive_on_corpus() -> None:
    for a, b, c in itertools.permutations(CORPUS, 3):
        if version_compare(a, b) < 0 and version_compare(b, c) < 0:
            assert version_compare(a, c) < 0, (a, b, c)


def test_sort_versions() -> None:
    assert sort_versions(["1.10", "2.0.0", "1.9", "2.0.0-beta"]) == ["1.9", "1.10", "2.0.0-beta", "2.0.0"]


def test_is_newer() -> None:
    assert is_newer("1.5", "1.3")
    assert not is_newer("1.3", "1.3")
    assert not is_newer("1.2", "1.3")
