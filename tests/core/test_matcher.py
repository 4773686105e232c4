# tests/core/test_matcher.py
import math
import re

from domstate.core.matcher import MatchMode, is_pattern, matches, matches_name, strict_equals


def test_matches_without_expectation_is_existence_check():
    """Zonder verwachting matcht elke waarde, ook een lege."""
    assert matches("", None)
    assert matches("iets", None)


def test_matches_literal_modes():
    """Een letterlijke string is 'bevat' of 'gelijk', afhankelijk van de modus."""
    assert matches("accessible name", "name")
    assert not matches("accessible name", "name", MatchMode.EXACT)
    assert matches("name", "name", MatchMode.EXACT)


def test_matches_pattern_is_searched():
    """Een patroon wordt gezocht; ankers bepalen of de hele string moet matchen."""
    assert matches("accessible name", re.compile(r"^accessible\b"))
    assert not matches("accessible name", re.compile(r"^accessible$"))
    assert matches("accessible name", re.compile("name"), MatchMode.EXACT)


def test_is_pattern():
    assert is_pattern(re.compile("x"))
    assert not is_pattern("x")
    assert not is_pattern(None)


def test_matches_name_length_heuristic():
    """Zonder verwachting moet een naam langer zijn dan de minimale lengte."""
    assert not matches_name("abc", None, 3)
    assert matches_name("abcd", None, 3)
    # Een lege string telt als 'geen verwachting'
    assert not matches_name("abc", "", 3)
    assert matches_name("Save file", "file", 3)
    assert matches_name("Save", re.compile("^Save$"), 3)


def test_strict_equals_does_not_coerce():
    """Geen impliciete conversie tussen types."""
    assert strict_equals(5, 5.0)
    assert not strict_equals("5", 5)
    assert not strict_equals(True, 1)
    assert strict_equals(True, True)
    assert strict_equals(None, None)
    assert not strict_equals(None, "")
    assert not strict_equals(math.nan, math.nan)
    assert strict_equals("a", "a")
