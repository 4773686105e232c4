# src/domstate/core/matcher.py
import numbers
import re
from enum import Enum
from typing import Any, Optional, Pattern, Union

Expectation = Optional[Union[str, Pattern]]


class MatchMode(str, Enum):
    """How a literal string expectation is compared to the actual value."""
    CONTAINS = "contains"
    EXACT = "exact"


def is_pattern(value: Any) -> bool:
    return isinstance(value, re.Pattern)


def matches(actual: str, expected: Expectation, mode: MatchMode = MatchMode.CONTAINS) -> bool:
    """
    The matching contract shared by all string predicates:
    no expectation matches anything, a pattern is searched in the actual value
    (anchors decide whether the whole string must match), and a literal string is
    either contained in or equal to the actual value depending on the mode.
    """
    if expected is None:
        return True
    if is_pattern(expected):
        return expected.search(actual) is not None
    if mode is MatchMode.EXACT:
        return actual == expected
    return str(expected) in actual


def matches_name(actual: str, expected: Expectation, min_length: int) -> bool:
    """
    Matching for computed accessible names and descriptions. Without an expectation the
    value must be longer than min_length characters to count as meaningful.
    """
    if not is_pattern(expected) and not expected:
        return len(actual) > min_length
    return matches(actual, expected)


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality without cross-type coercion: '5' != 5 and True != 1, while 5 == 5.0.
    NaN never equals anything.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, numbers.Real) and isinstance(right, numbers.Real):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return str(left) == str(right)
    if left is None or right is None:
        return left is right
    return type(left) is type(right) and left == right
