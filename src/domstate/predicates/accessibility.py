# src/domstate/predicates/accessibility.py
import logging
import re
import warnings
from typing import Optional

from domstate.core.context.dom_context import DomContext
from domstate.core.matcher import Expectation, matches, matches_name
from domstate.core.predicate_registry import predicate_spec
from domstate.predicates.state import is_invalid
from domtree.tree import get_attribute, get_element_by_id, is_element, owner_document, text_content

logger = logging.getLogger(__name__)

_ID_TOKEN_RE = re.compile(r"(\s*)(\S+)")
_NON_WHITESPACE_RE = re.compile(r"\S+")


def referenced_text(node, attr: str) -> str:
    """
    Resolves an id list attribute (aria-describedby, aria-errormessage) to the text of
    the referenced elements. Each resolved id keeps the whitespace that preceded it;
    ids that resolve to nothing or to whitespace-only text are dropped.
    """
    document = owner_document(node)

    def replace(match) -> str:
        space, ref_id = match.group(1), match.group(2)
        target = get_element_by_id(document, ref_id) if document is not None else None
        if target is None:
            logger.debug("%s references missing id %r", attr, ref_id)
            return ""
        text = text_content(target)
        return space + text if _NON_WHITESPACE_RE.search(text) else ""

    return _ID_TOKEN_RE.sub(replace, get_attribute(node, attr) or "")


@predicate_spec("has_accessible_name")
def has_accessible_name(node, expected: Expectation = None, context: Optional[DomContext] = None) -> bool:
    """Checks the accessible name of an element; without expectation it must be longer than 3 characters."""
    if not is_element(node):
        return False
    context = context or DomContext.for_node(node)
    actual = context.accessibility.compute_accessible_name(node)
    return matches_name(actual, expected, context.min_name_length)


@predicate_spec("has_accessible_description")
def has_accessible_description(node, expected: Expectation = None, context: Optional[DomContext] = None) -> bool:
    """Checks the accessible description of an element; without expectation it must be longer than 3 characters."""
    if not is_element(node):
        return False
    context = context or DomContext.for_node(node)
    actual = context.accessibility.compute_accessible_description(node)
    return matches_name(actual, expected, context.min_name_length)


@predicate_spec("has_description", help_text="Deprecated, use has_accessible_description.")
def has_description(node, expected: Expectation) -> bool:
    warnings.warn(
        "has_description() is deprecated, use has_accessible_description()", DeprecationWarning, stacklevel=2
    )
    if not is_element(node):
        return False
    return matches(referenced_text(node, "aria-describedby"), expected)


@predicate_spec("has_error_message")
def has_error_message(node, expected: Expectation) -> bool:
    """Checks if a field is invalid and its aria-errormessage elements carry the expected message."""
    if not is_invalid(node):
        return False
    return matches(referenced_text(node, "aria-errormessage"), expected)
