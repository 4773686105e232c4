# src/domstate/predicates/content.py
import logging
from typing import Any, Optional

from domstate.core.context.dom_context import DomContext
from domstate.core.matcher import Expectation, MatchMode, is_pattern, matches
from domstate.core.predicate_registry import predicate_spec
from domtree.builder import DocumentBuilder
from domtree.models import StyleSpec
from domtree.tree import class_list, get_attribute, inner_html, is_element, is_styleable, owner_document, text_content

logger = logging.getLogger(__name__)


@predicate_spec("has_attribute")
def has_attribute(node, name: str, expected: Expectation = None) -> bool:
    """Checks if an element has an attribute, optionally with an exact value or matching a pattern."""
    if not is_element(node):
        return False
    if is_pattern(expected) or expected:
        actual = get_attribute(node, name)
        return actual is not None and matches(actual, expected, MatchMode.EXACT)
    return get_attribute(node, name) is not None


@predicate_spec("has_class")
def has_class(node, name: Expectation) -> bool:
    """Checks if an element has a class name, or if its whole class attribute matches a pattern."""
    if not is_element(node):
        return False
    if is_pattern(name):
        return matches(get_attribute(node, "class") or "", name)
    return name in class_list(node)


@predicate_spec("has_style")
def has_style(node_or_pair, spec: Any, context: Optional[DomContext] = None) -> bool:
    """
    Checks the computed style of an element, or of its pseudo element when given
    an (element, '::before' | '::after') pair. Properties left out of the spec are not checked.
    """
    if isinstance(node_or_pair, (tuple, list)):
        if not node_or_pair:
            return False
        node = node_or_pair[0]
        pseudo = node_or_pair[1] if len(node_or_pair) > 1 else None
    else:
        node, pseudo = node_or_pair, None

    if not is_styleable(node):
        return False
    context = context or DomContext.for_node(node)
    actual = context.styles.get_computed_style(node, pseudo)

    for prop, expected in StyleSpec.parse(spec).declarations.items():
        if expected is not None and not is_pattern(expected) and not isinstance(expected, str):
            logger.debug("Unsupported expectation for style %r: %r", prop, expected)
            return False
        value = actual.get_property_value(prop) or ""
        if not matches(value, expected, MatchMode.EXACT):
            logger.debug("Style %r is %r, expected %r", prop, value, expected)
            return False
    return True


@predicate_spec("has_html_content")
def has_html_content(node, html: str) -> bool:
    """Checks if the inner markup of an element equals the given HTML once both are serialized alike."""
    if not is_element(node) or not isinstance(html, str):
        return False
    builder = DocumentBuilder()
    scratch = builder.create_scratch_element(owner_document(node))
    builder.set_inner_html(scratch, html)
    return inner_html(node) == inner_html(scratch)


@predicate_spec("has_text_content")
def has_text_content(node, text: str) -> bool:
    """Checks if the text content of an element equals the given text exactly."""
    return is_element(node) and text_content(node) == text
