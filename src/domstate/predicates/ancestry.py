# src/domstate/predicates/ancestry.py
"""
Predicates resolving state inherited along the ancestor chain:
document membership, containment, disablement and visibility.
"""
import logging
import re
import warnings
from typing import Optional

from bs4 import Tag

from domstate.core.context.dom_context import DomContext
from domstate.core.managers.config_manager import config_manager
from domstate.core.predicate_registry import predicate_spec
from domtree.tree import (
    document_element,
    has_attribute,
    has_truthy_attribute,
    is_document,
    is_element,
    is_styleable,
)

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_length(value: str) -> float:
    """Numeric part of a computed length ('12px' -> 12.0); empty or unparsable values count as 1."""
    match = _LEADING_NUMBER_RE.match(value or "")
    if not match:
        return 1.0
    return float(match.group(1))


def _parse_opacity(value: str) -> float:
    try:
        return float(value) if value.strip() else 1.0
    except ValueError:
        logger.debug("Unparsable opacity %r, treating it as opaque.", value)
        return 1.0


@predicate_spec("is_in_document")
def is_in_document(node, document: Optional[Tag] = None) -> bool:
    """
    Checks if walking up from an element reaches the given root, or any document when
    no root is given. The root may be an element, such as the container of an embedded frame.
    """
    if not is_element(node):
        return False
    current = node
    while current.parent is not None:
        current = current.parent
        if document is not None and current is document:
            return True
    return document is None and is_document(current)


@predicate_spec("is_in_dom", help_text="Deprecated, use is_in_document.")
def is_in_dom(node, document: Optional[Tag] = None) -> bool:
    warnings.warn("is_in_dom() is deprecated, use is_in_document()", DeprecationWarning, stacklevel=2)
    return is_in_document(node, document)


@predicate_spec("has_element")
def has_element(ancestor, descendant) -> bool:
    """Checks if descendant is inside ancestor; an element contains itself."""
    if not is_element(ancestor) or not is_element(descendant):
        return False
    current = descendant
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False


@predicate_spec("is_disabled")
def is_disabled(node) -> bool:
    """Checks if the element or one of its ancestors is disabled."""
    current = node
    while is_element(current):
        if has_attribute(current, "disabled"):
            return True
        if has_truthy_attribute(current, "aria-disabled"):
            return True
        current = current.parent
    return False


@predicate_spec("is_visible")
def is_visible(node, context: Optional[DomContext] = None) -> bool:
    """
    Checks if an element should be visible: it must be attached to a document, and
    neither it nor any ancestor below the root element may be hidden, undisplayed,
    transparent or sized to zero.
    """
    if not is_element(node):
        return False
    context = context or DomContext.for_node(node)
    document = context.resolve_document(node)
    if document is None or not is_in_document(node, document):
        return False
    root_element = document_element(document)
    exempt_displays = config_manager.get_nested("visibility.size_exempt_displays", ["inline", "static"])

    current = node
    while True:
        if not is_styleable(current):
            return False
        if has_truthy_attribute(current, "hidden"):
            return False

        style = context.styles.get_computed_style(current)
        display = style.get_property_value("display")
        if display == "none":
            return False
        if style.get_property_value("visibility") in ("hidden", "collapse"):
            return False
        if _parse_opacity(style.get_property_value("opacity")) == 0:
            return False
        if display not in exempt_displays:
            area = _parse_length(style.get_property_value("width")) * _parse_length(style.get_property_value("height"))
            if not area > 0:
                return False

        parent = current.parent
        if parent is not None and parent is root_element:
            return True
        current = parent
