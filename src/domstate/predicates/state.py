# src/domstate/predicates/state.py
import logging
import warnings
from typing import Optional

from domstate.core.context.dom_context import DomContext
from domstate.core.managers.config_manager import config_manager
from domstate.core.predicate_registry import predicate_spec
from domtree.tree import (
    NodeKind,
    classify,
    get_attribute,
    has_attribute,
    has_truthy_attribute,
    inner_html,
    is_comment,
    is_element,
    is_html_element,
)
from domtree.validity import ValidityEngine, has_validity_check

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_INPUT_TYPES = ["color", "hidden", "range", "submit", "image", "reset"]
DEFAULT_REQUIRED_ROLES = ["combobox", "gridcell", "radiogroup", "spinbutton", "tree"]


@predicate_spec("is_checked")
def is_checked(node) -> bool:
    """Checks the checked attribute of a checkbox/radio input or of an element with role checkbox/radio."""
    kind = classify(node)
    if kind is NodeKind.CHECKABLE:
        return has_truthy_attribute(node, "checked")
    if not is_html_element(node) or node.name == "input":
        return False
    if (get_attribute(node, "role") or "").strip() not in ("checkbox", "radio"):
        return False
    return has_truthy_attribute(node, "checked")


@predicate_spec("is_empty_dom_element")
def is_empty_dom_element(node) -> bool:
    """Checks if an element has no child nodes other than comments."""
    if not is_html_element(node):
        return False
    return all(is_comment(child) for child in node.contents)


@predicate_spec("is_empty", help_text="Deprecated, use is_empty_dom_element.")
def is_empty(node) -> bool:
    warnings.warn("is_empty() is deprecated, use is_empty_dom_element()", DeprecationWarning, stacklevel=2)
    return is_html_element(node) and inner_html(node) == ""


@predicate_spec("is_invalid")
def is_invalid(node) -> bool:
    """Checks if an element is flagged invalid, cannot be validated or fails constraint validation."""
    if not is_html_element(node):
        return False
    if get_attribute(node, "aria-invalid") == "true":
        return True
    if not has_validity_check(node):
        return True
    return not ValidityEngine().check_validity(node)


@predicate_spec("is_valid")
def is_valid(node) -> bool:
    """
    Checks if an element passes constraint validation, or, for elements that cannot
    be validated, if it is not flagged with aria-invalid.
    Note this is not the complement of is_invalid for elements without validation support.
    """
    if not is_html_element(node):
        return False
    capable = has_validity_check(node)
    if (get_attribute(node, "aria-invalid") or "false") == "false" and not capable:
        return True
    return capable and ValidityEngine().check_validity(node)


@predicate_spec("is_required")
def is_required(node) -> bool:
    """Checks if a form field or a widget role is marked as required."""
    if not is_element(node):
        return False
    excluded = config_manager.get_nested("required.excluded_input_types", DEFAULT_EXCLUDED_INPUT_TYPES)
    roles = config_manager.get_nested("required.roles", DEFAULT_REQUIRED_ROLES)

    if is_html_element(node) and has_attribute(node, "required"):
        raw_type = get_attribute(node, "type")
        # Compared as written: type="COLOR" is not an excluded type.
        if node.name == "input" and (raw_type if raw_type is not None else "text") not in excluded:
            return True
        if node.name in ("textarea", "select"):
            return True

    return (get_attribute(node, "role") or "") in roles and get_attribute(node, "aria-required") == "true"


@predicate_spec("has_focus")
def has_focus(node, context: Optional[DomContext] = None) -> bool:
    """Checks if the element is the active element of its document."""
    if not is_element(node):
        return False
    context = context or DomContext.for_node(node)
    return context.active_element is node
