# src/domtree/validity.py
import logging
from typing import Dict, List

from bs4 import Tag

from .registry import DOMRegistry
from .tree import (
    LISTED_TAGS,
    associated_controls,
    closest,
    get_attribute,
    has_attribute,
    input_type,
    is_element,
    is_html_element,
    iter_ancestors,
)

logger = logging.getLogger(__name__)

# Elements exposing checkValidity()
VALIDATION_CAPABLE_TAGS = LISTED_TAGS + ("form",)

BARRED_INPUT_TYPES = ("hidden", "reset", "button")
READONLY_INPUT_TYPES = (
    "text", "search", "url", "tel", "email", "password", "date", "month", "week",
    "time", "datetime-local", "number",
)
DISABLEABLE_TAGS = ("button", "input", "select", "textarea", "fieldset")


def has_validity_check(node) -> bool:
    return is_html_element(node) and node.name in VALIDATION_CAPABLE_TAGS


def is_actually_disabled(tag: Tag) -> bool:
    """
    A form control is disabled by its own attribute or by a disabled ancestor fieldset,
    unless it sits inside that fieldset's first <legend>.
    """
    if tag.name in DISABLEABLE_TAGS and has_attribute(tag, "disabled"):
        return True
    previous = tag
    for ancestor in iter_ancestors(tag):
        if not is_element(ancestor):
            break
        if ancestor.name == "fieldset" and has_attribute(ancestor, "disabled"):
            first_legend = ancestor.find("legend", recursive=False)
            if first_legend is None or previous is not first_legend:
                return True
        previous = ancestor
    return False


class ValidityEngine:
    """
    Constraint validation engine.

    Builds the control snapshot of an element through the DOMRegistry and applies
    every registered constraint rule to it. Forms and fieldsets aggregate the
    validity of their controls.
    """

    def __init__(self):
        """Initializes the engine by discovering and loading all available constraint rules."""
        DOMRegistry.discover()
        self.rules = DOMRegistry.get_all_rules()

    def will_validate(self, tag: Tag) -> bool:
        """Returns False for elements barred from constraint validation."""
        if not has_validity_check(tag) or tag.name in ("fieldset", "form", "object", "output"):
            return False
        if tag.name == "input":
            kind = input_type(tag)
            if kind in BARRED_INPUT_TYPES:
                return False
            if kind in READONLY_INPUT_TYPES and has_attribute(tag, "readonly"):
                return False
        if tag.name == "textarea" and has_attribute(tag, "readonly"):
            return False
        if tag.name == "button" and (get_attribute(tag, "type") or "submit").strip().lower() in ("reset", "button"):
            return False
        if is_actually_disabled(tag):
            return False
        if tag.parent is not None and closest(tag.parent, "datalist") is not None:
            return False
        return True

    def validity_state(self, tag: Tag) -> Dict[str, bool]:
        """
        Returns every known validity flag with its current state.
        Elements barred from validation report all flags as False.
        """
        state = {flag: False for flag in DOMRegistry.get_all_possible_flags()}
        if not self.will_validate(tag):
            return state

        control = DOMRegistry.build_control(tag)
        if control is None:
            return state

        for rule in self.rules:
            for flag in rule(control):
                state[flag] = True
        return state

    def check_validity(self, tag: Tag) -> bool:
        """Runs constraint validation on a control, or on every control of a form or fieldset."""
        if not has_validity_check(tag):
            return False
        if tag.name == "form":
            controls: List[Tag] = associated_controls(tag)
        elif tag.name == "fieldset":
            controls = tag.find_all(list(LISTED_TAGS))
        else:
            controls = [tag]

        for control in controls:
            failed = [flag for flag, on in self.validity_state(control).items() if on]
            if failed:
                logger.debug("<%s name=%r> fails constraints: %s", control.name, get_attribute(control, "name"), failed)
                return False
        return True
