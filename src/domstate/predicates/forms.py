# src/domstate/predicates/forms.py
"""
Form value extraction.

Values are read from control snapshots built by the DOMRegistry, so they follow the
same sanitization and selectedness rules the constraint validation uses.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from bs4 import Tag

from domstate.core.matcher import is_pattern, matches, strict_equals
from domstate.core.predicate_registry import predicate_spec
from domtree.core import ControlBase
from domtree.elements.input import InputControl
from domtree.elements.select import SelectControl
from domtree.registry import DOMRegistry
from domtree.tree import NodeKind, classify, form_controls, is_html_element

logger = logging.getLogger(__name__)

# Stands in for a value that does not exist, so that it never equals None
_MISSING = object()


def _is_form(node) -> bool:
    return is_html_element(node) and node.name == "form"


def _group_value(controls: List[ControlBase]) -> Any:
    """Value of a group of same-named controls: the checked radio's value or the checked values."""
    first = controls[0]
    if isinstance(first, InputControl) and first.type == "radio":
        for control in controls:
            if isinstance(control, InputControl) and control.checked:
                return control.value
        return None
    return [control.value for control in controls if isinstance(control, InputControl) and control.checked]


def _single_value(control: ControlBase) -> Any:
    if isinstance(control, SelectControl):
        if control.multiple:
            return [option.value for option in control.selected_options]
        return control.value
    if isinstance(control, InputControl):
        if control.type == "number":
            return control.value_as_number
        if control.type in ("checkbox", "radio"):
            return control.checked
    return getattr(control, "value", "")


def form_values(form: Tag) -> Dict[str, Any]:
    """
    Computes the normalized value of every named field of a form.

    Controls sharing a name form one field: a radio group yields the checked value
    (or None), any other group the list of checked values. A single control yields a
    list of selected values (multi-select), the selected value (select), a float
    (number input, NaN when empty), the checked state (checkbox/radio) or its value.

    Args:
        form (Tag): The <form> element. Every control below it counts, and so do
                    controls outside it that point to it with a 'form' attribute.

    Returns:
        Dict[str, Any]: Field values keyed by name, in order of first appearance.
    """
    groups: Dict[str, List[ControlBase]] = {}
    for element in form_controls(form):
        control = DOMRegistry.build_control(element)
        if control is None or not control.name:
            continue
        groups.setdefault(control.name, []).append(control)

    values: Dict[str, Any] = {}
    for name, controls in groups.items():
        values[name] = _group_value(controls) if len(controls) > 1 else _single_value(controls[0])
    return values


def _item(actual: Any, index: int) -> Any:
    if isinstance(actual, (list, tuple, str)) and index < len(actual):
        return actual[index]
    return _MISSING


def _values_match(actual: Any, expected: Any) -> bool:
    if isinstance(expected, (list, tuple)):
        # Expected lists are prefixes: extra actual entries are not checked
        return all(strict_equals(_item(actual, index), value) for index, value in enumerate(expected))
    return strict_equals(actual, expected)


@predicate_spec("has_form_values")
def has_form_values(form, expected: Mapping) -> bool:
    """Checks if a form has the expected field values; fields left out are not checked."""
    if not _is_form(form) or not isinstance(expected, Mapping):
        return False
    actual = form_values(form)
    for name, value in expected.items():
        if not _values_match(actual.get(name), value):
            logger.debug("Form field %r is %r, expected %r", name, actual.get(name, _MISSING), value)
            return False
    return True


@predicate_spec("has_value")
def has_value(node, expected: Any) -> bool:
    """Checks if an input, select or textarea has the given value (a number for number inputs)."""
    kind = classify(node)
    if kind not in (NodeKind.TEXT_LIKE, NodeKind.CHECKABLE, NodeKind.SELECT):
        return False
    control = DOMRegistry.build_control(node)
    if control is None:
        return False

    if isinstance(control, SelectControl):
        if not control.multiple:
            return strict_equals(control.value, expected)
        wanted = list(expected) if isinstance(expected, (list, tuple)) else [expected]
        return all(
            strict_equals(_item(wanted, index), option.value)
            for index, option in enumerate(control.selected_options)
        )
    if isinstance(control, InputControl) and control.type == "number":
        return strict_equals(control.value_as_number, expected)
    return strict_equals(getattr(control, "value", None), expected)


def display_values(node: Tag) -> Optional[List[str]]:
    """The rendered values of a field: the text of selected options, or the field value."""
    kind = classify(node)
    if kind not in (NodeKind.TEXT_LIKE, NodeKind.SELECT):
        return None
    control = DOMRegistry.build_control(node)
    if control is None:
        return None
    if isinstance(control, SelectControl):
        return [option.text for option in control.selected_options]
    return [getattr(control, "value", "")]


@predicate_spec("has_display_value")
def has_display_value(node, expected: Any) -> bool:
    """Checks the shown value of a field: option text for selects, the value otherwise."""
    actual = display_values(node)
    if actual is None:
        return False
    wanted: Sequence = list(expected) if isinstance(expected, (list, tuple)) else [expected]
    for index, value in enumerate(wanted):
        if not is_pattern(value) and not isinstance(value, str):
            return False
        if index >= len(actual):
            # Literals past the selected options pass, patterns have nothing to search.
            if is_pattern(value):
                return False
            continue
        if not matches(actual[index], value):
            return False
    return True
