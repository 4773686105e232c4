# tests/predicates/test_state.py
import pytest

from domstate.core.context.dom_context import DomContext
from domstate.predicates.state import (
    has_focus,
    is_checked,
    is_empty,
    is_empty_dom_element,
    is_invalid,
    is_required,
    is_valid,
)


@pytest.mark.parametrize("markup, expected", [
    ('<input type="checkbox" checked>', True),
    ('<input type="checkbox">', False),
    ('<input type="checkbox" checked="false">', False),
    ('<input type="radio" checked>', True),
    ('<input type="text" checked>', False),
    ('<div role="checkbox" checked>', True),
    # Alleen het checked-attribuut telt, aria-checked niet
    ('<div role="checkbox" aria-checked="true">', False),
    ('<div role="radio" checked="">', True),
    ('<div role="radio" checked="false">', False),
    ('<div role="checkbox" aria-checked="false">', False),
    ('<div role="switch" aria-checked="true">', False),
    ('<div checked>', False),
])
def test_is_checked(parse, markup, expected):
    node = parse(markup).body.find(True)
    assert is_checked(node) is expected


def test_is_checked_non_element(parse):
    assert not is_checked(None)
    assert not is_checked(parse("<p>x</p>").p.string)


@pytest.mark.parametrize("markup, expected", [
    ('<div></div>', True),
    ('<div><!-- alleen commentaar --></div>', True),
    ('<div> </div>', False),
    ('<div><span></span></div>', False),
])
def test_is_empty_dom_element(parse, markup, expected):
    assert is_empty_dom_element(parse(markup).body.div) is expected


def test_is_empty_is_stricter_and_deprecated(parse):
    """is_empty kijkt naar de geserialiseerde inhoud: commentaar telt dan wel mee."""
    doc = parse('<div id="a"></div><div id="b"><!-- c --></div>')
    with pytest.warns(DeprecationWarning):
        assert is_empty(doc.find(id="a"))
    with pytest.warns(DeprecationWarning):
        assert not is_empty(doc.find(id="b"))
    assert is_empty_dom_element(doc.find(id="b"))


@pytest.mark.parametrize("markup, invalid, valid", [
    # Valideerbaar en geldig
    ('<input value="x" required>', False, True),
    # Valideerbaar en ongeldig
    ('<input required>', True, False),
    # aria-invalid forceert ongeldig, maar is_valid volgt checkValidity
    ('<input value="x" aria-invalid="true">', True, True),
    # Niet valideerbaar, zonder aria-invalid: beide waar
    ('<div>', True, True),
    ('<div aria-invalid="false">', True, True),
    # Niet valideerbaar, met aria-invalid
    ('<div aria-invalid="true">', True, False),
    ('<div aria-invalid="grammar">', True, False),
    # Formulieren aggregeren
    ('<form><input required></form>', True, False),
    ('<form><input></form>', False, True),
])
def test_validity_truth_table(parse, markup, invalid, valid):
    """De waarheidstabel van is_invalid/is_valid is bewust geen complement."""
    node = parse(markup).body.find(True)
    assert is_invalid(node) is invalid
    assert is_valid(node) is valid


def test_validity_non_elements(parse):
    doc = parse('<svg><rect id="r"/></svg>')
    for node in (None, doc, doc.find(id="r")):
        assert not is_invalid(node)
        assert not is_valid(node)


@pytest.mark.parametrize("markup, expected", [
    ('<input required>', True),
    ('<input type="email" required>', True),
    ('<input type="color" required>', False),
    # Het type wordt vergeleken zoals het geschreven is
    ('<input type="COLOR" required>', True),
    ('<input type=" color" required>', True),
    ('<input type="hidden" required>', False),
    ('<input type="range" required>', False),
    ('<input type="submit" required>', False),
    ('<input type="image" required>', False),
    ('<input type="reset" required>', False),
    ('<textarea required></textarea>', True),
    ('<select required></select>', True),
    ('<input>', False),
    ('<div required>', False),
    ('<div role="combobox" aria-required="true">', True),
    ('<div role="tree" aria-required="true">', True),
    ('<div role="combobox" aria-required="false">', False),
    ('<div role="textbox" aria-required="true">', False),
])
def test_is_required(parse, markup, expected):
    assert is_required(parse(markup).body.find(True)) is expected


def test_is_required_does_not_propagate(parse):
    doc = parse('<fieldset required><input id="i"></fieldset>')
    assert not is_required(doc.find(id="i"))


def test_has_focus_defaults_to_body(parse):
    doc = parse('<input id="a"><input id="b">')
    assert has_focus(doc.body)
    assert not has_focus(doc.find(id="a"))


def test_has_focus_autofocus(parse):
    doc = parse('<input id="a"><input id="b" autofocus>')
    assert has_focus(doc.find(id="b"))
    assert not has_focus(doc.body)


def test_has_focus_with_context(parse, builder):
    doc = parse('<input id="a"><input id="b" autofocus>')
    ctx = DomContext(document=doc)
    assert ctx.focus(doc.find(id="a"))
    assert has_focus(doc.find(id="a"), ctx)
    assert not has_focus(doc.find(id="b"), ctx)

    # Een losgekoppeld element kan geen focus krijgen
    detached = builder.parse_fragment("<input>")[0]
    assert not ctx.focus(detached)
    assert has_focus(doc.find(id="a"), ctx)

    # Na verwijderen uit het document valt de focus terug
    doc.find(id="a").extract()
    assert has_focus(doc.find(id="b"), ctx)

    ctx.blur()
    assert has_focus(doc.find(id="b"), ctx)
    assert not has_focus(None, ctx)
