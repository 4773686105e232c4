# tests/predicates/test_accessibility.py
import re
from unittest.mock import MagicMock

import pytest

from domstate.core.context.dom_context import DomContext
from domstate.predicates.accessibility import (
    has_accessible_description,
    has_accessible_name,
    has_description,
    has_error_message,
    referenced_text,
)


@pytest.fixture
def stub_context():
    """Een DomContext met een nep-provider, zodat de predicates los van het naamalgoritme getest worden."""
    provider = MagicMock()
    provider.compute_accessible_name.return_value = "Opslaan"
    provider.compute_accessible_description.return_value = "Bewaar"
    return DomContext(accessibility=provider)


def test_has_accessible_name_with_stub(parse, stub_context):
    button = parse("<button>x</button>").button
    assert has_accessible_name(button, context=stub_context)
    assert has_accessible_name(button, "Opsla", context=stub_context)
    assert has_accessible_name(button, re.compile("^Opslaan$"), context=stub_context)
    assert not has_accessible_name(button, "Annuleren", context=stub_context)
    stub_context.accessibility.compute_accessible_name.assert_called_with(button)


def test_accessible_name_length_heuristic(parse, stub_context):
    """Zonder verwachting moet de naam langer zijn dan 3 tekens."""
    button = parse("<button>x</button>").button
    stub_context.accessibility.compute_accessible_name.return_value = "Ok!"
    assert not has_accessible_name(button, context=stub_context)
    assert not has_accessible_name(button, "", context=stub_context)
    stub_context.accessibility.compute_accessible_name.return_value = "Oké!"
    assert has_accessible_name(button, context=stub_context)


def test_accessible_predicates_skip_non_elements(stub_context):
    assert not has_accessible_name(None, context=stub_context)
    assert not has_accessible_description("tekst", context=stub_context)
    stub_context.accessibility.compute_accessible_name.assert_not_called()


def test_has_accessible_description_with_stub(parse, stub_context):
    svg = parse('<svg><rect id="r"/></svg>').find(id="r")
    assert has_accessible_description(svg, context=stub_context)
    assert has_accessible_description(svg, "Bew", context=stub_context)
    assert not has_accessible_description(svg, re.compile("^Bew$"), context=stub_context)


@pytest.mark.parametrize("markup, expected", [
    ('<button id="t">Opslaan</button>', "Opslaan"),
    ('<button id="t" aria-label="Sluiten">X</button>', "Sluiten"),
    ('<span id="l">Zoek</span><input id="t" aria-labelledby="l">', "Zoek"),
    ('<label for="t">Naam</label><input id="t">', "Naam"),
    ('<label>E-mail <input id="t" type="email"></label>', "E-mail"),
    ('<img id="t" alt="Logo">', "Logo"),
    ('<input id="t" type="submit">', "Submit"),
    ('<input id="t" type="button" value="Verstuur">', "Verstuur"),
    ('<fieldset id="t"><legend>Adres</legend></fieldset>', "Adres"),
    ('<a id="t" href="#">Lees <span hidden>niet</span>meer</a>', "Lees meer"),
    ('<div id="t">Alleen tekst</div>', ""),
    ('<input id="t" placeholder="Zoeken">', "Zoeken"),
    ('<svg id="t"><title>Grafiek</title></svg>', "Grafiek"),
])
def test_default_name_provider(parse, markup, expected):
    """De ingebouwde naamberekening dekt de gangbare labelbronnen."""
    node = parse(markup).find(id="t")
    assert DomContext.for_node(node).accessibility.compute_accessible_name(node) == expected


def test_default_description_provider(parse):
    doc = parse(
        '<button id="a" aria-describedby="d1 d2">Knop</button><p id="d1">Eerste</p><p id="d2">Tweede</p>'
        '<button id="b" title="Uitleg">Knop</button>'
    )
    assert has_accessible_description(doc.find(id="a"), "Eerste Tweede")
    assert has_accessible_description(doc.find(id="b"), "Uitleg")


def test_referenced_text_keeps_preceding_whitespace(parse):
    doc = parse(
        '<input id="i" aria-describedby="  a missing   b blank">'
        '<p id="a">Een</p><p id="b">Twee</p><p id="blank">   </p>'
    )
    assert referenced_text(doc.find(id="i"), "aria-describedby") == "  Een   Twee"


def test_has_description_is_deprecated(parse):
    doc = parse('<input id="i" aria-describedby="hint"><p id="hint">Minimaal 8 tekens</p>')
    with pytest.warns(DeprecationWarning):
        assert has_description(doc.find(id="i"), "8 tekens")
    with pytest.warns(DeprecationWarning):
        assert not has_description(doc.find(id="i"), re.compile("^Maximaal"))


def test_has_error_message_requires_invalid(parse):
    doc = parse(
        '<input id="bad" required aria-errormessage="err">'
        '<input id="good" value="x" aria-errormessage="err">'
        '<input id="flagged" value="x" aria-invalid="true" aria-errormessage="err">'
        '<p id="err">Dit veld is verplicht</p>'
    )
    assert has_error_message(doc.find(id="bad"), "verplicht")
    assert has_error_message(doc.find(id="bad"), re.compile(r"^\s*Dit veld"))
    assert not has_error_message(doc.find(id="bad"), "optioneel")
    assert not has_error_message(doc.find(id="good"), "verplicht")
    assert has_error_message(doc.find(id="flagged"), "verplicht")
    assert not has_error_message(None, "verplicht")
