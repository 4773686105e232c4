# tests/dom/test_builder.py
from bs4 import BeautifulSoup

from domtree.builder import DocumentBuilder
from domtree.tree import body_element, document_element, inner_html


def test_parse_doc_adds_skeleton_to_fragment(builder):
    """Een fragment krijgt een html/head/body skelet, met de inhoud in <body>."""
    doc = builder.parse_doc("<p>Hallo</p>")
    root = document_element(doc)
    assert root.name == "html"
    assert [child.name for child in root.find_all(recursive=False)] == ["head", "body"]
    assert body_element(doc).p.get_text() == "Hallo"


def test_parse_doc_moves_head_tags(builder):
    """Losse <title>/<style> aan het begin belanden in een gesynthetiseerde <head>."""
    doc = builder.parse_doc("<title>T</title><style>p{color:red}</style><p>x</p>")
    head = document_element(doc).find("head", recursive=False)
    assert [child.name for child in head.find_all(recursive=False)] == ["title", "style"]
    assert body_element(doc).find("p") is not None


def test_parse_doc_keeps_full_document(builder):
    html = "<!DOCTYPE html><html><head><title>T</title></head><body><div id='a'></div></body></html>"
    doc = builder.parse_doc(html)
    assert body_element(doc).find(id="a") is not None
    assert len(doc.find_all("body")) == 1


def test_parse_doc_strips_bom(builder):
    doc = builder.parse_doc("\ufeff<p>x</p>")
    assert "\ufeff" not in str(doc)


def test_parse_fragment_returns_detached_nodes(builder):
    nodes = builder.parse_fragment("<b>a</b> tekst <i>b</i>")
    assert [getattr(node, "name", None) for node in nodes] == ["b", None, "i"]
    assert all(node.parent is None for node in nodes)


def test_set_inner_html_replaces_children(builder, parse):
    doc = parse("<div id='box'><span>oud</span></div>")
    box = doc.find(id="box")
    builder.set_inner_html(box, "<em>nieuw</em>")
    assert inner_html(box) == "<em>nieuw</em>"


def test_create_scratch_element_is_detached(parse):
    doc = parse("<p>x</p>")
    scratch = DocumentBuilder().create_scratch_element(doc, "div")
    assert scratch.name == "div"
    assert scratch.parent is None
    # Zonder document wordt een leeg document als eigenaar gebruikt
    orphan = DocumentBuilder().create_scratch_element(None)
    assert orphan.name == "div"


def test_builder_defaults_to_configured_parser():
    assert DocumentBuilder().features == "html.parser"
    assert isinstance(DocumentBuilder().parse_doc("<p></p>"), BeautifulSoup)
