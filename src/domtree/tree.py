# src/domtree/tree.py
"""
Node classification and read-only navigation helpers over BeautifulSoup trees.

Nodes are compared by identity throughout: bs4 implements `==` on tags as a
structural comparison, so two identical <li> siblings would compare equal.
"""
import logging
from enum import Enum
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.element import PreformattedString

logger = logging.getLogger(__name__)

FORM_CONTROL_TAGS = ("input", "select", "textarea")
LISTED_TAGS = ("button", "fieldset", "input", "object", "output", "select", "textarea")

INPUT_TYPES = {
    "button", "checkbox", "color", "date", "datetime-local", "email", "file", "hidden",
    "image", "month", "number", "password", "radio", "range", "reset", "search",
    "submit", "tel", "text", "time", "url", "week",
}
CHECKABLE_INPUT_TYPES = ("checkbox", "radio")


class NodeKind(str, Enum):
    """Capability class of a node, decided once per predicate call."""
    TEXT_LIKE = "text_like"
    SELECT = "select"
    CHECKABLE = "checkable"
    GENERIC = "generic"
    GRAPHICS = "graphics"
    NON_ELEMENT = "non_element"


def is_document(node) -> bool:
    return isinstance(node, BeautifulSoup)


def is_element(node) -> bool:
    """True for HTML and SVG element nodes; documents, text and comments are not elements."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_comment(node) -> bool:
    return isinstance(node, Comment)


def is_graphics_element(node) -> bool:
    """
    True if the element lives in an <svg> subtree.
    HTML content embedded through <foreignObject> is not graphics content.
    """
    if not is_element(node):
        return False
    current = node
    while is_element(current):
        name = (current.name or "").lower()
        if name == "foreignobject" and current is not node:
            return False
        if name == "svg":
            return True
        current = current.parent
    return False


def is_html_element(node) -> bool:
    return is_element(node) and not is_graphics_element(node)


def is_styleable(node) -> bool:
    """Every element, HTML or SVG, resolves a computed style."""
    return is_element(node)


def input_type(tag: Tag) -> str:
    """Returns the normalized type of an <input>; missing or unknown types fall back to 'text'."""
    raw = (get_attribute(tag, "type") or "").strip().lower()
    return raw if raw in INPUT_TYPES else "text"


def classify(node) -> NodeKind:
    if not is_element(node):
        return NodeKind.NON_ELEMENT
    if is_graphics_element(node):
        return NodeKind.GRAPHICS
    if node.name == "select":
        return NodeKind.SELECT
    if node.name == "textarea":
        return NodeKind.TEXT_LIKE
    if node.name == "input":
        if input_type(node) in CHECKABLE_INPUT_TYPES:
            return NodeKind.CHECKABLE
        return NodeKind.TEXT_LIKE
    return NodeKind.GENERIC


# --- Attributes ---

def get_attribute(tag: Tag, name: str) -> Optional[str]:
    """
    Reads an attribute as its raw string value, or None if absent.
    bs4 splits multi-valued attributes such as 'class' into lists; they are joined back here.
    """
    value = tag.attrs.get(name.lower())
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def has_attribute(tag: Tag, name: str) -> bool:
    return name.lower() in tag.attrs


def has_truthy_attribute(tag: Tag, name: str) -> bool:
    """True if the attribute is present with any value other than the literal "false"."""
    value = get_attribute(tag, name)
    return value is not None and value != "false"


def class_list(tag: Tag) -> List[str]:
    value = tag.attrs.get("class")
    if value is None:
        return []
    if isinstance(value, list):
        return [token for token in value if token]
    return str(value).split()


# --- Navigation ---

def iter_ancestors(node) -> Iterator[Tag]:
    """Yields the parent chain of a node, nearest first, up to and including the document."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def tree_root(node):
    """Returns the top-most ancestor of a node, or the node itself when it has no parent."""
    root = node
    for ancestor in iter_ancestors(node):
        root = ancestor
    return root


def owner_document(node) -> Optional[BeautifulSoup]:
    """Returns the document a node is attached to, or None for detached subtrees."""
    root = tree_root(node)
    return root if is_document(root) else None


def document_element(document: BeautifulSoup) -> Optional[Tag]:
    """Returns the root element (<html>) of a document."""
    for child in document.children:
        if is_element(child):
            return child
    return None


def body_element(document: BeautifulSoup) -> Optional[Tag]:
    root = document_element(document)
    if root is None:
        return None
    return root.find("body", recursive=False)


def get_element_by_id(scope, element_id: str) -> Optional[Tag]:
    """Finds the first element in tree order carrying the given id within a document or subtree."""
    if not element_id or scope is None:
        return None
    if is_element(scope) and get_attribute(scope, "id") == element_id:
        return scope
    return scope.find(attrs={"id": element_id})


def contains(ancestor: Tag, descendant: Tag) -> bool:
    """Native containment: a node contains itself and all of its descendants."""
    if descendant is ancestor:
        return True
    return any(parent is ancestor for parent in iter_ancestors(descendant))


def closest(node: Tag, tag_name: str) -> Optional[Tag]:
    """Returns the nearest ancestor-or-self element with the given tag name."""
    current = node
    while is_element(current):
        if current.name == tag_name:
            return current
        current = current.parent
    return None


def form_owner(control: Tag) -> Optional[Tag]:
    """
    Resolves the form a listed element belongs to.
    An explicit 'form' attribute wins over the ancestor form, even when it resolves to nothing.
    """
    if has_attribute(control, "form"):
        target = get_element_by_id(tree_root(control), get_attribute(control, "form") or "")
        if target is not None and target.name == "form":
            return target
        return None
    parent = control.parent
    return closest(parent, "form") if parent is not None else None


def associated_controls(form: Tag, tag_names=LISTED_TAGS) -> List[Tag]:
    """Returns the listed elements whose form owner is the given form, in tree order."""
    return [
        element for element in tree_root(form).find_all(list(tag_names))
        if form_owner(element) is form
    ]


def form_controls(form: Tag, tag_names=FORM_CONTROL_TAGS) -> List[Tag]:
    """
    Returns every control below the form, whatever its own 'form' attribute says,
    plus the controls outside it that point to it with a 'form' attribute. Tree order.
    """
    return [
        element for element in tree_root(form).find_all(list(tag_names))
        if contains(form, element) or form_owner(element) is form
    ]


# --- Content ---

def text_content(node) -> str:
    """Concatenates every text node below the node; comments, doctypes and CDATA are skipped."""
    if isinstance(node, NavigableString):
        return "" if isinstance(node, PreformattedString) else str(node)
    if not isinstance(node, Tag):
        return ""
    return "".join(
        str(descendant)
        for descendant in node.descendants
        if isinstance(descendant, NavigableString) and not isinstance(descendant, PreformattedString)
    )


def inner_html(tag: Tag) -> str:
    """Serializes the children of an element."""
    return tag.decode_contents()
