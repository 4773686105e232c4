# src/domstate/services/accessible_name_service.py
"""
Default provider of accessible names and descriptions.

This is a best-effort text alternative computation modelled on the accname
algorithm: aria-labelledby, aria-label, native labelling, name from content,
then tooltip attributes. It does not consult CSS-generated content.
"""
import logging
from typing import List, Optional, Protocol, Set

from bs4 import Comment, NavigableString, Tag

from domtree.tree import (
    get_attribute,
    get_element_by_id,
    has_attribute,
    input_type,
    is_element,
    is_graphics_element,
    iter_ancestors,
    text_content,
    tree_root,
)
from domtree.registry import DOMRegistry

logger = logging.getLogger(__name__)

NAME_FROM_CONTENT_ROLES = {
    "button", "cell", "checkbox", "columnheader", "gridcell", "heading", "link",
    "menuitem", "menuitemcheckbox", "menuitemradio", "option", "radio", "row",
    "rowheader", "sectionhead", "switch", "tab", "tooltip", "treeitem",
}

LABELABLE_TAGS = ("button", "input", "meter", "output", "progress", "select", "textarea")

BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
    "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
    "table", "td", "th", "tr", "ul",
}

IMPLICIT_ROLES = {
    "article": "article", "aside": "complementary", "button": "button",
    "datalist": "listbox", "dialog": "dialog", "fieldset": "group", "figure": "figure",
    "form": "form", "h1": "heading", "h2": "heading", "h3": "heading", "h4": "heading",
    "h5": "heading", "h6": "heading", "hr": "separator", "img": "img", "li": "listitem",
    "main": "main", "nav": "navigation", "ol": "list", "optgroup": "group",
    "option": "option", "progress": "progressbar", "section": "region",
    "summary": "button", "table": "table", "tbody": "rowgroup", "td": "cell",
    "textarea": "textbox", "tfoot": "rowgroup", "th": "columnheader",
    "thead": "rowgroup", "tr": "row", "ul": "list",
}

INPUT_ROLES = {
    "button": "button", "checkbox": "checkbox", "email": "textbox", "image": "button",
    "number": "spinbutton", "radio": "radio", "range": "slider", "reset": "button",
    "search": "searchbox", "submit": "button", "tel": "textbox", "text": "textbox",
    "url": "textbox",
}


class AccessibilityProvider(Protocol):
    """The capability the accessible name predicates depend on."""

    def compute_accessible_name(self, node: Tag) -> str:
        ...

    def compute_accessible_description(self, node: Tag) -> str:
        ...


def _collapse(text: str) -> str:
    return " ".join((text or "").split())


def element_role(tag: Tag) -> str:
    """Returns the explicit role of an element, or its implicit role."""
    explicit = (get_attribute(tag, "role") or "").split()
    if explicit:
        return explicit[0].lower()
    if tag.name == "a" and has_attribute(tag, "href"):
        return "link"
    if tag.name == "input":
        return INPUT_ROLES.get(input_type(tag), "")
    if tag.name == "select":
        return "listbox" if has_attribute(tag, "multiple") else "combobox"
    return IMPLICIT_ROLES.get(tag.name, "")


def is_hidden(tag: Tag) -> bool:
    """Hidden from the accessibility tree by the 'hidden' attribute or aria-hidden on the element or an ancestor."""
    for element in [tag] + [a for a in iter_ancestors(tag) if is_element(a)]:
        if has_attribute(element, "hidden") or get_attribute(element, "aria-hidden") == "true":
            return True
    return False


class AccessibleNameService:
    """
    Computes text alternatives for elements of a BeautifulSoup tree.
    """

    def compute_accessible_name(self, node: Tag) -> str:
        if not is_element(node):
            return ""
        return _collapse(self._text_alternative(node, set(), referenced=False, in_content=False))

    def compute_accessible_description(self, node: Tag) -> str:
        if not is_element(node):
            return ""
        described_by = self._referenced_text(node, "aria-describedby")
        if described_by:
            return described_by

        description = _collapse(get_attribute(node, "aria-description") or "")
        if description:
            return description

        title = _collapse(get_attribute(node, "title") or "")
        if title and self.compute_accessible_name(node) != title:
            return title
        return ""

    # --- Internals ---

    def _referenced_text(self, node: Tag, attr: str, visited: Optional[Set[int]] = None) -> str:
        visited = visited if visited is not None else {id(node)}
        scope = tree_root(node)
        parts: List[str] = []
        for ref_id in (get_attribute(node, attr) or "").split():
            target = get_element_by_id(scope, ref_id)
            if target is None:
                logger.debug("%s references missing id %r", attr, ref_id)
                continue
            if id(target) in visited:
                continue
            visited.add(id(target))
            text = _collapse(self._text_alternative(target, visited, referenced=True, in_content=False))
            if text:
                parts.append(text)
        return " ".join(parts)

    def _text_alternative(self, node: Tag, visited: Set[int], referenced: bool, in_content: bool) -> str:
        if not referenced and is_hidden(node):
            return ""

        if not referenced and not in_content and has_attribute(node, "aria-labelledby"):
            labelled = self._referenced_text(node, "aria-labelledby", visited | {id(node)})
            if labelled:
                return labelled

        # Embedded controls contribute their value when named from a label's content
        if in_content:
            embedded = self._embedded_control_value(node)
            if embedded is not None:
                return embedded

        aria_label = _collapse(get_attribute(node, "aria-label") or "")
        if aria_label:
            return aria_label

        native = self._native_name(node, visited)
        if native:
            return native

        role = element_role(node)
        if in_content or referenced or role in NAME_FROM_CONTENT_ROLES:
            content = self._name_from_content(node, visited)
            if content.strip():
                return content

        tooltip = _collapse(get_attribute(node, "title") or "")
        if tooltip:
            return tooltip
        if node.name in ("input", "textarea"):
            return _collapse(get_attribute(node, "placeholder") or "")
        return ""

    def _embedded_control_value(self, node: Tag) -> Optional[str]:
        if node.name == "input" and input_type(node) in ("text", "search", "email", "tel", "url", "number"):
            control = DOMRegistry.build_control(node)
            return control.value if control is not None else ""
        if node.name == "select":
            control = DOMRegistry.build_control(node)
            if control is None:
                return ""
            return " ".join(_collapse(option.text) for option in control.selected_options)
        return None

    def _native_name(self, node: Tag, visited: Set[int]) -> str:
        name = node.name
        if name == "input":
            kind = input_type(node)
            if kind in ("button", "submit", "reset"):
                value = get_attribute(node, "value")
                if value is not None:
                    return _collapse(value)
                return {"submit": "Submit", "reset": "Reset"}.get(kind, "")
            if kind == "image":
                return _collapse(get_attribute(node, "alt") or get_attribute(node, "value") or "") or "Submit"
        if name in LABELABLE_TAGS and not (name == "input" and input_type(node) == "hidden"):
            labels = self._labels_text(node, visited)
            if labels:
                return labels
        if name in ("img", "area") or (name == "input" and input_type(node) == "image"):
            return _collapse(get_attribute(node, "alt") or "")
        if name == "fieldset":
            return self._child_caption(node, "legend", visited)
        if name == "figure":
            return self._child_caption(node, "figcaption", visited)
        if name == "table":
            return self._child_caption(node, "caption", visited)
        if is_graphics_element(node):
            title = node.find("title", recursive=False)
            if title is not None:
                return _collapse(text_content(title))
        return ""

    def _labels_text(self, node: Tag, visited: Set[int]) -> str:
        labels: List[Tag] = []
        control_id = get_attribute(node, "id")
        if control_id:
            for label in tree_root(node).find_all("label"):
                if get_attribute(label, "for") == control_id:
                    labels.append(label)
        for ancestor in iter_ancestors(node):
            if is_element(ancestor) and ancestor.name == "label" and not has_attribute(ancestor, "for"):
                if not any(label is ancestor for label in labels):
                    labels.append(ancestor)
                break

        parts = []
        for label in labels:
            if id(label) in visited:
                continue
            text = _collapse(self._name_from_content(label, visited | {id(label), id(node)}, skip=node))
            if text:
                parts.append(text)
        return " ".join(parts)

    def _child_caption(self, node: Tag, caption_tag: str, visited: Set[int]) -> str:
        caption = node.find(caption_tag, recursive=False)
        if caption is None:
            return ""
        return _collapse(self._name_from_content(caption, visited | {id(caption)}))

    def _name_from_content(self, node: Tag, visited: Set[int], skip: Optional[Tag] = None) -> str:
        parts: List[str] = []
        for child in node.children:
            if isinstance(child, Comment):
                continue
            if isinstance(child, NavigableString):
                parts.append(str(child))
                continue
            if not isinstance(child, Tag) or child is skip or child.name in ("script", "style", "template"):
                continue
            if is_hidden(child):
                continue
            text = self._text_alternative(child, visited, referenced=False, in_content=True)
            if child.name in BLOCK_TAGS:
                text = f" {text} "
            parts.append(text)
        return "".join(parts)
