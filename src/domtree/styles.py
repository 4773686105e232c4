# src/domtree/styles.py
"""
Computed style resolution for BeautifulSoup trees.

The cascade is a deliberately small subset of CSS: a user-agent sheet with the
HTML display defaults, every <style> element of the tree and the inline style
attribute, ordered by importance, origin, specificity and source order.
Inherited properties and the 'inherit'/'initial'/'unset' keywords are resolved
against the parent's computed style. Layout is not simulated, so lengths are
reported as declared.
"""
import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple

import soupsieve
from bs4 import Tag

from .tree import get_attribute, is_element, iter_ancestors, tree_root

logger = logging.getLogger(__name__)

USER_AGENT_STYLESHEET = """
html, address, blockquote, body, center, dialog, div, figure, figcaption, footer, form,
header, hr, legend, listing, main, p, plaintext, pre, search, xmp, article, aside,
h1, h2, h3, h4, h5, h6, hgroup, nav, section, dir, dd, dl, dt, menu, ol, ul,
fieldset, details, summary, optgroup, option { display: block; }
li { display: list-item; }
table { display: table; }
caption { display: table-caption; }
colgroup { display: table-column-group; }
col { display: table-column; }
thead { display: table-header-group; }
tbody { display: table-row-group; }
tfoot { display: table-footer-group; }
tr { display: table-row; }
td, th { display: table-cell; }
input, select, textarea, button, img, video, iframe, object { display: inline-block; }
ruby { display: ruby; }
rt { display: ruby-text; }
[hidden], area, base, basefont, datalist, head, link, meta, noembed, noframes,
param, rp, script, style, template, title { display: none; }
"""

INHERITED_PROPERTIES = {
    "border-collapse", "border-spacing", "caption-side", "color", "cursor", "direction",
    "empty-cells", "font", "font-family", "font-size", "font-style", "font-variant",
    "font-weight", "hyphens", "letter-spacing", "line-height", "list-style",
    "list-style-image", "list-style-position", "list-style-type", "orphans",
    "overflow-wrap", "pointer-events", "quotes", "tab-size", "text-align", "text-indent",
    "text-shadow", "text-transform", "visibility", "white-space", "widows", "word-break",
    "word-spacing",
}

INITIAL_VALUES = {
    "display": "inline",
    "visibility": "visible",
}

PSEUDO_ELEMENTS = ("before", "after")

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.I)
_PSEUDO_ELEMENT_RE = re.compile(r"::?(before|after)\s*$", re.I)
_UNSUPPORTED_PSEUDO_RE = re.compile(r"::|:first-line\b|:first-letter\b", re.I)

# Origins, lowest priority first
ORIGIN_USER_AGENT = 0
ORIGIN_AUTHOR = 1

Specificity = Tuple[int, int, int, int]
INLINE_SPECIFICITY: Specificity = (1, 0, 0, 0)


def property_name(name: str) -> str:
    """Normalizes a DOM-style (camelCase) property name to its CSS form: backgroundColor -> background-color."""
    name = name.strip()
    if name == "cssFloat":
        return "float"
    if name.startswith("--"):
        return name
    return re.sub(r"([A-Z])", lambda m: "-" + m.group(1).lower(), name).lower()


def _split_top_level(text: str, separator: str) -> List[str]:
    """Splits on a separator that is not nested in quotes, parentheses or brackets."""
    parts, current = [], []
    depth, quote = 0, None
    for char in text:
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth = max(0, depth - 1)
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def parse_declarations(text: str) -> List[Tuple[str, str, bool]]:
    """
    Parses a declaration block ('color: red; width: 0 !important') into
    (property, value, important) triples. Fragments without a property or a value are skipped.
    """
    declarations = []
    for fragment in _split_top_level(_COMMENT_RE.sub("", text or ""), ";"):
        if not fragment.strip():
            continue
        key, sep, value = fragment.partition(":")
        key = key.strip()
        important = bool(_IMPORTANT_RE.search(value))
        value = " ".join(_IMPORTANT_RE.sub("", value).split())
        if not sep or not key or not value:
            logger.debug("Skipping unrecognized declaration fragment: %r", fragment.strip())
            continue
        declarations.append((property_name(key), value, important))
    return declarations


def selector_specificity(selector: str) -> Specificity:
    """Approximates the (inline, id, class, type) specificity of a single complex selector."""
    text = re.sub(r":where\((?:[^()]|\([^()]*\))*\)", "", selector)
    text = re.sub(r":(?:not|is|has|matches)\(", " ", text)
    attributes = len(re.findall(r"\[[^\]]*\]", text))
    text = re.sub(r"\[[^\]]*\]", " ", text)
    ids = len(re.findall(r"#[\w-]+", text))
    classes = len(re.findall(r"\.[\w-]+", text))
    pseudo_classes = len(re.findall(r"(?<!:):[\w-]+", text))
    text = re.sub(r"[#.:][\w-]+(\([^)]*\))?", " ", text)
    types = len(re.findall(r"(?:^|[\s>+~(,])([a-zA-Z][\w-]*)", text))
    return 0, ids, classes + attributes + pseudo_classes, types


class StyleRule:
    """A single selector of a rule set, with the declarations it applies."""

    def __init__(self, selector: str, pseudo: Optional[str], declarations: List[Tuple[str, str, bool]],
                 origin: int, order: int):
        self.selector = selector
        self.pseudo = pseudo
        self.declarations = declarations
        self.origin = origin
        self.order = order
        self.specificity = selector_specificity(selector)
        try:
            self.compiled = soupsieve.compile(selector)
        except soupsieve.SelectorSyntaxError as e:
            logger.debug("Ignoring unsupported selector %r: %s", selector, e)
            self.compiled = None

    def matches(self, tag: Tag) -> bool:
        return self.compiled is not None and self.compiled.match(tag)


def _iter_blocks(css_text: str) -> Iterator[Tuple[str, str]]:
    """Yields (prelude, body) pairs of the top-level blocks of a stylesheet."""
    text = _COMMENT_RE.sub("", css_text)
    depth, quote = 0, None
    prelude_start, body_start = 0, 0
    prelude = ""
    for index, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char == "{":
            if depth == 0:
                prelude = text[prelude_start:index].strip()
                body_start = index + 1
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                yield prelude, text[body_start:index]
                prelude_start = index + 1
            elif depth < 0:
                depth = 0
                prelude_start = index + 1
        elif char == ";" and depth == 0:
            # Block-less at-rules such as @import or @charset
            prelude_start = index + 1


def parse_stylesheet(css_text: str, origin: int = ORIGIN_AUTHOR, start_order: int = 0) -> List[StyleRule]:
    rules: List[StyleRule] = []
    order = start_order
    for prelude, body in _iter_blocks(css_text):
        if not prelude or prelude.startswith("@"):
            logger.debug("Skipping at-rule or empty prelude: %r", prelude[:40])
            continue
        declarations = parse_declarations(body)
        if not declarations:
            continue
        for selector in _split_top_level(prelude, ","):
            selector = selector.strip()
            if not selector:
                continue
            pseudo = None
            match = _PSEUDO_ELEMENT_RE.search(selector)
            if match:
                pseudo = match.group(1).lower()
                selector = selector[:match.start()].strip() or "*"
            if _UNSUPPORTED_PSEUDO_RE.search(selector):
                logger.debug("Skipping selector with unsupported pseudo-element: %r", selector)
                continue
            rules.append(StyleRule(selector, pseudo, declarations, origin, order))
            order += 1
    return rules


class ComputedStyle:
    """
    Read-only view of resolved property values.
    Properties can be read by CSS name or DOM name; unknown properties read as ''.
    """

    def __init__(self, values: Dict[str, str]):
        self._values = dict(values)

    def get_property_value(self, name: str) -> str:
        return self._values.get(property_name(name), "")

    def __getitem__(self, name: str) -> str:
        return self.get_property_value(name)

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get_property_value(name)

    def __contains__(self, name) -> bool:
        return property_name(name) in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self):
        return self._values.items()

    def __repr__(self) -> str:
        return f"<ComputedStyle {self._values!r}>"


class StyleResolver:
    """Resolves computed styles from the stylesheets found in an element's tree."""

    def __init__(self, user_agent_stylesheet: str = USER_AGENT_STYLESHEET):
        self.user_agent_rules = parse_stylesheet(user_agent_stylesheet, origin=ORIGIN_USER_AGENT)

    def collect_rules(self, root) -> List[StyleRule]:
        """Collects the author rules of every applicable <style> element below the tree root."""
        rules = list(self.user_agent_rules)
        style_elements = root.find_all("style") if hasattr(root, "find_all") else []
        if is_element(root) and root.name == "style":
            style_elements.insert(0, root)
        order = len(rules)
        for style in style_elements:
            media = (get_attribute(style, "media") or "").strip().lower()
            if media and media != "all" and "screen" not in media:
                continue
            css_type = (get_attribute(style, "type") or "text/css").strip().lower()
            if css_type not in ("", "text/css"):
                continue
            parsed = parse_stylesheet(style.get_text(), origin=ORIGIN_AUTHOR, start_order=order)
            order += len(parsed)
            rules.extend(parsed)
        return rules

    def get_computed_style(self, tag: Tag, pseudo: Optional[str] = None) -> ComputedStyle:
        """
        Computes the style of an element or of its ::before/::after pseudo element.
        An empty or unknown pseudo selector resolves the element itself.
        """
        pseudo_name = (pseudo or "").strip().lstrip(":").lower() or None
        if pseudo_name is not None and pseudo_name not in PSEUDO_ELEMENTS:
            logger.debug("Unsupported pseudo element %r, resolving the element itself.", pseudo)
            pseudo_name = None

        rules = self.collect_rules(tree_root(tag))
        chain = [tag] + [a for a in iter_ancestors(tag) if is_element(a)]

        parent_values: Dict[str, str] = {}
        for element in reversed(chain):
            specified = self._cascade(element, rules, None)
            parent_values = self._compute(specified, parent_values)

        if pseudo_name is not None:
            specified = self._cascade(tag, rules, pseudo_name)
            parent_values = self._compute(specified, parent_values)

        return ComputedStyle(parent_values)

    def _cascade(self, tag: Tag, rules: List[StyleRule], pseudo: Optional[str]) -> Dict[str, str]:
        candidates = []
        for rule in rules:
            if rule.pseudo != pseudo or not rule.matches(tag):
                continue
            for prop, value, important in rule.declarations:
                candidates.append(((important, rule.origin, rule.specificity, rule.order), prop, value))

        if pseudo is None:
            inline = get_attribute(tag, "style")
            if inline:
                for prop, value, important in parse_declarations(inline):
                    candidates.append(((important, ORIGIN_AUTHOR, INLINE_SPECIFICITY, 0), prop, value))

        specified: Dict[str, str] = {}
        for _, prop, value in sorted(candidates, key=lambda c: c[0]):
            specified[prop] = value
        return specified

    @staticmethod
    def _compute(specified: Dict[str, str], parent: Dict[str, str]) -> Dict[str, str]:
        computed: Dict[str, str] = {}
        for prop in INHERITED_PROPERTIES:
            if prop in parent:
                computed[prop] = parent[prop]
        for prop, value in INITIAL_VALUES.items():
            if prop not in computed:
                computed[prop] = value

        for prop, value in specified.items():
            keyword = value.lower()
            if keyword == "inherit" or (keyword == "unset" and prop in INHERITED_PROPERTIES):
                if prop in parent:
                    computed[prop] = parent[prop]
                else:
                    computed.pop(prop, None)
                    if prop in INITIAL_VALUES:
                        computed[prop] = INITIAL_VALUES[prop]
            elif keyword in ("initial", "unset"):
                computed.pop(prop, None)
                if prop in INITIAL_VALUES:
                    computed[prop] = INITIAL_VALUES[prop]
            else:
                computed[prop] = value
        return computed
