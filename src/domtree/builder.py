# src/domtree/builder.py
import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Doctype, PageElement, Tag

from domstate.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

HEAD_TAGS = ("base", "link", "meta", "noscript", "script", "style", "template", "title")


def _has_content(tag: Tag) -> bool:
    """True once an element holds a child element or non-whitespace text."""
    return any(isinstance(child, Tag) or str(child).strip() for child in tag.contents)


class DocumentBuilder:
    """
    Builder responsible for parsing raw HTML into BeautifulSoup documents shaped like
    the documents a browser would build: every document has an <html> root with a
    <head> and a <body>. It also produces the detached fragments and scratch nodes
    used for markup normalization.
    """

    def __init__(self, features: Optional[str] = None):
        """
        Args:
            features (Optional[str]): The bs4 tree builder to use. Defaults to 'parser.features'
                                      from the configuration ('html.parser').
        """
        self.features = features or config_manager.get_nested("parser.features", "html.parser")

    def parse_doc(self, html: str) -> BeautifulSoup:
        """
        Parses raw HTML content into a complete document.

        Args:
            html (str): The raw HTML string, either a full document or a fragment.

        Returns:
            BeautifulSoup: The document, with fragment content placed in <body>.
        """
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = (html or "").replace('\ufeff', '')
        soup = BeautifulSoup(clean_html, self.features)
        self._ensure_skeleton(soup)
        return soup

    def parse_fragment(self, html: str) -> List[PageElement]:
        """Parses markup in fragment mode and returns the top-level nodes, detached from any document."""
        fragment = BeautifulSoup(html or "", self.features)
        container = fragment
        # Tree builders such as lxml or html5lib always synthesize <html><body>
        if "<html" not in (html or "").lower() and fragment.body is not None:
            container = fragment.body
        return [node.extract() for node in list(container.contents)]

    def set_inner_html(self, tag: Tag, html: str) -> None:
        """Replaces the children of an element with the parsed markup."""
        tag.clear()
        for node in self.parse_fragment(html):
            tag.append(node)

    def create_scratch_element(self, document: Optional[BeautifulSoup], tag_name: str = "div") -> Tag:
        """
        Creates a detached element owned by the given document. Detached nodes without a
        document get a fresh, empty one.
        """
        owner = document if document is not None else BeautifulSoup("", self.features)
        return owner.new_tag(tag_name)

    def _ensure_skeleton(self, soup: BeautifulSoup) -> None:
        html_tag = soup.find("html")
        if html_tag is None:
            html_tag = soup.new_tag("html")
            for child in list(soup.contents):
                if isinstance(child, Doctype):
                    continue
                html_tag.append(child.extract())
            soup.append(html_tag)
            logger.debug("Wrapped fragment content in a synthesized <html> root.")

        head = html_tag.find("head", recursive=False)
        body = html_tag.find("body", recursive=False)
        if body is None:
            body = soup.new_tag("body")
            for child in list(html_tag.contents):
                if child is head:
                    continue
                if head is None and isinstance(child, Tag) and child.name in HEAD_TAGS and not _has_content(body):
                    continue
                body.append(child.extract())
            html_tag.append(body)
        if head is None:
            head = soup.new_tag("head")
            for child in list(html_tag.contents):
                if isinstance(child, Tag) and child.name in HEAD_TAGS:
                    head.append(child.extract())
                elif child is body:
                    break
            html_tag.insert(0, head)
