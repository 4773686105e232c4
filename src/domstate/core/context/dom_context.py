# src/domstate/core/context/dom_context.py
import logging
from typing import Optional, TYPE_CHECKING

from bs4 import BeautifulSoup, Tag

from domstate.core.managers.config_manager import config_manager
from domstate.services.accessible_name_service import AccessibleNameService
from domtree.styles import StyleResolver
from domtree.tree import body_element, contains, is_element, owner_document

# Prevent circular imports during runtime, but retain type hinting for static analysis
if TYPE_CHECKING:
    from domstate.services.accessible_name_service import AccessibilityProvider

logger = logging.getLogger(__name__)


class DomContext:
    """
    Holds the collaborators a predicate evaluation depends on: the document root,
    the accessible name provider, the style resolver and the focus state.
    Predicates called without a context build a default one from the node's owner document.
    """

    def __init__(
            self,
            document: Optional[BeautifulSoup] = None,
            accessibility: Optional['AccessibilityProvider'] = None,
            styles: Optional[StyleResolver] = None
    ):
        self.document = document
        self.accessibility = accessibility or AccessibleNameService()
        self.styles = styles or StyleResolver()
        self.min_name_length = int(config_manager.get_nested("accessibility.min_name_length", 3))
        self._focused: Optional[Tag] = None

    @classmethod
    def for_node(cls, node) -> "DomContext":
        """Builds the default context for a node: its owner document and the default providers."""
        return cls(document=owner_document(node) if is_element(node) else None)

    def resolve_document(self, node) -> Optional[BeautifulSoup]:
        """Returns the explicit document of the context, or else the node's owner document."""
        if self.document is not None:
            return self.document
        return owner_document(node) if is_element(node) else None

    def focus(self, node: Tag) -> bool:
        """
        Moves focus to an element of the context document. Returns False, leaving
        focus unchanged, for nodes outside that document.
        """
        if not is_element(node):
            return False
        document = self.resolve_document(node)
        if document is None or not contains(document, node):
            logger.debug("Ignoring focus() on <%s>: not attached to the context document.", node.name)
            return False
        self.document = document
        self._focused = node
        return True

    def blur(self) -> None:
        self._focused = None

    @property
    def active_element(self) -> Optional[Tag]:
        """
        The focused element: the last element passed to focus() while it stays attached,
        else the first [autofocus] element, else <body>.
        """
        document = self.document
        if document is None:
            return None
        if self._focused is not None and contains(document, self._focused):
            return self._focused
        autofocus = document.find(attrs={"autofocus": True})
        if autofocus is not None:
            return autofocus
        return body_element(document)

    def __repr__(self) -> str:
        focused = self._focused.name if self._focused is not None else "None"
        return f"<DomContext document={'set' if self.document is not None else 'None'} focused={focused}>"
