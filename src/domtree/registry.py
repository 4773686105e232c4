# src/domtree/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Callable, Any, Optional, Set

from bs4 import Tag

from .core import ControlBase, ElementDefinition

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for form control parsers and constraint validation rules.

    Dynamically discovers and loads ElementDefinition modules from the
    'domtree.elements' package to populate parsers, rules, and validity flags.
    """

    _parsers: Dict[str, Callable] = {}
    _validity_rules: List[Callable] = []
    _all_flags: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in the 'domtree.elements' package.

        This method scans the `domtree.elements` package for modules containing a
        `DEFINITION` attribute (instance of `ElementDefinition`). It registers parsers,
        validity rules, and collects all possible validity flags.
        """
        if cls._loaded:
            return

        try:
            # Import the elements package to iterate over its modules
            import domtree.elements as elements_pkg

            for _, name, _ in pkgutil.iter_modules(elements_pkg.__path__):
                full_name = f"domtree.elements.{name}"
                try:
                    module = importlib.import_module(full_name)
                    if hasattr(module, "DEFINITION") and isinstance(module.DEFINITION, ElementDefinition):
                        defn = module.DEFINITION

                        # Register parser for the specific tag
                        cls._parsers[defn.tag_name] = defn.parser

                        # Register all validity rules associated with this definition
                        for rule in defn.validity_rules:
                            cls._register_rule(defn.model, rule)

                        cls._all_flags.update(defn.flags)

                        logger.debug("Control definition loaded: %s", defn.tag_name)
                except ImportError as e:
                    logger.error("Error loading module %s: %s", name, e)

            cls._loaded = True
        except ImportError as e:
            logger.error("Could not find elements package: %s", e)

    @classmethod
    def _register_rule(cls, model_type: Any, rule_func: Callable) -> None:
        """
        Registers a single validity rule, wrapping it with a type check.

        Args:
            model_type: The control model class this rule applies to.
            rule_func: The function executing the check.
        """
        def wrapped(control: Any) -> List[str]:
            if isinstance(control, model_type):
                return rule_func(control)
            return []

        cls._validity_rules.append(wrapped)

    @classmethod
    def get_parser(cls, tag_name: str) -> Optional[Callable]:
        """Retrieves the parser function for a specific HTML tag."""
        cls.discover()
        return cls._parsers.get(tag_name)

    @classmethod
    def build_control(cls, tag: Tag) -> Optional[ControlBase]:
        """Builds the control snapshot of a tag, or None for tags without a registered parser."""
        parser = cls.get_parser(tag.name)
        return parser(tag) if parser else None

    @classmethod
    def get_all_rules(cls) -> List[Callable]:
        """Returns a list of all registered validity rule functions."""
        cls.discover()
        return cls._validity_rules

    @classmethod
    def get_all_possible_flags(cls) -> List[str]:
        """Returns a list of all unique validity flags registered in the system."""
        cls.discover()
        return sorted(list(cls._all_flags))
