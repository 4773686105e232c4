# src/domstate/core/predicate_registry.py
import logging
from typing import Any, Callable, Dict, Optional

from domstate.core.discovery import discover_predicates

logger = logging.getLogger(__name__)

# The central registries, populated dynamically.
PredicateRegistry: Dict[str, Callable[..., bool]] = {}
PREDICATE_HELP_TEXTS: Dict[str, str] = {}


def predicate_spec(name: str, help_text: Optional[str] = None):
    """
    Decorator marking a function as a public predicate under the given name.
    Facilitates auto-discovery by register_all_predicates(); the help text defaults
    to the first line of the function's docstring.
    """
    def decorator(func):
        func.predicate_name = name
        func.predicate_help = help_text or (func.__doc__ or "").strip().split("\n")[0]
        return func
    return decorator


def register_predicate(name: str, func: Callable[..., bool], help_text: str = "") -> None:
    """Adds a predicate and its help text to the registry."""
    PredicateRegistry[name] = func
    PREDICATE_HELP_TEXTS[name] = help_text
    logger.debug("Registered predicate '%s'", name)


def register_all_predicates() -> None:
    """
    Discovers all predicate modules and registers every function marked with @predicate_spec.
    """
    logger.debug("Discovering all predicates...")

    for name, func in discover_predicates().items():
        if name not in PredicateRegistry:
            register_predicate(name, func, getattr(func, "predicate_help", ""))

    logger.debug("Successfully registered %d predicates.", len(PredicateRegistry))


def get_predicate(name: str) -> Optional[Callable[..., Any]]:
    """Looks up a registered predicate, accepting camelCase names as well ('isVisible')."""
    if not PredicateRegistry:
        register_all_predicates()
    if name in PredicateRegistry:
        return PredicateRegistry[name]
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in name).lstrip("_")
    return PredicateRegistry.get(snake)
