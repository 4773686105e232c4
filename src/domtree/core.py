# src/domtree/core.py
from typing import Dict, Any, List, Callable, Type, Optional, Set
from pydantic import BaseModel, Field
from bs4 import Tag


def validity_spec(flags: List[str]):
    """
    Decorator to declare which ValidityState flags a specific constraint rule function returns.
    Facilitates auto-discovery by the DOMRegistry.
    """
    def decorator(func):
        func.defined_flags = flags
        return func
    return decorator


class ControlBase(BaseModel):
    """
    Base data model representing a snapshot of a form control's state,
    read from the live tree at the moment it is built.
    """
    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    name: str = ""
    disabled: bool = False

    @property
    def required(self) -> bool:
        """Returns True if the control carries a 'required' attribute."""
        return "required" in self.attrs


# Type alias for validity findings: the names of the ValidityState flags that are set
ValidityResult = List[str]


class ElementDefinition:
    """
    Configuration object binding an HTML tag to its control model, parser, and constraint rules.
    """

    def __init__(
            self,
            tag_name: str,
            model: Type[ControlBase],
            parser: Callable[[Tag], ControlBase],
            validity_rules: Optional[List[Callable[[Any], ValidityResult]]] = None
    ):
        self.tag_name = tag_name
        self.model = model
        self.parser = parser
        self.validity_rules = validity_rules or []

        # --- Auto-Discovery of Validity Flags ---
        final_flags: Set[str] = set()

        for rule in self.validity_rules:
            if hasattr(rule, 'defined_flags'):
                final_flags.update(rule.defined_flags)

        self.flags = sorted(list(final_flags))
